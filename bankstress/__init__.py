"""
bankstress
==========

Financial‑contagion stress tester for random interbank networks.

The two host‑facing operations are re‑exported here:

>>> import bankstress as bs
>>> snapshot = bs.generate(bs.GeneratorConfig(bank_count=20), rng=42)
>>> result = bs.run_stress_test(snapshot, bs.TargetedShock(3), rng=42)
>>> result.contagion_index                      # doctest: +SKIP
"""

from __future__ import annotations

from .algorithms.generation import generate
from .config import GeneratorConfig, StressConfig
from .datamodel import Bank, NetworkSnapshot, SimulationResult, StressLevel
from .errors import BankstressError, ConfigurationError, InvariantViolation, SchemaError
from .shocks import IdiosyncraticShock, MacroShock, TargetedShock
from .simulator import run_stress_test

__version__ = "0.1.0"

__all__ = [
    "generate",
    "run_stress_test",
    "GeneratorConfig",
    "StressConfig",
    "Bank",
    "NetworkSnapshot",
    "SimulationResult",
    "StressLevel",
    "MacroShock",
    "TargetedShock",
    "IdiosyncraticShock",
    "BankstressError",
    "ConfigurationError",
    "InvariantViolation",
    "SchemaError",
]
