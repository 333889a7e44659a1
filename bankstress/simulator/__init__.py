"""
simulator package
=================

Public interface
----------------
`run_stress_test`
    Alias to :func:`simulator.engine.run`.  Runs a *single* shock scenario
    against a network snapshot and returns a :class:`SimulationResult`.

Example
-------
>>> from bankstress.simulator import run_stress_test
>>> result = run_stress_test(snapshot, "targeted:0", rng=7)

Nothing else is re‑exported; internal helpers stay encapsulated.
"""

from __future__ import annotations

from .engine import run as run_stress_test  # noqa: F401

__all__: list[str] = ["run_stress_test"]
