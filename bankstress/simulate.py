"""
simulate.py
===========

Single public entry‑point for running one YAML‑described scenario: generate a
network, shock it once, report the outcome.  Designed for both programmatic
use

    >>> import bankstress.simulate as sim
    >>> row = sim.run("config.yaml")

and CLI use (see :pymod:`bankstress.cli`)

    $ bankstress run config.yaml

:func:`run` returns a **pd.Series** summary row (aggregates plus graph‑level
statistics of the generated network); :func:`run_scenario` returns the full
snapshot and result for callers that need per‑bank detail.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Tuple

import numpy as np
import pandas as pd

from .algorithms import metrics
from .algorithms.generation import generate
from .config import Scenario, load_scenario
from .datamodel import NetworkSnapshot, SimulationResult
from .network import to_graph
from .simulator import run_stress_test

logger = logging.getLogger(__name__)


# --------------------------------------------------------------------------- #
# Helper utilities
# --------------------------------------------------------------------------- #
def summarize(result: SimulationResult) -> Dict[str, Any]:
    """Aggregate figures of *result* as a flat, CSV‑friendly dict."""
    return {
        "shock": result.shock.kind,
        "target_bank_id": getattr(result.shock, "bank_id", None),
        "bank_count": result.snapshot.bank_count,
        "total_initial_capital": result.snapshot.total_initial_capital,
        "total_failures": result.total_failures,
        "total_loss": result.total_loss,
        "contagion_index": result.contagion_index,
        "iterations": result.iterations,
        "converged": result.converged,
    }


# --------------------------------------------------------------------------- #
# Public API
# --------------------------------------------------------------------------- #
def run_scenario(scenario: Scenario) -> Tuple[NetworkSnapshot, SimulationResult]:
    """
    Generate the scenario's network and run its shock once.

    A single ``np.random.default_rng(scenario.seed)`` feeds both the generator
    and the engine, so a seeded scenario replays exactly.
    """
    rng = np.random.default_rng(scenario.seed)
    snapshot = generate(scenario.network, rng)
    result = run_stress_test(snapshot, scenario.shock, rng, scenario.stress)
    return snapshot, result


def run(config_path: str | Path) -> pd.Series:
    """
    Execute **one** scenario described by a YAML file.

    Parameters
    ----------
    config_path
        Path to a YAML file with optional ``network``, ``stress``, ``shock``
        and ``seed`` keys (see :pymod:`bankstress.config`).

    Returns
    -------
    pandas.Series
        Summary row: the keys of :func:`summarize`, the seed, and the keys of
        :func:`algorithms.metrics.graph_stats`.
    """
    scenario = load_scenario(config_path)
    snapshot, result = run_scenario(scenario)

    row: Dict[str, Any] = summarize(result)
    row["seed"] = scenario.seed
    row.update(metrics.graph_stats(to_graph(snapshot)))

    logger.debug("Scenario %s finished: %s", config_path, row)
    return pd.Series(row)
