"""
simulator.engine
================

Single–scenario driver for the interbank stress test.

The public API is the :func:`run` function, which orchestrates:

1. Validation of the engine parameters and the shock.
2. Phase 1 – initial shock on a fresh working copy of capital
   (:pymod:`algorithms.initial_shock`).
3. Phase 2 – DebtRank propagation to a fixed point or the iteration cap
   (:pymod:`algorithms.debtrank`).
4. Loss aggregates (:pymod:`algorithms.metrics`).
5. Packaging of everything into an immutable :class:`SimulationResult`.

The function performs *no* I/O and never mutates the snapshot; given the
same randomness provider state it is deterministic.
"""
from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union, TYPE_CHECKING

import numpy as np

from ..algorithms import debtrank
from ..algorithms import initial_shock
from ..algorithms import metrics
from ..config import StressConfig
from ..datamodel import Array, NetworkSnapshot, SimulationResult
from ..shocks import Shock, parse as parse_shock
from .protocols import ensure_rng

if TYPE_CHECKING:  # pragma: no cover
    from .protocols import RandomSource

__all__ = ["run"]

_LOGGER = logging.getLogger(__name__)


# --------------------------------------------------------------------------- #
# Helper utilities
# --------------------------------------------------------------------------- #
def _readonly(arr: Array) -> Array:
    out = np.array(arr)
    out.setflags(write=False)
    return out


# --------------------------------------------------------------------------- #
# Public API
# --------------------------------------------------------------------------- #
def run(
    snapshot: NetworkSnapshot,
    shock: Union[Shock, str, Mapping[str, Any]],
    rng: Union["RandomSource", int, None] = None,
    config: Optional[StressConfig] = None,
) -> SimulationResult:
    """
    Execute **one** stress test against *snapshot*.

    Parameters
    ----------
    snapshot
        Network produced by :func:`algorithms.generation.generate` (or loaded
        through :func:`io_utils.load_snapshot`).  Read only.
    shock
        A shock value, or any form accepted by :func:`shocks.parse`
        (``"macro"``, ``"targeted:3"``, ``{"kind": "idiosyncratic"}`` …).
    rng
        Randomness provider or integer seed; only idiosyncratic shocks draw
        from it.
    config
        Engine parameters; defaults to :class:`StressConfig()`.

    Returns
    -------
    SimulationResult
        Fresh result; never merged with earlier runs.  ``converged`` is
        ``False`` when the iteration cap was hit.

    Raises
    ------
    ConfigurationError
        Invalid engine parameters, unparsable shock or unknown target bank.
    """
    cfg = config or StressConfig()
    cfg.validate()
    shock = parse_shock(shock)
    rng = ensure_rng(rng)

    # --------------------------------------------------------------------- #
    # 1. Phase 1 – initial shock
    # --------------------------------------------------------------------- #
    phase_one = initial_shock.apply(snapshot, shock, rng, cfg)

    # --------------------------------------------------------------------- #
    # 2. Phase 2 – DebtRank propagation
    # --------------------------------------------------------------------- #
    outcome = debtrank.propagate(
        snapshot.adj,
        snapshot.interbank_liabilities,
        snapshot.initial_capital,
        phase_one.debt_rank,
        tolerance=cfg.tolerance,
        max_iterations=cfg.max_iterations,
        stress_threshold=cfg.propagation_stress_threshold,
        failure_threshold=cfg.failure_threshold,
    )

    # --------------------------------------------------------------------- #
    # 3. Aggregates
    # --------------------------------------------------------------------- #
    loss = metrics.total_loss(snapshot.initial_capital, outcome.capital)
    index = metrics.contagion_index(loss, snapshot.total_initial_capital)

    result = SimulationResult(
        snapshot=snapshot,
        shock=shock,
        capital=_readonly(outcome.capital),
        debt_rank=_readonly(outcome.debt_rank),
        stress_level=_readonly(outcome.stress_level),
        failed=_readonly(outcome.failed),
        initial_ranks=_readonly(phase_one.debt_rank),
        iterations=outcome.iterations,
        converged=outcome.converged,
        total_loss=loss,
        contagion_index=index,
        history=tuple(_readonly(h) for h in outcome.history),
    )

    _LOGGER.info(
        "%s: %d/%d failed, contagion index %.2f%% after %d pass(es)%s",
        shock.describe(), result.total_failures, snapshot.bank_count,
        index, outcome.iterations, "" if outcome.converged else " (not converged)",
    )
    return result
