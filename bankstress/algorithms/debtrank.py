"""
algorithms.debtrank
~~~~~~~~~~~~~~~~~~~
Iterative DebtRank propagation (Phase 2 of a stress test).

Distress travels from debtors to their creditors: when debtor *i*'s rank
rises by Δhᵢ, creditor *j* absorbs the share ``adj[i, j] / L_ib[i]`` of that
increase, scaled by its remaining headroom ``1 − h_j``.

Key API
-------
python def propagate(adj, interbank_liabilities, initial_capital,
                     initial_ranks, *, baseline=None, tolerance=1e-4,
                     max_iterations=100, ...) -> DebtRankOutcome

Pass structure
--------------
For every pass::

    current   = h                        # ranks at pass start
    Δ         = current − previous
    p_j       = Σ_i W[i, j] · Δ_i        W[i, j] = adj[i, j] / L_ib[i]
    h_j      ← clip(h_j + (1 − h_j) · p_j, h_j, 1)     for h_j < 1
    E        = E0 · (1 − h)              then re‑classify
    previous ← current

On the first pass ``previous`` is *baseline* (the pre‑shock ranks, zeros by
default), so the Phase 1 distress h⁰ is what starts the cascade.  Feeding a
converged vector back with ``baseline`` equal to it propagates nothing.

Terminates when the largest per‑bank update of a pass is below *tolerance*
or after *max_iterations* passes.  Hitting the cap is not an error: the
outcome is returned with ``converged=False`` and a warning is logged.

References
----------
Battiston, S., Puliga, M., Kaushik, R. *et al.*
"DebtRank: Too Central to Fail? Financial Networks, the FED
and Systemic Risk." *Sci. Rep.* **2**, 541 (2012).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Final, Optional, Tuple

import numpy as np

from ..datamodel import Array, StressLevel

__all__: Final[list[str]] = ["DebtRankOutcome", "weight_matrix", "reassess", "propagate"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DebtRankOutcome:
    capital: Array
    debt_rank: Array
    stress_level: Array
    failed: Array
    iterations: int
    converged: bool
    history: Tuple[Array, ...]


def _validate_inputs(adj: Array, interbank_liabilities: Array,
                     initial_capital: Array, initial_ranks: Array) -> None:
    """Lightweight, fail‑fast validation (no heavy imports)."""
    if adj.ndim != 2 or adj.shape[0] != adj.shape[1]:
        raise ValueError("`adj` must be a square 2‑D array.")
    n = adj.shape[0]
    for name, vec in (("interbank_liabilities", interbank_liabilities),
                      ("initial_capital", initial_capital),
                      ("initial_ranks", initial_ranks)):
        if vec.shape != (n,):
            raise ValueError(f"`{name}` must be 1‑D with length {n}.")
    if not np.isfinite(adj).all():
        raise ValueError("`adj` must contain finite values only.")
    if np.any(initial_capital <= 0.0):
        raise ValueError("`initial_capital` must be positive.")


def weight_matrix(adj: Array, interbank_liabilities: Array) -> Array:
    """
    ``W[i, j] = adj[i, j] / L_ib[i]``.

    Debtors with zero interbank liabilities get an all‑zero row instead of
    inf/NaN, so they never propagate.
    """
    row_total = interbank_liabilities[:, None]
    with np.errstate(divide="ignore", invalid="ignore"):
        return np.where((adj > 0.0) & (row_total > 0.0), adj / row_total, 0.0)


def reassess(
    ranks: Array,
    initial_capital: Array,
    stress_threshold: float,
    failure_threshold: float,
) -> Tuple[Array, Array, Array, Array]:
    """
    Capital and status implied by *ranks*.

    Returns ``(ranks, capital, stress_level, failed)``; failed banks are
    snapped to rank 1 and capital 0.
    """
    capital = initial_capital * (1.0 - ranks)
    failed = (capital <= 0.0) | (ranks >= failure_threshold)
    ranks = np.where(failed, 1.0, ranks)
    capital = np.where(failed, 0.0, capital)

    stress = np.full(ranks.shape, StressLevel.HEALTHY, dtype=np.int8)
    stress[ranks > stress_threshold] = StressLevel.STRESSED
    stress[failed] = StressLevel.FAILED
    return ranks, capital, stress, failed


def propagate(
    adj: Array,
    interbank_liabilities: Array,
    initial_capital: Array,
    initial_ranks: Array,
    *,
    baseline: Optional[Array] = None,
    tolerance: float = 1e-4,
    max_iterations: int = 100,
    stress_threshold: float = 0.4,
    failure_threshold: float = 0.9999,
) -> DebtRankOutcome:
    """
    Run DebtRank passes from *initial_ranks* until convergence or the cap.

    Parameters
    ----------
    adj
        Exposure matrix, ``adj[i, j]`` = amount debtor *i* owes creditor *j*.
    interbank_liabilities
        ``L_ib`` per debtor (denominator of the propagation weights).
    initial_capital
        ``E0`` per bank; capital is recomputed as ``E0 · (1 − h)``.
    initial_ranks
        Starting vector h⁰ (Phase 1 output).
    baseline
        Ranks the first pass measures distress increases against; zeros when
        omitted.
    tolerance, max_iterations
        Convergence threshold on the largest per‑bank update, and pass cap.
    stress_threshold, failure_threshold
        Re‑classification cut‑offs applied after each pass.

    Returns
    -------
    DebtRankOutcome
        Final state, pass count, convergence flag and the rank vector after
        each pass.  Ranks never decrease from one pass to the next.
    """
    adj = np.asarray(adj, dtype=float)
    interbank_liabilities = np.asarray(interbank_liabilities, dtype=float)
    initial_capital = np.asarray(initial_capital, dtype=float)
    ranks = np.array(initial_ranks, dtype=float)
    _validate_inputs(adj, interbank_liabilities, initial_capital, ranks)
    if max_iterations < 1:
        raise ValueError("`max_iterations` must be at least 1.")

    previous = np.zeros_like(ranks) if baseline is None else np.array(baseline, dtype=float)
    W = weight_matrix(adj, interbank_liabilities)

    history: list[Array] = []
    converged = False
    iterations = 0
    capital = stress = failed = None

    while not converged and iterations < max_iterations:
        iterations += 1
        current = ranks.copy()

        propagated = W.T @ (current - previous)
        active = ranks < 1.0
        updated = np.clip(ranks + (1.0 - ranks) * propagated, ranks, 1.0)
        new_ranks = np.where(active, updated, ranks)

        new_ranks, capital, stress, failed = reassess(
            new_ranks, initial_capital, stress_threshold, failure_threshold
        )
        # includes any failure snap to rank 1
        largest_change = float(np.max(np.abs(new_ranks - ranks), initial=0.0))
        if largest_change < tolerance:
            converged = True
        ranks = new_ranks
        previous = current
        history.append(ranks.copy())
        logger.debug("DebtRank pass %d: largest update %.3g", iterations, largest_change)

    if not converged:
        logger.warning(
            "DebtRank did not converge after %d iterations (tolerance %g); "
            "returning approximate ranks.", iterations, tolerance,
        )

    return DebtRankOutcome(
        capital=capital,
        debt_rank=ranks,
        stress_level=stress,
        failed=failed,
        iterations=iterations,
        converged=converged,
        history=tuple(history),
    )
