"""
algorithms.generation
~~~~~~~~~~~~~~~~~~~~~
Random interbank network generator.

Key API
-------
generate(config: GeneratorConfig | None = None,
         rng: RandomSource | int | None = None) -> NetworkSnapshot

Algorithm
---------
1. Balance sheets: ``A ~ U[assets_range]``, ``ratio ~ U[capital_ratio_range]``,
   ``E0 = A · ratio`` and ``L = A − E0``.
2. Interbank liabilities: ``L_ib = L · U[interbank_fraction_range]``.
3. Each debtor picks ``k ~ U{creditor_count_range}`` distinct creditors among
   the *other* banks (without replacement).
4. ``L_ib`` is handed out sequentially; each creditor gets
   ``L_ib · U[share_range]``, clamped so the running total never exceeds
   ``L_ib``.  Whatever the draws leave over stays unassigned: row sums may be
   *below* ``L_ib``, never above.
5. ``A_ib`` is the column sum of the exposure matrix, ``A_ext = A − A_ib``.

Notes
-----
* Configuration is validated before the first random draw.
* The loop over debtors is Python‑level on purpose: draws happen in a fixed
  per‑debtor order so a seeded generator replays the same network.
"""
from __future__ import annotations

import logging
from typing import Optional, Union, TYPE_CHECKING

import numpy as np

from ..config import GeneratorConfig
from ..datamodel import Array, NetworkSnapshot
from ..errors import InvariantViolation
from ..simulator.protocols import ensure_rng

if TYPE_CHECKING:  # pragma: no cover
    from ..simulator.protocols import RandomSource

__all__ = ["generate", "check_invariants"]

logger = logging.getLogger(__name__)

_TOL = 1e-9


def _assign_names(pool, n: int, rng: "RandomSource") -> tuple[str, ...]:
    """Shuffle the first *n* pool names; banks beyond the pool get ``Bank <id+1>``."""
    shuffled = [str(name) for name in rng.permutation(np.asarray(pool[:n], dtype=object))]
    return tuple(shuffled[i] if i < len(shuffled) else f"Bank {i + 1}" for i in range(n))


def _fill_debtor_row(
    adj: Array,
    debtor: int,
    total_ibl: float,
    cfg: GeneratorConfig,
    rng: "RandomSource",
) -> None:
    """Distribute one debtor's interbank liabilities over random creditors."""
    n = adj.shape[0]
    k_lo, k_hi = cfg.creditor_count_range
    k = min(int(rng.integers(k_lo, k_hi + 1)), n - 1)

    others = np.delete(np.arange(n), debtor)
    creditors = rng.choice(others, size=k, replace=False)

    share_lo, share_hi = cfg.share_range
    assigned = 0.0
    for creditor in creditors:
        share = total_ibl * float(rng.uniform(share_lo, share_hi))
        share = min(share, total_ibl - assigned)
        if share > 0.0:
            adj[debtor, int(creditor)] = share
            assigned += share


def check_invariants(snapshot: NetworkSnapshot) -> None:
    """
    Raise :class:`InvariantViolation` if *snapshot* breaks a balance‑sheet
    invariant.  Values are never clamped: a failure here means a generator bug.
    """
    if np.any(snapshot.total_assets <= 0.0):
        raise InvariantViolation("Generated bank with non‑positive total assets")
    if np.any(snapshot.initial_capital <= 0.0):
        raise InvariantViolation("Generated bank with non‑positive initial capital")
    if np.any(snapshot.adj < 0.0):
        raise InvariantViolation("Exposure matrix contains negative entries")
    if np.any(np.diag(snapshot.adj) != 0.0):
        raise InvariantViolation("Exposure matrix has self‑lending on its diagonal")
    row_sums = snapshot.adj.sum(axis=1)
    if np.any(row_sums > snapshot.interbank_liabilities * (1 + _TOL) + _TOL):
        raise InvariantViolation("A debtor owes more than its interbank liabilities")


def generate(
    config: Optional[GeneratorConfig] = None,
    rng: Union["RandomSource", int, None] = None,
) -> NetworkSnapshot:
    """
    Build a random interbank network.

    Parameters
    ----------
    config
        Generator parameters; defaults to :class:`GeneratorConfig()`.
    rng
        Randomness provider or integer seed (see
        :func:`simulator.protocols.ensure_rng`).

    Returns
    -------
    NetworkSnapshot
        Immutable snapshot; ``total_initial_capital`` equals ``Σ E0``.

    Raises
    ------
    ConfigurationError
        Invalid configuration (raised before any draw).
    InvariantViolation
        The generated balance sheets violate an invariant.
    """
    cfg = config or GeneratorConfig()
    cfg.validate()
    rng = ensure_rng(rng)
    n = cfg.bank_count

    names = _assign_names(cfg.name_pool, n, rng)

    # 1. Balance sheets
    total_assets = np.empty(n)
    initial_capital = np.empty(n)
    for i in range(n):
        total_assets[i] = rng.uniform(*cfg.assets_range)
        initial_capital[i] = total_assets[i] * rng.uniform(*cfg.capital_ratio_range)
    liabilities = total_assets - initial_capital

    # 2–4. Interbank liabilities and exposure matrix
    adj = np.zeros((n, n), dtype=float)
    interbank_liabilities = np.empty(n)
    for debtor in range(n):
        interbank_liabilities[debtor] = liabilities[debtor] * rng.uniform(
            *cfg.interbank_fraction_range
        )
        _fill_debtor_row(adj, debtor, float(interbank_liabilities[debtor]), cfg, rng)

    # 5. Interbank claims (column sums) and external assets
    interbank_assets = adj.sum(axis=0)
    external_assets = total_assets - interbank_assets

    snapshot = NetworkSnapshot(
        names=names,
        total_assets=total_assets,
        initial_capital=initial_capital,
        liabilities=liabilities,
        interbank_liabilities=interbank_liabilities,
        interbank_assets=interbank_assets,
        external_assets=external_assets,
        adj=adj,
        total_initial_capital=float(initial_capital.sum()),
    )
    check_invariants(snapshot)

    logger.debug(
        "Generated %d banks, %d exposures, total capital %.2f",
        n, int(np.count_nonzero(adj)), snapshot.total_initial_capital,
    )
    return snapshot
