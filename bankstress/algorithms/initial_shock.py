"""
algorithms.initial_shock
------------------------

Phase 1 of a stress test: apply the initial shock to every bank's capital and
derive the starting DebtRank vector h⁰.

Shock rules
-----------
* :class:`MacroShock` – ``E −= A_ext · macro_loss_factor`` for every bank.
* :class:`TargetedShock` – the designated bank's capital is set to the
  sentinel ``-1`` (guaranteed failure); all other banks are untouched.
* :class:`IdiosyncraticShock` – each bank is hit independently with
  probability ``idiosyncratic_probability``; a hit costs
  ``E0 · idiosyncratic_loss``.

Classification after the shock
------------------------------
``E ≤ 0``  ⇒ FAILED and ``h = 1``; otherwise ``h = clip(1 − E/E0, 0, 1)``,
STRESSED when ``h ≥ shock_stress_threshold`` and HEALTHY below it.

The snapshot is never modified; capital starts from ``E0`` on every call.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence, TYPE_CHECKING

import numpy as np

from ..config import StressConfig
from ..datamodel import Array, NetworkSnapshot, StressLevel
from ..errors import ConfigurationError
from ..shocks import IdiosyncraticShock, MacroShock, Shock, TargetedShock

if TYPE_CHECKING:  # pragma: no cover
    from ..simulator.protocols import RandomSource

__all__: Sequence[str] = ("ShockState", "capital_after_shock", "classify", "apply")

logger = logging.getLogger(__name__)

TARGETED_SENTINEL = -1.0


@dataclass(frozen=True)
class ShockState:
    """Per‑bank state at the end of Phase 1."""

    capital: Array
    debt_rank: Array
    stress_level: Array
    failed: Array


# -----------------------------------------------------------------------------


def capital_after_shock(
    snapshot: NetworkSnapshot,
    shock: Shock,
    rng: "RandomSource",
    cfg: StressConfig,
) -> Array:
    """
    Capital vector after the shock, before any classification.

    Negative values are kept as‑is; flooring is a presentation concern.
    """
    capital = np.array(snapshot.initial_capital, dtype=float)  # working copy

    if isinstance(shock, MacroShock):
        capital -= snapshot.external_assets * cfg.macro_loss_factor
    elif isinstance(shock, TargetedShock):
        if not 0 <= shock.bank_id < snapshot.bank_count:
            raise ConfigurationError(
                f"Targeted bank id {shock.bank_id} outside 0..{snapshot.bank_count - 1}"
            )
        capital[shock.bank_id] = TARGETED_SENTINEL
    elif isinstance(shock, IdiosyncraticShock):
        hit = np.asarray(rng.random(snapshot.bank_count)) < cfg.idiosyncratic_probability
        capital[hit] -= snapshot.initial_capital[hit] * cfg.idiosyncratic_loss
        logger.debug("Idiosyncratic shock hit %d bank(s)", int(hit.sum()))
    else:
        raise ConfigurationError(f"Unsupported shock type {type(shock).__name__}")

    return capital


def classify(capital: Array, initial_capital: Array, stress_threshold: float) -> ShockState:
    """Turn a post‑shock capital vector into the Phase 1 state and h⁰."""
    failed = capital <= 0.0
    with np.errstate(divide="ignore", invalid="ignore"):
        ranks = np.clip(1.0 - capital / initial_capital, 0.0, 1.0)
    ranks = np.where(failed, 1.0, ranks)

    stress = np.full(capital.shape, StressLevel.HEALTHY, dtype=np.int8)
    stress[ranks >= stress_threshold] = StressLevel.STRESSED
    stress[failed] = StressLevel.FAILED

    return ShockState(capital=capital, debt_rank=ranks, stress_level=stress, failed=failed)


def apply(
    snapshot: NetworkSnapshot,
    shock: Shock,
    rng: "RandomSource",
    cfg: StressConfig,
) -> ShockState:  # noqa: D401
    """
    Apply *shock* to *snapshot* and return the Phase 1 state.

    Parameters
    ----------
    snapshot
        Generated network; read only.
    shock
        One of the shock value types from :pymod:`bankstress.shocks`.
    rng
        Randomness provider (only consumed by idiosyncratic shocks).
    cfg
        Engine parameters (loss factors and the Phase 1 stress threshold).

    Raises
    ------
    ConfigurationError
        Targeted bank id outside the network.
    """
    capital = capital_after_shock(snapshot, shock, rng, cfg)
    state = classify(capital, snapshot.initial_capital, cfg.shock_stress_threshold)
    logger.debug(
        "Phase 1 (%s): %d failed, %d stressed",
        shock.kind,
        int(state.failed.sum()),
        int(np.count_nonzero(state.stress_level == StressLevel.STRESSED)),
    )
    return state
