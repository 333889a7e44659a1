"""
bankstress.datamodel
====================

• Central **type–contract hub** for the bankstress code‑base.
• Declares the immutable value types exchanged between the generator, the
  contagion engine and the presentation layer (:class:`NetworkSnapshot`,
  :class:`SimulationResult`, :class:`Bank`).
• Declares Pandera schemas for the tabular views of those values and for the
  CSV files written by :pymod:`bankstress.io_utils`.

Nothing in here performs I/O or numerical work; aggregates such as total loss
are computed by the engine and merely stored on the result.
"""

from __future__ import annotations

# --------------------------------------------------------------------------- #
# Universal type alias
# --------------------------------------------------------------------------- #
import numpy as np

Array = np.ndarray           # <-- tool‑friendly shorthand used everywhere

# --------------------------------------------------------------------------- #
# Enumerations
# --------------------------------------------------------------------------- #
from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Tuple


class StressLevel(IntEnum):
    """Tri‑state classification; integer codes are stored in result arrays."""

    HEALTHY = 0
    STRESSED = 1
    FAILED = 2


# --------------------------------------------------------------------------- #
# Data‑frame schemas (Pandera)
# --------------------------------------------------------------------------- #
import pandas as pd
import pandera as pa
from pandera import Column, DataFrameSchema, Check

from .algorithms.metrics import connection_counts
from .errors import SchemaError
from .shocks import Shock


BANKS_SCHEMA = DataFrameSchema(
    {
        "bank_id": Column(int, Check.greater_than_or_equal_to(0), unique=True),
        "name": Column(str),
        "total_assets": Column(float, Check.greater_than(0)),
        "initial_capital": Column(float, Check.greater_than(0)),
        "liabilities": Column(float, Check.greater_than_or_equal_to(0)),
        "interbank_liabilities": Column(float, Check.greater_than_or_equal_to(0)),
        "interbank_assets": Column(float, Check.greater_than_or_equal_to(0)),
        "external_assets": Column(float),
    },
    strict=True,
    coerce=True,
)

EXPOSURES_SCHEMA = DataFrameSchema(
    {
        "debtor_id": Column(int, Check.greater_than_or_equal_to(0)),
        "creditor_id": Column(int, Check.greater_than_or_equal_to(0)),
        "amount": Column(float, Check.greater_than(0)),
    },
    checks=Check(
        lambda df: df["debtor_id"] != df["creditor_id"],
        error="self‑lending exposure (debtor_id == creditor_id)",
    ),
    strict=True,
    coerce=True,
)

RESULTS_SCHEMA = DataFrameSchema(
    {
        "bank_id": Column(int, Check.greater_than_or_equal_to(0), unique=True),
        "name": Column(str),
        "initial_capital": Column(float, Check.greater_than(0)),
        "capital": Column(float),
        "debt_rank": Column(float, Check.in_range(0, 1)),
        "stress_level": Column(str, Check.isin([s.name for s in StressLevel])),
        "is_failed": Column(bool),
        "in_connections": Column(int, Check.greater_than_or_equal_to(0)),
        "out_connections": Column(int, Check.greater_than_or_equal_to(0)),
    },
    strict=True,
    coerce=True,
)


def validate_frame(df: pd.DataFrame, schema: DataFrameSchema, label: str) -> pd.DataFrame:
    """Validate *df* against *schema*, re‑raising as :class:`SchemaError`."""
    try:
        return schema.validate(df, lazy=True)
    except (pa.errors.SchemaError, pa.errors.SchemaErrors) as err:
        raise SchemaError(f"{label} failed schema validation") from err


# --------------------------------------------------------------------------- #
# Value types
# --------------------------------------------------------------------------- #
def _frozen(values) -> Array:
    arr = np.array(values, dtype=float)
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True)
class Bank:
    """Row view of one bank, either as generated or after a stress test."""

    id: int
    name: str
    total_assets: float
    initial_capital: float
    current_capital: float
    liabilities: float
    interbank_liabilities: float
    interbank_assets: float
    external_assets: float
    is_failed: bool = False
    stress_level: StressLevel = StressLevel.HEALTHY
    debt_rank: float = 0.0


@dataclass(frozen=True, eq=False)
class NetworkSnapshot:
    """
    Immutable generated network.

    Per‑bank quantities are parallel float arrays indexed by bank id; ``adj``
    is the dense exposure matrix with ``adj[i, j]`` = amount debtor *i* owes
    creditor *j*.  All arrays are copied and flagged read‑only on
    construction.
    """

    names: Tuple[str, ...]
    total_assets: Array
    initial_capital: Array
    liabilities: Array
    interbank_liabilities: Array
    interbank_assets: Array
    external_assets: Array
    adj: Array
    total_initial_capital: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "names", tuple(self.names))
        for name in ("total_assets", "initial_capital", "liabilities",
                     "interbank_liabilities", "interbank_assets",
                     "external_assets", "adj"):
            object.__setattr__(self, name, _frozen(getattr(self, name)))
        object.__setattr__(self, "total_initial_capital", float(self.total_initial_capital))

        n = len(self.names)
        if self.adj.shape != (n, n):
            raise ValueError(f"adj must have shape ({n}, {n}); got {self.adj.shape}")

    @property
    def bank_count(self) -> int:
        return len(self.names)

    def bank(self, bank_id: int) -> Bank:
        return Bank(
            id=bank_id,
            name=self.names[bank_id],
            total_assets=float(self.total_assets[bank_id]),
            initial_capital=float(self.initial_capital[bank_id]),
            current_capital=float(self.initial_capital[bank_id]),
            liabilities=float(self.liabilities[bank_id]),
            interbank_liabilities=float(self.interbank_liabilities[bank_id]),
            interbank_assets=float(self.interbank_assets[bank_id]),
            external_assets=float(self.external_assets[bank_id]),
        )

    @property
    def banks(self) -> List[Bank]:
        return [self.bank(i) for i in range(self.bank_count)]

    def to_frame(self) -> pd.DataFrame:
        """Banks table validated by :data:`BANKS_SCHEMA`."""
        df = pd.DataFrame(
            {
                "bank_id": np.arange(self.bank_count),
                "name": list(self.names),
                "total_assets": self.total_assets,
                "initial_capital": self.initial_capital,
                "liabilities": self.liabilities,
                "interbank_liabilities": self.interbank_liabilities,
                "interbank_assets": self.interbank_assets,
                "external_assets": self.external_assets,
            }
        )
        return validate_frame(df, BANKS_SCHEMA, "banks table")


@dataclass(frozen=True, eq=False)
class SimulationResult:
    """
    Outcome of one stress test.

    ``capital``, ``debt_rank``, ``stress_level`` and ``failed`` are the final
    per‑bank state.  ``initial_ranks`` is the Phase 1 vector h⁰ and
    ``history`` holds the rank vector after every Phase 2 pass.
    """

    snapshot: NetworkSnapshot
    shock: Shock
    capital: Array
    debt_rank: Array
    stress_level: Array
    failed: Array
    initial_ranks: Array
    iterations: int
    converged: bool
    total_loss: float
    contagion_index: float
    history: Tuple[Array, ...] = field(default=(), repr=False)

    @property
    def total_failures(self) -> int:
        return int(np.count_nonzero(self.failed))

    def bank(self, bank_id: int) -> Bank:
        base = self.snapshot.bank(bank_id)
        return Bank(
            id=base.id,
            name=base.name,
            total_assets=base.total_assets,
            initial_capital=base.initial_capital,
            current_capital=float(self.capital[bank_id]),
            liabilities=base.liabilities,
            interbank_liabilities=base.interbank_liabilities,
            interbank_assets=base.interbank_assets,
            external_assets=base.external_assets,
            is_failed=bool(self.failed[bank_id]),
            stress_level=StressLevel(int(self.stress_level[bank_id])),
            debt_rank=float(self.debt_rank[bank_id]),
        )

    @property
    def banks(self) -> List[Bank]:
        return [self.bank(i) for i in range(self.snapshot.bank_count)]

    def to_frame(self) -> pd.DataFrame:
        """
        Per‑bank results ordered by debt rank (highest first), validated by
        :data:`RESULTS_SCHEMA`.  Connection counts are the number of
        counterparties owing to (in) and owed by (out) each bank.
        """
        inbound, outbound = connection_counts(self.snapshot.adj)
        df = pd.DataFrame(
            {
                "bank_id": np.arange(self.snapshot.bank_count),
                "name": list(self.snapshot.names),
                "initial_capital": self.snapshot.initial_capital,
                "capital": self.capital,
                "debt_rank": self.debt_rank,
                "stress_level": [StressLevel(int(c)).name for c in self.stress_level],
                "is_failed": self.failed,
                "in_connections": inbound,
                "out_connections": outbound,
            }
        )
        df = df.sort_values("debt_rank", ascending=False, kind="mergesort")
        return validate_frame(df.reset_index(drop=True), RESULTS_SCHEMA, "results table")


# --------------------------------------------------------------------------- #
# What this module exports
# --------------------------------------------------------------------------- #
__all__ = [
    "Array",
    "StressLevel",
    "Bank",
    "NetworkSnapshot",
    "SimulationResult",
    "BANKS_SCHEMA",
    "EXPOSURES_SCHEMA",
    "RESULTS_SCHEMA",
    "validate_frame",
]
