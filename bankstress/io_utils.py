"""
bankstress.io_utils
===================

Thin CSV façade for hosts that want to keep a generated network around:

    >>> from bankstress.io_utils import save_snapshot, load_snapshot
    >>> save_snapshot(snapshot, "runs/net01")       # banks.csv + exposures.csv
    >>> snapshot = load_snapshot("runs/net01")      # schema-validated rebuild

If a CSV (or its header/dtypes) violates the Pandera schema declared in
:pyfile:`bankstress.datamodel`, a :class:`bankstress.errors.SchemaError`
is raised *immediately*, preventing silent propagation of bad data.

Only the current snapshot / result is written; no run history is kept.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Final

import numpy as np
import pandas as pd

from .datamodel import (
    BANKS_SCHEMA,
    EXPOSURES_SCHEMA,
    NetworkSnapshot,
    SimulationResult,
    validate_frame,
)
from .errors import SchemaError
from .network import exposure_frame, to_matrix

logger = logging.getLogger(__name__)

# --------------------------------------------------------------------------- #
# File registry (single source of file names)
# --------------------------------------------------------------------------- #
BANKS_FILE: Final[str] = "banks.csv"
EXPOSURES_FILE: Final[str] = "exposures.csv"


def _read_validated(path: Path, schema) -> pd.DataFrame:
    if not path.exists():
        raise FileNotFoundError(f"Expected data file not found: {path}")
    # keep_default_na: names such as "NA" or "None" must stay strings
    df = pd.read_csv(path, float_precision="round_trip", keep_default_na=False)
    return validate_frame(df, schema, path.name)


# --------------------------------------------------------------------------- #
# Public API
# --------------------------------------------------------------------------- #
def save_snapshot(snapshot: NetworkSnapshot, directory: str | Path) -> Path:
    """
    Write ``banks.csv`` and ``exposures.csv`` for *snapshot* into *directory*
    (created if missing) and return the directory path.
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    snapshot.to_frame().to_csv(directory / BANKS_FILE, index=False)
    exposure_frame(snapshot.adj).to_csv(directory / EXPOSURES_FILE, index=False)
    logger.debug("Saved %d-bank snapshot to %s", snapshot.bank_count, directory)
    return directory


def load_snapshot(directory: str | Path) -> NetworkSnapshot:
    """
    Read a snapshot written by :func:`save_snapshot`.

    Returns
    -------
    NetworkSnapshot
        Rebuilt snapshot; ``total_initial_capital`` is recomputed as ``Σ E0``.

    Raises
    ------
    FileNotFoundError
        If either CSV file is missing.
    SchemaError
        If a file fails Pandera validation, bank ids are not exactly
        ``0 .. N-1``, or an exposure references an unknown bank.
    """
    directory = Path(directory)
    banks = _read_validated(directory / BANKS_FILE, BANKS_SCHEMA)
    exposures = _read_validated(directory / EXPOSURES_FILE, EXPOSURES_SCHEMA)

    banks = banks.sort_values("bank_id", kind="mergesort").reset_index(drop=True)
    n = len(banks)
    if not np.array_equal(banks["bank_id"].to_numpy(), np.arange(n)):
        raise SchemaError(f"{BANKS_FILE} must list bank ids 0..{n - 1} exactly once")

    initial_capital = banks["initial_capital"].to_numpy(float)
    return NetworkSnapshot(
        names=tuple(banks["name"].astype(str)),
        total_assets=banks["total_assets"].to_numpy(float),
        initial_capital=initial_capital,
        liabilities=banks["liabilities"].to_numpy(float),
        interbank_liabilities=banks["interbank_liabilities"].to_numpy(float),
        interbank_assets=banks["interbank_assets"].to_numpy(float),
        external_assets=banks["external_assets"].to_numpy(float),
        adj=to_matrix(exposures, n),
        total_initial_capital=float(initial_capital.sum()),
    )


def save_result(result: SimulationResult, path: str | Path) -> Path:
    """Write the per‑bank results table (highest debt rank first) to *path*."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    result.to_frame().to_csv(path, index=False)
    return path
