"""
bankstress.network
==================

I/O‑agnostic converters between the dense exposure matrix and the other
shapes the package uses:

* long‑format exposures table  (debtor_id, creditor_id, amount)
* NumPy exposure matrix  adj[i, j]  =  amount *debtor i* owes *creditor j*
* NetworkX `DiGraph`  with edge attribute 'weight', edges debtor ➜ creditor

These utilities sit between the data‑layer (CSV → DataFrame) and the
algorithm‑layer (DebtRank, graph metrics).
"""

from __future__ import annotations

from typing import Final

import numpy as np
import pandas as pd
import networkx as nx

from .datamodel import Array, EXPOSURES_SCHEMA, NetworkSnapshot, validate_frame
from .errors import SchemaError

# --------------------------------------------------------------------------- #
# Column constants (avoid magic strings)
# --------------------------------------------------------------------------- #
_DEBTOR: Final[str] = "debtor_id"
_CREDITOR: Final[str] = "creditor_id"
_WEIGHT: Final[str] = "amount"


# --------------------------------------------------------------------------- #
# Public API
# --------------------------------------------------------------------------- #
def exposure_frame(adj: Array) -> pd.DataFrame:
    """
    Long‑format table of the non‑zero entries of *adj*, ordered by
    (debtor, creditor) and validated by ``EXPOSURES_SCHEMA``.
    """
    debtors, creditors = np.nonzero(np.asarray(adj) > 0.0)
    df = pd.DataFrame(
        {
            _DEBTOR: debtors.astype(int),
            _CREDITOR: creditors.astype(int),
            _WEIGHT: np.asarray(adj)[debtors, creditors].astype(float),
        }
    )
    return validate_frame(df, EXPOSURES_SCHEMA, "exposures table")


def to_matrix(exposures: pd.DataFrame, bank_count: int) -> Array:
    """
    Convert an exposures table into a square exposure matrix.

    Parameters
    ----------
    exposures
        DataFrame validated by ``EXPOSURES_SCHEMA``.
    bank_count
        Number of banks; ids must lie in ``0 .. bank_count - 1``.

    Returns
    -------
    np.ndarray
        Matrix with shape (bank_count, bank_count).  Duplicate
        (debtor, creditor) rows are summed.

    Raises
    ------
    SchemaError
        If `exposures` references an id outside the network.
    """
    ids = pd.concat([exposures[_DEBTOR], exposures[_CREDITOR]])
    unknown_ids = set(ids[(ids < 0) | (ids >= bank_count)].tolist())
    if unknown_ids:
        raise SchemaError(
            f"Exposure table references unknown bank_id(s): {sorted(unknown_ids)}"
        )

    adj = np.zeros((bank_count, bank_count), dtype=float)
    np.add.at(
        adj,
        (exposures[_DEBTOR].to_numpy(int), exposures[_CREDITOR].to_numpy(int)),
        exposures[_WEIGHT].to_numpy(float),
    )
    return adj


def to_graph(snapshot: NetworkSnapshot) -> nx.DiGraph:
    """
    Build a directed graph where each edge carries a 'weight' attribute.

    Nodes are **all** bank ids (isolated banks are retained) with ``name``
    attributes; edges point debtor ➜ creditor (direction of obligation).
    """
    G = nx.DiGraph()
    G.add_nodes_from(
        (bank_id, {"name": name}) for bank_id, name in enumerate(snapshot.names)
    )
    for row in exposure_frame(snapshot.adj).itertuples(index=False):
        G.add_edge(
            int(getattr(row, _DEBTOR)),
            int(getattr(row, _CREDITOR)),
            weight=float(getattr(row, _WEIGHT)),
        )
    return G


__all__ = ["exposure_frame", "to_matrix", "to_graph"]
