"""
algorithms.metrics
==================

Utility functions that compute:

1. **Loss aggregates** – system‑wide capital loss after a stress test and the
   contagion index (loss as a percentage of initial capital).
2. **Counterparty counts** – per bank, how many banks owe it money (in) and
   how many it owes (out).
3. **Basic network statistics** – spectral radius, degree‑distribution
   inequality (Gini) and average path length for the directed exposures
   graph produced by :pymod:`bankstress.network`.

All helpers are pure functions with **no package‑internal side‑effects**
(i.e. no I/O, no global state) so they are straightforward to unit‑test.
"""

from __future__ import annotations

from typing import Dict, Tuple

import numpy as np
import networkx as nx


__all__ = ["total_loss", "contagion_index", "connection_counts", "graph_stats"]


# ---------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------
def total_loss(initial_capital: np.ndarray, capital: np.ndarray) -> float:
    """
    ``Σ E0 − Σ max(0, E)``.

    Negative capital counts as zero: a bank cannot lose more than its own
    capital in this measure.
    """
    return float(np.sum(initial_capital) - np.sum(np.maximum(capital, 0.0)))


def contagion_index(loss: float, total_initial_capital: float) -> float:
    """
    Loss as a percentage of total initial capital.

    Returns ``0.0`` when the system has no capital to lose.
    """
    if total_initial_capital <= 0.0:
        return 0.0
    return loss / total_initial_capital * 100.0


def connection_counts(adj: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    ``(inbound, outbound)`` counterparty counts per bank.

    *inbound* counts debtors owing to the bank (non‑zero column entries),
    *outbound* counts creditors the bank owes (non‑zero row entries).
    """
    links = np.asarray(adj) > 0.0
    return links.sum(axis=0).astype(int), links.sum(axis=1).astype(int)


def graph_stats(G: nx.DiGraph) -> Dict[str, float]:
    """
    Structural summary of an exposures graph (edges debtor → creditor,
    edge attribute ``'weight'``).

    Returns a dict with

    * ``largest_eigenvalue`` – largest real part of the eigenvalues of the
      weighted adjacency matrix;
    * ``degree_gini`` – Gini coefficient of weighted out‑degrees (0 when every
      bank owes nothing);
    * ``avg_path_len`` – mean shortest path in the largest weakly connected
      component, directions ignored.

    Each entry is ``nan`` when the graph is too small for it to be defined.
    """
    weighted_out = np.fromiter(
        (d for _, d in G.out_degree(weight="weight")), dtype=float, count=len(G)
    )
    return {
        "largest_eigenvalue": _spectral_radius(G),
        "degree_gini": _gini(weighted_out),
        "avg_path_len": _mean_path_length(G),
    }


# ---------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------
def _spectral_radius(G: nx.DiGraph) -> float:
    if len(G) == 0:
        return float("nan")
    eigenvalues = np.linalg.eigvals(nx.to_numpy_array(G, weight="weight", dtype=float))
    return float(np.real(eigenvalues).max())


def _mean_path_length(G: nx.DiGraph) -> float:
    if len(G) < 2:
        return float("nan")
    component = max(nx.weakly_connected_components(G), key=len)
    if len(component) < 2:
        return float("nan")
    undirected = nx.Graph(G.subgraph(component))
    return float(nx.average_shortest_path_length(undirected))


def _gini(values: np.ndarray) -> float:
    """Gini coefficient of non‑negative values (0 = perfectly even)."""
    if values.size == 0:
        return float("nan")
    total = values.sum()
    if np.isclose(total, 0.0):
        return 0.0
    ranked = np.sort(values)
    n = ranked.size
    weights = np.arange(1, n + 1, dtype=float)
    gini = (2.0 * np.dot(weights, ranked) / (n * total)) - (n + 1.0) / n
    return float(np.clip(gini, 0.0, 1.0))
