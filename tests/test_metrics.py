"""
Unit tests for loss aggregates and graph statistics.
"""

import math

import networkx as nx
import numpy as np
import pytest

from bankstress.algorithms import metrics


def test_total_loss_floors_negative_capital():
    loss = metrics.total_loss(np.array([100.0, 50.0]), np.array([-20.0, 30.0]))
    assert loss == pytest.approx(120.0)


def test_contagion_index():
    assert metrics.contagion_index(30.0, 120.0) == pytest.approx(25.0)
    assert metrics.contagion_index(10.0, 0.0) == 0.0


def test_connection_counts():
    adj = np.array([[0.0, 1.0, 1.0], [0.0, 0.0, 2.0], [0.0, 0.0, 0.0]])
    inbound, outbound = metrics.connection_counts(adj)
    assert inbound.tolist() == [0, 1, 2]
    assert outbound.tolist() == [2, 1, 0]


def test_graph_stats_on_cycle():
    G = nx.DiGraph()
    G.add_weighted_edges_from([(0, 1, 1.0), (1, 2, 1.0), (2, 0, 1.0)])
    stats = metrics.graph_stats(G)

    assert stats["largest_eigenvalue"] == pytest.approx(1.0)
    assert stats["degree_gini"] == pytest.approx(0.0)
    assert stats["avg_path_len"] == pytest.approx(1.0)


def test_graph_stats_on_single_isolated_bank():
    G = nx.DiGraph()
    G.add_node(0)
    stats = metrics.graph_stats(G)
    assert stats["largest_eigenvalue"] == 0.0
    assert stats["degree_gini"] == 0.0
    assert math.isnan(stats["avg_path_len"])
