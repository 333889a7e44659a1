"""Shared fixtures: hand-built snapshots and randomness stubs."""

from __future__ import annotations

import numpy as np
import pytest

from bankstress.datamodel import NetworkSnapshot


def build_snapshot(adj, initial_capital, total_assets=None, interbank_liabilities=None, names=None):
    """Assemble a snapshot from explicit balance sheets (no randomness)."""
    adj = np.asarray(adj, dtype=float)
    initial_capital = np.asarray(initial_capital, dtype=float)
    total_assets = (
        initial_capital * 10.0 if total_assets is None else np.asarray(total_assets, dtype=float)
    )
    interbank_liabilities = (
        adj.sum(axis=1) if interbank_liabilities is None
        else np.asarray(interbank_liabilities, dtype=float)
    )
    interbank_assets = adj.sum(axis=0)
    n = len(initial_capital)
    return NetworkSnapshot(
        names=names or tuple(f"Bank {i + 1}" for i in range(n)),
        total_assets=total_assets,
        initial_capital=initial_capital,
        liabilities=total_assets - initial_capital,
        interbank_liabilities=interbank_liabilities,
        interbank_assets=interbank_assets,
        external_assets=total_assets - interbank_assets,
        adj=adj,
        total_initial_capital=float(initial_capital.sum()),
    )


class FixedRandom:
    """RandomSource stub whose ``random`` returns preset draws."""

    def __init__(self, draws):
        self.draws = np.asarray(draws, dtype=float)

    def random(self, size=None):
        return self.draws[:size]

    def uniform(self, low=0.0, high=1.0, size=None):
        raise AssertionError("uniform() not expected")

    def integers(self, low, high=None, size=None):
        raise AssertionError("integers() not expected")

    def choice(self, a, size=None, replace=True):
        raise AssertionError("choice() not expected")

    def permutation(self, x):
        raise AssertionError("permutation() not expected")


class ExplodingRandom(FixedRandom):
    """Fails on any draw; proves validation happens before randomisation."""

    def __init__(self):
        super().__init__([])

    def random(self, size=None):
        raise AssertionError("random() must not be called")


@pytest.fixture
def rng():
    return np.random.default_rng(12345)


@pytest.fixture
def targeted_network():
    """
    Five banks; bank 0 owes its entire liabilities (interbank only) to bank 1.
    No other exposures exist.
    """
    adj = np.zeros((5, 5))
    adj[0, 1] = 100.0
    initial_capital = np.array([10.0, 20.0, 20.0, 20.0, 20.0])
    total_assets = np.array([110.0, 200.0, 200.0, 200.0, 200.0])
    return build_snapshot(adj, initial_capital, total_assets=total_assets)


@pytest.fixture
def uniform_network():
    """Six banks, fully connected with identical exposures."""
    n = 6
    adj = 10.0 * (np.ones((n, n)) - np.eye(n))
    return build_snapshot(adj, np.full(n, 20.0), total_assets=np.full(n, 200.0))
