"""
Unit tests for the random network generator.
"""

import numpy as np
import pytest

from bankstress.algorithms.generation import check_invariants, generate
from bankstress.config import GeneratorConfig
from bankstress.errors import ConfigurationError, InvariantViolation

from conftest import ExplodingRandom, build_snapshot

TOL = 1e-9


@pytest.mark.parametrize("seed", [0, 1, 7, 42, 2024])
def test_balance_sheet_invariants(seed):
    snap = generate(GeneratorConfig(), seed)

    assert snap.bank_count == 50
    assert snap.total_initial_capital == pytest.approx(snap.initial_capital.sum())
    np.testing.assert_allclose(snap.interbank_assets + snap.external_assets, snap.total_assets)
    np.testing.assert_allclose(snap.initial_capital + snap.liabilities, snap.total_assets)
    assert np.all(np.diag(snap.adj) == 0.0)
    assert np.all(snap.adj >= 0.0)
    assert np.all(snap.adj.sum(axis=1) <= snap.interbank_liabilities + TOL)


@pytest.mark.parametrize("seed", [3, 11])
def test_draws_stay_within_configured_ranges(seed):
    cfg = GeneratorConfig(bank_count=30)
    snap = generate(cfg, seed)

    assert np.all((snap.total_assets >= 1000.0) & (snap.total_assets <= 5000.0))
    ratios = snap.initial_capital / snap.total_assets
    assert np.all((ratios >= 0.08 - TOL) & (ratios <= 0.15 + TOL))
    fractions = snap.interbank_liabilities / snap.liabilities
    assert np.all((fractions >= 0.15 - TOL) & (fractions <= 0.30 + TOL))


def test_each_debtor_has_one_to_four_creditors(rng):
    snap = generate(GeneratorConfig(bank_count=20), rng)
    creditors_per_debtor = (snap.adj > 0).sum(axis=1)
    assert creditors_per_debtor.min() >= 1
    assert creditors_per_debtor.max() <= 4


def test_interbank_assets_are_column_sums(rng):
    snap = generate(GeneratorConfig(bank_count=10), rng)
    np.testing.assert_allclose(snap.interbank_assets, snap.adj.sum(axis=0))


def test_two_bank_network_lends_both_ways():
    snap = generate(GeneratorConfig(bank_count=2), 5)
    assert snap.adj[0, 1] > 0.0
    assert snap.adj[1, 0] > 0.0
    assert snap.adj[0, 0] == snap.adj[1, 1] == 0.0


def test_same_seed_replays_same_network():
    cfg = GeneratorConfig(bank_count=15)
    a = generate(cfg, 99)
    b = generate(cfg, 99)
    assert a.names == b.names
    np.testing.assert_array_equal(a.adj, b.adj)
    np.testing.assert_array_equal(a.initial_capital, b.initial_capital)


def test_names_come_from_pool_then_fallback():
    cfg = GeneratorConfig(bank_count=5, name_pool=("Alpha", "Beta"))
    snap = generate(cfg, 1)
    assert set(snap.names[:2]) == {"Alpha", "Beta"}
    assert snap.names[2:] == ("Bank 3", "Bank 4", "Bank 5")


def test_small_network_draws_names_from_head_of_pool():
    cfg = GeneratorConfig(bank_count=5)
    snap = generate(cfg, 1)
    assert set(snap.names) == set(cfg.name_pool[:5])


def test_fractional_bank_count_rejected_before_any_draw():
    with pytest.raises(ConfigurationError):
        generate(GeneratorConfig(bank_count=5.5), ExplodingRandom())


def test_names_are_distinct_when_pool_is_large(rng):
    snap = generate(GeneratorConfig(bank_count=50), rng)
    assert len(set(snap.names)) == 50


def test_snapshot_arrays_are_read_only(rng):
    snap = generate(GeneratorConfig(bank_count=4), rng)
    with pytest.raises(ValueError):
        snap.adj[0, 1] = 1.0
    with pytest.raises(ValueError):
        snap.initial_capital[0] = 0.0


@pytest.mark.parametrize(
    "kwargs",
    [
        {"bank_count": 1},
        {"bank_count": 0},
        {"name_pool": ()},
        {"assets_range": (5000.0, 1000.0)},
        {"assets_range": (0.0, 1000.0)},
        {"capital_ratio_range": (0.15, 0.08)},
        {"capital_ratio_range": (0.0, 0.1)},
        {"capital_ratio_range": (0.5, 1.5)},
        {"creditor_count_range": (0, 4)},
    ],
)
def test_invalid_config_rejected_before_any_draw(kwargs):
    with pytest.raises(ConfigurationError):
        generate(GeneratorConfig(**kwargs), ExplodingRandom())


def test_check_invariants_flags_negative_capital():
    snap = build_snapshot(np.zeros((2, 2)), [10.0, -1.0], total_assets=[100.0, 100.0])
    with pytest.raises(InvariantViolation):
        check_invariants(snap)


def test_check_invariants_flags_self_lending():
    adj = np.array([[5.0, 0.0], [0.0, 0.0]])
    snap = build_snapshot(adj, [10.0, 10.0])
    with pytest.raises(InvariantViolation):
        check_invariants(snap)


def test_check_invariants_flags_overfull_row():
    adj = np.array([[0.0, 50.0], [0.0, 0.0]])
    snap = build_snapshot(adj, [10.0, 10.0], interbank_liabilities=[40.0, 0.0])
    with pytest.raises(InvariantViolation):
        check_invariants(snap)
