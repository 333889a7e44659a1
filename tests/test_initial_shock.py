"""
Unit tests for Phase 1 (initial shock and classification).
"""

import numpy as np
import pytest

from bankstress.algorithms import initial_shock
from bankstress.config import StressConfig
from bankstress.datamodel import StressLevel
from bankstress.errors import ConfigurationError
from bankstress.shocks import IdiosyncraticShock, MacroShock, TargetedShock

from conftest import ExplodingRandom, FixedRandom, build_snapshot


@pytest.fixture
def macro_network():
    # Bank 0: A_ext = 1000, E0 = 150.  Bank 1: A_ext = 100, E0 = 50.
    return build_snapshot(np.zeros((2, 2)), [150.0, 50.0], total_assets=[1000.0, 100.0])


def test_macro_shock_drives_thin_bank_negative(macro_network):
    capital = initial_shock.capital_after_shock(
        macro_network, MacroShock(), ExplodingRandom(), StressConfig()
    )
    assert capital[0] == pytest.approx(-50.0)
    assert capital[1] == pytest.approx(30.0)


def test_macro_shock_classification(macro_network):
    state = initial_shock.apply(macro_network, MacroShock(), ExplodingRandom(), StressConfig())

    assert state.failed.tolist() == [True, False]
    assert state.debt_rank[0] == 1.0
    assert state.stress_level[0] == StressLevel.FAILED
    # 1 - 30/50 = 0.4, below the Phase 1 threshold of 0.5
    assert state.debt_rank[1] == pytest.approx(0.4)
    assert state.stress_level[1] == StressLevel.HEALTHY


def test_macro_shock_does_not_touch_snapshot(macro_network):
    before = macro_network.initial_capital.copy()
    initial_shock.apply(macro_network, MacroShock(), ExplodingRandom(), StressConfig())
    np.testing.assert_array_equal(macro_network.initial_capital, before)


def test_targeted_shock_fails_only_target(targeted_network):
    state = initial_shock.apply(
        targeted_network, TargetedShock(2), ExplodingRandom(), StressConfig()
    )
    assert state.capital[2] == initial_shock.TARGETED_SENTINEL
    assert state.failed.tolist() == [False, False, True, False, False]
    np.testing.assert_array_equal(state.debt_rank, [0.0, 0.0, 1.0, 0.0, 0.0])


def test_targeted_shock_unknown_bank(targeted_network):
    with pytest.raises(ConfigurationError):
        initial_shock.apply(targeted_network, TargetedShock(5), ExplodingRandom(), StressConfig())


def test_idiosyncratic_shock_hits_banks_below_probability(targeted_network):
    draws = FixedRandom([0.05, 0.5, 0.099, 0.10, 0.99])
    state = initial_shock.apply(targeted_network, IdiosyncraticShock(), draws, StressConfig())

    expected = targeted_network.initial_capital * np.array([0.2, 1.0, 0.2, 1.0, 1.0])
    np.testing.assert_allclose(state.capital, expected)
    np.testing.assert_allclose(state.debt_rank, [0.8, 0.0, 0.8, 0.0, 0.0])
    assert not state.failed.any()
    assert state.stress_level.tolist() == [
        StressLevel.STRESSED, StressLevel.HEALTHY, StressLevel.STRESSED,
        StressLevel.HEALTHY, StressLevel.HEALTHY,
    ]


def test_classify_stress_threshold_is_inclusive():
    e0 = np.array([100.0, 100.0, 100.0])
    capital = np.array([50.0, 50.0001, 0.0])
    state = initial_shock.classify(capital, e0, 0.5)
    assert state.stress_level.tolist() == [
        StressLevel.STRESSED, StressLevel.HEALTHY, StressLevel.FAILED,
    ]


def test_classify_clips_gains_to_zero_rank():
    state = initial_shock.classify(np.array([120.0]), np.array([100.0]), 0.5)
    assert state.debt_rank[0] == 0.0
