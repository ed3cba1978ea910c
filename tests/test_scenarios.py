import math

import numpy as np
import pytest

from portfolio_projection.config import Asset, ScenarioMode
from portfolio_projection.engine.scenarios import asset_monthly_return, scenario_monthly_return
from portfolio_projection.sampling.normal import RandomNormalGenerator


def test_average_uses_raw_shock():
    assert scenario_monthly_return(0.01, 0.05, -2.0, ScenarioMode.AVERAGE) == pytest.approx(-0.09)


def test_best_boosts_mean_and_flips_negative_shock():
    r = scenario_monthly_return(0.01, 0.05, -2.0, ScenarioMode.BEST)
    assert r == pytest.approx(0.015 + 2.0 * 0.03)


def test_worst_cuts_mean_and_widens_vol():
    r = scenario_monthly_return(0.01, 0.05, -2.0, ScenarioMode.WORST)
    assert r == pytest.approx(0.003 - 0.0075 - 2.0 * 0.0625)


def test_loss_floored_at_total_loss():
    assert scenario_monthly_return(0.0, 1.0, -3.5, ScenarioMode.AVERAGE) == -1.0
    assert scenario_monthly_return(0.0, 1.0, -3.5, ScenarioMode.WORST) == -1.0


def test_scenario_accepts_name():
    assert scenario_monthly_return(0.01, 0.05, 1.0, "BEST") == scenario_monthly_return(
        0.01, 0.05, 1.0, ScenarioMode.BEST
    )
    with pytest.raises(ValueError):
        scenario_monthly_return(0.01, 0.05, 1.0, "MEDIOCRE")


def test_asset_monthly_figures():
    a = Asset("A", expected_return=0.12, volatility=0.24)
    assert asset_monthly_return(a, 1.0) == pytest.approx(0.01 + 0.24 / math.sqrt(12))


def test_scenario_means_are_ordered():
    a = Asset("A", expected_return=0.08, volatility=0.20)
    shocks = RandomNormalGenerator(123).samples(20_000)
    means = {
        mode: np.mean([asset_monthly_return(a, z, mode) for z in shocks])
        for mode in ScenarioMode
    }
    assert means[ScenarioMode.BEST] >= means[ScenarioMode.AVERAGE] >= means[ScenarioMode.WORST]
    best = [asset_monthly_return(a, z, ScenarioMode.BEST) for z in shocks[:500]]
    assert min(best) >= a.monthly_return() * 1.5
