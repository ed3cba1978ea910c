from ..config import SCENARIOS, ScenarioMode


def scenario_monthly_return(monthly_mean: float, monthly_vol: float, shock: float, scenario=ScenarioMode.AVERAGE) -> float:
    """Monthly simple return for one asset under a scenario.

    `shock` is one standard-normal draw. The loss is floored at -100%.
    """
    profile = SCENARIOS[ScenarioMode(scenario)]
    mean = monthly_mean * profile.return_multiplier + profile.return_bias
    vol = monthly_vol * profile.vol_multiplier
    z = abs(shock) if profile.one_sided_shock else shock
    return max(-1.0, mean + z * vol)


def asset_monthly_return(asset, shock: float, scenario=ScenarioMode.AVERAGE) -> float:
    return scenario_monthly_return(asset.monthly_return(), asset.monthly_volatility(), shock, scenario)
