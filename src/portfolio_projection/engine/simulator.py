import math
import numbers
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Tuple

import numpy as np
import structlog

from ..config import ScenarioMode, SimConfig
from ..errors import InvalidSimulationInput, UnachievableVolatility
from ..sampling.normal import RandomNormalGenerator
from .allocation import AllocationEngine
from .cashflows import build_deposit_vector, cumulative_capital
from .scenarios import asset_monthly_return

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class PortfolioState:
    month: int
    asset_values: Mapping[str, float]  # read-only, in asset declaration order
    risk_free: float
    total: float
    capital: float                     # cumulative initial + deposits

    # asset_values is a mapping, so states compare by value but do not hash
    __hash__ = None


def _record(month, holdings, risk_free, capital):
    total = sum(holdings.values()) + risk_free
    return PortfolioState(
        month=month,
        asset_values=MappingProxyType({k: round(v, 2) for k, v in holdings.items()}),
        risk_free=round(risk_free, 2),
        total=round(total, 2),
        capital=round(float(capital), 2),
    )


def _check_amount(label, value):
    if not isinstance(value, numbers.Real) or isinstance(value, bool) or not math.isfinite(value):
        raise InvalidSimulationInput(f"{label} must be a finite number. Received: {value!r}")
    if value < 0:
        raise InvalidSimulationInput(f"{label} cannot be negative.")


def _check_duration(value):
    if isinstance(value, bool):
        raise InvalidSimulationInput("Duration must be a non-negative integer.")
    if isinstance(value, numbers.Integral):
        months = int(value)
    elif isinstance(value, float) and value.is_integer():
        months = int(value)
    else:
        raise InvalidSimulationInput("Duration must be a non-negative integer.")
    if months < 0:
        raise InvalidSimulationInput("Duration must be a non-negative integer.")
    return months


class PortfolioSimulationEngine:
    """Month-by-month projection of a target-volatility portfolio.

    Every month each asset grows by a scenario-adjusted random return, the
    risk-free account accrues interest, the deposit is added and the whole
    portfolio is rebalanced through the allocation engine.
    """

    def __init__(self, allocation_engine: AllocationEngine = None):
        self.allocation_engine = allocation_engine or AllocationEngine()

    def simulate(
        self,
        initial_investment,
        monthly_deposit,
        assets,
        risk_free,
        target_volatility,
        duration_months,
        scenario=ScenarioMode.AVERAGE,
        correlation=None,
        generator: RandomNormalGenerator = None,
        seed=None,
    ) -> Tuple[PortfolioState, ...]:
        """
        Returns one PortfolioState per month, months 0..duration_months.
        Output values are rounded to cents; the holdings carried between
        months are not.
        generator: normal source for this run; built from `seed` if omitted.
        correlation: defaults to the allocation engine's default_correlation.
        """
        _check_amount("Initial investment", initial_investment)
        _check_amount("Monthly deposit", monthly_deposit)
        months = _check_duration(duration_months)
        try:
            scenario = ScenarioMode(scenario)
        except ValueError as e:
            raise InvalidSimulationInput(f"Unknown scenario: {scenario!r}") from e
        if correlation is None:
            correlation = self.allocation_engine.default_correlation
        assets = list(assets)

        names = [getattr(a, "name", None) for a in assets]
        if len(set(names)) != len(names):
            raise InvalidSimulationInput(f"Asset names must be unique: {names}")
        self.allocation_engine.validate(0.0, assets, risk_free, target_volatility, correlation)
        if not assets and target_volatility > 0:
            raise UnachievableVolatility("Cannot achieve a non-zero target volatility with no assets.")

        if generator is None:
            generator = RandomNormalGenerator(seed)
        deposits = build_deposit_vector(monthly_deposit, months)
        capital = cumulative_capital(initial_investment, monthly_deposit, months)

        holdings = {name: 0.0 for name in names}
        rf_value = 0.0

        # Month 0
        if initial_investment > 0:
            outcome = self.allocation_engine.try_allocation(
                initial_investment, assets, risk_free, target_volatility, correlation
            )
            if outcome.ok:
                holdings.update(outcome.result.asset_amounts())
                rf_value = outcome.result.risk_free.amount
            else:
                log.warning("allocation.fallback", month=0, reason=str(outcome.error), policy="all_risk_free")
                rf_value = float(initial_investment)

        history = [_record(0, holdings, rf_value, capital[0])]

        monthly_rf = risk_free.monthly_rate()
        for m in range(1, months + 1):
            # 1) growth
            grown = {}
            for a in assets:
                r = asset_monthly_return(a, generator.sample(), scenario)
                grown[a.name] = holdings[a.name] * (1.0 + r)
            grown_rf = rf_value * (1.0 + monthly_rf)

            # 2) deposit (end of month)
            value_after_growth = sum(grown.values()) + grown_rf
            to_reallocate = value_after_growth + float(deposits[m - 1])

            # 3) rebalance
            if to_reallocate > 0:
                outcome = self.allocation_engine.try_allocation(
                    to_reallocate, assets, risk_free, target_volatility, correlation
                )
                if outcome.ok:
                    holdings = {name: 0.0 for name in names}
                    holdings.update(outcome.result.asset_amounts())
                    rf_value = outcome.result.risk_free.amount
                else:
                    log.warning("allocation.fallback", month=m, reason=str(outcome.error), policy="hold_grown")
                    holdings = grown
                    rf_value = to_reallocate - sum(grown.values())
            else:
                log.info("portfolio.wiped_out", month=m, net_value=to_reallocate)
                holdings = {name: 0.0 for name in names}
                rf_value = to_reallocate

            # risk-free may stay negative (debt)
            holdings = {k: max(0.0, v) for k, v in holdings.items()}
            history.append(_record(m, holdings, rf_value, capital[m]))

        log.debug(
            "simulation.complete",
            months=months,
            scenario=scenario.value,
            final_total=history[-1].total,
        )
        return tuple(history)


def simulate(initial_investment, monthly_deposit, assets, risk_free, target_volatility, duration_months,
             scenario=ScenarioMode.AVERAGE, correlation=None, seed=None):
    return PortfolioSimulationEngine().simulate(
        initial_investment, monthly_deposit, assets, risk_free, target_volatility,
        duration_months, scenario=scenario, correlation=correlation, seed=seed,
    )


class MonteCarloSimulator:
    def __init__(self, config: SimConfig, engine: PortfolioSimulationEngine = None):
        self.config = config
        self.engine = engine or PortfolioSimulationEngine()

    def run(self, assets, risk_free):
        """
        Runs config.n_sims independent paths, each with its own generator
        spawned from config.seed.
        Returns dict with balances, risk_free, capital, histories
        """
        cfg = self.config
        T = cfg.duration_months
        children = np.random.SeedSequence(cfg.seed).spawn(cfg.n_sims)

        balances = np.zeros((cfg.n_sims, T + 1))
        rf_paths = np.zeros((cfg.n_sims, T + 1))
        histories = []
        for s, child in enumerate(children):
            gen = RandomNormalGenerator(np.random.default_rng(child))
            history = self.engine.simulate(
                cfg.initial_investment,
                cfg.monthly_deposit,
                assets,
                risk_free,
                cfg.target_volatility,
                T,
                scenario=cfg.scenario,
                correlation=cfg.correlation,
                generator=gen,
            )
            balances[s] = [st.total for st in history]
            rf_paths[s] = [st.risk_free for st in history]
            histories.append(history)

        log.info("montecarlo.complete", n_sims=cfg.n_sims, months=T, seed=cfg.seed)
        return {
            "balances": balances,
            "risk_free": rf_paths,
            "capital": cumulative_capital(cfg.initial_investment, cfg.monthly_deposit, T),
            "histories": tuple(histories),
        }
