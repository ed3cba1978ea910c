from portfolio_projection.config import Asset, RiskFreeAccount, ScenarioMode, SimConfig
from portfolio_projection.engine.allocation import AllocationEngine
from portfolio_projection.engine.simulator import PortfolioSimulationEngine, MonteCarloSimulator
from portfolio_projection.analytics.metrics import (
    cagr, history_to_frame, max_drawdown, mwrr_irr, percentile_bands,
)
from portfolio_projection.logging_setup import configure_logging
import numpy as np

def main():
    configure_logging()

    # 1) Inputs
    assets = [
        Asset("NVDA", expected_return=0.45, volatility=0.5251),
        Asset("SP500", expected_return=0.10, volatility=0.1266),
    ]
    bank = RiskFreeAccount("Savings", interest_rate=0.03)
    cfg = SimConfig(
        duration_months=36,
        initial_investment=10_000,
        monthly_deposit=500,
        target_volatility=0.15,
        correlation=0.3,
        scenario=ScenarioMode.AVERAGE,
        n_sims=200,
        seed=42,
    )

    # 2) Allocation for the initial amount
    alloc = AllocationEngine().calculate_allocation(
        cfg.initial_investment, assets, bank, cfg.target_volatility, cfg.correlation
    )
    print("=== Initial allocation ===")
    for a in alloc.assets:
        print(f"{a.name:>8}: ${a.amount:,.2f}  ({a.weight_in_total:.2f}% of total, {a.weight_in_basket:.2f}% of basket)")
    print(f"{alloc.risk_free.name:>8}: ${alloc.risk_free.amount:,.2f}  ({alloc.risk_free.weight_in_total:.2f}%)")
    print(f"Basket: return {alloc.basket.expected_return:.2f}%, vol {alloc.basket.volatility:.2f}%, "
          f"Sharpe {alloc.basket.sharpe_ratio:.3f}")

    # 3) One path per scenario
    engine = PortfolioSimulationEngine()
    for scenario in ScenarioMode:
        history = engine.simulate(
            cfg.initial_investment, cfg.monthly_deposit, assets, bank,
            cfg.target_volatility, cfg.duration_months, scenario=scenario,
            correlation=cfg.correlation, seed=cfg.seed,
        )
        df = history_to_frame(history)
        print(f"\n=== {scenario.value} path (last 3 months) ===")
        print(df.tail(3))
        print(f"Money-weighted return: {mwrr_irr(history):.2%}")

    # 4) Monte Carlo batch
    out = MonteCarloSimulator(cfg).run(assets, bank)
    balances = out["balances"]
    cagr_vals = cagr(balances, cfg.duration_months)
    mdd_vals = max_drawdown(balances)

    print(f"\n=== Monte Carlo Summary ({cfg.n_sims} sims) ===")
    print(f"Capital invested: ${out['capital'][-1]:,.0f}")
    print(f"End balance median: ${np.median(balances[:,-1]):,.0f}")
    print(f"CAGR median: {np.nanmedian(cagr_vals):.2%}")
    print(f"Max Drawdown median: {np.median(mdd_vals):.1%}")
    print(percentile_bands(balances).iloc[::12])


if __name__ == "__main__":
    main()
