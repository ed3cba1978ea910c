import numpy as np
import pytest

from portfolio_projection.analytics.metrics import (
    cagr,
    history_to_frame,
    max_drawdown,
    mwrr_irr,
    percentile_bands,
)
from portfolio_projection.engine.simulator import simulate


def test_history_to_frame(two_assets, bank):
    history = simulate(1_000, 100, two_assets, bank, 0.1, 6, seed=1)
    df = history_to_frame(history)
    assert list(df.columns) == ["GROWTH", "INDEX", "risk_free", "total", "capital"]
    assert df.index.name == "month"
    assert len(df) == 7
    assert df.loc[6, "capital"] == 1_600
    assert df.loc[3, "total"] == history[3].total


def test_cagr_of_bank_only_path(bank):
    history = simulate(10_000, 0, [], bank, 0.0, 24)
    balances = np.array([[st.total for st in history]])
    assert cagr(balances, 24)[0] == pytest.approx((1 + 0.03 / 12) ** 12 - 1, abs=1e-5)


def test_cagr_nan_for_zero_months():
    assert np.isnan(cagr(np.array([[100.0]]), 0)).all()


def test_cagr_nan_for_empty_start():
    out = cagr(np.array([[0.0, 50.0, 100.0], [100.0, 110.0, 121.0]]), 24)
    assert np.isnan(out[0])
    assert out[1] == pytest.approx(0.1)


def test_max_drawdown():
    paths = np.array([[100.0, 120.0, 90.0, 130.0], [0.0, 0.0, 10.0, 20.0]])
    mdd = max_drawdown(paths)
    assert mdd[0] == pytest.approx(-0.25)
    assert mdd[1] == 0.0


def test_mwrr_matches_bank_rate(bank):
    history = simulate(1_000, 0, [], bank, 0.0, 12)
    assert mwrr_irr(history) == pytest.approx(0.03, abs=1e-4)

    with_deposits = simulate(1_000, 100, [], bank, 0.0, 12)
    assert mwrr_irr(with_deposits) == pytest.approx(0.03, abs=1e-4)


def test_mwrr_single_state_is_nan(bank):
    assert np.isnan(mwrr_irr(simulate(1_000, 0, [], bank, 0.0, 0)))


def test_percentile_bands():
    balances = np.array([[100.0, 110.0], [100.0, 130.0], [100.0, 120.0]])
    bands = percentile_bands(balances, percentiles=(0, 50, 100))
    assert list(bands.columns) == ["p0", "p50", "p100"]
    assert bands.loc[1].tolist() == [110.0, 120.0, 130.0]
    assert bands.loc[0].tolist() == [100.0, 100.0, 100.0]
