import pytest

from portfolio_projection.config import Asset, RiskFreeAccount


@pytest.fixture
def bank():
    return RiskFreeAccount("Savings", interest_rate=0.03)


@pytest.fixture
def two_assets():
    return [
        Asset("GROWTH", expected_return=0.10, volatility=0.20),
        Asset("INDEX", expected_return=0.07, volatility=0.15),
    ]
