import math
import numbers
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from ..config import DEFAULT_CORRELATION, RateBounds
from ..errors import (
    AllocationError,
    DegenerateSharpeWeights,
    InvalidAllocationInput,
    UnachievableVolatility,
)


@dataclass(frozen=True)
class AssetAllocation:
    name: str
    amount: float
    weight_in_basket: float  # 0..100
    weight_in_total: float   # 0..100, can exceed 100 when levered


@dataclass(frozen=True)
class RiskFreeAllocation:
    name: str
    amount: float
    weight_in_total: float  # 0..100, negative when borrowing


@dataclass(frozen=True)
class BasketMetrics:
    expected_return: float  # percent
    volatility: float       # percent
    sharpe_ratio: Optional[float] = None


@dataclass(frozen=True)
class AllocationResult:
    assets: Tuple[AssetAllocation, ...]
    risk_free: RiskFreeAllocation
    basket: BasketMetrics
    target_volatility: float  # percent
    total_amount: float

    def asset_amounts(self):
        return {a.name: a.amount for a in self.assets}

    def basket_amount(self):
        return sum(a.amount for a in self.assets)


@dataclass(frozen=True)
class AllocationOutcome:
    """Either a result or the AllocationError that prevented one."""
    result: Optional[AllocationResult] = None
    error: Optional[AllocationError] = None

    @property
    def ok(self):
        return self.result is not None


def _is_number(x):
    return isinstance(x, numbers.Real) and not isinstance(x, bool) and math.isfinite(x)


def sharpe_ratios(assets, risk_free_rate: float):
    mu = np.array([a.expected_return for a in assets], dtype=float)
    sigma = np.array([a.volatility for a in assets], dtype=float)
    return (mu - risk_free_rate) / sigma


def sharpe_weights(ratios):
    """Basket weights proportional to the positive Sharpe ratios.

    Assets with a non-positive ratio get no weight. When no ratio is
    positive the basket falls back to equal weights.
    """
    ratios = np.asarray(ratios, dtype=float)
    if ratios.size == 0:
        return ratios
    positive = np.where(ratios > 0, ratios, 0.0)
    total = positive.sum()
    if total == 0:
        if np.all(ratios <= 0):
            return np.full(ratios.size, 1.0 / ratios.size)
        raise DegenerateSharpeWeights(
            "Cannot determine Sharpe-weighted basket weights: "
            "sum of positive Sharpe ratios is zero."
        )
    return positive / total


def basket_metrics(assets, weights, risk_free_rate: float, correlation: float):
    """Return (expected_return, volatility, sharpe) of the basket as decimals.

    One correlation is shared by every pair of assets.
    """
    w = np.asarray(weights, dtype=float)
    mu = np.array([a.expected_return for a in assets], dtype=float)
    sigma = np.array([a.volatility for a in assets], dtype=float)
    n = len(assets)

    corr = np.full((n, n), float(correlation))
    np.fill_diagonal(corr, 1.0)
    cov = np.outer(sigma, sigma) * corr

    expected = float(w @ mu)
    variance = max(float(w @ cov @ w), 0.0)
    vol = math.sqrt(variance)

    excess = expected - risk_free_rate
    if vol > 0:
        sharpe = excess / vol
    elif excess == 0:
        sharpe = 0.0
    else:
        sharpe = math.copysign(math.inf, excess)
    return expected, vol, sharpe


class AllocationEngine:
    def __init__(self, rate_bounds: RateBounds = RateBounds(), default_correlation: float = DEFAULT_CORRELATION):
        self.rate_bounds = rate_bounds
        self.default_correlation = float(default_correlation)

    def validate(self, total_amount, assets, risk_free, target_volatility, correlation):
        if not _is_number(total_amount):
            raise InvalidAllocationInput(f"Total investment amount must be a finite number. Received: {total_amount!r}")
        if total_amount < 0:
            raise InvalidAllocationInput("Total investment amount cannot be negative.")

        seen = set()
        for a in assets:
            name = getattr(a, "name", None)
            if not name or not _is_number(getattr(a, "expected_return", None)) or not _is_number(getattr(a, "volatility", None)):
                raise InvalidAllocationInput(
                    f"Invalid data for asset: {a!r}. Ensure name, expected_return and volatility are defined."
                )
            if a.volatility <= 0:
                raise InvalidAllocationInput(f"Volatility for asset {name} must be positive.")
            if name in seen:
                raise InvalidAllocationInput(f"Duplicate asset name: {name}")
            seen.add(name)

        rate = risk_free.interest_rate
        if not _is_number(rate) or not self.rate_bounds.contains(rate):
            raise InvalidAllocationInput(
                f"Risk-free interest rate must be between {self.rate_bounds.min_rate * 100:g}% "
                f"and {self.rate_bounds.max_rate * 100:g}%. Received: {rate!r}"
            )
        if not _is_number(target_volatility) or target_volatility < 0:
            raise InvalidAllocationInput("Target portfolio volatility cannot be negative.")
        if not _is_number(correlation) or not -1.0 <= correlation <= 1.0:
            raise InvalidAllocationInput(f"Correlation coefficient must be between -1 and 1. Received: {correlation}")

    def calculate_allocation(self, total_amount, assets, risk_free, target_volatility, correlation=None) -> AllocationResult:
        if correlation is None:
            correlation = self.default_correlation
        assets = list(assets)
        self.validate(total_amount, assets, risk_free, target_volatility, correlation)
        total_amount = float(total_amount)

        if not assets:
            if target_volatility == 0:
                return AllocationResult(
                    assets=(),
                    risk_free=RiskFreeAllocation(risk_free.name, total_amount, 100.0 if total_amount > 0 else 0.0),
                    basket=BasketMetrics(0.0, 0.0, 0.0),
                    target_volatility=0.0,
                    total_amount=total_amount,
                )
            raise UnachievableVolatility(
                f"Cannot achieve target volatility of {target_volatility * 100:g}% with no assets available."
            )

        rf = risk_free.interest_rate
        weights = sharpe_weights(sharpe_ratios(assets, rf))
        expected, vol, sharpe = basket_metrics(assets, weights, rf, correlation)

        if vol > 0:
            basket_weight = target_volatility / vol
        elif target_volatility == 0:
            basket_weight = 1.0 if expected > rf else 0.0
        else:
            raise UnachievableVolatility(
                f"Cannot achieve target volatility of {target_volatility * 100:g}% "
                "because the basket has zero volatility."
            )

        rf_weight = 1.0 - basket_weight
        to_basket = total_amount * basket_weight

        allocations = tuple(
            AssetAllocation(
                name=a.name,
                amount=to_basket * float(w),
                weight_in_basket=float(w) * 100,
                weight_in_total=float(w) * basket_weight * 100,
            )
            for a, w in zip(assets, weights)
        )
        return AllocationResult(
            assets=allocations,
            risk_free=RiskFreeAllocation(risk_free.name, total_amount * rf_weight, rf_weight * 100),
            basket=BasketMetrics(expected * 100, vol * 100, sharpe),
            target_volatility=target_volatility * 100,
            total_amount=total_amount,
        )

    def try_allocation(self, total_amount, assets, risk_free, target_volatility, correlation=None) -> AllocationOutcome:
        try:
            return AllocationOutcome(
                result=self.calculate_allocation(total_amount, assets, risk_free, target_volatility, correlation)
            )
        except AllocationError as e:
            return AllocationOutcome(error=e)


def calculate_allocation(total_amount, assets, risk_free, target_volatility, correlation=DEFAULT_CORRELATION):
    return AllocationEngine().calculate_allocation(total_amount, assets, risk_free, target_volatility, correlation)
