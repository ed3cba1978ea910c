import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

MONTHS_PER_YEAR = 12
DEFAULT_CORRELATION = 0.6
CLIP_SIGMA = 3.5  # max |z| for a single monthly shock


@dataclass(frozen=True)
class Asset:
    name: str
    expected_return: float  # annual geometric mean, decimal
    volatility: float       # annual, decimal, > 0

    def monthly_return(self):
        return self.expected_return / MONTHS_PER_YEAR

    def monthly_volatility(self):
        return self.volatility / math.sqrt(MONTHS_PER_YEAR)


@dataclass(frozen=True)
class RiskFreeAccount:
    name: str
    interest_rate: float  # annual, decimal

    def monthly_rate(self):
        return self.interest_rate / MONTHS_PER_YEAR


@dataclass(frozen=True)
class RateBounds:
    min_rate: float = 0.01
    max_rate: float = 0.076

    def contains(self, rate: float) -> bool:
        return self.min_rate <= rate <= self.max_rate


class ScenarioMode(str, Enum):
    BEST = "BEST"
    AVERAGE = "AVERAGE"
    WORST = "WORST"


@dataclass(frozen=True)
class ScenarioProfile:
    return_multiplier: float = 1.0
    return_bias: float = 0.0        # added to the monthly mean
    vol_multiplier: float = 1.0
    one_sided_shock: bool = False   # True => shock is |z|


SCENARIOS = {
    ScenarioMode.BEST: ScenarioProfile(return_multiplier=1.5, vol_multiplier=0.6, one_sided_shock=True),
    ScenarioMode.AVERAGE: ScenarioProfile(),
    ScenarioMode.WORST: ScenarioProfile(return_multiplier=0.3, return_bias=-0.0075, vol_multiplier=1.25),
}


@dataclass(frozen=True)
class SimConfig:
    duration_months: int
    initial_investment: float = 0.0
    monthly_deposit: float = 0.0
    target_volatility: float = 0.0
    correlation: float = DEFAULT_CORRELATION
    scenario: ScenarioMode = ScenarioMode.AVERAGE
    n_sims: int = 1
    seed: Optional[int] = 42

    def __post_init__(self):
        if self.duration_months < 0:
            raise ValueError("duration_months must be non-negative")
        if self.n_sims < 1:
            raise ValueError("n_sims must be at least 1")
