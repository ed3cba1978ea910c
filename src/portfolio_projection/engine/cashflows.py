import numpy as np


def build_deposit_vector(monthly_deposit: float, horizon_m: int):
    """Return a (horizon_m,) vector of end-of-month deposits for months 1..horizon_m."""
    return np.full(int(horizon_m), float(monthly_deposit), dtype=float)


def cumulative_capital(initial: float, monthly_deposit: float, horizon_m: int):
    """Capital contributed by the end of each month, months 0..horizon_m.

    Computed as initial + m * deposit rather than a running sum so the
    figure for month m does not drift with repeated float addition.
    """
    months = np.arange(int(horizon_m) + 1, dtype=float)
    return float(initial) + months * float(monthly_deposit)
