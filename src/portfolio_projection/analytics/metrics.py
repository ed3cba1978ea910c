import numpy as np
import pandas as pd


def history_to_frame(history):
    """One row per month: asset columns, then risk_free, total, capital."""
    rows = []
    for st in history:
        row = dict(st.asset_values)
        row["risk_free"] = st.risk_free
        row["total"] = st.total
        row["capital"] = st.capital
        rows.append(row)
    index = pd.Index([st.month for st in history], name="month")
    return pd.DataFrame(rows, index=index)


def cagr(balances, months: int):
    balances = np.atleast_2d(balances)
    if months == 0:
        return np.full(balances.shape[0], np.nan)
    end = balances[:, -1]
    start = balances[:, 0]
    years = months / 12.0
    with np.errstate(divide='ignore', invalid='ignore'):
        return np.where((start > 0) & (end >= 0), (end / start) ** (1/years) - 1.0, np.nan)


def mwrr_irr(history):
    """Annualized money-weighted return of one simulated history."""
    import numpy_financial as npf
    first, last = history[0], history[-1]
    if len(history) < 2:
        return np.nan
    deposits = np.diff([st.capital for st in history])
    series = [-first.capital] + (-deposits[:-1]).tolist() + [last.total - deposits[-1]]
    irr = npf.irr(series)
    return irr * 12.0 if np.isfinite(irr) else np.nan


def max_drawdown(paths):
    paths = np.atleast_2d(paths)
    mdds = np.zeros(paths.shape[0])
    for s in range(paths.shape[0]):
        x = paths[s]
        peak = np.maximum.accumulate(x)
        with np.errstate(divide='ignore', invalid='ignore'):
            dd = np.where(peak > 0, (x - peak) / peak, 0.0)
        mdds[s] = dd.min()
    return mdds


def percentile_bands(balances, percentiles=(10, 50, 90)):
    """Per-month percentiles of the total across paths."""
    balances = np.atleast_2d(balances)
    bands = np.percentile(balances, percentiles, axis=0)
    return pd.DataFrame(
        bands.T,
        index=pd.Index(range(balances.shape[1]), name="month"),
        columns=[f"p{p}" for p in percentiles],
    )
