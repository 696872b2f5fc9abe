"""
Aggregator
==========

Grouped reductions over the canonical fire frame:

- n          number of records in the group
- area       sum of burned acres over non-missing values (NaN if none)
- temp_mean  mean temperature over non-missing values (NaN if none)
- temp_n     number of non-missing temperature readings (used to
             re-aggregate means across groups without bias)

Missing values are never treated as zero. Records without an alarm date carry
NA year/month keys and fall out of every grouping here, but are otherwise left
in the frame.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd

from .models import AREA_COL, DATE_COL, METRICS, TEMP_COL

AGG_COLUMNS = ("n", "area", "temp_mean", "temp_n")


def add_temporal_keys(df: pd.DataFrame) -> pd.DataFrame:
    """Return a copy of `df` with nullable-integer `year` and `month` columns."""
    out = df.copy()
    dates = pd.to_datetime(out[DATE_COL], errors="coerce")
    out["year"] = dates.dt.year.astype("Int64")
    out["month"] = dates.dt.month.astype("Int64")
    return out


def _ensure_keys(df: pd.DataFrame) -> pd.DataFrame:
    if "year" in df.columns and "month" in df.columns:
        return df
    return add_temporal_keys(df)


def _reduce(df: pd.DataFrame, keys: List[str]) -> pd.DataFrame:
    g = df.groupby(keys, sort=True, observed=True)
    out = pd.DataFrame({
        "n": g.size(),
        "area": g[AREA_COL].sum(min_count=1),
        "temp_mean": g[TEMP_COL].mean(),
        "temp_n": g[TEMP_COL].count(),
    }).reset_index()
    for k in keys:
        if str(out[k].dtype) == "Int64":
            out[k] = out[k].astype(int)
    out["n"] = out["n"].astype(int)
    out["temp_n"] = out["temp_n"].astype(int)
    return out


def yearly(df: pd.DataFrame) -> pd.DataFrame:
    """One row per year (ascending): year, n, area, temp_mean, temp_n."""
    return _reduce(_ensure_keys(df), ["year"])


def monthly(df: pd.DataFrame, *, complete: bool = False) -> pd.DataFrame:
    """One row per (year, month) pair present in the data.

    With `complete=True` every year gets all twelve months; empty months have
    n == 0 and missing area/temperature.
    """
    out = _reduce(_ensure_keys(df), ["year", "month"])
    if not complete or out.empty:
        return out
    full = pd.MultiIndex.from_product(
        [sorted(out["year"].unique()), range(1, 13)], names=["year", "month"]
    )
    out = out.set_index(["year", "month"]).reindex(full).reset_index()
    out["n"] = out["n"].fillna(0).astype(int)
    out["temp_n"] = out["temp_n"].fillna(0).astype(int)
    return out


def month_totals(df: pd.DataFrame) -> pd.DataFrame:
    """One row per calendar month, across all years."""
    return _reduce(_ensure_keys(df), ["month"])


def month_totals_from_monthly(table: pd.DataFrame) -> pd.DataFrame:
    """Collapse a (year, month) table into month totals.

    Counts and areas add up; the mean temperature is weighted by each group's
    number of readings so the result equals `month_totals` on the raw frame.
    """
    t = table.copy()
    t["_temp_sum"] = t["temp_mean"] * t["temp_n"]
    g = t.groupby("month", sort=True, observed=True)
    out = pd.DataFrame({
        "n": g["n"].sum(),
        "area": g["area"].sum(min_count=1),
        "temp_n": g["temp_n"].sum(),
        "_temp_sum": g["_temp_sum"].sum(min_count=1),
    }).reset_index()
    out["temp_mean"] = out["_temp_sum"].where(out["temp_n"] > 0) / out["temp_n"].where(out["temp_n"] > 0)
    out["n"] = out["n"].astype(int)
    out["temp_n"] = out["temp_n"].astype(int)
    return out[["month", *AGG_COLUMNS]]


def year_month_grid(table: pd.DataFrame, metric: str) -> pd.DataFrame:
    """Pivot a monthly table into a year x month grid of `metric` (NaN for absent pairs)."""
    if metric not in METRICS:
        raise ValueError(f"Unknown metric {metric!r}. Choose one of {METRICS}")
    grid = table.pivot(index="year", columns="month", values=metric)
    return grid.sort_index()


# -----------------------------
# Trend line
# -----------------------------

@dataclass(frozen=True)
class LinearFit:
    """Ordinary least squares line y = intercept + slope * (x - origin)."""
    slope: float
    intercept: float
    origin: float = 0.0

    def at(self, x):
        return self.intercept + self.slope * (np.asarray(x, dtype=float) - self.origin)


def linear_fit(x: Sequence[float], y: Sequence[float], origin: Optional[float] = None) -> LinearFit:
    """Fit y on x by least squares, ignoring pairs where either value is missing.

    `origin` defaults to the smallest x, so `intercept` is the fitted value at
    the first year. Fewer than two usable points (or a single distinct x) give
    NaN slope and intercept.
    """
    xs = np.asarray(x, dtype=float)
    ys = np.asarray(y, dtype=float)
    ok = np.isfinite(xs) & np.isfinite(ys)
    xs, ys = xs[ok], ys[ok]
    if origin is None:
        origin = float(xs.min()) if xs.size else 0.0
    if xs.size < 2 or np.unique(xs).size < 2:
        return LinearFit(float("nan"), float("nan"), origin)
    slope, intercept = np.polyfit(xs - origin, ys, deg=1)
    return LinearFit(float(slope), float(intercept), origin)
