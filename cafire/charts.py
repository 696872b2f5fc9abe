"""
Renderer (aggregate table -> interactive plotly figure)
=======================================================

Every function here is a pure function of one aggregate table: it builds a
new `plotly.graph_objects.Figure` and never touches shared state, so charts
in the same report are independent.

Views:
- trend_chart          metric vs. year, with an OLS trend line (no band)
- month_bar_chart      metric vs. month, one bar per calendar month
- grouped_month_chart  metric vs. month, one bar per year inside each month
- heatmap_chart        year x month grid, higher values more intense

Month views expect the `month` column to be normalized already
(see `cafire.months.normalize_months`).

Hover text is preformatted in Python (see `cafire.formatting`) and passed as
customdata, so the exact separators and units do not depend on plotly's
d3-format support for the display locale.
"""

from __future__ import annotations
from typing import List

import numpy as np
import pandas as pd
import plotly.graph_objects as go
from plotly.colors import sample_colorscale

from .aggregate import linear_fit, year_month_grid
from .formatting import format_metric, get_locale, metric_axis_title
from .models import METRICS
from .months import calendar_labels

SEQUENTIAL_SCALE = "YlOrRd"
HEATMAP_SCALE = "Inferno"
LINE_COLOR = "#b2182b"
TREND_COLOR = "#2166ac"
BAR_COLOR = "#d6604d"


def _check_metric(table: pd.DataFrame, metric: str) -> None:
    if metric not in METRICS:
        raise ValueError(f"Unknown metric {metric!r}. Choose one of {METRICS}")
    if metric not in table.columns:
        raise ValueError(f"Aggregate table has no {metric!r} column")


def _base_layout(fig: go.Figure, title: str, xaxis: str, yaxis: str, locale: str) -> go.Figure:
    loc = get_locale(locale)
    fig.update_layout(
        title=title,
        template="plotly_white",
        separators=loc.plotly_separators,
        xaxis_title=xaxis,
        yaxis_title=yaxis,
        hovermode="closest",
        margin=dict(l=60, r=20, t=60, b=50),
        meta={"locale": loc.code},
    )
    return fig


def _hover(metric: str, values, locale: str) -> List[str]:
    loc = get_locale(locale)
    return [format_metric(metric, v, loc) for v in values]


def chart_title(metric: str, grouping: str, locale: str) -> str:
    loc = get_locale(locale)
    return f"{loc.t('title_' + metric)} {loc.t(grouping)}"


def trend_chart(table: pd.DataFrame, metric: str, locale: str = "es") -> go.Figure:
    """Metric vs. year (ordered by year) plus the least-squares trend line."""
    _check_metric(table, metric)
    loc = get_locale(locale)
    t = table.sort_values("year")
    years = t["year"].astype(int).to_numpy()
    values = t[metric].astype(float).to_numpy()

    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=years, y=values, mode="lines+markers", name=loc.t("observed"),
        line=dict(color=LINE_COLOR, width=2),
        customdata=_hover(metric, values, locale),
        hovertemplate=f"{loc.t('year')}: %{{x}}<br>{loc.t(metric)}: %{{customdata}}<extra></extra>",
    ))

    fit = linear_fit(years, values)
    if np.isfinite(fit.slope):
        fitted = fit.at(years)
        fig.add_trace(go.Scatter(
            x=years, y=fitted, mode="lines", name=loc.t("trend"),
            line=dict(color=TREND_COLOR, dash="dash"),
            customdata=_hover(metric, fitted, locale),
            hovertemplate=f"{loc.t('trend')} %{{x}}: %{{customdata}}<extra></extra>",
        ))

    fig.update_xaxes(dtick=1 if len(years) <= 12 else 5, tickformat="d")
    return _base_layout(fig, chart_title(metric, "by_year", locale), loc.t("year"),
                        metric_axis_title(metric, loc), locale)


def month_bar_chart(table: pd.DataFrame, metric: str, locale: str = "es") -> go.Figure:
    """One bar per calendar month (January first) from a month-totals table."""
    _check_metric(table, metric)
    loc = get_locale(locale)
    t = table.sort_values("month")
    months = [str(m) for m in t["month"]]
    values = t[metric].astype(float).to_numpy()

    fig = go.Figure(go.Bar(
        x=months, y=values, name=loc.t(metric), marker_color=BAR_COLOR,
        customdata=_hover(metric, values, locale),
        hovertemplate=f"{loc.t('month')}: %{{x}}<br>{loc.t(metric)}: %{{customdata}}<extra></extra>",
    ))
    fig.update_xaxes(categoryorder="array", categoryarray=calendar_labels(locale))
    return _base_layout(fig, chart_title(metric, "by_month", locale), loc.t("month"),
                        metric_axis_title(metric, loc), locale)


def grouped_month_chart(table: pd.DataFrame, metric: str, locale: str = "es") -> go.Figure:
    """Months on x, one adjacent bar per year, colored along a sequential ramp."""
    _check_metric(table, metric)
    loc = get_locale(locale)
    years = sorted(int(y) for y in table["year"].unique())
    if len(years) > 1:
        positions = [i / (len(years) - 1) for i in range(len(years))]
    else:
        positions = [1.0]
    # skip the palest end of the ramp, it disappears on a white background
    colors = sample_colorscale(SEQUENTIAL_SCALE, [0.2 + 0.8 * p for p in positions])

    fig = go.Figure()
    for year, color in zip(years, colors):
        t = table[table["year"] == year].sort_values("month")
        values = t[metric].astype(float).to_numpy()
        fig.add_trace(go.Bar(
            x=[str(m) for m in t["month"]], y=values, name=str(year), marker_color=color,
            customdata=_hover(metric, values, locale),
            hovertemplate=(f"{loc.t('year')}: {year}<br>{loc.t('month')}: %{{x}}<br>"
                           f"{loc.t(metric)}: %{{customdata}}<extra></extra>"),
        ))
    fig.update_layout(barmode="group", legend_title_text=loc.t("year"))
    fig.update_xaxes(categoryorder="array", categoryarray=calendar_labels(locale))
    return _base_layout(fig, chart_title(metric, "by_year_month", locale), loc.t("month"),
                        metric_axis_title(metric, loc), locale)


def heatmap_chart(table: pd.DataFrame, metric: str, locale: str = "es") -> go.Figure:
    """Year x month grid; absent (year, month) pairs stay blank."""
    _check_metric(table, metric)
    loc = get_locale(locale)
    grid = year_month_grid(table, metric)
    labels = calendar_labels(locale)
    # columns may be month numbers or normalized labels; keep calendar order either way
    cols = [c for c in labels if c in grid.columns] or sorted(grid.columns)
    grid = grid.reindex(columns=cols)

    z = grid.to_numpy(dtype=float)
    text = [[format_metric(metric, v, loc) for v in row] for row in z]
    fig = go.Figure(go.Heatmap(
        z=z, x=[str(c) for c in cols], y=[int(y) for y in grid.index],
        colorscale=HEATMAP_SCALE, reversescale=True,
        colorbar=dict(title=metric_axis_title(metric, loc)),
        customdata=text, hoverongaps=False,
        hovertemplate=(f"{loc.t('year')}: %{{y}}<br>{loc.t('month')}: %{{x}}<br>"
                       f"{loc.t(metric)}: %{{customdata}}<extra></extra>"),
    ))
    fig.update_yaxes(tickformat="d", autorange="reversed")
    return _base_layout(fig, chart_title(metric, "heatmap_grid", locale), loc.t("month"),
                        loc.t("year"), locale)
