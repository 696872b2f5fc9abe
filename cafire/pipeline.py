"""
Report pipeline
===============

One report is a strictly sequential run:

1) Loader      file -> canonical frame
2) Extractor   alarm_date -> year, month
3) Aggregator  yearly / monthly / month totals
4) Normalizer  month numbers -> ordered localized categorical
5) Renderer    one chart per (grouping x metric)

Nothing here is shared between reports; `run_pipeline` builds everything from
the input file each time.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional
import logging
import os

import pandas as pd
import plotly.graph_objects as go

from . import aggregate, charts
from .config import ReportConfig
from .loader import load_fires_csv
from .models import AREA_COL, DATE_COL, METRICS, TEMP_COL
from .months import normalize_months

logger = logging.getLogger(__name__)

# kind -> (table attribute on FireReport, figure builder, grouping caption key)
VIEWS: Dict[str, tuple] = {
    "trend": ("yearly", charts.trend_chart, "by_year"),
    "month_bar": ("month_totals", charts.month_bar_chart, "by_month"),
    "grouped_month": ("monthly", charts.grouped_month_chart, "by_year_month"),
    "heatmap": ("monthly", charts.heatmap_chart, "heatmap_grid"),
}


@dataclass
class ChartSpec:
    """One rendered chart plus what it was rendered from."""
    key: str
    kind: str
    metric: str
    title: str
    table: pd.DataFrame
    figure: go.Figure


@dataclass
class FireReport:
    """Everything a report document needs, computed from one input file."""
    config: ReportConfig
    source_path: str
    frame: pd.DataFrame
    yearly: pd.DataFrame
    monthly: pd.DataFrame
    month_totals: pd.DataFrame
    charts: List[ChartSpec] = field(default_factory=list)

    @property
    def record_count(self) -> int:
        return len(self.frame)

    def completeness(self) -> Dict[str, Dict[str, int]]:
        """Available/missing counts for the three source fields."""
        out: Dict[str, Dict[str, int]] = {}
        for col in (DATE_COL, AREA_COL, TEMP_COL):
            missing = int(self.frame[col].isna().sum())
            out[col] = {"available": len(self.frame) - missing, "missing": missing}
        return out

    def chart(self, key: str) -> ChartSpec:
        for c in self.charts:
            if c.key == key:
                return c
        raise KeyError(key)


def chart_kinds(config: ReportConfig) -> List[str]:
    kinds = ["trend", "month_bar", "grouped_month"]
    if config.heatmaps:
        kinds.append("heatmap")
    return kinds


def aggregate_frame(frame: pd.DataFrame, locale: str) -> Dict[str, pd.DataFrame]:
    """Stages 2-4: temporal keys, aggregates, month relabeling."""
    keyed = aggregate.add_temporal_keys(frame)
    return {
        "yearly": aggregate.yearly(keyed),
        "monthly": normalize_months(aggregate.monthly(keyed), locale),
        "month_totals": normalize_months(aggregate.month_totals(keyed), locale),
    }


def render_charts(report: FireReport, kinds: Optional[List[str]] = None,
                  metrics=METRICS) -> List[ChartSpec]:
    """Stage 5: one chart per (view x metric)."""
    locale = report.config.locale
    out: List[ChartSpec] = []
    for kind in kinds or chart_kinds(report.config):
        attr, builder, grouping = VIEWS[kind]
        table: pd.DataFrame = getattr(report, attr)
        for metric in metrics:
            if table.empty:
                logger.info("Skipping %s/%s: no dated records", kind, metric)
                continue
            fig = builder(table, metric, locale)
            out.append(ChartSpec(
                key=f"{kind}_{metric}",
                kind=kind,
                metric=metric,
                title=charts.chart_title(metric, grouping, locale),
                table=table,
                figure=fig,
            ))
    return out


def run_pipeline(path: str, config: Optional[ReportConfig] = None) -> FireReport:
    """Load `path` and compute every aggregate and chart of one report."""
    config = config or ReportConfig()
    logger.info("Loading %s", path)
    frame = load_fires_csv(path, drop_undated=config.drop_undated, years=config.years)
    logger.info("Loaded %d fire records (%s)", len(frame), config.year_label())

    tables = aggregate_frame(frame, config.locale)
    if config.citation.file_name is None:
        config = replace(config, citation=replace(config.citation, file_name=os.path.basename(path)))

    report = FireReport(config=config, source_path=os.fspath(path), frame=frame, **tables)
    report.charts = render_charts(report)
    logger.info("Rendered %d charts", len(report.charts))
    return report
