"""
Display locale and number formatting
====================================

Hover text must show exact values the way a reader of the report expects:

- counts and areas with thousands separators ("12.345 acres" in Spanish,
  "12,345 acres" in English),
- temperatures with one decimal ("23,4 °C" / "23.4 °C"),
- missing values as a dash instead of "nan".

Chart captions (titles, axis names, metric names) live here too so that the
renderer never hard-codes a language.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Optional

import math

MISSING = "–"


@dataclass(frozen=True)
class DisplayLocale:
    code: str
    thousands: str
    decimal: str
    texts: Dict[str, str]

    @property
    def plotly_separators(self) -> str:
        # plotly separators string: decimal mark first, then thousands mark
        return self.decimal + self.thousands

    def t(self, key: str) -> str:
        return self.texts.get(key, key)


_ES_TEXTS = {
    "n": "Incendios",
    "area": "Superficie quemada",
    "temp_mean": "Temperatura media",
    "year": "Año",
    "month": "Mes",
    "trend": "Tendencia lineal",
    "observed": "Observado",
    "acres": "acres",
    "by_year": "por año",
    "by_month": "por mes",
    "by_year_month": "por año y mes",
    "heatmap_grid": "por año y mes (mapa de calor)",
    "title_n": "Número de incendios",
    "title_area": "Superficie quemada",
    "title_temp_mean": "Temperatura media en el centroide",
}

_EN_TEXTS = {
    "n": "Fires",
    "area": "Burned area",
    "temp_mean": "Mean temperature",
    "year": "Year",
    "month": "Month",
    "trend": "Linear trend",
    "observed": "Observed",
    "acres": "acres",
    "by_year": "by year",
    "by_month": "by month",
    "by_year_month": "by year and month",
    "heatmap_grid": "by year and month (heatmap)",
    "title_n": "Number of fires",
    "title_area": "Burned area",
    "title_temp_mean": "Mean centroid temperature",
}

LOCALES: Dict[str, DisplayLocale] = {
    "es": DisplayLocale(code="es", thousands=".", decimal=",", texts=_ES_TEXTS),
    "en": DisplayLocale(code="en", thousands=",", decimal=".", texts=_EN_TEXTS),
}


def get_locale(code: str) -> DisplayLocale:
    try:
        return LOCALES[code]
    except KeyError:
        raise ValueError(f"Unsupported locale {code!r}. Choose one of {sorted(LOCALES)}") from None


def _is_missing(value) -> bool:
    if value is None:
        return True
    try:
        return math.isnan(float(value))
    except (TypeError, ValueError):
        return True


def format_number(value, decimals: int, loc: DisplayLocale, strip_zeros: bool = False) -> str:
    """Format with the locale's separators (built on Python's ',' grouping).

    With `strip_zeros`, trailing fractional zeros are dropped ("1,500.50" -> "1,500.5",
    "1,500.00" -> "1,500").
    """
    if _is_missing(value):
        return MISSING
    s = f"{float(value):,.{decimals}f}"
    if strip_zeros and "." in s:
        s = s.rstrip("0").rstrip(".")
    # swap through a placeholder so "," and "." can trade places
    return s.replace(",", "\0").replace(".", loc.decimal).replace("\0", loc.thousands)


def format_count(value, loc: DisplayLocale) -> str:
    return format_number(value, 0, loc)


def format_area(value, loc: DisplayLocale) -> str:
    # GIS_ACRES carries up to two decimals
    s = format_number(value, 2, loc, strip_zeros=True)
    return s if s == MISSING else f"{s} {loc.t('acres')}"


def format_temperature(value, loc: DisplayLocale) -> str:
    s = format_number(value, 1, loc)
    return s if s == MISSING else f"{s} °C"


FORMATTERS = {
    "n": format_count,
    "area": format_area,
    "temp_mean": format_temperature,
}


def format_metric(metric: str, value, loc: DisplayLocale) -> str:
    try:
        fmt = FORMATTERS[metric]
    except KeyError:
        raise ValueError(f"Unknown metric {metric!r}") from None
    return fmt(value, loc)


def metric_axis_title(metric: str, loc: DisplayLocale) -> str:
    name = loc.t(metric)
    unit: Optional[str] = {"area": loc.t("acres"), "temp_mean": "°C"}.get(metric)
    return f"{name} ({unit})" if unit else name
