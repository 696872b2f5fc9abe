"""
Month normalizer
================

The date library hands us months as numbers (1..12) or English names. Charts
need them as an *ordered* categorical with localized labels, so that sorting
always gives January..December no matter how the labels sort alphabetically
("Abr" < "Ago" < "Dic" < "Ene" in Spanish would be nonsense on an axis).
"""

from __future__ import annotations
from typing import Dict, List, Tuple

import pandas as pd

MONTH_KEYS: Tuple[str, ...] = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

MONTH_LABELS: Dict[str, Tuple[str, ...]] = {
    "es": ("Ene", "Feb", "Mar", "Abr", "May", "Jun",
           "Jul", "Ago", "Sep", "Oct", "Nov", "Dic"),
    "en": MONTH_KEYS,
}

_FULL_NAMES = (
    "january", "february", "march", "april", "may", "june",
    "july", "august", "september", "october", "november", "december",
)


def labels_for(locale: str) -> Tuple[str, ...]:
    try:
        return MONTH_LABELS[locale]
    except KeyError:
        raise ValueError(f"Unsupported locale {locale!r}. Choose one of {sorted(MONTH_LABELS)}") from None


def month_dtype(locale: str = "es") -> pd.CategoricalDtype:
    """Ordered categorical of the 12 localized labels in calendar order."""
    return pd.CategoricalDtype(categories=list(labels_for(locale)), ordered=True)


def month_label(number: int, locale: str = "es") -> str:
    if not 1 <= int(number) <= 12:
        raise ValueError(f"Month number out of range: {number}")
    return labels_for(locale)[int(number) - 1]


def month_number(value) -> int:
    """Map a month number, English abbreviation/name or localized label to 1..12."""
    if isinstance(value, str):
        v = value.strip().lower()
        for n, name in enumerate(_FULL_NAMES, start=1):
            if v == name or v == name[:3]:
                return n
        for labels in MONTH_LABELS.values():
            for n, label in enumerate(labels, start=1):
                if v == label.lower():
                    return n
        if v.isdigit():
            value = int(v)
        else:
            raise ValueError(f"Unknown month value: {value!r}")
    n = int(value)
    if not 1 <= n <= 12:
        raise ValueError(f"Month number out of range: {value!r}")
    return n


def normalize_months(df: pd.DataFrame, locale: str = "es", column: str = "month") -> pd.DataFrame:
    """Return a copy of `df` whose `column` is the ordered localized month categorical.

    Every input value must map to exactly one of the twelve months; anything
    else raises ValueError instead of silently becoming NaN.
    """
    labels = labels_for(locale)
    out = df.copy()
    col = out[column]
    if isinstance(col.dtype, pd.CategoricalDtype):
        col = col.astype(object)
    numbers = [month_number(v) for v in col]
    out[column] = pd.Categorical([labels[n - 1] for n in numbers], dtype=month_dtype(locale))
    return out


def calendar_labels(locale: str = "es") -> List[str]:
    return list(labels_for(locale))
