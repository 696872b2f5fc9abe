"""
Data model (FireRecord)
=======================

Each row of a fire history file is one `FireRecord`. Records are immutable
(`frozen=True`): aggregates are always recomputed from the full record set,
never patched in place.

Most of CAFIRE works on a pandas DataFrame (the "canonical frame") rather than
on lists of records, because grouping and reductions are one call away. The
record type is the row contract for that frame and a convenient way to build
small datasets by hand.

Canonical frame columns:

    alarm_date   datetime64[ns]  (NaT when missing)
    gis_acres    float           (NaN when missing)
    temperature  float           (NaN when missing)
    fire_name    object          (optional)

Aggregate tables produced by `cafire.aggregate`:

    yearly        year, n, area, temp_mean, temp_n
    monthly       year, month, n, area, temp_mean, temp_n
    month totals  month, n, area, temp_mean, temp_n
"""

from __future__ import annotations
from dataclasses import dataclass, asdict
from datetime import date
from typing import Iterable, Optional

import pandas as pd

DATE_COL = "alarm_date"
AREA_COL = "gis_acres"
TEMP_COL = "temperature"
NAME_COL = "fire_name"

CANONICAL_COLUMNS = (DATE_COL, AREA_COL, TEMP_COL, NAME_COL)

# Aggregate metric columns, in display order
METRICS = ("n", "area", "temp_mean")


@dataclass(frozen=True)
class FireRecord:
    """One fire incident."""
    alarm_date: Optional[date]
    gis_acres: Optional[float] = None
    # degrees Celsius at the fire centroid at alarm time
    temperature: Optional[float] = None
    fire_name: str = ""

    @property
    def year(self) -> Optional[int]:
        return self.alarm_date.year if self.alarm_date is not None else None

    @property
    def month(self) -> Optional[int]:
        return self.alarm_date.month if self.alarm_date is not None else None


def records_to_frame(records: Iterable[FireRecord]) -> pd.DataFrame:
    """Build the canonical frame from records (missing values become NaN/NaT)."""
    rows = [asdict(r) for r in records]
    df = pd.DataFrame(rows, columns=list(CANONICAL_COLUMNS))
    df[DATE_COL] = pd.to_datetime(df[DATE_COL], errors="coerce")
    df[AREA_COL] = pd.to_numeric(df[AREA_COL], errors="coerce").astype(float)
    df[TEMP_COL] = pd.to_numeric(df[TEMP_COL], errors="coerce").astype(float)
    df[NAME_COL] = df[NAME_COL].fillna("").astype(str)
    return df
