"""
Dataset loader (CSV -> canonical fire frame)
============================================

This module reads a fire history export (CAL FIRE perimeters joined with a
centroid temperature) and converts it into the canonical frame described in
`cafire.models`.

Key ideas:
- We try multiple possible column names because exports vary between years.
- Malformed cells never abort the load: unparseable dates become NaT and
  unparseable numbers become NaN.
- Rows without a parseable alarm date are dropped by default, and the number
  dropped is logged. Pass `drop_undated=False` to keep them.
- The loader never writes to the input file.
"""

from __future__ import annotations
import logging
import os
import re
from typing import Optional, Sequence, Tuple

import pandas as pd

from .errors import DatasetError, SchemaError
from .models import AREA_COL, DATE_COL, NAME_COL, TEMP_COL

logger = logging.getLogger(__name__)

DATE_ALIASES = ("ALARM_DATE", "alarm_date", "Alarm Date", "alarm", "date")
AREA_ALIASES = ("GIS_ACRES", "gis_acres", "acres", "burned_area", "area_acres", "area")
TEMP_ALIASES = ("temp_centroid", "temperature", "temp_c", "temp", "t2m_c")
NAME_ALIASES = ("FIRE_NAME", "fire_name", "name")

EXCEL_SUFFIXES = (".xlsx", ".xls")

# offset-aware alarm dates are converted to California wall-clock time
LOCAL_TZ = "America/Los_Angeles"


def _norm(s: str) -> str:
    return re.sub(r"[^a-z0-9]+", "", str(s).lower())


def _col(df: pd.DataFrame, *names: str) -> str:
    cols = list(df.columns)
    for n in names:
        if n in cols:
            return n
    norm_map = {_norm(c): c for c in cols}
    for n in names:
        nn = _norm(n)
        if nn in norm_map:
            return norm_map[nn]
    raise KeyError(f"Missing required column. Tried={names}. Available={cols}")


def _optional_col(df: pd.DataFrame, *names: str) -> Optional[str]:
    try:
        return _col(df, *names)
    except KeyError:
        return None


def _read_table(path: str) -> pd.DataFrame:
    if not os.path.exists(path):
        raise DatasetError(path, "file does not exist")
    try:
        if path.lower().endswith(EXCEL_SUFFIXES):
            df = pd.read_excel(path, engine="openpyxl")
        elif path.lower().endswith(".tsv"):
            df = pd.read_csv(path, sep="\t")
        else:
            df = pd.read_csv(path)
    except pd.errors.EmptyDataError as e:
        raise DatasetError(path, "file is empty") from e
    except (OSError, ValueError, pd.errors.ParserError) as e:
        raise DatasetError(path, str(e)) from e
    df.rename(columns={c: str(c).strip() for c in df.columns}, inplace=True)
    return df


def load_fires_csv(
    path: str,
    *,
    date_column: Optional[str] = None,
    area_column: Optional[str] = None,
    temperature_column: Optional[str] = None,
    drop_undated: bool = True,
    years: Optional[Tuple[int, int]] = None,
) -> pd.DataFrame:
    """
    Load a fire history file into the canonical frame.

    Explicit column names take precedence over the alias lists. `years` is an
    inclusive (first, last) range on the alarm year; undated rows never pass a
    year filter.
    """
    path = os.fspath(path)
    raw = _read_table(path)
    if raw.empty:
        raise DatasetError(path, "file has a header but no rows")

    try:
        date_col = _col(raw, *_aliases(date_column, DATE_ALIASES))
        area_col = _col(raw, *_aliases(area_column, AREA_ALIASES))
        temp_col = _col(raw, *_aliases(temperature_column, TEMP_ALIASES))
    except KeyError as e:
        raise SchemaError(path, e.args[0]) from e
    name_col = _optional_col(raw, *NAME_ALIASES)

    df = pd.DataFrame({
        DATE_COL: _to_dates(raw[date_col]),
        AREA_COL: pd.to_numeric(raw[area_col], errors="coerce").astype(float),
        TEMP_COL: pd.to_numeric(raw[temp_col], errors="coerce").astype(float),
        NAME_COL: raw[name_col].fillna("").astype(str).str.strip() if name_col else "",
    })
    # keep the unused columns around for anyone who wants them
    used = {date_col, area_col, temp_col, name_col}
    for c in raw.columns:
        if c not in used and c not in df.columns:
            df[c] = raw[c]

    logger.debug("Read %d rows from %s (date=%s, area=%s, temperature=%s)",
                 len(df), path, date_col, area_col, temp_col)

    undated = int(df[DATE_COL].isna().sum())
    if undated and drop_undated:
        logger.warning("Dropping %d of %d rows without a parseable alarm date (%s)",
                       undated, len(df), os.path.basename(path))
        df = df[df[DATE_COL].notna()]

    if years is not None:
        first, last = years
        if first > last:
            raise ValueError(f"Invalid year range: {first} > {last}")
        alarm_year = df[DATE_COL].dt.year
        df = df[alarm_year.between(first, last)]
        logger.debug("Kept %d rows in %d-%d", len(df), first, last)

    return df.reset_index(drop=True)


def _aliases(explicit: Optional[str], defaults: Sequence[str]) -> Sequence[str]:
    return (explicit,) if explicit else defaults


def _to_dates(col: pd.Series) -> pd.Series:
    """Parse alarm dates, turning anything unparseable into NaT."""
    if pd.api.types.is_datetime64_any_dtype(col):
        out = col
    else:
        try:
            out = pd.to_datetime(col, errors="coerce", format="mixed")
        except ValueError:
            out = None
        if out is None or not pd.api.types.is_datetime64_any_dtype(out):
            # mixed UTC offsets (-08:00 / -07:00 across daylight saving) only parse as UTC
            out = pd.to_datetime(col, errors="coerce", format="mixed", utc=True)
    if getattr(out.dt, "tz", None) is not None:
        out = out.dt.tz_convert(LOCAL_TZ).dt.tz_localize(None)
    return out
