"""
Report configuration
====================

`ReportConfig` holds the knobs for one report. Three named variants cover the
year ranges the reports are produced for; a YAML file can override any field:

    report:
      variant: 2016-2025
      title: Incendios en California
      locale: es
      years: [2016, 2025]
      heatmaps: true
      citation:
        file_name: fires_2016_2025.csv
"""

from __future__ import annotations
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, Optional, Tuple

import yaml

from .errors import ConfigError
from .formatting import LOCALES


@dataclass
class DatasetCitation:
    """Minimal dataset citation metadata for the report."""
    database_name: str = "California Fire Perimeters (ALL)"
    institutional_author: str = "CAL FIRE Fire and Resource Assessment Program (FRAP)"
    location: str = "Sacramento, California"
    website: str = "https://www.fire.ca.gov/what-we-do/fire-resource-assessment-program"
    temperature_source: str = "ERA5 hourly reanalysis (2 m temperature at the fire centroid)"
    file_name: Optional[str] = None


@dataclass
class ReportConfig:
    """High-level knobs to control how the report is written."""
    title: str = "Incendios forestales en California"
    subtitle: str = "Análisis exploratorio de datos"
    locale: str = "es"
    variant: Optional[str] = None
    # inclusive (first, last) alarm year; None keeps every year
    years: Optional[Tuple[int, int]] = None
    # year x month heatmaps are only produced when True
    heatmaps: bool = False
    # rows without a parseable alarm date are dropped when True
    drop_undated: bool = True
    citation: DatasetCitation = field(default_factory=DatasetCitation)
    # rows of each aggregate table shown in DOCX reports
    max_rows_preview: int = 30

    def year_label(self) -> str:
        if self.years is None:
            return "todos los años" if self.locale == "es" else "all years"
        return f"{self.years[0]}–{self.years[1]}"


VARIANTS: Dict[str, Dict[str, Any]] = {
    "1998-2024": dict(years=(1998, 2024)),
    "1980-2024": dict(years=(1980, 2024)),
    "2016-2025": dict(years=(2016, 2025), heatmaps=True),
}


def variant_config(name: str, **overrides: Any) -> ReportConfig:
    """Build the preset for a named variant, with field overrides applied."""
    try:
        preset = VARIANTS[name]
    except KeyError:
        raise ConfigError(f"Unknown variant {name!r}. Choose one of {sorted(VARIANTS)}") from None
    cfg = ReportConfig(variant=name, **preset)
    cfg.title = f"{cfg.title} ({cfg.year_label()})"
    return _apply(cfg, overrides)


def _year_range(ys: Any) -> Tuple[int, int]:
    """Validate a [first, last] pair of integer years."""
    if isinstance(ys, (str, bytes)) or not isinstance(ys, (list, tuple)) or len(ys) != 2:
        raise ConfigError(f"years must be [first, last], got {ys!r}")
    try:
        first, last = (int(y) for y in ys)
    except (TypeError, ValueError):
        raise ConfigError(f"years must be integers, got {ys!r}") from None
    if isinstance(ys[0], bool) or isinstance(ys[1], bool) or first > last:
        raise ConfigError(f"years must be [first, last], got {ys!r}")
    return first, last


def _apply(cfg: ReportConfig, overrides: Dict[str, Any]) -> ReportConfig:
    known = {f.name for f in fields(ReportConfig)}
    unknown = set(overrides) - known
    if unknown:
        raise ConfigError(f"Unknown report settings: {sorted(unknown)}")
    values = dict(overrides)
    if "citation" in values and isinstance(values["citation"], dict):
        try:
            values["citation"] = replace(cfg.citation, **values["citation"])
        except TypeError as e:
            raise ConfigError(f"Bad citation settings: {e}") from e
    if values.get("years") is not None:
        values["years"] = _year_range(values["years"])
    out = replace(cfg, **values)
    if out.locale not in LOCALES:
        raise ConfigError(f"Unsupported locale {out.locale!r}. Choose one of {sorted(LOCALES)}")
    return out


def load_config(path: str, **overrides: Any) -> ReportConfig:
    """Read a YAML file with a top-level `report:` mapping.

    Command-line overrides win over the file; a `variant` key in either picks
    the preset the rest is applied on top of.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigError(f"Cannot read config file '{path}': {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in '{path}': {e}") from e

    section = raw.get("report", {}) if isinstance(raw, dict) else None
    if not isinstance(section, dict):
        raise ConfigError(f"'{path}' must contain a 'report:' mapping")

    settings = {**section, **{k: v for k, v in overrides.items() if v is not None}}
    variant = settings.pop("variant", None)
    if variant:
        return variant_config(str(variant), **settings)
    return _apply(ReportConfig(), settings)


def build_config(variant: Optional[str] = None, config_path: Optional[str] = None,
                 **overrides: Any) -> ReportConfig:
    """Resolve a ReportConfig from CLI-style inputs (file, variant, overrides)."""
    if config_path:
        return load_config(config_path, variant=variant, **overrides)
    clean = {k: v for k, v in overrides.items() if v is not None}
    if variant:
        return variant_config(variant, **clean)
    return _apply(ReportConfig(), clean)
