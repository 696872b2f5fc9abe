"""
CAFIRE report writers
---------------------
This module turns a `FireReport` (see `cafire.pipeline`) into a document.

Two formats:
- HTML: the interactive plotly charts, embedded with plotly.js so the file
  works offline.
- DOCX: static matplotlib renders of the same views plus the aggregate
  tables, for readers who need a printable document.

It also exports aggregate tables to CSV/JSON.

Report dependencies (python-docx, matplotlib) are imported lazily so the rest
of CAFIRE works without them.
"""

from __future__ import annotations

from typing import List, Optional, Tuple
from datetime import datetime
import html
import logging
import os
import tempfile

import pandas as pd

from .formatting import format_metric, get_locale, metric_axis_title
from .months import calendar_labels
from .pipeline import ChartSpec, FireReport

logger = logging.getLogger(__name__)

TABLES = ("yearly", "monthly", "month_totals")
# short names accepted on the command line
TABLE_ALIASES = {"months": "month_totals"}
TABLE_CHOICES = TABLES + tuple(TABLE_ALIASES)


# -----------------------------
# Shared text blocks
# -----------------------------

def _summary_rows(report: FireReport) -> List[Tuple[str, str]]:
    loc = get_locale(report.config.locale)
    es = loc.code == "es"
    y = report.yearly
    rows = [
        ("Archivo de datos" if es else "Data file", report.config.citation.file_name or ""),
        ("Periodo" if es else "Period", report.config.year_label()),
        ("Registros analizados" if es else "Records analysed", format_metric("n", report.record_count, loc)),
    ]
    if not y.empty:
        rows.append(("Superficie total" if es else "Total area", format_metric("area", y["area"].sum(), loc)))
        rows.append(("Años con incendios" if es else "Years with fires", str(len(y))))
    return rows


def _completeness_rows(report: FireReport) -> List[Tuple[str, str, str]]:
    loc = get_locale(report.config.locale)
    es = loc.code == "es"
    names = {
        "alarm_date": "Fecha de alarma" if es else "Alarm date",
        "gis_acres": loc.t("area"),
        "temperature": "Temperatura" if es else "Temperature",
    }
    return [
        (names[col], format_metric("n", c["available"], loc), format_metric("n", c["missing"], loc))
        for col, c in report.completeness().items()
    ]


# -----------------------------
# HTML (interactive)
# -----------------------------

def generate_html_report(report: FireReport, out_path: str) -> str:
    """Write a standalone HTML page with every chart of the report."""
    cfg = report.config
    loc = get_locale(cfg.locale)
    if not report.charts:
        raise ValueError("No charts to report on (no dated records in scope).")

    parts: List[str] = []
    for i, spec in enumerate(report.charts):
        div = spec.figure.to_html(
            full_html=False,
            include_plotlyjs=(i == 0),
            config={"locale": loc.code, "displaylogo": False, "responsive": True},
            div_id=f"chart-{spec.key}",
        )
        parts.append(f'<section class="chart">\n<h3>{html.escape(spec.title)}</h3>\n{div}\n</section>')

    summary = "\n".join(
        f"<tr><th>{html.escape(k)}</th><td>{html.escape(v)}</td></tr>" for k, v in _summary_rows(report)
    )
    completeness = "\n".join(
        f"<tr><td>{html.escape(a)}</td><td>{html.escape(b)}</td><td>{html.escape(c)}</td></tr>"
        for a, b, c in _completeness_rows(report)
    )
    es = loc.code == "es"
    cit = cfg.citation
    doc = f"""<!DOCTYPE html>
<html lang="{loc.code}">
<head>
<meta charset="utf-8">
<title>{html.escape(cfg.title)}</title>
<style>
body {{ font-family: Calibri, Arial, sans-serif; max-width: 1100px; margin: 2em auto; color: #222; }}
table {{ border-collapse: collapse; margin-bottom: 1.5em; }}
th, td {{ border: 1px solid #ccc; padding: 4px 10px; text-align: left; }}
section.chart {{ margin: 2em 0; }}
footer {{ color: #777; font-size: 0.85em; margin-top: 3em; }}
</style>
</head>
<body>
<h1>{html.escape(cfg.title)}</h1>
<p><em>{html.escape(cfg.subtitle)}</em></p>
<table>
{summary}
</table>
<h2>{"Completitud de los datos" if es else "Data completeness"}</h2>
<table>
<tr><th>{"Campo" if es else "Field"}</th><th>{"Disponibles" if es else "Available"}</th><th>{"Faltantes" if es else "Missing"}</th></tr>
{completeness}
</table>
<h2>{"Visualizaciones" if es else "Visualizations"}</h2>
{chr(10).join(parts)}
<footer>
<p>{html.escape(cit.institutional_author)}. {html.escape(cit.database_name)}. {html.escape(cit.location)}. {html.escape(cit.website)}</p>
<p>{html.escape(cit.temperature_source)}</p>
<p>{_footer_line(report)}</p>
</footer>
</body>
</html>
"""
    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    with open(out_path, "w", encoding="utf-8") as f:
        f.write(doc)
    logger.info("HTML report written to %s", out_path)
    return out_path


def _footer_line(report: FireReport) -> str:
    from . import __version__ as cafire_version
    generated_at = datetime.now().isoformat(timespec="seconds")
    return html.escape(f"CAFIRE {cafire_version} · {generated_at}")


# -----------------------------
# DOCX (static)
# -----------------------------

def _render_static(spec: ChartSpec, locale: str, path: str) -> str:
    """Draw one chart with matplotlib, mirroring its plotly counterpart."""
    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt
    import numpy as np
    from .aggregate import linear_fit, year_month_grid

    loc = get_locale(locale)
    table = spec.table
    ylabel = metric_axis_title(spec.metric, loc)
    fig, ax = plt.subplots(figsize=(9, 4.5))

    if spec.kind == "trend":
        t = table.sort_values("year")
        x = t["year"].astype(int).to_numpy()
        y = t[spec.metric].astype(float).to_numpy()
        ax.plot(x, y, marker="o", color="#b2182b", label=loc.t("observed"))
        fit = linear_fit(x, y)
        if np.isfinite(fit.slope):
            ax.plot(x, fit.at(x), linestyle="--", color="#2166ac", label=loc.t("trend"))
        ax.set_xlabel(loc.t("year"))
        ax.legend()
    elif spec.kind == "month_bar":
        t = table.sort_values("month")
        ax.bar([str(m) for m in t["month"]], t[spec.metric].astype(float), color="#d6604d")
        ax.set_xlabel(loc.t("month"))
    elif spec.kind == "grouped_month":
        years = sorted(int(v) for v in table["year"].unique())
        labels = calendar_labels(locale)
        width = 0.8 / max(len(years), 1)
        cmap = plt.get_cmap("YlOrRd")
        for i, year in enumerate(years):
            t = table[table["year"] == year]
            pos = [labels.index(str(m)) + i * width - 0.4 for m in t["month"]]
            shade = 0.2 + 0.8 * (i / (len(years) - 1) if len(years) > 1 else 1.0)
            ax.bar(pos, t[spec.metric].astype(float), width=width, align="edge",
                   color=cmap(shade), label=str(year))
        ax.set_xticks(range(12))
        ax.set_xticklabels(labels)
        ax.set_xlabel(loc.t("month"))
        if len(years) <= 12:
            ax.legend(title=loc.t("year"), fontsize="small")
    elif spec.kind == "heatmap":
        grid = year_month_grid(table, spec.metric)
        grid = grid.reindex(columns=[c for c in calendar_labels(locale) if c in grid.columns])
        im = ax.imshow(grid.to_numpy(dtype=float), aspect="auto", cmap="inferno_r")
        ax.set_xticks(range(grid.shape[1]))
        ax.set_xticklabels([str(c) for c in grid.columns])
        ax.set_yticks(range(grid.shape[0]))
        ax.set_yticklabels([str(int(y)) for y in grid.index])
        ax.set_xlabel(loc.t("month"))
        fig.colorbar(im, ax=ax, label=ylabel)
        ylabel = loc.t("year")
    else:
        plt.close(fig)
        raise ValueError(f"Unknown chart kind {spec.kind!r}")

    ax.set_ylabel(ylabel)
    ax.set_title(spec.title)
    fig.tight_layout()
    fig.savefig(path, dpi=200)
    plt.close(fig)
    return path


def generate_docx_report(report: FireReport, out_path: str) -> str:
    """
    Generate a DOCX report with static charts and the aggregate tables.

    The input file is never modified; everything comes from the in-memory
    aggregates of `report`.
    """
    try:
        from docx import Document
        from docx.shared import Pt, Inches
        from docx.enum.text import WD_ALIGN_PARAGRAPH
    except ImportError as e:
        raise ImportError(
            "Missing dependency: python-docx.\n"
            "Install it with: python -m pip install python-docx"
        ) from e
    try:
        import matplotlib  # noqa: F401
    except ImportError as e:
        raise ImportError(
            "Missing dependency: matplotlib.\n"
            "Install with: python -m pip install matplotlib"
        ) from e

    if not report.charts:
        raise ValueError("No charts to report on (no dated records in scope).")

    cfg = report.config
    loc = get_locale(cfg.locale)
    es = loc.code == "es"

    tmpdir = tempfile.mkdtemp(prefix="cafire_report_")
    images = [
        (spec, _render_static(spec, cfg.locale, os.path.join(tmpdir, f"{spec.key}.png")))
        for spec in report.charts
    ]

    doc = Document()
    style = doc.styles["Normal"]
    style.font.name = "Calibri"
    style.font.size = Pt(11)

    def _center_title(text: str, size: int, bold: bool = False, italic: bool = False) -> None:
        p = doc.add_paragraph()
        r = p.add_run(text)
        r.bold = bold
        r.italic = italic
        r.font.size = Pt(size)
        p.alignment = WD_ALIGN_PARAGRAPH.CENTER

    def _kv(key: str, value: str) -> None:
        p = doc.add_paragraph()
        r = p.add_run(f"{key}: ")
        r.bold = True
        p.add_run(value)

    def _table(header: List[str], rows: List[List[str]]) -> None:
        t = doc.add_table(rows=1, cols=len(header))
        for cell, text in zip(t.rows[0].cells, header):
            cell.text = text
        for row in rows:
            for cell, text in zip(t.add_row().cells, row):
                cell.text = text

    _center_title(cfg.title, 22, bold=True)
    _center_title(cfg.subtitle, 12, italic=True)
    doc.add_paragraph("")
    for k, v in _summary_rows(report):
        _kv(k, v)

    doc.add_heading("Cita del conjunto de datos" if es else "Dataset citation", level=1)
    cit = cfg.citation
    doc.add_paragraph(f"{cit.institutional_author}. {cit.database_name}. {cit.location}. {cit.website}.")
    doc.add_paragraph(cit.temperature_source)

    doc.add_heading("Columnas utilizadas" if es else "Columns used", level=1)
    _table(
        ["Campo" if es else "Field", "Significado" if es else "Meaning"],
        [
            ["alarm_date", "Fecha de alarma del incendio" if es else "Fire alarm date"],
            ["gis_acres", "Superficie quemada (acres)" if es else "Burned area (acres)"],
            ["temperature", "Temperatura en el centroide (°C)" if es else "Centroid temperature (°C)"],
        ],
    )

    doc.add_heading("Completitud de los datos" if es else "Data completeness", level=1)
    _table(
        ["Campo" if es else "Field", "Disponibles" if es else "Available", "Faltantes" if es else "Missing"],
        [list(r) for r in _completeness_rows(report)],
    )

    doc.add_heading("Visualizaciones" if es else "Visualizations", level=1)
    for spec, path in images:
        doc.add_paragraph(spec.title)
        doc.add_picture(path, width=Inches(6.5))
        doc.add_paragraph("")

    doc.add_heading("Resumen anual" if es else "Yearly summary", level=1)
    header = [loc.t("year"), loc.t("n"), metric_axis_title("area", loc), metric_axis_title("temp_mean", loc)]
    _table(header, [
        [str(int(r.year)), format_metric("n", r.n, loc), format_metric("area", r.area, loc),
         format_metric("temp_mean", r.temp_mean, loc)]
        for r in report.yearly.head(cfg.max_rows_preview).itertuples()
    ])

    doc.add_heading("Resumen mensual" if es else "Monthly summary", level=1)
    header[0] = loc.t("month")
    _table(header, [
        [str(r.month), format_metric("n", r.n, loc), format_metric("area", r.area, loc),
         format_metric("temp_mean", r.temp_mean, loc)]
        for r in report.month_totals.itertuples()
    ])

    doc.add_heading("Notas" if es else "Notes", level=1)
    if cfg.drop_undated:
        doc.add_paragraph(
            "Los registros sin fecha de alarma válida se excluyen del análisis. "
            "Los valores faltantes de superficie o temperatura no se cuentan como cero."
            if es else
            "Records without a valid alarm date are excluded. "
            "Missing area or temperature values are never counted as zero."
        )
    doc.add_paragraph(_footer_line(report))

    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    doc.save(out_path)
    logger.info("DOCX report written to %s", out_path)
    return out_path


def generate_report(report: FireReport, out_path: str, fmt: Optional[str] = None) -> str:
    """Dispatch on `fmt` (html|docx), defaulting to the output file extension."""
    fmt = (fmt or os.path.splitext(out_path)[1].lstrip(".") or "html").lower()
    if fmt in ("html", "htm"):
        return generate_html_report(report, out_path)
    if fmt == "docx":
        return generate_docx_report(report, out_path)
    raise ValueError(f"Unknown report format {fmt!r}. Use: html or docx")


# -----------------------------
# Table export
# -----------------------------

def export_table(report: FireReport, table: str, out_path: str) -> str:
    """Export one aggregate table as CSV or JSON (chosen by file extension)."""
    table = TABLE_ALIASES.get(table, table)
    if table not in TABLES:
        raise ValueError(f"Unknown table {table!r}. Choose one of {TABLES}")
    df: pd.DataFrame = getattr(report, table).copy()
    if "month" in df.columns:
        df["month"] = df["month"].astype(str)

    ext = os.path.splitext(out_path)[1].lower()
    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    if ext == ".csv":
        df.to_csv(out_path, index=False, encoding="utf-8")
    elif ext == ".json":
        df.to_json(out_path, orient="records", force_ascii=False, indent=2)
    else:
        raise ValueError("Export path must end in .csv or .json")
    logger.info("Exported %s (%d rows) to %s", table, len(df), out_path)
    return out_path
