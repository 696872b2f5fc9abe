"""
CAFIRE Command Line Interface (CLI)
===================================

Render a report:

    python -m cafire.cli report --csv "fires.csv" --variant 2016-2025 --out report.html

Print the yearly summary, or export an aggregate table:

    python -m cafire.cli summary --csv "fires.csv" --variant 1980-2024
    python -m cafire.cli export --csv "fires.csv" --table monthly --out monthly.csv

The CLI never modifies the input file. It loads it once, aggregates in memory
and writes only the requested output.
"""

from __future__ import annotations
import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .config import VARIANTS, build_config
from .errors import CafireError
from .formatting import format_metric, get_locale
from .pipeline import FireReport, run_pipeline
from .report import TABLE_CHOICES, export_table, generate_report


def _parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="cafire", description="California wildfire EDA reports")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--csv", required=True, help="Path to the fire history CSV")
    common.add_argument("--variant", choices=sorted(VARIANTS), help="Named year-range preset")
    common.add_argument("--config", help="YAML file with a 'report:' section")
    common.add_argument("--locale", choices=["es", "en"], help="Display language (default: es)")
    common.add_argument("--keep-undated", action="store_true",
                        help="Keep rows without an alarm date (they still skip date grouping)")

    sub = ap.add_subparsers(dest="command", required=True)

    rep = sub.add_parser("report", parents=[common], help="Render an HTML or DOCX report")
    rep.add_argument("--out", default="report.html", help="Output path (.html or .docx)")
    rep.add_argument("--format", choices=["html", "docx"], help="Defaults to the --out extension")
    rep.add_argument("--heatmaps", action="store_true", default=None,
                     help="Add year x month heatmaps")

    sub.add_parser("summary", parents=[common], help="Print the yearly aggregate table")

    exp = sub.add_parser("export", parents=[common], help="Export an aggregate table")
    exp.add_argument("--table", choices=TABLE_CHOICES, default="yearly")
    exp.add_argument("--out", required=True, help="Output path (.csv or .json)")
    return ap


def _load(args) -> FireReport:
    cfg = build_config(
        variant=args.variant,
        config_path=args.config,
        locale=args.locale,
        drop_undated=False if args.keep_undated else None,
        heatmaps=getattr(args, "heatmaps", None),
    )
    return run_pipeline(args.csv, cfg)


def _print_summary(report: FireReport) -> None:
    loc = get_locale(report.config.locale)
    print(f"{loc.t('year'):>6} | {loc.t('n'):>10} | {loc.t('area'):>22} | {loc.t('temp_mean'):>18}")
    for r in report.yearly.itertuples():
        print(f"{int(r.year):>6} | {format_metric('n', r.n, loc):>10} | "
              f"{format_metric('area', r.area, loc):>22} | {format_metric('temp_mean', r.temp_mean, loc):>18}")
    print(f"Total: {format_metric('n', report.record_count, loc)}")


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the CAFIRE CLI."""
    args = _parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="%(message)s")

    try:
        report = _load(args)
        if args.command == "report":
            path = generate_report(report, args.out, args.format)
            print(f"Report written to {path}")
        elif args.command == "summary":
            _print_summary(report)
        elif args.command == "export":
            path = export_table(report, args.table, args.out)
            print(f"Exported {args.table} to {path}")
    except (CafireError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
