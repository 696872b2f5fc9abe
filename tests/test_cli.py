import os

import pytest

from cafire.cli import main


def test_summary(fires_csv, capsys):
    assert main(["summary", "--csv", str(fires_csv), "--variant", "2016-2025"]) == 0
    out = capsys.readouterr().out
    assert "2016" in out and "2019" in out
    assert "1.500,5 acres" in out
    assert "Total: 6" in out


def test_summary_english(fires_csv, capsys):
    assert main(["summary", "--csv", str(fires_csv), "--locale", "en"]) == 0
    out = capsys.readouterr().out
    assert "Burned area" in out
    assert "250,000 acres" in out


def test_report_html(fires_csv, tmp_path, capsys):
    out_path = tmp_path / "report.html"
    assert main(["report", "--csv", str(fires_csv), "--out", str(out_path), "--heatmaps"]) == 0
    assert os.path.exists(out_path)
    assert "Report written to" in capsys.readouterr().out
    assert "chart-heatmap_n" in out_path.read_text(encoding="utf-8")


def test_export(fires_csv, tmp_path):
    out_path = tmp_path / "monthly.json"
    assert main(["export", "--csv", str(fires_csv), "--table", "monthly", "--out", str(out_path)]) == 0
    assert out_path.read_text(encoding="utf-8").lstrip().startswith("[")


def test_keep_undated(fires_csv, capsys):
    assert main(["summary", "--csv", str(fires_csv), "--keep-undated"]) == 0
    assert "Total: 7" in capsys.readouterr().out


def test_missing_file_reports_error(tmp_path, capsys):
    assert main(["summary", "--csv", str(tmp_path / "missing.csv")]) == 1
    err = capsys.readouterr().err
    assert "Error:" in err and "missing.csv" in err


def test_subcommand_required():
    with pytest.raises(SystemExit):
        main([])


def test_export_month_totals_short_name(fires_csv, tmp_path):
    out_path = tmp_path / "months.csv"
    assert main(["export", "--csv", str(fires_csv), "--table", "months", "--out", str(out_path)]) == 0
    lines = out_path.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "month,n,area,temp_mean,temp_n"
    assert sum(int(line.split(",")[1]) for line in lines[1:]) == 6
