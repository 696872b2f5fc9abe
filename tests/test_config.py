import pytest

from cafire.config import VARIANTS, ReportConfig, build_config, load_config, variant_config
from cafire.errors import ConfigError


def test_variants_cover_the_three_reports():
    assert set(VARIANTS) == {"1998-2024", "1980-2024", "2016-2025"}
    assert variant_config("1980-2024").years == (1980, 2024)
    assert variant_config("2016-2025").heatmaps is True
    assert variant_config("1998-2024").heatmaps is False


def test_every_variant_uses_the_same_date_policy():
    assert all(variant_config(name).drop_undated for name in VARIANTS)


def test_variant_title_mentions_range():
    assert "1998–2024" in variant_config("1998-2024").title


def test_unknown_variant():
    with pytest.raises(ConfigError):
        variant_config("1900-1901")


def test_overrides():
    cfg = build_config(variant="1998-2024", locale="en", heatmaps=None)
    assert cfg.locale == "en"
    assert cfg.heatmaps is False
    with pytest.raises(ConfigError):
        build_config(locale="fr")
    with pytest.raises(ConfigError):
        build_config(colour="red")


def test_load_yaml(tmp_path):
    path = tmp_path / "cfg.yaml"
    path.write_text(
        "report:\n"
        "  variant: 2016-2025\n"
        "  title: Incendios recientes\n"
        "  citation:\n"
        "    file_name: recientes.csv\n",
        encoding="utf-8",
    )
    cfg = load_config(str(path))
    assert cfg.variant == "2016-2025"
    assert cfg.years == (2016, 2025)
    assert cfg.title == "Incendios recientes"
    assert cfg.citation.file_name == "recientes.csv"
    assert cfg.citation.institutional_author.startswith("CAL FIRE")


def test_cli_overrides_win_over_yaml(tmp_path):
    path = tmp_path / "cfg.yaml"
    path.write_text("report:\n  locale: en\n  years: [2000, 2010]\n", encoding="utf-8")
    cfg = build_config(config_path=str(path), locale="es")
    assert cfg.locale == "es"
    assert cfg.years == (2000, 2010)


@pytest.mark.parametrize("text", [
    "report: [1, 2]\n",
    "report:\n  years: [2010, 2000]\n",
    "report:\n  years: 2016\n",
    "report:\n  years: [a, b]\n",
    "report:\n  years: [2016, 2020, 2025]\n",
    "{{{",
])
def test_bad_yaml(tmp_path, text):
    path = tmp_path / "bad.yaml"
    path.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(str(path))


def test_missing_yaml(tmp_path):
    with pytest.raises(ConfigError):
        load_config(str(tmp_path / "missing.yaml"))


def test_default_config():
    cfg = ReportConfig()
    assert cfg.locale == "es"
    assert cfg.year_label() == "todos los años"


def test_yaml_years_are_coerced_to_ints(tmp_path):
    path = tmp_path / "cfg.yaml"
    path.write_text("report:\n  years: ['2000', 2010]\n", encoding="utf-8")
    assert load_config(str(path)).years == (2000, 2010)
