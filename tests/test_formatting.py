import pytest

from cafire.formatting import (
    MISSING,
    format_area,
    format_count,
    format_metric,
    format_temperature,
    get_locale,
    metric_axis_title,
)

ES = get_locale("es")
EN = get_locale("en")


def test_counts_use_thousands_separators():
    assert format_count(1234567, ES) == "1.234.567"
    assert format_count(1234567, EN) == "1,234,567"
    assert format_count(12, ES) == "12"


def test_area_has_unit():
    assert format_area(153336.4, ES) == "153.336,4 acres"
    assert format_area(153336.4, EN) == "153,336.4 acres"


def test_area_keeps_fractional_acres():
    assert format_area(1500.5, ES) == "1.500,5 acres"
    assert format_area(0.4, ES) == "0,4 acres"
    assert format_area(12.25, EN) == "12.25 acres"
    assert format_area(2500.0, ES) == "2.500 acres"


def test_temperature_has_one_decimal_and_unit():
    assert format_temperature(15, ES) == "15,0 °C"
    assert format_temperature(23.46, EN) == "23.5 °C"
    assert format_temperature(-2.04, ES) == "-2,0 °C"


@pytest.mark.parametrize("value", [None, float("nan")])
def test_missing_values(value):
    assert format_temperature(value, ES) == MISSING
    assert format_area(value, ES) == MISSING


def test_format_metric_dispatch():
    assert format_metric("n", 2500, ES) == "2.500"
    with pytest.raises(ValueError):
        format_metric("deaths", 1, ES)


def test_axis_titles():
    assert metric_axis_title("area", ES) == "Superficie quemada (acres)"
    assert metric_axis_title("temp_mean", EN) == "Mean temperature (°C)"
    assert metric_axis_title("n", ES) == "Incendios"


def test_plotly_separators():
    assert ES.plotly_separators == ",."
    assert EN.plotly_separators == ".,"
