import math
from datetime import date

import numpy as np
import pandas as pd
import pytest

from cafire import aggregate
from cafire.models import FireRecord, records_to_frame


def _row(table, **keys):
    mask = np.ones(len(table), dtype=bool)
    for k, v in keys.items():
        mask &= (table[k] == v).to_numpy()
    rows = table[mask]
    assert len(rows) == 1
    return rows.iloc[0]


def test_yearly_example(example_frame):
    y = aggregate.yearly(example_frame)
    assert list(y["year"]) == [2020, 2021]
    r2020 = _row(y, year=2020)
    assert r2020["n"] == 2
    assert r2020["area"] == pytest.approx(150.0)
    assert r2020["temp_mean"] == pytest.approx(15.0)
    r2021 = _row(y, year=2021)
    assert r2021["n"] == 1
    assert r2021["area"] == pytest.approx(200.0)
    assert r2021["temp_mean"] == pytest.approx(30.0)


def test_month_totals_example(example_frame):
    m = aggregate.month_totals(example_frame)
    jan = _row(m, month=1)
    assert (jan["n"], jan["area"]) == (2, 150.0)
    jun = _row(m, month=6)
    assert (jun["n"], jun["area"]) == (1, 200.0)
    assert set(m["month"]) == {1, 6}


def test_counts_add_up_to_record_count(fires_csv):
    from cafire.loader import load_fires_csv
    df = load_fires_csv(fires_csv)
    y = aggregate.yearly(df)
    assert y["n"].sum() == len(df)
    assert y["year"].is_unique


def test_mean_of_all_missing_temperatures_is_missing():
    df = records_to_frame([
        FireRecord(date(2019, 3, 1), 10.0, None),
        FireRecord(date(2019, 3, 2), 20.0, None),
        FireRecord(date(2020, 3, 2), 5.0, 12.0),
    ])
    y = aggregate.yearly(df)
    r = _row(y, year=2019)
    assert math.isnan(r["temp_mean"])
    assert r["temp_n"] == 0
    assert r["area"] == pytest.approx(30.0)


def test_area_of_all_missing_values_is_missing():
    df = records_to_frame([FireRecord(date(2019, 3, 1), None, 20.0)])
    r = aggregate.yearly(df).iloc[0]
    assert math.isnan(r["area"])
    assert r["n"] == 1


def test_years_come_out_ascending():
    df = records_to_frame([
        FireRecord(date(2022, 1, 1), 1.0, 1.0),
        FireRecord(date(1999, 1, 1), 1.0, 1.0),
        FireRecord(date(2010, 1, 1), 1.0, 1.0),
    ])
    assert list(aggregate.yearly(df)["year"]) == [1999, 2010, 2022]


def test_undated_rows_are_skipped_by_grouping_only():
    df = records_to_frame([
        FireRecord(date(2020, 5, 1), 1.0, 10.0),
        FireRecord(None, 99.0, 40.0),
    ])
    keyed = aggregate.add_temporal_keys(df)
    assert len(keyed) == 2
    assert keyed["year"].isna().sum() == 1
    y = aggregate.yearly(keyed)
    assert y["n"].sum() == 1
    assert y["area"].sum() == pytest.approx(1.0)


def test_monthly_keys_are_unique(example_frame):
    m = aggregate.monthly(example_frame)
    assert not m.duplicated(["year", "month"]).any()
    assert len(m) == 2


def test_monthly_complete_has_twelve_months_per_year(example_frame):
    m = aggregate.monthly(example_frame, complete=True)
    assert len(m) == 24
    assert m.groupby("year")["month"].apply(list).tolist() == [list(range(1, 13))] * 2
    feb = _row(m, year=2020, month=2)
    assert feb["n"] == 0
    assert math.isnan(feb["area"])
    assert math.isnan(feb["temp_mean"])


def test_month_totals_from_monthly_matches_direct(fires_csv):
    from cafire.loader import load_fires_csv
    df = load_fires_csv(fires_csv)
    direct = aggregate.month_totals(df).set_index("month")
    rolled = aggregate.month_totals_from_monthly(aggregate.monthly(df)).set_index("month")
    assert list(direct.index) == list(rolled.index)
    assert (direct["n"] == rolled["n"]).all()
    pd.testing.assert_series_equal(direct["area"], rolled["area"], check_names=False)
    pd.testing.assert_series_equal(direct["temp_mean"], rolled["temp_mean"], check_names=False)


def test_month_totals_from_complete_monthly(example_frame):
    rolled = aggregate.month_totals_from_monthly(aggregate.monthly(example_frame, complete=True))
    assert len(rolled) == 12
    assert rolled["n"].sum() == 3
    jan = _row(rolled, month=1)
    assert jan["temp_mean"] == pytest.approx(15.0)
    assert math.isnan(_row(rolled, month=2)["temp_mean"])


def test_year_month_grid(example_frame):
    grid = aggregate.year_month_grid(aggregate.monthly(example_frame), "n")
    assert list(grid.index) == [2020, 2021]
    assert grid.loc[2020, 1] == 2
    assert math.isnan(grid.loc[2020, 6])


def test_year_month_grid_rejects_unknown_metric(example_frame):
    with pytest.raises(ValueError):
        aggregate.year_month_grid(aggregate.monthly(example_frame), "deaths")


def test_linear_fit_on_perfect_line():
    fit = aggregate.linear_fit([2000, 2001, 2002, 2003, 2004], [1, 2, 3, 4, 5])
    assert fit.slope == pytest.approx(1.0)
    assert fit.intercept == pytest.approx(1.0)
    assert fit.origin == 2000
    assert fit.at(2004) == pytest.approx(5.0)


def test_linear_fit_ignores_missing_pairs():
    fit = aggregate.linear_fit([0, 1, 2, 3], [0, 2, float("nan"), 6], origin=0)
    assert fit.slope == pytest.approx(2.0)
    assert fit.intercept == pytest.approx(0.0, abs=1e-9)


@pytest.mark.parametrize("x,y", [([2000], [1]), ([2000, 2000], [1, 2]), ([], [])])
def test_linear_fit_degenerate(x, y):
    fit = aggregate.linear_fit(x, y)
    assert math.isnan(fit.slope)
    assert math.isnan(fit.intercept)
