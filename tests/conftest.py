from datetime import date

import pandas as pd
import pytest

from cafire.models import FireRecord, records_to_frame


@pytest.fixture
def example_records():
    """Three fires: two in January 2020 (one without temperature), one in June 2021."""
    return [
        FireRecord(date(2020, 1, 5), 100.0, 15.0, "A"),
        FireRecord(date(2020, 1, 20), 50.0, None, "B"),
        FireRecord(date(2021, 6, 1), 200.0, 30.0, "C"),
    ]


@pytest.fixture
def example_frame(example_records):
    return records_to_frame(example_records)


@pytest.fixture
def fires_csv(tmp_path):
    """A small CAL FIRE style export with malformed cells and one undated row."""
    path = tmp_path / "fires.csv"
    path.write_text(
        "YEAR_,FIRE_NAME,ALARM_DATE,GIS_ACRES,temp_centroid,AGENCY\n"
        "2016,ALPHA,2016-07-10,1200.5,31.2,CDF\n"
        "2016,BRAVO,2016-08-02,300,n/a,USF\n"
        "2017,CHARLIE,2017-07-15,,28.0,CDF\n"
        "2017,DELTA,2017-12-04,250000,12.5,CDF\n"
        "2018,ECHO,2018-11-08,153336,9.8,CDF\n"
        "2018,FOXTROT,not a date,10,20.0,CDF\n"
        "2019,GOLF,2019-10-23,77758,17.1,CDF\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def yearly_frame():
    return pd.DataFrame({
        "alarm_date": pd.to_datetime(["2000-03-01", "2001-03-01", "2001-04-01"]),
        "gis_acres": [1.0, 2.0, 3.0],
        "temperature": [10.0, 20.0, 30.0],
        "fire_name": ["", "", ""],
    })
