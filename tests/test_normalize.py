"""Tests for the long-form pivot and the tabular scaling."""

from datetime import date

import pandas as pd
import pytest

from noaa_temps.core.errors import MalformedDateError, MalformedEnvelopeError, MalformedValueError
from noaa_temps.processing.normalize import (
    CANONICAL_COLUMNS,
    normalize,
    normalize_long,
    normalize_tabular,
    temperature_column,
)


class TestNormalizeLong:
    """Long-form (date, datatype, value) → one row per date."""

    def test_single_day_scenario(self):
        raw = pd.DataFrame([
            {"date": "2024-01-01T00:00:00", "datatype": "TMAX", "value": 250},
            {"date": "2024-01-01T00:00:00", "datatype": "TMIN", "value": 100},
        ])

        df = normalize_long(raw)

        assert list(df.columns) == CANONICAL_COLUMNS
        assert len(df) == 1
        row = df.iloc[0]
        assert row["date"] == date(2024, 1, 1)
        assert row["max_temp_c"] == 25.0
        assert row["min_temp_c"] == 10.0
        assert pd.isna(row["avg_temp_c"])

    def test_values_are_tenths_divided_by_ten(self, long_records):
        df = normalize_long(pd.DataFrame(long_records)).set_index("date")
        column_for = {"TMAX": "max_temp_c", "TMIN": "min_temp_c", "TAVG": "avg_temp_c"}

        for rec in long_records:
            day = date.fromisoformat(rec["date"][:10])
            got = df.loc[day, column_for[rec["datatype"]]]
            assert got == pytest.approx(rec["value"] / 10, abs=1e-9)

    def test_dates_unique_and_strictly_increasing(self, long_records):
        df = normalize_long(pd.DataFrame(long_records))

        assert df["date"].is_unique
        assert list(df["date"]) == [date(2024, 1, 1), date(2024, 1, 2), date(2024, 1, 3)]

    def test_missing_variable_is_nan_not_zero(self, long_records):
        df = normalize_long(pd.DataFrame(long_records)).set_index("date")

        day3 = df.loc[date(2024, 1, 3)]
        assert day3["max_temp_c"] == pytest.approx(-1.5)
        assert pd.isna(day3["min_temp_c"])
        assert pd.isna(day3["avg_temp_c"])
        assert pd.isna(df.loc[date(2024, 1, 1), "avg_temp_c"])

    def test_unrelated_fields_are_dropped(self, long_records):
        df = normalize_long(pd.DataFrame(long_records))

        assert "station" not in df.columns
        assert "attributes" not in df.columns

    def test_unmapped_datatype_passes_through(self):
        raw = pd.DataFrame([
            {"date": "2024-03-01", "datatype": "TMAX", "value": 180},
            {"date": "2024-03-01", "datatype": "TOBS", "value": 120},
        ])

        df = normalize_long(raw)

        assert list(df.columns) == CANONICAL_COLUMNS + ["TOBS"]
        assert df.loc[0, "TOBS"] == pytest.approx(12.0)

    def test_duplicate_pairs_last_wins(self, caplog):
        raw = pd.DataFrame([
            {"date": "2024-01-01", "datatype": "TMAX", "value": 200},
            {"date": "2024-01-01", "datatype": "TMAX", "value": 210},
        ])

        with caplog.at_level("WARNING"):
            df = normalize_long(raw)

        assert len(df) == 1
        assert df.loc[0, "max_temp_c"] == pytest.approx(21.0)
        assert "duplicate" in caplog.text

    def test_null_datatype_rows_dropped(self, caplog):
        raw = pd.DataFrame([
            {"date": "2024-01-01", "datatype": "TMAX", "value": 200},
            {"date": "2024-01-01", "datatype": None, "value": 999},
            {"date": "2024-01-02", "datatype": "TMIN", "value": 50},
        ])

        with caplog.at_level("WARNING"):
            df = normalize_long(raw)

        assert list(df.columns) == CANONICAL_COLUMNS
        assert "nan" not in df.columns
        assert len(df) == 2
        assert df.loc[0, "max_temp_c"] == pytest.approx(20.0)
        assert df.loc[1, "min_temp_c"] == pytest.approx(5.0)
        assert "no datatype" in caplog.text

    def test_only_null_datatypes_gives_empty_table(self):
        raw = pd.DataFrame([{"date": "2024-01-01", "datatype": None, "value": 200}])

        df = normalize_long(raw)

        assert df.empty
        assert list(df.columns) == CANONICAL_COLUMNS

    def test_empty_payload_gives_empty_table(self):
        df = normalize_long(pd.DataFrame(columns=["date", "datatype", "value"]))

        assert df.empty
        assert list(df.columns) == CANONICAL_COLUMNS

    def test_empty_frame_without_columns(self):
        df = normalize_long(pd.DataFrame())

        assert df.empty
        assert list(df.columns) == CANONICAL_COLUMNS

    def test_bad_date_raises(self):
        raw = pd.DataFrame([{"date": "01/02/2024", "datatype": "TMAX", "value": 200}])

        with pytest.raises(MalformedDateError) as exc_info:
            normalize_long(raw)
        assert exc_info.value.value == "01/02/2024"

    def test_non_numeric_value_raises(self):
        raw = pd.DataFrame([{"date": "2024-01-01", "datatype": "TMAX", "value": "warm"}])

        with pytest.raises(MalformedValueError) as exc_info:
            normalize_long(raw)
        assert exc_info.value.value == "warm"
        assert exc_info.value.field == "value"

    def test_missing_field_raises(self):
        raw = pd.DataFrame([{"date": "2024-01-01", "datatype": "TMAX"}])

        with pytest.raises(MalformedEnvelopeError) as exc_info:
            normalize_long(raw)
        assert exc_info.value.missing_key == "value"

    def test_input_frame_is_not_modified(self, long_records):
        raw = pd.DataFrame(long_records)
        before = raw.copy()

        normalize_long(raw)

        pd.testing.assert_frame_equal(raw, before)


class TestNormalizeTabular:
    """Already-wide NCEI rows: scale in place, parse DATE."""

    def test_row_without_tavg_column(self):
        raw = pd.DataFrame([{"DATE": "2024-06-15", "TMAX": 300, "TMIN": 150}])

        df = normalize_tabular(raw)

        assert "TAVG" not in df.columns
        assert df.loc[0, "TMAX"] == 30.0
        assert df.loc[0, "TMIN"] == 15.0
        assert df.loc[0, "DATE"] == date(2024, 6, 15)

    def test_other_columns_kept_and_rows_sorted(self):
        raw = pd.DataFrame([
            {"STATION": "USW00023190", "DATE": "2024-01-02", "TMAX": 200, "PRCP": 5},
            {"STATION": "USW00023190", "DATE": "2024-01-01", "TMAX": None, "PRCP": 0},
        ])

        df = normalize_tabular(raw)

        assert list(df.columns) == ["STATION", "DATE", "TMAX", "PRCP"]
        assert list(df["DATE"]) == [date(2024, 1, 1), date(2024, 1, 2)]
        assert pd.isna(df.loc[0, "TMAX"])
        assert df.loc[1, "TMAX"] == 20.0
        # only temperature columns are scaled
        assert list(df["PRCP"]) == [0, 5]

    def test_repeated_date_last_wins(self, caplog):
        raw = pd.DataFrame([
            {"DATE": "2024-01-02", "TMAX": 150},
            {"DATE": "2024-01-01", "TMAX": 200},
            {"DATE": "2024-01-01", "TMAX": 210},
        ])

        with caplog.at_level("WARNING"):
            df = normalize_tabular(raw)

        assert list(df["DATE"]) == [date(2024, 1, 1), date(2024, 1, 2)]
        assert df.loc[0, "TMAX"] == pytest.approx(21.0)
        assert df.loc[1, "TMAX"] == pytest.approx(15.0)
        assert "duplicate" in caplog.text

    def test_bad_date_raises(self):
        raw = pd.DataFrame([{"DATE": "not-a-date", "TMAX": 300}])

        with pytest.raises(MalformedDateError):
            normalize_tabular(raw)

    def test_non_numeric_temperature_raises(self):
        raw = pd.DataFrame([{"DATE": "2024-06-15", "TMAX": "M"}])

        with pytest.raises(MalformedValueError) as exc_info:
            normalize_tabular(raw)
        assert exc_info.value.field == "TMAX"

    def test_empty_rows_are_not_an_error(self):
        raw = pd.DataFrame(columns=["STATION", "DATE", "TMAX"])

        df = normalize_tabular(raw)

        assert df.empty
        assert list(df.columns) == ["STATION", "DATE", "TMAX"]


class TestDispatch:
    def test_layout_selects_normalizer(self):
        raw = pd.DataFrame([{"DATE": "2024-06-15", "TMAX": 300}])

        df = normalize(raw, "tabular")

        assert df.loc[0, "TMAX"] == 30.0

    def test_unknown_layout(self):
        with pytest.raises(ValueError):
            normalize(pd.DataFrame(), "sideways")

    @pytest.mark.parametrize(
        "layout,variable,expected",
        [
            ("long", "TAVG", "avg_temp_c"),
            ("long", "TMAX", "max_temp_c"),
            ("tabular", "TMAX", "TMAX"),
        ],
    )
    def test_temperature_column(self, layout, variable, expected):
        assert temperature_column(layout, variable) == expected
