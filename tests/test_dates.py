"""Tests for raw date normalization."""

from datetime import date, datetime, timezone

import pytest

from analytics.dates import expense_date, month_abbr, normalize_date, record_field, weekday_name
from models.expense import IsoString, Missing, NativeTimestamp, classify_raw_date
from tests.helpers import FakeTimestamp, make_expense


class TestClassifyRawDate:

    def test_none_is_missing(self):
        assert classify_raw_date(None) == Missing()

    def test_string_is_iso(self):
        assert classify_raw_date("2025-10-20") == IsoString("2025-10-20")

    def test_date_and_timestamp_objects_are_native(self):
        assert isinstance(classify_raw_date(date(2025, 10, 20)), NativeTimestamp)
        assert isinstance(classify_raw_date(FakeTimestamp(datetime(2025, 10, 20))), NativeTimestamp)

    def test_unknown_shapes_are_missing(self):
        assert classify_raw_date(20251020) == Missing()
        assert classify_raw_date(["2025-10-20"]) == Missing()


class TestNormalizeDate:

    def test_date_passes_through(self):
        assert normalize_date(date(2025, 10, 20)) == date(2025, 10, 20)

    def test_datetime_drops_time_of_day(self):
        assert normalize_date(datetime(2025, 10, 20, 23, 59)) == date(2025, 10, 20)

    def test_native_timestamp_conversion(self):
        assert normalize_date(FakeTimestamp(datetime(2025, 3, 1, 8, 30))) == date(2025, 3, 1)

    @pytest.mark.parametrize("text, expected", [
        ("2025-10-20", date(2025, 10, 20)),
        ("2025-10-20T08:30:00", date(2025, 10, 20)),
        ("2025-10-20T08:30:00Z", date(2025, 10, 20)),
        ("  2024-02-29 ", date(2024, 2, 29)),
    ])
    def test_iso_strings(self, text, expected):
        assert normalize_date(text) == expected

    @pytest.mark.parametrize("raw", [None, "", "not a date", "2025-13-01", "2023-02-29", 42, 3.5, {}])
    def test_unparseable_values_return_none(self, raw):
        assert normalize_date(raw) is None

    def test_conversion_that_raises_is_unparseable(self):
        class Broken:
            def to_date(self):
                raise RuntimeError("boom")

        assert normalize_date(Broken()) is None

    def test_conversion_returning_garbage_is_unparseable(self):
        class Odd:
            def to_date(self):
                return "yesterday"

        assert normalize_date(Odd()) is None

    def test_aware_datetime_keeps_its_own_calendar_day(self):
        stamp = datetime(2025, 10, 20, 23, 30, tzinfo=timezone.utc)
        assert normalize_date(stamp) == date(2025, 10, 20)


class TestRecordAccess:

    def test_reads_dicts_and_objects(self):
        doc = {"date": "2025-10-21", "amount": 5}
        assert record_field(doc, "amount") == 5
        assert expense_date(doc) == date(2025, 10, 21)
        assert expense_date(make_expense(5, on=date(2025, 10, 22))) == date(2025, 10, 22)

    def test_missing_date_field(self):
        assert expense_date({"amount": 5}) is None


def test_names_are_locale_free():
    assert month_abbr(date(2025, 10, 1)) == "Oct"
    assert weekday_name(date(2025, 10, 20)) == "Monday"
    assert weekday_name(date(2025, 10, 26)) == "Sunday"
