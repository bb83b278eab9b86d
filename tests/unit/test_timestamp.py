"""
Unit tests for date parsing and display formatting.
"""

from datetime import datetime, timezone

import pytest

from readme_sync.utils.timestamp import (
    DISPLAY_TIMEZONE,
    format_display_date,
    parse_display_date,
    parse_iso_date,
    parse_iso_timestamp,
    parse_table_date,
    to_epoch_ms,
)


@pytest.mark.unit
def test_format_display_date():
    """Dates render as DD Mon YYYY."""
    assert format_display_date(datetime(2024, 6, 1, tzinfo=timezone.utc)) == "01 Jun 2024"


@pytest.mark.unit
def test_format_display_date_uses_singapore_time():
    """20:00 UTC on 31 May is already 1 June in Singapore."""
    assert format_display_date(datetime(2024, 5, 31, 20, 0, tzinfo=timezone.utc)) == "01 Jun 2024"


@pytest.mark.unit
def test_format_display_date_september():
    """September is always 'Sep', never a locale-specific 'Sept'."""
    assert format_display_date(datetime(2025, 9, 7, 4, tzinfo=timezone.utc)) == "07 Sep 2025"


@pytest.mark.unit
def test_to_epoch_ms():
    assert to_epoch_ms(datetime(1970, 1, 1, 0, 0, 1, tzinfo=timezone.utc)) == 1000


@pytest.mark.unit
def test_to_epoch_ms_naive_is_utc():
    assert to_epoch_ms(datetime(1970, 1, 1, 0, 0, 2)) == 2000


@pytest.mark.unit
class TestParseIsoTimestamp:
    """Tests for parse_iso_timestamp()."""

    def test_z_suffix(self):
        dt = parse_iso_timestamp("2024-06-01T00:00:00Z")
        assert dt == datetime(2024, 6, 1, tzinfo=timezone.utc)

    def test_offset_and_fraction(self):
        dt = parse_iso_timestamp("2024-06-01T08:00:00.123456+08:00")
        assert to_epoch_ms(dt) == to_epoch_ms(datetime(2024, 6, 1, tzinfo=timezone.utc)) + 123

    def test_naive_is_utc(self):
        assert parse_iso_timestamp("2024-06-01T00:00:00").tzinfo is not None

    def test_invalid_raises(self):
        with pytest.raises(ValueError):
            parse_iso_timestamp("yesterday")


@pytest.mark.unit
class TestParseTableDate:
    """Tests for the date cell parsers."""

    def test_iso_date(self):
        assert parse_iso_date("2024-01-01") == datetime(2024, 1, 1, tzinfo=DISPLAY_TIMEZONE)

    def test_iso_date_invalid_day(self):
        assert parse_iso_date("2024-02-30") is None

    def test_display_date_abbreviated(self):
        assert parse_display_date("01 Jan 2024") == datetime(2024, 1, 1, tzinfo=DISPLAY_TIMEZONE)

    def test_display_date_full_month_case_insensitive(self):
        assert parse_display_date("1 JANUARY 2024") == datetime(2024, 1, 1, tzinfo=DISPLAY_TIMEZONE)

    def test_display_date_sept(self):
        assert parse_display_date("07 Sept 2025") == datetime(2025, 9, 7, tzinfo=DISPLAY_TIMEZONE)

    def test_display_date_unknown_month(self):
        assert parse_display_date("01 Foo 2024") is None

    def test_table_date_tries_iso_first(self):
        assert parse_table_date(" 2024-03-05 ") == datetime(2024, 3, 5, tzinfo=DISPLAY_TIMEZONE)

    def test_table_date_garbage(self):
        assert parse_table_date("soon") is None
        assert parse_table_date("") is None
