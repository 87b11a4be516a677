"""Unit tests for date parsing utilities."""

from datetime import date, datetime

import pytest

from form_engine.utils.date_parsing import is_date, parse_date


# =============================================================================
# ISO format
# =============================================================================


class TestISOFormat:
    def test_standard_iso(self):
        assert parse_date("2026-01-23") == date(2026, 1, 23)

    def test_single_digit_month_day(self):
        assert parse_date("2026-1-3") == date(2026, 1, 3)

    def test_iso_with_time(self):
        assert parse_date("2026-01-23T10:15:00Z") == date(2026, 1, 23)

    def test_invalid_iso_month(self):
        assert parse_date("2026-13-01") is None

    def test_invalid_iso_day(self):
        assert parse_date("2026-02-30") is None


# =============================================================================
# Day-first numeric formats (DD.MM.YYYY, DD/MM/YYYY, DD-MM-YYYY)
# =============================================================================


class TestNumericFormats:
    def test_dot_format(self):
        assert parse_date("23.01.2026") == date(2026, 1, 23)

    def test_slash_format(self):
        assert parse_date("19/01/2026") == date(2026, 1, 19)

    def test_dash_format(self):
        assert parse_date("23-01-2026") == date(2026, 1, 23)

    def test_invalid_numeric_day(self):
        assert parse_date("32.01.2026") is None


# =============================================================================
# Objects and junk
# =============================================================================


class TestOtherInputs:
    def test_date_object(self):
        assert parse_date(date(2026, 5, 1)) == date(2026, 5, 1)

    def test_datetime_object(self):
        assert parse_date(datetime(2026, 5, 1, 12, 30)) == date(2026, 5, 1)

    @pytest.mark.parametrize("value", [None, "", "   ", "tomorrow", 20260101, ["2026-01-01"]])
    def test_unparseable(self, value):
        assert parse_date(value) is None
        assert is_date(value) is False
