"""Unit tests for parsing utilities."""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from statement_ledger.services.errors import DateParseError
from statement_ledger.services.parsers import parse_date, parse_decimal, parse_rate


class _StoreTimestamp:
    """Timestamp wrapper as returned by document stores."""

    def __init__(self, value: datetime):
        self.value = value

    def to_datetime(self) -> datetime:
        return self.value


class TestParseDate:
    """Test date normalization."""

    def test_date_passthrough(self):
        assert parse_date(date(2025, 1, 1)) == date(2025, 1, 1)

    def test_datetime(self):
        assert parse_date(datetime(2025, 3, 1, 14, 30)) == date(2025, 3, 1)

    def test_iso_date_string(self):
        assert parse_date("2025-01-01") == date(2025, 1, 1)

    def test_iso_datetime_string_with_z(self):
        assert parse_date("2025-03-01T06:00:00Z") == date(2025, 3, 1)

    def test_spreadsheet_format(self):
        assert parse_date("23.06.2025") == date(2025, 6, 23)

    def test_timestamp_wrapper(self):
        assert parse_date(_StoreTimestamp(datetime(2025, 5, 4, 10, 0))) == date(2025, 5, 4)

    def test_aware_datetime_converted_to_timezone(self):
        """The calendar day is taken in the requested timezone."""
        value = "2025-03-01T23:30:00-05:00"
        assert parse_date(value) == date(2025, 3, 1)
        assert parse_date(value, tz=timezone.utc) == date(2025, 3, 2)

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_empty_is_none(self, value):
        assert parse_date(value) is None

    @pytest.mark.parametrize("value", ["2025-13-01", "31.02.2025", "yesterday", 20250101])
    def test_invalid_raises(self, value):
        with pytest.raises(DateParseError):
            parse_date(value)


class TestParseDecimal:
    """Test decimal parsing of spreadsheet numbers."""

    def test_space_thousands_comma_decimal(self):
        assert parse_decimal("1 000,25") == Decimal("1000.25")

    def test_native_numbers(self):
        assert parse_decimal(12) == Decimal("12")
        assert parse_decimal(12.5) == Decimal("12.5")

    def test_empty_is_none(self):
        assert parse_decimal(None) is None
        assert parse_decimal("") is None

    def test_invalid_raises(self):
        with pytest.raises(ValueError, match="Cannot parse decimal"):
            parse_decimal("abc")


class TestParseRate:
    """Test penalty rate parsing."""

    def test_percent_string(self):
        assert parse_rate("5%") == Decimal("0.05")
        assert parse_rate("10%") == Decimal("0.1")

    def test_fraction(self):
        assert parse_rate(0.05) == Decimal("0.05")
        assert parse_rate("0.05") == Decimal("0.05")
