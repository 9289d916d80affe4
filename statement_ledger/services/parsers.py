"""Parsing utilities for values arriving from store collaborators.

Stores hand over dates as native dates, datetimes, ISO strings, spreadsheet
style "DD.MM.YYYY" strings or timestamp wrappers exposing ``to_datetime()``.
Everything is normalized to ``datetime.date`` here, at ingestion, so the rest
of the pipeline only ever sees one date type.

Example:
    >>> parse_date("2025-01-01")
    datetime.date(2025, 1, 1)

    >>> parse_date("23.06.2025")
    datetime.date(2025, 6, 23)

    >>> parse_decimal("1 000,25")
    Decimal('1000.25')

    >>> parse_rate("5%")
    Decimal('0.05')
"""

from datetime import date, datetime, tzinfo
from decimal import Decimal, InvalidOperation
from typing import Optional

from statement_ledger.services.errors import DateParseError

SPREADSHEET_DATE_FORMAT = "%d.%m.%Y"


def parse_date(value: object, tz: Optional[tzinfo] = None) -> Optional[date]:
    """
    Normalize any supported date representation to ``datetime.date``.

    Args:
        value: date, datetime, ISO-8601 string, "DD.MM.YYYY" string, an object
            with ``to_datetime()`` (store timestamp wrapper) or None/empty
        tz: Timezone used to pick the calendar day of timezone-aware datetimes

    Returns:
        datetime.date or None if input is empty

    Raises:
        DateParseError: If value cannot be interpreted as a date

    Examples:
        >>> parse_date(datetime(2025, 3, 1, 14, 30))
        datetime.date(2025, 3, 1)
        >>> parse_date("2025-03-01T06:00:00Z")
        datetime.date(2025, 3, 1)
        >>> parse_date("")
        None
    """
    if value is None:
        return None

    # datetime is a subclass of date, check it first
    if isinstance(value, datetime):
        return _datetime_to_date(value, tz)

    if isinstance(value, date):
        return value

    to_datetime = getattr(value, "to_datetime", None)
    if callable(to_datetime):
        return parse_date(to_datetime(), tz)

    if not isinstance(value, str):
        raise DateParseError(f"Cannot parse date from {type(value).__name__}: {value!r}")

    text = value.strip()
    if not text:
        return None

    if "." in text and "-" not in text:
        try:
            return datetime.strptime(text, SPREADSHEET_DATE_FORMAT).date()
        except ValueError as e:
            raise DateParseError(f"Cannot parse date '{text}' (expected DD.MM.YYYY): {e}") from e

    iso_text = text[:-1] + "+00:00" if text.endswith("Z") else text
    try:
        if len(iso_text) == 10:
            return date.fromisoformat(iso_text)
        return _datetime_to_date(datetime.fromisoformat(iso_text), tz)
    except ValueError as e:
        raise DateParseError(f"Cannot parse date '{text}': {e}") from e


def _datetime_to_date(value: datetime, tz: Optional[tzinfo]) -> date:
    if tz is not None and value.tzinfo is not None:
        return value.astimezone(tz).date()
    return value.date()


def parse_decimal(value: object) -> Optional[Decimal]:
    """
    Parse a number that may use spaces as thousand separators and a comma as
    decimal separator (spreadsheet exports).

    Returns:
        Decimal or None if input is empty

    Raises:
        ValueError: If value cannot be parsed as a decimal
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError(f"Cannot parse decimal from bool {value!r}")
    if isinstance(value, (int, Decimal)):
        return Decimal(value)
    if isinstance(value, float):
        return Decimal(str(value))

    text = str(value).strip()
    if not text:
        return None

    try:
        normalized = text.replace(" ", "").replace("\xa0", "").replace(",", ".")
        return Decimal(normalized)
    except (ValueError, InvalidOperation) as e:
        raise ValueError(f"Cannot parse decimal '{text}': {e}") from e


def parse_rate(value: object) -> Optional[Decimal]:
    """
    Parse a penalty rate to a fraction.

    "5%" and "5,0%" mean 0.05; bare numbers are already fractions.

    Examples:
        >>> parse_rate(0.05)
        Decimal('0.05')
        >>> parse_rate("10%")
        Decimal('0.1')
    """
    if isinstance(value, str) and value.strip().endswith("%"):
        percent = parse_decimal(value.strip().rstrip("%"))
        return None if percent is None else percent / 100
    return parse_decimal(value)
