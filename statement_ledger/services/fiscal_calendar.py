"""Fiscal year, month and quarter arithmetic.

Supports any fiscal year start month. Fiscal years that do not start in
January are named by their ending year: with a July start, July 2024 through
June 2025 is fiscal year 2025.

Key concepts:
- Calendar month: standard 1-12 (January-December)
- Fiscal month: position 1-12 within the fiscal year
- Fiscal year start month: calendar month in which the fiscal year begins
"""

import calendar
from datetime import date
from typing import NamedTuple

MONTH_NAMES = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]

MONTH_NAMES_SHORT = [name[:3] for name in MONTH_NAMES]


class FiscalYearBounds(NamedTuple):
    """First and last calendar day of a fiscal year."""

    start_date: date
    end_date: date


def _validate_month(month: int, param_name: str) -> None:
    if isinstance(month, bool) or not isinstance(month, int) or not 1 <= month <= 12:
        raise ValueError(f"{param_name} must be an integer between 1 and 12, got {month!r}")


def calendar_to_fiscal_month(calendar_month: int, start_month: int) -> int:
    """Convert a calendar month to its position within the fiscal year.

    Examples:
        >>> calendar_to_fiscal_month(7, 7)
        1
        >>> calendar_to_fiscal_month(6, 7)
        12
        >>> calendar_to_fiscal_month(1, 7)
        7
    """
    _validate_month(calendar_month, "calendar_month")
    _validate_month(start_month, "start_month")

    fiscal_month = calendar_month - start_month + 1
    if fiscal_month <= 0:
        fiscal_month += 12
    return fiscal_month


def fiscal_to_calendar_month(fiscal_month: int, start_month: int) -> int:
    """Convert a fiscal month position back to a calendar month.

    Examples:
        >>> fiscal_to_calendar_month(1, 7)
        7
        >>> fiscal_to_calendar_month(12, 7)
        6
    """
    _validate_month(fiscal_month, "fiscal_month")
    _validate_month(start_month, "start_month")

    calendar_month = fiscal_month + start_month - 1
    if calendar_month > 12:
        calendar_month -= 12
    return calendar_month


def get_fiscal_year(day: date, start_month: int) -> int:
    """Get the fiscal year containing a date.

    Examples:
        >>> get_fiscal_year(date(2024, 7, 15), 7)
        2025
        >>> get_fiscal_year(date(2025, 6, 15), 7)
        2025
        >>> get_fiscal_year(date(2025, 6, 15), 1)
        2025
    """
    _validate_month(start_month, "start_month")

    if start_month == 1:
        return day.year
    if day.month >= start_month:
        return day.year + 1
    return day.year


def get_fiscal_year_bounds(fiscal_year: int, start_month: int) -> FiscalYearBounds:
    """Get the first and last calendar day of a fiscal year.

    Examples:
        >>> get_fiscal_year_bounds(2025, 7)
        FiscalYearBounds(start_date=datetime.date(2024, 7, 1), end_date=datetime.date(2025, 6, 30))
    """
    _validate_month(start_month, "start_month")

    if start_month == 1:
        return FiscalYearBounds(date(fiscal_year, 1, 1), date(fiscal_year, 12, 31))

    end_month = start_month - 1
    last_day = calendar.monthrange(fiscal_year, end_month)[1]
    return FiscalYearBounds(
        date(fiscal_year - 1, start_month, 1),
        date(fiscal_year, end_month, last_day),
    )


def fiscal_month_start(fiscal_year: int, fiscal_month: int, start_month: int) -> date:
    """First calendar day of a fiscal month.

    Examples:
        >>> fiscal_month_start(2026, 1, 7)
        datetime.date(2025, 7, 1)
        >>> fiscal_month_start(2026, 7, 7)
        datetime.date(2026, 1, 1)
    """
    _validate_month(fiscal_month, "fiscal_month")
    year_start = get_fiscal_year_bounds(fiscal_year, start_month).start_date

    months_from_epoch = year_start.year * 12 + (year_start.month - 1) + (fiscal_month - 1)
    return date(months_from_epoch // 12, months_from_epoch % 12 + 1, 1)


def quarter_of_fiscal_month(fiscal_month: int) -> int:
    """Fiscal quarter (1-4) of a fiscal month: 1-3 → Q1, 4-6 → Q2, 7-9 → Q3, 10-12 → Q4."""
    _validate_month(fiscal_month, "fiscal_month")
    return (fiscal_month + 2) // 3


def quarter_start_fiscal_month(quarter: int) -> int:
    """First fiscal month of a quarter (Q1 → 1, Q2 → 4, Q3 → 7, Q4 → 10)."""
    if isinstance(quarter, bool) or not isinstance(quarter, int) or not 1 <= quarter <= 4:
        raise ValueError(f"quarter must be an integer between 1 and 4, got {quarter!r}")
    return (quarter - 1) * 3 + 1


def fiscal_month_name(fiscal_month: int, start_month: int, short: bool = False) -> str:
    """Calendar month name of a fiscal month ("July" for fiscal month 1 of a July year)."""
    calendar_month = fiscal_to_calendar_month(fiscal_month, start_month)
    names = MONTH_NAMES_SHORT if short else MONTH_NAMES
    return names[calendar_month - 1]


def fiscal_month_names(start_month: int, short: bool = False) -> list[str]:
    """Month names in fiscal order."""
    return [fiscal_month_name(month, start_month, short) for month in range(1, 13)]


def fiscal_year_label(fiscal_year: int, start_month: int) -> str:
    """Display label: "2025" for calendar years, "FY 2025" otherwise."""
    _validate_month(start_month, "start_month")
    if start_month == 1:
        return str(fiscal_year)
    return f"FY {fiscal_year}"
