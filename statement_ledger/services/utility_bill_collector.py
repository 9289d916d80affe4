"""Metered utility bill collection for statements.

Monthly bills are keyed by calendar month ("2025-03"); quarterly bills by
fiscal year and quarter. The penalty stored on each unit bill was computed
when the bill was generated and is used as-is: this collector only decides
range inclusion and builds line items.
"""

import logging
from datetime import date

from statement_ledger.services.concurrency import gather_or_cancel
from statement_ledger.services.errors import DateParseError
from statement_ledger.services.fiscal_calendar import (
    MONTH_NAMES,
    calendar_to_fiscal_month,
    fiscal_month_start,
    get_fiscal_year,
    quarter_start_fiscal_month,
)
from statement_ledger.services.ledger_types import (
    BillingFrequency,
    ChargeCategory,
    FiscalPeriod,
    FiscalPeriodConfig,
    LineItem,
)
from statement_ledger.services.money import ensure_centavos
from statement_ledger.services.parsers import parse_date, parse_decimal
from statement_ledger.services.stores import BillStore, UnitBill, monthly_bill_key

logger = logging.getLogger(__name__)


class UtilityBillCollector:
    """Collect metered utility line items for one unit."""

    def __init__(self, bill_store: BillStore):
        """Initialize with the bill store collaborator."""
        self.bill_store = bill_store

    async def collect(
        self,
        client_id: str,
        unit_id: str,
        start: date,
        end: date,
        *,
        frequency: BillingFrequency,
        fiscal_config: FiscalPeriodConfig,
    ) -> list[LineItem]:
        """Collect utility line items whose due date falls within [start, end].

        Raises:
            ValidationError: If a bill holds non-centavo or negative amounts
            DateParseError: If a stored due date cannot be parsed
        """
        if frequency == BillingFrequency.QUARTERLY:
            items = await self._collect_quarterly(client_id, unit_id, start, end, fiscal_config)
        else:
            items = await self._collect_monthly(client_id, unit_id, start, end, fiscal_config)

        logger.debug(
            "Collected %d utility items for %s/%s (%s)",
            len(items),
            client_id,
            unit_id,
            frequency.value,
        )
        return items

    async def _collect_monthly(
        self,
        client_id: str,
        unit_id: str,
        start: date,
        end: date,
        fiscal_config: FiscalPeriodConfig,
    ) -> list[LineItem]:
        months = _calendar_months(start, end)
        bills = await gather_or_cancel(
            *(
                self.bill_store.get_monthly_bill(client_id, unit_id, monthly_bill_key(year, month))
                for year, month in months
            )
        )

        start_month = fiscal_config.fiscal_year_start_month
        items = []
        for (year, month), bill in zip(months, bills):
            if bill is None:
                continue

            key = monthly_bill_key(year, month)
            context = {"client_id": client_id, "unit_id": unit_id, "period": key}
            due_date = _stored_due_date(bill, context) or date(year, month, 1)
            if not start <= due_date <= end:
                continue

            period = FiscalPeriod(
                year=get_fiscal_year(due_date, start_month),
                month=calendar_to_fiscal_month(month, start_month),
            )
            items.append(
                _line_item(
                    bill,
                    due_date,
                    description=f"Water Consumption {MONTH_NAMES[month - 1]} {year}",
                    default_reference=key,
                    period=period,
                    context=context,
                )
            )
        return items

    async def _collect_quarterly(
        self,
        client_id: str,
        unit_id: str,
        start: date,
        end: date,
        fiscal_config: FiscalPeriodConfig,
    ) -> list[LineItem]:
        start_month = fiscal_config.fiscal_year_start_month
        quarters = [
            (fiscal_year, quarter)
            for fiscal_year in range(
                get_fiscal_year(start, start_month), get_fiscal_year(end, start_month) + 1
            )
            for quarter in range(1, 5)
        ]
        bills = await gather_or_cancel(
            *(
                self.bill_store.get_quarterly_bill(client_id, unit_id, fiscal_year, quarter)
                for fiscal_year, quarter in quarters
            )
        )

        items = []
        for (fiscal_year, quarter), bill in zip(quarters, bills):
            if bill is None:
                continue

            period = FiscalPeriod(year=fiscal_year, quarter=quarter)
            context = {"client_id": client_id, "unit_id": unit_id, "period": period.label}
            due_date = _stored_due_date(bill, context) or fiscal_month_start(
                fiscal_year, quarter_start_fiscal_month(quarter), start_month
            )
            if not start <= due_date <= end:
                continue

            items.append(
                _line_item(
                    bill,
                    due_date,
                    description=bill.bill_id or f"Water Consumption Q{quarter} {fiscal_year}",
                    default_reference=bill.bill_id or period.label,
                    period=period,
                    context=context,
                )
            )
        return items


def _calendar_months(start: date, end: date) -> list[tuple[int, int]]:
    months = []
    year, month = start.year, start.month
    while (year, month) <= (end.year, end.month):
        months.append((year, month))
        year, month = (year + 1, 1) if month == 12 else (year, month + 1)
    return months


def _stored_due_date(bill: UnitBill, context: dict) -> date | None:
    try:
        return parse_date(bill.due_date)
    except DateParseError as e:
        raise DateParseError(e.message, **context) from e


def _line_item(
    bill: UnitBill,
    due_date: date,
    *,
    description: str,
    default_reference: str,
    period: FiscalPeriod,
    context: dict,
) -> LineItem:
    return LineItem(
        date=due_date,
        description=description,
        category=ChargeCategory.METERED,
        amount=_bill_amount(bill, "current_charge", context),
        penalty=_bill_amount(bill, "penalty_amount", context),
        payments_applied=_bill_amount(bill, "paid_amount", context),
        transaction_ref=bill.last_transaction_id,
        reference=bill.last_payment_reference or default_reference,
        method=bill.last_payment_method,
        notes=bill.notes,
        fiscal_period=period,
        consumption=parse_decimal(bill.consumption),
    )


def _bill_amount(bill: UnitBill, field: str, context: dict) -> int:
    return ensure_centavos(getattr(bill, field) or 0, field, allow_negative=False, **context)
