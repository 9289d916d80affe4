"""Recurring dues collection for statements.

Expands a unit's per-fiscal-year dues records into line items for a date
range, for monthly or quarterly dues.

Penalty policy:
- Paid period (payment > 0): the penalty stored with the payment is used, so
  a manually waived penalty stays waived on every later statement
- Unpaid period: the penalty is accrued dynamically up to ``as_of``
"""

import logging
from datetime import date

from statement_ledger.services.concurrency import gather_or_cancel
from statement_ledger.services.errors import ConfigurationError, DateParseError
from statement_ledger.services.fiscal_calendar import (
    MONTH_NAMES,
    fiscal_month_start,
    fiscal_to_calendar_month,
    get_fiscal_year,
    quarter_start_fiscal_month,
)
from statement_ledger.services.ledger_types import (
    BillingConfig,
    BillingFrequency,
    ChargeCategory,
    FiscalPeriod,
    FiscalPeriodConfig,
    LineItem,
)
from statement_ledger.services.money import ensure_centavos
from statement_ledger.services.parsers import parse_date
from statement_ledger.services.penalty_service import calculate_penalty
from statement_ledger.services.stores import DuesStore, DuesYearRecord, PeriodPayment

logger = logging.getLogger(__name__)


class DuesCollector:
    """Collect recurring dues line items for one unit.

    Used by StatementService; fiscal years overlapping the range are read
    concurrently and emitted in fiscal year order.
    """

    def __init__(self, dues_store: DuesStore):
        """Initialize with the dues store collaborator."""
        self.dues_store = dues_store

    async def collect(
        self,
        client_id: str,
        unit_id: str,
        start: date,
        end: date,
        *,
        frequency: BillingFrequency,
        fiscal_config: FiscalPeriodConfig,
        billing_config: BillingConfig | None,
        as_of: date,
    ) -> list[LineItem]:
        """Collect dues line items whose due date falls within [start, end].

        Args:
            client_id: Client (association) ID
            unit_id: Unit ID
            start: First day of the statement range
            end: Last day of the statement range
            frequency: Monthly or quarterly dues
            fiscal_config: Client fiscal year setting
            billing_config: Dues penalty configuration (required)
            as_of: Date unpaid penalties are accrued to

        Returns:
            Line items ordered by fiscal year then period

        Raises:
            ConfigurationError: If billing_config is missing
            ValidationError: If a record holds non-centavo or negative amounts
            PenaltyCalculationError: If a penalty cannot be computed
        """
        if billing_config is None:
            raise ConfigurationError(
                "Dues billing configuration is required to calculate penalties",
                client_id=client_id,
                unit_id=unit_id,
                period=ChargeCategory.RECURRING.value,
            )

        start_month = fiscal_config.fiscal_year_start_month
        fiscal_years = list(
            range(get_fiscal_year(start, start_month), get_fiscal_year(end, start_month) + 1)
        )

        records = await gather_or_cancel(
            *(
                self.dues_store.get_year_record(client_id, unit_id, fiscal_year)
                for fiscal_year in fiscal_years
            )
        )

        items: list[LineItem] = []
        for fiscal_year, record in zip(fiscal_years, records):
            if record is None:
                logger.debug("No dues record for %s/%s FY %d", client_id, unit_id, fiscal_year)
                continue

            context = {"client_id": client_id, "unit_id": unit_id, "period": str(fiscal_year)}
            scheduled_amount = ensure_centavos(
                record.scheduled_amount or 0, "scheduled_amount", allow_negative=False, **context
            )

            if frequency == BillingFrequency.QUARTERLY:
                collect_year = self._quarterly_items
            else:
                collect_year = self._monthly_items

            items.extend(
                collect_year(
                    record,
                    scheduled_amount,
                    fiscal_year,
                    start,
                    end,
                    start_month=start_month,
                    billing_config=billing_config,
                    as_of=as_of,
                    context=context,
                )
            )

        logger.debug(
            "Collected %d dues items for %s/%s (%s, FY %s)",
            len(items),
            client_id,
            unit_id,
            frequency.value,
            fiscal_years,
        )
        return items

    def _monthly_items(
        self,
        record: DuesYearRecord,
        scheduled_amount: int,
        fiscal_year: int,
        start: date,
        end: date,
        *,
        start_month: int,
        billing_config: BillingConfig,
        as_of: date,
        context: dict,
    ) -> list[LineItem]:
        items = []
        for fiscal_month in range(1, 13):
            period = FiscalPeriod(year=fiscal_year, month=fiscal_month)
            period_context = {**context, "period": period.label}

            payment = record.payment_for(fiscal_month)
            due_date = self._due_date(
                payment, fiscal_year, fiscal_month, start_month, period_context
            )
            if not start <= due_date <= end:
                continue

            amount_paid = _amount(payment, "amount_paid", period_context)
            penalty = self._penalty(
                scheduled_amount,
                due_date,
                amount_paid=amount_paid,
                stored_penalty=_amount(payment, "penalty_stored", period_context),
                billing_config=billing_config,
                as_of=as_of,
                context=period_context,
            )

            calendar_month = fiscal_to_calendar_month(fiscal_month, start_month)
            calendar_year = fiscal_month_start(fiscal_year, fiscal_month, start_month).year
            items.append(
                LineItem(
                    date=due_date,
                    description=(
                        f"Maintenance Fee {MONTH_NAMES[calendar_month - 1]} {calendar_year}"
                    ),
                    category=ChargeCategory.RECURRING,
                    amount=scheduled_amount,
                    penalty=penalty,
                    payments_applied=amount_paid,
                    transaction_ref=payment.transaction_id if payment else None,
                    reference=(payment.reference or payment.transaction_id) if payment else None,
                    method=payment.method if payment else None,
                    notes=payment.notes if payment else None,
                    fiscal_period=period,
                )
            )
        return items

    def _quarterly_items(
        self,
        record: DuesYearRecord,
        scheduled_amount: int,
        fiscal_year: int,
        start: date,
        end: date,
        *,
        start_month: int,
        billing_config: BillingConfig,
        as_of: date,
        context: dict,
    ) -> list[LineItem]:
        items = []
        for quarter in range(1, 5):
            period = FiscalPeriod(year=fiscal_year, quarter=quarter)
            period_context = {**context, "period": period.label}

            first_month = quarter_start_fiscal_month(quarter)
            due_date = self._due_date(
                record.payment_for(first_month),
                fiscal_year,
                first_month,
                start_month,
                period_context,
            )
            if not start <= due_date <= end:
                continue

            payments = []
            for fiscal_month in range(first_month, first_month + 3):
                payment = record.payment_for(fiscal_month)
                if payment is not None:
                    payments.append(payment)

            amount = scheduled_amount * 3
            amount_paid = sum(
                _amount(payment, "amount_paid", period_context) for payment in payments
            )
            stored_penalty = sum(
                _amount(payment, "penalty_stored", period_context) for payment in payments
            )
            penalty = self._penalty(
                amount,
                due_date,
                amount_paid=amount_paid,
                stored_penalty=stored_penalty,
                billing_config=billing_config,
                as_of=as_of,
                context=period_context,
            )

            first_payment = payments[0] if payments else None
            items.append(
                LineItem(
                    date=due_date,
                    description=f"Maintenance Fee Q{quarter} {fiscal_year}",
                    category=ChargeCategory.RECURRING,
                    amount=amount,
                    penalty=penalty,
                    payments_applied=amount_paid,
                    transaction_ref=first_payment.transaction_id if first_payment else None,
                    reference=(
                        (first_payment.reference or first_payment.transaction_id)
                        if first_payment
                        else None
                    ),
                    method=first_payment.method if first_payment else None,
                    notes=first_payment.notes if first_payment else None,
                    fiscal_period=period,
                )
            )
        return items

    def _due_date(
        self,
        payment: PeriodPayment | None,
        fiscal_year: int,
        fiscal_month: int,
        start_month: int,
        context: dict,
    ) -> date:
        """Stored due date of the period if any, else the 1st of its calendar month."""
        if payment is not None and payment.due_date:
            try:
                stored = parse_date(payment.due_date)
            except DateParseError as e:
                raise DateParseError(e.message, **context) from e
            if stored is not None:
                return stored
        return fiscal_month_start(fiscal_year, fiscal_month, start_month)

    def _penalty(
        self,
        base_amount: int,
        due_date: date,
        *,
        amount_paid: int,
        stored_penalty: int,
        billing_config: BillingConfig,
        as_of: date,
        context: dict,
    ) -> int:
        # Paid periods keep their stored penalty, waived ones included
        if amount_paid > 0:
            return stored_penalty
        return calculate_penalty(base_amount, due_date, as_of, billing_config, context)


def _amount(payment: PeriodPayment | None, field: str, context: dict) -> int:
    if payment is None:
        return 0
    return ensure_centavos(getattr(payment, field) or 0, field, allow_negative=False, **context)
