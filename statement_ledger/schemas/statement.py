"""Statement output schemas.

Internal values are integer centavos; every money field here is a Decimal in
major units with two places, converted with ``centavos_to_major``.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from statement_ledger.services.ledger_types import (
    ChargeCategory,
    FiscalPeriod,
    LineItem,
    SectionSubtotal,
    StatementSummaryTotals,
)
from statement_ledger.services.money import centavos_to_major


class FiscalPeriodOut(BaseModel):
    """Fiscal month or quarter of a row."""

    model_config = ConfigDict(frozen=True)

    year: int
    month: int | None = None
    quarter: int | None = None
    label: str
    """Display label (e.g., '2026-03' or '2026-Q1')."""

    @classmethod
    def from_period(cls, period: FiscalPeriod) -> "FiscalPeriodOut":
        return cls(year=period.year, month=period.month, quarter=period.quarter, label=period.label)


class LineItemOut(BaseModel):
    """One statement row."""

    model_config = ConfigDict(frozen=True)

    date: date
    description: str
    category: ChargeCategory
    amount: Decimal
    penalty: Decimal
    payments_applied: Decimal
    balance: Decimal
    is_payment: bool = False
    transaction_ref: str | None = None
    reference: str | None = None
    method: str | None = None
    notes: str | None = None
    fiscal_period: FiscalPeriodOut | None = None
    consumption: Decimal | None = None
    """Metered consumption (utility rows only)."""

    ledger_category: str | None = None
    """Category recorded on the ledger transaction or allocation (ledger rows only)."""

    @classmethod
    def from_item(cls, item: LineItem) -> "LineItemOut":
        return cls(
            date=item.date,
            description=item.description,
            category=item.category,
            amount=centavos_to_major(item.amount),
            penalty=centavos_to_major(item.penalty),
            payments_applied=centavos_to_major(item.payments_applied),
            balance=centavos_to_major(item.balance),
            is_payment=item.is_payment,
            transaction_ref=item.transaction_ref,
            reference=item.reference,
            method=item.method,
            notes=item.notes,
            fiscal_period=(
                FiscalPeriodOut.from_period(item.fiscal_period) if item.fiscal_period else None
            ),
            consumption=item.consumption,
            ledger_category=item.ledger_category,
        )


class SectionSubtotalOut(BaseModel):
    """Totals for one charge section. ``running_balance`` is never negative."""

    model_config = ConfigDict(frozen=True)

    subtotal: Decimal
    penalty_subtotal: Decimal
    payments_subtotal: Decimal
    running_balance: Decimal

    @classmethod
    def from_subtotal(cls, subtotal: SectionSubtotal) -> "SectionSubtotalOut":
        return cls(
            subtotal=centavos_to_major(subtotal.subtotal),
            penalty_subtotal=centavos_to_major(subtotal.penalty_subtotal),
            payments_subtotal=centavos_to_major(subtotal.payments_subtotal),
            running_balance=centavos_to_major(subtotal.running_balance),
        )


class PaidItemsOut(BaseModel):
    model_config = ConfigDict(frozen=True)

    count: int
    total: Decimal


class PastDueItemsOut(BaseModel):
    model_config = ConfigDict(frozen=True)

    count: int
    total: Decimal
    penalty_total: Decimal


class ComingDueItemsOut(BaseModel):
    model_config = ConfigDict(frozen=True)

    count: int
    total: Decimal


class StatementSummaryOut(BaseModel):
    """Top-line statement totals."""

    model_config = ConfigDict(frozen=True)

    total_balance: Decimal
    """Balance after the last row."""

    credit_balance: Decimal
    """Overpayment credit held for the unit."""

    paid_items: PaidItemsOut
    past_due_items: PastDueItemsOut
    coming_due_items: ComingDueItemsOut

    @classmethod
    def from_totals(cls, totals: StatementSummaryTotals) -> "StatementSummaryOut":
        return cls(
            total_balance=centavos_to_major(totals.total_balance),
            credit_balance=centavos_to_major(totals.credit_balance),
            paid_items=PaidItemsOut(
                count=totals.paid_items.count,
                total=centavos_to_major(totals.paid_items.total),
            ),
            past_due_items=PastDueItemsOut(
                count=totals.past_due_items.count,
                total=centavos_to_major(totals.past_due_items.total),
                penalty_total=centavos_to_major(totals.past_due_items.penalty_total),
            ),
            coming_due_items=ComingDueItemsOut(
                count=totals.coming_due_items.count,
                total=centavos_to_major(totals.coming_due_items.total),
            ),
        )


class StatementLedger(BaseModel):
    """Account statement for one unit over a date range."""

    model_config = ConfigDict(frozen=True)

    report_id: str
    """Statement identifier (statement_{client}_{unit}_{timestamp})."""

    client_id: str
    unit_id: str
    start_date: date
    end_date: date
    as_of: date
    generated_at: datetime
    fiscal_year_start_month: int

    line_items: list[LineItemOut]
    """Rows in ledger order."""

    section_subtotals: dict[ChargeCategory, SectionSubtotalOut]
    """Subtotals keyed by charge category (recurring and metered sections)."""

    summary: StatementSummaryOut

    def section_items(self, category: ChargeCategory) -> list[LineItemOut]:
        """Rows of one section, in ledger order."""
        return [item for item in self.line_items if item.category == category]


__all__ = [
    "FiscalPeriodOut",
    "LineItemOut",
    "SectionSubtotalOut",
    "PaidItemsOut",
    "PastDueItemsOut",
    "ComingDueItemsOut",
    "StatementSummaryOut",
    "StatementLedger",
]
