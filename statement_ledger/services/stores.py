"""Read-only store interfaces consumed by the statement collectors.

Stores are injected into each collector through its constructor. Records
carry raw values as the store holds them (dates may be strings or
datetimes); collectors normalize them on ingestion.

Money fields are integer centavos.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Protocol

from statement_ledger.services.ledger_types import (
    BillingConfig,
    ChargeCategory,
    FiscalPeriodConfig,
)


@dataclass
class PeriodPayment:
    """Payment recorded against one fiscal month of a dues year."""

    amount_paid: int = 0
    penalty_stored: int = 0
    due_date: object = None
    method: str | None = None
    reference: str | None = None
    transaction_id: str | None = None
    notes: str | None = None


@dataclass
class DuesYearRecord:
    """One unit's dues schedule and payments for a fiscal year.

    ``payments`` is indexed by fiscal month - 1; missing months are None.
    """

    scheduled_amount: int
    payments: list[PeriodPayment | None] = field(default_factory=list)

    def payment_for(self, fiscal_month: int) -> PeriodPayment | None:
        index = fiscal_month - 1
        if 0 <= index < len(self.payments):
            return self.payments[index]
        return None


@dataclass
class UnitBill:
    """One unit's share of a utility bill (monthly or quarterly)."""

    current_charge: int = 0
    paid_amount: int = 0
    penalty_amount: int = 0
    due_date: object = None
    consumption: Decimal | None = None
    bill_id: str | None = None
    notes: str | None = None
    last_payment_reference: str | None = None
    last_payment_method: str | None = None
    last_transaction_id: str | None = None


@dataclass
class Allocation:
    """Split of a ledger transaction. Negative amounts are credits to the unit."""

    amount: int
    category: str | None = None
    description: str | None = None


@dataclass
class LedgerTransaction:
    """Free-form transaction recorded for a unit. Negative amounts are payments."""

    transaction_id: str
    date: object
    amount: int = 0
    description: str | None = None
    category: str | None = None
    reference: str | None = None
    method: str | None = None
    notes: str | None = None
    allocations: list[Allocation] = field(default_factory=list)


class ConfigStore(Protocol):
    async def get_fiscal_config(self, client_id: str) -> FiscalPeriodConfig: ...

    async def get_billing_config(self, client_id: str, category: ChargeCategory) -> BillingConfig:
        """Return the category's config; raise ConfigurationError when incomplete."""
        ...


class DuesStore(Protocol):
    async def get_year_record(
        self, client_id: str, unit_id: str, fiscal_year: int
    ) -> DuesYearRecord | None: ...


class BillStore(Protocol):
    async def get_monthly_bill(
        self, client_id: str, unit_id: str, year_month_key: str
    ) -> UnitBill | None: ...

    async def get_quarterly_bill(
        self, client_id: str, unit_id: str, fiscal_year: int, quarter: int
    ) -> UnitBill | None: ...


class LedgerStore(Protocol):
    async def query_by_unit(
        self, client_id: str, unit_id: str, start: date, end: date
    ) -> list[LedgerTransaction]: ...


class CreditStore(Protocol):
    async def get_credit_balance(self, client_id: str, unit_id: str) -> int: ...


def monthly_bill_key(year: int, month: int) -> str:
    """Calendar month key used by monthly utility bills ("2025-03")."""
    return f"{year}-{month:02d}"


def quarterly_bill_key(fiscal_year: int, quarter: int) -> str:
    """Fiscal quarter key used by quarterly utility bills ("2026-Q1")."""
    return f"{fiscal_year}-Q{quarter}"


__all__ = [
    "PeriodPayment",
    "DuesYearRecord",
    "UnitBill",
    "Allocation",
    "LedgerTransaction",
    "ConfigStore",
    "DuesStore",
    "BillStore",
    "LedgerStore",
    "CreditStore",
    "monthly_bill_key",
    "quarterly_bill_key",
]
