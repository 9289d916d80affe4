"""SQLAlchemy implementations of the statement store interfaces.

Each read opens its own AsyncSession from the injected session factory, so
collectors can issue reads concurrently without sharing a session.
"""

import logging
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from statement_ledger.models.client_config import BillingConfigRecord, ClientSettings
from statement_ledger.models.dues import DuesYear
from statement_ledger.models.ledger_transaction import LedgerTransactionRecord
from statement_ledger.models.unit_credit import UnitCredit
from statement_ledger.models.utility_bill import UtilityBill
from statement_ledger.services.ledger_types import (
    BillingConfig,
    ChargeCategory,
    FiscalPeriodConfig,
)
from statement_ledger.services.stores import (
    Allocation,
    DuesYearRecord,
    LedgerTransaction,
    PeriodPayment,
    UnitBill,
    quarterly_bill_key,
)

logger = logging.getLogger(__name__)


class _SqlStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        """Initialize with an async session factory."""
        self.session_factory = session_factory


class SqlConfigStore(_SqlStore):
    """Fiscal and billing configuration from ``client_settings`` / ``billing_configs``."""

    async def get_fiscal_config(self, client_id: str) -> FiscalPeriodConfig:
        """Fiscal year setting of a client; calendar fiscal year when none is stored."""
        async with self.session_factory() as session:
            result = await session.execute(
                select(ClientSettings).where(ClientSettings.client_id == client_id)
            )
            settings = result.scalar_one_or_none()

        if settings is None:
            logger.debug("No client settings for %s, using calendar fiscal year", client_id)
            return FiscalPeriodConfig()
        return FiscalPeriodConfig(fiscal_year_start_month=settings.fiscal_year_start_month)

    async def get_billing_config(self, client_id: str, category: ChargeCategory) -> BillingConfig:
        """
        Validated billing configuration of one category.

        Raises:
            ConfigurationError: If no row exists or required fields are empty
        """
        async with self.session_factory() as session:
            result = await session.execute(
                select(BillingConfigRecord).where(
                    BillingConfigRecord.client_id == client_id,
                    BillingConfigRecord.category == category,
                )
            )
            record = result.scalar_one_or_none()

        return BillingConfig.from_mapping(
            record.to_mapping() if record else None, client_id=client_id, category=category
        )


class SqlDuesStore(_SqlStore):
    """Dues years and payments from ``dues_years`` / ``dues_payments``."""

    async def get_year_record(
        self, client_id: str, unit_id: str, fiscal_year: int
    ) -> DuesYearRecord | None:
        async with self.session_factory() as session:
            result = await session.execute(
                select(DuesYear)
                .options(selectinload(DuesYear.payments))
                .where(
                    DuesYear.client_id == client_id,
                    DuesYear.unit_id == unit_id,
                    DuesYear.fiscal_year == fiscal_year,
                )
            )
            dues_year = result.scalar_one_or_none()

        if dues_year is None:
            return None

        payments: list[PeriodPayment | None] = [None] * 12
        for payment in dues_year.payments:
            if not 1 <= payment.fiscal_month <= 12:
                logger.warning(
                    "Ignoring dues payment with fiscal month %d for %s/%s FY %d",
                    payment.fiscal_month,
                    client_id,
                    unit_id,
                    fiscal_year,
                )
                continue
            payments[payment.fiscal_month - 1] = PeriodPayment(
                amount_paid=payment.amount_paid,
                penalty_stored=payment.penalty_stored,
                due_date=payment.due_date,
                method=payment.method,
                reference=payment.reference,
                transaction_id=payment.transaction_id,
                notes=payment.notes,
            )

        return DuesYearRecord(scheduled_amount=dues_year.scheduled_amount, payments=payments)


class SqlBillStore(_SqlStore):
    """Unit utility bills from ``utility_bills``."""

    async def get_monthly_bill(
        self, client_id: str, unit_id: str, year_month_key: str
    ) -> UnitBill | None:
        return await self._get_bill(client_id, unit_id, year_month_key)

    async def get_quarterly_bill(
        self, client_id: str, unit_id: str, fiscal_year: int, quarter: int
    ) -> UnitBill | None:
        return await self._get_bill(client_id, unit_id, quarterly_bill_key(fiscal_year, quarter))

    async def _get_bill(self, client_id: str, unit_id: str, period_key: str) -> UnitBill | None:
        async with self.session_factory() as session:
            result = await session.execute(
                select(UtilityBill).where(
                    UtilityBill.client_id == client_id,
                    UtilityBill.unit_id == unit_id,
                    UtilityBill.period_key == period_key,
                )
            )
            bill = result.scalar_one_or_none()

        if bill is None:
            return None

        return UnitBill(
            current_charge=bill.current_charge,
            paid_amount=bill.paid_amount,
            penalty_amount=bill.penalty_amount,
            due_date=bill.due_date,
            consumption=bill.consumption,
            bill_id=bill.bill_id,
            notes=bill.notes,
            last_payment_reference=bill.last_payment_reference,
            last_payment_method=bill.last_payment_method,
            last_transaction_id=bill.last_transaction_id,
        )


class SqlLedgerStore(_SqlStore):
    """Ledger transactions and allocations from ``ledger_transactions``."""

    async def query_by_unit(
        self, client_id: str, unit_id: str, start: date, end: date
    ) -> list[LedgerTransaction]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(LedgerTransactionRecord)
                .options(selectinload(LedgerTransactionRecord.allocations))
                .where(
                    LedgerTransactionRecord.client_id == client_id,
                    LedgerTransactionRecord.unit_id == unit_id,
                    LedgerTransactionRecord.transaction_date >= start,
                    LedgerTransactionRecord.transaction_date <= end,
                )
                .order_by(LedgerTransactionRecord.transaction_date, LedgerTransactionRecord.id)
            )
            records = result.scalars().all()

        return [
            LedgerTransaction(
                transaction_id=record.transaction_id,
                date=record.transaction_date,
                amount=record.amount,
                description=record.description,
                category=record.category,
                reference=record.reference,
                method=record.method,
                notes=record.notes,
                allocations=[
                    Allocation(
                        amount=allocation.amount,
                        category=allocation.category,
                        description=allocation.description,
                    )
                    for allocation in record.allocations
                ],
            )
            for record in records
        ]


class SqlCreditStore(_SqlStore):
    """Unit credit balances from ``unit_credits``."""

    async def get_credit_balance(self, client_id: str, unit_id: str) -> int:
        async with self.session_factory() as session:
            result = await session.execute(
                select(UnitCredit.credit_balance).where(
                    UnitCredit.client_id == client_id,
                    UnitCredit.unit_id == unit_id,
                )
            )
            return int(result.scalar() or 0)


__all__ = [
    "SqlConfigStore",
    "SqlDuesStore",
    "SqlBillStore",
    "SqlLedgerStore",
    "SqlCreditStore",
]
