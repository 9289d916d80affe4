"""Integration tests for the SQLAlchemy store adapters (aiosqlite)."""

from datetime import date
from decimal import Decimal

import pytest

from statement_ledger.models import (
    BillingConfigRecord,
    ClientSettings,
    DuesPayment,
    DuesYear,
    LedgerTransactionRecord,
    TransactionAllocationRecord,
    UnitCredit,
    UtilityBill,
)
from statement_ledger.services.db import create_all, create_session_factory
from statement_ledger.services.errors import ConfigurationError
from statement_ledger.services.ledger_types import (
    BillingFrequency,
    ChargeCategory,
)
from statement_ledger.services.sql_stores import (
    SqlBillStore,
    SqlConfigStore,
    SqlCreditStore,
    SqlDuesStore,
    SqlLedgerStore,
)
from statement_ledger.services.statement_service import StatementService

CLIENT_ID = "AVII"
UNIT_ID = "101"


@pytest.fixture
async def session_factory(tmp_path):
    """File-backed SQLite database so concurrent reads get their own connections."""
    factory = create_session_factory(f"sqlite:///{tmp_path / 'statement.db'}")
    await create_all(factory)
    yield factory
    await factory.kw["bind"].dispose()


@pytest.fixture
async def seeded(session_factory):
    """Client configuration and one unit's records."""
    async with session_factory() as session:
        session.add_all(
            [
                ClientSettings(client_id=CLIENT_ID, fiscal_year_start_month=1),
                BillingConfigRecord(
                    client_id=CLIENT_ID,
                    category=ChargeCategory.RECURRING,
                    penalty_rate=Decimal("0.05"),
                    penalty_days=10,
                    compounding_enabled=True,
                    frequency=BillingFrequency.MONTHLY,
                ),
                BillingConfigRecord(
                    client_id=CLIENT_ID,
                    category=ChargeCategory.METERED,
                    penalty_rate=Decimal("0.05"),
                    penalty_days=10,
                ),
                DuesYear(
                    client_id=CLIENT_ID,
                    unit_id=UNIT_ID,
                    fiscal_year=2025,
                    scheduled_amount=20000,
                    payments=[
                        DuesPayment(
                            fiscal_month=2,
                            amount_paid=20000,
                            penalty_stored=0,
                            reference="TX-FEB",
                            method="transfer",
                        )
                    ],
                ),
                UtilityBill(
                    client_id=CLIENT_ID,
                    unit_id=UNIT_ID,
                    period_key="2025-01",
                    current_charge=35000,
                    penalty_amount=1750,
                    consumption=Decimal("12.500"),
                ),
                LedgerTransactionRecord(
                    client_id=CLIENT_ID,
                    unit_id=UNIT_ID,
                    transaction_id="TX-SPLIT",
                    transaction_date=date(2025, 1, 20),
                    amount=-25000,
                    description="January payment",
                    allocations=[
                        TransactionAllocationRecord(
                            position=1, amount=-20000, category="hoa_dues", description="HOA"
                        ),
                        TransactionAllocationRecord(position=2, amount=-5000, category="water"),
                    ],
                ),
                UnitCredit(client_id=CLIENT_ID, unit_id=UNIT_ID, credit_balance=1500),
            ]
        )
        await session.commit()
    return session_factory


class TestSqlConfigStore:
    """Test configuration reads."""

    async def test_fiscal_config(self, seeded):
        config = await SqlConfigStore(seeded).get_fiscal_config(CLIENT_ID)

        assert config.fiscal_year_start_month == 1

    async def test_fiscal_config_defaults_to_calendar_year(self, seeded):
        config = await SqlConfigStore(seeded).get_fiscal_config("OTHER")

        assert config.fiscal_year_start_month == 1

    async def test_billing_config(self, seeded):
        config = await SqlConfigStore(seeded).get_billing_config(
            CLIENT_ID, ChargeCategory.RECURRING
        )

        assert config.penalty_rate == Decimal("0.05")
        assert config.penalty_days == 10
        assert config.compounding_enabled is True
        assert config.frequency == BillingFrequency.MONTHLY

    async def test_missing_billing_config_raises(self, seeded):
        with pytest.raises(ConfigurationError, match="not found"):
            await SqlConfigStore(seeded).get_billing_config("OTHER", ChargeCategory.RECURRING)

    async def test_incomplete_billing_config_raises(self, seeded):
        async with seeded() as session:
            session.add(
                BillingConfigRecord(
                    client_id="MTC",
                    category=ChargeCategory.RECURRING,
                    penalty_rate=Decimal("0.05"),
                    penalty_days=None,
                )
            )
            await session.commit()

        with pytest.raises(ConfigurationError, match="penalty_days"):
            await SqlConfigStore(seeded).get_billing_config("MTC", ChargeCategory.RECURRING)


class TestSqlRecordStores:
    """Test dues, bill, ledger and credit reads."""

    async def test_dues_payments_indexed_by_fiscal_month(self, seeded):
        record = await SqlDuesStore(seeded).get_year_record(CLIENT_ID, UNIT_ID, 2025)

        assert record.scheduled_amount == 20000
        assert len(record.payments) == 12
        assert record.payment_for(1) is None
        assert record.payment_for(2).amount_paid == 20000
        assert record.payment_for(2).reference == "TX-FEB"

    async def test_missing_dues_year(self, seeded):
        assert await SqlDuesStore(seeded).get_year_record(CLIENT_ID, UNIT_ID, 2024) is None

    async def test_monthly_bill(self, seeded):
        bill = await SqlBillStore(seeded).get_monthly_bill(CLIENT_ID, UNIT_ID, "2025-01")

        assert bill.current_charge == 35000
        assert bill.penalty_amount == 1750
        assert bill.consumption == Decimal("12.5")

    async def test_missing_quarterly_bill(self, seeded):
        assert await SqlBillStore(seeded).get_quarterly_bill(CLIENT_ID, UNIT_ID, 2025, 1) is None

    async def test_ledger_transactions_with_allocations(self, seeded):
        transactions = await SqlLedgerStore(seeded).query_by_unit(
            CLIENT_ID, UNIT_ID, date(2025, 1, 1), date(2025, 1, 31)
        )

        assert len(transactions) == 1
        transaction = transactions[0]
        assert transaction.transaction_id == "TX-SPLIT"
        assert transaction.date == date(2025, 1, 20)
        assert [allocation.amount for allocation in transaction.allocations] == [-20000, -5000]

    async def test_ledger_range_excludes_other_dates(self, seeded):
        transactions = await SqlLedgerStore(seeded).query_by_unit(
            CLIENT_ID, UNIT_ID, date(2025, 2, 1), date(2025, 2, 28)
        )

        assert transactions == []

    async def test_credit_balance(self, seeded):
        store = SqlCreditStore(seeded)

        assert await store.get_credit_balance(CLIENT_ID, UNIT_ID) == 1500
        assert await store.get_credit_balance(CLIENT_ID, "999") == 0


class TestStatementOverSql:
    """Test a full statement built from the database."""

    async def test_build_statement(self, seeded):
        service = StatementService(
            SqlConfigStore(seeded),
            SqlDuesStore(seeded),
            SqlBillStore(seeded),
            SqlLedgerStore(seeded),
            SqlCreditStore(seeded),
        )

        statement = await service.build_statement(
            CLIENT_ID, UNIT_ID, date(2025, 1, 1), date(2025, 1, 31), as_of=date(2025, 4, 15)
        )

        assert [row.description for row in statement.line_items] == [
            "Maintenance Fee January 2025",
            "Water Consumption January 2025",
            "HOA",
            "January payment",
        ]
        dues, water, _, _ = statement.line_items
        assert dues.penalty == Decimal("31.53")
        assert water.penalty == Decimal("17.50")
        # 200.00 + 31.53 + 350.00 + 17.50 - 200.00 - 50.00
        assert statement.summary.total_balance == Decimal("349.03")
        assert statement.summary.paid_items.count == 2
        assert statement.summary.credit_balance == Decimal("15.00")
