"""Unit tests for metered utility bill collection."""

from datetime import date
from decimal import Decimal

import pytest

from statement_ledger.services.errors import ValidationError
from statement_ledger.services.ledger_types import (
    BillingFrequency,
    ChargeCategory,
    FiscalPeriod,
    FiscalPeriodConfig,
)
from statement_ledger.services.memory_stores import InMemoryBillStore
from statement_ledger.services.stores import UnitBill
from statement_ledger.services.utility_bill_collector import UtilityBillCollector

CLIENT_ID = "AVII"
UNIT_ID = "101"


def _collector(bills: dict[str, UnitBill]) -> UtilityBillCollector:
    store = InMemoryBillStore(
        bills={(CLIENT_ID, UNIT_ID, key): bill for key, bill in bills.items()}
    )
    return UtilityBillCollector(store)


class TestMonthlyBills:
    """Test bills keyed by calendar month."""

    async def test_bills_in_range(self):
        collector = _collector(
            {
                "2025-01": UnitBill(current_charge=35000, penalty_amount=1750, consumption="12,5"),
                "2025-02": UnitBill(current_charge=40000, paid_amount=40000),
            }
        )

        items = await collector.collect(
            CLIENT_ID,
            UNIT_ID,
            date(2025, 1, 1),
            date(2025, 3, 31),
            frequency=BillingFrequency.MONTHLY,
            fiscal_config=FiscalPeriodConfig(),
        )

        assert len(items) == 2
        january, february = items
        assert january.date == date(2025, 1, 1)
        assert january.category == ChargeCategory.METERED
        assert january.description == "Water Consumption January 2025"
        assert january.amount == 35000
        assert january.penalty == 1750
        assert january.consumption == Decimal("12.5")
        assert january.reference == "2025-01"
        assert february.payments_applied == 40000

    async def test_stored_penalty_used_as_is(self):
        """The penalty computed at billing time is not recomputed."""
        collector = _collector({"2024-01": UnitBill(current_charge=35000, penalty_amount=123)})

        items = await collector.collect(
            CLIENT_ID,
            UNIT_ID,
            date(2024, 1, 1),
            date(2024, 1, 31),
            frequency=BillingFrequency.MONTHLY,
            fiscal_config=FiscalPeriodConfig(),
        )

        assert items[0].penalty == 123

    async def test_stored_due_date_decides_range(self):
        collector = _collector(
            {
                "2025-02": UnitBill(current_charge=1000, due_date="2025-02-10"),
                "2025-03": UnitBill(current_charge=1000, due_date=date(2025, 4, 10)),
            }
        )

        items = await collector.collect(
            CLIENT_ID,
            UNIT_ID,
            date(2025, 1, 1),
            date(2025, 3, 31),
            frequency=BillingFrequency.MONTHLY,
            fiscal_config=FiscalPeriodConfig(),
        )

        assert [item.date for item in items] == [date(2025, 2, 10)]

    async def test_fiscal_period_follows_fiscal_year(self):
        collector = _collector({"2025-08": UnitBill(current_charge=1000)})

        items = await collector.collect(
            CLIENT_ID,
            UNIT_ID,
            date(2025, 8, 1),
            date(2025, 8, 31),
            frequency=BillingFrequency.MONTHLY,
            fiscal_config=FiscalPeriodConfig(fiscal_year_start_month=7),
        )

        assert items[0].fiscal_period == FiscalPeriod(year=2026, month=2)

    async def test_payment_metadata_from_last_payment(self):
        bill = UnitBill(
            current_charge=1000,
            paid_amount=1000,
            last_payment_reference="REF-9",
            last_payment_method="cash",
            last_transaction_id="TX-9",
        )
        collector = _collector({"2025-01": bill})

        items = await collector.collect(
            CLIENT_ID,
            UNIT_ID,
            date(2025, 1, 1),
            date(2025, 1, 31),
            frequency=BillingFrequency.MONTHLY,
            fiscal_config=FiscalPeriodConfig(),
        )

        assert items[0].reference == "REF-9"
        assert items[0].method == "cash"
        assert items[0].transaction_ref == "TX-9"

    async def test_fractional_centavos_raise(self):
        collector = _collector({"2025-01": UnitBill(current_charge=10.5)})

        with pytest.raises(ValidationError):
            await collector.collect(
                CLIENT_ID,
                UNIT_ID,
                date(2025, 1, 1),
                date(2025, 1, 31),
                frequency=BillingFrequency.MONTHLY,
                fiscal_config=FiscalPeriodConfig(),
            )

    @pytest.mark.parametrize(
        "bill",
        [
            UnitBill(current_charge=-35000),
            UnitBill(current_charge=35000, penalty_amount=-1750),
            UnitBill(current_charge=35000, paid_amount=-100),
        ],
    )
    async def test_negative_amounts_raise(self, bill):
        collector = _collector({"2025-01": bill})

        with pytest.raises(ValidationError, match="must not be negative") as exc_info:
            await collector.collect(
                CLIENT_ID,
                UNIT_ID,
                date(2025, 1, 1),
                date(2025, 1, 31),
                frequency=BillingFrequency.MONTHLY,
                fiscal_config=FiscalPeriodConfig(),
            )

        assert exc_info.value.period == "2025-01"


class TestQuarterlyBills:
    """Test bills keyed by fiscal quarter."""

    async def test_due_date_defaults_to_quarter_start(self):
        """Q1 and Q2 of FY 2026 with July start begin in July and October 2025."""
        collector = _collector(
            {
                "2026-Q1": UnitBill(current_charge=90000),
                "2026-Q2": UnitBill(current_charge=80000, bill_id="WB-2026-Q2"),
            }
        )

        items = await collector.collect(
            CLIENT_ID,
            UNIT_ID,
            date(2025, 7, 1),
            date(2025, 12, 31),
            frequency=BillingFrequency.QUARTERLY,
            fiscal_config=FiscalPeriodConfig(fiscal_year_start_month=7),
        )

        assert [item.date for item in items] == [date(2025, 7, 1), date(2025, 10, 1)]
        assert items[0].description == "Water Consumption Q1 2026"
        assert items[0].reference == "2026-Q1"
        assert items[0].fiscal_period == FiscalPeriod(year=2026, quarter=1)
        assert items[1].description == "WB-2026-Q2"

    async def test_stored_due_date_is_authoritative(self):
        collector = _collector({"2025-Q1": UnitBill(current_charge=1000, due_date="2025-01-20")})

        items = await collector.collect(
            CLIENT_ID,
            UNIT_ID,
            date(2025, 1, 1),
            date(2025, 12, 31),
            frequency=BillingFrequency.QUARTERLY,
            fiscal_config=FiscalPeriodConfig(),
        )

        assert items[0].date == date(2025, 1, 20)
