"""Shared fixtures for statement ledger tests."""

from decimal import Decimal

import pytest

from statement_ledger.services.ledger_types import (
    BillingConfig,
    BillingFrequency,
    ChargeCategory,
    FiscalPeriodConfig,
)
from statement_ledger.services.memory_stores import InMemoryConfigStore

CLIENT_ID = "AVII"
UNIT_ID = "101"


@pytest.fixture
def dues_config():
    """Monthly dues: 5% monthly compounding penalty after a 10 day grace period."""
    return BillingConfig(
        penalty_rate=Decimal("0.05"),
        penalty_days=10,
        compounding_enabled=True,
        frequency=BillingFrequency.MONTHLY,
    )


@pytest.fixture
def utility_config():
    """Monthly water bills."""
    return BillingConfig(
        penalty_rate=Decimal("0.05"),
        penalty_days=10,
        frequency=BillingFrequency.MONTHLY,
    )


@pytest.fixture
def calendar_fiscal_config():
    """Fiscal year equal to the calendar year."""
    return FiscalPeriodConfig(fiscal_year_start_month=1)


@pytest.fixture
def config_store(dues_config, utility_config, calendar_fiscal_config):
    """Config store holding the dues and utility configs for CLIENT_ID."""
    return InMemoryConfigStore(
        fiscal_configs={CLIENT_ID: calendar_fiscal_config},
        billing_configs={
            (CLIENT_ID, ChargeCategory.RECURRING): dues_config,
            (CLIENT_ID, ChargeCategory.METERED): utility_config,
        },
    )
