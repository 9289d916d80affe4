"""In-memory implementations of the statement store interfaces.

For callers that already hold the records (spreadsheet imports, scripts,
tests). Data is supplied up front; reads never mutate it.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Mapping

from statement_ledger.services.errors import ConfigurationError, DateParseError
from statement_ledger.services.ledger_types import (
    BillingConfig,
    ChargeCategory,
    FiscalPeriodConfig,
)
from statement_ledger.services.parsers import parse_date
from statement_ledger.services.stores import (
    DuesYearRecord,
    LedgerTransaction,
    UnitBill,
    quarterly_bill_key,
)


@dataclass
class InMemoryConfigStore:
    """Configuration keyed by client.

    ``billing_configs`` maps (client_id, category) to either a validated
    BillingConfig or a raw document accepted by ``BillingConfig.from_mapping``.
    """

    fiscal_configs: dict[str, FiscalPeriodConfig] = field(default_factory=dict)
    billing_configs: dict[tuple[str, ChargeCategory], BillingConfig | Mapping[str, Any]] = field(
        default_factory=dict
    )

    async def get_fiscal_config(self, client_id: str) -> FiscalPeriodConfig:
        return self.fiscal_configs.get(client_id) or FiscalPeriodConfig()

    async def get_billing_config(self, client_id: str, category: ChargeCategory) -> BillingConfig:
        config = self.billing_configs.get((client_id, category))
        if isinstance(config, BillingConfig):
            return config
        if config is not None and not isinstance(config, Mapping):
            raise ConfigurationError(
                f"Unsupported billing configuration type {type(config).__name__}",
                client_id=client_id,
                period=category.value,
            )
        return BillingConfig.from_mapping(config, client_id=client_id, category=category)


@dataclass
class InMemoryDuesStore:
    """Dues records keyed by (client_id, unit_id, fiscal_year)."""

    records: dict[tuple[str, str, int], DuesYearRecord] = field(default_factory=dict)

    async def get_year_record(
        self, client_id: str, unit_id: str, fiscal_year: int
    ) -> DuesYearRecord | None:
        return self.records.get((client_id, unit_id, fiscal_year))


@dataclass
class InMemoryBillStore:
    """Unit bills keyed by (client_id, unit_id, period key).

    Monthly keys are "YYYY-MM", quarterly keys "YYYY-Qn" (see ``stores``).
    """

    bills: dict[tuple[str, str, str], UnitBill] = field(default_factory=dict)

    async def get_monthly_bill(
        self, client_id: str, unit_id: str, year_month_key: str
    ) -> UnitBill | None:
        return self.bills.get((client_id, unit_id, year_month_key))

    async def get_quarterly_bill(
        self, client_id: str, unit_id: str, fiscal_year: int, quarter: int
    ) -> UnitBill | None:
        return self.bills.get((client_id, unit_id, quarterly_bill_key(fiscal_year, quarter)))


@dataclass
class InMemoryLedgerStore:
    """Ledger transactions keyed by (client_id, unit_id).

    Transactions whose date cannot be parsed are returned as-is so the
    collector can report and skip them.
    """

    transactions: dict[tuple[str, str], list[LedgerTransaction]] = field(default_factory=dict)

    async def query_by_unit(
        self, client_id: str, unit_id: str, start: date, end: date
    ) -> list[LedgerTransaction]:
        result = []
        for transaction in self.transactions.get((client_id, unit_id), []):
            try:
                transaction_date = parse_date(transaction.date)
            except DateParseError:
                result.append(transaction)
                continue
            if transaction_date is None or start <= transaction_date <= end:
                result.append(transaction)
        return result


@dataclass
class InMemoryCreditStore:
    """Credit balances in centavos keyed by (client_id, unit_id)."""

    balances: dict[tuple[str, str], int] = field(default_factory=dict)

    async def get_credit_balance(self, client_id: str, unit_id: str) -> int:
        return self.balances.get((client_id, unit_id), 0)


__all__ = [
    "InMemoryConfigStore",
    "InMemoryDuesStore",
    "InMemoryBillStore",
    "InMemoryLedgerStore",
    "InMemoryCreditStore",
]
