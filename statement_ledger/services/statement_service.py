"""Statement aggregation for a single unit.

Pipeline:
1. Load fiscal and billing configuration from the config store
2. Collect dues, utility and ledger line items concurrently
3. Merge chronologically and compute running balances
4. Compute section subtotals and summary buckets
5. Convert to the ``StatementLedger`` output schema

Nothing is cached between calls. Cancelling the calling task cancels the
in-flight store reads and no partial statement is returned.
"""

import logging
from datetime import date, datetime
from zoneinfo import ZoneInfo

from statement_ledger.config import get_settings
from statement_ledger.schemas.statement import (
    LineItemOut,
    SectionSubtotalOut,
    StatementLedger,
    StatementSummaryOut,
)
from statement_ledger.services.balance_service import BalanceCalculationService
from statement_ledger.services.concurrency import gather_or_cancel
from statement_ledger.services.dues_collector import DuesCollector
from statement_ledger.services.errors import ConfigurationError, ValidationError
from statement_ledger.services.ledger_types import BillingConfig, ChargeCategory, LineItem
from statement_ledger.services.ledger_merger import merge_line_items
from statement_ledger.services.money import ensure_centavos
from statement_ledger.services.stores import (
    BillStore,
    ConfigStore,
    CreditStore,
    DuesStore,
    LedgerStore,
)
from statement_ledger.services.summary_service import classify_line_items
from statement_ledger.services.transaction_collector import TransactionCollector
from statement_ledger.services.utility_bill_collector import UtilityBillCollector

logger = logging.getLogger(__name__)

SUBTOTAL_SECTIONS = (ChargeCategory.RECURRING, ChargeCategory.METERED)


class StatementService:
    """Build account statements from injected store collaborators."""

    def __init__(
        self,
        config_store: ConfigStore,
        dues_store: DuesStore,
        bill_store: BillStore,
        ledger_store: LedgerStore,
        credit_store: CreditStore | None = None,
        default_timezone: str | None = None,
    ):
        """Initialize with store collaborators; the timezone defaults to ``Settings.timezone``."""
        self.config_store = config_store
        self.default_timezone = default_timezone or get_settings().timezone
        self.credit_store = credit_store
        self.dues_collector = DuesCollector(dues_store)
        self.utility_collector = UtilityBillCollector(bill_store)
        self.transaction_collector = TransactionCollector(ledger_store)
        self.balance_service = BalanceCalculationService()

    async def build_statement(
        self,
        client_id: str,
        unit_id: str,
        start: date,
        end: date,
        *,
        as_of: date | None = None,
        include_dues: bool = True,
        include_utilities: bool = True,
        timezone: str | None = None,
    ) -> StatementLedger:
        """
        Build the statement of one unit for [start, end].

        Args:
            client_id: Client (association) ID
            unit_id: Unit ID
            start: First day of the statement range
            end: Last day of the statement range
            as_of: Statement date for penalties and due buckets (default: today
                in ``timezone``)
            include_dues: Include recurring dues rows
            include_utilities: Include metered utility rows
            timezone: IANA timezone used for "today" and the generation timestamp
                (default: the service timezone)

        Returns:
            StatementLedger with rows, section subtotals and summary

        Raises:
            ConfigurationError: If configuration is missing or incomplete
            ValidationError: If the range is inverted or a record holds
                non-centavo amounts
            PenaltyCalculationError: If a dues penalty cannot be computed
            DateParseError: If a stored dues or bill due date cannot be parsed
        """
        if start > end:
            raise ValidationError(
                f"Statement start {start} is after end {end}",
                client_id=client_id,
                unit_id=unit_id,
            )

        tz = ZoneInfo(timezone or self.default_timezone)
        generated_at = datetime.now(tz)
        as_of = as_of or generated_at.date()

        logger.info(
            "Building statement for %s/%s from %s to %s (as of %s)",
            client_id,
            unit_id,
            start,
            end,
            as_of,
        )

        fiscal_config = await self.config_store.get_fiscal_config(client_id)
        dues_config, utility_config = await gather_or_cancel(
            self._billing_config(client_id, ChargeCategory.RECURRING, include_dues),
            self._billing_config(client_id, ChargeCategory.METERED, include_utilities),
        )

        recurring, metered, ledger = await gather_or_cancel(
            self._collect_dues(client_id, unit_id, start, end, fiscal_config, dues_config, as_of),
            self._collect_utilities(client_id, unit_id, start, end, fiscal_config, utility_config),
            self.transaction_collector.collect(client_id, unit_id, start, end),
        )

        merged = merge_line_items(recurring, metered, ledger)
        balanced = self.balance_service.calculate_running_balance(merged)
        subtotals = {
            category: self.balance_service.calculate_section_subtotal(balanced, category)
            for category in SUBTOTAL_SECTIONS
        }

        credit_balance = await self._credit_balance(client_id, unit_id)
        totals = classify_line_items(balanced, as_of, credit_balance)

        statement = StatementLedger(
            report_id=f"statement_{client_id}_{unit_id}_{int(generated_at.timestamp() * 1000)}",
            client_id=client_id,
            unit_id=unit_id,
            start_date=start,
            end_date=end,
            as_of=as_of,
            generated_at=generated_at,
            fiscal_year_start_month=fiscal_config.fiscal_year_start_month,
            line_items=[LineItemOut.from_item(item) for item in balanced],
            section_subtotals={
                category: SectionSubtotalOut.from_subtotal(subtotal)
                for category, subtotal in subtotals.items()
            },
            summary=StatementSummaryOut.from_totals(totals),
        )

        logger.info(
            "Statement %s: %d rows, balance %s, %d past due (%s), %d coming due",
            statement.report_id,
            len(balanced),
            statement.summary.total_balance,
            statement.summary.past_due_items.count,
            statement.summary.past_due_items.total,
            statement.summary.coming_due_items.count,
        )
        return statement

    async def _billing_config(
        self, client_id: str, category: ChargeCategory, included: bool
    ) -> BillingConfig | None:
        if not included:
            return None
        config = await self.config_store.get_billing_config(client_id, category)
        if config is None:
            raise ConfigurationError(
                "Billing configuration not found", client_id=client_id, period=category.value
            )
        return config

    async def _collect_dues(
        self, client_id, unit_id, start, end, fiscal_config, billing_config, as_of
    ) -> list[LineItem]:
        if billing_config is None:
            return []
        return await self.dues_collector.collect(
            client_id,
            unit_id,
            start,
            end,
            frequency=billing_config.frequency,
            fiscal_config=fiscal_config,
            billing_config=billing_config,
            as_of=as_of,
        )

    async def _collect_utilities(
        self, client_id, unit_id, start, end, fiscal_config, billing_config
    ) -> list[LineItem]:
        if billing_config is None:
            return []
        return await self.utility_collector.collect(
            client_id,
            unit_id,
            start,
            end,
            frequency=billing_config.frequency,
            fiscal_config=fiscal_config,
        )

    async def _credit_balance(self, client_id: str, unit_id: str) -> int:
        if self.credit_store is None:
            return 0
        balance = await self.credit_store.get_credit_balance(client_id, unit_id)
        return ensure_centavos(balance or 0, "credit_balance", client_id=client_id, unit_id=unit_id)
