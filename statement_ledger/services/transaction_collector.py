"""Ledger transaction collection for statements.

Split transactions become one line item per allocation:
- Negative allocation → payment (``payments_applied``)
- Allocation tagged as penalty → ``penalty``
- Anything else → ``amount``

Transactions without allocations become one line item from their signed
amount. A transaction whose date cannot be parsed is skipped with a warning;
every other error propagates.
"""

import logging
from datetime import date

from statement_ledger.services.errors import DateParseError
from statement_ledger.services.ledger_types import ChargeCategory, LineItem
from statement_ledger.services.money import ensure_centavos
from statement_ledger.services.parsers import parse_date
from statement_ledger.services.stores import LedgerStore, LedgerTransaction

logger = logging.getLogger(__name__)

PENALTY_CATEGORY = "penalty"


class TransactionCollector:
    """Collect ledger transaction line items for one unit."""

    def __init__(self, ledger_store: LedgerStore):
        """Initialize with the ledger store collaborator."""
        self.ledger_store = ledger_store

    async def collect(
        self, client_id: str, unit_id: str, start: date, end: date
    ) -> list[LineItem]:
        """Collect line items for transactions dated within [start, end].

        Raises:
            ValidationError: If a transaction holds non-centavo amounts
        """
        transactions = await self.ledger_store.query_by_unit(client_id, unit_id, start, end)

        items: list[LineItem] = []
        skipped = 0
        for transaction in transactions:
            try:
                transaction_date = parse_date(transaction.date)
                if transaction_date is None:
                    raise DateParseError("Transaction has no date")
            except DateParseError as e:
                logger.warning(
                    "Skipping transaction %s for %s/%s: %s",
                    transaction.transaction_id,
                    client_id,
                    unit_id,
                    e.message,
                )
                skipped += 1
                continue

            if not start <= transaction_date <= end:
                continue

            context = {
                "client_id": client_id,
                "unit_id": unit_id,
                "period": transaction.transaction_id,
            }
            items.extend(self._line_items(transaction, transaction_date, context))

        logger.debug(
            "Collected %d ledger items from %d transactions for %s/%s (%d skipped)",
            len(items),
            len(transactions),
            client_id,
            unit_id,
            skipped,
        )
        return items

    def _line_items(
        self, transaction: LedgerTransaction, transaction_date: date, context: dict
    ) -> list[LineItem]:
        if transaction.allocations:
            return [
                _line_item(
                    transaction,
                    transaction_date,
                    signed_amount=ensure_centavos(
                        allocation.amount, "allocation.amount", **context
                    ),
                    category=allocation.category or transaction.category,
                    description=allocation.description or transaction.description or "",
                )
                for allocation in transaction.allocations
            ]

        return [
            _line_item(
                transaction,
                transaction_date,
                signed_amount=ensure_centavos(transaction.amount or 0, "amount", **context),
                category=transaction.category,
                description=transaction.description or transaction.notes or "",
                allow_penalty=False,
            )
        ]


def _line_item(
    transaction: LedgerTransaction,
    transaction_date: date,
    *,
    signed_amount: int,
    category: str | None,
    description: str,
    allow_penalty: bool = True,
) -> LineItem:
    magnitude = abs(signed_amount)
    is_payment = signed_amount < 0
    is_penalty = allow_penalty and not is_payment and category == PENALTY_CATEGORY

    return LineItem(
        date=transaction_date,
        description=description,
        category=ChargeCategory.LEDGER,
        amount=magnitude if not (is_payment or is_penalty) else 0,
        penalty=magnitude if is_penalty else 0,
        payments_applied=magnitude if is_payment else 0,
        is_payment=is_payment,
        transaction_ref=transaction.transaction_id,
        reference=transaction.reference or transaction.transaction_id,
        method=transaction.method,
        notes=transaction.notes,
        ledger_category=category,
    )
