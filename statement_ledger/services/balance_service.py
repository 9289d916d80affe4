"""Balance calculation service for statement ledgers.

Running balance formula, applied row by row in ledger order:
    balance += amount + penalty - payments_applied

Section subtotals are capped at zero: an overpaid section shows a zero
balance and the overpayment is reported as the unit's credit balance, which
is owned by the credit store.
"""

import logging
from dataclasses import replace

from statement_ledger.services.ledger_types import ChargeCategory, LineItem, SectionSubtotal
from statement_ledger.services.money import ensure_centavos

logger = logging.getLogger(__name__)


class BalanceCalculationService:
    """Calculate running balances and per-section subtotals."""

    def calculate_running_balance(self, items: list[LineItem]) -> list[LineItem]:
        """Return copies of items with ``balance`` set, in a single forward pass.

        Raises:
            ValidationError: If any amount is not a whole number of centavos
        """
        running_balance = 0
        result = []

        for index, item in enumerate(items):
            context = {"period": f"{item.category.value}:{item.date.isoformat()}"}
            running_balance += ensure_centavos(item.amount, "amount", **context)
            running_balance += ensure_centavos(item.penalty, "penalty", **context)
            running_balance -= ensure_centavos(item.payments_applied, "payments_applied", **context)

            if index < 5:
                logger.debug(
                    "Balance %d: %s %s (%d + %d - %d) → %d",
                    index,
                    item.category.value,
                    item.description,
                    item.amount,
                    item.penalty,
                    item.payments_applied,
                    running_balance,
                )

            result.append(replace(item, balance=running_balance))

        return result

    def calculate_section_subtotal(
        self, items: list[LineItem], category: ChargeCategory
    ) -> SectionSubtotal:
        """Totals for one category; ``running_balance`` never drops below zero."""
        section = [item for item in items if item.category == category]

        subtotal = sum(ensure_centavos(item.amount, "amount") for item in section)
        penalty_subtotal = sum(ensure_centavos(item.penalty, "penalty") for item in section)
        payments_subtotal = sum(
            ensure_centavos(item.payments_applied, "payments_applied") for item in section
        )

        return SectionSubtotal(
            subtotal=subtotal,
            penalty_subtotal=penalty_subtotal,
            payments_subtotal=payments_subtotal,
            running_balance=max(0, subtotal + penalty_subtotal - payments_subtotal),
        )
