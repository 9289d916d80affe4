"""Status buckets for the statement summary.

Rows are classified after the running balance pass:
- Payment rows (``payments_applied > 0``) count toward paid items
- Charge rows dated before ``as_of`` with a positive balance are past due
- Charge rows dated on or after ``as_of`` with a positive balance are coming due
- Charge rows with a zero or negative balance are implicitly paid

A charge appearing more than once (same category, date and description) is
counted once.
"""

import logging
from datetime import date

from statement_ledger.services.ledger_types import (
    ComingDueItems,
    LineItem,
    PaidItems,
    PastDueItems,
    StatementSummaryTotals,
)

logger = logging.getLogger(__name__)


def classify_line_items(
    items: list[LineItem], as_of: date, credit_balance: int = 0
) -> StatementSummaryTotals:
    """
    Classify balanced line items into paid / past due / coming due totals.

    Args:
        items: Line items in ledger order, with ``balance`` filled in
        as_of: Statement date
        credit_balance: Unit overpayment credit in centavos

    Returns:
        Summary totals in centavos
    """
    paid_count = paid_total = 0
    past_due_count = past_due_total = past_due_penalty = 0
    coming_due_count = coming_due_total = 0

    seen_charges = set()
    for item in items:
        if item.is_payment:
            if item.payments_applied > 0:
                paid_count += 1
                paid_total += item.payments_applied
            continue

        key = (item.category, item.date, item.description)
        if key in seen_charges or item.balance <= 0:
            continue
        seen_charges.add(key)

        if item.date < as_of:
            past_due_count += 1
            past_due_total += item.amount
            past_due_penalty += item.penalty
        else:
            coming_due_count += 1
            coming_due_total += item.amount

    total_balance = items[-1].balance if items else 0

    logger.debug(
        "Summary as of %s: balance=%d, %d paid, %d past due, %d coming due",
        as_of,
        total_balance,
        paid_count,
        past_due_count,
        coming_due_count,
    )

    return StatementSummaryTotals(
        total_balance=total_balance,
        credit_balance=credit_balance,
        paid_items=PaidItems(count=paid_count, total=paid_total),
        past_due_items=PastDueItems(
            count=past_due_count, total=past_due_total, penalty_total=past_due_penalty
        ),
        coming_due_items=ComingDueItems(count=coming_due_count, total=coming_due_total),
    )
