"""Chronological merge of the collectors' line items."""

import logging

from statement_ledger.services.ledger_types import LineItem

logger = logging.getLogger(__name__)


def merge_line_items(
    recurring: list[LineItem],
    metered: list[LineItem],
    ledger: list[LineItem],
) -> list[LineItem]:
    """Merge line items oldest first.

    Items sharing a date are ordered dues, then utilities, then ledger
    transactions; within a category the collector's order is kept (stable
    sort). Statement renderers rely on this order.
    """
    merged = sorted(
        [*recurring, *metered, *ledger],
        key=lambda item: (item.date, item.category.rank),
    )

    logger.debug(
        "Merged %d line items (%d dues, %d utility, %d ledger)",
        len(merged),
        len(recurring),
        len(metered),
        len(ledger),
    )
    return merged
