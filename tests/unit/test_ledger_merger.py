"""Unit tests for chronological merging."""

from datetime import date

from statement_ledger.services.ledger_merger import merge_line_items
from statement_ledger.services.ledger_types import ChargeCategory, LineItem


def _item(day: date, category: ChargeCategory, description: str) -> LineItem:
    return LineItem(date=day, description=description, category=category, amount=100)


class TestMergeLineItems:
    """Test ordering of merged items."""

    def test_sorted_by_date(self):
        recurring = [_item(date(2025, 3, 1), ChargeCategory.RECURRING, "March dues")]
        metered = [_item(date(2025, 1, 1), ChargeCategory.METERED, "January water")]
        ledger = [_item(date(2025, 2, 1), ChargeCategory.LEDGER, "Payment")]

        merged = merge_line_items(recurring, metered, ledger)

        assert [item.description for item in merged] == [
            "January water",
            "Payment",
            "March dues",
        ]

    def test_same_date_tie_break(self):
        """Same date: dues, then utilities, then ledger transactions."""
        day = date(2025, 1, 1)
        merged = merge_line_items(
            [_item(day, ChargeCategory.RECURRING, "dues")],
            [_item(day, ChargeCategory.METERED, "water")],
            [_item(day, ChargeCategory.LEDGER, "payment")],
        )

        assert [item.description for item in merged] == ["dues", "water", "payment"]

    def test_stable_within_category(self):
        """Items of one category sharing a date keep the collector's order."""
        day = date(2025, 4, 2)
        ledger = [
            _item(day, ChargeCategory.LEDGER, "split 1"),
            _item(day, ChargeCategory.LEDGER, "split 2"),
            _item(day, ChargeCategory.LEDGER, "split 3"),
        ]

        merged = merge_line_items([], [], ledger)

        assert [item.description for item in merged] == ["split 1", "split 2", "split 3"]

    def test_empty(self):
        assert merge_line_items([], [], []) == []
