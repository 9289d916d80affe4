"""Pydantic output schemas."""

from statement_ledger.schemas.statement import (
    ComingDueItemsOut,
    FiscalPeriodOut,
    LineItemOut,
    PaidItemsOut,
    PastDueItemsOut,
    SectionSubtotalOut,
    StatementLedger,
    StatementSummaryOut,
)

__all__ = [
    "FiscalPeriodOut",
    "LineItemOut",
    "SectionSubtotalOut",
    "PaidItemsOut",
    "PastDueItemsOut",
    "ComingDueItemsOut",
    "StatementSummaryOut",
    "StatementLedger",
]
