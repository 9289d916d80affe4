"""Unit share of a metered utility bill."""

from datetime import date
from decimal import Decimal

from sqlalchemy import Date, Index, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from statement_ledger.models import Base, BaseModel


class UtilityBill(Base, BaseModel):
    """
    One unit's utility bill for a billing period.

    Monthly bills are keyed by calendar month ("2025-03"), quarterly bills by
    fiscal quarter ("2026-Q1"). Amounts are centavos; ``penalty_amount`` is
    the penalty computed when the bill was generated.
    """

    __tablename__ = "utility_bills"

    client_id: Mapped[str] = mapped_column(String(64), nullable=False, comment="Client identifier")
    unit_id: Mapped[str] = mapped_column(String(64), nullable=False, comment="Unit identifier")
    period_key: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        comment="Billing period key: YYYY-MM or YYYY-Qn",
    )
    current_charge: Mapped[int] = mapped_column(nullable=False, default=0)
    paid_amount: Mapped[int] = mapped_column(nullable=False, default=0)
    penalty_amount: Mapped[int] = mapped_column(nullable=False, default=0)
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    consumption: Mapped[Decimal | None] = mapped_column(
        Numeric(12, 3),
        nullable=True,
        comment="Metered consumption for the period",
    )
    bill_id: Mapped[str | None] = mapped_column(String(128), nullable=True)
    notes: Mapped[str | None] = mapped_column(String(500), nullable=True)
    last_payment_reference: Mapped[str | None] = mapped_column(String(128), nullable=True)
    last_payment_method: Mapped[str | None] = mapped_column(String(64), nullable=True)
    last_transaction_id: Mapped[str | None] = mapped_column(String(128), nullable=True)

    __table_args__ = (
        UniqueConstraint("client_id", "unit_id", "period_key", name="uq_utility_bill_period"),
        Index("idx_utility_bill_unit", "client_id", "unit_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<UtilityBill(client_id={self.client_id}, unit_id={self.unit_id}, "
            f"period_key={self.period_key}, current_charge={self.current_charge})>"
        )


__all__ = ["UtilityBill"]
