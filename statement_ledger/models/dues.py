"""Dues schedule per unit and fiscal year, with per-month payments."""

from datetime import date

from sqlalchemy import Date, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from statement_ledger.models import Base, BaseModel


class DuesYear(Base, BaseModel):
    """Scheduled monthly dues of one unit for one fiscal year (centavos)."""

    __tablename__ = "dues_years"

    client_id: Mapped[str] = mapped_column(String(64), nullable=False, comment="Client identifier")
    unit_id: Mapped[str] = mapped_column(String(64), nullable=False, comment="Unit identifier")
    fiscal_year: Mapped[int] = mapped_column(
        nullable=False,
        comment="Fiscal year, named by its ending calendar year",
    )
    scheduled_amount: Mapped[int] = mapped_column(
        nullable=False,
        comment="Monthly dues in centavos",
    )

    payments: Mapped[list["DuesPayment"]] = relationship(
        "DuesPayment",
        back_populates="dues_year",
        cascade="all, delete-orphan",
        order_by="DuesPayment.fiscal_month",
    )

    __table_args__ = (
        UniqueConstraint("client_id", "unit_id", "fiscal_year", name="uq_dues_year_unit"),
        Index("idx_dues_year_unit", "client_id", "unit_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<DuesYear(client_id={self.client_id}, unit_id={self.unit_id}, "
            f"fiscal_year={self.fiscal_year}, scheduled_amount={self.scheduled_amount})>"
        )


class DuesPayment(Base, BaseModel):
    """Payment recorded against one fiscal month of a dues year."""

    __tablename__ = "dues_payments"

    dues_year_id: Mapped[int] = mapped_column(
        ForeignKey("dues_years.id"),
        nullable=False,
        index=True,
    )
    fiscal_month: Mapped[int] = mapped_column(nullable=False, comment="Fiscal month 1-12")
    amount_paid: Mapped[int] = mapped_column(nullable=False, default=0, comment="Centavos")
    penalty_stored: Mapped[int] = mapped_column(
        nullable=False,
        default=0,
        comment="Penalty recorded with the payment in centavos (0 when waived)",
    )
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    method: Mapped[str | None] = mapped_column(String(64), nullable=True)
    reference: Mapped[str | None] = mapped_column(String(128), nullable=True)
    transaction_id: Mapped[str | None] = mapped_column(String(128), nullable=True)
    notes: Mapped[str | None] = mapped_column(String(500), nullable=True)

    dues_year: Mapped["DuesYear"] = relationship("DuesYear", back_populates="payments")

    __table_args__ = (
        UniqueConstraint("dues_year_id", "fiscal_month", name="uq_dues_payment_month"),
    )

    def __repr__(self) -> str:
        return (
            f"<DuesPayment(dues_year_id={self.dues_year_id}, fiscal_month={self.fiscal_month}, "
            f"amount_paid={self.amount_paid}, penalty_stored={self.penalty_stored})>"
        )


__all__ = ["DuesYear", "DuesPayment"]
