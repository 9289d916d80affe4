"""Free-form ledger transactions and their split allocations."""

from datetime import date

from sqlalchemy import Date, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from statement_ledger.models import Base, BaseModel


class LedgerTransactionRecord(Base, BaseModel):
    """Transaction recorded for a unit. Negative amounts are payments."""

    __tablename__ = "ledger_transactions"

    client_id: Mapped[str] = mapped_column(String(64), nullable=False, comment="Client identifier")
    unit_id: Mapped[str] = mapped_column(String(64), nullable=False, comment="Unit identifier")
    transaction_id: Mapped[str] = mapped_column(
        String(128),
        nullable=False,
        unique=True,
        comment="External transaction identifier",
    )
    transaction_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        index=True,
        comment="Date of transaction",
    )
    amount: Mapped[int] = mapped_column(nullable=False, default=0, comment="Signed centavos")
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    category: Mapped[str | None] = mapped_column(String(64), nullable=True)
    reference: Mapped[str | None] = mapped_column(String(128), nullable=True)
    method: Mapped[str | None] = mapped_column(String(64), nullable=True)
    notes: Mapped[str | None] = mapped_column(String(500), nullable=True)

    allocations: Mapped[list["TransactionAllocationRecord"]] = relationship(
        "TransactionAllocationRecord",
        back_populates="transaction",
        cascade="all, delete-orphan",
        order_by="TransactionAllocationRecord.position",
    )

    __table_args__ = (
        Index("idx_ledger_transaction_unit_date", "client_id", "unit_id", "transaction_date"),
    )

    def __repr__(self) -> str:
        return (
            f"<LedgerTransactionRecord(transaction_id={self.transaction_id}, "
            f"unit_id={self.unit_id}, date={self.transaction_date}, amount={self.amount})>"
        )


class TransactionAllocationRecord(Base, BaseModel):
    """Split of a ledger transaction across categories."""

    __tablename__ = "transaction_allocations"

    transaction_record_id: Mapped[int] = mapped_column(
        ForeignKey("ledger_transactions.id"),
        nullable=False,
        index=True,
    )
    position: Mapped[int] = mapped_column(
        nullable=False, default=0, comment="Order within the split"
    )
    amount: Mapped[int] = mapped_column(nullable=False, comment="Signed centavos")
    category: Mapped[str | None] = mapped_column(String(64), nullable=True)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)

    transaction: Mapped["LedgerTransactionRecord"] = relationship(
        "LedgerTransactionRecord", back_populates="allocations"
    )

    def __repr__(self) -> str:
        return (
            f"<TransactionAllocationRecord(transaction_record_id={self.transaction_record_id}, "
            f"amount={self.amount}, category={self.category})>"
        )


__all__ = ["LedgerTransactionRecord", "TransactionAllocationRecord"]
