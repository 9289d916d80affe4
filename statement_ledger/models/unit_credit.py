"""Overpayment credit held for a unit."""

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from statement_ledger.models import Base, BaseModel


class UnitCredit(Base, BaseModel):
    __tablename__ = "unit_credits"

    client_id: Mapped[str] = mapped_column(String(64), nullable=False)
    unit_id: Mapped[str] = mapped_column(String(64), nullable=False)
    credit_balance: Mapped[int] = mapped_column(nullable=False, default=0, comment="Centavos")

    __table_args__ = (UniqueConstraint("client_id", "unit_id", name="uq_unit_credit"),)

    def __repr__(self) -> str:
        return (
            f"<UnitCredit(client_id={self.client_id}, unit_id={self.unit_id}, "
            f"credit_balance={self.credit_balance})>"
        )


__all__ = ["UnitCredit"]
