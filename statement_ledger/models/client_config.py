"""Client-level configuration: fiscal year and per-category billing settings."""

from decimal import Decimal

from sqlalchemy import Index, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from statement_ledger.models import Base, BaseModel
from statement_ledger.services.ledger_types import BillingFrequency, ChargeCategory


class ClientSettings(Base, BaseModel):
    """Fiscal settings of one client (association)."""

    __tablename__ = "client_settings"

    client_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        unique=True,
        index=True,
        comment="Client identifier",
    )
    fiscal_year_start_month: Mapped[int] = mapped_column(
        nullable=False,
        default=1,
        comment="Calendar month (1-12) in which the fiscal year begins",
    )

    def __repr__(self) -> str:
        return (
            f"<ClientSettings(client_id={self.client_id}, "
            f"fiscal_year_start_month={self.fiscal_year_start_month})>"
        )


class BillingConfigRecord(Base, BaseModel):
    """
    Penalty and frequency settings of one billing category for a client.

    ``penalty_rate`` and ``penalty_days`` are nullable at the storage level so an
    incomplete configuration can be saved; it is rejected when read for a
    statement.
    """

    __tablename__ = "billing_configs"

    client_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        index=True,
        comment="Client identifier",
    )
    category: Mapped[ChargeCategory] = mapped_column(
        nullable=False,
        comment="Billing category: recurring_charge or metered_charge",
    )
    penalty_rate: Mapped[Decimal | None] = mapped_column(
        Numeric(6, 4),
        nullable=True,
        comment="Monthly penalty rate as a fraction (0.05 = 5%)",
    )
    penalty_days: Mapped[int | None] = mapped_column(
        nullable=True,
        comment="Grace period in days after the due date",
    )
    compounding_enabled: Mapped[bool] = mapped_column(
        nullable=False,
        default=True,
        comment="Compound penalty monthly",
    )
    frequency: Mapped[BillingFrequency] = mapped_column(
        nullable=False,
        default=BillingFrequency.MONTHLY,
        comment="Billing frequency: monthly or quarterly",
    )

    __table_args__ = (
        UniqueConstraint("client_id", "category", name="uq_billing_config_client_category"),
        Index("idx_billing_config_client", "client_id"),
    )

    def to_mapping(self) -> dict:
        """Raw document form accepted by ``BillingConfig.from_mapping``."""
        return {
            "penalty_rate": self.penalty_rate,
            "penalty_days": self.penalty_days,
            "compounding_enabled": self.compounding_enabled,
            "frequency": self.frequency,
        }

    def __repr__(self) -> str:
        return (
            f"<BillingConfigRecord(client_id={self.client_id}, category={self.category}, "
            f"penalty_rate={self.penalty_rate}, penalty_days={self.penalty_days})>"
        )


__all__ = ["ClientSettings", "BillingConfigRecord"]
