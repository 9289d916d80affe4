"""SQLAlchemy base model with common fields and model exports."""

from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlalchemy.orm import Mapped, declarative_base, mapped_column

# Base class for all models
Base = declarative_base()


class BaseModel:
    """Base model with common timestamp fields."""

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )


# Import models to register them with Base (after Base is defined)
from statement_ledger.models.client_config import BillingConfigRecord, ClientSettings  # noqa: E402
from statement_ledger.models.dues import DuesPayment, DuesYear  # noqa: E402
from statement_ledger.models.ledger_transaction import (  # noqa: E402
    LedgerTransactionRecord,
    TransactionAllocationRecord,
)
from statement_ledger.models.unit_credit import UnitCredit  # noqa: E402
from statement_ledger.models.utility_bill import UtilityBill  # noqa: E402

__all__ = [
    "Base",
    "BaseModel",
    "ClientSettings",
    "BillingConfigRecord",
    "DuesYear",
    "DuesPayment",
    "UtilityBill",
    "LedgerTransactionRecord",
    "TransactionAllocationRecord",
    "UnitCredit",
]
