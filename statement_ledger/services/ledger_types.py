"""Value types shared by the statement collectors and calculators.

Money fields are integer centavos throughout. Conversion to major units
happens only in ``statement_ledger.schemas.statement``.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping, NamedTuple

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from statement_ledger.services.errors import ConfigurationError
from statement_ledger.services.parsers import parse_rate


class ChargeCategory(str, Enum):
    """Source category of a line item."""

    RECURRING = "recurring_charge"
    """Recurring dues (maintenance fees)"""

    METERED = "metered_charge"
    """Metered utility bills (water consumption)"""

    LEDGER = "ledger"
    """Free-form ledger transactions (payments, adjustments, split allocations)"""

    @property
    def rank(self) -> int:
        """Presentation order for items sharing a date."""
        return _CATEGORY_RANK[self]


_CATEGORY_RANK = {
    ChargeCategory.RECURRING: 1,
    ChargeCategory.METERED: 2,
    ChargeCategory.LEDGER: 3,
}


class BillingFrequency(str, Enum):
    """How often a category is billed."""

    MONTHLY = "monthly"
    QUARTERLY = "quarterly"


@dataclass(frozen=True)
class FiscalPeriodConfig:
    """Client fiscal year setting. Fiscal month 1 is ``fiscal_year_start_month``."""

    fiscal_year_start_month: int = 1

    def __post_init__(self) -> None:
        month = self.fiscal_year_start_month
        if isinstance(month, bool) or not isinstance(month, int) or not 1 <= month <= 12:
            raise ConfigurationError(
                f"fiscal_year_start_month must be an integer between 1 and 12, got {month!r}"
            )


class BillingConfig(BaseModel):
    """Penalty and frequency settings for one billing category.

    ``penalty_rate`` and ``penalty_days`` have no defaults: a guessed value
    would misstate the money a unit owes.
    """

    model_config = ConfigDict(frozen=True)

    penalty_rate: Decimal = Field(..., description="Monthly penalty rate as a fraction (0.05 = 5%)")
    penalty_days: int = Field(..., description="Grace period in days after the due date")
    compounding_enabled: bool = Field(default=True, description="Compound penalty monthly")
    frequency: BillingFrequency = Field(
        default=BillingFrequency.MONTHLY, description="Billing frequency"
    )

    @field_validator("penalty_rate", mode="before")
    @classmethod
    def _parse_rate(cls, value: Any) -> Any:
        if value is None:
            return value
        try:
            return parse_rate(value)
        except ValueError:
            return value

    @classmethod
    def from_mapping(
        cls,
        data: Mapping[str, Any] | None,
        *,
        client_id: str | None = None,
        category: ChargeCategory | None = None,
    ) -> "BillingConfig":
        """
        Build a validated config from a raw store document.

        Accepts both snake_case and the camelCase keys used by document stores
        (``penaltyRate``, ``penaltyDays``, ``compoundingEnabled``,
        ``frequency`` / ``duesFrequency`` / ``billingPeriod``).

        Raises:
            ConfigurationError: If the document is missing, lacks penalty_rate
                or penalty_days, or holds invalid values
        """
        period = category.value if category else None
        if not data:
            raise ConfigurationError(
                "Billing configuration not found. Cannot calculate penalties without configuration",
                client_id=client_id,
                period=period,
            )

        values = {
            "penalty_rate": _first_present(data, "penalty_rate", "penaltyRate"),
            "penalty_days": _first_present(data, "penalty_days", "penaltyDays"),
            "compounding_enabled": _first_present(
                data, "compounding_enabled", "compoundingEnabled"
            ),
            "frequency": _first_present(
                data, "frequency", "duesFrequency", "billingPeriod", "billing_period"
            ),
        }

        for required in ("penalty_rate", "penalty_days"):
            if values[required] is None:
                raise ConfigurationError(
                    f"Billing configuration incomplete. Missing required field: {required}",
                    client_id=client_id,
                    period=period,
                )

        try:
            return cls(**{key: value for key, value in values.items() if value is not None})
        except PydanticValidationError as e:
            raise ConfigurationError(
                f"Billing configuration invalid: {e.errors()[0]['msg']}",
                client_id=client_id,
                period=period,
            ) from e


def _first_present(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


@dataclass(frozen=True)
class FiscalPeriod:
    """Fiscal month or quarter a line item belongs to."""

    year: int
    month: int | None = None
    quarter: int | None = None

    @property
    def label(self) -> str:
        if self.quarter is not None:
            return f"{self.year}-Q{self.quarter}"
        if self.month is not None:
            return f"{self.year}-{self.month:02d}"
        return str(self.year)


@dataclass(frozen=True)
class LineItem:
    """One row of a unit's account ledger.

    ``amount``, ``penalty`` and ``payments_applied`` are non-negative centavos;
    whether the row is a charge or a payment is carried by ``is_payment``.
    ``balance`` is filled in by the running balance pass.
    """

    date: date
    description: str
    category: ChargeCategory
    amount: int = 0
    penalty: int = 0
    payments_applied: int = 0
    balance: int = 0
    is_payment: bool = False
    transaction_ref: str | None = None
    reference: str | None = None
    method: str | None = None
    notes: str | None = None
    fiscal_period: FiscalPeriod | None = None
    consumption: Decimal | None = None
    ledger_category: str | None = None

    @property
    def net_change(self) -> int:
        """Effect of this row on the running balance."""
        return self.amount + self.penalty - self.payments_applied


class SectionSubtotal(NamedTuple):
    """Per-category totals in centavos."""

    subtotal: int
    penalty_subtotal: int
    payments_subtotal: int
    running_balance: int


class PaidItems(NamedTuple):
    count: int
    total: int


class PastDueItems(NamedTuple):
    count: int
    total: int
    penalty_total: int


class ComingDueItems(NamedTuple):
    count: int
    total: int


class StatementSummaryTotals(NamedTuple):
    """Top-line statement totals in centavos."""

    total_balance: int
    credit_balance: int
    paid_items: PaidItems
    past_due_items: PastDueItems
    coming_due_items: ComingDueItems


__all__ = [
    "ChargeCategory",
    "BillingFrequency",
    "FiscalPeriodConfig",
    "BillingConfig",
    "FiscalPeriod",
    "LineItem",
    "SectionSubtotal",
    "PaidItems",
    "PastDueItems",
    "ComingDueItems",
    "StatementSummaryTotals",
]
