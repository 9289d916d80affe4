"""Late-payment penalty calculation.

Penalty rules:
- A charge is due on its due date
- No penalty accrues during the grace period (``penalty_days``)
- Each full 30 days past the grace period counts as one overdue month
- Compounding: penalty = base × ((1 + rate) ^ months - 1)
- Simple: penalty = base × rate × months

Compounding example (5% rate, 20000 centavos, 3 months overdue):
    20000 × (1.05³ - 1) = 3152.5 → 3153 centavos

All amounts are integer centavos. Intermediate math uses Decimal and the
result is rounded half-up to a whole centavo.
"""

import logging
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal

from statement_ledger.services.errors import ConfigurationError, PenaltyCalculationError
from statement_ledger.services.ledger_types import BillingConfig

logger = logging.getLogger(__name__)

DAYS_PER_PENALTY_MONTH = 30


def calculate_months_overdue(due_date: date, as_of: date, penalty_days: int) -> int:
    """Whole 30-day months elapsed since the grace period ended (never negative)."""
    grace_period_end = due_date + timedelta(days=penalty_days)
    days_past_grace = (as_of - grace_period_end).days
    return max(0, days_past_grace // DAYS_PER_PENALTY_MONTH)


def calculate_penalty(
    base_amount: int,
    due_date: date | None,
    as_of: date,
    config: BillingConfig | None,
    context: dict | None = None,
) -> int:
    """
    Calculate the penalty accrued on an unpaid charge as of a date.

    Args:
        base_amount: Unpaid charge in centavos
        due_date: Date the charge was due
        as_of: Date to accrue the penalty to
        config: Billing configuration for the charge's category
        context: client_id / unit_id / period attached to raised errors

    Returns:
        Penalty in centavos (0 when within the grace period)

    Raises:
        ConfigurationError: If no billing configuration is given
        PenaltyCalculationError: If inputs are invalid (non-positive grace
            period, negative rate, missing due date)
    """
    context = context or {}

    if base_amount <= 0:
        return 0

    if config is None:
        raise ConfigurationError(
            "Penalty calculation requires billing configuration", **context
        )

    if config.penalty_rate == 0:
        return 0

    if config.penalty_days <= 0:
        raise PenaltyCalculationError(
            f"penalty_days must be positive, got {config.penalty_days}", **context
        )
    if config.penalty_rate < 0:
        raise PenaltyCalculationError(
            f"penalty_rate must not be negative, got {config.penalty_rate}", **context
        )
    if due_date is None:
        raise PenaltyCalculationError("Cannot calculate penalty without a due date", **context)

    try:
        months_overdue = calculate_months_overdue(due_date, as_of, config.penalty_days)
    except (OverflowError, TypeError) as e:
        raise PenaltyCalculationError(f"Penalty calculation failed: {e}", **context) from e

    if months_overdue <= 0:
        return 0

    base = Decimal(base_amount)
    rate = config.penalty_rate
    if config.compounding_enabled:
        penalty = base * ((1 + rate) ** months_overdue - 1)
    else:
        penalty = base * rate * months_overdue

    result = int(penalty.quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    logger.debug(
        "Penalty %d centavos on %d (due %s, %d months overdue, compounding=%s)",
        result,
        base_amount,
        due_date,
        months_overdue,
        config.compounding_enabled,
    )

    return result
