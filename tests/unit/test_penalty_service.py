"""Unit tests for penalty calculation."""

from datetime import date
from decimal import Decimal

import pytest

from statement_ledger.services.errors import ConfigurationError, PenaltyCalculationError
from statement_ledger.services.ledger_types import BillingConfig
from statement_ledger.services.penalty_service import calculate_months_overdue, calculate_penalty

DUE = date(2025, 1, 1)


def _config(**overrides) -> BillingConfig:
    values = {"penalty_rate": Decimal("0.05"), "penalty_days": 10, "compounding_enabled": True}
    values.update(overrides)
    return BillingConfig(**values)


class TestMonthsOverdue:
    """Test overdue month counting."""

    def test_grace_period_not_counted(self):
        """Grace period ends 2025-01-11; 94 days later is 3 whole months."""
        assert calculate_months_overdue(DUE, date(2025, 4, 15), 10) == 3

    def test_partial_month_rounds_down(self):
        assert calculate_months_overdue(DUE, date(2025, 2, 9), 10) == 0
        assert calculate_months_overdue(DUE, date(2025, 2, 10), 10) == 1

    def test_never_negative(self):
        assert calculate_months_overdue(DUE, date(2024, 12, 1), 10) == 0


class TestCalculatePenalty:
    """Test penalty amounts."""

    def test_zero_within_grace_period(self):
        """No penalty until the grace period has passed."""
        config = _config()
        for as_of in [date(2025, 1, 1), date(2025, 1, 11), date(2025, 2, 9)]:
            assert calculate_penalty(20000, DUE, as_of, config) == 0

    def test_compounding_three_months(self):
        """20000 × (1.05³ - 1) = 3152.5 → 3153 centavos."""
        assert calculate_penalty(20000, DUE, date(2025, 4, 15), _config()) == 3153

    def test_simple_interest(self):
        """20000 × 0.05 × 3 = 3000 centavos."""
        config = _config(compounding_enabled=False)
        assert calculate_penalty(20000, DUE, date(2025, 4, 15), config) == 3000

    def test_one_month(self):
        assert calculate_penalty(20000, DUE, date(2025, 2, 10), _config()) == 1000

    def test_non_positive_base_is_zero(self):
        assert calculate_penalty(0, DUE, date(2025, 4, 15), _config()) == 0
        assert calculate_penalty(-500, DUE, date(2025, 4, 15), _config()) == 0

    def test_zero_rate_is_zero(self):
        """A zero rate disables penalties, whatever the grace period."""
        config = _config(penalty_rate=Decimal("0"), penalty_days=0)
        assert calculate_penalty(20000, DUE, date(2025, 12, 31), config) == 0

    def test_missing_config_raises(self):
        with pytest.raises(ConfigurationError):
            calculate_penalty(20000, DUE, date(2025, 4, 15), None)

    def test_non_positive_grace_period_raises_with_context(self):
        """Invalid grace period fails with the caller's context attached."""
        context = {"client_id": "AVII", "unit_id": "101", "period": "2025-01"}
        with pytest.raises(PenaltyCalculationError) as exc_info:
            calculate_penalty(20000, DUE, date(2025, 4, 15), _config(penalty_days=0), context)

        assert exc_info.value.client_id == "AVII"
        assert exc_info.value.unit_id == "101"
        assert exc_info.value.period == "2025-01"

    def test_negative_rate_raises(self):
        with pytest.raises(PenaltyCalculationError, match="must not be negative"):
            calculate_penalty(20000, DUE, date(2025, 4, 15), _config(penalty_rate=Decimal("-0.05")))

    def test_missing_due_date_raises(self):
        with pytest.raises(PenaltyCalculationError, match="due date"):
            calculate_penalty(20000, None, date(2025, 4, 15), _config())

    def test_result_is_integer_centavos(self):
        penalty = calculate_penalty(33333, DUE, date(2025, 6, 30), _config())
        assert isinstance(penalty, int)
        assert penalty > 0
