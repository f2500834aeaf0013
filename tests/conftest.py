"""Pytest configuration and shared fixtures for debtpace tests.

Provides record factories and float helpers for exercising the calculation
modules without any I/O.
"""

from __future__ import annotations

from datetime import date

import pytest

from debtpace.models import CheckIn, DebtType, MortgageDebt, SimpleDebt

# Fixed anchor so payoff dates are reproducible.
TODAY = date(2025, 1, 15)


# =============================================================================
# Record Factories
# =============================================================================


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def simple_debt_factory():
    """Factory for creating simple (non-mortgage) debts.

    Returns:
        Function that builds a SimpleDebt with sensible defaults
    """

    counter = {"n": 0}

    def _create(
        balance: float = 1000.0,
        interest_rate: float = 21.9,
        monthly_payment: float = 50.0,
        debt_type: DebtType = DebtType.CREDIT_CARD,
        id: str | None = None,
        name: str | None = None,
    ) -> SimpleDebt:
        counter["n"] += 1
        return SimpleDebt(
            id=id or f"debt-{counter['n']}",
            name=name or f"Debt {counter['n']}",
            balance=balance,
            interest_rate=interest_rate,
            monthly_payment=monthly_payment,
            debt_type=debt_type,
        )

    return _create


@pytest.fixture
def mortgage_factory():
    """Factory for creating mortgages."""

    def _create(
        principal: float = 200000.0,
        interest_rate: float = 5.6,
        term_years: int = 30,
        custom_monthly_payment: float | None = None,
        id: str = "home",
    ) -> MortgageDebt:
        return MortgageDebt(
            id=id,
            name="Home loan",
            principal=principal,
            interest_rate=interest_rate,
            term_years=term_years,
            custom_monthly_payment=custom_monthly_payment,
        )

    return _create


@pytest.fixture
def check_in_series():
    """Factory turning a list of extra payments into consecutive weekly check-ins."""

    def _create(extras: list[float | None], *, start_week: int = 1, mood: int = 3) -> list[CheckIn]:
        return [
            CheckIn(week=start_week + i, mood_score=mood, extra_payment=extra)
            for i, extra in enumerate(extras)
        ]

    return _create


# =============================================================================
# Test Utilities
# =============================================================================


def assert_float_equal(actual: float, expected: float, tolerance: float = 0.01):
    """Assert that two floats are equal within a tolerance.

    Args:
        actual: Actual value
        expected: Expected value
        tolerance: Maximum allowed difference (default 0.01 = 1 cent)

    Raises:
        AssertionError: If values differ by more than tolerance
    """
    diff = abs(actual - expected)
    assert diff <= tolerance, f"Expected {expected}, got {actual} (diff: {diff}, tolerance: {tolerance})"


def months_key(value) -> float:
    """Sort key that places the never-paid-off marker after every finite count."""
    from debtpace.models import is_never

    return float("inf") if is_never(value) else float(value)
