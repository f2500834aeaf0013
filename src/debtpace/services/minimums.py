"""Minimum payment estimates and the cost of paying only the minimum."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from ..config import DEFAULT_CONFIG, EngineConfig
from ..models.debt import DebtComputed, SimpleDebt
from .amortization import compute_debt


@dataclass(frozen=True, slots=True)
class MinimumComparison:
    """A chosen payment measured against the minimum-only plan."""

    at_minimum: DebtComputed
    at_payment: DebtComputed
    months_saved: Optional[int]
    interest_saved: Optional[float]


def minimum_payment(balance: float, *, config: EngineConfig = DEFAULT_CONFIG) -> float:
    """Return the typical card minimum: a percentage of balance with a fixed floor.

    Never asks for more than the outstanding balance.
    """

    if balance <= 0:
        return 0.0
    percentage = balance * config.minimum_payment_percent / 100.0
    return min(max(percentage, config.minimum_payment_floor), balance)


def compare_to_minimum(
    debt: SimpleDebt, *, config: EngineConfig = DEFAULT_CONFIG
) -> MinimumComparison:
    """Compare *debt*'s own payment with paying only the minimum.

    Savings are ``None`` when the minimum-only plan never pays the debt off, or
    when the chosen payment itself never does.
    """

    minimum = minimum_payment(debt.balance, config=config)
    at_minimum = compute_debt(replace(debt, monthly_payment=minimum), config=config)
    at_payment = compute_debt(debt, config=config)

    if not at_minimum.is_payable or not at_payment.is_payable:
        return MinimumComparison(
            at_minimum=at_minimum, at_payment=at_payment, months_saved=None, interest_saved=None
        )
    return MinimumComparison(
        at_minimum=at_minimum,
        at_payment=at_payment,
        months_saved=at_minimum.months_to_payoff - at_payment.months_to_payoff,
        interest_saved=at_minimum.total_interest - at_payment.total_interest,
    )


__all__ = ["MinimumComparison", "compare_to_minimum", "minimum_payment"]
