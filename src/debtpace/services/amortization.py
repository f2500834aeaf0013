"""Per-debt amortization: derived mortgage payments and payoff simulation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Union

from ..config import DEFAULT_CONFIG, EngineConfig
from ..logging_config import get_logger
from ..models.debt import (
    NEVER,
    DebtComputed,
    DebtInput,
    MortgageDebt,
    SimpleDebt,
    Unpayable,
    is_never,
)

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class PayoffResult:
    """Outcome of a fixed-payment payoff simulation."""

    months: Union[int, Unpayable]
    interest: Union[float, Unpayable]

    @property
    def is_payable(self) -> bool:
        return not is_never(self.months)


def monthly_rate(annual_rate: float) -> float:
    """Convert an APR percentage into a monthly decimal rate."""

    return annual_rate / 100.0 / 12.0


def amortised_payment(principal: float, annual_rate: float, term_years: float) -> float:
    """Return the fixed monthly payment that retires *principal* over the term.

    Standard annuity formula ``P * r / (1 - (1 + r) ** -n)``. A 0% APR degrades
    to straight-line ``P / n``; a non-positive term or principal yields 0.
    """

    n = term_years * 12
    if n <= 0 or principal <= 0:
        return 0.0

    r = monthly_rate(annual_rate)
    if r == 0:
        return principal / n
    return principal * r / (1 - (1 + r) ** -n)


def simulate_payoff(
    *,
    balance: float,
    annual_rate: float,
    monthly_payment: float,
    config: EngineConfig = DEFAULT_CONFIG,
) -> PayoffResult:
    """Step a balance forward month by month until it is retired.

    Each month accrues ``balance * r`` of interest and subtracts the payment.
    The final month only pays what is owed, so the accumulated interest is the
    true cost. A payment that does not beat the first month's interest, or a
    run that hits ``config.iteration_ceiling``, is reported as never.
    """

    if balance <= 0:
        return PayoffResult(months=0, interest=0.0)

    r = monthly_rate(annual_rate)
    if monthly_payment <= 0 or monthly_payment <= balance * r + config.unpayable_epsilon:
        logger.debug(
            "Payment does not outpace interest",
            extra={"balance": balance, "annual_rate": annual_rate, "payment": monthly_payment},
        )
        return PayoffResult(months=NEVER, interest=NEVER)

    months = 0
    interest_paid = 0.0
    while balance > config.payoff_tolerance:
        if months >= config.iteration_ceiling:
            logger.debug(
                "Payoff simulation hit the iteration ceiling",
                extra={"ceiling": config.iteration_ceiling, "remaining": balance},
            )
            return PayoffResult(months=NEVER, interest=NEVER)
        interest = balance * r
        interest_paid += interest
        # Clamp: the last payment never exceeds what is owed.
        balance = max(balance + interest - monthly_payment, 0.0)
        months += 1

    return PayoffResult(months=months, interest=interest_paid)


def balance_after(
    *, balance: float, annual_rate: float, monthly_payment: float, months: int
) -> float:
    """Return the outstanding balance after *months* fixed payments (never negative)."""

    r = monthly_rate(annual_rate)
    for _ in range(max(months, 0)):
        if balance <= 0:
            break
        balance = max(balance * (1 + r) - monthly_payment, 0.0)
    return max(balance, 0.0)


def mortgage_payment(debt: MortgageDebt) -> float:
    """Return the payment a mortgage is serviced with (override or derived)."""

    if debt.custom_monthly_payment is not None and debt.custom_monthly_payment > 0:
        return debt.custom_monthly_payment
    return amortised_payment(debt.principal, debt.interest_rate, debt.term_years)


def compute_debt(debt: DebtInput, *, config: EngineConfig = DEFAULT_CONFIG) -> DebtComputed:
    """Return the payment, payoff horizon and interest cost for one debt.

    Inputs are assumed sanitized (see ``services.sanitize``); the function
    never raises for well-formed records and reports unpayable debts with the
    ``NEVER`` marker instead.
    """

    if isinstance(debt, MortgageDebt):
        payment = mortgage_payment(debt)
        if debt.principal <= 0 or debt.term_years <= 0:
            return DebtComputed(
                debt=debt, monthly_payment=0.0, months_to_payoff=0, total_interest=0.0, total_paid=0.0
            )
        starting_balance = debt.principal
    elif isinstance(debt, SimpleDebt):
        payment = debt.monthly_payment
        starting_balance = debt.balance
    else:
        raise TypeError(f"Unsupported debt record: {type(debt).__name__}")

    result = simulate_payoff(
        balance=starting_balance,
        annual_rate=debt.interest_rate,
        monthly_payment=payment,
        config=config,
    )
    if not result.is_payable:
        logger.debug("Debt is unpayable at its current payment", extra={"debt_id": debt.id})
        return DebtComputed(
            debt=debt,
            monthly_payment=payment,
            months_to_payoff=NEVER,
            total_interest=NEVER,
            total_paid=NEVER,
        )

    return DebtComputed(
        debt=debt,
        monthly_payment=payment,
        months_to_payoff=result.months,
        total_interest=result.interest,
        total_paid=max(starting_balance, 0.0) + result.interest,
    )


def compute_all_debts(
    debts: Iterable[DebtInput], *, config: EngineConfig = DEFAULT_CONFIG
) -> list[DebtComputed]:
    """Compute every debt, preserving input order."""

    return [compute_debt(debt, config=config) for debt in debts]


__all__ = [
    "PayoffResult",
    "amortised_payment",
    "balance_after",
    "compute_all_debts",
    "compute_debt",
    "monthly_rate",
    "mortgage_payment",
    "simulate_payoff",
]
