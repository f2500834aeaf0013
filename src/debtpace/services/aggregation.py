"""Portfolio totals over computed debts."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable

from ..models.debt import DebtComputed, is_never


@dataclass(frozen=True, slots=True)
class PortfolioTotals:
    """Summed view of a debt portfolio.

    ``total_interest`` only covers debts that are eventually paid off; when any
    debt is unpayable ``has_unpayable_debt`` is set so callers can render the
    total as incomplete instead of infinite.
    """

    total_debt: float
    total_monthly_payment: float
    total_interest: float
    has_unpayable_debt: bool
    debt_count: int


def aggregate(debts: Iterable[DebtComputed]) -> PortfolioTotals:
    """Fold computed debts into portfolio totals (order does not matter)."""

    debt_list = list(debts)
    # fsum is exactly rounded, so the totals do not depend on input order.
    total_debt = math.fsum(max(d.original_balance, 0.0) for d in debt_list)
    total_payment = math.fsum(d.monthly_payment for d in debt_list)
    total_interest = math.fsum(
        d.total_interest for d in debt_list if not is_never(d.total_interest)
    )
    return PortfolioTotals(
        total_debt=total_debt,
        total_monthly_payment=total_payment,
        total_interest=total_interest,
        has_unpayable_debt=any(is_never(d.total_interest) for d in debt_list),
        debt_count=len(debt_list),
    )


def weighted_average_rate(debts: Iterable[DebtComputed]) -> float:
    """Return the balance-weighted APR of the portfolio (0 with no balance)."""

    debt_list = list(debts)
    total_debt = math.fsum(max(d.original_balance, 0.0) for d in debt_list)
    if total_debt <= 0:
        return 0.0
    weighted = math.fsum(max(d.original_balance, 0.0) * d.interest_rate for d in debt_list)
    return weighted / total_debt


__all__ = ["PortfolioTotals", "aggregate", "weighted_average_rate"]
