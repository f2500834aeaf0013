"""Per-debt payoff ordering (snowball and avalanche).

Unlike the blended projection, these schedules retire debts one at a time:
every debt receives its own payment, the surplus goes to the current target,
and each cleared debt's payment rolls into the next target.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable, Optional, Union

from ..config import DEFAULT_CONFIG, EngineConfig
from ..logging_config import get_logger
from ..models.debt import NEVER, DebtComputed, Unpayable
from .amortization import monthly_rate
from .projection import add_months

logger = get_logger(__name__)

SNOWBALL = "snowball"
AVALANCHE = "avalanche"
STRATEGIES = (SNOWBALL, AVALANCHE)

@dataclass(frozen=True, slots=True)
class StrategyResult:
    """Schedule rows plus their summary for one ordering strategy."""

    strategy: str
    schedule: list[dict] = field(default_factory=list)
    months: Union[int, Unpayable] = 0
    total_interest: Union[float, Unpayable] = 0.0
    payoff_date: Optional[str] = None


def _calculate_schedule(
    *,
    debts: list[DebtComputed],
    surplus: float,
    start: date,
    config: EngineConfig,
) -> tuple[list[dict], bool]:
    """Run the month-by-month simulation; return (rows, converged)."""

    accounts: list[dict[str, Any]] = [
        {
            "id": d.id,
            "balance": max(d.original_balance, 0.0),
            "rate": monthly_rate(d.interest_rate),
            "payment": max(d.monthly_payment, 0.0),
        }
        for d in debts
    ]
    schedule: list[dict] = []
    rolled_payments = 0.0  # freed payments from debts already cleared
    month = 0

    while any(a["balance"] > config.payoff_tolerance for a in accounts):
        if month >= config.iteration_ceiling:
            return schedule, False

        extra_pool = max(surplus, 0.0) + rolled_payments
        row: dict[str, Any] = {"date": add_months(start, month).isoformat(), "payments": {}}
        progressed = False

        for account in accounts:
            if account["balance"] <= config.payoff_tolerance:
                continue

            interest = account["balance"] * account["rate"]
            payment = account["payment"]
            # The surplus goes to the first active debt in priority order.
            if extra_pool > 0:
                payment += extra_pool
                extra_pool = 0.0

            starting_balance = account["balance"]
            owed = account["balance"] + interest
            if payment >= owed - config.payoff_tolerance:
                extra_pool += payment - owed
                payment = owed
                account["balance"] = 0.0
                rolled_payments += account["payment"]
            else:
                account["balance"] = owed - payment
            if account["balance"] < starting_balance:
                progressed = True

            row["payments"][account["id"]] = {
                "payment_amount": payment,
                "interest_paid": interest,
                "remaining_balance": account["balance"],
            }

        schedule.append(row)
        month += 1

        # With no debt shrinking nothing clears, so no payment is ever freed and
        # every later month repeats the same shortfall.
        if not progressed:
            logger.debug("Schedule stalled", extra={"month": month})
            return schedule, False

    return schedule, True


def schedule_summary(schedule: list[dict]) -> tuple[str | None, float, int]:
    """Return (payoff_date_iso, total_interest, months)."""

    if not schedule:
        return None, 0.0, 0
    total_interest = sum(
        float(p.get("interest_paid", 0.0) or 0.0)
        for entry in schedule
        for p in entry.get("payments", {}).values()
    )
    return schedule[-1].get("date"), total_interest, len(schedule)


def _run(
    strategy: str,
    ordered: list[DebtComputed],
    *,
    surplus: float,
    today: date | None,
    config: EngineConfig,
) -> StrategyResult:
    start = (today or date.today()).replace(day=1)
    schedule, converged = _calculate_schedule(
        debts=ordered, surplus=surplus, start=start, config=config
    )
    if not converged:
        logger.debug(
            "Strategy schedule did not converge",
            extra={"strategy": strategy, "months_simulated": len(schedule)},
        )
        return StrategyResult(
            strategy=strategy, schedule=schedule, months=NEVER, total_interest=NEVER
        )
    payoff_date, total_interest, months = schedule_summary(schedule)
    return StrategyResult(
        strategy=strategy,
        schedule=schedule,
        months=months,
        total_interest=total_interest,
        payoff_date=payoff_date,
    )


def snowball_schedule(
    *,
    debts: Iterable[DebtComputed],
    surplus: float,
    today: date | None = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> StrategyResult:
    """Return payoff schedule prioritizing smallest balances first."""
    ordered = sorted(debts, key=lambda d: (d.original_balance, d.id))
    return _run(SNOWBALL, ordered, surplus=surplus, today=today, config=config)


def avalanche_schedule(
    *,
    debts: Iterable[DebtComputed],
    surplus: float,
    today: date | None = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> StrategyResult:
    """Return payoff schedule prioritizing highest APR first."""
    ordered = sorted(debts, key=lambda d: (-d.interest_rate, d.id))
    return _run(AVALANCHE, ordered, surplus=surplus, today=today, config=config)


def run_strategy(
    strategy: str,
    *,
    debts: Iterable[DebtComputed],
    surplus: float,
    today: date | None = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> StrategyResult:
    """Dispatch to the named ordering strategy."""
    if strategy == SNOWBALL:
        return snowball_schedule(debts=debts, surplus=surplus, today=today, config=config)
    if strategy == AVALANCHE:
        return avalanche_schedule(debts=debts, surplus=surplus, today=today, config=config)
    raise ValueError("Invalid debt payoff strategy.")


__all__ = [
    "AVALANCHE",
    "SNOWBALL",
    "STRATEGIES",
    "StrategyResult",
    "avalanche_schedule",
    "run_strategy",
    "schedule_summary",
    "snowball_schedule",
]
