"""Blended-rate payoff projections across a whole debt portfolio.

The portfolio is collapsed into one synthetic loan: the summed balance at the
balance-weighted APR, serviced by the summed monthly payment. Three scenarios
differ only in how much extra is added to that payment. This answers "how long
until all of it is gone at a blended rate" and deliberately does not model the
order in which individual debts are retired (see ``services.strategies``).

``proportional_projection`` and ``phases`` take the per-debt view instead: an
extra amount is shared out by payment size and each debt is re-solved alone.
"""

from __future__ import annotations

import calendar
import math
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional, Union

from ..config import DEFAULT_CONFIG, EngineConfig
from ..logging_config import get_logger
from ..models.debt import NEVER, DebtComputed, Unpayable, is_never
from .aggregation import aggregate, weighted_average_rate
from .amortization import balance_after, monthly_rate, simulate_payoff

logger = get_logger(__name__)

CURRENT_PACE = "Current pace"
WITH_HABITUAL_EXTRA = "With extra payments"
BEST_CASE = "Best case"
HABIT_PHASE = "With 1% habit"
STEP_UP_PHASE = "Step-up strategy"


@dataclass(frozen=True, slots=True)
class ProjectionScenario:
    """One payoff timeline relative to the current-pace baseline.

    ``months_saved`` and ``interest_saved`` compare against a finite baseline.
    When the baseline is never paid off, including a baseline that only hit
    the iteration ceiling while a faster scenario finishes, they are reported
    as ``0`` and ``None``: render that pair as "N/A", not as "no savings".
    """

    label: str
    monthly_payment: float
    months_remaining: Union[int, Unpayable]
    weeks_remaining: Union[float, Unpayable]
    date_estimate: Optional[date]
    months_saved: int = 0
    weeks_saved: float = 0.0
    interest_saved: Optional[float] = None  # None means not applicable


@dataclass(frozen=True, slots=True)
class PayoffProjection:
    current_pace: ProjectionScenario
    with_habitual_extra: ProjectionScenario
    best_case: ProjectionScenario
    blended_rate: float
    total_debt: float
    total_monthly_payment: float

    @property
    def scenarios(self) -> tuple[ProjectionScenario, ProjectionScenario, ProjectionScenario]:
        return (self.current_pace, self.with_habitual_extra, self.best_case)


@dataclass(frozen=True, slots=True)
class InterestSavings:
    """Approximate interest avoided by finishing sooner.

    Computed with the average-balance method rather than two full schedules;
    ``approximate`` is always True so callers can label it as an estimate.
    """

    interest_saved: Optional[float]
    months_saved: int
    average_balance: float
    blended_rate: float
    approximate: bool = True


def add_months(start: date, months: int) -> date:
    """Return *start* shifted by whole calendar months, clamping the day."""

    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def _months_saved(baseline: Union[int, Unpayable], scenario: Union[int, Unpayable]) -> int:
    if is_never(baseline) or is_never(scenario):
        return 0
    return max(0, baseline - scenario)


def calculate_interest_savings(
    debts: Iterable[DebtComputed],
    *,
    baseline_months: Union[int, Unpayable],
    improved_months: Union[int, Unpayable],
    extra_monthly: float,
) -> InterestSavings:
    """Estimate the interest saved by the faster of two blended timelines.

    ``saved = rate * mean(start balance, balance at the baseline midpoint)
    * (M0 - M1) / 12`` where the midpoint balance is stepped forward with the
    baseline payment. Returns ``interest_saved=None`` when either timeline is
    never paid off.
    """

    debt_list = list(debts)
    totals = aggregate(debt_list)
    rate = weighted_average_rate(debt_list)

    if is_never(baseline_months) or is_never(improved_months):
        return InterestSavings(
            interest_saved=None, months_saved=0, average_balance=totals.total_debt, blended_rate=rate
        )

    midpoint_balance = balance_after(
        balance=totals.total_debt,
        annual_rate=rate,
        monthly_payment=totals.total_monthly_payment,
        months=baseline_months // 2,
    )
    average_balance = (totals.total_debt + midpoint_balance) / 2
    months_saved = _months_saved(baseline_months, improved_months)

    if extra_monthly <= 0 or months_saved == 0:
        saved = 0.0
    else:
        saved = (rate / 100.0) * average_balance * months_saved / 12
    return InterestSavings(
        interest_saved=saved,
        months_saved=months_saved,
        average_balance=average_balance,
        blended_rate=rate,
    )


def _scenario(
    *,
    label: str,
    monthly_payment: float,
    months: Union[int, Unpayable],
    today: date,
    config: EngineConfig,
) -> ProjectionScenario:
    if is_never(months):
        return ProjectionScenario(
            label=label,
            monthly_payment=monthly_payment,
            months_remaining=NEVER,
            weeks_remaining=NEVER,
            date_estimate=None,
        )
    return ProjectionScenario(
        label=label,
        monthly_payment=monthly_payment,
        months_remaining=months,
        weeks_remaining=months * config.weeks_per_month,
        date_estimate=add_months(today, months),
    )


def _relative_to(
    scenario: ProjectionScenario,
    baseline: ProjectionScenario,
    *,
    debts: list[DebtComputed],
    extra: float,
    config: EngineConfig,
) -> ProjectionScenario:
    months_saved = _months_saved(baseline.months_remaining, scenario.months_remaining)
    savings = calculate_interest_savings(
        debts,
        baseline_months=baseline.months_remaining,
        improved_months=scenario.months_remaining,
        extra_monthly=extra,
    )
    return ProjectionScenario(
        label=scenario.label,
        monthly_payment=scenario.monthly_payment,
        months_remaining=scenario.months_remaining,
        weeks_remaining=scenario.weeks_remaining,
        date_estimate=scenario.date_estimate,
        months_saved=months_saved,
        weeks_saved=months_saved * config.weeks_per_month,
        interest_saved=savings.interest_saved,
    )


def project(
    debts: Iterable[DebtComputed],
    *,
    habitual_extra: float = 0.0,
    available_surplus: float = 0.0,
    today: date | None = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> PayoffProjection:
    """Project current pace, habitual-extra and best-case payoff timelines.

    ``available_surplus`` is clamped to at least ``habitual_extra`` so the best
    case is never slower than the habitual one. When the combined payment
    cannot outpace the blended interest all three scenarios are never paid off.
    """

    debt_list = list(debts)
    today = today or date.today()
    totals = aggregate(debt_list)
    rate = weighted_average_rate(debt_list)

    habitual = max(habitual_extra, 0.0)
    surplus = max(available_surplus, habitual)
    base_payment = totals.total_monthly_payment
    extras = ((CURRENT_PACE, 0.0), (WITH_HABITUAL_EXTRA, habitual), (BEST_CASE, surplus))

    degenerate = (
        totals.total_debt > config.payoff_tolerance
        and base_payment <= totals.total_debt * monthly_rate(rate) + config.unpayable_epsilon
    )
    if degenerate:
        logger.debug(
            "Blended payment cannot outpace interest",
            extra={"total_debt": totals.total_debt, "blended_rate": rate, "payment": base_payment},
        )

    scenarios = []
    for label, extra in extras:
        payment = base_payment + extra
        if degenerate:
            months: Union[int, Unpayable] = NEVER
        else:
            months = simulate_payoff(
                balance=totals.total_debt,
                annual_rate=rate,
                monthly_payment=payment,
                config=config,
            ).months
        scenarios.append(
            _scenario(label=label, monthly_payment=payment, months=months, today=today, config=config)
        )

    baseline, habitual_scenario, best = scenarios
    baseline = _relative_to(baseline, baseline, debts=debt_list, extra=0.0, config=config)
    return PayoffProjection(
        current_pace=baseline,
        with_habitual_extra=_relative_to(
            habitual_scenario, baseline, debts=debt_list, extra=habitual, config=config
        ),
        best_case=_relative_to(best, baseline, debts=debt_list, extra=surplus, config=config),
        blended_rate=rate,
        total_debt=totals.total_debt,
        total_monthly_payment=base_payment,
    )


@dataclass(frozen=True, slots=True)
class ProportionalProjection:
    """Per-debt timeline with an extra amount shared out by payment size."""

    current_months: Union[int, Unpayable]
    with_habit_months: Union[int, Unpayable]
    months_saved: int
    date_estimate: Optional[date]
    habit_date_estimate: Optional[date]


@dataclass(frozen=True, slots=True)
class Phase:
    label: str
    description: str
    monthly_payment: float
    months: Union[int, Unpayable]
    date_estimate: Optional[date]


def _date_for(today: date, months: Union[int, Unpayable]) -> Optional[date]:
    return None if is_never(months) else add_months(today, months)


def _longest(months: Iterable[Union[int, Unpayable]]) -> Union[int, Unpayable]:
    """The whole portfolio is clear only once its slowest debt is."""
    longest = 0
    for value in months:
        if is_never(value):
            return NEVER
        longest = max(longest, value)
    return longest


def _proportional_months(
    debts: list[DebtComputed], extra: float, config: EngineConfig
) -> Union[int, Unpayable]:
    total_payment = math.fsum(d.monthly_payment for d in debts)
    if extra <= 0 or total_payment <= 0:
        return _longest(d.months_to_payoff for d in debts)

    months: list[Union[int, Unpayable]] = []
    for debt in debts:
        share = extra * debt.monthly_payment / total_payment
        if share <= 0:
            months.append(debt.months_to_payoff)
            continue
        months.append(
            simulate_payoff(
                balance=debt.original_balance,
                annual_rate=debt.interest_rate,
                monthly_payment=debt.monthly_payment + share,
                config=config,
            ).months
        )
    return _longest(months)


def proportional_projection(
    debts: Iterable[DebtComputed],
    *,
    habit_amount: float,
    today: date | None = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> ProportionalProjection:
    """Re-solve every debt with a share of ``habit_amount`` added to its payment.

    Each debt gets ``habit_amount * payment / total_payment`` and is paid off on
    its own; nothing rolls over between debts. The timeline is the slowest debt.
    """

    debt_list = list(debts)
    today = today or date.today()
    current = _longest(d.months_to_payoff for d in debt_list)
    with_habit = _proportional_months(debt_list, max(habit_amount, 0.0), config)
    return ProportionalProjection(
        current_months=current,
        with_habit_months=with_habit,
        months_saved=_months_saved(current, with_habit),
        date_estimate=_date_for(today, current),
        habit_date_estimate=_date_for(today, with_habit),
    )


def phases(
    debts: Iterable[DebtComputed],
    *,
    habit_amount: float,
    custom_amount: bool = False,
    today: date | None = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> list[Phase]:
    """Return the current-pace phase and, with a positive habit, the habit phase."""

    debt_list = list(debts)
    if not debt_list:
        return []

    timeline = proportional_projection(
        debt_list, habit_amount=habit_amount, today=today, config=config
    )
    total_payment = math.fsum(d.monthly_payment for d in debt_list)
    result = [
        Phase(
            label=CURRENT_PACE,
            description="Continue as you are",
            monthly_payment=total_payment,
            months=timeline.current_months,
            date_estimate=timeline.date_estimate,
        )
    ]
    if habit_amount > 0:
        result.append(
            Phase(
                label=STEP_UP_PHASE if custom_amount else HABIT_PHASE,
                description=f"Add {habit_amount:.0f}/month",
                monthly_payment=total_payment + habit_amount,
                months=timeline.with_habit_months,
                date_estimate=timeline.habit_date_estimate,
            )
        )
    return result


__all__ = [
    "BEST_CASE",
    "CURRENT_PACE",
    "HABIT_PHASE",
    "InterestSavings",
    "PayoffProjection",
    "Phase",
    "ProjectionScenario",
    "ProportionalProjection",
    "STEP_UP_PHASE",
    "WITH_HABITUAL_EXTRA",
    "add_months",
    "calculate_interest_savings",
    "phases",
    "project",
    "proportional_projection",
]
