"""Behavioral analytics over weekly check-ins and challenges.

Every function here is total: an empty history is the normal state for a new
user and produces zeroed, neutral results rather than errors.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Iterable, Optional, Sequence

from ..config import DEFAULT_CONFIG, EngineConfig
from ..models.checkin import NEUTRAL_MOOD, Challenge, CheckIn

INCREASING = "increasing"
DECREASING = "decreasing"
STABLE = "stable"

# Fewest extra-payment data points needed before a trend is reported.
MIN_TREND_POINTS = 3
MOOD_WINDOW = 4
STRONG_CONSISTENCY = 80
LOW_CONSISTENCY = 50
POSITIVE_MOOD = 4.0
LOW_MOOD = 2.0


@dataclass(frozen=True, slots=True)
class PaymentVelocity:
    average_extra_payment: float
    velocity_trend: str
    total_extra_payments: float = 0.0
    average_weekly_payment: float = 0.0


@dataclass(frozen=True, slots=True)
class WeekRecord:
    """One row of the week-by-week performance table."""

    week: int
    checked_in: bool
    challenge_completed: bool
    extra_payment: float
    mood_score: int
    challenge_amount: float = 0.0


@dataclass(frozen=True, slots=True)
class SavingsAnalysis:
    total_interest_saved: float
    extra_payments_saved: float
    challenge_earnings: float
    total_savings: float


def _round_percent(value: float) -> int:
    """Round half-up to a whole percent."""

    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _mean(values: Sequence[float]) -> float:
    return math.fsum(values) / len(values) if values else 0.0


def _velocity_trend(amounts: Sequence[float], threshold: float) -> str:
    """Compare the latest third of the series with the earliest third."""

    if len(amounts) < MIN_TREND_POINTS:
        return STABLE
    third = len(amounts) // 3
    early_mean = _mean(amounts[:third])
    recent_mean = _mean(amounts[-third:])

    if early_mean == 0:
        return INCREASING if recent_mean > 0 else STABLE
    if recent_mean > early_mean * (1 + threshold):
        return INCREASING
    if recent_mean < early_mean * (1 - threshold):
        return DECREASING
    return STABLE


def calculate_payment_velocity(
    check_ins: Iterable[CheckIn], *, config: EngineConfig = DEFAULT_CONFIG
) -> PaymentVelocity:
    """Return the average extra payment and whether it is trending up or down.

    Check-ins without an extra payment are left out of the average (they are
    not counted as zero). ``average_weekly_payment`` spreads the total over
    every check-in instead.
    """

    ordered = sorted(check_ins, key=lambda c: c.week)
    amounts = [c.extra_payment for c in ordered if c.extra_payment is not None]
    if not amounts:
        return PaymentVelocity(average_extra_payment=0.0, velocity_trend=STABLE)

    total = math.fsum(amounts)
    return PaymentVelocity(
        average_extra_payment=total / len(amounts),
        velocity_trend=_velocity_trend(amounts, config.velocity_threshold),
        total_extra_payments=total,
        average_weekly_payment=total / len(ordered),
    )


def calculate_weekly_performance(
    check_ins: Iterable[CheckIn], challenges: Iterable[Challenge]
) -> list[WeekRecord]:
    """Join check-ins and challenges by week, one record per active week."""

    check_in_by_week: dict[int, CheckIn] = {}
    for check_in in check_ins:
        check_in_by_week.setdefault(check_in.week, check_in)
    challenge_by_week: dict[int, Challenge] = {}
    for challenge in challenges:
        challenge_by_week.setdefault(challenge.week, challenge)

    records: list[WeekRecord] = []
    for week in sorted(set(check_in_by_week) | set(challenge_by_week)):
        check_in = check_in_by_week.get(week)
        challenge = challenge_by_week.get(week)
        completed = bool(challenge and challenge.completed) or bool(
            check_in and check_in.challenge_completed
        )
        records.append(
            WeekRecord(
                week=week,
                checked_in=check_in is not None,
                challenge_completed=completed,
                extra_payment=(check_in.extra_payment or 0.0) if check_in else 0.0,
                mood_score=check_in.mood_score if check_in else NEUTRAL_MOOD,
                challenge_amount=(
                    (challenge.actual_amount or 0.0) if challenge and challenge.completed else 0.0
                ),
            )
        )
    return records


def calculate_consistency_score(
    check_ins: Iterable[CheckIn], challenges: Iterable[Challenge], current_week: int
) -> int:
    """Return the percentage (0..100) of elapsed weeks with any engagement.

    A week counts when it has a check-in or a completed challenge. Weeks after
    ``current_week`` are ignored.
    """

    if current_week <= 0:
        return 0
    active_weeks = {c.week for c in check_ins}
    active_weeks |= {c.week for c in challenges if c.completed}
    elapsed = {week for week in active_weeks if 1 <= week <= current_week}
    score = _round_percent(len(elapsed) / current_week * 100)
    return min(max(score, 0), 100)


@dataclass(frozen=True, slots=True)
class InsightContext:
    velocity: PaymentVelocity
    weekly_performance: Sequence[WeekRecord]
    consistency_score: int

    @property
    def recent_mood(self) -> Optional[float]:
        """Mean mood over the last few checked-in weeks, if there are enough."""
        moods = [w.mood_score for w in self.weekly_performance if w.checked_in]
        if len(moods) < MOOD_WINDOW:
            return None
        return _mean(moods[-MOOD_WINDOW:])


@dataclass(frozen=True, slots=True)
class InsightRule:
    name: str
    applies: Callable[[InsightContext], bool]
    message: Callable[[InsightContext], str]


INSIGHT_RULES: tuple[InsightRule, ...] = (
    InsightRule(
        name="momentum_up",
        applies=lambda ctx: ctx.velocity.velocity_trend == INCREASING,
        message=lambda ctx: "Your payment momentum is increasing! Keep it up.",
    ),
    InsightRule(
        name="momentum_down",
        applies=lambda ctx: ctx.velocity.velocity_trend == DECREASING,
        message=lambda ctx: "Payment momentum has slowed. Consider a weekly challenge boost.",
    ),
    InsightRule(
        name="extra_payments_made",
        applies=lambda ctx: ctx.velocity.total_extra_payments > 0,
        message=lambda ctx: (
            f"You've made {ctx.velocity.total_extra_payments:,.0f} in extra payments!"
        ),
    ),
    InsightRule(
        name="strong_consistency",
        applies=lambda ctx: ctx.consistency_score >= STRONG_CONSISTENCY,
        message=lambda ctx: "Excellent consistency! You're building a strong habit.",
    ),
    InsightRule(
        name="low_consistency",
        applies=lambda ctx: ctx.consistency_score < LOW_CONSISTENCY,
        message=lambda ctx: "Try checking in more regularly to build momentum.",
    ),
    InsightRule(
        name="positive_mood",
        applies=lambda ctx: ctx.recent_mood is not None and ctx.recent_mood >= POSITIVE_MOOD,
        message=lambda ctx: "Your mood has been positive recently. Financial progress feels good!",
    ),
    InsightRule(
        name="low_mood",
        applies=lambda ctx: ctx.recent_mood is not None and ctx.recent_mood <= LOW_MOOD,
        message=lambda ctx: "Remember: progress isn't always linear. Every step counts.",
    ),
)


def generate_insights(
    velocity: PaymentVelocity,
    weekly_performance: Sequence[WeekRecord],
    consistency_score: int,
) -> list[str]:
    """Apply ``INSIGHT_RULES`` in order and return the messages that fire.

    With no weekly history there is nothing to comment on, so the result is
    empty.
    """

    if not weekly_performance:
        return []
    ctx = InsightContext(
        velocity=velocity,
        weekly_performance=weekly_performance,
        consistency_score=consistency_score,
    )
    return [rule.message(ctx) for rule in INSIGHT_RULES if rule.applies(ctx)]


def calculate_savings(
    check_ins: Iterable[CheckIn],
    challenges: Iterable[Challenge],
    *,
    original_debt: float,
    current_debt: float,
    annual_rate: float | None = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> SavingsAnalysis:
    """Summarize money redirected to debt and a rough interest-avoided figure.

    The interest estimate is about four weeks of interest on what has been paid
    down so far, at ``annual_rate`` (``config.savings_assumed_apr`` by default).
    """

    rate = config.savings_assumed_apr if annual_rate is None else annual_rate
    extra = math.fsum(c.extra_payment or 0.0 for c in check_ins)
    earnings = math.fsum(c.actual_amount or 0.0 for c in challenges if c.completed)
    paid_so_far = max(original_debt - current_debt, 0.0)
    interest_saved = paid_so_far * (rate / 100.0) / 52 * 4
    return SavingsAnalysis(
        total_interest_saved=interest_saved,
        extra_payments_saved=extra,
        challenge_earnings=earnings,
        total_savings=interest_saved + extra + earnings,
    )


__all__ = [
    "DECREASING",
    "INCREASING",
    "INSIGHT_RULES",
    "InsightRule",
    "PaymentVelocity",
    "STABLE",
    "SavingsAnalysis",
    "WeekRecord",
    "calculate_consistency_score",
    "calculate_payment_velocity",
    "calculate_savings",
    "calculate_weekly_performance",
    "generate_insights",
]
