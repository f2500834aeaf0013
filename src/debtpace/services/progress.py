"""Debt paydown progress and milestone tracking."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional


def _round_percent(value: float) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


@dataclass(frozen=True, slots=True)
class Milestone:
    percentage: int
    label: str


MILESTONES: tuple[Milestone, ...] = (
    Milestone(25, "First Quarter"),
    Milestone(30, "30% Complete"),
    Milestone(35, "Over a Third"),
    Milestone(40, "40% Done"),
    Milestone(45, "Nearly Halfway"),
    Milestone(50, "Halfway There!"),
    Milestone(60, "60% Complete"),
    Milestone(70, "70% Done"),
    Milestone(75, "Three Quarters"),
    Milestone(80, "80% Complete"),
    Milestone(90, "90% There!"),
    Milestone(100, "Complete!"),
)


@dataclass(frozen=True, slots=True)
class MilestoneProgress:
    current: int
    next: int
    percentage: int


def calculate_debt_progress(original_debt: float, current_debt: float) -> int:
    """Return the share of the original debt already repaid, 0..100."""

    if original_debt <= 0:
        return 0
    paid = original_debt - current_debt
    return min(max(_round_percent(paid / original_debt * 100), 0), 100)


def check_milestone(current_percentage: float, last_percentage: float) -> Optional[Milestone]:
    """Return the first milestone crossed since *last_percentage*, if any."""

    for milestone in MILESTONES:
        if last_percentage < milestone.percentage <= current_percentage:
            return milestone
    return None


def next_milestone(current_percentage: float) -> Optional[Milestone]:
    for milestone in MILESTONES:
        if current_percentage < milestone.percentage:
            return milestone
    return None


def milestones_reached(current_percentage: float) -> list[Milestone]:
    return [m for m in MILESTONES if current_percentage >= m.percentage]


def progress_to_next_milestone(current_percentage: int) -> Optional[MilestoneProgress]:
    """Return how far along the way to the next milestone, or None at 100%."""

    upcoming = next_milestone(current_percentage)
    if upcoming is None:
        return None
    reached = milestones_reached(current_percentage)
    previous = reached[-1].percentage if reached else 0
    span = upcoming.percentage - previous
    percentage = _round_percent((current_percentage - previous) / span * 100)
    return MilestoneProgress(
        current=current_percentage,
        next=upcoming.percentage,
        percentage=min(max(percentage, 0), 100),
    )


__all__ = [
    "MILESTONES",
    "Milestone",
    "MilestoneProgress",
    "calculate_debt_progress",
    "check_milestone",
    "milestones_reached",
    "next_milestone",
    "progress_to_next_milestone",
]
