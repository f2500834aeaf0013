"""Check-in streaks and challenge statistics."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable

from ..models.checkin import Challenge, ChallengeType, CheckIn


@dataclass(frozen=True, slots=True)
class ChallengeStats:
    total_challenges: int
    completed_challenges: int
    current_streak: int
    longest_streak: int
    total_earned: float
    total_saved: float


def calculate_check_in_streak(check_ins: Iterable[CheckIn]) -> int:
    """Return the number of consecutive weeks ending at the latest check-in."""

    weeks = {c.week for c in check_ins}
    if not weeks:
        return 0

    # Walk backwards from the latest week until a gap.
    streak = 0
    cursor = max(weeks)
    while cursor in weeks:
        streak += 1
        cursor -= 1
    return streak


def compute_streaks(challenges: Iterable[Challenge]) -> tuple[int, int]:
    """Return (current_streak, longest_streak) of completed challenges.

    Streaks run over consecutive challenges ordered by week; the current streak
    is the run that includes the most recent challenge.
    """

    ordered = sorted(challenges, key=lambda c: c.week)
    longest = 0
    run = 0
    for challenge in ordered:
        if challenge.completed:
            run += 1
            longest = max(longest, run)
        else:
            run = 0
    return run, longest


def calculate_challenge_stats(challenges: Iterable[Challenge]) -> ChallengeStats:
    """Summarize completion counts, streaks and money earned or saved."""

    challenge_list = list(challenges)
    completed = [c for c in challenge_list if c.completed]
    current, longest = compute_streaks(challenge_list)

    # Hybrid challenges count towards both totals.
    earned = math.fsum(
        c.actual_amount or 0.0
        for c in completed
        if c.challenge_type in (ChallengeType.EARN_MORE, ChallengeType.HYBRID)
    )
    saved = math.fsum(
        c.actual_amount or 0.0
        for c in completed
        if c.challenge_type in (ChallengeType.SPEND_LESS, ChallengeType.HYBRID)
    )
    return ChallengeStats(
        total_challenges=len(challenge_list),
        completed_challenges=len(completed),
        current_streak=current,
        longest_streak=longest,
        total_earned=earned,
        total_saved=saved,
    )


__all__ = [
    "ChallengeStats",
    "calculate_challenge_stats",
    "calculate_check_in_streak",
    "compute_streaks",
]
