"""Weekly check-in and challenge records consumed by the analytics layer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

NEUTRAL_MOOD = 3


class ChallengeType(str, Enum):
    EARN_MORE = "earn_more"
    SPEND_LESS = "spend_less"
    HYBRID = "hybrid"


@dataclass(frozen=True, slots=True)
class CheckIn:
    """One weekly check-in; at most one per week number."""

    week: int
    mood_score: int = NEUTRAL_MOOD  # 1 (stressed) .. 5 (great)
    extra_payment: Optional[float] = None
    new_income: Optional[float] = None
    challenge_completed: Optional[bool] = None


@dataclass(frozen=True, slots=True)
class Challenge:
    """A weekly earn-more/spend-less challenge and its outcome."""

    week: int
    completed: bool = False
    target_amount: float = 0.0
    actual_amount: Optional[float] = None
    challenge_type: ChallengeType = ChallengeType.HYBRID


__all__ = ["Challenge", "ChallengeType", "CheckIn", "NEUTRAL_MOOD"]
