"""Record types exchanged with the engine."""

from .checkin import NEUTRAL_MOOD, Challenge, ChallengeType, CheckIn
from .debt import (
    NEVER,
    DebtComputed,
    DebtInput,
    DebtType,
    MortgageDebt,
    SimpleDebt,
    Unpayable,
    is_never,
)

__all__ = [
    "Challenge",
    "ChallengeType",
    "CheckIn",
    "DebtComputed",
    "DebtInput",
    "DebtType",
    "MortgageDebt",
    "NEUTRAL_MOOD",
    "NEVER",
    "SimpleDebt",
    "Unpayable",
    "is_never",
]
