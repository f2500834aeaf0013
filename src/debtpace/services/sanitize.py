"""Coerce loosely-typed caller records into engine inputs.

Mirrors how the surrounding application treats form data: anything that does
not parse as a non-negative number becomes 0, so the engine only ever sees
sanitized values. Keys are accepted in either camelCase or snake_case.
"""

from __future__ import annotations

import math
from typing import Any, Mapping, Optional

from ..models.checkin import NEUTRAL_MOOD, CheckIn, Challenge, ChallengeType
from ..models.debt import DebtInput, DebtType, MortgageDebt, SimpleDebt

DEFAULT_MORTGAGE_TERM_YEARS = 30
LOAN_TYPES = {DebtType.PERSONAL_LOAN, DebtType.CAR_LOAN, DebtType.STUDENT_LOAN}

# Mood labels used by the check-in form.
MOOD_SCORES = {"great": 5, "good": 4, "okay": 3, "struggling": 2, "stressed": 1}


def _get(raw: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in raw and raw[key] is not None:
            return raw[key]
    return None


def to_amount(value: Any) -> float:
    """Return *value* as a non-negative finite float, else 0."""

    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number


def _optional_amount(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    return to_amount(value)


def _to_int(value: Any, default: int = 0) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default


def _to_bool(value: Any) -> Optional[bool]:
    if value is None:
        return None
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def coerce_debt_type(value: Any) -> DebtType:
    """Return the matching ``DebtType``; unknown values default to credit card."""

    try:
        return DebtType(str(value).strip().lower())
    except ValueError:
        return DebtType.CREDIT_CARD


def coerce_debt_input(raw: Mapping[str, Any]) -> DebtInput:
    """Build a ``SimpleDebt`` or ``MortgageDebt`` from a raw mapping."""

    debt_id = str(_get(raw, "id") or "")
    name = str(_get(raw, "name") or "")
    debt_type = coerce_debt_type(_get(raw, "debtType", "debt_type"))
    rate = to_amount(_get(raw, "interestRate", "interest_rate", "apr"))

    if debt_type is DebtType.MORTGAGE:
        principal = to_amount(_get(raw, "principal", "loanAmount", "loan_amount", "balance"))
        term_years = _to_int(
            _get(raw, "termYears", "term_years", "mortgageTermYears"), DEFAULT_MORTGAGE_TERM_YEARS
        )
        if term_years < 1:
            term_years = DEFAULT_MORTGAGE_TERM_YEARS
        custom = to_amount(_get(raw, "customMonthlyPayment", "custom_monthly_payment"))
        return MortgageDebt(
            id=debt_id,
            name=name,
            principal=principal,
            interest_rate=rate,
            term_years=term_years,
            custom_monthly_payment=custom or None,
        )

    if debt_type in LOAN_TYPES:
        balance = to_amount(_get(raw, "loanAmount", "loan_amount")) or to_amount(
            _get(raw, "balance")
        )
    else:
        balance = to_amount(_get(raw, "balance"))
    return SimpleDebt(
        id=debt_id,
        name=name,
        debt_type=debt_type,
        balance=balance,
        interest_rate=rate,
        monthly_payment=to_amount(_get(raw, "monthlyPayment", "monthly_payment")),
    )


def coerce_mood(value: Any) -> int:
    """Map a mood label or number onto the 1..5 scale (neutral when unknown)."""

    if isinstance(value, str) and value.strip().lower() in MOOD_SCORES:
        return MOOD_SCORES[value.strip().lower()]
    score = _to_int(value, NEUTRAL_MOOD)
    if score < 1 or score > 5:
        return NEUTRAL_MOOD
    return score


def coerce_check_in(raw: Mapping[str, Any]) -> CheckIn:
    """Build a ``CheckIn`` from a raw mapping; weeks below 1 become week 1."""

    return CheckIn(
        week=max(_to_int(_get(raw, "week"), 1), 1),
        mood_score=coerce_mood(_get(raw, "moodScore", "mood_score", "moodEmoji", "mood")),
        extra_payment=_optional_amount(_get(raw, "extraPayment", "extra_payment")),
        new_income=_optional_amount(_get(raw, "newIncome", "new_income")),
        challenge_completed=_to_bool(_get(raw, "challengeCompleted", "challenge_completed")),
    )


def coerce_challenge(raw: Mapping[str, Any]) -> Challenge:
    """Build a ``Challenge`` from a raw mapping."""

    try:
        challenge_type = ChallengeType(str(_get(raw, "type", "challengeType", "challenge_type")))
    except ValueError:
        challenge_type = ChallengeType.HYBRID
    return Challenge(
        week=max(_to_int(_get(raw, "week"), 1), 1),
        completed=bool(_to_bool(_get(raw, "completed"))),
        target_amount=to_amount(_get(raw, "targetAmount", "target_amount")),
        actual_amount=_optional_amount(_get(raw, "actualAmount", "actual_amount")),
        challenge_type=challenge_type,
    )


__all__ = [
    "DEFAULT_MORTGAGE_TERM_YEARS",
    "MOOD_SCORES",
    "coerce_challenge",
    "coerce_check_in",
    "coerce_debt_input",
    "coerce_debt_type",
    "coerce_mood",
    "to_amount",
]
