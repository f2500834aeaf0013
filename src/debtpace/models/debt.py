"""Debt records consumed and produced by the payoff engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class DebtType(str, Enum):
    """Supported debt categories."""

    CREDIT_CARD = "credit_card"
    PERSONAL_LOAN = "personal_loan"
    CAR_LOAN = "car_loan"
    STUDENT_LOAN = "student_loan"
    MORTGAGE = "mortgage"


SIMPLE_DEBT_TYPES = frozenset(
    {DebtType.CREDIT_CARD, DebtType.PERSONAL_LOAN, DebtType.CAR_LOAN, DebtType.STUDENT_LOAN}
)


class Unpayable(Enum):
    """Marker for a debt that is never retired at its current payment."""

    NEVER = "never"

    def __str__(self) -> str:
        return "Never"


NEVER = Unpayable.NEVER


def is_never(value: object) -> bool:
    """Return True when *value* is the never-paid-off marker."""

    return value is NEVER


@dataclass(frozen=True, slots=True)
class SimpleDebt:
    """Credit card or installment loan described by balance, APR and a fixed payment."""

    id: str
    name: str
    balance: float
    interest_rate: float  # APR, percent per year
    monthly_payment: float
    debt_type: DebtType = DebtType.CREDIT_CARD

    def __post_init__(self) -> None:
        debt_type = DebtType(self.debt_type)
        if debt_type not in SIMPLE_DEBT_TYPES:
            raise ValueError("SimpleDebt cannot carry the mortgage type; use MortgageDebt.")
        object.__setattr__(self, "debt_type", debt_type)


@dataclass(frozen=True, slots=True)
class MortgageDebt:
    """Fixed-rate, fixed-term loan whose payment is derived from its terms."""

    id: str
    name: str
    principal: float
    interest_rate: float  # APR, percent per year
    term_years: int
    custom_monthly_payment: Optional[float] = None  # bank payment override

    @property
    def debt_type(self) -> DebtType:
        return DebtType.MORTGAGE


DebtInput = Union[SimpleDebt, MortgageDebt]


def original_balance(debt: DebtInput) -> float:
    """Return the pre-payoff amount owed for either debt variant."""

    if isinstance(debt, MortgageDebt):
        return debt.principal
    if isinstance(debt, SimpleDebt):
        return debt.balance
    raise TypeError(f"Unsupported debt record: {type(debt).__name__}")


@dataclass(frozen=True, slots=True)
class DebtComputed:
    """A debt input enriched with its payment, payoff horizon and interest cost."""

    debt: DebtInput
    monthly_payment: float
    months_to_payoff: Union[int, Unpayable]
    total_interest: Union[float, Unpayable]
    total_paid: Union[float, Unpayable]

    @property
    def id(self) -> str:
        return self.debt.id

    @property
    def name(self) -> str:
        return self.debt.name

    @property
    def debt_type(self) -> DebtType:
        return self.debt.debt_type

    @property
    def interest_rate(self) -> float:
        return self.debt.interest_rate

    @property
    def original_balance(self) -> float:
        return original_balance(self.debt)

    @property
    def is_payable(self) -> bool:
        return not is_never(self.months_to_payoff)


__all__ = [
    "DebtComputed",
    "DebtInput",
    "DebtType",
    "MortgageDebt",
    "NEVER",
    "SIMPLE_DEBT_TYPES",
    "SimpleDebt",
    "Unpayable",
    "is_never",
    "original_balance",
]
