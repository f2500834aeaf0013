"""Debt amortization, payoff projection and behavioral analytics engine."""

from __future__ import annotations

from .config import DEFAULT_CONFIG, EngineConfig
from .models import NEVER, DebtComputed, MortgageDebt, SimpleDebt
from .services.aggregation import aggregate
from .services.amortization import compute_all_debts, compute_debt
from .services.projection import project

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_CONFIG",
    "DebtComputed",
    "EngineConfig",
    "MortgageDebt",
    "NEVER",
    "SimpleDebt",
    "aggregate",
    "compute_all_debts",
    "compute_debt",
    "project",
]
