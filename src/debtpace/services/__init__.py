"""Service module exports."""

from . import (
    aggregation,
    amortization,
    analytics,
    habits,
    minimums,
    progress,
    projection,
    sanitize,
    strategies,
)

__all__ = [
    "aggregation",
    "amortization",
    "analytics",
    "habits",
    "minimums",
    "progress",
    "projection",
    "sanitize",
    "strategies",
]
