"""Engine configuration objects and helpers."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields

from dotenv import find_dotenv, load_dotenv

ENV_PREFIX = "DEBTPACE_"


def _env_float(name: str, default: float) -> float:
    """Interpret an environment variable as a float, falling back on bad input."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    """Interpret an environment variable as an integer."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        return default


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Tunables shared by every calculation.

    The engine never reads ambient state: callers hand a config instance to the
    functions that need one, or rely on ``DEFAULT_CONFIG``.
    """

    # Safety valve for the payoff loop (100 years). Results near the cap are
    # not meant to be precise; anything that reaches it is reported as never.
    iteration_ceiling: int = 1200
    # Float residue left by an exact final payment; anything above it is still owed.
    payoff_tolerance: float = 1e-6
    unpayable_epsilon: float = 1e-9
    weeks_per_month: float = 4.33
    velocity_threshold: float = 0.10
    minimum_payment_percent: float = 2.5
    minimum_payment_floor: float = 5.0
    savings_assumed_apr: float = 20.0

    @classmethod
    def from_env(cls, *, dotenv_path: str | None = None) -> "EngineConfig":
        """Build a config from ``DEBTPACE_*`` environment variables.

        A ``.env`` file (``dotenv_path``, or the nearest one above the working
        directory) is loaded first; variables already set in the process win.
        """

        load_dotenv(dotenv_path or find_dotenv(usecwd=True))
        values: dict[str, float | int] = {}
        for field in fields(cls):
            env_name = f"{ENV_PREFIX}{field.name.upper()}"
            default = field.default
            if isinstance(default, int):
                values[field.name] = _env_int(env_name, default)
            else:
                values[field.name] = _env_float(env_name, float(default))
        config = cls(**values)
        if config.iteration_ceiling <= 0:
            raise ValueError(f"{ENV_PREFIX}ITERATION_CEILING must be positive.")
        return config


DEFAULT_CONFIG = EngineConfig()

__all__ = ["DEFAULT_CONFIG", "ENV_PREFIX", "EngineConfig"]
