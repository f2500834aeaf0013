"""Command line entry point for running the engine over JSON documents."""

from __future__ import annotations

import json
from dataclasses import asdict, is_dataclass
from datetime import date
from enum import Enum
from typing import Any, TextIO

import click

from .config import EngineConfig
from .logging_config import get_logger, setup_logging
from .models.debt import DebtComputed, Unpayable
from .services.aggregation import aggregate
from .services.amortization import compute_all_debts
from .services.analytics import (
    calculate_consistency_score,
    calculate_payment_velocity,
    calculate_weekly_performance,
    generate_insights,
)
from .services.habits import calculate_challenge_stats, calculate_check_in_streak
from .services.projection import phases, project
from .services.sanitize import coerce_challenge, coerce_check_in, coerce_debt_input
from .services.strategies import STRATEGIES, run_strategy

logger = get_logger(__name__)


def _encode(value: Any) -> Any:
    """JSON fallback for engine values."""

    if isinstance(value, Unpayable):
        return "never"
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _echo(payload: Any) -> None:
    click.echo(json.dumps(payload, default=_encode, indent=2))


def _load(stream: TextIO) -> Any:
    try:
        return json.load(stream)
    except json.JSONDecodeError as exc:
        raise click.ClickException(f"Input is not valid JSON: {exc}") from exc


def _records(document: Any, *keys: str) -> list[dict]:
    """Return the list stored under the first present key (or the document itself)."""

    if isinstance(document, list):
        return document
    if isinstance(document, dict):
        for key in keys:
            if key in document:
                value = document[key] or []
                if not isinstance(value, list):
                    raise click.ClickException(f"'{key}' must be a list.")
                return value
        return []
    raise click.ClickException("Input must be a JSON object or list.")


def _load_debts(document: Any, config: EngineConfig) -> list[DebtComputed]:
    raw_debts = _records(document, "debts")
    return compute_all_debts([coerce_debt_input(raw) for raw in raw_debts], config=config)


def _debt_payload(computed: DebtComputed) -> dict[str, Any]:
    return {
        "id": computed.id,
        "name": computed.name,
        "debtType": computed.debt_type,
        "interestRate": computed.interest_rate,
        "originalBalance": computed.original_balance,
        "monthlyPayment": computed.monthly_payment,
        "monthsToPayoff": computed.months_to_payoff,
        "totalInterest": computed.total_interest,
        "totalPaid": computed.total_paid,
    }


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
)
@click.option("--json-logs", is_flag=True, default=False, help="Emit logs as JSON lines")
@click.pass_context
def main(ctx: click.Context, log_level: str, json_logs: bool) -> None:
    """Debt payoff projections and check-in analytics."""

    setup_logging(log_level.upper(), json_output=json_logs)
    ctx.obj = EngineConfig.from_env()


@main.command("compute")
@click.argument("source", type=click.File("r"))
@click.option("--strategy", type=click.Choice(STRATEGIES), default=None, help="Per-debt ordering")
@click.option("--surplus", type=float, default=0.0, show_default=True)
@click.pass_obj
def compute_command(
    config: EngineConfig, source: TextIO, strategy: str | None, surplus: float
) -> None:
    """Compute payoff horizon and interest for every debt in SOURCE."""

    debts = _load_debts(_load(source), config)
    payload: dict[str, Any] = {
        "debts": [_debt_payload(d) for d in debts],
        "totals": aggregate(debts),
    }
    if strategy:
        result = run_strategy(strategy, debts=debts, surplus=surplus, config=config)
        payload["strategy"] = {
            "name": result.strategy,
            "months": result.months,
            "totalInterest": result.total_interest,
            "payoffDate": result.payoff_date,
        }
    logger.info("Computed debts", extra={"count": len(debts), "strategy": strategy})
    _echo(payload)


@main.command("project")
@click.argument("source", type=click.File("r"))
@click.option("--extra", "habitual_extra", type=float, default=0.0, show_default=True)
@click.option("--surplus", "available_surplus", type=float, default=0.0, show_default=True)
@click.option(
    "--today",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Anchor date for payoff estimates (defaults to today)",
)
@click.pass_obj
def project_command(
    config: EngineConfig, source: TextIO, habitual_extra: float, available_surplus: float, today
) -> None:
    """Project current-pace, habitual-extra and best-case payoff timelines."""

    debts = _load_debts(_load(source), config)
    projection = project(
        debts,
        habitual_extra=habitual_extra,
        available_surplus=available_surplus,
        today=today.date() if today else None,
        config=config,
    )
    logger.info("Projected payoff", extra={"count": len(debts)})
    _echo(projection)


@main.command("phases")
@click.argument("source", type=click.File("r"))
@click.option("--habit", "habit_amount", type=float, default=0.0, show_default=True)
@click.option("--custom", "custom_amount", is_flag=True, default=False, help="Label the habit as a step-up")
@click.option("--today", type=click.DateTime(formats=["%Y-%m-%d"]), default=None)
@click.pass_obj
def phases_command(
    config: EngineConfig,
    source: TextIO,
    habit_amount: float,
    custom_amount: bool,
    today,
) -> None:
    """Compare current pace with a habit amount shared across every debt."""

    debts = _load_debts(_load(source), config)
    _echo(
        phases(
            debts,
            habit_amount=habit_amount,
            custom_amount=custom_amount,
            today=today.date() if today else None,
            config=config,
        )
    )


@main.command("analytics")
@click.argument("source", type=click.File("r"))
@click.option("--current-week", type=int, required=True, help="Weeks elapsed since signup")
@click.pass_obj
def analytics_command(config: EngineConfig, source: TextIO, current_week: int) -> None:
    """Summarize check-in velocity, consistency and insights."""

    document = _load(source)
    check_ins = [coerce_check_in(raw) for raw in _records(document, "checkIns", "check_ins")]
    challenges = (
        [coerce_challenge(raw) for raw in _records(document, "challenges")]
        if isinstance(document, dict)
        else []
    )

    velocity = calculate_payment_velocity(check_ins, config=config)
    weekly = calculate_weekly_performance(check_ins, challenges)
    consistency = calculate_consistency_score(check_ins, challenges, current_week)
    _echo(
        {
            "velocity": velocity,
            "weeklyPerformance": weekly,
            "consistencyScore": consistency,
            "streak": calculate_check_in_streak(check_ins),
            "challengeStats": calculate_challenge_stats(challenges),
            "insights": generate_insights(velocity, weekly, consistency),
        }
    )


__all__ = ["main"]
