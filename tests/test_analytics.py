"""Tests for behavioral analytics over weekly check-ins and challenges.

Each insight rule is exercised on its own so the rule table stays explicit.
"""

from __future__ import annotations

import pytest

from debtpace.config import EngineConfig
from debtpace.models import Challenge, ChallengeType, CheckIn
from debtpace.services.analytics import (
    DECREASING,
    INCREASING,
    INSIGHT_RULES,
    STABLE,
    PaymentVelocity,
    WeekRecord,
    calculate_consistency_score,
    calculate_payment_velocity,
    calculate_savings,
    calculate_weekly_performance,
    generate_insights,
)
from tests.conftest import assert_float_equal


def _weeks(moods: list[int]) -> list[WeekRecord]:
    return [
        WeekRecord(week=i + 1, checked_in=True, challenge_completed=False, extra_payment=0.0, mood_score=m)
        for i, m in enumerate(moods)
    ]


NEUTRAL_VELOCITY = PaymentVelocity(average_extra_payment=0.0, velocity_trend=STABLE)


class TestPaymentVelocity:
    def test_empty_history_is_neutral(self):
        velocity = calculate_payment_velocity([])
        assert velocity.average_extra_payment == 0.0
        assert velocity.velocity_trend == STABLE
        assert velocity.total_extra_payments == 0.0

    def test_missing_extra_payments_are_excluded(self, check_in_series):
        """None is left out of the mean rather than counted as zero."""
        velocity = calculate_payment_velocity(check_in_series([10.0, None, 30.0]))

        assert_float_equal(velocity.average_extra_payment, 20.0)
        assert_float_equal(velocity.total_extra_payments, 40.0)
        assert_float_equal(velocity.average_weekly_payment, 40.0 / 3)

    def test_zero_extra_payment_counts(self, check_in_series):
        velocity = calculate_payment_velocity(check_in_series([0.0, 30.0]))
        assert_float_equal(velocity.average_extra_payment, 15.0)

    @pytest.mark.parametrize(
        "extras,expected",
        [
            ([10.0, 10.0, 10.0, 20.0, 20.0, 20.0], INCREASING),
            ([20.0, 20.0, 20.0, 10.0, 10.0, 10.0], DECREASING),
            ([10.0, 10.0, 10.5], STABLE),
            ([10.0, 100.0], STABLE),
            ([0.0, 0.0, 0.0, 5.0, 5.0, 5.0], INCREASING),
            ([0.0, 0.0, 0.0], STABLE),
            ([10.0, 50.0, 50.0, 10.5], STABLE),
        ],
    )
    def test_trend(self, check_in_series, extras, expected):
        assert calculate_payment_velocity(check_in_series(extras)).velocity_trend == expected

    def test_trend_uses_week_order(self):
        """Check-ins handed over out of order are compared by week."""
        check_ins = [
            CheckIn(week=3, extra_payment=30.0),
            CheckIn(week=1, extra_payment=10.0),
            CheckIn(week=2, extra_payment=20.0),
        ]
        assert calculate_payment_velocity(check_ins).velocity_trend == INCREASING

    def test_threshold_comes_from_config(self, check_in_series):
        extras = [10.0, 10.0, 10.0, 11.5, 11.5, 11.5]
        assert calculate_payment_velocity(check_in_series(extras)).velocity_trend == INCREASING
        loose = EngineConfig(velocity_threshold=0.2)
        assert calculate_payment_velocity(check_in_series(extras), config=loose).velocity_trend == STABLE


class TestWeeklyPerformance:
    def test_empty_inputs(self):
        assert calculate_weekly_performance([], []) == []

    def test_left_join_by_week(self):
        check_ins = [
            CheckIn(week=1, mood_score=5, extra_payment=25.0),
            CheckIn(week=3, mood_score=2),
        ]
        challenges = [
            Challenge(week=2, completed=True, actual_amount=40.0),
            Challenge(week=3, completed=False, actual_amount=99.0),
        ]

        records = calculate_weekly_performance(check_ins, challenges)

        assert [r.week for r in records] == [1, 2, 3]
        week1, week2, week3 = records
        assert week1 == WeekRecord(
            week=1, checked_in=True, challenge_completed=False, extra_payment=25.0, mood_score=5
        )
        assert week2.checked_in is False
        assert week2.challenge_completed is True
        assert week2.extra_payment == 0.0
        assert week2.mood_score == 3
        assert week2.challenge_amount == 40.0
        assert week3.challenge_completed is False
        assert week3.challenge_amount == 0.0
        assert week3.extra_payment == 0.0

    def test_check_in_flag_marks_challenge_completed(self):
        records = calculate_weekly_performance([CheckIn(week=4, challenge_completed=True)], [])
        assert records[0].challenge_completed is True


class TestConsistencyScore:
    def test_empty_history_scores_zero(self):
        assert calculate_consistency_score([], [], 10) == 0

    @pytest.mark.parametrize("current_week", [0, -3])
    def test_no_elapsed_weeks_scores_zero(self, current_week):
        assert calculate_consistency_score([CheckIn(week=1)], [], current_week) == 0

    def test_check_ins_and_completed_challenges_count(self):
        check_ins = [CheckIn(week=1), CheckIn(week=2)]
        challenges = [Challenge(week=3, completed=False), Challenge(week=4, completed=True)]
        assert calculate_consistency_score(check_ins, challenges, 5) == 60

    def test_same_week_counted_once(self):
        check_ins = [CheckIn(week=1)]
        challenges = [Challenge(week=1, completed=True)]
        assert calculate_consistency_score(check_ins, challenges, 4) == 25

    def test_rounds_half_up(self):
        assert calculate_consistency_score([CheckIn(week=1)], [], 8) == 13

    def test_future_weeks_ignored_and_clamped(self):
        check_ins = [CheckIn(week=w) for w in range(1, 11)]
        assert calculate_consistency_score(check_ins, [], 3) == 100

    @pytest.mark.parametrize("count,current_week", [(0, 1), (1, 1), (5, 7), (20, 20), (30, 10)])
    def test_always_within_bounds(self, count, current_week):
        check_ins = [CheckIn(week=w) for w in range(1, count + 1)]
        score = calculate_consistency_score(check_ins, [], current_week)
        assert isinstance(score, int)
        assert 0 <= score <= 100


class TestGenerateInsights:
    def test_empty_history_has_no_insights(self):
        velocity = calculate_payment_velocity([])
        performance = calculate_weekly_performance([], [])
        score = calculate_consistency_score([], [], 0)
        assert generate_insights(velocity, performance, score) == []

    def test_rule_table_is_enumerated(self):
        assert [rule.name for rule in INSIGHT_RULES] == [
            "momentum_up",
            "momentum_down",
            "extra_payments_made",
            "strong_consistency",
            "low_consistency",
            "positive_mood",
            "low_mood",
        ]

    def test_momentum_up(self):
        velocity = PaymentVelocity(average_extra_payment=0.0, velocity_trend=INCREASING)
        assert generate_insights(velocity, _weeks([3]), 60) == [
            "Your payment momentum is increasing! Keep it up."
        ]

    def test_momentum_down(self):
        velocity = PaymentVelocity(average_extra_payment=0.0, velocity_trend=DECREASING)
        assert generate_insights(velocity, _weeks([3]), 60) == [
            "Payment momentum has slowed. Consider a weekly challenge boost."
        ]

    def test_extra_payments_made(self):
        velocity = PaymentVelocity(
            average_extra_payment=617.2, velocity_trend=STABLE, total_extra_payments=1234.4
        )
        assert generate_insights(velocity, _weeks([3]), 60) == [
            "You've made 1,234 in extra payments!"
        ]

    def test_strong_consistency(self):
        assert generate_insights(NEUTRAL_VELOCITY, _weeks([3]), 80) == [
            "Excellent consistency! You're building a strong habit."
        ]

    def test_low_consistency(self):
        assert generate_insights(NEUTRAL_VELOCITY, _weeks([3]), 49) == [
            "Try checking in more regularly to build momentum."
        ]

    def test_middling_consistency_is_silent(self):
        assert generate_insights(NEUTRAL_VELOCITY, _weeks([3]), 50) == []
        assert generate_insights(NEUTRAL_VELOCITY, _weeks([3]), 79) == []

    def test_positive_mood(self):
        assert generate_insights(NEUTRAL_VELOCITY, _weeks([1, 4, 5, 4, 5]), 60) == [
            "Your mood has been positive recently. Financial progress feels good!"
        ]

    def test_low_mood(self):
        assert generate_insights(NEUTRAL_VELOCITY, _weeks([2, 1, 2, 2]), 60) == [
            "Remember: progress isn't always linear. Every step counts."
        ]

    def test_mood_needs_four_check_ins(self):
        assert generate_insights(NEUTRAL_VELOCITY, _weeks([5, 5, 5]), 60) == []

    def test_mood_ignores_weeks_without_check_in(self):
        performance = _weeks([5, 5, 5]) + [
            WeekRecord(week=4, checked_in=False, challenge_completed=True, extra_payment=0.0, mood_score=3)
        ]
        assert generate_insights(NEUTRAL_VELOCITY, performance, 60) == []

    def test_rules_fire_in_table_order(self):
        velocity = PaymentVelocity(
            average_extra_payment=50.0, velocity_trend=INCREASING, total_extra_payments=200.0
        )
        insights = generate_insights(velocity, _weeks([4, 4, 5, 4]), 90)
        assert insights == [
            "Your payment momentum is increasing! Keep it up.",
            "You've made 200 in extra payments!",
            "Excellent consistency! You're building a strong habit.",
            "Your mood has been positive recently. Financial progress feels good!",
        ]

    def test_end_to_end_from_history(self):
        check_ins = [
            CheckIn(week=1, mood_score=4, extra_payment=10.0),
            CheckIn(week=2, mood_score=4, extra_payment=10.0),
            CheckIn(week=3, mood_score=5, extra_payment=20.0),
            CheckIn(week=4, mood_score=4, extra_payment=25.0),
        ]
        velocity = calculate_payment_velocity(check_ins)
        performance = calculate_weekly_performance(check_ins, [])
        score = calculate_consistency_score(check_ins, [], 4)

        insights = generate_insights(velocity, performance, score)

        assert velocity.velocity_trend == INCREASING
        assert score == 100
        assert len(insights) == 4


class TestSavings:
    def test_savings_breakdown(self):
        check_ins = [CheckIn(week=1, extra_payment=50.0), CheckIn(week=2, extra_payment=25.0), CheckIn(week=3)]
        challenges = [
            Challenge(week=1, completed=True, actual_amount=40.0, challenge_type=ChallengeType.EARN_MORE),
            Challenge(week=2, completed=False, actual_amount=100.0),
        ]

        savings = calculate_savings(
            check_ins, challenges, original_debt=10000.0, current_debt=9000.0, annual_rate=20.0
        )

        assert_float_equal(savings.extra_payments_saved, 75.0)
        assert_float_equal(savings.challenge_earnings, 40.0)
        assert_float_equal(savings.total_interest_saved, 1000.0 * 0.20 / 52 * 4)
        assert_float_equal(savings.total_savings, 75.0 + 40.0 + 1000.0 * 0.20 / 52 * 4)

    def test_default_rate_from_config(self):
        savings = calculate_savings(
            [], [], original_debt=5200.0, current_debt=0.0, config=EngineConfig(savings_assumed_apr=10.0)
        )
        assert_float_equal(savings.total_interest_saved, 40.0)

    def test_debt_growth_saves_no_interest(self):
        savings = calculate_savings([], [], original_debt=1000.0, current_debt=1500.0)
        assert savings.total_interest_saved == 0.0
        assert savings.total_savings == 0.0
