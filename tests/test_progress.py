"""Tests for paydown progress and milestones."""

from __future__ import annotations

import pytest

from debtpace.services.progress import (
    MILESTONES,
    calculate_debt_progress,
    check_milestone,
    milestones_reached,
    next_milestone,
    progress_to_next_milestone,
)


class TestDebtProgress:
    @pytest.mark.parametrize(
        "original,current,expected",
        [(1000.0, 750.0, 25), (1000.0, 0.0, 100), (1000.0, 1200.0, 0), (0.0, 0.0, 0), (3.0, 2.0, 33)],
    )
    def test_progress_percent(self, original, current, expected):
        assert calculate_debt_progress(original, current) == expected


class TestMilestones:
    def test_milestones_ascend(self):
        percentages = [m.percentage for m in MILESTONES]
        assert percentages == sorted(percentages)
        assert percentages[-1] == 100

    def test_crossing_a_milestone(self):
        milestone = check_milestone(26, 20)
        assert milestone is not None
        assert milestone.percentage == 25

    def test_already_celebrated(self):
        assert check_milestone(26, 25) is None

    def test_first_crossed_is_returned(self):
        assert check_milestone(55, 10).percentage == 25

    def test_next_milestone(self):
        assert next_milestone(50).percentage == 60
        assert next_milestone(100) is None

    def test_milestones_reached(self):
        assert [m.percentage for m in milestones_reached(36)] == [25, 30, 35]
        assert milestones_reached(10) == []

    def test_progress_to_next(self):
        progress = progress_to_next_milestone(55)
        assert progress.next == 60
        assert progress.percentage == 50

    def test_progress_before_first_milestone(self):
        progress = progress_to_next_milestone(10)
        assert progress.next == 25
        assert progress.percentage == 40

    def test_progress_complete(self):
        assert progress_to_next_milestone(100) is None
