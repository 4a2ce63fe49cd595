"""Tests for progress percentage and resume-point helpers."""

from types import SimpleNamespace

import pytest

from src.services.enrollment_service import progress_percent
from src.services.player_service import current_lesson_id


class TestProgressPercent:
    @pytest.mark.parametrize(
        "completed, total, expected",
        [
            (0, 0, 0),
            (0, 5, 0),
            (1, 3, 33),
            (2, 3, 67),
            (1, 8, 13),  # 12.5 rounds half up
            (3, 3, 100),
            (5, 3, 100),
        ],
    )
    def test_values(self, completed, total, expected):
        assert progress_percent(completed, total) == expected


class TestCurrentLesson:
    lessons = [SimpleNamespace(id=10), SimpleNamespace(id=11), SimpleNamespace(id=12)]

    def test_first_incomplete(self):
        assert current_lesson_id(self.lessons, {10}) == 11

    def test_gaps_are_revisited(self):
        assert current_lesson_id(self.lessons, {11, 12}) == 10

    def test_all_done_points_at_last(self):
        assert current_lesson_id(self.lessons, {10, 11, 12}) == 12

    def test_empty_course(self):
        assert current_lesson_id([], set()) is None
