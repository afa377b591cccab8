"""Tests for the range-of-motion and session score aggregators."""

import pytest

from rehabkit.scoring.core import RangeOfMotion, SessionScore
from rehabkit.scoring.modules import (
    track_range_of_motion, calculate_session_score, get_grade_from_score,
)
from rehabkit.scoring.utils import round_half_up


class TestRangeOfMotion:

    def test_empty_history(self):
        assert track_range_of_motion([]) == RangeOfMotion(min=0, max=0, average=0, range=0)

    def test_missing_history(self):
        assert track_range_of_motion(None) == RangeOfMotion()

    def test_known_history(self):
        rom = track_range_of_motion([45, 65, 85, 105, 120])
        assert rom.to_dict() == {"min": 45, "max": 120, "average": 84, "range": 75}

    def test_single_sample(self):
        rom = track_range_of_motion([92.4])
        assert (rom.min, rom.max, rom.average, rom.range) == (92, 92, 92, 0)

    def test_fractional_values_round_half_up(self):
        rom = track_range_of_motion([10.5, 11.5])
        assert rom.min == 11
        assert rom.max == 12
        assert rom.average == 11
        assert rom.range == 1

    def test_noise_beyond_nominal_range(self):
        rom = track_range_of_motion([-3.2, 185.6])
        assert rom.min == -3
        assert rom.max == 186
        assert rom.range == 189


class TestSessionScore:

    def test_empty(self):
        assert calculate_session_score([]) == SessionScore(total_reps=0, average_score=0, grade="N/A")

    def test_missing(self):
        assert calculate_session_score(None).grade == "N/A"

    def test_known_scores(self):
        score = calculate_session_score([95, 85, 72, 100])
        assert score.to_dict() == {"total_reps": 4, "average_score": 88, "grade": "B"}

    def test_average_rounds_half_up(self):
        # 82.5 -> 83, not the banker's 82
        assert calculate_session_score([80, 85]).average_score == 83

    @pytest.mark.parametrize("score,grade", [
        (100, "A"), (90, "A"), (89, "B"), (80, "B"), (79, "C"),
        (70, "C"), (69, "D"), (60, "D"), (59, "F"), (0, "F"),
    ])
    def test_grade_thresholds(self, score, grade):
        assert get_grade_from_score(score) == grade

    def test_grade_uses_rounded_average(self):
        # 89.5 rounds to 90 before grading
        assert calculate_session_score([89, 90]).grade == "A"


class TestRounding:

    @pytest.mark.parametrize("value,expected", [(0.5, 1), (1.5, 2), (2.5, 3), (-2.5, -2), (83.49, 83)])
    def test_round_half_up(self, value, expected):
        assert round_half_up(value) == expected
