"""Tests for services/aggregation.py and services/date_ranges.py."""

import datetime as dt

import pytest

from models.school import Attendance, Grade
from services.aggregation import (
    attendance_rate,
    grade_average,
    grade_distribution,
    grade_percentage,
    letter_grade,
    round_half_up,
    status_counts,
)
from services.date_ranges import DateRange, RangePreset, resolve_preset


def _grade(score: float, max_score: float = 100, gid: int = 1) -> Grade:
    return Grade(id=gid, student_id=1, class_id=1, score=score, max_score=max_score)


def _records(*statuses: str) -> list[Attendance]:
    return [
        Attendance(id=i, student_id=1, class_id=1, date=dt.date(2024, 9, i), status=status)
        for i, status in enumerate(statuses, start=1)
    ]


# ── Rounding and percentages ─────────────────────────────────


@pytest.mark.parametrize("value,expected", [
    (87.5, 88),
    (0.5, 1),
    (66.666, 67),
    (83.333, 83),
    (2.4999, 2),
    (100.0, 100),
    (0.0, 0),
])
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


def test_grade_percentage():
    assert grade_percentage(_grade(45, 50)) == 90
    assert grade_percentage(_grade(7, 8)) == 88  # 87.5
    assert grade_percentage(_grade(0, 20)) == 0


# ── Grade average ────────────────────────────────────────────


class TestGradeAverage:
    def test_mean_of_percentages(self):
        assert grade_average([_grade(80, 100), _grade(45, 50)]) == 85

    def test_no_grades_is_zero(self):
        assert grade_average([]) == 0

    def test_mixed_max_scores(self):
        assert grade_average([_grade(45, 50), _grade(18, 20)]) == 90

    def test_not_weighted_by_max_score(self):
        # 50% and 90% average to 70, while 91/102 would be 89.
        assert grade_average([_grade(1, 2), _grade(90, 100)]) == 70

    def test_zero_max_score_is_left_out(self):
        assert grade_average([_grade(45, 50), _grade(10, 0)]) == 90
        assert grade_average([_grade(10, 0)]) == 0

    def test_rounds_the_mean_not_each_grade(self):
        # 87.4 and 87.6 average to 87.5 → 88
        assert grade_average([_grade(87.4), _grade(87.6)]) == 88


# ── Letters ──────────────────────────────────────────────────


@pytest.mark.parametrize("percentage,letter", [
    (100, "A"),
    (90, "A"),
    (89.99, "B"),
    (89, "B"),
    (80, "B"),
    (79.5, "C"),
    (79, "C"),
    (59, "F"),
    (70, "C"),
    (69, "D"),
    (60, "D"),
    (59.9, "F"),
    (0, "F"),
])
def test_letter_grade_boundaries(percentage, letter):
    assert letter_grade(percentage) == letter


class TestGradeDistribution:
    def test_counts_every_letter(self):
        grades = [_grade(95), _grade(45, 50), _grade(85), _grade(72), _grade(10)]
        assert grade_distribution(grades) == {"A": 2, "B": 1, "C": 1, "D": 0, "F": 1}

    def test_empty_has_all_keys(self):
        assert grade_distribution([]) == {"A": 0, "B": 0, "C": 0, "D": 0, "F": 0}

    def test_buckets_on_unrounded_percentage(self):
        assert grade_distribution([_grade(89.5)])["B"] == 1

    def test_unscorable_grades_not_counted(self):
        counts = grade_distribution([_grade(95), _grade(5, 0), _grade(5, -1)])
        assert counts == {"A": 1, "B": 0, "C": 0, "D": 0, "F": 0}


def test_percentage_of_zero_max_score_is_zero():
    assert grade_percentage(_grade(10, 0)) == 0


# ── Attendance ───────────────────────────────────────────────


class TestAttendanceRate:
    def test_no_records_is_full_attendance(self):
        assert attendance_rate([]) == 100

    def test_only_present_counts(self):
        assert attendance_rate(_records("present", "present", "absent", "late")) == 50

    def test_rounds_half_up(self):
        assert attendance_rate(_records("present", "present", "absent")) == 67

    def test_excused_is_not_present(self):
        assert attendance_rate(_records("excused")) == 0


def test_status_counts_include_every_status():
    counts = status_counts(_records("present", "late", "late"))
    assert counts == {"present": 1, "absent": 0, "late": 2, "excused": 0}


# ── Date windows ─────────────────────────────────────────────


class TestDateRange:
    def test_inclusive_bounds(self):
        window = DateRange(dt.date(2024, 9, 1), dt.date(2024, 9, 30))
        assert window.contains(dt.date(2024, 9, 1))
        assert window.contains(dt.date(2024, 9, 30))
        assert not window.contains(dt.date(2024, 10, 1))
        assert not window.contains(dt.date(2024, 8, 31))

    def test_undated_records(self):
        assert DateRange().contains(None)
        assert not DateRange(end=dt.date(2024, 9, 30)).contains(None)

    def test_open_ended(self):
        window = DateRange(start=dt.date(2024, 9, 1))
        assert window.contains(dt.date(2099, 1, 1))
        assert not window.contains(dt.date(2024, 1, 1))


class TestResolvePreset:
    today = dt.date(2024, 3, 15)

    def test_current_month(self):
        assert resolve_preset("current_month", self.today) == DateRange(
            dt.date(2024, 3, 1), dt.date(2024, 3, 31)
        )

    def test_last_month_handles_leap_february(self):
        assert resolve_preset(RangePreset.LAST_MONTH, self.today) == DateRange(
            dt.date(2024, 2, 1), dt.date(2024, 2, 29)
        )

    def test_last_month_in_january_is_previous_december(self):
        assert resolve_preset("last_month", dt.date(2025, 1, 10)) == DateRange(
            dt.date(2024, 12, 1), dt.date(2024, 12, 31)
        )

    def test_current_year(self):
        assert resolve_preset("current_year", self.today) == DateRange(
            dt.date(2024, 1, 1), dt.date(2024, 12, 31)
        )

    def test_all_time_ends_today(self):
        assert resolve_preset("all_time", self.today) == DateRange(None, self.today)

    def test_unknown_preset(self):
        with pytest.raises(ValueError):
            resolve_preset("next_decade", self.today)
