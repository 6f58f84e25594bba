"""Grade and attendance arithmetic — deterministic, trustworthy results.

These produce the percentages, rates and letter-grade distributions the
dashboard and reports are built on.  All rounding is half-up to whole
percentage points (87.5 → 88), matching what teachers see on report cards.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import numpy as np

from models.school import ATTENDANCE_STATUSES, Attendance, Grade

LETTER_GRADES: tuple[str, ...] = ("A", "B", "C", "D", "F")

# Lower bounds of D, C, B, A.  np.digitize maps a percentage to the number of
# bounds it meets, so 0 → F ... 4 → A.
_LETTER_BOUNDS = np.array([60, 70, 80, 90], dtype=float)
_LETTERS_ASCENDING = ("F", "D", "C", "B", "A")


def round_half_up(value: float) -> int:
    return int(np.floor(value + 0.5))


def is_scorable(grade: Grade) -> bool:
    """A grade with a non-positive maxScore has no percentage."""
    return grade.max_score > 0


def raw_percentage(grade: Grade) -> float:
    """Unrounded ``100 * score / maxScore``; 0 for an unscorable grade."""
    if not is_scorable(grade):
        return 0.0
    return grade.score * 100 / grade.max_score


def grade_percentage(grade: Grade) -> int:
    return round_half_up(raw_percentage(grade))


def grade_average(grades: Sequence[Grade]) -> int:
    """Mean of per-record percentages (not total score / total max).

    Unscorable grades are left out.  Returns 0 when no grade is left.
    """
    percentages = np.array([raw_percentage(g) for g in grades if is_scorable(g)], dtype=float)
    if not percentages.size:
        return 0
    return round_half_up(float(np.mean(percentages)))


def letter_grade(percentage: float) -> str:
    """A ≥ 90, B [80, 90), C [70, 80), D [60, 70), F < 60."""
    return _LETTERS_ASCENDING[int(np.digitize(percentage, _LETTER_BOUNDS))]


def grade_distribution(grades: Iterable[Grade]) -> dict[str, int]:
    """Count scorable grades per letter, bucketing on the unrounded percentage."""
    counts = {letter: 0 for letter in LETTER_GRADES}
    percentages = np.array([raw_percentage(g) for g in grades if is_scorable(g)], dtype=float)
    if percentages.size:
        buckets = np.digitize(percentages, _LETTER_BOUNDS)
        for bucket, count in zip(*np.unique(buckets, return_counts=True)):
            counts[_LETTERS_ASCENDING[int(bucket)]] = int(count)
    return counts


def attendance_rate(records: Sequence[Attendance]) -> int:
    """Share of records marked present, as a whole percentage.

    No records means nothing was missed: the rate is 100, not 0.
    """
    if not records:
        return 100
    present = sum(1 for r in records if r.status == "present")
    return round_half_up(present * 100 / len(records))


def status_counts(records: Iterable[Attendance]) -> dict[str, int]:
    """Number of records per attendance status (every status present as a key)."""
    counts = dict.fromkeys(ATTENDANCE_STATUSES, 0)
    for record in records:
        counts[record.status] += 1
    return counts
