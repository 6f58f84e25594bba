"""Inclusive calendar-date windows used to scope grades, attendance and reports."""

from __future__ import annotations

import calendar
import datetime as dt
from dataclasses import dataclass
from enum import Enum


class RangePreset(str, Enum):
    CURRENT_MONTH = "current_month"
    LAST_MONTH = "last_month"
    CURRENT_YEAR = "current_year"
    ALL_TIME = "all_time"


@dataclass(frozen=True)
class DateRange:
    """``[start, end]`` inclusive; a missing bound is open-ended.

    Records without a date fall outside every bounded window and inside the
    unbounded one.
    """

    start: dt.date | None = None
    end: dt.date | None = None

    @property
    def is_unbounded(self) -> bool:
        return self.start is None and self.end is None

    def contains(self, day: dt.date | None) -> bool:
        if self.is_unbounded:
            return True
        if day is None:
            return False
        if self.start is not None and day < self.start:
            return False
        if self.end is not None and day > self.end:
            return False
        return True


def _month_bounds(year: int, month: int) -> DateRange:
    last_day = calendar.monthrange(year, month)[1]
    return DateRange(dt.date(year, month, 1), dt.date(year, month, last_day))


def resolve_preset(preset: RangePreset | str, today: dt.date | None = None) -> DateRange:
    """Turn a report range preset into concrete dates relative to *today*.

    ``all_time`` still ends today: future-dated records are not reported.
    """
    today = today or dt.date.today()
    preset = RangePreset(preset)
    if preset is RangePreset.CURRENT_MONTH:
        return _month_bounds(today.year, today.month)
    if preset is RangePreset.LAST_MONTH:
        if today.month == 1:
            return _month_bounds(today.year - 1, 12)
        return _month_bounds(today.year, today.month - 1)
    if preset is RangePreset.CURRENT_YEAR:
        return DateRange(dt.date(today.year, 1, 1), dt.date(today.year, 12, 31))
    return DateRange(None, today)
