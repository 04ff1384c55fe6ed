"""Fixed-origin week buckets used by every weekly metric.

Week 1 of a year always starts on January 1 and every following week is the
next block of seven days, so week boundaries do not line up with weekdays and
differ from ISO-8601 week numbers.  The last partial block (day 364, plus day
365 in leap years) is folded into week 53.
"""

from __future__ import annotations

import re
from datetime import MINYEAR, date, datetime, timedelta
from typing import NamedTuple

MAX_WEEK = 53
INVALID_KEY = "invalid"

_DATE_PREFIX_RE = re.compile(r"^\s*(\d{4})[-/](\d{1,2})[-/](\d{1,2})")
_WEEK_KEY_RE = re.compile(r"^(\d{4})\s+(\d+)W$")


class WeekKey(NamedTuple):
    """A ``(year, week)`` bucket."""

    year: int
    week: int

    @property
    def key(self) -> str:
        if self.is_invalid:
            return INVALID_KEY
        return f"{self.year} {self.week}W"

    @property
    def is_invalid(self) -> bool:
        return self.week == 0


INVALID_WEEK = WeekKey(0, 0)


def coerce_date(value: date | datetime | str | None) -> date | None:
    """Interpret ``value`` as a local calendar date, or ``None`` when impossible."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    match = _DATE_PREFIX_RE.match(value)
    if match is None:
        return None
    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def week_key(value: date | datetime | str | None) -> WeekKey:
    """Return the week bucket for ``value`` or :data:`INVALID_WEEK`."""
    day = coerce_date(value)
    if day is None:
        return INVALID_WEEK
    offset = (day - date(day.year, 1, 1)).days
    week = min(MAX_WEEK, max(1, offset // 7 + 1))
    return WeekKey(day.year, week)


def parse_week_key(key: str) -> WeekKey:
    """Parse a ``"2025 3W"`` style key; anything else is :data:`INVALID_WEEK`."""
    match = _WEEK_KEY_RE.match(key.strip())
    if match is None:
        return INVALID_WEEK
    year, week = int(match.group(1)), int(match.group(2))
    if not 1 <= week <= MAX_WEEK:
        return INVALID_WEEK
    return WeekKey(year, week)


def dashboard_week_range(start_year: int, years: int = 3) -> list[str]:
    """Every week key for ``years`` calendar years plus week 1 of the next."""
    keys = [
        WeekKey(year, week).key
        for year in range(start_year, start_year + years)
        for week in range(1, MAX_WEEK + 1)
    ]
    keys.append(WeekKey(start_year + years, 1).key)
    return keys


def week_date_range(key: str) -> tuple[date, date] | None:
    """First and last calendar day of a week key, or ``None`` when invalid.

    Week 53 runs to December 31, so it spans one or two days.
    """
    bucket = parse_week_key(key)
    if bucket.is_invalid or bucket.year < MINYEAR:
        return None
    start = date(bucket.year, 1, 1) + timedelta(days=(bucket.week - 1) * 7)
    if bucket.week == MAX_WEEK:
        return start, date(bucket.year, 12, 31)
    return start, start + timedelta(days=6)


def format_week_range(key: str) -> str:
    """Render a week key as ``"2025/1/1~1/7"``; invalid keys are returned as-is."""
    span = week_date_range(key)
    if span is None:
        return key
    start, end = span
    return f"{start.year}/{start.month}/{start.day}~{end.month}/{end.day}"
