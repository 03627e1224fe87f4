"""Temporal classification helpers.

Weekend window policy:
- Starts Friday 00:00:00 of the upcoming-or-current week.
- Ends the following Sunday at 23:59:59.999999.
- Friday offset is ``(4 - now.weekday()) % 7`` days, so on a Saturday or
  Sunday the window already points at next weekend.

Every timestamp is classified by its own wall-clock calendar date. Timezone
offsets are dropped, never converted. ``now`` is always explicit.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Any, cast

from dateutil import parser as date_parser

FRIDAY = 4
UNKNOWN_DATE_LABEL = "Date TBA"

# dateutil fills missing parts from ``default``; a value naming a full
# calendar day parses identically under both.
_FILL_A = datetime(2000, 1, 1)
_FILL_B = datetime(2001, 2, 2)


@dataclass(frozen=True)
class DateBadge:
    """Date chip shown on an event card."""

    label: str
    time: str
    is_tonight: bool
    is_tomorrow: bool


def parse_timestamp(value: Any) -> datetime | None:
    """Parse a timestamp to a naive local datetime; return None if unknown.

    Vague strings such as '9pm', 'Friday' or 'Oct 14' carry no full calendar
    day and are treated as unknown rather than anchored to the system clock.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    s = str(value).strip()
    if not s:
        return None
    try:
        dt = cast(datetime, date_parser.parse(s, default=_FILL_A))
        check = cast(datetime, date_parser.parse(s, default=_FILL_B))
    except (ValueError, TypeError, OverflowError):
        return None
    if dt.date() != check.date():
        return None
    return dt.replace(tzinfo=None)


def _calendar_day(value: Any) -> date | None:
    dt = parse_timestamp(value)
    return dt.date() if dt is not None else None


def _today(now: datetime) -> date:
    return now.replace(tzinfo=None).date()


def days_from_today(ts: Any, now: datetime) -> int | None:
    """Whole calendar days between today and ``ts`` (negative in the past)."""
    day = _calendar_day(ts)
    if day is None:
        return None
    return (day - _today(now)).days


def is_tonight(ts: Any, now: datetime) -> bool:
    return days_from_today(ts, now) == 0


def is_past(ts: Any, now: datetime) -> bool:
    diff = days_from_today(ts, now)
    return diff is not None and diff < 0


def weekend_window(now: datetime) -> tuple[datetime, datetime]:
    """Return (friday_start, sunday_end) for the upcoming-or-current weekend."""
    today = _today(now)
    offset = (FRIDAY - today.weekday()) % 7
    friday = today + timedelta(days=offset)
    sunday = friday + timedelta(days=2)
    return datetime.combine(friday, time.min), datetime.combine(sunday, time.max)


def is_this_weekend(ts: Any, now: datetime) -> bool:
    dt = parse_timestamp(ts)
    if dt is None:
        return False
    start, end = weekend_window(now)
    return start <= dt <= end


def _short_date(day: date) -> str:
    return f"{day:%a}, {day:%b} {day.day}"


def relative_label(ts: Any, now: datetime) -> str:
    """Return 'Tonight', 'Tomorrow', 'Sat, Jun 14' (within a week) or a long form."""
    day = _calendar_day(ts)
    if day is None:
        return UNKNOWN_DATE_LABEL
    diff = (day - _today(now)).days
    if diff == 0:
        return "Tonight"
    if diff == 1:
        return "Tomorrow"
    if 1 < diff < 7:
        return _short_date(day)
    return f"{day:%A}, {day:%B} {day.day}"


def format_time(ts: Any) -> str:
    """Return a clock label such as '9:30 PM', or '' when unknown."""
    dt = parse_timestamp(ts)
    if dt is None:
        return ""
    return dt.strftime("%I:%M %p").lstrip("0")


def date_badge(ts: Any, now: datetime) -> DateBadge:
    diff = days_from_today(ts, now)
    return DateBadge(
        label=relative_label(ts, now),
        time=format_time(ts),
        is_tonight=diff == 0,
        is_tomorrow=diff == 1,
    )


def group_date_label(day: Any, now: datetime) -> str:
    """Header for a dated plan group, e.g. 'Today', 'Friday' or 'Sat, Jun 14'."""
    parsed = _calendar_day(day)
    if parsed is None:
        return UNKNOWN_DATE_LABEL
    diff = (parsed - _today(now)).days
    if diff == 0:
        return "Today"
    if diff == 1:
        return "Tomorrow"
    if diff < 7:
        return f"{parsed:%A}"
    return _short_date(parsed)
