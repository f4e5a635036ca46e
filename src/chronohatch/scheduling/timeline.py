"""Incubation timeline arithmetic.

All helpers are pure calendar-date functions. Day numbering is one-indexed: the set date is day 0
and day 1 is the following calendar day. Dates cross the storage boundary as ``YYYY-MM-DD``
strings; every function here accepts either that string form or a ``datetime.date``.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta

from chronohatch.core.errors import ChronoHatchValueError

CalendarDate = date | str


def parse_calendar_date(value: CalendarDate) -> date:
    """Normalise ``value`` to a calendar day (datetimes are truncated to their date)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value.strip())
    except (AttributeError, ValueError) as exc:
        raise ChronoHatchValueError(f"Invalid calendar date {value!r}; expected YYYY-MM-DD") from exc


def format_calendar_date(value: CalendarDate) -> str:
    """Return the ``YYYY-MM-DD`` storage form of ``value``."""
    return parse_calendar_date(value).isoformat()


def date_for_incubation_day(set_date: CalendarDate, day: int) -> date:
    """Calendar date of incubation ``day`` (day 0 is the set date itself)."""
    return parse_calendar_date(set_date) + timedelta(days=day)


def current_incubation_day(today: CalendarDate, set_date: CalendarDate) -> int:
    """Whole calendar days elapsed since the set date.

    Negative before the batch starts, 0 on the set day, positive afterwards.
    """
    return (parse_calendar_date(today) - parse_calendar_date(set_date)).days


def progress_percentage(current_day: int, incubation_days: int) -> float:
    """Incubation progress in ``[0, 100]``; 0 on or before the set day."""
    if current_day <= 0 or incubation_days <= 0:
        return 0.0
    return min(max(current_day / incubation_days * 100.0, 0.0), 100.0)


def estimated_hatch_date(set_date: CalendarDate, incubation_days: int) -> date:
    return date_for_incubation_day(set_date, incubation_days)


def days_until_lockdown(current_day: int, lockdown_day: int) -> int | None:
    """Days left before lockdown while the batch is running, else ``None``."""
    if current_day <= 0 or current_day >= lockdown_day:
        return None
    return lockdown_day - current_day


__all__ = [
    "CalendarDate",
    "parse_calendar_date",
    "format_calendar_date",
    "date_for_incubation_day",
    "current_incubation_day",
    "progress_percentage",
    "estimated_hatch_date",
    "days_until_lockdown",
]
