from __future__ import annotations

import re
from datetime import date, datetime

from britto.models import MonthDay, Reminder, ResolvedDate

LEAP_DAY_RULES = {"feb28", "mar1"}

_SHORT_FORMAT = re.compile(r"(\d{2})/(\d{2})")
_LONG_FORMAT = re.compile(r"(\d{2})/(\d{2})/(\d{4})")


class InvalidReminderError(ValueError):
    pass


class InvalidDateFormat(InvalidReminderError):
    pass


class MissingYear(InvalidReminderError):
    pass


class FutureOriginYear(InvalidReminderError):
    pass


def is_leap_year(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def _calendar_check(year: int, month: int, day: int) -> None:
    try:
        date(year, month, day)
    except ValueError as exc:
        raise InvalidDateFormat(f"invalid day/month: {day:02d}/{month:02d}") from exc


def resolve_date_text(date_text: str, one_time: bool = False) -> ResolvedDate:
    """Parse ``DD/MM`` or ``DD/MM/YYYY`` into a month/day and optional origin year.

    The text must be exactly 5 or 10 characters; surrounding whitespace is
    rejected. Yearless dates are checked against a leap year so that
    ``29/02`` is accepted; dated entries must exist in their own year.
    """
    value = date_text
    if not value:
        raise InvalidDateFormat("date not provided")

    if len(value) == 5:
        match = _SHORT_FORMAT.fullmatch(value)
        if match is None:
            raise InvalidDateFormat(f"invalid date format: {value!r}")
        if one_time:
            raise MissingYear("one-time event requires year specification")
        day, month = int(match.group(1)), int(match.group(2))
        _calendar_check(2000, month, day)
        return ResolvedDate(month_day=MonthDay(month=month, day=day), origin_year=None)

    if len(value) == 10:
        match = _LONG_FORMAT.fullmatch(value)
        if match is None:
            raise InvalidDateFormat(f"invalid date format: {value!r}")
        day, month, year = int(match.group(1)), int(match.group(2)), int(match.group(3))
        _calendar_check(year, month, day)
        return ResolvedDate(month_day=MonthDay(month=month, day=day), origin_year=year)

    raise InvalidDateFormat(f"invalid date format: {value!r} (expected DD/MM or DD/MM/YYYY)")


def as_day(now: date | datetime) -> date:
    if isinstance(now, datetime):
        return now.date()
    return now


def occurrence_for_year(month_day: MonthDay, year: int, leap_day_rule: str = "mar1") -> date:
    if month_day.month == 2 and month_day.day == 29 and not is_leap_year(year):
        if leap_day_rule == "feb28":
            return date(year, 2, 28)
        if leap_day_rule == "mar1":
            return date(year, 3, 1)
        raise ValueError(f"Unsupported leap day rule: {leap_day_rule}")
    return date(year, month_day.month, month_day.day)


def next_occurrence(
    month_day: MonthDay, now: date | datetime, leap_day_rule: str = "mar1"
) -> tuple[date, int]:
    today = as_day(now)
    for years_ahead in (0, 1):
        candidate = occurrence_for_year(month_day, today.year + years_ahead, leap_day_rule)
        if candidate >= today:
            return candidate, (candidate - today).days
    # Unreachable: next year's candidate is always >= today.
    raise AssertionError(f"no occurrence found for {month_day} after {today}")


def one_time_occurrence(resolved: ResolvedDate, now: date | datetime) -> tuple[date, int] | None:
    if resolved.origin_year is None:
        raise MissingYear("one-time event requires year specification")

    today = as_day(now)
    anchored = date(resolved.origin_year, resolved.month_day.month, resolved.month_day.day)
    if anchored < today:
        return None
    return anchored, (anchored - today).days


def effective_range(reminder: Reminder, default_range: int) -> int:
    if reminder.range_override is not None:
        return reminder.range_override
    return default_range


def is_due(days_until: int, range_days: int) -> bool:
    return 0 <= days_until <= range_days


def check_origin_year(occurrence: date, origin_year: int | None) -> None:
    if origin_year is not None and origin_year > occurrence.year:
        raise FutureOriginYear(f"birth year {origin_year} is after {occurrence.year}")


def age_at(occurrence: date, origin_year: int | None) -> int:
    if origin_year is None:
        return 0
    return occurrence.year - origin_year
