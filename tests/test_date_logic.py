from __future__ import annotations

from datetime import date, datetime

import pytest

from britto.date_logic import (
    FutureOriginYear,
    InvalidDateFormat,
    MissingYear,
    age_at,
    check_origin_year,
    effective_range,
    is_due,
    next_occurrence,
    one_time_occurrence,
    resolve_date_text,
)
from britto.models import MonthDay, Reminder


def test_resolve_short_date_has_no_origin_year() -> None:
    resolved = resolve_date_text("10/05")

    assert resolved.month_day == MonthDay(month=5, day=10)
    assert resolved.origin_year is None


def test_resolve_long_date_keeps_trailing_year() -> None:
    resolved = resolve_date_text("25/12/1985")

    assert resolved.month_day == MonthDay(month=12, day=25)
    assert resolved.origin_year == 1985


def test_resolve_rejects_surrounding_whitespace() -> None:
    with pytest.raises(InvalidDateFormat):
        resolve_date_text(" 10/05 ")


@pytest.mark.parametrize("text", ["", "1/5", "2024-12-25", "25/12/85", "ab/cd", "25-12", "31/04", "00/01", "10/13"])
def test_resolve_rejects_malformed_text(text: str) -> None:
    with pytest.raises(InvalidDateFormat):
        resolve_date_text(text)


def test_resolve_feb_29_without_year_is_accepted() -> None:
    assert resolve_date_text("29/02").month_day == MonthDay(month=2, day=29)


def test_resolve_feb_29_in_non_leap_year_is_rejected() -> None:
    with pytest.raises(InvalidDateFormat):
        resolve_date_text("29/02/2023")


def test_one_time_without_year_raises_missing_year() -> None:
    with pytest.raises(MissingYear):
        resolve_date_text("31/12", one_time=True)


def test_one_time_with_year_resolves() -> None:
    assert resolve_date_text("31/12/2024", one_time=True).origin_year == 2024


def test_next_occurrence_later_this_year() -> None:
    occurrence, days = next_occurrence(MonthDay(month=12, day=31), date(2024, 1, 1))

    assert occurrence == date(2024, 12, 31)
    assert days == 365


def test_next_occurrence_same_day_is_zero() -> None:
    assert next_occurrence(MonthDay(month=12, day=20), date(2024, 12, 20)) == (date(2024, 12, 20), 0)


def test_next_occurrence_wraps_into_next_year() -> None:
    occurrence, days = next_occurrence(MonthDay(month=1, day=2), date(2024, 12, 30))

    assert occurrence == date(2025, 1, 2)
    assert days == 3


def test_next_occurrence_truncates_datetime() -> None:
    occurrence, days = next_occurrence(MonthDay(month=12, day=25), datetime(2024, 12, 20, 23, 59))

    assert occurrence == date(2024, 12, 25)
    assert days == 5


def test_next_occurrence_is_never_negative() -> None:
    today = date(2023, 6, 15)
    for month in range(1, 13):
        _, days = next_occurrence(MonthDay(month=month, day=15), today)
        assert 0 <= days <= 366


def test_feb_29_falls_back_to_mar_1_by_default() -> None:
    occurrence, days = next_occurrence(MonthDay(month=2, day=29), date(2025, 2, 27))

    assert occurrence == date(2025, 3, 1)
    assert days == 2


def test_feb_29_feb28_rule() -> None:
    occurrence, days = next_occurrence(MonthDay(month=2, day=29), date(2025, 2, 27), "feb28")

    assert occurrence == date(2025, 2, 28)
    assert days == 1


def test_feb_29_kept_in_leap_year() -> None:
    occurrence, _ = next_occurrence(MonthDay(month=2, day=29), date(2028, 2, 27))

    assert occurrence == date(2028, 2, 29)


def test_one_time_occurrence_upcoming_and_passed() -> None:
    resolved = resolve_date_text("31/12/2024", one_time=True)

    assert one_time_occurrence(resolved, date(2024, 12, 20)) == (date(2024, 12, 31), 11)
    assert one_time_occurrence(resolved, date(2025, 1, 5)) is None


def test_is_due_boundaries() -> None:
    assert is_due(0, 10) is True
    assert is_due(10, 10) is True
    assert is_due(11, 10) is False
    assert is_due(-1, 10) is False


def test_effective_range_prefers_override() -> None:
    assert effective_range(Reminder(name="A", date_text="01/01", range_override=25), 15) == 25
    assert effective_range(Reminder(name="A", date_text="01/01"), 15) == 15
    assert effective_range(Reminder(name="A", date_text="01/01", range_override=0), 15) == 0


def test_age_at() -> None:
    assert age_at(date(2024, 12, 25), 1985) == 39
    assert age_at(date(2024, 12, 25), None) == 0


def test_check_origin_year_rejects_future_birth_year() -> None:
    check_origin_year(date(2024, 12, 25), 2024)
    check_origin_year(date(2024, 12, 25), None)

    with pytest.raises(FutureOriginYear):
        check_origin_year(date(2024, 12, 25), 2030)
