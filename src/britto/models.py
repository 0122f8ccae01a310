from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum


DEFAULT_BIRTHDAY_RANGE = 10
DEFAULT_EVENT_RANGE = 15


class Category(Enum):
    BIRTHDAY = "birthday"
    EVENT = "event"


@dataclass(frozen=True)
class Reminder:
    name: str
    date_text: str
    message: str = ""
    one_time: bool = False
    range_override: int | None = None


@dataclass(frozen=True)
class ReminderRange:
    birthdays: int = DEFAULT_BIRTHDAY_RANGE
    events: int = DEFAULT_EVENT_RANGE

    def for_category(self, category: Category) -> int:
        if category is Category.BIRTHDAY:
            return self.birthdays
        return self.events


@dataclass(frozen=True)
class TemplateSet:
    due_today: str = "today"
    due_tomorrow: str = "tomorrow"
    due_in: str = "in {days} days"
    birthday_zero_age: str = "[{name}]'s birthday is {due}! {date}"
    birthday_aged: str = "[{name}] is turning {age} years old {due}! {date}"
    reminder: str = "[{name}] is due {due}! {date}"
    date_format: str = "%d/%m/%Y"
    date_format_short: str = "%d/%m"


@dataclass(frozen=True)
class MonthDay:
    month: int
    day: int


@dataclass(frozen=True)
class ResolvedDate:
    month_day: MonthDay
    origin_year: int | None


@dataclass(frozen=True)
class ResolvedOccurrence:
    occurrence: date
    origin_year: int | None
    days_until: int
    age: int


@dataclass(frozen=True)
class Diagnostic:
    name: str
    reason: str


@dataclass(frozen=True)
class AppConfig:
    birthdays: list[Reminder] = field(default_factory=list)
    reminders: list[Reminder] = field(default_factory=list)
    reminder_range: ReminderRange = field(default_factory=ReminderRange)
    templates: TemplateSet = field(default_factory=TemplateSet)
    leap_day_rule: str = "mar1"
