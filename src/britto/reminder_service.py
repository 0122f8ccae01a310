from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime

from britto.date_logic import (
    InvalidReminderError,
    age_at,
    as_day,
    check_origin_year,
    effective_range,
    is_due,
    next_occurrence,
    one_time_occurrence,
    resolve_date_text,
)
from britto.models import AppConfig, Category, Diagnostic, Reminder, ResolvedOccurrence, TemplateSet
from britto.rendering import render_reminder, validate_templates

LOGGER = logging.getLogger(__name__)


@dataclass
class ProcessResult:
    lines: list[str] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    def extend(self, other: ProcessResult) -> None:
        self.lines.extend(other.lines)
        self.diagnostics.extend(other.diagnostics)


def resolve_occurrence(
    reminder: Reminder, now: date | datetime, leap_day_rule: str = "mar1"
) -> ResolvedOccurrence | None:
    """Resolve a reminder's next occurrence relative to ``now``.

    Returns ``None`` for a one-time event whose date has already passed.
    Raises ``InvalidReminderError`` when the date text cannot be resolved.
    """
    resolved = resolve_date_text(reminder.date_text, reminder.one_time)

    if reminder.one_time:
        found = one_time_occurrence(resolved, now)
        if found is None:
            return None
        occurrence, days_until = found
    else:
        occurrence, days_until = next_occurrence(resolved.month_day, now, leap_day_rule)

    return ResolvedOccurrence(
        occurrence=occurrence,
        origin_year=resolved.origin_year,
        days_until=days_until,
        age=age_at(occurrence, resolved.origin_year),
    )


def process_reminders(
    reminders: list[Reminder],
    now: date | datetime,
    category: Category,
    templates: TemplateSet,
    range_default: int,
    leap_day_rule: str = "mar1",
) -> ProcessResult:
    result = ProcessResult()
    today = as_day(now)

    for reminder in reminders:
        try:
            resolved = resolve_occurrence(reminder, today, leap_day_rule)
            if resolved is not None and category is Category.BIRTHDAY:
                check_origin_year(resolved.occurrence, resolved.origin_year)
        except InvalidReminderError as exc:
            LOGGER.warning("[%s]: Failed to parse date: %s", reminder.name, exc)
            result.diagnostics.append(Diagnostic(name=reminder.name, reason=str(exc)))
            continue

        if resolved is None:
            LOGGER.debug("[%s]: one-time event already passed", reminder.name)
            continue

        if not is_due(resolved.days_until, effective_range(reminder, range_default)):
            continue

        result.lines.extend(
            render_reminder(
                category=category,
                name=reminder.name,
                occurrence=resolved.occurrence,
                days_until=resolved.days_until,
                age=resolved.age,
                message=reminder.message,
                templates=templates,
            )
        )

    return result


def run_all(config: AppConfig, now: date | datetime) -> ProcessResult:
    """Evaluate birthdays then generic events against a single frozen ``now``.

    Templates are validated up front; a ``TemplateError`` aborts the run
    before any line is produced.
    """
    templates = validate_templates(config.templates)
    today = as_day(now)

    result = process_reminders(
        config.birthdays,
        today,
        Category.BIRTHDAY,
        templates,
        config.reminder_range.for_category(Category.BIRTHDAY),
        config.leap_day_rule,
    )
    result.extend(
        process_reminders(
            config.reminders,
            today,
            Category.EVENT,
            templates,
            config.reminder_range.for_category(Category.EVENT),
            config.leap_day_rule,
        )
    )

    LOGGER.info(
        "Evaluated %s reminders for %s: %s lines, %s skipped",
        len(config.birthdays) + len(config.reminders),
        today.isoformat(),
        len(result.lines),
        len(result.diagnostics),
    )
    return result
