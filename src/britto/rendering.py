from __future__ import annotations

from dataclasses import fields
from datetime import date
from string import Formatter

from britto.models import Category, TemplateSet

DATE_FORMAT_FIELDS = ("date_format", "date_format_short")

# Values used to dry-run every template before any reminder is processed.
_SAMPLE_LINE_FIELDS = {
    "name": "Example",
    "due": "in 2 days",
    "date": "01/01/2000",
    "message": "",
    "days": 2,
    "age": 1,
}


class TemplateError(ValueError):
    pass


def _field_names(template: str):
    for _, field_name, format_spec, _ in Formatter().parse(template):
        if field_name is not None:
            yield field_name
        if format_spec:
            yield from _field_names(format_spec)


def validate_templates(templates: TemplateSet) -> TemplateSet:
    for item in fields(templates):
        key = item.name
        value = getattr(templates, key)
        if not isinstance(value, str):
            raise TemplateError(f"template {key} must be a string")

        if key in DATE_FORMAT_FIELDS:
            if not value.strip():
                raise TemplateError(f"template {key} must not be empty")
            continue

        sample = {"days": 2} if key == "due_in" else _SAMPLE_LINE_FIELDS
        try:
            value.format(**sample)
        except KeyError as exc:
            raise TemplateError(f"template {key} uses unknown placeholder {exc}") from exc
        except (ValueError, IndexError, AttributeError) as exc:
            raise TemplateError(f"template {key} cannot be parsed: {exc}") from exc

        for field_name in _field_names(value):
            if "." in field_name or "[" in field_name:
                raise TemplateError(f"template {key} placeholder {{{field_name}}} must be a plain name")

    return templates


def template_fields(template: str) -> set[str]:
    return {field_name for _, field_name, _, _ in Formatter().parse(template) if field_name}


def due_phrase(days_until: int, templates: TemplateSet) -> str:
    if days_until == 0:
        return templates.due_today
    if days_until == 1:
        return templates.due_tomorrow
    return templates.due_in.format(days=days_until)


def select_template(category: Category, age: int, templates: TemplateSet) -> str:
    if category is Category.BIRTHDAY:
        return templates.birthday_zero_age if age == 0 else templates.birthday_aged
    return templates.reminder


def format_date(occurrence: date, category: Category, templates: TemplateSet) -> str:
    pattern = templates.date_format if category is Category.BIRTHDAY else templates.date_format_short
    return occurrence.strftime(pattern)


def render(template: str, *, name: str, due: str, date: str, message: str, days: int, age: int) -> str:
    return template.format(
        name=name,
        due=due,
        date=date,
        message=message,
        days=days,
        age=age,
    ).rstrip("\n")


def render_reminder(
    *,
    category: Category,
    name: str,
    occurrence: date,
    days_until: int,
    age: int,
    message: str,
    templates: TemplateSet,
) -> list[str]:
    """Render one matched reminder into its primary line plus an optional message line."""
    template = select_template(category, age, templates)
    primary = render(
        template,
        name=name,
        due=due_phrase(days_until, templates),
        date=format_date(occurrence, category, templates),
        message=message,
        days=days_until,
        age=age,
    )
    lines = [primary]
    if message.strip() and "message" not in template_fields(template):
        lines.append(message)
    return lines
