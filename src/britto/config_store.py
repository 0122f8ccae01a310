from __future__ import annotations

import logging
import os
import tempfile
import tomllib
from dataclasses import fields, replace
from pathlib import Path
from typing import Any

from britto.date_logic import LEAP_DAY_RULES
from britto.models import AppConfig, Reminder, ReminderRange, TemplateSet

LOGGER = logging.getLogger(__name__)

# TOML key -> TemplateSet attribute
TEMPLATE_KEYS = {
    "due_today": "due_today",
    "due_tomorrow": "due_tomorrow",
    "due_in": "due_in",
    "date_format": "date_format",
    "date_format_short": "date_format_short",
    "Birthday0": "birthday_zero_age",
    "Birthday": "birthday_aged",
    "Reminder": "reminder",
}


def _toml_escape(value: str) -> str:
    return (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\t", "\\t")
    )


def _parse_reminder(row: Any, section: str) -> Reminder:
    if not isinstance(row, dict):
        raise ValueError(f"[[{section}]] entries must be tables")

    return Reminder(
        name=str(row.get("Name", "")),
        date_text=str(row.get("Date", "")),
        message=str(row.get("Message", "")),
        one_time=bool(row.get("OneTimeEvent", False)),
        range_override=row.get("ReminderRange"),
    )


def _table(data: dict[str, Any], key: str) -> dict[str, Any]:
    value = data.get(key, {})
    if not isinstance(value, dict):
        raise ValueError(f"[{key}] must be a table")
    return value


def _rows(data: dict[str, Any], key: str) -> list[Any]:
    value = data.get(key, [])
    if not isinstance(value, list):
        raise ValueError(f"[[{key}]] must be an array of tables")
    return value


def _parse_templates(table: dict[str, Any], base: TemplateSet) -> TemplateSet:
    overrides: dict[str, str] = {}
    for key, value in table.items():
        attr = TEMPLATE_KEYS.get(key)
        if attr is None:
            LOGGER.warning("Ignoring unknown template key: %s", key)
            continue
        overrides[attr] = value
    return replace(base, **overrides)


def _validate_range(value: int, label: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"{label} must be a non-negative integer")
    return value


def validate_config(config: AppConfig) -> AppConfig:
    """Check the structure of a config; date text is checked per entry at run time."""
    leap_day_rule = config.leap_day_rule.strip().lower()
    if leap_day_rule not in LEAP_DAY_RULES:
        raise ValueError(f"leap_day_rule must be one of {sorted(LEAP_DAY_RULES)}")

    reminder_range = ReminderRange(
        birthdays=_validate_range(config.reminder_range.birthdays, "ReminderRange.Birthdays"),
        events=_validate_range(config.reminder_range.events, "ReminderRange.Events"),
    )

    def _clean(entries: list[Reminder]) -> list[Reminder]:
        cleaned: list[Reminder] = []
        for entry in entries:
            name = entry.name.strip()
            if not name:
                raise ValueError("reminder name must not be empty")
            if entry.range_override is not None:
                _validate_range(entry.range_override, f"[{name}] ReminderRange")
            cleaned.append(replace(entry, name=name, date_text=entry.date_text.strip()))
        return cleaned

    return AppConfig(
        birthdays=_clean(config.birthdays),
        reminders=_clean(config.reminders),
        reminder_range=reminder_range,
        templates=config.templates,
        leap_day_rule=leap_day_rule,
    )


def config_files(path: Path) -> list[Path]:
    if path.is_dir():
        files = sorted(p for p in path.glob("*.toml") if p.is_file())
        if not files:
            raise FileNotFoundError(f"No .toml config files found in: {path}")
        return files
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    return [path]


def _merge_data(config: AppConfig, data: dict[str, Any]) -> AppConfig:
    birthdays = [*config.birthdays, *(_parse_reminder(row, "Birthday") for row in _rows(data, "Birthday"))]
    reminders = [*config.reminders, *(_parse_reminder(row, "Reminder") for row in _rows(data, "Reminder"))]

    range_table = _table(data, "ReminderRange")
    reminder_range = ReminderRange(
        birthdays=range_table.get("Birthdays", config.reminder_range.birthdays),
        events=range_table.get("Events", config.reminder_range.events),
    )

    return AppConfig(
        birthdays=birthdays,
        reminders=reminders,
        reminder_range=reminder_range,
        templates=_parse_templates(_table(data, "template"), config.templates),
        leap_day_rule=str(data.get("leap_day_rule", config.leap_day_rule)),
    )


def load_config(path: Path) -> AppConfig:
    config = AppConfig()
    for file_path in config_files(path):
        with file_path.open("rb") as file_obj:
            data = tomllib.load(file_obj)
        LOGGER.debug("Loaded config file %s", file_path)
        config = _merge_data(config, data)
    return validate_config(config)


def _render_reminder(section: str, entry: Reminder) -> list[str]:
    lines = [
        f"[[{section}]]",
        f'Name = "{_toml_escape(entry.name)}"',
        f'Date = "{_toml_escape(entry.date_text)}"',
    ]
    if entry.message:
        lines.append(f'Message = "{_toml_escape(entry.message)}"')
    if entry.one_time:
        lines.append("OneTimeEvent = true")
    if entry.range_override is not None:
        lines.append(f"ReminderRange = {entry.range_override}")
    lines.append("")
    return lines


def render_config(config: AppConfig) -> str:
    validated = validate_config(config)
    attr_to_key = {attr: key for key, attr in TEMPLATE_KEYS.items()}

    lines: list[str] = [
        f'leap_day_rule = "{validated.leap_day_rule}"',
        "",
        "# Dates are DD/MM (yearly) or DD/MM/YYYY. One-time events need a year.",
        "",
        "[ReminderRange]",
        f"Birthdays = {validated.reminder_range.birthdays}",
        f"Events = {validated.reminder_range.events}",
        "",
        "[template]",
    ]
    for item in fields(TemplateSet):
        value = getattr(validated.templates, item.name)
        lines.append(f'{attr_to_key[item.name]} = "{_toml_escape(value)}"')
    lines.append("")

    for entry in validated.birthdays:
        lines.extend(_render_reminder("Birthday", entry))
    for entry in validated.reminders:
        lines.extend(_render_reminder("Reminder", entry))

    return "\n".join(lines).rstrip() + "\n"


def save_config_atomic(path: Path, config: AppConfig) -> None:
    rendered = render_config(config)
    path.parent.mkdir(parents=True, exist_ok=True)

    with tempfile.NamedTemporaryFile(
        mode="w",
        encoding="utf-8",
        dir=path.parent,
        prefix=f".{path.name}.",
        delete=False,
    ) as temp_file:
        temp_file.write(rendered)
        temp_name = temp_file.name

    os.replace(temp_name, path)


def default_config() -> AppConfig:
    return AppConfig(
        birthdays=[
            Reminder(name="Example Person", date_text="01/01/2000"),
            Reminder(
                name="Example Person 2",
                date_text="07/01/2000",
                message="Example Person 2's birthday is on 07/01/2000. Remember to buy a present",
            ),
        ],
        reminders=[
            Reminder(
                name="Example Event",
                date_text="31/12",
                message="Don't forget about the Example Event!",
            ),
            Reminder(name="Example Event 2", date_text="31/12/2024", one_time=True),
        ],
    )


def ensure_default_config(path: Path) -> bool:
    """Write the example config when ``path`` is missing; return True if created."""
    if path.exists():
        return False

    save_config_atomic(path, default_config())
    LOGGER.info("Default config saved to %s. Please edit it with your reminders.", path)
    return True
