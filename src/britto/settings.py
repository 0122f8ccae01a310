from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_CONFIG_FILE = "britto.toml"


@dataclass(frozen=True)
class Settings:
    config_path: Path
    config_explicit: bool
    telegram_bot_token: str | None
    telegram_chat_id: str | None


@dataclass(frozen=True)
class TelegramSettings:
    bot_token: str
    chat_id: int


def _optional_env(name: str) -> str | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def user_config_dir() -> Path:
    xdg = _optional_env("XDG_CONFIG_HOME")
    if xdg is not None:
        return Path(xdg)
    return Path.home() / ".config"


def default_config_path() -> Path:
    return user_config_dir() / "britto" / DEFAULT_CONFIG_FILE


def load_settings(config_arg: str | None = None) -> Settings:
    explicit = config_arg or _optional_env("BRITTO_CONFIG_PATH")
    config_path = Path(explicit).expanduser() if explicit else default_config_path()

    return Settings(
        config_path=config_path,
        config_explicit=explicit is not None,
        telegram_bot_token=_optional_env("TELEGRAM_BOT_TOKEN"),
        telegram_chat_id=_optional_env("TELEGRAM_CHAT_ID"),
    )


def require_telegram(settings: Settings) -> TelegramSettings:
    if settings.telegram_bot_token is None:
        raise ValueError("Missing required environment variable: TELEGRAM_BOT_TOKEN")
    if settings.telegram_chat_id is None:
        raise ValueError("Missing required environment variable: TELEGRAM_CHAT_ID")
    try:
        chat_id = int(settings.telegram_chat_id)
    except ValueError as exc:
        raise ValueError(f"TELEGRAM_CHAT_ID must be a numeric chat id: {settings.telegram_chat_id!r}") from exc
    return TelegramSettings(bot_token=settings.telegram_bot_token, chat_id=chat_id)
