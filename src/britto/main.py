from __future__ import annotations

import argparse
import asyncio
import logging
import tomllib
from datetime import date

from telegram.error import TelegramError

from britto.config_store import ensure_default_config, load_config
from britto.delivery import print_lines, send_to_telegram
from britto.reminder_service import run_all
from britto.rendering import TemplateError
from britto.settings import load_settings, require_telegram

LOGGER = logging.getLogger(__name__)


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="britto",
        description="Print upcoming birthdays and events from a TOML reminder file.",
    )
    parser.add_argument("--config", help="Path to a config file or a directory of .toml files")
    parser.add_argument(
        "--date",
        type=date.fromisoformat,
        help="Evaluate reminders as of this date (YYYY-MM-DD) instead of today",
    )
    parser.add_argument(
        "--telegram",
        action="store_true",
        help="Also send the output via Telegram (TELEGRAM_BOT_TOKEN, TELEGRAM_CHAT_ID)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress at INFO level")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    # Captured once; every reminder in this run is compared against it.
    now = args.date or date.today()

    try:
        settings = load_settings(args.config)
        if not settings.config_explicit and ensure_default_config(settings.config_path):
            LOGGER.warning("Config file did not exist; created %s", settings.config_path)
        config = load_config(settings.config_path)
        telegram = require_telegram(settings) if args.telegram else None
        result = run_all(config, now)
    except TemplateError as exc:
        LOGGER.error("Failed to parse template: %s", exc)
        return 1
    except (OSError, ValueError, tomllib.TOMLDecodeError) as exc:
        LOGGER.error("Failed to load config: %s", exc)
        return 1

    print_lines(result.lines)

    if telegram is not None and result.lines:
        try:
            asyncio.run(send_to_telegram(telegram.bot_token, telegram.chat_id, result.lines))
        except TelegramError as exc:
            LOGGER.error("Failed to send Telegram message: %s", exc)
            return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
