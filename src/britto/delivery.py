from __future__ import annotations

import logging
import sys
from typing import Protocol, TextIO

from telegram import Bot

LOGGER = logging.getLogger(__name__)


class MessageSender(Protocol):
    async def send_message(self, chat_id: int, text: str) -> object: ...


def print_lines(lines: list[str], stream: TextIO | None = None) -> None:
    out = stream if stream is not None else sys.stdout
    for line in lines:
        out.write(line + "\n")
    out.flush()


async def send_lines(bot: MessageSender, chat_id: int, lines: list[str]) -> int:
    if not lines:
        return 0

    await bot.send_message(chat_id=chat_id, text="\n".join(lines))
    LOGGER.info("Sent %s reminder lines to chat %s", len(lines), chat_id)
    return 1


async def send_to_telegram(token: str, chat_id: int, lines: list[str]) -> int:
    if not lines:
        return 0

    bot = Bot(token)
    async with bot:
        return await send_lines(bot, chat_id, lines)
