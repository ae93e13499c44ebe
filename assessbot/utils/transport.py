# assessbot/utils/transport.py
from __future__ import annotations

from typing import Any

from aiogram import Bot
from aiogram.types import BufferedInputFile


class BotTransport:
    """Sends engine replies through aiogram. Private chats: chat id == user id."""

    def __init__(self, bot: Bot) -> None:
        self.bot = bot

    async def send_message(self, identity: int, text: str, reply_markup: Any = None) -> None:
        await self.bot.send_message(chat_id=identity, text=text, reply_markup=reply_markup)

    async def send_document(
        self,
        identity: int,
        data: bytes,
        filename: str,
        caption: str | None = None,
    ) -> None:
        await self.bot.send_document(
            chat_id=identity,
            document=BufferedInputFile(data, filename=filename),
            caption=caption,
        )
