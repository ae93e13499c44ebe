# assessbot/utils/membership.py
from __future__ import annotations

import logging

from aiogram import Bot
from aiogram.enums import ChatMemberStatus

log = logging.getLogger(__name__)

_MEMBER_STATUSES = {
    ChatMemberStatus.CREATOR,
    ChatMemberStatus.ADMINISTRATOR,
    ChatMemberStatus.MEMBER,
}


class ChannelMembershipGate:
    def __init__(self, bot: Bot, channels: tuple[str, ...]) -> None:
        self.bot = bot
        self.channels = channels

    async def missing_channels(self, identity: int) -> list[str]:
        missing: list[str] = []
        for channel in self.channels:
            try:
                member = await self.bot.get_chat_member(chat_id=channel, user_id=identity)
            except Exception:
                # can't verify (bot not in channel, typo, ...) -> don't lock users out
                log.exception("Failed to check subscription of %s to %s", identity, channel)
                continue
            if member.status not in _MEMBER_STATUSES:
                missing.append(channel)
        return missing
