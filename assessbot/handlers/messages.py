# assessbot/handlers/messages.py
from __future__ import annotations

from aiogram import F, Router
from aiogram.enums import ChatType
from aiogram.types import Message

from assessbot.engine.dialog_engine import DialogEngine
from assessbot.engine.events import Contact, EventKind, InboundEvent

router = Router(name="messages")

# dialogs live in private chats only
router.message.filter(F.chat.type == ChatType.PRIVATE)


@router.message(F.contact)
async def on_contact(message: Message, engine: DialogEngine) -> None:
    if not message.from_user:
        return
    await engine.handle(
        InboundEvent(
            identity=message.from_user.id,
            kind=EventKind.CONTACT,
            contact=Contact(
                user_id=message.contact.user_id,
                phone_number=message.contact.phone_number,
            ),
        )
    )


@router.message(F.text.startswith("/"))
async def on_command(message: Message, engine: DialogEngine) -> None:
    if not message.from_user:
        return
    await engine.handle(
        InboundEvent(identity=message.from_user.id, kind=EventKind.COMMAND, text=message.text)
    )


@router.message(F.text)
async def on_text(message: Message, engine: DialogEngine) -> None:
    if not message.from_user:
        return
    await engine.handle(
        InboundEvent(identity=message.from_user.id, kind=EventKind.TEXT, text=message.text)
    )


@router.message()
async def on_other(message: Message, engine: DialogEngine) -> None:
    # photos, stickers, ... : a text event without text, steps re-prompt
    if not message.from_user:
        return
    await engine.handle(InboundEvent(identity=message.from_user.id, kind=EventKind.TEXT))
