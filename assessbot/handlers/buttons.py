# assessbot/handlers/buttons.py
from __future__ import annotations

import logging

from aiogram import F, Router
from aiogram.types import CallbackQuery

from assessbot.engine.dialog_engine import DialogEngine
from assessbot.engine.events import EventKind, InboundEvent

log = logging.getLogger(__name__)
router = Router(name="buttons")


@router.callback_query(F.data)
async def on_button(cb: CallbackQuery, engine: DialogEngine) -> None:
    # the engine takes the per-user lock first so presses keep their order
    await engine.handle(InboundEvent(identity=cb.from_user.id, kind=EventKind.BUTTON, data=cb.data))

    # remove Telegram spinner
    try:
        await cb.answer()
    except Exception:
        log.debug("Failed to answer callback %s", cb.id)
