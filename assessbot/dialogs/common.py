# assessbot/dialogs/common.py
from __future__ import annotations

from assessbot.engine.context import StepContext
from assessbot.engine.events import Reply
from assessbot.keyboards.main import main_menu_kb


async def menu_reply(ctx: StepContext, text: str = "📱 Main menu:") -> Reply:
    auth = await ctx.auth()
    return Reply(text=text, reply_markup=main_menu_kb(is_teacher=auth.is_teacher, is_admin=auth.is_admin))
