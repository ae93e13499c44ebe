# assessbot/actions/start.py
from __future__ import annotations

from assessbot.dialogs.common import menu_reply
from assessbot.engine.context import StepContext
from assessbot.engine.outcome import StepOutcome
from assessbot.engine.registry import ActionTable
from assessbot.engine.state import DialogKind

actions = ActionTable()

HELP_TEXT = (
    "📌 Available commands:\n"
    "/start - register or open the main menu\n"
    "/cancel - stop the current dialog\n"
    "/help - this help\n\n"
    "You can also use the menu buttons."
)


@actions.command("/start")
async def start_cmd(ctx: StepContext) -> StepOutcome:
    auth = await ctx.auth()
    if not auth.is_registered:
        return StepOutcome.start(DialogKind.REGISTRATION, "👋 Welcome!")
    return StepOutcome.reply(await menu_reply(ctx, "👋 Welcome back!"))


@actions.command("/help")
async def help_cmd(ctx: StepContext) -> StepOutcome:
    return StepOutcome.reply(HELP_TEXT)


@actions.command("/cancel")
async def cancel_cmd(ctx: StepContext) -> StepOutcome:
    # the engine already dropped any active dialog before running a command
    auth = await ctx.auth()
    if not auth.is_registered:
        return StepOutcome.reply("✅ Cancelled.")
    return StepOutcome.reply(await menu_reply(ctx, "✅ Cancelled."))
