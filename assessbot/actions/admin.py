# assessbot/actions/admin.py
from __future__ import annotations

from aiogram import html

from assessbot.database.models import UserRole
from assessbot.database.repo.users import list_users
from assessbot.engine.context import StepContext
from assessbot.engine.events import Reply
from assessbot.engine.outcome import StepOutcome
from assessbot.engine.registry import ActionTable
from assessbot.engine.state import DialogKind
from assessbot.keyboards.admin import ACTION_ADD_TEACHER, ACTION_REMOVE_TEACHER, manage_users_kb
from assessbot.keyboards.main import BTN_MANAGE_USERS
from assessbot.utils.texts import NO_ADMIN_RIGHTS

actions = ActionTable()


def _deny(ctx: StepContext) -> StepOutcome | None:
    if not ctx.settings.is_admin(ctx.identity):
        return StepOutcome.reply(NO_ADMIN_RIGHTS)
    return None


@actions.command(BTN_MANAGE_USERS)
async def manage_users(ctx: StepContext) -> StepOutcome:
    denied = _deny(ctx)
    if denied is not None:
        return denied

    users = await list_users(ctx.db)
    lines = ["👥 <b>Users:</b>", ""]
    for user in users:
        icon = "👨‍🏫" if user.role == UserRole.TEACHER else "👨‍🎓"
        lines.append(f"{icon} {html.quote(user.full_name)}")
        lines.append(f"🆔 <code>{user.telegram_id}</code>")
        lines.append("")
    if not users:
        lines.append("📭 No registered users yet.")

    return StepOutcome.reply(Reply(text="\n".join(lines).rstrip(), reply_markup=manage_users_kb()))


@actions.button(ACTION_ADD_TEACHER)
async def add_teacher(ctx: StepContext) -> StepOutcome:
    denied = _deny(ctx)
    if denied is not None:
        return denied
    return StepOutcome.wait(
        DialogKind.AWAITING_TEACHER_ID,
        "Send the ID of the user who should become a teacher:",
    )


@actions.button(ACTION_REMOVE_TEACHER)
async def remove_teacher(ctx: StepContext) -> StepOutcome:
    denied = _deny(ctx)
    if denied is not None:
        return denied
    return StepOutcome.wait(
        DialogKind.AWAITING_TEACHER_REMOVAL,
        "Send the ID of the user whose teacher role should be removed:",
    )
