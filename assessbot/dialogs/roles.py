# assessbot/dialogs/roles.py
from __future__ import annotations

import logging

from assessbot.database.models import UserRole
from assessbot.database.repo.users import set_user_role
from assessbot.engine.context import StepContext
from assessbot.engine.outcome import StepOutcome
from assessbot.engine.registry import Dialog
from assessbot.engine.state import DialogKind
from assessbot.utils.answer_parser import parse_identity
from assessbot.utils.texts import NO_ADMIN_RIGHTS

log = logging.getLogger(__name__)

grant_teacher_dialog = Dialog(DialogKind.AWAITING_TEACHER_ID)
revoke_teacher_dialog = Dialog(DialogKind.AWAITING_TEACHER_REMOVAL)

BAD_ID = "❌ Invalid ID format. Send the numeric user ID:"


@grant_teacher_dialog.step(1)
async def grant(ctx: StepContext) -> StepOutcome:
    if not ctx.settings.is_admin(ctx.identity):
        return StepOutcome.abort(NO_ADMIN_RIGHTS)

    try:
        target = parse_identity(ctx.text or "")
    except ValueError:
        return StepOutcome.reprompt(BAD_ID)

    if not await set_user_role(ctx.db, target, UserRole.TEACHER):
        return StepOutcome.abort(f"❌ No registered user with ID {target}.")

    log.info("Admin %s granted TEACHER to %s", ctx.identity, target)
    return StepOutcome.finish(f"✅ User {target} is now a teacher!")


@revoke_teacher_dialog.step(1)
async def revoke(ctx: StepContext) -> StepOutcome:
    if not ctx.settings.is_admin(ctx.identity):
        return StepOutcome.abort(NO_ADMIN_RIGHTS)

    try:
        target = parse_identity(ctx.text or "")
    except ValueError:
        return StepOutcome.reprompt(BAD_ID)

    if ctx.settings.is_admin(target):
        return StepOutcome.reprompt("⛔ The administrator's role cannot be changed. Send another ID:")

    if not await set_user_role(ctx.db, target, UserRole.STUDENT):
        return StepOutcome.abort(f"❌ No registered user with ID {target}.")

    log.info("Admin %s revoked TEACHER from %s", ctx.identity, target)
    return StepOutcome.finish(f"✅ Teacher role removed from user {target}.")
