# assessbot/dialogs/registration.py
from __future__ import annotations

import logging

from aiogram import html

from assessbot.database.models import UserRole
from assessbot.database.repo.users import create_user
from assessbot.dialogs.common import menu_reply
from assessbot.engine.context import StepContext
from assessbot.engine.events import EventKind, Reply
from assessbot.engine.outcome import StepOutcome
from assessbot.engine.registry import Dialog
from assessbot.engine.state import DialogKind
from assessbot.keyboards.cards import join_channels_kb
from assessbot.keyboards.main import remove_kb, share_contact_kb

log = logging.getLogger(__name__)

registration_dialog = Dialog(DialogKind.REGISTRATION)


@registration_dialog.step(1)
async def intro(ctx: StepContext) -> StepOutcome:
    auth = await ctx.auth()
    if auth.is_registered:
        return StepOutcome.abort(await menu_reply(ctx, "ℹ️ You are already registered."))

    if ctx.gate is not None and ctx.settings.required_channels and not ctx.settings.is_seed_teacher(ctx.identity):
        missing = await ctx.gate.missing_channels(ctx.identity)
        if missing:
            channels = ", ".join(html.quote(c) for c in missing)
            return StepOutcome.reprompt(
                Reply(
                    text=f"❌ To use the bot, subscribe to {channels} and then send any message.",
                    reply_markup=join_channels_kb(missing),
                )
            )

    return StepOutcome.advance(Reply(text="👤 Enter your first name:", reply_markup=remove_kb()))


@registration_dialog.step(2)
async def first_name(ctx: StepContext) -> StepOutcome:
    text = ctx.text
    if text is None:
        return StepOutcome.reprompt("❌ Please send your first name as text.")
    return StepOutcome.advance("👤 Enter your last name:", first_name=text[:128])


@registration_dialog.step(3)
async def last_name(ctx: StepContext) -> StepOutcome:
    text = ctx.text
    if text is None:
        return StepOutcome.reprompt("❌ Please send your last name as text.")
    return StepOutcome.advance(
        Reply(
            text='📱 Tap "Share phone number" to send your phone number:',
            reply_markup=share_contact_kb(),
        ),
        last_name=text[:128],
    )


@registration_dialog.step(4)
async def contact(ctx: StepContext) -> StepOutcome:
    shared = ctx.event.contact if ctx.event.kind is EventKind.CONTACT else None
    if shared is None:
        return StepOutcome.reprompt(
            Reply(text='❌ Please tap the "Share phone number" button.', reply_markup=share_contact_kb())
        )

    # the contact must belong to the sender
    if shared.user_id != ctx.identity:
        log.warning("Registration of %s rejected: contact belongs to %s", ctx.identity, shared.user_id)
        return StepOutcome.reprompt(
            Reply(text="❌ Please share your own phone number.", reply_markup=share_contact_kb())
        )

    role = ctx.auth_service.seed_role(ctx.identity)
    user = await create_user(
        ctx.db,
        telegram_id=ctx.identity,
        first_name=ctx.scratch["first_name"],
        last_name=ctx.scratch["last_name"],
        phone_number=shared.phone_number,
        role=role,
    )
    ctx.forget_auth()

    if user is None:
        return StepOutcome.abort(await menu_reply(ctx, "ℹ️ You are already registered."))

    log.info("Registered %s as %s", ctx.identity, role.value)
    label = "a teacher" if role == UserRole.TEACHER else "a student"
    return StepOutcome.finish(await menu_reply(ctx, f"✅ You are registered as {label}!"))
