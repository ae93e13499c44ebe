# assessbot/dialogs/editing.py
from __future__ import annotations

import logging

from aiogram import html

from assessbot.database.repo.tests_repo import TITLE_MAX_LEN, get_test, update_test_field
from assessbot.dialogs.common import menu_reply
from assessbot.engine.context import StepContext
from assessbot.engine.events import Reply
from assessbot.engine.outcome import StepOutcome
from assessbot.engine.registry import Dialog
from assessbot.engine.state import DialogKind
from assessbot.keyboards.main import EDIT_ANSWERS, EDIT_CANCEL, EDIT_DEADLINE, EDIT_TITLE, edit_choice_kb
from assessbot.utils.answer_parser import parse_answer_key
from assessbot.utils.texts import (
    ASK_ANSWER_KEY,
    ASK_DEADLINE,
    BAD_ANSWER_KEY,
    BAD_DEADLINE,
    NOT_OWNER,
    TEST_NOT_FOUND,
)

log = logging.getLogger(__name__)

editing_dialog = Dialog(DialogKind.TEST_EDITING)

_FIELDS = {
    EDIT_TITLE: "title",
    EDIT_ANSWERS: "answers",
    EDIT_DEADLINE: "deadline",
}

_PROMPTS = {
    "title": "📝 Send the new title:",
    "answers": ASK_ANSWER_KEY,
    "deadline": ASK_DEADLINE,
}

CHOICE_PROMPT = (
    "What do you want to change?\n\n"
    "1. Title\n"
    "2. Answers\n"
    "3. Deadline\n\n"
    f'Choose a number or send "{EDIT_CANCEL}".'
)


@editing_dialog.step(1)
async def load(ctx: StepContext) -> StepOutcome:
    test = await get_test(ctx.db, ctx.session.test_id)
    if test is None:
        return StepOutcome.abort(await menu_reply(ctx, TEST_NOT_FOUND))

    auth = await ctx.auth()
    if not ctx.auth_service.can_manage(auth, test.created_by, ctx.identity):
        return StepOutcome.abort(NOT_OWNER)

    return StepOutcome.advance(
        Reply(
            text=f"📝 Editing <b>{html.quote(test.title)}</b>\n\n{CHOICE_PROMPT}",
            reply_markup=edit_choice_kb(),
        )
    )


@editing_dialog.step(2)
async def choose_field(ctx: StepContext) -> StepOutcome:
    choice = (ctx.text or "").lower()
    if choice == EDIT_CANCEL:
        return StepOutcome.finish(await menu_reply(ctx, "✅ Editing cancelled."))

    field = _FIELDS.get(choice)
    if field is None:
        return StepOutcome.reprompt(
            Reply(text=f"❌ Invalid choice. {CHOICE_PROMPT}", reply_markup=edit_choice_kb())
        )
    return StepOutcome.advance(_PROMPTS[field], field=field)


@editing_dialog.step(3)
async def apply_value(ctx: StepContext) -> StepOutcome:
    field = ctx.scratch["field"]
    text = ctx.text

    if field == "title":
        if text is None:
            return StepOutcome.reprompt("❌ Please send the new title as text.")
        if len(text) > TITLE_MAX_LEN:
            return StepOutcome.reprompt(f"❌ The title is too long (max {TITLE_MAX_LEN} characters).")
        value = text
    elif field == "answers":
        try:
            value = parse_answer_key(text or "")
        except ValueError:
            return StepOutcome.reprompt(BAD_ANSWER_KEY)
    else:
        try:
            value = ctx.clock.parse_deadline(text or "")
        except ValueError:
            return StepOutcome.reprompt(BAD_DEADLINE)

    updated = await update_test_field(ctx.db, ctx.session.test_id, field, value)
    if not updated:
        return StepOutcome.abort(await menu_reply(ctx, TEST_NOT_FOUND))

    log.info("Test %s: %s updated by %s", ctx.session.test_id, field, ctx.identity)
    return StepOutcome.finish(await menu_reply(ctx, "✅ Test updated!"))
