# assessbot/dialogs/authoring.py
from __future__ import annotations

import logging

from assessbot.database.repo.tests_repo import TITLE_MAX_LEN, create_test
from assessbot.dialogs.common import menu_reply
from assessbot.engine.context import StepContext
from assessbot.engine.events import Reply
from assessbot.engine.outcome import StepOutcome
from assessbot.engine.registry import Dialog
from assessbot.engine.state import DialogKind
from assessbot.keyboards.cards import manage_card_kb
from assessbot.utils.answer_parser import parse_answer_key
from assessbot.utils.texts import (
    ASK_ANSWER_KEY,
    ASK_DEADLINE,
    BAD_ANSWER_KEY,
    BAD_DEADLINE,
    NO_TEACHER_RIGHTS,
    NOT_REGISTERED,
    card_text,
)

log = logging.getLogger(__name__)

authoring_dialog = Dialog(DialogKind.TEST_AUTHORING)


@authoring_dialog.step(1)
async def gate(ctx: StepContext) -> StepOutcome:
    auth = await ctx.auth()
    if not auth.is_registered:
        return StepOutcome.abort(NOT_REGISTERED)
    if not auth.is_teacher:
        return StepOutcome.abort(NO_TEACHER_RIGHTS)
    return StepOutcome.advance("📝 Send the test title:")


@authoring_dialog.step(2)
async def title(ctx: StepContext) -> StepOutcome:
    text = ctx.text
    if text is None:
        return StepOutcome.reprompt("❌ Please send the test title as text.")
    if len(text) > TITLE_MAX_LEN:
        return StepOutcome.reprompt(f"❌ The title is too long (max {TITLE_MAX_LEN} characters).")
    return StepOutcome.advance(ASK_ANSWER_KEY, title=text)


@authoring_dialog.step(3)
async def answer_key(ctx: StepContext) -> StepOutcome:
    try:
        answers = parse_answer_key(ctx.text or "")
    except ValueError:
        return StepOutcome.reprompt(BAD_ANSWER_KEY)
    return StepOutcome.advance(ASK_DEADLINE, answers=answers)


@authoring_dialog.step(4)
async def deadline(ctx: StepContext) -> StepOutcome:
    try:
        value = ctx.clock.parse_deadline(ctx.text or "")
    except ValueError:
        return StepOutcome.reprompt(BAD_DEADLINE)

    test = await create_test(
        ctx.db,
        title=ctx.scratch["title"],
        answers=ctx.scratch["answers"],
        deadline=value,
        created_by=ctx.identity,
    )
    log.info("Test %s created by %s (%d questions)", test.id, ctx.identity, test.question_count)

    return StepOutcome.finish(
        "✅ Test created!",
        Reply(text=card_text(test, ctx.clock), reply_markup=manage_card_kb(test.id)),
        await menu_reply(ctx),
    )
