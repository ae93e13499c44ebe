# assessbot/actions/student.py
from __future__ import annotations

from aiogram import html

from assessbot.actions.common import require_registered
from assessbot.database.repo.results_repo import get_result, list_results_for_user
from assessbot.database.repo.tests_repo import get_test, list_open_tests
from assessbot.database.repo.users import get_user
from assessbot.engine.context import StepContext
from assessbot.engine.events import Reply
from assessbot.engine.outcome import StepOutcome
from assessbot.engine.registry import ActionTable
from assessbot.engine.state import DialogKind
from assessbot.keyboards.cards import ACTION_TAKE, take_test_kb
from assessbot.keyboards.main import BTN_AVAILABLE_TESTS, BTN_MY_RESULTS
from assessbot.services.aggregation import BAND_MARKERS, band_for, order_by_submission
from assessbot.utils.answer_parser import ANSWER_FORMAT_HINT
from assessbot.utils.texts import TEST_NOT_FOUND, card_text

actions = ActionTable()


@actions.command(BTN_AVAILABLE_TESTS)
async def available_tests(ctx: StepContext) -> StepOutcome:
    denied = await require_registered(ctx)
    if denied is not None:
        return denied

    tests = await list_open_tests(ctx.db, ctx.now)
    if not tests:
        return StepOutcome.reply("📭 No tests are available right now.")

    replies = []
    for test in tests:
        teacher = await get_user(ctx.db, test.created_by)
        mine = await get_result(ctx.db, test.id, ctx.identity)
        if mine is not None:
            status = f"✅ Done ({mine.score:.1f}%)"
            button = status
        else:
            status = "🆕 New"
            button = "✍️ Start test"

        text = card_text(test, ctx.clock, teacher_name=teacher.full_name if teacher else "")
        replies.append(
            Reply(
                text=f"{text}\n📊 <b>Status:</b> {status}",
                reply_markup=take_test_kb(test.id, button),
            )
        )
    return StepOutcome.reply(*replies)


@actions.command(BTN_MY_RESULTS)
async def my_results(ctx: StepContext) -> StepOutcome:
    denied = await require_registered(ctx)
    if denied is not None:
        return denied

    rows = await list_results_for_user(ctx.db, ctx.identity)
    if not rows:
        return StepOutcome.reply("📭 You have no results yet.")

    lines = ["🎯 <b>Your results:</b>", ""]
    for row in order_by_submission(rows):
        lines.append(f"📋 {html.quote(row.title)}")
        lines.append(f"{BAND_MARKERS[band_for(row.score)]} Score: {row.score:.1f}%")
        lines.append(f"📅 Submitted: {ctx.clock.format(row.submitted_at)}")
        lines.append("")
    return StepOutcome.reply("\n".join(lines).rstrip())


@actions.button(ACTION_TAKE)
async def take_test(ctx: StepContext) -> StepOutcome:
    denied = await require_registered(ctx)
    if denied is not None:
        return denied

    test_id = ctx.arg_id()
    test = await get_test(ctx.db, test_id) if test_id is not None else None
    if test is None:
        return StepOutcome.reply(TEST_NOT_FOUND)
    if test.deadline <= ctx.now:
        return StepOutcome.reply("⌛️ The deadline for this test has passed.")

    # duplicate attempts are refused here, before any answers are read
    if await get_result(ctx.db, test.id, ctx.identity) is not None:
        return StepOutcome.reply("ℹ️ You have already submitted this test.")

    return StepOutcome.wait(
        DialogKind.AWAITING_ANSWERS,
        f"📝 <b>{html.quote(test.title)}</b>\n\n"
        f"Questions: {test.question_count}\n"
        f"⏰ Deadline: {ctx.clock.format(test.deadline)}\n\n"
        f"Send your answers in this format:\n{ANSWER_FORMAT_HINT}\n\n"
        "Note: all answers must be in one message!",
        test_id=test.id,
    )
