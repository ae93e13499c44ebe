# assessbot/actions/teacher.py
from __future__ import annotations

import logging

from aiogram import html

from assessbot.actions.common import load_managed_test, require_registered
from assessbot.database.repo.results_repo import count_results, list_results_with_users
from assessbot.database.repo.tests_repo import delete_test_cascade, list_tests_by_owner
from assessbot.database.repo.users import get_user
from assessbot.engine.context import StepContext
from assessbot.engine.events import Document, Reply
from assessbot.engine.outcome import StepOutcome
from assessbot.engine.registry import ActionTable
from assessbot.engine.state import DialogKind
from assessbot.keyboards.cards import (
    ACTION_DELETE,
    ACTION_DOWNLOAD,
    ACTION_EDIT,
    ACTION_MANAGE,
    ACTION_RESULTS,
    manage_card_kb,
    results_list_kb,
    results_view_kb,
)
from assessbot.keyboards.main import BTN_CREATE_TEST, BTN_MANAGE_TESTS, BTN_VIEW_RESULTS
from assessbot.services.aggregation import BAND_MARKERS, Band, band_for, order_by_submission, summarize_results
from assessbot.services.export import build_results_report
from assessbot.utils.texts import NO_TEACHER_RIGHTS, card_text

log = logging.getLogger(__name__)

actions = ActionTable()

NO_TESTS = "📭 You have no tests yet."
NO_RESULTS = "📭 No results for this test yet."


async def _require_teacher(ctx: StepContext) -> StepOutcome | None:
    denied = await require_registered(ctx)
    if denied is not None:
        return denied
    auth = await ctx.auth()
    if not auth.is_teacher:
        return StepOutcome.reply(NO_TEACHER_RIGHTS)
    return None


@actions.command(BTN_CREATE_TEST)
async def create_test_entry(ctx: StepContext) -> StepOutcome:
    # permission gate is the dialog's first step
    return StepOutcome.start(DialogKind.TEST_AUTHORING)


@actions.command(BTN_MANAGE_TESTS)
async def manage_tests(ctx: StepContext) -> StepOutcome:
    denied = await _require_teacher(ctx)
    if denied is not None:
        return denied

    tests = await list_tests_by_owner(ctx.db, ctx.identity)
    if not tests:
        return StepOutcome.reply(NO_TESTS)

    auth = await ctx.auth()
    teacher_name = auth.user.full_name if auth.user else None

    replies = []
    for test in tests:
        submissions = await count_results(ctx.db, test.id)
        replies.append(
            Reply(
                text=card_text(test, ctx.clock, teacher_name=teacher_name, submissions=submissions),
                reply_markup=manage_card_kb(test.id),
            )
        )
    return StepOutcome.reply(*replies)


@actions.command(BTN_VIEW_RESULTS)
async def view_results(ctx: StepContext) -> StepOutcome:
    denied = await _require_teacher(ctx)
    if denied is not None:
        return denied

    tests = await list_tests_by_owner(ctx.db, ctx.identity)
    if not tests:
        return StepOutcome.reply(NO_TESTS)

    return StepOutcome.reply(
        Reply(
            text="📈 Which test's results do you want to see?",
            reply_markup=results_list_kb([(t.id, t.title) for t in tests]),
        )
    )


@actions.button(ACTION_MANAGE)
async def manage_test(ctx: StepContext) -> StepOutcome:
    test, denied = await load_managed_test(ctx)
    if denied is not None:
        return denied

    submissions = await count_results(ctx.db, test.id)
    return StepOutcome.reply(
        Reply(
            text=card_text(test, ctx.clock, submissions=submissions),
            reply_markup=manage_card_kb(test.id),
        )
    )


@actions.button(ACTION_RESULTS)
async def show_results(ctx: StepContext) -> StepOutcome:
    test, denied = await load_managed_test(ctx)
    if denied is not None:
        return denied

    rows = await list_results_with_users(ctx.db, test.id)
    summary = summarize_results(rows)
    if summary is None:
        return StepOutcome.reply(NO_RESULTS)

    lines = [f"📊 <b>{html.quote(test.title)}</b> results:", ""]
    for row in order_by_submission(rows):
        marker = BAND_MARKERS[band_for(row.score)]
        lines.append(f"{marker} {html.quote(row.full_name or 'Unknown')}: {row.score:.1f}%")

    lines += [
        "",
        f"Participants: {summary.count}",
        f"Mean: {summary.mean:.1f}% · Max: {summary.max:.1f}% · Min: {summary.min:.1f}%",
        f"{BAND_MARKERS[Band.EXCELLENT]} {summary.band_counts[Band.EXCELLENT]}  "
        f"{BAND_MARKERS[Band.GOOD]} {summary.band_counts[Band.GOOD]}  "
        f"{BAND_MARKERS[Band.POOR]} {summary.band_counts[Band.POOR]}",
    ]
    return StepOutcome.reply(Reply(text="\n".join(lines), reply_markup=results_view_kb(test.id)))


@actions.button(ACTION_DOWNLOAD)
async def download_results(ctx: StepContext) -> StepOutcome:
    test, denied = await load_managed_test(ctx)
    if denied is not None:
        return denied

    rows = await list_results_with_users(ctx.db, test.id)
    author = await get_user(ctx.db, test.created_by)
    report = build_results_report(
        test,
        rows,
        author_name=author.full_name if author else None,
        clock=ctx.clock,
        generated_at=ctx.now,
    )
    if report is None:
        return StepOutcome.reply(NO_RESULTS)

    return StepOutcome.reply(
        Reply(document=Document(data=report.content, filename=report.filename, caption=report.caption)),
        "✅ Results exported.",
    )


@actions.button(ACTION_DELETE)
async def delete_test(ctx: StepContext) -> StepOutcome:
    test, denied = await load_managed_test(ctx)
    if denied is not None:
        return denied

    await delete_test_cascade(ctx.db, test.id)
    log.info("Test %s deleted by %s", test.id, ctx.identity)
    return StepOutcome.reply("✅ Test deleted.")


@actions.button(ACTION_EDIT)
async def edit_test(ctx: StepContext) -> StepOutcome:
    test, denied = await load_managed_test(ctx)
    if denied is not None:
        return denied
    return StepOutcome.start(DialogKind.TEST_EDITING, test_id=test.id)
