# assessbot/dialogs/answering.py
from __future__ import annotations

import logging

from assessbot.database.repo.results_repo import create_result_once
from assessbot.database.repo.tests_repo import get_test
from assessbot.engine.context import StepContext
from assessbot.engine.outcome import StepOutcome
from assessbot.engine.registry import Dialog
from assessbot.engine.state import DialogKind
from assessbot.services.aggregation import BAND_MARKERS, Band, band_for
from assessbot.services.scoring import score_submission
from assessbot.utils.answer_parser import ANSWER_FORMAT_HINT, parse_answer_lines

log = logging.getLogger(__name__)

answering_dialog = Dialog(DialogKind.AWAITING_ANSWERS)

_BAND_EMOJI = {
    Band.EXCELLENT: "🎉",
    Band.GOOD: "👍",
    Band.POOR: "😕",
}

BAD_SUBMISSION = f"❌ Invalid format. Send all answers in one message:\n{ANSWER_FORMAT_HINT}"


@answering_dialog.step(1)
async def submit(ctx: StepContext) -> StepOutcome:
    if ctx.text is None:
        return StepOutcome.reprompt(BAD_SUBMISSION)

    test = await get_test(ctx.db, ctx.session.test_id)
    if test is None:
        return StepOutcome.abort("❌ Test not found.")
    if test.deadline <= ctx.now:
        return StepOutcome.abort("⌛️ The deadline for this test has passed.")

    answers = parse_answer_lines(ctx.text)
    if not answers:
        return StepOutcome.reprompt(BAD_SUBMISSION)

    if len(answers) != test.question_count:
        return StepOutcome.reprompt(
            "❌ You did not answer every question.\n"
            f"Questions: {test.question_count}\n"
            f"Your answers: {len(answers)}\n\n"
            "Send all answers in one message."
        )

    score = score_submission(answers, test.answers)
    result = await create_result_once(
        ctx.db,
        test_id=test.id,
        user_id=ctx.identity,
        answers=answers,
        score=score.percentage,
        correct_count=score.correct,
        submitted_at=ctx.now,
    )
    if result is None:
        return StepOutcome.abort("ℹ️ You have already submitted this test.")

    log.info("Result for test %s by %s: %.1f", test.id, ctx.identity, score.percentage)

    band = band_for(score.percentage)
    return StepOutcome.finish(
        f"{_BAND_EMOJI[band]} <b>Test result</b>\n\n"
        f"{BAND_MARKERS[band]} Score: {score.percentage:.1f}%\n"
        f"✅ Correct answers: {score.correct}\n"
        f"❌ Wrong answers: {score.wrong}"
    )
