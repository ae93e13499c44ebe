# assessbot/utils/texts.py
from __future__ import annotations

from aiogram import html

from assessbot.database.models import Test
from assessbot.utils.answer_parser import ANSWER_FORMAT_HINT
from assessbot.utils.dates import TimeProvider

GENERIC_FAILURE = "❌ Something went wrong. Please try again."
NOT_REGISTERED = "ℹ️ You are not registered yet. Send /start to register."
NO_TEACHER_RIGHTS = "⛔ You don't have teacher rights."
NO_ADMIN_RIGHTS = "⛔ You are not allowed to use admin commands."
NOT_OWNER = "⛔ You can only manage tests you created."
TEST_NOT_FOUND = "❌ Test not found."
EXPIRED_NOTICE = "⌛️ Your unfinished dialog expired. Use the menu to start again."

ASK_ANSWER_KEY = f"📋 Send the answer key, one answer per line, for example:\n{ANSWER_FORMAT_HINT}"
ASK_DEADLINE = "⏰ Send the deadline in DD.MM.YYYY HH:mm format:"
BAD_ANSWER_KEY = f"❌ Invalid format. Send one answer per line, for example:\n{ANSWER_FORMAT_HINT}"
BAD_DEADLINE = "❌ Invalid date. Send the deadline in DD.MM.YYYY HH:mm format:"


def card_text(
    test: Test,
    clock: TimeProvider,
    *,
    teacher_name: str | None = None,
    submissions: int | None = None,
) -> str:
    lines = [f"📋 <b>Test:</b> {html.quote(test.title)}"]
    if teacher_name is not None:
        lines.append(f"👨‍🏫 <b>Teacher:</b> {html.quote(teacher_name or 'Unknown')}")
    lines.append(f"📝 <b>Questions:</b> {test.question_count}")
    if submissions is not None:
        lines.append(f"✍️ <b>Submissions:</b> {submissions}")
    lines.append(f"⏰ <b>Deadline:</b> {clock.format(test.deadline)}")
    return "\n".join(lines)
