# assessbot/actions/common.py
from __future__ import annotations

from assessbot.database.models import Test
from assessbot.database.repo.tests_repo import get_test
from assessbot.engine.context import StepContext
from assessbot.engine.outcome import StepOutcome
from assessbot.utils.texts import NOT_OWNER, NOT_REGISTERED, TEST_NOT_FOUND


async def require_registered(ctx: StepContext) -> StepOutcome | None:
    """Returns the reply to send when the sender is not registered, else None."""
    auth = await ctx.auth()
    if not auth.is_registered:
        return StepOutcome.reply(NOT_REGISTERED)
    return None


async def load_managed_test(ctx: StepContext) -> tuple[Test | None, StepOutcome | None]:
    """
    Resolves the test referenced by the button and checks that the sender
    owns it (or is the admin). Returns (test, None) or (None, reply).
    """
    denied = await require_registered(ctx)
    if denied is not None:
        return None, denied

    test_id = ctx.arg_id()
    test = await get_test(ctx.db, test_id) if test_id is not None else None
    if test is None:
        return None, StepOutcome.reply(TEST_NOT_FOUND)

    auth = await ctx.auth()
    if not ctx.auth_service.can_manage(auth, test.created_by, ctx.identity):
        return None, StepOutcome.reply(NOT_OWNER)
    return test, None
