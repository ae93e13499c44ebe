# assessbot/database/repo/tests_repo.py
from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from assessbot.database.models import Test, TestResult
from assessbot.utils.dates import utc_now

# Fields a single edit may replace; one per edit session.
EDITABLE_FIELDS = ("title", "answers", "deadline")
TITLE_MAX_LEN = 256


async def get_test(session: AsyncSession, test_id: int) -> Test | None:
    return await session.get(Test, test_id, populate_existing=True)


async def create_test(
    session: AsyncSession,
    *,
    title: str,
    answers: list[str],
    deadline: datetime,
    created_by: int,
) -> Test:
    if not answers:
        raise ValueError("Answer key must not be empty")

    now = utc_now()
    test = Test(
        title=title,
        answers=list(answers),
        deadline=deadline,
        created_by=created_by,
        created_at=now,
        updated_at=now,
    )
    session.add(test)
    await session.flush()  # test.id
    return test


async def list_tests_by_owner(session: AsyncSession, owner_id: int) -> list[Test]:
    q = (
        select(Test)
        .where(Test.created_by == owner_id)
        .order_by(Test.created_at.asc(), Test.id.asc())
    )
    res = await session.execute(q)
    return list(res.scalars().all())


async def list_open_tests(session: AsyncSession, now: datetime) -> list[Test]:
    q = (
        select(Test)
        .where(Test.deadline > now)
        .order_by(Test.created_at.asc(), Test.id.asc())
    )
    res = await session.execute(q)
    return list(res.scalars().all())


async def update_test_field(session: AsyncSession, test_id: int, field: str, value: Any) -> bool:
    """
    Partial update: replaces exactly one field (plus updated_at).
    Returns False if the test no longer exists.
    """
    if field not in EDITABLE_FIELDS:
        raise ValueError(f"Field {field!r} is not editable")
    if field == "answers" and not value:
        raise ValueError("Answer key must not be empty")

    res = await session.execute(
        update(Test)
        .where(Test.id == test_id)
        .values({field: value, "updated_at": utc_now()})
    )
    return (res.rowcount or 0) > 0


async def delete_test_cascade(session: AsyncSession, test_id: int) -> bool:
    """
    Deletes a test and all of its results. Returns False if the test did not exist.
    """
    res = await session.execute(delete(Test).where(Test.id == test_id))
    # FK cascade covers engines that enforce it; the explicit delete covers the rest
    await session.execute(delete(TestResult).where(TestResult.test_id == test_id))
    return (res.rowcount or 0) > 0
