# assessbot/database/repo/results_repo.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from assessbot.database.models import Test, TestResult, User


@dataclass(frozen=True, slots=True)
class ResultRow:
    result_id: int
    test_id: int
    user_id: int
    first_name: str
    last_name: str
    score: float
    correct_count: int
    question_count: int
    submitted_at: datetime

    @property
    def full_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.last_name) if p).strip()

    @property
    def wrong_count(self) -> int:
        return self.question_count - self.correct_count


@dataclass(frozen=True, slots=True)
class MyResultRow:
    result_id: int
    test_id: int
    title: str
    score: float
    submitted_at: datetime


async def get_result(session: AsyncSession, test_id: int, user_id: int) -> TestResult | None:
    q = select(TestResult).where(TestResult.test_id == test_id, TestResult.user_id == user_id)
    res = await session.execute(q)
    return res.scalar_one_or_none()


async def create_result_once(
    session: AsyncSession,
    *,
    test_id: int,
    user_id: int,
    answers: list[str],
    score: float,
    correct_count: int,
    submitted_at: datetime,
) -> TestResult | None:
    """
    Creates a TestResult exactly once (unique constraint: test_id + user_id).
    Returns None if the user already has a result for this test.
    """
    result = TestResult(
        test_id=test_id,
        user_id=user_id,
        answers=list(answers),
        score=score,
        correct_count=correct_count,
        submitted_at=submitted_at,
    )
    session.add(result)

    try:
        await session.flush()  # may raise IntegrityError if duplicate attempt
    except IntegrityError:
        await session.rollback()
        return None
    return result


async def count_results(session: AsyncSession, test_id: int) -> int:
    res = await session.execute(
        select(func.count(TestResult.id)).where(TestResult.test_id == test_id)
    )
    return int(res.scalar_one() or 0)


async def list_results_with_users(session: AsyncSession, test_id: int) -> list[ResultRow]:
    """
    Results of one test joined with their users, in insertion order.
    Display orderings are applied by services.aggregation.
    """
    q = (
        select(
            TestResult.id,
            TestResult.test_id,
            TestResult.user_id,
            User.first_name,
            User.last_name,
            TestResult.score,
            TestResult.correct_count,
            TestResult.answers,
            TestResult.submitted_at,
        )
        .join(User, User.telegram_id == TestResult.user_id)
        .where(TestResult.test_id == test_id)
        .order_by(TestResult.id.asc())
    )
    res = await session.execute(q)

    rows: list[ResultRow] = []
    for result_id, t_id, user_id, first_name, last_name, score, correct, answers, submitted_at in res.all():
        rows.append(
            ResultRow(
                result_id=int(result_id),
                test_id=int(t_id),
                user_id=int(user_id),
                first_name=first_name or "",
                last_name=last_name or "",
                score=float(score or 0),
                correct_count=int(correct or 0),
                question_count=len(answers or []),
                submitted_at=submitted_at,
            )
        )
    return rows


async def list_results_for_user(session: AsyncSession, user_id: int) -> list[MyResultRow]:
    q = (
        select(
            TestResult.id,
            TestResult.test_id,
            Test.title,
            TestResult.score,
            TestResult.submitted_at,
        )
        .join(Test, Test.id == TestResult.test_id)
        .where(TestResult.user_id == user_id)
        .order_by(TestResult.id.asc())
    )
    res = await session.execute(q)

    return [
        MyResultRow(
            result_id=int(result_id),
            test_id=int(test_id),
            title=title,
            score=float(score or 0),
            submitted_at=submitted_at,
        )
        for result_id, test_id, title, score, submitted_at in res.all()
    ]
