import pytest
from sqlalchemy import text

from assessbot.database.models import UserRole
from assessbot.database.repo.users import create_user, get_user


async def _add(s, telegram_id):
    return await create_user(
        s,
        telegram_id=telegram_id,
        first_name="Sam",
        last_name="Stone",
        phone_number="+100",
        role=UserRole.STUDENT,
    )


async def test_transaction_commits(db):
    async with db.transaction() as s:
        await _add(s, 10)

    async with db.session() as s:
        assert (await get_user(s, 10)).full_name == "Sam Stone"


async def test_transaction_rolls_back_on_error(db):
    with pytest.raises(RuntimeError):
        async with db.transaction() as s:
            await _add(s, 11)
            raise RuntimeError("handler failed")

    async with db.session() as s:
        assert await get_user(s, 11) is None


async def test_duplicate_user_is_rejected(db):
    async with db.transaction() as s:
        assert await _add(s, 12) is not None
    async with db.transaction() as s:
        assert await _add(s, 12) is None


async def test_sqlite_enforces_foreign_keys(db):
    async with db.session() as s:
        res = await s.execute(text("PRAGMA foreign_keys"))
        assert res.scalar() == 1
