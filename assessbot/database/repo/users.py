# assessbot/database/repo/users.py
from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from assessbot.database.models import User, UserRole
from assessbot.utils.dates import utc_now


async def get_user(session: AsyncSession, telegram_id: int) -> User | None:
    res = await session.execute(select(User).where(User.telegram_id == telegram_id))
    return res.scalar_one_or_none()


async def create_user(
    session: AsyncSession,
    *,
    telegram_id: int,
    first_name: str,
    last_name: str,
    phone_number: str,
    role: UserRole,
) -> User | None:
    """
    Inserts the user exactly once (unique telegram_id).
    Returns None if the identity is already registered.
    """
    user = User(
        telegram_id=telegram_id,
        first_name=first_name,
        last_name=last_name,
        phone_number=phone_number,
        role=role,
    )
    session.add(user)

    try:
        await session.flush()
    except IntegrityError:
        await session.rollback()
        return None
    return user


async def list_users(session: AsyncSession) -> list[User]:
    res = await session.execute(select(User).order_by(User.created_at.asc(), User.id.asc()))
    return list(res.scalars().all())


async def set_user_role(session: AsyncSession, telegram_id: int, role: UserRole) -> bool:
    """Returns False when no user has this identity."""
    res = await session.execute(
        update(User)
        .where(User.telegram_id == telegram_id)
        .values(role=role, updated_at=utc_now())
    )
    return (res.rowcount or 0) > 0
