# assessbot/services/auth.py
from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from assessbot.config import Settings
from assessbot.database.models import User, UserRole
from assessbot.database.repo.users import get_user


@dataclass(frozen=True, slots=True)
class AuthResult:
    user: User | None
    is_admin: bool
    is_teacher: bool

    @property
    def is_registered(self) -> bool:
        return self.user is not None

    @property
    def role(self) -> UserRole:
        return UserRole.TEACHER if self.is_teacher else UserRole.STUDENT


class AuthService:
    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def seed_role(self, telegram_id: int) -> UserRole:
        """Role given at registration time."""
        if self.settings.is_seed_teacher(telegram_id):
            return UserRole.TEACHER
        return UserRole.STUDENT

    async def resolve(self, session: AsyncSession, telegram_id: int) -> AuthResult:
        user = await get_user(session, telegram_id)

        # Admin comes from env, always takes precedence.
        if self.settings.is_admin(telegram_id):
            return AuthResult(user=user, is_admin=True, is_teacher=True)

        # Otherwise the stored role decides; the env allowlist only seeds it.
        is_teacher = user is not None and user.role == UserRole.TEACHER
        return AuthResult(user=user, is_admin=False, is_teacher=is_teacher)

    def can_manage(self, auth: AuthResult, owner_id: int, telegram_id: int) -> bool:
        return auth.is_admin or owner_id == telegram_id
