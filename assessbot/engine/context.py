# assessbot/engine/context.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from assessbot.config import Settings
from assessbot.engine.events import EventKind, InboundEvent, MembershipGate
from assessbot.engine.session_store import Session
from assessbot.services.auth import AuthResult, AuthService
from assessbot.utils.dates import TimeProvider


@dataclass(slots=True)
class StepContext:
    """Everything a step or action handler may look at for one inbound event."""

    event: InboundEvent
    session: Session
    db: AsyncSession
    settings: Settings
    auth_service: AuthService
    clock: TimeProvider
    now: datetime  # naive UTC
    gate: MembershipGate | None = None
    arg: str | None = None  # id part of a button token
    _auth: AuthResult | None = field(default=None, repr=False)

    @property
    def identity(self) -> int:
        return self.event.identity

    @property
    def scratch(self) -> dict[str, Any]:
        return self.session.scratch

    @property
    def text(self) -> str | None:
        """Message text, None for contacts and other non-text events."""
        if self.event.kind is not EventKind.TEXT:
            return None
        text = (self.event.text or "").strip()
        return text or None

    async def auth(self) -> AuthResult:
        if self._auth is None:
            self._auth = await self.auth_service.resolve(self.db, self.identity)
        return self._auth

    def forget_auth(self) -> None:
        self._auth = None

    def arg_id(self) -> int | None:
        try:
            return int(self.arg or "")
        except ValueError:
            return None
