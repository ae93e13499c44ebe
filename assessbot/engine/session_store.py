# assessbot/engine/session_store.py
from __future__ import annotations

import asyncio
import copy
import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from typing import Any

from assessbot.engine.state import DialogKind, DialogState
from assessbot.utils.dates import utc_now

log = logging.getLogger(__name__)

# Dialogs that cannot exist without a scratch field (the test they work on).
_DEFINING_FIELDS: dict[DialogKind, str] = {
    DialogKind.TEST_EDITING: "test_id",
    DialogKind.AWAITING_ANSWERS: "test_id",
}


@dataclass
class Session:
    """
    Conversation context of one identity. Lives in process memory only.
    """

    identity: int
    kind: DialogKind = DialogKind.NONE
    step: int = 0
    scratch: dict[str, Any] = field(default_factory=dict)
    touched_at: datetime = field(default_factory=utc_now)

    @property
    def is_idle(self) -> bool:
        return self.kind is DialogKind.NONE

    @property
    def state(self) -> DialogState | None:
        if self.is_idle:
            return None
        return DialogState(self.kind, self.step)

    @property
    def test_id(self) -> int | None:
        return self.scratch.get("test_id")

    def begin(self, kind: DialogKind, **fields: Any) -> None:
        self.scratch.clear()
        self.kind = kind
        self.step = 1
        self.scratch.update(fields)

    def advance(self, **fields: Any) -> None:
        self.scratch.update(fields)
        self.step += 1

    def reset(self) -> None:
        self.kind = DialogKind.NONE
        self.step = 0
        self.scratch.clear()

    def drop(self, *fields: str) -> None:
        for name in fields:
            self.scratch.pop(name, None)
        defining = _DEFINING_FIELDS.get(self.kind)
        if defining is not None and defining not in self.scratch:
            self.reset()

    def copy(self) -> "Session":
        return replace(self, scratch=copy.deepcopy(self.scratch))

    def is_expired(self, now: datetime, ttl: timedelta) -> bool:
        return not self.is_idle and now - self.touched_at > ttl


class SessionStore:
    """
    One Session per identity plus one asyncio.Lock per identity.

    Holding `lock(identity)` serializes that identity's events; asyncio.Lock
    wakes waiters in FIFO order, so events are processed in arrival order.
    Different identities never share a lock.
    """

    def __init__(self) -> None:
        self._sessions: dict[int, Session] = {}
        self._locks: dict[int, asyncio.Lock] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, identity: int) -> bool:
        return identity in self._sessions

    def lock(self, identity: int) -> asyncio.Lock:
        lock = self._locks.get(identity)
        if lock is None:
            lock = self._locks[identity] = asyncio.Lock()
        return lock

    def get(self, identity: int) -> Session | None:
        return self._sessions.get(identity)

    def get_or_create(self, identity: int) -> Session:
        if identity is None:
            raise ValueError("identity is required")
        session = self._sessions.get(identity)
        if session is None:
            session = self._sessions[identity] = Session(identity=identity)
        return session

    def save(self, session: Session) -> None:
        self._sessions[session.identity] = session

    def set(self, identity: int, name: str, value: Any) -> None:
        self.get_or_create(identity).scratch[name] = value

    def clear(self, identity: int, *fields: str) -> None:
        """
        Removes the named scratch fields. Without field names, or once the
        field defining the active dialog is gone, the session goes back to idle.
        """
        session = self.get_or_create(identity)
        if not fields:
            session.reset()
            return
        session.drop(*fields)

    def expire_stale(self, now: datetime, ttl: timedelta) -> list[int]:
        """
        Resets dialogs idle for longer than `ttl` and evicts idle sessions of the
        same age. Identities currently being handled are skipped.
        Returns the identities whose dialog was abandoned.
        """
        expired: list[int] = []
        for identity, session in list(self._sessions.items()):
            lock = self._locks.get(identity)
            if lock is not None and lock.locked():
                continue
            if now - session.touched_at <= ttl:
                continue

            if not session.is_idle:
                log.info("Dialog %s of %s expired", session.state, identity)
                expired.append(identity)

            del self._sessions[identity]
            self._locks.pop(identity, None)
        return expired
