# assessbot/engine/events.py
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Protocol


class EventKind(str, enum.Enum):
    TEXT = "text"
    CONTACT = "contact"
    COMMAND = "command"  # /start, /cancel, menu labels
    BUTTON = "button"  # inline button press, payload in `data`


@dataclass(frozen=True, slots=True)
class Contact:
    user_id: int | None  # owner of the shared contact, None if not a Telegram user
    phone_number: str


@dataclass(frozen=True, slots=True)
class InboundEvent:
    identity: int
    kind: EventKind
    text: str | None = None
    contact: Contact | None = None
    data: str | None = None


@dataclass(frozen=True, slots=True)
class Document:
    data: bytes
    filename: str
    caption: str | None = None


@dataclass(frozen=True, slots=True)
class Reply:
    text: str | None = None
    reply_markup: Any = None
    document: Document | None = None


class Transport(Protocol):
    async def send_message(self, identity: int, text: str, reply_markup: Any = None) -> None: ...

    async def send_document(
        self,
        identity: int,
        data: bytes,
        filename: str,
        caption: str | None = None,
    ) -> None: ...


class MembershipGate(Protocol):
    async def missing_channels(self, identity: int) -> list[str]: ...
