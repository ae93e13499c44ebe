from __future__ import annotations

import pytest

from assessbot.config import Settings
from assessbot.database import Database
from assessbot.database.repo.tests_repo import list_tests_by_owner
from assessbot.engine.dialog_engine import DialogEngine
from assessbot.engine.events import Contact, EventKind, InboundEvent
from assessbot.keyboards.main import BTN_CREATE_TEST

ADMIN = 1
TEACHER = 2
STUDENT = 3
OTHER_STUDENT = 4

FUTURE = "01.01.2099 12:00"


class FakeTransport:
    """Records everything the engine sends."""

    def __init__(self):
        self.messages = []  # (identity, text, reply_markup)
        self.documents = []  # (identity, data, filename, caption)
        self.fail = False

    async def send_message(self, identity, text, reply_markup=None):
        if self.fail:
            raise RuntimeError("transport down")
        self.messages.append((identity, text, reply_markup))

    async def send_document(self, identity, data, filename, caption=None):
        if self.fail:
            raise RuntimeError("transport down")
        self.documents.append((identity, data, filename, caption))

    def texts(self, identity):
        return [text for i, text, _ in self.messages if i == identity]

    def last(self, identity):
        return self.texts(identity)[-1]

    def reset(self):
        self.messages.clear()
        self.documents.clear()


class FakeGate:
    def __init__(self, missing=()):
        self.missing = list(missing)
        self.calls = []

    async def missing_channels(self, identity):
        self.calls.append(identity)
        return list(self.missing)


class Chat:
    """Drives the engine the way the aiogram handlers do."""

    def __init__(self, engine: DialogEngine, transport: FakeTransport, db: Database):
        self.engine = engine
        self.transport = transport
        self.db = db

    async def send(self, identity, text):
        kind = EventKind.COMMAND if text.startswith("/") else EventKind.TEXT
        await self.engine.handle(InboundEvent(identity=identity, kind=kind, text=text))

    async def press(self, identity, data):
        await self.engine.handle(InboundEvent(identity=identity, kind=EventKind.BUTTON, data=data))

    async def share_contact(self, identity, owner, phone="+998901234567"):
        await self.engine.handle(
            InboundEvent(
                identity=identity,
                kind=EventKind.CONTACT,
                contact=Contact(user_id=owner, phone_number=phone),
            )
        )

    async def register(self, identity, first="Ann", last="Lee"):
        await self.send(identity, "/start")
        await self.send(identity, first)
        await self.send(identity, last)
        await self.share_contact(identity, identity)

    async def create_test(self, identity, title="Algebra", key="1-a\n2-b", deadline=FUTURE):
        await self.send(identity, BTN_CREATE_TEST)
        await self.send(identity, title)
        await self.send(identity, key)
        await self.send(identity, deadline)

        async with self.db.session() as s:
            tests = await list_tests_by_owner(s, identity)
        return tests[-1].id

    def session(self, identity):
        return self.engine.sessions.get_or_create(identity)

    def last(self, identity):
        return self.transport.last(identity)


@pytest.fixture
def settings():
    return Settings(bot_token="123456:TEST", admin_id=ADMIN, teacher_ids=(TEACHER,))


@pytest.fixture
async def db(tmp_path):
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'assessbot.db'}")
    await database.init_models()
    yield database
    await database.close()


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def engine(db, settings, transport):
    return DialogEngine(db=db, settings=settings, transport=transport)


@pytest.fixture
def chat(engine, transport, db):
    return Chat(engine, transport, db)


@pytest.fixture
async def classroom(chat):
    """Admin, one teacher and two students, all registered."""
    await chat.register(ADMIN, "Root", "Admin")
    await chat.register(TEACHER, "Tom", "Teach")
    await chat.register(STUDENT, "Sam", "Stone")
    await chat.register(OTHER_STUDENT, "Ola", "Oak")
    chat.transport.reset()
    return chat
