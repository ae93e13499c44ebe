from assessbot.config import Settings
from assessbot.database.models import UserRole
from assessbot.database.repo.users import get_user
from assessbot.engine.dialog_engine import DialogEngine
from assessbot.engine.state import DialogKind, DialogState
from assessbot.utils.texts import NOT_REGISTERED

from conftest import ADMIN, STUDENT, TEACHER, Chat, FakeGate


async def _user(db, identity):
    async with db.session() as s:
        return await get_user(s, identity)


async def test_register_student(chat, db):
    await chat.send(STUDENT, "/start")
    assert chat.session(STUDENT).state == DialogState(DialogKind.REGISTRATION, 2)

    await chat.send(STUDENT, "Sam")
    await chat.send(STUDENT, "Stone")
    assert chat.session(STUDENT).scratch == {"first_name": "Sam", "last_name": "Stone"}

    await chat.share_contact(STUDENT, STUDENT, "+100")

    user = await _user(db, STUDENT)
    assert (user.first_name, user.last_name, user.phone_number) == ("Sam", "Stone", "+100")
    assert user.role == UserRole.STUDENT
    assert chat.session(STUDENT).is_idle
    assert "registered as a student" in chat.last(STUDENT)


async def test_allowlisted_teacher_and_admin_get_teacher_role(chat, db):
    await chat.register(TEACHER)
    await chat.register(ADMIN)
    assert (await _user(db, TEACHER)).role == UserRole.TEACHER
    assert (await _user(db, ADMIN)).role == UserRole.TEACHER


async def test_foreign_contact_never_registers(chat, db):
    await chat.send(STUDENT, "/start")
    await chat.send(STUDENT, "Sam")
    await chat.send(STUDENT, "Stone")

    await chat.share_contact(STUDENT, 999)
    await chat.share_contact(STUDENT, None)
    await chat.send(STUDENT, "+100")

    assert await _user(db, STUDENT) is None
    assert chat.session(STUDENT).state == DialogState(DialogKind.REGISTRATION, 4)
    assert "Share phone number" in chat.last(STUDENT)


async def test_name_steps_reject_non_text(chat):
    await chat.send(STUDENT, "/start")
    await chat.share_contact(STUDENT, STUDENT)
    assert chat.session(STUDENT).state == DialogState(DialogKind.REGISTRATION, 2)
    assert "first name" in chat.last(STUDENT)


async def test_start_when_registered_shows_menu(chat):
    await chat.register(STUDENT)
    await chat.send(STUDENT, "/start")
    assert chat.session(STUDENT).is_idle
    assert "Welcome back" in chat.last(STUDENT)


async def test_unregistered_text_asks_to_register(chat):
    await chat.send(STUDENT, "hello")
    assert chat.last(STUDENT) == NOT_REGISTERED


async def test_membership_gate(db, transport):
    settings = Settings(bot_token="123456:TEST", admin_id=ADMIN, required_channels=("@school",))
    gate = FakeGate(missing=["@school"])
    chat = Chat(DialogEngine(db=db, settings=settings, transport=transport, gate=gate), transport, db)

    await chat.send(STUDENT, "/start")
    assert chat.session(STUDENT).state == DialogState(DialogKind.REGISTRATION, 1)
    assert "@school" in chat.last(STUDENT)

    gate.missing = []
    await chat.send(STUDENT, "done")
    assert chat.session(STUDENT).state == DialogState(DialogKind.REGISTRATION, 2)

    # the admin is never gated
    await chat.send(ADMIN, "/start")
    assert ADMIN not in gate.calls
