import asyncio
from datetime import timedelta

import pytest

from assessbot.engine.events import EventKind, InboundEvent
from assessbot.engine.registry import ActionTable, Dialog, build_step_table, command_key, parse_button
from assessbot.engine.state import DialogKind, DialogState
from assessbot.keyboards.cards import ACTION_TAKE, card_token
from assessbot.keyboards.main import BTN_CREATE_TEST, BTN_MY_RESULTS
from assessbot.scheduler.jobs import expire_stale_dialogs
from assessbot.utils.dates import utc_now
from assessbot.utils.texts import EXPIRED_NOTICE, GENERIC_FAILURE

from conftest import STUDENT, TEACHER


def _text(identity, text):
    return InboundEvent(identity=identity, kind=EventKind.TEXT, text=text)


async def test_same_identity_events_keep_arrival_order(chat, engine):
    await engine.handle(InboundEvent(identity=STUDENT, kind=EventKind.COMMAND, text="/start"))

    await asyncio.gather(
        engine.handle(_text(STUDENT, "Sam")),
        engine.handle(_text(STUDENT, "Stone")),
        engine.handle(_text(TEACHER, "hello")),
    )

    session = chat.session(STUDENT)
    assert session.state == DialogState(DialogKind.REGISTRATION, 4)
    assert session.scratch == {"first_name": "Sam", "last_name": "Stone"}


async def test_other_identities_are_not_blocked(chat, engine):
    async with engine.sessions.lock(STUDENT):
        await asyncio.wait_for(engine.handle(_text(TEACHER, "hello")), timeout=5)
    assert chat.transport.texts(TEACHER)


async def test_failure_leaves_session_unchanged(classroom):
    chat = classroom

    async def boom(*args, **kwargs):
        raise RuntimeError("db is down")

    await chat.send(TEACHER, BTN_CREATE_TEST)
    await chat.send(TEACHER, "Physics")
    await chat.send(TEACHER, "1-a\n2-b")

    with pytest.MonkeyPatch.context() as m:
        m.setattr("assessbot.dialogs.authoring.create_test", boom)
        await chat.send(TEACHER, "01.01.2099 12:00")

    assert chat.last(TEACHER) == GENERIC_FAILURE
    session = chat.session(TEACHER)
    assert session.state == DialogState(DialogKind.TEST_AUTHORING, 4)
    assert session.scratch == {"title": "Physics", "answers": ["1-a", "2-b"]}

    # retry works
    await chat.send(TEACHER, "01.01.2099 12:00")
    assert chat.session(TEACHER).is_idle
    assert "✅ Test created!" in chat.transport.texts(TEACHER)


async def test_send_failure_does_not_raise(classroom):
    chat = classroom
    chat.transport.fail = True
    await chat.send(STUDENT, BTN_MY_RESULTS)
    chat.transport.fail = False

    await chat.send(STUDENT, BTN_MY_RESULTS)
    assert "no results" in chat.last(STUDENT)


async def test_command_abandons_dialog(classroom):
    chat = classroom
    await chat.send(TEACHER, BTN_CREATE_TEST)
    await chat.send(TEACHER, "Physics")

    await chat.send(TEACHER, "/cancel")
    assert chat.session(TEACHER).is_idle
    assert chat.session(TEACHER).scratch == {}
    assert "Cancelled" in chat.last(TEACHER)


async def test_menu_label_abandons_awaiting_answers(classroom):
    chat = classroom
    test_id = await chat.create_test(TEACHER)
    await chat.press(STUDENT, card_token(ACTION_TAKE, test_id))

    await chat.send(STUDENT, BTN_MY_RESULTS)
    assert chat.session(STUDENT).is_idle
    assert "no results" in chat.last(STUDENT)


async def test_stale_dialog_expires_on_next_event(classroom):
    chat = classroom
    await chat.send(TEACHER, BTN_CREATE_TEST)
    chat.session(TEACHER).touched_at = utc_now() - timedelta(hours=1)
    chat.transport.reset()

    await chat.send(TEACHER, "Physics")
    assert chat.session(TEACHER).is_idle
    texts = chat.transport.texts(TEACHER)
    assert texts[0] == EXPIRED_NOTICE
    assert "menu" in texts[-1]


async def test_sweep_job_expires_and_notifies(classroom, engine):
    chat = classroom
    await chat.send(TEACHER, BTN_CREATE_TEST)
    chat.session(TEACHER).touched_at = utc_now() - timedelta(hours=1)

    assert await expire_stale_dialogs(engine) == [TEACHER]
    assert chat.last(TEACHER) == EXPIRED_NOTICE
    assert engine.sessions.get(TEACHER) is None


async def test_unknown_command(chat):
    await chat.send(STUDENT, "/nope")
    assert "Unknown command" in chat.last(STUDENT)


def test_step_table_rejects_gaps():
    dialog = Dialog(DialogKind.REGISTRATION)

    @dialog.step(1)
    async def one(ctx):
        ...

    @dialog.step(3)
    async def three(ctx):
        ...

    with pytest.raises(ValueError):
        build_step_table([dialog])


def test_duplicate_registrations_are_rejected():
    actions = ActionTable()

    @actions.button("test:take")
    async def take(ctx):
        ...

    with pytest.raises(ValueError):
        actions.button("test:take")(take)


def test_tokens():
    assert parse_button("test:edit:12") == ("test:edit", "12")
    assert parse_button("admin:add_teacher") == ("admin:add_teacher", None)
    assert command_key("/start@assess_bot payload") == "/start"
    assert command_key(" 📝 Create test ") == "📝 Create test"
