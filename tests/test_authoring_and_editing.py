from datetime import datetime

from assessbot.database.repo.results_repo import get_result
from assessbot.database.repo.tests_repo import get_test
from assessbot.engine.state import DialogKind, DialogState
from assessbot.keyboards.cards import ACTION_EDIT, ACTION_TAKE, card_token
from assessbot.keyboards.main import BTN_CREATE_TEST
from assessbot.utils.texts import BAD_ANSWER_KEY, BAD_DEADLINE, NO_TEACHER_RIGHTS, NOT_OWNER

from conftest import ADMIN, STUDENT, TEACHER


async def _test(db, test_id):
    async with db.session() as s:
        return await get_test(s, test_id)


async def test_create_test(classroom, db):
    chat = classroom
    test_id = await chat.create_test(TEACHER, title="Physics", key="1-A\nnot an answer\n2-c\n3-d")

    test = await _test(db, test_id)
    assert test.title == "Physics"
    assert test.answers == ["1-a", "2-c", "3-d"]
    assert test.deadline == datetime(2099, 1, 1, 12, 0)
    assert test.created_by == TEACHER
    assert chat.session(TEACHER).is_idle
    assert "✅ Test created!" in chat.transport.texts(TEACHER)


async def test_authoring_reprompts_on_bad_input(classroom):
    chat = classroom
    await chat.send(TEACHER, BTN_CREATE_TEST)
    await chat.send(TEACHER, "Physics")

    await chat.send(TEACHER, "a\nb\nc")
    assert chat.last(TEACHER) == BAD_ANSWER_KEY
    assert chat.session(TEACHER).state == DialogState(DialogKind.TEST_AUTHORING, 3)

    await chat.send(TEACHER, "1-a")
    await chat.send(TEACHER, "2099-01-01 12:00")
    assert chat.last(TEACHER) == BAD_DEADLINE
    assert chat.session(TEACHER).state == DialogState(DialogKind.TEST_AUTHORING, 4)
    assert chat.session(TEACHER).scratch == {"title": "Physics", "answers": ["1-a"]}


async def test_student_cannot_author(classroom):
    chat = classroom
    await chat.send(STUDENT, BTN_CREATE_TEST)
    assert chat.last(STUDENT) == NO_TEACHER_RIGHTS
    assert chat.session(STUDENT).is_idle


async def test_edit_deadline_only(classroom, db):
    chat = classroom
    test_id = await chat.create_test(TEACHER, title="Physics", key="1-a\n2-b")
    before = await _test(db, test_id)

    await chat.press(TEACHER, card_token(ACTION_EDIT, test_id))
    assert chat.session(TEACHER).state == DialogState(DialogKind.TEST_EDITING, 2)
    await chat.send(TEACHER, "3")
    await chat.send(TEACHER, "02.02.2099 10:00")

    after = await _test(db, test_id)
    assert after.deadline == datetime(2099, 2, 2, 10, 0)
    assert after.title == before.title
    assert after.answers == before.answers
    assert chat.session(TEACHER).is_idle


async def test_edit_title_only(classroom, db):
    chat = classroom
    test_id = await chat.create_test(TEACHER, title="Physics", key="1-a\n2-b")

    await chat.press(TEACHER, card_token(ACTION_EDIT, test_id))
    await chat.send(TEACHER, "1")
    await chat.send(TEACHER, "Physics II")

    after = await _test(db, test_id)
    assert after.title == "Physics II"
    assert after.answers == ["1-a", "2-b"]
    assert after.deadline == datetime(2099, 1, 1, 12, 0)


async def test_edit_answers_validates_like_authoring(classroom, db):
    chat = classroom
    test_id = await chat.create_test(TEACHER, key="1-a\n2-b")

    await chat.press(TEACHER, card_token(ACTION_EDIT, test_id))
    await chat.send(TEACHER, "2")
    await chat.send(TEACHER, "nothing valid")
    assert chat.last(TEACHER) == BAD_ANSWER_KEY
    assert chat.session(TEACHER).state == DialogState(DialogKind.TEST_EDITING, 3)

    await chat.send(TEACHER, "1-c\n2-d\n3-a")
    after = await _test(db, test_id)
    assert after.answers == ["1-c", "2-d", "3-a"]
    assert after.title == "Algebra"
    assert after.deadline == datetime(2099, 1, 1, 12, 0)


async def test_new_answer_key_keeps_existing_scores(classroom, db):
    chat = classroom
    test_id = await chat.create_test(TEACHER, key="1-a\n2-b")
    await chat.press(STUDENT, card_token(ACTION_TAKE, test_id))
    await chat.send(STUDENT, "1-a\n2-b")

    await chat.press(TEACHER, card_token(ACTION_EDIT, test_id))
    await chat.send(TEACHER, "2")
    await chat.send(TEACHER, "1-c\n2-d")
    assert (await _test(db, test_id)).answers == ["1-c", "2-d"]

    async with db.session() as s:
        result = await get_result(s, test_id, STUDENT)
    assert result.score == 100.0
    assert result.correct_count == 2
    assert result.answers == ["1-a", "2-b"]


async def test_edit_bad_choice_and_cancel(classroom, db):
    chat = classroom
    test_id = await chat.create_test(TEACHER)

    await chat.press(TEACHER, card_token(ACTION_EDIT, test_id))
    await chat.send(TEACHER, "7")
    assert chat.session(TEACHER).state == DialogState(DialogKind.TEST_EDITING, 2)

    await chat.send(TEACHER, "cancel")
    assert chat.session(TEACHER).is_idle
    assert (await _test(db, test_id)).title == "Algebra"


async def test_only_owner_or_admin_may_edit(classroom):
    chat = classroom
    test_id = await chat.create_test(TEACHER)

    await chat.press(STUDENT, card_token(ACTION_EDIT, test_id))
    assert chat.last(STUDENT) == NOT_OWNER
    assert chat.session(STUDENT).is_idle

    await chat.press(ADMIN, card_token(ACTION_EDIT, test_id))
    assert chat.session(ADMIN).state == DialogState(DialogKind.TEST_EDITING, 2)


async def test_edit_aborts_when_test_is_gone(classroom):
    chat = classroom
    test_id = await chat.create_test(TEACHER)

    await chat.press(TEACHER, card_token(ACTION_EDIT, test_id))
    await chat.send(TEACHER, "1")
    chat.session(TEACHER).scratch["test_id"] = test_id + 100
    await chat.send(TEACHER, "New title")

    assert chat.session(TEACHER).is_idle
    assert "not found" in chat.last(TEACHER)
