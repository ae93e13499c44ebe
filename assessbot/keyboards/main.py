# assessbot/keyboards/main.py
from aiogram.types import KeyboardButton, ReplyKeyboardMarkup, ReplyKeyboardRemove

BTN_CREATE_TEST = "📝 Create test"
BTN_MANAGE_TESTS = "📊 Manage tests"
BTN_VIEW_RESULTS = "📈 View results"
BTN_AVAILABLE_TESTS = "📚 Available tests"
BTN_MY_RESULTS = "🎯 My results"
BTN_MANAGE_USERS = "👥 Manage users"

BTN_SHARE_CONTACT = "📱 Share phone number"

EDIT_TITLE = "1"
EDIT_ANSWERS = "2"
EDIT_DEADLINE = "3"
EDIT_CANCEL = "cancel"


def student_menu_kb() -> ReplyKeyboardMarkup:
    return ReplyKeyboardMarkup(
        keyboard=[
            [KeyboardButton(text=BTN_AVAILABLE_TESTS)],
            [KeyboardButton(text=BTN_MY_RESULTS)],
        ],
        resize_keyboard=True,
        input_field_placeholder="Choose an action…",
        one_time_keyboard=False,
    )


def teacher_menu_kb(*, is_admin: bool = False) -> ReplyKeyboardMarkup:
    rows = [
        [KeyboardButton(text=BTN_CREATE_TEST)],
        [KeyboardButton(text=BTN_MANAGE_TESTS)],
        [KeyboardButton(text=BTN_VIEW_RESULTS)],
    ]
    if is_admin:
        rows.append([KeyboardButton(text=BTN_MANAGE_USERS)])
    return ReplyKeyboardMarkup(
        keyboard=rows,
        resize_keyboard=True,
        input_field_placeholder="Choose an action…",
        one_time_keyboard=False,
    )


def main_menu_kb(*, is_teacher: bool, is_admin: bool = False) -> ReplyKeyboardMarkup:
    if is_teacher:
        return teacher_menu_kb(is_admin=is_admin)
    return student_menu_kb()


def share_contact_kb() -> ReplyKeyboardMarkup:
    return ReplyKeyboardMarkup(
        keyboard=[[KeyboardButton(text=BTN_SHARE_CONTACT, request_contact=True)]],
        resize_keyboard=True,
        one_time_keyboard=True,
    )


def edit_choice_kb() -> ReplyKeyboardMarkup:
    return ReplyKeyboardMarkup(
        keyboard=[
            [
                KeyboardButton(text=EDIT_TITLE),
                KeyboardButton(text=EDIT_ANSWERS),
                KeyboardButton(text=EDIT_DEADLINE),
            ],
            [KeyboardButton(text=EDIT_CANCEL)],
        ],
        resize_keyboard=True,
        one_time_keyboard=True,
    )


def remove_kb() -> ReplyKeyboardRemove:
    return ReplyKeyboardRemove()
