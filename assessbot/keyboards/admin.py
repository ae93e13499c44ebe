# assessbot/keyboards/admin.py
from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup

ACTION_ADD_TEACHER = "admin:add_teacher"
ACTION_REMOVE_TEACHER = "admin:remove_teacher"


def manage_users_kb() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        inline_keyboard=[
            [InlineKeyboardButton(text="➕ Add teacher", callback_data=ACTION_ADD_TEACHER)],
            [InlineKeyboardButton(text="➖ Remove teacher", callback_data=ACTION_REMOVE_TEACHER)],
        ]
    )
