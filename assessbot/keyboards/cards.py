# assessbot/keyboards/cards.py
from __future__ import annotations

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder

# callback data: test:<action>:<test_id>
ACTION_MANAGE = "test:manage"
ACTION_RESULTS = "test:results"
ACTION_DOWNLOAD = "test:download"
ACTION_DELETE = "test:delete"
ACTION_EDIT = "test:edit"
ACTION_TAKE = "test:take"


def card_token(action: str, test_id: int) -> str:
    return f"{action}:{test_id}"


def manage_card_kb(test_id: int) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        inline_keyboard=[
            [
                InlineKeyboardButton(text="✏️ Edit", callback_data=card_token(ACTION_EDIT, test_id)),
                InlineKeyboardButton(text="📊 Results", callback_data=card_token(ACTION_RESULTS, test_id)),
                InlineKeyboardButton(text="🗑 Delete", callback_data=card_token(ACTION_DELETE, test_id)),
            ],
            [
                InlineKeyboardButton(
                    text="📥 Download results",
                    callback_data=card_token(ACTION_DOWNLOAD, test_id),
                )
            ],
        ]
    )


def results_list_kb(tests: list[tuple[int, str]]) -> InlineKeyboardMarkup:
    """
    tests = [(test_id, title), ...]
    """
    kb = InlineKeyboardBuilder()
    for test_id, title in tests:
        kb.add(
            InlineKeyboardButton(
                text=f"📊 {title}",
                callback_data=card_token(ACTION_RESULTS, test_id),
            )
        )
    kb.adjust(1)
    return kb.as_markup()


def results_view_kb(test_id: int) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        inline_keyboard=[
            [
                InlineKeyboardButton(text="📥 Download", callback_data=card_token(ACTION_DOWNLOAD, test_id)),
                InlineKeyboardButton(text="📋 Test card", callback_data=card_token(ACTION_MANAGE, test_id)),
            ]
        ]
    )


def take_test_kb(test_id: int, text: str) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        inline_keyboard=[[InlineKeyboardButton(text=text, callback_data=card_token(ACTION_TAKE, test_id))]]
    )


def join_channels_kb(channels: list[str]) -> InlineKeyboardMarkup:
    kb = InlineKeyboardBuilder()
    for channel in channels:
        kb.add(
            InlineKeyboardButton(
                text=f"📢 {channel}",
                url=f"https://t.me/{channel.lstrip('@')}",
            )
        )
    kb.adjust(1)
    return kb.as_markup()
