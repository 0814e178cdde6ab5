"""Keyboard helpers for the Keepsake bot."""

from __future__ import annotations

from typing import Iterable, Sequence

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup

from ..config import WheelConfig
from ..domain.arcade import ArcadeGame
from ..domain.items import ItemCatalog
from ..domain.letters import Letter

PREFIX = "keepsake"


def _rows(buttons: Sequence[InlineKeyboardButton], width: int) -> list[list[InlineKeyboardButton]]:
    return [list(buttons[idx : idx + width]) for idx in range(0, len(buttons), width)]


def avatar_keyboard(avatars: Sequence[str]) -> InlineKeyboardMarkup:
    buttons = [
        InlineKeyboardButton(text=avatar, callback_data=f"{PREFIX}:avatar:{idx}")
        for idx, avatar in enumerate(avatars)
    ]
    return InlineKeyboardMarkup(inline_keyboard=_rows(buttons, 5))


def menu_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        inline_keyboard=[
            [
                InlineKeyboardButton(text="👤 Profile", callback_data=f"{PREFIX}:profile"),
                InlineKeyboardButton(text="🎒 Inventory", callback_data=f"{PREFIX}:inventory"),
            ],
            [
                InlineKeyboardButton(text="🛒 Shop", callback_data=f"{PREFIX}:shop"),
                InlineKeyboardButton(text="🎡 Wheel", callback_data=f"{PREFIX}:wheel"),
            ],
            [
                InlineKeyboardButton(text="🕹 Arcade", callback_data=f"{PREFIX}:arcade"),
                InlineKeyboardButton(text="💌 Letters", callback_data=f"{PREFIX}:letters"),
            ],
        ]
    )


def shop_keyboard(catalog: ItemCatalog, category: str | None = None) -> InlineKeyboardMarkup:
    """Category picker, or the buy buttons of one category."""
    if category is None:
        buttons = [
            InlineKeyboardButton(text=group.name, callback_data=f"{PREFIX}:shop:{idx}")
            for idx, group in enumerate(catalog.categories())
        ]
        return InlineKeyboardMarkup(inline_keyboard=_rows(buttons, 2))
    items = next(
        (group.items for group in catalog.categories() if group.name == category), ()
    )
    buttons = [
        InlineKeyboardButton(
            text=f"{item.name} · {item.price}",
            callback_data=f"{PREFIX}:buy:{item.item_id}",
        )
        for item in items
    ]
    return InlineKeyboardMarkup(inline_keyboard=_rows(buttons, 1))


def wheel_keyboard(config: WheelConfig) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        inline_keyboard=[
            [InlineKeyboardButton(text=f"🎡 Spin ({config.spin_cost} MS)", callback_data=f"{PREFIX}:spin")],
            [
                InlineKeyboardButton(
                    text=f"⏩ Reset Cooldown ({config.reset_cost} MS)",
                    callback_data=f"{PREFIX}:resetwheel",
                )
            ],
        ]
    )


def letters_keyboard(letters: Iterable[Letter], locked: Iterable[str] = ()) -> InlineKeyboardMarkup:
    locked_ids = set(locked)
    buttons = [
        InlineKeyboardButton(
            text=("🔒 " if letter.letter_id in locked_ids else "💌 ") + letter.title,
            callback_data=f"{PREFIX}:open:{letter.letter_id}",
        )
        for letter in letters
    ]
    return InlineKeyboardMarkup(inline_keyboard=_rows(buttons, 1))


def arcade_keyboard(games: Iterable[ArcadeGame]) -> InlineKeyboardMarkup:
    """One "finished" button per playable game; pressing it records the run."""
    buttons = [
        InlineKeyboardButton(text=f"🏁 Finished {game.title}", callback_data=f"{PREFIX}:played:{game.game_id}")
        for game in games
    ]
    return InlineKeyboardMarkup(inline_keyboard=_rows(buttons, 1))
