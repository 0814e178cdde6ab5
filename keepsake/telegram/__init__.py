"""Telegram integration helpers."""

from .aiogram_router import build_router, describe_failure
from .filters import CallbackPrefix, PlayerFilter, player_namespace
from .keyboards import (
    arcade_keyboard,
    avatar_keyboard,
    letters_keyboard,
    menu_keyboard,
    shop_keyboard,
    wheel_keyboard,
)

__all__ = [
    "build_router",
    "describe_failure",
    "CallbackPrefix",
    "PlayerFilter",
    "player_namespace",
    "arcade_keyboard",
    "avatar_keyboard",
    "letters_keyboard",
    "menu_keyboard",
    "shop_keyboard",
    "wheel_keyboard",
]
