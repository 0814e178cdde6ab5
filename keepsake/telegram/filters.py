"""Reusable aiogram filters for the Keepsake bot."""

from __future__ import annotations

from aiogram.filters import BaseFilter
from aiogram.types import CallbackQuery, Message

from ..app import KeepsakeApp


def player_namespace(user_id: int) -> str:
    return f"user:{user_id}"


class PlayerFilter(BaseFilter):
    """Inject the sender's ``PlayerContext`` as the ``player`` handler argument."""

    def __init__(self, app: KeepsakeApp) -> None:
        self._app = app

    async def __call__(self, event: Message | CallbackQuery) -> dict | bool:
        user = event.from_user
        if not user:
            return False
        return {"player": self._app.player(player_namespace(user.id))}


class CallbackPrefix(BaseFilter):
    """Match ``keepsake:<action>[:<arg>]`` callbacks and pass ``<arg>`` on."""

    def __init__(self, action: str) -> None:
        self._prefix = f"keepsake:{action}"

    async def __call__(self, callback: CallbackQuery) -> dict | bool:
        data = callback.data or ""
        if data == self._prefix:
            return {"arg": None}
        if data.startswith(self._prefix + ":"):
            return {"arg": data[len(self._prefix) + 1 :]}
        return False
