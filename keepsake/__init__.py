"""Keepsake: a small companion app with a profile, shop, prize wheel, arcade and letters."""

from .app import KeepsakeApp, PlayerContext
from .config import KeepsakeConfig
from .domain.results import ActionResult

__all__ = [
    "ActionResult",
    "KeepsakeApp",
    "KeepsakeConfig",
    "PlayerContext",
]
