"""Player profile model and its persisted JSON representation."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping

from ..config import ProgressionConfig
from .progression import exp_to_next

DEFAULT_AVATAR = "🙂"
MAX_NAME_LENGTH = 24

AVATARS: tuple[str, ...] = (
    "🐮", "🍜", "🦄", "🐱", "🐶", "🐼", "🐸", "🐯",
    "🐻", "🐨", "🦊", "🐹", "🐰", "🦁", "🐷",
)


@dataclass(slots=True)
class WheelState:
    next_at: datetime | None = None


@dataclass(slots=True)
class PlayerProfile:
    name: str
    avatar: str = DEFAULT_AVATAR
    level: int = 1
    exp: int = 0
    exp_to_next: int = 100
    shards: int = 0
    inventory: dict[str, int] = field(default_factory=dict)
    equipped: dict[str, str] = field(default_factory=dict)
    arcade_keys: int = 0
    arcade_completions: set[str] = field(default_factory=set)
    wheel: WheelState = field(default_factory=WheelState)

    def owned(self, item_id: str) -> int:
        return self.inventory.get(item_id, 0)

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the camelCase layout of the ``app_profile_v1`` record."""
        return {
            "name": self.name,
            "avatar": self.avatar,
            "level": self.level,
            "exp": self.exp,
            "expToNext": self.exp_to_next,
            "shards": self.shards,
            "inventory": dict(self.inventory),
            "equipped": dict(self.equipped),
            "arcadeKeys": self.arcade_keys,
            "arcadeCompletions": sorted(self.arcade_completions),
            "wheel": {"nextAt": to_epoch_ms(self.wheel.next_at)},
        }


def normalize_profile(raw: Mapping[str, Any], progression: ProgressionConfig) -> PlayerProfile:
    """Build a profile from untrusted persisted data, clamping every field."""
    level = min(max(_as_int(raw.get("level"), 1), 1), progression.max_level)
    threshold = exp_to_next(level, progression)
    exp = min(max(_as_int(raw.get("exp"), 0), 0), threshold)

    inventory: dict[str, int] = {}
    raw_inventory = raw.get("inventory")
    if isinstance(raw_inventory, Mapping):
        for item_id, qty in raw_inventory.items():
            quantity = _as_int(qty, 0)
            if quantity >= 1:
                inventory[str(item_id)] = quantity

    equipped: dict[str, str] = {}
    raw_equipped = raw.get("equipped")
    if isinstance(raw_equipped, Mapping):
        for slot, item_id in raw_equipped.items():
            if isinstance(item_id, str) and item_id:
                equipped[str(slot)] = item_id

    completions = raw.get("arcadeCompletions")
    if isinstance(completions, Mapping):
        # Older records kept completions as {gameId: true}.
        completions = [key for key, done in completions.items() if done]
    if not isinstance(completions, (list, tuple)):
        completions = []

    wheel = raw.get("wheel")
    next_at = from_epoch_ms(wheel.get("nextAt")) if isinstance(wheel, Mapping) else None

    return PlayerProfile(
        name=str(raw.get("name") or ""),
        avatar=str(raw.get("avatar") or DEFAULT_AVATAR),
        level=level,
        exp=exp,
        exp_to_next=threshold,
        shards=max(_as_int(raw.get("shards"), 0), 0),
        inventory=inventory,
        equipped=equipped,
        arcade_keys=max(_as_int(raw.get("arcadeKeys"), 0), 0),
        arcade_completions={str(game_id) for game_id in completions},
        wheel=WheelState(next_at=next_at),
    )


def to_epoch_ms(moment: datetime | None) -> int:
    if moment is None:
        return 0
    return int(ensure_utc(moment).timestamp() * 1000)


def from_epoch_ms(value: Any) -> datetime | None:
    millis = _as_int(value, 0)
    if millis <= 0:
        return None
    try:
        return datetime.fromtimestamp(millis / 1000, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        # Past the platform time range; treat like a missing timestamp.
        return None


def ensure_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None or moment.tzinfo.utcoffset(moment) is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def _as_int(value: Any, default: int) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else default
    if isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            return default
        return int(number) if math.isfinite(number) else default
    return default
