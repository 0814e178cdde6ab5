"""Rewards granted by the prize wheel and the arcade."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..config import ProgressionConfig
from .inventory import add_to_inventory
from .progression import apply_experience, credit_shards

if TYPE_CHECKING:
    from .profile import PlayerProfile


class Reward(ABC):
    """Effect applied to a profile inside a store transaction."""

    @abstractmethod
    def apply(self, profile: "PlayerProfile", progression: ProgressionConfig) -> str | None:
        """Mutate ``profile``; return a message to show the player, if any."""

    @abstractmethod
    def describe(self) -> str:
        ...


@dataclass(slots=True, frozen=True)
class ShardReward(Reward):
    amount: int

    def apply(self, profile: "PlayerProfile", progression: ProgressionConfig) -> str | None:
        credit_shards(profile, self.amount)
        return None

    def describe(self) -> str:
        return f"+{self.amount} MS"


@dataclass(slots=True, frozen=True)
class ItemReward(Reward):
    item_id: str
    quantity: int = 1

    def apply(self, profile: "PlayerProfile", progression: ProgressionConfig) -> str | None:
        add_to_inventory(profile, self.item_id, self.quantity)
        return None

    def describe(self) -> str:
        return f"{self.item_id} x{self.quantity}"


@dataclass(slots=True, frozen=True)
class MessageReward(Reward):
    """Flavor outcome: nothing changes, the player just gets a note."""

    text: str

    def apply(self, profile: "PlayerProfile", progression: ProgressionConfig) -> str | None:
        return self.text

    def describe(self) -> str:
        return self.text


@dataclass(slots=True, frozen=True)
class ProgressReward(Reward):
    """Shards and experience together; used for arcade completions."""

    shards: int = 0
    experience: int = 0

    def apply(self, profile: "PlayerProfile", progression: ProgressionConfig) -> str | None:
        credit_shards(profile, self.shards)
        apply_experience(profile, self.experience, progression)
        return None

    def describe(self) -> str:
        return f"+{self.shards} MS, +{self.experience} EXP"
