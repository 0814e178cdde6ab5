"""Level curve and shard ledger primitives.

All functions mutate the profile they are given; callers run them inside a
store transaction so a failed check leaves the persisted record untouched.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..config import ProgressionConfig
from .exceptions import InsufficientFunds, InvalidAmount

if TYPE_CHECKING:
    from .profile import PlayerProfile


def exp_to_next(level: int, config: ProgressionConfig) -> int:
    """Experience needed to leave ``level``; zero at the level cap."""
    if level >= config.max_level:
        return 0
    return config.base_exp + config.exp_step * (level - 1)


def apply_experience(profile: "PlayerProfile", amount: int, config: ProgressionConfig) -> int:
    """Add experience, levelling up as many times as it covers.

    Returns the number of levels gained. Experience past the cap is dropped.
    """
    if amount <= 0 or profile.level >= config.max_level:
        return 0

    start_level = profile.level
    profile.exp += amount
    profile.exp_to_next = exp_to_next(profile.level, config)
    while profile.level < config.max_level and profile.exp >= profile.exp_to_next:
        profile.exp -= profile.exp_to_next
        profile.level += 1
        profile.exp_to_next = exp_to_next(profile.level, config)

    if profile.level >= config.max_level:
        profile.level = config.max_level
        profile.exp = 0
        profile.exp_to_next = 0
    return profile.level - start_level


def credit_shards(profile: "PlayerProfile", amount: int) -> int:
    if amount > 0:
        profile.shards += amount
    return profile.shards


def debit_shards(profile: "PlayerProfile", cost: int) -> int:
    if cost < 0:
        raise InvalidAmount("Cannot debit a negative amount")
    if profile.shards < cost:
        raise InsufficientFunds(profile.shards, cost)
    profile.shards -= cost
    return profile.shards
