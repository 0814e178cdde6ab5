"""Exceptions raised by Keepsake domain services.

Every error carries a ``reason`` code; services translate them into failed
``ActionResult`` values at their boundary.
"""

from __future__ import annotations

from datetime import timedelta


class KeepsakeError(RuntimeError):
    """Base class for domain exceptions."""

    reason = "error"


class InsufficientFunds(KeepsakeError):
    """Raised when the shard balance cannot cover a spend."""

    reason = "insufficient_funds"

    def __init__(self, balance: int, cost: int) -> None:
        super().__init__(f"Insufficient shards: have {balance}, need {cost}")
        self.balance = balance
        self.cost = cost


class InvalidAmount(KeepsakeError):
    reason = "invalid_amount"


class NotOwned(KeepsakeError):
    """Raised when an item is equipped or consumed without being owned."""

    reason = "not_owned"


class SlotMismatch(KeepsakeError):
    """Raised in strict mode when an item is equipped into a foreign slot."""

    reason = "slot_mismatch"


class UnknownItem(KeepsakeError):
    reason = "unknown_item"


class CooldownActive(KeepsakeError):
    """Raised when the wheel is spun before its cooldown expires."""

    reason = "on_cooldown"

    def __init__(self, remaining: timedelta) -> None:
        super().__init__(f"Cooldown active for {int(remaining.total_seconds())} seconds")
        self.remaining = remaining


class SpinInProgress(KeepsakeError):
    reason = "busy"


class ProfileMissing(KeepsakeError):
    """Raised when a mutation runs before onboarding created a profile."""

    reason = "no_profile"


class ProfileExists(KeepsakeError):
    reason = "profile_exists"


class InvalidName(KeepsakeError):
    reason = "invalid_name"


class UnknownGame(KeepsakeError):
    reason = "unknown_game"


class ContentLocked(KeepsakeError):
    """Raised when gated content (arcade game, letter) is not accessible yet."""

    reason = "locked"


class UnknownLetter(KeepsakeError):
    reason = "unknown_letter"
