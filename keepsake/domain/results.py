"""Result values returned by service entry points."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .exceptions import KeepsakeError

if TYPE_CHECKING:
    from .profile import PlayerProfile


@dataclass(slots=True)
class ActionResult:
    """Outcome of a mutation: the fresh profile, or a reason code on failure."""

    ok: bool
    profile: "PlayerProfile | None" = None
    reason: str | None = None
    message: str = ""

    @classmethod
    def success(cls, profile: "PlayerProfile | None") -> "ActionResult":
        return cls(ok=True, profile=profile)

    @classmethod
    def failure(cls, error: KeepsakeError, profile: "PlayerProfile | None" = None) -> "ActionResult":
        return cls(ok=False, profile=profile, reason=error.reason, message=str(error))
