"""Prize wheel: a cooldown-gated weighted draw paid for in shards."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from random import Random
from typing import TYPE_CHECKING, Sequence

from ..config import ProgressionConfig, WheelConfig
from .events import SHARDS_CHANGED, WHEEL_RESET, WHEEL_SPUN, EventBus
from .exceptions import CooldownActive, KeepsakeError, SpinInProgress
from .profile import PlayerProfile, ensure_utc
from .progression import debit_shards
from .results import ActionResult
from .rewards import Reward

if TYPE_CHECKING:
    from ..storage.profiles import ProfileStore

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class WheelSegment:
    segment_id: str
    label: str
    weight: float
    reward: Reward


@dataclass(slots=True)
class SpinResult(ActionResult):
    segment: WheelSegment | None = None
    index: int | None = None
    next_at: datetime | None = None


def weighted_index(weights: Sequence[float], rng: Random) -> int:
    """Pick an index with probability ``weight / sum(weights)``."""
    total = sum(weights)
    if total <= 0:
        return int(rng.random() * len(weights))
    threshold = rng.random() * total
    cumulative = 0.0
    for idx, weight in enumerate(weights):
        cumulative += weight
        if threshold < cumulative:
            return idx
    return len(weights) - 1


def cooldown_remaining(profile: PlayerProfile, now: datetime) -> timedelta:
    if profile.wheel.next_at is None:
        return timedelta(0)
    remaining = ensure_utc(profile.wheel.next_at) - ensure_utc(now)
    return max(remaining, timedelta(0))


class WheelService:
    """Spin and reset the wheel for one profile.

    ``_spinning`` rejects a second spin issued while the first one is still
    running (a double tap on the button), instead of queueing it behind the
    store lock.
    """

    def __init__(
        self,
        store: "ProfileStore",
        segments: Sequence[WheelSegment],
        config: WheelConfig,
        progression: ProgressionConfig,
        event_bus: EventBus,
        *,
        rng: Random | None = None,
    ) -> None:
        if not segments:
            raise ValueError("Wheel needs at least one segment")
        self._store = store
        self._segments = tuple(segments)
        self._config = config
        self._progression = progression
        self._event_bus = event_bus
        self._rng = rng or Random()
        self._spinning = False

    @property
    def segments(self) -> tuple[WheelSegment, ...]:
        return self._segments

    @property
    def spinning(self) -> bool:
        return self._spinning

    async def spin(self, now: datetime | None = None) -> SpinResult:
        if self._spinning:
            return SpinResult.failure(SpinInProgress("The wheel is already spinning"))
        self._spinning = True
        try:
            moment = ensure_utc(now or datetime.now(timezone.utc))
            async with self._store.transaction() as profile:
                remaining = cooldown_remaining(profile, moment)
                if remaining > timedelta(0):
                    raise CooldownActive(remaining)
                debit_shards(profile, self._config.spin_cost)
                index = weighted_index([segment.weight for segment in self._segments], self._rng)
                segment = self._segments[index]
                message = segment.reward.apply(profile, self._progression)
                profile.wheel.next_at = moment + timedelta(seconds=self._config.cooldown_seconds)
        except KeepsakeError as exc:
            logger.debug("Spin rejected: %s", exc)
            return SpinResult.failure(exc, await self._store.read())
        finally:
            self._spinning = False

        logger.info("Wheel landed on %s.", segment.segment_id)
        await self._event_bus.publish(
            SHARDS_CHANGED, {"shards": profile.shards, "delta": -self._config.spin_cost}
        )
        await self._event_bus.publish(
            WHEEL_SPUN,
            {"segment_id": segment.segment_id, "next_at": profile.wheel.next_at},
        )
        return SpinResult(
            ok=True,
            profile=profile,
            message=message or "",
            segment=segment,
            index=index,
            next_at=profile.wheel.next_at,
        )

    async def reset_cooldown(self, now: datetime | None = None) -> ActionResult:
        if self._spinning:
            return ActionResult.failure(SpinInProgress("The wheel is already spinning"))
        moment = ensure_utc(now or datetime.now(timezone.utc))
        try:
            async with self._store.transaction() as profile:
                debit_shards(profile, self._config.reset_cost)
                profile.wheel.next_at = moment
        except KeepsakeError as exc:
            return ActionResult.failure(exc, await self._store.read())

        await self._event_bus.publish(
            SHARDS_CHANGED, {"shards": profile.shards, "delta": -self._config.reset_cost}
        )
        await self._event_bus.publish(WHEEL_RESET, {"next_at": moment})
        return ActionResult.success(profile)

    async def cooldown_remaining(self, now: datetime | None = None) -> timedelta:
        profile = await self._store.read()
        if profile is None:
            return timedelta(0)
        return cooldown_remaining(profile, now or datetime.now(timezone.utc))
