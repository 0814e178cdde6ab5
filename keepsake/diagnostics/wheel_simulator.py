"""Wheel simulation helpers."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from random import Random
from typing import Sequence

from ..domain.items import ItemCatalog
from ..domain.rewards import ItemReward, ShardReward
from ..domain.wheel import WheelSegment, weighted_index


@dataclass(slots=True)
class SimulationResult:
    spins: int
    spin_cost: int
    hits: Counter = field(default_factory=Counter)
    shards: int = 0
    items: Counter = field(default_factory=Counter)
    item_value: int = 0

    def merge(self, segment: WheelSegment, catalog: ItemCatalog | None) -> None:
        self.hits[segment.segment_id] += 1
        reward = segment.reward
        if isinstance(reward, ShardReward):
            self.shards += reward.amount
        elif isinstance(reward, ItemReward):
            self.items[reward.item_id] += reward.quantity
            item = catalog.find_item(reward.item_id) if catalog else None
            if item:
                self.item_value += item.price * reward.quantity

    @property
    def shards_per_spin(self) -> float:
        return self.shards / self.spins if self.spins else 0.0

    @property
    def value_per_spin(self) -> float:
        """Shards plus shop value of won items, averaged per spin."""
        return (self.shards + self.item_value) / self.spins if self.spins else 0.0

    def frequency(self, segment_id: str) -> float:
        return self.hits[segment_id] / self.spins if self.spins else 0.0


def expected_shards(segments: Sequence[WheelSegment]) -> float:
    """Exact expected shard payout of one spin."""
    total = sum(segment.weight for segment in segments)
    if total <= 0:
        return 0.0
    return sum(
        segment.weight * segment.reward.amount
        for segment in segments
        if isinstance(segment.reward, ShardReward)
    ) / total


class WheelSimulator:
    """Monte-Carlo simulation of wheel outcomes, ignoring the cooldown."""

    def __init__(
        self,
        segments: Sequence[WheelSegment],
        *,
        spin_cost: int = 0,
        catalog: ItemCatalog | None = None,
        rng: Random | None = None,
    ) -> None:
        self._segments = tuple(segments)
        self._spin_cost = spin_cost
        self._catalog = catalog
        self._rng = rng or Random()

    def simulate(self, *, spins: int = 1000) -> SimulationResult:
        weights = [segment.weight for segment in self._segments]
        result = SimulationResult(spins=spins, spin_cost=self._spin_cost)
        for _ in range(spins):
            segment = self._segments[weighted_index(weights, self._rng)]
            result.merge(segment, self._catalog)
        return result
