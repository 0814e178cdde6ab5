"""Automated checks to highlight balancing issues."""

from __future__ import annotations

from dataclasses import dataclass

from ..app import KeepsakeApp
from ..domain.items import EquipmentSlot
from ..domain.rewards import ItemReward
from .wheel_simulator import expected_shards


@dataclass(slots=True)
class ChecklistIssue:
    severity: str
    message: str


def run_checklist(app: KeepsakeApp) -> list[ChecklistIssue]:
    issues: list[ChecklistIssue] = []
    catalog = app.catalog
    if not len(catalog):
        issues.append(ChecklistIssue("error", "No items registered in the catalog."))

    for slot in EquipmentSlot:
        if not catalog.items_for_slot(slot):
            issues.append(ChecklistIssue("warning", f"No equipment available for slot {slot.value}."))

    for segment in app.segments:
        reward = segment.reward
        if isinstance(reward, ItemReward) and reward.item_id not in catalog:
            issues.append(
                ChecklistIssue(
                    "info",
                    f"Wheel segment {segment.segment_id} awards {reward.item_id}, "
                    "which is not sold in the shop.",
                )
            )

    wheel = app.config.wheel
    payout = expected_shards(app.segments)
    if payout >= wheel.spin_cost:
        issues.append(
            ChecklistIssue(
                "warning",
                f"Expected shard payout {payout:.0f} per spin covers the spin cost {wheel.spin_cost}.",
            )
        )
    if wheel.reset_cost <= wheel.spin_cost:
        issues.append(
            ChecklistIssue("warning", "Resetting the cooldown is not more expensive than a spin.")
        )

    keys = [game.required_keys for game in app.games]
    if keys and min(keys) > 0:
        issues.append(ChecklistIssue("error", "Every arcade game needs keys; none is playable at start."))
    if len(keys) != len(set(keys)):
        issues.append(ChecklistIssue("info", "Several arcade games unlock at the same key count."))

    for letter in app.letters:
        if len(letter.variants) == 1:
            issues.append(
                ChecklistIssue("info", f"Letter {letter.letter_id} has a single variant and will repeat.")
            )
    return issues
