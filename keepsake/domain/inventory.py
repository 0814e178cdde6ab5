"""Inventory and equipment management."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..config import EquipmentConfig
from .events import EQUIPMENT_CHANGED, INVENTORY_CHANGED, SHARDS_CHANGED, EventBus
from .exceptions import InvalidAmount, KeepsakeError, NotOwned, SlotMismatch, UnknownItem
from .items import EquipmentSlot, ItemCatalog, ItemDefinition
from .progression import debit_shards
from .results import ActionResult

if TYPE_CHECKING:
    from ..storage.profiles import ProfileStore
    from .profile import PlayerProfile

logger = logging.getLogger(__name__)


def add_to_inventory(profile: "PlayerProfile", item_id: str, quantity: int = 1) -> int:
    if quantity < 1:
        raise InvalidAmount("Quantity must be positive")
    profile.inventory[item_id] = profile.owned(item_id) + quantity
    return profile.inventory[item_id]


def remove_from_inventory(profile: "PlayerProfile", item_id: str, quantity: int = 1) -> int:
    """Take ``quantity`` items away; the entry and any equipped copy go at zero."""
    if quantity < 1:
        raise InvalidAmount("Quantity must be positive")
    owned = profile.owned(item_id)
    if owned < quantity:
        raise NotOwned(f"Item {item_id}: have {owned}, need {quantity}")
    remaining = owned - quantity
    if remaining:
        profile.inventory[item_id] = remaining
    else:
        profile.inventory.pop(item_id, None)
        for slot in [slot for slot, equipped in profile.equipped.items() if equipped == item_id]:
            del profile.equipped[slot]
    return remaining


def _slot_key(slot: EquipmentSlot | str) -> str:
    return slot.value if isinstance(slot, EquipmentSlot) else str(slot)


class InventoryService:
    """Shop purchases, item grants and per-slot equipment."""

    def __init__(
        self,
        store: "ProfileStore",
        catalog: ItemCatalog,
        equipment_config: EquipmentConfig,
        event_bus: EventBus,
    ) -> None:
        self._store = store
        self._catalog = catalog
        self._config = equipment_config
        self._event_bus = event_bus

    async def add_item(self, item_id: str, quantity: int = 1) -> ActionResult:
        try:
            async with self._store.transaction() as profile:
                add_to_inventory(profile, item_id, quantity)
        except KeepsakeError as exc:
            return await self._failure(exc)
        await self._event_bus.publish(
            INVENTORY_CHANGED, {"item_id": item_id, "quantity": profile.owned(item_id)}
        )
        return ActionResult.success(profile)

    async def purchase_item(self, item_id: str, price: int | None = None) -> ActionResult:
        """Debit ``price`` (catalog price by default) and add one item, or do neither."""
        try:
            if price is None:
                item = self._catalog.find_item(item_id)
                if item is None:
                    raise UnknownItem(f"Item {item_id} is not sold here")
                price = item.price
            async with self._store.transaction() as profile:
                debit_shards(profile, price)
                add_to_inventory(profile, item_id, 1)
        except KeepsakeError as exc:
            return await self._failure(exc)

        logger.info("Purchased %s for %s shards.", item_id, price)
        await self._event_bus.publish(SHARDS_CHANGED, {"shards": profile.shards, "delta": -price})
        await self._event_bus.publish(
            INVENTORY_CHANGED, {"item_id": item_id, "quantity": profile.owned(item_id)}
        )
        return ActionResult.success(profile)

    async def equip_item(self, slot: EquipmentSlot | str, item_id: str) -> ActionResult:
        slot_key = _slot_key(slot)
        try:
            async with self._store.transaction() as profile:
                if profile.owned(item_id) < 1:
                    raise NotOwned(f"Item {item_id} is not owned")
                if self._config.strict_slots:
                    self._check_slot(slot_key, item_id)
                profile.equipped[slot_key] = item_id
        except KeepsakeError as exc:
            return await self._failure(exc)
        await self._event_bus.publish(EQUIPMENT_CHANGED, {"slot": slot_key, "item_id": item_id})
        return ActionResult.success(profile)

    async def unequip_item(self, slot: EquipmentSlot | str) -> ActionResult:
        slot_key = _slot_key(slot)
        try:
            async with self._store.transaction() as profile:
                profile.equipped.pop(slot_key, None)
        except KeepsakeError as exc:
            return await self._failure(exc)
        await self._event_bus.publish(EQUIPMENT_CHANGED, {"slot": slot_key, "item_id": None})
        return ActionResult.success(profile)

    async def consume_item(self, item_id: str, quantity: int = 1) -> ActionResult:
        try:
            async with self._store.transaction() as profile:
                remove_from_inventory(profile, item_id, quantity)
        except KeepsakeError as exc:
            return await self._failure(exc)
        await self._event_bus.publish(
            INVENTORY_CHANGED, {"item_id": item_id, "quantity": profile.owned(item_id)}
        )
        return ActionResult.success(profile)

    def items_for_slot(
        self, profile: "PlayerProfile", slot: EquipmentSlot
    ) -> list[tuple[ItemDefinition, int]]:
        """Owned items the catalog places in ``slot``, with quantities."""
        return [
            (item, profile.owned(item.item_id))
            for item in self._catalog.items_for_slot(slot)
            if profile.owned(item.item_id) > 0
        ]

    def _check_slot(self, slot_key: str, item_id: str) -> None:
        item = self._catalog.find_item(item_id)
        item_slot = item.slot.value if item and item.slot else None
        if item_slot != slot_key:
            raise SlotMismatch(f"Item {item_id} does not fit slot {slot_key}")

    async def _failure(self, exc: KeepsakeError) -> ActionResult:
        logger.debug("Inventory action rejected: %s", exc)
        return ActionResult.failure(exc, await self._store.read())
