"""Item domain models and the shop catalog."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Mapping


class EquipmentSlot(str, Enum):
    HEAD = "head"
    BODY = "body"
    LEGS = "legs"
    ACCESSORY = "accessory"
    WEAPON = "weapon"


SLOT_LABELS: Mapping[EquipmentSlot, str] = {
    EquipmentSlot.HEAD: "Head",
    EquipmentSlot.BODY: "Body",
    EquipmentSlot.LEGS: "Legs",
    EquipmentSlot.ACCESSORY: "Accessory",
    EquipmentSlot.WEAPON: "Weapon",
}


@dataclass(slots=True, frozen=True)
class ItemDefinition:
    """Static description of a purchasable item."""

    item_id: str
    name: str
    price: int
    category: str
    slot: EquipmentSlot | None = None


@dataclass(slots=True, frozen=True)
class ItemCategory:
    name: str
    slot: EquipmentSlot | None
    items: tuple[ItemDefinition, ...]


class ItemCatalog:
    """Read-only registry of items grouped by category."""

    def __init__(self) -> None:
        self._items: dict[str, ItemDefinition] = {}
        self._categories: dict[str, list[ItemDefinition]] = {}

    def register_item(self, item: ItemDefinition) -> None:
        if item.item_id in self._items:
            raise ValueError(f"Item {item.item_id} already registered")
        self._items[item.item_id] = item
        self._categories.setdefault(item.category, []).append(item)

    def register_items(self, items: Iterable[ItemDefinition]) -> None:
        for item in items:
            self.register_item(item)

    def get_item(self, item_id: str) -> ItemDefinition:
        try:
            return self._items[item_id]
        except KeyError as exc:
            raise KeyError(f"Item {item_id} not found") from exc

    def find_item(self, item_id: str) -> ItemDefinition | None:
        return self._items.get(item_id)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._items

    def __len__(self) -> int:
        return len(self._items)

    def iter_items(self) -> Iterable[ItemDefinition]:
        return self._items.values()

    def categories(self) -> list[ItemCategory]:
        """Return categories in registration order."""
        result: list[ItemCategory] = []
        for name, items in self._categories.items():
            slot = items[0].slot if items else None
            result.append(ItemCategory(name=name, slot=slot, items=tuple(items)))
        return result

    def items_for_slot(self, slot: EquipmentSlot) -> list[ItemDefinition]:
        return [item for item in self._items.values() if item.slot == slot]
