"""Load the item catalog, wheel, arcade games and letters from JSON definitions."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Iterable

from ..domain.arcade import ArcadeGame
from ..domain.items import EquipmentSlot, ItemCatalog, ItemDefinition
from ..domain.letters import Letter, LetterVariant
from ..domain.rewards import ItemReward, MessageReward, ProgressReward, Reward, ShardReward
from ..domain.wheel import WheelSegment

REWARD_TYPES = ("shards", "item", "message")
VARIANT_TYPES = ("text", "image")


def _read_json(path: str | Path) -> Any:
    return json.loads(Path(path).read_text(encoding="utf-8"))


def _checked(data: Any, validate: Callable[[Any], list[str]], prefix: str) -> None:
    errors = validate(data)
    if errors:
        raise ValueError(_format_errors(prefix, errors))


# Item catalog


def load_catalog(path: str | Path) -> ItemCatalog:
    """Load and validate an item catalog file."""
    return parse_catalog_dict(_read_json(path))


def parse_catalog_dict(data: dict[str, Any]) -> ItemCatalog:
    _checked(data, validate_catalog_dict, "Catalog validation failed")
    catalog = ItemCatalog()
    for group in data["categories"]:
        slot = EquipmentSlot(group["slot"]) if group.get("slot") else None
        for entry in group["items"]:
            catalog.register_item(
                ItemDefinition(
                    item_id=entry["id"],
                    name=entry["name"],
                    price=int(entry["price"]),
                    category=group["name"],
                    slot=slot,
                )
            )
    return catalog


def validate_catalog_dict(data: Any) -> list[str]:
    errors: list[str] = []
    if not isinstance(data, dict):
        return ["Catalog must be a JSON object."]
    groups = data.get("categories")
    if not isinstance(groups, list) or not groups:
        return ["Catalog must contain non-empty 'categories' array."]

    slots = {slot.value for slot in EquipmentSlot}
    item_ids: set[str] = set()
    for idx, group in enumerate(groups, start=1):
        if not isinstance(group, dict):
            errors.append(f"Category #{idx} must be an object.")
            continue
        name = group.get("name")
        if not isinstance(name, str) or not name.strip():
            errors.append(f"Category #{idx} must define non-empty 'name'.")
            continue
        slot = group.get("slot")
        if slot is not None and slot not in slots:
            errors.append(f"Category '{name}' has invalid slot '{slot}'.")
        items = group.get("items")
        if not isinstance(items, list) or not items:
            errors.append(f"Category '{name}' must define non-empty 'items' array.")
            continue
        for entry in items:
            if not isinstance(entry, dict):
                errors.append(f"Category '{name}' contains a non-object item.")
                continue
            item_id = entry.get("id")
            if not isinstance(item_id, str) or not item_id.strip():
                errors.append(f"Category '{name}' has an item without 'id'.")
                continue
            if item_id in item_ids:
                errors.append(f"Item id '{item_id}' defined multiple times.")
            item_ids.add(item_id)
            if not isinstance(entry.get("name"), str) or not entry["name"].strip():
                errors.append(f"Item '{item_id}' must define non-empty 'name'.")
            price = entry.get("price")
            if isinstance(price, bool) or not isinstance(price, int) or price < 0:
                errors.append(f"Item '{item_id}' has invalid 'price' value '{price}'.")
    return errors


# Wheel


def load_wheel(path: str | Path) -> list[WheelSegment]:
    return parse_wheel_dict(_read_json(path))


def parse_wheel_dict(data: dict[str, Any]) -> list[WheelSegment]:
    _checked(data, validate_wheel_dict, "Wheel validation failed")
    return [
        WheelSegment(
            segment_id=entry["id"],
            label=entry.get("label", entry["id"]),
            weight=float(entry["weight"]),
            reward=parse_reward(entry["reward"]),
        )
        for entry in data["segments"]
    ]


def parse_reward(entry: dict[str, Any]) -> Reward:
    kind = entry["type"]
    if kind == "shards":
        return ShardReward(amount=int(entry["amount"]))
    if kind == "item":
        return ItemReward(item_id=entry["item"], quantity=int(entry.get("quantity", 1)))
    return MessageReward(text=entry["text"])


def validate_wheel_dict(data: Any) -> list[str]:
    if not isinstance(data, dict):
        return ["Wheel must be a JSON object."]
    segments = data.get("segments")
    if not isinstance(segments, list) or not segments:
        return ["Wheel must contain non-empty 'segments' array."]

    errors: list[str] = []
    seen: set[str] = set()
    for idx, entry in enumerate(segments, start=1):
        if not isinstance(entry, dict):
            errors.append(f"Segment #{idx} must be an object.")
            continue
        segment_id = entry.get("id")
        if not isinstance(segment_id, str) or not segment_id.strip():
            errors.append(f"Segment #{idx} must define non-empty 'id'.")
            continue
        if segment_id in seen:
            errors.append(f"Segment id '{segment_id}' defined multiple times.")
        seen.add(segment_id)

        weight = entry.get("weight")
        if isinstance(weight, bool) or not isinstance(weight, (int, float)) or weight <= 0:
            errors.append(f"Segment '{segment_id}' weight must be a positive number.")

        reward = entry.get("reward")
        if not isinstance(reward, dict):
            errors.append(f"Segment '{segment_id}' must define 'reward' object.")
            continue
        kind = reward.get("type")
        if kind not in REWARD_TYPES:
            errors.append(f"Segment '{segment_id}' has invalid reward type '{kind}'.")
        elif kind == "shards" and not _positive_int(reward.get("amount")):
            errors.append(f"Segment '{segment_id}' shard amount must be a positive integer.")
        elif kind == "item":
            if not isinstance(reward.get("item"), str) or not reward["item"].strip():
                errors.append(f"Segment '{segment_id}' item reward must name an 'item'.")
            if "quantity" in reward and not _positive_int(reward["quantity"]):
                errors.append(f"Segment '{segment_id}' item quantity must be a positive integer.")
        elif kind == "message" and (not isinstance(reward.get("text"), str) or not reward["text"]):
            errors.append(f"Segment '{segment_id}' message reward must define 'text'.")
    return errors


# Arcade


def load_arcade(path: str | Path) -> list[ArcadeGame]:
    return parse_arcade_dict(_read_json(path))


def parse_arcade_dict(data: dict[str, Any]) -> list[ArcadeGame]:
    _checked(data, validate_arcade_dict, "Arcade validation failed")
    return [
        ArcadeGame(
            game_id=entry["id"],
            title=entry["title"],
            subtitle=entry.get("subtitle", ""),
            required_keys=int(entry.get("requiredKeys", 0)),
            first_reward=_progress_reward(entry.get("firstReward")),
            repeat_reward=_progress_reward(entry.get("repeatReward")),
        )
        for entry in data["games"]
    ]


def _progress_reward(entry: dict[str, Any] | None) -> ProgressReward:
    if not entry:
        return ProgressReward()
    return ProgressReward(
        shards=int(entry.get("shards", 0)),
        experience=int(entry.get("experience", 0)),
    )


def validate_arcade_dict(data: Any) -> list[str]:
    if not isinstance(data, dict):
        return ["Arcade must be a JSON object."]
    games = data.get("games")
    if not isinstance(games, list) or not games:
        return ["Arcade must contain non-empty 'games' array."]

    errors: list[str] = []
    seen: set[str] = set()
    for idx, entry in enumerate(games, start=1):
        if not isinstance(entry, dict):
            errors.append(f"Game #{idx} must be an object.")
            continue
        game_id = entry.get("id")
        if not isinstance(game_id, str) or not game_id.strip():
            errors.append(f"Game #{idx} must define non-empty 'id'.")
            continue
        if game_id in seen:
            errors.append(f"Game id '{game_id}' defined multiple times.")
        seen.add(game_id)
        if not isinstance(entry.get("title"), str) or not entry["title"].strip():
            errors.append(f"Game '{game_id}' must define non-empty 'title'.")
        keys = entry.get("requiredKeys", 0)
        if isinstance(keys, bool) or not isinstance(keys, int) or keys < 0:
            errors.append(f"Game '{game_id}' has invalid 'requiredKeys' value '{keys}'.")
        for field_name in ("firstReward", "repeatReward"):
            reward = entry.get(field_name)
            if reward is None:
                continue
            if not isinstance(reward, dict):
                errors.append(f"Game '{game_id}' {field_name} must be an object.")
                continue
            for key in ("shards", "experience"):
                value = reward.get(key, 0)
                if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                    errors.append(
                        f"Game '{game_id}' {field_name} '{key}' must be a non-negative integer."
                    )
    return errors


# Letters


def load_letters(path: str | Path) -> list[Letter]:
    return parse_letters_dict(_read_json(path))


def parse_letters_dict(data: dict[str, Any]) -> list[Letter]:
    _checked(data, validate_letters_dict, "Letters validation failed")
    return [
        Letter(
            letter_id=entry["id"],
            title=entry["title"],
            hint=entry.get("hint", ""),
            variants=tuple(
                LetterVariant(
                    kind=variant["type"],
                    content=variant["content"],
                    caption=variant.get("caption"),
                )
                for variant in entry["variants"]
            ),
        )
        for entry in data["letters"]
    ]


def validate_letters_dict(data: Any) -> list[str]:
    if not isinstance(data, dict):
        return ["Letters must be a JSON object."]
    letters = data.get("letters")
    if not isinstance(letters, list) or not letters:
        return ["Letters must contain non-empty 'letters' array."]

    errors: list[str] = []
    seen: set[str] = set()
    for idx, entry in enumerate(letters, start=1):
        if not isinstance(entry, dict):
            errors.append(f"Letter #{idx} must be an object.")
            continue
        letter_id = entry.get("id")
        if not isinstance(letter_id, str) or not letter_id.strip():
            errors.append(f"Letter #{idx} must define non-empty 'id'.")
            continue
        if letter_id in seen:
            errors.append(f"Letter id '{letter_id}' defined multiple times.")
        seen.add(letter_id)
        if not isinstance(entry.get("title"), str) or not entry["title"].strip():
            errors.append(f"Letter '{letter_id}' must define non-empty 'title'.")
        variants = entry.get("variants")
        if not isinstance(variants, list) or not variants:
            errors.append(f"Letter '{letter_id}' must define non-empty 'variants' array.")
            continue
        for number, variant in enumerate(variants, start=1):
            if not isinstance(variant, dict):
                errors.append(f"Letter '{letter_id}' variant #{number} must be an object.")
                continue
            if variant.get("type") not in VARIANT_TYPES:
                errors.append(
                    f"Letter '{letter_id}' variant #{number} has invalid type '{variant.get('type')}'."
                )
            if not isinstance(variant.get("content"), str) or not variant["content"].strip():
                errors.append(f"Letter '{letter_id}' variant #{number} must define 'content'.")
    return errors


def validate_file(path: str | Path) -> list[str]:
    """Validate any definition file, picking the validator from its top-level key."""
    try:
        data = _read_json(path)
    except (OSError, ValueError) as exc:
        return [f"Cannot read {path}: {exc}"]
    if isinstance(data, dict):
        for key, validate in (
            ("categories", validate_catalog_dict),
            ("segments", validate_wheel_dict),
            ("games", validate_arcade_dict),
            ("letters", validate_letters_dict),
        ):
            if key in data:
                return validate(data)
    return [f"{path} is not a catalog, wheel, arcade or letters definition."]


def _positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _format_errors(prefix: str, errors: Iterable[str]) -> str:
    formatted = "\n".join(f"- {err}" for err in errors)
    return f"{prefix}:\n{formatted}"
