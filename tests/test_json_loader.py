import json

import pytest

from keepsake.config import DATA_DIR
from keepsake.domain.items import EquipmentSlot
from keepsake.domain.rewards import ItemReward, MessageReward, ShardReward
from keepsake.loaders import (
    load_arcade,
    load_catalog,
    load_letters,
    load_wheel,
    parse_catalog_dict,
    parse_wheel_dict,
    validate_arcade_dict,
    validate_catalog_dict,
    validate_file,
    validate_letters_dict,
    validate_wheel_dict,
)


def test_bundled_catalog():
    catalog = load_catalog(DATA_DIR / "catalog.json")
    assert len(catalog) == 31
    assert [group.name for group in catalog.categories()] == [
        "Head Gear",
        "Body Gear",
        "Leggings",
        "Accessory",
        "Weapon",
        "Items",
        "Miscellaneous",
    ]
    sar = catalog.get_item("wp_sar21")
    assert (sar.name, sar.price, sar.slot, sar.category) == ("SAR21", 1000, EquipmentSlot.WEAPON, "Weapon")
    assert catalog.get_item("itm_potion_heal").slot is None
    assert len(catalog.items_for_slot(EquipmentSlot.WEAPON)) == 6


def test_bundled_wheel():
    segments = load_wheel(DATA_DIR / "wheel.json")
    assert [segment.segment_id for segment in segments] == [
        "ms_1500", "ms_500", "potion_heal", "potion_weak", "ms_5000",
        "hellblade", "necklace", "revive", "treat", "gift",
    ]
    assert segments[0].reward == ShardReward(1500)
    assert segments[5].reward == ItemReward("wp_hellblade")
    assert segments[8].reward == MessageReward("A treat from me: You are amazing! 💜")


def test_bundled_arcade_and_letters():
    games = load_arcade(DATA_DIR / "arcade.json")
    assert {game.game_id: game.required_keys for game in games} == {
        "reaction": 0, "aim": 1, "memory": 2, "rocks": 3, "flappy": 4, "rhythm": 5,
    }
    letters = load_letters(DATA_DIR / "letters.json")
    assert [letter.letter_id for letter in letters] == ["sad", "miss", "happy", "rainy"]
    miss = letters[1]
    assert miss.variants[0].kind == "image"
    assert miss.variants[0].caption
    assert all(len(letter.variants) == 3 for letter in letters)


@pytest.mark.parametrize("path", sorted(DATA_DIR.glob("*.json")))
def test_bundled_files_validate(path):
    assert validate_file(path) == []


def test_catalog_validation_reports_problems():
    errors = validate_catalog_dict(
        {
            "categories": [
                {"name": "Hats", "slot": "hat", "items": [{"id": "a", "name": "A", "price": -1}]},
                {"name": "More", "items": [{"id": "a", "name": "", "price": 5}]},
                {"name": "", "items": []},
            ]
        }
    )
    assert "Category 'Hats' has invalid slot 'hat'." in errors
    assert "Item 'a' has invalid 'price' value '-1'." in errors
    assert "Item id 'a' defined multiple times." in errors
    assert "Item 'a' must define non-empty 'name'." in errors
    assert "Category #3 must define non-empty 'name'." in errors
    assert validate_catalog_dict([]) == ["Catalog must be a JSON object."]


def test_parse_catalog_raises_with_all_errors():
    with pytest.raises(ValueError) as excinfo:
        parse_catalog_dict({"categories": [{"name": "X", "items": [{"id": "x", "name": "X", "price": True}]}]})
    assert str(excinfo.value).startswith("Catalog validation failed:")
    assert "- Item 'x' has invalid 'price' value 'True'." in str(excinfo.value)


def test_wheel_validation():
    data = {
        "segments": [
            {"id": "a", "weight": 0, "reward": {"type": "shards", "amount": 10}},
            {"id": "b", "weight": 1, "reward": {"type": "coupon"}},
            {"id": "c", "weight": 1, "reward": {"type": "item"}},
            {"id": "d", "weight": 1, "reward": {"type": "shards", "amount": 0}},
            {"id": "e", "weight": 2.5, "reward": {"type": "message", "text": "hi"}},
        ]
    }
    errors = validate_wheel_dict(data)
    assert errors == [
        "Segment 'a' weight must be a positive number.",
        "Segment 'b' has invalid reward type 'coupon'.",
        "Segment 'c' item reward must name an 'item'.",
        "Segment 'd' shard amount must be a positive integer.",
    ]
    with pytest.raises(ValueError, match="Wheel validation failed"):
        parse_wheel_dict(data)

    segment = parse_wheel_dict({"segments": [data["segments"][-1]]})[0]
    assert (segment.label, segment.weight) == ("e", 2.5)


def test_arcade_and_letters_validation():
    arcade_errors = validate_arcade_dict(
        {"games": [{"id": "g", "title": "G", "requiredKeys": -1, "firstReward": {"shards": -5}}]}
    )
    assert arcade_errors == [
        "Game 'g' has invalid 'requiredKeys' value '-1'.",
        "Game 'g' firstReward 'shards' must be a non-negative integer.",
    ]
    letter_errors = validate_letters_dict(
        {"letters": [{"id": "l", "title": "L", "variants": [{"type": "video", "content": "x"}]}]}
    )
    assert letter_errors == ["Letter 'l' variant #1 has invalid type 'video'."]


def test_validate_file_handles_unknown_and_broken_files(tmp_path):
    broken = tmp_path / "broken.json"
    broken.write_text("{oops", encoding="utf-8")
    assert validate_file(broken)[0].startswith(f"Cannot read {broken}")

    other = tmp_path / "other.json"
    other.write_text(json.dumps({"cards": []}), encoding="utf-8")
    assert validate_file(other) == [f"{other} is not a catalog, wheel, arcade or letters definition."]

    assert validate_file(tmp_path / "missing.json")[0].startswith("Cannot read")
