"""Loaders for declarative definitions (JSON)."""

from .json_loader import (
    load_arcade,
    load_catalog,
    load_letters,
    load_wheel,
    parse_arcade_dict,
    parse_catalog_dict,
    parse_letters_dict,
    parse_wheel_dict,
    validate_arcade_dict,
    validate_catalog_dict,
    validate_file,
    validate_letters_dict,
    validate_wheel_dict,
)

__all__ = [
    "load_arcade",
    "load_catalog",
    "load_letters",
    "load_wheel",
    "parse_arcade_dict",
    "parse_catalog_dict",
    "parse_letters_dict",
    "parse_wheel_dict",
    "validate_arcade_dict",
    "validate_catalog_dict",
    "validate_file",
    "validate_letters_dict",
    "validate_wheel_dict",
]
