"""Domain models and services."""

from .exceptions import (
    ContentLocked,
    CooldownActive,
    InsufficientFunds,
    InvalidAmount,
    InvalidName,
    KeepsakeError,
    NotOwned,
    ProfileExists,
    ProfileMissing,
    SlotMismatch,
    SpinInProgress,
    UnknownGame,
    UnknownItem,
    UnknownLetter,
)
from .items import EquipmentSlot, ItemCatalog, ItemCategory, ItemDefinition
from .profile import PlayerProfile, WheelState, normalize_profile
from .results import ActionResult
from .rewards import ItemReward, MessageReward, ProgressReward, Reward, ShardReward
from .events import EventBus
from .player import ProfileService
from .inventory import InventoryService
from .wheel import SpinResult, WheelSegment, WheelService
from .arcade import ArcadeGame, ArcadeService, CompletionResult
from .letters import Letter, LetterOpenResult, LetterService, LetterVariant

__all__ = [
    "ContentLocked",
    "CooldownActive",
    "InsufficientFunds",
    "InvalidAmount",
    "InvalidName",
    "KeepsakeError",
    "NotOwned",
    "ProfileExists",
    "ProfileMissing",
    "SlotMismatch",
    "SpinInProgress",
    "UnknownGame",
    "UnknownItem",
    "UnknownLetter",
    "EquipmentSlot",
    "ItemCatalog",
    "ItemCategory",
    "ItemDefinition",
    "PlayerProfile",
    "WheelState",
    "normalize_profile",
    "ActionResult",
    "ItemReward",
    "MessageReward",
    "ProgressReward",
    "Reward",
    "ShardReward",
    "EventBus",
    "ProfileService",
    "InventoryService",
    "SpinResult",
    "WheelSegment",
    "WheelService",
    "ArcadeGame",
    "ArcadeService",
    "CompletionResult",
    "Letter",
    "LetterOpenResult",
    "LetterService",
    "LetterVariant",
]
