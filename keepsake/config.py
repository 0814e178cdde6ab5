"""Configuration models for Keepsake."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal


StorageBackend = Literal["memory", "sqlalchemy"]

DATA_DIR = Path(__file__).with_name("data")


@dataclass(slots=True)
class StorageConfig:
    """Configure where profiles and letter metadata are persisted."""

    backend: StorageBackend = "memory"
    dsn: str | None = None
    echo_sql: bool = False

    def resolve_dsn(self) -> str | None:
        if self.dsn:
            return self.dsn
        if self.backend == "sqlalchemy":
            return "sqlite+aiosqlite:///./keepsake.db"
        return None


@dataclass(slots=True)
class ProgressionConfig:
    """Level curve: ``base_exp + exp_step * (level - 1)`` below the cap."""

    max_level: int = 10
    base_exp: int = 100
    exp_step: int = 50


@dataclass(slots=True)
class WheelConfig:
    """Prize wheel costs and cooldown."""

    spin_cost: int = 750
    reset_cost: int = 2000
    cooldown_seconds: int = 12 * 60 * 60
    segments_path: Path = field(default_factory=lambda: DATA_DIR / "wheel.json")


@dataclass(slots=True)
class EquipmentConfig:
    # When off, any owned item can go in any slot.
    strict_slots: bool = False


@dataclass(slots=True)
class LetterConfig:
    lock_minutes: float = 1.0
    letters_path: Path = field(default_factory=lambda: DATA_DIR / "letters.json")


@dataclass(slots=True)
class KeepsakeConfig:
    """Top-level configuration container."""

    bot_token: str = ""
    storage: StorageConfig = field(default_factory=StorageConfig)
    progression: ProgressionConfig = field(default_factory=ProgressionConfig)
    wheel: WheelConfig = field(default_factory=WheelConfig)
    equipment: EquipmentConfig = field(default_factory=EquipmentConfig)
    letters: LetterConfig = field(default_factory=LetterConfig)
    catalog_path: Path = field(default_factory=lambda: DATA_DIR / "catalog.json")
    arcade_path: Path = field(default_factory=lambda: DATA_DIR / "arcade.json")
    rng_seed: int | None = None

    @classmethod
    def from_env(cls) -> "KeepsakeConfig":
        """Create config from environment variables prefixed with KEEPSAKE_."""
        prefix = "KEEPSAKE_"
        defaults = cls()

        storage = StorageConfig(
            backend=os.getenv(f"{prefix}STORAGE_BACKEND", "memory"),
            dsn=os.getenv(f"{prefix}STORAGE_DSN"),
            echo_sql=_env_flag(f"{prefix}STORAGE_ECHO_SQL", False),
        )

        progression = ProgressionConfig(
            max_level=int(os.getenv(f"{prefix}MAX_LEVEL", "10")),
            base_exp=int(os.getenv(f"{prefix}BASE_EXP", "100")),
            exp_step=int(os.getenv(f"{prefix}EXP_STEP", "50")),
        )

        wheel = WheelConfig(
            spin_cost=int(os.getenv(f"{prefix}WHEEL_SPIN_COST", "750")),
            reset_cost=int(os.getenv(f"{prefix}WHEEL_RESET_COST", "2000")),
            cooldown_seconds=int(os.getenv(f"{prefix}WHEEL_COOLDOWN", str(12 * 60 * 60))),
            segments_path=_env_path(f"{prefix}WHEEL_PATH", defaults.wheel.segments_path),
        )

        letters = LetterConfig(
            lock_minutes=float(os.getenv(f"{prefix}LETTER_LOCK_MINUTES", "1")),
            letters_path=_env_path(f"{prefix}LETTERS_PATH", defaults.letters.letters_path),
        )

        return cls(
            bot_token=os.getenv(f"{prefix}BOT_TOKEN", ""),
            storage=storage,
            progression=progression,
            wheel=wheel,
            equipment=EquipmentConfig(
                strict_slots=_env_flag(f"{prefix}STRICT_SLOTS", False),
            ),
            letters=letters,
            catalog_path=_env_path(f"{prefix}CATALOG_PATH", defaults.catalog_path),
            arcade_path=_env_path(f"{prefix}ARCADE_PATH", defaults.arcade_path),
            rng_seed=(
                int(os.getenv(f"{prefix}RNG_SEED")) if os.getenv(f"{prefix}RNG_SEED") else None
            ),
        )


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes"}


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    return Path(raw).expanduser() if raw else default
