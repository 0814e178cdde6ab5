"""Pytest fixtures for Keepsake."""

from __future__ import annotations

from random import Random

import pytest

from ..app import KeepsakeApp
from ..config import KeepsakeConfig


@pytest.fixture()
def memory_app() -> KeepsakeApp:
    return app_fixture()


def app_fixture(bot_token: str = "test", *, seed: int = 7, **kwargs) -> KeepsakeApp:
    """Build an app on in-memory storage with a seeded RNG."""
    config = KeepsakeConfig(bot_token=bot_token, rng_seed=seed, **kwargs)
    return KeepsakeApp(config, rng=Random(seed))
