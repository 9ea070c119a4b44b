"""Pytest configuration and shared fixtures."""

import os
import random
import sys
from pathlib import Path

import pytest

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

# Add the project root to the path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from meteor_assets import default_assets  # noqa: E402
from meteor_simulation import World  # noqa: E402


@pytest.fixture
def assets():
    return default_assets()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def world(assets, rng):
    return World(assets, rng)


@pytest.fixture
def quiet_world(assets, rng):
    """A world whose spawn timer never fires during a test."""
    return World(assets, rng, spawn_interval=3600)
