"""Shared test fixtures and configuration."""

import random
import sys
from pathlib import Path

import pytest

# Add backend dir to path so imports work
sys.path.insert(0, str(Path(__file__).parent.parent))

from services.sound_models import (
    PlaybackContext,
    SoundAsset,
    SoundCategory,
    SoundConditions,
    TimeOfDay,
)

SEED_FILE = Path(__file__).parent.parent / "data" / "sound_assets.json"


def make_asset(
    asset_id: str,
    category: SoundCategory = SoundCategory.INTRO,
    is_active: bool = True,
    **conditions,
) -> SoundAsset:
    """Build an asset; keyword args become its conditions."""
    return SoundAsset(
        id=asset_id,
        category=category,
        file_reference=f"sounds/{category.value}/{asset_id}.mp3",
        conditions=SoundConditions(**conditions),
        is_active=is_active,
    )


def make_context(**overrides) -> PlaybackContext:
    """Wednesday afternoon, 60s, no sport/league/team unless overridden."""
    fields = {
        "duration_seconds": 60,
        "time_of_day": TimeOfDay.AFTERNOON,
        "day_of_week": 3,
    }
    fields.update(overrides)
    return PlaybackContext(**fields)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def seed_file() -> Path:
    return SEED_FILE
