"""Sound asset selector.

Picks the intro/background/midtro/outro/ad stingers for a briefing from the
assets stored in the sound library.

Selection flow for one category:
  1. Eligibility: drop inactive assets and any asset whose conditions fail
     on any axis (duration window, sport/league/team, time of day, weekday).
  2. Ranking: keep only the eligible assets sharing the highest priority.
  3. Tie-break: uniform random choice among those.

This module is pure: no I/O, no logging, no mutation of the assets passed in.
"""

from __future__ import annotations

import math
import random
from collections.abc import Iterable, Mapping
from enum import Enum

from services.sound_models import (
    ALL_CATEGORIES,
    PlaybackContext,
    SoundAsset,
    SoundCategory,
    SoundConditions,
)

# Unseeded and safe to share between threads. Tests pass their own
# random.Random(seed) instead of touching this.
_DEFAULT_RNG = random.SystemRandom()


class InvalidContextError(ValueError):
    """Raised when a PlaybackContext cannot be evaluated."""


class MidtroPolicy(str, Enum):
    REUSE = "reuse"
    INDEPENDENT = "independent"


def validate_context(context: PlaybackContext) -> None:
    """Fail fast on a malformed context. Never coerces."""
    duration = context.duration_seconds
    if not math.isfinite(duration) or duration < 0:
        raise InvalidContextError(
            f"duration_seconds must be a non-negative number, got {duration!r}"
        )
    if not 0 <= context.day_of_week <= 6:
        raise InvalidContextError(
            f"day_of_week must be between 0 (Sunday) and 6, got {context.day_of_week}"
        )


# ---------------------------------------------------------------------------
# Eligibility
# ---------------------------------------------------------------------------

def _passes_duration(conditions: SoundConditions, duration: float) -> bool:
    if conditions.max_duration_seconds is not None and duration > conditions.max_duration_seconds:
        return False
    if conditions.min_duration_seconds is not None and duration < conditions.min_duration_seconds:
        return False
    return True


def _passes_membership(allowed: list[int] | None, value: int | None) -> bool:
    """Empty or None means any. A None value never satisfies a real restriction."""
    if not allowed:
        return True
    return value is not None and value in allowed


def is_eligible(asset: SoundAsset, context: PlaybackContext) -> bool:
    """Return True if the asset is active and passes ALL of its condition axes."""
    if not asset.is_active:
        return False
    conditions = asset.conditions
    if not _passes_duration(conditions, context.duration_seconds):
        return False
    if not _passes_membership(conditions.sport_ids, context.sport_id):
        return False
    if not _passes_membership(conditions.league_ids, context.league_id):
        return False
    if not _passes_membership(conditions.team_ids, context.team_id):
        return False
    if conditions.time_of_day is not None and conditions.time_of_day != context.time_of_day:
        return False
    if conditions.day_of_week and context.day_of_week not in conditions.day_of_week:
        return False
    return True


# ---------------------------------------------------------------------------
# Ranking + tie-break
# ---------------------------------------------------------------------------

def top_priority(assets: Iterable[SoundAsset]) -> list[SoundAsset]:
    """All assets sharing the maximum priority, in input order."""
    assets = list(assets)
    if not assets:
        return []
    best = max(a.conditions.priority for a in assets)
    return [a for a in assets if a.conditions.priority == best]


def select_asset(
    category: SoundCategory,
    context: PlaybackContext,
    candidates: Iterable[SoundAsset],
    rng: random.Random | None = None,
) -> SoundAsset | None:
    """Select the best matching asset for one category.

    Candidates may include inactive assets and assets from other categories;
    both are skipped. Returns None when nothing is eligible, which callers
    should treat as "leave this category out of the mix".

    Raises InvalidContextError for a malformed context.
    """
    validate_context(context)
    eligible = [
        a for a in candidates
        if a.category == category and is_eligible(a, context)
    ]
    best = top_priority(eligible)
    if not best:
        return None
    if len(best) == 1:
        return best[0]
    return (rng or _DEFAULT_RNG).choice(best)


def select_all_sounds(
    context: PlaybackContext,
    assets_by_category: Mapping[SoundCategory, Iterable[SoundAsset]],
    rng: random.Random | None = None,
) -> dict[SoundCategory, SoundAsset | None]:
    """Run select_asset for every category. Missing categories map to None."""
    validate_context(context)
    return {
        category: select_asset(category, context, assets_by_category.get(category, ()), rng=rng)
        for category in ALL_CATEGORIES
    }


def select_midtros(
    context: PlaybackContext,
    candidates: Iterable[SoundAsset],
    transitions: int,
    policy: MidtroPolicy = MidtroPolicy.REUSE,
    rng: random.Random | None = None,
) -> list[SoundAsset | None]:
    """Pick a midtro for each topic transition in a briefing.

    REUSE selects once and repeats that asset at every transition.
    INDEPENDENT draws again per transition, so repeats are possible.
    """
    if transitions <= 0:
        return []
    candidates = list(candidates)
    if policy == MidtroPolicy.REUSE:
        chosen = select_asset(SoundCategory.MIDTRO, context, candidates, rng=rng)
        return [chosen] * transitions
    return [
        select_asset(SoundCategory.MIDTRO, context, candidates, rng=rng)
        for _ in range(transitions)
    ]
