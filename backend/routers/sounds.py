"""Sound selection REST endpoints.

Internal API used by the briefing generator before it mixes audio:
- Select one sound per category (plus midtros) for a briefing
- List library assets
- Audit that every category has a universal fallback

A category with no match is reported in `missing`, not treated as an error.
When every category misses, the generator falls back to speech-only output.
"""

from __future__ import annotations

import logging
import random

import httpx
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from config import BRIEFING_TIMEZONE, SOUND_ASSETS_PATH, SOUND_ASSETS_URL
from services.playback_context import build_playback_context
from services.sound_library import SoundLibrary, SoundLibraryError, audit_fallbacks
from services.sound_models import (
    ALL_CATEGORIES,
    PlaybackContext,
    SoundAsset,
    SoundCategory,
)
from services.sound_selector import (
    InvalidContextError,
    MidtroPolicy,
    select_asset,
    select_midtros,
    validate_context,
)

router = APIRouter(prefix="/api/internal", tags=["sounds"])
logger = logging.getLogger(__name__)

_library: SoundLibrary | None = None


class SelectSoundsRequest(BaseModel):
    # Either a full context, or the content fields with time derived server-side
    context: PlaybackContext | None = None
    duration_seconds: float | None = None
    sport_id: int | None = None
    league_id: int | None = None
    team_id: int | None = None
    categories: list[SoundCategory] | None = None
    midtro_count: int = Field(default=0, ge=0)
    midtro_policy: MidtroPolicy = MidtroPolicy.REUSE


class SelectSoundsResponse(BaseModel):
    context: PlaybackContext
    selections: dict[SoundCategory, SoundAsset | None]
    midtros: list[SoundAsset | None] = []
    missing: list[SoundCategory] = []


class AuditResponse(BaseModel):
    ok: bool
    asset_count: int
    missing_fallbacks: list[SoundCategory]


async def get_library() -> SoundLibrary:
    """Load the sound library once per process."""
    global _library
    if _library is None:
        try:
            if SOUND_ASSETS_URL:
                _library = await SoundLibrary.from_url(SOUND_ASSETS_URL)
            else:
                _library = SoundLibrary.from_file(SOUND_ASSETS_PATH)
        except SoundLibraryError as e:
            logger.error("[SOUNDS] Library load failed: %s", e)
            cause = e.__cause__
            status = 502 if isinstance(cause, httpx.HTTPError) else 500
            raise HTTPException(status_code=status, detail=str(e))
    return _library


def get_rng() -> random.Random | None:
    """Tie-break source. None selects the engine's unseeded default."""
    return None


def _resolve_context(req: SelectSoundsRequest) -> PlaybackContext:
    if req.context is not None:
        return req.context
    if req.duration_seconds is None:
        raise HTTPException(
            status_code=422,
            detail="Either context or duration_seconds is required",
        )
    return build_playback_context(
        duration_seconds=req.duration_seconds,
        sport_id=req.sport_id,
        league_id=req.league_id,
        team_id=req.team_id,
        tz=BRIEFING_TIMEZONE,
    )


@router.post("/select-sounds", response_model=SelectSoundsResponse)
async def select_sounds(
    req: SelectSoundsRequest,
    library: SoundLibrary = Depends(get_library),
    rng: random.Random | None = Depends(get_rng),
):
    """Select one asset per requested category for a single briefing."""
    context = _resolve_context(req)
    try:
        validate_context(context)
    except InvalidContextError as e:
        raise HTTPException(status_code=422, detail=str(e))

    if req.categories is None:
        categories = list(ALL_CATEGORIES)
    else:
        categories = list(dict.fromkeys(req.categories))
    grouped = library.by_category()
    selections = {
        category: select_asset(category, context, grouped[category], rng=rng)
        for category in categories
    }
    midtros = select_midtros(
        context,
        grouped[SoundCategory.MIDTRO],
        req.midtro_count,
        policy=req.midtro_policy,
        rng=rng,
    )
    missing = [c for c, asset in selections.items() if asset is None]

    logger.info(
        "[SOUNDS] select duration=%.1f sport=%s league=%s team=%s time=%s day=%d picked=%s missing=%s",
        context.duration_seconds,
        context.sport_id,
        context.league_id,
        context.team_id,
        context.time_of_day.value,
        context.day_of_week,
        {c.value: a.id for c, a in selections.items() if a is not None},
        [c.value for c in missing],
    )
    if categories and len(missing) == len(categories):
        logger.warning("[SOUNDS] No sounds matched any category; briefing will be speech-only")

    return SelectSoundsResponse(
        context=context,
        selections=selections,
        midtros=midtros,
        missing=missing,
    )


@router.get("/sounds", response_model=list[SoundAsset])
async def list_sounds(
    category: SoundCategory | None = None,
    library: SoundLibrary = Depends(get_library),
):
    """List library assets, optionally for a single category."""
    if category is None:
        return library.all()
    return library.for_category(category)


@router.get("/sounds/audit", response_model=AuditResponse)
async def audit_sounds(library: SoundLibrary = Depends(get_library)):
    """Report categories without an active unconditioned fallback asset."""
    missing = audit_fallbacks(library)
    return AuditResponse(
        ok=not missing,
        asset_count=len(library),
        missing_fallbacks=missing,
    )
