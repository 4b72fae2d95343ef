"""Sound asset and playback context models.

Shared by the selection engine, the sound library and the HTTP layer, so the
same types validate JSON seed files and request bodies.

Conditions on an asset are independent axes. None on an axis means "no
restriction"; an empty list is treated exactly the same way.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator, model_validator


class SoundCategory(str, Enum):
    INTRO = "intro"
    BACKGROUND = "background"
    MIDTRO = "midtro"
    OUTRO = "outro"
    AD_INTRO = "ad_intro"
    AD_OUTRO = "ad_outro"


# Playback order within a briefing
ALL_CATEGORIES: tuple[SoundCategory, ...] = (
    SoundCategory.INTRO,
    SoundCategory.BACKGROUND,
    SoundCategory.MIDTRO,
    SoundCategory.OUTRO,
    SoundCategory.AD_INTRO,
    SoundCategory.AD_OUTRO,
)


class TimeOfDay(str, Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    NIGHT = "night"


class SoundConditions(BaseModel):
    max_duration_seconds: int | None = None
    min_duration_seconds: int | None = None
    sport_ids: list[int] | None = None
    league_ids: list[int] | None = None
    team_ids: list[int] | None = None
    time_of_day: TimeOfDay | None = None
    day_of_week: list[int] | None = Field(
        default=None, description="0-6, Sunday = 0"
    )
    priority: int = 0

    @field_validator("day_of_week")
    @classmethod
    def check_days(cls, days: list[int] | None) -> list[int] | None:
        if days and any(not 0 <= d <= 6 for d in days):
            raise ValueError(f"day_of_week values must be 0-6 (Sunday = 0), got {days}")
        return days

    @model_validator(mode="after")
    def check_duration_window(self) -> "SoundConditions":
        lo, hi = self.min_duration_seconds, self.max_duration_seconds
        if lo is not None and hi is not None and lo > hi:
            raise ValueError(
                f"min_duration_seconds ({lo}) is greater than max_duration_seconds ({hi})"
            )
        return self

    def is_universal(self) -> bool:
        """True when no axis restricts anything (priority is not an axis)."""
        return (
            self.max_duration_seconds is None
            and self.min_duration_seconds is None
            and not self.sport_ids
            and not self.league_ids
            and not self.team_ids
            and self.time_of_day is None
            and not self.day_of_week
        )


class SoundAsset(BaseModel):
    id: str
    category: SoundCategory
    file_reference: str
    duration_seconds: float | None = None
    conditions: SoundConditions = Field(default_factory=SoundConditions)
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None


class PlaybackContext(BaseModel):
    """Selection query for one briefing.

    Range checks live in sound_selector.validate_context, which raises
    InvalidContextError rather than a pydantic ValidationError.
    """

    duration_seconds: float
    sport_id: int | None = None
    league_id: int | None = None
    team_id: int | None = None
    time_of_day: TimeOfDay
    day_of_week: int = Field(description="0-6, Sunday = 0")
