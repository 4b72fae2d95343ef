"""Builds PlaybackContext values from wall-clock time."""

from __future__ import annotations

from datetime import datetime, tzinfo

from services.sound_models import PlaybackContext, TimeOfDay

# (first hour inclusive, TimeOfDay); anything before 05:00 is night
DAYPARTS: tuple[tuple[int, TimeOfDay], ...] = (
    (21, TimeOfDay.NIGHT),
    (17, TimeOfDay.EVENING),
    (12, TimeOfDay.AFTERNOON),
    (5, TimeOfDay.MORNING),
)


def time_of_day_for(hour: int) -> TimeOfDay:
    """Map an hour (0-23) to its daypart."""
    for start, part in DAYPARTS:
        if hour >= start:
            return part
    return TimeOfDay.NIGHT


def day_of_week_for(dt: datetime) -> int:
    """Sunday = 0 ... Saturday = 6 (datetime.weekday() starts at Monday)."""
    return (dt.weekday() + 1) % 7


def build_playback_context(
    duration_seconds: float,
    sport_id: int | None = None,
    league_id: int | None = None,
    team_id: int | None = None,
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> PlaybackContext:
    """Build a context for a briefing, deriving time fields from `now`.

    `now` defaults to the current time in `tz`. An aware `now` is converted
    to `tz` first, so the daypart reflects the listener's local clock.
    """
    if now is None:
        now = datetime.now(tz)
    elif tz is not None and now.tzinfo is not None:
        now = now.astimezone(tz)

    return PlaybackContext(
        duration_seconds=duration_seconds,
        sport_id=sport_id,
        league_id=league_id,
        team_id=team_id,
        time_of_day=time_of_day_for(now.hour),
        day_of_week=day_of_week_for(now),
    )
