"""Tests for the sound library (file + mocked remote loading, fallback audit)."""

import json

import httpx
import pytest

from services.sound_library import SoundLibrary, SoundLibraryError, audit_fallbacks
from services.sound_models import ALL_CATEGORIES, SoundCategory
from tests.conftest import make_asset

MOCK_RECORDS = [
    {
        "id": "intro-default",
        "category": "intro",
        "file_reference": "sounds/intro/default.mp3",
        "conditions": {"priority": 0},
    },
    {
        "id": "intro-weekend",
        "category": "intro",
        "file_reference": "sounds/intro/weekend.mp3",
        "conditions": {"day_of_week": [0, 6], "priority": 2},
    },
]


def test_seed_file_loads_with_fallback_for_every_category(seed_file):
    library = SoundLibrary.from_file(seed_file)
    assert len(library) > len(ALL_CATEGORIES)
    assert audit_fallbacks(library) == []


def test_by_category_has_every_category():
    library = SoundLibrary.from_records(MOCK_RECORDS)
    grouped = library.by_category()
    assert list(grouped) == list(ALL_CATEGORIES)
    assert [a.id for a in grouped[SoundCategory.INTRO]] == ["intro-default", "intro-weekend"]
    assert grouped[SoundCategory.OUTRO] == []


def test_record_defaults():
    library = SoundLibrary.from_records(MOCK_RECORDS)
    asset = library.get("intro-default")
    assert asset.is_active is True
    assert asset.duration_seconds is None
    assert asset.conditions.is_universal()
    assert library.get("missing") is None


def test_for_category_includes_inactive():
    library = SoundLibrary([
        make_asset("on"),
        make_asset("off", is_active=False),
        make_asset("outro", category=SoundCategory.OUTRO),
    ])
    assert {a.id for a in library.for_category(SoundCategory.INTRO)} == {"on", "off"}


def test_audit_reports_missing_fallbacks():
    library = SoundLibrary([
        make_asset("intro"),
        make_asset("outro-off", category=SoundCategory.OUTRO, is_active=False),
        make_asset("midtro-night", category=SoundCategory.MIDTRO, time_of_day="night"),
    ])
    missing = audit_fallbacks(library)
    assert SoundCategory.INTRO not in missing
    assert SoundCategory.OUTRO in missing
    assert SoundCategory.MIDTRO in missing
    assert len(missing) == len(ALL_CATEGORIES) - 1


def test_duplicate_ids_rejected():
    with pytest.raises(SoundLibraryError, match="Duplicate"):
        SoundLibrary([make_asset("same"), make_asset("same")])


def test_invalid_category_rejected():
    bad = [{"id": "x", "category": "jingle", "file_reference": "x.mp3"}]
    with pytest.raises(SoundLibraryError, match="Invalid sound asset records"):
        SoundLibrary.from_records(bad)


def test_missing_file(tmp_path):
    with pytest.raises(SoundLibraryError, match="Missing"):
        SoundLibrary.from_file(tmp_path / "nope.json")


def test_invalid_json_file(tmp_path):
    path = tmp_path / "assets.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(SoundLibraryError, match="not valid JSON"):
        SoundLibrary.from_file(path)


def test_file_round_trip(tmp_path):
    path = tmp_path / "assets.json"
    path.write_text(json.dumps(MOCK_RECORDS), encoding="utf-8")
    library = SoundLibrary.from_file(path)
    assert {a.id for a in library.all()} == {"intro-default", "intro-weekend"}


def test_directory_path(tmp_path):
    with pytest.raises(SoundLibraryError, match="Cannot read") as excinfo:
        SoundLibrary.from_file(tmp_path)
    assert isinstance(excinfo.value.__cause__, OSError)


def test_non_utf8_file(tmp_path):
    path = tmp_path / "assets.json"
    path.write_bytes(b"\xff\xfe[")
    with pytest.raises(SoundLibraryError, match="Cannot read") as excinfo:
        SoundLibrary.from_file(path)
    assert isinstance(excinfo.value.__cause__, UnicodeDecodeError)


def test_out_of_range_conditions_rejected():
    bad_day = [{
        "id": "x", "category": "intro", "file_reference": "x.mp3",
        "conditions": {"day_of_week": [0, 7]},
    }]
    with pytest.raises(SoundLibraryError, match="day_of_week"):
        SoundLibrary.from_records(bad_day)

    bad_window = [{
        "id": "y", "category": "intro", "file_reference": "y.mp3",
        "conditions": {"min_duration_seconds": 120, "max_duration_seconds": 90},
    }]
    with pytest.raises(SoundLibraryError, match="min_duration_seconds"):
        SoundLibrary.from_records(bad_window)


def _mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_from_url_loads_records():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/sound-assets"
        return httpx.Response(200, json=MOCK_RECORDS)

    async with _mock_client(handler) as client:
        library = await SoundLibrary.from_url("https://assets.example/sound-assets", client=client)
    assert len(library) == 2


@pytest.mark.asyncio
async def test_from_url_http_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="unavailable")

    async with _mock_client(handler) as client:
        with pytest.raises(SoundLibraryError, match="Failed to fetch") as excinfo:
            await SoundLibrary.from_url("https://assets.example/sound-assets", client=client)
    assert isinstance(excinfo.value.__cause__, httpx.HTTPStatusError)


@pytest.mark.asyncio
async def test_from_url_bad_json():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>")

    async with _mock_client(handler) as client:
        with pytest.raises(SoundLibraryError, match="not valid JSON"):
            await SoundLibrary.from_url("https://assets.example/sound-assets", client=client)
