"""Sound library: the store of candidate sound assets.

Assets are loaded either from a local JSON seed file or from a remote JSON
endpoint. Both sources hold a list of SoundAsset records:

  [{"id": "intro-default", "category": "intro",
    "file_reference": "sounds/intro/default.mp3",
    "conditions": {"priority": 0}, "is_active": true}, ...]

Every category is expected to carry at least one active asset with no
conditions, so selection always has a fallback. The selector doesn't
enforce that; audit_fallbacks() reports the categories that break it.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

from services.sound_models import ALL_CATEGORIES, SoundAsset, SoundCategory

logger = logging.getLogger(__name__)

_ASSET_LIST = TypeAdapter(list[SoundAsset])


class SoundLibraryError(RuntimeError):
    """Raised when the sound library cannot be loaded."""


class SoundLibrary:
    """Read-only snapshot of sound assets, grouped by category."""

    def __init__(self, assets: Iterable[SoundAsset]):
        self._assets: dict[str, SoundAsset] = {}
        for asset in assets:
            if asset.id in self._assets:
                raise SoundLibraryError(f"Duplicate sound asset id: {asset.id}")
            self._assets[asset.id] = asset

    def __len__(self) -> int:
        return len(self._assets)

    @classmethod
    def from_records(cls, records: Any, source: str = "<memory>") -> "SoundLibrary":
        """Validate raw JSON records into a library."""
        try:
            assets = _ASSET_LIST.validate_python(records)
        except ValidationError as e:
            raise SoundLibraryError(f"Invalid sound asset records in {source}: {e}") from e
        library = cls(assets)
        logger.info("[SOUNDS] Loaded %d assets from %s", len(library), source)
        for category in audit_fallbacks(library):
            logger.warning(
                "[SOUNDS] No active universal fallback for category '%s' in %s",
                category.value,
                source,
            )
        return library

    @classmethod
    def from_file(cls, path: str | Path) -> "SoundLibrary":
        path = Path(path)
        if not path.exists():
            raise SoundLibraryError(f"Missing sound asset file: {path}")
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise SoundLibraryError(f"Cannot read sound asset file {path}: {e}") from e
        try:
            records = json.loads(text)
        except json.JSONDecodeError as e:
            raise SoundLibraryError(f"Sound asset file {path} is not valid JSON: {e}") from e
        return cls.from_records(records, source=str(path))

    @classmethod
    async def from_url(
        cls, url: str, client: httpx.AsyncClient | None = None
    ) -> "SoundLibrary":
        """Fetch the asset list from a remote JSON endpoint."""
        try:
            if client is None:
                async with httpx.AsyncClient(timeout=10) as own_client:
                    resp = await own_client.get(url)
            else:
                resp = await client.get(url)
            resp.raise_for_status()
            records = resp.json()
        except httpx.HTTPError as e:
            raise SoundLibraryError(f"Failed to fetch sound assets from {url}: {e}") from e
        except ValueError as e:
            raise SoundLibraryError(f"Sound assets at {url} are not valid JSON: {e}") from e
        return cls.from_records(records, source=url)

    def all(self) -> list[SoundAsset]:
        return list(self._assets.values())

    def get(self, asset_id: str) -> SoundAsset | None:
        return self._assets.get(asset_id)

    def for_category(self, category: SoundCategory) -> list[SoundAsset]:
        """Every asset in a category, inactive ones included."""
        return [a for a in self._assets.values() if a.category == category]

    def by_category(self) -> dict[SoundCategory, list[SoundAsset]]:
        """Category -> assets, with an entry (possibly empty) for every category."""
        grouped: dict[SoundCategory, list[SoundAsset]] = {c: [] for c in ALL_CATEGORIES}
        for asset in self._assets.values():
            grouped[asset.category].append(asset)
        return grouped


def audit_fallbacks(library: SoundLibrary) -> list[SoundCategory]:
    """Return the categories with no active, unconditioned asset."""
    missing = []
    for category, assets in library.by_category().items():
        if not any(a.is_active and a.conditions.is_universal() for a in assets):
            missing.append(category)
    return missing
