"""
Blur zone storage for Blur Zones.

Zone sets live in a single JSON document keyed by canonical image key:

    {
        "schema_version": 1,
        "updated_at": "2026-01-01T12:00:00",
        "image_blur_zones": {
            "/images/gallery-page/blue-alfa-repair/before-1-bluealfa.jpg": [ {zone}, ... ]
        }
    }

Loading is tolerant: a missing or unreadable file, or a document of the
wrong shape, reads as an empty store and malformed zones are dropped.
Write errors propagate to the caller.

Functions:
    load_store_data: Load and normalize the whole document
    save_store_data: Write the whole document

Classes:
    JsonZoneStore: Keyed zone persistence backed by one JSON file
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Sequence

from BZ_Libs.constants import (
    SCHEMA_VERSION,
    FIELD_SCHEMA_VERSION,
    FIELD_UPDATED_AT,
    FIELD_IMAGE_BLUR_ZONES,
)
from BZ_Libs.ZoneLib.zone_models import BlurZone, BlurZoneSet, sanitize_zones

logger = logging.getLogger(__name__)


def _empty_document() -> Dict[str, Any]:
    return {
        FIELD_SCHEMA_VERSION: SCHEMA_VERSION,
        FIELD_UPDATED_AT: None,
        FIELD_IMAGE_BLUR_ZONES: {},
    }


def load_store_data(store_path: Path) -> Dict[str, Any]:
    """
    Load the zone store document.

    Args:
        store_path: Path to the JSON file

    Returns:
        The document with image_blur_zones holding only list values.
        Defaults are returned if the file is missing or malformed.
    """
    try:
        payload = json.loads(Path(store_path).read_text(encoding="utf-8"))
    except FileNotFoundError:
        return _empty_document()
    except (json.JSONDecodeError, OSError) as exc:
        logger.warning(f"Could not read zone store {store_path}: {exc}")
        return _empty_document()

    if not isinstance(payload, dict):
        logger.warning(f"Zone store {store_path} is not a JSON object")
        return _empty_document()

    zone_sets = payload.get(FIELD_IMAGE_BLUR_ZONES)
    if not isinstance(zone_sets, dict):
        zone_sets = {}

    payload[FIELD_IMAGE_BLUR_ZONES] = {
        str(key): value for key, value in zone_sets.items() if isinstance(value, list)
    }
    payload.setdefault(FIELD_SCHEMA_VERSION, SCHEMA_VERSION)
    payload.setdefault(FIELD_UPDATED_AT, None)
    return payload


def save_store_data(store_path: Path, payload: Dict[str, Any]) -> None:
    payload[FIELD_SCHEMA_VERSION] = SCHEMA_VERSION
    payload[FIELD_UPDATED_AT] = datetime.now().isoformat(timespec="seconds")
    store_path = Path(store_path)
    store_path.parent.mkdir(parents=True, exist_ok=True)
    store_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")


class JsonZoneStore:
    """
    Zone persistence collaborator for BlurEditorController.

    Keys are stored exactly as given; callers pass canonical keys.

    Example:
        >>> store = JsonZoneStore(Path("blur_zones.json"))
        >>> store.save_zones("/images/gallery-page/mustang-rebuild/after-1.jpg", zones)
        >>> store.load_zones("/images/gallery-page/mustang-rebuild/after-1.jpg")
    """

    def __init__(self, store_path: Path):
        self.store_path = Path(store_path)

    @staticmethod
    def _check_key(canonical_key: str) -> str:
        if not canonical_key or not str(canonical_key).strip():
            raise ValueError("Zone store key must not be empty")
        return str(canonical_key)

    def load_zones(self, canonical_key: str) -> List[BlurZone]:
        key = self._check_key(canonical_key)
        zone_sets = load_store_data(self.store_path)[FIELD_IMAGE_BLUR_ZONES]
        zones, dropped = sanitize_zones(zone_sets.get(key, []))
        if dropped:
            logger.warning(f"Dropped {dropped} malformed zone(s) stored under {key}")
        return zones

    def save_zones(self, canonical_key: str, zones: Sequence[Any]) -> None:
        """Replace the zones stored under a key. An empty list removes the key."""
        key = self._check_key(canonical_key)
        payload = load_store_data(self.store_path)
        sanitized, _ = sanitize_zones(list(zones))
        if sanitized:
            payload[FIELD_IMAGE_BLUR_ZONES][key] = [zone.to_dict() for zone in sanitized]
        else:
            payload[FIELD_IMAGE_BLUR_ZONES].pop(key, None)
        save_store_data(self.store_path, payload)
        logger.info(f"Saved {len(sanitized)} blur zone(s) for {key}")

    def delete_zones(self, canonical_key: str) -> bool:
        key = self._check_key(canonical_key)
        payload = load_store_data(self.store_path)
        if key not in payload[FIELD_IMAGE_BLUR_ZONES]:
            return False
        del payload[FIELD_IMAGE_BLUR_ZONES][key]
        save_store_data(self.store_path, payload)
        return True

    def list_keys(self) -> List[str]:
        return sorted(load_store_data(self.store_path)[FIELD_IMAGE_BLUR_ZONES])

    def all_zones(self) -> BlurZoneSet:
        """Every stored zone set, sanitized. Keys whose zones are all malformed are omitted."""
        zone_sets: BlurZoneSet = {}
        for key, raw_zones in load_store_data(self.store_path)[FIELD_IMAGE_BLUR_ZONES].items():
            zones, _ = sanitize_zones(raw_zones)
            if zones:
                zone_sets[key] = zones
        return zone_sets
