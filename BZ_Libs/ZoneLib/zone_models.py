"""
Blur zone data models for Blur Zones.

A blur zone is one rectangular privacy region drawn over a gallery image.
Zones are stored per image in a BlurZoneSet keyed by the canonical image path.

Classes:
    ZoneMetadata: Image dimensions and provenance captured when a zone is saved
    BlurZone: One rectangle with position, size, rotation and blur strength

Functions:
    sanitize_zone: Build a BlurZone from loosely-typed persisted data
    sanitize_zones: Sanitize a sequence, dropping malformed entries

Type Aliases:
    BlurZoneSet: Mapping of canonical image key -> ordered list of BlurZone
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple
import math
import uuid

from BZ_Libs.constants import (
    DEFAULT_BLUR_AMOUNT,
    DEFAULT_ROTATION,
    DEFAULT_ZONE_SIZE,
    DEFAULT_ZONE_X,
    DEFAULT_ZONE_Y,
    MAX_BLUR_AMOUNT,
    MIN_BLUR_AMOUNT,
    SPACE_PERCENT_CENTER,
    SPACE_PIXEL,
    FIELD_ZONE_ID,
    FIELD_X,
    FIELD_Y,
    FIELD_WIDTH,
    FIELD_HEIGHT,
    FIELD_ROTATION,
    FIELD_BLUR_AMOUNT,
    FIELD_METADATA,
    FIELD_IMAGE_WIDTH,
    FIELD_IMAGE_HEIGHT,
    FIELD_TIMESTAMP_CREATED,
    FIELD_TIMESTAMP_SAVED,
    FIELD_SOURCE_URL_ORIGINAL,
    FIELD_SOURCE_URL_CANONICAL,
    FIELD_EDITOR_VERSION,
    FIELD_COORDINATE_SPACE,
    LEGACY_ZONE_ALIASES,
    LEGACY_METADATA_ALIASES,
)

_MISSING = object()


def new_zone_id() -> str:
    return uuid.uuid4().hex


def now_timestamp() -> str:
    return datetime.now().isoformat(timespec="milliseconds")


def normalize_rotation(value: float) -> float:
    """Wrap an angle in degrees into [0, 360); 360 is treated as 0."""
    wrapped = math.fmod(float(value), 360.0)
    if wrapped < 0:
        wrapped += 360.0
    if wrapped >= 360.0:
        wrapped = 0.0
    return wrapped + 0.0


def clamp_blur_amount(value: Any, default: int = DEFAULT_BLUR_AMOUNT) -> int:
    number = _coerce_number(value)
    if number is None:
        number = float(default)
    return int(max(MIN_BLUR_AMOUNT, min(MAX_BLUR_AMOUNT, round(number))))


@dataclass
class ZoneMetadata:
    """Provenance of a zone.

    Attributes:
        image_width: Natural width of the image the zone was saved against (0 = unknown)
        image_height: Natural height of the image the zone was saved against (0 = unknown)
        timestamp_created: ISO timestamp of the first save
        timestamp_saved: ISO timestamp of the latest save
        source_image_url_original: Image reference as the editor received it
        source_image_url_canonical: Canonical key the zone set is stored under
        editor_version: Version tag of the editor that wrote the zone
        coordinate_space: "pixel" (top-left, pixels) or "percent-center"
    """
    image_width: float = 0.0
    image_height: float = 0.0
    timestamp_created: str = field(default_factory=now_timestamp)
    timestamp_saved: Optional[str] = None
    source_image_url_original: Optional[str] = None
    source_image_url_canonical: Optional[str] = None
    editor_version: Optional[str] = None
    coordinate_space: str = SPACE_PIXEL

    @property
    def has_dimensions(self) -> bool:
        return self.image_width > 0 and self.image_height > 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            FIELD_IMAGE_WIDTH: self.image_width,
            FIELD_IMAGE_HEIGHT: self.image_height,
            FIELD_TIMESTAMP_CREATED: self.timestamp_created,
            FIELD_TIMESTAMP_SAVED: self.timestamp_saved,
            FIELD_SOURCE_URL_ORIGINAL: self.source_image_url_original,
            FIELD_SOURCE_URL_CANONICAL: self.source_image_url_canonical,
            FIELD_EDITOR_VERSION: self.editor_version,
            FIELD_COORDINATE_SPACE: self.coordinate_space,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "ZoneMetadata":
        """Create from a persisted dictionary, accepting legacy key spellings."""
        if not isinstance(data, Mapping):
            return cls()

        values = {name: _first_present(data, aliases) for name, aliases in LEGACY_METADATA_ALIASES.items()}

        metadata = cls()
        width = _coerce_number(values[FIELD_IMAGE_WIDTH])
        height = _coerce_number(values[FIELD_IMAGE_HEIGHT])
        metadata.image_width = max(0.0, width) if width is not None else 0.0
        metadata.image_height = max(0.0, height) if height is not None else 0.0

        created = values[FIELD_TIMESTAMP_CREATED]
        if created is not _MISSING and created is not None:
            metadata.timestamp_created = str(created)
        saved = values[FIELD_TIMESTAMP_SAVED]
        if saved is not _MISSING and saved is not None:
            metadata.timestamp_saved = str(saved)

        for name in (FIELD_SOURCE_URL_ORIGINAL, FIELD_SOURCE_URL_CANONICAL, FIELD_EDITOR_VERSION):
            value = values[name]
            if value is not _MISSING and value is not None:
                setattr(metadata, name, str(value))

        space = values[FIELD_COORDINATE_SPACE]
        if space == SPACE_PERCENT_CENTER:
            metadata.coordinate_space = SPACE_PERCENT_CENTER
        return metadata


@dataclass
class BlurZone:
    """One rectangular blur region.

    For editor zones x/y is the top-left corner in pixels. Zones whose
    metadata says "percent-center" use x/y as the centre in percent.
    Rotation is in degrees about the centre, in [0, 360).
    """
    x: float = DEFAULT_ZONE_X
    y: float = DEFAULT_ZONE_Y
    width: float = DEFAULT_ZONE_SIZE
    height: float = DEFAULT_ZONE_SIZE
    rotation: float = DEFAULT_ROTATION
    blur_amount: int = DEFAULT_BLUR_AMOUNT
    metadata: ZoneMetadata = field(default_factory=ZoneMetadata)
    id: str = field(default_factory=new_zone_id)

    @property
    def center(self) -> Tuple[float, float]:
        return self.x + self.width / 2.0, self.y + self.height / 2.0

    @property
    def is_percent_center(self) -> bool:
        return self.metadata.coordinate_space == SPACE_PERCENT_CENTER

    def copy(self) -> "BlurZone":
        return replace(self, metadata=replace(self.metadata))

    def to_dict(self) -> Dict[str, Any]:
        return {
            FIELD_ZONE_ID: self.id,
            FIELD_X: self.x,
            FIELD_Y: self.y,
            FIELD_WIDTH: self.width,
            FIELD_HEIGHT: self.height,
            FIELD_ROTATION: self.rotation,
            FIELD_BLUR_AMOUNT: self.blur_amount,
            FIELD_METADATA: self.metadata.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Any) -> Optional["BlurZone"]:
        return sanitize_zone(data)


BlurZoneSet = Dict[str, List[BlurZone]]


def _first_present(data: Mapping, aliases: Iterable[str]) -> Any:
    for alias in aliases:
        if alias in data:
            return data[alias]
    return _MISSING


def _coerce_number(value: Any) -> Optional[float]:
    """Coerce to a finite float; None when the value has no numeric reading."""
    if value is None or value is _MISSING or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _coerce_field(data: Mapping, name: str, default: float) -> Tuple[bool, float]:
    """Return (ok, value). Absent/None values take the default; junk fails."""
    raw = data.get(name)
    if raw is None:
        return True, default
    number = _coerce_number(raw)
    if number is None:
        return False, default
    return True, number


def sanitize_zone(raw: Any) -> Optional[BlurZone]:
    """
    Build a BlurZone from loosely-typed data.

    Missing x/y default to 0 and missing width/height to 10; rotation,
    blur amount and metadata get defaults when absent. Negative sizes are
    flipped into a positive rectangle anchored at the true top-left.

    Returns:
        The sanitized zone, or None when the entry is not a mapping, one of
        x/y/width/height is present but not numeric, or the size is zero.
    """
    if not isinstance(raw, Mapping):
        return None

    results = [
        _coerce_field(raw, FIELD_X, DEFAULT_ZONE_X),
        _coerce_field(raw, FIELD_Y, DEFAULT_ZONE_Y),
        _coerce_field(raw, FIELD_WIDTH, DEFAULT_ZONE_SIZE),
        _coerce_field(raw, FIELD_HEIGHT, DEFAULT_ZONE_SIZE),
    ]
    if not all(ok for ok, _ in results):
        return None
    x, y, width, height = (value for _, value in results)

    if width < 0:
        x, width = x + width, -width
    if height < 0:
        y, height = y + height, -height
    if width <= 0 or height <= 0:
        return None

    rotation_raw = _first_present(raw, LEGACY_ZONE_ALIASES[FIELD_ROTATION])
    rotation = _coerce_number(rotation_raw)
    blur_raw = _first_present(raw, LEGACY_ZONE_ALIASES[FIELD_BLUR_AMOUNT])
    metadata_raw = _first_present(raw, LEGACY_ZONE_ALIASES[FIELD_METADATA])

    zone_id = raw.get(FIELD_ZONE_ID)
    return BlurZone(
        x=x,
        y=y,
        width=width,
        height=height,
        rotation=normalize_rotation(rotation) if rotation is not None else DEFAULT_ROTATION,
        blur_amount=clamp_blur_amount(blur_raw if blur_raw is not _MISSING else None),
        metadata=ZoneMetadata.from_dict(metadata_raw),
        id=str(zone_id) if zone_id else new_zone_id(),
    )


def sanitize_zones(raw_zones: Any) -> Tuple[List[BlurZone], int]:
    """
    Sanitize a persisted zone list.

    Returns:
        (zones, dropped) where dropped counts the malformed entries removed.
        A value that is not a list yields ([], 0).
    """
    if not isinstance(raw_zones, (list, tuple)):
        return [], 0

    zones: List[BlurZone] = []
    dropped = 0
    seen_ids = set()
    for entry in raw_zones:
        if isinstance(entry, BlurZone):
            entry = entry.to_dict()
        zone = sanitize_zone(entry)
        if zone is None:
            dropped += 1
            continue
        if zone.id in seen_ids:
            zone.id = new_zone_id()
        seen_ids.add(zone.id)
        zones.append(zone)
    return zones, dropped
