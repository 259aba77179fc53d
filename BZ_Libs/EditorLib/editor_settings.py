"""
Editor-wide settings for the blur zone editor.

Settings are an explicit value held by a SettingsProvider. Components read
the current value with get() and register for changes with subscribe();
every update notifies subscribers synchronously with the new settings.

Classes:
    EditorSettings: Tunable editor behaviour
    SettingsProvider: Holder with subscribe/notify

Functions:
    load_settings: Read settings from a JSON file (defaults on failure)
    save_settings: Write settings to a JSON file
"""

from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional
import json
import logging

from BZ_Libs.constants import (
    DEFAULT_BLUR_AMOUNT,
    HANDLE_SIZE,
    ROTATION_HANDLE_OFFSET,
    MIN_DRAW_SIZE,
    MIN_RESIZE_SIZE,
    DEFAULT_NEW_ZONE_WIDTH,
    DEFAULT_NEW_ZONE_HEIGHT,
    SCHEMA_VERSION,
    FIELD_SCHEMA_VERSION,
)
from BZ_Libs.ZoneLib.zone_models import clamp_blur_amount

logger = logging.getLogger(__name__)

SettingsListener = Callable[["EditorSettings"], None]


@dataclass(frozen=True)
class EditorSettings:
    """Configuration for the blur zone editor.

    Attributes:
        blur_enabled: Whether blur zones are shown on public pages
        default_blur_amount: Blur radius given to new zones (2-20)
        handle_size: Half-width of the corner handle hit box, in pixels
        rotation_handle_offset: Distance of the rotation handle above the top edge
        min_draw_size: Drawn rectangles must exceed this in both dimensions
        min_resize_size: Floor for width and height while resizing
        default_zone_width: Width of zones added with "Add zone"
        default_zone_height: Height of zones added with "Add zone"
        show_handles: Draw handles on the selected zone
    """
    blur_enabled: bool = True
    default_blur_amount: int = DEFAULT_BLUR_AMOUNT
    handle_size: float = HANDLE_SIZE
    rotation_handle_offset: float = ROTATION_HANDLE_OFFSET
    min_draw_size: float = MIN_DRAW_SIZE
    min_resize_size: float = MIN_RESIZE_SIZE
    default_zone_width: float = DEFAULT_NEW_ZONE_WIDTH
    default_zone_height: float = DEFAULT_NEW_ZONE_HEIGHT
    show_handles: bool = True

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EditorSettings":
        """Create from dictionary, ignoring unknown keys and bad values."""
        defaults = cls()
        values: Dict[str, Any] = {}
        for settings_field in fields(cls):
            if settings_field.name not in data:
                continue
            raw = data[settings_field.name]
            default = getattr(defaults, settings_field.name)
            try:
                if isinstance(default, bool):
                    values[settings_field.name] = bool(raw)
                elif isinstance(default, int):
                    values[settings_field.name] = int(raw)
                else:
                    values[settings_field.name] = max(0.0, float(raw))
            except (TypeError, ValueError):
                logger.warning(f"Ignoring invalid setting {settings_field.name}={raw!r}")
        return cls(**values).validated()

    def validated(self) -> "EditorSettings":
        return replace(self, default_blur_amount=clamp_blur_amount(self.default_blur_amount))


class SettingsProvider:
    """
    Holds the current EditorSettings and notifies subscribers of changes.

    Example:
        >>> provider = SettingsProvider()
        >>> unsubscribe = provider.subscribe(lambda s: print(s.default_blur_amount))
        >>> _ = provider.update(default_blur_amount=12)
        12
        >>> unsubscribe()
    """

    def __init__(self, settings: Optional[EditorSettings] = None):
        self._settings = (settings or EditorSettings()).validated()
        self._listeners: List[SettingsListener] = []

    def get(self) -> EditorSettings:
        return self._settings

    def subscribe(self, listener: SettingsListener) -> Callable[[], None]:
        """
        Register a listener called with the new settings after each change.

        Returns:
            A function that removes the listener
        """
        if not callable(listener):
            raise ValueError(f"listener must be callable, got {type(listener)}")
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def replace(self, settings: EditorSettings) -> None:
        settings = settings.validated()
        if settings == self._settings:
            return
        self._settings = settings
        self._notify()

    def update(self, **changes: Any) -> EditorSettings:
        """Apply field changes and notify. Unknown field names raise TypeError."""
        self.replace(replace(self._settings, **changes))
        return self._settings

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self._settings)


def load_settings(settings_path: Path) -> EditorSettings:
    try:
        payload = json.loads(Path(settings_path).read_text(encoding="utf-8"))
    except (FileNotFoundError, json.JSONDecodeError, OSError):
        return EditorSettings()

    if not isinstance(payload, dict):
        return EditorSettings()
    return EditorSettings.from_dict(payload)


def save_settings(settings_path: Path, settings: EditorSettings) -> None:
    payload = settings.to_dict()
    payload[FIELD_SCHEMA_VERSION] = SCHEMA_VERSION
    Path(settings_path).write_text(json.dumps(payload, indent=2), encoding="utf-8")
