"""
Interactive blur zone editor state machine.

BlurEditorController turns pointer events on an editing surface into blur
zone edits. It owns the working list of zones for one image and hands the
list to a persistence collaborator on save. It has no UI of its own; the Qt
window (or any other surface) forwards pointer coordinates in surface pixels.

States:
    idle -> drawing | dragging | resizing | rotating -> idle

Pointer-down looks at existing zones from the most recently added down:
a handle starts resizing (corner) or rotating, a point inside a zone starts
dragging, anything else starts drawing a new zone. Pointer-up commits a drawn
rectangle when it is large enough; pointer-leave cancels the gesture and
restores the zone it was editing.

Coordinates:
    Working zones are in surface pixels, top-left anchored. save() converts
    them to pixels of the image's natural size and stamps the metadata;
    load() converts stored zones back to the current surface size.

Classes:
    ZonePersistence: Protocol of the persistence collaborator
    BlurEditorController: The state machine
"""

from dataclasses import replace
from typing import Callable, List, Optional, Protocol, Sequence, Tuple, Union

from BZ_Libs.constants import (
    EDITOR_VERSION,
    ROTATION_DECIMALS,
    SPACE_PIXEL,
    HANDLE_ROTATION,
    HANDLE_TOP_LEFT,
    HANDLE_BOTTOM_RIGHT,
    STATE_IDLE,
    STATE_DRAWING,
    STATE_DRAGGING,
    STATE_RESIZING,
    STATE_ROTATING,
    CURSOR_DEFAULT,
    CURSOR_CROSSHAIR,
    CURSOR_MOVE,
    CURSOR_GRAB,
    CURSOR_NWSE_RESIZE,
    CURSOR_NESW_RESIZE,
)
from BZ_Libs.diagnostics import Diagnostics
from BZ_Libs.EditorLib.editor_settings import EditorSettings, SettingsProvider
from BZ_Libs.PathLib.path_normalizer import PathNormalizer
from BZ_Libs.ZoneLib.geometry import (
    angle_degrees,
    clamp_center,
    compute_rotation,
    hit_test_handle,
    point_in_rotated_rect,
    resize_from_pointer,
    rotated_half_extents,
)
from BZ_Libs.ZoneLib.zone_models import (
    BlurZone,
    ZoneMetadata,
    clamp_blur_amount,
    normalize_rotation,
    now_timestamp,
    sanitize_zones,
)

SOURCE = "editor"

Size = Tuple[float, float]
ZoneRef = Union[str, int]


class ZonePersistence(Protocol):
    """Keyed store of zone sets."""

    def save_zones(self, canonical_key: str, zones: List[BlurZone]) -> None:
        ...

    def load_zones(self, canonical_key: str) -> List[BlurZone]:
        ...


def _known(size: Optional[Size]) -> bool:
    return bool(size) and size[0] > 0 and size[1] > 0


class BlurEditorController:
    """
    Drives draw/drag/resize/rotate gestures over one image.

    Example:
        >>> controller = BlurEditorController("/images/gallery-page/x/y.jpg", store,
        ...                                   surface_size=(800, 600), natural_size=(1600, 1200))
        >>> controller.load()
        >>> controller.pointer_down(100, 100)
        >>> controller.pointer_move(200, 160)
        >>> zone = controller.pointer_up()
        >>> controller.save()
    """

    def __init__(
        self,
        image_ref: str,
        persistence: ZonePersistence,
        normalizer: Optional[PathNormalizer] = None,
        settings: Optional[SettingsProvider] = None,
        diagnostics: Optional[Diagnostics] = None,
        surface_size: Size = (0.0, 0.0),
        natural_size: Optional[Size] = None,
    ):
        """
        Args:
            image_ref: Image reference as received (URL or path)
            persistence: Collaborator with save_zones/load_zones
            normalizer: PathNormalizer producing the canonical key
            settings: Shared settings provider (a private one if omitted)
            diagnostics: Diagnostics hook (the normalizer's if omitted)
            surface_size: Current size of the editing surface in pixels
            natural_size: Natural size of the image, None while unknown

        Raises:
            InvalidPathError: If image_ref is empty
        """
        self.diagnostics = diagnostics or (normalizer.diagnostics if normalizer else Diagnostics())
        self.normalizer = normalizer or PathNormalizer(diagnostics=self.diagnostics)
        self.persistence = persistence
        self.image_ref = image_ref
        self.canonical_key = self.normalizer.normalize(image_ref)

        self.settings_provider = settings or SettingsProvider()
        self.settings: EditorSettings = self.settings_provider.get()
        self._unsubscribe: Optional[Callable[[], None]] = self.settings_provider.subscribe(self._on_settings_changed)

        self.zones: List[BlurZone] = []
        # Loaded before the surface size was known; still in stored coordinates
        self._pending_scale = False
        self.selected_id: Optional[str] = None
        self.state: str = STATE_IDLE
        self.provisional: Optional[BlurZone] = None

        self._surface_size: Size = (float(surface_size[0]), float(surface_size[1]))
        self._natural_size: Optional[Size] = None
        if natural_size is not None:
            self.set_natural_size(*natural_size)

        self._active_id: Optional[str] = None
        self._active_handle: Optional[str] = None
        self._snapshot: Optional[BlurZone] = None
        self._anchor: Tuple[float, float] = (0.0, 0.0)
        self._grab_offset: Tuple[float, float] = (0.0, 0.0)
        self._rotation_offset: float = 0.0

    # ------------------------------------------------------------------
    # Lifecycle

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_settings_changed(self, settings: EditorSettings) -> None:
        self.settings = settings

    def load(self, initial_zones: Optional[Sequence] = None) -> List[BlurZone]:
        """
        Replace the working zones.

        Args:
            initial_zones: Zones to edit; when None they are read from the
                           persistence collaborator under the canonical key

        Returns:
            The working zones in surface pixels. Malformed entries are dropped.
        """
        if initial_zones is None:
            initial_zones = self.persistence.load_zones(self.canonical_key) or []

        zones, dropped = sanitize_zones(list(initial_zones))
        if dropped:
            self.diagnostics.warning(SOURCE, "zones.dropped", key=self.canonical_key, dropped=dropped)

        if _known(self._surface_size):
            self.zones = [self._to_surface(zone) for zone in zones]
            self._pending_scale = False
        else:
            self.zones = zones
            self._pending_scale = True
        self.selected_id = None
        self._reset_gesture()
        self.diagnostics.info(SOURCE, "editor.loaded", key=self.canonical_key, zones=len(self.zones))
        return self.zones

    # ------------------------------------------------------------------
    # Surface and image size

    @property
    def surface_size(self) -> Size:
        return self._surface_size

    @property
    def natural_size(self) -> Optional[Size]:
        return self._natural_size

    def set_surface_size(self, width: float, height: float) -> None:
        """Record a new surface size, rescaling working zones to follow the image."""
        new_size = (max(0.0, float(width)), max(0.0, float(height)))
        old_size = self._surface_size
        if _known(old_size) and _known(new_size) and new_size != old_size:
            sx = new_size[0] / old_size[0]
            sy = new_size[1] / old_size[1]
            for zone in self.zones:
                self._scale_zone(zone, sx, sy)
        self._surface_size = new_size
        if self._pending_scale and _known(new_size):
            self.zones = [self._to_surface(zone) for zone in self.zones]
            self._pending_scale = False

    def set_natural_size(self, width: float, height: float) -> None:
        size = (float(width), float(height))
        self._natural_size = size if _known(size) else None

    def mark_image_failed(self) -> None:
        """The image could not be loaded; saves fall back to the surface size."""
        self._natural_size = None
        self.diagnostics.warning(SOURCE, "editor.image_failed", key=self.canonical_key)

    def _effective_natural_size(self) -> Size:
        if self._natural_size is not None:
            return self._natural_size
        self.diagnostics.warning(SOURCE, "editor.natural_size_fallback",
                                 key=self.canonical_key, surface_size=self._surface_size)
        return self._surface_size

    @staticmethod
    def _scale_zone(zone: BlurZone, sx: float, sy: float) -> None:
        zone.x *= sx
        zone.y *= sy
        zone.width *= sx
        zone.height *= sy

    def _to_surface(self, zone: BlurZone) -> BlurZone:
        surface_w, surface_h = self._surface_size
        if zone.is_percent_center:
            if _known(self._surface_size):
                width = zone.width / 100.0 * surface_w
                height = zone.height / 100.0 * surface_h
                zone.x = (zone.x - zone.width / 2.0) / 100.0 * surface_w
                zone.y = (zone.y - zone.height / 2.0) / 100.0 * surface_h
                zone.width = width
                zone.height = height
                zone.metadata = replace(zone.metadata, coordinate_space=SPACE_PIXEL)
            return zone

        if zone.metadata.has_dimensions and _known(self._surface_size):
            self._scale_zone(zone, surface_w / zone.metadata.image_width,
                             surface_h / zone.metadata.image_height)
        return zone

    # ------------------------------------------------------------------
    # Lookup

    def _resolve(self, zone_ref: ZoneRef) -> Optional[BlurZone]:
        """Find a zone by id, or by position for integer references."""
        if isinstance(zone_ref, int) and not isinstance(zone_ref, bool):
            if 0 <= zone_ref < len(self.zones):
                return self.zones[zone_ref]
        elif isinstance(zone_ref, str):
            for zone in self.zones:
                if zone.id == zone_ref:
                    return zone
        self.diagnostics.warning(SOURCE, "editor.unknown_zone", zone_ref=zone_ref)
        return None

    def get_zone(self, zone_ref: ZoneRef) -> Optional[BlurZone]:
        return self._resolve(zone_ref)

    def index_of(self, zone_id: str) -> Optional[int]:
        for index, zone in enumerate(self.zones):
            if zone.id == zone_id:
                return index
        return None

    @property
    def selected_zone(self) -> Optional[BlurZone]:
        if self.selected_id is None:
            return None
        index = self.index_of(self.selected_id)
        return self.zones[index] if index is not None else None

    def select(self, zone_ref: Optional[ZoneRef]) -> Optional[BlurZone]:
        if zone_ref is None:
            self.selected_id = None
            return None
        zone = self._resolve(zone_ref)
        self.selected_id = zone.id if zone else None
        return zone

    # ------------------------------------------------------------------
    # Gestures

    def _reset_gesture(self) -> None:
        self.state = STATE_IDLE
        self.provisional = None
        self._active_id = None
        self._active_handle = None
        self._snapshot = None

    def _active_zone(self) -> Optional[BlurZone]:
        if self._active_id is None:
            return None
        index = self.index_of(self._active_id)
        return self.zones[index] if index is not None else None

    def _begin(self, state: str, zone: BlurZone, handle: Optional[str] = None) -> None:
        self.state = state
        self.selected_id = zone.id
        self._active_id = zone.id
        self._active_handle = handle
        self._snapshot = zone.copy()
        self.diagnostics.debug(SOURCE, "editor.gesture_started", state=state, zone_id=zone.id, handle=handle)

    def contains_point(self, x: float, y: float) -> bool:
        """Whether (x, y) lies on the editing surface. Always True before layout."""
        if not _known(self._surface_size):
            return True
        width, height = self._surface_size
        return 0.0 <= x <= width and 0.0 <= y <= height

    def pointer_down(self, x: float, y: float) -> str:
        """
        Start a gesture at surface point (x, y). Returns the new state.

        Presses outside the surface start nothing.
        """
        if self.state != STATE_IDLE:
            self.cancel_gesture()
        if not self.contains_point(x, y):
            self.diagnostics.debug(SOURCE, "editor.pointer_outside", x=x, y=y)
            return self.state

        for zone in reversed(self.zones):
            handle = hit_test_handle(x, y, zone, self.settings.handle_size,
                                     self.settings.rotation_handle_offset)
            if handle == HANDLE_ROTATION:
                self._begin(STATE_ROTATING, zone, handle)
                cx, cy = zone.center
                self._rotation_offset = angle_degrees(cx, cy, x, y) - zone.rotation
                return self.state
            if handle is not None:
                self._begin(STATE_RESIZING, zone, handle)
                return self.state

            if point_in_rotated_rect(x, y, zone):
                self._begin(STATE_DRAGGING, zone)
                self._grab_offset = (x - zone.x, y - zone.y)
                return self.state

        self.selected_id = None
        self.state = STATE_DRAWING
        self._anchor = (x, y)
        self.provisional = BlurZone(x=x, y=y, width=0.0, height=0.0,
                                    blur_amount=self.settings.default_blur_amount)
        self.diagnostics.debug(SOURCE, "editor.gesture_started", state=STATE_DRAWING, x=x, y=y)
        return self.state

    def pointer_move(self, x: float, y: float) -> bool:
        """Update the active gesture. Returns True when something changed."""
        if self.state == STATE_IDLE:
            return False
        if not self.contains_point(x, y):
            self.pointer_leave()
            return True

        if self.state == STATE_DRAWING:
            if self.provisional is None:
                return False
            self.provisional.width = x - self._anchor[0]
            self.provisional.height = y - self._anchor[1]
            return True

        zone = self._active_zone()
        if zone is None:
            self._reset_gesture()
            return False

        if self.state == STATE_DRAGGING:
            new_x = x - self._grab_offset[0]
            new_y = y - self._grab_offset[1]
            half_w, half_h = rotated_half_extents(zone)
            cx, cy = clamp_center(new_x + zone.width / 2.0, new_y + zone.height / 2.0,
                                  half_w, half_h, *self._surface_size)
            zone.x = cx - zone.width / 2.0
            zone.y = cy - zone.height / 2.0

        elif self.state == STATE_RESIZING:
            cx, cy = zone.center
            width, height = resize_from_pointer(zone, x, y, self.settings.min_resize_size)
            zone.width = width
            zone.height = height
            zone.x = cx - width / 2.0
            zone.y = cy - height / 2.0

        elif self.state == STATE_ROTATING:
            cx, cy = zone.center
            rotation = compute_rotation(cx, cy, x, y, self._rotation_offset)
            zone.rotation = normalize_rotation(round(rotation, ROTATION_DECIMALS))

        return True

    def pointer_up(self, x: Optional[float] = None, y: Optional[float] = None) -> Optional[BlurZone]:
        """
        Finish the active gesture.

        Returns:
            The newly committed zone when a drawing gesture produced one,
            otherwise None.
        """
        if self.state == STATE_IDLE:
            return None
        if x is not None and y is not None:
            self.pointer_move(x, y)

        committed = None
        if self.state == STATE_DRAWING and self.provisional is not None:
            committed = self._commit_drawing(self.provisional)

        self._reset_gesture()
        return committed

    def _commit_drawing(self, drawn: BlurZone) -> Optional[BlurZone]:
        x, width = (drawn.x + drawn.width, -drawn.width) if drawn.width < 0 else (drawn.x, drawn.width)
        y, height = (drawn.y + drawn.height, -drawn.height) if drawn.height < 0 else (drawn.y, drawn.height)

        minimum = self.settings.min_draw_size
        if width <= minimum or height <= minimum:
            self.diagnostics.debug(SOURCE, "editor.zone_discarded", width=width, height=height)
            return None

        zone = BlurZone(x=x, y=y, width=width, height=height,
                        blur_amount=drawn.blur_amount, metadata=self._new_metadata())
        self.zones.append(zone)
        self.selected_id = zone.id
        self.diagnostics.info(SOURCE, "editor.zone_committed", zone_id=zone.id,
                              x=x, y=y, width=width, height=height)
        return zone

    def pointer_leave(self) -> None:
        """The pointer left the surface: cancel any gesture in progress."""
        if self.state != STATE_IDLE:
            self.cancel_gesture()

    def cancel_gesture(self) -> None:
        state = self.state
        if state in (STATE_DRAGGING, STATE_RESIZING, STATE_ROTATING) and self._snapshot is not None:
            index = self.index_of(self._snapshot.id)
            if index is not None:
                self.zones[index] = self._snapshot
        self._reset_gesture()
        self.diagnostics.debug(SOURCE, "editor.gesture_cancelled", state=state)

    # ------------------------------------------------------------------
    # Explicit operations

    def _new_metadata(self) -> ZoneMetadata:
        return ZoneMetadata(
            source_image_url_original=self.image_ref,
            source_image_url_canonical=self.canonical_key,
            editor_version=EDITOR_VERSION,
        )

    def add_centered_zone(self) -> BlurZone:
        """Append a default-size zone centred on the editing surface."""
        if _known(self._surface_size):
            cx, cy = self._surface_size[0] / 2.0, self._surface_size[1] / 2.0
        elif self._natural_size is not None:
            cx, cy = self._natural_size[0] / 2.0, self._natural_size[1] / 2.0
        else:
            cx, cy = self.settings.default_zone_width / 2.0, self.settings.default_zone_height / 2.0

        width = self.settings.default_zone_width
        height = self.settings.default_zone_height
        zone = BlurZone(x=cx - width / 2.0, y=cy - height / 2.0, width=width, height=height,
                        blur_amount=self.settings.default_blur_amount, metadata=self._new_metadata())
        self.zones.append(zone)
        self.selected_id = zone.id
        self.diagnostics.info(SOURCE, "editor.zone_committed", zone_id=zone.id,
                              x=zone.x, y=zone.y, width=width, height=height)
        return zone

    def remove_zone(self, zone_ref: ZoneRef) -> bool:
        zone = self._resolve(zone_ref)
        if zone is None:
            return False
        if self._active_id == zone.id:
            self._reset_gesture()
        self.zones = [other for other in self.zones if other.id != zone.id]
        self.selected_id = None
        self.diagnostics.info(SOURCE, "editor.zone_removed", zone_id=zone.id)
        return True

    def set_blur_amount(self, zone_ref: ZoneRef, value) -> Optional[int]:
        """Set a zone's blur radius, clamped to [2, 20]. Returns the stored value."""
        zone = self._resolve(zone_ref)
        if zone is None:
            return None
        zone.blur_amount = clamp_blur_amount(value, self.settings.default_blur_amount)
        return zone.blur_amount

    def set_rotation(self, zone_ref: ZoneRef, value) -> Optional[float]:
        """Set a zone's rotation in degrees, wrapped to [0, 360). Non-numbers become 0."""
        zone = self._resolve(zone_ref)
        if zone is None:
            return None
        try:
            rotation = float(value)
        except (TypeError, ValueError):
            rotation = 0.0
        if rotation != rotation or rotation in (float("inf"), float("-inf")):
            rotation = 0.0
        zone.rotation = normalize_rotation(rotation)
        return zone.rotation

    def save(self) -> List[BlurZone]:
        """
        Stamp metadata and hand the zones to the persistence collaborator.

        Zones are converted from surface pixels to pixels of the image's
        natural size. When the natural size is unknown (image failed to load)
        the surface size stands in for it, which is imprecise if the surface
        was not showing the image at 1:1.

        Returns:
            The zones as persisted
        """
        natural_w, natural_h = self._effective_natural_size()
        surface_w, surface_h = self._surface_size
        sx = natural_w / surface_w if surface_w > 0 and natural_w > 0 else 1.0
        sy = natural_h / surface_h if surface_h > 0 and natural_h > 0 else 1.0

        timestamp = now_timestamp()
        persisted: List[BlurZone] = []
        for zone in self.zones:
            if zone.width <= 0 or zone.height <= 0:
                continue
            zone.metadata = replace(
                zone.metadata,
                image_width=natural_w,
                image_height=natural_h,
                timestamp_saved=timestamp,
                source_image_url_original=self.image_ref,
                source_image_url_canonical=self.canonical_key,
                editor_version=EDITOR_VERSION,
                coordinate_space=SPACE_PIXEL,
            )
            persisted.append(BlurZone(
                x=zone.x * sx,
                y=zone.y * sy,
                width=zone.width * sx,
                height=zone.height * sy,
                rotation=zone.rotation,
                blur_amount=zone.blur_amount,
                metadata=replace(zone.metadata),
                id=zone.id,
            ))

        self.persistence.save_zones(self.canonical_key, persisted)
        self.diagnostics.info(SOURCE, "editor.saved", key=self.canonical_key, zones=len(persisted),
                              image_width=natural_w, image_height=natural_h)
        return persisted

    # ------------------------------------------------------------------
    # Presentation hints

    def cursor_hint(self, x: Optional[float] = None, y: Optional[float] = None) -> str:
        """Cursor shape for the current gesture, or for hovering at (x, y) when idle."""
        if self.state == STATE_DRAWING:
            return CURSOR_CROSSHAIR
        if self.state == STATE_DRAGGING:
            return CURSOR_MOVE
        if self.state == STATE_ROTATING:
            return CURSOR_GRAB
        if self.state == STATE_RESIZING:
            return _resize_cursor(self._active_handle)

        if x is None or y is None:
            return CURSOR_DEFAULT
        for zone in reversed(self.zones):
            handle = hit_test_handle(x, y, zone, self.settings.handle_size,
                                     self.settings.rotation_handle_offset)
            if handle == HANDLE_ROTATION:
                return CURSOR_GRAB
            if handle is not None:
                return _resize_cursor(handle)
            if point_in_rotated_rect(x, y, zone):
                return CURSOR_MOVE
        return CURSOR_DEFAULT


def _resize_cursor(handle: Optional[str]) -> str:
    if handle in (HANDLE_TOP_LEFT, HANDLE_BOTTOM_RIGHT):
        return CURSOR_NWSE_RESIZE
    if handle is not None:
        return CURSOR_NESW_RESIZE
    return CURSOR_CROSSHAIR
