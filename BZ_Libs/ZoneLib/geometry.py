"""
Pure coordinate math for blur zones.

All functions are deterministic and side-effect free. A "zone" argument is
anything with x, y, width, height and rotation attributes (normally a
BlurZone); x/y is the top-left corner of the un-rotated rectangle and the
rotation, in degrees, turns the rectangle about its centre.

Functions:
    distance: Euclidean distance between two points
    angle_degrees: Angle of a point around a centre, in (-180, 180]
    point_in_rotated_rect: Containment test honouring rotation
    handle_box: Square hit box around a handle position
    hit_test_handle: Which corner or rotation handle a point is on
    compute_rotation: Rotation for a pointer, relative to a grab offset
    resize_from_pointer: Symmetric resize about the centre
    rotated_half_extents: Half size of the axis-aligned box around a rotated zone
"""

from typing import Any, Dict, Optional, Tuple
import math

from BZ_Libs.constants import (
    HANDLE_SIZE,
    ROTATION_HANDLE_OFFSET,
    ROTATION_HANDLE_SCALE,
    MIN_RESIZE_SIZE,
    HANDLE_TOP_LEFT,
    HANDLE_TOP_RIGHT,
    HANDLE_BOTTOM_LEFT,
    HANDLE_BOTTOM_RIGHT,
    HANDLE_ROTATION,
    CORNER_HANDLES,
)
from BZ_Libs.ZoneLib.zone_models import normalize_rotation

Point = Tuple[float, float]


def distance(x1: float, y1: float, x2: float, y2: float) -> float:
    return math.hypot(x2 - x1, y2 - y1)


def angle_degrees(cx: float, cy: float, x: float, y: float) -> float:
    """Angle of (x, y) around (cx, cy) in degrees, in (-180, 180]."""
    angle = math.degrees(math.atan2(y - cy, x - cx))
    if angle <= -180.0:
        angle += 360.0
    return angle


def zone_center(zone: Any) -> Point:
    return zone.x + zone.width / 2.0, zone.y + zone.height / 2.0


def rotate_vector(dx: float, dy: float, degrees: float) -> Point:
    radians = math.radians(degrees)
    cos_a = math.cos(radians)
    sin_a = math.sin(radians)
    return dx * cos_a - dy * sin_a, dx * sin_a + dy * cos_a


def to_local(px: float, py: float, zone: Any) -> Point:
    """Express a point in the zone's un-rotated, centre-origin frame."""
    cx, cy = zone_center(zone)
    rotation = normalize_rotation(zone.rotation)
    if rotation == 0:
        return px - cx, py - cy
    return rotate_vector(px - cx, py - cy, -rotation)


def point_in_rotated_rect(px: float, py: float, zone: Any) -> bool:
    if normalize_rotation(zone.rotation) == 0:
        return (
            zone.x <= px <= zone.x + zone.width
            and zone.y <= py <= zone.y + zone.height
        )

    local_x, local_y = to_local(px, py, zone)
    half_w = zone.width / 2.0
    half_h = zone.height / 2.0
    return -half_w <= local_x <= half_w and -half_h <= local_y <= half_h


def handle_positions(zone: Any, rotation_offset: float = ROTATION_HANDLE_OFFSET) -> Dict[str, Point]:
    """
    Screen positions of the four corner handles and the rotation handle.

    The rotation handle sits rotation_offset above the un-rotated top-centre,
    and every handle is turned with the zone about its centre.
    """
    cx, cy = zone_center(zone)
    rotation = normalize_rotation(zone.rotation)
    half_w = zone.width / 2.0
    half_h = zone.height / 2.0

    offsets = {
        HANDLE_TOP_LEFT: (-half_w, -half_h),
        HANDLE_TOP_RIGHT: (half_w, -half_h),
        HANDLE_BOTTOM_LEFT: (-half_w, half_h),
        HANDLE_BOTTOM_RIGHT: (half_w, half_h),
        HANDLE_ROTATION: (0.0, -half_h - rotation_offset),
    }

    positions: Dict[str, Point] = {}
    for name, (dx, dy) in offsets.items():
        rx, ry = rotate_vector(dx, dy, rotation)
        positions[name] = (cx + rx, cy + ry)
    return positions


def handle_box(center: Point, half_size: float) -> Tuple[float, float, float, float]:
    """(left, top, width, height) of the square hit box around a handle."""
    return center[0] - half_size, center[1] - half_size, 2 * half_size, 2 * half_size


def _in_box(px: float, py: float, center: Point, half_size: float) -> bool:
    left, top, width, height = handle_box(center, half_size)
    return left <= px <= left + width and top <= py <= top + height


def hit_test_handle(
    px: float,
    py: float,
    zone: Any,
    handle_size: float = HANDLE_SIZE,
    rotation_offset: float = ROTATION_HANDLE_OFFSET,
) -> Optional[str]:
    """
    Return the handle under the point, or None.

    Corners are checked before the rotation handle. Each corner has a square
    hit box of half-width handle_size; the rotation handle's box is twice that.
    """
    positions = handle_positions(zone, rotation_offset)
    for name in CORNER_HANDLES:
        if _in_box(px, py, positions[name], handle_size):
            return name

    if _in_box(px, py, positions[HANDLE_ROTATION], handle_size * ROTATION_HANDLE_SCALE):
        return HANDLE_ROTATION
    return None


def compute_rotation(cx: float, cy: float, px: float, py: float, grab_angle_offset: float) -> float:
    return normalize_rotation(angle_degrees(cx, cy, px, py) - grab_angle_offset)


def resize_from_pointer(
    zone: Any,
    px: float,
    py: float,
    min_size: float = MIN_RESIZE_SIZE,
) -> Tuple[float, float]:
    """
    New (width, height) for a pointer dragged in the zone's local frame.

    Resizing is symmetric about the centre whichever corner was grabbed;
    each dimension is floored at min_size.
    """
    local_x, local_y = to_local(px, py, zone)
    return max(min_size, 2.0 * abs(local_x)), max(min_size, 2.0 * abs(local_y))


def rotated_half_extents(zone: Any) -> Point:
    """Half width and half height of the axis-aligned box around the rotated zone."""
    radians = math.radians(normalize_rotation(zone.rotation))
    cos_a = abs(math.cos(radians))
    sin_a = abs(math.sin(radians))
    half_w = (zone.width * cos_a + zone.height * sin_a) / 2.0
    half_h = (zone.width * sin_a + zone.height * cos_a) / 2.0
    return half_w, half_h


def clamp_center(cx: float, cy: float, half_w: float, half_h: float,
                 bounds_w: float, bounds_h: float) -> Point:
    """Clamp a centre so a box of the given half extents stays inside the bounds.

    A box larger than the bounds is centred on that axis.
    """
    def _clamp(value: float, half: float, limit: float) -> float:
        if limit <= 0:
            return value
        if 2.0 * half >= limit:
            return limit / 2.0
        return max(half, min(limit - half, value))

    return _clamp(cx, half_w, bounds_w), _clamp(cy, half_h, bounds_h)
