"""
ZoneLib - Blur zone models, geometry and overlay rendering

This module provides the blur zone data types, the pure coordinate math
used by the editor, and the read-only overlay renderer.
"""

from BZ_Libs.ZoneLib.zone_models import (
    BlurZone,
    BlurZoneSet,
    ZoneMetadata,
    sanitize_zone,
    sanitize_zones,
)
from BZ_Libs.ZoneLib.geometry import (
    distance,
    angle_degrees,
    point_in_rotated_rect,
    hit_test_handle,
    compute_rotation,
    resize_from_pointer,
)
from BZ_Libs.ZoneLib.overlay_renderer import (
    DisplayRect,
    compute_display_rects,
    overlay_for_image,
    to_css_style,
)

__all__ = [
    "BlurZone",
    "BlurZoneSet",
    "ZoneMetadata",
    "sanitize_zone",
    "sanitize_zones",
    "distance",
    "angle_degrees",
    "point_in_rotated_rect",
    "hit_test_handle",
    "compute_rotation",
    "resize_from_pointer",
    "DisplayRect",
    "compute_display_rects",
    "overlay_for_image",
    "to_css_style",
]
