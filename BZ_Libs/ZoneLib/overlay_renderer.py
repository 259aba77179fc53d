"""
Read-only rendering of stored blur zones as percentage rectangles.

Zones are saved in pixels of the image's natural size. Expressing them as
percentages of that same natural size makes them valid at any display size,
since percentage positioning is relative to the element that holds the image.

Zones from the older percentage editor (coordinate space "percent-center")
already hold percentages, with x/y at the centre; they are only re-anchored.

Nothing here is interactive and nothing here needs a browser, so the same
code serves the public gallery pages and the admin previews.

Classes:
    DisplayRect: One zone as left/top/width/height percentages

Functions:
    compute_display_rects: Convert zones for a given rendered size
    overlay_for_image: Resolve zones for an image reference, then convert
    to_css_style: CSS properties for a DisplayRect
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from BZ_Libs.PathLib.path_normalizer import PathNormalizer
from BZ_Libs.ZoneLib.zone_models import BlurZone, sanitize_zones

Size = Tuple[float, float]


@dataclass(frozen=True)
class DisplayRect:
    """Percent-based placement of one zone inside the image box."""
    left_pct: float
    top_pct: float
    width_pct: float
    height_pct: float
    rotation: float
    blur_amount: int
    zone_id: str


def _scale_basis(zone: BlurZone, rendered_size: Size) -> Tuple[float, float]:
    if zone.metadata.has_dimensions:
        return 100.0 / zone.metadata.image_width, 100.0 / zone.metadata.image_height

    rendered_w, rendered_h = rendered_size
    scale_x = 100.0 / rendered_w if rendered_w and rendered_w > 0 else 1.0
    scale_y = 100.0 / rendered_h if rendered_h and rendered_h > 0 else 1.0
    return scale_x, scale_y


def compute_display_rects(zones: Sequence[Any], rendered_size: Size) -> List[DisplayRect]:
    """
    Convert zones to percentage rectangles.

    Pixel zones are scaled by their metadata's natural image size; without
    metadata the rendered size is used as the basis, and with neither the
    raw numbers pass through unscaled.

    Args:
        zones: BlurZone objects or persisted zone dictionaries
        rendered_size: (width, height) the image is displayed at

    Returns:
        One DisplayRect per valid zone, in input order
    """
    sanitized, _ = sanitize_zones(list(zones))
    rects: List[DisplayRect] = []

    for zone in sanitized:
        if zone.is_percent_center:
            rects.append(DisplayRect(
                left_pct=zone.x - zone.width / 2.0,
                top_pct=zone.y - zone.height / 2.0,
                width_pct=zone.width,
                height_pct=zone.height,
                rotation=zone.rotation,
                blur_amount=zone.blur_amount,
                zone_id=zone.id,
            ))
            continue

        scale_x, scale_y = _scale_basis(zone, rendered_size)
        rects.append(DisplayRect(
            left_pct=zone.x * scale_x,
            top_pct=zone.y * scale_y,
            width_pct=zone.width * scale_x,
            height_pct=zone.height * scale_y,
            rotation=zone.rotation,
            blur_amount=zone.blur_amount,
            zone_id=zone.id,
        ))

    return rects


def overlay_for_image(
    image_ref: Optional[str],
    zone_source: Union[Sequence[Any], Mapping[str, Any], None],
    rendered_size: Size,
    normalizer: Optional[PathNormalizer] = None,
) -> List[DisplayRect]:
    """
    Display rectangles for an image.

    A plain zone list is used as-is; a keyed store is searched with
    find_zones_for. A missing image reference or source yields [].
    """
    if zone_source is None or not image_ref:
        return []

    if isinstance(zone_source, Mapping):
        from BZ_Libs.PathLib.zone_matchers import find_zones_for

        zones = find_zones_for(image_ref, zone_source, normalizer)
    else:
        zones = list(zone_source)

    return compute_display_rects(zones, rendered_size)


def _format_pct(value: float) -> str:
    return f"{round(value, 4):g}%"


def to_css_style(rect: DisplayRect) -> Dict[str, str]:
    """CSS declarations that place a blur box over the image."""
    blur = f"blur({rect.blur_amount}px)"
    return {
        "position": "absolute",
        "left": _format_pct(rect.left_pct),
        "top": _format_pct(rect.top_pct),
        "width": _format_pct(rect.width_pct),
        "height": _format_pct(rect.height_pct),
        "transform": f"rotate({rect.rotation:g}deg)" if rect.rotation else "none",
        "transform-origin": "center",
        "backdrop-filter": blur,
        "-webkit-backdrop-filter": blur,
    }
