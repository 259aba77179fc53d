"""
Image files behind canonical keys.

The editor needs the natural pixel size of the image it is editing so that
zones can be saved in image pixels rather than screen pixels.
"""

from pathlib import Path
from typing import Optional, Tuple
import logging

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)


def read_natural_size(image_path: Path) -> Optional[Tuple[int, int]]:
    """
    Read an image's natural (width, height) without decoding pixel data.

    Returns:
        The size, or None if the file is missing or not a readable image
    """
    try:
        with Image.open(image_path) as image:
            return image.size
    except (OSError, UnidentifiedImageError) as exc:
        logger.warning(f"Could not read image size for {image_path}: {exc}")
        return None


def resolve_image_file(canonical_key: str, site_root: Path) -> Path:
    """Map a canonical key such as "/images/x.jpg" to a file under site_root."""
    relative = str(canonical_key).split("?", 1)[0].lstrip("/")
    return Path(site_root) / relative
