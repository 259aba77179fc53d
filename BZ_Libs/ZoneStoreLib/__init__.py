"""
ZoneStoreLib - Blur zone storage and image files

This module persists zone sets keyed by canonical image key and reads
image files for their natural size.
"""

from BZ_Libs.ZoneStoreLib.zone_store import (
    JsonZoneStore,
    load_store_data,
    save_store_data,
)
from BZ_Libs.ZoneStoreLib.image_source import (
    read_natural_size,
    resolve_image_file,
)

__all__ = [
    "JsonZoneStore",
    "load_store_data",
    "save_store_data",
    "read_natural_size",
    "resolve_image_file",
]
