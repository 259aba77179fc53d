"""
PathLib - Image path normalization and zone lookup

This module canonicalizes image references into zone-store keys and
finds the blur zones configured for an image.
"""

from BZ_Libs.PathLib.path_normalizer import (
    InvalidPathError,
    NormalizerConfig,
    PathNormalizer,
    load_identifier_table,
)
from BZ_Libs.PathLib.zone_matchers import (
    DEFAULT_MATCHERS,
    EXTENDED_MATCHERS,
    find_matching_key,
    find_zones_for,
)

__all__ = [
    "InvalidPathError",
    "NormalizerConfig",
    "PathNormalizer",
    "load_identifier_table",
    "DEFAULT_MATCHERS",
    "EXTENDED_MATCHERS",
    "find_matching_key",
    "find_zones_for",
]
