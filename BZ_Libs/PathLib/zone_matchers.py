"""
Best-effort lookup of blur zones for an image reference.

Stored zone sets are keyed by whatever canonical key the editor produced at
save time, which does not always agree with the reference a page renders
later. find_zones_for tries an ordered cascade of matchers, each a pure
function, and returns the zones of the first stored key any of them accepts.

Every matcher receives the canonical key being looked up, an index mapping
normalized stored keys to the original stored keys (only keys holding at
least one zone), and the PathNormalizer. It returns the original stored key
or None.

Cascades:
    DEFAULT_MATCHERS: exact -> rewritten variants -> substring overlap -> identifier
    EXTENDED_MATCHERS: DEFAULT_MATCHERS with the filename matchers after the variants

A miss is not an error: it means no redaction is configured for the image.
"""

from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple
import posixpath

from BZ_Libs.PathLib.path_normalizer import InvalidPathError, PathNormalizer
from BZ_Libs.ZoneLib.zone_models import BlurZone, sanitize_zones

SOURCE = "path"

KeyIndex = Dict[str, str]
Matcher = Callable[[str, KeyIndex, PathNormalizer], Optional[str]]


def build_key_index(store: Mapping[str, Any], normalizer: PathNormalizer) -> KeyIndex:
    """
    Map normalized stored keys to the original keys, in store order.

    Keys that cannot be normalized or hold no zones are left out; the first
    original key wins when two normalize to the same value.
    """
    index: KeyIndex = {}
    for stored_key, zones in store.items():
        if not isinstance(zones, (list, tuple)) or not zones:
            continue
        try:
            normalized = normalizer.normalize(stored_key)
        except InvalidPathError:
            continue
        index.setdefault(normalized, stored_key)
    return index


def match_exact(key: str, index: KeyIndex, normalizer: PathNormalizer) -> Optional[str]:
    return index.get(key)


def rewritten_variants(key: str, normalizer: PathNormalizer) -> List[str]:
    """The key with the assets root stripped, and with it forced on."""
    root = normalizer.config.assets_root
    variants = []
    if key.startswith(root + "/"):
        variants.append(key[len(root):])
    else:
        variants.append(root + key if key.startswith("/") else f"{root}/{key}")
    return [variant for variant in variants if variant != key]


def match_rewritten_variants(key: str, index: KeyIndex, normalizer: PathNormalizer) -> Optional[str]:
    for variant in rewritten_variants(key, normalizer):
        if variant in index:
            return index[variant]
    return None


def match_filename(key: str, index: KeyIndex, normalizer: PathNormalizer) -> Optional[str]:
    filename = posixpath.basename(key)
    if not filename:
        return None
    for normalized, stored_key in index.items():
        if posixpath.basename(normalized) == filename:
            return stored_key
    return None


def match_filename_contained(key: str, index: KeyIndex, normalizer: PathNormalizer) -> Optional[str]:
    filename = posixpath.basename(key)
    if not filename:
        return None
    for normalized, stored_key in index.items():
        if filename in normalized:
            return stored_key
    return None


def match_substring_overlap(key: str, index: KeyIndex, normalizer: PathNormalizer) -> Optional[str]:
    if key in ("", "/"):
        return None
    for normalized, stored_key in index.items():
        if normalized in ("", "/"):
            continue
        if normalized in key or key in normalized:
            return stored_key
    return None


def match_identifier(key: str, index: KeyIndex, normalizer: PathNormalizer) -> Optional[str]:
    identifier = normalizer.extract_identifier(key)
    if not identifier:
        return None
    for normalized, stored_key in index.items():
        if identifier in normalized:
            return stored_key
    return None


DEFAULT_MATCHERS: Tuple[Tuple[str, Matcher], ...] = (
    ("exact", match_exact),
    ("rewritten_variants", match_rewritten_variants),
    ("substring_overlap", match_substring_overlap),
    ("identifier", match_identifier),
)

EXTENDED_MATCHERS: Tuple[Tuple[str, Matcher], ...] = (
    ("exact", match_exact),
    ("rewritten_variants", match_rewritten_variants),
    ("filename", match_filename),
    ("filename_contained", match_filename_contained),
    ("substring_overlap", match_substring_overlap),
    ("identifier", match_identifier),
)


def find_matching_key(
    raw: Optional[str],
    store: Mapping[str, Any],
    normalizer: PathNormalizer,
    matchers: Sequence[Tuple[str, Matcher]] = DEFAULT_MATCHERS,
) -> Optional[str]:
    """Return the stored key whose zones apply to raw, or None."""
    if not store:
        return None
    try:
        key = normalizer.normalize(raw)
    except InvalidPathError:
        return None

    index = build_key_index(store, normalizer)
    if not index:
        normalizer.diagnostics.debug(SOURCE, "match.miss", key=key, reason="empty_store")
        return None

    for name, matcher in matchers:
        stored_key = matcher(key, index, normalizer)
        if stored_key is not None:
            normalizer.diagnostics.debug(SOURCE, "match.hit", key=key, strategy=name, stored_key=stored_key)
            return stored_key

    normalizer.diagnostics.debug(SOURCE, "match.miss", key=key, candidates=len(index))
    return None


def find_zones_for(
    raw: Optional[str],
    store: Mapping[str, Any],
    normalizer: Optional[PathNormalizer] = None,
    matchers: Sequence[Tuple[str, Matcher]] = DEFAULT_MATCHERS,
) -> List[BlurZone]:
    """
    Find the blur zones configured for an image reference.

    Args:
        raw: Image reference as rendered by a page
        store: BlurZoneSet-like mapping of stored key -> zone list (zones may
               be BlurZone objects or persisted dictionaries)
        normalizer: Normalizer to use (default configuration if omitted)
        matchers: Ordered matcher cascade

    Returns:
        Sanitized zones of the first match, or an empty list. Never raises.
    """
    normalizer = normalizer or PathNormalizer()
    stored_key = find_matching_key(raw, store, normalizer, matchers)
    if stored_key is None:
        return []

    zones, dropped = sanitize_zones(store[stored_key])
    if dropped:
        normalizer.diagnostics.warning(SOURCE, "zones.dropped", stored_key=stored_key, dropped=dropped)
    return zones

