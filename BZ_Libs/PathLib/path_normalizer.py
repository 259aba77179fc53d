"""
Image path normalization for blur zone lookup.

Gallery images reach the editor and the overlay under many spellings:
absolute URLs to the site itself, relative paths, mixed case, query strings
and accidentally doubled "/images" prefixes. PathNormalizer folds all of them
into one canonical key, the key a BlurZoneSet is stored under.

Normalization rules, applied in order:
    1. Empty input raises InvalidPathError
    2. blob:/data: references are returned verbatim
    3. Absolute URLs to one of the site's own hosts are reduced to their path
    4. Absolute URLs to any other host are returned verbatim
    5. Query string and fragment are stripped
    6. Exactly one leading slash
    7. Lower case
    8. Doubled directory segments ("/images/images") are collapsed
    9. Paths outside the gallery directory get their directory inferred
       from the item identifier in the filename (or the page context)
   10. Image files get the assets root prefixed when still missing

Classes:
    InvalidPathError: Raised for empty input
    NormalizerConfig: Hosts, directory conventions and identifier table
    PathNormalizer: The normalizer itself

Functions:
    load_identifier_table: Read an identifier -> directory table from JSON
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Tuple
from urllib.parse import urlsplit
import json
import logging
import posixpath
import re

from BZ_Libs.constants import (
    ASSETS_ROOT,
    GALLERY_SUBDIR,
    SITE_HOSTS,
    OPAQUE_SCHEMES,
    WEB_SCHEMES,
    SUPPORTED_IMAGE_EXTENSIONS,
    DEFAULT_IDENTIFIER_TABLE,
)
from BZ_Libs.diagnostics import Diagnostics

logger = logging.getLogger(__name__)

SOURCE = "path"

# before-3-bluealfa-front.jpg, after-bluealfa-side.png, after-12-mustang.jpg
FILENAME_IDENTIFIER_PATTERN = re.compile(r"^(?:before|after)-(?:\d+[-_])?([a-z0-9]+)", re.IGNORECASE)


class InvalidPathError(ValueError):
    """Raised when an image reference is missing or empty."""


@dataclass
class NormalizerConfig:
    """Configuration for PathNormalizer.

    Attributes:
        site_hosts: Host names that count as "this site" (ports ignored)
        assets_root: Root directory of static images, e.g. "/images"
        gallery_subdir: Gallery directory under the assets root
        identifier_table: Item identifier token -> gallery directory name
        context_identifier: Identifier of the item currently being edited, if any
    """
    site_hosts: Tuple[str, ...] = SITE_HOSTS
    assets_root: str = ASSETS_ROOT
    gallery_subdir: str = GALLERY_SUBDIR
    identifier_table: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_IDENTIFIER_TABLE))
    context_identifier: Optional[str] = None

    def __post_init__(self) -> None:
        hosts = (str(host).strip().lower().split(":", 1)[0] for host in self.site_hosts)
        self.site_hosts = tuple(host for host in hosts if host)
        root = "/" + str(self.assets_root).strip("/").lower()
        self.assets_root = root if root != "/" else ASSETS_ROOT
        self.gallery_subdir = str(self.gallery_subdir).strip("/").lower() or GALLERY_SUBDIR
        self.identifier_table = {
            str(key).strip().lower(): str(value).strip().strip("/").lower()
            for key, value in dict(self.identifier_table).items()
            if str(key).strip() and str(value).strip().strip("/")
        }
        if self.context_identifier is not None:
            self.context_identifier = str(self.context_identifier).strip().strip("/").lower() or None

    @property
    def gallery_root(self) -> str:
        return f"{self.assets_root}/{self.gallery_subdir}"


def load_identifier_table(table_path: Path) -> Dict[str, str]:
    """
    Load an identifier -> directory table from a JSON object file.

    Returns:
        The table, or an empty dict if the file is missing, unreadable or
        does not hold a JSON object.
    """
    try:
        payload = json.loads(Path(table_path).read_text(encoding="utf-8"))
    except (FileNotFoundError, json.JSONDecodeError, OSError) as exc:
        logger.warning(f"Could not read identifier table {table_path}: {exc}")
        return {}

    if not isinstance(payload, dict):
        logger.warning(f"Identifier table {table_path} is not a JSON object")
        return {}

    return {str(key): str(value) for key, value in payload.items() if isinstance(value, str)}


class PathNormalizer:
    """
    Canonicalizes image references into zone-store keys.

    Example:
        >>> normalizer = PathNormalizer(NormalizerConfig(identifier_table={"bluealfa": "blue-alfa-repair"}))
        >>> normalizer.normalize("before-3-bluealfa-front.jpg")
        '/images/gallery-page/blue-alfa-repair/before-3-bluealfa-front.jpg'
    """

    def __init__(self, config: Optional[NormalizerConfig] = None,
                 diagnostics: Optional[Diagnostics] = None):
        self.config = config or NormalizerConfig()
        self.diagnostics = diagnostics or Diagnostics()
        # Longest identifiers first so "bluemustang" wins over "mustang"
        self._identifiers_by_length = sorted(self.config.identifier_table, key=len, reverse=True)

    def with_context(self, context_identifier: Optional[str]) -> "PathNormalizer":
        """Return a normalizer sharing this configuration with a different page context."""
        config = NormalizerConfig(
            site_hosts=self.config.site_hosts,
            assets_root=self.config.assets_root,
            gallery_subdir=self.config.gallery_subdir,
            identifier_table=self.config.identifier_table,
            context_identifier=context_identifier,
        )
        return PathNormalizer(config, self.diagnostics)

    def normalize(self, raw: Optional[str]) -> str:
        """
        Canonicalize an image reference.

        Raises:
            InvalidPathError: If raw is None, empty or whitespace only
        """
        if raw is None or not str(raw).strip():
            self.diagnostics.warning(SOURCE, "normalize.empty", raw=raw)
            raise InvalidPathError("Image path is empty")

        path = str(raw).strip()
        lowered = path.lower()

        if lowered.startswith(OPAQUE_SCHEMES):
            self.diagnostics.debug(SOURCE, "normalize.verbatim", raw=path, reason="opaque")
            return path

        if lowered.startswith(WEB_SCHEMES):
            host, url_path = self._split_url(path)
            if host is None or host not in self.config.site_hosts:
                self.diagnostics.debug(SOURCE, "normalize.verbatim", raw=path, reason="external")
                return path
            self.diagnostics.debug(SOURCE, "normalize.self_host", raw=path, host=host, path=url_path)
            path = url_path or "/"

        return self._normalize_site_path(path)

    def gallery_directory(self, key: str) -> Optional[str]:
        """The directory right below the gallery root in a canonical key, if any."""
        marker = self.config.gallery_root + "/"
        index = key.find(marker)
        if index < 0:
            return None
        remainder = key[index + len(marker):]
        directory = remainder.split("/", 1)[0]
        return directory if directory and "/" in remainder else None

    def filename_identifier(self, filename: str) -> Optional[str]:
        match = FILENAME_IDENTIFIER_PATTERN.match(filename or "")
        return match.group(1).lower() if match else None

    def extract_identifier(self, key: str) -> Optional[str]:
        """
        Item identifier for a canonical key: the gallery directory when the key
        is under the gallery root, otherwise the token in the filename.
        """
        directory = self.gallery_directory(key)
        if directory:
            return directory
        return self.filename_identifier(posixpath.basename(key))

    def looks_like_image(self, path: str) -> bool:
        return posixpath.splitext(path)[1].lower() in SUPPORTED_IMAGE_EXTENSIONS

    def _split_url(self, url: str) -> Tuple[Optional[str], str]:
        try:
            parts = urlsplit(url)
            host = parts.hostname
        except ValueError:
            logger.warning(f"Failed to parse URL: {url}")
            return None, ""
        return (host.lower() if host else None), parts.path

    def _normalize_site_path(self, path: str) -> str:
        path = path.split("?", 1)[0].split("#", 1)[0].strip()
        path = "/" + path.lstrip("/")
        path = path.lower()
        path = re.sub(r"/{2,}", "/", path)
        path = self._collapse_doubled_segments(path)

        if self.config.gallery_root + "/" in path:
            return path

        filename = posixpath.basename(path)
        if filename:
            directory = self._infer_directory(filename)
            if directory:
                inferred = f"{self.config.gallery_root}/{directory}/{filename}"
                self.diagnostics.debug(SOURCE, "normalize.directory_inferred",
                                       path=path, directory=directory, result=inferred)
                return inferred

            directory = self._context_directory() if self.looks_like_image(path) else None
            if directory:
                inferred = f"{self.config.gallery_root}/{directory}/{filename}"
                self.diagnostics.debug(SOURCE, "normalize.context_directory",
                                       path=path, directory=directory, result=inferred)
                return inferred

        root = self.config.assets_root
        if self.looks_like_image(path) and not (path + "/").startswith(root + "/"):
            prefixed = root + path
            self.diagnostics.debug(SOURCE, "normalize.assets_root_added", path=path, result=prefixed)
            return prefixed

        return path

    def _collapse_doubled_segments(self, path: str) -> str:
        known = {self.config.assets_root.strip("/"), self.config.gallery_subdir}
        segments = path.split("/")
        collapsed = [segments[0]]
        for segment in segments[1:]:
            if segment in known and collapsed[-1] == segment:
                continue
            collapsed.append(segment)
        return "/".join(collapsed)

    def _infer_directory(self, filename: str) -> Optional[str]:
        table = self.config.identifier_table
        token = self.filename_identifier(filename)
        if token and token in table:
            return table[token]

        for identifier in self._identifiers_by_length:
            if identifier in filename:
                return table[identifier]
        return None

    def _context_directory(self) -> Optional[str]:
        context = self.config.context_identifier
        if not context:
            return None
        compact = context.replace("-", "")
        return self.config.identifier_table.get(compact, context)
