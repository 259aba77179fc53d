"""
Constants and configuration values for Blur Zones.

This module centralizes all constant values, magic numbers, and
configuration settings used throughout the library.
"""

# Store file constants
ZONE_STORE_FILE_NAME = "blur_zones.json"
SETTINGS_FILE_NAME = "editor_settings.json"
SCHEMA_VERSION = 1
EDITOR_VERSION = "BlurZones-v1.2"

# Blur zone defaults
DEFAULT_BLUR_AMOUNT = 8
MIN_BLUR_AMOUNT = 2
MAX_BLUR_AMOUNT = 20
DEFAULT_ROTATION = 0.0
DEFAULT_ZONE_X = 0.0
DEFAULT_ZONE_Y = 0.0
DEFAULT_ZONE_SIZE = 10.0

# Editor geometry
HANDLE_SIZE = 10.0
ROTATION_HANDLE_OFFSET = 20.0
ROTATION_HANDLE_SCALE = 2.0
MIN_DRAW_SIZE = 10.0
MIN_RESIZE_SIZE = 20.0
DEFAULT_NEW_ZONE_WIDTH = 100.0
DEFAULT_NEW_ZONE_HEIGHT = 50.0
ROTATION_DECIMALS = 1
DIAGNOSTIC_HISTORY_SIZE = 200

# Handle names
HANDLE_TOP_LEFT = "top-left"
HANDLE_TOP_RIGHT = "top-right"
HANDLE_BOTTOM_LEFT = "bottom-left"
HANDLE_BOTTOM_RIGHT = "bottom-right"
HANDLE_ROTATION = "rotation"
CORNER_HANDLES = (HANDLE_TOP_LEFT, HANDLE_TOP_RIGHT, HANDLE_BOTTOM_LEFT, HANDLE_BOTTOM_RIGHT)

# Editor states
STATE_IDLE = "idle"
STATE_DRAWING = "drawing"
STATE_DRAGGING = "dragging"
STATE_RESIZING = "resizing"
STATE_ROTATING = "rotating"

# Cursor hints
CURSOR_DEFAULT = "default"
CURSOR_CROSSHAIR = "crosshair"
CURSOR_MOVE = "move"
CURSOR_GRAB = "grab"
CURSOR_NWSE_RESIZE = "nwse-resize"
CURSOR_NESW_RESIZE = "nesw-resize"

# Coordinate spaces
SPACE_PIXEL = "pixel"
SPACE_PERCENT_CENTER = "percent-center"

# Path conventions
ASSETS_ROOT = "/images"
GALLERY_SUBDIR = "gallery-page"
SITE_HOSTS = ("localhost", "127.0.0.1")
OPAQUE_SCHEMES = ("blob:", "data:")
WEB_SCHEMES = ("http://", "https://")
SUPPORTED_IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".webp", ".svg"}

# Store field names
FIELD_SCHEMA_VERSION = "schema_version"
FIELD_UPDATED_AT = "updated_at"
FIELD_IMAGE_BLUR_ZONES = "image_blur_zones"

# Zone field names
FIELD_ZONE_ID = "id"
FIELD_X = "x"
FIELD_Y = "y"
FIELD_WIDTH = "width"
FIELD_HEIGHT = "height"
FIELD_ROTATION = "rotation"
FIELD_BLUR_AMOUNT = "blur_amount"
FIELD_METADATA = "metadata"

# Metadata field names
FIELD_IMAGE_WIDTH = "image_width"
FIELD_IMAGE_HEIGHT = "image_height"
FIELD_TIMESTAMP_CREATED = "timestamp_created"
FIELD_TIMESTAMP_SAVED = "timestamp_saved"
FIELD_SOURCE_URL_ORIGINAL = "source_image_url_original"
FIELD_SOURCE_URL_CANONICAL = "source_image_url_canonical"
FIELD_EDITOR_VERSION = "editor_version"
FIELD_COORDINATE_SPACE = "coordinate_space"

# Legacy aliases accepted when loading older zone data
LEGACY_ZONE_ALIASES = {
    FIELD_ROTATION: ("rotation", "rotate"),
    FIELD_BLUR_AMOUNT: ("blur_amount", "blurAmount"),
    FIELD_METADATA: ("metadata", "_metadata"),
}
LEGACY_METADATA_ALIASES = {
    FIELD_IMAGE_WIDTH: ("image_width", "imageWidth"),
    FIELD_IMAGE_HEIGHT: ("image_height", "imageHeight"),
    FIELD_TIMESTAMP_CREATED: ("timestamp_created", "timestampCreated", "timestamp"),
    FIELD_TIMESTAMP_SAVED: ("timestamp_saved", "timestampSaved"),
    FIELD_SOURCE_URL_ORIGINAL: ("source_image_url_original", "sourceImageUrlOriginal", "originalUrl"),
    FIELD_SOURCE_URL_CANONICAL: ("source_image_url_canonical", "sourceImageUrlCanonical", "cleanedUrl"),
    FIELD_EDITOR_VERSION: ("editor_version", "editorVersion", "editor"),
    FIELD_COORDINATE_SPACE: ("coordinate_space", "coordinateSpace"),
}

# Gallery item identifier -> gallery directory
DEFAULT_IDENTIFIER_TABLE = {
    "thunderbird": "thunderbird-restoration",
    "cadillac": "red-cadillac-repair",
    "redcadillac": "red-cadillac-repair",
    "porsche": "porsche-detail",
    "porschedetail": "porsche-detail",
    "mustangrebuild": "mustang-rebuild",
    "mustang": "mustang-rebuild",
    "mercedes": "mercedes-sl550-repaint",
    "mercedesrepaint": "mercedes-sl550-repaint",
    "mercedessls": "mercedes-sl550-repaint",
    "mercedessl550": "mercedes-sl550-repaint",
    "sl550": "mercedes-sl550-repaint",
    "greenmercedes": "green-mercedes-repair",
    "jaguar": "jaguar-repaint",
    "jaguarrepaint": "jaguar-repaint",
    "honda": "honda-accord-repair",
    "hondaaccord": "honda-accord-repair",
    "accord": "honda-accord-repair",
    "bmw": "bmw-e90-repair",
    "bmwe90": "bmw-e90-repair",
    "bluealfa": "blue-alfa-repair",
    "alfa": "blue-alfa-repair",
    "bluemustang": "blue-mustang-repair",
    "blueaccord": "blue-accord-repair",
}
