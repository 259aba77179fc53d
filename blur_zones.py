"""
Blur zone editor launcher.

Usage:
    python blur_zones.py IMAGE [STORE_JSON] [--site-root DIR]
                         [--identifier-table FILE] [--item ID]

IMAGE is the image file to edit. Zones are stored in STORE_JSON
(blur_zones.json in the working directory by default) under the image's
canonical key, computed from its path relative to the site root.

Images outside the gallery directory are placed by the identifier in their
file name, looked up in --identifier-table (a JSON object of identifier ->
directory), or in the directory of the item named by --item.
"""

from pathlib import Path
from typing import List, Optional
import argparse
import logging
import os
import sys

from PyQt5.QtWidgets import QApplication

from BZ_Libs.constants import ZONE_STORE_FILE_NAME, SETTINGS_FILE_NAME
from BZ_Libs.diagnostics import Diagnostics
from BZ_Libs.EditorLib.blur_editor_window import BlurEditorWindow
from BZ_Libs.EditorLib.editor_controller import BlurEditorController
from BZ_Libs.EditorLib.editor_settings import SettingsProvider, load_settings
from BZ_Libs.PathLib.path_normalizer import NormalizerConfig, PathNormalizer, load_identifier_table
from BZ_Libs.ZoneStoreLib.zone_store import JsonZoneStore


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Draw blur zones over a gallery image.")
    parser.add_argument("image", type=Path, help="Image file to edit")
    parser.add_argument("store", type=Path, nargs="?", default=Path(ZONE_STORE_FILE_NAME),
                        help="Zone store JSON file")
    parser.add_argument("--site-root", type=Path, default=None,
                        help="Directory served as the site root (default: working directory)")
    parser.add_argument("--settings", type=Path, default=Path(SETTINGS_FILE_NAME),
                        help="Editor settings JSON file")
    parser.add_argument("--identifier-table", type=Path, default=None,
                        help="JSON file mapping filename identifiers to gallery directories")
    parser.add_argument("--item", default=None,
                        help="Identifier of the gallery item being edited")
    parser.add_argument("--verbose", action="store_true", help="Log diagnostic events")
    return parser.parse_args(argv)


def image_reference(image_path: Path, site_root: Optional[Path]) -> str:
    """The image's site path when it lies under the site root, else its file name."""
    root = (site_root or Path.cwd()).resolve()
    resolved = image_path.resolve()
    try:
        return "/" + resolved.relative_to(root).as_posix()
    except ValueError:
        return resolved.name


def build_normalizer(args: argparse.Namespace, diagnostics: Diagnostics) -> PathNormalizer:
    config = NormalizerConfig(context_identifier=args.item)
    if args.identifier_table is not None:
        table = load_identifier_table(args.identifier_table)
        if table:
            config = NormalizerConfig(identifier_table=table, context_identifier=args.item)
    return PathNormalizer(config, diagnostics)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    diagnostics = Diagnostics()
    controller = BlurEditorController(
        image_reference(args.image, args.site_root),
        JsonZoneStore(args.store),
        normalizer=build_normalizer(args, diagnostics),
        settings=SettingsProvider(load_settings(args.settings)),
        diagnostics=diagnostics,
    )

    app = QApplication(sys.argv[:1])
    window = BlurEditorWindow(controller, args.image if os.path.exists(args.image) else None)
    window.show()
    sys.exit(app.exec_())


if __name__ == "__main__":
    main()
