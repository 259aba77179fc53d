"""
Pytest configuration and shared fixtures for Blur Zones tests.

This module provides shared test fixtures and configuration
used across multiple test modules.
"""

import pytest
from PIL import Image

from BZ_Libs.diagnostics import Diagnostics
from BZ_Libs.PathLib.path_normalizer import NormalizerConfig, PathNormalizer
from BZ_Libs.ZoneStoreLib.zone_store import JsonZoneStore


@pytest.fixture
def identifier_table():
    """
    Provide a small identifier -> gallery directory table.

    Returns:
        Dict mapping filename tokens to directory names
    """
    return {
        "bluealfa": "blue-alfa-repair",
        "mustang": "mustang-rebuild",
        "bluemustang": "blue-mustang-repair",
        "porsche": "porsche-detail",
    }


@pytest.fixture
def diagnostics():
    return Diagnostics()


@pytest.fixture
def normalizer(identifier_table, diagnostics):
    """
    Provide a PathNormalizer that treats example.com as the site's own host.
    """
    config = NormalizerConfig(
        site_hosts=("example.com", "localhost"),
        identifier_table=identifier_table,
    )
    return PathNormalizer(config, diagnostics)


@pytest.fixture
def zone_store(tmp_path):
    """
    Provide a JsonZoneStore backed by a file in a temporary directory.
    """
    return JsonZoneStore(tmp_path / "blur_zones.json")


@pytest.fixture
def sample_image(tmp_path):
    """
    Provide a 1600x1200 PNG image on disk.

    Returns:
        Path to the image file
    """
    image_path = tmp_path / "after-1-mustang-front.png"
    Image.new("RGB", (1600, 1200), (200, 30, 30)).save(image_path)
    return image_path
