"""
Tests for blur zone models and sanitization.

Tests cover:
- Defaults for missing fields
- Numeric coercion and rejection
- Negative size flipping
- Legacy field spellings
- Duplicate id handling
"""

import unittest

from BZ_Libs.ZoneLib.zone_models import (
    BlurZone,
    ZoneMetadata,
    clamp_blur_amount,
    normalize_rotation,
    sanitize_zone,
    sanitize_zones,
)


class TestSanitizeZone(unittest.TestCase):
    """Test sanitize_zone."""

    def test_defaults_filled(self):
        """Should fill in missing optional fields."""
        zone = sanitize_zone({"x": 5, "y": 6, "width": 70, "height": 80})

        self.assertEqual(zone.rotation, 0.0)
        self.assertEqual(zone.blur_amount, 8)
        self.assertTrue(zone.metadata.timestamp_created)
        self.assertTrue(zone.id)

    def test_missing_geometry_uses_defaults(self):
        """Should default missing geometry."""
        zone = sanitize_zone({})

        self.assertEqual((zone.x, zone.y, zone.width, zone.height), (0.0, 0.0, 10.0, 10.0))

    def test_numeric_strings_coerced(self):
        """Should accept numbers written as strings."""
        zone = sanitize_zone({"x": "12.5", "y": "3", "width": "40", "height": 20})

        self.assertEqual(zone.x, 12.5)
        self.assertEqual(zone.y, 3.0)
        self.assertEqual(zone.width, 40.0)

    def test_non_numeric_rejected(self):
        """Should reject zones with non-numeric geometry."""
        self.assertIsNone(sanitize_zone({"x": "left", "y": 0, "width": 10, "height": 10}))
        self.assertIsNone(sanitize_zone({"x": 0, "y": 0, "width": [1], "height": 10}))
        self.assertIsNone(sanitize_zone({"x": float("nan")}))

    def test_non_mapping_rejected(self):
        """Should reject entries that are not mappings."""
        self.assertIsNone(sanitize_zone("zone"))
        self.assertIsNone(sanitize_zone(None))
        self.assertIsNone(sanitize_zone([1, 2, 3, 4]))

    def test_negative_size_flipped(self):
        """Should flip negative sizes and move the anchor."""
        zone = sanitize_zone({"x": 100, "y": 100, "width": -60, "height": -40})

        self.assertEqual((zone.x, zone.y, zone.width, zone.height), (40.0, 60.0, 60.0, 40.0))

    def test_zero_size_rejected(self):
        """Should reject zones without area."""
        self.assertIsNone(sanitize_zone({"x": 1, "y": 1, "width": 0, "height": 10}))

    def test_rotation_wrapped(self):
        """Should wrap rotation into [0, 360)."""
        self.assertEqual(sanitize_zone({"rotation": 360}).rotation, 0.0)
        self.assertEqual(sanitize_zone({"rotation": -90}).rotation, 270.0)
        self.assertEqual(sanitize_zone({"rotation": "oops"}).rotation, 0.0)

    def test_blur_amount_clamped(self):
        """Should clamp the blur amount."""
        self.assertEqual(sanitize_zone({"blur_amount": 99}).blur_amount, 20)
        self.assertEqual(sanitize_zone({"blur_amount": 0}).blur_amount, 2)
        self.assertEqual(sanitize_zone({"blur_amount": "x"}).blur_amount, 8)

    def test_legacy_field_names(self):
        """Should read the older field names."""
        zone = sanitize_zone({
            "x": 1, "y": 2, "width": 3, "height": 4,
            "rotate": 45,
            "blurAmount": 12,
            "_metadata": {
                "imageWidth": 800,
                "imageHeight": 600,
                "timestamp": "2024-05-01T10:00:00",
                "originalUrl": "http://localhost/a.jpg",
                "cleanedUrl": "/images/a.jpg",
            },
        })

        self.assertEqual(zone.rotation, 45.0)
        self.assertEqual(zone.blur_amount, 12)
        self.assertEqual(zone.metadata.image_width, 800.0)
        self.assertEqual(zone.metadata.image_height, 600.0)
        self.assertEqual(zone.metadata.timestamp_created, "2024-05-01T10:00:00")
        self.assertEqual(zone.metadata.source_image_url_original, "http://localhost/a.jpg")
        self.assertEqual(zone.metadata.source_image_url_canonical, "/images/a.jpg")

    def test_percent_center_space_recognized(self):
        """Should recognize percent-centre zones."""
        zone = sanitize_zone({"x": 50, "y": 50, "width": 20, "height": 10,
                              "metadata": {"coordinateSpace": "percent-center"}})

        self.assertTrue(zone.is_percent_center)


class TestSanitizeZones(unittest.TestCase):
    """Test sanitize_zones."""

    def test_drops_only_bad_entries(self):
        """Should keep good zones and count the dropped ones."""
        zones, dropped = sanitize_zones([{"x": 1}, {"x": "bad"}, 7, {"y": 2}])

        self.assertEqual(len(zones), 2)
        self.assertEqual(dropped, 2)

    def test_not_a_list(self):
        """Should treat a non-list as no zones."""
        self.assertEqual(sanitize_zones({"x": 1}), ([], 0))
        self.assertEqual(sanitize_zones(None), ([], 0))

    def test_duplicate_ids_regenerated(self):
        """Should give duplicate ids fresh values."""
        zones, _ = sanitize_zones([{"id": "a"}, {"id": "a"}])

        self.assertEqual(zones[0].id, "a")
        self.assertNotEqual(zones[1].id, "a")

    def test_accepts_zone_objects(self):
        """Should accept BlurZone objects."""
        original = BlurZone(x=3, y=4, width=50, height=60, rotation=10, blur_amount=5)

        zones, dropped = sanitize_zones([original])

        self.assertEqual(dropped, 0)
        self.assertEqual(zones[0].to_dict(), original.to_dict())
        self.assertIsNot(zones[0], original)


class TestZoneModel(unittest.TestCase):
    """Test BlurZone and ZoneMetadata helpers."""

    def test_center(self):
        """Should compute the zone centre."""
        self.assertEqual(BlurZone(x=10, y=20, width=40, height=60).center, (30.0, 50.0))

    def test_copy_is_independent(self):
        """Should copy metadata rather than share it."""
        zone = BlurZone(metadata=ZoneMetadata(image_width=100, image_height=50))
        clone = zone.copy()
        clone.metadata.image_width = 1

        self.assertEqual(zone.metadata.image_width, 100)
        self.assertEqual(clone.id, zone.id)

    def test_to_dict_uses_persisted_field_names(self):
        """Should write the persisted field names."""
        data = BlurZone(x=1, y=2, width=3, height=4).to_dict()

        self.assertEqual(
            set(data),
            {"id", "x", "y", "width", "height", "rotation", "blur_amount", "metadata"},
        )
        self.assertIn("image_width", data["metadata"])

    def test_from_dict_round_trip(self):
        """Should rebuild an equal zone from its dictionary."""
        zone = BlurZone(x=1, y=2, width=3, height=4, rotation=90, blur_amount=15,
                        metadata=ZoneMetadata(image_width=640, image_height=480))

        self.assertEqual(BlurZone.from_dict(zone.to_dict()), zone)

    def test_metadata_from_non_mapping(self):
        """Should give empty metadata for a non-mapping."""
        self.assertFalse(ZoneMetadata.from_dict("nope").has_dimensions)


class TestHelpers(unittest.TestCase):
    """Test rotation and blur helpers."""

    def test_normalize_rotation(self):
        """Should wrap angles into [0, 360)."""
        self.assertEqual(normalize_rotation(360), 0.0)
        self.assertEqual(normalize_rotation(725), 5.0)
        self.assertEqual(normalize_rotation(-0.0), 0.0)
        self.assertAlmostEqual(normalize_rotation(-10), 350.0)

    def test_clamp_blur_amount(self):
        """Should clamp and round blur amounts."""
        self.assertEqual(clamp_blur_amount(999), 20)
        self.assertEqual(clamp_blur_amount(-5), 2)
        self.assertEqual(clamp_blur_amount(7.6), 8)
        self.assertEqual(clamp_blur_amount(None, default=12), 12)
        self.assertEqual(clamp_blur_amount(True), 8)


if __name__ == "__main__":
    unittest.main()
