"""
Unit tests for geometry module.

Tests containment, handle hit-testing, rotation and resize math.
"""

import math

import pytest

from BZ_Libs.ZoneLib.geometry import (
    angle_degrees,
    clamp_center,
    compute_rotation,
    distance,
    handle_box,
    handle_positions,
    hit_test_handle,
    point_in_rotated_rect,
    resize_from_pointer,
    rotated_half_extents,
)
from BZ_Libs.ZoneLib.zone_models import BlurZone


@pytest.fixture
def zone():
    return BlurZone(x=100, y=100, width=200, height=100)


class TestBasics:
    """Tests for distance and angle_degrees."""

    def test_distance(self):
        """Should compute Euclidean distance."""
        assert distance(0, 0, 3, 4) == 5.0

    @pytest.mark.parametrize("x,y,expected", [
        (1, 0, 0.0),
        (0, 1, 90.0),
        (-1, 0, 180.0),
        (0, -1, -90.0),
    ])
    def test_angle_degrees(self, x, y, expected):
        """Should measure the angle of a point around a centre."""
        assert angle_degrees(0, 0, x, y) == pytest.approx(expected)

    def test_angle_never_minus_180(self):
        """Should report the left direction as 180, not -180."""
        assert angle_degrees(0, 0, -1, -0.0) == 180.0


class TestPointInRotatedRect:
    """Tests for point_in_rotated_rect."""

    def test_axis_aligned(self, zone):
        """Should test containment of an unrotated zone."""
        assert point_in_rotated_rect(150, 150, zone)
        assert point_in_rotated_rect(100, 100, zone)
        assert not point_in_rotated_rect(99, 150, zone)

    def test_rotated_90(self, zone):
        """Should honour rotation when testing containment."""
        zone.rotation = 90
        # centre (200, 150); rotated box spans x 150..250, y 50..250
        assert point_in_rotated_rect(200, 60, zone)
        assert not point_in_rotated_rect(110, 150, zone)

    @pytest.mark.parametrize("rotation", [0, 30, 45, 90, 179.5, 270])
    @pytest.mark.parametrize("point", [(200, 150), (110, 105), (290, 190), (205, 60), (320, 150)])
    def test_full_turn_is_equivalent(self, zone, rotation, point):
        """Should treat a full turn like no rotation."""
        zone.rotation = rotation
        direct = point_in_rotated_rect(*point, zone)
        zone.rotation = rotation + 360

        assert point_in_rotated_rect(*point, zone) == direct


class TestHandles:
    """Tests for handle_positions and hit_test_handle."""

    def test_positions_unrotated(self, zone):
        """Should place handles at the corners and above the top edge."""
        positions = handle_positions(zone)

        assert positions["top-left"] == pytest.approx((100, 100))
        assert positions["bottom-right"] == pytest.approx((300, 200))
        assert positions["rotation"] == pytest.approx((200, 80))

    def test_corner_hit(self, zone):
        """Should find a corner handle near its corner."""
        assert hit_test_handle(105, 95, zone) == "top-left"
        assert hit_test_handle(295, 205, zone) == "bottom-right"

    def test_rotation_handle_hit(self, zone):
        """Should find the rotation handle within its larger box."""
        assert hit_test_handle(200, 80, zone) == "rotation"
        assert hit_test_handle(215, 65, zone) == "rotation"

    def test_handle_box_matches_hit_area(self, zone):
        """Should span the same square the hit test accepts."""
        assert handle_box((100, 100), 10) == (90, 90, 20, 20)
        assert hit_test_handle(90, 90, zone) == "top-left"
        assert hit_test_handle(110, 110, zone) == "top-left"
        assert hit_test_handle(111, 100, zone) is None

    def test_miss(self, zone):
        """Should find no handle in the middle of the zone."""
        assert hit_test_handle(200, 150, zone) is None

    def test_rotated_corner(self, zone):
        """Should move corner handles with the rotation."""
        zone.rotation = 90
        # top-left corner (-100, -50) from the centre turns to (50, -100)
        assert hit_test_handle(250, 50, zone) == "top-left"

    def test_corners_checked_before_rotation(self):
        """Should prefer a corner when it overlaps the rotation handle."""
        small = BlurZone(x=0, y=0, width=10, height=4)

        assert hit_test_handle(0, 0, small, handle_size=10, rotation_offset=2) == "top-left"


class TestRotationAndResize:
    """Tests for compute_rotation and resize_from_pointer."""

    def test_compute_rotation_relative_to_grab(self):
        """Should subtract the grab offset."""
        assert compute_rotation(0, 0, 0, 1, 90) == pytest.approx(0.0)
        assert compute_rotation(0, 0, -1, 0, 90) == pytest.approx(90.0)

    def test_compute_rotation_in_range(self):
        """Should keep computed rotation in [0, 360)."""
        assert 0 <= compute_rotation(0, 0, 1, -1, 100) < 360

    def test_resize_symmetric(self, zone):
        """Should double the pointer's distance from the centre."""
        width, height = resize_from_pointer(zone, 350, 220)

        assert (width, height) == pytest.approx((300, 140))

    @pytest.mark.parametrize("rotation", [0, 37, 90, 200])
    def test_resize_keeps_center(self, zone, rotation):
        """Should keep the centre fixed at any rotation."""
        zone.rotation = rotation
        before = (zone.x + zone.width / 2, zone.y + zone.height / 2)

        width, height = resize_from_pointer(zone, 320, 260)
        zone.x = before[0] - width / 2
        zone.y = before[1] - height / 2
        zone.width, zone.height = width, height

        assert (zone.x + zone.width / 2, zone.y + zone.height / 2) == pytest.approx(before)

    def test_resize_floor(self, zone):
        """Should not go below the minimum size."""
        assert resize_from_pointer(zone, 201, 151) == (20, 20)


class TestClamping:
    """Tests for rotated_half_extents and clamp_center."""

    def test_half_extents(self, zone):
        """Should grow the bounding box of a rotated zone."""
        assert rotated_half_extents(zone) == pytest.approx((100, 50))
        zone.rotation = 90
        assert rotated_half_extents(zone) == pytest.approx((50, 100))
        zone.rotation = 45
        expected = (200 + 100) * math.sqrt(0.5) / 2
        assert rotated_half_extents(zone) == pytest.approx((expected, expected))

    def test_clamp_inside(self):
        """Should keep a box fully inside the bounds."""
        assert clamp_center(5, 5, 10, 10, 100, 100) == (10, 10)
        assert clamp_center(95, 50, 10, 10, 100, 100) == (90, 50)

    def test_clamp_oversized_box_centered(self):
        """Should centre a box larger than the bounds."""
        assert clamp_center(10, 10, 80, 10, 100, 100) == (50, 10)

    def test_unknown_bounds_not_clamped(self):
        """Should leave the centre alone when bounds are unknown."""
        assert clamp_center(-40, 500, 10, 10, 0, 0) == (-40, 500)
