"""Tests for planar geometry helpers."""

from __future__ import annotations

import pytest

from pcb_review.analyzers.geometry import (
    absolute_pad_position,
    bounding_box,
    distance_to_bbox,
    point_in_polygon,
    polygon_area,
    rotate_offset,
)
from pcb_review.models.pcb import Footprint, Pad
from pcb_review.models.types import BoundingBox, Point


def _poly(*coords: tuple[float, float]) -> list[Point]:
    return [Point(x=x, y=y) for x, y in coords]


UNIT_SQUARE = _poly((0, 0), (1, 0), (1, 1), (0, 1))
SQUARE_10 = _poly((0, 0), (10, 0), (10, 10), (0, 10))
L_SHAPE = _poly((0, 0), (4, 0), (4, 1), (1, 1), (1, 4), (0, 4))


class TestPolygonArea:
    def test_unit_square(self):
        assert polygon_area(UNIT_SQUARE) == 1.0

    def test_invariant_under_rotation_and_reversal(self):
        expected = polygon_area(L_SHAPE)
        assert expected == pytest.approx(7.0)
        for shift in range(len(L_SHAPE)):
            rotated = L_SHAPE[shift:] + L_SHAPE[:shift]
            assert polygon_area(rotated) == pytest.approx(expected)
            assert polygon_area(list(reversed(rotated))) == pytest.approx(expected)

    def test_degenerate(self):
        assert polygon_area([]) == 0.0
        assert polygon_area(_poly((0, 0), (5, 5))) == 0.0


class TestPointInPolygon:
    def test_inside_and_outside(self):
        assert point_in_polygon(5, 5, SQUARE_10)
        assert not point_in_polygon(15, 5, SQUARE_10)
        assert not point_in_polygon(5, -1, SQUARE_10)

    def test_concave(self):
        assert point_in_polygon(0.5, 3, L_SHAPE)
        assert not point_in_polygon(3, 3, L_SHAPE)

    def test_ray_through_vertex_counted_once(self):
        diamond = _poly((5, 0), (10, 5), (5, 10), (0, 5))
        assert point_in_polygon(5, 5, diamond)
        assert not point_in_polygon(-1, 5, diamond)

    def test_too_few_points(self):
        assert not point_in_polygon(0, 0, _poly((0, 0), (1, 1)))


class TestBoxes:
    def test_bounding_box(self):
        bbox = bounding_box(L_SHAPE)
        assert (bbox.min_x, bbox.max_x, bbox.min_y, bbox.max_y) == (0, 4, 0, 4)

    def test_empty_bounding_box(self):
        assert bounding_box([]) == BoundingBox()

    def test_distance_to_bbox(self):
        bbox = BoundingBox(min_x=0, max_x=10, min_y=0, max_y=10)
        assert distance_to_bbox(5, 5, bbox) == 0.0
        assert distance_to_bbox(13, 5, bbox) == pytest.approx(3.0)
        assert distance_to_bbox(13, 14, bbox) == pytest.approx(5.0)


class TestRotation:
    def test_zero_rotation(self):
        assert rotate_offset(1.0, 2.0, 0) == (1.0, 2.0)

    def test_quarter_turn(self):
        x, y = rotate_offset(1.0, 0.0, 90)
        assert x == pytest.approx(0.0, abs=1e-12)
        assert y == pytest.approx(1.0)

    def test_half_turn(self):
        x, y = rotate_offset(1.0, 2.0, 180)
        assert x == pytest.approx(-1.0)
        assert y == pytest.approx(-2.0)

    def test_absolute_pad_position(self):
        fp = Footprint(reference="C1", x=30, y=20, rotation=90)
        pad = Pad(number="1", type="smd", x=-0.95, y=0)
        x, y = absolute_pad_position(fp, pad)
        assert x == pytest.approx(30.0)
        assert y == pytest.approx(19.05)
