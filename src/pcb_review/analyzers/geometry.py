"""Planar geometry helpers shared by the extractors and analyzers.

All coordinates are in mm in KiCad's board frame (y grows downward).
"""

from __future__ import annotations

import math
from typing import Sequence

from pcb_review.models.pcb import Footprint, Pad
from pcb_review.models.types import BoundingBox, Point


def distance(x1: float, y1: float, x2: float, y2: float) -> float:
    return math.hypot(x2 - x1, y2 - y1)


def point_in_polygon(x: float, y: float, polygon: Sequence[Point]) -> bool:
    """Check if a point (x, y) is inside a polygon using ray casting algorithm.

    An edge only counts when it straddles the ray's y, which keeps horizontal
    edges and shared vertices from being counted twice.
    """
    n = len(polygon)
    if n < 3:
        return False

    inside = False
    j = n - 1
    for i in range(n):
        xi, yi = polygon[i].x, polygon[i].y
        xj, yj = polygon[j].x, polygon[j].y
        if ((yi > y) != (yj > y)) and (x < (xj - xi) * (y - yi) / (yj - yi) + xi):
            inside = not inside
        j = i
    return inside


def polygon_area(polygon: Sequence[Point]) -> float:
    """Calculate area of polygon using shoelace formula."""
    n = len(polygon)
    if n < 3:
        return 0.0

    area = 0.0
    for i in range(n):
        j = (i + 1) % n
        area += polygon[i].x * polygon[j].y
        area -= polygon[j].x * polygon[i].y

    return abs(area / 2)


def bounding_box(points: Sequence[Point]) -> BoundingBox:
    if not points:
        return BoundingBox()
    xs = [p.x for p in points]
    ys = [p.y for p in points]
    return BoundingBox(min_x=min(xs), max_x=max(xs), min_y=min(ys), max_y=max(ys))


def distance_to_bbox(x: float, y: float, bbox: BoundingBox) -> float:
    """Distance from a point to the nearest point of a box (0 when inside)."""
    nearest_x = max(bbox.min_x, min(x, bbox.max_x))
    nearest_y = max(bbox.min_y, min(y, bbox.max_y))
    return distance(x, y, nearest_x, nearest_y)


def rotate_offset(dx: float, dy: float, rotation_deg: float) -> tuple[float, float]:
    """Rotate a local offset by *rotation_deg* degrees.

    Uses the standard matrix; in the y-down board frame this turns the offset
    clockwise on screen.
    """
    theta = math.radians(rotation_deg)
    cos_r = math.cos(theta)
    sin_r = math.sin(theta)
    return dx * cos_r - dy * sin_r, dx * sin_r + dy * cos_r


def absolute_pad_position(fp: Footprint, pad: Pad) -> tuple[float, float]:
    """Board position of a pad: its offset rotated with the footprint, then translated."""
    rx, ry = rotate_offset(pad.x, pad.y, fp.rotation)
    return fp.x + rx, fp.y + ry
