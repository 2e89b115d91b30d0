"""
Plain geometry helpers on (x, y) tuples.
"""

import math
from typing import Tuple

Point = Tuple[float, float]


def distance(a: Point, b: Point) -> float:
    return math.hypot(b[0] - a[0], b[1] - a[1])


def quantize(value: float, grid: float) -> float:
    """Round to the nearest multiple of grid, halves rounding up."""
    return math.floor(value / grid + 0.5) * grid


def quantize_point(point: Point, grid: float) -> Point:
    return (quantize(point[0], grid), quantize(point[1], grid))


def segment_length(p1: Point, p2: Point) -> float:
    return distance(p1, p2)


def segment_angle(p1: Point, p2: Point) -> float:
    """
    Direction from p1 to p2 in degrees, in the half-open range (-180, 180].
    A zero-length segment has angle 0.
    """
    angle = math.degrees(math.atan2(p2[1] - p1[1], p2[0] - p1[0]))
    if angle <= -180.0:
        angle += 360.0
    return angle


def polar_offset(anchor: Point, length: float, angle_degrees: float) -> Point:
    """Point at `length` from anchor along angle_degrees (y grows downward on screen)."""
    theta = math.radians(angle_degrees)
    return (anchor[0] + length * math.cos(theta), anchor[1] + length * math.sin(theta))


def translate(point: Point, dx: float, dy: float) -> Point:
    return (point[0] + dx, point[1] + dy)
