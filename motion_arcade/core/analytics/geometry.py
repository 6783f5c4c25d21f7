"""Geometry helpers over normalized landmarks."""

from __future__ import annotations

import math

import numpy as np

from motion_arcade.core.types import Landmark, Point


def clamp(v: float, lo: float, hi: float) -> float:
    return lo if v < lo else hi if v > hi else v


def midpoint(a: Landmark, b: Landmark) -> Point:
    """Return the (x, y) midpoint of two landmarks."""

    return ((a.x + b.x) / 2.0, (a.y + b.y) / 2.0)


def distance_2d(a: Landmark, b: Landmark) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)


def distance_3d(a: tuple[float, float, float], b: tuple[float, float, float]) -> float:
    """Euclidean distance between two (x, y, z) samples."""

    return float(np.linalg.norm(np.subtract(a, b)))


def joint_angle(a: Landmark, vertex: Landmark, c: Landmark) -> float:
    """Return the image-plane angle a-vertex-c in degrees, in [0, 180]."""

    radians = math.atan2(c.y - vertex.y, c.x - vertex.x) - math.atan2(
        a.y - vertex.y, a.x - vertex.x
    )
    angle = abs(math.degrees(radians))
    if angle > 180.0:
        angle = 360.0 - angle
    return angle


def depth_angle(left: Landmark, right: Landmark) -> float:
    """Rotation of a left/right keypoint pair about the vertical axis, in degrees.

    Computed as `atan2(dz, dx)` from left to right; positive when the right
    keypoint sits further from the camera than the left one.
    """

    return math.degrees(math.atan2(right.z - left.z, right.x - left.x))


def heading_360(origin: Landmark, target: Landmark) -> float:
    """Image-plane direction from origin to target in degrees, in [0, 360)."""

    angle = math.degrees(math.atan2(target.y - origin.y, target.x - origin.x))
    if angle < 0:
        angle += 360.0
    return angle
