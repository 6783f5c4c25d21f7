"""Shared type definitions used across the gesture core.

This module centralizes the small, stable types every classifier depends on:
the per-frame landmark snapshot and the enums that appear in public output
records.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

KEYPOINTS: tuple[str, ...] = (
    "nose",
    "left_shoulder",
    "right_shoulder",
    "left_elbow",
    "right_elbow",
    "left_wrist",
    "right_wrist",
    "left_hip",
    "right_hip",
    "left_knee",
    "right_knee",
)

Point = tuple[float, float]


@dataclass(frozen=True)
class Landmark:
    """One body keypoint: normalized x/y, relative depth z and visibility."""

    x: float
    y: float
    z: float = 0.0
    visibility: float = 0.0


MISSING = Landmark(0.0, 0.0, 0.0, 0.0)


@dataclass(frozen=True)
class LandmarkFrame:
    """Immutable snapshot of the tracked body for one video frame.

    Coordinates are in selfie view: the subject's left side has the smaller x.
    Keypoints the pose model did not report read as `MISSING` (zero visibility).
    """

    landmarks: Mapping[str, Landmark] = field(default_factory=dict)
    timestamp_ms: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "landmarks", MappingProxyType(dict(self.landmarks)))

    def __getitem__(self, name: str) -> Landmark:
        return self.landmarks.get(name, MISSING)

    def visibility(self, *names: str) -> float:
        """Return the mean visibility of the named keypoints."""

        if not names:
            return 0.0
        return sum(self[n].visibility for n in names) / float(len(names))


class SquatState(str, Enum):
    STANDING = "standing"
    SQUATTING = "squatting"


class PunchType(str, Enum):
    NONE = "none"
    STRAIGHT = "straight"
    HOOK = "hook"
    UPPERCUT = "uppercut"


class LegState(str, Enum):
    DOWN = "down"
    UP = "up"


class TwistDirection(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class DodgeQuality(str, Enum):
    NONE = "none"
    NORMAL = "normal"
    PERFECT = "perfect"


class ArmMotion(str, Enum):
    """Vertical wrist motion reported per arm (up reads as forward)."""

    NONE = "none"
    FORWARD = "forward"
    BACKWARD = "backward"


class Lane(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"
