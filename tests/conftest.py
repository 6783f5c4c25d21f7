from __future__ import annotations

from collections.abc import Callable

import pytest

from motion_arcade.core.types import Landmark, LandmarkFrame

# Upright subject facing the camera, selfie-view coordinates.
STANDING_POSE: dict[str, tuple[float, float, float]] = {
    "nose": (0.5, 0.2, 0.0),
    "left_shoulder": (0.4, 0.3, 0.0),
    "right_shoulder": (0.6, 0.3, 0.0),
    "left_elbow": (0.38, 0.45, 0.0),
    "right_elbow": (0.62, 0.45, 0.0),
    "left_wrist": (0.37, 0.6, 0.0),
    "right_wrist": (0.63, 0.6, 0.0),
    "left_hip": (0.45, 0.6, 0.0),
    "right_hip": (0.55, 0.6, 0.0),
    "left_knee": (0.45, 0.85, 0.0),
    "right_knee": (0.55, 0.85, 0.0),
}


def build_frame(timestamp_ms: float = 0.0, visibility: float = 1.0, **points) -> LandmarkFrame:
    """Standing pose with selected keypoints replaced.

    Overrides are `(x, y)` or `(x, y, z)` tuples, or full `Landmark` objects.
    """

    landmarks: dict[str, Landmark] = {}
    for name, (x, y, z) in STANDING_POSE.items():
        landmarks[name] = Landmark(x, y, z, visibility)
    for name, value in points.items():
        if isinstance(value, Landmark):
            landmarks[name] = value
        else:
            x, y, *rest = value
            landmarks[name] = Landmark(x, y, rest[0] if rest else 0.0, visibility)
    return LandmarkFrame(landmarks, timestamp_ms=timestamp_ms)


@pytest.fixture
def make_frame() -> Callable[..., LandmarkFrame]:
    return build_frame


def payload_from_frame(frame: LandmarkFrame) -> dict:
    return {
        "timestamp_ms": frame.timestamp_ms,
        "landmarks": {
            name: {"x": lm.x, "y": lm.y, "z": lm.z, "visibility": lm.visibility}
            for name, lm in frame.landmarks.items()
        },
    }


@pytest.fixture
def make_payload() -> Callable[..., dict]:
    def _make(timestamp_ms: float = 0.0, visibility: float = 1.0, **points) -> dict:
        return payload_from_frame(build_frame(timestamp_ms, visibility, **points))

    return _make
