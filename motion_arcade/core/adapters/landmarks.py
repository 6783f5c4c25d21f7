"""Pose-model output to `LandmarkFrame` conversion.

The pose estimator itself is an external collaborator. This module only
reshapes what it returns into the classifiers' common input:

- MediaPipe Pose (33 landmarks, normalized x/y, relative z, visibility),
- COCO-17 keypoint arrays as produced by Ultralytics pose models (pixels plus
  confidence, no depth),
- plain JSON payloads sent by a browser client.

Mirroring flips x to selfie view (`x -> 1 - x`). Anatomical labels are never
swapped: the subject's left wrist stays `left_wrist`.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

import numpy as np

from motion_arcade.core.types import KEYPOINTS, Landmark, LandmarkFrame

MEDIAPIPE_POSE_INDICES: dict[str, int] = {
    "nose": 0,
    "left_shoulder": 11,
    "right_shoulder": 12,
    "left_elbow": 13,
    "right_elbow": 14,
    "left_wrist": 15,
    "right_wrist": 16,
    "left_hip": 23,
    "right_hip": 24,
    "left_knee": 25,
    "right_knee": 26,
}

COCO17_INDICES: dict[str, int] = {
    "nose": 0,
    "left_shoulder": 5,
    "right_shoulder": 6,
    "left_elbow": 7,
    "right_elbow": 8,
    "left_wrist": 9,
    "right_wrist": 10,
    "left_hip": 11,
    "right_hip": 12,
    "left_knee": 13,
    "right_knee": 14,
}


def _field(item: Any, name: str, default: float = 0.0) -> float:
    """Read `name` from a dict-like or attribute-style landmark."""

    if isinstance(item, Mapping):
        value = item.get(name, default)
    else:
        value = getattr(item, name, default)
    if value is None:
        return default
    return float(value)


def _landmark(item: Any, mirror: bool) -> Landmark:
    x = _field(item, "x")
    return Landmark(
        x=1.0 - x if mirror else x,
        y=_field(item, "y"),
        z=_field(item, "z"),
        visibility=_field(item, "visibility"),
    )


def frame_from_mediapipe(
    landmarks: Sequence[Any], timestamp_ms: float = 0.0, mirror: bool = True
) -> LandmarkFrame | None:
    """Build a frame from a 33-point MediaPipe Pose landmark list."""

    if not landmarks:
        return None
    if len(landmarks) <= max(MEDIAPIPE_POSE_INDICES.values()):
        raise ValueError(f"expected 33 MediaPipe pose landmarks, got {len(landmarks)}")
    points = {
        name: _landmark(landmarks[idx], mirror) for name, idx in MEDIAPIPE_POSE_INDICES.items()
    }
    return LandmarkFrame(points, timestamp_ms=float(timestamp_ms))


def frame_from_keypoints(
    keypoints: Any,
    frame_size: tuple[int, int],
    timestamp_ms: float = 0.0,
    mirror: bool = True,
) -> LandmarkFrame | None:
    """Build a frame from one person's COCO-17 keypoints.

    Args:
        keypoints: Array-like of shape (17, 3) with pixel x, pixel y and
            confidence (torch tensors are accepted).
        frame_size: (width, height) of the source image in pixels.
        timestamp_ms: Frame timestamp.
        mirror: Flip x to selfie view.
    """

    if keypoints is None:
        return None
    if hasattr(keypoints, "cpu"):
        keypoints = keypoints.cpu()
    kp = keypoints.numpy() if hasattr(keypoints, "numpy") else np.asarray(keypoints)
    if kp.size == 0:
        return None
    if kp.ndim != 2 or kp.shape[0] < 17 or kp.shape[1] < 2:
        raise ValueError(f"expected (17, 3) COCO keypoints, got shape {kp.shape}")
    w, h = frame_size
    if w <= 0 or h <= 0:
        raise ValueError("frame_size values must be > 0")

    points: dict[str, Landmark] = {}
    for name, idx in COCO17_INDICES.items():
        x = float(kp[idx, 0]) / float(w)
        conf = float(kp[idx, 2]) if kp.shape[1] > 2 else 1.0
        points[name] = Landmark(
            x=1.0 - x if mirror else x,
            y=float(kp[idx, 1]) / float(h),
            z=0.0,
            visibility=conf,
        )
    return LandmarkFrame(points, timestamp_ms=float(timestamp_ms))


def frame_from_payload(payload: Mapping[str, Any] | None, mirror: bool = False) -> LandmarkFrame | None:
    """Build a frame from `{"timestamp_ms": .., "landmarks": {name: {...}}}`.

    A missing or null `landmarks` entry means no person was detected. Unknown
    keypoint names are ignored.
    """

    if payload is None:
        return None
    if not isinstance(payload, Mapping):
        raise ValueError("frame payload must be a JSON object")
    raw = payload.get("landmarks")
    if not raw:
        return None
    if not isinstance(raw, Mapping):
        raise ValueError("landmarks must map keypoint names to {x, y, z, visibility}")
    points = {name: _landmark(raw[name], mirror) for name in KEYPOINTS if raw.get(name) is not None}
    if not points:
        return None
    return LandmarkFrame(points, timestamp_ms=_field(payload, "timestamp_ms"))


class LandmarkFrameAdapter:
    """Turn whatever the pose collaborator produced into a `LandmarkFrame`.

    Returns `None` ("no frame available") when nobody was detected.
    """

    def __init__(self, mirror: bool = True) -> None:
        self.mirror = mirror

    def adapt(
        self,
        result: Any,
        timestamp_ms: float = 0.0,
        frame_size: tuple[int, int] | None = None,
    ) -> LandmarkFrame | None:
        if result is None:
            return None
        if isinstance(result, LandmarkFrame):
            return result
        if isinstance(result, Mapping):
            return frame_from_payload(result, mirror=self.mirror)

        if hasattr(result, "pose_landmarks"):
            pose_landmarks = result.pose_landmarks
            if not pose_landmarks:
                return None
            if isinstance(pose_landmarks, Sequence):
                # Tasks API: one landmark list per detected pose.
                return frame_from_mediapipe(pose_landmarks[0], timestamp_ms, self.mirror)
            # Solutions API: a NormalizedLandmarkList.
            result = pose_landmarks
        if hasattr(result, "landmark"):
            return frame_from_mediapipe(list(result.landmark), timestamp_ms, self.mirror)

        # Ultralytics pose result: keypoints.data is (persons, 17, 3).
        kpts = getattr(result, "keypoints", None)
        if kpts is not None:
            data = getattr(kpts, "data", kpts)
            if hasattr(data, "cpu"):
                data = data.cpu()
            arr = data.numpy() if hasattr(data, "numpy") else np.asarray(data)
            if arr.ndim != 3 or arr.shape[0] == 0:
                return None
            size = frame_size
            if size is None:
                orig = getattr(result, "orig_shape", None)
                if orig is None:
                    raise ValueError("frame_size is required for pixel keypoints")
                size = (int(orig[1]), int(orig[0]))
            return frame_from_keypoints(arr[0], size, timestamp_ms, self.mirror)

        if isinstance(result, Sequence):
            return frame_from_mediapipe(result, timestamp_ms, self.mirror)
        raise ValueError(f"unsupported pose result type: {type(result).__name__}")
