from types import SimpleNamespace

import numpy as np
import pytest

from motion_arcade.core.adapters.landmarks import (
    COCO17_INDICES,
    LandmarkFrameAdapter,
    frame_from_keypoints,
    frame_from_mediapipe,
    frame_from_payload,
)
from motion_arcade.core.types import KEYPOINTS, MISSING, LandmarkFrame


def _mediapipe_landmarks(n=33):
    return [
        SimpleNamespace(x=i / 100.0, y=0.5, z=-0.01 * i, visibility=0.9) for i in range(n)
    ]


def test_mediapipe_landmarks_are_mirrored_without_swapping_labels():
    frame = frame_from_mediapipe(_mediapipe_landmarks(), timestamp_ms=12.0)
    assert set(frame.landmarks) == set(KEYPOINTS)
    assert frame.timestamp_ms == 12.0
    # Index 11 is the subject's left shoulder.
    assert frame["left_shoulder"].x == pytest.approx(0.89)
    assert frame["right_shoulder"].x == pytest.approx(0.88)
    assert frame["left_shoulder"].z == pytest.approx(-0.11)
    assert frame["nose"].visibility == pytest.approx(0.9)

    plain = frame_from_mediapipe(_mediapipe_landmarks(), mirror=False)
    assert plain["left_shoulder"].x == pytest.approx(0.11)


def test_mediapipe_rejects_short_lists():
    assert frame_from_mediapipe([]) is None
    with pytest.raises(ValueError):
        frame_from_mediapipe(_mediapipe_landmarks(20))


def test_coco_keypoints_are_normalized():
    kp = np.zeros((17, 3), dtype=np.float32)
    kp[COCO17_INDICES["left_wrist"]] = (320, 240, 0.75)
    frame = frame_from_keypoints(kp, (640, 480), timestamp_ms=5.0, mirror=False)
    wrist = frame["left_wrist"]
    assert wrist.x == pytest.approx(0.5)
    assert wrist.y == pytest.approx(0.5)
    assert wrist.z == 0.0
    assert wrist.visibility == pytest.approx(0.75)

    mirrored = frame_from_keypoints(kp, (640, 480))
    assert mirrored["nose"].x == pytest.approx(1.0)


def test_coco_keypoints_validation():
    with pytest.raises(ValueError):
        frame_from_keypoints(np.zeros((5, 3)), (640, 480))
    with pytest.raises(ValueError):
        frame_from_keypoints(np.zeros((17, 3)), (0, 480))
    assert frame_from_keypoints(np.zeros((0, 3)), (640, 480)) is None


def test_payload_parsing():
    assert frame_from_payload(None) is None
    assert frame_from_payload({"timestamp_ms": 5}) is None
    assert frame_from_payload({"landmarks": None}) is None

    frame = frame_from_payload(
        {
            "timestamp_ms": 40,
            "landmarks": {
                "nose": {"x": 0.2, "y": 0.1, "visibility": 0.9},
                "tail": {"x": 0.0, "y": 0.0},
            },
        }
    )
    assert frame.timestamp_ms == 40.0
    assert set(frame.landmarks) == {"nose"}
    assert frame["nose"].z == 0.0
    assert frame["left_knee"] is MISSING

    with pytest.raises(ValueError):
        frame_from_payload(["nose"])
    with pytest.raises(ValueError):
        frame_from_payload({"landmarks": [1, 2, 3]})


def test_adapter_dispatch():
    adapter = LandmarkFrameAdapter(mirror=True)
    assert adapter.adapt(None) is None

    existing = LandmarkFrame({})
    assert adapter.adapt(existing) is existing

    assert adapter.adapt(SimpleNamespace(pose_landmarks=None)) is None
    assert adapter.adapt(SimpleNamespace(pose_landmarks=[])) is None

    tasks = SimpleNamespace(pose_landmarks=[_mediapipe_landmarks()])
    assert adapter.adapt(tasks, timestamp_ms=3)["left_shoulder"].x == pytest.approx(0.89)

    solutions = SimpleNamespace(pose_landmarks=SimpleNamespace(landmark=_mediapipe_landmarks()))
    assert adapter.adapt(solutions)["nose"].x == pytest.approx(1.0)

    yolo = SimpleNamespace(
        keypoints=SimpleNamespace(data=np.full((2, 17, 3), 100.0)),
        orig_shape=(200, 400),
    )
    frame = adapter.adapt(yolo)
    assert frame["nose"].x == pytest.approx(0.75)
    assert frame["nose"].y == pytest.approx(0.5)

    empty = SimpleNamespace(keypoints=SimpleNamespace(data=np.zeros((0, 17, 3))), orig_shape=(1, 1))
    assert adapter.adapt(empty) is None

    with pytest.raises(ValueError):
        adapter.adapt(42)


def test_adapter_mirrors_payloads_when_configured():
    payload = {"landmarks": {"nose": {"x": 0.2, "y": 0.1, "visibility": 1.0}}}
    assert LandmarkFrameAdapter(mirror=True).adapt(payload)["nose"].x == pytest.approx(0.8)
    assert LandmarkFrameAdapter(mirror=False).adapt(payload)["nose"].x == pytest.approx(0.2)


def test_frame_is_read_only():
    frame = LandmarkFrame({})
    with pytest.raises(TypeError):
        frame.landmarks["nose"] = MISSING
    assert frame.visibility() == 0.0
    assert frame.visibility("nose") == 0.0
