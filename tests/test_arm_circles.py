import pytest

from motion_arcade.core.classifiers.arm_circles import (
    ArmCirclesClassifier,
    ArmCirclesConfig,
    ArmWave,
)
from motion_arcade.core.types import ArmMotion

SHOULDER_Y = 0.3

# Wrist height relative to the shoulder: rest, rise over the head, fall back.
ONE_WAVE = (
    [0.2] * 5
    + [0.15, 0.1, 0.05, 0.0, -0.05, -0.1]
    + [-0.05, 0.0, 0.05, 0.1, 0.15, 0.2]
    + [0.2] * 5
)


def test_single_wave_is_one_rotation():
    wave = ArmWave(ArmCirclesConfig())
    motions = []
    peaks = 0
    for rel in ONE_WAVE:
        _, motion, peaked = wave.update(SHOULDER_Y, SHOULDER_Y + rel)
        motions.append(motion)
        peaks += int(peaked)
    assert peaks == 1
    assert wave.rotations == 1
    assert ArmMotion.FORWARD in motions
    assert ArmMotion.BACKWARD in motions
    assert motions[-1] is ArmMotion.NONE


def test_two_peaks_per_rotation_when_configured():
    wave = ArmWave(ArmCirclesConfig(peaks_per_rotation=2))
    for rel in ONE_WAVE:
        wave.update(SHOULDER_Y, SHOULDER_Y + rel)
    assert wave.rotations == 0
    assert wave.peaks == 1
    for rel in ONE_WAVE:
        wave.update(SHOULDER_Y, SHOULDER_Y + rel)
    assert wave.rotations == 1


def test_jitter_below_noise_floor_is_ignored():
    wave = ArmWave(ArmCirclesConfig())
    for i in range(40):
        is_moving, motion, peaked = wave.update(SHOULDER_Y, SHOULDER_Y + 0.2 + (0.005 if i % 2 else 0.0))
        assert not is_moving
        assert motion is ArmMotion.NONE
    assert wave.rotations == 0


def _arm_frame(make_frame, rel):
    return make_frame(left_shoulder=(0.4, SHOULDER_Y), left_wrist=(0.4, SHOULDER_Y + rel))


def test_classifier_counts_and_holds_activity(make_frame):
    clf = ArmCirclesClassifier()
    t = 0.0
    out = None
    for rel in ONE_WAVE:
        t += 33
        out = clf.update(_arm_frame(make_frame, rel), now_ms=t)
    assert out.left_rotations == 1
    assert out.right_rotations == 0
    assert out.total_rotations == 1
    # Trailing rest frames are no longer moving but still within the hold.
    assert out.left_direction is ArmMotion.NONE
    assert out.is_rotating
    assert out.left_arm_angle == pytest.approx(90.0)

    out = clf.update(_arm_frame(make_frame, 0.2), now_ms=t + 2000)
    assert not out.is_rotating
    assert out.total_rotations == 1


def test_reset_clears_rotations(make_frame):
    clf = ArmCirclesClassifier()
    for i, rel in enumerate(ONE_WAVE):
        clf.update(_arm_frame(make_frame, rel), now_ms=i * 33)
    clf.reset()
    assert clf.left.rotations == 0
    assert clf.output.total_rotations == 0
    assert not clf.output.is_rotating


def test_activity_window_stays_bounded(make_frame):
    clf = ArmCirclesClassifier()
    for i in range(5000):
        rel = 0.2 if (i // 3) % 2 else -0.1
        clf.update(_arm_frame(make_frame, rel), now_ms=i * 33)
    # 800 ms hold at 33 ms per frame.
    assert len(clf._activity) <= 25
    assert clf.left.rotations > 0
