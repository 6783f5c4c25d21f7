import pytest

from motion_arcade.core.classifiers.knees import KneeLiftClassifier
from motion_arcade.core.types import LegState

# Hips sit at y=0.6: the trigger line is y<0.75, the reset line y>0.8.
KNEE_UP = 0.7
KNEE_DOWN = 0.85
KNEE_BETWEEN = 0.78


def _legs(make_frame, left_y, right_y, visibility=1.0):
    return make_frame(visibility=visibility, left_knee=(0.45, left_y), right_knee=(0.55, right_y))


def test_step_counts_once_per_lift(make_frame):
    clf = KneeLiftClassifier()
    out = clf.update(_legs(make_frame, KNEE_DOWN, KNEE_DOWN), now_ms=0)
    assert out.steps_count == 0
    assert out.left_state is LegState.DOWN

    for t in (100, 133, 166):
        out = clf.update(_legs(make_frame, KNEE_UP, KNEE_DOWN), now_ms=t)
    assert out.left_state is LegState.UP
    assert out.steps_count == 1


def test_partial_drop_does_not_rearm(make_frame):
    clf = KneeLiftClassifier()
    clf.update(_legs(make_frame, KNEE_UP, KNEE_DOWN), now_ms=0)
    out = clf.update(_legs(make_frame, KNEE_BETWEEN, KNEE_DOWN), now_ms=33)
    assert out.left_state is LegState.UP
    out = clf.update(_legs(make_frame, KNEE_UP, KNEE_DOWN), now_ms=66)
    assert out.steps_count == 1

    out = clf.update(_legs(make_frame, KNEE_DOWN, KNEE_DOWN), now_ms=99)
    assert out.left_state is LegState.DOWN
    out = clf.update(_legs(make_frame, KNEE_UP, KNEE_DOWN), now_ms=132)
    assert out.steps_count == 2


def test_cadence_and_activity_window(make_frame):
    clf = KneeLiftClassifier()
    clf.update(_legs(make_frame, KNEE_DOWN, KNEE_DOWN), now_ms=0)
    clf.update(_legs(make_frame, KNEE_UP, KNEE_DOWN), now_ms=100)
    clf.update(_legs(make_frame, KNEE_DOWN, KNEE_UP), now_ms=200)
    clf.update(_legs(make_frame, KNEE_UP, KNEE_DOWN), now_ms=300)
    out = clf.update(_legs(make_frame, KNEE_DOWN, KNEE_UP), now_ms=400)
    assert out.steps_count == 4
    # 4 steps in 2 s = 2 steps/s, half of the 4 steps/s ceiling.
    assert out.average_speed == pytest.approx(0.5)
    assert out.is_stepping

    out = clf.update(_legs(make_frame, KNEE_DOWN, KNEE_DOWN), now_ms=1500)
    assert not out.is_stepping
    assert out.average_speed == pytest.approx(0.5)

    out = clf.update(_legs(make_frame, KNEE_DOWN, KNEE_DOWN), now_ms=2450)
    assert out.average_speed == 0.0
    assert out.steps_count == 4


def test_speed_is_capped(make_frame):
    clf = KneeLiftClassifier()
    t = 0
    for i in range(12):
        up = i % 2 == 0
        t += 50
        out = clf.update(
            _legs(make_frame, KNEE_UP if up else KNEE_DOWN, KNEE_DOWN if up else KNEE_UP),
            now_ms=t,
        )
    assert out.average_speed == 1.0


def test_knee_height_is_normalized(make_frame):
    clf = KneeLiftClassifier()
    out = clf.update(_legs(make_frame, KNEE_UP, KNEE_DOWN), now_ms=0)
    assert out.left_knee_height == 1.0
    assert out.right_knee_height == 0.0
    out = clf.update(_legs(make_frame, 0.775, KNEE_DOWN), now_ms=33)
    assert out.left_knee_height == pytest.approx(0.5)


def test_low_visibility_is_ignored(make_frame):
    clf = KneeLiftClassifier()
    out = clf.update(_legs(make_frame, KNEE_UP, KNEE_UP, visibility=0.3), now_ms=0)
    assert out.steps_count == 0
    assert out.confidence == pytest.approx(0.3)
    assert clf.legs["left"] is LegState.DOWN
