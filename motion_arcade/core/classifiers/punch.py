"""Punch detection and classification (straight / hook / uppercut), per arm.

Each arm keeps a short wrist history. When the wrist moves fast enough, the
punch type is decided from the elbow angle, the direction of travel and where
the wrist is on screen. Checks run in a fixed order (straight, hook,
uppercut) and the first match wins. After a punch the arm is on cooldown for
a fixed number of frames so a single swing is not counted twice.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field

import numpy as np

from motion_arcade.core.analytics.geometry import distance_3d, joint_angle
from motion_arcade.core.classifiers.base import GestureClassifier
from motion_arcade.core.types import Landmark, LandmarkFrame, Point, PunchType

logger = logging.getLogger(__name__)

ARM_KEYPOINTS = (
    "left_shoulder",
    "right_shoulder",
    "left_elbow",
    "right_elbow",
    "left_wrist",
    "right_wrist",
)


@dataclass(frozen=True)
class PunchZones:
    """Screen zones in normalized coordinates."""

    # Max wrist distance from the shoulder center for a straight punch.
    center_half_width: float = 0.2
    left_side_x_max: float = 0.35
    right_side_x_min: float = 0.65
    # Uppercuts start below this y ...
    bottom_y_min: float = 0.6
    # ... and must finish above this one.
    middle_y_max: float = 0.5


@dataclass(frozen=True)
class PunchConfig:
    history_size: int = 8
    # Velocity is measured between the newest sample and the one this many
    # samples back (counting the newest).
    velocity_span: int = 5
    min_velocity: float = 0.03
    straight_elbow_min: float = 140.0
    hook_elbow_min: float = 50.0
    hook_elbow_max: float = 130.0
    forward_z_threshold: float = -0.02
    side_movement_threshold: float = 0.04
    uppercut_velocity_y: float = -0.05
    cooldown_frames: int = 12
    combo_window_ms: float = 2000.0
    hook_requires_side_zone: bool = False
    zones: PunchZones = field(default_factory=PunchZones)


@dataclass(frozen=True)
class PunchOutput:
    left_punch: PunchType = PunchType.NONE
    right_punch: PunchType = PunchType.NONE
    last_punch: PunchType = PunchType.NONE
    punch_count: int = 0
    combo: int = 0
    left_wrist: Point = (0.25, 0.5)
    right_wrist: Point = (0.75, 0.5)
    is_punching: bool = False
    confidence: float = 0.0


class _Arm:
    """Private per-arm state."""

    def __init__(self, side: str, history_size: int) -> None:
        self.side = side
        self.history: deque[tuple[float, float, float]] = deque(maxlen=history_size)
        self.cooldown = 0
        self.start_pos: Point | None = None

    @property
    def is_left(self) -> bool:
        return self.side == "left"


class PunchClassifier(GestureClassifier[PunchOutput]):
    name = "punch"

    def __init__(self, config: PunchConfig | None = None) -> None:
        self.config = config or PunchConfig()
        super().__init__()

    def _reset_state(self) -> None:
        self.left = _Arm("left", self.config.history_size)
        self.right = _Arm("right", self.config.history_size)
        self.punch_count = 0
        self.combo = 0
        self._last_punch_ms: float | None = None

    def _initial_output(self) -> PunchOutput:
        return PunchOutput()

    def classify_arm(
        self,
        arm: _Arm,
        shoulder: Landmark,
        elbow: Landmark,
        wrist: Landmark,
        shoulder_center_x: float,
    ) -> PunchType:
        """Classify the current motion of one arm from its wrist history."""

        cfg = self.config
        zones = cfg.zones
        if len(arm.history) < cfg.velocity_span:
            return PunchType.NONE

        samples = np.asarray(arm.history, dtype=np.float64)
        dx, dy, dz = samples[-1] - samples[-cfg.velocity_span]
        velocity = distance_3d(samples[-1], samples[-cfg.velocity_span])
        if velocity < cfg.min_velocity:
            # Resting wrist: this is where the next uppercut starts from.
            arm.start_pos = (wrist.x, wrist.y)
            return PunchType.NONE

        elbow_angle = joint_angle(shoulder, elbow, wrist)

        is_centered = abs(wrist.x - shoulder_center_x) < zones.center_half_width
        if elbow_angle > cfg.straight_elbow_min and is_centered and dz < cfg.forward_z_threshold:
            return PunchType.STRAIGHT

        is_bent = cfg.hook_elbow_min <= elbow_angle <= cfg.hook_elbow_max
        has_side_movement = abs(dx) > cfg.side_movement_threshold
        # Selfie view: the left arm hooks toward +x, the right arm toward -x.
        hooks_inward = dx > 0 if arm.is_left else dx < 0
        in_side_zone = wrist.x < zones.left_side_x_max or wrist.x > zones.right_side_x_min
        if is_bent and has_side_movement and hooks_inward:
            if in_side_zone or not cfg.hook_requires_side_zone:
                return PunchType.HOOK

        start = arm.start_pos
        started_low = start is not None and start[1] > zones.bottom_y_min
        if started_low and dy < cfg.uppercut_velocity_y and wrist.y < zones.middle_y_max:
            arm.start_pos = None
            return PunchType.UPPERCUT

        return PunchType.NONE

    def _process(self, frame: LandmarkFrame, now_ms: float) -> PunchOutput:
        cfg = self.config
        for arm in (self.left, self.right):
            if arm.cooldown > 0:
                arm.cooldown -= 1

        shoulder_center_x = (frame["left_shoulder"].x + frame["right_shoulder"].x) / 2.0

        results: dict[str, PunchType] = {}
        last = PunchType.NONE
        for arm in (self.left, self.right):
            wrist = frame[f"{arm.side}_wrist"]
            arm.history.append((wrist.x, wrist.y, wrist.z))
            if arm.start_pos is None:
                arm.start_pos = (wrist.x, wrist.y)

            punch = PunchType.NONE
            if arm.cooldown == 0:
                punch = self.classify_arm(
                    arm,
                    frame[f"{arm.side}_shoulder"],
                    frame[f"{arm.side}_elbow"],
                    wrist,
                    shoulder_center_x,
                )
                if punch is not PunchType.NONE:
                    arm.cooldown = cfg.cooldown_frames
                    self.punch_count += 1
                    last = punch
                    logger.debug("Punch %s arm=%s count=%d", punch.value, arm.side, self.punch_count)
            results[arm.side] = punch

        is_punching = last is not PunchType.NONE
        if is_punching:
            if self._last_punch_ms is not None and now_ms - self._last_punch_ms < cfg.combo_window_ms:
                self.combo += 1
            else:
                self.combo = 0
            self._last_punch_ms = now_ms
        elif self._last_punch_ms is None or now_ms - self._last_punch_ms >= cfg.combo_window_ms:
            self.combo = 0

        left_wrist, right_wrist = frame["left_wrist"], frame["right_wrist"]
        return PunchOutput(
            left_punch=results["left"],
            right_punch=results["right"],
            last_punch=last if is_punching else self._output.last_punch,
            punch_count=self.punch_count,
            combo=self.combo,
            left_wrist=(left_wrist.x, left_wrist.y),
            right_wrist=(right_wrist.x, right_wrist.y),
            is_punching=is_punching,
            confidence=frame.visibility(*ARM_KEYPOINTS),
        )
