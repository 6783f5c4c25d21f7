"""Arm-circle counting from the vertical wrist wave.

Swinging an arm in a circle makes the wrist rise and fall relative to the
shoulder whatever the rotation direction, so only the relative wrist height is
tracked. Every up-to-down reversal is a peak, and `peaks_per_rotation` peaks
credit one rotation.

Counting strictly, a revolution is two peaks (up-down-up-down). The game
credits a rotation at every peak (`peaks_per_rotation = 1`) so the count feels
responsive; keep that ratio unless the scoring is meant to change.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from motion_arcade.core.analytics.geometry import heading_360
from motion_arcade.core.analytics.smoothing import RecentEvents, RollingMean
from motion_arcade.core.classifiers.base import GestureClassifier
from motion_arcade.core.types import ArmMotion, LandmarkFrame

logger = logging.getLogger(__name__)

ARM_KEYPOINTS = ("left_wrist", "right_wrist", "left_shoulder", "right_shoulder")


@dataclass(frozen=True)
class ArmCirclesConfig:
    smoothing_window: int = 5
    # Smoothed frame-to-frame change in relative wrist y below which the
    # direction is left unchanged.
    noise_threshold: float = 0.008
    peaks_per_rotation: int = 1
    hold_ms: float = 800.0


@dataclass(frozen=True)
class ArmCirclesOutput:
    left_arm_angle: float = 0.0
    right_arm_angle: float = 0.0
    left_rotations: int = 0
    right_rotations: int = 0
    left_direction: ArmMotion = ArmMotion.NONE
    right_direction: ArmMotion = ArmMotion.NONE
    is_rotating: bool = False
    total_rotations: int = 0
    confidence: float = 0.0


class ArmWave:
    """Peak counter over one arm's smoothed relative wrist height."""

    def __init__(self, config: ArmCirclesConfig) -> None:
        self.config = config
        self._history = RollingMean(config.smoothing_window)
        self.prev_y: float | None = None
        self.direction: str | None = None
        self.peaks = 0
        self.rotations = 0

    def update(self, shoulder_y: float, wrist_y: float) -> tuple[bool, ArmMotion, bool]:
        """Feed one frame and return (is_moving, motion, peaked)."""

        smoothed = self._history.push(wrist_y - shoulder_y)
        if self.prev_y is None:
            self.prev_y = smoothed
            return False, ArmMotion.NONE, False

        diff = smoothed - self.prev_y
        threshold = self.config.noise_threshold
        is_moving = False
        motion = ArmMotion.NONE
        peaked = False

        # Image y grows downward: a negative diff means the wrist is rising.
        if diff < -threshold:
            self.direction = "up"
            is_moving = True
            motion = ArmMotion.FORWARD
        elif diff > threshold:
            if self.direction == "up":
                self.peaks += 1
                peaked = True
            self.direction = "down"
            is_moving = True
            motion = ArmMotion.BACKWARD

        if self.peaks >= self.config.peaks_per_rotation:
            self.rotations += 1
            self.peaks = 0

        self.prev_y = smoothed
        return is_moving, motion, peaked


class ArmCirclesClassifier(GestureClassifier[ArmCirclesOutput]):
    name = "arm_circles"

    def __init__(self, config: ArmCirclesConfig | None = None) -> None:
        self.config = config or ArmCirclesConfig()
        super().__init__()

    def _reset_state(self) -> None:
        self.left = ArmWave(self.config)
        self.right = ArmWave(self.config)
        self._activity = RecentEvents(self.config.hold_ms)

    def _initial_output(self) -> ArmCirclesOutput:
        return ArmCirclesOutput()

    def _process(self, frame: LandmarkFrame, now_ms: float) -> ArmCirclesOutput:
        l_sh, r_sh = frame["left_shoulder"], frame["right_shoulder"]
        l_wr, r_wr = frame["left_wrist"], frame["right_wrist"]

        left_moving, left_motion, left_peak = self.left.update(l_sh.y, l_wr.y)
        right_moving, right_motion, right_peak = self.right.update(r_sh.y, r_wr.y)
        if left_peak or right_peak:
            logger.debug(
                "Arm rotation left=%d right=%d", self.left.rotations, self.right.rotations
            )

        moving = left_moving or right_moving
        is_rotating = moving or self._activity.within(now_ms, self.config.hold_ms)
        if moving or left_peak or right_peak:
            self._activity.add(now_ms)
        self._activity.prune(now_ms)

        return ArmCirclesOutput(
            left_arm_angle=heading_360(l_sh, l_wr),
            right_arm_angle=heading_360(r_sh, r_wr),
            left_rotations=self.left.rotations,
            right_rotations=self.right.rotations,
            left_direction=left_motion,
            right_direction=right_motion,
            is_rotating=is_rotating,
            total_rotations=max(self.left.rotations, self.right.rotations),
            confidence=frame.visibility(*ARM_KEYPOINTS),
        )
