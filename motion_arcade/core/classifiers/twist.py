"""Torso twist (dodge) classification.

The twist angle comes from the depth difference across the shoulders and
across the hips. Two look-alike motions are rejected by attenuating the angle
instead of zeroing it:

- leaning sideways (the nose drifts from its running average),
- stepping toward or away from the camera (hip depth drifts),

and shoulders and hips must rotate the same way for a twist to count fully.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from motion_arcade.core.analytics.geometry import clamp, depth_angle
from motion_arcade.core.analytics.smoothing import ExponentialAverage
from motion_arcade.core.classifiers.base import GestureClassifier
from motion_arcade.core.types import DodgeQuality, LandmarkFrame, TwistDirection

logger = logging.getLogger(__name__)

TORSO_KEYPOINTS = ("left_shoulder", "right_shoulder", "left_hip", "right_hip", "nose")

# Shared by the direction cutoff and the normal-dodge cutoff; keep them equal.
MIN_TWIST_DEG = 20.0
PERFECT_TWIST_DEG = 50.0


@dataclass(frozen=True)
class TwistConfig:
    # Direction cutoff AND normal-dodge cutoff (see MIN_TWIST_DEG).
    min_twist: float = MIN_TWIST_DEG
    perfect_twist: float = PERFECT_TWIST_DEG
    max_lean_x: float = 0.08
    max_shift_z: float = 0.1
    invalid_attenuation: float = 0.3
    # Share of the previous angle kept by the output smoothing.
    angle_keep: float = 0.6
    # Share of the previous reference kept by the lean/shift baselines.
    baseline_keep: float = 0.9
    max_angle: float = 90.0
    # Frame-to-frame change (degrees) that counts as actively twisting.
    active_delta: float = 2.0


@dataclass(frozen=True)
class TwistOutput:
    twist_angle: float = 0.0
    direction: TwistDirection = TwistDirection.CENTER
    intensity: float = 0.0
    dodge: DodgeQuality = DodgeQuality.NONE
    is_perfect_dodge: bool = False
    is_twisting: bool = False
    is_valid_twist: bool = False
    twist_count: int = 0
    shoulder_twist: float = 0.0
    hip_twist: float = 0.0
    raw_twist: float = 0.0
    confidence: float = 0.0


class TwistClassifier(GestureClassifier[TwistOutput]):
    name = "twist"

    def __init__(self, config: TwistConfig | None = None) -> None:
        self.config = config or TwistConfig()
        super().__init__()

    def _reset_state(self) -> None:
        cfg = self.config
        self.twist_count = 0
        self.last_direction = TwistDirection.CENTER
        self._angle = 0.0
        self._prev_angle = 0.0
        self._head_x = ExponentialAverage(cfg.baseline_keep)
        self._hip_z = ExponentialAverage(cfg.baseline_keep)

    def _initial_output(self) -> TwistOutput:
        return TwistOutput()

    def direction_for(self, angle: float) -> TwistDirection:
        """Center below `min_twist` in magnitude; exactly `min_twist` already counts as a side."""

        if abs(angle) < self.config.min_twist:
            return TwistDirection.CENTER
        return TwistDirection.LEFT if angle > 0 else TwistDirection.RIGHT

    def dodge_for(self, angle: float) -> DodgeQuality:
        magnitude = abs(angle)
        if magnitude >= self.config.perfect_twist:
            return DodgeQuality.PERFECT
        if magnitude >= self.config.min_twist:
            return DodgeQuality.NORMAL
        return DodgeQuality.NONE

    def intensity_for(self, angle: float) -> float:
        cfg = self.config
        magnitude = abs(angle)
        if magnitude < cfg.min_twist:
            return 0.0
        return min(1.0, (magnitude - cfg.min_twist) / (cfg.perfect_twist - cfg.min_twist))

    def _process(self, frame: LandmarkFrame, now_ms: float) -> TwistOutput:
        cfg = self.config
        nose = frame["nose"]
        l_sh, r_sh = frame["left_shoulder"], frame["right_shoulder"]
        l_hip, r_hip = frame["left_hip"], frame["right_hip"]

        shoulder_twist = depth_angle(l_sh, r_sh)
        hip_twist = depth_angle(l_hip, r_hip)
        raw = (shoulder_twist + hip_twist) / 2.0

        hip_center_z = (l_hip.z + r_hip.z) / 2.0
        if self._head_x.value is None:
            self._head_x.update(nose.x)
            self._hip_z.update(hip_center_z)

        is_lean = abs(nose.x - self._head_x.value) > cfg.max_lean_x
        is_shift = abs(hip_center_z - self._hip_z.value) > cfg.max_shift_z
        same_direction = (r_sh.z - l_sh.z) * (r_hip.z - l_hip.z) > 0
        is_valid = not is_lean and not is_shift and same_direction

        self._head_x.update(nose.x)
        self._hip_z.update(hip_center_z)

        effective = raw if is_valid else raw * cfg.invalid_attenuation
        self._angle = self._angle * cfg.angle_keep + effective * (1.0 - cfg.angle_keep)
        angle = clamp(self._angle, -cfg.max_angle, cfg.max_angle)

        direction = self.direction_for(angle)
        if (
            direction is not TwistDirection.CENTER
            and self.last_direction is not TwistDirection.CENTER
            and direction is not self.last_direction
        ):
            self.twist_count += 1
            logger.debug("Twist %s count=%d angle=%.1f", direction.value, self.twist_count, angle)
        if direction is not TwistDirection.CENTER:
            self.last_direction = direction

        is_twisting = abs(angle - self._prev_angle) > cfg.active_delta
        self._prev_angle = angle

        dodge = self.dodge_for(angle)
        return TwistOutput(
            twist_angle=angle,
            direction=direction,
            intensity=self.intensity_for(angle),
            dodge=dodge,
            is_perfect_dodge=dodge is DodgeQuality.PERFECT,
            is_twisting=is_twisting,
            is_valid_twist=is_valid,
            twist_count=self.twist_count,
            shoulder_twist=shoulder_twist,
            hip_twist=hip_twist,
            raw_twist=raw,
            confidence=frame.visibility(*TORSO_KEYPOINTS),
        )
