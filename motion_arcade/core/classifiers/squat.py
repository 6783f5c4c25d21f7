"""Squat counting from shoulder height.

The classifier calibrates a standing baseline (`stand_y`) from the first
frames of a session, then compares the smoothed shoulder midpoint height
against it. Thresholds scale with the current shoulder width so they stay
meaningful whatever the distance to the camera:

    diff = smoothed_y - stand_y
    diff > width * squat_ratio                 -> SQUATTING
    diff < width * squat_ratio * stand_ratio   -> STANDING (count += 1)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from motion_arcade.core.analytics.geometry import clamp, midpoint
from motion_arcade.core.analytics.smoothing import RollingMean
from motion_arcade.core.classifiers.base import GestureClassifier
from motion_arcade.core.types import LandmarkFrame, SquatState

logger = logging.getLogger(__name__)

SHOULDERS = ("left_shoulder", "right_shoulder")


@dataclass(frozen=True)
class SquatConfig:
    calibration_frames: int = 30
    smoothing_window: int = 5
    # Squat depth trigger, as a fraction of shoulder width.
    squat_ratio: float = 0.4
    # Return-to-standing threshold, as a fraction of the squat trigger.
    stand_ratio: float = 0.2
    min_confidence: float = 0.5
    # Below this the subject is too far away (or side-on) to scale thresholds.
    min_shoulder_width: float = 0.05


@dataclass(frozen=True)
class SquatOutput:
    count: int = 0
    state: SquatState = SquatState.STANDING
    is_squatting: bool = False
    # Display-only angle: 180 when standing, 90 at full trigger depth.
    knee_angle: int = 180
    depth: float = 0.0
    calibrated: bool = False
    calibration_progress: float = 0.0
    stand_y: float | None = None
    confidence: float = 0.0


class SquatClassifier(GestureClassifier[SquatOutput]):
    """STANDING/SQUATTING hysteresis state machine with per-session calibration."""

    name = "squat"

    def __init__(self, config: SquatConfig | None = None) -> None:
        self.config = config or SquatConfig()
        super().__init__()

    def _reset_state(self) -> None:
        self.state = SquatState.STANDING
        self.count = 0
        self.stand_y: float | None = None
        self._calibration: list[float] = []
        self._smoothed = RollingMean(self.config.smoothing_window)

    def _initial_output(self) -> SquatOutput:
        return SquatOutput()

    @property
    def calibrated(self) -> bool:
        return self.stand_y is not None

    def _process(self, frame: LandmarkFrame, now_ms: float) -> SquatOutput:
        cfg = self.config
        confidence = frame.visibility(*SHOULDERS)
        if confidence <= cfg.min_confidence:
            return replace(self._output, confidence=confidence)

        left, right = frame["left_shoulder"], frame["right_shoulder"]
        shoulder_width = abs(right.x - left.x)
        current_y = midpoint(left, right)[1]
        smoothed_y = self._smoothed.push(current_y)

        if self.stand_y is None:
            self._calibration.append(current_y)
            if len(self._calibration) >= cfg.calibration_frames:
                self.stand_y = sum(self._calibration) / len(self._calibration)
                logger.debug("Calibrated stand_y=%.4f", self.stand_y)
            return SquatOutput(
                count=self.count,
                calibrated=self.calibrated,
                calibration_progress=min(1.0, len(self._calibration) / cfg.calibration_frames),
                stand_y=self.stand_y,
                confidence=confidence,
            )

        if shoulder_width <= cfg.min_shoulder_width:
            return replace(self._output, confidence=confidence)

        diff = smoothed_y - self.stand_y
        threshold = shoulder_width * cfg.squat_ratio
        if diff > threshold:
            if self.state is SquatState.STANDING:
                self.state = SquatState.SQUATTING
                logger.debug("Squat down diff=%.3f threshold=%.3f", diff, threshold)
        elif diff < threshold * cfg.stand_ratio:
            if self.state is SquatState.SQUATTING:
                self.state = SquatState.STANDING
                self.count += 1
                logger.debug("Squat up count=%d", self.count)

        depth = clamp(diff / threshold, 0.0, 1.0)
        return SquatOutput(
            count=self.count,
            state=self.state,
            is_squatting=self.state is SquatState.SQUATTING,
            knee_angle=round(180 - depth * 90),
            depth=depth,
            calibrated=True,
            calibration_progress=1.0,
            stand_y=self.stand_y,
            confidence=confidence,
        )
