"""High-knee step counting with cadence.

Each leg runs a down/up state machine on `hip_y - knee_y` (positive when the
knee is above the hip). A leg goes up once the knee rises to within
`trigger_offset` of hip level, and must fall back below `reset_offset` before
it can count again.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from motion_arcade.core.analytics.geometry import clamp
from motion_arcade.core.analytics.smoothing import RecentEvents
from motion_arcade.core.classifiers.base import GestureClassifier
from motion_arcade.core.types import LandmarkFrame, LegState

logger = logging.getLogger(__name__)

LEG_KEYPOINTS = ("left_knee", "right_knee", "left_hip", "right_hip")


@dataclass(frozen=True)
class KneeLiftConfig:
    # Fractions of frame height below hip level.
    trigger_offset: float = 0.15
    reset_offset: float = 0.20
    min_confidence: float = 0.4
    cadence_window_ms: float = 2000.0
    active_window_ms: float = 1000.0
    # Steps per second that map to average_speed == 1.0.
    max_steps_per_second: float = 4.0


@dataclass(frozen=True)
class KneeLiftOutput:
    left_knee_height: float = 0.0
    right_knee_height: float = 0.0
    left_state: LegState = LegState.DOWN
    right_state: LegState = LegState.DOWN
    average_speed: float = 0.0
    is_stepping: bool = False
    steps_count: int = 0
    confidence: float = 0.0


class KneeLiftClassifier(GestureClassifier[KneeLiftOutput]):
    name = "knees"

    def __init__(self, config: KneeLiftConfig | None = None) -> None:
        self.config = config or KneeLiftConfig()
        super().__init__()

    def _reset_state(self) -> None:
        self.legs: dict[str, LegState] = {"left": LegState.DOWN, "right": LegState.DOWN}
        self.steps_count = 0
        self._steps = RecentEvents(self.config.cadence_window_ms)

    def _initial_output(self) -> KneeLiftOutput:
        return KneeLiftOutput()

    def _step_leg(self, side: str, diff: float, now_ms: float) -> None:
        cfg = self.config
        if self.legs[side] is LegState.DOWN:
            if diff > -cfg.trigger_offset:
                self.legs[side] = LegState.UP
                self.steps_count += 1
                self._steps.add(now_ms)
                logger.debug("Step %s count=%d", side, self.steps_count)
        elif diff < -cfg.reset_offset:
            self.legs[side] = LegState.DOWN

    def _knee_height(self, diff: float) -> float:
        """Map diff onto 0 (reset line) .. 1 (trigger line)."""

        cfg = self.config
        span = cfg.reset_offset - cfg.trigger_offset
        if span <= 0:
            return 0.0
        return clamp((diff + cfg.reset_offset) / span, 0.0, 1.0)

    def _process(self, frame: LandmarkFrame, now_ms: float) -> KneeLiftOutput:
        cfg = self.config
        confidence = frame.visibility(*LEG_KEYPOINTS)
        if confidence <= cfg.min_confidence:
            return replace(self._output, confidence=confidence)

        diffs = {
            side: frame[f"{side}_hip"].y - frame[f"{side}_knee"].y for side in ("left", "right")
        }
        for side, diff in diffs.items():
            self._step_leg(side, diff, now_ms)

        recent = self._steps.prune(now_ms)
        steps_per_second = recent / (cfg.cadence_window_ms / 1000.0)
        speed = clamp(steps_per_second / cfg.max_steps_per_second, 0.0, 1.0)

        return KneeLiftOutput(
            left_knee_height=self._knee_height(diffs["left"]),
            right_knee_height=self._knee_height(diffs["right"]),
            left_state=self.legs["left"],
            right_state=self.legs["right"],
            average_speed=speed,
            is_stepping=self._steps.within(now_ms, cfg.active_window_ms),
            steps_count=self.steps_count,
            confidence=confidence,
        )
