"""Lane selection from the head position (train dodge)."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from motion_arcade.core.classifiers.base import GestureClassifier
from motion_arcade.core.types import Lane, LandmarkFrame

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LaneConfig:
    left_boundary: float = 0.33
    right_boundary: float = 0.67


@dataclass(frozen=True)
class LaneOutput:
    lane: Lane = Lane.CENTER
    nose_x: float = 0.5
    lane_changes: int = 0
    confidence: float = 0.0


class LaneClassifier(GestureClassifier[LaneOutput]):
    """Three-lane position from nose x in selfie view."""

    name = "lane"

    def __init__(self, config: LaneConfig | None = None) -> None:
        self.config = config or LaneConfig()
        super().__init__()

    def _reset_state(self) -> None:
        self.lane = Lane.CENTER
        self.lane_changes = 0

    def _initial_output(self) -> LaneOutput:
        return LaneOutput()

    def lane_for(self, x: float) -> Lane:
        if x < self.config.left_boundary:
            return Lane.LEFT
        if x > self.config.right_boundary:
            return Lane.RIGHT
        return Lane.CENTER

    def _process(self, frame: LandmarkFrame, now_ms: float) -> LaneOutput:
        nose = frame["nose"]
        lane = self.lane_for(nose.x)
        if lane is not self.lane:
            self.lane_changes += 1
            logger.debug("Lane %s -> %s", self.lane.value, lane.value)
            self.lane = lane
        return LaneOutput(
            lane=lane,
            nose_x=nose.x,
            lane_changes=self.lane_changes,
            confidence=frame.visibility("nose"),
        )
