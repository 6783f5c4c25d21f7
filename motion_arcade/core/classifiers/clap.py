"""Overhead clap counting.

A clap registers when both wrists are above the nose and close together.
Hands must separate past a wider distance (or drop below the nose) before the
next clap can count, and claps closer than `debounce_ms` are ignored.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from motion_arcade.core.analytics.geometry import distance_2d, midpoint
from motion_arcade.core.classifiers.base import GestureClassifier
from motion_arcade.core.types import LandmarkFrame

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClapConfig:
    clap_distance: float = 0.15
    unclap_distance: float = 0.30
    debounce_ms: float = 300.0


@dataclass(frozen=True)
class ClapOutput:
    count: int = 0
    is_clapping: bool = False
    hand_distance: float = 1.0
    nose_y: float = 0.0
    hands_y: float = 0.0
    hands_above_head: bool = False
    confidence: float = 0.0


class ClapClassifier(GestureClassifier[ClapOutput]):
    name = "clap"

    def __init__(self, config: ClapConfig | None = None) -> None:
        self.config = config or ClapConfig()
        super().__init__()

    def _reset_state(self) -> None:
        self.count = 0
        self.is_clapping = False
        self._last_clap_ms: float | None = None

    def _initial_output(self) -> ClapOutput:
        return ClapOutput()

    def _process(self, frame: LandmarkFrame, now_ms: float) -> ClapOutput:
        cfg = self.config
        nose = frame["nose"]
        left, right = frame["left_wrist"], frame["right_wrist"]
        hands_y = midpoint(left, right)[1]
        distance = distance_2d(left, right)
        # Image y grows downward.
        above_head = hands_y < nose.y

        if not above_head:
            self.is_clapping = False
        elif distance < cfg.clap_distance:
            if not self.is_clapping and (
                self._last_clap_ms is None or now_ms - self._last_clap_ms > cfg.debounce_ms
            ):
                self.is_clapping = True
                self.count += 1
                self._last_clap_ms = now_ms
                logger.debug("Clap count=%d distance=%.3f", self.count, distance)
        elif distance > cfg.unclap_distance:
            self.is_clapping = False

        return ClapOutput(
            count=self.count,
            is_clapping=self.is_clapping,
            hand_distance=distance,
            nose_y=nose.y,
            hands_y=hands_y,
            hands_above_head=above_head,
            confidence=frame.visibility("left_wrist", "right_wrist"),
        )
