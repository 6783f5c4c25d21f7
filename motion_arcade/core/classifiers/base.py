"""Session lifecycle shared by every gesture classifier.

A classifier instance is one game session: constructing it starts the session,
`reset()` returns it to the freshly constructed state, and `stop()`/`resume()`
freeze and unfreeze it. Subclasses only implement `_reset_state()`,
`_initial_output()` and `_process()`.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Generic, Protocol, TypeVar

from motion_arcade.core.types import LandmarkFrame

logger = logging.getLogger(__name__)


class GestureOutput(Protocol):
    """Every public output record carries an aggregate confidence."""

    confidence: float


OutputT = TypeVar("OutputT", bound=GestureOutput)


class GestureClassifier(ABC, Generic[OutputT]):
    """Per-frame gesture state machine with explicit session control."""

    name: str = "gesture"

    def __init__(self) -> None:
        self._running = False
        self._output: OutputT = self._initial_output()
        self.frames = 0
        self.start()

    @property
    def running(self) -> bool:
        return self._running

    @property
    def output(self) -> OutputT:
        """Latest public snapshot."""

        return self._output

    def start(self) -> None:
        """Begin a fresh session: reset all state and accept frames."""

        self.reset()
        self._running = True

    def resume(self) -> None:
        """Accept frames again without touching counters or calibration."""

        self._running = True

    def stop(self) -> None:
        """Stop accepting frames; state and output stay frozen until resumed."""

        self._running = False

    pause = stop

    def reset(self) -> None:
        """Zero all counters and reinitialize calibration/state."""

        self._reset_state()
        self._output = self._initial_output()
        self.frames = 0
        logger.debug("%s classifier reset", self.name)

    def update(self, frame: LandmarkFrame | None, now_ms: float | None = None) -> OutputT:
        """Consume one frame (or `None` when no person was detected).

        Args:
            frame: Landmark snapshot for this tick, or `None`.
            now_ms: Tick timestamp in milliseconds. Defaults to the frame's own
                timestamp; only time-window features read it.

        Returns:
            The new public output record.
        """

        if not self._running:
            return self._output
        if frame is None:
            self._output = replace(self._output, confidence=0.0)
            return self._output
        self.frames += 1
        now = float(frame.timestamp_ms if now_ms is None else now_ms)
        self._output = self._process(frame, now)
        return self._output

    @abstractmethod
    def _reset_state(self) -> None:
        """Reinitialize private state to session-start values."""

    @abstractmethod
    def _initial_output(self) -> OutputT:
        """Return the output record shown before any frame is processed."""

    @abstractmethod
    def _process(self, frame: LandmarkFrame, now_ms: float) -> OutputT:
        """Advance the state machine with one frame and return the new output."""
