"""Live game sessions.

A session pairs one classifier instance with the adapter that turns client
payloads into landmark frames. Sessions are kept in memory only; the registry
evicts the oldest one when `max_sessions` is reached.
"""

from __future__ import annotations

import logging
import threading
import time
import uuid
from collections import OrderedDict
from collections.abc import Mapping
from typing import Any

from motion_arcade.core.adapters.landmarks import LandmarkFrameAdapter
from motion_arcade.core.classifiers.base import GestureClassifier
from motion_arcade.core.config.games import create_classifier
from motion_arcade.core.config.settings import ArcadeSettings
from motion_arcade.core.records import to_jsonable

logger = logging.getLogger(__name__)


class GameSession:
    """One player's run of one game."""

    def __init__(
        self,
        session_id: str,
        game: str,
        classifier: GestureClassifier[Any],
        adapter: LandmarkFrameAdapter,
    ) -> None:
        self.id = session_id
        self.game = game
        self.classifier = classifier
        self.adapter = adapter
        self.created_at = time.time()
        self._lock = threading.Lock()

    def feed(self, payload: Mapping[str, Any] | None) -> dict[str, Any]:
        """Run one client frame through the classifier and return the output record."""

        frame = self.adapter.adapt(payload)
        now_ms = None
        if payload is not None and payload.get("timestamp_ms") is not None:
            now_ms = float(payload["timestamp_ms"])
        if now_ms is None:
            now_ms = time.monotonic() * 1000.0
        with self._lock:
            output = self.classifier.update(frame, now_ms=now_ms)
        return to_jsonable(output)

    def control(self, action: str) -> None:
        """Apply a session-control action: start, stop, resume or reset."""

        if action not in {"start", "stop", "resume", "reset"}:
            raise ValueError(f"unknown session action: {action}")
        with self._lock:
            getattr(self.classifier, action)()
        logger.info("Session %s (%s): %s", self.id, self.game, action)

    def snapshot(self) -> dict[str, Any]:
        with self._lock:
            return {
                "id": self.id,
                "game": self.game,
                "running": self.classifier.running,
                "frames": self.classifier.frames,
                "output": to_jsonable(self.classifier.output),
            }


class SessionRegistry:
    """Thread-safe, bounded map of session id to `GameSession`."""

    def __init__(self, max_sessions: int = 16) -> None:
        self.max_sessions = max_sessions
        self._sessions: OrderedDict[str, GameSession] = OrderedDict()
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def create(self, game: str, settings: ArcadeSettings) -> GameSession:
        """Start a new session for `game`. Raises KeyError for unknown games."""

        classifier = create_classifier(game, settings)
        session = GameSession(
            uuid.uuid4().hex,
            game,
            classifier,
            LandmarkFrameAdapter(mirror=settings.mirror_input),
        )
        with self._lock:
            while len(self._sessions) >= max(1, self.max_sessions):
                old_id, _ = self._sessions.popitem(last=False)
                logger.info("Evicted session %s", old_id)
            self._sessions[session.id] = session
        logger.info("Session %s started for game %s", session.id, game)
        return session

    def get(self, session_id: str) -> GameSession:
        with self._lock:
            return self._sessions[session_id]

    def remove(self, session_id: str) -> None:
        with self._lock:
            session = self._sessions.pop(session_id)
        session.classifier.stop()
        logger.info("Session %s closed", session_id)

    def clear(self) -> None:
        with self._lock:
            sessions = list(self._sessions.values())
            self._sessions.clear()
        for session in sessions:
            session.classifier.stop()
