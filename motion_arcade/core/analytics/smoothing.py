"""Small signal-smoothing primitives shared by the classifiers.

All of them are plain stateful objects updated once per frame; none of them
read a clock on their own; timestamps are passed in by the caller.
"""

from __future__ import annotations

from collections import deque

import numpy as np


class RollingMean:
    """Fixed-size FIFO window that reports the arithmetic mean of its samples."""

    def __init__(self, size: int) -> None:
        if size <= 0:
            raise ValueError("size must be >= 1")
        self.size = int(size)
        self._values: deque[float] = deque(maxlen=self.size)

    def __len__(self) -> int:
        return len(self._values)

    def push(self, value: float) -> float:
        """Append a sample (evicting the oldest when full) and return the new mean."""

        self._values.append(float(value))
        return self.mean()

    def mean(self) -> float:
        if not self._values:
            return 0.0
        return float(np.mean(self._values))

    def values(self) -> list[float]:
        return list(self._values)

    def clear(self) -> None:
        self._values.clear()


class ExponentialAverage:
    """Exponential moving average: `value = keep * value + (1 - keep) * sample`.

    The first sample initializes the average directly.
    """

    def __init__(self, keep: float, initial: float | None = None) -> None:
        if not 0.0 <= keep < 1.0:
            raise ValueError("keep must be in [0, 1)")
        self.keep = float(keep)
        self._initial = initial
        self.value: float | None = initial

    def update(self, sample: float) -> float:
        if self.value is None:
            self.value = float(sample)
        else:
            self.value = self.value * self.keep + float(sample) * (1.0 - self.keep)
        return self.value

    def reset(self) -> None:
        self.value = self._initial


class RecentEvents:
    """Event timestamps (ms) kept only while they fall inside a trailing window."""

    def __init__(self, window_ms: float) -> None:
        self.window_ms = float(window_ms)
        self._times: deque[float] = deque()
        self.last: float | None = None

    def add(self, now_ms: float) -> None:
        self._times.append(float(now_ms))
        self.last = float(now_ms)

    def prune(self, now_ms: float) -> int:
        """Drop events older than the window and return how many remain."""

        while self._times and now_ms - self._times[0] >= self.window_ms:
            self._times.popleft()
        return len(self._times)

    def within(self, now_ms: float, window_ms: float) -> bool:
        """Return True if the latest event happened less than `window_ms` ago."""

        return self.last is not None and now_ms - self.last < window_ms

    def __len__(self) -> int:
        return len(self._times)

    def clear(self) -> None:
        self._times.clear()
        self.last = None
