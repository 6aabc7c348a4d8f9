"""Fixed-capacity frame-rate sample window."""

from __future__ import annotations

import math

import numpy as np


class FrameRateWindow:
    """Drop-oldest circular buffer of instantaneous frame rates with O(1) insert."""

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be > 0")
        self._samples = np.zeros(int(capacity), dtype=np.float64)
        self._write_index = 0
        self._count = 0

    @property
    def capacity(self) -> int:
        return int(self._samples.shape[0])

    @property
    def count(self) -> int:
        return self._count

    @property
    def is_full(self) -> bool:
        return self._count == self.capacity

    def append(self, fps: float) -> bool:
        """Insert one sample; non-finite or negative values are dropped."""
        value = float(fps)
        if not math.isfinite(value) or value < 0.0:
            return False
        self._samples[self._write_index] = value
        self._write_index = (self._write_index + 1) % self.capacity
        if self._count < self.capacity:
            self._count += 1
        return True

    def mean(self) -> float | None:
        """Arithmetic mean of recorded samples, or None before the first one."""
        if self._count == 0:
            return None
        # Slots fill from index 0, so the first `count` entries are the recorded ones.
        return float(self._samples[: self._count].mean())

    def clear(self) -> None:
        self._samples.fill(0.0)
        self._write_index = 0
        self._count = 0
