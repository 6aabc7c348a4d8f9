"""Frame timing primitives."""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass
from time import monotonic


@dataclass(frozen=True, slots=True)
class FrameTime:
    """Per-frame timing read once at the top of the tick."""

    frame_index: int
    now_seconds: float
    delta_seconds: float
    unscaled_delta_seconds: float

    @property
    def instantaneous_fps(self) -> float:
        if self.unscaled_delta_seconds <= 0.0:
            return math.inf
        return 1.0 / self.unscaled_delta_seconds


class FrameClock:
    """Monotonic frame clock.

    `delta_seconds` is capped so one stall does not teleport animations;
    `unscaled_delta_seconds` keeps the real gap for frame-rate sampling.
    """

    def __init__(
        self,
        *,
        time_source: Callable[[], float] | None = None,
        max_delta_seconds: float = 0.25,
    ) -> None:
        if max_delta_seconds <= 0.0:
            raise ValueError("max_delta_seconds must be > 0")
        self._time_source = time_source or monotonic
        self._max_delta_seconds = max_delta_seconds
        self._last_seconds: float | None = None
        self._frame_index = 0

    @property
    def time_source(self) -> Callable[[], float]:
        return self._time_source

    def next(self) -> FrameTime:
        """Advance the clock and return the next frame's timing."""
        now = self._time_source()
        if self._last_seconds is None:
            raw_delta = 0.0
        else:
            raw_delta = max(0.0, now - self._last_seconds)
        self._last_seconds = now
        frame = FrameTime(
            frame_index=self._frame_index,
            now_seconds=now,
            delta_seconds=min(raw_delta, self._max_delta_seconds),
            unscaled_delta_seconds=raw_delta,
        )
        self._frame_index += 1
        return frame
