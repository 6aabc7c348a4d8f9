"""Display-progress curve and rate-limited convergence."""

from __future__ import annotations

PRE_CLEANUP_PROGRESS = 0.10
LOAD_BAND_END = 0.90
LOADER_READY_PROGRESS = 0.9
FINISHING_PROGRESS = 0.95
COMPLETE_PROGRESS = 1.0


def clamp01(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


def move_towards(current: float, target: float, max_delta: float) -> float:
    """Step `current` toward `target` by at most `max_delta`, never overshooting."""
    if abs(target - current) <= max_delta:
        return target
    return current + max_delta if target > current else current - max_delta


def map_true_progress(true_progress: float) -> float:
    """Rescale loader progress [0, 0.9] into the [0.10, 0.90] display band."""
    loader = max(0.0, min(LOADER_READY_PROGRESS, float(true_progress)))
    band = LOAD_BAND_END - PRE_CLEANUP_PROGRESS
    return PRE_CLEANUP_PROGRESS + (loader / LOADER_READY_PROGRESS) * band


def format_progress_label(value: float) -> str:
    return f"{round(clamp01(value) * 100.0)}%"


class ProgressSmoother:
    """Moves the displayed value toward a target at a bounded rate.

    Targets only ratchet upward, so the displayed value never decreases
    between `reset` calls.
    """

    def __init__(self, *, speed_per_second: float) -> None:
        if speed_per_second <= 0.0:
            raise ValueError("speed_per_second must be > 0")
        self._speed = float(speed_per_second)
        self._display = 0.0
        self._target = 0.0

    @property
    def display(self) -> float:
        return self._display

    @property
    def target(self) -> float:
        return self._target

    def set_target(self, value: float) -> None:
        self._target = max(self._target, clamp01(value))

    def advance(self, delta_seconds: float) -> float:
        step = self._speed * max(0.0, delta_seconds)
        self._display = move_towards(self._display, self._target, step)
        return self._display

    def has_reached(self, threshold: float) -> bool:
        return self._display >= threshold

    def complete(self) -> None:
        """Jump to full; only ever moves the display upward."""
        self._target = COMPLETE_PROGRESS
        self._display = COMPLETE_PROGRESS

    def reset(self) -> None:
        self._display = 0.0
        self._target = 0.0
