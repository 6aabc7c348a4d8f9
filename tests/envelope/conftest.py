from __future__ import annotations

from dataclasses import dataclass, field

from envelope.api.loading import SceneRef
from envelope.api.quality import QualityPreset


class ManualClock:
    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now


@dataclass(slots=True)
class FakeQualityBackend:
    presets: list[QualityPreset] = field(default_factory=list)
    far_clips: list[float] = field(default_factory=list)
    frame_rates: list[int] = field(default_factory=list)
    fail: bool = False

    def apply_preset(self, preset: QualityPreset) -> None:
        if self.fail:
            raise RuntimeError("backend rejected preset")
        self.presets.append(preset)

    def set_far_clip_distance(self, distance: float) -> None:
        self.far_clips.append(distance)

    def set_target_frame_rate(self, fps: int) -> None:
        if self.fail:
            raise RuntimeError("backend rejected frame rate")
        self.frame_rates.append(fps)


@dataclass(slots=True)
class FakeCache:
    clears: int = 0
    fail: bool = False

    def clear_cache(self) -> None:
        if self.fail:
            raise RuntimeError("cache is corrupted")
        self.clears += 1


@dataclass(slots=True)
class FakeResourceBackend:
    releases: int = 0
    fail: bool = False

    def release_unused_assets(self) -> None:
        if self.fail:
            raise OSError("asset store offline")
        self.releases += 1


@dataclass(slots=True)
class FakeDisplayHold:
    calls: list[bool] = field(default_factory=list)

    @property
    def active(self) -> bool:
        return bool(self.calls) and self.calls[-1]

    def set_keep_display_active(self, active: bool) -> None:
        self.calls.append(active)


@dataclass(slots=True)
class FakeProgressView:
    fills: list[float] = field(default_factory=list)
    labels: list[str] = field(default_factory=list)
    visibility: list[bool] = field(default_factory=list)

    @property
    def visible(self) -> bool:
        return bool(self.visibility) and self.visibility[-1]

    def set_fill_amount(self, value: float) -> None:
        self.fills.append(value)

    def set_label(self, text: str) -> None:
        self.labels.append(text)

    def set_visible(self, visible: bool) -> None:
        self.visibility.append(visible)


class FakeLoadHandle:
    """Loader handle whose progress is driven by the test."""

    def __init__(self, clock: ManualClock | None = None, *, seconds_to_ready: float = 0.0) -> None:
        self._clock = clock
        self._seconds_to_ready = seconds_to_ready
        self._started_at = clock() if clock is not None else 0.0
        self.progress = 0.0 if seconds_to_ready > 0.0 else 0.9
        self.error: BaseException | None = None
        self.activation_calls: list[bool] = []
        self.activation_progress: list[float] = []
        self.display_probe = None

    def true_progress(self) -> float:
        if self._clock is not None and self._seconds_to_ready > 0.0:
            elapsed = self._clock() - self._started_at
            self.progress = min(0.9, 0.9 * elapsed / self._seconds_to_ready)
        return self.progress

    def allow_activation(self, allowed: bool) -> None:
        self.activation_calls.append(allowed)
        if allowed and self.display_probe is not None:
            self.activation_progress.append(self.display_probe())

    @property
    def activated(self) -> bool:
        return bool(self.activation_calls) and self.activation_calls[-1]


class FakeSceneLoader:
    def __init__(self, clock: ManualClock | None = None, *, seconds_to_ready: float = 0.0) -> None:
        self._clock = clock
        self._seconds_to_ready = seconds_to_ready
        self.requests: list[SceneRef] = []
        self.handles: list[FakeLoadHandle] = []
        self.fail_on_begin: BaseException | None = None

    def begin_load(self, target: SceneRef) -> FakeLoadHandle:
        self.requests.append(target)
        if self.fail_on_begin is not None:
            raise self.fail_on_begin
        handle = FakeLoadHandle(self._clock, seconds_to_ready=self._seconds_to_ready)
        self.handles.append(handle)
        return handle
