"""Per-frame host driving the envelope managers."""

from __future__ import annotations

import logging

from envelope.api.lifecycle import ManagerRegistry
from envelope.loading.transition import SceneTransitionPipeline
from envelope.memory.cleanup import CleanupCoordinator
from envelope.power.manager import PowerStateManager
from envelope.quality.controller import AdaptiveQualityController
from envelope.runtime.config import EnvelopeConfig, get_envelope_config
from envelope.runtime.events import RuntimeEventBus
from envelope.runtime.registry import RuntimeManagerRegistry, SingletonManager
from envelope.runtime.scheduler import Scheduler
from envelope.runtime.time import FrameClock, FrameTime

_LOG = logging.getLogger("envelope.runtime")

# Teardown order: in-flight work first, the display hold last.
_SHUTDOWN_ORDER: tuple[type[SingletonManager], ...] = (
    SceneTransitionPipeline,
    CleanupCoordinator,
    AdaptiveQualityController,
    PowerStateManager,
)


class EnvelopeHost:
    """Single-threaded tick shell shared by every manager.

    Managers are looked up through the registry on each frame, so a manager
    activated or torn down between frames is picked up on the next one.
    """

    def __init__(
        self,
        *,
        config: EnvelopeConfig | None = None,
        registry: ManagerRegistry | None = None,
        clock: FrameClock | None = None,
        scheduler: Scheduler | None = None,
        events: RuntimeEventBus | None = None,
    ) -> None:
        self._config = config or get_envelope_config()
        self._registry = registry or RuntimeManagerRegistry()
        self._clock = clock or FrameClock()
        self._scheduler = scheduler or Scheduler()
        self._events = events or RuntimeEventBus()
        self._frame_index = 0
        self._now_seconds = 0.0
        self._closed = False

    @property
    def config(self) -> EnvelopeConfig:
        return self._config

    @property
    def registry(self) -> ManagerRegistry:
        return self._registry

    @property
    def scheduler(self) -> Scheduler:
        return self._scheduler

    @property
    def events(self) -> RuntimeEventBus:
        return self._events

    @property
    def now_seconds(self) -> float:
        return self._now_seconds

    @property
    def frame_index(self) -> int:
        return self._frame_index

    @property
    def is_closed(self) -> bool:
        return self._closed

    def current_time(self) -> float:
        """Frame time source for managers that must agree with the host."""
        return self._now_seconds

    @property
    def quality(self) -> AdaptiveQualityController | None:
        return self._lookup(AdaptiveQualityController)

    @property
    def cleanup(self) -> CleanupCoordinator | None:
        return self._lookup(CleanupCoordinator)

    @property
    def transitions(self) -> SceneTransitionPipeline | None:
        return self._lookup(SceneTransitionPipeline)

    @property
    def power(self) -> PowerStateManager | None:
        return self._lookup(PowerStateManager)

    def tick(self) -> FrameTime:
        """Run one frame timed by the wall clock."""
        frame = self._clock.next()
        self._run_frame(frame)
        return frame

    def advance(self, delta_seconds: float) -> FrameTime:
        """Run one frame with an explicit delta; used by fixed-step and headless callers."""
        if delta_seconds < 0.0:
            raise ValueError("delta_seconds must be >= 0")
        frame = FrameTime(
            frame_index=self._frame_index,
            now_seconds=self._now_seconds + delta_seconds,
            delta_seconds=delta_seconds,
            unscaled_delta_seconds=delta_seconds,
        )
        self._run_frame(frame)
        return frame

    def _run_frame(self, frame: FrameTime) -> None:
        if self._closed:
            return
        self._now_seconds = frame.now_seconds
        self._frame_index = frame.frame_index + 1
        quality = self.quality
        if quality is not None:
            quality.tick(frame)
        self._scheduler.advance(frame.delta_seconds)
        transitions = self.transitions
        if transitions is not None:
            transitions.tick(frame.delta_seconds, now_seconds=frame.now_seconds)

    def on_application_pause(self, paused: bool) -> None:
        power = self.power
        if power is not None:
            power.on_application_pause(paused)

    def on_application_quit(self) -> None:
        power = self.power
        if power is not None:
            power.on_application_quit()

    def shutdown(self) -> None:
        """Tear down every registered manager and drop pending work."""
        if self._closed:
            return
        self._closed = True
        for manager_type in _SHUTDOWN_ORDER:
            manager = self._lookup(manager_type)
            if manager is not None:
                manager.teardown()
        self._scheduler.clear()
        _LOG.info("envelope_host_shutdown frames=%d", self._frame_index)

    def _lookup[TManager: SingletonManager](self, manager_type: type[TManager]) -> TManager | None:
        instance = self._registry.get(manager_type.token())
        return instance if isinstance(instance, manager_type) else None
