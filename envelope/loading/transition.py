"""Scene transition pipeline with smoothed progress and deferred activation."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from time import monotonic

from envelope.api.cleanup import CleanupCoordinator
from envelope.api.events import EventBus
from envelope.api.flow import FlowTransition
from envelope.api.lifecycle import ManagerRegistry
from envelope.api.loading import (
    LoadHandle,
    ProgressView,
    SceneActivated,
    SceneLoader,
    SceneRef,
    SceneTransitionFailed,
    SceneTransitionStarted,
    SceneUnloaded,
    TransitionOutcome,
    TransitionPhase,
    TransitionState,
)
from envelope.loading.progress import (
    COMPLETE_PROGRESS,
    FINISHING_PROGRESS,
    LOADER_READY_PROGRESS,
    PRE_CLEANUP_PROGRESS,
    ProgressSmoother,
    format_progress_label,
    map_true_progress,
)
from envelope.runtime.config import TransitionConfig
from envelope.runtime.errors import SceneLoadError, call_best_effort
from envelope.runtime.flow import RuntimeFlowMachine
from envelope.runtime.registry import SingletonManager

_LOG = logging.getLogger("envelope.loading")

_BEGIN = "begin"
_LOAD = "load"
_LOADED = "loaded"
_FINISH = "finish"
_ACTIVATE = "activate"
_FAIL = "fail"


@dataclass(slots=True)
class TransitionTicket:
    """Caller-side view of one requested transition."""

    target: SceneRef
    outcome: TransitionOutcome = TransitionOutcome.PENDING
    error: BaseException | None = None
    elapsed_seconds: float | None = None

    @property
    def done(self) -> bool:
        return self.outcome is not TransitionOutcome.PENDING

    def result(self) -> SceneRef:
        """Return the activated target or raise the load failure."""
        if self.outcome is TransitionOutcome.FAILED:
            raise SceneLoadError(self.target, self.error) from self.error
        if self.outcome is TransitionOutcome.PENDING:
            raise RuntimeError(f"transition to {self.target!r} still in flight")
        return self.target


def _build_phase_machine() -> RuntimeFlowMachine[TransitionPhase]:
    machine = RuntimeFlowMachine(TransitionPhase.IDLE, name="scene_transition")
    for trigger, source, target in (
        (_BEGIN, TransitionPhase.IDLE, TransitionPhase.PRE_CLEANUP),
        (_LOAD, TransitionPhase.PRE_CLEANUP, TransitionPhase.LOADING),
        (_LOADED, TransitionPhase.LOADING, TransitionPhase.FINISHING),
        (_FINISH, TransitionPhase.FINISHING, TransitionPhase.ACTIVATING),
        (_ACTIVATE, TransitionPhase.ACTIVATING, TransitionPhase.IDLE),
    ):
        machine.add_transition(FlowTransition(trigger=trigger, source=source, target=target))
    machine.add_transition(FlowTransition(trigger=_FAIL, source=None, target=TransitionPhase.IDLE))
    return machine


class SceneTransitionPipeline(SingletonManager):
    """Single-flight transition advanced once per tick.

    PRE_CLEANUP fires a reclaim and yields one tick. LOADING starts the load
    with activation suppressed and polls loader progress on a fixed interval.
    FINISHING holds until the minimum duration has passed. ACTIVATING waits
    for the displayed progress to catch up before allowing activation.
    There is no upper timeout: a loader that never finishes keeps the
    pipeline in LOADING.
    """

    def __init__(
        self,
        loader: SceneLoader,
        *,
        cleanup: CleanupCoordinator | None = None,
        progress_view: ProgressView | None = None,
        events: EventBus | None = None,
        config: TransitionConfig | None = None,
        time_source: Callable[[], float] | None = None,
    ) -> None:
        super().__init__()
        self._config = config or TransitionConfig()
        self._loader = loader
        self._cleanup = cleanup
        self._progress_view = progress_view
        self._flight_view: ProgressView | None = None
        self._events = events
        self._time_source = time_source or monotonic
        self._machine = _build_phase_machine()
        self._smoother = ProgressSmoother(speed_per_second=self._config.progress_speed)
        self._ticket: TransitionTicket | None = None
        self._handle: LoadHandle | None = None
        self._started_at: float | None = None
        self._next_poll_at = 0.0
        self._true_progress = 0.0
        self._active_scene: SceneRef | None = None

    @property
    def phase(self) -> TransitionPhase:
        return self._machine.state

    @property
    def in_flight(self) -> bool:
        return self._machine.state is not TransitionPhase.IDLE

    @property
    def active_scene(self) -> SceneRef | None:
        return self._active_scene

    @property
    def display_progress(self) -> float:
        return self._smoother.display

    @property
    def state(self) -> TransitionState:
        return TransitionState(
            phase=self._machine.state,
            target=self._ticket.target if self._ticket is not None else None,
            display_progress=self._smoother.display,
            true_progress=self._true_progress,
            started_at=self._started_at,
        )

    def set_progress_view(self, view: ProgressView | None) -> None:
        self._progress_view = view

    def request_transition(
        self,
        target: SceneRef,
        *,
        progress_view: ProgressView | None = None,
        now_seconds: float | None = None,
    ) -> TransitionTicket | None:
        """Start a transition; rejected (None) while another one is in flight.

        `progress_view` replaces the pipeline's view for this transition only.
        """
        if self.in_flight:
            _LOG.warning(
                "scene_transition_rejected target=%s active_target=%s phase=%s",
                target,
                self._ticket.target if self._ticket is not None else None,
                self._machine.state,
            )
            return None
        now = self._time_source() if now_seconds is None else now_seconds
        ticket = TransitionTicket(target=target)
        self._ticket = ticket
        self._handle = None
        self._started_at = now
        self._true_progress = 0.0
        self._smoother.reset()
        self._flight_view = progress_view if progress_view is not None else self._progress_view
        self._machine.trigger(_BEGIN, payload=target)
        _LOG.info("scene_transition_started target=%s", target)
        self._show_view(True)
        self._publish(SceneTransitionStarted(target=target))
        cleanup = self._cleanup
        if cleanup is not None:
            call_best_effort(_LOG, "pre_load_cleanup_failed", lambda: cleanup.reclaim())
        self._smoother.set_target(PRE_CLEANUP_PROGRESS)
        self._render_progress()
        return ticket

    def tick(self, delta_seconds: float, *, now_seconds: float | None = None) -> TransitionPhase:
        """Advance progress smoothing and at most one stage of the pipeline."""
        if not self.in_flight:
            return self._machine.state
        now = self._time_source() if now_seconds is None else now_seconds
        self._smoother.advance(delta_seconds)
        self._render_progress()
        phase = self._machine.state
        if phase is TransitionPhase.PRE_CLEANUP:
            self._begin_load(now)
        elif phase is TransitionPhase.LOADING:
            self._poll_load(now)
        elif phase is TransitionPhase.FINISHING:
            self._finish_if_due(now)
        elif phase is TransitionPhase.ACTIVATING:
            self._activate_if_caught_up(now)
        return self._machine.state

    def _begin_load(self, now: float) -> None:
        ticket = self._require_ticket()
        try:
            handle = self._loader.begin_load(ticket.target)
            handle.allow_activation(False)
        except Exception as exc:
            self._fail(exc)
            return
        self._handle = handle
        self._machine.trigger(_LOAD, payload=ticket.target)
        self._next_poll_at = now
        self._poll_load(now)

    def _poll_load(self, now: float) -> None:
        if now < self._next_poll_at:
            return
        handle = self._require_handle()
        try:
            error = handle.error
            progress = float(handle.true_progress()) if error is None else 0.0
        except Exception as exc:
            self._fail(exc)
            return
        if error is not None:
            self._fail(error)
            return
        self._true_progress = max(self._true_progress, min(1.0, max(0.0, progress)))
        if progress < LOADER_READY_PROGRESS:
            self._smoother.set_target(map_true_progress(progress))
            self._next_poll_at = now + self._config.poll_interval_seconds
            return
        self._smoother.set_target(FINISHING_PROGRESS)
        self._machine.trigger(_LOADED)
        self._finish_if_due(now)

    def _finish_if_due(self, now: float) -> None:
        started_at = self._started_at if self._started_at is not None else now
        if now - started_at < self._config.minimum_duration_seconds:
            return
        self._smoother.set_target(COMPLETE_PROGRESS)
        self._machine.trigger(_FINISH)

    def _activate_if_caught_up(self, now: float) -> None:
        if not self._smoother.has_reached(self._config.activation_threshold):
            return
        ticket = self._require_ticket()
        handle = self._require_handle()
        try:
            error = handle.error
            if error is None:
                handle.allow_activation(True)
        except Exception as exc:
            self._fail(exc)
            return
        if error is not None:
            self._fail(error)
            return
        elapsed = now - (self._started_at if self._started_at is not None else now)
        previous = self._active_scene
        self._active_scene = ticket.target
        ticket.outcome = TransitionOutcome.ACTIVATED
        ticket.elapsed_seconds = elapsed
        self._smoother.complete()
        self._render_progress()
        self._machine.trigger(_ACTIVATE, payload=ticket.target)
        self._reset_flight()
        _LOG.info("scene_transition_activated target=%s elapsed_s=%.3f", ticket.target, elapsed)
        if previous is not None:
            self._publish(SceneUnloaded(scene=previous))
        self._publish(SceneActivated(target=ticket.target, elapsed_seconds=elapsed))

    def _fail(self, error: BaseException) -> None:
        ticket = self._require_ticket()
        ticket.outcome = TransitionOutcome.FAILED
        ticket.error = error
        _LOG.error(
            "scene_transition_failed target=%s phase=%s error=%s",
            ticket.target,
            self._machine.state,
            error,
            exc_info=(type(error), error, error.__traceback__),
        )
        self._machine.trigger(_FAIL, payload=ticket.target)
        self._reset_flight()
        self._publish(SceneTransitionFailed(target=ticket.target, error=error))

    def _reset_flight(self) -> None:
        self._show_view(False)
        self._flight_view = None
        self._ticket = None
        self._handle = None
        self._started_at = None
        self._next_poll_at = 0.0

    def _render_progress(self) -> None:
        view = self._flight_view
        if view is None:
            return
        value = self._smoother.display

        def render() -> None:
            view.set_fill_amount(value)
            view.set_label(format_progress_label(value))

        call_best_effort(_LOG, "progress_view_update_failed", render, level=logging.DEBUG)

    def _show_view(self, visible: bool) -> None:
        # set_visible is optional on views.
        set_visible = getattr(self._flight_view, "set_visible", None)
        if not callable(set_visible):
            return
        call_best_effort(
            _LOG,
            f"progress_view_visibility_failed visible={visible}",
            lambda: set_visible(visible),
            level=logging.DEBUG,
        )

    def _publish(self, event: object) -> None:
        if self._events is not None:
            self._events.publish(event)

    def _require_ticket(self) -> TransitionTicket:
        if self._ticket is None:
            raise RuntimeError("no scene transition in flight")
        return self._ticket

    def _require_handle(self) -> LoadHandle:
        if self._handle is None:
            raise RuntimeError("scene load has not started")
        return self._handle

    def _on_teardown(self) -> None:
        if self.in_flight and self._ticket is not None:
            _LOG.warning("scene_transition_abandoned target=%s phase=%s", self._ticket.target, self.phase)
            self._fail(RuntimeError("scene transition pipeline torn down"))
        self._progress_view = None


def load_scene(
    registry: ManagerRegistry,
    loader: SceneLoader,
    target: SceneRef,
    *,
    progress_view: ProgressView | None = None,
) -> TransitionTicket | None:
    """Route through the active pipeline, or load directly when none is registered."""
    pipeline = registry.get(SceneTransitionPipeline.token())
    if isinstance(pipeline, SceneTransitionPipeline) and pipeline.is_active:
        return pipeline.request_transition(target, progress_view=progress_view)
    _LOG.info("scene_load_direct target=%s", target)
    handle = loader.begin_load(target)
    handle.allow_activation(True)
    return None
