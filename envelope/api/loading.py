"""Public scene-loading API contracts."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, StrEnum
from typing import Protocol

type SceneRef = str | int


class TransitionPhase(StrEnum):
    IDLE = "idle"
    PRE_CLEANUP = "pre_cleanup"
    LOADING = "loading"
    FINISHING = "finishing"
    ACTIVATING = "activating"


class TransitionOutcome(Enum):
    PENDING = "pending"
    ACTIVATED = "activated"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class TransitionState:
    """Read-only view of the in-flight scene transition."""

    phase: TransitionPhase
    target: SceneRef | None
    display_progress: float
    true_progress: float
    started_at: float | None


class LoadHandle(Protocol):
    """Handle for one asynchronous scene load."""

    @property
    def error(self) -> BaseException | None:
        """Return load failure, if the loader reported one."""

    def true_progress(self) -> float:
        """Return loader progress; at most 0.9 while activation is suppressed."""

    def allow_activation(self, allowed: bool) -> None:
        """Allow or suppress the visible switch to the loaded scene."""


class SceneLoader(Protocol):
    """External asynchronous scene loader."""

    def begin_load(self, target: SceneRef) -> LoadHandle:
        """Start loading `target` and return its handle."""


class ProgressView(Protocol):
    """Optional loading-progress widget.

    A view may also define `set_visible(visible: bool)`; the pipeline calls
    it with True when a transition starts and False once it activates or
    fails.
    """

    def set_fill_amount(self, value: float) -> None:
        """Show fill fraction in [0, 1]."""

    def set_label(self, text: str) -> None:
        """Show progress label text."""


@dataclass(frozen=True, slots=True)
class SceneTransitionStarted:
    target: SceneRef


@dataclass(frozen=True, slots=True)
class SceneUnloaded:
    """Published for the outgoing scene right before the new one activates."""

    scene: SceneRef


@dataclass(frozen=True, slots=True)
class SceneActivated:
    target: SceneRef
    elapsed_seconds: float


@dataclass(frozen=True, slots=True)
class SceneTransitionFailed:
    target: SceneRef
    error: BaseException
