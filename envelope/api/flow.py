"""Public flow/state-machine API contracts."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True, slots=True)
class FlowContext[TState]:
    """Transition execution context."""

    trigger: str
    source: TState
    target: TState
    payload: object | None = None


type TransitionHook[TState] = Callable[[FlowContext[TState]], None]


@dataclass(frozen=True, slots=True)
class FlowTransition[TState]:
    """One trigger edge; `source=None` matches any state."""

    trigger: str
    source: TState | None
    target: TState
    after: TransitionHook[TState] | None = None


class FlowMachine[TState](Protocol):
    """Deterministic transition table contract."""

    @property
    def state(self) -> TState:
        """Return the state after the last executed transition."""

    def add_transition(self, transition: FlowTransition[TState]) -> None:
        """Append an edge; earlier edges win on overlapping triggers."""

    def can_trigger(self, event: str) -> bool:
        """Return whether `event` matches a transition from the current state."""

    def trigger(self, event: str, *, payload: object | None = None) -> bool:
        """Run the first matching edge; False when nothing matched."""


def create_flow_machine[TState](initial_state: TState) -> FlowMachine[TState]:
    """Create a transition-table machine starting in `initial_state`."""
    from envelope.runtime.flow import RuntimeFlowMachine

    return RuntimeFlowMachine(initial_state)
