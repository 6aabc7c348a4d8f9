"""Generic state-flow transition executor."""

from __future__ import annotations

import logging

from envelope.api.flow import FlowContext, FlowTransition

_LOG = logging.getLogger("envelope.flow")


class RuntimeFlowMachine[TState]:
    """Deterministic transition table executor."""

    def __init__(self, initial_state: TState, *, name: str = "flow") -> None:
        self._state = initial_state
        self._name = name
        self._transitions: list[FlowTransition[TState]] = []

    @property
    def state(self) -> TState:
        return self._state

    def add_transition(self, transition: FlowTransition[TState]) -> None:
        self._transitions.append(transition)

    def can_trigger(self, event: str) -> bool:
        return self._match(event) is not None

    def trigger(self, event: str, *, payload: object | None = None) -> bool:
        """Execute first matching transition. Returns whether a transition ran."""
        transition = self._match(event)
        if transition is None:
            _LOG.debug("flow_trigger_ignored flow=%s state=%s trigger=%s", self._name, self._state, event)
            return False
        context = FlowContext(
            trigger=event,
            source=self._state,
            target=transition.target,
            payload=payload,
        )
        self._state = transition.target
        _LOG.debug("flow_transition flow=%s %s->%s trigger=%s", self._name, context.source, context.target, event)
        if transition.after is not None:
            transition.after(context)
        return True

    def _match(self, event: str) -> FlowTransition[TState] | None:
        for transition in self._transitions:
            if transition.trigger != event:
                continue
            if transition.source is not None and transition.source != self._state:
                continue
            return transition
        return None


FlowMachine = RuntimeFlowMachine
