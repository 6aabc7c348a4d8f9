"""Scene lifecycle notifications and the bus that carries them.

The transition pipeline is the only publisher. Handlers run synchronously
on the tick that publishes, so a handler that starts another transition
sees the pipeline already back in IDLE.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol, TypeVar

from envelope.api.loading import (
    SceneActivated,
    SceneTransitionFailed,
    SceneTransitionStarted,
    SceneUnloaded,
)

TEvent = TypeVar("TEvent")

type SceneEvent = SceneTransitionStarted | SceneUnloaded | SceneActivated | SceneTransitionFailed

# Publication order for one successful transition.
SCENE_EVENT_TYPES: tuple[type, ...] = (
    SceneTransitionStarted,
    SceneUnloaded,
    SceneActivated,
    SceneTransitionFailed,
)


@dataclass(frozen=True, slots=True)
class Subscription:
    id: int


class EventBus(Protocol):
    """Synchronous bus keyed by event type."""

    def subscribe(
        self,
        event_type: type[TEvent],
        handler: Callable[[TEvent], None],
    ) -> Subscription:
        """Route `event_type` and its subclasses to `handler`."""

    def unsubscribe(self, subscription: Subscription) -> None:
        """Stop routing to a handler; stale tokens are a no-op."""

    def publish(self, event: object) -> int:
        """Run matching handlers in subscription order; return how many ran."""


def subscribe_scene_events(
    bus: EventBus,
    handler: Callable[[SceneEvent], None],
) -> tuple[Subscription, ...]:
    """Route every scene lifecycle event to one handler."""
    return tuple(bus.subscribe(event_type, handler) for event_type in SCENE_EVENT_TYPES)


def create_event_bus() -> EventBus:
    from envelope.runtime.events import RuntimeEventBus

    return RuntimeEventBus()
