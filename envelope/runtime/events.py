"""Lightweight event bus shared by envelope managers."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable
from typing import Any, TypeVar

from envelope.api.events import Subscription

TEvent = TypeVar("TEvent")
EventHandler = Callable[[Any], None]


class RuntimeEventBus:
    """In-process pub/sub; handlers run synchronously on the publishing tick.

    Handlers are keyed by event type and also receive subclasses of it.
    """

    def __init__(self) -> None:
        self._next_id = 1
        self._handlers: defaultdict[type, dict[int, EventHandler]] = defaultdict(dict)
        self._types: dict[int, type] = {}

    @property
    def subscriber_count(self) -> int:
        return len(self._types)

    def subscribe(
        self,
        event_type: type[TEvent],
        handler: Callable[[TEvent], None],
    ) -> Subscription:
        sub_id = self._next_id
        self._next_id += 1
        self._handlers[event_type][sub_id] = handler
        self._types[sub_id] = event_type
        return Subscription(sub_id)

    def unsubscribe(self, subscription: Subscription) -> None:
        event_type = self._types.pop(subscription.id, None)
        if event_type is None:
            return
        bucket = self._handlers[event_type]
        bucket.pop(subscription.id, None)
        if not bucket:
            del self._handlers[event_type]

    def publish(self, event: object) -> int:
        """Deliver `event` and return the number of handlers invoked."""
        matched = [
            (sub_id, handler)
            for event_type in type(event).__mro__
            if event_type in self._handlers
            for sub_id, handler in self._handlers[event_type].items()
        ]
        invoked = 0
        for sub_id, handler in sorted(matched, key=lambda item: item[0]):
            if sub_id not in self._types:
                continue
            handler(event)
            invoked += 1
        return invoked


EventBus = RuntimeEventBus
