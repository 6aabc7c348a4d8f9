"""Tick-driven delayed continuation scheduler."""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from heapq import heappop, heappush

TaskCallback = Callable[[], None]

_LOG = logging.getLogger("envelope.scheduler")


@dataclass(order=True, slots=True)
class _Entry:
    due_seconds: float
    task_id: int
    callback: TaskCallback = field(compare=False)
    label: str = field(compare=False, default="task")
    repeat_seconds: float | None = field(compare=False, default=None)
    live: bool = field(compare=False, default=True)


class Scheduler:
    """Runs delayed callbacks on the main tick; no threads involved.

    Time only moves when the host advances it, so a callback scheduled
    for 0.5 s fires on the first frame at or after that point.
    """

    def __init__(self) -> None:
        self._now_seconds = 0.0
        self._ids = itertools.count(1)
        self._heap: list[_Entry] = []
        self._live: dict[int, _Entry] = {}

    @property
    def now_seconds(self) -> float:
        return self._now_seconds

    @property
    def pending_count(self) -> int:
        return len(self._live)

    @property
    def next_due_seconds(self) -> float | None:
        due = [entry.due_seconds for entry in self._live.values()]
        return min(due) if due else None

    def call_later(self, delay_seconds: float, callback: TaskCallback, *, label: str = "task") -> int:
        if delay_seconds < 0.0:
            raise ValueError("delay_seconds must be >= 0")
        return self._push(self._now_seconds + delay_seconds, callback, label, None)

    def call_every(self, interval_seconds: float, callback: TaskCallback, *, label: str = "task") -> int:
        if interval_seconds <= 0.0:
            raise ValueError("interval_seconds must be > 0")
        return self._push(self._now_seconds + interval_seconds, callback, label, interval_seconds)

    def cancel(self, task_id: int) -> bool:
        """Cancel a pending task; returns False when it already ran or was cancelled."""
        entry = self._live.pop(task_id, None)
        if entry is None:
            return False
        entry.live = False
        return True

    def advance(self, delta_seconds: float) -> int:
        """Move time forward by one frame delta and run what became due."""
        if delta_seconds < 0.0:
            raise ValueError("delta_seconds must be >= 0")
        return self.run_due(self._now_seconds + delta_seconds)

    def run_due(self, now_seconds: float) -> int:
        if now_seconds < self._now_seconds:
            raise ValueError("now_seconds cannot move backwards")
        self._now_seconds = now_seconds
        executed = 0
        while self._heap and self._heap[0].due_seconds <= now_seconds:
            entry = heappop(self._heap)
            if not entry.live:
                continue
            _LOG.debug("scheduler_run label=%s task_id=%d", entry.label, entry.task_id)
            if entry.repeat_seconds is None:
                self._live.pop(entry.task_id, None)
            entry.callback()
            executed += 1
            if entry.live and entry.repeat_seconds is not None:
                entry.due_seconds += entry.repeat_seconds
                heappush(self._heap, entry)
        return executed

    def clear(self) -> None:
        for entry in self._live.values():
            entry.live = False
        self._live.clear()
        self._heap.clear()

    def _push(
        self,
        due_seconds: float,
        callback: TaskCallback,
        label: str,
        repeat_seconds: float | None,
    ) -> int:
        entry = _Entry(
            due_seconds=due_seconds,
            task_id=next(self._ids),
            callback=callback,
            label=label,
            repeat_seconds=repeat_seconds,
        )
        self._live[entry.task_id] = entry
        heappush(self._heap, entry)
        return entry.task_id
