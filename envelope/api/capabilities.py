"""Public device-capability API contracts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True, slots=True)
class CapabilitySnapshot:
    """Read-only device signals captured once at startup.

    `graphics_memory_mb` is None when the host cannot report dedicated video
    memory; the classifier then ignores that signal.
    """

    total_system_memory_mb: int
    graphics_memory_mb: int | None
    gpu_descriptor: str
    logical_core_count: int


class CapabilitySource(Protocol):
    """Read-only provider of the current device capability snapshot."""

    def current_snapshot(self) -> CapabilitySnapshot:
        """Return capability values for the host device."""


def create_static_capability_source(snapshot: CapabilitySnapshot) -> CapabilitySource:
    """Create a capability source that always reports `snapshot`."""
    from envelope.quality.capabilities import StaticCapabilitySource

    return StaticCapabilitySource(snapshot)


def create_host_capability_source(
    *,
    gpu_descriptor: str = "",
    graphics_memory_mb: int | None = None,
) -> CapabilitySource:
    """Create a capability source that probes the running host."""
    from envelope.quality.capabilities import HostCapabilitySource

    return HostCapabilitySource(
        gpu_descriptor=gpu_descriptor,
        graphics_memory_mb=graphics_memory_mb,
    )
