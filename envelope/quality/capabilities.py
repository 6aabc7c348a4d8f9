"""Capability sources feeding the device tier classifier."""

from __future__ import annotations

import logging

import psutil

from envelope.api.capabilities import CapabilitySnapshot

_LOG = logging.getLogger("envelope.quality")
_BYTES_PER_MB = 1024 * 1024


class StaticCapabilitySource:
    """Capability source returning a fixed snapshot."""

    def __init__(self, snapshot: CapabilitySnapshot) -> None:
        self._snapshot = snapshot

    def current_snapshot(self) -> CapabilitySnapshot:
        return self._snapshot


class HostCapabilitySource:
    """Probe memory and core count of the running host.

    GPU values have no portable query, so they are supplied by the embedder.
    Video memory stays unknown (None) unless the embedder reports it.
    """

    def __init__(self, *, gpu_descriptor: str = "", graphics_memory_mb: int | None = None) -> None:
        self._gpu_descriptor = gpu_descriptor
        self._graphics_memory_mb = None if graphics_memory_mb is None else max(0, int(graphics_memory_mb))
        self._snapshot: CapabilitySnapshot | None = None

    def current_snapshot(self) -> CapabilitySnapshot:
        if self._snapshot is None:
            self._snapshot = CapabilitySnapshot(
                total_system_memory_mb=int(psutil.virtual_memory().total // _BYTES_PER_MB),
                graphics_memory_mb=self._graphics_memory_mb,
                gpu_descriptor=self._gpu_descriptor,
                logical_core_count=int(psutil.cpu_count(logical=True) or 1),
            )
            _LOG.debug("host_capabilities_probed snapshot=%s", self._snapshot)
        return self._snapshot
