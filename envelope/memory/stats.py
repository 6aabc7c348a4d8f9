"""Process memory statistics for diagnostics logging."""

from __future__ import annotations

import gc
import logging

import psutil

from envelope.api.cleanup import MemoryStats

_LOG = logging.getLogger("envelope.memory")
_BYTES_PER_MB = 1024.0 * 1024.0


def memory_stats() -> MemoryStats:
    """Sample resident set size and collector counters of this process."""
    rss_mb = float(psutil.Process().memory_info().rss) / _BYTES_PER_MB
    return MemoryStats(
        rss_mb=rss_mb,
        tracked_objects=len(gc.get_objects()),
        gc_counts=tuple(gc.get_count()),
    )


def log_memory_stats(logger: logging.Logger | None = None) -> MemoryStats:
    stats = memory_stats()
    (logger or _LOG).info(
        "memory_stats rss_mb=%.1f tracked_objects=%d gc_counts=%s",
        stats.rss_mb,
        stats.tracked_objects,
        stats.gc_counts,
    )
    return stats
