"""Public cleanup/reclaim API contracts."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol


class CacheOwner(Protocol):
    """External owner of cached data that can be dropped on demand."""

    def clear_cache(self) -> None:
        """Drop cached data; best effort."""


CacheProvider = Callable[[], CacheOwner | None]


class ResourceBackend(Protocol):
    """Engine resource backend able to release unreferenced assets."""

    def release_unused_assets(self) -> None:
        """Request release of assets no longer referenced."""


@dataclass(frozen=True, slots=True)
class ReclaimReport:
    """Summary of one reclaim pass."""

    cleared: tuple[str, ...] = ()
    skipped: tuple[str, ...] = ()
    failed: tuple[str, ...] = ()
    assets_released: bool = False
    collected_objects: int = 0
    aggressive: bool = False


@dataclass(frozen=True, slots=True)
class MemoryStats:
    """Process memory snapshot for diagnostics logging."""

    rss_mb: float
    tracked_objects: int
    gc_counts: tuple[int, ...] = field(default_factory=tuple)


class CleanupCoordinator(Protocol):
    """Public cleanup coordinator contract."""

    def register_cache(self, name: str, owner: CacheOwner) -> None:
        """Register a constructed cache owner."""

    def register_cache_provider(self, name: str, provider: CacheProvider) -> None:
        """Register a lazily resolved cache owner."""

    def unregister_cache(self, name: str) -> None:
        """Remove a registered cache owner."""

    def reclaim(self) -> ReclaimReport:
        """Best-effort cache invalidation and asset release. Never raises."""

    def aggressive_reclaim(self) -> ReclaimReport:
        """Reclaim followed by blocking full collection. Never raises."""
