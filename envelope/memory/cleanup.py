"""Best-effort cache invalidation and resource reclaim."""

from __future__ import annotations

import gc
import logging
from collections.abc import Callable

from envelope.api.cleanup import CacheOwner, CacheProvider, ReclaimReport, ResourceBackend
from envelope.api.events import EventBus, Subscription
from envelope.api.loading import SceneActivated, SceneUnloaded
from envelope.runtime.config import CleanupConfig
from envelope.runtime.errors import RECOVERABLE_RUNTIME_ERRORS, call_best_effort, log_recoverable
from envelope.runtime.registry import SingletonManager
from envelope.runtime.scheduler import Scheduler

_LOG = logging.getLogger("envelope.memory")


class CleanupCoordinator(SingletonManager):
    """Clears registered caches and asks the backend to drop unused assets.

    Every collaborator is optional. A missing or failing cache owner is
    skipped and logged; `reclaim` and `aggressive_reclaim` never raise.
    """

    def __init__(
        self,
        *,
        resource_backend: ResourceBackend | None = None,
        config: CleanupConfig | None = None,
        scheduler: Scheduler | None = None,
        events: EventBus | None = None,
        collect: Callable[[], int] | None = None,
    ) -> None:
        super().__init__()
        self._config = config or CleanupConfig()
        self._resource_backend = resource_backend
        self._scheduler = scheduler
        self._events = events
        self._collect = collect or gc.collect
        self._providers: dict[str, CacheProvider] = {}
        self._subscriptions: list[Subscription] = []
        self._delayed_task_id: int | None = None

    @property
    def cache_names(self) -> tuple[str, ...]:
        return tuple(self._providers)

    def register_cache(self, name: str, owner: CacheOwner) -> None:
        self.register_cache_provider(name, lambda: owner)

    def register_cache_provider(self, name: str, provider: CacheProvider) -> None:
        """Register an owner resolved at reclaim time; it may return None until constructed."""
        normalized = name.strip()
        if not normalized:
            raise ValueError("cache name must not be empty")
        self._providers[normalized] = provider

    def unregister_cache(self, name: str) -> None:
        self._providers.pop(name.strip(), None)

    def clear_caches(self) -> ReclaimReport:
        """Invalidate every registered cache without touching engine resources."""
        cleared: list[str] = []
        skipped: list[str] = []
        failed: list[str] = []
        outcomes = {"cleared": cleared, "skipped": skipped, "failed": failed}
        for name, provider in tuple(self._providers.items()):
            outcomes[self._clear_one(name, provider)].append(name)
        return ReclaimReport(cleared=tuple(cleared), skipped=tuple(skipped), failed=tuple(failed))

    @staticmethod
    def _clear_one(name: str, provider: CacheProvider) -> str:
        try:
            owner = provider()
            if owner is None:
                return "skipped"
            owner.clear_cache()
        except RECOVERABLE_RUNTIME_ERRORS:
            log_recoverable(_LOG, f"cache_clear_failed cache={name}", level=logging.WARNING)
            return "failed"
        return "cleared"

    def reclaim(self) -> ReclaimReport:
        """Clear caches, then request (without waiting) release of unreferenced assets."""
        caches = self.clear_caches()
        released = self._request_asset_release()
        collected = self._collect() if self._config.force_gc_on_cleanup else 0
        _LOG.debug(
            "memory_cleanup_completed cleared=%d skipped=%d failed=%d collected=%d",
            len(caches.cleared),
            len(caches.skipped),
            len(caches.failed),
            collected,
        )
        return ReclaimReport(
            cleared=caches.cleared,
            skipped=caches.skipped,
            failed=caches.failed,
            assets_released=released,
            collected_objects=collected,
        )

    def aggressive_reclaim(self) -> ReclaimReport:
        """Full blocking collection; reserve for heavyweight boundaries.

        The second collection picks up objects freed by finalizers and weakref
        callbacks that ran during the first one.
        """
        caches = self.clear_caches()
        released = self._request_asset_release()
        collected = self._collect()
        collected += self._collect()
        _LOG.info("memory_aggressive_cleanup_completed collected=%d", collected)
        return ReclaimReport(
            cleared=caches.cleared,
            skipped=caches.skipped,
            failed=caches.failed,
            assets_released=released,
            collected_objects=collected,
            aggressive=True,
        )

    def _request_asset_release(self) -> bool:
        backend = self._resource_backend
        if backend is None:
            return False
        return call_best_effort(_LOG, "asset_release_failed", backend.release_unused_assets)

    def _on_activate(self) -> None:
        if self._events is None or not self._config.auto_cleanup_on_scene_change:
            return
        self._subscriptions.append(self._events.subscribe(SceneUnloaded, self._on_scene_unloaded))
        self._subscriptions.append(self._events.subscribe(SceneActivated, self._on_scene_activated))

    def _on_teardown(self) -> None:
        if self._events is not None:
            for subscription in self._subscriptions:
                self._events.unsubscribe(subscription)
        self._subscriptions.clear()
        if self._scheduler is not None and self._delayed_task_id is not None:
            self._scheduler.cancel(self._delayed_task_id)
        self._delayed_task_id = None
        self._providers.clear()

    def _on_scene_unloaded(self, event: SceneUnloaded) -> None:
        _LOG.debug("scene_unloaded_cache_clear scene=%s", event.scene)
        self.clear_caches()

    def _on_scene_activated(self, event: SceneActivated) -> None:
        if self._scheduler is None:
            self.reclaim()
            return
        if self._delayed_task_id is not None:
            self._scheduler.cancel(self._delayed_task_id)
        self._delayed_task_id = self._scheduler.call_later(
            self._config.cleanup_delay_seconds,
            self._run_delayed_reclaim,
            label=f"post_activation_reclaim:{event.target}",
        )

    def _run_delayed_reclaim(self) -> None:
        self._delayed_task_id = None
        self.reclaim()
