"""Idempotent wiring of the envelope managers onto a host."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from envelope.api.capabilities import CapabilitySource
from envelope.api.cleanup import ResourceBackend
from envelope.api.loading import ProgressView, SceneLoader
from envelope.api.power import DisplayHold
from envelope.api.quality import QualityBackend
from envelope.loading.transition import SceneTransitionPipeline
from envelope.memory.cleanup import CleanupCoordinator
from envelope.power.manager import PowerStateManager
from envelope.quality.capabilities import HostCapabilitySource
from envelope.quality.controller import AdaptiveQualityController
from envelope.runtime.host import EnvelopeHost
from envelope.runtime.registry import SingletonManager

_LOG = logging.getLogger("envelope.runtime")


@dataclass(frozen=True, slots=True)
class EnvelopeManagers:
    """Authoritative manager instances after initialization."""

    cleanup: CleanupCoordinator
    quality: AdaptiveQualityController | None = None
    transitions: SceneTransitionPipeline | None = None
    power: PowerStateManager | None = None


def ensure_initialized(
    host: EnvelopeHost,
    *,
    quality_backend: QualityBackend | None = None,
    capabilities: CapabilitySource | None = None,
    scene_loader: SceneLoader | None = None,
    progress_view: ProgressView | None = None,
    display_hold: DisplayHold | None = None,
    resource_backend: ResourceBackend | None = None,
) -> EnvelopeManagers:
    """Create and activate any manager that is missing from the host registry.

    Managers already active are kept as they are. A manager whose required
    collaborator is not supplied is skipped; the cleanup coordinator has no
    required collaborator and is always present afterwards.
    """
    config = host.config
    clock = host.current_time
    cleanup = host.cleanup
    if cleanup is None:
        cleanup = _activate(
            host,
            CleanupCoordinator(
                resource_backend=resource_backend,
                config=config.cleanup,
                scheduler=host.scheduler,
                events=host.events,
            ),
        )
    quality = host.quality
    if quality is None and quality_backend is not None:
        quality = _activate(
            host,
            AdaptiveQualityController(
                quality_backend,
                capabilities=capabilities or HostCapabilitySource(),
                config=config.quality,
                time_source=clock,
            ),
        )
    transitions = host.transitions
    if transitions is None and scene_loader is not None:
        transitions = _activate(
            host,
            SceneTransitionPipeline(
                scene_loader,
                cleanup=cleanup,
                progress_view=progress_view,
                events=host.events,
                config=config.transition,
                time_source=clock,
            ),
        )
    power = host.power
    if power is None and display_hold is not None:
        power = _activate(host, PowerStateManager(display_hold, config=config.power))
    _LOG.debug(
        "envelope_initialized quality=%s transitions=%s power=%s",
        quality is not None,
        transitions is not None,
        power is not None,
    )
    return EnvelopeManagers(cleanup=cleanup, quality=quality, transitions=transitions, power=power)


def _activate[TManager: SingletonManager](host: EnvelopeHost, manager: TManager) -> TManager:
    if manager.activate(host.registry):
        return manager
    existing = host.registry.get(manager.token())
    if not isinstance(existing, type(manager)):
        raise RuntimeError(f"manager slot held by unexpected instance: {type(manager).__name__}")
    return existing
