"""Public envelope API contracts."""

from envelope.api.capabilities import (
    CapabilitySnapshot,
    CapabilitySource,
    create_host_capability_source,
    create_static_capability_source,
)
from envelope.api.cleanup import (
    CacheOwner,
    CacheProvider,
    CleanupCoordinator,
    MemoryStats,
    ReclaimReport,
    ResourceBackend,
)
from envelope.api.events import (
    SCENE_EVENT_TYPES,
    EventBus,
    SceneEvent,
    Subscription,
    create_event_bus,
    subscribe_scene_events,
)
from envelope.api.flow import FlowContext, FlowMachine, FlowTransition, create_flow_machine
from envelope.api.lifecycle import (
    ManagedComponent,
    ManagerLifecycle,
    ManagerRegistry,
    create_manager_registry,
)
from envelope.api.loading import (
    LoadHandle,
    ProgressView,
    SceneActivated,
    SceneLoader,
    SceneRef,
    SceneTransitionFailed,
    SceneTransitionStarted,
    SceneUnloaded,
    TransitionOutcome,
    TransitionPhase,
    TransitionState,
)
from envelope.api.logging import EnvelopeLoggingConfig, configure_logging
from envelope.api.power import DisplayHold, PowerEvent, PowerState
from envelope.api.quality import (
    DeviceTier,
    QualityBackend,
    QualityController,
    QualityDecision,
    QualityPreset,
    TextureResolution,
)

__all__ = [
    "SCENE_EVENT_TYPES",
    "CacheOwner",
    "CacheProvider",
    "CapabilitySnapshot",
    "CapabilitySource",
    "CleanupCoordinator",
    "DeviceTier",
    "DisplayHold",
    "EnvelopeLoggingConfig",
    "EventBus",
    "FlowContext",
    "FlowMachine",
    "FlowTransition",
    "LoadHandle",
    "ManagedComponent",
    "ManagerLifecycle",
    "ManagerRegistry",
    "MemoryStats",
    "PowerEvent",
    "PowerState",
    "ProgressView",
    "QualityBackend",
    "QualityController",
    "QualityDecision",
    "QualityPreset",
    "ReclaimReport",
    "ResourceBackend",
    "SceneActivated",
    "SceneEvent",
    "SceneLoader",
    "SceneRef",
    "SceneTransitionFailed",
    "SceneTransitionStarted",
    "SceneUnloaded",
    "Subscription",
    "TextureResolution",
    "TransitionOutcome",
    "TransitionPhase",
    "TransitionState",
    "configure_logging",
    "create_event_bus",
    "create_flow_machine",
    "create_host_capability_source",
    "create_manager_registry",
    "create_static_capability_source",
    "subscribe_scene_events",
]
