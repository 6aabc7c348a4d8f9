"""Envelope runtime plumbing."""

from envelope.runtime.config import (
    CleanupConfig,
    EnvelopeConfig,
    PowerConfig,
    QualityConfig,
    TransitionConfig,
    get_envelope_config,
    initialize_envelope_config,
    load_envelope_config,
    set_envelope_config,
)
from envelope.runtime.errors import RECOVERABLE_RUNTIME_ERRORS, SceneLoadError, call_best_effort, log_recoverable
from envelope.runtime.events import EventBus, RuntimeEventBus
from envelope.runtime.flow import FlowMachine, RuntimeFlowMachine
from envelope.runtime.logging import setup_envelope_logging, shutdown_envelope_logging
from envelope.runtime.registry import RuntimeManagerRegistry, SingletonManager
from envelope.runtime.scheduler import Scheduler
from envelope.runtime.time import FrameClock, FrameTime

__all__ = [
    "CleanupConfig",
    "EnvelopeConfig",
    "EventBus",
    "FlowMachine",
    "FrameClock",
    "FrameTime",
    "PowerConfig",
    "QualityConfig",
    "RECOVERABLE_RUNTIME_ERRORS",
    "RuntimeEventBus",
    "RuntimeFlowMachine",
    "RuntimeManagerRegistry",
    "Scheduler",
    "SceneLoadError",
    "SingletonManager",
    "TransitionConfig",
    "call_best_effort",
    "get_envelope_config",
    "initialize_envelope_config",
    "load_envelope_config",
    "log_recoverable",
    "set_envelope_config",
    "setup_envelope_logging",
    "shutdown_envelope_logging",
]
