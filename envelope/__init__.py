"""Runtime envelope managers: device tiering, adaptive quality, scene transitions, display hold."""

from envelope.runtime.bootstrap import EnvelopeManagers, ensure_initialized
from envelope.runtime.config import EnvelopeConfig, load_envelope_config
from envelope.runtime.host import EnvelopeHost

__all__ = [
    "EnvelopeConfig",
    "EnvelopeHost",
    "EnvelopeManagers",
    "ensure_initialized",
    "load_envelope_config",
]
