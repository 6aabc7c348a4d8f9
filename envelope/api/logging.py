"""Public envelope logging API."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class EnvelopeLoggingConfig:
    """Logging pipeline configuration."""

    level_name: str = "INFO"
    console_format: str = "text"  # text|json
    file_path: str | None = None
    file_format: str = "json"  # text|json


def configure_logging(config: EnvelopeLoggingConfig) -> None:
    """Configure process logging through the runtime implementation."""
    from envelope.runtime.logging import configure_envelope_logging

    configure_envelope_logging(config)
