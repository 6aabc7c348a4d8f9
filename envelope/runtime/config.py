"""Centralized tuning configuration for the envelope managers.

Out-of-range values are clamped when a config is constructed, so directly
built configs and env-loaded ones obey the same bounds.
"""

from __future__ import annotations

import math
import os
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Mapping

from envelope.api.logging import EnvelopeLoggingConfig


def _bounded(
    value: float,
    default: float,
    *,
    minimum: float | None = None,
    maximum: float | None = None,
) -> float:
    result = float(value)
    if math.isnan(result):
        result = float(default)
    if minimum is not None:
        result = max(float(minimum), result)
    if maximum is not None:
        result = min(float(maximum), result)
    return result


def _clamp_fields(config: object, bounds: Mapping[str, tuple[float, float | None, float | None]]) -> None:
    for name, (default, minimum, maximum) in bounds.items():
        value = getattr(config, name)
        clamped = _bounded(value, default, minimum=minimum, maximum=maximum)
        if isinstance(default, int):
            clamped = int(clamped) if math.isfinite(clamped) else default
        if clamped != value:
            object.__setattr__(config, name, clamped)


@dataclass(frozen=True, slots=True)
class QualityConfig:
    check_interval_seconds: float = 5.0
    low_fps_threshold: float = 45.0
    target_fps: int = 60
    sample_window: int = 30
    adaptive_enabled: bool = True
    auto_detect_on_start: bool = True
    allow_upgrade: bool = False
    upgrade_fps_threshold: float = 55.0
    upgrade_level_ceiling: int = 2
    low_end_far_clip_distance: float = 200.0
    normal_far_clip_distance: float = 500.0

    def __post_init__(self) -> None:
        _clamp_fields(
            self,
            {
                "check_interval_seconds": (5.0, 0.0, None),
                "low_fps_threshold": (45.0, 0.0, None),
                "target_fps": (60, 1, None),
                "sample_window": (30, 1, None),
                "upgrade_fps_threshold": (55.0, 0.0, None),
                "upgrade_level_ceiling": (2, 0, None),
                "low_end_far_clip_distance": (200.0, 1.0, None),
                "normal_far_clip_distance": (500.0, 1.0, None),
            },
        )


@dataclass(frozen=True, slots=True)
class CleanupConfig:
    auto_cleanup_on_scene_change: bool = True
    force_gc_on_cleanup: bool = False
    cleanup_delay_seconds: float = 0.5

    def __post_init__(self) -> None:
        _clamp_fields(self, {"cleanup_delay_seconds": (0.5, 0.0, None)})


@dataclass(frozen=True, slots=True)
class TransitionConfig:
    minimum_duration_seconds: float = 0.5
    progress_speed: float = 3.0
    poll_interval_seconds: float = 0.1
    activation_threshold: float = 0.99

    def __post_init__(self) -> None:
        _clamp_fields(
            self,
            {
                "minimum_duration_seconds": (0.5, 0.0, None),
                "progress_speed": (3.0, 0.01, None),
                "poll_interval_seconds": (0.1, 0.0, None),
                "activation_threshold": (0.99, 0.0, 1.0),
            },
        )


@dataclass(frozen=True, slots=True)
class PowerConfig:
    hold_only_during_gameplay: bool = True


@dataclass(frozen=True, slots=True)
class EnvelopeConfig:
    quality: QualityConfig = field(default_factory=QualityConfig)
    cleanup: CleanupConfig = field(default_factory=CleanupConfig)
    transition: TransitionConfig = field(default_factory=TransitionConfig)
    power: PowerConfig = field(default_factory=PowerConfig)
    logging: EnvelopeLoggingConfig = field(default_factory=EnvelopeLoggingConfig)


_ENVELOPE_CONFIG: ContextVar[EnvelopeConfig | None] = ContextVar("envelope_config", default=None)


def _raw(name: str, *, env: Mapping[str, str] | None = None) -> str | None:
    value = os.getenv(name) if env is None else env.get(name)
    return None if value is None else str(value)


def _flag(name: str, default: bool, *, env: Mapping[str, str] | None = None) -> bool:
    raw = _raw(name, env=env)
    if raw is None:
        return bool(default)
    value = raw.strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    return bool(default)


def _int(
    name: str,
    default: int,
    *,
    minimum: int | None = None,
    env: Mapping[str, str] | None = None,
) -> int:
    raw = _raw(name, env=env)
    if raw is None:
        value = int(default)
    else:
        try:
            value = int(raw.strip())
        except ValueError:
            value = int(default)
    if minimum is None:
        return value
    return max(int(minimum), value)


def _float(
    name: str,
    default: float,
    *,
    minimum: float | None = None,
    maximum: float | None = None,
    env: Mapping[str, str] | None = None,
) -> float:
    raw = _raw(name, env=env)
    if raw is None:
        value = float(default)
    else:
        try:
            value = float(raw.strip())
        except ValueError:
            value = float(default)
    return _bounded(value, default, minimum=minimum, maximum=maximum)


def _text(name: str, default: str, *, env: Mapping[str, str] | None = None) -> str:
    raw = _raw(name, env=env)
    if raw is None:
        return str(default)
    value = raw.strip()
    return value if value else str(default)


def _log_format(raw: str) -> str:
    value = raw.strip().lower()
    return value if value in {"text", "json"} else "text"


def resolve_log_level_name(default: str = "INFO", *, env: Mapping[str, str] | None = None) -> str:
    """Resolve log level with envelope-prefixed override."""
    value = _raw("ENVELOPE_LOG_LEVEL", env=env)
    if value is None:
        value = _raw("LOG_LEVEL", env=env)
    if value is None or not value.strip():
        return default
    return value.strip().upper()


def load_envelope_config(*, env: Mapping[str, str] | None = None) -> EnvelopeConfig:
    """Load configuration from `ENVELOPE_*` variables, clamping invalid values."""
    quality = QualityConfig(
        check_interval_seconds=_float("ENVELOPE_QUALITY_CHECK_INTERVAL", 5.0, minimum=0.0, env=env),
        low_fps_threshold=_float("ENVELOPE_QUALITY_LOW_FPS", 45.0, minimum=0.0, env=env),
        target_fps=_int("ENVELOPE_QUALITY_TARGET_FPS", 60, minimum=1, env=env),
        sample_window=_int("ENVELOPE_QUALITY_SAMPLE_WINDOW", 30, minimum=1, env=env),
        adaptive_enabled=_flag("ENVELOPE_QUALITY_ADAPTIVE", True, env=env),
        auto_detect_on_start=_flag("ENVELOPE_QUALITY_AUTO_DETECT", True, env=env),
        allow_upgrade=_flag("ENVELOPE_QUALITY_ALLOW_UPGRADE", False, env=env),
        upgrade_fps_threshold=_float("ENVELOPE_QUALITY_UPGRADE_FPS", 55.0, minimum=0.0, env=env),
        upgrade_level_ceiling=_int("ENVELOPE_QUALITY_UPGRADE_CEILING", 2, minimum=0, env=env),
        low_end_far_clip_distance=_float(
            "ENVELOPE_QUALITY_LOW_END_FAR_CLIP", 200.0, minimum=1.0, env=env
        ),
        normal_far_clip_distance=_float(
            "ENVELOPE_QUALITY_NORMAL_FAR_CLIP", 500.0, minimum=1.0, env=env
        ),
    )
    cleanup = CleanupConfig(
        auto_cleanup_on_scene_change=_flag("ENVELOPE_CLEANUP_ON_SCENE_CHANGE", True, env=env),
        force_gc_on_cleanup=_flag("ENVELOPE_CLEANUP_FORCE_GC", False, env=env),
        cleanup_delay_seconds=_float("ENVELOPE_CLEANUP_DELAY", 0.5, minimum=0.0, env=env),
    )
    transition = TransitionConfig(
        minimum_duration_seconds=_float(
            "ENVELOPE_TRANSITION_MIN_DURATION", 0.5, minimum=0.0, env=env
        ),
        progress_speed=_float("ENVELOPE_TRANSITION_PROGRESS_SPEED", 3.0, minimum=0.01, env=env),
        poll_interval_seconds=_float(
            "ENVELOPE_TRANSITION_POLL_INTERVAL", 0.1, minimum=0.0, env=env
        ),
        activation_threshold=_float(
            "ENVELOPE_TRANSITION_ACTIVATION_THRESHOLD", 0.99, minimum=0.0, maximum=1.0, env=env
        ),
    )
    power = PowerConfig(
        hold_only_during_gameplay=_flag("ENVELOPE_POWER_HOLD_DURING_GAMEPLAY", True, env=env),
    )
    log_file = _text("ENVELOPE_LOG_FILE", "", env=env).strip()
    logging_config = EnvelopeLoggingConfig(
        level_name=resolve_log_level_name(env=env),
        console_format=_log_format(_text("ENVELOPE_LOG_FORMAT", "text", env=env)),
        file_path=log_file or None,
        file_format=_log_format(_text("ENVELOPE_LOG_FILE_FORMAT", "json", env=env)),
    )
    return EnvelopeConfig(
        quality=quality,
        cleanup=cleanup,
        transition=transition,
        power=power,
        logging=logging_config,
    )


def initialize_envelope_config(*, env: Mapping[str, str] | None = None) -> EnvelopeConfig:
    config = load_envelope_config(env=env)
    _ENVELOPE_CONFIG.set(config)
    return config


def set_envelope_config(config: EnvelopeConfig) -> EnvelopeConfig:
    _ENVELOPE_CONFIG.set(config)
    return config


def get_envelope_config() -> EnvelopeConfig:
    config = _ENVELOPE_CONFIG.get()
    if config is not None:
        return config
    return initialize_envelope_config()


__all__ = [
    "CleanupConfig",
    "EnvelopeConfig",
    "PowerConfig",
    "QualityConfig",
    "TransitionConfig",
    "get_envelope_config",
    "initialize_envelope_config",
    "load_envelope_config",
    "resolve_log_level_name",
    "set_envelope_config",
]
