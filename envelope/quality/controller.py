"""Adaptive quality controller driven by observed frame rate."""

from __future__ import annotations

import logging
from collections.abc import Callable
from time import monotonic

from envelope.api.capabilities import CapabilitySource
from envelope.api.quality import DeviceTier, QualityBackend, QualityDecision, QualityPreset
from envelope.quality.presets import build_default_presets, clamp_level, level_for_tier, validate_presets
from envelope.quality.samples import FrameRateWindow
from envelope.quality.tiers import classify_device, is_low_end_tier, tier_display_name
from envelope.runtime.config import QualityConfig
from envelope.runtime.errors import call_best_effort
from envelope.runtime.registry import SingletonManager
from envelope.runtime.time import FrameTime

_LOG = logging.getLogger("envelope.quality")

# Levels at or below this get the low-end draw distance on top of their preset.
_DRAW_DISTANCE_TIGHTEN_LEVEL = 1


class AdaptiveQualityController(SingletonManager):
    """Owns the current quality level and degrades it one step at a time.

    Quality only moves down on its own. Raising it back requires
    `allow_upgrade` in config and never happens on low-end tiers.
    """

    def __init__(
        self,
        backend: QualityBackend,
        *,
        capabilities: CapabilitySource | None = None,
        config: QualityConfig | None = None,
        presets: tuple[QualityPreset, ...] | None = None,
        initial_level: int | None = None,
        time_source: Callable[[], float] | None = None,
    ) -> None:
        super().__init__()
        self._config = config or QualityConfig()
        self._backend = backend
        self._capabilities = capabilities
        self._presets = presets or build_default_presets(
            low_end_far_clip_distance=self._config.low_end_far_clip_distance,
            normal_far_clip_distance=self._config.normal_far_clip_distance,
        )
        validate_presets(self._presets)
        self._time_source = time_source or monotonic
        self._window = FrameRateWindow(self._config.sample_window)
        self._level = clamp_level(
            len(self._presets) - 1 if initial_level is None else initial_level,
            len(self._presets),
        )
        self._tier: DeviceTier | None = None
        self._last_check = self._time_source()

    @property
    def level(self) -> int:
        return self._level

    @property
    def level_count(self) -> int:
        return len(self._presets)

    @property
    def preset(self) -> QualityPreset:
        return self._presets[self._level]

    @property
    def tier(self) -> DeviceTier | None:
        return self._tier

    @property
    def is_low_end(self) -> bool:
        return self._tier is not None and is_low_end_tier(self._tier)

    @property
    def tier_name(self) -> str:
        return tier_display_name(self._tier)

    @property
    def samples(self) -> FrameRateWindow:
        return self._window

    def _on_activate(self) -> None:
        target_fps = self._config.target_fps
        call_best_effort(
            _LOG,
            f"target_frame_rate_apply_failed fps={target_fps}",
            lambda: self._backend.set_target_frame_rate(target_fps),
        )
        if self._config.auto_detect_on_start:
            self.detect_and_optimize()
        self._last_check = self._time_source()

    def detect_and_optimize(self) -> DeviceTier | None:
        """Classify the device once and apply the tier's preset."""
        if self._capabilities is None:
            _LOG.info("quality_detect_skipped reason=no_capability_source")
            return None
        snapshot = self._capabilities.current_snapshot()
        tier = classify_device(snapshot)
        self._tier = tier
        _LOG.info(
            "device_info ram_mb=%d vram_mb=%s gpu=%s cores=%d",
            snapshot.total_system_memory_mb,
            snapshot.graphics_memory_mb,
            snapshot.gpu_descriptor,
            snapshot.logical_core_count,
        )
        self._apply_level(level_for_tier(tier, self.level_count))
        _LOG.info("device_tier tier=%s quality_level=%d", tier.name, self._level)
        return tier

    def on_frame_elapsed(self, instantaneous_fps: float) -> None:
        if not self._window.append(instantaneous_fps):
            _LOG.debug("fps_sample_dropped value=%r", instantaneous_fps)

    def record_frame_delta(self, unscaled_delta_seconds: float) -> None:
        """Record a sample from a real (unscaled) frame delta."""
        if unscaled_delta_seconds <= 0.0:
            return
        self.on_frame_elapsed(1.0 / unscaled_delta_seconds)

    def periodic_evaluate(self, now_seconds: float) -> QualityDecision:
        """Evaluate once per check interval; moves at most one level."""
        previous = self._level
        if not self._config.adaptive_enabled:
            return QualityDecision(evaluated=False, previous_level=previous, level=previous)
        if now_seconds - self._last_check < self._config.check_interval_seconds:
            return QualityDecision(evaluated=False, previous_level=previous, level=previous)
        self._last_check = now_seconds
        mean_fps = self._window.mean()
        if mean_fps is None:
            return QualityDecision(evaluated=True, previous_level=previous, level=previous)
        if mean_fps < self._config.low_fps_threshold and previous > 0:
            self._apply_level(previous - 1)
            _LOG.info("quality_reduced level=%d fps=%.1f", self._level, mean_fps)
        elif self._can_upgrade(mean_fps):
            self._apply_level(previous + 1)
            _LOG.info("quality_raised level=%d fps=%.1f", self._level, mean_fps)
        return QualityDecision(
            evaluated=True,
            previous_level=previous,
            level=self._level,
            mean_fps=mean_fps,
        )

    def tick(self, frame: FrameTime) -> QualityDecision:
        """Per-frame entry: record the sample, then maybe evaluate."""
        self.record_frame_delta(frame.unscaled_delta_seconds)
        return self.periodic_evaluate(frame.now_seconds)

    def set_quality_level(self, level: int) -> int:
        """Manually select a level; out-of-range values are clamped."""
        self._apply_level(level)
        _LOG.info("quality_set level=%d name=%s", self._level, self.preset.name)
        return self._level

    def _can_upgrade(self, mean_fps: float) -> bool:
        if not self._config.allow_upgrade or self.is_low_end:
            return False
        ceiling = clamp_level(self._config.upgrade_level_ceiling, self.level_count)
        return mean_fps > self._config.upgrade_fps_threshold and self._level < ceiling

    def _apply_level(self, level: int) -> None:
        clamped = clamp_level(level, self.level_count)
        if clamped != level:
            _LOG.debug("quality_level_clamped requested=%d applied=%d", level, clamped)
        self._level = clamped
        preset = self._presets[clamped]
        call_best_effort(
            _LOG,
            f"quality_preset_apply_failed level={clamped}",
            lambda: self._backend.apply_preset(preset),
        )
        distance = preset.far_clip_distance
        if clamped <= _DRAW_DISTANCE_TIGHTEN_LEVEL:
            distance = min(distance, self._config.low_end_far_clip_distance)
        call_best_effort(
            _LOG,
            f"far_clip_apply_failed distance={distance}",
            lambda: self._backend.set_far_clip_distance(distance),
        )
