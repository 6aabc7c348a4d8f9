"""Device tiering and adaptive quality."""

from envelope.quality.capabilities import HostCapabilitySource, StaticCapabilitySource
from envelope.quality.controller import AdaptiveQualityController
from envelope.quality.presets import DEFAULT_PRESETS, build_default_presets, clamp_level, level_for_tier
from envelope.quality.samples import FrameRateWindow
from envelope.quality.tiers import classify_device, is_denylisted_gpu, is_low_end_tier, tier_display_name

__all__ = [
    "AdaptiveQualityController",
    "DEFAULT_PRESETS",
    "FrameRateWindow",
    "HostCapabilitySource",
    "StaticCapabilitySource",
    "build_default_presets",
    "clamp_level",
    "classify_device",
    "is_denylisted_gpu",
    "is_low_end_tier",
    "level_for_tier",
    "tier_display_name",
]
