"""Ordered quality preset table; lower level means lower resource cost."""

from __future__ import annotations

from envelope.api.quality import DeviceTier, QualityPreset, TextureResolution

_TIER_LEVELS: dict[DeviceTier, int] = {
    DeviceTier.ULTRA_LOW: 0,
    DeviceTier.LOW: 1,
    DeviceTier.MEDIUM: 2,
    DeviceTier.HIGH: 3,
}


def build_default_presets(
    *,
    low_end_far_clip_distance: float = 200.0,
    normal_far_clip_distance: float = 500.0,
) -> tuple[QualityPreset, ...]:
    """Return the four stock presets, cheapest first."""
    return (
        QualityPreset(
            level=0,
            name="ultra_low",
            target_frame_rate=30,
            far_clip_distance=min(150.0, low_end_far_clip_distance),
            shadows_enabled=False,
            antialiasing=0,
            texture_resolution=TextureResolution.QUARTER,
            lod_bias=0.2,
            maximum_lod_level=2,
            particle_raycast_budget=4,
            solver_iterations=3,
            solver_velocity_iterations=1,
        ),
        QualityPreset(
            level=1,
            name="low",
            target_frame_rate=45,
            far_clip_distance=low_end_far_clip_distance,
            shadows_enabled=False,
            antialiasing=0,
            texture_resolution=TextureResolution.HALF,
            lod_bias=0.3,
            maximum_lod_level=1,
            particle_raycast_budget=16,
            solver_iterations=4,
            solver_velocity_iterations=1,
        ),
        QualityPreset(
            level=2,
            name="medium",
            target_frame_rate=60,
            far_clip_distance=max(300.0, low_end_far_clip_distance),
            shadows_enabled=False,
            antialiasing=0,
            texture_resolution=TextureResolution.FULL,
            lod_bias=0.5,
            maximum_lod_level=0,
            particle_raycast_budget=64,
            solver_iterations=6,
            solver_velocity_iterations=1,
            soft_particles=True,
        ),
        QualityPreset(
            level=3,
            name="high",
            target_frame_rate=60,
            far_clip_distance=max(normal_far_clip_distance, low_end_far_clip_distance),
            shadows_enabled=True,
            antialiasing=2,
            texture_resolution=TextureResolution.FULL,
            lod_bias=0.7,
            maximum_lod_level=0,
            particle_raycast_budget=256,
            solver_iterations=6,
            solver_velocity_iterations=1,
            soft_particles=True,
            realtime_reflection_probes=True,
        ),
    )


DEFAULT_PRESETS: tuple[QualityPreset, ...] = build_default_presets()


def level_for_tier(tier: DeviceTier, level_count: int) -> int:
    """Initial quality level for a tier, clamped to the available presets."""
    return clamp_level(_TIER_LEVELS[tier], level_count)


def clamp_level(level: int, level_count: int) -> int:
    if level_count <= 0:
        raise ValueError("level_count must be > 0")
    return max(0, min(int(level), level_count - 1))


def validate_presets(presets: tuple[QualityPreset, ...]) -> None:
    """Reject tables whose indices do not match their position."""
    if not presets:
        raise ValueError("at least one quality preset is required")
    for index, preset in enumerate(presets):
        if preset.level != index:
            raise ValueError(f"preset {preset.name!r} has level {preset.level}, expected {index}")
