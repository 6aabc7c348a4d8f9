"""Public quality-preset API contracts."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Protocol


class DeviceTier(IntEnum):
    """Coarse device capability bucket, ordered from weakest to strongest."""

    ULTRA_LOW = 0
    LOW = 1
    MEDIUM = 2
    HIGH = 3


class TextureResolution(Enum):
    FULL = "full"
    HALF = "half"
    QUARTER = "quarter"

    @property
    def mipmap_limit(self) -> int:
        """Return number of top mip levels skipped for this resolution."""
        return {TextureResolution.FULL: 0, TextureResolution.HALF: 1, TextureResolution.QUARTER: 2}[self]


@dataclass(frozen=True, slots=True)
class QualityPreset:
    """Render/physics settings applied for one quality level."""

    level: int
    name: str
    target_frame_rate: int
    far_clip_distance: float
    shadows_enabled: bool
    antialiasing: int
    texture_resolution: TextureResolution
    lod_bias: float
    maximum_lod_level: int
    particle_raycast_budget: int
    solver_iterations: int
    solver_velocity_iterations: int
    soft_particles: bool = False
    realtime_reflection_probes: bool = False
    vsync_count: int = 0


@dataclass(frozen=True, slots=True)
class QualityDecision:
    """Outcome of one adaptive quality evaluation."""

    evaluated: bool
    previous_level: int
    level: int
    mean_fps: float | None = None

    @property
    def changed(self) -> bool:
        return self.level != self.previous_level


class QualityBackend(Protocol):
    """Render backend that applies presets and camera draw distance."""

    def apply_preset(self, preset: QualityPreset) -> None:
        """Apply one preset to the render backend."""

    def set_far_clip_distance(self, distance: float) -> None:
        """Set draw distance on the primary and gameplay viewports."""

    def set_target_frame_rate(self, fps: int) -> None:
        """Set the application-wide frame rate cap applied at startup."""


class QualityController(Protocol):
    """Public adaptive-quality controller contract."""

    @property
    def level(self) -> int:
        """Return current quality level."""

    @property
    def tier(self) -> DeviceTier | None:
        """Return last classified device tier, if any."""

    def on_frame_elapsed(self, instantaneous_fps: float) -> None:
        """Record one frame-rate sample."""

    def periodic_evaluate(self, now_seconds: float) -> QualityDecision:
        """Run one adaptive evaluation if the check interval has elapsed."""

    def set_quality_level(self, level: int) -> int:
        """Set quality level, clamped into the valid range."""
