"""Device tier classification from a capability snapshot."""

from __future__ import annotations

from envelope.api.capabilities import CapabilitySnapshot
from envelope.api.quality import DeviceTier

LOW_END_GPU_TOKENS: tuple[str, ...] = (
    "mali-4",
    "mali-t",
    "adreno 3",
    "adreno 4",
    "powervr sgx",
    "tegra 3",
    "tegra 4",
)

ULTRA_LOW_MEMORY_MB = 2500
ULTRA_LOW_GRAPHICS_MEMORY_MB = 512
ULTRA_LOW_MAX_CORES = 2
LOW_MEMORY_MB = 4000
LOW_GRAPHICS_MEMORY_MB = 1024
LOW_MAX_CORES = 4
MEDIUM_MEMORY_MB = 6000
MEDIUM_GRAPHICS_MEMORY_MB = 2048


def is_denylisted_gpu(gpu_descriptor: str) -> bool:
    """Return whether the descriptor names a known weak GPU family."""
    normalized = gpu_descriptor.lower()
    return any(token in normalized for token in LOW_END_GPU_TOKENS)


def _below(value: int | None, limit: int) -> bool:
    return value is not None and value < limit


def classify_device(snapshot: CapabilitySnapshot) -> DeviceTier:
    """Map capability signals to a tier; the most severe matching bucket wins.

    Unknown video memory never matches a bucket on its own.
    """
    memory = snapshot.total_system_memory_mb
    vram = snapshot.graphics_memory_mb
    cores = snapshot.logical_core_count
    if (
        memory < ULTRA_LOW_MEMORY_MB
        or is_denylisted_gpu(snapshot.gpu_descriptor)
        or _below(vram, ULTRA_LOW_GRAPHICS_MEMORY_MB)
        or cores <= ULTRA_LOW_MAX_CORES
    ):
        return DeviceTier.ULTRA_LOW
    if memory < LOW_MEMORY_MB or _below(vram, LOW_GRAPHICS_MEMORY_MB) or cores <= LOW_MAX_CORES:
        return DeviceTier.LOW
    if memory < MEDIUM_MEMORY_MB or _below(vram, MEDIUM_GRAPHICS_MEMORY_MB):
        return DeviceTier.MEDIUM
    return DeviceTier.HIGH


def is_low_end_tier(tier: DeviceTier) -> bool:
    return tier <= DeviceTier.LOW


def tier_display_name(tier: DeviceTier | None) -> str:
    """Short label for settings/debug UI."""
    if tier is not None and is_low_end_tier(tier):
        return "Low-End"
    return "Standard"
