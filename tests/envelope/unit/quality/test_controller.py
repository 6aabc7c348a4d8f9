from __future__ import annotations

import pytest

from envelope.api.capabilities import CapabilitySnapshot
from envelope.api.quality import DeviceTier
from envelope.quality.capabilities import StaticCapabilitySource
from envelope.quality.controller import AdaptiveQualityController
from envelope.runtime.config import QualityConfig
from envelope.runtime.registry import RuntimeManagerRegistry
from envelope.runtime.time import FrameTime
from tests.envelope.conftest import FakeQualityBackend, ManualClock

_LOW_END = CapabilitySnapshot(
    total_system_memory_mb=2048,
    graphics_memory_mb=512,
    gpu_descriptor="Mali-400 MP",
    logical_core_count=4,
)
_MID_RANGE = CapabilitySnapshot(
    total_system_memory_mb=3000,
    graphics_memory_mb=2048,
    gpu_descriptor="Adreno 610",
    logical_core_count=8,
)


def _controller(
    *,
    backend: FakeQualityBackend | None = None,
    config: QualityConfig | None = None,
    initial_level: int | None = 2,
    clock: ManualClock | None = None,
    capabilities: CapabilitySnapshot | None = None,
) -> AdaptiveQualityController:
    return AdaptiveQualityController(
        backend or FakeQualityBackend(),
        capabilities=StaticCapabilitySource(capabilities) if capabilities is not None else None,
        config=config or QualityConfig(auto_detect_on_start=False),
        initial_level=initial_level,
        time_source=clock or ManualClock(),
    )


def _fill(controller: AdaptiveQualityController, fps: float, count: int = 30) -> None:
    for _ in range(count):
        controller.on_frame_elapsed(fps)


def test_low_fps_drops_exactly_one_level_per_interval() -> None:
    controller = _controller()
    _fill(controller, 30.0)

    first = controller.periodic_evaluate(5.0)
    second = controller.periodic_evaluate(5.0)

    assert first.evaluated and first.changed
    assert first.level == 1
    assert first.mean_fps == pytest.approx(30.0)
    assert not second.evaluated
    assert controller.level == 1


def test_level_never_goes_below_zero() -> None:
    controller = _controller(initial_level=1)
    _fill(controller, 10.0)
    now = 0.0
    for _ in range(6):
        now += 5.0
        controller.periodic_evaluate(now)
    assert controller.level == 0


def test_evaluation_waits_for_interval() -> None:
    controller = _controller()
    _fill(controller, 20.0)
    assert not controller.periodic_evaluate(4.9).evaluated
    assert controller.level == 2
    assert controller.periodic_evaluate(5.0).level == 1


def test_healthy_fps_keeps_level_without_upgrade() -> None:
    controller = _controller()
    _fill(controller, 90.0)
    decision = controller.periodic_evaluate(5.0)
    assert decision.evaluated
    assert not decision.changed
    assert controller.level == 2


def test_no_samples_is_not_a_degradation() -> None:
    controller = _controller()
    decision = controller.periodic_evaluate(5.0)
    assert decision.evaluated
    assert decision.mean_fps is None
    assert controller.level == 2


def test_disabled_adaptation_never_evaluates() -> None:
    controller = _controller(config=QualityConfig(auto_detect_on_start=False, adaptive_enabled=False))
    _fill(controller, 5.0)
    assert not controller.periodic_evaluate(100.0).evaluated
    assert controller.level == 2


def test_upgrade_is_opt_in_and_capped() -> None:
    config = QualityConfig(auto_detect_on_start=False, allow_upgrade=True, upgrade_level_ceiling=2)
    controller = _controller(config=config, initial_level=1)
    _fill(controller, 60.0)

    assert controller.periodic_evaluate(5.0).level == 2
    assert controller.periodic_evaluate(10.0).level == 2


def test_low_end_tier_never_upgrades() -> None:
    config = QualityConfig(auto_detect_on_start=False, allow_upgrade=True)
    controller = _controller(config=config, capabilities=_MID_RANGE)
    assert controller.detect_and_optimize() is DeviceTier.LOW
    _fill(controller, 120.0)
    assert controller.periodic_evaluate(5.0).level == 1


def test_activation_detects_tier_and_applies_preset() -> None:
    backend = FakeQualityBackend()
    controller = _controller(
        backend=backend,
        config=QualityConfig(auto_detect_on_start=True),
        capabilities=_LOW_END,
    )

    assert controller.activate(RuntimeManagerRegistry())

    assert controller.tier is DeviceTier.ULTRA_LOW
    assert controller.is_low_end
    assert controller.tier_name == "Low-End"
    assert controller.level == 0
    assert backend.presets[-1].name == "ultra_low"
    assert backend.far_clips[-1] == pytest.approx(150.0)


def test_detect_without_capability_source_is_skipped() -> None:
    controller = _controller()
    assert controller.detect_and_optimize() is None
    assert controller.tier is None
    assert controller.tier_name == "Standard"


def test_set_quality_level_clamps_and_tightens_draw_distance() -> None:
    backend = FakeQualityBackend()
    controller = _controller(backend=backend)

    assert controller.set_quality_level(9) == 3
    assert backend.far_clips[-1] == pytest.approx(500.0)
    assert controller.set_quality_level(-4) == 0
    assert controller.set_quality_level(1) == 1
    assert backend.far_clips[-1] == pytest.approx(200.0)


def test_backend_failure_does_not_escape() -> None:
    backend = FakeQualityBackend(fail=True)
    controller = _controller(backend=backend)
    assert controller.set_quality_level(0) == 0
    assert backend.presets == []
    assert backend.far_clips == [pytest.approx(150.0)]


def test_tick_samples_unscaled_delta() -> None:
    controller = _controller()
    frame = FrameTime(frame_index=0, now_seconds=1.0, delta_seconds=0.02, unscaled_delta_seconds=0.04)
    controller.tick(frame)
    assert controller.samples.mean() == pytest.approx(25.0)


def test_zero_delta_is_not_sampled() -> None:
    controller = _controller()
    controller.record_frame_delta(0.0)
    assert controller.samples.count == 0


def test_activation_applies_configured_frame_rate_cap() -> None:
    backend = FakeQualityBackend()
    controller = _controller(backend=backend, config=QualityConfig(auto_detect_on_start=False, target_fps=30))
    assert controller.activate(RuntimeManagerRegistry())
    assert backend.frame_rates == [30]


def test_frame_rate_cap_failure_does_not_block_activation() -> None:
    backend = FakeQualityBackend(fail=True)
    controller = _controller(backend=backend, config=QualityConfig(auto_detect_on_start=False))
    assert controller.activate(RuntimeManagerRegistry())
    assert controller.is_active
    assert backend.frame_rates == []


def test_zero_sample_window_keeps_one_sample() -> None:
    controller = _controller(config=QualityConfig(auto_detect_on_start=False, sample_window=0))
    _fill(controller, 30.0, count=3)
    assert controller.samples.count == 1
    assert controller.periodic_evaluate(5.0).level == 1
