from __future__ import annotations

import pytest

from envelope.api.capabilities import CapabilitySnapshot
from envelope.api.loading import TransitionOutcome
from envelope.quality.capabilities import StaticCapabilitySource
from envelope.runtime.bootstrap import ensure_initialized
from envelope.runtime.config import EnvelopeConfig, QualityConfig
from envelope.runtime.host import EnvelopeHost
from envelope.runtime.time import FrameClock
from tests.envelope.conftest import (
    FakeDisplayHold,
    FakeQualityBackend,
    FakeResourceBackend,
    FakeSceneLoader,
    ManualClock,
)

_HIGH_END = CapabilitySnapshot(
    total_system_memory_mb=8192,
    graphics_memory_mb=4096,
    gpu_descriptor="Adreno 740",
    logical_core_count=8,
)


def _host() -> tuple[EnvelopeHost, FakeQualityBackend, FakeResourceBackend, FakeDisplayHold]:
    config = EnvelopeConfig(quality=QualityConfig(check_interval_seconds=1.0))
    host = EnvelopeHost(config=config)
    backend = FakeQualityBackend()
    resources = FakeResourceBackend()
    hold = FakeDisplayHold()
    ensure_initialized(
        host,
        quality_backend=backend,
        capabilities=StaticCapabilitySource(_HIGH_END),
        scene_loader=FakeSceneLoader(),
        display_hold=hold,
        resource_backend=resources,
    )
    return host, backend, resources, hold


def test_slow_frames_degrade_quality_through_host() -> None:
    host, backend, _, _ = _host()
    quality = host.quality
    assert quality is not None
    assert quality.level == 3

    for _ in range(25):
        host.advance(0.05)

    assert quality.level == 2
    assert backend.presets[-1].name == "medium"
    assert host.frame_index == 25


def test_transition_then_delayed_reclaim_through_host() -> None:
    host, _, resources, _ = _host()
    transitions = host.transitions
    assert transitions is not None

    ticket = transitions.request_transition("level_1")
    assert ticket is not None
    assert resources.releases == 1
    for _ in range(120):
        host.advance(1.0 / 60.0)
        if ticket.done:
            break

    assert ticket.outcome is TransitionOutcome.ACTIVATED
    assert ticket.elapsed_seconds is not None
    assert ticket.elapsed_seconds >= host.config.transition.minimum_duration_seconds
    assert resources.releases == 1
    for _ in range(40):
        host.advance(1.0 / 60.0)
    assert resources.releases == 2


def test_lifecycle_forwarding_reaches_power_manager() -> None:
    host, _, _, hold = _host()
    power = host.power
    assert power is not None
    power.on_gameplay_started()

    host.on_application_pause(True)
    assert not hold.active
    host.on_application_pause(False)
    assert hold.active
    host.on_application_quit()
    assert not hold.active


def test_shutdown_tears_down_every_manager() -> None:
    host, _, _, hold = _host()
    managers = (host.quality, host.cleanup, host.transitions, host.power)

    host.shutdown()
    host.shutdown()

    assert host.is_closed
    assert host.quality is None
    assert host.power is None
    assert all(manager is not None and not manager.is_active for manager in managers)
    assert hold.calls[-1] is False
    frame_index = host.frame_index
    host.advance(1.0)
    assert host.frame_index == frame_index


def test_tick_uses_frame_clock() -> None:
    source = ManualClock(start=3.0)
    host = EnvelopeHost(config=EnvelopeConfig(), clock=FrameClock(time_source=source))
    host.tick()
    source.advance(0.1)
    frame = host.tick()
    assert frame.delta_seconds == pytest.approx(0.1)
    assert host.now_seconds == pytest.approx(3.1)
    assert host.scheduler.now_seconds == pytest.approx(0.1)


def test_advance_rejects_negative_delta() -> None:
    host = EnvelopeHost(config=EnvelopeConfig())
    with pytest.raises(ValueError):
        host.advance(-0.1)
