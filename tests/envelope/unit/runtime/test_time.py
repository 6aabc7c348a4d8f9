from __future__ import annotations

import math

import pytest

from envelope.runtime.time import FrameClock, FrameTime
from tests.envelope.conftest import ManualClock


def test_first_frame_has_zero_delta() -> None:
    clock = FrameClock(time_source=ManualClock(start=10.0))
    frame = clock.next()
    assert frame.frame_index == 0
    assert frame.now_seconds == pytest.approx(10.0)
    assert frame.delta_seconds == 0.0
    assert math.isinf(frame.instantaneous_fps)


def test_delta_is_capped_but_unscaled_delta_is_kept() -> None:
    source = ManualClock()
    clock = FrameClock(time_source=source, max_delta_seconds=0.25)
    clock.next()
    source.advance(1.0)
    frame = clock.next()
    assert frame.frame_index == 1
    assert frame.delta_seconds == pytest.approx(0.25)
    assert frame.unscaled_delta_seconds == pytest.approx(1.0)
    assert frame.instantaneous_fps == pytest.approx(1.0)


def test_instantaneous_fps_from_unscaled_delta() -> None:
    frame = FrameTime(frame_index=3, now_seconds=1.0, delta_seconds=0.02, unscaled_delta_seconds=0.02)
    assert frame.instantaneous_fps == pytest.approx(50.0)


def test_invalid_cap_rejected() -> None:
    with pytest.raises(ValueError):
        FrameClock(max_delta_seconds=0.0)
