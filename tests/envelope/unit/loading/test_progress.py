from __future__ import annotations

import pytest

from envelope.loading.progress import ProgressSmoother, format_progress_label, map_true_progress, move_towards


def test_true_progress_maps_into_loading_band() -> None:
    assert map_true_progress(0.0) == pytest.approx(0.10)
    assert map_true_progress(0.45) == pytest.approx(0.50)
    assert map_true_progress(0.9) == pytest.approx(0.90)
    assert map_true_progress(1.0) == pytest.approx(0.90)
    assert map_true_progress(-1.0) == pytest.approx(0.10)


def test_move_towards_never_overshoots() -> None:
    assert move_towards(0.0, 1.0, 0.25) == pytest.approx(0.25)
    assert move_towards(0.9, 1.0, 0.25) == 1.0
    assert move_towards(1.0, 0.0, 0.5) == pytest.approx(0.5)


def test_smoother_converges_at_bounded_rate() -> None:
    smoother = ProgressSmoother(speed_per_second=2.0)
    smoother.set_target(1.0)
    assert smoother.advance(0.25) == pytest.approx(0.5)
    assert smoother.advance(1.0) == 1.0
    assert smoother.has_reached(0.99)


def test_smoother_target_only_ratchets_up() -> None:
    smoother = ProgressSmoother(speed_per_second=10.0)
    smoother.set_target(0.6)
    smoother.advance(1.0)
    smoother.set_target(0.2)
    assert smoother.target == pytest.approx(0.6)
    assert smoother.advance(1.0) == pytest.approx(0.6)


def test_smoother_complete_and_reset() -> None:
    smoother = ProgressSmoother(speed_per_second=1.0)
    smoother.complete()
    assert smoother.display == 1.0
    smoother.reset()
    assert smoother.display == 0.0
    assert smoother.target == 0.0
    with pytest.raises(ValueError):
        ProgressSmoother(speed_per_second=0.0)


def test_progress_label() -> None:
    assert format_progress_label(0.0) == "0%"
    assert format_progress_label(0.456) == "46%"
    assert format_progress_label(1.2) == "100%"
