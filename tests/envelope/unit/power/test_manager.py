from __future__ import annotations

from itertools import product

from envelope.api.power import PowerEvent
from envelope.power.manager import PowerStateManager
from envelope.runtime.config import PowerConfig
from envelope.runtime.registry import RuntimeManagerRegistry
from tests.envelope.conftest import FakeDisplayHold


def _manager(hold: FakeDisplayHold, **kwargs: object) -> PowerStateManager:
    manager = PowerStateManager(hold, **kwargs)  # type: ignore[arg-type]
    assert manager.activate(RuntimeManagerRegistry())
    return manager


def test_activation_releases_hold_unconditionally() -> None:
    hold = FakeDisplayHold()
    _manager(hold)
    assert hold.calls == [False]


def test_hold_follows_gameplay_and_app_lifecycle() -> None:
    hold = FakeDisplayHold()
    manager = _manager(hold)

    manager.on_gameplay_started()
    assert manager.is_display_active
    manager.on_application_pause(True)
    assert not hold.active
    manager.on_application_pause(False)
    assert hold.active
    manager.on_paused()
    manager.on_resumed()
    manager.on_menu_screen()

    assert hold.calls == [False, True, False, True, False, True, False]


def test_hold_is_only_pushed_on_change() -> None:
    hold = FakeDisplayHold()
    manager = _manager(hold)
    manager.on_gameplay_started()
    manager.on_gameplay_started()
    manager.on_resumed()
    assert hold.calls == [False, True]


def test_quit_and_teardown_always_release() -> None:
    hold = FakeDisplayHold()
    manager = _manager(hold)
    manager.on_application_quit()
    manager.teardown()
    assert hold.calls == [False, False, False]


def test_force_release_resets_state() -> None:
    hold = FakeDisplayHold()
    manager = _manager(hold)
    manager.on_gameplay_started()
    manager.on_paused()

    manager.force_release()

    assert not manager.state.gameplay_active
    assert not manager.state.paused
    assert hold.calls[-1] is False
    assert manager.status() == "display_hold=off gameplay=False paused=False foregrounded=True"


def test_hold_flag_matches_state_for_all_event_sequences() -> None:
    events = tuple(PowerEvent)
    for sequence in product(events, repeat=3):
        hold = FakeDisplayHold()
        manager = _manager(hold)
        for event in sequence:
            state = manager.handle(event)
            assert hold.active == state.display_active, sequence
            if state.display_active:
                assert manager.foregrounded, sequence


def test_gameplay_hold_policy_can_be_disabled() -> None:
    hold = FakeDisplayHold()
    manager = _manager(hold, config=PowerConfig(hold_only_during_gameplay=False))
    manager.on_gameplay_started()
    assert not manager.is_display_active
    assert hold.calls == [False]


def test_duplicate_manager_is_rejected_without_touching_hold() -> None:
    registry = RuntimeManagerRegistry()
    first_hold = FakeDisplayHold()
    second_hold = FakeDisplayHold()
    first = PowerStateManager(first_hold)
    second = PowerStateManager(second_hold)

    assert first.activate(registry)
    assert not second.activate(registry)

    assert registry.get(PowerStateManager.token()) is first
    assert second_hold.calls == []
    first.on_gameplay_started()
    assert first_hold.active


def test_failing_display_hold_is_tolerated() -> None:
    class _BrokenHold:
        def set_keep_display_active(self, active: bool) -> None:
            raise RuntimeError("window gone")

    manager = PowerStateManager(_BrokenHold())
    assert manager.activate(RuntimeManagerRegistry())
    assert manager.on_gameplay_started().display_active


def test_disabled_gameplay_hold_stays_off_through_resume_and_foreground() -> None:
    hold = FakeDisplayHold()
    manager = _manager(hold, config=PowerConfig(hold_only_during_gameplay=False))
    manager.on_gameplay_started()
    manager.on_paused()
    manager.on_resumed()
    manager.on_application_pause(True)
    manager.on_application_pause(False)
    assert not manager.is_display_active
    assert True not in hold.calls
