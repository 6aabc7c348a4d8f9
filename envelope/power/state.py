"""Pure display-hold state transitions."""

from __future__ import annotations

from dataclasses import replace

from envelope.api.power import PowerEvent, PowerState

RELEASED_STATE = PowerState()


def _constrain(state: PowerState, *, foregrounded: bool) -> PowerState:
    allowed = state.gameplay_active and not state.paused and foregrounded
    if state.display_active and not allowed:
        return replace(state, display_active=False)
    return state


def next_power_state(
    state: PowerState,
    event: PowerEvent,
    *,
    foregrounded: bool,
    hold_during_gameplay: bool = True,
) -> PowerState:
    """Return the state after `event`.

    `foregrounded` is the foreground flag after the event has been applied.
    The result never holds the display unless gameplay is active, unpaused
    and foregrounded.
    """
    match event:
        case PowerEvent.GAMEPLAY_STARTED:
            result = PowerState(
                display_active=state.display_active or hold_during_gameplay,
                gameplay_active=True,
                paused=False,
            )
        case PowerEvent.GAMEPLAY_ENDED:
            result = replace(state, gameplay_active=False, display_active=False)
        case PowerEvent.PAUSED:
            result = replace(state, paused=True, display_active=False)
        case PowerEvent.RESUMED:
            restore = hold_during_gameplay and state.gameplay_active
            result = replace(state, paused=False, display_active=state.display_active or restore)
        case PowerEvent.ENTERED_MENU:
            result = RELEASED_STATE
        case PowerEvent.APP_BACKGROUNDED:
            result = replace(state, display_active=False)
        case PowerEvent.APP_FOREGROUNDED:
            restore = hold_during_gameplay and state.gameplay_active and not state.paused
            result = replace(state, display_active=state.display_active or restore)
        case PowerEvent.APP_QUITTING:
            result = replace(state, display_active=False)
        case _:
            raise ValueError(f"unknown power event: {event!r}")
    return _constrain(result, foregrounded=foregrounded)


def format_power_status(state: PowerState, *, foregrounded: bool) -> str:
    return (
        f"display_hold={'on' if state.display_active else 'off'} "
        f"gameplay={state.gameplay_active} paused={state.paused} foregrounded={foregrounded}"
    )
