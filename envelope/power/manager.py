"""Display-hold arbitration by gameplay phase and app lifecycle."""

from __future__ import annotations

import logging

from envelope.api.power import DisplayHold, PowerEvent, PowerState
from envelope.power.state import RELEASED_STATE, format_power_status, next_power_state
from envelope.runtime.config import PowerConfig
from envelope.runtime.errors import call_best_effort
from envelope.runtime.registry import SingletonManager

_LOG = logging.getLogger("envelope.power")


class PowerStateManager(SingletonManager):
    """Holds the keep-display-active flag only during foreground gameplay.

    The hold is released unconditionally on activation, on quit and on
    teardown, whatever the tracked state says.
    """

    def __init__(self, display_hold: DisplayHold, *, config: PowerConfig | None = None) -> None:
        super().__init__()
        self._config = config or PowerConfig()
        self._display_hold = display_hold
        self._state = RELEASED_STATE
        self._foregrounded = True

    @property
    def state(self) -> PowerState:
        return self._state

    @property
    def foregrounded(self) -> bool:
        return self._foregrounded

    @property
    def is_display_active(self) -> bool:
        return self._state.display_active

    def status(self) -> str:
        return format_power_status(self._state, foregrounded=self._foregrounded)

    def handle(self, event: PowerEvent) -> PowerState:
        """Apply one event and push the hold flag if it changed."""
        if event is PowerEvent.APP_BACKGROUNDED:
            self._foregrounded = False
        elif event is PowerEvent.APP_FOREGROUNDED:
            self._foregrounded = True
        previous = self._state
        self._state = next_power_state(
            previous,
            event,
            foregrounded=self._foregrounded,
            hold_during_gameplay=self._config.hold_only_during_gameplay,
        )
        _LOG.debug("power_event event=%s %s", event, self.status())
        if event is PowerEvent.APP_QUITTING:
            self._push_hold(False)
        elif self._state.display_active != previous.display_active:
            self._push_hold(self._state.display_active)
        return self._state

    def on_gameplay_started(self) -> PowerState:
        return self.handle(PowerEvent.GAMEPLAY_STARTED)

    def on_gameplay_ended(self) -> PowerState:
        return self.handle(PowerEvent.GAMEPLAY_ENDED)

    def on_paused(self) -> PowerState:
        return self.handle(PowerEvent.PAUSED)

    def on_resumed(self) -> PowerState:
        return self.handle(PowerEvent.RESUMED)

    def on_menu_screen(self) -> PowerState:
        return self.handle(PowerEvent.ENTERED_MENU)

    def on_application_pause(self, paused: bool) -> PowerState:
        """Platform lifecycle hook: True when the app moves to the background."""
        return self.handle(PowerEvent.APP_BACKGROUNDED if paused else PowerEvent.APP_FOREGROUNDED)

    def on_application_quit(self) -> PowerState:
        return self.handle(PowerEvent.APP_QUITTING)

    def force_release(self) -> PowerState:
        """Drop all gameplay state and the hold, for error-recovery callers."""
        self._state = RELEASED_STATE
        _LOG.info("power_force_release")
        self._push_hold(False)
        return self._state

    def _push_hold(self, active: bool) -> None:
        if call_best_effort(
            _LOG,
            f"display_hold_update_failed active={active}",
            lambda: self._display_hold.set_keep_display_active(active),
        ):
            _LOG.info("display_hold_%s", "acquired" if active else "released")

    def _on_activate(self) -> None:
        self._state = RELEASED_STATE
        self._push_hold(False)

    def _on_teardown(self) -> None:
        self._state = RELEASED_STATE
        self._push_hold(False)
