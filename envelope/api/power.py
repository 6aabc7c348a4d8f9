"""Public display-power API contracts."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol


class PowerEvent(StrEnum):
    GAMEPLAY_STARTED = "gameplay_started"
    GAMEPLAY_ENDED = "gameplay_ended"
    PAUSED = "paused"
    RESUMED = "resumed"
    ENTERED_MENU = "entered_menu"
    APP_BACKGROUNDED = "app_backgrounded"
    APP_FOREGROUNDED = "app_foregrounded"
    APP_QUITTING = "app_quitting"


@dataclass(frozen=True, slots=True)
class PowerState:
    """Display-hold state; display_active implies active, unpaused, foregrounded gameplay."""

    display_active: bool = False
    gameplay_active: bool = False
    paused: bool = False


class DisplayHold(Protocol):
    """Platform primitive keeping the display powered on."""

    def set_keep_display_active(self, active: bool) -> None:
        """Hold or release the keep-display-active flag."""
