"""Display-hold arbitration."""

from envelope.power.manager import PowerStateManager
from envelope.power.state import next_power_state

__all__ = ["PowerStateManager", "next_power_state"]
