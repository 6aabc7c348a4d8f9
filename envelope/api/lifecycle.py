"""Public manager lifecycle contracts."""

from __future__ import annotations

from enum import StrEnum
from typing import Protocol


class ManagerLifecycle(StrEnum):
    UNINITIALIZED = "uninitialized"
    ACTIVE = "active"
    TORN_DOWN = "torn_down"


class ManagerRegistry(Protocol):
    """Process-wide registry holding at most one active instance per token."""

    def claim(self, token: object, instance: object) -> bool:
        """Register `instance` as active for `token`; False if one is already active."""

    def release(self, token: object, instance: object) -> None:
        """Drop `instance` if it is the active entry for `token`."""

    def get(self, token: object) -> object | None:
        """Return active instance for `token`, if any."""


class ManagedComponent(Protocol):
    """Singleton manager with an explicit activate/teardown contract."""

    @property
    def lifecycle(self) -> ManagerLifecycle:
        """Return current lifecycle stage."""

    def activate(self, registry: ManagerRegistry) -> bool:
        """Claim the registry slot; a rejected instance tears itself down."""

    def teardown(self) -> None:
        """Release resources and the registry slot."""


def create_manager_registry() -> ManagerRegistry:
    """Create default registry implementation."""
    from envelope.runtime.registry import RuntimeManagerRegistry

    return RuntimeManagerRegistry()
