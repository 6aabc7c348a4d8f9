"""Process-wide manager registry with one-active-instance enforcement."""

from __future__ import annotations

import logging
from typing import ClassVar, cast

from envelope.api.lifecycle import ManagerLifecycle, ManagerRegistry

_LOG = logging.getLogger("envelope.lifecycle")


class RuntimeManagerRegistry:
    """Registry mapping a token to its single authoritative instance."""

    def __init__(self) -> None:
        self._instances: dict[object, object] = {}

    def claim(self, token: object, instance: object) -> bool:
        current = self._instances.get(token)
        if current is not None and current is not instance:
            return False
        self._instances[token] = instance
        return True

    def release(self, token: object, instance: object) -> None:
        if self._instances.get(token) is instance:
            del self._instances[token]

    def get(self, token: object) -> object | None:
        return self._instances.get(token)

    def require[TManager](self, token: type[TManager]) -> TManager:
        instance = self._instances.get(token)
        if instance is None:
            raise KeyError(f"no active manager: {getattr(token, '__qualname__', str(token))}")
        return cast(TManager, instance)

    def tokens(self) -> tuple[object, ...]:
        return tuple(self._instances)


class SingletonManager:
    """Base for managers with an explicit activate/teardown contract.

    A second instance activated against a registry that already holds an
    active one is rejected and torn down; the first stays authoritative.
    """

    registry_token: ClassVar[object | None] = None

    def __init__(self) -> None:
        self._lifecycle = ManagerLifecycle.UNINITIALIZED
        self._registry: ManagerRegistry | None = None

    @classmethod
    def token(cls) -> object:
        return cls.registry_token if cls.registry_token is not None else cls

    @property
    def lifecycle(self) -> ManagerLifecycle:
        return self._lifecycle

    @property
    def is_active(self) -> bool:
        return self._lifecycle is ManagerLifecycle.ACTIVE

    def activate(self, registry: ManagerRegistry) -> bool:
        if self._lifecycle is ManagerLifecycle.ACTIVE:
            return True
        if self._lifecycle is ManagerLifecycle.TORN_DOWN:
            return False
        if not registry.claim(self.token(), self):
            _LOG.warning("manager_duplicate_rejected manager=%s", type(self).__name__)
            self.teardown()
            return False
        self._registry = registry
        self._lifecycle = ManagerLifecycle.ACTIVE
        _LOG.info("manager_active manager=%s", type(self).__name__)
        self._on_activate()
        return True

    def teardown(self) -> None:
        if self._lifecycle is ManagerLifecycle.TORN_DOWN:
            return
        was_active = self._lifecycle is ManagerLifecycle.ACTIVE
        self._lifecycle = ManagerLifecycle.TORN_DOWN
        if not was_active:
            return
        try:
            self._on_teardown()
        finally:
            if self._registry is not None:
                self._registry.release(self.token(), self)
                self._registry = None
            _LOG.info("manager_torn_down manager=%s", type(self).__name__)

    def _on_activate(self) -> None:
        """Hook run once after the registry slot is claimed."""

    def _on_teardown(self) -> None:
        """Hook run once when an active manager is torn down."""
