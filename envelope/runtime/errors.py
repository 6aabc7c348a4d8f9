"""Shared runtime exception policy helpers."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TypeAlias

# Bounded set tolerated at collaborator boundaries; anything else propagates.
RecoverableRuntimeErrors: TypeAlias = tuple[type[BaseException], ...]
RECOVERABLE_RUNTIME_ERRORS: RecoverableRuntimeErrors = (
    RuntimeError,
    OSError,
    ValueError,
    TypeError,
    AttributeError,
)


class SceneLoadError(RuntimeError):
    """Raised to callers when the external loader could not complete a scene load."""

    def __init__(self, target: object, cause: BaseException | None = None) -> None:
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"scene load failed for {target!r}{detail}")
        self.target = target
        self.cause = cause


def log_recoverable(
    logger: logging.Logger,
    message: str,
    *,
    level: int = logging.DEBUG,
) -> None:
    """Emit structured observability for tolerated recoverable exceptions."""
    logger.log(level, message, exc_info=True)


def call_best_effort(
    logger: logging.Logger,
    message: str,
    action: Callable[[], None],
    *,
    level: int = logging.WARNING,
) -> bool:
    """Run a collaborator call whose failure must not reach the caller.

    Returns whether the call completed. Recoverable failures are logged with
    traceback; anything outside `RECOVERABLE_RUNTIME_ERRORS` propagates.
    """
    try:
        action()
    except RECOVERABLE_RUNTIME_ERRORS:
        log_recoverable(logger, message, level=level)
        return False
    return True
