"""Protocol for privilege-drop executor observability.

Defines the interface for domain probes that capture the state
transitions of the executor up to the final process replacement.
"""

from __future__ import annotations

from typing import Protocol

import structlog


class ExecutorProbe(Protocol):
    """Domain probe for the privilege-drop executor."""

    def identity_checked(self, current_user: str, is_superuser: bool) -> None:
        """Record the effective user the executor started as."""
        ...

    def options_ignored(self, current_user: str) -> None:
        """Record that identity options were ignored for a non-root caller."""
        ...

    def replacing_process(self, argv: list[str]) -> None:
        """Record the argument vector about to replace this process."""
        ...


class DefaultExecutorProbe:
    """Default implementation of ExecutorProbe using structlog."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self._logger = logger or structlog.get_logger()

    def identity_checked(self, current_user: str, is_superuser: bool) -> None:
        """Record the effective user the executor started as."""
        self._logger.debug(
            "identity_checked", current_user=current_user, is_superuser=is_superuser
        )

    def options_ignored(self, current_user: str) -> None:
        """Record that identity options were ignored for a non-root caller."""
        self._logger.warning(
            "options_ignored",
            message=(
                "You are already running as a non-root user. "
                "We have ignored all group and user options."
            ),
            current_user=current_user,
        )

    def replacing_process(self, argv: list[str]) -> None:
        """Record the argument vector about to replace this process."""
        self._logger.debug("replacing_process", argv=argv)
