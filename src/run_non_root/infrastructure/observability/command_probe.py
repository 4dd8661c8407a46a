"""Domain probes for external command execution.

Account creation and tool installation shell out to system utilities;
this probe records what ran and how it ended without exposing logging
details to the adapters.
"""

from __future__ import annotations

from typing import Protocol

import structlog


class CommandProbe(Protocol):
    """Domain probe for external commands run by infrastructure adapters."""

    def command_executing(self, argv: list[str]) -> None:
        """Record that an external command is about to run."""
        ...

    def command_succeeded(self, argv: list[str]) -> None:
        """Record that an external command exited with status zero."""
        ...

    def command_failed(self, argv: list[str], returncode: int, stderr: str) -> None:
        """Record that an external command exited with a non-zero status."""
        ...

    def command_not_found(self, argv: list[str]) -> None:
        """Record that the program of an external command does not exist."""
        ...

    def command_not_started(self, argv: list[str], error: str) -> None:
        """Record that an external command exists but could not be started."""
        ...

    def tool_missing(self, tool: str, package_manager: str | None) -> None:
        """Record that a required tool is missing and how it will be installed."""
        ...

    def tool_install_failed(self, tool: str, error: str) -> None:
        """Record that installing a tool failed outside of a command."""
        ...


class DefaultCommandProbe:
    """Default implementation of CommandProbe using structlog."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self._logger = logger or structlog.get_logger()

    def command_executing(self, argv: list[str]) -> None:
        """Record that an external command is about to run."""
        self._logger.debug("command_executing", command=" ".join(argv))

    def command_succeeded(self, argv: list[str]) -> None:
        """Record that an external command exited with status zero."""
        self._logger.debug("command_succeeded", command=" ".join(argv))

    def command_failed(self, argv: list[str], returncode: int, stderr: str) -> None:
        """Record that an external command exited with a non-zero status."""
        self._logger.error(
            "command_failed",
            command=" ".join(argv),
            returncode=returncode,
            stderr=stderr.strip(),
        )

    def command_not_found(self, argv: list[str]) -> None:
        """Record that the program of an external command does not exist."""
        self._logger.error("command_not_found", command=" ".join(argv))

    def command_not_started(self, argv: list[str], error: str) -> None:
        """Record that an external command exists but could not be started."""
        self._logger.error("command_not_started", command=" ".join(argv), error=error)

    def tool_missing(self, tool: str, package_manager: str | None) -> None:
        """Record that a required tool is missing and how it will be installed."""
        self._logger.info("tool_missing", tool=tool, package_manager=package_manager)

    def tool_install_failed(self, tool: str, error: str) -> None:
        """Record that installing a tool failed outside of a command."""
        self._logger.warning("tool_install_failed", tool=tool, error=error)
