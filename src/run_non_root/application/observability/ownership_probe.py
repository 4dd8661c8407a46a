"""Protocol for ownership updater observability."""

from __future__ import annotations

from typing import Protocol

import structlog


class OwnershipProbe(Protocol):
    """Domain probe for filesystem ownership updates."""

    def ownership_changed(self, path: str, owner: str, recursive: bool) -> None:
        """Record that ownership of a path was changed."""
        ...

    def ownership_change_failed(
        self, path: str, owner: str, recursive: bool, error: Exception
    ) -> None:
        """Record that changing ownership of a path failed (non-fatal)."""
        ...

    def ownership_already_set(self, path: str, owner: str) -> None:
        """Record that a recursive change was skipped because it is not needed."""
        ...

    def directory_creation_failed(self, path: str, error: Exception) -> None:
        """Record that a directory for recursive ownership could not be made."""
        ...


class DefaultOwnershipProbe:
    """Default implementation of OwnershipProbe using structlog."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self._logger = logger or structlog.get_logger()

    def ownership_changed(self, path: str, owner: str, recursive: bool) -> None:
        self._logger.debug(
            "ownership_changed", path=path, owner=owner, recursive=recursive
        )

    def ownership_change_failed(
        self, path: str, owner: str, recursive: bool, error: Exception
    ) -> None:
        self._logger.warning(
            "ownership_change_failed",
            message=f"We could not change the ownership of ( {path} ) to ( {owner} ).",
            path=path,
            owner=owner,
            recursive=recursive,
            error=str(error),
        )

    def ownership_already_set(self, path: str, owner: str) -> None:
        self._logger.info(
            "ownership_already_set",
            message=f"( {path} ) is already owned by ( {owner} ); skipping.",
            path=path,
            owner=owner,
        )

    def directory_creation_failed(self, path: str, error: Exception) -> None:
        self._logger.error("directory_creation_failed", path=path, error=str(error))
