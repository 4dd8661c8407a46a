"""Protocol for identity materializer observability.

Defines the interface for domain probes that capture group and user
creation performed by the identity materializer.
"""

from __future__ import annotations

from typing import Protocol

import structlog


class MaterializerProbe(Protocol):
    """Domain probe for identity materialization."""

    def group_creating(self, group_name: str, gid: int | None) -> None:
        """Record that a group is about to be created."""
        ...

    def group_created(self, group_name: str, gid: int) -> None:
        """Record that a group was created."""
        ...

    def group_creation_failed(self, group_name: str, gid: int | None) -> None:
        """Record that group creation failed."""
        ...

    def default_group_reused(self, group_name: str, gid: int) -> None:
        """Record that the default group from a previous run was reused."""
        ...

    def user_creating(self, username: str, uid: int | None, gid: int) -> None:
        """Record that a user is about to be created."""
        ...

    def user_created(self, username: str, uid: int, gid: int) -> None:
        """Record that a user was created."""
        ...

    def user_creation_failed(self, username: str, uid: int | None) -> None:
        """Record that user creation failed."""
        ...


class DefaultMaterializerProbe:
    """Default implementation of MaterializerProbe using structlog."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self._logger = logger or structlog.get_logger()

    def group_creating(self, group_name: str, gid: int | None) -> None:
        """Record that a group is about to be created."""
        self._logger.debug("group_creating", group_name=group_name, gid=gid)

    def group_created(self, group_name: str, gid: int) -> None:
        """Record that a group was created."""
        self._logger.info("group_created", group_name=group_name, gid=gid)

    def group_creation_failed(self, group_name: str, gid: int | None) -> None:
        """Record that group creation failed."""
        self._logger.error("group_creation_failed", group_name=group_name, gid=gid)

    def default_group_reused(self, group_name: str, gid: int) -> None:
        """Record that the default group from a previous run was reused."""
        self._logger.debug("default_group_reused", group_name=group_name, gid=gid)

    def user_creating(self, username: str, uid: int | None, gid: int) -> None:
        """Record that a user is about to be created."""
        self._logger.debug("user_creating", username=username, uid=uid, gid=gid)

    def user_created(self, username: str, uid: int, gid: int) -> None:
        """Record that a user was created."""
        self._logger.info("user_created", username=username, uid=uid, gid=gid)

    def user_creation_failed(self, username: str, uid: int | None) -> None:
        """Record that user creation failed."""
        self._logger.error("user_creation_failed", username=username, uid=uid)
