"""Observability probes for the identity resolver.

The resolver itself never prints; requested values it has to ignore,
and the identity it settles on, are reported through this probe.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from typing import Protocol

import structlog


class IdentityResolutionProbe(Protocol):
    """Protocol for identity resolution observability probes."""

    def username_ignored(self, requested: str, uid: int, existing: str) -> None:
        """Probe emitted when a requested username loses to an existing UID.

        Args:
            requested: The username that was asked for
            uid: The requested UID, which already exists
            existing: The username bound to that UID
        """
        ...

    def group_name_ignored(self, requested: str, gid: int, existing: str) -> None:
        """Probe emitted when a requested group name loses to an existing GID.

        Args:
            requested: The group name that was asked for
            gid: The requested GID, which already exists
            existing: The group name bound to that GID
        """
        ...

    def name_conflict(self, kind: str, name: str, requested_id: int) -> None:
        """Probe emitted when a new id is requested for a name already in use.

        Args:
            kind: "user" or "group"
            name: The existing name
            requested_id: The id that does not exist yet
        """
        ...

    def default_user_reused(self, username: str, uid: int) -> None:
        """Probe emitted when the default user from a previous run is reused."""
        ...

    def identity_resolved(
        self,
        username: str,
        uid: int | None,
        group_name: str,
        gid: int | None,
        create_user: bool,
        create_group: bool,
    ) -> None:
        """Probe emitted with the outcome of resolution."""
        ...


class DefaultIdentityResolutionProbe:
    """Default implementation of IdentityResolutionProbe using structlog."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self._logger = logger or structlog.get_logger()

    def username_ignored(self, requested: str, uid: int, existing: str) -> None:
        self._logger.warning(
            "username_ignored",
            message=(
                f"We have ignored the username you specified, ( {requested} ). "
                f"The UID you specified, ( {uid} ), exists with the username "
                f"( {existing} )."
            ),
            requested_username=requested,
            uid=uid,
            existing_username=existing,
        )

    def group_name_ignored(self, requested: str, gid: int, existing: str) -> None:
        self._logger.warning(
            "group_name_ignored",
            message=(
                f"We have ignored the group name you specified, ( {requested} ). "
                f"The GID you specified, ( {gid} ), exists with the group name "
                f"( {existing} )."
            ),
            requested_group_name=requested,
            gid=gid,
            existing_group_name=existing,
        )

    def name_conflict(self, kind: str, name: str, requested_id: int) -> None:
        self._logger.debug(
            "name_conflict",
            kind=kind,
            name=name,
            requested_id=requested_id,
        )

    def default_user_reused(self, username: str, uid: int) -> None:
        self._logger.debug("default_user_reused", username=username, uid=uid)

    def identity_resolved(
        self,
        username: str,
        uid: int | None,
        group_name: str,
        gid: int | None,
        create_user: bool,
        create_group: bool,
    ) -> None:
        self._logger.debug(
            "identity_resolved",
            username=username,
            uid=uid,
            group_name=group_name,
            gid=gid,
            create_user=create_user,
            create_group=create_group,
        )
