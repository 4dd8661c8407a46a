"""Identity directory protocol (port).

Read-only queries against the host's user and group databases.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from run_non_root.domain.value_objects import GroupRecord, UserRecord


@runtime_checkable
class IIdentityDirectory(Protocol):
    """Lookups against the host's user and group records.

    Every method returns None when no matching record exists.
    """

    def user_by_id(self, uid: int) -> UserRecord | None:
        """Look up a user by numeric id."""
        ...

    def user_by_name(self, name: str) -> UserRecord | None:
        """Look up a user by username."""
        ...

    def group_by_id(self, gid: int) -> GroupRecord | None:
        """Look up a group by numeric id."""
        ...

    def group_by_name(self, name: str) -> GroupRecord | None:
        """Look up a group by name."""
        ...

    def current_username(self) -> str:
        """Return the name of the effective user of this process.

        Falls back to the numeric id as a string when the effective uid
        has no entry in the user database.
        """
        ...
