"""Ownership updater.

Hands the requested paths over to the resolved identity before the
command starts.
"""

from __future__ import annotations

from collections.abc import Iterable

from run_non_root.application.observability import (
    DefaultOwnershipProbe,
    OwnershipProbe,
)
from run_non_root.domain.value_objects import ResolvedIdentity
from run_non_root.ports.exceptions import DirectoryCreationError
from run_non_root.ports.host import IOwnershipManager


class OwnershipUpdater:
    """Application service applying non-recursive and recursive chowns.

    Failures to change ownership are warnings; the remaining paths are
    still processed. Failing to create a directory for a recursive
    change is fatal.
    """

    def __init__(
        self,
        ownership: IOwnershipManager,
        probe: OwnershipProbe | None = None,
    ):
        self._ownership = ownership
        self._probe = probe or DefaultOwnershipProbe()

    def update(
        self,
        identity: ResolvedIdentity,
        paths: Iterable[str] = (),
        recursive_paths: Iterable[str] = (),
    ) -> None:
        """Apply both kinds of ownership change, non-recursive first."""
        self.update_paths(identity, paths)
        self.update_recursive_paths(identity, recursive_paths)

    def update_paths(self, identity: ResolvedIdentity, paths: Iterable[str]) -> None:
        """Change ownership of each path without descending into it."""
        owner = identity.user_spec
        for path in paths:
            try:
                self._ownership.chown(path, identity.username, identity.gid)
            except (OSError, LookupError) as e:
                self._probe.ownership_change_failed(
                    path=path, owner=owner, recursive=False, error=e
                )
                continue
            self._probe.ownership_changed(path=path, owner=owner, recursive=False)

    def update_recursive_paths(
        self, identity: ResolvedIdentity, paths: Iterable[str]
    ) -> None:
        """Create each path if needed, then change ownership recursively.

        A path already owned by the resolved uid and gid is skipped.

        Raises:
            DirectoryCreationError: If a path cannot be created
        """
        owner = identity.user_spec
        for path in paths:
            try:
                self._ownership.make_directories(path)
            except OSError as e:
                self._probe.directory_creation_failed(path=path, error=e)
                raise DirectoryCreationError(path, e.strerror or str(e)) from e

            try:
                if self._ownership.owner_of(path) == (identity.uid, identity.gid):
                    self._probe.ownership_already_set(path=path, owner=owner)
                    continue
                self._ownership.chown_recursive(path, identity.username, identity.gid)
            except (OSError, LookupError) as e:
                self._probe.ownership_change_failed(
                    path=path, owner=owner, recursive=True, error=e
                )
                continue
            self._probe.ownership_changed(path=path, owner=owner, recursive=True)
