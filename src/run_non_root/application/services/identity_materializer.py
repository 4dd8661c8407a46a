"""Identity materializer.

Creates the group and/or user a ResolvedIdentity asks for and reads
back any ids the host assigned.
"""

from __future__ import annotations

from dataclasses import replace

from run_non_root.application.observability import (
    DefaultMaterializerProbe,
    MaterializerProbe,
)
from run_non_root.domain.value_objects import DEFAULT_NAME, ResolvedIdentity
from run_non_root.ports.directory import IIdentityDirectory
from run_non_root.ports.exceptions import GroupCreationError, UserCreationError
from run_non_root.ports.host import IAccountProvisioner, IToolInstaller

LOGIN_SHELL = "/bin/sh"


class IdentityMaterializer:
    """Application service that writes the resolved identity to the host.

    Freshly minted identities keep their UID and GID equal where
    possible: a group created without an explicit GID reuses the UID,
    and a user created without an explicit UID reuses the GID, as long
    as that id is still free.
    """

    def __init__(
        self,
        directory: IIdentityDirectory,
        provisioner: IAccountProvisioner,
        tools: IToolInstaller | None = None,
        probe: MaterializerProbe | None = None,
    ):
        """Initialize IdentityMaterializer with dependencies.

        Args:
            directory: Host user/group lookups, used to pick defaults and
                read back assigned ids
            provisioner: Group and user creation primitives
            tools: Optional installer for missing groupadd/useradd
            probe: Optional domain probe for observability
        """
        self._directory = directory
        self._provisioner = provisioner
        self._tools = tools
        self._probe = probe or DefaultMaterializerProbe()

    def materialize(self, resolved: ResolvedIdentity) -> ResolvedIdentity:
        """Create whatever ``resolved`` flags, group first, then user."""
        if resolved.create_group:
            resolved = self.materialize_group(resolved)
        if resolved.create_user:
            resolved = self.materialize_user(resolved)
        return resolved

    def materialize_group(self, resolved: ResolvedIdentity) -> ResolvedIdentity:
        """Create the group for ``resolved`` and return it with the final GID.

        Raises:
            GroupCreationError: If the creation primitive fails
        """
        group_name = resolved.group_name
        gid = resolved.gid

        if not group_name:
            taken = self._directory.group_by_name(resolved.username)
            if taken is None:
                group_name = resolved.username
            elif resolved.username == DEFAULT_NAME:
                # The default group survives from a previous run.
                self._probe.default_group_reused(group_name=taken.name, gid=taken.gid)
                return replace(
                    resolved, gid=taken.gid, group_name=taken.name, create_group=False
                )
            else:
                group_name = DEFAULT_NAME

        if (
            gid is None
            and resolved.uid is not None
            and self._directory.group_by_id(resolved.uid) is None
        ):
            gid = resolved.uid

        if self._tools is not None:
            self._tools.ensure_account_tools()

        self._probe.group_creating(group_name=group_name, gid=gid)
        if not self._provisioner.create_group(group_name, gid=gid):
            self._probe.group_creation_failed(group_name=group_name, gid=gid)
            raise GroupCreationError(group_name, gid)

        if gid is None:
            created = self._directory.group_by_name(group_name)
            if created is None:
                self._probe.group_creation_failed(group_name=group_name, gid=gid)
                raise GroupCreationError(group_name)
            gid = created.gid

        self._probe.group_created(group_name=group_name, gid=gid)
        return replace(resolved, gid=gid, group_name=group_name, create_group=False)

    def materialize_user(self, resolved: ResolvedIdentity) -> ResolvedIdentity:
        """Create the user for ``resolved`` and return it with the final UID.

        The group must already be materialized.

        Raises:
            UserCreationError: If the creation primitive fails
        """
        if resolved.gid is None:
            raise ValueError("The group must be materialized before the user")

        uid = resolved.uid
        if uid is None and self._directory.user_by_id(resolved.gid) is None:
            uid = resolved.gid

        if self._tools is not None:
            self._tools.ensure_account_tools()

        self._probe.user_creating(username=resolved.username, uid=uid, gid=resolved.gid)
        created = self._provisioner.create_user(
            resolved.username,
            gid=resolved.gid,
            uid=uid,
            shell=LOGIN_SHELL,
            create_home=True,
        )
        if not created:
            self._probe.user_creation_failed(username=resolved.username, uid=uid)
            raise UserCreationError(resolved.username, uid)

        if uid is None:
            record = self._directory.user_by_name(resolved.username)
            if record is None:
                self._probe.user_creation_failed(username=resolved.username, uid=uid)
                raise UserCreationError(resolved.username)
            uid = record.uid

        self._probe.user_created(username=resolved.username, uid=uid, gid=resolved.gid)
        return replace(resolved, uid=uid, create_user=False)
