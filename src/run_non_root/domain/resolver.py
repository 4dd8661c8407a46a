"""Identity resolver.

Reconciles a partially specified identity request against a snapshot of
the host's user and group databases, deciding what the final identity
is and whether a user and/or group has to be created.

Ids take priority over names: an existing id is authoritative, and a
requested id that clashes with an existing name leads to a freshly
created, safely named entity rather than an alias.
"""

from __future__ import annotations

from dataclasses import dataclass

from run_non_root.domain.observability import (
    DefaultIdentityResolutionProbe,
    IdentityResolutionProbe,
)
from run_non_root.domain.value_objects import (
    DEFAULT_NAME,
    IdentityRequest,
    ResolvedIdentity,
    SystemIdentitySnapshot,
    UserRecord,
)


@dataclass(frozen=True)
class _UserOutcome:
    uid: int | None
    username: str
    create_user: bool
    record: UserRecord | None


class IdentityResolver:
    """Deterministic, read-only decision procedure for the target identity."""

    def __init__(self, probe: IdentityResolutionProbe | None = None):
        self._probe = probe or DefaultIdentityResolutionProbe()

    def resolve(
        self, request: IdentityRequest, snapshot: SystemIdentitySnapshot
    ) -> ResolvedIdentity:
        """Resolve ``request`` against ``snapshot``.

        The user side is resolved first; the group side depends on whether
        a user will be created and on the final username.

        Returns:
            A ResolvedIdentity with a non-empty username. Ids may still be
            None when the matching creation flag is set.
        """
        user = self._resolve_user(request, snapshot)
        gid, group_name, create_group = self._resolve_group(request, snapshot, user)

        self._probe.identity_resolved(
            username=user.username,
            uid=user.uid,
            group_name=group_name,
            gid=gid,
            create_user=user.create_user,
            create_group=create_group,
        )
        return ResolvedIdentity(
            uid=user.uid,
            username=user.username,
            gid=gid,
            group_name=group_name,
            create_user=user.create_user,
            create_group=create_group,
        )

    def _resolve_user(
        self, request: IdentityRequest, snapshot: SystemIdentitySnapshot
    ) -> _UserOutcome:
        uid = request.uid
        username = request.username
        create_user = False
        record: UserRecord | None = None

        if snapshot.user_by_id is not None:
            record = snapshot.user_by_id
            if username and username != record.name:
                self._probe.username_ignored(
                    requested=username, uid=record.uid, existing=record.name
                )
            username = record.name
        elif snapshot.user_by_name is not None:
            if uid is None:
                record = snapshot.user_by_name
                uid = record.uid
            else:
                self._probe.name_conflict(
                    kind="user", name=username, requested_id=uid
                )
                username = DEFAULT_NAME
                create_user = True
        else:
            if not username:
                username = DEFAULT_NAME
            create_user = True

        # A previous run may already have created the default user.
        if (
            create_user
            and username == DEFAULT_NAME
            and snapshot.default_user is not None
        ):
            record = snapshot.default_user
            uid = record.uid
            create_user = False
            self._probe.default_user_reused(username=username, uid=uid)

        return _UserOutcome(
            uid=uid, username=username, create_user=create_user, record=record
        )

    def _resolve_group(
        self,
        request: IdentityRequest,
        snapshot: SystemIdentitySnapshot,
        user: _UserOutcome,
    ) -> tuple[int | None, str, bool]:
        gid = request.gid
        group_name = request.group_name
        create_group = False

        if snapshot.group_by_id is not None:
            existing = snapshot.group_by_id
            if group_name and group_name != existing.name:
                self._probe.group_name_ignored(
                    requested=group_name, gid=existing.gid, existing=existing.name
                )
            group_name = existing.name
        elif snapshot.group_by_name is not None:
            if gid is None:
                gid = snapshot.group_by_name.gid
            else:
                self._probe.name_conflict(
                    kind="group", name=group_name, requested_id=gid
                )
                group_name = ""
                create_group = True
        elif (
            not user.create_user
            and user.record is not None
            and gid is None
            and not group_name
        ):
            primary = snapshot.primary_group(user.record)
            gid = primary.gid
            group_name = primary.name
        else:
            create_group = True

        return gid, group_name, create_group
