"""Capture of the host identity state used by the resolver."""

from __future__ import annotations

from run_non_root.domain.value_objects import (
    DEFAULT_NAME,
    GroupRecord,
    IdentityRequest,
    SystemIdentitySnapshot,
)
from run_non_root.ports.directory import IIdentityDirectory


def capture_snapshot(
    directory: IIdentityDirectory, request: IdentityRequest
) -> SystemIdentitySnapshot:
    """Query the directory once for everything resolution may need.

    Values that were not requested are not looked up.
    """
    user_by_id = directory.user_by_id(request.uid) if request.uid is not None else None
    user_by_name = (
        directory.user_by_name(request.username) if request.username else None
    )
    group_by_id = (
        directory.group_by_id(request.gid) if request.gid is not None else None
    )
    group_by_name = (
        directory.group_by_name(request.group_name) if request.group_name else None
    )
    default_user = directory.user_by_name(DEFAULT_NAME)

    primary_groups: dict[int, GroupRecord] = {}
    for user in (user_by_id, user_by_name, default_user):
        if user is None or user.gid in primary_groups:
            continue
        group = directory.group_by_id(user.gid)
        if group is not None:
            primary_groups[user.gid] = group

    return SystemIdentitySnapshot(
        user_by_id=user_by_id,
        user_by_name=user_by_name,
        group_by_id=group_by_id,
        group_by_name=group_by_name,
        default_user=default_user,
        primary_groups=primary_groups,
    )
