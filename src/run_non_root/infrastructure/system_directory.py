"""POSIX implementation of IIdentityDirectory.

Backed by the ``pwd`` and ``grp`` modules, so lookups go through the
host's name service switch the same way ``getent`` does.
"""

from __future__ import annotations

import grp
import os
import pwd

from run_non_root.domain.value_objects import GroupRecord, UserRecord
from run_non_root.ports.directory import IIdentityDirectory


def _user(entry: pwd.struct_passwd) -> UserRecord:
    return UserRecord(name=entry.pw_name, uid=entry.pw_uid, gid=entry.pw_gid)


def _group(entry: grp.struct_group) -> GroupRecord:
    return GroupRecord(name=entry.gr_name, gid=entry.gr_gid)


class SystemIdentityDirectory(IIdentityDirectory):
    """Read-only view of /etc/passwd and /etc/group (or their NSS sources)."""

    def user_by_id(self, uid: int) -> UserRecord | None:
        try:
            return _user(pwd.getpwuid(uid))
        except (KeyError, OverflowError):
            return None

    def user_by_name(self, name: str) -> UserRecord | None:
        if not name:
            return None
        try:
            return _user(pwd.getpwnam(name))
        except KeyError:
            return None

    def group_by_id(self, gid: int) -> GroupRecord | None:
        try:
            return _group(grp.getgrgid(gid))
        except (KeyError, OverflowError):
            return None

    def group_by_name(self, name: str) -> GroupRecord | None:
        if not name:
            return None
        try:
            return _group(grp.getgrnam(name))
        except KeyError:
            return None

    def current_username(self) -> str:
        euid = os.geteuid()
        record = self.user_by_id(euid)
        if record is None:
            return str(euid)
        return record.name
