"""POSIX implementation of IOwnershipManager."""

from __future__ import annotations

import os
import pwd
import shutil

from run_non_root.ports.host import IOwnershipManager


def _raise(error: OSError) -> None:
    raise error


class PosixOwnershipManager(IOwnershipManager):
    """Changes ownership with ``os.chown``; symbolic links are not followed
    during recursive walks."""

    def owner_of(self, path: str) -> tuple[int, int]:
        info = os.stat(path)
        return info.st_uid, info.st_gid

    def chown(self, path: str, user: str, gid: int) -> None:
        shutil.chown(path, user=user, group=gid)

    def chown_recursive(self, path: str, user: str, gid: int) -> None:
        uid = pwd.getpwnam(user).pw_uid

        os.chown(path, uid, gid)
        for root, dirs, files in os.walk(path, onerror=_raise):
            for name in dirs + files:
                os.chown(os.path.join(root, name), uid, gid, follow_symlinks=False)

    def make_directories(self, path: str) -> None:
        os.makedirs(path, exist_ok=True)
