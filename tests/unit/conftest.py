"""Unit test fixtures with in-memory stand-ins for the host system."""

from unittest.mock import create_autospec

import pytest

from run_non_root.domain.value_objects import GroupRecord, UserRecord
from run_non_root.ports.host import IOwnershipManager, IProcessReplacer, IToolInstaller


class FakeIdentityDirectory:
    """In-memory user and group databases."""

    def __init__(self, current_user: str = "root"):
        self.users: dict[str, UserRecord] = {}
        self.groups: dict[str, GroupRecord] = {}
        self.current_user = current_user

    def add_user(self, name: str, uid: int, gid: int) -> UserRecord:
        record = UserRecord(name=name, uid=uid, gid=gid)
        self.users[name] = record
        return record

    def add_group(self, name: str, gid: int) -> GroupRecord:
        record = GroupRecord(name=name, gid=gid)
        self.groups[name] = record
        return record

    def user_by_id(self, uid):
        return next((u for u in self.users.values() if u.uid == uid), None)

    def user_by_name(self, name):
        return self.users.get(name)

    def group_by_id(self, gid):
        return next((g for g in self.groups.values() if g.gid == gid), None)

    def group_by_name(self, name):
        return self.groups.get(name)

    def current_username(self):
        return self.current_user


class FakeAccountProvisioner:
    """Behaves like groupadd/useradd against a FakeIdentityDirectory.

    Creation fails on duplicate names or ids, and ids are assigned from
    1000 upwards when none is given.
    """

    def __init__(self, directory: FakeIdentityDirectory):
        self.directory = directory
        self.calls: list[tuple] = []

    def _next_id(self, taken: set[int]) -> int:
        candidate = 1000
        while candidate in taken:
            candidate += 1
        return candidate

    def create_group(self, name, gid=None):
        self.calls.append(("group", name, gid))
        if name in self.directory.groups:
            return False
        if gid is not None and self.directory.group_by_id(gid) is not None:
            return False
        if gid is None:
            gid = self._next_id({g.gid for g in self.directory.groups.values()})
        self.directory.add_group(name, gid)
        return True

    def create_user(self, name, gid, uid=None, shell="/bin/sh", create_home=True):
        self.calls.append(("user", name, uid, gid))
        if name in self.directory.users:
            return False
        if uid is not None and self.directory.user_by_id(uid) is not None:
            return False
        if uid is None:
            uid = self._next_id({u.uid for u in self.directory.users.values()})
        self.directory.add_user(name, uid, gid)
        return True


@pytest.fixture
def directory():
    """Provide a directory holding only root, running as root."""
    fake = FakeIdentityDirectory()
    fake.add_user("root", 0, 0)
    fake.add_group("root", 0)
    return fake


@pytest.fixture
def provisioner(directory):
    """Provide a provisioner bound to the fake directory."""
    return FakeAccountProvisioner(directory)


@pytest.fixture
def mock_ownership():
    """Provide a mocked ownership manager."""
    return create_autospec(IOwnershipManager, instance=True)


@pytest.fixture
def mock_replacer():
    """Provide a mocked process replacer."""
    return create_autospec(IProcessReplacer, instance=True)


@pytest.fixture
def mock_tools():
    """Provide a mocked tool installer."""
    return create_autospec(IToolInstaller, instance=True)
