"""Unit tests for SystemIdentityDirectory."""

import grp
import pwd
from unittest.mock import patch

import pytest

from run_non_root.domain.value_objects import GroupRecord, UserRecord
from run_non_root.infrastructure.system_directory import SystemIdentityDirectory


def passwd_entry(name, uid, gid):
    return pwd.struct_passwd((name, "x", uid, gid, "", f"/home/{name}", "/bin/sh"))


def group_entry(name, gid):
    return grp.struct_group((name, "x", gid, []))


@pytest.fixture
def directory():
    return SystemIdentityDirectory()


class TestUserLookups:
    """Tests for user lookups through pwd."""

    def test_user_by_id(self, directory):
        """A known UID returns its record."""
        with patch("pwd.getpwuid", return_value=passwd_entry("mail", 8, 12)):
            assert directory.user_by_id(8) == UserRecord("mail", 8, 12)

    def test_unknown_user_by_id(self, directory):
        """An unknown UID returns None."""
        with patch("pwd.getpwuid", side_effect=KeyError(8)):
            assert directory.user_by_id(8) is None

    def test_user_by_name(self, directory):
        """A known username returns its record."""
        with patch("pwd.getpwnam", return_value=passwd_entry("mail", 8, 12)):
            assert directory.user_by_name("mail") == UserRecord("mail", 8, 12)

    def test_empty_name_is_not_looked_up(self, directory):
        """An empty name never exists."""
        with patch("pwd.getpwnam") as mock_getpwnam:
            assert directory.user_by_name("") is None

        mock_getpwnam.assert_not_called()


class TestGroupLookups:
    """Tests for group lookups through grp."""

    def test_group_by_id(self, directory):
        """A known GID returns its record."""
        with patch("grp.getgrgid", return_value=group_entry("users", 100)):
            assert directory.group_by_id(100) == GroupRecord("users", 100)

    def test_unknown_group_by_name(self, directory):
        """An unknown group name returns None."""
        with patch("grp.getgrnam", side_effect=KeyError("nope")):
            assert directory.group_by_name("nope") is None


class TestCurrentUsername:
    """Tests for the effective user lookup."""

    def test_root(self, directory):
        """UID 0 is reported by name."""
        with (
            patch("os.geteuid", return_value=0),
            patch("pwd.getpwuid", return_value=passwd_entry("root", 0, 0)),
        ):
            assert directory.current_username() == "root"

    def test_unlisted_uid(self, directory):
        """A UID without a passwd entry is reported by number."""
        with (
            patch("os.geteuid", return_value=4242),
            patch("pwd.getpwuid", side_effect=KeyError(4242)),
        ):
            assert directory.current_username() == "4242"
