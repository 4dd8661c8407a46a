"""Unit tests for IdentityMaterializer."""

from unittest.mock import create_autospec

import pytest

from run_non_root.application.observability import MaterializerProbe
from run_non_root.application.services.identity_materializer import (
    IdentityMaterializer,
)
from run_non_root.domain.value_objects import DEFAULT_NAME, ResolvedIdentity
from run_non_root.ports.exceptions import GroupCreationError, UserCreationError
from run_non_root.ports.host import IAccountProvisioner


@pytest.fixture
def mock_probe():
    """Create mock materializer probe."""
    return create_autospec(MaterializerProbe, instance=True)


@pytest.fixture
def materializer(directory, provisioner, mock_tools, mock_probe):
    """Create IdentityMaterializer over the fake host."""
    return IdentityMaterializer(
        directory=directory,
        provisioner=provisioner,
        tools=mock_tools,
        probe=mock_probe,
    )


def flagged(**kwargs):
    values = dict(
        uid=None,
        username=DEFAULT_NAME,
        gid=None,
        group_name="",
        create_user=True,
        create_group=True,
    )
    values.update(kwargs)
    return ResolvedIdentity(**values)


class TestMaterializeGroup:
    """Tests for group creation."""

    def test_creates_named_group_with_requested_gid(self, materializer, provisioner):
        """An explicit name and GID are passed straight through."""
        result = materializer.materialize_group(
            flagged(uid=1234, username="abcd", gid=5678, group_name="efgh")
        )

        assert provisioner.calls == [("group", "efgh", 5678)]
        assert result.gid == 5678
        assert result.group_name == "efgh"
        assert result.create_group is False

    def test_empty_name_defaults_to_username(self, materializer, provisioner):
        """A group without a name is named after the user."""
        result = materializer.materialize_group(flagged(username="abcd"))

        assert provisioner.calls == [("group", "abcd", None)]
        assert result.group_name == "abcd"

    def test_empty_name_falls_back_when_username_group_is_taken(
        self, materializer, provisioner, directory
    ):
        """An unrelated group already named like the user is not touched."""
        directory.add_group("abcd", 300)

        result = materializer.materialize_group(flagged(username="abcd"))

        assert provisioner.calls[0][1] == DEFAULT_NAME
        assert result.group_name == DEFAULT_NAME

    def test_existing_default_group_is_reused(
        self, materializer, provisioner, directory, mock_probe
    ):
        """A nonroot group left by a previous run is adopted, not recreated."""
        directory.add_group(DEFAULT_NAME, 1000)

        result = materializer.materialize_group(flagged())

        assert provisioner.calls == []
        assert result.gid == 1000
        assert result.group_name == DEFAULT_NAME
        assert result.create_group is False
        mock_probe.default_group_reused.assert_called_once_with(
            group_name=DEFAULT_NAME, gid=1000
        )

    def test_reuses_uid_as_gid_when_free(self, materializer, provisioner):
        """Fresh identities keep UID and GID equal."""
        result = materializer.materialize_group(flagged(uid=1234, username="abcd"))

        assert provisioner.calls == [("group", "abcd", 1234)]
        assert result.gid == 1234

    def test_does_not_reuse_uid_taken_as_gid(
        self, materializer, provisioner, directory
    ):
        """A UID already used as a GID is left to groupadd to choose."""
        directory.add_group("staff", 1234)

        result = materializer.materialize_group(flagged(uid=1234, username="abcd"))

        assert provisioner.calls == [("group", "abcd", None)]
        assert result.gid == 1000

    def test_reads_back_assigned_gid(self, materializer, directory):
        """Without an explicit id, the GID is read from the directory."""
        result = materializer.materialize_group(flagged(username="abcd"))

        assert result.gid == directory.group_by_name("abcd").gid

    def test_failure_raises_with_name_and_gid(
        self, materializer, directory, mock_probe
    ):
        """A failing groupadd is fatal and names the group and id."""
        directory.add_group("other", 5678)

        with pytest.raises(GroupCreationError) as exc_info:
            materializer.materialize_group(
                flagged(username="abcd", gid=5678, group_name="efgh")
            )

        assert exc_info.value.exit_code == 100
        assert exc_info.value.message == (
            "We could not add the group ( efgh ) with ID ( 5678 )."
        )
        mock_probe.group_creation_failed.assert_called_once_with(
            group_name="efgh", gid=5678
        )

    def test_failure_without_gid_omits_id(self, directory, mock_tools):
        """The message has no ID part when no id was requested."""
        provisioner = create_autospec(IAccountProvisioner, instance=True)
        provisioner.create_group.return_value = False
        materializer = IdentityMaterializer(directory, provisioner, tools=mock_tools)

        with pytest.raises(GroupCreationError) as exc_info:
            materializer.materialize_group(flagged(group_name="efgh"))

        assert exc_info.value.message == "We could not add the group ( efgh )."

    def test_ensures_account_tools(self, materializer, mock_tools):
        """groupadd is installed on demand before use."""
        materializer.materialize_group(flagged(username="abcd"))

        mock_tools.ensure_account_tools.assert_called_once()


class TestMaterializeUser:
    """Tests for user creation."""

    def test_creates_user_with_requested_uid(self, materializer, provisioner):
        """The user is created with its UID and primary group."""
        result = materializer.materialize_user(
            flagged(uid=1234, username="abcd", gid=5678, group_name="efgh")
        )

        assert provisioner.calls == [("user", "abcd", 1234, 5678)]
        assert result.uid == 1234
        assert result.create_user is False

    def test_reuses_gid_as_uid_when_free(self, materializer, provisioner):
        """Fresh identities keep UID and GID equal."""
        result = materializer.materialize_user(
            flagged(username="abcd", gid=5678, group_name="efgh")
        )

        assert provisioner.calls == [("user", "abcd", 5678, 5678)]
        assert result.uid == 5678

    def test_reads_back_assigned_uid(self, materializer, provisioner, directory):
        """When the GID is taken as a UID, useradd picks and we read it back."""
        directory.add_user("other", 5678, 5678)

        result = materializer.materialize_user(
            flagged(username="abcd", gid=5678, group_name="efgh")
        )

        assert provisioner.calls == [("user", "abcd", None, 5678)]
        assert result.uid == directory.user_by_name("abcd").uid

    def test_passes_home_and_shell(self, directory, mock_tools):
        """Users get a home directory and /bin/sh."""
        provisioner = create_autospec(IAccountProvisioner, instance=True)
        provisioner.create_user.return_value = True
        materializer = IdentityMaterializer(directory, provisioner, tools=mock_tools)

        materializer.materialize_user(
            flagged(uid=1234, username="abcd", gid=5678, group_name="efgh")
        )

        provisioner.create_user.assert_called_once_with(
            "abcd", gid=5678, uid=1234, shell="/bin/sh", create_home=True
        )

    def test_failure_raises_with_name_and_uid(self, materializer, directory):
        """A failing useradd is fatal and names the user and id."""
        directory.add_user("taken", 1234, 1234)

        with pytest.raises(UserCreationError) as exc_info:
            materializer.materialize_user(
                flagged(uid=1234, username="abcd", gid=5678, group_name="efgh")
            )

        assert exc_info.value.exit_code == 200
        assert exc_info.value.message == (
            "We could not add the user ( abcd ) with ID ( 1234 )."
        )

    def test_requires_materialized_group(self, materializer):
        """The user's primary group must be known first."""
        with pytest.raises(ValueError):
            materializer.materialize_user(flagged(username="abcd"))


class TestMaterialize:
    """Tests for the combined materialize step."""

    def test_creates_group_then_user(self, materializer, provisioner):
        """uid=1234 gid=5678 abcd:efgh creates the group first."""
        result = materializer.materialize(
            flagged(uid=1234, username="abcd", gid=5678, group_name="efgh")
        )

        assert provisioner.calls == [
            ("group", "efgh", 5678),
            ("user", "abcd", 1234, 5678),
        ]
        assert (result.uid, result.gid) == (1234, 5678)

    def test_nothing_flagged_does_nothing(self, materializer, provisioner):
        """An identity that exists is returned unchanged."""
        identity = ResolvedIdentity(
            uid=8, username="mail", gid=12, group_name="mail"
        )

        assert materializer.materialize(identity) == identity
        assert provisioner.calls == []

    def test_works_without_tool_installer(self, directory, provisioner):
        """The tool installer is optional."""
        materializer = IdentityMaterializer(directory, provisioner)

        result = materializer.materialize(flagged())

        assert result.username == DEFAULT_NAME
        assert result.uid is not None
        assert result.gid is not None
