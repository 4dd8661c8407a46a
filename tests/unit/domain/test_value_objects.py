"""Unit tests for identity value objects."""

import pytest

from run_non_root.domain.exceptions import (
    CommandSyntaxError,
    InvalidGidError,
    InvalidGroupNameError,
    InvalidUidError,
    InvalidUsernameError,
)
from run_non_root.domain.value_objects import (
    ExecutionPlan,
    GroupRecord,
    IdentityRequest,
    ResolvedIdentity,
    SystemIdentitySnapshot,
    UserRecord,
)


class TestIdentityRequestFromRaw:
    """Tests for IdentityRequest.from_raw validation."""

    def test_parses_numeric_strings(self):
        """String ids from options and environment become integers."""
        request = IdentityRequest.from_raw(
            uid="1234", username="abcd", gid="5678", group_name="efgh"
        )

        assert request.uid == 1234
        assert request.gid == 5678
        assert request.username == "abcd"
        assert request.group_name == "efgh"

    def test_empty_values_mean_not_requested(self):
        """Empty strings and None leave the fields unset."""
        request = IdentityRequest.from_raw(uid="", gid=None)

        assert request.uid is None
        assert request.gid is None
        assert request.username == ""
        assert request.group_name == ""

    def test_zero_is_a_valid_id(self):
        """Zero is nonnegative."""
        assert IdentityRequest.from_raw(uid="0").uid == 0

    @pytest.mark.parametrize("raw", ["foo bar", "-1", "1.5", "1_000"])
    def test_rejects_invalid_gid(self, raw):
        """GID must be a nonnegative integer."""
        with pytest.raises(InvalidGidError) as exc_info:
            IdentityRequest.from_raw(gid=raw)

        assert exc_info.value.exit_code == 5
        assert f"( {raw} )" in exc_info.value.message

    @pytest.mark.parametrize("raw", ["foo bar", "-1"])
    def test_rejects_invalid_uid(self, raw):
        """UID must be a nonnegative integer."""
        with pytest.raises(InvalidUidError) as exc_info:
            IdentityRequest.from_raw(uid=raw)

        assert exc_info.value.exit_code == 6

    def test_rejects_group_name_with_double_quote(self):
        """A double quote in the group name is an injection attempt."""
        with pytest.raises(InvalidGroupNameError) as exc_info:
            IdentityRequest.from_raw(group_name='foo"; echo "bar')

        assert exc_info.value.exit_code == 3

    def test_rejects_username_with_double_quote(self):
        """A double quote in the username is an injection attempt."""
        with pytest.raises(InvalidUsernameError) as exc_info:
            IdentityRequest.from_raw(username='foo"; echo "bar')

        assert exc_info.value.exit_code == 4

    def test_group_name_is_checked_before_ids(self):
        """Validation order is group name, username, GID, UID."""
        with pytest.raises(InvalidGroupNameError):
            IdentityRequest.from_raw(uid="x", gid="y", username='"', group_name='"')

        with pytest.raises(InvalidUsernameError):
            IdentityRequest.from_raw(uid="x", gid="y", username='"')

        with pytest.raises(InvalidGidError):
            IdentityRequest.from_raw(uid="x", gid="y")

    def test_request_is_immutable(self):
        """Requests are frozen."""
        request = IdentityRequest()

        with pytest.raises(Exception):
            request.uid = 5


class TestSystemIdentitySnapshot:
    """Tests for SystemIdentitySnapshot.primary_group."""

    def test_returns_known_primary_group(self):
        """The captured group record is returned."""
        group = GroupRecord(name="mail", gid=12)
        snapshot = SystemIdentitySnapshot(primary_groups={12: group})

        assert snapshot.primary_group(UserRecord("mail", 8, 12)) is group

    def test_falls_back_to_number(self):
        """An unknown primary GID is named by its number."""
        snapshot = SystemIdentitySnapshot()

        assert snapshot.primary_group(UserRecord("mail", 8, 12)) == GroupRecord(
            name="12", gid=12
        )


class TestExecutionPlan:
    """Tests for ExecutionPlan argument vectors."""

    @pytest.fixture
    def identity(self):
        return ResolvedIdentity(uid=1234, username="abcd", gid=5678, group_name="efgh")

    def test_root_plan_switches_user(self, identity):
        """The privilege-switch helper targets username:gid."""
        plan = ExecutionPlan(identity=identity, command="id -u")

        assert plan.argv() == ["su-exec", "abcd:5678", "id", "-u"]

    def test_init_wraps_outermost(self, identity):
        """The supervisor comes before the privilege switch."""
        plan = ExecutionPlan(identity=identity, command="id", init=True)

        assert plan.argv() == ["tini", "--", "su-exec", "abcd:5678", "id"]

    def test_non_root_plan_runs_command_directly(self):
        """Without an identity there is no privilege switch."""
        plan = ExecutionPlan(identity=None, command="whoami")

        assert plan.argv() == ["whoami"]

    def test_empty_command_defaults_to_sh(self):
        """No command means an interactive shell."""
        plan = ExecutionPlan(identity=None, command="")

        assert plan.argv() == ["sh"]

    def test_quoted_arguments_stay_together(self):
        """echo "foo bar" is one argument, not two."""
        plan = ExecutionPlan(identity=None, command='echo "foo bar"')

        assert plan.argv() == ["echo", "foo bar"]

    def test_escaped_quotes_are_literal(self):
        """Backslash-escaped quotes survive as quote characters."""
        plan = ExecutionPlan(identity=None, command='echo "say \\"hi\\""')

        assert plan.argv() == ["echo", 'say "hi"']

    def test_unbalanced_quotes_raise(self):
        """A command line with an open quote cannot be executed."""
        plan = ExecutionPlan(identity=None, command='echo "oops')

        with pytest.raises(CommandSyntaxError) as exc_info:
            plan.argv()

        assert exc_info.value.exit_code == 2

    def test_display(self, identity):
        """The display form mirrors what will be executed."""
        plan = ExecutionPlan(identity=identity, command="id", init=True)

        assert plan.display() == "exec tini -- su-exec abcd:5678 id"
