"""Value objects for identity resolution.

Value objects are immutable descriptors created once per invocation and
discarded when the process image is replaced.
"""

from __future__ import annotations

import re
import shlex
from collections.abc import Mapping
from dataclasses import dataclass, field

from run_non_root.domain.exceptions import (
    CommandSyntaxError,
    InvalidGidError,
    InvalidGroupNameError,
    InvalidUidError,
    InvalidUsernameError,
)

DEFAULT_NAME = "nonroot"
SUPERUSER_NAME = "root"
DEFAULT_COMMAND = "sh"

_INTEGER = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class UserRecord:
    """A user entry from the host's user database."""

    name: str
    uid: int
    gid: int


@dataclass(frozen=True)
class GroupRecord:
    """A group entry from the host's group database."""

    name: str
    gid: int


def _parse_id(raw: str | int | None, label: str, error: type[Exception]) -> int | None:
    if raw is None or raw == "":
        return None
    text = str(raw).strip()
    if not _INTEGER.fullmatch(text) or int(text) < 0:
        raise error(f"The {label} must be a nonnegative integer; it is ( {raw} ).")
    return int(text)


@dataclass(frozen=True)
class IdentityRequest:
    """A partially specified target identity.

    Any mix of uid, username, gid and group name may be given. Empty
    strings and None both mean "not requested".
    """

    uid: int | None = None
    username: str = ""
    gid: int | None = None
    group_name: str = ""
    quiet: bool = False
    debug: bool = False

    @classmethod
    def from_raw(
        cls,
        uid: str | int | None = None,
        username: str = "",
        gid: str | int | None = None,
        group_name: str = "",
        quiet: bool = False,
        debug: bool = False,
    ) -> IdentityRequest:
        """Validate raw option values and build a request.

        Checks run in a fixed order: group name, username, GID, UID.

        Raises:
            InvalidGroupNameError: group name contains a double quote
            InvalidUsernameError: username contains a double quote
            InvalidGidError: GID is not a nonnegative integer
            InvalidUidError: UID is not a nonnegative integer
        """
        username = username or ""
        group_name = group_name or ""
        if '"' in group_name:
            raise InvalidGroupNameError(
                "The group name must not contain a double quotation mark; "
                f"it is ( {group_name} )."
            )
        if '"' in username:
            raise InvalidUsernameError(
                "The username must not contain a double quotation mark; "
                f"it is ( {username} )."
            )
        parsed_gid = _parse_id(gid, "GID", InvalidGidError)
        parsed_uid = _parse_id(uid, "UID", InvalidUidError)
        return cls(
            uid=parsed_uid,
            username=username,
            gid=parsed_gid,
            group_name=group_name,
            quiet=quiet,
            debug=debug,
        )


@dataclass(frozen=True)
class SystemIdentitySnapshot:
    """Existence lookups taken once at the start of resolution.

    Each lookup field holds the matching record, or None when the
    requested value was not given or does not exist in the host
    databases. ``default_user`` is the record of the default user name,
    if a previous run already created it. ``primary_groups`` maps the
    primary gid of every captured user to its group record.
    """

    user_by_id: UserRecord | None = None
    user_by_name: UserRecord | None = None
    group_by_id: GroupRecord | None = None
    group_by_name: GroupRecord | None = None
    default_user: UserRecord | None = None
    primary_groups: Mapping[int, GroupRecord] = field(default_factory=dict)

    def primary_group(self, user: UserRecord) -> GroupRecord:
        """Return the primary group of ``user``.

        A primary gid with no group entry is reported under its number,
        the way ``id -gn`` does.
        """
        group = self.primary_groups.get(user.gid)
        if group is None:
            return GroupRecord(name=str(user.gid), gid=user.gid)
        return group


@dataclass(frozen=True)
class ResolvedIdentity:
    """The concrete identity a command will run as.

    ``uid`` and ``gid`` may still be None while a creation flag is set;
    the materializer fills them in from the host databases. An empty
    ``group_name`` with ``create_group`` set means "pick a default name
    at creation time".
    """

    uid: int | None
    username: str
    gid: int | None
    group_name: str
    create_user: bool = False
    create_group: bool = False

    @property
    def user_spec(self) -> str:
        """The ``username:gid`` argument for the privilege-switch helper."""
        return f"{self.username}:{self.gid}"


@dataclass(frozen=True)
class Invocation:
    """Everything the executor needs from the command line and environment."""

    identity: IdentityRequest
    command: str = ""
    init: bool = False
    paths: tuple[str, ...] = ()
    recursive_paths: tuple[str, ...] = ()


@dataclass(frozen=True)
class ExecutionPlan:
    """The single, final hand-off to the target command.

    ``identity`` is None when the command keeps running as the current
    (already unprivileged) user.
    """

    identity: ResolvedIdentity | None
    command: str
    init: bool = False
    paths: tuple[str, ...] = ()
    recursive_paths: tuple[str, ...] = ()

    @property
    def effective_command(self) -> str:
        return self.command or DEFAULT_COMMAND

    def prefix(
        self, init_program: str = "tini", switch_program: str = "su-exec"
    ) -> list[str]:
        """Supervisor and privilege-switch arguments, in that order."""
        prefix: list[str] = []
        if self.init:
            prefix += [init_program, "--"]
        if self.identity is not None:
            prefix += [switch_program, self.identity.user_spec]
        return prefix

    def argv(
        self, init_program: str = "tini", switch_program: str = "su-exec"
    ) -> list[str]:
        """Build the argument vector that replaces the current process.

        The command line is split with POSIX shell quoting rules, so
        ``echo "foo bar"`` yields ``["echo", "foo bar"]``.

        Raises:
            CommandSyntaxError: If the command line has unbalanced quotes
        """
        try:
            command = shlex.split(self.effective_command)
        except ValueError as e:
            raise CommandSyntaxError(
                f"We could not parse the command ( {self.effective_command} ): {e}."
            ) from e
        return self.prefix(init_program, switch_program) + command

    def display(
        self, init_program: str = "tini", switch_program: str = "su-exec"
    ) -> str:
        """Human-readable form of the final command line."""
        return " ".join(
            ["exec", *self.prefix(init_program, switch_program), self.effective_command]
        )
