"""Exceptions raised through the ports of run-non-root.

These represent failures of the host-side primitives (account creation,
directory creation, process replacement). They are fatal and map onto
fixed exit codes; no cleanup of partially created state is attempted.
"""

from run_non_root.domain.exceptions import RunNonRootError


class GroupCreationError(RunNonRootError):
    """Raised when the group-creation primitive reports failure."""

    exit_code = 100

    def __init__(self, group_name: str, gid: int | None = None):
        gid_part = f" with ID ( {gid} )" if gid is not None else ""
        super().__init__(f"We could not add the group ( {group_name} ){gid_part}.")
        self.group_name = group_name
        self.gid = gid


class UserCreationError(RunNonRootError):
    """Raised when the user-creation primitive reports failure."""

    exit_code = 200

    def __init__(self, username: str, uid: int | None = None):
        uid_part = f" with ID ( {uid} )" if uid is not None else ""
        super().__init__(f"We could not add the user ( {username} ){uid_part}.")
        self.username = username
        self.uid = uid


class DirectoryCreationError(RunNonRootError):
    """Raised when a path for recursive ownership cannot be created.

    Without the directory the ownership change that follows is
    meaningless, so this is fatal rather than a warning.
    """

    exit_code = 300

    def __init__(self, path: str, reason: str):
        super().__init__(f"We could not create the directory ( {path} ): {reason}.")
        self.path = path


class CommandNotFoundError(RunNonRootError):
    """Raised when the final command cannot be executed."""

    exit_code = 127

    def __init__(self, program: str, reason: str):
        super().__init__(f"We could not execute ( {program} ): {reason}.")
        self.program = program
