"""Domain exceptions for run-non-root.

Every error carries the exit code the process terminates with. Input
validation errors are raised before the identity databases are queried
or modified.
"""


class RunNonRootError(Exception):
    """Base exception for fatal run-non-root errors."""

    exit_code: int = 1

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        self.message = message
        if exit_code is not None:
            self.exit_code = exit_code


class OptionParsingError(RunNonRootError):
    """Raised when the command-line options cannot be parsed."""

    exit_code = 1


class InvalidGroupNameError(RunNonRootError):
    """Raised when a group name contains a double quotation mark.

    Names end up on privileged creation command lines, so a quotation
    mark could close a quoted segment and smuggle in extra text.
    """

    exit_code = 3


class InvalidUsernameError(RunNonRootError):
    """Raised when a username contains a double quotation mark."""

    exit_code = 4


class InvalidGidError(RunNonRootError):
    """Raised when the GID is not a nonnegative integer."""

    exit_code = 5


class InvalidUidError(RunNonRootError):
    """Raised when the UID is not a nonnegative integer."""

    exit_code = 6


class CommandSyntaxError(RunNonRootError):
    """Raised when the command line cannot be split into arguments."""

    exit_code = 2
