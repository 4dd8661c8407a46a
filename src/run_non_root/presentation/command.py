"""Command reconstruction.

Turns an already tokenized argument vector back into a single command
line, so that the argv given after ``--`` and a command string from
RUN_NON_ROOT_COMMAND take the same path to execution.
"""

from collections.abc import Sequence


def escape_double_quotes(argument: str) -> str:
    """Backslash-escape every double quotation mark."""
    return argument.replace('"', '\\"')


def quote_argument(argument: str) -> str:
    """Escape ``argument`` and wrap it in double quotes if it has whitespace."""
    escaped = escape_double_quotes(argument)
    if any(character.isspace() for character in argument):
        return f'"{escaped}"'
    return escaped


def reconstruct(argv: Sequence[str]) -> str:
    """Join ``argv`` into one command line that preserves argument boundaries.

    >>> reconstruct(["echo", "foo bar"])
    'echo "foo bar"'
    """
    return " ".join(quote_argument(argument) for argument in argv)
