"""Command line interface for run-non-root.

Usage:
    run-non-root [options] [--] [COMMAND] [ARGS...]

Everything after the first ``--`` is the command. Without a command,
RUN_NON_ROOT_COMMAND is used, and without that, ``sh``.
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from typing import NoReturn

import structlog

from run_non_root.application.services import (
    IdentityMaterializer,
    OwnershipUpdater,
    PrivilegeDropExecutor,
)
from run_non_root.domain.exceptions import OptionParsingError, RunNonRootError
from run_non_root.domain.value_objects import IdentityRequest, Invocation
from run_non_root.infrastructure.account_provisioner import ShadowAccountProvisioner
from run_non_root.infrastructure.command_runner import CommandRunner
from run_non_root.infrastructure.logging import configure_logging
from run_non_root.infrastructure.ownership_manager import PosixOwnershipManager
from run_non_root.infrastructure.process_replacer import ExecProcessReplacer
from run_non_root.infrastructure.settings import RunNonRootSettings, get_settings
from run_non_root.infrastructure.system_directory import SystemIdentityDirectory
from run_non_root.infrastructure.tool_installer import SystemToolInstaller
from run_non_root.infrastructure.version import __version__
from run_non_root.presentation.command import reconstruct
from run_non_root.presentation.console import RunNonRootConsole, describe_identity

DESCRIPTION = (
    "Run Linux commands as a non-root user, creating a non-root user if necessary."
)

EPILOG = """
Environment Variables:
  RUN_NON_ROOT_COMMAND         The command to execute if a command is not given;
                               the default is sh.
  RUN_NON_ROOT_GID             See --gid.
  RUN_NON_ROOT_GROUP           See --group.
  RUN_NON_ROOT_UID             See --uid.
  RUN_NON_ROOT_USER            See --user.
  RUN_NON_ROOT_PATH            See --path; separate several paths with ":".
  RUN_NON_ROOT_RECURSIVE_PATH  See --recursive-path; separate several paths with ":".

Examples:
  # Run sh as a non-root user.
  %(prog)s

  # Run id as a non-root user.
  %(prog)s -- id

  # Run id as a non-root user using the given user specification.
  %(prog)s -f ec2-user -g 1000 -t ec2-user -u 1000 -- id

  # Hand /data over to the non-root user before running the server.
  %(prog)s -r /data -- server --port 8080
"""


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        raise OptionParsingError(
            "There was an error parsing the given options. "
            "You may need to (a) remove invalid options or "
            "(b) use -- to separate run-non-root's options from the command. "
            f"Run run-non-root --help for more info. ({message})"
        )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = _ArgumentParser(
        prog="run-non-root",
        usage="%(prog)s [options] [--] [COMMAND] [ARGS...]",
        description=DESCRIPTION,
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-d",
        "--debug",
        action="count",
        default=0,
        help="Output debug information; --quiet does not silence debug output. "
        "Double up (-dd) to also show the output of system tools.",
    )
    parser.add_argument(
        "-f",
        "--group",
        metavar="GROUP_NAME",
        help="The group name to use; the default is USERNAME or nonroot. "
        "Ignored if already running as a non-root user or if the GID exists.",
    )
    parser.add_argument(
        "-g",
        "--gid",
        metavar="GID",
        help="The group ID to use; the default is UID or an ID chosen by groupadd. "
        "Ignored if already running as a non-root user.",
    )
    parser.add_argument(
        "-i",
        "--init",
        action="store_true",
        help="Run the command under tini, which forwards signals and reaps "
        "processes; this matches docker run --init.",
    )
    parser.add_argument(
        "-p",
        "--path",
        action="append",
        default=None,
        metavar="PATH",
        help="Change the ownership of PATH (not recursively) to the user; "
        "may be given more than once.",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help='Do not output "Running ( COMMAND ) as ..." or warnings.',
    )
    parser.add_argument(
        "-r",
        "--recursive-path",
        action="append",
        default=None,
        metavar="PATH",
        help="Create PATH if needed and recursively change its ownership to "
        "the user; may be given more than once.",
    )
    parser.add_argument(
        "-t",
        "--user",
        metavar="USERNAME",
        help="The username to use; the default is nonroot. "
        "Ignored if already running as a non-root user or if the UID exists.",
    )
    parser.add_argument(
        "-u",
        "--uid",
        metavar="UID",
        help="The user ID to use; the default is GID or an ID chosen by useradd. "
        "Ignored if already running as a non-root user.",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=__version__,
        help="Output the version number and exit.",
    )
    parser.add_argument("command", nargs="*", help=argparse.SUPPRESS)
    return parser


def split_command(argv: Sequence[str]) -> tuple[list[str], list[str]]:
    """Split ``argv`` at the first ``--`` into options and command."""
    argv = list(argv)
    if "--" in argv:
        index = argv.index("--")
        return argv[:index], argv[index + 1 :]
    return argv, []


def parse_invocation(
    argv: Sequence[str], settings: RunNonRootSettings
) -> tuple[Invocation, int]:
    """Parse options and environment into an Invocation.

    Returns:
        The invocation and the debug level (number of -d flags)

    Raises:
        OptionParsingError: If the options cannot be parsed
        InvalidGroupNameError, InvalidUsernameError, InvalidGidError,
        InvalidUidError: If an identity value is invalid
    """
    option_args, command_args = split_command(argv)
    args = build_parser().parse_args(option_args)
    command_args = [*args.command, *command_args]

    identity = IdentityRequest.from_raw(
        uid=args.uid if args.uid is not None else settings.uid,
        username=args.user if args.user is not None else settings.user,
        gid=args.gid if args.gid is not None else settings.gid,
        group_name=args.group if args.group is not None else settings.group,
        quiet=args.quiet,
        debug=args.debug > 0,
    )
    command = reconstruct(command_args) if command_args else settings.command
    paths = args.path if args.path is not None else settings.paths
    recursive_paths = (
        args.recursive_path
        if args.recursive_path is not None
        else settings.recursive_paths
    )

    invocation = Invocation(
        identity=identity,
        command=command,
        init=args.init,
        paths=tuple(paths),
        recursive_paths=tuple(recursive_paths),
    )
    return invocation, args.debug


def build_executor(
    directory: SystemIdentityDirectory, echo_output: bool = False
) -> PrivilegeDropExecutor:
    """Wire the executor to the host system."""
    runner = CommandRunner(echo_output=echo_output)
    tools = SystemToolInstaller(runner=runner)
    return PrivilegeDropExecutor(
        directory=directory,
        materializer=IdentityMaterializer(
            directory=directory,
            provisioner=ShadowAccountProvisioner(runner=runner),
            tools=tools,
        ),
        ownership_updater=OwnershipUpdater(PosixOwnershipManager()),
        replacer=ExecProcessReplacer(),
        tools=tools,
    )


def main(argv: Sequence[str] | None = None) -> NoReturn:
    """Entry point for the run-non-root console script."""
    console = RunNonRootConsole()
    try:
        invocation, debug_level = parse_invocation(
            sys.argv[1:] if argv is None else argv, get_settings()
        )
        request = invocation.identity
        configure_logging(debug=request.debug, quiet=request.quiet)
        structlog.get_logger().debug(
            "command_options",
            command=invocation.command,
            debug=debug_level,
            gid=request.gid,
            group_name=request.group_name,
            init=invocation.init,
            quiet=request.quiet,
            uid=request.uid,
            username=request.username,
            paths=list(invocation.paths),
            recursive_paths=list(invocation.recursive_paths),
        )

        directory = SystemIdentityDirectory()
        executor = build_executor(directory, echo_output=debug_level > 1)
        plan = executor.plan(invocation)
        if request.debug or not request.quiet:
            console.running(plan, describe_identity(plan, directory))
        executor.execute(plan)
    except RunNonRootError as e:
        console.error(e.exit_code, e.message)
        sys.exit(e.exit_code)
