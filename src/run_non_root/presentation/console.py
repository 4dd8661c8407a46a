"""Human-facing console output using rich."""

from __future__ import annotations

import os

from rich.console import Console
from rich.markup import escape

from run_non_root.domain.value_objects import ExecutionPlan
from run_non_root.ports.directory import IIdentityDirectory


def describe_identity(plan: ExecutionPlan, directory: IIdentityDirectory) -> str:
    """Describe who the planned command runs as, in the style of ``id``."""
    if plan.identity is not None:
        identity = plan.identity
        return (
            f"uid={identity.uid}({identity.username}) "
            f"gid={identity.gid}({identity.group_name})"
        )

    uid, gid = os.geteuid(), os.getegid()
    user = directory.user_by_id(uid)
    group = directory.group_by_id(gid)
    user_part = f"uid={uid}({user.name})" if user else f"uid={uid}"
    group_part = f"gid={gid}({group.name})" if group else f"gid={gid}"
    return f"{user_part} {group_part}"


class RunNonRootConsole:
    """Prints the running banner and fatal errors."""

    def __init__(self, console: Console | None = None):
        self._console = console or Console(stderr=True, highlight=False)

    def running(self, plan: ExecutionPlan, identity: str) -> None:
        self._console.print(
            f"[green]Running ( {escape(plan.display())} ) "
            f"as {escape(identity)} ...[/green]\n"
        )

    def error(self, exit_code: int, message: str) -> None:
        self._console.print(
            f"[bold red]ERROR ({exit_code}):[/bold red][red] {escape(message)}[/red]"
        )
