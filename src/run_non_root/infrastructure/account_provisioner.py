"""shadow-utils implementation of IAccountProvisioner.

See groupadd(8) and useradd(8).
"""

from __future__ import annotations

from run_non_root.infrastructure.command_runner import CommandRunner
from run_non_root.ports.host import IAccountProvisioner


class ShadowAccountProvisioner(IAccountProvisioner):
    """Creates groups and users with ``groupadd`` and ``useradd``."""

    def __init__(self, runner: CommandRunner | None = None):
        self._runner = runner or CommandRunner()

    def create_group(self, name: str, gid: int | None = None) -> bool:
        argv = ["groupadd"]
        if gid is not None:
            argv += ["--gid", str(gid)]
        argv.append(name)
        return self._runner.run(argv)

    def create_user(
        self,
        name: str,
        gid: int,
        uid: int | None = None,
        shell: str = "/bin/sh",
        create_home: bool = True,
    ) -> bool:
        argv = ["useradd"]
        if create_home:
            argv.append("--create-home")
        argv += ["--gid", str(gid), "--no-log-init", "--shell", shell]
        if uid is not None:
            argv += ["--uid", str(uid)]
        argv.append(name)
        return self._runner.run(argv)
