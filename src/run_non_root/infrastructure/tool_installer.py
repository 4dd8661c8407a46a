"""Installation of missing system tools.

Minimal container images often lack shadow-utils, su-exec or tini. The
installer detects which package manager the image has and installs the
missing tool with it. Failures are not raised here; the primitive that
needs the tool reports its own error when it is invoked.
"""

from __future__ import annotations

import os
import shutil
import stat
import tempfile

from run_non_root.infrastructure.command_runner import CommandRunner
from run_non_root.infrastructure.observability import (
    CommandProbe,
    DefaultCommandProbe,
)
from run_non_root.ports.host import IToolInstaller

INSTALL_DIR = "/usr/local/bin"
SU_EXEC_REVISION = "dddd1567b7c76365e1e0aac561287975020a8fad"
SU_EXEC_URL = f"https://github.com/ncopa/su-exec/archive/{SU_EXEC_REVISION}.zip"
TINI_URL = "https://github.com/krallin/tini/releases/download/v0.18.0/tini-static"
PACKAGE_MANAGERS = ("apk", "apt-get", "yum")


class SystemToolInstaller(IToolInstaller):
    """Installs groupadd/useradd, su-exec and tini on demand."""

    def __init__(
        self,
        runner: CommandRunner | None = None,
        probe: CommandProbe | None = None,
        install_dir: str = INSTALL_DIR,
    ):
        self._runner = runner or CommandRunner()
        self._probe = probe or DefaultCommandProbe()
        self._install_dir = install_dir

    @staticmethod
    def has(program: str) -> bool:
        return shutil.which(program) is not None

    def package_manager(self) -> str | None:
        """Return the first available package manager, if any."""
        for manager in PACKAGE_MANAGERS:
            if self.has(manager):
                return manager
        return None

    def ensure_account_tools(self) -> None:
        manager = self.package_manager()
        if not (self.has("groupadd") and self.has("useradd")):
            self._probe.tool_missing("groupadd", manager)
            if manager == "apk":
                self._runner.run(["apk", "update"])
                self._runner.run(["apk", "add", "shadow"])
        if manager == "apk":
            # useradd on Alpine fails creating the mailbox without this.
            try:
                os.makedirs("/var/mail", exist_ok=True)
            except OSError as e:
                self._probe.tool_install_failed("useradd", e.strerror or str(e))

    def ensure_privilege_switch(self) -> None:
        if self.has("su-exec"):
            return
        manager = self.package_manager()
        self._probe.tool_missing("su-exec", manager)
        if manager == "apk":
            self._runner.run(["apk", "update"])
            self._runner.run(["apk", "add", "su-exec"])
        elif manager == "apt-get":
            self._runner.run(["apt-get", "update"])
            self._runner.run(["apt-get", "install", "-y", "curl", "gcc", "make", "unzip"])
            self._build_su_exec()
        elif manager == "yum":
            self._runner.run(["yum", "install", "-y", "gcc", "make", "unzip"])
            self._build_su_exec()

    def ensure_supervisor(self) -> None:
        if self.has("tini"):
            return
        manager = self.package_manager()
        self._probe.tool_missing("tini", manager)
        target = os.path.join(self._install_dir, "tini")
        if manager == "apk":
            downloaded = self._runner.run(["wget", "-O", target, TINI_URL])
        elif manager == "apt-get":
            self._runner.run(["apt-get", "update"])
            self._runner.run(["apt-get", "install", "-y", "curl"])
            downloaded = self._runner.run(["curl", "-L", TINI_URL, "-o", target])
        elif manager == "yum":
            downloaded = self._runner.run(["curl", "-L", TINI_URL, "-o", target])
        else:
            return
        if downloaded:
            self._make_executable("tini", target)

    def _build_su_exec(self) -> None:
        try:
            with tempfile.TemporaryDirectory() as workdir:
                self._build_su_exec_in(workdir)
        except OSError as e:
            self._probe.tool_install_failed("su-exec", e.strerror or str(e))

    def _build_su_exec_in(self, workdir: str) -> None:
        archive = os.path.join(workdir, "su-exec.zip")
        source = os.path.join(workdir, f"su-exec-{SU_EXEC_REVISION}")
        if not self._runner.run(["curl", "-L", SU_EXEC_URL, "-o", archive]):
            return
        if not self._runner.run(["unzip", archive], cwd=workdir):
            return
        if not self._runner.run(["make"], cwd=source):
            return
        shutil.move(
            os.path.join(source, "su-exec"),
            os.path.join(self._install_dir, "su-exec"),
        )

    def _make_executable(self, tool: str, path: str) -> None:
        try:
            mode = os.stat(path).st_mode
            os.chmod(path, mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        except OSError as e:
            self._probe.tool_install_failed(tool, e.strerror or str(e))
