"""Blocking execution of external system commands."""

from __future__ import annotations

import subprocess

from run_non_root.infrastructure.observability import (
    CommandProbe,
    DefaultCommandProbe,
)


class CommandRunner:
    """Runs system utilities with explicit argument lists.

    Arguments are never interpreted by a shell. Output is captured and
    only surfaces through the probe, unless ``echo_output`` is set, in
    which case the command writes straight to this process's streams.
    """

    def __init__(self, echo_output: bool = False, probe: CommandProbe | None = None):
        self._echo_output = echo_output
        self._probe = probe or DefaultCommandProbe()

    def run(self, argv: list[str], cwd: str | None = None) -> bool:
        """Run ``argv`` to completion and return True if it exited with 0.

        A program that is missing or cannot be started counts as a
        failed command; the caller decides whether that is fatal.
        """
        self._probe.command_executing(argv)
        try:
            result = subprocess.run(
                argv,
                cwd=cwd,
                capture_output=not self._echo_output,
                text=True,
                errors="replace",
                check=False,
            )
        except FileNotFoundError:
            self._probe.command_not_found(argv)
            return False
        except OSError as e:
            self._probe.command_not_started(argv, e.strerror or str(e))
            return False

        if result.returncode != 0:
            self._probe.command_failed(argv, result.returncode, result.stderr or "")
            return False

        self._probe.command_succeeded(argv)
        return True
