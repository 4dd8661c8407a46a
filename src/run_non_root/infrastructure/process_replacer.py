"""Process-image replacement."""

from __future__ import annotations

import os
import subprocess
import sys
from typing import NoReturn

from run_non_root.ports.exceptions import CommandNotFoundError
from run_non_root.ports.host import IProcessReplacer


class ExecProcessReplacer(IProcessReplacer):
    """Replaces the current process with ``os.execvp``.

    The target keeps this process's PID, so it receives signals directly
    and no wrapper process remains. Where ``os.execvp`` is unavailable the
    command is run as a child and its exit status becomes ours.
    """

    def replace(self, argv: list[str]) -> NoReturn:
        if not argv:
            raise CommandNotFoundError("", "the command is empty")

        sys.stdout.flush()
        sys.stderr.flush()

        if os.name != "posix":
            try:
                completed = subprocess.run(argv, check=False)
            except OSError as e:
                raise CommandNotFoundError(argv[0], e.strerror or str(e)) from e
            sys.exit(completed.returncode)

        try:
            os.execvp(argv[0], argv)
        except OSError as e:
            raise CommandNotFoundError(argv[0], e.strerror or str(e)) from e
