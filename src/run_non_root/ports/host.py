"""Protocols (ports) for host-side primitives.

Account creation, filesystem ownership, tool installation and process
replacement are all side effects on the host. The application layer
depends only on these protocols so that it can be exercised without
root privileges.
"""

from __future__ import annotations

from typing import NoReturn, Protocol, runtime_checkable


@runtime_checkable
class IAccountProvisioner(Protocol):
    """Group and user creation primitives (groupadd/useradd contract)."""

    def create_group(self, name: str, gid: int | None = None) -> bool:
        """Create a group; return True on success.

        Args:
            name: The group name
            gid: Explicit group id, or None to let the host pick one
        """
        ...

    def create_user(
        self,
        name: str,
        gid: int,
        uid: int | None = None,
        shell: str = "/bin/sh",
        create_home: bool = True,
    ) -> bool:
        """Create a user whose primary group is ``gid``; return True on success."""
        ...


@runtime_checkable
class IOwnershipManager(Protocol):
    """Filesystem ownership primitives."""

    def owner_of(self, path: str) -> tuple[int, int]:
        """Return the (uid, gid) currently owning ``path``."""
        ...

    def chown(self, path: str, user: str, gid: int) -> None:
        """Change ownership of ``path`` without descending into it.

        Raises:
            OSError: If the change fails
            LookupError: If the user does not exist
        """
        ...

    def chown_recursive(self, path: str, user: str, gid: int) -> None:
        """Change ownership of ``path`` and everything below it.

        Raises:
            OSError: If the change fails
            LookupError: If the user does not exist
        """
        ...

    def make_directories(self, path: str) -> None:
        """Create ``path`` and any missing parents.

        Raises:
            OSError: If the directory cannot be created
        """
        ...


@runtime_checkable
class IToolInstaller(Protocol):
    """Installs missing system tools on demand."""

    def ensure_account_tools(self) -> None:
        """Make sure groupadd and useradd are available."""
        ...

    def ensure_privilege_switch(self) -> None:
        """Make sure the su-exec helper is available."""
        ...

    def ensure_supervisor(self) -> None:
        """Make sure the tini supervisor is available."""
        ...


@runtime_checkable
class IProcessReplacer(Protocol):
    """One-shot replacement of the current process image."""

    def replace(self, argv: list[str]) -> NoReturn:
        """Replace the current process with ``argv``; never returns.

        Raises:
            CommandNotFoundError: If the program cannot be executed
        """
        ...
