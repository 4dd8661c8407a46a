"""Ports (interfaces) for run-non-root.

Ports define the contracts for the host's identity databases and
privileged primitives without specifying implementation details.
"""

from run_non_root.ports.directory import IIdentityDirectory
from run_non_root.ports.exceptions import (
    CommandNotFoundError,
    DirectoryCreationError,
    GroupCreationError,
    UserCreationError,
)
from run_non_root.ports.host import (
    IAccountProvisioner,
    IOwnershipManager,
    IProcessReplacer,
    IToolInstaller,
)

__all__ = [
    "IIdentityDirectory",
    "IAccountProvisioner",
    "IOwnershipManager",
    "IProcessReplacer",
    "IToolInstaller",
    "CommandNotFoundError",
    "DirectoryCreationError",
    "GroupCreationError",
    "UserCreationError",
]
