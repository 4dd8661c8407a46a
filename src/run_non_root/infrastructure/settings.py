"""Runtime settings using pydantic-settings.

Settings are loaded from ``RUN_NON_ROOT_*`` environment variables;
command-line options override them. Ids are kept as raw strings here so
that validation can report the dedicated exit codes.
"""

import os
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RunNonRootSettings(BaseSettings):
    """Environment configuration for run-non-root.

    Environment variables:
        RUN_NON_ROOT_COMMAND: Command to execute if none is given (default: sh)
        RUN_NON_ROOT_GID: Group ID to use when executing the command
        RUN_NON_ROOT_GROUP: Group name to use when executing the command
        RUN_NON_ROOT_UID: User ID to use when executing the command
        RUN_NON_ROOT_USER: Username to use when executing the command
        RUN_NON_ROOT_PATH: Paths to chown (non-recursively), separated by os.pathsep
        RUN_NON_ROOT_RECURSIVE_PATH: Paths to create and chown recursively,
            separated by os.pathsep
    """

    model_config = SettingsConfigDict(
        env_prefix="RUN_NON_ROOT_",
        extra="ignore",
    )

    command: str = Field(default="", description="Command to execute")
    gid: str = Field(default="", description="Group ID")
    group: str = Field(default="", description="Group name")
    uid: str = Field(default="", description="User ID")
    user: str = Field(default="", description="Username")
    path: str = Field(default="", description="Paths to chown non-recursively")
    recursive_path: str = Field(default="", description="Paths to chown recursively")

    @staticmethod
    def _split(value: str) -> list[str]:
        return [part for part in value.split(os.pathsep) if part]

    @property
    def paths(self) -> list[str]:
        """Non-recursive ownership targets, in order."""
        return self._split(self.path)

    @property
    def recursive_paths(self) -> list[str]:
        """Recursive ownership targets, in order."""
        return self._split(self.recursive_path)


@lru_cache
def get_settings() -> RunNonRootSettings:
    """Get cached settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return RunNonRootSettings()
