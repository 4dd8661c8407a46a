"""Privilege-drop executor.

Drives one invocation from the identity check to the replacement of
the current process image:

    CheckIdentity -> AlreadyNonRoot ----------------------------> Replace
                  -> ResolveAndMaterialize -> ApplyOwnership -> Replace

Replacement is terminal. A fatal error at any earlier step ends the
invocation without rolling back what was already created.
"""

from __future__ import annotations

from typing import NoReturn

from run_non_root.application.observability import (
    DefaultExecutorProbe,
    ExecutorProbe,
)
from run_non_root.application.services.identity_materializer import (
    IdentityMaterializer,
)
from run_non_root.application.services.ownership_updater import OwnershipUpdater
from run_non_root.application.services.snapshot import capture_snapshot
from run_non_root.domain.resolver import IdentityResolver
from run_non_root.domain.value_objects import (
    SUPERUSER_NAME,
    ExecutionPlan,
    Invocation,
)
from run_non_root.ports.directory import IIdentityDirectory
from run_non_root.ports.host import IProcessReplacer, IToolInstaller


class PrivilegeDropExecutor:
    """Application service orchestrating the whole hand-off."""

    def __init__(
        self,
        directory: IIdentityDirectory,
        materializer: IdentityMaterializer,
        ownership_updater: OwnershipUpdater,
        replacer: IProcessReplacer,
        tools: IToolInstaller | None = None,
        resolver: IdentityResolver | None = None,
        probe: ExecutorProbe | None = None,
    ):
        """Initialize PrivilegeDropExecutor with dependencies.

        Args:
            directory: Host user/group lookups
            materializer: Creates flagged users and groups
            ownership_updater: Applies requested ownership changes
            replacer: Replaces the current process image
            tools: Optional installer for su-exec and tini
            resolver: Identity resolver (a default one is created if omitted)
            probe: Optional domain probe for observability
        """
        self._directory = directory
        self._materializer = materializer
        self._ownership_updater = ownership_updater
        self._replacer = replacer
        self._tools = tools
        self._resolver = resolver or IdentityResolver()
        self._probe = probe or DefaultExecutorProbe()

    def plan(self, invocation: Invocation) -> ExecutionPlan:
        """Run every step before the hand-off and return the execution plan.

        As root, this resolves the identity, creates what is missing and
        updates ownership. As any other user, all identity and ownership
        options are ignored.

        Raises:
            RunNonRootError: On any fatal materialization or directory error
        """
        current_user = self._directory.current_username()
        is_superuser = current_user == SUPERUSER_NAME
        self._probe.identity_checked(current_user=current_user, is_superuser=is_superuser)

        if not is_superuser:
            self._probe.options_ignored(current_user=current_user)
            return ExecutionPlan(
                identity=None,
                command=invocation.command,
                init=invocation.init,
            )

        request = invocation.identity
        snapshot = capture_snapshot(self._directory, request)
        resolved = self._resolver.resolve(request, snapshot)
        resolved = self._materializer.materialize(resolved)
        self._ownership_updater.update(
            resolved, invocation.paths, invocation.recursive_paths
        )

        return ExecutionPlan(
            identity=resolved,
            command=invocation.command,
            init=invocation.init,
            paths=invocation.paths,
            recursive_paths=invocation.recursive_paths,
        )

    def execute(self, plan: ExecutionPlan) -> NoReturn:
        """Replace the current process with the planned command.

        Raises:
            CommandNotFoundError: If the program cannot be executed
        """
        if self._tools is not None:
            if plan.init:
                self._tools.ensure_supervisor()
            if plan.identity is not None:
                self._tools.ensure_privilege_switch()

        argv = plan.argv()
        self._probe.replacing_process(argv=argv)
        self._replacer.replace(argv)

    def run(self, invocation: Invocation) -> NoReturn:
        """Plan and execute in one step."""
        self.execute(self.plan(invocation))
