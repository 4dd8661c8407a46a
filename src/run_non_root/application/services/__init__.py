"""Application services for run-non-root."""

from run_non_root.application.services.identity_materializer import (
    IdentityMaterializer,
)
from run_non_root.application.services.ownership_updater import OwnershipUpdater
from run_non_root.application.services.privilege_drop_executor import (
    PrivilegeDropExecutor,
)
from run_non_root.application.services.snapshot import capture_snapshot

__all__ = [
    "IdentityMaterializer",
    "OwnershipUpdater",
    "PrivilegeDropExecutor",
    "capture_snapshot",
]
