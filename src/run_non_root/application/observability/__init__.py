"""Domain-Oriented Observability for the application layer.

Probes for application service operations following Domain-Oriented Observability patterns.
"""

from run_non_root.application.observability.executor_probe import (
    DefaultExecutorProbe,
    ExecutorProbe,
)
from run_non_root.application.observability.materializer_probe import (
    DefaultMaterializerProbe,
    MaterializerProbe,
)
from run_non_root.application.observability.ownership_probe import (
    DefaultOwnershipProbe,
    OwnershipProbe,
)

__all__ = [
    "ExecutorProbe",
    "DefaultExecutorProbe",
    "MaterializerProbe",
    "DefaultMaterializerProbe",
    "OwnershipProbe",
    "DefaultOwnershipProbe",
]
