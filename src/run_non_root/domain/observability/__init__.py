"""Domain-Oriented Observability for identity resolution.

Probes for resolver decisions following Domain-Oriented Observability patterns.
"""

from run_non_root.domain.observability.resolution_probe import (
    DefaultIdentityResolutionProbe,
    IdentityResolutionProbe,
)

__all__ = [
    "DefaultIdentityResolutionProbe",
    "IdentityResolutionProbe",
]
