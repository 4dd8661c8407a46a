"""Domain-oriented observability for infrastructure adapters.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from run_non_root.infrastructure.observability.command_probe import (
    CommandProbe,
    DefaultCommandProbe,
)

__all__ = [
    "CommandProbe",
    "DefaultCommandProbe",
]
