"""Fan-out execution exports."""

from .fanout_executor import DEFAULT_JOIN_TIMEOUT_SECONDS, FanoutExecutor
from .fanout_outcomes import CollectedIdentifiers, FanoutOutcome, IdentifierCollector, UnitFailure

__all__ = [
    "CollectedIdentifiers",
    "DEFAULT_JOIN_TIMEOUT_SECONDS",
    "FanoutExecutor",
    "FanoutOutcome",
    "IdentifierCollector",
    "UnitFailure",
]
