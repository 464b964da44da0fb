"""Core functionality: models, chain registry, monitor loop, and command controller.

Only the models are re-exported here; the registry, monitor and controller
modules pull in the fetchers package, which itself depends on the models.
"""

from chain_balance_monitor.core.models import (
    BalanceResult,
    ChainBalance,
    ChainDescriptor,
    FetchFailure,
    FetchKind,
    MonitoringState,
)

__all__ = [
    "BalanceResult",
    "ChainBalance",
    "ChainDescriptor",
    "FetchFailure",
    "FetchKind",
    "MonitoringState",
]
