"""Balance fetch strategies, one per chain kind."""

# Import all fetchers to trigger auto-registration
from chain_balance_monitor.fetchers.base import (
    BalanceFetcher,
    BaseBalanceFetcher,
    FetcherRegistry,
    format_amount,
)
from chain_balance_monitor.fetchers.native_rpc import NativeRpcFetcher
from chain_balance_monitor.fetchers.token_rest import TokenRestFetcher

__all__ = [
    "BalanceFetcher",
    "BaseBalanceFetcher",
    "FetcherRegistry",
    "NativeRpcFetcher",
    "TokenRestFetcher",
    "format_amount",
]
