"""RPC layer for native balance queries."""

from chain_balance_monitor.rpc.provider import JsonRpcError, JsonRpcProvider

__all__ = [
    "JsonRpcError",
    "JsonRpcProvider",
]
