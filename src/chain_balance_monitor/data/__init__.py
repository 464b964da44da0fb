"""Data loading and configuration management."""

from chain_balance_monitor.data.loader import (
    DEFAULT_CHAINS_FILE,
    get_all_supported_chains,
    load_chain_config,
    load_chains,
)

__all__ = [
    "DEFAULT_CHAINS_FILE",
    "get_all_supported_chains",
    "load_chain_config",
    "load_chains",
]
