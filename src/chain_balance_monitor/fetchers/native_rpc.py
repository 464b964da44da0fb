"""Native coin balances via JSON-RPC ``eth_getBalance``."""

import re

import httpx

from chain_balance_monitor.core.models import ChainDescriptor, FetchKind
from chain_balance_monitor.fetchers.base import DEFAULT_TIMEOUT, BaseBalanceFetcher, FetcherRegistry
from chain_balance_monitor.rpc.provider import JsonRpcError, JsonRpcProvider

_HEX_QUANTITY = re.compile(r"^0x[0-9a-fA-F]+$")


def parse_hex_quantity(value: object) -> int:
    """
    Parse a JSON-RPC hex quantity such as ``'0x1bc16d674ec80000'``.

    Raises
    ------
    ValueError
        If ``value`` is not a 0x-prefixed hex string

    """
    if not isinstance(value, str) or not _HEX_QUANTITY.match(value):
        msg = f"Malformed balance result: {value!r}"
        raise ValueError(msg)
    return int(value, 16)


@FetcherRegistry.register
class NativeRpcFetcher(BaseBalanceFetcher):
    """Fetches the native coin balance of an address from an EVM JSON-RPC endpoint."""

    kind = FetchKind.NATIVE_RPC
    recoverable_errors = (JsonRpcError, ValueError)

    def __init__(self, client: httpx.AsyncClient, timeout: float = DEFAULT_TIMEOUT) -> None:
        super().__init__(client, timeout)
        self.provider = JsonRpcProvider(client, timeout=timeout)

    async def _fetch_raw(self, descriptor: ChainDescriptor, address: str) -> int:
        result = await self.provider.make_request(
            descriptor.endpoint_url,
            "eth_getBalance",
            [address, "latest"],
            headers=descriptor.extra_headers,
        )
        return parse_hex_quantity(result)
