"""Balances read from a Blockscout-style REST explorer."""

import httpx

from chain_balance_monitor.core.models import ChainDescriptor, FetchKind
from chain_balance_monitor.fetchers.base import DEFAULT_TIMEOUT, BaseBalanceFetcher, FetcherRegistry
from chain_balance_monitor.integrations.blockscout import BlockscoutAPIError, BlockscoutClient

BALANCE_FIELD = "coin_balance"


def parse_coin_balance(data: dict) -> int:
    """
    Extract the integer ``coin_balance`` from an address response.

    The explorer sends it as a decimal string, occasionally as a JSON number.

    Raises
    ------
    ValueError
        If the field is missing, null, negative or not an integer

    """
    value = data.get(BALANCE_FIELD)
    if value is None:
        msg = f"Response has no '{BALANCE_FIELD}' value"
        raise ValueError(msg)

    if isinstance(value, bool) or not isinstance(value, (str, int)):
        msg = f"Malformed {BALANCE_FIELD}: {value!r}"
        raise ValueError(msg)

    if isinstance(value, str):
        if not value.strip().isdigit():
            msg = f"Malformed {BALANCE_FIELD}: {value!r}"
            raise ValueError(msg)
        return int(value)

    if value < 0:
        msg = f"Negative {BALANCE_FIELD}: {value}"
        raise ValueError(msg)
    return value


@FetcherRegistry.register
class TokenRestFetcher(BaseBalanceFetcher):
    """Fetches a balance from an address-indexed REST endpoint."""

    kind = FetchKind.TOKEN_REST
    recoverable_errors = (BlockscoutAPIError, ValueError)

    def __init__(self, client: httpx.AsyncClient, timeout: float = DEFAULT_TIMEOUT) -> None:
        super().__init__(client, timeout)
        self.api = BlockscoutClient(client, timeout=timeout)

    async def _fetch_raw(self, descriptor: ChainDescriptor, address: str) -> int:
        data = await self.api.get_address(descriptor.endpoint_url, address, headers=descriptor.extra_headers)
        return parse_coin_balance(data)
