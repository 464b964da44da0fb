"""Blockscout explorer API client for address balances."""

from typing import Any

import httpx

# Explorer front ends reject requests that do not look like a browser
BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)

DEFAULT_HEADERS = {
    "Accept": "application/json",
    "User-Agent": BROWSER_USER_AGENT,
}


class BlockscoutAPIError(Exception):
    """Exception raised for Blockscout API errors."""


class BlockscoutClient:
    """
    Client for Blockscout's v2 REST API.

    Parameters
    ----------
    client : httpx.AsyncClient
        Shared HTTP client
    timeout : float
        Request timeout in seconds

    """

    def __init__(self, client: httpx.AsyncClient, timeout: float = 10.0) -> None:
        self.client = client
        self.timeout = timeout

    async def get_address(
        self,
        url_template: str,
        address: str,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """
        Fetch the address summary for a wallet.

        Parameters
        ----------
        url_template : str
            Endpoint URL with an ``{address}`` placeholder
            (e.g., 'https://base-sepolia.blockscout.com/api/v2/addresses/{address}')
        address : str
            Wallet address
        headers : dict[str, str] | None
            Extra headers merged over the defaults

        Returns
        -------
        dict[str, Any]
            Decoded JSON body

        Raises
        ------
        BlockscoutAPIError
            If the request fails or the body is not a JSON object

        """
        url = url_template.format(address=address)
        request_headers = {**DEFAULT_HEADERS, **(headers or {})}

        try:
            response = await self.client.get(url, headers=request_headers, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as e:
            msg = f"Request timeout: {e}"
            raise BlockscoutAPIError(msg) from e
        except httpx.HTTPStatusError as e:
            msg = f"HTTP error {e.response.status_code}: {e}"
            raise BlockscoutAPIError(msg) from e
        except httpx.HTTPError as e:
            msg = f"HTTP request failed: {e}"
            raise BlockscoutAPIError(msg) from e
        except ValueError as e:
            msg = f"Invalid JSON in response: {e}"
            raise BlockscoutAPIError(msg) from e

        if not isinstance(data, dict):
            msg = f"Unexpected response type: {type(data).__name__}"
            raise BlockscoutAPIError(msg)

        return data
