"""Minimal async JSON-RPC provider over httpx."""

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class JsonRpcError(Exception):
    """Exception raised when a JSON-RPC call fails or returns an error."""


class JsonRpcProvider:
    """
    Issues single JSON-RPC 2.0 requests against arbitrary endpoints.

    One best-effort attempt per call; failures surface as JsonRpcError.

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

    async def make_request(
        self,
        url: str,
        method: str,
        params: list[Any],
        headers: dict[str, str] | None = None,
    ) -> Any:
        """
        Make an RPC request.

        Parameters
        ----------
        url : str
            RPC endpoint
        method : str
            RPC method name (e.g., 'eth_getBalance')
        params : list[Any]
            Method parameters
        headers : dict[str, str] | None
            Extra HTTP headers

        Returns
        -------
        Any
            The ``result`` member of the response

        Raises
        ------
        JsonRpcError
            On transport errors, timeouts, HTTP errors, RPC errors or malformed responses

        """
        payload = {"jsonrpc": "2.0", "method": method, "params": params, "id": 1}
        request_headers = {"Content-Type": "application/json", **(headers or {})}

        try:
            response = await self.client.post(url, json=payload, headers=request_headers, timeout=self.timeout)
            response.raise_for_status()
            body = response.json()
        except httpx.TimeoutException as e:
            msg = f"Request timeout: {e}"
            raise JsonRpcError(msg) from e
        except httpx.HTTPStatusError as e:
            # The URL may embed an API key, so only the status is reported
            msg = f"HTTP error {e.response.status_code}"
            raise JsonRpcError(msg) from e
        except httpx.HTTPError as e:
            msg = f"HTTP request failed: {e}"
            raise JsonRpcError(msg) from e
        except ValueError as e:
            msg = f"Invalid JSON in response: {e}"
            raise JsonRpcError(msg) from e

        if not isinstance(body, dict):
            msg = f"Unexpected response type: {type(body).__name__}"
            raise JsonRpcError(msg)

        error = body.get("error")
        if error:
            if isinstance(error, dict):
                msg = f"RPC error {error.get('code')}: {error.get('message')}"
            else:
                msg = f"RPC error: {error}"
            raise JsonRpcError(msg)

        if "result" not in body:
            msg = "Response has no 'result' member"
            raise JsonRpcError(msg)

        logger.debug("RPC call %s to %s succeeded", method, httpx.URL(url).host)
        return body["result"]
