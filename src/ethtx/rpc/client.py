"""
Async JSON-RPC client.

Lightweight alternative to web3.py: httpx for HTTP, one request per call,
no retries and no batching. Remote error objects are surfaced verbatim.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_RPC_URL = "http://localhost:8545"
DEFAULT_CHAIN_ID = 1
DEFAULT_TIMEOUT = 30.0


def get_rpc_url() -> str:
    """Get the RPC URL from environment or default."""
    return os.environ.get("ETH_RPC_URL", DEFAULT_RPC_URL)


def get_chain_id() -> int:
    """Get the chain ID from environment or default."""
    return int(os.environ.get("CHAIN_ID", str(DEFAULT_CHAIN_ID)))


class RPCError(RuntimeError):
    """A failed round trip: transport failure or a JSON-RPC error object."""

    def __init__(self, message: str, code: Optional[int] = None, data: Any = None) -> None:
        self.code = code
        self.message = message
        self.data = data
        super().__init__(f"RPC error {code}: {message}" if code is not None else f"RPC error: {message}")


class JsonRpcClient:
    """
    JSON-RPC 2.0 client over an httpx.AsyncClient.

    Use as an async context manager so the connection pool is closed:

        async with JsonRpcClient(url) as client:
            tx_hash = await send_raw_transaction(client, raw)

    Args:
        url: Node endpoint (default: ETH_RPC_URL or http://localhost:8545)
        timeout: Per-request timeout in seconds
        transport: Optional httpx transport (e.g. httpx.MockTransport)
    """

    def __init__(
        self,
        url: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.url = url or get_rpc_url()
        self._http = httpx.AsyncClient(timeout=timeout, transport=transport)
        self._request_id = 0

    async def __aenter__(self) -> "JsonRpcClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def request(self, method: str, params: Optional[list] = None) -> Any:
        """
        Make a JSON-RPC call.

        Args:
            method: RPC method name (e.g., "eth_call")
            params: Positional RPC parameters

        Returns:
            The ``result`` field of the response (may be None)

        Raises:
            RPCError: On HTTP failure or when the response carries an error
        """
        self._request_id += 1
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params or [],
            "id": self._request_id,
        }
        logger.debug("rpc -> %s id=%d params=%s", method, self._request_id, payload["params"])

        try:
            response = await self._http.post(self.url, json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as exc:
            raise RPCError(f"{method} failed: {exc}") from exc
        except ValueError as exc:
            raise RPCError(f"{method} returned invalid JSON") from exc

        if not isinstance(data, dict):
            raise RPCError(f"{method} returned a non-object response")

        if "error" in data:
            error = data["error"]
            logger.debug("rpc <- %s id=%d error=%s", method, self._request_id, error)
            if isinstance(error, dict):
                raise RPCError(
                    error.get("message", "unknown error"),
                    code=error.get("code"),
                    data=error.get("data"),
                )
            raise RPCError(str(error))

        return data.get("result")
