"""Shared fixtures: an in-process fake JSON-RPC node."""

from __future__ import annotations

import asyncio
import json
from typing import Any, Awaitable, Callable

import httpx
import pytest

from ethtx.rpc.client import JsonRpcClient

# EIP-155 example key; its address is derived in the tests that need it.
TEST_PRIVATE_KEY = "0x" + "46" * 32


class RpcFailure:
    """A canned JSON-RPC error object."""

    def __init__(self, code: int, message: str, data: Any = None) -> None:
        self.error: dict[str, Any] = {"code": code, "message": message}
        if data is not None:
            self.error["data"] = data


class FakeNode:
    """Answers JSON-RPC requests from a method -> result table and records them.

    A table value may be a plain result, an RpcFailure, or a callable taking
    the request params and returning either.
    """

    def __init__(self) -> None:
        self.responses: dict[str, Any] = {}
        self.calls: list[tuple[str, list]] = []

    @property
    def methods(self) -> list[str]:
        return [method for method, _ in self.calls]

    def params_for(self, method: str) -> list:
        for name, params in self.calls:
            if name == method:
                return params
        raise AssertionError(f"{method} was never called")

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        method = body["method"]
        self.calls.append((method, body["params"]))

        if method not in self.responses:
            error = {"code": -32601, "message": f"the method {method} does not exist"}
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "error": error})

        value = self.responses[method]
        if callable(value):
            value = value(body["params"])
        if isinstance(value, RpcFailure):
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "error": value.error})
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": value})

    def client(self, url: str = "http://node.test") -> JsonRpcClient:
        return JsonRpcClient(url, transport=httpx.MockTransport(self.handler))

    def run(self, fn: Callable[[JsonRpcClient], Awaitable[Any]]) -> Any:
        """Run ``fn(client)`` to completion against this node."""

        async def _main() -> Any:
            async with self.client() as client:
                return await fn(client)

        return asyncio.run(_main())


@pytest.fixture()
def node() -> FakeNode:
    return FakeNode()


@pytest.fixture()
def private_key() -> str:
    return TEST_PRIVATE_KEY
