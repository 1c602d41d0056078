"""Shared fixtures: an in-process fake NEO node behind httpx.MockTransport."""

from __future__ import annotations

import json
import threading
from typing import Any, Callable, Optional

import httpx
import pytest

from neorpc.rpc.client import RpcClient
from neorpc.nep5.helper import Nep5Helper
from neorpc.types import UInt160

ENDPOINT = "http://node.test:10332"

TOKEN_HASH = UInt160.from_string("0xecc6b20d3ccac1ee9ef109af5a7cdb85706b1df9")
ACCOUNT_HASH = UInt160.from_string("0x0f2b5d7c1d0e3a4b5c6d7e8f9a0b1c2d3e4f5a6b")
OTHER_HASH = UInt160.from_string("0x1111111111111111111111111111111111111111")


class FakeNode:
    """
    Records every JSON-RPC request and answers from a per-method table.

    A table entry is either a result payload, an ``{"error": ...}`` marker
    built with ``node_error()``, or a callable taking the params list.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.bodies: list[dict[str, Any]] = []
        self.responses: dict[str, Any] = {}
        self._lock = threading.Lock()

    def reply(self, method: str, result: Any) -> None:
        self.responses[method] = result

    def reply_error(self, method: str, code: int, message: str) -> None:
        self.responses[method] = {"__error__": {"code": code, "message": message}}

    def invoke_result(
        self, stack: list[dict[str, Any]], state: str = "HALT, BREAK"
    ) -> None:
        self.reply(
            "invokescript",
            {"script": "00", "state": state, "gas_consumed": "0.126", "stack": stack},
        )

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        with self._lock:
            self.requests.append(request)
            self.bodies.append(body)
        answer = self.responses.get(body["method"])
        if callable(answer):
            answer = answer(body["params"])
        if isinstance(answer, dict) and "__error__" in answer:
            payload = {"jsonrpc": "2.0", "id": body["id"], "error": answer["__error__"]}
        else:
            payload = {"jsonrpc": "2.0", "id": body["id"], "result": answer}
        return httpx.Response(200, json=payload)

    @property
    def last(self) -> dict[str, Any]:
        return self.bodies[-1]


def make_client(
    handler: Callable[[httpx.Request], httpx.Response],
    endpoint: str = ENDPOINT,
    timeout: Optional[float] = 5.0,
) -> RpcClient:
    return RpcClient(endpoint, timeout=timeout, transport=httpx.MockTransport(handler))


@pytest.fixture()
def node() -> FakeNode:
    return FakeNode()


@pytest.fixture()
def client(node: FakeNode) -> RpcClient:
    rpc = make_client(node)
    yield rpc
    rpc.close()


@pytest.fixture()
def helper(client: RpcClient) -> Nep5Helper:
    return Nep5Helper(client=client)
