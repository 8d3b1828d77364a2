"""
Pytest fixtures for healthmon tests. Outbound HTTP goes through
requests.Session, which is patched to answer from an in-memory fake node.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import pytest
import requests

NOW = 1_700_000_000.0


def make_response(status: int = 200, body: Any = None, url: str = "http://node") -> requests.Response:
    resp = requests.Response()
    resp.status_code = status
    resp.url = url
    resp.encoding = "utf-8"
    resp._content = body if isinstance(body, bytes) else json.dumps(body).encode()
    resp._content_consumed = True
    return resp


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeExecutionNode:
    """Answers eth_syncing / eth_getBlockByNumber like a JSON-RPC node."""

    def __init__(self) -> None:
        self.status = 200
        self.syncing: Any = False
        self.block: Any = {"number": "0x10", "timestamp": hex(int(NOW) - 5)}
        self.raw_body: Optional[bytes] = None
        self.calls: List[Dict[str, Any]] = []

    def post(self, url, data=None, **kwargs):
        payload = json.loads(data)
        self.calls.append({"url": url, "payload": payload, "headers": dict(kwargs.get("headers") or {})})
        if self.raw_body is not None:
            return make_response(self.status, self.raw_body, url)
        result = self.syncing if payload["method"] == "eth_syncing" else self.block
        return make_response(self.status, {"jsonrpc": "2.0", "id": payload["id"], "result": result}, url)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def execution_node(monkeypatch):
    node = FakeExecutionNode()
    monkeypatch.setattr(requests.Session, "post", lambda session, url, **kwargs: node.post(url, **kwargs))
    return node
