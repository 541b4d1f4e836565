"""Shared test fixtures."""

import json
from typing import Any, Callable, Dict, List, Tuple, Union

import httpx
import pytest

from cortex_mcp.client import CortexClient
from cortex_mcp.config import CortexConfig

Reply = Union[httpx.Response, Exception, Callable[[httpx.Request], httpx.Response]]


class FakeCortex:
    """Canned Cortex API behind an ``httpx.MockTransport``.

    Replies registered for a route are served in order; the last one
    repeats. Every request is recorded.
    """

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self._routes: Dict[Tuple[str, str], List[Reply]] = {}

    def on(self, method: str, path: str, *replies: Reply) -> None:
        self._routes[(method, path)] = list(replies)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        replies = self._routes.get((request.method, request.url.path))
        if not replies:
            return httpx.Response(404, json={"detail": "no route"})
        reply = replies.pop(0) if len(replies) > 1 else replies[0]
        if isinstance(reply, Exception):
            raise reply
        if callable(reply):
            return reply(request)
        return reply

    def payloads(self) -> List[Dict[str, Any]]:
        return [json.loads(r.content) for r in self.requests if r.content]


@pytest.fixture
def config() -> CortexConfig:
    return CortexConfig(
        api_key="test-key",
        tenant_id="tenant-1",
        base_url="https://cortex.test",
    )


@pytest.fixture
def cortex() -> FakeCortex:
    return FakeCortex()


@pytest.fixture
async def client(config, cortex):
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(cortex.handler))
    async with CortexClient(config, http_client=http_client) as c:
        yield c
