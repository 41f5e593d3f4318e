"""
Shared fixtures for the Aptos Move scripts tests.

The fullnode is simulated by a real aiohttp server bound to localhost, so
requests go through the same HTTP stack as in production.

Usage:
    @pytest.mark.asyncio
    async def test_something(fullnode, tmp_path):
        fullnode.set_abi("cpmm", {"fields": []})
        fetcher = AbiFetcher(fullnode.base_url, tmp_path, grace_period=0)
"""

import asyncio
import json
import logging
import time
from typing import Any, Dict, List, Optional, Tuple

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from aptos_move_scripts.utils.config import (
    ENV_APTOS_CLI,
    ENV_MODULE_ADDRESS,
    ENV_NETWORK,
    ENV_NODE_URL,
    ENV_PUBLISHER_ADDRESS,
)


class FakeFullnode:
    """In-process stand-in for the fullnode module endpoint"""

    def __init__(self):
        self.base_url: Optional[str] = None
        self._responses: Dict[str, Tuple[int, bytes]] = {}
        self.requests: List[Tuple[str, str, float]] = []
        self.on_request = None
        self.delay = 0.0
        self.in_flight = 0
        self.max_in_flight = 0

    def set_abi(self, module_name: str, abi: Any) -> None:
        self.set_json(module_name, {"bytecode": "0xa11ceb0b", "abi": abi})

    def set_json(self, module_name: str, body: Any, status: int = 200) -> None:
        self._responses[module_name] = (status, json.dumps(body).encode("utf-8"))

    def set_raw(self, module_name: str, text: str, status: int = 200) -> None:
        self._responses[module_name] = (status, text.encode("utf-8"))

    def set_bytes(self, module_name: str, body: bytes, status: int = 200) -> None:
        self._responses[module_name] = (status, body)

    def requested_modules(self) -> List[str]:
        return [name for _, name, _ in self.requests]

    async def handle_module(self, request: web.Request) -> web.Response:
        address = request.match_info["address"]
        name = request.match_info["name"]
        self.requests.append((address, name, time.monotonic()))
        if self.on_request is not None:
            self.on_request(address, name)

        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
        finally:
            self.in_flight -= 1

        status, body = self._responses.get(
            name,
            (404, b'{"message":"Module not found","error_code":"module_not_found"}'),
        )
        return web.Response(status=status, body=body, content_type="application/json")


@pytest_asyncio.fixture
async def fullnode():
    """Start a fake fullnode on a free localhost port"""
    node = FakeFullnode()
    app = web.Application()
    app.router.add_get("/v1/accounts/{address}/module/{name}", node.handle_module)

    server = TestServer(app)
    await server.start_server()
    node.base_url = str(server.make_url("/v1"))
    try:
        yield node
    finally:
        await server.close()


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every variable the scripts read, restoring them afterwards"""
    for key in (ENV_NETWORK, ENV_MODULE_ADDRESS, ENV_PUBLISHER_ADDRESS, ENV_NODE_URL, ENV_APTOS_CLI):
        # setenv first so that values added during the test are undone too
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
    return monkeypatch


@pytest.fixture
def restore_root_logger():
    """Undo setup_logging's changes to the root logger"""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)
