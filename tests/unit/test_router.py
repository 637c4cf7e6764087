"""Tests for RegistryReader: web-router read-back."""

from __future__ import annotations

import httpx
import pytest

from manifold_publish.bridge.router import RegistryReader
from manifold_publish.bridge.transport import TransportError


class TestRegistryReader:
    def test_fetch_returns_body_bytes(self):
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            return httpx.Response(200, content=b'{"id":"orin"}')

        with RegistryReader("https://registry.test/", transport=httpx.MockTransport(handler)) as r:
            assert r.fetch("omni", "personas", "orin") == b'{"id":"orin"}'
        assert seen == ["https://registry.test/@omni/personas/orin"]

    def test_not_found_raises(self):
        with RegistryReader(
            "https://registry.test", transport=httpx.MockTransport(lambda r: httpx.Response(404))
        ) as r:
            with pytest.raises(TransportError, match="not found") as info:
                r.fetch("omni", "personas", "ghost")
        assert info.value.status_code == 404

    def test_connection_error_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with RegistryReader("https://registry.test", transport=httpx.MockTransport(handler)) as r:
            with pytest.raises(TransportError, match="Failed to fetch"):
                r.fetch("omni", "personas", "orin")
