# tests/entwine/http/test_client.py
from __future__ import annotations
import httpx
import pytest

from entwine.core.errors import NetworkError
from entwine.http import client as http_client
from tests.helpers import jsonResponse


def test_getJson_returns_parsed_body(mockHttp):
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return jsonResponse([{"id": "a"}])

    mockHttp(handler)

    assert http_client.getJson("https://example.test/api/mods") == [{"id": "a"}]
    assert seen[0].headers["User-Agent"] == http_client.USER_AGENT
    assert seen[0].headers["Accept"] == "application/json"


def test_getJson_parses_json_served_as_text(mockHttp):
    mockHttp(lambda request: httpx.Response(200, text='{"ok": true}'))
    assert http_client.getJson("https://example.test/x") == {"ok": True}


def test_getJson_malformed_body_is_network_error(mockHttp):
    mockHttp(lambda request: httpx.Response(200, text="<html>oops</html>"))
    with pytest.raises(NetworkError):
        http_client.getJson("https://example.test/x")


def test_error_status_is_network_error_and_not_retried(mockHttp):
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(503, text="busy")

    mockHttp(handler)

    with pytest.raises(NetworkError) as excInfo:
        http_client.request("GET", "https://example.test/x")

    assert calls == 1
    assert excInfo.value.details["status"] == 503


def test_timeout_is_network_error(mockHttp):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    mockHttp(handler)

    with pytest.raises(NetworkError) as excInfo:
        http_client.request("GET", "https://example.test/x", timeoutMs=50)
    assert excInfo.value.details["timeoutMs"] == 50


def test_transport_failure_is_network_error(mockHttp):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    mockHttp(handler)

    with pytest.raises(NetworkError):
        http_client.download("https://example.test/file.zip")


def test_download_returns_bytes(mockHttp):
    mockHttp(lambda request: httpx.Response(200, content=b"\x00\x01zip"))
    assert http_client.download("https://example.test/file.zip") == b"\x00\x01zip"
