"""Tests for the shared HTTP client."""

import httpx
import pytest

from detakit.exceptions import BadRequest, HTTPError, SerializationError, TransportError
from detakit.https import HttpClient


def _client(handler):
    return HttpClient("https://api.example.test/v1/p/n", api_key="p_secret", transport=httpx.MockTransport(handler))


class TestRequest:
    def test_headers_and_url(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"ok": True})

        with _client(handler) as client:
            assert client.request_json("POST", "/items", json={"a": 1}) == {"ok": True}

        request = seen[0]
        assert str(request.url) == "https://api.example.test/v1/p/n/items"
        assert request.headers["X-API-Key"] == "p_secret"
        assert request.headers["Content-Type"] == "application/json"

    def test_binary_body_content_type(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(201, json={})

        with _client(handler) as client:
            client.request("POST", "/files?name=a%2Fb", content=b"\x00\x01")

        assert seen[0].headers["Content-Type"] == "application/octet-stream"
        assert seen[0].url.raw_path.decode() == "/v1/p/n/files?name=a%2Fb"

    def test_error_message_from_errors_list(self):
        with _client(lambda r: httpx.Response(400, json={"errors": ["bad key", "bad value"]})) as client:
            with pytest.raises(BadRequest) as exc_info:
                client.request("GET", "/items/x")
        assert exc_info.value.message == "bad key; bad value"
        assert exc_info.value.details["path"] == "/items/x"

    def test_error_message_falls_back_to_reason(self):
        with _client(lambda r: httpx.Response(502, text="<html>")) as client:
            with pytest.raises(HTTPError) as exc_info:
                client.request("GET", "/items/x")
        assert exc_info.value.status == 502
        assert exc_info.value.message == "Bad Gateway"

    def test_transport_error(self):
        def handler(request):
            raise httpx.ReadTimeout("read timed out")

        with _client(handler) as client:
            with pytest.raises(TransportError) as exc_info:
                client.request("GET", "/items/x")
        assert isinstance(exc_info.value.__cause__, httpx.ReadTimeout)


class TestDecoding:
    def test_empty_body_is_empty_dict(self):
        with _client(lambda r: httpx.Response(200)) as client:
            assert client.request_json("DELETE", "/items/x") == {}

    def test_invalid_json(self):
        with _client(lambda r: httpx.Response(200, text="not json")) as client:
            with pytest.raises(SerializationError):
                client.request_json("GET", "/items/x")

    def test_bytes(self):
        with _client(lambda r: httpx.Response(200, content=b"raw")) as client:
            assert client.request_bytes("GET", "/files/download?name=a") == b"raw"
