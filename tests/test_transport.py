"""Tests for the httpx hand-off.

Tests cover:
- build_client: configured options and overrides reach httpx.Client
- send: requests reach the client intact, httpx failures become TransportError
"""

import json

import httpx
import pytest

from request_builder.builder import RequestBuilder
from request_builder.models import ClientConfig
from request_builder.transport import TransportError, build_client, send


def _client(handler) -> httpx.Client:
    return build_client(ClientConfig(), transport=httpx.MockTransport(handler))


class TestBuildClient:
    def test_configured_options(self) -> None:
        config = ClientConfig(timeout=2.5, follow_redirects=True, verify_ssl=False)
        with build_client(config) as client:
            assert client.timeout == httpx.Timeout(2.5)
            assert client.follow_redirects is True

    def test_follows_redirects_when_configured(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/old":
                return httpx.Response(302, headers={"Location": "https://api.example.com/new"})
            return httpx.Response(200, text=request.url.path)

        config = ClientConfig(follow_redirects=True)
        request = RequestBuilder("https://api.example.com/old").make()
        with build_client(config, transport=httpx.MockTransport(handler)) as client:
            response = send(client, request)
        assert response.status_code == 200
        assert response.text == "/new"

    def test_redirects_not_followed_by_default(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(302, headers={"Location": "https://api.example.com/new"})

        with _client(handler) as client:
            response = send(client, RequestBuilder("https://api.example.com/old").make())
        assert response.status_code == 302


class TestSend:
    def test_request_reaches_transport(self, entity_record) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(201, json={"ok": True})

        request = (
            RequestBuilder("https://api.example.com/items/{id}")
            .post()
            .add()
            .variable("id", "42")
            .query_parameter("dry_run", True)
            .header("x-trace", "abc")
            .with_json_entity(entity_record)
            .make()
        )
        with _client(handler) as client:
            response = send(client, request)

        assert response.status_code == 201
        assert response.json() == {"ok": True}
        sent = seen[0]
        assert sent.method == "POST"
        assert str(sent.url) == "https://api.example.com/items/42?dry_run=true"
        assert sent.headers["X-Trace"] == "abc"
        assert sent.headers["Content-Type"] == "application/json"
        assert json.loads(sent.content) == {
            "field1": "value1",
            "field2": True,
            "field3": 12,
            "field4": "value4",
        }

    def test_error_status_is_returned(self) -> None:
        with _client(lambda request: httpx.Response(503)) as client:
            response = send(client, RequestBuilder("https://api.example.com/").make())
        assert response.status_code == 503

    @pytest.mark.parametrize(
        "error, name",
        [
            (httpx.ConnectError, "ConnectError"),
            (httpx.ReadTimeout, "ReadTimeout"),
            (httpx.RemoteProtocolError, "RemoteProtocolError"),
        ],
    )
    def test_httpx_errors_become_transport_errors(self, error, name: str) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise error("boom", request=request)

        with _client(handler) as client:
            with pytest.raises(TransportError, match=f"{name} while sending GET") as exc_info:
                send(client, RequestBuilder("https://api.example.com/").make())
        assert isinstance(exc_info.value.__cause__, error)
