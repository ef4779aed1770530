# Tests for HttpxTransport using httpx.MockTransport (no network).
import json

import httpx
import pytest

from forge_client import ForgeClient, ForgeSettings
from forge_client import models as m
from forge_client.errors import TransportError
from forge_client.transport import HttpxTransport

BASE_URL = "https://forge.test/api/v1"


def make_transport(handler):
    return HttpxTransport("secret-token", BASE_URL, timeout=5, http_transport=httpx.MockTransport(handler))


class TestHttpxTransport:
    """Tests for the default HTTP transport."""

    def test_sends_auth_and_json_headers(self):
        """Test bearer auth, JSON headers and the joined URL."""
        seen = {}

        def handler(request):
            seen["request"] = request
            return httpx.Response(200, json={"servers": []})

        response = make_transport(handler).send("GET", "/servers", None, {})

        request = seen["request"]
        assert str(request.url) == f"{BASE_URL}/servers"
        assert request.headers["Authorization"] == "Bearer secret-token"
        assert request.headers["Accept"] == "application/json"
        assert response.status == 200
        assert response.json == {"servers": []}

    def test_json_body(self):
        """Test that the body is sent as JSON."""
        seen = {}

        def handler(request):
            seen["body"] = json.loads(request.content)
            return httpx.Response(201, json={"ok": True})

        make_transport(handler).send("POST", "/servers/1/daemons", {"command": "x"}, {})
        assert seen["body"] == {"command": "x"}

    def test_empty_success_body(self):
        """Test that a 2xx without content decodes as None."""
        response = make_transport(lambda request: httpx.Response(204)).send("DELETE", "/servers/1", None, {})
        assert response.status == 204
        assert response.json is None

    def test_error_with_json_body(self):
        """Test that a 404 carries status and parsed body."""
        transport = make_transport(lambda request: httpx.Response(404, json={"message": "Not Found"}))
        with pytest.raises(TransportError) as info:
            transport.send("GET", "/servers/9", None, {})
        assert info.value.status == 404
        assert info.value.body == {"message": "Not Found"}
        assert str(info.value) == "Not Found"

    def test_error_with_text_body(self):
        """Test that a non-JSON error body is kept as text."""
        transport = make_transport(lambda request: httpx.Response(502, text="Bad Gateway"))
        with pytest.raises(TransportError) as info:
            transport.send("GET", "/servers", None, {})
        assert info.value.status == 502
        assert info.value.body == "Bad Gateway"

    def test_error_without_body(self):
        """Test the message for an error with no body."""
        transport = make_transport(lambda request: httpx.Response(500))
        with pytest.raises(TransportError, match="HTTP 500"):
            transport.send("GET", "/servers", None, {})

    def test_network_failure(self):
        """Test that connection errors become a status-less TransportError."""
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(TransportError) as info:
            make_transport(handler).send("GET", "/servers", None, {})
        assert info.value.status is None
        assert "connection refused" in str(info.value)

    def test_from_settings(self):
        """Test construction from ForgeSettings."""
        settings = ForgeSettings(api_token="tok", base_url=BASE_URL, timeout=3)
        transport = HttpxTransport.from_settings(
            settings, http_transport=httpx.MockTransport(lambda request: httpx.Response(200, json={}))
        )
        assert transport.send("GET", "/user", None, {}).json == {}
        transport.close()


class TestClientOverHttpx:
    """The façade wired to the real transport class."""

    def test_create_daemon_end_to_end(self):
        """Test one full round trip through ForgeClient and HttpxTransport."""
        def handler(request):
            assert request.method == "POST"
            assert request.url.path == "/api/v1/servers/42/daemons"
            body = json.loads(request.content)
            return httpx.Response(200, json={"daemon": dict(body, id=7, status="installing", created_at="2024-01-01")})

        with ForgeClient(make_transport(handler)) as forge:
            daemon = forge.call("daemons", "create", 42,
                                request=m.CreateDaemon(command="php worker", directory="/home/forge"))

        assert daemon.id == 7
        assert daemon.server_id == 42
        assert daemon.command == "php worker"
