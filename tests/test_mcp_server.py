# Tests for the FastMCP wiring in forge_tools/mcp_server.py.
# Tool calls go through _run() with a FakeTransport-backed client; nothing
# here talks to Forge or starts the stdio server.
import json
import logging

import pytest

from forge_client import ForgeClient
from forge_client import models as m
from forge_client.errors import ConfigurationError
from forge_tools import mcp_server
from forge_tools.handlers import TOOLS


@pytest.fixture
def served(monkeypatch, transport):
    monkeypatch.setattr(mcp_server, "_client", ForgeClient(transport))
    return transport


class TestAdvertisedTools:

    def test_every_tool_advertised(self):
        """Test that the server exposes exactly the registered tools."""
        assert mcp_server.ADVERTISED == set(TOOLS)

    def test_composites_advertised(self):
        """Test that the combined tools are among them."""
        for name in ("server_health_check", "ssl_expiration_check", "site_dashboard",
                     "bulk_deploy", "clone_site"):
            assert name in mcp_server.ADVERTISED


class TestRun:
    """Tests for _run(), the path every advertised tool takes."""

    def test_success(self, served, payload):
        """Test a read tool rendered as success JSON."""
        served.add("GET", "/servers/1/daemons/2", {"daemon": payload(m.Daemon, id=2, command="php worker")})
        result = json.loads(mcp_server._run("get_daemon", server_id=1, daemon_id=2))
        assert result["success"] is True
        assert result["daemon"]["command"] == "php worker"

    def test_none_arguments_dropped(self, served):
        """Test that unset optional arguments are not sent as nulls."""
        served.add("POST", "/servers/1/daemons", {"daemon": {
            "id": 3, "command": "php worker", "user": "forge", "status": "installing",
            "directory": "/home/forge", "created_at": "2024-01-01",
        }})
        mcp_server._run("create_daemon", server_id=1, command="php worker", directory="/home/forge",
                        user=None, processes=None, startsecs=None)
        assert served.last["body"] == {"command": "php worker", "directory": "/home/forge", "user": "forge"}

    def test_validation_error(self, served):
        """Test that bad arguments never reach the transport."""
        result = json.loads(mcp_server._run("get_daemon", server_id=0, daemon_id=2))
        assert result["success"] is False
        assert result["violations"] == ["server_id: Input should be greater than or equal to 1"]
        assert served.calls == []

    def test_missing_configuration(self, monkeypatch):
        """Test that a missing token becomes a tool error, not a crash."""
        def fail():
            raise ConfigurationError("FORGE_API_TOKEN is not set")

        monkeypatch.setattr(mcp_server, "_client", None)
        monkeypatch.setattr(mcp_server, "load_settings", fail)
        result = json.loads(mcp_server._run("list_servers"))
        assert result == {"success": False, "error": "FORGE_API_TOKEN is not set"}

    def test_secrets_not_logged(self, served, caplog):
        """Test that passwords and file contents stay out of the log."""
        served.add("PUT", "/servers/1/sites/2/env", None)
        with caplog.at_level(logging.INFO):
            mcp_server._run("update_env_file", server_id=1, site_id=2, content="DB_PASSWORD=hunter2")
        assert "update_env_file called with: server_id=1, site_id=2" in caplog.text
        assert "hunter2" not in caplog.text
        assert "changes server state" in caplog.text


class TestGuides:
    """The markdown documents served as resources."""

    @pytest.mark.parametrize("uri", sorted(mcp_server.GUIDES))
    def test_guide_readable(self, uri):
        """Test that every advertised guide exists and starts with a heading."""
        text = mcp_server.read_guide(uri)
        assert text.startswith("# ")
        assert len(text.splitlines()) > 10

    def test_uris(self):
        """Test the forge:// scheme and unique titles."""
        assert all(uri.startswith("forge://") for uri in mcp_server.GUIDES)
        titles = [title for _, title, _ in mcp_server.GUIDES.values()]
        assert len(titles) == len(set(titles))

    def test_unknown_guide(self):
        """Test that an unknown URI is a KeyError."""
        with pytest.raises(KeyError):
            mcp_server.read_guide("forge://guides/nope")
