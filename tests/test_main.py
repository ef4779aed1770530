# Tests for the console rendering in main.py.
# Events are stand-ins with the attributes the runner's events carry.
import json
from types import SimpleNamespace

import main


def call(name, **args):
    return SimpleNamespace(function_call=SimpleNamespace(name=name, args=args),
                           function_response=None, text=None)


def result(name, response):
    return SimpleNamespace(function_call=None,
                           function_response=SimpleNamespace(name=name, response=response), text=None)


def text(value):
    return SimpleNamespace(function_call=None, function_response=None, text=value)


def event(*parts):
    return SimpleNamespace(content=SimpleNamespace(parts=list(parts)))


def mcp_result(payload):
    return {"content": [{"type": "text", "text": json.dumps(payload)}], "isError": False}


class TestDescribeEvent:

    def test_tool_call_with_arguments(self):
        """Test that a tool call is echoed with its arguments."""
        lines, answer = main.describe_event(event(call("get_site", server_id=1, site_id=2)))
        assert lines == ["  🔧 get_site(server_id=1, site_id=2)"]
        assert answer is None

    def test_secret_arguments_hidden(self):
        """Test that file contents and passwords are masked."""
        lines, _ = main.describe_event(event(call("update_env_file", server_id=1, content="APP_KEY=x")))
        assert lines == ["  🔧 update_env_file(server_id=1, content=***)"]

    def test_successful_result(self):
        """Test a tool result that Forge accepted."""
        lines, _ = main.describe_event(event(result("deploy_site", mcp_result({"success": True}))))
        assert lines == ["  ✅ deploy_site: ok"]

    def test_failed_result(self):
        """Test that a failed tool shows its error."""
        response = mcp_result({"success": False, "error": "Not Found"})
        lines, _ = main.describe_event(event(result("get_site", response)))
        assert lines == ["  ❌ get_site: Not Found"]

    def test_partial_result(self):
        """Test that a composite with failed secondary calls is flagged."""
        response = mcp_result({"success": True, "errors": [{"call": "daemons", "error": "HTTP 500"}]})
        lines, _ = main.describe_event(event(result("server_health_check", response)))
        assert lines == ["  ⚠️  server_health_check: ok with 1 failed call(s)"]

    def test_unreadable_result(self):
        """Test that a result without tool JSON is still reported."""
        lines, _ = main.describe_event(event(result("list_servers", {"content": [{"type": "text", "text": "?"}]})))
        assert lines == ["  ↩  list_servers: done"]

    def test_final_text(self):
        """Test that text parts become the answer."""
        lines, answer = main.describe_event(event(text("All servers are healthy.")))
        assert lines == []
        assert answer == "All servers are healthy."

    def test_empty_event(self):
        """Test an event without content."""
        assert main.describe_event(SimpleNamespace(content=None)) == ([], None)


class TestToolPayload:

    def test_plain_dict(self):
        """Test a response that is already the tool's JSON object."""
        assert main.tool_payload({"success": True, "site": {}}) == {"success": True, "site": {}}

    def test_result_string(self):
        """Test a response wrapping the JSON text under result."""
        assert main.tool_payload({"result": json.dumps({"success": False})}) == {"success": False}

    def test_not_a_dict(self):
        """Test that other shapes give None."""
        assert main.tool_payload("text") is None
        assert main.tool_payload({"content": [{"type": "text", "text": "[1, 2]"}]}) is None
