# Tests for the agent system prompt in forge_agent/prompt.py.
from datetime import date

from forge_agent.prompt import get_forge_ops_prompt


class TestOpsPrompt:
    """Tests for get_forge_ops_prompt."""

    def test_date_injected(self):
        """Test that the given date appears in the prompt."""
        assert "TODAY'S DATE: 2025-03-14" in get_forge_ops_prompt(date(2025, 3, 14))

    def test_defaults_to_today(self):
        """Test that today's date is used when none is given."""
        assert date.today().isoformat() in get_forge_ops_prompt()

    def test_mentions_core_tools(self):
        """Test that the prompt steers the agent to the right tools."""
        prompt = get_forge_ops_prompt()
        for name in ("list_servers", "server_health_check", "ssl_expiration_check", "deploy_site"):
            assert name in prompt

    def test_requires_confirmation_for_writes(self):
        """Test that destructive actions need explicit confirmation."""
        assert "confirmation" in get_forge_ops_prompt().lower()
