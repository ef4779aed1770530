# =============================================================================
# forge_agent/forge_agent.py  —  Google ADK Agent Configuration
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Creates the Forge operations assistant: a Google ADK agent whose only
#   capabilities are the tools advertised by forge_tools/mcp_server.py.
#
# ADK + LiteLlm:
#   ADK is the agent framework (orchestration, tool calling, sessions).
#   LiteLlm lets it use a non-Gemini model.  The model string comes from
#   FORGE_AGENT_MODEL and defaults to GPT-4o through OpenRouter; LiteLlm
#   reads the provider key (OPENROUTER_API_KEY, ...) from the environment.
#
#   ┌──────────────────────┐     stdio      ┌──────────────────────────┐
#   │  ADK Agent (LiteLlm) │ ─────────────▶ │  forge_tools.mcp_server  │
#   │  + ops prompt        │ ◀───────────── │  run_tool → ForgeClient  │
#   └──────────────────────┘                └──────────────────────────┘
#                                                        │ HTTPS
#                                                        ▼
#                                             forge.laravel.com/api/v1
#
# MCP CONNECTION:
#   ADK starts the MCP server as a subprocess ("uv run python -m
#   forge_tools.mcp_server" from the project root) and talks to it over
#   stdin/stdout.  The subprocess inherits our environment, so the
#   FORGE_API_TOKEN loaded by main.py reaches it.
# =============================================================================

import os
from typing import Optional

from google.adk.agents import Agent
from google.adk.models.lite_llm import LiteLlm
from google.adk.tools.mcp_tool import MCPToolset
from mcp import StdioServerParameters

from forge_agent.prompt import get_forge_ops_prompt

DEFAULT_MODEL = "openrouter/openai/gpt-4o"


def create_agent(model: Optional[str] = None) -> Agent:
    """Create the Forge operations assistant.

    Args:
        model: LiteLlm model string.  Defaults to FORGE_AGENT_MODEL, then
            "openrouter/openai/gpt-4o".

    Returns:
        A configured Google ADK Agent instance.
    """
    project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

    mcp_tools = MCPToolset(
        connection_params=StdioServerParameters(
            command="uv",
            args=["run", "python", "-m", "forge_tools.mcp_server"],
            cwd=project_root,
            env=dict(os.environ),
        ),
    )

    model = model or os.environ.get("FORGE_AGENT_MODEL") or DEFAULT_MODEL

    return Agent(
        name="forge_ops_assistant",
        model=LiteLlm(model=model),
        instruction=get_forge_ops_prompt(),
        tools=[mcp_tools],
    )
