# =============================================================================
# main.py  —  Entry Point for the Forge Operations Assistant
# =============================================================================
#
# HOW TO RUN:
#   uv run python main.py                          # interactive
#   uv run python main.py "which servers need attention?"   # one question
#
# REQUIRED ENVIRONMENT (.env is loaded automatically):
#   FORGE_API_TOKEN      Forge personal API token (used by the tool server)
#   OPENROUTER_API_KEY   Key for the default model (read by LiteLlm)
#   FORGE_AGENT_MODEL    Optional LiteLlm model string override
#
# WHAT HAPPENS:
#   1. Creates the Google ADK agent (forge_agent/forge_agent.py), which
#      spawns the FastMCP tool server as a subprocess
#   2. Each question goes to the agent through the Runner
#   3. Every tool call is echoed with its arguments, and every tool result
#      with whether Forge accepted it
#   4. The agent's final answer is printed
#
# CONSOLE COMMANDS:
#   new    start a fresh session (the agent forgets the conversation)
#   quit   leave (also exit, q, Ctrl-D)
# =============================================================================

import asyncio
import json
import sys

from dotenv import load_dotenv

# Must run before the agent is created: LiteLlm reads its key at init and
# the MCP subprocess inherits FORGE_API_TOKEN from this process.
load_dotenv()

from google.adk.runners import Runner  # noqa: E402
from google.adk.sessions import InMemorySessionService  # noqa: E402
from google.genai import types  # noqa: E402

from forge_agent.forge_agent import create_agent  # noqa: E402

APP_NAME = "forge_ops"
USER_ID = "operator"

# Tool arguments never echoed to the console.
HIDDEN_ARGUMENTS = {"password", "content", "credentials", "packages", "blackfire_server_token", "secret"}


# =============================================================================
# Event rendering
# =============================================================================
def format_call(function_call) -> str:
    args = dict(function_call.args or {})
    shown = ", ".join(
        f"{key}=***" if key in HIDDEN_ARGUMENTS else f"{key}={value!r}"
        for key, value in args.items()
    )
    return f"  🔧 {function_call.name}({shown})"


def tool_payload(response):
    """Dig the tool's JSON object out of an MCP function response.

    ADK hands back the MCP CallToolResult as a dict; the tool's own JSON is
    the text of its first content item.  Anything unexpected yields None.
    """
    if not isinstance(response, dict):
        return None
    if "success" in response:
        return response
    for item in response.get("content") or []:
        if isinstance(item, dict) and isinstance(item.get("text"), str):
            try:
                payload = json.loads(item["text"])
            except ValueError:
                return None
            return payload if isinstance(payload, dict) else None
    result = response.get("result")
    if isinstance(result, str):
        try:
            return tool_payload(json.loads(result))
        except ValueError:
            return None
    return None


def format_result(function_response) -> str:
    payload = tool_payload(function_response.response)
    if payload is None:
        return f"  ↩  {function_response.name}: done"
    if payload.get("success") is False:
        return f"  ❌ {function_response.name}: {payload.get('error', 'failed')}"
    if payload.get("errors"):
        return f"  ⚠️  {function_response.name}: ok with {len(payload['errors'])} failed call(s)"
    return f"  ✅ {function_response.name}: ok"


def describe_event(event) -> tuple:
    """Return (console lines, final text or None) for one runner event."""
    lines = []
    text = None
    if not (event.content and event.content.parts):
        return lines, text
    for part in event.content.parts:
        if getattr(part, "function_call", None):
            lines.append(format_call(part.function_call))
        if getattr(part, "function_response", None):
            lines.append(format_result(part.function_response))
        if getattr(part, "text", None):
            text = part.text
    return lines, text


# =============================================================================
# Conversation
# =============================================================================
async def ask(runner: Runner, session_id: str, question: str) -> str:
    """Send one question and echo the agent's tool traffic; return its answer."""
    message = types.Content(role="user", parts=[types.Part(text=question)])
    answer = ""
    async for event in runner.run_async(user_id=USER_ID, session_id=session_id, new_message=message):
        lines, text = describe_event(event)
        for line in lines:
            print(line)
        if text:
            answer = text
    return answer


def print_answer(answer: str) -> None:
    print("-" * 70)
    if answer:
        print(f"\n🤖 Agent:\n\n{answer}")
    else:
        print("\n⚠️  No response generated. The agent may have encountered an error.")


async def run_agent(question: str = ""):
    """Run the Forge operations assistant, once or interactively."""
    print("=" * 70)
    print("  FORGE OPERATIONS ASSISTANT")
    print("  Powered by Google ADK + LiteLlm + FastMCP")
    print("=" * 70)
    print("\n🔧 Initializing agent...")

    session_service = InMemorySessionService()
    runner = Runner(agent=create_agent(), app_name=APP_NAME, session_service=session_service)
    session = await session_service.create_session(app_name=APP_NAME, user_id=USER_ID)
    print("✅ Agent initialized and ready!\n")

    if question:
        print_answer(await ask(runner, session.id, question))
        return

    print("💬 Ask about your servers, sites, deployments or certificates.")
    print("   ('new' starts over, 'quit' exits)\n")

    while True:
        try:
            user_input = input("\n🧑 You: ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\n\n👋 Goodbye!")
            break

        command = user_input.lower()
        if command in ("quit", "exit", "q"):
            print("\n👋 Goodbye!")
            break
        if command == "new":
            session = await session_service.create_session(app_name=APP_NAME, user_id=USER_ID)
            print("🆕 Started a new session.")
            continue
        if not user_input:
            continue

        print("-" * 70)
        print_answer(await ask(runner, session.id, user_input))
        print("\n" + "=" * 70)


if __name__ == "__main__":
    asyncio.run(run_agent(" ".join(sys.argv[1:])))
