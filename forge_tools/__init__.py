# =============================================================================
# forge_tools/__init__.py
# =============================================================================
# The tool layer: the "translation layer" between an agent and the Forge
# client.
#
#   validation.py   → validate_input(), pydantic checks of tool arguments
#   handlers.py     → ToolDefinition registry + run_tool(), the error boundary
#   server_tools.py → server, service, database, backup, recipe ... tools
#   site_tools.py   → site, deployment, certificate, worker, integration tools
#   composites.py   → tools that combine several Forge calls
#   workflows.py    → markdown playbooks served as MCP prompts
#   guides/         → reference documents served as MCP resources
#   mcp_server.py   → the FastMCP server advertising all of it over stdio
#
# WHAT TOOLS DO NOT DO:
#   - They do NOT build URLs or parse JSON (that's forge_client/)
#   - They do NOT decide what to call next (that's the agent's job)
#   - They do NOT let an exception escape to the agent
# =============================================================================
