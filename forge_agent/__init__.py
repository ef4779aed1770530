# =============================================================================
# forge_agent/__init__.py
# =============================================================================
# The Google ADK agent that operates Forge through the MCP tool server.
#
# WHAT THE AGENT IS:
#   - A coordinator that decides WHICH tools to call and WHEN
#   - An interpreter of the tools' JSON answers
#
# WHAT THE AGENT IS NOT:
#   - It does not talk HTTP to Forge (forge_client/ does)
#   - It does not validate tool input (forge_tools/ does)
# =============================================================================
