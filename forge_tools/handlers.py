# =============================================================================
# forge_tools/handlers.py  —  Tool Registry + the Tool Boundary
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Holds the table of every tool the agent can call (ToolDefinition: name,
#   description, parameters, handler) and runs them through ONE boundary
#   function, run_tool().  The handlers themselves live by topic:
#
#     server_tools.py → servers, services, daemons, jobs, databases, firewall,
#                       monitors, SSH keys, PHP, backups, Nginx templates,
#                       recipes and account lookups
#     site_tools.py   → sites, deployments, git, config files, certificates,
#                       workers, webhooks, security/redirect rules, integrations
#     composites.py   → multi-call tools (health check, SSL check, dashboards,
#                       bulk deploy, site cloning)
#
# HOW A TOOL CALL FLOWS:
#   1. run_tool("list_daemons", {"server_id": 42}, client)
#   2. validate_input() checks the arguments against the declared Params
#   3. The handler makes exactly one ForgeClient call (composite tools
#      make a small fixed sequence of them)
#   4. The handler returns a plain dict; run_tool adds "success": true
#   5. The dict is rendered as pretty JSON text
#
# THE BOUNDARY RULE:
#   run_tool() NEVER raises.  Every failure (bad input, Forge error,
#   unexpected bug) comes back as {"success": false, "error": "..."}.
#   This and the composites are the only places that catch ForgeError.
#
# CONTEXT BUDGET DISCIPLINE:
#   List tools return only the fields the agent needs to reason about the
#   resource, not every column Forge sends back.
# =============================================================================

import dataclasses
import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from forge_client.errors import ForgeError
from forge_client.models import Collection
from forge_client.schema import UNSET, schema_for
from forge_tools.validation import Param, input_model, validate_input

logger = logging.getLogger(__name__)


# =============================================================================
# Tool records
# =============================================================================
@dataclass(frozen=True)
class ToolDefinition:
    name: str
    description: str
    params: tuple
    handler: Callable[[Any, dict], dict]
    read_only: bool = True

    def input_schema(self) -> dict:
        """The JSON-schema input contract advertised to the agent."""
        return input_model(self.params).model_json_schema()


TOOLS: dict = {}


class ToolInputError(Exception):
    """Arguments passed validation but break a rule the handler enforces."""


def tool(name: str, description: str, *params: Param, read_only: bool = True):
    """Register the decorated function as the handler of a tool."""
    def register(handler):
        if name in TOOLS:
            raise ValueError(f"Tool '{name}' registered twice")
        TOOLS[name] = ToolDefinition(name, description, tuple(params), handler, read_only)
        return handler
    return register


# =============================================================================
# Rendering
# =============================================================================
def to_wire(record: Any, fields: Optional[tuple] = None) -> Any:
    """Turn a decoded record (or Collection) back into wire-named JSON.

    Args:
        record: A record dataclass, a Collection, or plain JSON.
        fields: Optional subset of wire names to keep (context budget).
    """
    if isinstance(record, Collection):
        return [to_wire(item, fields) for item in record]
    if not dataclasses.is_dataclass(record):
        return record
    out = {}
    for spec in schema_for(type(record)).fields:
        if fields is not None and spec.wire not in fields:
            continue
        out[spec.wire] = getattr(record, spec.name)
    return out


def render(payload: dict) -> str:
    return json.dumps(payload, indent=2, default=str)


def error_response(message: str, violations: Optional[list] = None) -> str:
    payload = {"success": False, "error": message}
    if violations:
        payload["violations"] = list(violations)
    return render(payload)


def run_tool(name: str, arguments: Optional[dict], client: Any) -> str:
    """Validate, dispatch and render one tool call.  Never raises."""
    definition = TOOLS.get(name)
    if definition is None:
        return error_response(f"Unknown tool '{name}'")

    result = validate_input(definition.params, arguments)
    if not result.ok:
        logger.info("%s rejected: %s", name, "; ".join(result.violations))
        return error_response("Invalid input", result.violations)

    try:
        data = definition.handler(client, result.values)
    except ToolInputError as exc:
        return error_response(str(exc))
    except ForgeError as exc:
        logger.warning("%s failed: %s", name, exc)
        return error_response(str(exc))
    except Exception as exc:
        logger.exception("%s crashed", name)
        return error_response(str(exc) or type(exc).__name__)

    return render({"success": True, **data})


def optional(values: dict, key: str) -> Any:
    """A validated argument, or UNSET when the caller left it out."""
    return values.get(key, UNSET)


# =============================================================================
# Common parameter declarations
# =============================================================================
SERVER_ID = Param("server_id", "integer", minimum=1, description="The unique ID of the Forge server")
SITE_ID = Param("site_id", "integer", minimum=1, description="The unique ID of the site")


def id_param(name: str, what: str) -> Param:
    return Param(name, "integer", minimum=1, description=f"The {what} ID")


SERVER_FIELDS = ("id", "name", "type", "ip_address", "region", "size", "php_version", "is_ready", "created_at")
SITE_FIELDS = ("id", "server_id", "name", "directory", "repository", "repository_branch",
               "deployment_status", "quick_deploy", "is_secured", "php_version", "status")


# The topic modules register their tools on import; they need the names above.
from forge_tools import composites, server_tools, site_tools  # noqa: E402,F401
