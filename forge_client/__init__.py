# =============================================================================
# forge_client/__init__.py
# =============================================================================
# Typed client for the Laravel Forge REST API.
#
# ARCHITECTURAL RULE:
#   Nothing in this package imports FastMCP, Google ADK, or any agent
#   framework.  The only third-party import is httpx, and only in
#   transport.py.  Everything else is records, tables and one decode/encode
#   engine, importable and testable without network access.
#
# LAYOUT:
#   models.py    → record dataclasses (responses + requests)
#   schema.py    → field tables, decode(), encode()
#   endpoints.py → one Endpoint record per API operation
#   client.py    → ForgeClient, the single dispatch entry point
#   transport.py → Transport protocol + HttpxTransport
#   config.py    → settings from the environment
#   errors.py    → ForgeError and friends
# =============================================================================

from forge_client.client import ForgeClient
from forge_client.config import ForgeSettings, load_settings
from forge_client.endpoints import ENDPOINTS, Endpoint, ResponseKind, get_endpoint
from forge_client.errors import (
    ConfigurationError,
    DecodeError,
    ForgeError,
    ProgrammerError,
    TransportError,
)
from forge_client.models import Collection, resource_schema
from forge_client.schema import UNSET, EncodeMode, decode, encode, schema_for
from forge_client.transport import HttpxTransport, Transport, TransportResponse

__all__ = [
    "ENDPOINTS",
    "UNSET",
    "Collection",
    "ConfigurationError",
    "DecodeError",
    "EncodeMode",
    "Endpoint",
    "ForgeClient",
    "ForgeError",
    "ForgeSettings",
    "HttpxTransport",
    "ProgrammerError",
    "ResponseKind",
    "Transport",
    "TransportError",
    "TransportResponse",
    "decode",
    "encode",
    "get_endpoint",
    "load_settings",
    "resource_schema",
    "schema_for",
]
