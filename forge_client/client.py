# =============================================================================
# forge_client/client.py  —  Dispatch Façade
# =============================================================================
#
# ForgeClient is the ONE entry point for talking to Forge.
#
# THE FLOW (per call):
#   1. Check the caller supplied the right number of IDs for the path
#   2. Check the request record matches what the endpoint expects
#   3. Encode the request (prune-nulls or keep-all, per endpoint)
#   4. transport.send(...)   ← TransportError propagates untouched
#   5. Unwrap + decode the JSON per the endpoint's response kind
#
# Nothing here catches errors.  Each step either returns or raises a
# ForgeError subclass to the caller.
# =============================================================================

import logging
from typing import Any, Optional, Sequence

from forge_client.config import ForgeSettings
from forge_client.endpoints import Endpoint, ResponseKind, get_endpoint
from forge_client.errors import DecodeError, ProgrammerError
from forge_client.models import Collection
from forge_client.schema import decode, encode, json_type, schema_for
from forge_client.transport import HttpxTransport, Transport

logger = logging.getLogger(__name__)


class ForgeClient:
    """Typed client for the Laravel Forge API.

    Example:
        with ForgeClient.from_settings(load_settings()) as forge:
            daemons = forge.call("daemons", "list", 42)
            for daemon in daemons:
                print(daemon.id, daemon.command, daemon.server_id)
    """

    def __init__(self, transport: Transport):
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: ForgeSettings) -> "ForgeClient":
        return cls(HttpxTransport.from_settings(settings))

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------
    def call(self, namespace: str, operation: str, *ids: int, request: Any = None) -> Any:
        """Run a registered endpoint by name, e.g. call("daemons", "get", 42, 7)."""
        return self.execute(get_endpoint(namespace, operation), ids, request)

    def execute(self, endpoint: Endpoint, path_params: Sequence[int] = (), request: Any = None) -> Any:
        """Send one request described by `endpoint` and decode the answer.

        Args:
            endpoint: The static descriptor of the operation.
            path_params: IDs for the path placeholders, in template order.
            request: The request record, when the endpoint takes a body.

        Returns:
            A record, a Collection, a str, raw JSON, or None, depending on
            endpoint.kind.

        Raises:
            ProgrammerError: Wrong number of IDs, or a missing/unexpected/
                wrong-type request record.
            TransportError: The HTTP call failed.
            DecodeError: The answer did not match the expected shape.
        """
        path_params = tuple(path_params)
        path = endpoint.render_path(path_params)
        body = self._encode_body(endpoint, request)

        logger.debug("%s %s", endpoint.method, path)
        response = self._transport.send(endpoint.method, path, body, {})
        return self._decode_response(endpoint, path_params, response.json)

    def close(self) -> None:
        close = getattr(self._transport, "close", None)
        if close is not None:
            close()

    def __enter__(self) -> "ForgeClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # -------------------------------------------------------------------------
    # Request side
    # -------------------------------------------------------------------------
    @staticmethod
    def _encode_body(endpoint: Endpoint, request: Any) -> Optional[dict]:
        name = f"{endpoint.namespace}.{endpoint.operation}"
        if endpoint.request is None:
            if request is not None:
                raise ProgrammerError(f"{name} takes no request body, got {type(request).__name__}")
            return None
        if request is None:
            raise ProgrammerError(f"{name} requires a {endpoint.request.__name__} request")
        if not isinstance(request, endpoint.request):
            raise ProgrammerError(
                f"{name} expects {endpoint.request.__name__}, got {type(request).__name__}"
            )
        return encode(request, endpoint.encode_mode)

    # -------------------------------------------------------------------------
    # Response side
    # -------------------------------------------------------------------------
    def _decode_response(self, endpoint: Endpoint, path_params: tuple, payload: Any) -> Any:
        kind = endpoint.kind
        logger.debug("decoding %s response for %s.%s", kind.value, endpoint.namespace, endpoint.operation)

        if kind is ResponseKind.NONE:
            return None
        if kind is ResponseKind.RAW:
            return self._unwrap(endpoint, payload) if endpoint.unwrap_key else payload

        value = self._unwrap(endpoint, payload)
        if kind is ResponseKind.TEXT:
            if value is None:
                return ""
            if not isinstance(value, str):
                raise DecodeError(self._resource_name(endpoint), endpoint.unwrap_key, json_type(value))
            return value

        synthetic = endpoint.synthetic_values(path_params)
        if kind is ResponseKind.RESOURCE:
            return decode(endpoint.response, value, synthetic)

        if not isinstance(value, list):
            raise DecodeError(self._resource_name(endpoint), endpoint.unwrap_key or "<payload>", json_type(value))
        items = tuple(decode(endpoint.response, item, synthetic) for item in value)
        return Collection(key=endpoint.unwrap_key or "", items=items)

    def _unwrap(self, endpoint: Endpoint, payload: Any) -> Any:
        key = endpoint.unwrap_key
        if key is None:
            return payload
        if not isinstance(payload, dict) or key not in payload:
            raise DecodeError(self._resource_name(endpoint), key)
        return payload[key]

    @staticmethod
    def _resource_name(endpoint: Endpoint) -> str:
        if endpoint.response is not None:
            return schema_for(endpoint.response).resource
        return f"{endpoint.namespace}.{endpoint.operation}"
