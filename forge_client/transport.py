# =============================================================================
# forge_client/transport.py  —  HTTP Transport
# =============================================================================
#
# The client never talks to the network directly.  It hands
# (method, path, body, headers) to a Transport and gets back a
# TransportResponse (status + parsed JSON).  Anything with a matching
# send() method works: tests inject an in-memory fake, production uses
# HttpxTransport below.
#
# FAILURE CONTRACT:
#   - non-2xx status          → TransportError(status, parsed body or text)
#   - connect error / timeout → TransportError(None, "<reason>")
#   - 2xx with empty body     → TransportResponse(status, None)
#
# No retries happen here.  A caller that wants them wraps the transport.
# =============================================================================

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Protocol

import httpx

from forge_client.config import ForgeSettings
from forge_client.errors import TransportError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransportResponse:
    status: int
    json: Any = None


class Transport(Protocol):
    def send(
        self,
        method: str,
        path: str,
        body: Optional[dict],
        headers: Mapping[str, str],
    ) -> TransportResponse:
        ...


def _parse_body(response: httpx.Response) -> Any:
    """Parsed JSON when possible, raw text otherwise, None when empty."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class HttpxTransport:
    """Transport backed by one pooled httpx.Client."""

    def __init__(
        self,
        api_token: str,
        base_url: str,
        timeout: float = 30.0,
        http_transport: Optional[httpx.BaseTransport] = None,
    ):
        self._client = httpx.Client(
            base_url=base_url,
            timeout=timeout,
            transport=http_transport,
            headers={
                "Authorization": f"Bearer {api_token}",
                "Accept": "application/json",
                "Content-Type": "application/json",
            },
        )

    @classmethod
    def from_settings(cls, settings: ForgeSettings, **kwargs) -> "HttpxTransport":
        return cls(settings.api_token, settings.base_url, settings.timeout, **kwargs)

    def send(
        self,
        method: str,
        path: str,
        body: Optional[dict],
        headers: Mapping[str, str],
    ) -> TransportResponse:
        try:
            response = self._client.request(method, path, json=body, headers=dict(headers))
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise TransportError(None, str(exc)) from exc

        payload = _parse_body(response)
        if not response.is_success:
            logger.warning("%s %s → HTTP %d", method, path, response.status_code)
            raise TransportError(response.status_code, payload)
        return TransportResponse(status=response.status_code, json=payload)

    def close(self) -> None:
        self._client.close()
