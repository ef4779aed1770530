# =============================================================================
# forge_client/errors.py  —  Error Taxonomy
# =============================================================================
#
# Every failure the client raises is a ForgeError.  The subclasses tell the
# caller WHERE it went wrong:
#
#   DecodeError      → the upstream payload did not match the record we expect
#                      (missing required field, wrong JSON type, missing
#                      unwrap key).
#   TransportError   → the HTTP call itself failed (non-2xx, connect error,
#                      timeout).  Carries the status and the upstream body.
#   ProgrammerError  → the caller wired something up wrong (wrong number of
#                      path IDs, unknown endpoint, wrong request record).
#   ConfigurationError → settings could not be loaded from the environment.
#
# Nothing in forge_client catches these.  The tool boundary
# (forge_tools/handlers.py) is the only place they are turned into JSON.
# =============================================================================

from typing import Any, Optional


class ForgeError(Exception):
    """Base class for every error raised by the Forge client."""


class DecodeError(ForgeError):
    """A response payload could not be decoded into its record.

    Attributes:
        resource: Record name, e.g. "Daemon".
        field: The wire field (or unwrap key) that failed.
        received: JSON type name of the offending value, or None when the
            field was missing entirely.
    """

    def __init__(self, resource: str, field: str, received: Optional[str] = None):
        self.resource = resource
        self.field = field
        self.received = received
        if received is None:
            message = f"{resource}: missing required field '{field}'"
        else:
            message = f"{resource}: field '{field}' has unexpected JSON type '{received}'"
        super().__init__(message)


class TransportError(ForgeError):
    """The transport failed or upstream answered with a non-2xx status.

    Attributes:
        status: HTTP status code, or None for network-level failures.
        body: The upstream error body, verbatim (parsed JSON when possible).
    """

    def __init__(self, status: Optional[int], body: Any = None):
        self.status = status
        self.body = body
        super().__init__(self._describe())

    def _describe(self) -> str:
        if isinstance(self.body, dict) and isinstance(self.body.get("message"), str):
            return self.body["message"]
        if isinstance(self.body, str) and self.body:
            return self.body
        if self.status is not None:
            return f"HTTP {self.status}"
        return "Transport failure"


class ProgrammerError(ForgeError):
    """The client was called incorrectly (arity, unknown endpoint, wrong record)."""


class ConfigurationError(ForgeError):
    """Settings are missing or invalid."""
