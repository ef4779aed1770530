# =============================================================================
# tests/conftest.py  —  Shared fakes
# =============================================================================
# FakeTransport stands in for HttpxTransport: it records every send() and
# answers from a (method, path) → payload table.  A payload that is an
# exception instance is raised instead of returned.
#
# The payload fixture builds a complete wire object for any record from its
# field table, so tests only spell out the fields they care about.
# =============================================================================

import pytest

from forge_client import ForgeClient, TransportResponse
from forge_client.schema import schema_for


class FakeTransport:
    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls = []
        self.closed = False

    def add(self, method, path, payload, status=200):
        self.responses[(method, path)] = (status, payload)

    def send(self, method, path, body, headers):
        self.calls.append({"method": method, "path": path, "body": body, "headers": dict(headers)})
        entry = self.responses.get((method, path))
        if entry is None:
            return TransportResponse(status=204, json=None)
        status, payload = entry if isinstance(entry, tuple) else (200, entry)
        if isinstance(payload, Exception):
            raise payload
        return TransportResponse(status=status, json=payload)

    def close(self):
        self.closed = True

    @property
    def last(self):
        return self.calls[-1]


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def client(transport):
    return ForgeClient(transport)


# Placeholder per field kind, for building payloads that carry every
# required field of a record.
_PLACEHOLDERS = {int: 1, str: "x", bool: True, float: 1.0, list: [], dict: {}, object: "x"}


def make_payload(record, **overrides):
    """A wire payload with every required field of `record`, plus overrides (by wire key)."""
    payload = {}
    for spec in schema_for(record).fields:
        if spec.required:
            placeholder = _PLACEHOLDERS[spec.kind]
            payload[spec.wire] = list(placeholder) if spec.kind is list else placeholder
    payload.update(overrides)
    return payload


@pytest.fixture
def payload():
    return make_payload
