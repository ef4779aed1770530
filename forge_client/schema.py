# =============================================================================
# forge_client/schema.py  —  The Mapping Engine (decode + encode)
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Turns a record class (a frozen dataclass in forge_client/models.py) into a
#   ResourceSchema (a field table) and runs the ONE decode algorithm and the
#   ONE encode algorithm over that table.  No record class has its own
#   from_json()/to_json(); the dataclass declaration *is* the schema.
#
# HOW A FIELD IS CLASSIFIED:
#   required   → declared without a default            (missing = DecodeError)
#   optional   → declared with a default / factory     (missing or null = default)
#   synthetic  → declared with synthetic_field()       (filled from the URL)
#   wire name  → the attribute name, unless wire_field("...") overrides it
#                (needed where the wire key is a Python keyword, e.g. "from")
#
# ENCODE MODES:
#   PRUNE_NULLS → omit every field that is UNSET or None
#   KEEP_ALL    → send every declared field; UNSET goes out as null
# =============================================================================

import dataclasses
import enum
import functools
import logging
import re
import typing
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Union

from forge_client.errors import DecodeError, ProgrammerError

logger = logging.getLogger(__name__)

_MISSING = object()
_INVALID = object()
_INTEGER_TEXT = re.compile(r"^-?\d+$")


class _Unset:
    """Sentinel for request fields the caller never set."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


class EncodeMode(enum.Enum):
    PRUNE_NULLS = "prune-nulls"
    KEEP_ALL = "keep-all"


# -----------------------------------------------------------------------------
# Field declaration helpers (used by models.py)
# -----------------------------------------------------------------------------
def synthetic_field() -> Any:
    """A required field that is injected from path parameters, not the payload."""
    return dataclasses.field(metadata={"synthetic": True})


def wire_field(wire: str, **kwargs) -> Any:
    """A field whose wire key differs from its Python attribute name."""
    return dataclasses.field(metadata={"wire": wire}, **kwargs)


# -----------------------------------------------------------------------------
# Schema records
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class FieldSpec:
    """One row of a record's field table."""

    name: str                          # Python attribute
    wire: str                          # JSON key
    kind: type                         # int, str, bool, float, list, dict, or object (any)
    item_kind: type = object           # element type for lists
    nullable: bool = False
    required: bool = True
    synthetic: bool = False
    default: Any = None
    default_factory: Optional[Callable[[], Any]] = None

    def default_value(self) -> Any:
        if self.default_factory is not None:
            return self.default_factory()
        return self.default


@dataclass(frozen=True)
class ResourceSchema:
    """The field table of one record class."""

    resource: str
    record: type
    fields: tuple

    @property
    def required(self) -> frozenset:
        return frozenset(f.name for f in self.fields if f.required)

    @property
    def optional(self) -> frozenset:
        return frozenset(f.name for f in self.fields if not f.required)

    @property
    def synthetic(self) -> frozenset:
        return frozenset(f.name for f in self.fields if f.synthetic)

    def wire_name(self, field_name: str) -> str:
        for spec in self.fields:
            if spec.name == field_name:
                return spec.wire
        raise ProgrammerError(f"{self.resource} has no field '{field_name}'")


def _classify(annotation: Any) -> tuple:
    """Reduce a type annotation to (kind, item_kind, nullable)."""
    nullable = False
    origin = typing.get_origin(annotation)
    if origin is Union:
        args = [a for a in typing.get_args(annotation) if a is not type(None)]
        nullable = len(args) < len(typing.get_args(annotation))
        # int | str style unions are only used on request records; treat as any
        annotation = args[0] if len(args) == 1 else object
        origin = typing.get_origin(annotation)

    if annotation is Any:
        return object, object, nullable
    if annotation is list or origin is list:
        args = typing.get_args(annotation)
        item = args[0] if args else object
        item = typing.get_origin(item) or item
        return list, (item if item in (int, str, bool, float, dict) else object), nullable
    if annotation is dict or origin is dict:
        return dict, object, nullable
    if annotation in (int, str, bool, float):
        return annotation, object, nullable
    return object, object, nullable


@functools.lru_cache(maxsize=None)
def schema_for(record: type) -> ResourceSchema:
    """Build (once) the ResourceSchema of a record dataclass."""
    if not dataclasses.is_dataclass(record):
        raise ProgrammerError(f"{record!r} is not a record dataclass")

    hints = typing.get_type_hints(record)
    specs = []
    seen_wire = set()
    for f in dataclasses.fields(record):
        kind, item_kind, nullable = _classify(hints[f.name])
        wire = f.metadata.get("wire", f.name)
        if wire in seen_wire:
            raise ProgrammerError(f"{record.__name__}: wire key '{wire}' declared twice")
        seen_wire.add(wire)

        has_default = f.default is not dataclasses.MISSING
        has_factory = f.default_factory is not dataclasses.MISSING
        specs.append(FieldSpec(
            name=f.name,
            wire=wire,
            kind=kind,
            item_kind=item_kind,
            nullable=nullable,
            required=not (has_default or has_factory),
            synthetic=bool(f.metadata.get("synthetic", False)),
            default=f.default if has_default else None,
            default_factory=f.default_factory if has_factory else None,
        ))
    return ResourceSchema(resource=record.__name__, record=record, fields=tuple(specs))


# -----------------------------------------------------------------------------
# Decode
# -----------------------------------------------------------------------------
def json_type(value: Any) -> str:
    """Name the JSON type of a decoded value (for error messages)."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _coerce_scalar(kind: type, raw: Any) -> Any:
    if kind is object:
        return raw
    if kind is int:
        if isinstance(raw, bool):
            return _INVALID
        if isinstance(raw, int):
            return raw
        if isinstance(raw, float) and raw.is_integer():
            return int(raw)
        if isinstance(raw, str) and _INTEGER_TEXT.match(raw.strip()):
            return int(raw.strip())
        return _INVALID
    if kind is str:
        if isinstance(raw, str):
            return raw
        if isinstance(raw, (int, float)) and not isinstance(raw, bool):
            return str(raw)
        return _INVALID
    if kind is bool:
        if isinstance(raw, bool):
            return raw
        if isinstance(raw, int) and raw in (0, 1):
            return bool(raw)
        return _INVALID
    if kind is float:
        if isinstance(raw, (int, float)) and not isinstance(raw, bool):
            return float(raw)
        return _INVALID
    if kind is dict:
        return dict(raw) if isinstance(raw, dict) else _INVALID
    return _INVALID


def _coerce(resource: str, spec: FieldSpec, raw: Any) -> Any:
    if spec.kind is list:
        if not isinstance(raw, list):
            raise DecodeError(resource, spec.wire, json_type(raw))
        items = []
        for item in raw:
            value = _coerce_scalar(spec.item_kind, item)
            if value is _INVALID:
                raise DecodeError(resource, spec.wire, json_type(item))
            items.append(value)
        return items

    value = _coerce_scalar(spec.kind, raw)
    if value is _INVALID:
        raise DecodeError(resource, spec.wire, json_type(raw))
    return value


def decode(record: type, payload: Any, synthetic: Optional[Mapping[str, Any]] = None) -> Any:
    """Decode one JSON object into an instance of `record`.

    Args:
        record: The record dataclass to produce.
        payload: The raw JSON object (never mutated).
        synthetic: Wire key -> value pairs taken from the request URL.  They
            always win over a same-named key in the payload.

    Returns:
        A frozen instance of `record`.

    Raises:
        DecodeError: Payload is not an object, a required field is missing,
            or a value has the wrong JSON type.
    """
    schema = schema_for(record)
    if not isinstance(payload, dict):
        raise DecodeError(schema.resource, "<payload>", json_type(payload))

    data = dict(payload)
    if synthetic:
        data.update(synthetic)

    values = {}
    for spec in schema.fields:
        raw = data.get(spec.wire, _MISSING)
        if raw is _MISSING or raw is None:
            if spec.required:
                raise DecodeError(schema.resource, spec.wire, None if raw is _MISSING else "null")
            values[spec.name] = spec.default_value()
            continue
        values[spec.name] = _coerce(schema.resource, spec, raw)

    return record(**values)


# -----------------------------------------------------------------------------
# Encode
# -----------------------------------------------------------------------------
def encode(record: Any, mode: EncodeMode = EncodeMode.PRUNE_NULLS) -> dict:
    """Serialize a request record into a flat JSON body.

    Field order follows the dataclass declaration so bodies are stable.
    """
    schema = schema_for(type(record))
    body = {}
    for spec in schema.fields:
        value = getattr(record, spec.name)
        if value is UNSET or value is None:
            if mode is EncodeMode.PRUNE_NULLS:
                continue
            value = None
        elif isinstance(value, tuple):
            value = list(value)
        body[spec.wire] = value
    return body
