# =============================================================================
# forge_tools/validation.py  —  Tool Input Validation
# =============================================================================
#
# A tool's arguments arrive as loose JSON from the agent.  Before anything
# touches the Forge client, validate_input() checks them against the tool's
# declared Params and returns either clean values or a list of violations.
#
# HOW IT WORKS:
#   Each tool's Params are turned (once) into a pydantic model with
#   create_model().  The model does the checking and also renders the JSON
#   schema advertised to the agent, so the contract and the check can never
#   drift apart.
#
# It is a PURE function: no logging, no I/O, no exceptions for bad input.
#
# SUPPORTED TYPES (strict: JSON true is not 1, "5" is not 5):
#   integer  → int
#   string   → str (or one of `choices`)
#   boolean  → bool
#   array    → list (optionally of one item type)
#   object   → dict
# =============================================================================

import functools
from dataclasses import dataclass, field
from typing import Any, Literal, Mapping, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr, ValidationError, create_model

_SCALARS = {
    "integer": StrictInt,
    "string": StrictStr,
    "boolean": StrictBool,
    "object": dict,
}
_TYPES = set(_SCALARS) | {"array"}


@dataclass(frozen=True)
class Param:
    """One named tool parameter and its constraints."""

    name: str
    type: str                          # "integer", "string", "boolean", "array", "object"
    required: bool = True
    minimum: Optional[int] = None      # integers only
    maximum: Optional[int] = None      # integers only
    max_length: Optional[int] = None   # strings only
    description: str = ""
    items: Optional[str] = None        # element type for arrays
    default: Any = None
    min_items: Optional[int] = None    # arrays only
    choices: Optional[tuple] = None    # strings only: the allowed values

    def __post_init__(self):
        if self.type not in _TYPES:
            raise ValueError(f"Unsupported parameter type '{self.type}' for '{self.name}'")
        if self.items is not None and self.items not in _SCALARS:
            raise ValueError(f"Unsupported item type '{self.items}' for '{self.name}'")
        if self.choices and self.type != "string":
            raise ValueError(f"Only string parameters take choices ('{self.name}')")

    def annotation(self) -> Any:
        if self.type == "array":
            return list[_SCALARS[self.items]] if self.items else list
        if self.choices:
            return Literal[self.choices]
        return _SCALARS[self.type]

    def field_info(self) -> Any:
        # Absent optionals default to None and are dropped after validation,
        # so the advertised type stays the plain type rather than "T or null".
        return Field(
            ... if self.required else self.default,
            description=self.description or None,
            ge=self.minimum,
            le=self.maximum,
            max_length=self.max_length,
            min_length=self.min_items,
        )


class _ToolInput(BaseModel):
    model_config = ConfigDict(extra="ignore")


@dataclass(frozen=True)
class ValidationResult:
    values: dict = field(default_factory=dict)
    violations: list = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.violations


@functools.lru_cache(maxsize=None)
def input_model(params: tuple) -> type:
    """Build (once) the pydantic model that checks a tool's arguments."""
    fields = {param.name: (param.annotation(), param.field_info()) for param in params}
    return create_model("ToolInput", __base__=_ToolInput, **fields)


def _violation(error: dict) -> str:
    where = ".".join(str(part) for part in error["loc"])
    if error["type"] == "missing":
        return f"{where}: is required"
    return f"{where}: {error['msg']}"


def validate_input(params: Sequence[Param], raw: Optional[Mapping[str, Any]]) -> ValidationResult:
    """Validate raw tool arguments against declared parameters.

    Args:
        params: The tool's parameter declarations.
        raw: The arguments as received.  Unknown keys are ignored, and an
            explicit null counts as absent.

    Returns:
        ValidationResult with the accepted values (defaults filled in for
        absent optional params) and one message per violation.
    """
    present = {key: value for key, value in (raw or {}).items() if value is not None}
    try:
        model = input_model(tuple(params)).model_validate(present)
    except ValidationError as exc:
        return ValidationResult(violations=[_violation(error) for error in exc.errors()])
    values = {name: getattr(model, name) for name in type(model).model_fields}
    return ValidationResult(values={name: value for name, value in values.items() if value is not None})
