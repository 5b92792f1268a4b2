"""Engine failure taxonomy.

Every expected failure is a value (:class:`EngineError`) carried by an
:class:`~workflow_state_engine.engine.result.Err`. Exceptions are reserved for
states the public API cannot produce.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ErrorKind(str, Enum):
    DUPLICATE_DEFINITION = "duplicate_definition"
    INVALID_INITIAL_STATE = "invalid_initial_state"
    UNKNOWN_STATE_REFERENCE = "unknown_state_reference"

    DEFINITION_NOT_FOUND = "definition_not_found"
    INSTANCE_NOT_FOUND = "instance_not_found"
    ACTION_NOT_FOUND = "action_not_found"

    INSTANCE_ALREADY_FINAL = "instance_already_final"
    ACTION_DISABLED = "action_disabled"
    ACTION_NOT_APPLICABLE = "action_not_applicable"

    @property
    def category(self) -> str:
        return _CATEGORIES[self]


_CATEGORIES: dict[ErrorKind, str] = {
    ErrorKind.DUPLICATE_DEFINITION: "definition",
    ErrorKind.INVALID_INITIAL_STATE: "definition",
    ErrorKind.UNKNOWN_STATE_REFERENCE: "definition",
    ErrorKind.DEFINITION_NOT_FOUND: "reference",
    ErrorKind.INSTANCE_NOT_FOUND: "reference",
    ErrorKind.ACTION_NOT_FOUND: "reference",
    ErrorKind.INSTANCE_ALREADY_FINAL: "guard",
    ErrorKind.ACTION_DISABLED: "guard",
    ErrorKind.ACTION_NOT_APPLICABLE: "guard",
}


@dataclass(frozen=True, slots=True)
class EngineError:
    """A caller-facing, recoverable failure with a stable kind."""

    kind: ErrorKind
    message: str
    details: dict[str, object] = field(default_factory=dict)

    def to_dict(self) -> dict[str, object]:
        return {"kind": self.kind.value, "message": self.message, "details": dict(self.details)}

    def __str__(self) -> str:
        return self.message


class WorkflowIntegrityError(RuntimeError):
    """Raised when stored data breaks a lifecycle invariant.

    Example: an instance whose definition is no longer in the store. This can
    only happen if the store is mutated behind the engine's back.
    """
