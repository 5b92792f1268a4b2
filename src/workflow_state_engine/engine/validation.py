"""Definition validation rules.

Checks run in a fixed order and stop at the first failure so a given malformed
definition always yields the same error.
"""

from __future__ import annotations

from collections.abc import Container

from .errors import EngineError, ErrorKind
from .models import WorkflowDefinition

DUPLICATE_DEFINITION_MESSAGE = "Duplicate definition ID"
INVALID_INITIAL_STATE_MESSAGE = "Workflow must have exactly one initial state"
UNKNOWN_STATE_REFERENCE_MESSAGE = "Action contains unknown state"


def check_unique_id(
    definition: WorkflowDefinition, existing_ids: Container[str]
) -> EngineError | None:
    if definition.id in existing_ids:
        return EngineError(
            kind=ErrorKind.DUPLICATE_DEFINITION,
            message=DUPLICATE_DEFINITION_MESSAGE,
            details={"definition_id": definition.id},
        )
    return None


def check_initial_state(definition: WorkflowDefinition) -> EngineError | None:
    initial = definition.initial_states()
    if len(initial) != 1:
        return EngineError(
            kind=ErrorKind.INVALID_INITIAL_STATE,
            message=INVALID_INITIAL_STATE_MESSAGE,
            details={"initial_state_ids": [s.id for s in initial]},
        )
    return None


def check_state_references(definition: WorkflowDefinition) -> EngineError | None:
    state_ids = definition.state_ids()
    for action in definition.actions:
        unknown = [sid for sid in (action.to_state, *action.from_states) if sid not in state_ids]
        if unknown:
            return EngineError(
                kind=ErrorKind.UNKNOWN_STATE_REFERENCE,
                message=UNKNOWN_STATE_REFERENCE_MESSAGE,
                details={"action_id": action.id, "unknown_state_ids": unknown},
            )
    return None


def validate_definition(
    definition: WorkflowDefinition, existing_ids: Container[str] = frozenset()
) -> EngineError | None:
    """Return the first rule violation, or ``None`` if the definition is acceptable.

    Empty ``from_states``, unreachable states and actions leaving a final
    state are all accepted.
    """

    return (
        check_unique_id(definition, existing_ids)
        or check_initial_state(definition)
        or check_state_references(definition)
    )
