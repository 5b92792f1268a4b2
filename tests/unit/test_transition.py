"""Unit tests for the pure transition function and the result type."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from workflow_state_engine.engine.errors import EngineError, ErrorKind, WorkflowIntegrityError
from workflow_state_engine.engine.models import WorkflowDefinition, WorkflowInstance
from workflow_state_engine.engine.result import Err, Ok, ResultError
from workflow_state_engine.engine.service import transition


def test_transition_returns_new_instance(approval_definition: WorkflowDefinition) -> None:
    at = datetime(2025, 6, 1, 12, 0, tzinfo=UTC)
    instance = WorkflowInstance(id="i", definition_id="approval-workflow", current_state_id="draft")

    result = transition(approval_definition, instance, "approve", now=at)

    assert isinstance(result, Ok)
    assert result.value.current_state_id == "approved"
    assert result.value.history[0].action_id == "approve"
    assert result.value.history[0].timestamp == at
    # Input untouched.
    assert instance.current_state_id == "draft"
    assert instance.history == []


def test_transition_rejects_undeclared_current_state(
    approval_definition: WorkflowDefinition,
) -> None:
    instance = WorkflowInstance(definition_id="approval-workflow", current_state_id="limbo")

    with pytest.raises(WorkflowIntegrityError):
        transition(approval_definition, instance, "approve")


def test_err_proxies_error() -> None:
    err = Err(EngineError(kind=ErrorKind.ACTION_DISABLED, message="Action is disabled"))

    assert not err.ok
    assert err.kind is ErrorKind.ACTION_DISABLED
    assert err.message == "Action is disabled"
    assert err.error.to_dict() == {
        "kind": "action_disabled",
        "message": "Action is disabled",
        "details": {},
    }
    with pytest.raises(ResultError) as excinfo:
        err.unwrap()
    assert excinfo.value.error is err.error


def test_ok_unwrap() -> None:
    ok = Ok(42, message="fine")
    assert ok.ok
    assert ok.unwrap() == 42


def test_error_kind_categories() -> None:
    assert ErrorKind.DUPLICATE_DEFINITION.category == "definition"
    assert ErrorKind.ACTION_NOT_FOUND.category == "reference"
    assert ErrorKind.ACTION_NOT_APPLICABLE.category == "guard"
    assert {k.category for k in ErrorKind} == {"definition", "reference", "guard"}
