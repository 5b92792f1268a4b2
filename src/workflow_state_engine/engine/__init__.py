"""Workflow definition and transition engine.

This package has no transport concerns: callers pass plain values in and get
:class:`Ok` / :class:`Err` results back.
"""

from __future__ import annotations

from workflow_state_engine.engine.errors import EngineError, ErrorKind, WorkflowIntegrityError
from workflow_state_engine.engine.models import (
    ActionTransition,
    HistoryEntry,
    State,
    WorkflowDefinition,
    WorkflowInstance,
)
from workflow_state_engine.engine.result import Err, Ok, Result, ResultError
from workflow_state_engine.engine.service import WorkflowEngine, transition
from workflow_state_engine.engine.store import WorkflowStore
from workflow_state_engine.engine.validation import validate_definition

__all__ = [
    "ActionTransition",
    "EngineError",
    "Err",
    "ErrorKind",
    "HistoryEntry",
    "Ok",
    "Result",
    "ResultError",
    "State",
    "WorkflowDefinition",
    "WorkflowEngine",
    "WorkflowInstance",
    "WorkflowIntegrityError",
    "WorkflowStore",
    "transition",
    "validate_definition",
]
