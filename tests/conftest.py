"""Test configuration and fixtures."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from datetime import UTC, datetime, timedelta

import pytest

from workflow_state_engine.engine.models import ActionTransition, State, WorkflowDefinition
from workflow_state_engine.engine.service import WorkflowEngine
from workflow_state_engine.engine.store import WorkflowStore


@pytest.fixture
def clock() -> Callable[[], datetime]:
    """A deterministic clock advancing one second per call."""

    ticks = iter(range(1_000_000))
    start = datetime(2025, 1, 1, tzinfo=UTC)

    def _now() -> datetime:
        return start + timedelta(seconds=next(ticks))

    return _now


@pytest.fixture
def store() -> Iterator[WorkflowStore]:
    s = WorkflowStore()
    yield s
    s.clear()


@pytest.fixture
def engine(store: WorkflowStore, clock: Callable[[], datetime]) -> WorkflowEngine:
    return WorkflowEngine(store, clock=clock)


@pytest.fixture
def approval_definition() -> WorkflowDefinition:
    """draft --approve--> approved (final)."""

    return WorkflowDefinition(
        id="approval-workflow",
        name="Approval",
        states=(
            State(id="draft", name="Draft", is_initial=True, enabled=True),
            State(id="approved", name="Approved", is_final=True, enabled=True),
        ),
        actions=(
            ActionTransition(
                id="approve",
                name="Approve",
                enabled=True,
                from_states=("draft",),
                to_state="approved",
            ),
        ),
    )


@pytest.fixture
def ticket_definition() -> WorkflowDefinition:
    """A small ticket pipeline with a multi-source action and a disabled action."""

    return WorkflowDefinition(
        id="ticket",
        name="Ticket",
        states=(
            State(id="open", name="Open", is_initial=True, enabled=True),
            State(id="in_progress", name="In progress", enabled=True),
            State(id="review", name="Review", enabled=True),
            State(id="closed", name="Closed", is_final=True, enabled=True),
        ),
        actions=(
            ActionTransition(
                id="start", enabled=True, from_states=("open",), to_state="in_progress"
            ),
            ActionTransition(
                id="submit", enabled=True, from_states=("in_progress",), to_state="review"
            ),
            ActionTransition(
                id="rework", enabled=True, from_states=("review",), to_state="in_progress"
            ),
            ActionTransition(
                id="close",
                enabled=True,
                from_states=("open", "in_progress", "review"),
                to_state="closed",
            ),
            ActionTransition(
                id="escalate", enabled=False, from_states=("open",), to_state="review"
            ),
        ),
    )


@pytest.fixture
def approval_payload() -> dict[str, object]:
    """The approval workflow in the camelCase wire format."""

    return {
        "id": "approval-workflow",
        "name": "Approval",
        "states": [
            {"id": "draft", "name": "Draft", "isInitial": True, "isFinal": False, "enabled": True},
            {
                "id": "approved",
                "name": "Approved",
                "isInitial": False,
                "isFinal": True,
                "enabled": True,
            },
        ],
        "actions": [
            {
                "id": "approve",
                "name": "Approve",
                "enabled": True,
                "fromStates": ["draft"],
                "toState": "approved",
            }
        ],
    }
