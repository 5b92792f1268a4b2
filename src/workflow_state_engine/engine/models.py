"""Workflow domain records.

Definitions and their parts are frozen once constructed. Instances are
mutable, but only the engine mutates the stored copy.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field

from .errors import WorkflowIntegrityError


def new_id() -> str:
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


class State(BaseModel):
    """A node in a workflow graph."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""
    is_initial: bool = False
    is_final: bool = False
    enabled: bool = False


class ActionTransition(BaseModel):
    """A directed edge from any of ``from_states`` to ``to_state``."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""
    enabled: bool = False
    from_states: tuple[str, ...] = Field(default_factory=tuple)
    to_state: str = ""

    def applies_to(self, state_id: str) -> bool:
        return state_id in self.from_states


class WorkflowDefinition(BaseModel):
    """Immutable template: ordered states plus the actions connecting them."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    name: str = ""
    states: tuple[State, ...] = Field(default_factory=tuple)
    actions: tuple[ActionTransition, ...] = Field(default_factory=tuple)

    def state_ids(self) -> set[str]:
        return {s.id for s in self.states}

    def initial_states(self) -> list[State]:
        return [s for s in self.states if s.is_initial]

    def initial_state(self) -> State:
        """Return the unique initial state.

        Only meaningful for accepted definitions; raises
        :class:`WorkflowIntegrityError` when the definition does not have exactly one.
        """

        initial = self.initial_states()
        if len(initial) != 1:
            raise WorkflowIntegrityError(
                f"Definition {self.id!r} has {len(initial)} initial states"
            )
        return initial[0]

    def get_state(self, state_id: str) -> State | None:
        for state in self.states:
            if state.id == state_id:
                return state
        return None

    def get_action(self, action_id: str) -> ActionTransition | None:
        # First match wins when ids repeat.
        for action in self.actions:
            if action.id == action_id:
                return action
        return None


class HistoryEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    action_id: str
    timestamp: datetime = Field(default_factory=utc_now)


class WorkflowInstance(BaseModel):
    """One running execution of a definition."""

    id: str = Field(default_factory=new_id)
    definition_id: str
    current_state_id: str
    history: list[HistoryEntry] = Field(default_factory=list)
