"""Pydantic wire models for the REST server.

Field names are camelCase on the wire; conversion to and from the engine's
records happens here so the engine never sees transport shapes.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from workflow_state_engine.engine.models import (
    ActionTransition,
    State,
    WorkflowDefinition,
    WorkflowInstance,
)


class ApiState(BaseModel):
    id: str
    name: str = ""
    isInitial: bool = False
    isFinal: bool = False
    enabled: bool = False

    def to_domain(self) -> State:
        return State(
            id=self.id,
            name=self.name,
            is_initial=self.isInitial,
            is_final=self.isFinal,
            enabled=self.enabled,
        )

    @classmethod
    def from_domain(cls, state: State) -> ApiState:
        return cls(
            id=state.id,
            name=state.name,
            isInitial=state.is_initial,
            isFinal=state.is_final,
            enabled=state.enabled,
        )


class ApiAction(BaseModel):
    id: str
    name: str = ""
    enabled: bool = False
    fromStates: list[str] = Field(default_factory=list)
    toState: str = ""

    def to_domain(self) -> ActionTransition:
        return ActionTransition(
            id=self.id,
            name=self.name,
            enabled=self.enabled,
            from_states=tuple(self.fromStates),
            to_state=self.toState,
        )

    @classmethod
    def from_domain(cls, action: ActionTransition) -> ApiAction:
        return cls(
            id=action.id,
            name=action.name,
            enabled=action.enabled,
            fromStates=list(action.from_states),
            toState=action.to_state,
        )


class ApiDefinition(BaseModel):
    # Omitted ids are generated server-side; supplied ids are kept verbatim.
    id: str | None = None
    name: str = ""
    states: list[ApiState] = Field(default_factory=list)
    actions: list[ApiAction] = Field(default_factory=list)

    def to_domain(self) -> WorkflowDefinition:
        fields: dict[str, object] = {
            "name": self.name,
            "states": tuple(s.to_domain() for s in self.states),
            "actions": tuple(a.to_domain() for a in self.actions),
        }
        if self.id is not None:
            fields["id"] = self.id
        return WorkflowDefinition.model_validate(fields)

    @classmethod
    def from_domain(cls, definition: WorkflowDefinition) -> ApiDefinition:
        return cls(
            id=definition.id,
            name=definition.name,
            states=[ApiState.from_domain(s) for s in definition.states],
            actions=[ApiAction.from_domain(a) for a in definition.actions],
        )


class ApiHistoryEntry(BaseModel):
    actionId: str
    timestamp: datetime


class ApiInstance(BaseModel):
    id: str
    definitionId: str
    currentStateId: str
    history: list[ApiHistoryEntry] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, instance: WorkflowInstance) -> ApiInstance:
        return cls(
            id=instance.id,
            definitionId=instance.definition_id,
            currentStateId=instance.current_state_id,
            history=[
                ApiHistoryEntry(actionId=h.action_id, timestamp=h.timestamp)
                for h in instance.history
            ],
        )


class StartInstanceRequest(BaseModel):
    definitionId: str


class ExecuteActionRequest(BaseModel):
    actionId: str


class DefinitionCreated(BaseModel):
    id: str
    message: str
