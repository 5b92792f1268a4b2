"""Workflow engine: definition acceptance and instance transitions.

All business rules live here. The store is only read and written through the
engine, which serialises:

- definition creation (duplicate check + write) under one lock
- action execution per instance (read state, check guards, write) under a
  lock owned by that instance
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from datetime import datetime

from .errors import ErrorKind, WorkflowIntegrityError
from .models import (
    ActionTransition,
    HistoryEntry,
    WorkflowDefinition,
    WorkflowInstance,
    new_id,
    utc_now,
)
from .result import Err, Ok, Result, fail
from .store import WorkflowStore
from .validation import validate_definition

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def transition(
    definition: WorkflowDefinition,
    instance: WorkflowInstance,
    action_id: str,
    *,
    now: datetime | None = None,
) -> Result[WorkflowInstance]:
    """Apply ``action_id`` to ``instance`` without touching any store.

    Returns a new instance on success; ``instance`` itself is never modified.
    """

    state = definition.get_state(instance.current_state_id)
    if state is None:
        raise WorkflowIntegrityError(
            f"Instance {instance.id!r} is in state {instance.current_state_id!r}, "
            f"which definition {definition.id!r} does not declare"
        )

    if state.is_final:
        return fail(
            ErrorKind.INSTANCE_ALREADY_FINAL,
            "Instance already in final state",
            instance_id=instance.id,
            state_id=state.id,
        )

    action = definition.get_action(action_id)
    if action is None:
        return fail(ErrorKind.ACTION_NOT_FOUND, "Invalid action ID", action_id=action_id)

    if not action.enabled:
        return fail(ErrorKind.ACTION_DISABLED, "Action is disabled", action_id=action_id)

    if not action.applies_to(state.id):
        return fail(
            ErrorKind.ACTION_NOT_APPLICABLE,
            "Action not valid from current state",
            action_id=action_id,
            state_id=state.id,
        )

    entry = HistoryEntry(action_id=action_id, timestamp=now or utc_now())
    updated = instance.model_copy(
        update={"current_state_id": action.to_state, "history": [*instance.history, entry]}
    )
    return Ok(updated, message="Action executed")


class _StoredDefinitionIds:
    """Membership test over the store's definition ids without copying them."""

    def __init__(self, store: WorkflowStore) -> None:
        self._store = store

    def __contains__(self, definition_id: object) -> bool:
        return isinstance(definition_id, str) and self._store.has_definition(definition_id)


class WorkflowEngine:
    """Define workflows, start instances and drive them through actions."""

    def __init__(self, store: WorkflowStore | None = None, *, clock: Clock | None = None) -> None:
        self.store = store if store is not None else WorkflowStore()
        self._clock: Clock = clock or utc_now
        self._definitions_lock = threading.Lock()
        self._instance_locks: dict[str, threading.Lock] = {}
        self._instance_locks_guard = threading.Lock()

    def _instance_lock(self, instance_id: str) -> threading.Lock | None:
        """Return the lock for a stored instance, or ``None`` if there is no such instance."""

        with self._instance_locks_guard:
            lock = self._instance_locks.get(instance_id)
            if lock is None and self.store.get_instance(instance_id) is not None:
                # Instance was written to the store directly rather than started here.
                lock = self._instance_locks[instance_id] = threading.Lock()
            return lock

    def define_workflow(self, definition: WorkflowDefinition) -> Result[WorkflowDefinition]:
        with self._definitions_lock:
            error = validate_definition(definition, _StoredDefinitionIds(self.store))
            if error is not None:
                logger.warning(
                    "Definition rejected",
                    extra={
                        "definition_id": definition.id,
                        "kind": error.kind.value,
                        **error.details,
                    },
                )
                return Err(error)
            self.store.put_definition(definition)

        logger.info(
            "Definition created",
            extra={
                "definition_id": definition.id,
                "states": len(definition.states),
                "actions": len(definition.actions),
            },
        )
        return Ok(definition, message="Definition created")

    def get_definition(self, definition_id: str) -> WorkflowDefinition | None:
        return self.store.get_definition(definition_id)

    def start_instance(self, definition_id: str) -> Result[WorkflowInstance]:
        definition = self.store.get_definition(definition_id)
        if definition is None:
            logger.warning("Start rejected", extra={"definition_id": definition_id})
            return fail(
                ErrorKind.DEFINITION_NOT_FOUND,
                "Definition not found",
                definition_id=definition_id,
            )

        instance = WorkflowInstance(
            id=new_id(),
            definition_id=definition.id,
            current_state_id=definition.initial_state().id,
        )
        with self._instance_locks_guard:
            self._instance_locks[instance.id] = threading.Lock()
            self.store.put_instance(instance)

        logger.info(
            "Instance started",
            extra={
                "instance_id": instance.id,
                "definition_id": definition.id,
                "state_id": instance.current_state_id,
            },
        )
        return Ok(instance.model_copy(deep=True), message="Instance started")

    def execute_action(self, instance_id: str, action_id: str) -> Result[WorkflowInstance]:
        lock = self._instance_lock(instance_id)
        if lock is None:
            return self._execute_rejected(instance_id)

        with lock:
            instance = self.store.get_instance(instance_id)
            if instance is None:
                # Removed from the store after its lock was handed out.
                return self._execute_rejected(instance_id)

            definition = self._definition_for(instance)
            result = transition(definition, instance, action_id, now=self._clock())
            if isinstance(result, Err):
                logger.warning(
                    "Action rejected",
                    extra={
                        "instance_id": instance_id,
                        "action_id": action_id,
                        "kind": result.kind.value,
                    },
                )
                return result

            self.store.put_instance(result.value)

        logger.info(
            "Action executed",
            extra={
                "instance_id": instance_id,
                "action_id": action_id,
                "from_state": instance.current_state_id,
                "to_state": result.value.current_state_id,
            },
        )
        return Ok(result.value.model_copy(deep=True), message=result.message)

    def get_instance(self, instance_id: str) -> WorkflowInstance | None:
        instance = self.store.get_instance(instance_id)
        if instance is None:
            return None
        return instance.model_copy(deep=True)

    def available_actions(self, instance_id: str) -> Result[list[ActionTransition]]:
        """Actions that would currently pass every guard for the instance."""

        instance = self.store.get_instance(instance_id)
        if instance is None:
            return fail(ErrorKind.INSTANCE_NOT_FOUND, "Instance not found", instance_id=instance_id)

        definition = self._definition_for(instance)
        state = definition.get_state(instance.current_state_id)
        if state is None:
            raise WorkflowIntegrityError(
                f"Instance {instance.id!r} is in undeclared state {instance.current_state_id!r}"
            )
        if state.is_final:
            return Ok([])
        return Ok([a for a in definition.actions if a.enabled and a.applies_to(state.id)])

    def _execute_rejected(self, instance_id: str) -> Err:
        logger.warning("Execute rejected", extra={"instance_id": instance_id})
        return fail(ErrorKind.INSTANCE_NOT_FOUND, "Instance not found", instance_id=instance_id)

    def _definition_for(self, instance: WorkflowInstance) -> WorkflowDefinition:
        definition = self.store.get_definition(instance.definition_id)
        if definition is None:
            raise WorkflowIntegrityError(
                f"Instance {instance.id!r} references missing definition "
                f"{instance.definition_id!r}"
            )
        return definition
