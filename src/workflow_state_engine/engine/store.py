"""In-memory store for workflow definitions and instances.

The store is a plain container: it performs no validation. Each call is atomic
with respect to the underlying mappings; multi-step read-modify-write
sequences are serialised by the engine.
"""

from __future__ import annotations

import threading

from .models import WorkflowDefinition, WorkflowInstance


class WorkflowStore:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._definitions: dict[str, WorkflowDefinition] = {}
        self._instances: dict[str, WorkflowInstance] = {}

    def put_definition(self, definition: WorkflowDefinition) -> None:
        with self._lock:
            self._definitions[definition.id] = definition

    def get_definition(self, definition_id: str) -> WorkflowDefinition | None:
        with self._lock:
            return self._definitions.get(definition_id)

    def has_definition(self, definition_id: str) -> bool:
        with self._lock:
            return definition_id in self._definitions

    def definition_ids(self) -> list[str]:
        with self._lock:
            return list(self._definitions)

    def put_instance(self, instance: WorkflowInstance) -> None:
        with self._lock:
            self._instances[instance.id] = instance

    def get_instance(self, instance_id: str) -> WorkflowInstance | None:
        with self._lock:
            return self._instances.get(instance_id)

    def instance_ids(self) -> list[str]:
        with self._lock:
            return list(self._instances)

    def clear(self) -> None:
        with self._lock:
            self._definitions.clear()
            self._instances.clear()
