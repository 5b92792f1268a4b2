"""Workflow State Engine.

Declarative finite-state-machine workflows:
- definitions validated once and kept immutable
- instances driven forward by named, guarded actions
- a thin FastAPI adapter and a small CLI over the engine
"""

__version__ = "0.1.0"

from workflow_state_engine.engine import WorkflowEngine, WorkflowStore

__all__ = ["__version__", "WorkflowEngine", "WorkflowStore"]
