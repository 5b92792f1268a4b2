"""FastAPI server adapter for workflow-state-engine.

Design intent:
- Keep business rules in `workflow_state_engine.engine`
- Keep server-specific concerns (routing, wire shapes, CORS) here
"""

from __future__ import annotations

__all__ = ["create_app"]

from workflow_state_engine.server.app import create_app
