"""FastAPI app factory.

Endpoints are thin wrappers over :class:`WorkflowEngine`: parse the request,
call the engine, render the result. Engine failures become 400 responses whose
detail carries the stable error kind; missing entities on fetch become 404.
"""

from __future__ import annotations

import logging
from typing import NoReturn

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware

from workflow_state_engine import __version__
from workflow_state_engine.engine.result import Err
from workflow_state_engine.engine.service import WorkflowEngine
from workflow_state_engine.server.config import ServerSettings
from workflow_state_engine.server.models import (
    ApiAction,
    ApiDefinition,
    ApiInstance,
    DefinitionCreated,
    ExecuteActionRequest,
    StartInstanceRequest,
)

logger = logging.getLogger(__name__)


def _engine(request: Request) -> WorkflowEngine:
    engine = getattr(request.app.state, "engine", None)
    if not isinstance(engine, WorkflowEngine):
        raise HTTPException(status_code=500, detail="Workflow engine not configured")
    return engine


def _bad_request(result: Err) -> NoReturn:
    raise HTTPException(status_code=400, detail=result.error.to_dict())


def create_app(
    engine: WorkflowEngine | None = None, settings: ServerSettings | None = None
) -> FastAPI:
    settings = settings or ServerSettings()

    app = FastAPI(
        title="Workflow State Engine",
        version=__version__,
        description="Define finite-state workflows, start instances and execute actions.",
    )
    app.state.settings = settings
    app.state.engine = engine if engine is not None else WorkflowEngine()

    origins = settings.parsed_cors_origins()
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok", "version": __version__}

    @app.post("/workflow-definitions", response_model=DefinitionCreated)
    def create_definition(body: ApiDefinition, request: Request) -> DefinitionCreated:
        result = _engine(request).define_workflow(body.to_domain())
        if isinstance(result, Err):
            _bad_request(result)
        return DefinitionCreated(id=result.value.id, message=result.message)

    @app.get("/workflow-definitions/{definition_id}", response_model=ApiDefinition)
    def get_definition(definition_id: str, request: Request) -> ApiDefinition:
        definition = _engine(request).get_definition(definition_id)
        if definition is None:
            raise HTTPException(status_code=404, detail="Definition not found")
        return ApiDefinition.from_domain(definition)

    @app.post("/workflow-instances", response_model=ApiInstance)
    def start_instance(body: StartInstanceRequest, request: Request) -> ApiInstance:
        result = _engine(request).start_instance(body.definitionId)
        if isinstance(result, Err):
            _bad_request(result)
        return ApiInstance.from_domain(result.value)

    @app.post("/workflow-instances/{instance_id}/execute", response_model=ApiInstance)
    def execute_action(
        instance_id: str, body: ExecuteActionRequest, request: Request
    ) -> ApiInstance:
        result = _engine(request).execute_action(instance_id, body.actionId)
        if isinstance(result, Err):
            _bad_request(result)
        return ApiInstance.from_domain(result.value)

    @app.get("/workflow-instances/{instance_id}", response_model=ApiInstance)
    def get_instance(instance_id: str, request: Request) -> ApiInstance:
        instance = _engine(request).get_instance(instance_id)
        if instance is None:
            raise HTTPException(status_code=404, detail="Instance not found")
        return ApiInstance.from_domain(instance)

    @app.get("/workflow-instances/{instance_id}/actions", response_model=list[ApiAction])
    def list_available_actions(instance_id: str, request: Request) -> list[ApiAction]:
        result = _engine(request).available_actions(instance_id)
        if isinstance(result, Err):
            raise HTTPException(status_code=404, detail=result.error.to_dict())
        return [ApiAction.from_domain(a) for a in result.value]

    logger.debug("Application created", extra={"cors_origins": origins})
    return app
