"""CLI entrypoint.

Commands:
- validate: check a definition file against the engine's rules
- run: define a workflow from a file, start an instance, execute actions
- serve: run the REST server
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import uvicorn
from pydantic import ValidationError

from workflow_state_engine import __version__
from workflow_state_engine.engine.config import EngineSettings
from workflow_state_engine.engine.models import WorkflowDefinition
from workflow_state_engine.engine.result import Err
from workflow_state_engine.engine.service import WorkflowEngine
from workflow_state_engine.engine.validation import validate_definition
from workflow_state_engine.server.app import create_app
from workflow_state_engine.server.config import ServerSettings
from workflow_state_engine.server.models import ApiDefinition, ApiInstance

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_UNEXPECTED = 1
EXIT_BAD_INPUT = 2
EXIT_REJECTED = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="workflow-engine",
        description="Declarative finite-state workflow engine",
    )
    parser.add_argument(
        "--version", action="version", version=f"workflow-state-engine {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    validate = subparsers.add_parser("validate", help="Validate a workflow definition file")
    validate.add_argument("file", type=Path, help="Definition JSON file (camelCase wire format)")

    run = subparsers.add_parser(
        "run",
        help="Define a workflow from a file, start an instance and execute actions in order",
    )
    run.add_argument("file", type=Path, help="Definition JSON file (camelCase wire format)")
    run.add_argument(
        "--action",
        dest="actions",
        action="append",
        default=[],
        help="Action id to execute; repeat to execute several in order",
    )

    serve = subparsers.add_parser("serve", help="Run the REST server")
    serve.add_argument("--host", default=None, help="Bind address (defaults to WORKFLOW_HOST)")
    serve.add_argument(
        "--port", type=int, default=None, help="Bind port (defaults to WORKFLOW_PORT)"
    )

    return parser


def load_definition(path: Path) -> WorkflowDefinition:
    return ApiDefinition.model_validate_json(path.read_text(encoding="utf-8")).to_domain()


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = EngineSettings()
        server_settings = ServerSettings()
    except ValidationError as e:
        # Logging isn't configured yet.
        print("Configuration error (check your environment / .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return EXIT_BAD_INPUT

    settings.setup_logging()

    try:
        if args.command in {"validate", "run"}:
            try:
                definition = load_definition(args.file)
            except (OSError, ValidationError) as e:
                print(f"Cannot load definition from {args.file}: {e}", file=sys.stderr)
                return EXIT_BAD_INPUT

        if args.command == "validate":
            error = validate_definition(definition)
            if error is not None:
                print(error.message, file=sys.stderr)
                return EXIT_REJECTED
            print(f"OK: {definition.id}")
            return EXIT_OK

        if args.command == "run":
            engine = WorkflowEngine()
            defined = engine.define_workflow(definition)
            if isinstance(defined, Err):
                print(defined.message, file=sys.stderr)
                return EXIT_REJECTED

            started = engine.start_instance(definition.id)
            if isinstance(started, Err):
                print(started.message, file=sys.stderr)
                return EXIT_REJECTED

            instance = started.value
            for action_id in args.actions:
                executed = engine.execute_action(instance.id, action_id)
                if isinstance(executed, Err):
                    print(f"{action_id}: {executed.message}", file=sys.stderr)
                    return EXIT_REJECTED
                instance = executed.value

            print(ApiInstance.from_domain(instance).model_dump_json(indent=2))
            return EXIT_OK

        if args.command == "serve":
            host = args.host or server_settings.host
            port = args.port or server_settings.port
            logger.info("Starting server", extra={"host": host, "port": port})
            uvicorn.run(create_app(settings=server_settings), host=host, port=port, log_config=None)
            return EXIT_OK

        logger.error("Unknown command", extra={"command": args.command})
        return EXIT_BAD_INPUT

    except Exception:
        logger.exception("Command failed")
        return EXIT_UNEXPECTED


if __name__ == "__main__":
    raise SystemExit(main())
