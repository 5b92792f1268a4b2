from __future__ import annotations

import json
import logging
from collections.abc import Iterator

import pytest

from workflow_state_engine.engine.logging import JsonFormatter, configure_logging, record_extras


@pytest.fixture
def restore_root_logger() -> Iterator[None]:
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


def test_json_formatter_includes_extras() -> None:
    record = logging.makeLogRecord(
        {"name": "wf", "levelname": "INFO", "msg": "Action executed", "instance_id": "i-1"}
    )

    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == "Action executed"
    assert payload["logger"] == "wf"
    assert payload["extra"] == {"instance_id": "i-1"}


def test_record_extras_ignores_standard_attributes() -> None:
    record = logging.makeLogRecord({"msg": "x"})
    assert record_extras(record) == {}


def test_configure_logging_replaces_handlers(restore_root_logger: None) -> None:
    configure_logging("debug", "text")
    configure_logging("warning", "json")

    root = logging.getLogger()
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0].formatter, JsonFormatter)
    assert root.level == logging.WARNING


def test_engine_logs_rejections(
    caplog: pytest.LogCaptureFixture, engine, approval_definition
) -> None:
    engine.define_workflow(approval_definition)

    with caplog.at_level(logging.WARNING, logger="workflow_state_engine.engine.service"):
        engine.define_workflow(approval_definition)

    record = caplog.records[-1]
    assert record.getMessage() == "Definition rejected"
    assert record.kind == "duplicate_definition"
