# tests/test_logging_conf.py
import io
import json
import logging

from sf_subgraph import sdk
from sf_subgraph.config import Settings
from sf_subgraph.entities import stream_handler
from sf_subgraph.logging_conf import JsonFormatter, init_logging


def test_json_formatter_merges_structured_fields():
    record = logging.LogRecord("sf_subgraph.handler", logging.DEBUG, __file__, 1, "subgraph list", None, None)
    record.extra = {"kind": "Stream", "rows": 3}

    line = json.loads(JsonFormatter().format(record))

    assert line["msg"] == "subgraph list"
    assert line["level"] == "DEBUG"
    assert line["kind"] == "Stream"
    assert line["rows"] == 3
    assert line["ts"].endswith("Z")


def test_handler_logs_each_request(subgraph, make_stream, settings):
    stream = io.StringIO()
    init_logging("DEBUG", stream=stream)
    subgraph.add("streams", make_stream(1))

    stream_handler.list(subgraph, None, settings=settings)

    entries = [json.loads(line) for line in stream.getvalue().splitlines()]
    listed = [e for e in entries if e["msg"] == "subgraph list"]
    assert listed and listed[0]["kind"] == "Stream" and listed[0]["rows"] == 1


def test_init_logging_replaces_handlers():
    init_logging("warning", stream=io.StringIO())
    init_logging("info", stream=io.StringIO())

    logger = logging.getLogger("sf_subgraph")
    assert len(logger.handlers) == 1
    assert logger.level == logging.INFO


def test_configure_logging_uses_settings(capsys):
    sdk.configure_logging(Settings(environment="staging", log_level="debug"))

    logger = logging.getLogger("sf_subgraph")
    assert logger.level == logging.DEBUG
    line = json.loads(capsys.readouterr().out.splitlines()[-1])
    assert line["msg"] == "logging configured"
    assert line["environment"] == "staging"
    assert line["level"] == "debug"
