"""Tests for the structured logging helpers."""

from __future__ import annotations

import json
import logging

from rich.logging import RichHandler

from anirecog.shared.logging import (
    StructuredFormatter,
    log_operation_success,
    setup_structured_logger,
)


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="anirecog.test",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg="Loaded %d rule(s)",
        args=(3,),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredFormatter:
    def test_formats_json_line(self):
        entry = json.loads(StructuredFormatter().format(_record()))

        assert entry["level"] == "WARNING"
        assert entry["logger"] == "anirecog.test"
        assert entry["message"] == "Loaded 3 rule(s)"
        assert "timestamp" in entry

    def test_includes_extra_fields(self):
        record = _record(operation="read_relations", duration_ms=1.5, result_info={"rules": 3})
        entry = json.loads(StructuredFormatter().format(record))

        assert entry["operation"] == "read_relations"
        assert entry["duration_ms"] == 1.5
        assert entry["result_info"] == {"rules": 3}


class TestSetupStructuredLogger:
    def test_rich_console_handler(self):
        logger = setup_structured_logger(level="debug")

        assert logger.level == logging.DEBUG
        assert logger.propagate is False
        assert [type(handler) for handler in logger.handlers] == [RichHandler]

    def test_json_console_and_file(self, tmp_path):
        log_file = tmp_path / "anirecog.log"
        logger = setup_structured_logger(level="INFO", log_file=str(log_file), use_rich_console=False)

        logger.info("hello %s", "world")
        for handler in logger.handlers:
            handler.flush()

        entry = json.loads(log_file.read_text(encoding="utf-8").splitlines()[0])
        assert entry["message"] == "hello world"
        assert len(logger.handlers) == 2

    def test_repeated_setup_replaces_handlers(self):
        setup_structured_logger(use_rich_console=False)
        logger = setup_structured_logger(use_rich_console=False)

        assert len(logger.handlers) == 1


class TestLogOperationSuccess:
    def test_logs_at_debug_with_context(self, caplog):
        logger = logging.getLogger("anirecog.test")

        with caplog.at_level(logging.DEBUG, logger="anirecog.test"):
            log_operation_success(logger, "initialize_titles", 12.5, {"items": 4})

        [record] = caplog.records
        assert record.levelno == logging.DEBUG
        assert record.operation == "initialize_titles"
        assert record.duration_ms == 12.5
        assert record.result_info == {"items": 4}
