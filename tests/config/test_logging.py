"""Tests for structlog rendering of headerlines records."""

from __future__ import annotations

import io
import json
import logging
from dataclasses import dataclass

from headerlines.config.logging import HANDLER_NAME, build_formatter, configure_logging
from headerlines.encoder import header_lines


@dataclass
class Traced:
    value: object = "v"


class Stamp:
    def encode_header(self, key: str, lines: list[str]) -> list[str]:
        return [*lines, f"{key}: stamp"]


def _records(stream: io.StringIO) -> list[dict[str, object]]:
    return [json.loads(line) for line in stream.getvalue().splitlines() if line.strip()]


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        logger = configure_logging(verbose=True, stream=io.StringIO())
        assert logger is logging.getLogger("headerlines")
        assert logger.level == logging.DEBUG

    def test_non_verbose_sets_warning(self) -> None:
        assert configure_logging(stream=io.StringIO()).level == logging.WARNING

    def test_root_logger_untouched(self) -> None:
        root = logging.getLogger()
        handlers = root.handlers[:]
        level = root.level
        configure_logging(verbose=True, stream=io.StringIO())
        assert root.handlers == handlers
        assert root.level == level
        assert logging.getLogger("headerlines").propagate is False

    def test_idempotent_calls(self) -> None:
        """Reconfiguring replaces the handler instead of stacking another."""
        configure_logging(verbose=True, stream=io.StringIO())
        logger = configure_logging(verbose=True, log_json=True, stream=io.StringIO())
        ours = [h for h in logger.handlers if h.get_name() == HANDLER_NAME]
        assert len(ours) == 1

    def test_foreign_handlers_kept(self) -> None:
        logger = logging.getLogger("headerlines")
        foreign = logging.NullHandler()
        logger.addHandler(foreign)
        configure_logging(stream=io.StringIO())
        assert foreign in logger.handlers


class TestRendering:
    def test_json_mode_output(self) -> None:
        stream = io.StringIO()
        configure_logging(verbose=True, log_json=True, stream=stream)
        logging.getLogger("headerlines.test").warning("json test", extra={"answer": 42})
        (parsed,) = _records(stream)
        assert parsed["event"] == "json test"
        assert parsed["answer"] == 42
        assert parsed["level"] == "warning"
        assert parsed["logger"] == "headerlines.test"
        assert "timestamp" in parsed

    def test_console_mode_output(self) -> None:
        stream = io.StringIO()
        configure_logging(verbose=True, stream=stream)
        logging.getLogger("headerlines.test").warning("hello world")
        output = stream.getvalue()
        assert "hello world" in output
        assert "\x1b[" not in output

    def test_quiet_by_default(self) -> None:
        stream = io.StringIO()
        configure_logging(log_json=True, stream=stream)
        logging.getLogger("headerlines.encoder").debug("noise")
        assert stream.getvalue() == ""

    def test_encoder_debug_records_are_structured(self) -> None:
        stream = io.StringIO()
        configure_logging(verbose=True, log_json=True, stream=stream)

        assert header_lines(Traced(value=Stamp())) == ["value: stamp"]

        delegated = [r for r in _records(stream) if r["logger"] == "headerlines.encoder"]
        assert delegated
        assert delegated[-1]["level"] == "debug"
        assert delegated[-1]["header_key"] == "value"
        assert delegated[-1]["marshaler"] == "Stamp"

    def test_formatter_on_plain_record(self) -> None:
        record = logging.LogRecord("headerlines.x", logging.INFO, __file__, 1, "hi", None, None)
        parsed = json.loads(build_formatter(log_json=True).format(record))
        assert parsed["event"] == "hi"
        assert parsed["level"] == "info"
