"""Tests for logging setup."""

import json
import logging

import pytest
import structlog

from yield_agent.utils.logging import QUIET_LOGGERS, get_logger, setup_logging


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo setup_logging() changes to the root logger and structlog."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    quiet_levels = {name: logging.getLogger(name).level for name in QUIET_LOGGERS}

    yield

    root.handlers[:] = handlers
    root.setLevel(level)
    for name, quiet_level in quiet_levels.items():
        logging.getLogger(name).setLevel(quiet_level)
    structlog.reset_defaults()


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_json_output_includes_traceback(self, capsys):
        setup_logging(level="INFO", fmt="json")

        try:
            raise RuntimeError("kaboom")
        except RuntimeError:
            get_logger("yield_agent.test").error("run_failed", run_number=3, exc_info=True)

        data = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert data["event"] == "run_failed"
        assert data["run_number"] == 3
        assert data["level"] == "error"
        assert "Traceback" in data["exception"]
        assert "RuntimeError: kaboom" in data["exception"]
        assert "exc_info" not in data

    def test_console_output_includes_exception(self, capsys):
        setup_logging(level="INFO", fmt="console")

        try:
            raise ValueError("bad pool data")
        except ValueError:
            get_logger("yield_agent.test").error("run_failed", exc_info=True)

        out = capsys.readouterr().out
        assert "run_failed" in out
        assert "bad pool data" in out

    def test_stdlib_records_are_rendered(self, capsys):
        setup_logging(level="INFO", fmt="json")

        logging.getLogger("yield_agent.plain").warning("tick %s skipped", 7)

        data = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert data["event"] == "tick 7 skipped"
        assert data["logger"] == "yield_agent.plain"

    def test_level_filters_records(self, capsys):
        setup_logging(level="warning", fmt="json")

        get_logger("yield_agent.test").info("scheduler_starting")

        assert capsys.readouterr().out == ""
        assert logging.getLogger().level == logging.WARNING

    def test_quiets_apscheduler(self, monkeypatch):
        monkeypatch.setattr("yield_agent.utils.logging.settings.debug", False)
        setup_logging(level="DEBUG", fmt="json")

        assert logging.getLogger("apscheduler").level == logging.WARNING
        assert logging.getLogger("asyncio").level == logging.WARNING

    def test_replaces_root_handlers(self):
        setup_logging(fmt="json")
        setup_logging(fmt="json")

        assert len(logging.getLogger().handlers) == 1
