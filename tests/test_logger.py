"""Tests for the JSON logger."""

import json
import logging

import pytest

from ollama_testgen.logger import LOGGER_NAME, JsonFormatter, get_logger, set_level


@pytest.fixture
def restore_level():
    """Put the shared logger back to INFO after each test."""
    yield
    logging.getLogger(LOGGER_NAME).setLevel(logging.INFO)


class TestSetLevel:
    """set_level."""

    def test_debug_enabled(self, restore_level):
        set_level("debug")
        assert logging.getLogger(LOGGER_NAME).level == logging.DEBUG

    def test_warning_hides_info(self, restore_level):
        set_level("WARNING")
        assert not logging.getLogger(LOGGER_NAME).isEnabledFor(logging.INFO)


class TestJsonFormatter:
    """JsonFormatter."""

    def test_extra_fields_become_json(self):
        """Keyword arguments of a component logger end up as JSON fields."""
        record = logging.LogRecord(LOGGER_NAME, logging.INFO, __file__, 1, "agent.start", None, None)
        record.component = "agent"
        record.model = "qwen2.5-coder:7b"

        line = json.loads(JsonFormatter().format(record))

        assert line["message"] == "agent.start"
        assert line["level"] == "INFO"
        assert line["component"] == "agent"
        assert line["model"] == "qwen2.5-coder:7b"

    def test_component_logger_passes_extra(self, monkeypatch):
        component = get_logger("workspace")
        calls = []
        monkeypatch.setattr(component.logger, "info", lambda msg, extra: calls.append((msg, extra)))

        component.info("workspace.write", path="/tmp/ATest.java")

        assert calls == [("workspace.write", {"component": "workspace", "path": "/tmp/ATest.java"})]
