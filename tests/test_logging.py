"""Tests for logging context and formatters."""

import io
import json
import logging
import sys

import pytest

from recipeconsolidator.config import settings
from recipeconsolidator.logging_config import (
    ContextualFormatter,
    LoggingContext,
    StructuredJsonFormatter,
    configure_logging,
    current_context,
    get_logger,
)


def _record(message="hello"):
    return logging.LogRecord(
        name="recipeconsolidator.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg=message,
        args=(),
        exc_info=None,
    )


class TestLoggingContext:
    """Tests for the LoggingContext context manager."""

    def test_sets_and_restores(self):
        assert current_context() == {}
        with LoggingContext(request_id="req-1", recipe_id=5):
            assert current_context() == {"request_id": "req-1", "recipe_id": 5}
        assert current_context() == {}

    def test_nested_contexts(self):
        with LoggingContext(request_id="outer"):
            with LoggingContext(recipe_id=7):
                assert current_context() == {"request_id": "outer", "recipe_id": 7}
            assert current_context() == {"request_id": "outer"}

    def test_logger_adapter_adds_context(self):
        logger = get_logger("recipeconsolidator.test")
        with LoggingContext(recipe_id=3):
            _, kwargs = logger.process("msg", {"extra": {"x": 1}})
        assert kwargs["extra"] == {"x": 1, "recipe_id": 3}


class TestFormatters:
    """Tests for the text and JSON formatters."""

    def test_text_formatter(self):
        with LoggingContext(request_id="abcdefghijkl", recipe_id=12):
            line = ContextualFormatter().format(_record())
        assert "| INFO     |" in line
        assert "recipeconsolidator.test [req=abcdefgh, recipe=12] | hello" in line

    def test_text_formatter_without_context(self):
        line = ContextualFormatter().format(_record())
        assert line.endswith("recipeconsolidator.test | hello")

    def test_json_formatter(self):
        with LoggingContext(request_id="abc"):
            data = json.loads(StructuredJsonFormatter().format(_record("hi")))
        assert data["message"] == "hi"
        assert data["level"] == "INFO"
        assert data["request_id"] == "abc"
        assert "recipe_id" not in data
        assert data["timestamp"].endswith("Z")
        assert data["location"].endswith(":10")


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    package_logger = logging.getLogger("recipeconsolidator")
    handlers, level, package_level = root.handlers[:], root.level, package_logger.level
    yield root
    package_logger.setLevel(package_level)
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


class TestConfigureLogging:
    """Tests for picking the log format from settings and environment."""

    @pytest.fixture(autouse=True)
    def non_interactive(self, monkeypatch):
        monkeypatch.delenv("LOG_FORMAT", raising=False)
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        monkeypatch.setattr(sys, "stderr", io.StringIO())

    def test_is_development(self, monkeypatch):
        monkeypatch.setattr(settings, "environment", "Development")
        assert settings.is_development
        monkeypatch.setattr(settings, "environment", "production")
        assert not settings.is_development

    def test_development_uses_text(self, monkeypatch, restore_root_logger):
        monkeypatch.setattr(settings, "environment", "development")
        configure_logging("DEBUG")
        assert isinstance(restore_root_logger.handlers[0].formatter, ContextualFormatter)
        assert restore_root_logger.level == logging.DEBUG

    def test_other_environments_use_json(self, monkeypatch, restore_root_logger):
        monkeypatch.setattr(settings, "environment", "staging")
        configure_logging()
        assert isinstance(restore_root_logger.handlers[0].formatter, StructuredJsonFormatter)

    def test_log_format_env_forces_json(self, monkeypatch, restore_root_logger):
        monkeypatch.setattr(settings, "environment", "development")
        monkeypatch.setenv("LOG_FORMAT", "json")
        configure_logging()
        assert isinstance(restore_root_logger.handlers[0].formatter, StructuredJsonFormatter)
