"""Structured logging configuration for the recipe consolidator."""

import json
import logging
import os
import sys
from contextvars import ContextVar, Token
from datetime import datetime, timezone
from typing import Any

from recipeconsolidator.config import settings

# Context variables for request/recipe tracking
request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)
recipe_id_ctx: ContextVar[int | None] = ContextVar("recipe_id", default=None)

# Third-party loggers that are noisy below WARNING
QUIET_LOGGERS: tuple[str, ...] = ("httpx", "httpcore", "sqlalchemy.engine", "uvicorn.access")


def current_context() -> dict[str, Any]:
    """The logging context that is set right now, without unset entries."""
    context: dict[str, Any] = {}
    if request_id := request_id_ctx.get():
        context["request_id"] = request_id
    if (recipe_id := recipe_id_ctx.get()) is not None:
        context["recipe_id"] = recipe_id
    return context


class StructuredJsonFormatter(logging.Formatter):
    """One JSON object per line, for log shipping in production."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **current_context(),
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        log_data["location"] = f"{record.filename}:{record.lineno}"
        return json.dumps(log_data, ensure_ascii=False)


class ContextualFormatter(logging.Formatter):
    """Human-readable formatter with context for development."""

    def format(self, record: logging.LogRecord) -> str:
        context = current_context()
        parts = []
        if "request_id" in context:
            parts.append(f"req={context['request_id'][:8]}")
        if "recipe_id" in context:
            parts.append(f"recipe={context['recipe_id']}")
        context_str = f" [{', '.join(parts)}]" if parts else ""

        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
        formatted = (
            f"{timestamp} | {record.levelname:<8} | {record.name}{context_str} | "
            f"{record.getMessage()}"
        )
        if record.exc_info:
            formatted += "\n" + self.formatException(record.exc_info)
        return formatted


class ContextLogger(logging.LoggerAdapter):
    """Logger adapter that copies the current context into each record's extras."""

    def process(self, msg: str, kwargs: dict) -> tuple[str, dict]:
        kwargs["extra"] = {**kwargs.get("extra", {}), **current_context()}
        return msg, kwargs


def get_logger(name: str) -> ContextLogger:
    """Get a context-aware logger for the given module name."""
    return ContextLogger(logging.getLogger(name), {})


def configure_logging(
    log_level: str = "INFO",
    json_format: bool | None = None,
    log_file: str | None = None,
) -> None:
    """
    Configure logging for the application.

    Logs go to stderr so that CLI output on stdout stays clean.

    Args:
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            The LOG_LEVEL environment variable takes precedence.
        json_format: Use JSON lines. If None, LOG_FORMAT=json or a
            non-interactive, non-development environment turns it on.
        log_file: Optional file path to write logs to.
    """
    if json_format is None:
        json_format = os.getenv("LOG_FORMAT", "").lower() == "json" or (
            not sys.stderr.isatty() and not settings.is_development
        )

    level_name = os.getenv("LOG_LEVEL", log_level).upper()
    level = getattr(logging, level_name, logging.INFO)
    formatter: logging.Formatter = (
        StructuredJsonFormatter() if json_format else ContextualFormatter()
    )

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(level)
        root_logger.addHandler(handler)

    logging.getLogger("recipeconsolidator").setLevel(level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    get_logger(__name__).debug(
        f"Logging configured: level={level_name}, format={'json' if json_format else 'text'}"
    )


class LoggingContext:
    """
    Context manager that tags log records with a request and/or recipe id.

    Nested contexts restore the outer values on exit.
    """

    def __init__(
        self,
        request_id: str | None = None,
        recipe_id: int | None = None,
    ):
        self.request_id = request_id
        self.recipe_id = recipe_id
        self._tokens: list[tuple[ContextVar[Any], Token[Any]]] = []

    def __enter__(self) -> "LoggingContext":
        if self.request_id is not None:
            self._tokens.append((request_id_ctx, request_id_ctx.set(self.request_id)))
        if self.recipe_id is not None:
            self._tokens.append((recipe_id_ctx, recipe_id_ctx.set(self.recipe_id)))
        return self

    def __exit__(self, *args: Any) -> None:
        while self._tokens:
            var, token = self._tokens.pop()
            var.reset(token)
