"""Structured logging with PII redaction for ProjectPilot."""

import logging
import re
import sys
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pythonjsonlogger.json import JsonFormatter

EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
API_KEY_PATTERN = re.compile(
    r"(api[_-]?key|token|secret)[\"'\s:=]+[a-zA-Z0-9_\-]{20,}",
    re.IGNORECASE,
)
SENSITIVE_KEYS = {"password", "token", "secret", "key", "api_key", "apikey"}

# LogRecord attributes that context fields must not overwrite
_RESERVED_ATTRS = {
    "name", "msg", "args", "created", "filename", "funcName", "levelname",
    "levelno", "lineno", "module", "msecs", "message", "pathname", "process",
    "processName", "relativeCreated", "thread", "threadName", "exc_info",
    "exc_text", "stack_info", "taskName",
}


class LogLevel(str, Enum):
    """Log level enumeration."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class Redactor:
    """Strips emails, credentials and the home directory from log output."""

    def __init__(self, home_dir: Optional[str] = None):
        self.home_dir = home_dir if home_dir is not None else str(Path.home())

    def redact(self, text: str) -> str:
        result = EMAIL_PATTERN.sub("[EMAIL_REDACTED]", text)
        result = API_KEY_PATTERN.sub("[API_KEY_REDACTED]", result)
        if self.home_dir and self.home_dir != "/":
            result = result.replace(self.home_dir, "~")
        return result

    def redact_metadata(self, metadata: dict[str, Any]) -> dict[str, Any]:
        redacted: dict[str, Any] = {}
        for key, value in metadata.items():
            if key.lower() in SENSITIVE_KEYS:
                redacted[key] = "[REDACTED]"
            elif isinstance(value, str):
                redacted[key] = self.redact(value)
            else:
                redacted[key] = value
        return redacted


def _json_formatter() -> logging.Formatter:
    return JsonFormatter(
        "%(asctime)s %(levelname)s %(name)s %(message)s",
        rename_fields={"levelname": "level", "asctime": "timestamp"},
    )


def _text_formatter() -> logging.Formatter:
    return logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


class StructuredLogger:
    """
    Structured logger with redaction and optional JSON-lines file output.

    Every message and string metadata value passes through a :class:`Redactor`
    before it reaches a handler, so nothing sensitive is ever persisted.
    """

    def __init__(
        self,
        name: str = "projectpilot",
        level: LogLevel = LogLevel.INFO,
        json_output: bool = False,
        log_file: Optional[Path] = None,
        redactor: Optional[Redactor] = None,
        console: bool = True,
    ):
        """
        Initialize structured logger.

        Args:
            name: Logger name
            level: Log level
            json_output: If True, console output is JSON-formatted
            log_file: Optional JSON-lines file to append to
            redactor: Redactor to apply (defaults to one for the current user)
            console: Whether to attach a stderr handler
        """
        self.name = name
        self.level = level
        self.json_output = json_output
        self.log_file = log_file
        self.redactor = redactor or Redactor()

        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.value))
        self.logger.propagate = False
        self.logger.handlers.clear()

        if console:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(getattr(logging, level.value))
            console_handler.setFormatter(_json_formatter() if json_output else _text_formatter())
            self.logger.addHandler(console_handler)

        if log_file:
            self.add_file_handler(log_file)

    def add_file_handler(self, log_file: Path) -> None:
        """Append JSON lines to ``log_file``."""
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(getattr(logging, self.level.value))
        file_handler.setFormatter(_json_formatter())
        self.logger.addHandler(file_handler)
        self.log_file = log_file

    def set_level(self, level: LogLevel) -> None:
        self.level = level
        self.logger.setLevel(getattr(logging, level.value))
        for handler in self.logger.handlers:
            handler.setLevel(getattr(logging, level.value))

    def _log_with_context(
        self,
        level: int,
        message: str,
        context: Optional[dict[str, Any]] = None,
        **kwargs: Any,
    ) -> None:
        if context:
            kwargs.update(context)

        message = self.redactor.redact(message)
        if not kwargs:
            self.logger.log(level, message)
            return

        if not self.logger.isEnabledFor(level):
            return
        record = self.logger.makeRecord(self.logger.name, level, "", 0, message, (), None)
        for key, value in self.redactor.redact_metadata(kwargs).items():
            attr = f"ctx_{key}" if key in _RESERVED_ATTRS else key
            setattr(record, attr, value)
        self.logger.handle(record)

    def log(self, level: LogLevel, message: str, metadata: Optional[dict[str, Any]] = None) -> None:
        """Log sink entry point: ``log(level, message, metadata)``."""
        self._log_with_context(getattr(logging, level.value), message, metadata)

    def debug(self, message: str, context: Optional[dict[str, Any]] = None, **kwargs: Any) -> None:
        self._log_with_context(logging.DEBUG, message, context, **kwargs)

    def info(self, message: str, context: Optional[dict[str, Any]] = None, **kwargs: Any) -> None:
        self._log_with_context(logging.INFO, message, context, **kwargs)

    def warning(self, message: str, context: Optional[dict[str, Any]] = None, **kwargs: Any) -> None:
        self._log_with_context(logging.WARNING, message, context, **kwargs)

    def error(self, message: str, context: Optional[dict[str, Any]] = None, **kwargs: Any) -> None:
        self._log_with_context(logging.ERROR, message, context, **kwargs)

    def critical(self, message: str, context: Optional[dict[str, Any]] = None, **kwargs: Any) -> None:
        self._log_with_context(logging.CRITICAL, message, context, **kwargs)

    def log_phase(
        self,
        from_phase: str,
        to_phase: str,
        **kwargs: Any,
    ) -> None:
        """
        Log a session phase transition.

        Args:
            from_phase: Phase before the handler ran
            to_phase: Phase after the handler ran
            **kwargs: Additional metadata
        """
        context = {
            "event_type": "phase_transition",
            "from_phase": from_phase,
            "to_phase": to_phase,
        }
        context.update(kwargs)
        self.info(f"Session phase {from_phase} -> {to_phase}", context=context)

    def log_generation_stage(
        self,
        stage: str,
        status: str,
        duration_ms: Optional[float] = None,
        **kwargs: Any,
    ) -> None:
        """
        Log a project generation stage.

        Args:
            stage: Stage name (e.g., "templates", "license", "vcs")
            status: Status ("started", "completed", "failed")
            duration_ms: Stage duration in milliseconds
            **kwargs: Additional metadata
        """
        context = {
            "event_type": "generation_stage",
            "stage": stage,
            "status": status,
        }
        if duration_ms is not None:
            context["duration_ms"] = round(duration_ms, 2)
        context.update(kwargs)

        if status == "failed":
            self.error(f"Generation stage {stage} failed", context=context)
        elif status == "completed":
            self.info(f"Generation stage {stage} completed", context=context)
        else:
            self.debug(f"Generation stage {stage} started", context=context)


# Global logger instance
_default_logger: Optional[StructuredLogger] = None


def get_logger(
    name: str = "projectpilot",
    level: Optional[LogLevel] = None,
    json_output: Optional[bool] = None,
    log_file: Optional[Path] = None,
) -> StructuredLogger:
    """
    Get or create the process-wide structured logger.

    Args:
        name: Logger name (used only when the logger is first created)
        level: Log level (if None, keeps the current level)
        json_output: JSON console output (used only when first created)
        log_file: Optional JSON-lines file to add

    Returns:
        StructuredLogger instance
    """
    global _default_logger

    if _default_logger is None:
        _default_logger = StructuredLogger(
            name=name,
            level=level or LogLevel.WARNING,
            json_output=json_output or False,
            log_file=log_file,
        )
    else:
        if level is not None:
            _default_logger.set_level(level)
        if log_file is not None and _default_logger.log_file != log_file:
            _default_logger.add_file_handler(log_file)

    return _default_logger


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
    log_file: Optional[str] = None,
) -> StructuredLogger:
    """
    Configure global logging settings.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: If True, output JSON-formatted logs
        log_file: Optional file path to write logs to

    Returns:
        Configured StructuredLogger instance
    """
    global _default_logger

    log_level = LogLevel[level.upper()]
    log_path = Path(log_file).expanduser() if log_file else None

    _default_logger = StructuredLogger(
        level=log_level,
        json_output=json_output,
        log_file=log_path,
    )
    return _default_logger
