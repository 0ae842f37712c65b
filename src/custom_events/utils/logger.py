"""
Module: logger.py
Description: Structured logging configuration for the custom events client.

Configures structlog for JSON output written to the console and, when
enabled, appended to a diagnostic log file. Secrets registered with the
redactor never reach either destination in cleartext.

Key Components:
- JSON output with timestamp and level processors
- SecretRedactor processor for API keys and bearer tokens
- ConsoleFileLogger sink that degrades to console-only on file errors
- configure_logging(), create_logger() and get_logger() helpers

Dependencies: structlog, datetime
Author: Custom Events Team
"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional, TextIO

import structlog

REDACTED = "***REDACTED***"

# Keys whose values are always masked, whatever they contain
SENSITIVE_KEYS = frozenset({
    "api_key",
    "apikey",
    "authorization",
    "credential",
    "token",
    "bearer",
})


def _add_timestamp(logger, method_name, event_dict):
    """
    Add ISO 8601 timestamp to log entries.

    Args:
        logger: Logger instance
        method_name: Log method name (info, error, etc.)
        event_dict: Current log event dictionary

    Returns:
        Updated event dictionary with timestamp
    """
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
    return event_dict


def _add_log_level(logger, method_name, event_dict):
    """
    Add log level to event dictionary.

    Args:
        logger: Logger instance
        method_name: Log method name (info, error, etc.)
        event_dict: Current log event dictionary

    Returns:
        Updated event dictionary with level
    """
    event_dict["level"] = method_name.upper()
    return event_dict


class SecretRedactor:
    """
    structlog processor that scrubs secrets from every log entry.

    Values under sensitive keys are replaced wholesale; registered secret
    strings are replaced wherever they appear inside other string values,
    including nested dicts and lists.
    """

    def __init__(self, secrets: Iterable[str] = ()):
        self._secrets: List[str] = []
        for secret in secrets:
            self.register(secret)

    def register(self, secret: Optional[str]) -> None:
        """Register a secret value to be masked from now on."""
        if secret and secret not in self._secrets:
            self._secrets.append(secret)
            # Longest first so a secret containing another is fully masked
            self._secrets.sort(key=len, reverse=True)

    def scrub(self, value: Any) -> Any:
        """Return value with every registered secret masked."""
        if isinstance(value, str):
            for secret in self._secrets:
                value = value.replace(secret, REDACTED)
            return value
        if isinstance(value, dict):
            return {k: self._scrub_item(k, v) for k, v in value.items()}
        if isinstance(value, (list, tuple)):
            return type(value)(self.scrub(v) for v in value)
        return value

    def _scrub_item(self, key: Any, value: Any) -> Any:
        if isinstance(key, str) and key.lower() in SENSITIVE_KEYS:
            return REDACTED
        return self.scrub(value)

    def __call__(self, logger, method_name, event_dict):
        return {key: self._scrub_item(key, value) for key, value in event_dict.items()}


class ConsoleFileLogger:
    """
    Final structlog sink writing rendered lines to the console and a log file.

    The log file is opened in append mode for every line so several
    processes can share it. If it cannot be written, file output is
    disabled and logging continues on the console only. Console write
    failures are dropped: logging must never change a delivery outcome.
    """

    def __init__(self, console: Optional[TextIO] = None, log_file: Optional[str] = None):
        self._console = console
        self.log_file = log_file

    def msg(self, message: str) -> None:
        self._write_console(message)

        if self.log_file is None:
            return

        try:
            with open(self.log_file, "a", encoding="utf-8", errors="backslashreplace") as handle:
                handle.write(message + "\n")
        except (OSError, ValueError) as e:
            failed_path, self.log_file = self.log_file, None
            self._write_console(
                f"Log file {failed_path} is not writable ({getattr(e, 'strerror', None) or e}); "
                "continuing with console output only"
            )

    def _write_console(self, message: str) -> None:
        stream = self._console if self._console is not None else sys.stderr
        try:
            stream.write(message + "\n")
            stream.flush()
        except (OSError, ValueError):
            pass

    log = debug = info = warn = warning = msg
    error = err = critical = exception = fatal = failure = msg


class ConsoleFileLoggerFactory:
    """Logger factory handing out one shared ConsoleFileLogger."""

    def __init__(self, console: Optional[TextIO] = None, log_file: Optional[str] = None):
        self._logger = ConsoleFileLogger(console=console, log_file=log_file)

    def __call__(self, *args: Any) -> ConsoleFileLogger:
        return self._logger


def _level_number(level: str) -> int:
    number = logging.getLevelName(level.upper())
    if not isinstance(number, int):
        raise ValueError(f"Unknown log level: {level}")
    return number


def build_processors(redactor: SecretRedactor) -> List[Any]:
    """Processor chain shared by the global configuration and injected loggers."""
    return [
        structlog.contextvars.merge_contextvars,
        _add_timestamp,
        _add_log_level,
        structlog.processors.format_exc_info,
        # Redact after exception formatting so tracebacks are scrubbed too
        redactor,
        structlog.processors.JSONRenderer(ensure_ascii=False),
    ]


_redactor = SecretRedactor()


def register_secret(secret: Optional[str]) -> None:
    """Mask secret in every line produced through get_logger()."""
    _redactor.register(secret)


def configure_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    secrets: Iterable[str] = (),
    console: Optional[TextIO] = None,
) -> None:
    """
    Configure structlog globally for JSON output.

    Args:
        level: Minimum level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path of the append-only diagnostic log
        secrets: Secret values to redact from every line
        console: Console stream, stderr when omitted
    """
    for secret in secrets:
        _redactor.register(secret)

    structlog.configure(
        processors=build_processors(_redactor),
        logger_factory=ConsoleFileLoggerFactory(console=console, log_file=log_file),
        wrapper_class=structlog.make_filtering_bound_logger(_level_number(level)),
        # Reconfiguration happens per invocation, so loggers are not cached
        cache_logger_on_first_use=False,
    )


def create_logger(
    level: str = "INFO",
    log_file: Optional[str] = None,
    secrets: Iterable[str] = (),
    console: Optional[TextIO] = None,
    **initial_values: Any,
) -> structlog.typing.FilteringBoundLogger:
    """
    Build a standalone logger without touching the global configuration.

    Used to inject an isolated log sink into a component.

    Example:
        >>> logger = create_logger(log_file="events.log", secrets=["sk_live_123"])
        >>> logger.info("Event sent", session_id="abc-123")
    """
    return structlog.wrap_logger(
        ConsoleFileLogger(console=console, log_file=log_file),
        processors=build_processors(SecretRedactor(secrets)),
        wrapper_class=structlog.make_filtering_bound_logger(_level_number(level)),
        **initial_values,
    )


def get_logger(name: str) -> structlog.typing.FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Event delivered", session_id="abc-123", attempts=1)
        {"event": "Event delivered", "session_id": "abc-123", "attempts": 1, "timestamp": "2024-01-15T10:30:00.000000Z", "level": "INFO"}
    """
    return structlog.get_logger(name)


configure_logging()
