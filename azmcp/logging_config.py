"""Structured JSON logging configuration for the Azure MCP Server.

Provides consistent, structured logging across all components.
Secrets are never included in log output.
"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pythonjsonlogger import jsonlogger


class AzmcpJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter for Azure MCP Server logs.

    Adds standard fields and ensures consistent formatting.
    """

    def add_fields(
        self,
        log_record: Dict[str, Any],
        record: logging.LogRecord,
        message_dict: Dict[str, Any]
    ) -> None:
        """Add custom fields to log record."""
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["logger"] = record.name

        # Add source location for debugging
        log_record["source"] = {
            "file": record.filename,
            "line": record.lineno,
            "function": record.funcName,
        }


def setup_logging(level: str = "INFO", use_stderr: bool = False) -> None:
    """Configure structured JSON logging for the application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        use_stderr: If True, log to stderr instead of stdout (stdio transport
            and one-shot CLI, where stdout carries the response)
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    stream = sys.stderr if use_stderr else sys.stdout
    handler = logging.StreamHandler(stream)
    handler.setFormatter(AzmcpJsonFormatter(
        fmt="%(timestamp)s %(level)s %(name)s %(message)s"
    ))

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers = [handler]

    # Set levels for noisy libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("azure").setLevel(logging.WARNING)
    logging.getLogger("azure.core.pipeline.policies.http_logging_policy").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for the given name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)


class CommandInvocationLogger:
    """Helper for logging command invocations with consistent structure.

    Ensures every command call is logged with:
    - Command name
    - Key input parameters (sensitive keys dropped)
    - Duration
    - Success/failure status

    Logging failures are swallowed so they never reach the response path.
    """

    def __init__(self, logger: logging.Logger):
        self.logger = logger
        self._start_time: Optional[datetime] = None
        self._command_name: Optional[str] = None
        self._context: Dict[str, Any] = {}

    def start(self, command_name: str, **context) -> "CommandInvocationLogger":
        """Start timing a command invocation.

        Args:
            command_name: Tokenized name of the command being invoked
            **context: Key input parameters (subscription, resource_group, etc.)

        Returns:
            Self for chaining
        """
        self._start_time = datetime.now(timezone.utc)
        self._command_name = command_name
        self._context = context

        self._emit(
            logging.INFO,
            "Command invocation started",
            {"event": "command_start"},
        )
        return self

    def success(self, **result_info) -> int:
        """Log successful command completion.

        Args:
            **result_info: Non-sensitive result information (result counts, etc.)

        Returns:
            Duration in milliseconds
        """
        duration_ms = self._calculate_duration()
        self._emit(
            logging.INFO,
            "Command invocation succeeded",
            {
                "event": "command_success",
                "duration_ms": duration_ms,
                "result": self._filter(result_info),
            },
        )
        return duration_ms

    def failure(self, error: BaseException, status: Optional[int] = None) -> int:
        """Log failed command completion.

        Args:
            error: The exception that ended the invocation
            status: Status code the error was mapped to

        Returns:
            Duration in milliseconds
        """
        duration_ms = self._calculate_duration()
        self._emit(
            logging.ERROR,
            "Command invocation failed",
            {
                "event": "command_failure",
                "duration_ms": duration_ms,
                "status": status,
                "error": str(error),
                "error_type": type(error).__name__,
            },
            exc_info=error,
        )
        return duration_ms

    def _emit(self, level: int, message: str, fields: Dict[str, Any], exc_info=None) -> None:
        try:
            self.logger.log(
                level,
                message,
                exc_info=exc_info,
                extra={
                    "command": self._command_name,
                    "parameters": self._filter(self._context),
                    **fields,
                },
            )
        except Exception:  # noqa: BLE001
            pass

    def _calculate_duration(self) -> int:
        """Calculate duration in milliseconds."""
        if self._start_time is None:
            return 0
        delta = datetime.now(timezone.utc) - self._start_time
        return int(delta.total_seconds() * 1000)

    @classmethod
    def _filter(cls, values: Dict[str, Any]) -> Dict[str, Any]:
        return {
            k: v for k, v in values.items()
            if v is not None and not cls._is_sensitive(k)
        }

    @staticmethod
    def _is_sensitive(key: str) -> bool:
        """Check if a key might contain sensitive data."""
        sensitive_patterns = [
            "secret", "password", "token", "credential",
            "connection_string", "value", "response_body"
        ]
        key_lower = key.lower()
        return any(pattern in key_lower for pattern in sensitive_patterns)
