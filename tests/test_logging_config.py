"""Tests for structured logging."""

import io
import json
import logging

import pytest
from unittest.mock import MagicMock

from azmcp.logging_config import AzmcpJsonFormatter, CommandInvocationLogger, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers = handlers
    root.setLevel(level)


class TestJsonFormatter:
    """Tests for AzmcpJsonFormatter."""

    def test_formats_json(self):
        stream = io.StringIO()
        handler = logging.StreamHandler(stream)
        handler.setFormatter(AzmcpJsonFormatter(fmt="%(timestamp)s %(level)s %(name)s %(message)s"))
        logger = logging.getLogger("azmcp.test.formatter")
        logger.handlers = [handler]
        logger.propagate = False
        logger.setLevel(logging.INFO)

        logger.info("hello", extra={"command": "aks_cluster_list"})

        record = json.loads(stream.getvalue())
        assert record["message"] == "hello"
        assert record["level"] == "INFO"
        assert record["logger"] == "azmcp.test.formatter"
        assert record["command"] == "aks_cluster_list"
        assert record["source"]["function"] == "test_formats_json"


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_stderr_handler(self, restore_root_logger):
        import sys

        setup_logging("warning", use_stderr=True)

        assert restore_root_logger.level == logging.WARNING
        assert len(restore_root_logger.handlers) == 1
        assert restore_root_logger.handlers[0].stream is sys.stderr

    def test_unknown_level_defaults_to_info(self, restore_root_logger):
        setup_logging("chatty")

        assert restore_root_logger.level == logging.INFO
        assert logging.getLogger("azure").level == logging.WARNING


class TestCommandInvocationLogger:
    """Tests for CommandInvocationLogger."""

    def test_start_and_success(self):
        logger = MagicMock()
        invocation = CommandInvocationLogger(logger)

        invocation.start("list", subscription="sub1", tenant=None, client_secret="s3cret")
        duration = invocation.success(count=3)

        assert duration >= 0
        start_call, success_call = logger.log.call_args_list
        assert start_call.args == (logging.INFO, "Command invocation started")
        assert start_call.kwargs["extra"]["parameters"] == {"subscription": "sub1"}
        assert success_call.kwargs["extra"]["event"] == "command_success"
        assert success_call.kwargs["extra"]["result"] == {"count": 3}

    def test_failure(self):
        logger = MagicMock()
        invocation = CommandInvocationLogger(logger).start("get", key="k", value="hidden")
        error = RuntimeError("boom")

        invocation.failure(error, 500)

        call = logger.log.call_args_list[-1]
        assert call.args[0] == logging.ERROR
        assert call.kwargs["exc_info"] is error
        assert call.kwargs["extra"]["status"] == 500
        assert call.kwargs["extra"]["error_type"] == "RuntimeError"
        assert call.kwargs["extra"]["parameters"] == {"key": "k"}

    def test_logging_errors_are_swallowed(self):
        logger = MagicMock()
        logger.log.side_effect = RuntimeError("handler broke")

        invocation = CommandInvocationLogger(logger)
        invocation.start("list")

        assert invocation.success() >= 0
