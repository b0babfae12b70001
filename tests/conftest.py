"""Pytest fixtures for Azure MCP Server tests."""

import os
from typing import Optional

import pytest
from unittest.mock import AsyncMock, MagicMock

from azmcp.commands.base import (
    BaseCommand,
    BaseOptions,
    CommandContext,
    READ_ONLY_METADATA,
    CommandMetadata,
)
from azmcp.commands.group import CommandGroup
from azmcp.config import Settings, reload_settings
from azmcp.options import Option, OptionKind, OptionParser
from azmcp.response import ResultModel
from azmcp.services import ServiceCollection


@pytest.fixture(autouse=True)
def reset_settings(monkeypatch):
    """Reset settings before each test, ignoring the developer's environment."""
    for key in list(os.environ):
        if key.upper().startswith(("AZURE_", "AZMCP_")):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("AZMCP_LOG_LEVEL", "DEBUG")
    reload_settings()
    yield
    reload_settings()


class AsyncPager:
    """Stand-in for an azure-core ``AsyncItemPaged``."""

    def __init__(self, items):
        self._items = list(items)

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for item in self._items:
            yield item


class EchoResult(ResultModel):
    resource_name: str
    item_count: int = 0


class EchoOptions(BaseOptions):
    name: Optional[str] = None
    count: Optional[int] = None


class EchoCommand(BaseCommand[EchoOptions]):
    """Minimal command calling a mocked service."""

    name = "echo"
    title = "Echo"
    description = "Echo the name back."
    metadata = READ_ONLY_METADATA
    options_model = EchoOptions

    def __init__(self, service, logger=None):
        self.service = service
        super().__init__(logger)

    def register_options(self, parser: OptionParser) -> None:
        super().register_options(parser)
        Option("name", "Name to echo.", required=True).apply(parser)
        Option("count", "Repeat count.", kind=OptionKind.INT).apply(parser)

    async def run(self, context: CommandContext, options: EchoOptions) -> EchoResult:
        return await self.service.echo(options.name, options.count)


class WriteCommand(EchoCommand):
    name = "write"
    metadata = CommandMetadata(destructive=True)


class StubArea:
    """Area registering ``demo echo``, ``demo write`` and a hidden ``demo secret``."""

    name = "demo"

    def __init__(self, service):
        self.service = service

    def configure_services(self, services) -> None:
        pass

    def register_commands(self, root_group, services) -> None:
        demo = root_group.add_sub_group(CommandGroup("demo", "Demo commands"))
        demo.add_command("echo", EchoCommand(self.service))
        demo.add_command("write", WriteCommand(self.service))
        hidden = EchoCommand(self.service)
        hidden.hidden = True
        demo.add_command("secret", hidden)


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def services(settings):
    return ServiceCollection(settings=settings)


@pytest.fixture
def echo_service():
    service = MagicMock()
    service.echo = AsyncMock(side_effect=lambda name, count: EchoResult(resource_name=name, item_count=count or 0))
    return service


@pytest.fixture
def arm_client():
    """ARM client double whose ``get`` returns the same management client."""
    client = MagicMock()
    arm = MagicMock()
    arm.get.return_value = client
    return arm, client
