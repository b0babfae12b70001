"""Tests for the command factory and dispatcher."""

import asyncio

import pytest
from unittest.mock import AsyncMock, MagicMock

from azmcp.areas.tools import ToolsSetup
from azmcp.commands.base import GlobalCommand, GlobalOptions
from azmcp.commands.factory import CommandFactory, build_command_factory, get_visible_commands
from azmcp.commands.group import FrozenGroupError, CommandGroup
from azmcp.services import ServiceCollection
from azmcp.services.azure.base import BaseAzureService

from conftest import EchoResult, StubArea


class TenantCommand(GlobalCommand[GlobalOptions]):
    name = "tenant"
    description = "Report the tenant of the credential used for the call."

    def __init__(self, service):
        self.service = service
        super().__init__()

    async def run(self, context, options):
        await asyncio.sleep(0)
        arm = await self.service.create_arm_client(options.tenant, options.retry_policy)
        await asyncio.sleep(0)
        return EchoResult(resource_name=arm.credential.tenant_id)


class WhoAmIArea:
    name = "whoami"

    def __init__(self, service):
        self.service = service

    def configure_services(self, services) -> None:
        pass

    def register_commands(self, root_group, services) -> None:
        group = root_group.add_sub_group(CommandGroup("whoami", "Identity commands"))
        group.add_command("tenant", TenantCommand(self.service))


@pytest.fixture
def factory(services, echo_service):
    return CommandFactory([ToolsSetup(), StubArea(echo_service)], services)


class TestCommandFactory:
    """Tests for building and resolving the command tree."""

    def test_all_commands_include_hidden(self, factory):
        assert list(factory.all_commands) == ["tools_list", "demo_echo", "demo_write", "demo_secret"]

    def test_visible_commands(self, factory):
        assert list(factory.visible_commands()) == ["demo_echo", "demo_write"]

    def test_tree_is_frozen(self, factory):
        with pytest.raises(FrozenGroupError):
            factory.root_group.add_sub_group(CommandGroup("late", "Late"))

    def test_all_commands_is_read_only(self, factory):
        with pytest.raises(TypeError):
            factory.all_commands["new"] = None

    @pytest.mark.parametrize("name", ["demo_echo", "demo echo", "azmcp demo echo", "azmcp_demo_echo", ["demo", "echo"]])
    def test_find_command(self, factory, name):
        assert factory.find_command(name) is factory.all_commands["demo_echo"]

    def test_find_unknown(self, factory):
        assert factory.find_command("demo_missing") is None

    def test_split_command_line(self, factory):
        path, args = factory.split_command_line(["demo", "echo", "--name", "x"])

        assert path == ["demo", "echo"]
        assert args == ["--name", "x"]


class TestDispatch:
    """Tests for dispatch()."""

    @pytest.mark.asyncio
    async def test_dispatch_tool_call(self, factory, echo_service):
        response = await factory.dispatch("demo_echo", {"name": "x", "count": 2})

        assert response.status == 200
        assert response.results == EchoResult(resource_name="x", item_count=2)

    @pytest.mark.asyncio
    async def test_dispatch_command_line(self, factory):
        response = await factory.dispatch_command_line(["demo", "echo", "--name", "x"])

        assert response.status == 200
        assert response.to_dict()["results"] == {"resourceName": "x", "itemCount": 0}

    @pytest.mark.asyncio
    async def test_unknown_command(self, factory):
        response = await factory.dispatch("demo_nope")

        assert response.status == 404
        assert response.message == "Command 'demo nope' not found."

    @pytest.mark.asyncio
    async def test_missing_arguments(self, factory):
        response = await factory.dispatch("demo_echo", {})

        assert response.status == 400
        assert "required" in response.message.lower()

    @pytest.mark.asyncio
    async def test_hidden_commands_are_dispatchable(self, factory):
        response = await factory.dispatch("demo_secret", {"name": "x"})
        assert response.status == 200

    @pytest.mark.asyncio
    async def test_timeout(self, services, echo_service):
        async def slow(name, count):
            await asyncio.sleep(5)

        echo_service.echo = AsyncMock(side_effect=slow)
        factory = CommandFactory([StubArea(echo_service)], services, command_timeout=0.05)

        response = await factory.dispatch("demo_echo", {"name": "x"})

        assert response.status == 504
        assert "did not complete" in response.message
        assert "troubleshooting" in response.message

    @pytest.mark.asyncio
    async def test_timeout_disabled(self, services, echo_service):
        factory = CommandFactory([StubArea(echo_service)], services, command_timeout=0)

        response = await factory.dispatch("demo_echo", {"name": "x"})

        assert response.status == 200

    @pytest.mark.asyncio
    async def test_concurrent_dispatch(self, factory):
        responses = await asyncio.gather(*(factory.dispatch("demo_echo", {"name": f"n{i}"}) for i in range(5)))

        assert [r.results.resource_name for r in responses] == [f"n{i}" for i in range(5)]

    @pytest.mark.asyncio
    async def test_concurrent_dispatch_across_tenants(self, services, settings):
        credential_factory = MagicMock(
            side_effect=lambda tenant_id, settings=None: MagicMock(tenant_id=tenant_id)
        )
        service = BaseAzureService(settings=settings, credential_factory=credential_factory)
        factory = CommandFactory([WhoAmIArea(service)], services)
        tenants = ["t1", "t2", "t3"] * 4

        responses = await asyncio.gather(
            *(factory.dispatch("whoami_tenant", {"tenant": tenant}) for tenant in tenants)
        )

        assert [r.status for r in responses] == [200] * len(tenants)
        assert [r.results.resource_name for r in responses] == tenants
        assert credential_factory.call_count == 3


class TestReadOnlyMode:
    """Tests for read-only servers."""

    @pytest.fixture
    def read_only_factory(self, settings, echo_service):
        services = ServiceCollection(settings=settings, read_only=True)
        return CommandFactory([ToolsSetup(), StubArea(echo_service)], services)

    def test_non_read_only_commands_hidden(self, read_only_factory):
        assert list(read_only_factory.visible_commands()) == ["demo_echo"]
        assert list(get_visible_commands(read_only_factory.root_group, read_only=False)) != []

    @pytest.mark.asyncio
    async def test_non_read_only_commands_rejected(self, read_only_factory, echo_service):
        response = await read_only_factory.dispatch("demo_write", {"name": "x"})

        assert response.status == 403
        assert "read-only" in response.message
        echo_service.echo.assert_not_called()


class TestBuiltInAreas:
    """Tests for the factory with every built-in area registered."""

    @pytest.fixture
    def built_in(self, settings):
        return build_command_factory(ServiceCollection.with_defaults(settings))

    def test_visible_tool_names(self, built_in):
        assert list(built_in.visible_commands()) == [
            "subscription_list",
            "group_list",
            "aks_cluster_list",
            "aks_cluster_get",
            "aks_nodepool_list",
            "aks_nodepool_get",
            "appconfig_account_list",
            "appconfig_kv_delete",
            "appconfig_kv_list",
            "appconfig_kv_set",
            "appconfig_kv_show",
            "appconfig_kv_lock_set",
            "costmanagement_cost_get",
            "costmanagement_forecast_get",
        ]

    def test_tools_list_is_hidden(self, built_in):
        assert "tools_list" in built_in.all_commands
        assert "tools_list" not in built_in.visible_commands()

    def test_read_only_hides_writes(self, settings):
        factory = build_command_factory(ServiceCollection.with_defaults(settings), read_only=True)
        names = list(factory.visible_commands())

        assert "appconfig_kv_list" in names
        assert "appconfig_kv_set" not in names
        assert "appconfig_kv_delete" not in names
        assert "appconfig_kv_lock_set" not in names

    @pytest.mark.asyncio
    async def test_command_line_validation(self, built_in):
        response = await built_in.dispatch_command_line(["aks", "nodepool", "list", "--subscription", "sub1"])

        assert response.status == 400
        assert "--resource-group" in response.message
        assert "--cluster" in response.message
