"""Resource group area."""

from typing import List

from ...commands.base import READ_ONLY_METADATA, CommandContext, SubscriptionCommand, SubscriptionOptions
from ...commands.group import CommandGroup
from ...response import ResultModel
from ...services.azure.subscription import SubscriptionService
from ...services.azure.tenant import TenantService
from .. import AreaSetup
from .service import ResourceGroupInfo, ResourceGroupService


class GroupListResult(ResultModel):
    groups: List[ResourceGroupInfo]


class GroupListCommand(SubscriptionCommand[SubscriptionOptions]):
    name = "list"
    title = "List Resource Groups"
    description = """
        List all resource groups in a subscription. This command retrieves all resource groups available
        in the specified subscription. Results include resource group names and IDs,
        returned as a JSON array.
    """
    metadata = READ_ONLY_METADATA

    def __init__(self, group_service: ResourceGroupService, logger=None):
        self.group_service = group_service
        super().__init__(logger)

    async def run(self, context: CommandContext, options: SubscriptionOptions) -> GroupListResult:
        groups = await self.group_service.list_resource_groups(
            options.subscription,
            options.tenant,
            options.retry_policy,
        )
        return GroupListResult(groups=groups)

    @staticmethod
    def result_summary(results) -> dict:
        return {"count": len(results.groups)}


class GroupSetup(AreaSetup):
    name = "group"

    def configure_services(self, services) -> None:
        services.add_singleton(ResourceGroupService, ResourceGroupService(
            services.get(SubscriptionService),
            tenant_service=services.get(TenantService),
            settings=services.settings,
        ))

    def register_commands(self, root_group, services) -> None:
        group = root_group.add_sub_group(CommandGroup(
            "group",
            "Resource group operations - Commands for listing and managing Azure resource groups in your subscriptions.",
        ))
        group.add_command("list", GroupListCommand(services.get(ResourceGroupService)))
