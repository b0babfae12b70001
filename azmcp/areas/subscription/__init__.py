"""Subscription area."""

from typing import List

from ...commands.base import READ_ONLY_METADATA, CommandContext, GlobalCommand, GlobalOptions
from ...commands.group import CommandGroup
from ...response import ResultModel
from ...services.azure.models import SubscriptionInfo
from ...services.azure.subscription import SubscriptionService
from .. import AreaSetup


class SubscriptionListResult(ResultModel):
    subscriptions: List[SubscriptionInfo]


class SubscriptionListCommand(GlobalCommand[GlobalOptions]):
    """Lists subscriptions visible to the signed-in identity."""

    name = "list"
    title = "List Azure Subscriptions"
    description = """
        List all Azure subscriptions accessible to your account. Optionally specify tenant and auth-method.
        Results include subscription names and IDs, returned as a JSON array.
    """
    metadata = READ_ONLY_METADATA

    def __init__(self, subscription_service: SubscriptionService, logger=None):
        self.subscription_service = subscription_service
        super().__init__(logger)

    async def run(self, context: CommandContext, options: GlobalOptions) -> SubscriptionListResult:
        subscriptions = await self.subscription_service.list_subscriptions(
            options.tenant,
            options.retry_policy,
        )
        return SubscriptionListResult(subscriptions=subscriptions)

    @staticmethod
    def result_summary(results) -> dict:
        return {"count": len(results.subscriptions)}


class SubscriptionSetup(AreaSetup):
    name = "subscription"

    def register_commands(self, root_group, services) -> None:
        group = root_group.add_sub_group(CommandGroup(
            "subscription",
            "Azure subscription operations - Commands for listing and managing Azure subscriptions accessible to your account.",
        ))
        group.add_command("list", SubscriptionListCommand(services.get(SubscriptionService)))
