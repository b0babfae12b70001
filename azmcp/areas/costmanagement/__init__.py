"""Cost Management area: cost queries and forecasts."""

from ...commands.group import CommandGroup
from ...services.azure.subscription import SubscriptionService
from ...services.azure.tenant import TenantService
from .. import AreaSetup
from .commands import CostGetCommand, ForecastGetCommand
from .service import CostManagementService


class CostManagementSetup(AreaSetup):
    name = "costmanagement"

    def configure_services(self, services) -> None:
        services.add_singleton(CostManagementService, CostManagementService(
            services.get(SubscriptionService),
            tenant_service=services.get(TenantService),
            settings=services.settings,
        ))

    def register_commands(self, root_group, services) -> None:
        costmanagement = root_group.add_sub_group(CommandGroup(
            "costmanagement",
            "Cost Management operations - Commands for querying Azure Cost Management data for usage and cost "
            "information. Allows filtering by from and to date, time granularity, and grouping by Azure dimensions.",
        ))
        cost_service = services.get(CostManagementService)

        cost = costmanagement.add_sub_group(CommandGroup("cost", "Cost query operations - Commands for querying actual and amortized cost."))
        cost.add_command("get", CostGetCommand(cost_service))

        forecast = costmanagement.add_sub_group(CommandGroup("forecast", "Cost forecast operations - Commands for forecasting future cost."))
        forecast.add_command("get", ForecastGetCommand(cost_service))


__all__ = ["CostManagementService", "CostManagementSetup"]
