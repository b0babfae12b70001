"""Cost Management service: usage queries and forecasts over azure-mgmt-costmanagement."""

from datetime import datetime, timedelta, timezone
from typing import Any, List, Optional, Tuple

from ...errors import handle_azure_error
from ...logging_config import get_logger
from ...retry import RetryPolicyOptions
from ...services.azure.base import BaseAzureService
from ...services.azure.subscription import SubscriptionService
from .models import CostQueryProperties, CostQueryResult, CostType, Granularity, QueryColumn

logger = get_logger(__name__)

DEFAULT_PERIOD_DAYS = 30
AGGREGATION_KEY = "totalCost"


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes as UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def _today() -> datetime:
    return datetime.now(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)


def history_period(from_date: Optional[datetime], to_date: Optional[datetime]) -> Tuple[datetime, datetime]:
    """Query window; defaults to the 30 days ending today.

    Raises:
        ValueError: If the window ends before it starts
    """
    end = as_utc(to_date) or _today()
    start = as_utc(from_date) or end - timedelta(days=DEFAULT_PERIOD_DAYS)
    return _checked(start, end)


def forecast_period(from_date: Optional[datetime], to_date: Optional[datetime]) -> Tuple[datetime, datetime]:
    """Forecast window; defaults to the 30 days starting today.

    Raises:
        ValueError: If the window ends before it starts
    """
    start = as_utc(from_date) or _today()
    end = as_utc(to_date) or start + timedelta(days=DEFAULT_PERIOD_DAYS)
    return _checked(start, end)


def _checked(start: datetime, end: datetime) -> Tuple[datetime, datetime]:
    if start > end:
        raise ValueError(
            f"The from date ({start.date().isoformat()}) must not be after the to date ({end.date().isoformat()})."
        )
    return start, end


def query_result_from_sdk(result: Any) -> CostQueryResult:
    columns = [
        QueryColumn(name=getattr(column, "name", None), type=getattr(column, "type", None))
        for column in getattr(result, "columns", None) or []
    ]
    return CostQueryResult(
        id=getattr(result, "id", None),
        name=getattr(result, "name", None),
        type=getattr(result, "type", None),
        e_tag=getattr(result, "e_tag", None),
        location=getattr(result, "location", None),
        sku=getattr(result, "sku", None),
        tags=getattr(result, "tags", None),
        properties=CostQueryProperties(
            next_link=getattr(result, "next_link", None),
            columns=columns,
            rows=[list(row) for row in getattr(result, "rows", None) or []],
        ),
    )


class CostManagementService(BaseAzureService):
    """Subscription-scoped cost queries and forecasts."""

    def __init__(self, subscription_service: SubscriptionService, **kwargs):
        super().__init__(**kwargs)
        self.subscription_service = subscription_service

    async def _client(self, subscription: str, tenant: Optional[str], retry_policy: Optional[RetryPolicyOptions]):
        from azure.mgmt.costmanagement.aio import CostManagementClient

        subscription_id = await self.subscription_service.get_subscription_id(subscription, tenant, retry_policy)
        arm_client = await self.create_arm_client(tenant, retry_policy)
        return f"/subscriptions/{subscription_id}", arm_client.get(CostManagementClient)

    @handle_azure_error
    async def query_costs(
        self,
        subscription: str,
        cost_type: CostType = CostType.ACTUAL_COST,
        granularity: Granularity = Granularity.DAILY,
        from_date: Optional[datetime] = None,
        to_date: Optional[datetime] = None,
        group_by: Optional[List[str]] = None,
        aggregation_cost_type: str = "Cost",
        tenant: Optional[str] = None,
        retry_policy: Optional[RetryPolicyOptions] = None,
    ) -> CostQueryResult:
        """Run a custom-timeframe usage query over a subscription.

        Args:
            subscription: Subscription ID or display name
            cost_type: Actual or amortized cost
            granularity: Row bucketing
            from_date: Window start; defaults to 30 days before ``to_date``
            to_date: Window end; defaults to today (UTC)
            group_by: Dimension names, e.g. ``ResourceGroup``
            aggregation_cost_type: Cost column summed into ``totalCost``
        """
        from azure.mgmt.costmanagement.models import (
            QueryAggregation,
            QueryDataset,
            QueryDefinition,
            QueryGrouping,
            QueryTimePeriod,
        )

        self.validate_required_parameters(subscription=subscription)
        start, end = history_period(from_date, to_date)
        scope, client = await self._client(subscription, tenant, retry_policy)

        query = QueryDefinition(
            type=CostType.parse(cost_type).value,
            timeframe="Custom",
            time_period=QueryTimePeriod(from_property=start, to=end),
            dataset=QueryDataset(
                granularity=Granularity.parse(granularity).value,
                aggregation={AGGREGATION_KEY: QueryAggregation(name=aggregation_cost_type, function="Sum")},
                grouping=[QueryGrouping(type="Dimension", name=name) for name in group_by] if group_by else None,
            ),
        )
        logger.debug(
            "Querying costs",
            extra={"scope": scope, "from_date": start.isoformat(), "to_date": end.isoformat(), "group_by": group_by},
        )
        return query_result_from_sdk(await client.query.usage(scope, query))

    @handle_azure_error
    async def forecast_costs(
        self,
        subscription: str,
        cost_type: CostType = CostType.ACTUAL_COST,
        granularity: Granularity = Granularity.DAILY,
        from_date: Optional[datetime] = None,
        to_date: Optional[datetime] = None,
        aggregation_name: str = "Cost",
        aggregation_function: str = "Sum",
        include_actual_cost: bool = False,
        include_fresh_partial_cost: bool = False,
        tenant: Optional[str] = None,
        retry_policy: Optional[RetryPolicyOptions] = None,
    ) -> CostQueryResult:
        """Forecast costs over a subscription; the window defaults to the next 30 days."""
        from azure.mgmt.costmanagement.models import (
            ForecastAggregation,
            ForecastDataset,
            ForecastDefinition,
            ForecastTimePeriod,
        )

        self.validate_required_parameters(subscription=subscription)
        start, end = forecast_period(from_date, to_date)
        scope, client = await self._client(subscription, tenant, retry_policy)

        forecast = ForecastDefinition(
            type=CostType.parse(cost_type).value,
            timeframe="Custom",
            time_period=ForecastTimePeriod(from_property=start, to=end),
            dataset=ForecastDataset(
                granularity=Granularity.parse(granularity).value,
                aggregation={
                    AGGREGATION_KEY: ForecastAggregation(name=aggregation_name, function=aggregation_function),
                },
            ),
            include_actual_cost=include_actual_cost,
            include_fresh_partial_cost=include_fresh_partial_cost,
        )
        logger.debug(
            "Forecasting costs",
            extra={"scope": scope, "from_date": start.isoformat(), "to_date": end.isoformat()},
        )
        return query_result_from_sdk(await client.forecast.usage(scope, forecast))
