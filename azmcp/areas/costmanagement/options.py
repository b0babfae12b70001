"""Cost Management option definitions and bound option models."""

from datetime import datetime
from typing import List, Optional

from pydantic import field_validator

from ...commands.base import SubscriptionOptions
from ...options import Option, OptionKind
from .models import CostType, Granularity


class CostManagementOptionDefinitions:
    COST_TYPE = Option(
        "type",
        "Type of cost data to query: ActualCost or AmortizedCost. Defaults to ActualCost.",
        choices=("actualcost", "amortizedcost"),
    )
    FORECAST_TYPE = Option(
        "type",
        "Type of cost data to forecast: ActualCost, AmortizedCost or Usage. Defaults to ActualCost.",
        choices=("actualcost", "amortizedcost", "usage"),
    )
    GRANULARITY = Option(
        "granularity",
        "Time granularity of the returned rows: None, Daily or Monthly. Defaults to Daily.",
        choices=("none", "daily", "monthly"),
    )
    FROM_DATE = Option(
        "from-date",
        "Start of the time period (ISO 8601, e.g. 2024-01-01).",
        kind=OptionKind.DATETIME,
    )
    TO_DATE = Option(
        "to-date",
        "End of the time period (ISO 8601, e.g. 2024-01-31).",
        kind=OptionKind.DATETIME,
    )
    GROUP_BY = Option(
        "group-by",
        "Dimensions to group costs by, e.g. ResourceGroup, ServiceName, ResourceLocation.",
        kind=OptionKind.STRING_ARRAY,
        allow_multiple_per_token=True,
    )
    AGGREGATION_COST_TYPE = Option(
        "aggregation-cost-type",
        "Cost column to aggregate: PreTaxCost, Cost, PreTaxCostUSD or CostUSD. Defaults to Cost.",
    )
    AGGREGATION_FUNCTION = Option(
        "aggregation-function",
        "Aggregation function applied to the forecast column. Defaults to Sum.",
    )
    AGGREGATION_NAME = Option(
        "aggregation-name",
        "Column to forecast. Defaults to Cost.",
    )
    INCLUDE_ACTUAL_COST = Option(
        "include-actual-cost",
        "Include actual cost rows alongside the forecast.",
        kind=OptionKind.BOOL,
    )
    INCLUDE_FRESH_PARTIAL_COST = Option(
        "include-fresh-partial-cost",
        "Include fresh partial cost data. Requires --include-actual-cost.",
        kind=OptionKind.BOOL,
    )


class CostPeriodOptions(SubscriptionOptions):
    type: CostType = CostType.ACTUAL_COST
    granularity: Granularity = Granularity.DAILY
    from_date: Optional[datetime] = None
    to_date: Optional[datetime] = None

    @field_validator("type", mode="before")
    @classmethod
    def parse_type(cls, value):
        return CostType.parse(value)

    @field_validator("granularity", mode="before")
    @classmethod
    def parse_granularity(cls, value):
        return Granularity.parse(value)


class CostGetOptions(CostPeriodOptions):
    group_by: Optional[List[str]] = None
    aggregation_cost_type: str = "Cost"


class ForecastGetOptions(CostPeriodOptions):
    aggregation_function: str = "Sum"
    aggregation_name: str = "Cost"
    include_actual_cost: bool = False
    include_fresh_partial_cost: bool = False
