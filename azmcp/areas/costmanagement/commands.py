"""Cost Management query and forecast commands."""

from typing import List

from ...commands.base import READ_ONLY_METADATA, CommandContext, SubscriptionCommand
from ...commands.errors import ErrorRule, has_status, is_instance
from ...errors import AzureAPIError, AzureValidationError
from ...options import OptionParser, ParseResult
from ...response import ResultModel
from .models import CostQueryResult
from .options import CostGetOptions, CostManagementOptionDefinitions, ForecastGetOptions
from .service import CostManagementService, as_utc

COST_ERROR_RULES = (
    ErrorRule(
        match=is_instance(ValueError, AzureValidationError),
        status_code=400,
        message=lambda error: f"Invalid parameter provided. Details: {error}",
    ),
    ErrorRule(
        match=has_status(404),
        status_code=404,
        message=lambda error: (
            "Cost data not found. Verify the subscription exists and you have access to cost management data."
        ),
    ),
    ErrorRule(
        match=has_status(403),
        status_code=403,
        message=lambda error: f"Authorization failed accessing cost management data. Details: {error}",
    ),
    ErrorRule(
        match=has_status(429),
        status_code=429,
        message=lambda error: "Request throttled. Cost management API has rate limits. Please wait and retry.",
    ),
    ErrorRule(
        match=is_instance(AzureAPIError),
        message=lambda error: f"Cost management service error. Details: {error}",
    ),
)


class CostGetResult(ResultModel):
    cost_data: CostQueryResult


class ForecastGetResult(ResultModel):
    cost_data: CostQueryResult


class BaseCostManagementCommand(SubscriptionCommand):
    metadata = READ_ONLY_METADATA
    error_rules = COST_ERROR_RULES

    def __init__(self, cost_service: CostManagementService, logger=None):
        self.cost_service = cost_service
        super().__init__(logger)

    def register_options(self, parser: OptionParser) -> None:
        super().register_options(parser)
        CostManagementOptionDefinitions.GRANULARITY.apply(parser)
        CostManagementOptionDefinitions.FROM_DATE.apply(parser)
        CostManagementOptionDefinitions.TO_DATE.apply(parser)

    def validate_options(self, parse_result: ParseResult) -> List[str]:
        errors = super().validate_options(parse_result)
        from_date = as_utc(parse_result.values.get("from-date"))
        to_date = as_utc(parse_result.values.get("to-date"))
        if from_date is not None and to_date is not None and from_date > to_date:
            errors.append("--from-date must be on or before --to-date.")
        return errors

    @staticmethod
    def result_summary(results) -> dict:
        return {"rows": len(results.cost_data.properties.rows)}


class CostGetCommand(BaseCostManagementCommand):
    name = "get"
    title = "Get Azure Cost Management Query"
    description = """
        Query Azure Cost Management for actual or amortized cost in a subscription over a date range.
        Results can be bucketed by day or month and grouped by dimensions such as ResourceGroup,
        ServiceName or ResourceLocation. Defaults to daily actual cost for the last 30 days.
        Returns the column definitions and rows of the cost query.
    """
    options_model = CostGetOptions

    def register_options(self, parser: OptionParser) -> None:
        super().register_options(parser)
        CostManagementOptionDefinitions.COST_TYPE.apply(parser)
        CostManagementOptionDefinitions.GROUP_BY.apply(parser)
        CostManagementOptionDefinitions.AGGREGATION_COST_TYPE.apply(parser)

    async def run(self, context: CommandContext, options: CostGetOptions) -> CostGetResult:
        cost_data = await self.cost_service.query_costs(
            options.subscription,
            cost_type=options.type,
            granularity=options.granularity,
            from_date=options.from_date,
            to_date=options.to_date,
            group_by=options.group_by,
            aggregation_cost_type=options.aggregation_cost_type,
            tenant=options.tenant,
            retry_policy=options.retry_policy,
        )
        return CostGetResult(cost_data=cost_data)


class ForecastGetCommand(BaseCostManagementCommand):
    name = "get"
    title = "Get Azure Cost Management Forecast"
    description = """
        Forecast Azure costs for a subscription over a date range. Defaults to a daily actual cost
        forecast for the next 30 days. Actual cost rows can be included next to the forecast.
        Returns the column definitions and rows of the forecast.
    """
    options_model = ForecastGetOptions

    def register_options(self, parser: OptionParser) -> None:
        super().register_options(parser)
        CostManagementOptionDefinitions.FORECAST_TYPE.apply(parser)
        CostManagementOptionDefinitions.AGGREGATION_FUNCTION.apply(parser)
        CostManagementOptionDefinitions.AGGREGATION_NAME.apply(parser)
        CostManagementOptionDefinitions.INCLUDE_ACTUAL_COST.apply(parser)
        CostManagementOptionDefinitions.INCLUDE_FRESH_PARTIAL_COST.apply(parser)

    async def run(self, context: CommandContext, options: ForecastGetOptions) -> ForecastGetResult:
        cost_data = await self.cost_service.forecast_costs(
            options.subscription,
            cost_type=options.type,
            granularity=options.granularity,
            from_date=options.from_date,
            to_date=options.to_date,
            aggregation_name=options.aggregation_name,
            aggregation_function=options.aggregation_function,
            include_actual_cost=options.include_actual_cost,
            include_fresh_partial_cost=options.include_fresh_partial_cost,
            tenant=options.tenant,
            retry_policy=options.retry_policy,
        )
        return ForecastGetResult(cost_data=cost_data)
