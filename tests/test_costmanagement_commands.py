"""Tests for the Cost Management area."""

import json
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
from unittest.mock import AsyncMock, MagicMock

from azmcp.areas.costmanagement.commands import CostGetCommand, ForecastGetCommand
from azmcp.areas.costmanagement.models import (
    CostQueryProperties,
    CostQueryResult,
    CostType,
    Granularity,
    QueryColumn,
)
from azmcp.areas.costmanagement.service import (
    CostManagementService,
    forecast_period,
    history_period,
    query_result_from_sdk,
)
from azmcp.commands.base import CommandContext
from azmcp.commands.errors import TROUBLESHOOTING_URL
from azmcp.errors import (
    AzureAPIError,
    AzureAuthorizationError,
    AzureNotFoundError,
    AzureThrottlingError,
    AzureValidationError,
)

JANUARY = ["--from-date", "2023-01-01", "--to-date", "2023-01-31"]


def cost_data(rows=None):
    return CostQueryResult(
        name="query1",
        type="Microsoft.CostManagement/query",
        properties=CostQueryProperties(
            columns=[QueryColumn(name="Cost", type="Number"), QueryColumn(name="UsageDate", type="Number")],
            rows=rows if rows is not None else [[12.5, 20230101], [7.25, 20230102]],
        ),
    )


@pytest.fixture
def cost_service():
    service = AsyncMock()
    service.query_costs.return_value = cost_data()
    service.forecast_costs.return_value = cost_data()
    return service


async def run(command, args):
    return await command.execute(CommandContext(), command.get_command().parse(args))


class TestCostGetCommand:
    """Tests for CostGetCommand."""

    def test_definition(self, cost_service):
        command = CostGetCommand(cost_service)
        definition = command.get_command()
        names = [option.name for option in definition.options]

        assert definition.name == "get"
        assert command.title == "Get Azure Cost Management Query"
        assert command.metadata.read_only
        for name in ("subscription", "type", "granularity", "from-date", "to-date", "group-by", "aggregation-cost-type"):
            assert name in names

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "args,should_succeed",
        [
            (["--subscription", "test-sub", "--type", "ActualCost", "--granularity", "Daily"] + JANUARY, True),
            (["--subscription", "test-sub", "--type", "AmortizedCost", "--granularity", "Monthly"] + JANUARY, True),
            (["--subscription", "test-sub"], True),
            (["--subscription", "test-sub", "--type", "InvalidType"], False),
            (["--subscription", "test-sub", "--granularity", "Hourly"], False),
            (["--subscription", "test-sub", "--from-date", "yesterday"], False),
            ([], False),
        ],
    )
    async def test_validates_input(self, cost_service, args, should_succeed):
        response = await run(CostGetCommand(cost_service), args)

        if should_succeed:
            assert response.status == 200
            assert response.results is not None
            cost_service.query_costs.assert_awaited_once()
        else:
            assert response.status == 400
            cost_service.query_costs.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_passes_options(self, cost_service):
        response = await run(CostGetCommand(cost_service), [
            "--subscription", "test-sub",
            "--type", "AmortizedCost",
            "--granularity", "monthly",
            "--aggregation-cost-type", "PreTaxCost",
            *JANUARY,
            "--group-by", "ResourceGroup", "ServiceName",
        ])

        assert response.status == 200
        cost_service.query_costs.assert_awaited_once_with(
            "test-sub",
            cost_type=CostType.AMORTIZED_COST,
            granularity=Granularity.MONTHLY,
            from_date=datetime(2023, 1, 1),
            to_date=datetime(2023, 1, 31),
            group_by=["ResourceGroup", "ServiceName"],
            aggregation_cost_type="PreTaxCost",
            tenant=None,
            retry_policy=None,
        )

    @pytest.mark.asyncio
    async def test_defaults(self, cost_service):
        await run(CostGetCommand(cost_service), ["--subscription", "test-sub"])

        kwargs = cost_service.query_costs.call_args.kwargs
        assert kwargs["cost_type"] is CostType.ACTUAL_COST
        assert kwargs["granularity"] is Granularity.DAILY
        assert kwargs["from_date"] is None
        assert kwargs["to_date"] is None
        assert kwargs["group_by"] is None
        assert kwargs["aggregation_cost_type"] == "Cost"

    @pytest.mark.asyncio
    async def test_tool_call_arguments(self, cost_service):
        command = CostGetCommand(cost_service)
        parse_result = command.get_command().parse_arguments({
            "subscription": "test-sub",
            "type": "amortizedcost",
            "fromDate": "2023-01-01T00:00:00Z",
            "groupBy": ["ResourceLocation"],
        })

        response = await command.execute(CommandContext(), parse_result)

        assert response.status == 200
        kwargs = cost_service.query_costs.call_args.kwargs
        assert kwargs["cost_type"] is CostType.AMORTIZED_COST
        assert kwargs["from_date"] == datetime(2023, 1, 1, tzinfo=timezone.utc)
        assert kwargs["group_by"] == ["ResourceLocation"]

    @pytest.mark.asyncio
    async def test_from_date_after_to_date(self, cost_service):
        response = await run(CostGetCommand(cost_service), [
            "--subscription", "test-sub", "--from-date", "2023-02-01", "--to-date", "2023-01-01",
        ])

        assert response.status == 400
        assert "--from-date" in response.message
        cost_service.query_costs.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_serialized_results(self, cost_service):
        response = await run(CostGetCommand(cost_service), ["--subscription", "test-sub"])

        results = json.loads(response.to_json())["results"]
        assert results["costData"]["properties"]["rows"] == [[12.5, 20230101], [7.25, 20230102]]
        assert results["costData"]["properties"]["columns"][0] == {"name": "Cost", "type": "Number"}
        assert CostGetCommand.result_summary(response.results) == {"rows": 2}

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error,status,text",
        [
            (AzureNotFoundError("SubscriptionNotFound"), 404, "Cost data not found."),
            (AzureAuthorizationError("AuthorizationFailed"), 403, "Authorization failed accessing cost management data."),
            (AzureThrottlingError("TooManyRequests"), 429, "Request throttled."),
            (AzureAPIError("Conflict", status_code=409), 409, "Cost management service error. Details: Conflict"),
            (ValueError("bad window"), 400, "Invalid parameter provided. Details: bad window"),
            (AzureValidationError("Value cannot be null"), 400, "Invalid parameter provided."),
        ],
    )
    async def test_error_messages(self, cost_service, error, status, text):
        cost_service.query_costs.side_effect = error

        response = await run(CostGetCommand(cost_service), ["--subscription", "test-sub"])

        assert response.status == status
        assert response.message.startswith(text)
        assert TROUBLESHOOTING_URL not in response.message

    @pytest.mark.asyncio
    async def test_server_errors_get_troubleshooting_hint(self, cost_service):
        cost_service.query_costs.side_effect = AzureAPIError("Service unavailable", status_code=503)

        response = await run(CostGetCommand(cost_service), ["--subscription", "test-sub"])

        assert response.status == 503
        assert response.message.startswith("Cost management service error.")
        assert TROUBLESHOOTING_URL in response.message


class TestForecastGetCommand:
    """Tests for ForecastGetCommand."""

    def test_definition(self, cost_service):
        command = ForecastGetCommand(cost_service)
        names = [option.name for option in command.get_command().options]

        assert command.title == "Get Azure Cost Management Forecast"
        assert command.metadata.read_only
        for name in ("aggregation-function", "aggregation-name", "include-actual-cost", "include-fresh-partial-cost"):
            assert name in names
        assert "group-by" not in names

    @pytest.mark.asyncio
    async def test_passes_options(self, cost_service):
        response = await run(ForecastGetCommand(cost_service), [
            "--subscription", "test-sub",
            "--type", "Usage",
            "--aggregation-name", "PreTaxCost",
            "--include-actual-cost",
            "--include-fresh-partial-cost", "false",
            *JANUARY,
        ])

        assert response.status == 200
        cost_service.forecast_costs.assert_awaited_once_with(
            "test-sub",
            cost_type=CostType.USAGE,
            granularity=Granularity.DAILY,
            from_date=datetime(2023, 1, 1),
            to_date=datetime(2023, 1, 31),
            aggregation_name="PreTaxCost",
            aggregation_function="Sum",
            include_actual_cost=True,
            include_fresh_partial_cost=False,
            tenant=None,
            retry_policy=None,
        )
        assert response.results.cost_data.properties.rows

    @pytest.mark.asyncio
    async def test_requires_subscription(self, cost_service):
        response = await run(ForecastGetCommand(cost_service), [])

        assert response.status == 400
        assert "--subscription" in response.message
        cost_service.forecast_costs.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_not_found_message(self, cost_service):
        cost_service.forecast_costs.side_effect = AzureNotFoundError("gone")

        response = await run(ForecastGetCommand(cost_service), ["--subscription", "test-sub"])

        assert response.status == 404
        assert response.message.startswith("Cost data not found.")


class TestTimePeriods:
    """Tests for default query and forecast windows."""

    def test_history_defaults_to_last_30_days(self):
        start, end = history_period(None, None)

        assert end.tzinfo is not None
        assert (end.hour, end.minute) == (0, 0)
        assert end - start == timedelta(days=30)

    def test_history_from_date_only(self):
        start, end = history_period(datetime(2023, 1, 1), None)

        assert start == datetime(2023, 1, 1, tzinfo=timezone.utc)
        assert end.date() == datetime.now(timezone.utc).date()

    def test_forecast_defaults_to_next_30_days(self):
        start, end = forecast_period(None, None)

        assert start.date() == datetime.now(timezone.utc).date()
        assert end - start == timedelta(days=30)

    def test_mixed_naive_and_aware_dates(self):
        start, end = history_period(datetime(2023, 1, 1), datetime(2023, 1, 31, tzinfo=timezone.utc))
        assert start < end

    def test_inverted_window(self):
        with pytest.raises(ValueError, match="must not be after"):
            history_period(datetime(2023, 2, 1), datetime(2023, 1, 1))


class TestCostManagementService:
    """Tests for CostManagementService against a mocked management client."""

    @pytest.fixture
    def service(self, settings, arm_client):
        arm, client = arm_client
        subscription_service = MagicMock()
        subscription_service.get_subscription_id = AsyncMock(return_value="sub123")
        service = CostManagementService(subscription_service, settings=settings)
        service.create_arm_client = AsyncMock(return_value=arm)
        sdk_result = SimpleNamespace(
            id="query-id",
            name="query1",
            type="Microsoft.CostManagement/query",
            e_tag=None,
            location=None,
            sku=None,
            tags=None,
            next_link=None,
            columns=[SimpleNamespace(name="totalCost", type="Number"), SimpleNamespace(name="ResourceGroup", type="String")],
            rows=[(42.0, "rg1")],
        )
        client.query.usage = AsyncMock(return_value=sdk_result)
        client.forecast.usage = AsyncMock(return_value=sdk_result)
        return service, arm, client

    @pytest.mark.asyncio
    async def test_query_costs(self, service):
        service, arm, client = service

        result = await service.query_costs(
            "my-subscription",
            cost_type=CostType.AMORTIZED_COST,
            granularity=Granularity.NONE,
            from_date=datetime(2023, 1, 1),
            to_date=datetime(2023, 1, 31),
            group_by=["ResourceGroup"],
            aggregation_cost_type="PreTaxCost",
        )

        assert arm.get.call_args.args[0].__name__ == "CostManagementClient"
        assert len(arm.get.call_args.args) == 1
        scope, query = client.query.usage.call_args.args
        assert scope == "/subscriptions/sub123"
        assert query.type == "AmortizedCost"
        assert query.timeframe == "Custom"
        assert query.time_period.from_property == datetime(2023, 1, 1, tzinfo=timezone.utc)
        assert query.time_period.to == datetime(2023, 1, 31, tzinfo=timezone.utc)
        assert query.dataset.granularity == "None"
        assert query.dataset.aggregation["totalCost"].name == "PreTaxCost"
        assert query.dataset.aggregation["totalCost"].function == "Sum"
        assert [grouping.name for grouping in query.dataset.grouping] == ["ResourceGroup"]
        assert result.properties.rows == [[42.0, "rg1"]]
        assert result.properties.columns[1] == QueryColumn(name="ResourceGroup", type="String")

    @pytest.mark.asyncio
    async def test_query_without_grouping(self, service):
        service, _, client = service

        await service.query_costs("sub123")

        query = client.query.usage.call_args.args[1]
        assert query.type == "ActualCost"
        assert query.dataset.granularity == "Daily"
        assert not query.dataset.grouping

    @pytest.mark.asyncio
    async def test_forecast_costs(self, service):
        service, _, client = service

        await service.forecast_costs(
            "sub123",
            cost_type=CostType.USAGE,
            aggregation_name="PreTaxCost",
            include_actual_cost=True,
        )

        scope, forecast = client.forecast.usage.call_args.args
        assert scope == "/subscriptions/sub123"
        assert forecast.type == "Usage"
        assert forecast.include_actual_cost is True
        assert forecast.include_fresh_partial_cost is False
        assert forecast.dataset.aggregation["totalCost"].name == "PreTaxCost"
        assert forecast.time_period.to - forecast.time_period.from_property == timedelta(days=30)

    @pytest.mark.asyncio
    async def test_inverted_window_skips_client(self, service):
        service, _, client = service

        with pytest.raises(ValueError):
            await service.query_costs("sub123", from_date=datetime(2023, 2, 1), to_date=datetime(2023, 1, 1))

        client.query.usage.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_requires_subscription(self, service):
        service, _, _ = service

        with pytest.raises(AzureValidationError, match="'subscription'"):
            await service.query_costs("")

    @pytest.mark.asyncio
    async def test_sdk_errors_are_wrapped(self, service):
        from azure.core.exceptions import HttpResponseError

        service, _, client = service
        error = HttpResponseError("Too many requests")
        error.status_code = 429
        client.query.usage.side_effect = error

        with pytest.raises(AzureThrottlingError):
            await service.query_costs("sub123")

    def test_conversion_of_empty_result(self):
        result = query_result_from_sdk(SimpleNamespace())

        assert result.properties.rows == []
        assert result.properties.columns == []
