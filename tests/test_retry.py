"""Tests for retry policy options."""

import pytest
from pydantic import ValidationError

from azmcp.options import OptionDefinitions, OptionParser
from azmcp.retry import RetryMode, RetryPolicyOptions


def parse_retry(args):
    parser = OptionParser("demo")
    for option in OptionDefinitions.RetryPolicy.ALL:
        option.apply(parser)
    return parser.parse(args)


class TestRetryPolicyOptions:
    """Tests for RetryPolicyOptions."""

    def test_has_flags(self):
        policy = RetryPolicyOptions(max_retries=3)

        assert policy.has_max_retries
        assert not policy.has_delay_seconds
        assert not policy.has_max_delay_seconds
        assert not policy.has_mode
        assert not policy.has_network_timeout_seconds

    def test_equal_policies_are_interchangeable(self):
        first = RetryPolicyOptions(max_retries=3, mode=RetryMode.FIXED)
        second = RetryPolicyOptions(max_retries=3, mode="fixed")

        assert first == second
        assert hash(first) == hash(second)
        assert RetryPolicyOptions.are_equal(first, second)

    def test_are_equal_with_none(self):
        policy = RetryPolicyOptions(max_retries=3)

        assert RetryPolicyOptions.are_equal(None, None)
        assert not RetryPolicyOptions.are_equal(policy, None)
        assert not RetryPolicyOptions.are_equal(None, policy)
        assert not RetryPolicyOptions.are_equal(policy, RetryPolicyOptions(max_retries=4))

    def test_frozen(self):
        policy = RetryPolicyOptions(max_retries=3)
        with pytest.raises(ValidationError):
            policy.max_retries = 5

    def test_negative_values_rejected(self):
        with pytest.raises(ValidationError):
            RetryPolicyOptions(max_retries=-1)

    def test_from_parse_result_none_when_absent(self):
        assert RetryPolicyOptions.from_parse_result(parse_retry([])) is None

    def test_from_parse_result(self):
        policy = RetryPolicyOptions.from_parse_result(
            parse_retry(["--retry-max-retries", "5", "--retry-mode", "exponential", "--retry-delay", "1.5"])
        )

        assert policy == RetryPolicyOptions(max_retries=5, mode=RetryMode.EXPONENTIAL, delay_seconds=1.5)

    def test_to_client_kwargs_only_set_fields(self):
        from azure.core.pipeline.policies import RetryMode as CoreRetryMode

        kwargs = RetryPolicyOptions(max_retries=2, mode=RetryMode.FIXED).to_client_kwargs()
        assert kwargs == {"retry_total": 2, "retry_mode": CoreRetryMode.Fixed}

        kwargs = RetryPolicyOptions(
            delay_seconds=0.5,
            max_delay_seconds=10,
            network_timeout_seconds=30,
        ).to_client_kwargs()
        assert kwargs == {
            "retry_backoff_factor": 0.5,
            "retry_backoff_max": 10,
            "connection_timeout": 30,
            "read_timeout": 30,
        }
