"""Retry policy options supplied per invocation.

Instances are frozen and hashable so they can be part of a client cache key:
two policies are interchangeable exactly when all of their fields match.
"""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from .options import OptionDefinitions, ParseResult


class RetryMode(str, Enum):
    """Retry strategy."""
    FIXED = "fixed"
    EXPONENTIAL = "exponential"


class RetryPolicyOptions(BaseModel):
    """Transport-level retry knobs; unset fields keep SDK defaults."""

    model_config = ConfigDict(frozen=True)

    delay_seconds: Optional[float] = Field(default=None, ge=0, description="Initial delay between retries")
    max_delay_seconds: Optional[float] = Field(default=None, ge=0, description="Maximum delay between retries")
    max_retries: Optional[int] = Field(default=None, ge=0, description="Maximum retry attempts")
    mode: Optional[RetryMode] = Field(default=None, description="Retry strategy")
    network_timeout_seconds: Optional[float] = Field(default=None, gt=0, description="Network timeout")

    @property
    def has_delay_seconds(self) -> bool:
        return self.delay_seconds is not None

    @property
    def has_max_delay_seconds(self) -> bool:
        return self.max_delay_seconds is not None

    @property
    def has_max_retries(self) -> bool:
        return self.max_retries is not None

    @property
    def has_mode(self) -> bool:
        return self.mode is not None

    @property
    def has_network_timeout_seconds(self) -> bool:
        return self.network_timeout_seconds is not None

    @staticmethod
    def are_equal(first: Optional["RetryPolicyOptions"], second: Optional["RetryPolicyOptions"]) -> bool:
        """Structural equality where ``None`` only equals ``None``."""
        if first is None or second is None:
            return first is None and second is None
        return first == second

    @classmethod
    def from_parse_result(cls, parse_result: ParseResult) -> Optional["RetryPolicyOptions"]:
        """Build a policy from parsed retry options.

        Returns:
            None when no retry option was supplied
        """
        retry = OptionDefinitions.RetryPolicy
        fields = {
            "delay_seconds": parse_result.get_value(retry.DELAY.name),
            "max_delay_seconds": parse_result.get_value(retry.MAX_DELAY.name),
            "max_retries": parse_result.get_value(retry.MAX_RETRIES.name),
            "mode": parse_result.get_value(retry.MODE.name),
            "network_timeout_seconds": parse_result.get_value(retry.NETWORK_TIMEOUT.name),
        }
        if all(value is None for value in fields.values()):
            return None
        return cls(**fields)

    def to_client_kwargs(self) -> Dict[str, Any]:
        """Map the set fields onto azure-core pipeline keyword arguments."""
        from azure.core.pipeline.policies import RetryMode as CoreRetryMode

        kwargs: Dict[str, Any] = {}
        if self.has_delay_seconds:
            kwargs["retry_backoff_factor"] = self.delay_seconds
        if self.has_max_delay_seconds:
            kwargs["retry_backoff_max"] = self.max_delay_seconds
        if self.has_max_retries:
            kwargs["retry_total"] = self.max_retries
        if self.has_mode:
            kwargs["retry_mode"] = (
                CoreRetryMode.Fixed if self.mode is RetryMode.FIXED else CoreRetryMode.Exponential
            )
        if self.has_network_timeout_seconds:
            kwargs["connection_timeout"] = self.network_timeout_seconds
            kwargs["read_timeout"] = self.network_timeout_seconds
        return kwargs
