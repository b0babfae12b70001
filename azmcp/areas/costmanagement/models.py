"""Cost Management query types and result models."""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import Field

from ...response import ResultModel


class CostType(str, Enum):
    """Cost dataset to query or forecast."""
    ACTUAL_COST = "ActualCost"
    AMORTIZED_COST = "AmortizedCost"
    USAGE = "Usage"

    @classmethod
    def parse(cls, value: Any) -> "CostType":
        return _parse_enum(cls, value)


class Granularity(str, Enum):
    """Time bucket for returned rows."""
    NONE = "None"
    DAILY = "Daily"
    MONTHLY = "Monthly"

    @classmethod
    def parse(cls, value: Any) -> "Granularity":
        return _parse_enum(cls, value)


def _parse_enum(enum_class, value):
    if isinstance(value, enum_class):
        return value
    for member in enum_class:
        if member.value.lower() == str(value).lower():
            return member
    allowed = ", ".join(member.value for member in enum_class)
    raise ValueError(f"'{value}' is not a valid {enum_class.__name__}. Must be one of: {allowed}")


class QueryColumn(ResultModel):
    name: Optional[str] = None
    type: Optional[str] = None


class CostQueryProperties(ResultModel):
    next_link: Optional[str] = None
    columns: List[QueryColumn] = Field(default_factory=list)
    rows: List[List[Any]] = Field(default_factory=list)


class CostQueryResult(ResultModel):
    """Tabular response of a cost query or forecast."""
    id: Optional[str] = None
    name: Optional[str] = None
    type: Optional[str] = None
    e_tag: Optional[str] = None
    location: Optional[str] = None
    sku: Optional[str] = None
    tags: Optional[Dict[str, str]] = None
    properties: CostQueryProperties = Field(default_factory=CostQueryProperties)
