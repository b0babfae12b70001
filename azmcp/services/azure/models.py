"""Result models shared by the core Azure services."""

from typing import List, Optional

from pydantic import Field

from ...response import ResultModel


class TenantInfo(ResultModel):
    tenant_id: str
    display_name: Optional[str] = None
    default_domain: Optional[str] = None
    domains: List[str] = Field(default_factory=list)


class SubscriptionInfo(ResultModel):
    subscription_id: str
    display_name: Optional[str] = None
    state: Optional[str] = None
    tenant_id: Optional[str] = None
