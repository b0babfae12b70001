"""Azure-backed services: credentials, ARM clients, tenants and subscriptions."""

from .base import USER_AGENT, ArmClient, BaseAzureService
from .subscription import SubscriptionService
from .tenant import TenantService, is_guid

__all__ = [
    "USER_AGENT",
    "ArmClient",
    "BaseAzureService",
    "SubscriptionService",
    "TenantService",
    "is_guid",
]
