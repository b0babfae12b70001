"""Tenant name resolution."""

import asyncio
import re
import time
from typing import List, Optional

from ...errors import AzureNotFoundError, handle_azure_error
from ...logging_config import get_logger
from .base import BaseAzureService
from .models import TenantInfo

logger = get_logger(__name__)

GUID_PATTERN = re.compile(r"^[0-9a-fA-F]{8}-([0-9a-fA-F]{4}-){3}[0-9a-fA-F]{12}$")


def is_guid(value: Optional[str]) -> bool:
    return bool(value) and GUID_PATTERN.match(value) is not None


class TenantService(BaseAzureService):
    """Lists tenants visible to the default credential and resolves names to IDs.

    The tenant listing is cached for ``AZMCP_TENANT_CACHE_TTL`` seconds.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._tenants: Optional[List[TenantInfo]] = None
        self._tenants_loaded_at = 0.0
        self._tenants_lock = asyncio.Lock()

    @handle_azure_error
    async def get_tenants(self, refresh: bool = False) -> List[TenantInfo]:
        async with self._tenants_lock:
            ttl = self.settings.azmcp_tenant_cache_ttl
            if (
                not refresh
                and self._tenants is not None
                and time.monotonic() - self._tenants_loaded_at < ttl
            ):
                return list(self._tenants)

            from azure.mgmt.resource.subscriptions.aio import SubscriptionClient

            arm_client = await self.create_arm_client()
            client = arm_client.get(SubscriptionClient)

            tenants = []
            async for tenant in client.tenants.list():
                tenants.append(TenantInfo(
                    tenant_id=tenant.tenant_id,
                    display_name=getattr(tenant, "display_name", None),
                    default_domain=getattr(tenant, "default_domain", None),
                    domains=list(getattr(tenant, "domains", None) or []),
                ))

            self._tenants = tenants
            self._tenants_loaded_at = time.monotonic()
            logger.info("Loaded tenants", extra={"count": len(tenants)})
            return list(tenants)

    async def get_tenant_id(self, tenant: str) -> str:
        """Resolve a tenant GUID, display name or domain to its tenant ID.

        Raises:
            AzureNotFoundError: If no visible tenant matches
        """
        if is_guid(tenant):
            return tenant

        wanted = tenant.lower()
        for info in await self.get_tenants():
            names = [info.display_name, info.default_domain, *info.domains]
            if any(name and name.lower() == wanted for name in names):
                return info.tenant_id

        raise AzureNotFoundError(f"Could not find tenant with name '{tenant}'")
