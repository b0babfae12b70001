"""Credential construction.

Uses a service principal when ``AZURE_CLIENT_ID``/``AZURE_CLIENT_SECRET``/
``AZURE_TENANT_ID`` are configured, otherwise a chain of environment,
Azure CLI and managed identity credentials.
"""

from typing import Optional

from ...config import Settings, get_settings
from ...logging_config import get_logger

logger = get_logger(__name__)


def create_chained_credential(tenant_id: Optional[str] = None, settings: Optional[Settings] = None):
    """Create an async token credential for ``tenant_id``.

    Args:
        tenant_id: Tenant to authenticate against; None uses the default
        settings: Settings to read credentials from (defaults to global)

    Returns:
        An ``azure.identity.aio`` credential
    """
    from azure.identity.aio import (
        AzureCliCredential,
        ChainedTokenCredential,
        ClientSecretCredential,
        EnvironmentCredential,
        ManagedIdentityCredential,
    )

    settings = settings or get_settings()
    tenant_id = tenant_id or settings.azure_tenant_id

    if settings.azure_client_id and settings.azure_client_secret and tenant_id:
        logger.info("Using ClientSecretCredential with service principal", extra={"tenant_id": tenant_id})
        kwargs = {}
        if settings.azure_authority_host:
            kwargs["authority"] = settings.azure_authority_host
        return ClientSecretCredential(
            tenant_id=tenant_id,
            client_id=settings.azure_client_id,
            client_secret=settings.azure_client_secret,
            **kwargs,
        )

    logger.info("Using chained credential", extra={"tenant_id": tenant_id})
    return ChainedTokenCredential(
        EnvironmentCredential(),
        AzureCliCredential(tenant_id=tenant_id or ""),
        ManagedIdentityCredential(client_id=settings.azure_client_id),
    )
