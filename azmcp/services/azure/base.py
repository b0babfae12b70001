"""Shared base for services that talk to Azure.

Owns credential and ARM client caching. Credentials are cached per tenant;
ARM clients per ``(tenant, retry policy)`` so that two invocations with
equal retry policies share one client. Both caches are bounded (LRU) and
guarded by an ``asyncio.Lock`` so concurrent requests never build
duplicates. Entries evicted from a full cache may still be in use by an
in-flight request, so they are retired and closed with the service.
"""

import asyncio
import inspect
import platform
from typing import Any, Callable, Dict, Hashable, List, Optional, Tuple

from ... import __version__
from ...config import Settings, get_settings
from ...errors import AzureClientCreationError, AzureValidationError
from ...logging_config import get_logger
from ...retry import RetryPolicyOptions
from .cache import LRUCache
from .credentials import create_chained_credential

logger = get_logger(__name__)

USER_AGENT = f"azmcp/{__version__} (python/{platform.python_version()}; {platform.platform()})"

CredentialFactory = Callable[..., Any]


class ArmClient:
    """Credential plus pipeline options shared by management clients.

    Management clients are created lazily per ``(client class, subscription)``
    and reused for the lifetime of this object.
    """

    def __init__(self, credential: Any, client_kwargs: Dict[str, Any]):
        self.credential = credential
        self.client_kwargs = dict(client_kwargs)
        self._clients: Dict[Tuple[type, Optional[str]], Any] = {}

    def get(self, client_class: type, subscription_id: Optional[str] = None) -> Any:
        """Return the management client of ``client_class``.

        Args:
            client_class: e.g. ``azure.mgmt.resource.aio.SubscriptionClient``
            subscription_id: Passed as the second positional argument when set
        """
        key = (client_class, subscription_id)
        client = self._clients.get(key)
        if client is None:
            args = (self.credential,) if subscription_id is None else (self.credential, subscription_id)
            client = client_class(*args, **self.client_kwargs)
            self._clients[key] = client
        return client

    async def close(self) -> None:
        for client in self._clients.values():
            await client.close()
        self._clients.clear()


class BaseAzureService:
    """Base class for Azure-backed services."""

    def __init__(
        self,
        tenant_service: Optional[Any] = None,
        settings: Optional[Settings] = None,
        credential_factory: Optional[CredentialFactory] = None,
        cache_size: Optional[int] = None,
    ):
        self.settings = settings or get_settings()
        self.tenant_service = tenant_service
        self._credential_factory = credential_factory or create_chained_credential
        size = cache_size or self.settings.azmcp_client_cache_size
        self._credentials = LRUCache(size)
        self._arm_clients = LRUCache(size)
        self._retired_clients: List[ArmClient] = []
        self._retired_credentials: List[Any] = []
        self._lock = asyncio.Lock()

    async def resolve_tenant_id(self, tenant: Optional[str]) -> Optional[str]:
        """Turn a tenant name or ID into a tenant ID (None stays None)."""
        if not tenant or self.tenant_service is None:
            return tenant or None
        return await self.tenant_service.get_tenant_id(tenant)

    async def get_credential(self, tenant: Optional[str] = None) -> Any:
        """Cached credential for ``tenant``.

        Raises:
            AzureClientCreationError: If the credential cannot be built
        """
        tenant_id = await self.resolve_tenant_id(tenant)
        async with self._lock:
            return self._get_credential_locked(tenant_id)

    async def create_arm_client(
        self,
        tenant: Optional[str] = None,
        retry_policy: Optional[RetryPolicyOptions] = None,
        client_options: Optional[Dict[str, Any]] = None,
    ) -> ArmClient:
        """ARM client for ``tenant`` configured with ``retry_policy``.

        Clients are reused for equal ``(tenant, retry policy)`` pairs.
        Explicit ``client_options`` always build a fresh, uncached client.

        Raises:
            AzureClientCreationError: If the credential or client cannot be built
        """
        tenant_id = await self.resolve_tenant_id(tenant)
        key: Hashable = (tenant_id, retry_policy)

        async with self._lock:
            if client_options is None:
                cached = self._arm_clients.get(key)
                if cached is not None:
                    return cached

            credential = self._get_credential_locked(tenant_id)
            try:
                client = ArmClient(credential, self.client_kwargs(retry_policy, client_options))
            except Exception as e:
                raise AzureClientCreationError(f"Failed to create ARM client: {e}") from e

            if client_options is None:
                evicted = self._arm_clients.set(key, client)
                if evicted is not None:
                    self._retired_clients.append(evicted)
                logger.debug(
                    "Created ARM client",
                    extra={"tenant_id": tenant_id, "has_retry_policy": retry_policy is not None},
                )
            return client

    def _get_credential_locked(self, tenant_id: Optional[str]) -> Any:
        credential = self._credentials.get(tenant_id)
        if credential is not None:
            return credential
        try:
            credential = self._credential_factory(tenant_id, settings=self.settings)
        except Exception as e:
            raise AzureClientCreationError(f"Failed to get credential: {e}") from e
        evicted = self._credentials.set(tenant_id, credential)
        if evicted is not None:
            self._retired_credentials.append(evicted)
        return credential

    @staticmethod
    def client_kwargs(
        retry_policy: Optional[RetryPolicyOptions],
        client_options: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Pipeline keyword arguments: user agent, caller options, then retry settings."""
        kwargs: Dict[str, Any] = {"user_agent": USER_AGENT}
        if client_options:
            kwargs.update(client_options)
        if retry_policy is not None:
            kwargs.update(retry_policy.to_client_kwargs())
        return kwargs

    @staticmethod
    def escape_kql_string(value: Optional[str]) -> str:
        """Escape a value for use inside a single-quoted KQL string literal."""
        if not value:
            return ""
        return value.replace("\\", "\\\\").replace("'", "''")

    @staticmethod
    def validate_required_parameters(**parameters: Optional[str]) -> None:
        """Raise ``AzureValidationError`` naming the first empty parameter."""
        for name, value in parameters.items():
            if value is None or value == "":
                raise AzureValidationError(f"Value cannot be null or empty. (Parameter '{name}')")

    async def close(self) -> None:
        """Close cached and retired clients and credentials."""
        async with self._lock:
            logger.debug(
                "Closing Azure clients",
                extra={
                    "credential_cache": self._credentials.get_stats(),
                    "client_cache": self._arm_clients.get_stats(),
                    "retired_clients": len(self._retired_clients),
                    "retired_credentials": len(self._retired_credentials),
                },
            )
            for client in self._arm_clients.values() + self._retired_clients:
                await client.close()
            for credential in self._credentials.values() + self._retired_credentials:
                close = getattr(credential, "close", None)
                if close is not None:
                    result = close()
                    if inspect.isawaitable(result):
                        await result
            self._arm_clients.clear()
            self._credentials.clear()
            self._retired_clients.clear()
            self._retired_credentials.clear()
