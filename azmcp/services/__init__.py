"""Shared service instances handed to area setups at tree-build time.

Commands receive the services they need as constructor arguments; nothing
is looked up while a request is being served.
"""

import inspect
from typing import Any, Dict, Optional, Type, TypeVar

from ..config import Settings, get_settings
from ..logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class ServiceCollection:
    """Registry of singleton services keyed by type."""

    def __init__(self, settings: Optional[Settings] = None, read_only: Optional[bool] = None):
        self.settings = settings or get_settings()
        self.read_only = self.settings.azmcp_read_only if read_only is None else read_only
        self._services: Dict[type, Any] = {}

    @classmethod
    def with_defaults(cls, settings: Optional[Settings] = None, read_only: Optional[bool] = None) -> "ServiceCollection":
        """Collection holding the tenant and subscription resolvers."""
        from .azure.subscription import SubscriptionService
        from .azure.tenant import TenantService

        services = cls(settings, read_only)
        tenant_service = services.add_singleton(TenantService, TenantService(settings=services.settings))
        services.add_singleton(
            SubscriptionService,
            SubscriptionService(tenant_service=tenant_service, settings=services.settings),
        )
        return services

    def add_singleton(self, service_type: Type[T], instance: T) -> T:
        """Register ``instance`` for ``service_type`` unless one exists; return the registered one."""
        if service_type not in self._services:
            self._services[service_type] = instance
        return self._services[service_type]

    def get(self, service_type: Type[T]) -> T:
        """Return the registered instance.

        Raises:
            LookupError: If nothing is registered for the type
        """
        try:
            return self._services[service_type]
        except KeyError:
            raise LookupError(f"No service registered for {service_type.__name__}") from None

    def __contains__(self, service_type: type) -> bool:
        return service_type in self._services

    async def aclose(self) -> None:
        """Close every service exposing a ``close`` coroutine."""
        for instance in self._services.values():
            close = getattr(instance, "close", None)
            if close is None:
                continue
            try:
                result = close()
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.warning(
                    "Failed to close service",
                    extra={"service": type(instance).__name__, "error": str(e)},
                )
