"""App Configuration service.

Store discovery goes through the management plane
(azure-mgmt-appconfiguration); key-values through the data plane
(azure-appconfiguration) using the store endpoint.
"""

from typing import Any, Dict, List, Optional, Sequence

from ...errors import AzureNotFoundError, AzureValidationError, handle_azure_error
from ...logging_config import get_logger
from ...retry import RetryPolicyOptions
from ...services.azure.base import BaseAzureService
from ...services.azure.subscription import SubscriptionService
from .models import AppConfigurationAccount, KeyValueSetting

logger = get_logger(__name__)


def _enum_value(value: Any) -> Optional[str]:
    if value is None:
        return None
    return getattr(value, "value", value)


def parse_tags(tags: Optional[Sequence[str]]) -> Optional[Dict[str, str]]:
    """Parse ``key=value`` strings into a dict.

    Raises:
        AzureValidationError: If an entry has no ``=`` or an empty key
    """
    if not tags:
        return None
    parsed = {}
    for tag in tags:
        name, sep, value = tag.partition("=")
        if not sep or not name.strip():
            raise AzureValidationError(f"Invalid tag '{tag}'. Tags must be in the format 'key=value'.")
        parsed[name.strip()] = value.strip()
    return parsed


def account_from_sdk(store: Any) -> AppConfigurationAccount:
    sku = getattr(store, "sku", None)
    return AppConfigurationAccount(
        name=store.name,
        id=getattr(store, "id", None),
        location=getattr(store, "location", None),
        endpoint=getattr(store, "endpoint", None),
        creation_date=getattr(store, "creation_date", None),
        provisioning_state=_enum_value(getattr(store, "provisioning_state", None)),
        sku=getattr(sku, "name", None),
        public_network_access=_enum_value(getattr(store, "public_network_access", None)),
        disable_local_auth=getattr(store, "disable_local_auth", None),
        tags=getattr(store, "tags", None),
    )


def setting_from_sdk(setting: Any) -> KeyValueSetting:
    return KeyValueSetting(
        key=setting.key,
        value=setting.value,
        label=setting.label,
        content_type=getattr(setting, "content_type", None),
        etag=getattr(setting, "etag", None),
        last_modified=getattr(setting, "last_modified", None),
        locked=bool(getattr(setting, "read_only", False)),
        tags=getattr(setting, "tags", None) or None,
    )


class AppConfigService(BaseAzureService):
    """App Configuration stores and their key-value settings."""

    def __init__(self, subscription_service: SubscriptionService, **kwargs):
        super().__init__(**kwargs)
        self.subscription_service = subscription_service

    @handle_azure_error
    async def list_accounts(
        self,
        subscription: str,
        tenant: Optional[str] = None,
        retry_policy: Optional[RetryPolicyOptions] = None,
    ) -> List[AppConfigurationAccount]:
        from azure.mgmt.appconfiguration.aio import AppConfigurationManagementClient

        self.validate_required_parameters(subscription=subscription)
        subscription_id = await self.subscription_service.get_subscription_id(subscription, tenant, retry_policy)
        arm_client = await self.create_arm_client(tenant, retry_policy)
        client = arm_client.get(AppConfigurationManagementClient, subscription_id)

        accounts = []
        async for store in client.configuration_stores.list():
            accounts.append(account_from_sdk(store))
        return accounts

    async def _data_client(
        self,
        account: str,
        subscription: str,
        tenant: Optional[str],
        retry_policy: Optional[RetryPolicyOptions],
    ):
        from azure.appconfiguration.aio import AzureAppConfigurationClient

        self.validate_required_parameters(account=account, subscription=subscription)
        accounts = await self.list_accounts(subscription, tenant, retry_policy)
        store = next((a for a in accounts if a.name.lower() == account.lower()), None)
        if store is None or not store.endpoint:
            raise AzureNotFoundError(f"App Configuration store '{account}' not found in subscription '{subscription}'")

        credential = await self.get_credential(tenant)
        return AzureAppConfigurationClient(
            base_url=store.endpoint,
            credential=credential,
            **self.client_kwargs(retry_policy),
        )

    @handle_azure_error
    async def list_key_values(
        self,
        account: str,
        subscription: str,
        key: Optional[str] = None,
        label: Optional[str] = None,
        tenant: Optional[str] = None,
        retry_policy: Optional[RetryPolicyOptions] = None,
    ) -> List[KeyValueSetting]:
        client = await self._data_client(account, subscription, tenant, retry_policy)
        async with client:
            settings = []
            async for setting in client.list_configuration_settings(key_filter=key, label_filter=label):
                settings.append(setting_from_sdk(setting))
            return settings

    @handle_azure_error
    async def get_key_value(
        self,
        account: str,
        key: str,
        subscription: str,
        tenant: Optional[str] = None,
        retry_policy: Optional[RetryPolicyOptions] = None,
        label: Optional[str] = None,
    ) -> KeyValueSetting:
        self.validate_required_parameters(key=key)
        client = await self._data_client(account, subscription, tenant, retry_policy)
        async with client:
            setting = await client.get_configuration_setting(key=key, label=label)
        if setting is None:
            raise AzureNotFoundError(f"Key '{key}' not found in App Configuration store '{account}'")
        return setting_from_sdk(setting)

    @handle_azure_error
    async def set_key_value(
        self,
        account: str,
        key: str,
        value: str,
        subscription: str,
        tenant: Optional[str] = None,
        retry_policy: Optional[RetryPolicyOptions] = None,
        label: Optional[str] = None,
        content_type: Optional[str] = None,
        tags: Optional[Sequence[str]] = None,
    ) -> KeyValueSetting:
        from azure.appconfiguration import ConfigurationSetting

        self.validate_required_parameters(key=key, value=value)
        parsed_tags = parse_tags(tags)
        client = await self._data_client(account, subscription, tenant, retry_policy)
        async with client:
            setting = await client.set_configuration_setting(ConfigurationSetting(
                key=key,
                value=value,
                label=label,
                content_type=content_type,
                tags=parsed_tags,
            ))
        logger.info("Set key-value setting", extra={"account": account, "key": key, "label": label})
        return setting_from_sdk(setting)

    @handle_azure_error
    async def delete_key_value(
        self,
        account: str,
        key: str,
        subscription: str,
        tenant: Optional[str] = None,
        retry_policy: Optional[RetryPolicyOptions] = None,
        label: Optional[str] = None,
    ) -> None:
        self.validate_required_parameters(key=key)
        client = await self._data_client(account, subscription, tenant, retry_policy)
        async with client:
            await client.delete_configuration_setting(key=key, label=label)
        logger.info("Deleted key-value setting", extra={"account": account, "key": key, "label": label})

    @handle_azure_error
    async def set_key_value_read_only(
        self,
        account: str,
        key: str,
        subscription: str,
        read_only: bool,
        tenant: Optional[str] = None,
        retry_policy: Optional[RetryPolicyOptions] = None,
        label: Optional[str] = None,
    ) -> KeyValueSetting:
        from azure.appconfiguration import ConfigurationSetting

        self.validate_required_parameters(key=key)
        client = await self._data_client(account, subscription, tenant, retry_policy)
        async with client:
            setting = await client.set_read_only(ConfigurationSetting(key=key, label=label), read_only=read_only)
        logger.info(
            "Changed key-value lock",
            extra={"account": account, "key": key, "label": label, "locked": read_only},
        )
        return setting_from_sdk(setting)
