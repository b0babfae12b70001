"""App Configuration account and key-value commands."""

from typing import List, Optional

from ...commands.base import (
    READ_ONLY_METADATA,
    CommandContext,
    CommandMetadata,
    SubscriptionCommand,
    SubscriptionOptions,
)
from ...options import OptionParser
from ...response import ResultModel
from .models import AppConfigurationAccount, KeyValueSetting
from .options import (
    AccountOptions,
    AppConfigOptionDefinitions,
    KeyValueLockSetOptions,
    KeyValueOptions,
    KeyValueSetOptions,
)
from .service import AppConfigService


class AccountListResult(ResultModel):
    accounts: List[AppConfigurationAccount]


class KeyValueListResult(ResultModel):
    settings: List[KeyValueSetting]


class KeyValueShowResult(ResultModel):
    setting: KeyValueSetting


class KeyValueSetResult(ResultModel):
    key: Optional[str] = None
    value: Optional[str] = None
    label: Optional[str] = None
    content_type: Optional[str] = None
    tags: Optional[List[str]] = None


class KeyValueDeleteResult(ResultModel):
    key: Optional[str] = None
    label: Optional[str] = None


class KeyValueLockSetResult(ResultModel):
    key: Optional[str] = None
    label: Optional[str] = None
    locked: bool


class BaseAppConfigCommand(SubscriptionCommand):
    def __init__(self, appconfig_service: AppConfigService, logger=None):
        self.appconfig_service = appconfig_service
        super().__init__(logger)


class AccountListCommand(BaseAppConfigCommand):
    name = "list"
    title = "List App Configuration Stores"
    description = """
        List all App Configuration stores in a subscription. This command retrieves and displays all App
        Configuration stores available in the specified subscription. Results include store names returned
        as a JSON array.
    """
    metadata = READ_ONLY_METADATA
    options_model = SubscriptionOptions

    async def run(self, context: CommandContext, options: SubscriptionOptions) -> AccountListResult:
        accounts = await self.appconfig_service.list_accounts(
            options.subscription,
            options.tenant,
            options.retry_policy,
        )
        return AccountListResult(accounts=accounts or [])

    @staticmethod
    def result_summary(results) -> dict:
        return {"count": len(results.accounts)}


class KeyValueListCommand(BaseAppConfigCommand):
    name = "list"
    title = "List App Configuration Key-Value Settings"
    description = """
        List all key-values in an App Configuration store. This command retrieves and displays all key-value
        pairs from the specified store. Each key-value includes its key, value, label, content type, ETag,
        last modified time, and lock status.
    """
    metadata = READ_ONLY_METADATA
    options_model = KeyValueOptions

    def register_options(self, parser: OptionParser) -> None:
        super().register_options(parser)
        AppConfigOptionDefinitions.ACCOUNT.apply(parser)
        AppConfigOptionDefinitions.KEY_FILTER.apply(parser)
        AppConfigOptionDefinitions.LABEL_FILTER.apply(parser)

    async def run(self, context: CommandContext, options: KeyValueOptions) -> KeyValueListResult:
        settings = await self.appconfig_service.list_key_values(
            options.account,
            options.subscription,
            options.key,
            options.label,
            options.tenant,
            options.retry_policy,
        )
        return KeyValueListResult(settings=settings or [])

    @staticmethod
    def result_summary(results) -> dict:
        return {"count": len(results.settings)}


class BaseKeyValueCommand(BaseAppConfigCommand):
    """Command addressing one key (and optional label) in a store."""

    options_model = KeyValueOptions

    def register_options(self, parser: OptionParser) -> None:
        super().register_options(parser)
        AppConfigOptionDefinitions.ACCOUNT.apply(parser)
        AppConfigOptionDefinitions.KEY.apply(parser)
        AppConfigOptionDefinitions.LABEL.apply(parser)


class KeyValueShowCommand(BaseKeyValueCommand):
    name = "show"
    title = "Show App Configuration Key-Value Setting"
    description = """
        Show a specific key-value setting in an App Configuration store. This command retrieves and displays the
        value, label, content type, ETag, last modified time, and lock status for a specific setting. You must
        specify an account name and key. Optionally, you can specify a label otherwise the setting with default
        label will be retrieved.
    """
    metadata = READ_ONLY_METADATA

    async def run(self, context: CommandContext, options: KeyValueOptions) -> KeyValueShowResult:
        setting = await self.appconfig_service.get_key_value(
            options.account,
            options.key,
            options.subscription,
            options.tenant,
            options.retry_policy,
            options.label,
        )
        return KeyValueShowResult(setting=setting)


class KeyValueSetCommand(BaseKeyValueCommand):
    name = "set"
    title = "Set App Configuration Key-Value Setting"
    description = """
        Set a key-value setting in an App Configuration store. This command creates or updates a key-value setting
        with the specified value. You must specify an account name, key, and value. Optionally, you can specify a
        label otherwise the default label will be used. You can also specify a content type to indicate how the
        value should be interpreted. You can add tags in the format 'key=value' to associate metadata with the
        setting.
    """
    metadata = CommandMetadata(destructive=True, idempotent=True, open_world=True)
    options_model = KeyValueSetOptions

    def register_options(self, parser: OptionParser) -> None:
        super().register_options(parser)
        AppConfigOptionDefinitions.VALUE.apply(parser)
        AppConfigOptionDefinitions.CONTENT_TYPE.apply(parser)
        AppConfigOptionDefinitions.TAGS.apply(parser)

    async def run(self, context: CommandContext, options: KeyValueSetOptions) -> KeyValueSetResult:
        await self.appconfig_service.set_key_value(
            options.account,
            options.key,
            options.value,
            options.subscription,
            options.tenant,
            options.retry_policy,
            options.label,
            options.content_type,
            options.tags,
        )
        return KeyValueSetResult(
            key=options.key,
            value=options.value,
            label=options.label,
            content_type=options.content_type,
            tags=options.tags,
        )


class KeyValueDeleteCommand(BaseKeyValueCommand):
    name = "delete"
    title = "Delete App Configuration Key-Value Setting"
    description = """
        Delete a key-value pair from an App Configuration store. This command removes the specified key-value pair
        from the store. If a label is specified, only the labeled version is deleted. If no label is specified, the
        key-value with the matching key and the default label will be deleted.
    """
    metadata = CommandMetadata(destructive=True, idempotent=True, open_world=True)

    async def run(self, context: CommandContext, options: KeyValueOptions) -> KeyValueDeleteResult:
        await self.appconfig_service.delete_key_value(
            options.account,
            options.key,
            options.subscription,
            options.tenant,
            options.retry_policy,
            options.label,
        )
        return KeyValueDeleteResult(key=options.key, label=options.label)


class KeyValueLockSetCommand(BaseKeyValueCommand):
    name = "set"
    title = "Set App Configuration Key-Value Lock"
    description = """
        Sets the lock state of a key-value in an App Configuration store. Pass --lock to make the setting
        read-only; omit it to unlock the setting and allow modifications again.
    """
    metadata = CommandMetadata(destructive=True, idempotent=True, open_world=True)
    options_model = KeyValueLockSetOptions

    def register_options(self, parser: OptionParser) -> None:
        super().register_options(parser)
        AppConfigOptionDefinitions.LOCK.apply(parser)

    async def run(self, context: CommandContext, options: KeyValueLockSetOptions) -> KeyValueLockSetResult:
        await self.appconfig_service.set_key_value_read_only(
            options.account,
            options.key,
            options.subscription,
            options.lock,
            options.tenant,
            options.retry_policy,
            options.label,
        )
        return KeyValueLockSetResult(key=options.key, label=options.label, locked=options.lock)
