"""App Configuration area: stores and key-value settings."""

from ...commands.group import CommandGroup
from ...services.azure.subscription import SubscriptionService
from ...services.azure.tenant import TenantService
from .. import AreaSetup
from .commands import (
    AccountListCommand,
    KeyValueDeleteCommand,
    KeyValueListCommand,
    KeyValueLockSetCommand,
    KeyValueSetCommand,
    KeyValueShowCommand,
)
from .service import AppConfigService


class AppConfigSetup(AreaSetup):
    name = "appconfig"

    def configure_services(self, services) -> None:
        services.add_singleton(AppConfigService, AppConfigService(
            services.get(SubscriptionService),
            tenant_service=services.get(TenantService),
            settings=services.settings,
        ))

    def register_commands(self, root_group, services) -> None:
        appconfig = root_group.add_sub_group(CommandGroup(
            self.name,
            "App Configuration operations - Commands for managing Azure App Configuration stores and key-value "
            "settings. Includes operations for listing configuration stores, managing key-value pairs, setting "
            "labels, locking/unlocking settings, and retrieving configuration data.",
        ))
        service = services.get(AppConfigService)

        accounts = appconfig.add_sub_group(CommandGroup("account", "App Configuration store operations"))
        accounts.add_command("list", AccountListCommand(service))

        key_value = appconfig.add_sub_group(CommandGroup(
            "kv",
            "App Configuration key-value setting operations - Commands for managing complete configuration "
            "settings including values, labels, and metadata",
        ))
        key_value.add_command("delete", KeyValueDeleteCommand(service))
        key_value.add_command("list", KeyValueListCommand(service))
        key_value.add_command("set", KeyValueSetCommand(service))
        key_value.add_command("show", KeyValueShowCommand(service))

        lock = key_value.add_sub_group(CommandGroup(
            "lock",
            "App Configuration key-value lock operations - Commands for locking and unlocking key-value settings "
            "to prevent or allow modifications",
        ))
        lock.add_command("set", KeyValueLockSetCommand(service))


__all__ = ["AppConfigService", "AppConfigSetup"]
