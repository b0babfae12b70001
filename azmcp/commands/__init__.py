"""Command framework: contract, error mapping, group tree and dispatcher."""

from .base import (
    READ_ONLY_METADATA,
    BaseCommand,
    BaseOptions,
    CommandContext,
    CommandDefinition,
    CommandMetadata,
    CommandState,
    GlobalCommand,
    GlobalOptions,
    SubscriptionCommand,
    SubscriptionOptions,
    ValidationResult,
)
from .errors import ErrorMapper, ErrorRule
from .factory import CommandFactory, build_command_factory, get_visible_commands
from .group import SEPARATOR, CommandGroup, DuplicateCommandError, FrozenGroupError

__all__ = [
    "READ_ONLY_METADATA",
    "SEPARATOR",
    "BaseCommand",
    "BaseOptions",
    "CommandContext",
    "CommandDefinition",
    "CommandFactory",
    "CommandGroup",
    "CommandMetadata",
    "CommandState",
    "DuplicateCommandError",
    "ErrorMapper",
    "ErrorRule",
    "FrozenGroupError",
    "GlobalCommand",
    "GlobalOptions",
    "SubscriptionCommand",
    "SubscriptionOptions",
    "ValidationResult",
    "build_command_factory",
    "get_visible_commands",
]
