"""Built-in introspection command."""

import asyncio
from typing import Callable, Iterable, List, Tuple

from ...commands.base import BaseCommand, BaseOptions, CommandContext, CommandMetadata
from ...commands.group import SEPARATOR
from .models import CommandInfo, OptionInfo

CommandsProvider = Callable[[], Iterable[Tuple[str, BaseCommand]]]


class ToolsListCommand(BaseCommand[BaseOptions]):
    """Lists every visible command with its full path and options."""

    name = "list"
    title = "List Available Tools"
    description = """
        List all available commands and their tools in a hierarchical structure. This command returns detailed
        information about each command, including its name, description, full command path, and all supported
        arguments. Use this to explore the CLI's functionality or to build interactive command interfaces.
    """
    metadata = CommandMetadata(idempotent=True, read_only=True)
    hidden = True

    def __init__(self, commands_provider: CommandsProvider, logger=None):
        self._commands_provider = commands_provider
        super().__init__(logger)

    async def run(self, context: CommandContext, options: BaseOptions) -> List[CommandInfo]:
        # The tree is frozen, so the walk can leave the event loop
        return await asyncio.to_thread(self.list_tools)

    def list_tools(self) -> List[CommandInfo]:
        return [
            self.create_command_info(tokenized_name, command)
            for tokenized_name, command in self._commands_provider()
        ]

    @staticmethod
    def create_command_info(tokenized_name: str, command: BaseCommand) -> CommandInfo:
        definition = command.get_command()
        options = [
            OptionInfo(name=option.flag, description=option.description, required=option.required)
            for option in definition.options or ()
        ]
        return CommandInfo(
            name=definition.name,
            description=definition.description or "",
            command=tokenized_name.replace(SEPARATOR, " "),
            options=options,
        )
