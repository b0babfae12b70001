"""Command factory and dispatcher.

Builds the command tree from every registered area at process start and
resolves incoming invocations (CLI tokens or tool calls) to commands.
"""

import asyncio
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

from ..errors import AzureTimeoutError
from ..logging_config import get_logger
from ..response import CommandResponse
from ..services import ServiceCollection
from .base import BaseCommand, CommandContext
from .group import SEPARATOR, CommandGroup

logger = get_logger(__name__)

ROOT_GROUP_NAME = "azmcp"
ROOT_GROUP_DESCRIPTION = "Azure MCP Server"


def get_visible_commands(root_group: CommandGroup, read_only: bool = False) -> Iterator[Tuple[str, BaseCommand]]:
    """Yield ``(tokenized_name, command)`` for every listed command.

    Hidden groups and commands are skipped; in read-only mode so are
    commands whose metadata is not read-only.
    """
    for path, command in root_group.iter_commands(include_hidden=False):
        if read_only and not command.metadata.read_only:
            continue
        yield SEPARATOR.join(path), command


class CommandFactory:
    """Owns the command tree for the lifetime of the process."""

    def __init__(
        self,
        areas: Sequence[Any],
        services: Optional[ServiceCollection] = None,
        command_timeout: Optional[float] = None,
    ):
        self.services = services or ServiceCollection.with_defaults()
        settings = self.services.settings
        self.command_timeout = settings.azmcp_command_timeout if command_timeout is None else command_timeout

        self._root = CommandGroup(ROOT_GROUP_NAME, ROOT_GROUP_DESCRIPTION)
        for area in areas:
            area.configure_services(self.services)
        for area in areas:
            area.register_commands(self._root, self.services)
        self._root.freeze()

        self._commands: Dict[str, BaseCommand] = {
            SEPARATOR.join(path): command
            for path, command in self._root.iter_commands(include_hidden=True)
        }
        logger.info(
            "Command tree built",
            extra={"areas": [area.name for area in areas], "command_count": len(self._commands)},
        )

    @property
    def root_group(self) -> CommandGroup:
        return self._root

    @property
    def read_only(self) -> bool:
        return self.services.read_only

    @property
    def all_commands(self) -> Mapping[str, BaseCommand]:
        """Every command, hidden ones included, keyed by tokenized name."""
        return MappingProxyType(self._commands)

    def visible_commands(self) -> Dict[str, BaseCommand]:
        return dict(get_visible_commands(self._root, self.read_only))

    @staticmethod
    def tokenize(name: Union[str, Sequence[str]]) -> List[str]:
        """Split "aks_cluster_list", "aks cluster list" or a token list into tokens."""
        if isinstance(name, str):
            tokens = name.replace(" ", SEPARATOR).split(SEPARATOR)
        else:
            tokens = list(name)
        tokens = [token for token in tokens if token]
        if tokens and tokens[0] == ROOT_GROUP_NAME:
            tokens = tokens[1:]
        return tokens

    def find_command(self, name: Union[str, Sequence[str]]) -> Optional[BaseCommand]:
        return self._root.resolve(self.tokenize(name))

    def split_command_line(self, argv: Sequence[str]) -> Tuple[List[str], List[str]]:
        """Split CLI tokens into command path tokens and option tokens."""
        argv = list(argv)
        for index, token in enumerate(argv):
            if token.startswith("-"):
                return argv[:index], argv[index:]
        return argv, []

    async def dispatch(
        self,
        name: Union[str, Sequence[str]],
        arguments: Optional[Mapping[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> CommandResponse:
        """Execute a tool call: tokenized name plus parameters object."""
        tokens = self.tokenize(name)
        command, error = self._lookup(tokens)
        if error is not None:
            return error
        parse_result = command.get_command().parse_arguments(arguments)
        return await self._execute(command, tokens, parse_result, timeout)

    async def dispatch_command_line(self, argv: Sequence[str], timeout: Optional[float] = None) -> CommandResponse:
        """Execute a CLI invocation: ``<area> [<subgroup>...] <command> --<option> <value> ...``."""
        path, args = self.split_command_line(argv)
        tokens = self.tokenize(path)
        command, error = self._lookup(tokens)
        if error is not None:
            return error
        parse_result = command.get_command().parse(args)
        return await self._execute(command, tokens, parse_result, timeout)

    def _lookup(self, tokens: List[str]) -> Tuple[Optional[BaseCommand], Optional[CommandResponse]]:
        display_name = " ".join(tokens)
        command = self._root.resolve(tokens) if tokens else None
        if command is None:
            logger.warning("Command not found", extra={"command": display_name})
            return None, CommandResponse(status=404, message=f"Command '{display_name}' not found.")
        if self.read_only and not command.metadata.read_only:
            return None, CommandResponse(
                status=403,
                message=f"Command '{display_name}' is not available because the server is running in read-only mode.",
            )
        return command, None

    async def _execute(self, command: BaseCommand, tokens: List[str], parse_result, timeout: Optional[float]) -> CommandResponse:
        context = CommandContext()
        timeout = self.command_timeout if timeout is None else timeout
        if not timeout or timeout <= 0:
            return await command.execute(context, parse_result)

        try:
            return await asyncio.wait_for(command.execute(context, parse_result), timeout=timeout)
        except asyncio.TimeoutError:
            error = AzureTimeoutError(
                f"Command '{' '.join(tokens)}' did not complete within {timeout:g} seconds"
            )
            logger.error(
                "Command invocation timed out",
                extra={"command": SEPARATOR.join(tokens), "timeout": timeout},
            )
            context.response = CommandResponse()
            command.handle_exception(context, error)
            return context.respond()

    async def aclose(self) -> None:
        await self.services.aclose()


def build_command_factory(
    services: Optional[ServiceCollection] = None,
    read_only: Optional[bool] = None,
) -> CommandFactory:
    """Factory with every built-in area registered."""
    from ..areas import default_areas

    if services is None:
        services = ServiceCollection.with_defaults(read_only=read_only)
    elif read_only is not None:
        services.read_only = read_only
    return CommandFactory(default_areas(), services)
