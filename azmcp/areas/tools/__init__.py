"""Tools area: command catalog introspection."""

from ...commands.factory import get_visible_commands
from ...commands.group import CommandGroup
from .. import AreaSetup
from .commands import ToolsListCommand


class ToolsSetup(AreaSetup):
    name = "tools"

    def register_commands(self, root_group, services) -> None:
        tools = root_group.add_sub_group(CommandGroup(
            "tools",
            "CLI tools operations - Commands for discovering and exploring the functionality available in this CLI tool.",
        ))
        tools.add_command(
            "list",
            ToolsListCommand(lambda: get_visible_commands(root_group, services.read_only)),
        )


__all__ = ["ToolsListCommand", "ToolsSetup"]
