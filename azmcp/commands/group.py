"""Hierarchical command registry (area -> subgroup -> command)."""

from typing import Dict, Iterator, Optional, Sequence, Tuple, Union

from .base import BaseCommand

SEPARATOR = "_"


class DuplicateCommandError(ValueError):
    """Raised at startup when a group already holds a name."""
    pass


class FrozenGroupError(RuntimeError):
    """Raised when a group is modified after startup."""
    pass


class CommandGroup:
    """Named node of the command tree.

    Subgroup and command names are unique within a group, so the tokenized
    path of every command is unique across the tree. Groups are frozen once
    startup completes and are read-only while requests are served.
    """

    def __init__(self, name: str, description: str, hidden: bool = False):
        self._check_name(name)
        self.name = name
        self.description = description
        self.hidden = hidden
        self.subgroups: Dict[str, "CommandGroup"] = {}
        self.commands: Dict[str, BaseCommand] = {}
        self._frozen = False

    def add_sub_group(self, group: "CommandGroup") -> "CommandGroup":
        """Attach a subgroup and return it."""
        self._check_mutable()
        if group.name in self.subgroups:
            raise DuplicateCommandError(f"Group '{self.name}' already has a subgroup named '{group.name}'")
        self.subgroups[group.name] = group
        return group

    def add_command(self, name: str, command: BaseCommand) -> BaseCommand:
        """Attach a command under ``name`` and return it."""
        self._check_mutable()
        self._check_name(name)
        if name in self.commands:
            raise DuplicateCommandError(f"Group '{self.name}' already has a command named '{name}'")
        self.commands[name] = command
        return command

    def get_sub_group(self, name: str) -> Optional["CommandGroup"]:
        return self.subgroups.get(name)

    def resolve(self, path: Union[str, Sequence[str]]) -> Optional[BaseCommand]:
        """Find the command at ``path``.

        Args:
            path: Tokenized name ("aks_cluster_list") or a token sequence,
                relative to this group

        Returns:
            The command, or None when no command lives at the path
        """
        tokens = path.split(SEPARATOR) if isinstance(path, str) else list(path)
        if not tokens or not all(tokens):
            return None

        group: Optional[CommandGroup] = self
        for token in tokens[:-1]:
            group = group.subgroups.get(token)
            if group is None:
                return None
        return group.commands.get(tokens[-1])

    def iter_commands(
        self,
        include_hidden: bool = False,
        prefix: Tuple[str, ...] = (),
    ) -> Iterator[Tuple[Tuple[str, ...], BaseCommand]]:
        """Depth-first walk in insertion order.

        Yields ``(path_tokens, command)``; a group's own commands come before
        its subgroups. Hidden groups and commands are skipped unless
        ``include_hidden`` is set.
        """
        for name, command in self.commands.items():
            if command.hidden and not include_hidden:
                continue
            yield prefix + (name,), command

        for name, group in self.subgroups.items():
            if group.hidden and not include_hidden:
                continue
            yield from group.iter_commands(include_hidden, prefix + (name,))

    def freeze(self) -> None:
        """Make this group and all descendants read-only."""
        self._frozen = True
        for group in self.subgroups.values():
            group.freeze()

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _check_mutable(self) -> None:
        if self._frozen:
            raise FrozenGroupError(f"Command group '{self.name}' can no longer be modified")

    @staticmethod
    def _check_name(name: str) -> None:
        if not name or SEPARATOR in name or " " in name:
            raise ValueError(f"Invalid command or group name '{name}'")

    def __repr__(self) -> str:
        return f"CommandGroup(name={self.name!r}, subgroups={len(self.subgroups)}, commands={len(self.commands)})"
