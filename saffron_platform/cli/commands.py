"""
    Command registry - the dispatcher's state table.

    Every supported invocation is a ``(subcommand, action)`` pair with
    its required positional arguments and recognized flags:

        zed schema read
        zed relationship read   [--resource-type T] [--resource-id I]
                                [--relation R] [--subject-type T] [--subject-id I]
        zed relationship create <resource> <relation> <subject>
        zed relationship touch  <resource> <relation> <subject>
        zed relationship delete <resource> <relation> <subject>
        zed permission check    <resource> <permission> <subject>
        zed permission expand   <resource> <permission>
        zed permission lookup-subjects <resource> <permission> <subject_type>

    ``resource`` and ``subject`` are ``type:id`` references; a subject
    may carry a relation (``group:eng#member``).
"""
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class CommandSpec:
    """
    One registered state of the dispatcher.

    Attributes:
        subcommand:   First word after the root keyword.
        action:       Second word after the root keyword.
        positionals:  Names of the required positional arguments.
        flags:        Recognized ``--flag`` names (without dashes).
    """
    subcommand: str
    action: str
    positionals: Tuple[str, ...] = ()
    flags: Tuple[str, ...] = ()

    @property
    def key(self) -> Tuple[str, str]:
        return (self.subcommand, self.action)

    def usage(self, root: str = "zed") -> str:
        parts = [root, self.subcommand, self.action]
        parts.extend(f"<{name}>" for name in self.positionals)
        parts.extend(f"[--{name} <value>]" for name in self.flags)
        return "Usage: " + " ".join(parts)


# Connection flags accepted by every command; boolean ones take no value.
GLOBAL_VALUE_FLAGS: Tuple[str, ...] = ("endpoint", "token")
GLOBAL_BOOLEAN_FLAGS: Tuple[str, ...] = ("insecure",)

_RELATIONSHIP_FILTER_FLAGS = (
    "resource-type", "resource-id", "relation", "subject-type", "subject-id",
)

COMMAND_SPECS: Tuple[CommandSpec, ...] = (
    CommandSpec("schema", "read"),
    CommandSpec("relationship", "read", flags=_RELATIONSHIP_FILTER_FLAGS),
    CommandSpec("relationship", "create", ("resource", "relation", "subject")),
    CommandSpec("relationship", "touch", ("resource", "relation", "subject")),
    CommandSpec("relationship", "delete", ("resource", "relation", "subject")),
    CommandSpec("permission", "check", ("resource", "permission", "subject")),
    CommandSpec("permission", "expand", ("resource", "permission")),
    CommandSpec("permission", "lookup-subjects", ("resource", "permission", "subject_type")),
)


class CommandRegistry:
    """
    Lookup over registered ``CommandSpec`` entries, preserving
    registration order for the "supported ..." messages.
    """

    def __init__(self, specs: Tuple[CommandSpec, ...] = COMMAND_SPECS):
        self._specs: Dict[Tuple[str, str], CommandSpec] = {}
        for spec in specs:
            self._specs[spec.key] = spec

    def get(self, subcommand: str, action: str) -> Optional[CommandSpec]:
        return self._specs.get((subcommand, action))

    def subcommands(self) -> List[str]:
        """Registered subcommands, first-registration order, no duplicates."""
        seen: List[str] = []
        for subcommand, _ in self._specs:
            if subcommand not in seen:
                seen.append(subcommand)
        return seen

    def actions(self, subcommand: str) -> List[str]:
        return [action for sub, action in self._specs if sub == subcommand]

    def __contains__(self, key: Tuple[str, str]) -> bool:
        return key in self._specs

    def __len__(self) -> int:
        return len(self._specs)
