"""
    Command model - one parsed zed invocation.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class ZedCommand:
    """
    Typed representation of a single command line such as
    ``zed permission check document:readme view user:alice``.

    Attributes:
        root:        Leading keyword; must equal the emulated CLI name.
        subcommand:  ``schema``, ``relationship``, ``permission`` ...
        action:      ``read``, ``check``, ``expand`` ...
        positional:  Positional arguments after the action, flags removed.
        flags:       Recognized ``--name value`` pairs (name without dashes).
        arguments:   All tokens after the root keyword, in input order.
    """
    root: str
    subcommand: str = ""
    action: str = ""
    positional: List[str] = field(default_factory=list)
    flags: Dict[str, str] = field(default_factory=dict)
    arguments: List[str] = field(default_factory=list)

    @property
    def key(self) -> tuple:
        """Dispatch key ``(subcommand, action)``."""
        return (self.subcommand, self.action)

    def flag(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.flags.get(name, default)

    def __str__(self) -> str:
        return " ".join([self.root] + self.arguments)
