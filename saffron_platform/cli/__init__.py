"""
CLI package — zed command-line interpretation.

Design Patterns
───────────────
• Interpreter   – ``CommandProcessor`` parses the CLI syntax into a
                  structured ``ZedCommand``.
• State table   – ``CommandRegistry`` holds the supported
                  ``(subcommand, action)`` states and their arguments.
• Strategy      – execution is delegated to a ``CommandExecutor``.
"""
from .command_processor import CommandProcessor
from .commands import CommandRegistry, CommandSpec, COMMAND_SPECS
from .tokenizer import split_args, split_args_safe, ensure_safe

__all__ = [
    'CommandProcessor',
    'CommandRegistry',
    'CommandSpec',
    'COMMAND_SPECS',
    'split_args',
    'split_args_safe',
    'ensure_safe',
]
