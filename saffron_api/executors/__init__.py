"""
Executor contract - abstract base class for command execution strategies.
"""
from .base import CommandExecutor

__all__ = ['CommandExecutor']
