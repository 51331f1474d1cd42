"""
Execution strategies — in-process HTTP API or supervised zed process.
"""
from .api_executor import ApiCommandExecutor
from .process_executor import ProcessCommandExecutor

__all__ = ['ApiCommandExecutor', 'ProcessCommandExecutor']
