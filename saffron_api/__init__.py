"""
Saffron API - models and executor contract.
"""
from .types import ObjectReference, Permissionship
from .models.command import ZedCommand
from .models.execution import ExecutionResult
from .models.schema import NamespaceInfo, RelationDecl, PermissionDecl
from .executors.base import CommandExecutor

__all__ = [
    'ObjectReference',
    'Permissionship',
    'ZedCommand',
    'ExecutionResult',
    'NamespaceInfo',
    'RelationDecl',
    'PermissionDecl',
    'CommandExecutor',
]
