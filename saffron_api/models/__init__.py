"""
Data models - command, execution result, schema read-model.
"""
from .command import ZedCommand
from .execution import ExecutionResult
from .schema import NamespaceInfo, RelationDecl, PermissionDecl

__all__ = ['ZedCommand', 'ExecutionResult', 'NamespaceInfo', 'RelationDecl', 'PermissionDecl']
