"""
    Schema read-model - definitions, relations and permissions
    extracted from schema source text.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class RelationDecl:
    """``relation <name>: <type>``; ``type`` is kept as written."""
    name: str
    type: str

    def to_dict(self) -> Dict[str, str]:
        return {'name': self.name, 'type': self.type}


@dataclass(frozen=True)
class PermissionDecl:
    """``permission <name> = <expression>``; the expression is opaque."""
    name: str
    expression: str

    def to_dict(self) -> Dict[str, str]:
        return {'name': self.name, 'expression': self.expression}


@dataclass
class NamespaceInfo:
    """
    One ``definition`` block.

    Attributes:
        name:         Definition name, including any ``prefix/``.
        relations:    Relation declarations in source order.
        permissions:  Permission declarations in source order.
    """
    name: str
    relations: List[RelationDecl] = field(default_factory=list)
    permissions: List[PermissionDecl] = field(default_factory=list)

    def get_relation(self, name: str) -> Optional[RelationDecl]:
        for relation in self.relations:
            if relation.name == name:
                return relation
        return None

    def get_permission(self, name: str) -> Optional[PermissionDecl]:
        for permission in self.permissions:
            if permission.name == name:
                return permission
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'relations': [r.to_dict() for r in self.relations],
            'permissions': [p.to_dict() for p in self.permissions],
        }
