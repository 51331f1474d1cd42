"""
    Object references and permissionship values used by the zed command set.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class Permissionship(Enum):
    HAS_PERMISSION = "PERMISSIONSHIP_HAS_PERMISSION"
    NO_PERMISSION = "PERMISSIONSHIP_NO_PERMISSION"
    CONDITIONAL_PERMISSION = "PERMISSIONSHIP_CONDITIONAL_PERMISSION"
    UNSPECIFIED = "PERMISSIONSHIP_UNSPECIFIED"

    @classmethod
    def from_value(cls, value: Optional[str]) -> 'Permissionship':
        """Map a raw API value to a member, falling back to UNSPECIFIED."""
        for member in cls:
            if member.value == value:
                return member
        return cls.UNSPECIFIED


@dataclass(frozen=True)
class ObjectReference:
    """
    A ``type:id`` object reference, optionally carrying a subject
    relation (``group:eng#member``).
    """
    object_type: str
    object_id: str
    relation: Optional[str] = None

    @classmethod
    def parse(cls, value: str, allow_relation: bool = False) -> 'ObjectReference':
        """
        Parse ``type:id`` (or ``type:id#relation`` when ``allow_relation``).

        Raises:
            ValueError: If either side of the colon is empty.
        """
        relation = None
        if allow_relation and "#" in value:
            value, _, relation = value.partition("#")
            if not relation:
                raise ValueError(f"Empty relation in '{value}#'.")

        object_type, sep, object_id = value.partition(":")
        if not sep or not object_type or not object_id:
            raise ValueError(f"Expected type:id, got '{value}'.")
        return cls(object_type, object_id, relation)

    def to_object_dict(self) -> Dict[str, str]:
        return {"objectType": self.object_type, "objectId": self.object_id}

    def to_subject_dict(self) -> Dict[str, Any]:
        subject: Dict[str, Any] = {"object": self.to_object_dict()}
        if self.relation:
            subject["optionalRelation"] = self.relation
        return subject

    def __str__(self) -> str:
        text = f"{self.object_type}:{self.object_id}"
        if self.relation:
            text += f"#{self.relation}"
        return text
