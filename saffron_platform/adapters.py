"""
    Backend adapters — one function per supported command.

    Each adapter takes the SpiceDB client and a bound ``ZedCommand``,
    performs exactly one backend call and renders the answer as plain
    text, the way the zed CLI would print it.

    Adapters raise ``CommandArgumentError`` for malformed references and
    let ``BackendError`` propagate; the API executor turns both into
    ``stderr``.
"""
from typing import Any, Callable, Dict, List, Tuple

from saffron_api.models.command import ZedCommand
from saffron_api.types import ObjectReference, Permissionship

from .client import (
    OPERATION_CREATE,
    OPERATION_DELETE,
    OPERATION_TOUCH,
    SpiceDBClient,
)
from .exceptions import CommandArgumentError

Adapter = Callable[[SpiceDBClient, ZedCommand], str]

_INVALID_REFERENCE = "Invalid format. Use type:id for resource and subject"


def _reference(value: str, allow_relation: bool = False) -> ObjectReference:
    try:
        return ObjectReference.parse(value, allow_relation=allow_relation)
    except ValueError as e:
        raise CommandArgumentError(f"{_INVALID_REFERENCE} ({e})") from e


def _member(data: Any, key: str) -> Dict[str, Any]:
    """``data[key]`` when both are JSON objects, else ``{}``."""
    value = data.get(key) if isinstance(data, dict) else None
    return value if isinstance(value, dict) else {}


def _members(data: Any, key: str) -> List[Dict[str, Any]]:
    """The JSON objects in the list ``data[key]``; anything else is skipped."""
    value = data.get(key) if isinstance(data, dict) else None
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def _format_object(obj: Dict[str, Any]) -> str:
    return f"{obj.get('objectType', '?')}:{obj.get('objectId', '?')}"


def _format_subject(subject: Dict[str, Any]) -> str:
    text = _format_object(_member(subject, 'object'))
    if subject.get('optionalRelation'):
        text += f"#{subject['optionalRelation']}"
    return text


def format_relationship(relationship: Dict[str, Any]) -> str:
    """``document:readme#viewer@user:alice`` (subject relation appended as ``#rel``)."""
    return (f"{_format_object(_member(relationship, 'resource'))}"
            f"#{relationship.get('relation', '?')}"
            f"@{_format_subject(_member(relationship, 'subject'))}")


def format_expand_tree(node: Dict[str, Any], depth: int = 0) -> List[str]:
    """Render an expand tree as indented lines, one per node or leaf subject."""
    if not node:
        return []
    indent = "  " * depth
    label = _format_object(_member(node, 'expandedObject'))
    if node.get('expandedRelation'):
        label += f"#{node['expandedRelation']}"

    intermediate = _member(node, 'intermediateNode')
    if isinstance(intermediate.get('operation'), str):
        label += f" ({intermediate['operation'].replace('OPERATION_', '').lower()})"
    lines = [f"{indent}{label}"]

    for subject in _members(_member(node, 'leaf'), 'subjects'):
        lines.append(f"{indent}  - {_format_subject(subject)}")

    children = _members(intermediate, 'children') or _members(node, 'children')
    for child in children:
        lines.extend(format_expand_tree(child, depth + 1))
    return lines


# ── Adapters ─────────────────────────────────────────────────────

def schema_read(client: SpiceDBClient, command: ZedCommand) -> str:
    return client.read_schema()


def relationship_read(client: SpiceDBClient, command: ZedCommand) -> str:
    relationships = client.read_relationships(
        resource_type=command.flag('resource-type'),
        resource_id=command.flag('resource-id'),
        relation=command.flag('relation'),
        subject_type=command.flag('subject-type'),
        subject_id=command.flag('subject-id'),
    )
    if not relationships:
        return "No relationships found"
    return "\n".join(format_relationship(r) for r in relationships)


def _relationship_write(operation: str) -> Adapter:
    def adapter(client: SpiceDBClient, command: ZedCommand) -> str:
        resource_arg, relation, subject_arg = command.positional
        resource = _reference(resource_arg)
        subject = _reference(subject_arg, allow_relation=True)
        data = client.write_relationships(operation, resource, relation, subject)
        token = _member(data, 'writtenAt').get('token', '')
        return f"{resource}#{relation}@{subject}\nWritten at: {token}".rstrip()

    adapter.__name__ = f"relationship_{operation.replace('OPERATION_', '').lower()}"
    return adapter


relationship_create = _relationship_write(OPERATION_CREATE)
relationship_touch = _relationship_write(OPERATION_TOUCH)
relationship_delete = _relationship_write(OPERATION_DELETE)


def permission_check(client: SpiceDBClient, command: ZedCommand) -> str:
    resource_arg, permission, subject_arg = command.positional
    resource = _reference(resource_arg)
    subject = _reference(subject_arg, allow_relation=True)
    data = client.check_permission(resource, permission, subject)
    permissionship = data.get('permissionship') or 'UNKNOWN'
    line = f"Permissionship: {permissionship}"
    if Permissionship.from_value(permissionship) is Permissionship.CONDITIONAL_PERMISSION:
        missing = _member(data, 'partialCaveatInfo').get('missingRequiredContext')
        if isinstance(missing, list) and missing:
            line += f"\nMissing context: {', '.join(str(name) for name in missing)}"
    return line


def permission_expand(client: SpiceDBClient, command: ZedCommand) -> str:
    resource_arg, permission = command.positional
    resource = _reference(resource_arg)
    data = client.expand_permission_tree(resource, permission)
    lines = format_expand_tree(_member(data, 'treeRoot'))
    return "\n".join(lines) if lines else "Empty expansion tree"


def permission_lookup_subjects(client: SpiceDBClient, command: ZedCommand) -> str:
    resource_arg, permission, subject_type = command.positional
    resource = _reference(resource_arg)
    results = client.lookup_subjects(resource, permission, subject_type)
    subjects = []
    for item in results:
        subject = _member(item, 'subject') or item
        subject_id = subject.get('subjectObjectId')
        if subject_id:
            subjects.append(f"{subject_type}:{subject_id}")
    return "\n".join(subjects) if subjects else "No subjects found"


ADAPTERS: Dict[Tuple[str, str], Adapter] = {
    ("schema", "read"): schema_read,
    ("relationship", "read"): relationship_read,
    ("relationship", "create"): relationship_create,
    ("relationship", "touch"): relationship_touch,
    ("relationship", "delete"): relationship_delete,
    ("permission", "check"): permission_check,
    ("permission", "expand"): permission_expand,
    ("permission", "lookup-subjects"): permission_lookup_subjects,
}
