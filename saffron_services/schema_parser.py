# saffron_services/schema_parser.py
"""
    SchemaParser — extracts definitions, relations and permissions from
    SpiceDB schema source.

    Extends ``SchemaTextService[List[NamespaceInfo]]``.

    Algorithm:
        1. Lex the source into code / comment / string regions and build
           a *masked* copy where comment and string contents are blanked
           (same length, newlines kept), so offsets match the original.
        2. Find every ``definition <name> {`` in the masked text and walk
           forward with a brace-depth counter to the matching ``}``.
        3. Inside each block body, scan for ``relation <name>: <type>``
           and ``permission <name> = <expression>``.  A declaration ends at
           the end of its line or where the next declaration starts.

    The parser never raises: unterminated comments, strings and blocks
    simply run to the end of the text.
"""
import re
from typing import Dict, List, Tuple

from saffron_api.models.schema import NamespaceInfo, PermissionDecl, RelationDecl
from .base_service import SchemaTextService

REGION_CODE = "code"
REGION_COMMENT = "comment"
REGION_STRING = "string"

_DEFINITION_PATTERN = re.compile(r'\bdefinition\s+((?:\w+/)*\w+)\s*\{')

# End of one declaration: the next declaration on the same line, a line
# break, or the end of the block.
_DECLARATION_END = r'(?=\s+(?:relation|permission)\s+\w+\s*[:=]|[ \t]*[\r\n]|\s*\Z)'

_RELATION_PATTERN = re.compile(
    r'\brelation\s+(\w+)\s*:\s*([^\r\n]+?)' + _DECLARATION_END
)
_PERMISSION_PATTERN = re.compile(
    r'\bpermission\s+(\w+)\s*=\s*([^\r\n]+?)' + _DECLARATION_END
)


def lex_regions(text: str) -> List[Tuple[str, int, int]]:
    """
    Classify ``text`` into ``(kind, start, end)`` regions.

    Comments are ``// ...`` (to end of line) and ``/* ... */``; strings
    are single- or double-quoted with backslash escapes.
    """
    regions: List[Tuple[str, int, int]] = []
    n = len(text)
    code_start = 0
    i = 0
    while i < n:
        if text.startswith("//", i):
            end = text.find("\n", i)
            end = n if end == -1 else end
            kind = REGION_COMMENT
        elif text.startswith("/*", i):
            end = text.find("*/", i + 2)
            end = n if end == -1 else end + 2
            kind = REGION_COMMENT
        elif text[i] in "\"'":
            end = _string_end(text, i)
            kind = REGION_STRING
        else:
            i += 1
            continue

        if code_start < i:
            regions.append((REGION_CODE, code_start, i))
        regions.append((kind, i, end))
        code_start = i = end

    if code_start < n:
        regions.append((REGION_CODE, code_start, n))
    return regions


def _string_end(text: str, start: int) -> int:
    quote = text[start]
    i = start + 1
    while i < len(text):
        if text[i] == "\\":
            i += 2
            continue
        if text[i] == quote:
            return i + 1
        i += 1
    return len(text)


def mask_literals(text: str) -> str:
    """Blank out comment and string regions, keeping length and newlines."""
    parts = []
    for kind, start, end in lex_regions(text):
        chunk = text[start:end]
        if kind != REGION_CODE:
            chunk = re.sub(r'[^\r\n]', ' ', chunk)
        parts.append(chunk)
    return "".join(parts)


def find_block_end(masked: str, start: int) -> int:
    """
    Index of the ``}`` closing a block whose ``{`` precedes ``start``,
    or ``len(masked)`` if the block never closes.
    """
    depth = 1
    for i in range(start, len(masked)):
        char = masked[i]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return i
    return len(masked)


class SchemaParser(SchemaTextService[List[NamespaceInfo]]):
    """
    Produces one ``NamespaceInfo`` per definition, in first-occurrence
    order.  A name defined twice keeps its first position and the
    contents of its last block.
    """

    def parse(self, text: str) -> List[NamespaceInfo]:
        """Convenience wrapper around the generic ``execute()``."""
        return self.execute(text)

    def _transform(self, text: str) -> List[NamespaceInfo]:
        masked = mask_literals(text)
        found: Dict[str, NamespaceInfo] = {}

        for match in _DEFINITION_PATTERN.finditer(masked):
            body_start = match.end()
            body_end = find_block_end(masked, body_start)
            found[match.group(1)] = NamespaceInfo(
                name=match.group(1),
                relations=self._relations(text, masked, body_start, body_end),
                permissions=self._permissions(text, masked, body_start, body_end),
            )

        return list(found.values())

    @staticmethod
    def _relations(text: str, masked: str, start: int, end: int) -> List[RelationDecl]:
        # Scan the masked block; slice the original so ``type`` is untouched.
        return [
            RelationDecl(m.group(1), text[m.start(2):m.end(2)].strip())
            for m in _RELATION_PATTERN.finditer(masked, start, end)
        ]

    @staticmethod
    def _permissions(text: str, masked: str, start: int, end: int) -> List[PermissionDecl]:
        return [
            PermissionDecl(m.group(1), text[m.start(2):m.end(2)].strip())
            for m in _PERMISSION_PATTERN.finditer(masked, start, end)
        ]


def parse_schema(text: str) -> List[NamespaceInfo]:
    """Parse ``text`` with a fresh ``SchemaParser``."""
    return SchemaParser().parse(text)
