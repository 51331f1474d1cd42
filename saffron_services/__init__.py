"""
Schema services — structural parser and syntax highlighter, plus the
shared Template Method base.
"""
from .base_service import SchemaTextService
from .schema_parser import SchemaParser, parse_schema
from .highlight_service import SchemaHighlighter, strip_markup

__all__ = [
    'SchemaTextService',
    'SchemaParser',
    'parse_schema',
    'SchemaHighlighter',
    'strip_markup',
]
