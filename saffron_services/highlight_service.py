# saffron_services/highlight_service.py
"""
    SchemaHighlighter — wraps schema tokens in ``<span class="zed-…">``.

    Extends ``SchemaTextService[str]``.

    The text is HTML-escaped first, then an ordered list of passes runs
    over it.  Every pass skips spans inserted by earlier passes (tag
    *and* content) and HTML entities produced by escaping, so the order
    below decides which category wins:

        comments → definition names → relation names → permission names
        → keywords → operators → ``: <type>`` annotations

    Only tags are inserted: stripping them gives back the escaped input.
"""
import html
import re
from re import Match, Pattern
from typing import Callable, List, Tuple

from .base_service import SchemaTextService

_SKIP = r'(?P<skip><span\b[^>]*>.*?</span>)'
_ENTITY = r'(?P<entity>&(?:#\w+|\w+);)'

KEYWORDS = ('caveat', 'definition', 'relation', 'permission', 'with', 'nil', 'use', 'expiration')


def _span(css_class: str, text: str) -> str:
    return f'<span class="zed-{css_class}">{text}</span>'


def _declaration(css_class: str) -> Callable[[Match], str]:
    def render(m: Match) -> str:
        return _span('keyword', m.group('kw')) + m.group('ws') + _span(css_class, m.group('name'))
    return render


def _compile(pattern: str, flags: int = 0) -> Pattern:
    return re.compile(f'{_SKIP}|(?P<target>{pattern})|{_ENTITY}', re.DOTALL | flags)


_PASSES: List[Tuple[Pattern, Callable[[Match], str]]] = [
    (_compile(r'//[^\n]*|/\*.*?(?:\*/|\Z)'),
     lambda m: _span('comment', m.group('target'))),
    (_compile(r'\b(?P<kw>definition)(?P<ws>\s+)(?P<name>(?:\w+/)*\w+)'),
     _declaration('definition')),
    (_compile(r'\b(?P<kw>relation)(?P<ws>\s+)(?P<name>\w+)'),
     _declaration('relation')),
    (_compile(r'\b(?P<kw>permission)(?P<ws>\s+)(?P<name>\w+)'),
     _declaration('permission')),
    (_compile(r'\b(?:' + '|'.join(KEYWORDS) + r')\b'),
     lambda m: _span('keyword', m.group('target'))),
    (_compile(r'-&gt;|&amp;|[+\-|#=*]'),
     lambda m: _span('operator', m.group('target'))),
    (_compile(r'(?P<colon>:)(?P<gap>[ \t]*)(?P<type>(?:\w+/)*\w+)'),
     lambda m: m.group('colon') + m.group('gap') + _span('type', m.group('type'))),
]

_TAG_PATTERN = re.compile(r'<[^>]+>')


def _apply(text: str, pattern: Pattern, render: Callable[[Match], str]) -> str:
    def replace(m: Match) -> str:
        if m.group('target') is None:
            return m.group(0)
        return render(m)
    return pattern.sub(replace, text)


class SchemaHighlighter(SchemaTextService[str]):
    """Deterministic source-to-markup mapping for the schema editor."""

    def highlight(self, text: str) -> str:
        """Convenience wrapper around the generic ``execute()``."""
        return self.execute(text)

    def _transform(self, text: str) -> str:
        markup = html.escape(text)
        for pattern, render in _PASSES:
            markup = _apply(markup, pattern, render)
        return markup


def strip_markup(markup: str) -> str:
    """Remove every tag, leaving the escaped text."""
    return _TAG_PATTERN.sub('', markup)
