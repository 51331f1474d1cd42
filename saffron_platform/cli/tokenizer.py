"""
    Command-line tokenizer.

    Splits a command into tokens: runs of non-whitespace, non-quote
    characters, or the content of a double-quoted span.  An unterminated
    quote runs to the end of the string.

    Example:
        >>> split_args('zed permission check "doc:a b" view user:alice')
        ['zed', 'permission', 'check', 'doc:a b', 'view', 'user:alice']
"""
import re
from typing import List

from ..exceptions import UnsafeCharacterError

_TOKEN_PATTERN = re.compile(r'[^\s"]+|"([^"]*)"?')

# Characters a shell would interpret; checked on the raw, unsplit text.
UNSAFE_CHARACTERS = re.compile(r'[;&|><`$]')


def split_args(text: str) -> List[str]:
    """Tokenize ``text``; never raises, empty input gives ``[]``."""
    tokens: List[str] = []
    for match in _TOKEN_PATTERN.finditer(text):
        quoted = match.group(1)
        tokens.append(quoted if quoted is not None else match.group(0))
    return tokens


def ensure_safe(text: str) -> None:
    """
    Reject the whole command if it contains a shell metacharacter,
    quoted or not.

    Raises:
        UnsafeCharacterError: On the first offending character.
    """
    match = UNSAFE_CHARACTERS.search(text)
    if match:
        raise UnsafeCharacterError(
            f"Command contains disallowed character '{match.group(0)}' "
            f"at position {match.start()}."
        )


def split_args_safe(text: str) -> List[str]:
    """Hardened variant of ``split_args``."""
    ensure_safe(text)
    return split_args(text)
