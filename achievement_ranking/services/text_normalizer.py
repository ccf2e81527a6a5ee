"""Text normalization for search and indexing.

Handles:
- Lowercasing and whitespace collapsing
- Word splitting for prefix matching
"""

import re
from typing import Final

WORD_SEPARATOR_PATTERN: Final[re.Pattern[str]] = re.compile(r"[\s.,;:()\-_/]+")
"""Separators used when splitting fields into words for prefix matching."""

WHITESPACE_PATTERN: Final[re.Pattern[str]] = re.compile(r"\s+")


def lower_or_empty(text: str | None) -> str:
    """Lowercase a possibly missing field.

    Example:
        >>> lower_or_empty(None)
        ''
        >>> lower_or_empty("Project A")
        'project a'
    """
    return (text or "").lower()


def normalize_text(text: str | None) -> str:
    """Lowercase, collapse whitespace and trim.

    Example:
        >>> normalize_text("  Too    many\\n spaces ")
        'too many spaces'
    """
    return WHITESPACE_PATTERN.sub(" ", lower_or_empty(text)).strip()


def split_query_tokens(term: str) -> list[str]:
    """Split an already-normalized query on whitespace."""
    return [token for token in WHITESPACE_PATTERN.split(term) if token]


def split_words(text: str) -> list[str]:
    """Split a field into words on whitespace and common punctuation.

    Example:
        >>> split_words("ครู ก. (science)/math-club")
        ['ครู', 'ก', 'science', 'math', 'club']
    """
    return [word for word in WORD_SEPARATOR_PATTERN.split(text) if word]
