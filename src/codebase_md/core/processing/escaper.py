from __future__ import annotations

"""
Markup Escaping.

Neutralizes the characters that would otherwise break the document's tag
structure. Applied identically to attribute values and element text.
"""

from typing import Tuple

# Order matters: '&' must go first so produced entities are not re-escaped
_REPLACEMENTS: Tuple[Tuple[str, str], ...] = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
)


def escape_markup(text: str) -> str:
    """
    Replace '&', '<' and '>' with their named entity references.

    No other character is touched; control characters and non-ASCII text
    pass through. Not idempotent: escape raw content exactly once.

    Args:
        text: Raw text.

    Returns:
        str: Escaped text.
    """
    for raw, entity in _REPLACEMENTS:
        text = text.replace(raw, entity)
    return text
