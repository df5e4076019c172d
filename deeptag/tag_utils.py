"""
Tag utilities: normalization of provider replies and formatting for nodes.
"""
import string
from typing import Iterable, List

from .constants import TAG_SEPARATOR

QUOTE_CHARS = "\"'"
_TAG_EDGE_CHARS = string.whitespace + QUOTE_CHARS


def normalize_tags(reply: str) -> List[str]:
    """
    Turn a comma-separated reply into an ordered, deduplicated tag list.

    One leading and one trailing quote around the whole reply are removed,
    each piece is trimmed (stray quotes included) and uppercased, empty
    pieces are dropped and the first occurrence of a tag wins. Never
    raises; an unusable reply gives an empty list.
    """
    text = (reply or "").strip()
    if text and text[0] in QUOTE_CHARS:
        text = text[1:]
    if text and text[-1] in QUOTE_CHARS:
        text = text[:-1]

    tags = []
    seen = set()
    for piece in text.split(","):
        # quotes are trimmed with whitespace so a joined result renormalizes unchanged
        tag = piece.strip(_TAG_EDGE_CHARS).upper()
        if tag and tag not in seen:
            seen.add(tag)
            tags.append(tag)
    return tags


def join_tags(tags: Iterable[str]) -> str:
    """Format tags the way they are written into a node."""
    return TAG_SEPARATOR.join(tags)


def format_tag_line(prefix: str, tags: Iterable[str]) -> str:
    """
    Build a node's text from a prefix and tags.

    >>> format_tag_line("tags::", ["AI", "TECH"])
    'tags:: AI, TECH'
    """
    return f"{prefix} {join_tags(tags)}"
