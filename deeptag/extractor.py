"""
Content extraction for deeptag.

Turns a block, a page or a text selection into the single string that is
sent for analysis. Property lines (``key:: value``) are metadata, not
content, and are always dropped.
"""

import logging
import re
from typing import Iterable, Union

from .constants import MAX_PAGE_CHARS, TAGS_PREFIX, TRUNCATION_MARKER
from .models import ContentNode

logger = logging.getLogger(__name__)

PROPERTY_LINE = re.compile(r"^.+::")


def is_property_line(line: str) -> bool:
    """Return True if the line has the ``key:: value`` property shape."""
    return bool(PROPERTY_LINE.match(line.strip()))


def is_tags_line(line: str) -> bool:
    """Return True if the line is a previously written ``tags::`` line."""
    return line.strip().lower().startswith(TAGS_PREFIX)


def strip_properties(text: str) -> str:
    """Drop property lines from a block's text and trim the result."""
    lines = [line for line in text.split("\n") if not is_property_line(line)]
    return "\n".join(lines).strip()


def extract_block(source: Union[ContentNode, str]) -> str:
    """
    Extract analyzable text from a single block.

    Returns an empty string when only properties remain; callers must
    treat that as "nothing to analyze".
    """
    text = source.text if isinstance(source, ContentNode) else source
    return strip_properties(text or "")


def extract_page(nodes: Iterable[ContentNode], limit: int = MAX_PAGE_CHARS) -> str:
    """
    Extract analyzable text from a page's top-level nodes.

    Children are not visited. Each surviving block is separated by a blank
    line. Text longer than ``limit`` is cut and ends with TRUNCATION_MARKER.
    """
    blocks = []
    for node in nodes:
        lines = [
            line for line in (node.text or "").split("\n")
            if not is_property_line(line) and not is_tags_line(line)
        ]
        text = "\n".join(lines).strip()
        if text:
            blocks.append(text)

    content = "\n\n".join(blocks)
    if limit and len(content) > limit:
        logger.debug(f"Page content is {len(content)} chars, truncating to {limit}")
        content = content[:limit] + TRUNCATION_MARKER
    return content


def extract_selection(text: str) -> str:
    """Selected text is used as-is, only trimmed."""
    return (text or "").strip()


def is_truncated(content: str) -> bool:
    return content.endswith(TRUNCATION_MARKER)
