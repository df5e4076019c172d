"""
Placement of suggested tags into the document.

Block mode keeps a single ``tags::`` child per block and overwrites it on
every run. Page and selection modes always append a new sibling node.
"""

import logging
from typing import List, Optional

from deeptag.constants import PAGE_TAGS_PREFIX, SELECTION_TAGS_PREFIX, TAGS_PREFIX
from deeptag.host import Host
from deeptag.models import ContentNode
from deeptag.tag_utils import format_tag_line

logger = logging.getLogger(__name__)


def find_tags_child(node: ContentNode) -> Optional[ContentNode]:
    """Return the first direct child whose text starts with ``tags::`` (any case)."""
    for child in node.children:
        if child.text and child.text.lower().startswith(TAGS_PREFIX):
            return child
    return None


def place_block_tags(host: Host, node_id: str, tags: List[str]) -> bool:
    """
    Write tags under a block.

    Returns:
        True if an existing ``tags::`` child was updated, False if a new
        child was created.
    """
    text = format_tag_line(TAGS_PREFIX, tags)
    node = host.get_node(node_id, include_children=True)
    existing = find_tags_child(node) if node else None

    if existing:
        host.update_node(existing.identifier, text)
        logger.info(f"Updated tags child {existing.identifier} of {node_id}")
        return True

    created = host.insert_node(node_id, text, sibling=False)
    logger.info(f"Created tags child {created.identifier} under {node_id}")
    return False


def place_page_tags(host: Host, page: str, tags: List[str]) -> ContentNode:
    """Append a ``Page Tags::`` node after the page's last top-level node."""
    text = format_tag_line(PAGE_TAGS_PREFIX, tags)
    nodes = host.get_page_nodes(page)
    if nodes:
        created = host.insert_node(nodes[-1].identifier, text, sibling=True)
    else:
        created = host.insert_page_node(page, text)
    logger.info(f"Added page tags node {created.identifier} to {page}")
    return created


def place_selection_tags(host: Host, node_id: str, tags: List[str]) -> ContentNode:
    """Add a ``Selection Tags::`` node right after the block being edited."""
    created = host.insert_node(node_id, format_tag_line(SELECTION_TAGS_PREFIX, tags), sibling=True)
    logger.info(f"Added selection tags node {created.identifier} after {node_id}")
    return created
