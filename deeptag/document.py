"""
JSON-backed document host.

A Document holds pages of nested nodes in memory and implements the Host
interface, so the tagging commands can run from the command line against
a file, or in tests without a live outliner.

File format::

    {
      "pages": [
        {"name": "Journal", "nodes": [
          {"id": "a1", "text": "Some text", "children": []}
        ]}
      ]
    }
"""

import json
import logging
import uuid
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from rich.console import Console

from deeptag.host import Host
from deeptag.models import ContentNode, Page, Severity

logger = logging.getLogger(__name__)

SEVERITY_STYLES = {
    Severity.INFO: "cyan",
    Severity.SUCCESS: "green",
    Severity.WARNING: "yellow",
    Severity.ERROR: "red",
}


class Document(Host):
    """In-memory outline implementing the Host interface."""

    def __init__(self, pages: Optional[List[Page]] = None,
                 console: Optional[Console] = None):
        self.pages: List[Page] = pages or []
        self.console = console or Console(stderr=True)
        self.current_page: Optional[str] = self.pages[0].name if self.pages else None
        self.selection: Optional[str] = None
        self.messages: List[Tuple[Severity, str]] = []
        self.path: Optional[Path] = None

    # =================
    # Persistence
    # =================

    @classmethod
    def from_dict(cls, data: Dict, console: Optional[Console] = None) -> "Document":
        pages = [Page.from_dict(page) for page in data.get("pages", [])]
        return cls(pages, console=console)

    def to_dict(self) -> Dict:
        return {"pages": [page.to_dict() for page in self.pages]}

    @classmethod
    def load(cls, path: Path, console: Optional[Console] = None) -> "Document":
        """Load a document from a JSON file."""
        with open(path, "r", encoding="utf-8") as f:
            document = cls.from_dict(json.load(f), console=console)
        document.path = Path(path)
        return document

    def save(self, path: Optional[Path] = None):
        """Write the document back to JSON (defaults to the file it came from)."""
        path = Path(path) if path else self.path
        if path is None:
            raise ValueError("No path to save the document to")
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)
        logger.debug(f"Saved document to {path}")

    # =================
    # Lookup
    # =================

    def get_page(self, name: str) -> Optional[Page]:
        for page in self.pages:
            if page.name.lower() == name.lower():
                return page
        return None

    def _locate(self, identifier: str) -> Optional[Tuple[List[ContentNode], int]]:
        """Return the list holding the node and its index in it."""
        stack = [page.nodes for page in self.pages]
        while stack:
            siblings = stack.pop()
            for index, node in enumerate(siblings):
                if node.identifier == identifier:
                    return siblings, index
                stack.append(node.children)
        return None

    def find_node(self, identifier: str) -> Optional[ContentNode]:
        location = self._locate(identifier)
        if location is None:
            return None
        siblings, index = location
        return siblings[index]

    @staticmethod
    def _new_node(text: str) -> ContentNode:
        return ContentNode(identifier=str(uuid.uuid4()), text=text)

    # =================
    # Host interface
    # =================

    def get_node(self, identifier: str, include_children: bool = False) -> Optional[ContentNode]:
        node = self.find_node(identifier)
        if node is None:
            return None
        children = [ContentNode(c.identifier, c.text) for c in node.children] if include_children else []
        return ContentNode(node.identifier, node.text, children)

    def get_current_page(self) -> Optional[str]:
        return self.current_page

    def get_page_nodes(self, page: str) -> List[ContentNode]:
        found = self.get_page(page)
        if found is None:
            return []
        return [ContentNode(n.identifier, n.text) for n in found.nodes]

    def get_selection(self) -> Optional[str]:
        return self.selection

    def insert_node(self, target: str, text: str, sibling: bool = False) -> ContentNode:
        location = self._locate(target)
        if location is None:
            raise KeyError(f"No node with id {target}")
        siblings, index = location
        node = self._new_node(text)
        if sibling:
            siblings.insert(index + 1, node)
        else:
            siblings[index].children.append(node)
        return node

    def insert_page_node(self, page: str, text: str) -> ContentNode:
        found = self.get_page(page)
        if found is None:
            found = Page(name=page)
            self.pages.append(found)
        node = self._new_node(text)
        found.nodes.append(node)
        return node

    def update_node(self, identifier: str, text: str) -> None:
        node = self.find_node(identifier)
        if node is None:
            raise KeyError(f"No node with id {identifier}")
        node.text = text

    def show_message(self, message: str, severity: Severity = Severity.INFO,
                     timeout: Optional[int] = None) -> None:
        self.messages.append((severity, message))
        style = SEVERITY_STYLES.get(severity, "white")
        self.console.print(message, style=style, markup=False)
