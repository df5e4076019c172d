"""
Host document API.

deeptag never owns the document: it reads nodes and asks the host to
insert or update them. Any outliner able to provide these operations can
run the tagging commands.
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from deeptag.models import ContentNode, Severity


class Host(ABC):
    """Interface for the application hosting the tagging commands."""

    @abstractmethod
    def get_node(self, identifier: str, include_children: bool = False) -> Optional[ContentNode]:
        """Return the node, with its direct children when requested."""
        pass

    @abstractmethod
    def get_current_page(self) -> Optional[str]:
        """Return the name of the page being edited."""
        pass

    @abstractmethod
    def get_page_nodes(self, page: str) -> List[ContentNode]:
        """Return the top-level nodes of a page, in order."""
        pass

    @abstractmethod
    def get_selection(self) -> Optional[str]:
        """Return the user's selected text, if any."""
        pass

    @abstractmethod
    def insert_node(self, target: str, text: str, sibling: bool = False) -> ContentNode:
        """
        Insert a node after ``target``.

        As its last child when ``sibling`` is False, as the sibling
        following it otherwise.
        """
        pass

    @abstractmethod
    def insert_page_node(self, page: str, text: str) -> ContentNode:
        """Append a new top-level node to a page."""
        pass

    @abstractmethod
    def update_node(self, identifier: str, text: str) -> None:
        pass

    @abstractmethod
    def show_message(self, message: str, severity: Severity = Severity.INFO,
                     timeout: Optional[int] = None) -> None:
        """Display a transient notification; ``timeout`` is in milliseconds."""
        pass
