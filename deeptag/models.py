"""
Data model for deeptag.

ContentNode mirrors a block in the host's outline: an opaque identifier,
raw text that may hold several lines and ``key:: value`` property lines,
and an ordered list of children.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class Severity(Enum):
    """Severity of a user-facing notification."""
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class ContentNode:
    """A node of the host document tree."""
    identifier: str
    text: str = ""
    children: List["ContentNode"] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.identifier,
            "text": self.text,
            "children": [child.to_dict() for child in self.children],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ContentNode":
        return cls(
            identifier=str(data["id"]),
            text=data.get("text", ""),
            children=[cls.from_dict(child) for child in data.get("children", [])],
        )


@dataclass
class Page:
    """A named page holding a sequence of top-level nodes."""
    name: str
    nodes: List[ContentNode] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "nodes": [node.to_dict() for node in self.nodes]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Page":
        return cls(
            name=data["name"],
            nodes=[ContentNode.from_dict(node) for node in data.get("nodes", [])],
        )


@dataclass
class SuggestionResult:
    """
    Outcome of one suggestion request.

    Holds either a tag list or the error that prevented one, never both.
    """
    tags: List[str] = field(default_factory=list)
    error: Optional[Exception] = None

    def __post_init__(self):
        if self.error is not None and self.tags:
            raise ValueError("SuggestionResult cannot hold both tags and an error")

    @property
    def ok(self) -> bool:
        return self.error is None
