"""
deeptag - keyword tags for outliner notes

Sends block, page or selection text to a chat-completion API and writes
the suggested keyword tags back into the document.

Example Usage:
    >>> from deeptag import CommandRegistry, CommandContext, Document, get_config, register_commands
    >>> registry = CommandRegistry()
    >>> register_commands(registry)
    >>> doc = Document.load("notes.json")
    >>> context = CommandContext.from_host(doc, get_config(), node_id="a1")
    >>> registry.invoke("tags", context)
"""

__version__ = "0.3.0"
__author__ = "deeptag Contributors"

# Configuration
from deeptag.config import DeeptagConfig, get_config, init_config, SETTINGS_SCHEMA

# Models and errors
from deeptag.models import ContentNode, Page, Severity, SuggestionResult
from deeptag.errors import (
    SuggestionError,
    MissingCredential,
    EmptyContent,
    NodeNotFound,
    ApiError,
    MalformedResponse,
    TransportError,
    NoUsableTags,
)

# Pipeline
from deeptag.extractor import extract_block, extract_page, extract_selection
from deeptag.prompts import build_prompt, date_tags
from deeptag.tag_utils import normalize_tags, join_tags
from deeptag.llm import SuggestionClient
from deeptag.placement import find_tags_child, place_block_tags, place_page_tags, place_selection_tags

# Host and commands
from deeptag.host import Host
from deeptag.document import Document
from deeptag.commands import CommandContext, CommandRegistry, CommandError
from deeptag.tagger import TagCommands, register_commands, suggest

__all__ = [
    # Config
    "DeeptagConfig",
    "get_config",
    "init_config",
    "SETTINGS_SCHEMA",
    # Models
    "ContentNode",
    "Page",
    "Severity",
    "SuggestionResult",
    # Errors
    "SuggestionError",
    "MissingCredential",
    "EmptyContent",
    "NodeNotFound",
    "ApiError",
    "MalformedResponse",
    "TransportError",
    "NoUsableTags",
    # Pipeline
    "extract_block",
    "extract_page",
    "extract_selection",
    "build_prompt",
    "date_tags",
    "normalize_tags",
    "join_tags",
    "SuggestionClient",
    "find_tags_child",
    "place_block_tags",
    "place_page_tags",
    "place_selection_tags",
    # Host and commands
    "Host",
    "Document",
    "CommandContext",
    "CommandRegistry",
    "CommandError",
    "TagCommands",
    "register_commands",
    "suggest",
]
