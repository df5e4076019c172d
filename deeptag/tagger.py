"""
Tagging commands for deeptag.

Three commands share one pipeline: extract text, ask the provider for
tags, write them into the document.

    /tags            tags for the focused block, kept in a ``tags::`` child
    /page-tags       tags for the whole current page, appended as a node
    /selection-tags  tags for the selected text, appended after the block

Each invocation ends with exactly one notification: success, or the
failure that stopped it. Failures never escape to the host.
"""

import logging
from datetime import date
from typing import List, Optional

from deeptag.commands import CommandContext, CommandRegistry
from deeptag.config import DeeptagConfig
from deeptag.constants import CREDENTIAL_MESSAGE_TIMEOUT, PROGRESS_MESSAGE_TIMEOUT
from deeptag.errors import (
    EmptyContent,
    MissingCredential,
    NodeNotFound,
    NoUsableTags,
    SuggestionError,
)
from deeptag.extractor import extract_block, extract_page, extract_selection, is_truncated
from deeptag.host import Host
from deeptag.llm import SuggestionClient
from deeptag.models import Severity, SuggestionResult
from deeptag.placement import place_block_tags, place_page_tags, place_selection_tags

logger = logging.getLogger(__name__)


def suggest(content: str, config: DeeptagConfig, today: Optional[date] = None,
            client: Optional[SuggestionClient] = None) -> SuggestionResult:
    """
    Run prompt building, the provider call and normalization for ``content``.
    """
    if not content or not content.strip():
        return SuggestionResult(error=EmptyContent())
    client = client or SuggestionClient(config)
    return client.fetch_tags(content, config.api_credential, today)


def report_failure(host: Host, error: SuggestionError) -> None:
    """Show the single notification for a failed invocation."""
    timeout = CREDENTIAL_MESSAGE_TIMEOUT if isinstance(error, MissingCredential) else None
    logger.warning(f"Tagging aborted: {error.user_message}")
    host.show_message(error.user_message, error.severity, timeout)


class TagCommands:
    """
    Handlers for the tagging slash commands.

    Args:
        client: Suggestion client to use; one is built from the invocation's
            configuration when omitted
    """

    def __init__(self, client: Optional[SuggestionClient] = None):
        self.client = client

    def _suggest(self, content: str, context: CommandContext) -> List[str]:
        result = suggest(content, context.config, context.today,
                         self.client or SuggestionClient(context.config))
        if result.error is not None:
            raise result.error
        if not result.tags:
            raise NoUsableTags()
        return result.tags

    @staticmethod
    def _start(context: CommandContext) -> None:
        context.host.show_message("Generating tags...", Severity.INFO, PROGRESS_MESSAGE_TIMEOUT)
        credential = context.config.api_credential
        if not credential or not credential.strip():
            raise MissingCredential()

    def tag_block(self, context: CommandContext) -> Optional[List[str]]:
        """Tag the focused block, keeping one ``tags::`` child under it."""
        host = context.host
        try:
            self._start(context)
            node = host.get_node(context.node_id) if context.node_id else None
            if node is None:
                raise NodeNotFound()

            content = extract_block(node)
            if not content:
                raise EmptyContent("The block is empty (or only holds properties).")

            tags = self._suggest(content, context)
            updated = place_block_tags(host, node.identifier, tags)
        except SuggestionError as e:
            report_failure(host, e)
            return None

        if updated:
            host.show_message("Tags updated in the child block.", Severity.SUCCESS)
        else:
            host.show_message("Tags added in a new child block.", Severity.SUCCESS)
        return tags

    def tag_page(self, context: CommandContext) -> Optional[List[str]]:
        """Tag the whole current page with a trailing ``Page Tags::`` node."""
        host = context.host
        try:
            self._start(context)
            page = context.page or host.get_current_page()
            if not page:
                raise NodeNotFound("No page is currently open.")

            content = extract_page(host.get_page_nodes(page), context.config.page_char_limit)
            if not content:
                raise EmptyContent("The page has no content to analyze.")
            if is_truncated(content):
                host.show_message(
                    f"Page is longer than {context.config.page_char_limit} characters; "
                    f"only the beginning is analyzed.",
                    Severity.WARNING,
                )

            tags = self._suggest(content, context)
            place_page_tags(host, page, tags)
        except SuggestionError as e:
            report_failure(host, e)
            return None

        host.show_message(f"Page tags added to {page}.", Severity.SUCCESS)
        return tags

    def tag_selection(self, context: CommandContext) -> Optional[List[str]]:
        """Tag the selected text with a ``Selection Tags::`` node after the block."""
        host = context.host
        try:
            self._start(context)
            selection = context.selection if context.selection is not None else host.get_selection()
            content = extract_selection(selection)
            if not content:
                raise EmptyContent("No text selected.")
            node = host.get_node(context.node_id) if context.node_id else None
            if node is None:
                raise NodeNotFound()

            tags = self._suggest(content, context)
            place_selection_tags(host, context.node_id, tags)
        except SuggestionError as e:
            report_failure(host, e)
            return None

        host.show_message("Selection tags added.", Severity.SUCCESS)
        return tags

    def register(self, registry: CommandRegistry) -> None:
        registry.register("tags", self.tag_block, "Suggest tags for the current block")
        registry.register("page-tags", self.tag_page, "Suggest tags for the current page")
        registry.register("selection-tags", self.tag_selection, "Suggest tags for the selected text")


def register_commands(registry: CommandRegistry,
                      client: Optional[SuggestionClient] = None) -> TagCommands:
    """Register the tagging commands and return their handler object."""
    commands = TagCommands(client)
    commands.register(registry)
    return commands
