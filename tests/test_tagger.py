"""
End-to-end tests for the tagging commands.

Runs the registered commands against an in-memory Document with the
provider mocked at the HTTP session.
"""
from datetime import date
from unittest.mock import MagicMock

import pytest
import requests

from deeptag.commands import CommandContext, CommandRegistry
from deeptag.config import DeeptagConfig
from deeptag.errors import EmptyContent, MissingCredential
from deeptag.llm import SuggestionClient
from deeptag.models import Severity
from deeptag.tagger import TagCommands, register_commands, suggest

from conftest import completion, make_response


def notifications(document, *severities):
    return [m for s, m in document.messages if s in severities]


def failures(document):
    return notifications(document, Severity.WARNING, Severity.ERROR)


@pytest.fixture
def registry(client):
    registry = CommandRegistry()
    register_commands(registry, client)
    return registry


@pytest.fixture
def context_for(document, config, reference_date):
    def build(node_id=None, **kwargs):
        context = CommandContext.from_host(document, config, node_id=node_id, today=reference_date)
        for key, value in kwargs.items():
            setattr(context, key, value)
        return context
    return build


class TestRegistration:
    """Test register_commands()."""

    def test_registers_three_commands(self):
        registry = CommandRegistry()
        commands = register_commands(registry)

        assert isinstance(commands, TagCommands)
        assert [c.name for c in registry.list_commands()] == ["page-tags", "selection-tags", "tags"]


class TestSuggest:
    """Test the suggest() pipeline entry."""

    def test_end_to_end_normalization(self, client, config, reference_date):
        """Reply "AI, Tech, AI" becomes ["AI", "TECH"]."""
        client.session.post.return_value = make_response(json_data=completion("AI, Tech, AI"))

        result = suggest("Some content", config, reference_date, client)
        assert result.tags == ["AI", "TECH"]

    def test_empty_content_short_circuits(self, client, config):
        result = suggest("   ", config, client=client)

        assert isinstance(result.error, EmptyContent)
        client.session.post.assert_not_called()

    def test_builds_client_from_config(self, config, monkeypatch):
        post = MagicMock(return_value=make_response(json_data=completion("X")))
        monkeypatch.setattr(requests.Session, "post", post)

        result = suggest("content", config, date(2025, 1, 1))
        assert result.tags == ["X"]


class TestBlockCommand:
    """Test the /tags command."""

    def test_creates_tags_child(self, registry, document, context_for, client):
        tags = registry.invoke("tags", context_for("b1"))

        assert tags == ["AI", "TECH"]
        assert document.find_node("b1").children[-1].text == "tags:: AI, TECH"
        assert document.messages[0] == (Severity.INFO, "Generating tags...")
        assert notifications(document, Severity.SUCCESS) == ["Tags added in a new child block."]

    def test_updates_existing_tags_child(self, registry, document, context_for):
        registry.invoke("tags", context_for("b2"))

        node = document.find_node("b2")
        assert [c.text for c in node.children] == ["tags:: AI, TECH"]
        assert notifications(document, Severity.SUCCESS) == ["Tags updated in the child block."]

    def test_properties_not_sent(self, registry, client, context_for):
        registry.invoke("tags", context_for("b1"))

        prompt = client.session.post.call_args[1]["json"]["messages"][0]["content"]
        assert "Notes on neural networks" in prompt
        assert "id:: 64f0" not in prompt

    def test_quotes_escaped_in_prompt(self, registry, client, context_for):
        registry.invoke("tags", context_for("b2"))

        prompt = client.session.post.call_args[1]["json"]["messages"][0]["content"]
        assert 'Meeting about the \\"roadmap\\"' in prompt

    def test_missing_credential(self, registry, document, client, context_for):
        context = context_for("b1", config=DeeptagConfig(api_credential=""))

        assert registry.invoke("tags", context) is None
        client.session.post.assert_not_called()
        assert failures(document) == [MissingCredential.default_message]
        assert len(document.find_node("b1").children) == 1

    def test_only_properties(self, registry, document, client, context_for):
        assert registry.invoke("tags", context_for("b3")) is None

        client.session.post.assert_not_called()
        assert len(failures(document)) == 1
        assert document.messages[-1][0] == Severity.WARNING
        assert document.find_node("b3").children == []

    def test_unknown_node(self, registry, document, client, context_for):
        assert registry.invoke("tags", context_for("nope")) is None
        client.session.post.assert_not_called()
        assert failures(document) == ["Could not read the current block."]

    def test_api_error_single_notification(self, registry, document, client, context_for):
        client.session.post.return_value = make_response(
            401, {"error": {"message": "Invalid API key"}}, reason="Unauthorized"
        )

        assert registry.invoke("tags", context_for("b1")) is None

        errors = failures(document)
        assert len(errors) == 1
        assert "Invalid API key" in errors[0]
        assert document.messages[-1][0] == Severity.ERROR
        assert len(document.find_node("b1").children) == 1

    def test_transport_error(self, registry, document, client, context_for):
        client.session.post.side_effect = requests.exceptions.ConnectionError("reset by peer")

        assert registry.invoke("tags", context_for("b1")) is None
        assert document.messages[-1][0] == Severity.ERROR
        assert "reset by peer" in document.messages[-1][1]

    def test_malformed_response(self, registry, document, client, context_for):
        client.session.post.return_value = make_response(json_data={"unexpected": True})

        assert registry.invoke("tags", context_for("b1")) is None
        assert document.messages[-1][0] == Severity.WARNING

    def test_no_usable_tags(self, registry, document, client, context_for):
        client.session.post.return_value = make_response(json_data=completion(", ,"))

        assert registry.invoke("tags", context_for("b2")) is None
        assert document.messages[-1][0] == Severity.WARNING
        assert document.find_node("b2").children[0].text == "TAGS:: OLD"


class TestPageCommand:
    """Test the /page-tags command."""

    def test_appends_page_tags_node(self, registry, document, client, context_for):
        tags = registry.invoke("page-tags", context_for())

        assert tags == ["AI", "TECH"]
        nodes = document.get_page("Journal").nodes
        assert nodes[-1].text == "Page Tags:: AI, TECH"
        assert notifications(document, Severity.SUCCESS) == ["Page tags added to Journal."]

    def test_page_content_filtered(self, registry, client, context_for):
        registry.invoke("page-tags", context_for())

        prompt = client.session.post.call_args[1]["json"]["messages"][0]["content"]
        assert "Last thoughts" in prompt
        assert "PREVIOUS" not in prompt
        assert "A child block" not in prompt

    def test_empty_page(self, registry, document, client, context_for):
        assert registry.invoke("page-tags", context_for(page="Empty")) is None
        client.session.post.assert_not_called()
        assert document.get_page("Empty").nodes == []

    def test_no_page(self, registry, document, client, context_for):
        document.current_page = None
        assert registry.invoke("page-tags", context_for(page=None)) is None
        client.session.post.assert_not_called()

    def test_truncation_warns(self, registry, document, client, context_for, config):
        config.page_char_limit = 10
        tags = registry.invoke("page-tags", context_for())

        assert tags == ["AI", "TECH"]
        warnings = notifications(document, Severity.WARNING)
        assert len(warnings) == 1
        assert "10 characters" in warnings[0]


class TestSelectionCommand:
    """Test the /selection-tags command."""

    def test_appends_selection_tags_sibling(self, registry, document, context_for):
        tags = registry.invoke("selection-tags", context_for("b1", selection="  picked text  "))

        assert tags == ["AI", "TECH"]
        nodes = document.get_page("Journal").nodes
        assert nodes[1].text == "Selection Tags:: AI, TECH"
        assert notifications(document, Severity.SUCCESS) == ["Selection tags added."]

    def test_selection_sent_unfiltered(self, registry, client, context_for):
        registry.invoke("selection-tags", context_for("b1", selection="key:: value text"))

        prompt = client.session.post.call_args[1]["json"]["messages"][0]["content"]
        assert "key:: value text" in prompt

    def test_reads_selection_from_host(self, registry, document, context_for):
        document.selection = "host selection"
        assert registry.invoke("selection-tags", context_for("b1")) == ["AI", "TECH"]

    def test_no_selection(self, registry, document, client, context_for):
        assert registry.invoke("selection-tags", context_for("b1")) is None
        client.session.post.assert_not_called()
        assert failures(document) == ["No text selected."]

    def test_no_node(self, registry, document, client, context_for):
        assert registry.invoke("selection-tags", context_for(None, selection="text")) is None
        client.session.post.assert_not_called()

    def test_unknown_node_checked_before_api_call(self, registry, document, client, context_for):
        """A node the host cannot resolve stops the command before any request."""
        before = [n.identifier for n in document.get_page("Journal").nodes]

        assert registry.invoke("selection-tags", context_for("missing", selection="Some text")) is None

        client.session.post.assert_not_called()
        assert failures(document) == ["Could not read the current block."]
        assert document.messages[-1][0] == Severity.WARNING
        assert [n.identifier for n in document.get_page("Journal").nodes] == before
