import pytest
from datetime import date
from unittest.mock import MagicMock

from rich.console import Console

from deeptag import config as config_module
from deeptag.config import DeeptagConfig
from deeptag.document import Document
from deeptag.llm import SuggestionClient


@pytest.fixture(autouse=True)
def reset_global_config(monkeypatch):
    """Never leak the cached global config between tests."""
    monkeypatch.setattr(config_module, "_config", None)
    for key in ("DEEPTAG_API_CREDENTIAL", "DEEPTAG_MODEL", "DEEPTAG_ENDPOINT",
                "DEEPTAG_TIMEOUT", "DEEPTAG_MAX_TOKENS", "DEEPTAG_TEMPERATURE"):
        monkeypatch.delenv(key, raising=False)
    yield


@pytest.fixture
def reference_date():
    return date(2025, 6, 10)


@pytest.fixture
def config():
    """Configuration with a credential set."""
    return DeeptagConfig(api_credential="sk-test")


@pytest.fixture
def sample_data():
    """Sample document data for testing."""
    return {
        "pages": [
            {
                "name": "Journal",
                "nodes": [
                    {
                        "id": "b1",
                        "text": "Notes on neural networks\nid:: 64f0",
                        "children": [
                            {"id": "b1c1", "text": "A child block", "children": []},
                        ],
                    },
                    {
                        "id": "b2",
                        "text": "Meeting about the \"roadmap\"",
                        "children": [
                            {"id": "b2c1", "text": "TAGS:: OLD", "children": []},
                        ],
                    },
                    {"id": "b3", "text": "due:: 2025-01-01", "children": []},
                    {"id": "b4", "text": "tags:: PREVIOUS\nLast thoughts", "children": []},
                ],
            },
            {"name": "Empty", "nodes": []},
        ]
    }


@pytest.fixture
def document(sample_data):
    """Document host with output captured instead of printed."""
    return Document.from_dict(sample_data, console=Console(file=None, quiet=True))


def make_response(status_code=200, json_data=None, reason="OK", json_error=None):
    """Build a mock requests.Response."""
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    response.reason = reason
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = json_data
    return response


def completion(content):
    """Chat-completion body holding ``content``."""
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


@pytest.fixture
def client(config):
    """SuggestionClient whose session.post is a mock."""
    client = SuggestionClient(config)
    client.session.post = MagicMock(return_value=make_response(json_data=completion("AI, Tech")))
    return client
