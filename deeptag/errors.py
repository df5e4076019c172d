"""
Error taxonomy for the tag-suggestion pipeline.

Every failure of a command invocation is one of these. Each carries the
severity of the single notification shown to the user for it.
"""
from deeptag.models import Severity


class SuggestionError(Exception):
    """Base exception for tag-suggestion failures."""
    severity = Severity.ERROR
    default_message = "Tag suggestion failed."

    def __init__(self, message: str = None):
        super().__init__(message or self.default_message)

    @property
    def user_message(self) -> str:
        return str(self)


class MissingCredential(SuggestionError):
    """No API credential is configured."""
    default_message = "API key not configured. Add it in the plugin settings."


class EmptyContent(SuggestionError):
    """Nothing is left to analyze once properties and tag lines are removed."""
    severity = Severity.WARNING
    default_message = "Nothing to analyze: the content is empty or only holds properties."


class NodeNotFound(SuggestionError):
    """The host could not resolve the node the command was invoked on."""
    severity = Severity.WARNING
    default_message = "Could not read the current block."


class ApiError(SuggestionError):
    """The provider answered with a non-success HTTP status."""

    def __init__(self, status: int, message: str):
        self.status = status
        self.message = message
        super().__init__(f"API error ({status}): {message}")


class MalformedResponse(SuggestionError):
    """The provider answered successfully but not with the expected JSON shape."""
    severity = Severity.WARNING
    default_message = "Unexpected response format from the suggestion provider."


class TransportError(SuggestionError):
    """The request never completed (DNS, TLS, timeout, connection reset)."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(f"Connection error: {message}")


class NoUsableTags(SuggestionError):
    """The reply contained no usable tag."""
    severity = Severity.WARNING
    default_message = "No tags could be generated for this content."
