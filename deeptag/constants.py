"""
Constants for deeptag.

These are the defaults used by the suggestion pipeline. The endpoint,
model and sampling values can be overridden through the config system.
"""

# Suggestion provider
DEFAULT_ENDPOINT = "https://api.deepseek.com/v1/chat/completions"
DEFAULT_MODEL = "deepseek-chat"
DEFAULT_MAX_TOKENS = 150
DEFAULT_TEMPERATURE = 0.2

# Extraction limits
MAX_PAGE_CHARS = 15000
TRUNCATION_MARKER = "\n\n[... content truncated ...]"

# Node prefixes written into the document
TAGS_PREFIX = "tags::"
PAGE_TAGS_PREFIX = "Page Tags::"
SELECTION_TAGS_PREFIX = "Selection Tags::"
TAG_SEPARATOR = ", "

# Notification display durations (milliseconds)
PROGRESS_MESSAGE_TIMEOUT = 25000
CREDENTIAL_MESSAGE_TIMEOUT = 10000
