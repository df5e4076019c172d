"""
Suggestion client for deeptag.

Sends one chat-completion request to an OpenAI-compatible endpoint
(DeepSeek by default) and turns the reply into a tag list. A single
attempt is made; retrying is left to the caller.
"""

import logging
from datetime import date
from typing import Optional

import requests

from deeptag.config import DeeptagConfig
from deeptag.errors import (
    ApiError,
    MalformedResponse,
    MissingCredential,
    NoUsableTags,
    SuggestionError,
    TransportError,
)
from deeptag.models import SuggestionResult
from deeptag.prompts import build_prompt
from deeptag.tag_utils import normalize_tags

logger = logging.getLogger(__name__)


class SuggestionClient:
    """
    HTTP client for the chat-completion API.
    """

    def __init__(self, config: Optional[DeeptagConfig] = None,
                 session: Optional[requests.Session] = None):
        self.config = config or DeeptagConfig()
        self.session = session or requests.Session()
        self.session.headers["Content-Type"] = "application/json"

    def build_payload(self, prompt: str) -> dict:
        return {
            "model": self.config.model,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": self.config.max_tokens,
            "temperature": self.config.temperature,
        }

    def complete(self, prompt: str, credential: str) -> str:
        """
        Send ``prompt`` and return the reply text.

        Raises:
            MissingCredential: If ``credential`` is empty; nothing is sent
            ApiError: On a non-success HTTP status
            MalformedResponse: If the body lacks choices[0].message.content
            TransportError: If the request itself fails
        """
        if not credential or not credential.strip():
            raise MissingCredential()

        headers = {"Authorization": f"Bearer {credential}"}
        try:
            response = self.session.post(
                self.config.endpoint,
                json=self.build_payload(prompt),
                headers=headers,
                timeout=self.config.request_timeout
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Request to {self.config.endpoint} failed: {e}. Prompt sent: {prompt}")
            raise TransportError(str(e)) from e

        if not response.ok:
            message = self._error_message(response)
            logger.error(f"API error {response.status_code}: {message}. Prompt sent: {prompt}")
            raise ApiError(response.status_code, message)

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Response is not JSON: {e}. Prompt sent: {prompt}")
            raise MalformedResponse() from e

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            logger.error(f"Unexpected response shape: {data}. Prompt sent: {prompt}")
            raise MalformedResponse()

        if not isinstance(content, str) or not content.strip():
            logger.error(f"Empty or non-text reply: {content!r}. Prompt sent: {prompt}")
            raise MalformedResponse()

        return content

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        """Best-effort message from an error body, else the reason phrase."""
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            error = body.get("error")
            if isinstance(error, dict) and error.get("message"):
                return str(error["message"])
        return response.reason or f"HTTP {response.status_code}"

    def fetch_tags(self, content: str, credential: str,
                   today: Optional[date] = None) -> SuggestionResult:
        """
        Suggest tags for ``content``.

        Args:
            content: Extracted text to analyze
            credential: API bearer token
            today: Reference date for the calendar tags (defaults to today)

        Returns:
            SuggestionResult with the normalized tags, or the error
        """
        if not credential or not credential.strip():
            return SuggestionResult(error=MissingCredential())

        prompt = build_prompt(content, today or date.today())
        try:
            reply = self.complete(prompt, credential)
        except SuggestionError as e:
            return SuggestionResult(error=e)

        tags = normalize_tags(reply)
        logger.debug(f"Provider suggested: {tags}")
        if not tags:
            return SuggestionResult(error=NoUsableTags())
        return SuggestionResult(tags=tags)
