"""Claude API client used for blog post generation."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from blogdesk.config import (
    MAX_TOKENS_DEFAULT,
    MODEL_DEFAULT,
    REQUEST_TIMEOUT_SECONDS,
    Settings,
)
from blogdesk.errors import GenerationError

logger = logging.getLogger(__name__)


@dataclass
class LLMResponse:
    content: str
    input_tokens: int
    output_tokens: int
    model: str


def map_api_error(error: Exception) -> GenerationError:
    """Translate an anthropic SDK exception into a user-facing GenerationError."""
    import anthropic

    if isinstance(error, anthropic.APITimeoutError):
        logger.error("Claude API: request timeout")
        return GenerationError("Request timed out - the content may be too complex", retryable=True)
    if isinstance(error, anthropic.APIConnectionError):
        logger.error("Claude API: request failed - %s", error)
        return GenerationError("Failed to connect to Claude API", retryable=True)
    if not isinstance(error, anthropic.APIStatusError):
        logger.error("Claude API: unexpected failure - %s", error)
        return GenerationError("Failed to connect to Claude API")

    status = error.status_code
    if status == 400:
        logger.error("Claude API: bad request - %s", error.message)
        return GenerationError(f"Invalid request: {error.message}")
    if status == 401:
        logger.error("Claude API: authentication failed - invalid API key")
        return GenerationError("Authentication failed - check API key")
    if status == 429:
        logger.warning("Claude API: rate limited - %s", error.message)
        return GenerationError("Rate limited - please try again later", retryable=True)
    if status == 529:
        logger.warning("Claude API: overloaded")
        return GenerationError("Claude API is overloaded - please try again later", retryable=True)
    if status >= 500:
        logger.error("Claude API: server error (status %s)", status)
        return GenerationError("Claude API server error - please try again", retryable=True)
    logger.error("Claude API: unexpected status %s: %s", status, error.message)
    return GenerationError(f"Unexpected API error (status {status})")


class AnthropicAPIClient:
    """Direct Anthropic API client using the anthropic Python SDK."""

    def __init__(
        self,
        api_key: str,
        model: str = MODEL_DEFAULT,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
    ):
        import anthropic

        # Retries are handled by complete_with_retry
        self.client = anthropic.Anthropic(api_key=api_key, timeout=timeout, max_retries=0)
        self.model = model

    def complete(
        self, system: str, user: str, max_tokens: int = MAX_TOKENS_DEFAULT
    ) -> LLMResponse:
        """Send one user message. Raises GenerationError on any API failure."""
        import anthropic

        try:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=max_tokens,
                system=system,
                messages=[{"role": "user", "content": user}],
            )
        except anthropic.APIError as e:
            raise map_api_error(e) from e

        text_blocks = [b.text for b in response.content if getattr(b, "type", "text") == "text"]
        if not text_blocks:
            logger.error("Claude API: unexpected response structure: %r", response.content)
            raise GenerationError("Unexpected response format from Claude")

        return LLMResponse(
            content=text_blocks[0],
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
            model=self.model,
        )


class CallbackClient:
    """Client that delegates to a host-provided function.

    The callback takes ``(system, user)`` and returns the completion text.
    """

    def __init__(self, callback, model: str = MODEL_DEFAULT):
        self.callback = callback
        self.model = model

    def complete(
        self, system: str, user: str, max_tokens: int = MAX_TOKENS_DEFAULT
    ) -> LLMResponse:
        content = self.callback(system, user)
        return LLMResponse(
            content=content,
            input_tokens=0,
            output_tokens=0,
            model=self.model,
        )


def create_client(settings: Settings) -> AnthropicAPIClient:
    """Build the API client from settings.

    Raises GenerationError when no API key is configured.
    """
    if not settings.anthropic_configured:
        raise GenerationError("Anthropic API key not configured")
    return AnthropicAPIClient(settings.anthropic_api_key, settings.anthropic_model)


def complete_with_retry(
    client,
    system: str,
    user: str,
    max_tokens: int = MAX_TOKENS_DEFAULT,
    retries: int = 3,
    backoff: float = 2.0,
) -> LLMResponse:
    """Call the LLM with exponential backoff retries.

    Only retryable GenerationErrors are retried; others propagate at once.
    """
    for attempt in range(retries):
        try:
            return client.complete(system, user, max_tokens)
        except GenerationError as e:
            if not e.retryable or attempt == retries - 1:
                raise
            wait = backoff ** attempt
            logger.warning("LLM call failed (attempt %d): %s. Retrying in %ss...", attempt + 1, e, wait)
            time.sleep(wait)
