"""Optional rewriting of extracted text through Claude before PDF synthesis.

Rewriting is best effort: when it is disabled, unconfigured, or the remote
call keeps failing, the original text is used unchanged.
"""

import logging
from typing import cast

from anthropic import APIError, AnthropicError, AsyncAnthropic
from anthropic.types import TextBlock as AnthropicTextBlock
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from docforge.config import settings
from docforge.exceptions import RewriteError

logger = logging.getLogger(__name__)


# Singleton client instance
_client: AsyncAnthropic | None = None


def get_client() -> AsyncAnthropic:
    """
    Get or create the singleton AsyncAnthropic client.

    Returns:
        The shared AsyncAnthropic client instance.
    """
    global _client
    if _client is None:
        _client = AsyncAnthropic(api_key=settings.anthropic_api_key)
    return _client


async def close_client() -> None:
    """Close the singleton client. Called on application shutdown."""
    global _client
    if _client is not None:
        await _client.close()
        _client = None


class TextRewriter:
    """Rewrites document text for clarity while preserving its paragraph structure."""

    REWRITE_PROMPT = """Rewrite the document below so it reads clearly and professionally.

Rules:
- Keep every paragraph, in the same order, separated by a blank line
- Keep headings as headings and list items (lines starting with "•" or a number) as list items
- Do not add commentary, a preamble, or any text that is not part of the document
- Keep names, figures, and dates exactly as written

Document name: {source_name}

<document>
{text}
</document>"""

    def __init__(self, model: str | None = None, max_tokens: int | None = None):
        self.model = model or settings.rewrite_model
        self.max_tokens = max_tokens or settings.rewrite_max_tokens

    @property
    def available(self) -> bool:
        return bool(settings.anthropic_api_key)

    async def rewrite(self, text: str, source_name: str) -> str:
        """
        Rewrite text through Claude.

        Raises:
            RewriteError: If the SDK call fails (after retries for API errors) or
                returns no text
        """
        try:
            rewritten = await self._request_rewrite(text, source_name)
        except AnthropicError as e:
            raise RewriteError(f"Rewrite request failed for {source_name}: {e}") from e

        if not rewritten.strip():
            raise RewriteError(f"Rewrite returned no text for {source_name}")
        return rewritten.strip()

    @retry(
        retry=retry_if_exception_type(APIError),
        wait=wait_exponential(multiplier=1, min=2, max=30),
        stop=stop_after_attempt(3),
        reraise=True,
    )
    async def _request_rewrite(self, text: str, source_name: str) -> str:
        client = get_client()
        logger.info(f"Rewriting {len(text)} chars from {source_name} with {self.model}")

        response = await client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            messages=[
                {
                    "role": "user",
                    "content": self.REWRITE_PROMPT.format(source_name=source_name, text=text),
                }
            ],
        )

        parts = [
            cast(AnthropicTextBlock, block).text
            for block in response.content
            if block.type == "text"
        ]
        return "".join(parts)


async def rewrite_text(text: str, source_name: str, rewriter: TextRewriter | None = None) -> str:
    """
    Rewrite text, falling back to the input on any rewriting failure.

    Args:
        text: Extracted plain text
        source_name: Declared file name, passed to the model as context
        rewriter: Rewriter to use (a default one when None)

    Returns:
        The rewritten text, or the original text when rewriting is not possible
    """
    if not text.strip():
        return text

    rewriter = rewriter or TextRewriter()
    if not rewriter.available:
        logger.warning("Rewrite requested but no Anthropic API key is configured")
        return text

    try:
        return await rewriter.rewrite(text, source_name)
    except RewriteError as e:
        logger.warning(f"Using original text: {e}", extra={"source_name": source_name})
        return text
