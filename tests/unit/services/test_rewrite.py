"""Tests for optional text rewriting."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from anthropic import APIError, AnthropicError

from docforge.config import settings
from docforge.exceptions import RewriteError
from docforge.services.rewrite import TextRewriter, rewrite_text


def text_response(text: str) -> MagicMock:
    block = MagicMock()
    block.type = "text"
    block.text = text
    response = MagicMock()
    response.content = [block]
    return response


def api_error() -> APIError:
    request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
    return APIError("overloaded", request, body=None)


@pytest.fixture
def api_key():
    with patch.object(settings, "anthropic_api_key", "test-anthropic-key"):
        yield


class TestTextRewriter:
    """Tests for the Claude-backed rewriter."""

    @pytest.mark.asyncio
    async def test_rewrite_returns_model_text(self, api_key):
        """The model's text reply is returned trimmed."""
        with patch("docforge.services.rewrite.get_client") as mock_get_client:
            mock_client = MagicMock()
            mock_client.messages.create = AsyncMock(return_value=text_response("  Clean text \n"))
            mock_get_client.return_value = mock_client

            result = await TextRewriter(model="test-model").rewrite("messy text", "notes.txt")

        assert result == "Clean text"
        call_kwargs = mock_client.messages.create.call_args.kwargs
        assert call_kwargs["model"] == "test-model"
        assert "messy text" in call_kwargs["messages"][0]["content"]
        assert "notes.txt" in call_kwargs["messages"][0]["content"]

    @pytest.mark.asyncio
    async def test_empty_reply_is_an_error(self, api_key):
        """A reply without text raises RewriteError."""
        with patch("docforge.services.rewrite.get_client") as mock_get_client:
            mock_client = MagicMock()
            mock_client.messages.create = AsyncMock(return_value=text_response("   "))
            mock_get_client.return_value = mock_client

            with pytest.raises(RewriteError):
                await TextRewriter().rewrite("text", "notes.txt")

    @pytest.mark.asyncio
    async def test_api_error_is_wrapped(self, api_key):
        """API failures surface as RewriteError."""
        with patch.object(
            TextRewriter, "_request_rewrite", AsyncMock(side_effect=api_error())
        ):
            with pytest.raises(RewriteError):
                await TextRewriter().rewrite("text", "notes.txt")

    @pytest.mark.asyncio
    async def test_sdk_error_is_wrapped(self, api_key):
        """Non-API SDK failures also surface as RewriteError."""
        with patch.object(
            TextRewriter,
            "_request_rewrite",
            AsyncMock(side_effect=AnthropicError("Could not resolve authentication method")),
        ):
            with pytest.raises(RewriteError):
                await TextRewriter().rewrite("text", "notes.txt")

    def test_available_requires_api_key(self):
        """Without an API key the rewriter is unavailable."""
        with patch.object(settings, "anthropic_api_key", ""):
            assert not TextRewriter().available


class TestRewriteText:
    """Tests for the never-failing rewrite entry point."""

    @pytest.mark.asyncio
    async def test_falls_back_without_api_key(self):
        """Without credentials the original text is returned."""
        with patch.object(settings, "anthropic_api_key", ""):
            assert await rewrite_text("original", "notes.txt") == "original"

    @pytest.mark.asyncio
    async def test_falls_back_on_failure(self, api_key):
        """A failing rewrite returns the original text."""
        rewriter = TextRewriter()
        with patch.object(rewriter, "rewrite", AsyncMock(side_effect=RewriteError("boom"))):
            assert await rewrite_text("original", "notes.txt", rewriter) == "original"

    @pytest.mark.asyncio
    async def test_uses_rewritten_text(self, api_key):
        """A successful rewrite replaces the text."""
        rewriter = TextRewriter()
        with patch.object(rewriter, "rewrite", AsyncMock(return_value="better")):
            assert await rewrite_text("original", "notes.txt", rewriter) == "better"

    @pytest.mark.asyncio
    async def test_blank_text_is_not_sent(self, api_key):
        """Blank text is returned without calling the model."""
        rewriter = TextRewriter()
        with patch.object(rewriter, "rewrite", AsyncMock()) as mock_rewrite:
            assert await rewrite_text("  ", "notes.txt", rewriter) == "  "

        mock_rewrite.assert_not_called()

    @pytest.mark.asyncio
    async def test_falls_back_on_sdk_error(self, api_key):
        """An SDK error raised by the client keeps the original text."""
        with patch("docforge.services.rewrite.get_client") as mock_get_client:
            mock_client = MagicMock()
            mock_client.messages.create = AsyncMock(side_effect=AnthropicError("stream closed"))
            mock_get_client.return_value = mock_client

            assert await rewrite_text("original", "notes.txt") == "original"
