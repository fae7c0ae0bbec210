"""Tests for font lookup and logo fetching."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from docforge.services.assets import (
    LogoFetchError,
    download_logo,
    fetch_logo,
    list_font_files,
    load_font_file,
)

LOGO_URL = "https://example.com/logo.png"


def logo_response(status_code: int = 200, content: bytes = b"\x89PNG", headers=None):
    return httpx.Response(
        status_code,
        content=content,
        headers=headers or {"content-type": "image/png"},
        request=httpx.Request("GET", LOGO_URL),
    )


@pytest.fixture
def mock_http():
    with patch("docforge.services.assets._get_http_client") as mock_get_client:
        client = MagicMock()
        mock_get_client.return_value = client
        yield client


class TestFontFiles:
    """Tests for the static font directory."""

    @pytest.fixture
    def fonts_dir(self, tmp_path):
        (tmp_path / "b.TTF").write_bytes(b"ttf")
        (tmp_path / "a.otf").write_bytes(b"otf")
        (tmp_path / "readme.txt").write_text("not a font")
        (tmp_path / "nested.ttf").mkdir()
        return tmp_path

    def test_lists_font_files_sorted(self, fonts_dir):
        """Only .ttf/.otf files are listed, sorted case-insensitively."""
        fonts = list_font_files(fonts_dir)

        assert [font.name for font in fonts] == ["a.otf", "b.TTF"]
        assert fonts[0].url == "/fonts/a.otf"

    def test_missing_directory_is_empty(self, tmp_path):
        """A missing font directory yields an empty list."""
        assert list_font_files(tmp_path / "missing") == []

    def test_load_font_file(self, fonts_dir):
        """A listed font can be read back."""
        assert load_font_file(fonts_dir, "a.otf") == b"otf"

    @pytest.mark.parametrize("name", ["../a.otf", "sub/a.otf", "readme.txt", "missing.ttf"])
    def test_load_rejects_other_paths(self, fonts_dir, name):
        """Traversal, nested paths, non-fonts and missing files are not found."""
        with pytest.raises(FileNotFoundError):
            load_font_file(fonts_dir, name)


class TestDownloadLogo:
    """Tests for logo fetching."""

    @pytest.mark.asyncio
    async def test_returns_bytes_and_content_type(self, mock_http):
        """The body and media type of the response are returned."""
        mock_http.get = AsyncMock(
            return_value=logo_response(headers={"content-type": "image/png; charset=binary"})
        )

        logo = await download_logo(LOGO_URL)

        assert logo.data == b"\x89PNG"
        assert logo.content_type == "image/png"
        mock_http.get.assert_awaited_once_with(LOGO_URL)

    @pytest.mark.asyncio
    async def test_error_status(self, mock_http):
        """Error responses raise LogoFetchError."""
        mock_http.get = AsyncMock(return_value=logo_response(status_code=404))

        with pytest.raises(LogoFetchError):
            await download_logo(LOGO_URL)

    @pytest.mark.asyncio
    async def test_size_limit(self, mock_http):
        """Bodies over the size cap are rejected."""
        mock_http.get = AsyncMock(return_value=logo_response(content=b"x" * 100))

        with pytest.raises(LogoFetchError):
            await download_logo(LOGO_URL, max_size=10)

    @pytest.mark.asyncio
    async def test_rejects_non_http_url(self, mock_http):
        """Only http(s) URLs are fetched."""
        with pytest.raises(LogoFetchError):
            await download_logo("file:///etc/passwd")

        mock_http.get.assert_not_called()

    @pytest.mark.asyncio
    async def test_malformed_url(self, mock_http):
        """URLs httpx cannot parse raise LogoFetchError."""
        mock_http.get = AsyncMock(side_effect=httpx.InvalidURL("Invalid port: ':1'"))

        with pytest.raises(LogoFetchError):
            await download_logo("http://[::1")


class TestFetchLogo:
    """Tests for the fail-soft logo lookup used during synthesis."""

    @pytest.mark.asyncio
    async def test_no_url(self):
        """No URL means no logo."""
        assert await fetch_logo(None) is None
        assert await fetch_logo("") is None

    @pytest.mark.asyncio
    async def test_network_error_omits_logo(self, mock_http):
        """Connection failures are swallowed and the logo omitted."""
        mock_http.get = AsyncMock(side_effect=httpx.ConnectError("unreachable"))

        assert await fetch_logo(LOGO_URL) is None

    @pytest.mark.asyncio
    async def test_success(self, mock_http):
        """A reachable logo is returned."""
        mock_http.get = AsyncMock(return_value=logo_response())

        logo = await fetch_logo(LOGO_URL)

        assert logo.data == b"\x89PNG"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("url", ["http://[::1", "http://a\x00b/logo.png"])
    async def test_malformed_url_omits_logo(self, url):
        """A URL httpx rejects while parsing omits the logo."""
        with patch(
            "docforge.services.assets._get_http_client", return_value=httpx.AsyncClient()
        ):
            assert await fetch_logo(url) is None
