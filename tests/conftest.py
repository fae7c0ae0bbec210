"""Shared fixtures for the docforge test suite."""

import base64
import io
import os
import zipfile

import pytest

# Override settings before importing app modules
os.environ["ANTHROPIC_API_KEY"] = ""
os.environ["REWRITE_ENABLED"] = "false"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["DEFAULT_LOGO_URL"] = ""
os.environ["CORS_ORIGINS"] = '["http://localhost:3000"]'

W_NAMESPACE = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"


def make_docx(body_xml: str, compression: int = zipfile.ZIP_DEFLATED) -> bytes:
    """Build a minimal DOCX container whose document body is body_xml."""
    document = (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        f'<w:document xmlns:w="{W_NAMESPACE}"><w:body>{body_xml}</w:body></w:document>'
    )
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=compression) as archive:
        archive.writestr("[Content_Types].xml", "<Types/>")
        archive.writestr("word/document.xml", document)
    return buffer.getvalue()


def paragraph(text: str, bullet: bool = False) -> str:
    """A w:p element with a single run."""
    properties = (
        '<w:pPr><w:numPr><w:ilvl w:val="0"/><w:numId w:val="1"/></w:numPr></w:pPr>'
        if bullet
        else ""
    )
    return f"<w:p>{properties}<w:r><w:t xml:space=\"preserve\">{text}</w:t></w:r></w:p>"


def encode_upload(content: bytes) -> str:
    return base64.b64encode(content).decode("ascii")


@pytest.fixture
def client():
    """Test client for the FastAPI app."""
    from fastapi.testclient import TestClient

    from main import app

    return TestClient(app)
