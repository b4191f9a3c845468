"""Tests for the FastAPI web service."""

from __future__ import annotations

from pathlib import Path

import pytest

try:
    from httpx import AsyncClient, ASGITransport
    _HAS_HTTPX = True
except ImportError:
    _HAS_HTTPX = False

from md2print.server import app

FIXTURE_DIR = Path(__file__).parent / "fixtures"
SAMPLE_MD = FIXTURE_DIR / "sample.md"

pytestmark = pytest.mark.skipif(not _HAS_HTTPX, reason="httpx not installed")


@pytest.fixture
def client():
    """Create an async test client."""
    transport = ASGITransport(app=app)
    return AsyncClient(transport=transport, base_url="http://test")


@pytest.mark.asyncio
class TestHealthEndpoint:

    async def test_health(self, client):
        resp = await client.get("/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "ok"
        assert "version" in data


@pytest.mark.asyncio
class TestVariantsEndpoint:

    async def test_list_variants(self, client):
        resp = await client.get("/variants")
        assert resp.status_code == 200
        assert resp.json() == {"variants": ["light", "dark"]}


@pytest.mark.asyncio
class TestConvertFileEndpoint:

    async def test_convert_file_upload(self, client):
        md_content = b"# Hello\n\nWorld"
        resp = await client.post(
            "/convert",
            files={"file": ("test.md", md_content, "text/markdown")},
            data={"theme": "light"},
        )
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/html")
        assert "<h1>Hello</h1>" in resp.text
        assert "<title>test</title>" in resp.text

    async def test_convert_sample(self, client):
        resp = await client.post(
            "/convert",
            files={"file": ("sample.md", SAMPLE_MD.read_bytes(), "text/markdown")},
            data={"theme": "dark"},
        )
        assert resp.status_code == 200
        assert '<body class="theme-dark' in resp.text

    async def test_bad_encoding(self, client):
        resp = await client.post(
            "/convert",
            files={"file": ("bad.md", b"\xff\xfe\xfa", "text/markdown")},
        )
        assert resp.status_code == 400

    async def test_unknown_variant(self, client):
        resp = await client.post(
            "/convert",
            files={"file": ("test.md", b"# x", "text/markdown")},
            data={"theme": "sepia"},
        )
        assert resp.status_code == 422


@pytest.mark.asyncio
class TestConvertTextEndpoint:

    async def test_convert_text(self, client):
        resp = await client.post(
            "/convert/text",
            data={"markdown": "> [!tip]\n> Hint\n"},
        )
        assert resp.status_code == 200
        assert 'data-callout="tip"' in resp.text

    async def test_unsupported_construct(self, client):
        resp = await client.post(
            "/convert/text",
            data={"markdown": "[a][b]\n\n[b]: https://example.com\n"},
        )
        assert resp.status_code == 422
        assert "Unsupported construct" in resp.json()["detail"]
