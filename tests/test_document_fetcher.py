from __future__ import annotations

import httpx
import pytest

from vision_gateway.errors import DocumentFetchError, DocumentTooLargeError
from vision_gateway.services.document_fetcher import download_document, probe_content_type

URL = "https://files.example.com/doc.pdf"


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_probe_uses_head_and_returns_content_type():
    methods = []

    def handler(request: httpx.Request) -> httpx.Response:
        methods.append(request.method)
        return httpx.Response(200, headers={"content-type": "application/pdf"})

    async with _client(handler) as client:
        assert await probe_content_type(client, URL) == "application/pdf"
    assert methods == ["HEAD"]


@pytest.mark.asyncio
async def test_probe_returns_none_without_header():
    async with _client(lambda request: httpx.Response(200)) as client:
        assert await probe_content_type(client, URL) is None


@pytest.mark.asyncio
async def test_probe_fails_on_missing_document():
    async with _client(lambda request: httpx.Response(404)) as client:
        with pytest.raises(DocumentFetchError):
            await probe_content_type(client, URL)


@pytest.mark.asyncio
async def test_download_enforces_size_limit():
    async with _client(lambda request: httpx.Response(200, content=b"x" * 11)) as client:
        assert await download_document(client, URL, max_bytes=11) == b"x" * 11
        with pytest.raises(DocumentTooLargeError):
            await download_document(client, URL, max_bytes=10)


@pytest.mark.asyncio
async def test_download_wraps_transport_errors():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    async with _client(handler) as client:
        with pytest.raises(DocumentFetchError):
            await download_document(client, URL)
