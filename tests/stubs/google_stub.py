"""Google OAuth / Vision / Text-to-Speech stubs served through httpx.MockTransport."""

from __future__ import annotations

import asyncio
import base64
import json
from typing import Dict, List, Optional, Sequence, Tuple
from urllib.parse import parse_qs

import httpx

from tests.stubs.pdf_engine_stub import page_index_from_png
from vision_gateway.config import settings

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


class StubGoogleApis:
    """
    Routes requests by URL:
        token_url  -> {"access_token": ...}
        vision_url -> text per image (page texts for PNGs, uri_texts for imageUri)
        tts_url    -> {"audioContent": ...}
        documents  -> HEAD/GET of the document being recognised
    """

    def __init__(
        self,
        *,
        access_token: str = "ya29.stub-token",
        token_status: int = 200,
        page_texts: Sequence[str] = (),
        page_delays: Sequence[float] = (),
        failing_pages: Sequence[int] = (),
        inline_text: str = "",
        uri_texts: Optional[Dict[str, str]] = None,
        documents: Optional[Dict[str, Tuple[Optional[str], bytes]]] = None,
        audio_content: Optional[str] = "SUQzBAAAAAAA",
        tts_status: int = 200,
    ) -> None:
        self.access_token = access_token
        self.token_status = token_status
        self.page_texts = list(page_texts)
        self.page_delays = list(page_delays)
        self.failing_pages = set(failing_pages)
        self.inline_text = inline_text
        self.uri_texts = uri_texts or {}
        self.documents = documents or {}
        self.audio_content = audio_content
        self.tts_status = tts_status
        self.requests: List[httpx.Request] = []
        self.completed_pages: List[int] = []

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))

    def requests_to(self, url: str) -> List[httpx.Request]:
        return [r for r in self.requests if str(r.url) == url]

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url)

        if url == settings.token_url:
            return self._token(request)
        if url == settings.vision_url:
            return await self._vision(request)
        if url == settings.tts_url:
            return self._tts(request)
        if url in self.documents:
            return self._document(request)
        return httpx.Response(404, text="not found")

    def _token(self, request: httpx.Request) -> httpx.Response:
        if self.token_status != 200:
            return httpx.Response(self.token_status, json={"error": "invalid_grant"})
        form = parse_qs(request.content.decode("ascii"))
        assert form["grant_type"] == ["urn:ietf:params:oauth:grant-type:jwt-bearer"]
        assert form["assertion"][0].count(".") == 2
        return httpx.Response(
            200,
            json={"access_token": self.access_token, "expires_in": 3599, "token_type": "Bearer"},
        )

    async def _vision(self, request: httpx.Request) -> httpx.Response:
        assert request.headers["authorization"] == f"Bearer {self.access_token}"
        body = json.loads(request.content)
        image = body["requests"][0]["image"]
        assert body["requests"][0]["features"] == [{"type": "TEXT_DETECTION"}]

        if "source" in image:
            text = self.uri_texts.get(image["source"]["imageUri"], "")
            return _vision_response(text)

        content = base64.b64decode(image["content"])
        if not content.startswith(PNG_SIGNATURE):
            return _vision_response(self.inline_text)

        index = page_index_from_png(content)
        if index < len(self.page_delays):
            await asyncio.sleep(self.page_delays[index])
        self.completed_pages.append(index)

        if index in self.failing_pages:
            return httpx.Response(500, json={"error": {"message": "internal"}})
        text = self.page_texts[index] if index < len(self.page_texts) else ""
        return _vision_response(text)

    def _tts(self, request: httpx.Request) -> httpx.Response:
        assert request.headers["authorization"] == f"Bearer {self.access_token}"
        if self.tts_status != 200:
            return httpx.Response(self.tts_status, json={"error": {"message": "quota"}})
        payload = {} if self.audio_content is None else {"audioContent": self.audio_content}
        return httpx.Response(200, json=payload)

    def _document(self, request: httpx.Request) -> httpx.Response:
        content_type, content = self.documents[str(request.url)]
        headers = {"content-type": content_type} if content_type else {}
        if request.method == "HEAD":
            return httpx.Response(200, headers=headers)
        return httpx.Response(200, headers=headers, content=content)


def _vision_response(text: str) -> httpx.Response:
    if not text:
        return httpx.Response(200, json={"responses": [{}]})
    return httpx.Response(
        200,
        json={"responses": [{"fullTextAnnotation": {"text": text}}]},
    )
