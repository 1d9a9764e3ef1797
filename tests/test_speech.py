from __future__ import annotations

import json

import pytest

from tests.stubs.google_stub import StubGoogleApis
from vision_gateway.config import settings
from vision_gateway.errors import EmptyInputError, SynthesisError
from vision_gateway.services.speech import decode_audio_content, synthesize_speech


def test_decode_audio_content_accepts_url_safe_alphabet():
    # b"\xfb\xff\xbf" == "+/+/" в стандартном base64
    assert decode_audio_content("-_-_") == b"\xfb\xff\xbf"
    assert decode_audio_content("+/+/") == b"\xfb\xff\xbf"


def test_decode_audio_content_restores_padding():
    assert decode_audio_content("-_8") == b"\xfb\xff"


def test_decode_audio_content_rejects_garbage():
    with pytest.raises(SynthesisError):
        decode_audio_content("***")


@pytest.mark.asyncio
@pytest.mark.parametrize("text", ["", "   ", None])
async def test_empty_text_is_rejected_before_any_request(text):
    stub = StubGoogleApis()
    async with stub.client() as client:
        with pytest.raises(EmptyInputError):
            await synthesize_speech(client, stub.access_token, text)
    assert stub.requests == []


@pytest.mark.asyncio
async def test_synthesize_speech_sends_voice_and_decodes_audio():
    stub = StubGoogleApis(audio_content="SUQzBAAAAAAA")

    async with stub.client() as client:
        audio = await synthesize_speech(client, stub.access_token, "Hello world")

    assert audio.content == b"ID3\x04\x00\x00\x00\x00\x00"
    assert audio.media_type == "audio/mpeg"

    (request,) = stub.requests_to(settings.tts_url)
    assert json.loads(request.content) == {
        "input": {"text": "Hello world"},
        "voice": {
            "languageCode": "en-US",
            "name": "en-US-Neural2-F",
            "ssmlGender": "FEMALE",
        },
        "audioConfig": {"audioEncoding": "MP3"},
    }


@pytest.mark.asyncio
async def test_synthesize_speech_fails_without_audio_payload():
    stub = StubGoogleApis(audio_content=None)
    async with stub.client() as client:
        with pytest.raises(SynthesisError):
            await synthesize_speech(client, stub.access_token, "Hello")


@pytest.mark.asyncio
async def test_synthesize_speech_fails_on_error_status():
    stub = StubGoogleApis(tts_status=429)
    async with stub.client() as client:
        with pytest.raises(SynthesisError):
            await synthesize_speech(client, stub.access_token, "Hello")
