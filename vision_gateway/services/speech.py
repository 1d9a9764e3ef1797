"""
Синтез речи через Google Cloud Text-to-Speech.

Параметры голоса берутся из настроек (по умолчанию en-US-Neural2-F, MP3).
"""

import base64
import binascii
import logging
import time

import httpx

from vision_gateway.config import settings
from vision_gateway.errors import EmptyInputError, SynthesisError
from vision_gateway.schemas import BearerToken, SynthesizedAudio

logger = logging.getLogger(__name__)

AUDIO_MEDIA_TYPES = {
    "MP3": "audio/mpeg",
    "OGG_OPUS": "audio/ogg",
    "LINEAR16": "audio/wav",
}


def build_synthesis_request(text: str) -> dict:
    """Тело запроса text:synthesize с голосом из настроек."""
    return {
        "input": {"text": text},
        "voice": {
            "languageCode": settings.tts_language_code,
            "name": settings.tts_voice_name,
            "ssmlGender": settings.tts_ssml_gender,
        },
        "audioConfig": {"audioEncoding": settings.tts_audio_encoding},
    }


def decode_audio_content(audio_content: str) -> bytes:
    """
    Декодирует audioContent из ответа TTS.

    Провайдер может отдавать base64url (- и _ вместо + и /),
    паддинг восстанавливается.

    Raises:
        SynthesisError: если строка не base64
    """
    normalized = audio_content.replace("-", "+").replace("_", "/")
    normalized += "=" * (-len(normalized) % 4)

    try:
        return base64.b64decode(normalized, validate=True)
    except (binascii.Error, ValueError) as e:
        raise SynthesisError(f"audioContent не является base64: {e}") from e


async def synthesize_speech(
    client: httpx.AsyncClient,
    token: BearerToken,
    text: str,
) -> SynthesizedAudio:
    """
    Преобразует текст в речь.

    Пустой текст отклоняется до любого сетевого вызова.

    Args:
        client: HTTP клиент запроса
        token: access token
        text: текст для озвучивания

    Returns:
        SynthesizedAudio: аудио в байтах

    Raises:
        EmptyInputError: если текст пустой
        SynthesisError: при ошибке сервиса или пустом audioContent
    """
    if not text or not text.strip():
        raise EmptyInputError("Передайте текст для синтеза речи")

    start = time.perf_counter()

    try:
        response = await client.post(
            settings.tts_url,
            json=build_synthesis_request(text),
            headers={"Authorization": f"Bearer {token}"},
        )
    except httpx.HTTPError as e:
        raise SynthesisError(f"TTS API недоступен: {e}") from e

    if not response.is_success:
        raise SynthesisError(
            f"TTS API вернул ошибку: {response.status_code} - {response.text}"
        )

    try:
        payload = response.json()
    except ValueError as e:
        raise SynthesisError("TTS API вернул не JSON") from e

    audio_content = payload.get("audioContent") if isinstance(payload, dict) else None
    if not audio_content:
        raise SynthesisError("В ответе TTS API нет audioContent")

    audio = decode_audio_content(audio_content)

    duration = int((time.perf_counter() - start) * 1000)
    logger.info(f"TTS: {len(text)} симв. -> {len(audio)} байт за {duration}ms")

    return SynthesizedAudio(
        content=audio,
        media_type=AUDIO_MEDIA_TYPES.get(settings.tts_audio_encoding, "application/octet-stream"),
    )
