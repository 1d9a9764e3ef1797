"""
Распознавание текста через Google Cloud Vision (TEXT_DETECTION).

Содержит:
    - Сборку запроса images:annotate (base64 содержимое или URL)
    - Распознавание одного изображения
    - Параллельное распознавание страниц PDF с сохранением порядка

Параллелизация:
    - asyncio.gather по всем страницам, результаты пишутся по индексу,
      поэтому порядок завершения запросов не влияет на порядок страниц
"""

import asyncio
import base64
import logging
import time
from typing import Optional, Sequence

import httpx

from vision_gateway.config import settings
from vision_gateway.errors import RecognitionError
from vision_gateway.schemas import BearerToken, RecognitionResult

logger = logging.getLogger(__name__)


def build_annotate_request(
    content: Optional[bytes] = None,
    image_uri: Optional[str] = None,
) -> dict:
    """
    Формирует тело запроса images:annotate.

    Args:
        content: байты изображения (передаются в base64)
        image_uri: публичный URL изображения (Vision скачает сам)

    Returns:
        dict: тело запроса с одной задачей TEXT_DETECTION
    """
    if (content is None) == (image_uri is None):
        raise ValueError("Нужен ровно один источник: content или image_uri")

    if content is not None:
        image = {"content": base64.b64encode(content).decode("ascii")}
    else:
        image = {"source": {"imageUri": image_uri}}

    return {
        "requests": [
            {
                "image": image,
                "features": [{"type": "TEXT_DETECTION"}],
            }
        ]
    }


def _extract_text(payload: object) -> str:
    """
    Достаёт fullTextAnnotation.text из ответа Vision.

    Отсутствие текста на изображении — не ошибка, возвращается "".
    Ошибка внутри responses[0] (например, URL недоступен для Vision)
    или ответ неожиданной структуры — RecognitionError.
    """
    if not isinstance(payload, dict):
        raise RecognitionError("Vision API вернул ответ неожиданной структуры")

    responses = payload.get("responses") or [{}]
    if not isinstance(responses, list):
        raise RecognitionError("Vision API вернул responses не списком")

    first = responses[0] or {}
    if not isinstance(first, dict):
        raise RecognitionError("Vision API вернул элемент responses не объектом")

    if "error" in first:
        error = first["error"] or {}
        message = error.get("message", error) if isinstance(error, dict) else error
        raise RecognitionError(f"Vision вернул ошибку: {message}")

    annotation = first.get("fullTextAnnotation") or {}
    if not isinstance(annotation, dict):
        raise RecognitionError("Vision API вернул fullTextAnnotation не объектом")

    text = annotation.get("text") or ""
    if not isinstance(text, str):
        raise RecognitionError("Vision API вернул text не строкой")
    return text


async def recognize_image(
    client: httpx.AsyncClient,
    token: BearerToken,
    content: Optional[bytes] = None,
    image_uri: Optional[str] = None,
) -> str:
    """
    Распознаёт текст на одном изображении.

    Args:
        client: HTTP клиент запроса
        token: access token
        content: байты изображения
        image_uri: URL изображения

    Returns:
        str: распознанный текст (пустой, если текста нет)

    Raises:
        RecognitionError: при ошибке сети, статусе != 2xx или ошибке Vision
    """
    body = build_annotate_request(content=content, image_uri=image_uri)

    try:
        response = await client.post(
            settings.vision_url,
            json=body,
            headers={"Authorization": f"Bearer {token}"},
        )
    except httpx.HTTPError as e:
        raise RecognitionError(f"Vision API недоступен: {e}") from e

    if not response.is_success:
        raise RecognitionError(
            f"Vision API вернул ошибку: {response.status_code} - {response.text}"
        )

    try:
        payload = response.json()
    except ValueError as e:
        raise RecognitionError("Vision API вернул не JSON") from e

    return _extract_text(payload)


async def recognize_pages(
    client: httpx.AsyncClient,
    token: BearerToken,
    images: Sequence[bytes],
) -> list[RecognitionResult]:
    """
    Распознаёт страницы параллельно, по одному запросу на страницу.

    Ошибка любой страницы — ошибка всего документа. Остальные запросы
    не отменяются, но их результаты отбрасываются.

    Args:
        client: HTTP клиент запроса
        token: access token
        images: PNG страниц по порядку

    Returns:
        list[RecognitionResult]: результаты в порядке страниц

    Raises:
        RecognitionError: если хотя бы одна страница не распознана
    """
    if not images:
        raise RecognitionError("Нет изображений для распознавания")

    ocr_start = time.perf_counter()
    results: list[Optional[RecognitionResult]] = [None] * len(images)

    async def _recognize(index: int, image: bytes) -> None:
        text = await recognize_image(client, token, content=image)
        results[index] = RecognitionResult(page_index=index, text=text)

    outcomes = await asyncio.gather(
        *(_recognize(index, image) for index, image in enumerate(images)),
        return_exceptions=True,
    )

    for index, outcome in enumerate(outcomes):
        if isinstance(outcome, BaseException):
            logger.warning(f"Ошибка OCR страницы {index + 1}: {outcome}")
            if isinstance(outcome, RecognitionError):
                raise outcome
            raise RecognitionError(
                f"Ошибка распознавания страницы {index + 1}: {outcome}"
            ) from outcome

    ocr_duration = int((time.perf_counter() - ocr_start) * 1000)
    logger.info(f"   OCR: {len(images)} страниц за {ocr_duration}ms")
    for r in results:
        logger.info(f"        стр.{r.page_index + 1}: {len(r.text)} симв.")

    return list(results)
