"""
Vision Gateway — FastAPI приложение.

Эндпоинты:
    POST /ocr — распознавание изображения или PDF по URL
    POST /ocr/upload — распознавание загруженного файла (multipart)
    POST /tts — синтез речи из текста (MP3)
    GET  /health — проверка работоспособности и конфигурация

На каждый запрос создаётся свой HTTP клиент и выпускается свой access token.

Запуск:
    uvicorn vision_gateway.main:app --host 0.0.0.0 --port 8000
"""

import json
import logging
import time
from typing import AsyncIterator

import httpx
from fastapi import Depends, FastAPI, File, HTTPException, Request, UploadFile
from fastapi.responses import JSONResponse, Response

from vision_gateway.config import settings
from vision_gateway.errors import DocumentTooLargeError, EmptyInputError, GatewayError
from vision_gateway.schemas import (
    DocumentReference,
    OCRRequest,
    OCRResponse,
    ServiceAccountIdentity,
    TTSRequest,
)
from vision_gateway.services.classifier import classify_document
from vision_gateway.services.credentials import mint_bearer_token
from vision_gateway.services.document_fetcher import probe_content_type
from vision_gateway.services.ocr_processor import extract_text
from vision_gateway.services.pdf_processor import Pdf2ImageEngine, PdfRenderEngine
from vision_gateway.services.speech import synthesize_speech

# Настройка логгера
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [Vision-Gateway] %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)

AUDIO_EXTENSIONS = {
    "audio/mpeg": "mp3",
    "audio/ogg": "ogg",
    "audio/wav": "wav",
}


class UnicodeJSONResponse(JSONResponse):
    """JSON ответ с нормальным отображением кириллицы (без \\uXXXX экранирования)."""

    def render(self, content) -> bytes:
        return json.dumps(
            content,
            ensure_ascii=False,
            allow_nan=False,
            indent=None,
            separators=(",", ":"),
        ).encode("utf-8")


# FastAPI приложение
app = FastAPI(
    title="Vision Gateway",
    description="Распознавание текста (Cloud Vision) и синтез речи (Cloud Text-to-Speech)",
    version="1.0.0",
    default_response_class=UnicodeJSONResponse,
)


# =============================================================================
# Зависимости
# =============================================================================


async def get_http_client() -> AsyncIterator[httpx.AsyncClient]:
    """HTTP клиент на время одного запроса."""
    async with httpx.AsyncClient(
        timeout=httpx.Timeout(settings.timeout_seconds)
    ) as client:
        yield client


def get_service_account() -> ServiceAccountIdentity:
    return settings.google_service_account


def get_pdf_engine() -> PdfRenderEngine:
    return Pdf2ImageEngine()


# =============================================================================
# Обработка ошибок
# =============================================================================


@app.exception_handler(GatewayError)
async def gateway_error_handler(request: Request, exc: GatewayError) -> UnicodeJSONResponse:
    """
    Преобразует ошибки пайплайна в JSON ответ.

    Ошибки клиента (4xx) логируются как warning, ошибки сервисов (5xx) — как error.
    """
    if exc.status_code >= 500:
        logger.error(f"{request.url.path}: {exc.error_code}: {exc}")
    else:
        logger.warning(f"{request.url.path}: {exc.error_code}: {exc}")

    return UnicodeJSONResponse(
        status_code=exc.status_code,
        content={
            "detail": {
                "error": exc.error_code,
                "message": str(exc),
            }
        },
    )


# =============================================================================
# Эндпоинты
# =============================================================================


@app.get("/health")
async def health_check() -> dict:
    """
    Проверка работоспособности сервиса.

    Секреты (ключ, токены) в ответ не попадают.

    Returns:
        dict: статус сервиса и конфигурация
    """
    return {
        "status": "ok",
        "service": "vision-gateway",
        "version": app.version,
        "service_account": settings.google_service_account.client_email,
        "config": {
            "max_file_size_mb": settings.max_file_size_mb,
            "timeout_seconds": settings.timeout_seconds,
            "render_scale": settings.render_scale,
            "tts_voice": settings.tts_voice_name,
        },
    }


@app.post("/ocr", response_model=OCRResponse, response_model_by_alias=True)
async def execute_ocr(
    payload: OCRRequest,
    client: httpx.AsyncClient = Depends(get_http_client),
    identity: ServiceAccountIdentity = Depends(get_service_account),
    engine: PdfRenderEngine = Depends(get_pdf_engine),
) -> OCRResponse:
    """
    Распознаёт текст документа по URL.

    Тип документа определяется HEAD запросом, PDF скачивается целиком,
    изображение передаётся в Vision ссылкой.

    Args:
        payload: {"url": "..."}

    Returns:
        OCRResponse: {"text": ..., "pageCount": ...}
    """
    if not payload.url:
        raise HTTPException(
            status_code=400,
            detail={
                "error": "missing_url",
                "message": "Передайте URL файла в поле url",
            },
        )

    start_time = time.time()
    logger.info(f"Получен URL: {payload.url}")

    content_type = await probe_content_type(client, payload.url)
    classify_document(content_type)
    token = await mint_bearer_token(identity, client)

    document = DocumentReference(url=payload.url, content_type=content_type)
    result = await extract_text(document, None, token, client, engine)

    processing_time_ms = int((time.time() - start_time) * 1000)
    logger.info(f"OCR завершён: {result.page_count} страниц за {processing_time_ms}ms")

    return OCRResponse(text=result.text, page_count=result.page_count)


@app.post("/ocr/upload", response_model=OCRResponse, response_model_by_alias=True)
async def execute_ocr_upload(
    file: UploadFile = File(..., description="Изображение или PDF для распознавания"),
    client: httpx.AsyncClient = Depends(get_http_client),
    identity: ServiceAccountIdentity = Depends(get_service_account),
    engine: PdfRenderEngine = Depends(get_pdf_engine),
) -> OCRResponse:
    """
    Распознаёт текст загруженного файла.

    Тип берётся из Content-Type части multipart.

    Returns:
        OCRResponse: {"text": ..., "pageCount": ...}
    """
    start_time = time.time()

    file_bytes = await file.read()
    max_size = settings.max_file_size_mb * 1024 * 1024
    if len(file_bytes) > max_size:
        raise DocumentTooLargeError(
            f"Файл слишком большой: {len(file_bytes)} байт, "
            f"максимум: {settings.max_file_size_mb} МБ"
        )
    logger.info(f"Получен файл: {file.filename}, {len(file_bytes)} байт, {file.content_type}")

    document = DocumentReference(
        content=file_bytes,
        content_type=file.content_type,
        filename=file.filename or "unknown",
    )
    classify_document(document.content_type)
    token = await mint_bearer_token(identity, client)
    result = await extract_text(document, None, token, client, engine)

    processing_time_ms = int((time.time() - start_time) * 1000)
    logger.info(f"OCR завершён: {result.page_count} страниц за {processing_time_ms}ms")

    return OCRResponse(text=result.text, page_count=result.page_count)


@app.post("/tts")
async def execute_tts(
    payload: TTSRequest,
    client: httpx.AsyncClient = Depends(get_http_client),
    identity: ServiceAccountIdentity = Depends(get_service_account),
) -> Response:
    """
    Синтезирует речь из текста.

    Пустой текст отклоняется до выпуска токена.

    Args:
        payload: {"text": "..."}

    Returns:
        Response: аудио файл (attachment)
    """
    if not payload.text or not payload.text.strip():
        raise EmptyInputError("Передайте текст в поле text")

    token = await mint_bearer_token(identity, client)
    audio = await synthesize_speech(client, token, payload.text)

    extension = AUDIO_EXTENSIONS.get(audio.media_type, "bin")
    return Response(
        content=audio.content,
        media_type=audio.media_type,
        headers={"Content-Disposition": f'attachment; filename="speech.{extension}"'},
    )


if __name__ == "__main__":
    import uvicorn

    logger.info(f"Запуск Vision Gateway на порту {settings.port}")

    uvicorn.run(
        app,
        host="0.0.0.0",
        port=settings.port,
        log_level="info",
    )
