"""
Процессор OCR — координация пайплайна распознавания.

Главная функция extract_text:
    classify -> (PDF: download -> split -> OCR параллельно | IMAGE: OCR) -> assemble

Рендеринг PDF выполняется в threadpool, чтобы не блокировать event loop.
"""

import logging
import time
from typing import Optional, Sequence

import httpx
from starlette.concurrency import run_in_threadpool

from vision_gateway.schemas import (
    AggregatedDocument,
    BearerToken,
    DocumentKind,
    DocumentReference,
    RecognitionResult,
)
from vision_gateway.services.classifier import classify_document
from vision_gateway.services.document_fetcher import download_document
from vision_gateway.services.pdf_processor import PdfRenderEngine, rasterize_pdf
from vision_gateway.services.vision import recognize_image, recognize_pages

logger = logging.getLogger(__name__)

# Разделитель страниц в итоговом тексте
PAGE_SEPARATOR = "\n\n"


def assemble_document(results: Sequence[RecognitionResult]) -> AggregatedDocument:
    """
    Собирает итоговый документ из результатов страниц.

    Тексты соединяются пустой строкой в порядке page_index.

    Args:
        results: результаты распознавания (минимум один)

    Returns:
        AggregatedDocument: текст и количество страниц
    """
    if not results:
        raise ValueError("Нет страниц для сборки документа")

    ordered = sorted(results, key=lambda r: r.page_index)
    return AggregatedDocument(
        text=PAGE_SEPARATOR.join(r.text for r in ordered),
        page_count=len(ordered),
    )


async def extract_text(
    document: DocumentReference,
    content_type: Optional[str],
    token: BearerToken,
    client: httpx.AsyncClient,
    engine: Optional[PdfRenderEngine] = None,
) -> AggregatedDocument:
    """
    Извлекает текст из изображения или PDF.

    Изображение по URL передаётся в Vision ссылкой (без повторной загрузки),
    загруженное изображение — base64. PDF рендерится постранично,
    страницы распознаются параллельно.

    Args:
        document: ссылка на документ (URL или байты)
        content_type: заявленный MIME тип (None — берётся document.content_type)
        token: access token
        client: HTTP клиент запроса
        engine: движок рендеринга PDF

    Returns:
        AggregatedDocument: итоговый текст

    Raises:
        MissingContentTypeError, UnsupportedTypeError: тип не подходит
        PdfParseError: PDF не рендерится
        RecognitionError: Vision не распознал хотя бы одну страницу
    """
    total_start = time.perf_counter()

    if content_type is None:
        content_type = document.content_type
    kind = classify_document(content_type)

    logger.info("=" * 60)
    logger.info(f"НОВЫЙ ЗАПРОС OCR")
    logger.info(f"   Документ: {document.name}")
    logger.info(f"   Тип: {content_type} -> {kind.value}")
    logger.info("=" * 60)

    if kind is DocumentKind.PDF:
        pdf_bytes = document.content
        if pdf_bytes is None:
            pdf_bytes = await download_document(client, document.url)

        images = await run_in_threadpool(rasterize_pdf, pdf_bytes, engine)
        results = await recognize_pages(client, token, images)
    else:
        if document.url is not None:
            text = await recognize_image(client, token, image_uri=document.url)
        else:
            text = await recognize_image(client, token, content=document.content)
        results = [RecognitionResult(page_index=0, text=text)]

    aggregated = assemble_document(results)

    total_duration = int((time.perf_counter() - total_start) * 1000)
    logger.info(f"ОБРАБОТКА ЗАВЕРШЕНА")
    logger.info(f"   Страниц: {aggregated.page_count}")
    logger.info(f"   Символов: {len(aggregated.text)}")
    logger.info(f"   ИТОГО: {total_duration}ms")

    return aggregated
