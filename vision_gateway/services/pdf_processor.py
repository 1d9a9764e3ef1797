"""
Процессор разбиения PDF на изображения.

Рендеринг выполняет движок PdfRenderEngine, который передаётся явно.
По умолчанию — pdf2image (pdftoppm): количество страниц через pdfinfo,
затем каждая страница отдельным вызовом, в PNG RGBA.
"""

import io
import logging
import time
from typing import Optional, Protocol

from pdf2image import convert_from_bytes
from pdf2image.exceptions import (
    PDFInfoNotInstalledError,
    PDFPageCountError,
    PDFPopplerTimeoutError,
    PDFSyntaxError,
)
from pdf2image.pdf2image import pdfinfo_from_bytes
from PIL import Image

from vision_gateway.config import settings
from vision_gateway.errors import PdfParseError
from vision_gateway.schemas import PageRaster

logger = logging.getLogger(__name__)

# Базовое разрешение PDF: 1 pt = 1/72 дюйма, scale 1.0 == 72 dpi
PDF_BASE_DPI = 72


class PdfRenderEngine(Protocol):
    """
    Движок рендеринга PDF.

    Нумерация страниц в render_page начинается с 0.
    """

    def get_page_count(self, pdf_bytes: bytes) -> int: ...

    def render_page(self, pdf_bytes: bytes, index: int, scale: float) -> Image.Image: ...


class Pdf2ImageEngine:
    """Рендеринг через pdf2image (poppler: pdfinfo + pdftoppm)."""

    def get_page_count(self, pdf_bytes: bytes) -> int:
        info = pdfinfo_from_bytes(pdf_bytes)
        return int(info.get("Pages", 0))

    def render_page(self, pdf_bytes: bytes, index: int, scale: float) -> Image.Image:
        images = convert_from_bytes(
            pdf_bytes,
            dpi=int(round(PDF_BASE_DPI * scale)),
            fmt="png",
            transparent=True,
            first_page=index + 1,
            last_page=index + 1,
        )
        if not images:
            raise ValueError(f"pdftoppm не вернул страницу {index + 1}")
        return images[0]


def _encode_png(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    image.convert("RGBA").save(buffer, format="PNG")
    return buffer.getvalue()


def rasterize_pdf(
    pdf_bytes: bytes,
    engine: Optional[PdfRenderEngine] = None,
    scale: Optional[float] = None,
) -> PageRaster:
    """
    Рендерит все страницы PDF в PNG.

    Страницы рендерятся по порядку; ошибка любой страницы
    прерывает обработку всего документа.

    Args:
        pdf_bytes: содержимое PDF файла
        engine: движок рендеринга (по умолчанию Pdf2ImageEngine)
        scale: масштаб рендеринга (по умолчанию settings.render_scale)

    Returns:
        PageRaster: PNG буферы страниц, индекс = номер страницы - 1

    Raises:
        PdfParseError: если PDF невалиден, пуст или страница не отрендерилась
    """
    engine = engine or Pdf2ImageEngine()
    scale = scale or settings.render_scale

    split_start = time.perf_counter()

    try:
        page_count = engine.get_page_count(pdf_bytes)
    except (
        PDFInfoNotInstalledError,
        PDFPageCountError,
        PDFPopplerTimeoutError,
        PDFSyntaxError,
        ValueError,
    ) as e:
        raise PdfParseError(f"Не удалось открыть PDF: {e}") from e

    if page_count < 1:
        raise PdfParseError("PDF не содержит страниц")

    logger.info(f"Разбиение PDF: {page_count} страниц, scale={scale}")

    pages = []
    for index in range(page_count):
        try:
            image = engine.render_page(pdf_bytes, index, scale)
            pages.append(_encode_png(image))
        except Exception as e:
            raise PdfParseError(
                f"Ошибка рендеринга страницы {index + 1}: {e}"
            ) from e

    split_duration = int((time.perf_counter() - split_start) * 1000)
    logger.info(f"Разбиение завершено: {len(pages)} страниц за {split_duration}ms")

    return tuple(pages)
