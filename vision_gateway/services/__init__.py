"""
Сервисы Vision Gateway.

Модули:
    - credentials: JWT assertion сервисного аккаунта и обмен на access token
    - classifier: выбор пути обработки по Content-Type
    - document_fetcher: HEAD/GET документа по URL
    - pdf_processor: разбиение PDF на PNG страниц
    - vision: распознавание текста (Cloud Vision), параллельно по страницам
    - speech: синтез речи (Cloud Text-to-Speech)
    - ocr_processor: координация пайплайна OCR и сборка результата
"""

from vision_gateway.services.classifier import classify_document
from vision_gateway.services.credentials import (
    create_assertion,
    exchange_assertion,
    mint_bearer_token,
    pem_to_der,
)
from vision_gateway.services.ocr_processor import assemble_document, extract_text
from vision_gateway.services.pdf_processor import rasterize_pdf
from vision_gateway.services.speech import synthesize_speech
from vision_gateway.services.vision import recognize_image, recognize_pages

__all__ = [
    "pem_to_der",
    "create_assertion",
    "exchange_assertion",
    "mint_bearer_token",
    "classify_document",
    "rasterize_pdf",
    "recognize_image",
    "recognize_pages",
    "synthesize_speech",
    "assemble_document",
    "extract_text",
]
