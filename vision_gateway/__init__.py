"""
Vision Gateway — сервис распознавания текста и синтеза речи.

Проксирует запросы к Google Cloud:
    - OCR изображений и PDF (Cloud Vision, TEXT_DETECTION)
    - Синтез речи (Cloud Text-to-Speech)

Access token выпускается на каждый запрос из ключа сервисного аккаунта
(JWT RS256 -> oauth2 token endpoint). Состояние между запросами не хранится.
"""

from vision_gateway.config import settings
from vision_gateway.schemas import OCRRequest, OCRResponse, TTSRequest

__all__ = [
    "settings",
    "OCRRequest",
    "OCRResponse",
    "TTSRequest",
]
