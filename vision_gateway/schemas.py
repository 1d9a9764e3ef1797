"""
Схемы данных Vision Gateway.

Включает:
    - Pydantic модели для API (запросы OCR/TTS, ответ OCR)
    - Ключ сервисного аккаунта Google
    - Внутренние dataclass'ы пайплайна (подписанный JWT, ссылка на документ,
      результаты распознавания, итоговый документ, аудио)
"""

import enum
from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Pydantic модели для API
# =============================================================================


class ServiceAccountIdentity(BaseModel):
    """
    Ключ сервисного аккаунта Google (JSON key file).

    Лишние поля файла ключа (project_id, token_uri и т.д.) игнорируются.

    Attributes:
        client_email: email сервисного аккаунта (iss в JWT)
        private_key: приватный ключ PKCS#8 в PEM
        private_key_id: идентификатор ключа (kid в заголовке JWT)
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    client_email: str
    private_key: str = Field(repr=False)
    private_key_id: str


class OCRRequest(BaseModel):
    """
    Запрос на распознавание документа по URL.

    Attributes:
        url: адрес изображения или PDF
    """

    url: Optional[str] = Field(
        default=None,
        description="URL изображения или PDF документа",
    )


class TTSRequest(BaseModel):
    """
    Запрос на синтез речи.

    Attributes:
        text: текст для озвучивания
    """

    text: Optional[str] = Field(
        default=None,
        description="Текст для синтеза речи",
    )


class OCRResponse(BaseModel):
    """
    Ответ API с результатами OCR.

    Attributes:
        text: текст всех страниц, разделённых пустой строкой
        page_count: количество обработанных страниц (pageCount в JSON)
    """

    model_config = ConfigDict(populate_by_name=True)

    text: str
    page_count: int = Field(alias="pageCount", ge=1)


# =============================================================================
# Внутренние dataclass'ы для пайплайна
# =============================================================================


class DocumentKind(str, enum.Enum):
    """Путь обработки документа по его Content-Type."""

    PDF = "pdf"
    IMAGE = "image"


@dataclass(frozen=True)
class SignedAssertion:
    """
    Подписанный JWT для обмена на access token.

    Attributes:
        header_segment: base64url заголовка
        claim_segment: base64url набора claims
        signature_segment: base64url подписи RS256
    """

    header_segment: str
    claim_segment: str
    signature_segment: str

    @property
    def signing_input(self) -> str:
        return f"{self.header_segment}.{self.claim_segment}"

    def __str__(self) -> str:
        return f"{self.signing_input}.{self.signature_segment}"


@dataclass(frozen=True)
class DocumentReference:
    """
    Ссылка на документ: либо URL, либо загруженные байты.

    Attributes:
        url: адрес документа (для запроса по ссылке)
        content: содержимое файла (для загрузки multipart)
        content_type: заявленный MIME тип, если известен
        filename: имя файла для логирования
    """

    url: Optional[str] = None
    content: Optional[bytes] = None
    content_type: Optional[str] = None
    filename: str = "unknown"

    def __post_init__(self) -> None:
        if (self.url is None) == (self.content is None):
            raise ValueError("Нужен ровно один источник: url или content")

    @property
    def name(self) -> str:
        return self.url or self.filename


@dataclass(frozen=True)
class RecognitionResult:
    """
    Результат распознавания одного изображения.

    Attributes:
        page_index: индекс страницы (начинается с 0)
        text: распознанный текст (пустая строка, если текста нет)
    """

    page_index: int
    text: str


@dataclass(frozen=True)
class AggregatedDocument:
    """
    Итоговый текст документа.

    Attributes:
        text: тексты страниц через пустую строку, в порядке страниц
        page_count: количество страниц (>= 1)
    """

    text: str
    page_count: int


@dataclass(frozen=True)
class SynthesizedAudio:
    """
    Результат синтеза речи.

    Attributes:
        content: аудио в байтах
        media_type: MIME тип аудио
    """

    content: bytes
    media_type: str = "audio/mpeg"


# Упорядоченные PNG страниц PDF, индекс = номер страницы - 1
PageRaster = tuple[bytes, ...]

# Access token Google, не логируется и не сохраняется
BearerToken = str
