"""
Иерархия ошибок Vision Gateway.

Две группы:
    - ClientInputError — ошибки запроса (тип файла, пустой текст) -> 4xx
    - UpstreamServiceError — ошибки ключа, OAuth, Vision, TTS, PDF -> 5xx

Обработчик в main.py превращает их в JSON ответ
{"detail": {"error": <код>, "message": <текст>}}.
"""


class GatewayError(Exception):
    """Базовая ошибка обработки запроса."""

    status_code = 500
    error_code = "internal_error"


class ClientInputError(GatewayError):
    """Некорректный ввод от клиента."""

    status_code = 400
    error_code = "invalid_request"


class UpstreamServiceError(GatewayError):
    """Сбой внешнего сервиса или обработки на стороне сервера."""

    status_code = 502
    error_code = "upstream_error"


# --- Ключ и подпись ---


class MalformedKeyError(UpstreamServiceError):
    """PEM ключ не удалось декодировать."""

    status_code = 500
    error_code = "malformed_key"


class SigningError(UpstreamServiceError):
    """Криптография отвергла ключ или данные для подписи."""

    status_code = 500
    error_code = "signing_error"


class TokenExchangeError(UpstreamServiceError):
    """OAuth endpoint не выдал access token."""

    error_code = "token_exchange_error"


# --- Документы ---


class MissingContentTypeError(ClientInputError):
    error_code = "missing_content_type"


class UnsupportedTypeError(ClientInputError):
    error_code = "unsupported_type"


class DocumentTooLargeError(ClientInputError):
    status_code = 413
    error_code = "file_too_large"


class DocumentFetchError(UpstreamServiceError):
    """Не удалось получить документ по URL."""

    error_code = "document_fetch_error"


class PdfParseError(UpstreamServiceError):
    """PDF не открывается или страница не отрендерилась."""

    status_code = 500
    error_code = "pdf_parse_error"


class RecognitionError(UpstreamServiceError):
    error_code = "recognition_error"


# --- TTS ---


class EmptyInputError(ClientInputError):
    error_code = "empty_input"


class SynthesisError(UpstreamServiceError):
    error_code = "synthesis_error"


__all__ = [
    "GatewayError",
    "ClientInputError",
    "UpstreamServiceError",
    "MalformedKeyError",
    "SigningError",
    "TokenExchangeError",
    "MissingContentTypeError",
    "UnsupportedTypeError",
    "DocumentTooLargeError",
    "DocumentFetchError",
    "PdfParseError",
    "RecognitionError",
    "EmptyInputError",
    "SynthesisError",
]
