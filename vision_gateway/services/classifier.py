"""
Определение пути обработки документа по Content-Type.

Сравнение по подстроке, а не точное: типы часто приходят
с суффиксами вида "; charset=binary".
"""

from typing import Optional

from vision_gateway.errors import MissingContentTypeError, UnsupportedTypeError
from vision_gateway.schemas import DocumentKind


def classify_document(content_type: Optional[str]) -> DocumentKind:
    """
    Выбирает путь обработки: PDF или одиночное изображение.

    Порядок проверок:
        1. Тип не указан -> MissingContentTypeError
        2. Содержит "pdf" -> PDF
        3. Содержит "image" -> IMAGE
        4. Иначе -> UnsupportedTypeError

    Args:
        content_type: заявленный MIME тип (может быть None)

    Returns:
        DocumentKind: путь обработки
    """
    if not content_type or not content_type.strip():
        raise MissingContentTypeError("Не удалось определить Content-Type документа")

    normalized = content_type.lower()

    if "pdf" in normalized:
        return DocumentKind.PDF
    if "image" in normalized:
        return DocumentKind.IMAGE

    raise UnsupportedTypeError(
        f"Неподдерживаемый тип файла: {content_type}. "
        "Ожидается изображение или PDF."
    )
