"""
Получение документа по URL.

HEAD — чтобы узнать Content-Type без скачивания,
GET — только когда байты действительно нужны (PDF).
"""

import logging
from typing import Optional

import httpx

from vision_gateway.config import settings
from vision_gateway.errors import DocumentFetchError, DocumentTooLargeError

logger = logging.getLogger(__name__)


async def probe_content_type(client: httpx.AsyncClient, url: str) -> Optional[str]:
    """
    Запрашивает заголовки документа (HEAD).

    Args:
        client: HTTP клиент запроса
        url: адрес документа

    Returns:
        Optional[str]: значение Content-Type или None

    Raises:
        DocumentFetchError: при ошибке сети или статусе != 2xx
    """
    try:
        response = await client.head(url, follow_redirects=True)
    except httpx.HTTPError as e:
        raise DocumentFetchError(f"Документ недоступен: {url}: {e}") from e

    if not response.is_success:
        raise DocumentFetchError(
            f"Документ недоступен: {url} (статус {response.status_code})"
        )

    content_type = response.headers.get("content-type")
    logger.info(f"Content-Type {url}: {content_type}")
    return content_type


async def download_document(
    client: httpx.AsyncClient,
    url: str,
    max_bytes: Optional[int] = None,
) -> bytes:
    """
    Скачивает документ целиком.

    Args:
        client: HTTP клиент запроса
        url: адрес документа
        max_bytes: лимит размера (по умолчанию max_file_size_mb)

    Returns:
        bytes: содержимое документа

    Raises:
        DocumentFetchError: при ошибке сети или статусе != 2xx
        DocumentTooLargeError: если документ больше лимита
    """
    if max_bytes is None:
        max_bytes = settings.max_file_size_mb * 1024 * 1024

    try:
        response = await client.get(url, follow_redirects=True)
    except httpx.HTTPError as e:
        raise DocumentFetchError(f"Документ недоступен: {url}: {e}") from e

    if not response.is_success:
        raise DocumentFetchError(
            f"Документ недоступен: {url} (статус {response.status_code})"
        )

    content = response.content
    if len(content) > max_bytes:
        raise DocumentTooLargeError(
            f"Файл слишком большой: {len(content)} байт, "
            f"максимум: {max_bytes} байт"
        )

    logger.info(f"Документ скачан: {len(content)} байт")
    return content
