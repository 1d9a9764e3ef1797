"""Stub PDF render engine for offline tests."""

from __future__ import annotations

import io
from typing import Optional

from PIL import Image

# Page N is rendered with width BASE_WIDTH + N, so a PNG maps back to its page.
BASE_WIDTH = 10


def page_index_from_png(png: bytes) -> int:
    with Image.open(io.BytesIO(png)) as image:
        return image.size[0] - BASE_WIDTH


class StubPdfEngine:
    """Renders `page_count` solid pages; `failing_page` (0-based) raises."""

    def __init__(
        self,
        page_count: int = 1,
        failing_page: Optional[int] = None,
        count_error: Optional[Exception] = None,
    ) -> None:
        self.page_count = page_count
        self.failing_page = failing_page
        self.count_error = count_error
        self.rendered: list[tuple[int, float]] = []

    def get_page_count(self, pdf_bytes: bytes) -> int:
        if self.count_error is not None:
            raise self.count_error
        return self.page_count

    def render_page(self, pdf_bytes: bytes, index: int, scale: float) -> Image.Image:
        if index == self.failing_page:
            raise RuntimeError(f"cannot render page {index + 1}")
        self.rendered.append((index, scale))
        return Image.new("RGB", (BASE_WIDTH + index, 8), color="white")
