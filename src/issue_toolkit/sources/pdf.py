"""
Module: sources.pdf

Purpose:
    PDF-backed page source. Exposes page text and rendered page images
    by 1-indexed page number, which is what the solution-page locator
    consumes.

Key Classes:
    - PdfPageSource: PageSource implementation over a PyMuPDF document

Key Functions:
    - pdf_page_count(): Page count of a PDF file

Dependencies:
    - fitz (PyMuPDF): PDF access, text extraction and rendering
    - PIL.Image: Page images

Used By:
    - scripts/reconcile_toc.py
    - toc.locator (through the PageSource protocol)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional, Union

import fitz
from PIL import Image

logger = logging.getLogger(__name__)

# Default configuration
DEFAULT_DPI = 150


def pdf_page_count(path: Union[str, Path]) -> int:
    """Number of pages in a PDF file."""
    with fitz.open(str(path)) as doc:
        return doc.page_count


class PdfPageSource:
    """
    Page text and images from a PDF, 1-indexed.

    Pages outside 1..page_count return None. Extracted text is cached
    per page; images are rendered on demand.

    Usage:
        with PdfPageSource("issue.pdf") as source:
            result = reconcile_issue(articles, issue,
                                     total_pages=source.page_count,
                                     page_source=source)

    Attributes:
        path: Source PDF path
        dpi: Rendering resolution for page images
    """

    def __init__(self, path: Union[str, Path], *, dpi: int = DEFAULT_DPI):
        if dpi <= 0:
            raise ValueError(f"dpi must be positive: {dpi}")
        self.path = Path(path)
        self.dpi = dpi
        self._doc: Optional[fitz.Document] = fitz.open(str(self.path))
        self._text_cache: Dict[int, str] = {}
        logger.debug(f"Opened {self.path.name} ({self._doc.page_count} pages)")

    @property
    def page_count(self) -> int:
        return self._document().page_count

    def _document(self) -> fitz.Document:
        if self._doc is None:
            raise ValueError(f"Page source for {self.path.name} is closed")
        return self._doc

    def _page(self, page: int) -> Optional[fitz.Page]:
        doc = self._document()
        if not 1 <= page <= doc.page_count:
            return None
        return doc[page - 1]

    def page_text(self, page: int) -> Optional[str]:
        """
        Plain text of a page, or None if the page does not exist.

        Extraction errors are logged and yield an empty string.
        """
        if page in self._text_cache:
            return self._text_cache[page]
        pdf_page = self._page(page)
        if pdf_page is None:
            return None
        try:
            text = pdf_page.get_text("text") or ""
        except (RuntimeError, ValueError) as e:
            logger.warning(f"Failed to extract text from page {page}: {e}")
            text = ""
        self._text_cache[page] = text
        return text

    def page_image(self, page: int) -> Optional[Image.Image]:
        """Render a page to an RGB image, or None if the page does not exist."""
        pdf_page = self._page(page)
        if pdf_page is None:
            return None
        matrix = fitz.Matrix(self.dpi / 72.0, self.dpi / 72.0)
        pix = pdf_page.get_pixmap(matrix=matrix, alpha=False)
        return Image.frombytes("RGB", (pix.width, pix.height), pix.samples)

    def close(self) -> None:
        if self._doc is not None:
            self._doc.close()
            self._doc = None
            self._text_cache.clear()

    def __enter__(self) -> "PdfPageSource":
        return self

    def __exit__(self, *args) -> None:
        self.close()
