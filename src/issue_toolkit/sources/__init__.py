"""
Module: sources

Purpose:
    Concrete page sources and reader wrappers for the solution-page
    locator.
"""

from .pdf import PdfPageSource, pdf_page_count
from .throttle import RateLimitedError, ThrottledSolutionPageReader

__all__ = [
    "PdfPageSource",
    "pdf_page_count",
    "RateLimitedError",
    "ThrottledSolutionPageReader",
]
