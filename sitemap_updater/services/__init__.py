"""
Services — the sitemap generator and its error types.
"""

from .sitemap_generator import (
    SitemapGenerator,
    SitemapError,
    ScanError,
    WriteError,
    InvalidPageError,
    classify_page,
)

__all__ = [
    "SitemapGenerator",
    "SitemapError",
    "ScanError",
    "WriteError",
    "InvalidPageError",
    "classify_page",
]
