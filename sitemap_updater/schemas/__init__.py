"""
Pydantic schemas for configuration, page records and API request/response validation
"""

from .sitemap import (
    ChangeFreq, SitemapConfig, PageRecord,
    AddPageRequest, NewPageWebhook, StatusResponse,
    DEFAULT_PRIORITY, DEFAULT_CHANGEFREQ,
)

__all__ = [
    "ChangeFreq", "SitemapConfig", "PageRecord",
    "AddPageRequest", "NewPageWebhook", "StatusResponse",
    "DEFAULT_PRIORITY", "DEFAULT_CHANGEFREQ",
]
