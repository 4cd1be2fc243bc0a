"""
Shared FastAPI dependencies
"""

from sitemap_updater.core.config import settings
from sitemap_updater.services.sitemap_generator import SitemapGenerator


def get_generator() -> SitemapGenerator:
    """Generator bound to the configured site; overridden in tests"""
    return SitemapGenerator(settings.sitemap_config())
