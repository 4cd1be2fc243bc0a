"""
Webhook endpoints for CMSs, admin forms and CI jobs that publish pages
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status
import logging

from sitemap_updater.api.deps import get_generator
from sitemap_updater.api.endpoints.sitemap import error_response
from sitemap_updater.schemas.sitemap import NewPageWebhook
from sitemap_updater.services.sitemap_generator import (
    InvalidPageError,
    SitemapError,
    SitemapGenerator,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.post("/new-page")
def new_page(payload: NewPageWebhook, generator: SitemapGenerator = Depends(get_generator)):
    """
    Called when a new page is published

    Body: { filename, priority?, changefreq?, url? }
    """
    try:
        generator.add_page(payload.filename, payload.priority, payload.changefreq, payload.url)
    except InvalidPageError as e:
        return error_response(status.HTTP_400_BAD_REQUEST, str(e), e)
    except SitemapError as e:
        logger.error(f"Webhook new-page failed: {e}")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Error processing the webhook", e)

    logger.info(f"Webhook added page: {payload.filename}")
    return {
        "success": True,
        "message": f"Page {payload.filename} added to the sitemap successfully",
        "timestamp": _timestamp(),
    }


@router.post("/update-all")
def update_all(generator: SitemapGenerator = Depends(get_generator)):
    """
    Full resynchronization of the sitemap
    """
    try:
        generator.update()
    except SitemapError as e:
        logger.error(f"Webhook update-all failed: {e}")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Error updating the sitemap", e)

    logger.info("Sitemap fully updated via webhook")
    return {
        "success": True,
        "message": "Sitemap updated successfully",
        "timestamp": _timestamp(),
    }
