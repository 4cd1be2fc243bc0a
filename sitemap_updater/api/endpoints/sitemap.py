"""
Sitemap management endpoints
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
import logging

from sitemap_updater.api.deps import get_generator
from sitemap_updater.schemas.sitemap import AddPageRequest, StatusResponse
from sitemap_updater.services.sitemap_generator import (
    InvalidPageError,
    SitemapError,
    SitemapGenerator,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def error_response(status_code: int, message: str, error: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, "error": str(error)},
    )


@router.post("/update")
def update_sitemap(generator: SitemapGenerator = Depends(get_generator)):
    """
    Rescan the pages directory and rewrite sitemap.xml
    """
    try:
        pages = generator.update()
    except SitemapError as e:
        logger.error(f"Sitemap update failed: {e}")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Error updating the sitemap", e)

    logger.info(f"Sitemap updated with {len(pages)} pages")
    return {
        "success": True,
        "message": "Sitemap updated successfully",
        "totalPages": len(pages),
    }


@router.post("/add-page")
def add_page(payload: AddPageRequest, generator: SitemapGenerator = Depends(get_generator)):
    """
    Add a page to the sitemap

    Body: { filename, priority?, changefreq? }
    """
    try:
        pages = generator.add_page(payload.filename, payload.priority, payload.changefreq)
    except InvalidPageError as e:
        return error_response(status.HTTP_400_BAD_REQUEST, str(e), e)
    except SitemapError as e:
        logger.error(f"Adding page {payload.filename} failed: {e}")
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "Error adding the page to the sitemap", e
        )

    logger.info(f"Page {payload.filename} added ({len(pages)} pages in sitemap)")
    return {
        "success": True,
        "message": f"Page {payload.filename} added to the sitemap successfully",
        "totalPages": len(pages),
    }


@router.get("/status", response_model=StatusResponse)
def sitemap_status(generator: SitemapGenerator = Depends(get_generator)):
    """
    List the pages the sitemap currently describes
    """
    try:
        pages = generator.status()
    except SitemapError as e:
        logger.error(f"Sitemap status failed: {e}")
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "Error reading the sitemap status", e
        )

    return StatusResponse(totalPages=len(pages), pages=pages)
