"""
Main API router that includes all endpoint routers
"""

from datetime import datetime, timezone

from fastapi import APIRouter

from sitemap_updater.api.endpoints import sitemap, webhooks

# Routes mounted under /api
api_router = APIRouter()
api_router.include_router(sitemap.router, prefix="/sitemap", tags=["sitemap"])


@api_router.get("/health", tags=["health"])
async def health_check():
    """Health check endpoint for monitoring"""
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


# Routes mounted at the application root
webhook_router = APIRouter()
webhook_router.include_router(webhooks.router, prefix="/webhook", tags=["webhooks"])
