"""
FastAPI main application module for the sitemap updater

Usage:
    uvicorn sitemap_updater.main:app --port 3000
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import time
import logging

from sitemap_updater.core.config import settings
from sitemap_updater.api.api import api_router, webhook_router

# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

# Create FastAPI application
app = FastAPI(
    title="Sitemap Updater API",
    description="Keeps sitemap.xml in sync with the HTML pages of a static site",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_HOSTS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Request timing middleware
@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)
    return response

# Include API routes
app.include_router(api_router, prefix="/api")
app.include_router(webhook_router)

# Root endpoint
@app.get("/")
async def root():
    """Root endpoint with API information"""
    return {
        "service": "Sitemap Updater API",
        "version": "1.0.0",
        "docs": "/docs",
        "endpoints": {
            "update": "POST /api/sitemap/update",
            "add_page": "POST /api/sitemap/add-page",
            "status": "GET /api/sitemap/status",
            "health": "GET /api/health",
            "webhook_new_page": "POST /webhook/new-page",
            "webhook_update_all": "POST /webhook/update-all",
        },
    }

# Malformed request bodies are client errors
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "message": "Invalid request body",
            "error": str(exc.errors()),
        },
    )

# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Global exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "message": "An unexpected error occurred",
            "error": "Internal server error",
        }
    )

# Startup event
@app.on_event("startup")
async def startup_event():
    """Log the site being served on startup"""
    config = settings.sitemap_config()
    logger.info("Starting Sitemap Updater API...")
    logger.info(f"Pages directory: {config.source_directory}")
    logger.info(f"Sitemap file: {config.destination_path}")
    logger.info(f"Base URL: {config.base_url}")

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "sitemap_updater.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="info"
    )
