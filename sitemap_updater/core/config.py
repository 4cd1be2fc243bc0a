"""
Application configuration settings
"""

from pydantic import validator
from pydantic_settings import BaseSettings
from typing import List
import os

from sitemap_updater.schemas.sitemap import SitemapConfig

class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application Settings
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    ALLOWED_HOSTS: List[str] = ["*"]

    # Site Configuration
    BASE_URL: str = "https://www.techfixsolutions.site"
    SOURCE_DIRECTORY: str = os.getcwd()
    SITEMAP_PATH: str = ""  # defaults to <SOURCE_DIRECTORY>/sitemap.xml
    HOME_FILENAME: str = "index.html"
    PAGE_EXTENSION: str = ".html"

    # Server Settings
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # Monitoring and Logging
    LOG_LEVEL: str = "INFO"

    # File Watcher
    WATCH_DEBOUNCE_SECONDS: float = 0.5

    @validator('LOG_LEVEL')
    def normalize_log_level(cls, v):
        """logging only accepts upper-case level names"""
        return v.strip().upper()

    class Config:
        env_file = ".env"
        case_sensitive = True

    def sitemap_config(self) -> SitemapConfig:
        """Build the generator configuration from the current settings"""
        destination = self.SITEMAP_PATH or os.path.join(self.SOURCE_DIRECTORY, "sitemap.xml")
        return SitemapConfig(
            base_url=self.BASE_URL,
            source_directory=self.SOURCE_DIRECTORY,
            destination_path=destination,
            home_filename=self.HOME_FILENAME,
            page_extension=self.PAGE_EXTENSION,
        )

# Create settings instance
settings = Settings()

# Validate required settings in production
if settings.ENVIRONMENT == "production":
    if not settings.BASE_URL.startswith("https://"):
        raise ValueError("BASE_URL must use https in production")
