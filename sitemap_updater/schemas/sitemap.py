"""
Pydantic schemas for sitemap configuration, page records and API bodies
"""

from pydantic import BaseModel, Field, validator
from typing import Optional, List
from enum import Enum


class ChangeFreq(str, Enum):
    """Allowed <changefreq> values of the sitemap protocol"""
    ALWAYS = "always"
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    NEVER = "never"


DEFAULT_PRIORITY = "0.8"
DEFAULT_CHANGEFREQ = ChangeFreq.MONTHLY.value


class SitemapConfig(BaseModel):
    """Where to scan, where to write and which origin to publish under"""

    base_url: str = Field(..., description="Origin prefixed to every <loc>")
    source_directory: str = Field(..., description="Directory scanned for page files")
    destination_path: str = Field(..., description="Sitemap file overwritten on every update")
    home_filename: str = Field("index.html", description="File published as the site root")
    page_extension: str = Field(".html", description="Extension of page files")

    @validator('base_url')
    def strip_trailing_slash(cls, v):
        """Store the origin without a trailing slash"""
        v = v.strip().rstrip('/')
        if not v:
            raise ValueError("base_url cannot be empty")
        return v

    @property
    def home_url(self) -> str:
        return f"{self.base_url}/"

    def page_url(self, filename: str) -> str:
        """Absolute URL for a page file"""
        if filename == self.home_filename:
            return self.home_url
        return f"{self.base_url}/{filename}"

    class Config:
        frozen = True


class PageRecord(BaseModel):
    """One <url> entry of the sitemap"""

    url: str = Field(..., description="Absolute URL, unique within one sitemap")
    filename: Optional[str] = Field(None, description="Source file, None for synthetic records")
    priority: str = Field(DEFAULT_PRIORITY, description="Priority in [0.0, 1.0], one decimal place")
    changefreq: ChangeFreq = Field(DEFAULT_CHANGEFREQ, description="Expected change frequency")

    class Config:
        use_enum_values = True


class AddPageRequest(BaseModel):
    """Body of POST /api/sitemap/add-page"""

    filename: Optional[str] = Field(None, description="Page file name (required)", example="portafolio.html")
    priority: Optional[str] = Field(None, description="Priority 0.0 - 1.0", example="0.9")
    changefreq: Optional[ChangeFreq] = Field(None, description="Change frequency", example="monthly")

    @validator('priority', pre=True)
    def coerce_priority(cls, v):
        """Accept JSON numbers as well as strings"""
        if v is None or v == "":
            return None
        return str(v)

    @validator('changefreq', pre=True)
    def blank_changefreq(cls, v):
        """Treat an empty changefreq like a missing one"""
        if v == "":
            return None
        return v


class NewPageWebhook(AddPageRequest):
    """Body of POST /webhook/new-page"""

    url: Optional[str] = Field(None, description="Explicit absolute URL for the page")


class StatusResponse(BaseModel):
    """Schema for GET /api/sitemap/status"""

    success: bool = True
    totalPages: int = Field(..., description="Number of records in the sitemap")
    pages: List[PageRecord] = Field(..., description="Records in sitemap order")
