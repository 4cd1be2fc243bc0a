"""
Sitemap Updater — keeps sitemap.xml in sync with a static site's HTML pages.

Submodules:
    - core: Settings (pydantic-settings, .env)
    - schemas: Page records, configuration and API bodies
    - services: The sitemap generator (scan, classify, render, write)
    - api: FastAPI routers (sitemap endpoints, webhooks)
    - tasks: File watcher
"""

__version__ = "1.0.0"
