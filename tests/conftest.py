import os
from datetime import datetime, timezone

import pytest

from sitemap_updater.schemas.sitemap import SitemapConfig
from sitemap_updater.services.sitemap_generator import SitemapGenerator

BASE_URL = "https://www.example.com"


def touch(directory, name, when=None):
    path = os.path.join(str(directory), name)
    with open(path, "w", encoding="utf-8") as f:
        f.write(f"<html><title>{name}</title></html>")
    if when is not None:
        ts = when.timestamp()
        os.utime(path, (ts, ts))
    return path


@pytest.fixture
def site(tmp_path):
    """A site directory containing only index.html"""
    directory = tmp_path / "site"
    directory.mkdir()
    touch(directory, "index.html", datetime(2024, 1, 10, 12, tzinfo=timezone.utc))
    return directory


@pytest.fixture
def config(site):
    return SitemapConfig(
        base_url=BASE_URL + "/",
        source_directory=str(site),
        destination_path=str(site / "sitemap.xml"),
    )


@pytest.fixture
def generator(config):
    return SitemapGenerator(config)
