import os
import xml.etree.ElementTree as ET

import pytest
from fastapi.testclient import TestClient

from sitemap_updater.api.deps import get_generator
from sitemap_updater.main import app
from sitemap_updater.schemas.sitemap import SitemapConfig
from sitemap_updater.services.sitemap_generator import SITEMAP_NS, SitemapGenerator

from .conftest import BASE_URL, touch


@pytest.fixture
def client(generator):
    app.dependency_overrides[get_generator] = lambda: generator
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def broken_client(tmp_path):
    gen = SitemapGenerator(SitemapConfig(
        base_url=BASE_URL,
        source_directory=str(tmp_path / "missing"),
        destination_path=str(tmp_path / "sitemap.xml"),
    ))
    app.dependency_overrides[get_generator] = lambda: gen
    yield TestClient(app)
    app.dependency_overrides.clear()


def url_count(path):
    root = ET.parse(str(path)).getroot()
    return len(root.findall("{%s}url" % SITEMAP_NS))


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert "timestamp" in body


def test_root_lists_endpoints(client):
    response = client.get("/")
    assert response.status_code == 200
    assert "update" in response.json()["endpoints"]


def test_process_time_header(client):
    response = client.get("/api/health")
    assert "x-process-time" in response.headers


def test_update(site, client):
    touch(site, "blog.html")
    response = client.post("/api/sitemap/update")
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["totalPages"] == 2
    assert url_count(site / "sitemap.xml") == 2


def test_update_failure_returns_500(broken_client):
    response = broken_client.post("/api/sitemap/update")
    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert "missing" in body["error"]


def test_add_page(site, client):
    response = client.post(
        "/api/sitemap/add-page",
        json={"filename": "portafolio.html", "priority": "0.9", "changefreq": "monthly"},
    )
    assert response.status_code == 200
    assert response.json()["success"] is True
    assert "portafolio.html" in (site / "sitemap.xml").read_text(encoding="utf-8")


def test_add_page_accepts_numeric_priority(site, client):
    response = client.post("/api/sitemap/add-page", json={"filename": "promo.html", "priority": 0.6})
    assert response.status_code == 200
    assert "<priority>0.6</priority>" in (site / "sitemap.xml").read_text(encoding="utf-8")


def test_add_page_without_filename_is_400(site, client):
    response = client.post("/api/sitemap/add-page", json={"priority": "0.9"})
    assert response.status_code == 400
    assert response.json()["success"] is False
    assert not (site / "sitemap.xml").exists()


def test_add_page_without_body_is_400(client):
    response = client.post("/api/sitemap/add-page")
    assert response.status_code == 400


def test_add_page_bad_changefreq_is_400(client):
    response = client.post(
        "/api/sitemap/add-page", json={"filename": "a.html", "changefreq": "sometimes"}
    )
    assert response.status_code == 400


def test_add_page_bad_priority_is_400(client):
    response = client.post("/api/sitemap/add-page", json={"filename": "a.html", "priority": "7"})
    assert response.status_code == 400


def test_add_page_failure_is_500(broken_client):
    response = broken_client.post("/api/sitemap/add-page", json={"filename": "a.html"})
    assert response.status_code == 500


def test_status(site, client):
    touch(site, "blog.html")
    response = client.get("/api/sitemap/status")
    assert response.status_code == 200
    body = response.json()
    assert body["totalPages"] == 2
    assert body["pages"][0] == {
        "url": BASE_URL + "/",
        "filename": "index.html",
        "priority": "1.0",
        "changefreq": "weekly",
    }
    assert body["pages"][1]["changefreq"] == "weekly"
    assert not (site / "sitemap.xml").exists()


def test_status_failure_is_500(broken_client):
    assert broken_client.get("/api/sitemap/status").status_code == 500


def test_webhook_new_page(site, client):
    response = client.post("/webhook/new-page", json={"filename": "nueva.html", "priority": "0.9"})
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert "timestamp" in body
    assert url_count(site / "sitemap.xml") == 2


def test_webhook_new_page_with_url(site, client):
    response = client.post(
        "/webhook/new-page",
        json={"filename": "landing.html", "url": BASE_URL + "/campaign/"},
    )
    assert response.status_code == 200
    assert "<loc>https://www.example.com/campaign/</loc>" in (site / "sitemap.xml").read_text(
        encoding="utf-8"
    )


def test_webhook_new_page_requires_filename(client):
    response = client.post("/webhook/new-page", json={})
    assert response.status_code == 400


def test_webhook_update_all(site, client):
    touch(site, "about.html")
    response = client.post("/webhook/update-all")
    assert response.status_code == 200
    assert response.json()["success"] is True
    assert url_count(site / "sitemap.xml") == 2


def test_webhook_update_all_failure(broken_client):
    response = broken_client.post("/webhook/update-all")
    assert response.status_code == 500
    assert response.json()["success"] is False


def test_add_page_blank_changefreq_uses_default(site, client):
    response = client.post(
        "/api/sitemap/add-page",
        json={"filename": "promo.html", "priority": "", "changefreq": ""},
    )
    assert response.status_code == 200
    xml = (site / "sitemap.xml").read_text(encoding="utf-8")
    assert "<changefreq>monthly</changefreq>\n    <priority>0.8</priority>" in xml


def test_status_skips_non_utf8_filenames(site, client):
    with open(os.path.join(os.fsencode(str(site)), b"caf\xe9.html"), "w") as f:
        f.write("<html></html>")

    response = client.get("/api/sitemap/status")
    assert response.status_code == 200
    assert response.json()["totalPages"] == 1
    assert client.post("/api/sitemap/update").status_code == 200
