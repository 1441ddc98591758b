"""Tests for vocabulary levels, the sitemap and stateless utility endpoints."""
from __future__ import annotations

from datetime import date

from fastapi.testclient import TestClient

from lwl.core.levels import level_for, level_progress, words_to_next_level
from lwl.core.sitemap import SitemapEntry, build_sitemap


def test_level_boundaries() -> None:
    assert level_for(0).level == "A0"
    assert level_for(100).level == "A0"
    assert level_for(101).level == "A1"
    assert level_for(7001).level == "C2"
    assert level_for(50000).level == "C2"


def test_level_progress_and_remaining_words() -> None:
    assert words_to_next_level(50) == 50
    assert words_to_next_level(9000) == 0
    assert level_progress(300) == 50
    assert level_progress(9000) == 100


def test_build_sitemap_escapes_and_formats() -> None:
    xml = build_sitemap(
        "https://example.com/",
        [SitemapEntry("/a&b"), SitemapEntry("blog", changefreq=None, priority=None, lastmod=date(2024, 1, 2))],
    )

    assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?>')
    assert "<loc>https://example.com/a&amp;b</loc>" in xml
    assert "<priority>0.5</priority>" in xml
    assert "<loc>https://example.com/blog</loc>" in xml
    assert "<lastmod>2024-01-02</lastmod>" in xml
    assert xml.endswith("</urlset>\n")


def test_sitemap_endpoint(client: TestClient) -> None:
    response = client.get("/sitemap.xml")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/xml")
    assert "<loc>https://lwlnow.com/</loc>" in response.text


def test_validate_input_endpoint(client: TestClient) -> None:
    response = client.post("/api/v1/validation/input", json={"text": "<script>x</script>"})
    assert response.json() == {"is_valid": False, "error": "Invalid characters detected", "sanitized": ""}

    response = client.post("/api/v1/validation/input", json={"text": " hola "})
    assert response.json() == {"is_valid": True, "error": None, "sanitized": "hola"}


def test_text_selection_endpoint(client: TestClient) -> None:
    response = client.post("/api/v1/utilities/text-selection", json={"text": "buenos días"})

    assert response.status_code == 200
    data = response.json()
    assert data["selection_type"] == "phrase"
    assert data["is_valid_for_vocabulary"] is True
    assert data["recommendation"].startswith("Great for phrases!")


def test_compare_endpoint(client: TestClient) -> None:
    response = client.post("/api/v1/utilities/compare", json={"expected": "Hola, mundo.", "actual": "hola mundo"})

    assert response.json() == {"accuracy": 100, "differences": []}


def test_levels_endpoint(client: TestClient) -> None:
    response = client.get("/api/v1/levels")

    assert response.status_code == 200
    levels = response.json()
    assert levels[0]["level"] == "A0"
    assert levels[-1]["max_words"] is None
