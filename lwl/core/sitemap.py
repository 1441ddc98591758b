"""Sitemap XML generation."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from xml.sax.saxutils import escape

SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"


@dataclass(frozen=True, slots=True)
class SitemapEntry:
    path: str
    changefreq: str | None = "weekly"
    priority: float | None = 0.5
    lastmod: date | None = None


STATIC_ROUTES: tuple[SitemapEntry, ...] = (
    SitemapEntry("/", changefreq="daily", priority=1.0),
    SitemapEntry("/login", changefreq="monthly", priority=0.6),
    SitemapEntry("/signup", changefreq="monthly", priority=0.8),
    SitemapEntry("/subscription", changefreq="weekly", priority=0.8),
    SitemapEntry("/tutorial", changefreq="monthly", priority=0.7),
    SitemapEntry("/blog", changefreq="weekly", priority=0.7),
    SitemapEntry("/privacy", changefreq="yearly", priority=0.3),
    SitemapEntry("/terms", changefreq="yearly", priority=0.3),
    SitemapEntry("/cookie-policy", changefreq="yearly", priority=0.3),
)


def _join(base_url: str, path: str) -> str:
    base = base_url.rstrip("/")
    if not path.startswith("/"):
        path = f"/{path}"
    return f"{base}{path}"


def build_sitemap(base_url: str, entries: list[SitemapEntry] | tuple[SitemapEntry, ...] = STATIC_ROUTES) -> str:
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<urlset xmlns="{SITEMAP_NAMESPACE}">',
    ]
    for entry in entries:
        lines.append("  <url>")
        lines.append(f"    <loc>{escape(_join(base_url, entry.path))}</loc>")
        if entry.lastmod is not None:
            lines.append(f"    <lastmod>{entry.lastmod.isoformat()}</lastmod>")
        if entry.changefreq:
            lines.append(f"    <changefreq>{escape(entry.changefreq)}</changefreq>")
        if entry.priority is not None:
            lines.append(f"    <priority>{entry.priority:.1f}</priority>")
        lines.append("  </url>")
    lines.append("</urlset>")
    return "\n".join(lines) + "\n"
