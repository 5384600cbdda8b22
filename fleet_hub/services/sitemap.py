"""
sitemap.xml and robots.txt generation.

Paths come from the static pages, the entity data, published blog articles
and keyword guides. Each path gets a priority and change frequency from
``transform``; excluded patterns never reach the output.
"""

import fnmatch
import logging
from typing import TypedDict

from markupsafe import escape

import constants
from fleet_hub.programmatic import entities
from fleet_hub.services.blog_service import BlogService
from fleet_hub.services.keyword_guide_service import KeywordGuideService
from fleet_hub.services.page_service import PageService
from fleet_hub.utils import iso_timestamp

logger = logging.getLogger(__name__)

SITEMAP_CONFIG = {
    "site_url": constants.SITE_URL,
    "changefreq": "weekly",
    "priority": 0.7,
    "sitemap_size": 5000,
    "exclude": ["/api/*", "/admin/*", "/404", "/_next/*", "/server-sitemap.xml"],
}

PRIORITY_MAP = {
    "/": 1.0,
    "/blog": 0.9,
    "/resources": 0.9,
    "/tools": 0.9,
    "/about": 0.8,
    "/contact": 0.8,
}

STATIC_PATHS = [
    "/",
    "/about",
    "/contact",
    "/privacy",
    "/terms",
    "/cookies",
    "/resources",
    "/resources/fleet-management",
    "/resources/regulations",
    "/tools",
    "/blog",
    "/guides",
    "/compare",
]

# (user agent, allow, disallow, crawl delay)
ROBOTS_POLICIES: list[tuple[str, list[str], list[str], int | None]] = [
    ("*", ["/"], [], None),
    ("*", [], ["/api/", "/admin/", "/_next/"], None),
    ("Googlebot", ["/"], [], 0),
    ("Bingbot", ["/"], [], 0),
    # aggressive crawlers
    ("AhrefsBot", [], [], 10),
    ("SemrushBot", [], [], 10),
]


class SitemapEntry(TypedDict):
    loc: str
    changefreq: str
    priority: float
    lastmod: str


def is_excluded(path: str) -> bool:
    return any(fnmatch.fnmatch(path, pattern) for pattern in SITEMAP_CONFIG["exclude"])


def transform(path: str, lastmod: str | None = None) -> SitemapEntry:
    is_blog_post = path.startswith("/blog/") and path != "/blog"
    is_tool_page = path.startswith("/tools/") and path != "/tools"
    if path in PRIORITY_MAP:
        priority = PRIORITY_MAP[path]
    elif is_blog_post:
        priority = 0.8
    elif is_tool_page:
        priority = 0.85
    else:
        priority = SITEMAP_CONFIG["priority"]
    return SitemapEntry(
        loc=path,
        changefreq="monthly" if is_blog_post else SITEMAP_CONFIG["changefreq"],
        priority=priority,
        lastmod=lastmod or iso_timestamp(),
    )


def collect_site_paths() -> list[str]:
    """Every public path, in a stable order with no repeats."""
    paths: dict[str, None] = dict.fromkeys(STATIC_PATHS)

    emirates = [e for e in entities.get_entities_by_type("emirate") if e.active]
    for entity_type in entities.PAGE_ENTITY_TYPES:
        for entity in entities.get_entities_by_type(entity_type):
            if entity.active:
                paths.setdefault(f"/{entity.slug}", None)
    for child_type in ("vehicle", "service"):
        children = [c for c in entities.get_entities_by_type(child_type) if c.active]
        for emirate in emirates:
            for child in children:
                paths.setdefault(f"/{emirate.slug}/{child.slug}", None)

    for first, second in PageService.list_compare_pairs():
        paths.setdefault(f"/compare/{first.slug}/{second.slug}", None)
    for slug in BlogService.list_slugs():
        paths.setdefault(f"/blog/{slug}", None)
    for slug in KeywordGuideService.list_slugs():
        paths.setdefault(f"/guides/{slug}", None)

    return [p for p in paths if not is_excluded(p)]


def build_sitemap_entries(paths: list[str] | None = None, lastmod: str | None = None) -> list[SitemapEntry]:
    lastmod = lastmod or iso_timestamp()
    site_url = SITEMAP_CONFIG["site_url"].rstrip("/")
    entries = []
    for path in collect_site_paths() if paths is None else paths:
        if is_excluded(path):
            continue
        entry = transform(path, lastmod)
        entry["loc"] = f"{site_url}{path}"
        entries.append(entry)
    logger.info("Built %d sitemap entries", len(entries))
    return entries


def chunk_entries(entries: list[SitemapEntry], size: int | None = None) -> list[list[SitemapEntry]]:
    size = size or SITEMAP_CONFIG["sitemap_size"]
    return [entries[i:i + size] for i in range(0, len(entries), size)]


def render_urlset(entries: list[SitemapEntry]) -> str:
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">',
    ]
    for entry in entries:
        lines.append(
            f"<url><loc>{escape(entry['loc'])}</loc><lastmod>{escape(entry['lastmod'])}</lastmod>"
            f"<changefreq>{entry['changefreq']}</changefreq><priority>{entry['priority']}</priority></url>"
        )
    lines.append("</urlset>")
    return "\n".join(lines)


def render_sitemap_index(sitemap_urls: list[str], lastmod: str | None = None) -> str:
    lastmod = lastmod or iso_timestamp()
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<sitemapindex xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">',
    ]
    for url in sitemap_urls:
        lines.append(f"<sitemap><loc>{escape(url)}</loc><lastmod>{escape(lastmod)}</lastmod></sitemap>")
    lines.append("</sitemapindex>")
    return "\n".join(lines)


def render_robots_txt(site_url: str | None = None) -> str:
    site_url = (site_url or SITEMAP_CONFIG["site_url"]).rstrip("/")
    blocks: list[str] = []
    for user_agent, allow, disallow, crawl_delay in ROBOTS_POLICIES:
        lines = [f"User-agent: {user_agent}"]
        lines.extend(f"Allow: {p}" for p in allow)
        lines.extend(f"Disallow: {p}" for p in disallow)
        if crawl_delay is not None:
            lines.append(f"Crawl-delay: {crawl_delay}")
        blocks.append("\n".join(lines))
    blocks.append(f"Host: {site_url}\n\nSitemap: {site_url}/sitemap.xml")
    return "\n\n".join(blocks) + "\n"
