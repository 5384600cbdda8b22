"""Tests for sitemap.xml and robots.txt generation."""

from fleet_hub.services import sitemap
from fleet_hub.services.sitemap import (
    build_sitemap_entries,
    chunk_entries,
    collect_site_paths,
    is_excluded,
    render_robots_txt,
    render_sitemap_index,
    render_urlset,
    transform,
)

LASTMOD = "2026-01-30T00:00:00.000Z"


class TestTransform:
    def test_priority_map(self) -> None:
        assert transform("/", LASTMOD)["priority"] == 1.0
        assert transform("/blog", LASTMOD)["priority"] == 0.9

    def test_blog_posts_are_monthly(self) -> None:
        entry = transform("/blog/fleet-kpis", LASTMOD)
        assert entry["priority"] == 0.8
        assert entry["changefreq"] == "monthly"

    def test_tool_pages(self) -> None:
        assert transform("/tools/roi-calculator", LASTMOD)["priority"] == 0.85

    def test_default(self) -> None:
        entry = transform("/dubai/suv", LASTMOD)
        assert (entry["priority"], entry["changefreq"], entry["lastmod"]) == (0.7, "weekly", LASTMOD)


class TestExclusion:
    def test_patterns(self) -> None:
        assert is_excluded("/api/entities")
        assert is_excluded("/404")
        assert not is_excluded("/dubai")

    def test_excluded_paths_are_dropped(self) -> None:
        entries = build_sitemap_entries(["/", "/api/stats"], LASTMOD)
        assert [e["loc"] for e in entries] == [f"{sitemap.SITEMAP_CONFIG['site_url'].rstrip('/')}/"]


class TestCollectSitePaths:
    def test_covers_every_page_family(self, data_dir) -> None:
        paths = collect_site_paths()
        assert paths[0] == "/"
        assert "/dubai" in paths
        assert "/suv" in paths
        assert "/umm-al-quwain" not in paths
        assert "/dubai/suv" in paths
        assert "/sharjah/chauffeur-service" in paths
        assert "/umm-al-quwain/suv" not in paths
        assert "/compare/suv/sedan" in paths
        assert "/blog/newer-article" in paths
        assert "/blog/draft-article" not in paths
        assert "/guides/car-rental-crm-uae" in paths
        assert len(paths) == len(set(paths))


class TestRendering:
    def test_urlset_escapes_locations(self) -> None:
        xml = render_urlset([transform("https://example.com/?a=1&b=2", LASTMOD)])
        assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?>')
        assert "a=1&amp;b=2" in xml
        assert "<changefreq>weekly</changefreq><priority>0.7</priority>" in xml

    def test_chunking_and_index(self) -> None:
        entries = [transform(f"/p{i}", LASTMOD) for i in range(5)]
        chunks = chunk_entries(entries, size=2)
        assert [len(c) for c in chunks] == [2, 2, 1]
        index = render_sitemap_index(["https://example.com/sitemap-0.xml"], LASTMOD)
        assert "<sitemapindex" in index
        assert "<loc>https://example.com/sitemap-0.xml</loc>" in index

    def test_robots(self) -> None:
        robots = render_robots_txt("https://example.com/")
        assert robots.startswith("User-agent: *\nAllow: /")
        assert "Disallow: /api/" in robots
        assert "User-agent: AhrefsBot\nCrawl-delay: 10" in robots
        assert robots.endswith("Host: https://example.com\n\nSitemap: https://example.com/sitemap.xml\n")
