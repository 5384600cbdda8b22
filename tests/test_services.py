"""Tests for PageService, BlogService and KeywordGuideService."""

import pytest
from sqlalchemy.exc import OperationalError

from fleet_hub.db_managers import BlogManager, KeywordGuideManager
from fleet_hub.services import BlogService, KeywordGuideService, PageService
from fleet_hub.services.blog_service import load_seed_articles, reading_time_label
from tests.conftest import make_blog_article, make_keyword_guide


def _raise_operational(*args, **kwargs):
    raise OperationalError("SELECT 1", {}, Exception("database is locked"))


# ── PageService: hubs ───────────────────────────────────────────────────────

class TestHubPage:
    def test_emirate_hub_lists_vehicles_and_services(self, data_dir) -> None:
        bundle = PageService.build_hub_page("dubai")
        assert bundle["page_type"] == "hub"
        assert bundle["path"] == "/dubai"
        assert [v.slug for v in bundle["listings"]["vehicles"]] == ["suv", "sedan", "luxury-car"]
        assert [s.slug for s in bundle["listings"]["services"]] == ["chauffeur-service", "monthly-rental"]
        assert bundle["breadcrumbs"][-1] == {"label": "Dubai", "href": "/dubai"}
        assert bundle["metadata"]["canonical"].endswith("/dubai")
        assert "s-maxage" in bundle["cache_control"]
        assert bundle["schema_script"]["type"] == "application/ld+json"

    def test_vehicle_hub_lists_emirates(self, data_dir) -> None:
        bundle = PageService.build_hub_page("suv")
        assert list(bundle["listings"]) == ["emirates"]
        assert [e.slug for e in bundle["listings"]["emirates"]] == ["dubai", "sharjah", "ajman"]

    def test_unknown_and_inactive_slugs_raise(self, data_dir) -> None:
        with pytest.raises(ValueError):
            PageService.build_hub_page("atlantis")
        with pytest.raises(ValueError):
            PageService.build_hub_page("umm-al-quwain")


# ── PageService: spokes ─────────────────────────────────────────────────────

class TestSpokePage:
    def test_vehicle_spoke(self, data_dir) -> None:
        bundle = PageService.build_spoke_page("dubai", "suv")
        assert bundle["path"] == "/dubai/suv"
        assert bundle["primary"].slug == "dubai"
        assert [s.slug for s in bundle["secondary"]] == ["suv"]
        assert bundle["compare_target"] == "sedan"
        assert [e.slug for e in bundle["listings"]["related"]] == ["sedan"]
        assert [b["href"] for b in bundle["breadcrumbs"]] == ["/", "/dubai", "/dubai/suv"]
        assert bundle["content"]["word_count"] > 0

    def test_service_spoke_has_no_compare_target(self, data_dir) -> None:
        bundle = PageService.build_spoke_page("sharjah", "chauffeur-service")
        assert bundle["path"] == "/sharjah/chauffeur-service"
        assert bundle["compare_target"] is None

    def test_parent_must_be_emirate(self, data_dir) -> None:
        with pytest.raises(ValueError):
            PageService.build_spoke_page("suv", "sedan")

    def test_unknown_child_raises(self, data_dir) -> None:
        with pytest.raises(ValueError):
            PageService.build_spoke_page("dubai", "hovercraft")

    def test_validate_spoke_page_summary(self, data_dir) -> None:
        report = PageService.validate_spoke_page("dubai", "suv")
        assert report["path"] == "/dubai/suv"
        assert set(report["metadata"]) == {"title", "description", "canonical"}
        assert isinstance(report["isr"]["tier"], int)
        assert report["link_count"] >= 0
        assert "score" in report["validation"]


# ── PageService: comparisons ────────────────────────────────────────────────

class TestComparePage:
    def test_two_vehicles(self, data_dir) -> None:
        bundle = PageService.build_compare_page(["suv", "sedan"])
        assert bundle["path"] == "/compare/suv/sedan"
        assert bundle["page_type"] == "comparison"
        assert [s["@type"] for s in bundle["schemas"]] == ["Organization", "ItemList", "BreadcrumbList"]
        assert "SUV" in bundle["metadata"]["title"]
        assert bundle["breadcrumbs"][-1]["label"] == "SUV vs Sedan"

    def test_unknown_slugs_are_skipped(self, data_dir) -> None:
        bundle = PageService.build_compare_page(["suv", "hovercraft", "van"])
        assert bundle["path"] == "/compare/suv/van"

    def test_needs_two_known_vehicles(self, data_dir) -> None:
        with pytest.raises(ValueError):
            PageService.build_compare_page(["suv"])
        with pytest.raises(ValueError):
            PageService.build_compare_page(["suv", "hovercraft"])
        with pytest.raises(ValueError):
            PageService.build_compare_page(["suv", "sedan", "van", "luxury-car"])

    def test_compare_pairs(self, data_dir) -> None:
        pairs = [(a.slug, b.slug) for a, b in PageService.list_compare_pairs()]
        assert pairs == [("suv", "sedan"), ("suv", "luxury-car"), ("sedan", "luxury-car")]
        assert len(PageService.list_compare_pairs(limit=1)) == 1


# ── BlogService ─────────────────────────────────────────────────────────────

class TestBlogServiceSeedFile:
    def test_published_newest_first(self, data_dir) -> None:
        assert [a["slug"] for a in BlogService.list_published()] == ["newer-article", "older-article"]

    def test_seed_defaults(self, data_dir) -> None:
        older = BlogService.get_article("older-article")
        assert older["modified_time"] == older["published_time"]
        assert older["excerpt"]
        assert older["faqs"] == []

    def test_drafts(self, data_dir) -> None:
        assert BlogService.get_by_slug("draft-article") is None
        assert "draft-article" in [a["slug"] for a in load_seed_articles(include_drafts=True)]

    def test_missing_article_raises(self, data_dir) -> None:
        with pytest.raises(ValueError):
            BlogService.get_article("nope")

    def test_missing_seed_file(self, data_dir) -> None:
        (data_dir / "blog_articles.json").unlink()
        assert BlogService.list_published() == []

    def test_related_excludes_current(self, data_dir) -> None:
        assert [a["slug"] for a in BlogService.list_related("newer-article")] == ["older-article"]

    def test_reading_time_label(self) -> None:
        assert reading_time_label({"content_html": "<p>word</p>"}) == "1 min read"


class TestBlogServiceDatabase:
    def test_reads_from_database(self, data_dir, mock_adapter, session) -> None:
        make_blog_article(session, slug="db-article", title="From the DB")
        session.commit()
        assert BlogService.list_slugs() == ["db-article"]
        assert BlogService.get_article("db-article")["title"] == "From the DB"

    def test_falls_back_to_seed_file_on_error(self, data_dir, mock_adapter, monkeypatch) -> None:
        monkeypatch.setattr(BlogManager, "list_published", _raise_operational)
        monkeypatch.setattr(BlogManager, "get_by_slug", _raise_operational)
        assert BlogService.list_slugs() == ["newer-article", "older-article"]
        assert BlogService.get_by_slug("older-article")["title"] == "Older Article"


# ── KeywordGuideService ─────────────────────────────────────────────────────

class TestKeywordGuideServiceGenerated:
    def test_list_guides_sorted_by_keyword(self, data_dir) -> None:
        guides = KeywordGuideService.list_guides()
        assert [g["slug"] for g in guides] == ["car-rental-crm-uae", "fleet-tracking-software-for-rentals"]
        assert guides[0]["category"] == "crm"

    def test_get_guide_normalizes_slug(self, data_dir) -> None:
        guide = KeywordGuideService.get_guide(" Car-Rental-CRM-UAE ")
        assert guide["keyword"] == "car rental CRM UAE"
        assert guide["status"] == "published"
        assert guide["sections"]

    def test_missing_guide_raises(self, data_dir) -> None:
        with pytest.raises(ValueError):
            KeywordGuideService.get_guide("nope")

    def test_related(self, data_dir) -> None:
        related = KeywordGuideService.list_related("car-rental-crm-uae")
        assert [g["slug"] for g in related] == ["fleet-tracking-software-for-rentals"]


class TestKeywordGuideServiceDatabase:
    def test_reads_from_database(self, data_dir, mock_adapter, session) -> None:
        make_keyword_guide(session, slug="rental-crm", keyword="rental CRM")
        make_keyword_guide(session, slug="fleet-gps", keyword="fleet GPS", category="tracking")
        session.commit()
        assert KeywordGuideService.list_slugs() == ["fleet-gps", "rental-crm"]
        assert [g["slug"] for g in KeywordGuideService.list_guides()] == ["fleet-gps", "rental-crm"]
        assert KeywordGuideService.get_guide("rental-crm")["h1"] == "rental CRM"
        assert [g["slug"] for g in KeywordGuideService.list_related("rental-crm")] == ["fleet-gps"]

    def test_missing_row_falls_back_to_generated(self, data_dir, mock_adapter) -> None:
        guide = KeywordGuideService.get_by_slug("car-rental-crm-uae")
        assert guide is not None
        assert guide["keyword"] == "car rental CRM UAE"

    def test_falls_back_on_error(self, data_dir, mock_adapter, monkeypatch) -> None:
        monkeypatch.setattr(KeywordGuideManager, "list_published_slugs", _raise_operational)
        assert KeywordGuideService.list_slugs() == ["car-rental-crm-uae", "fleet-tracking-software-for-rentals"]
