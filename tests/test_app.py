"""Route tests through the Flask test client, backed by the JSON data directory."""

import pytest

import app as app_module
import constants
from fleet_hub.performance.isr_config import CACHE_CONFIG, NO_STORE
from fleet_hub.performance.page_cache import page_cache


@pytest.fixture
def client(data_dir):
    app_module.app.config["TESTING"] = True
    with app_module.app.test_client() as c:
        yield c


# ── Pages ───────────────────────────────────────────────────────────────────

class TestPages:
    def test_home(self, client) -> None:
        resp = client.get("/")
        assert resp.status_code == 200
        assert resp.headers["Cache-Control"] == CACHE_CONFIG["critical"]
        assert b"Dubai" in resp.data

    def test_hub_is_cached_after_first_render(self, client) -> None:
        first = client.get("/dubai")
        assert first.status_code == 200
        assert first.headers["X-Cache"] == "MISS"
        second = client.get("/dubai")
        assert second.headers["X-Cache"] == "HIT"
        assert second.data == first.data
        assert page_cache.metrics.get_metrics()["cache_hit_rate"] == 0.5

    def test_spoke(self, client) -> None:
        resp = client.get("/dubai/suv")
        assert resp.status_code == 200
        assert b"application/ld+json" in resp.data
        assert "s-maxage" in resp.headers["Cache-Control"]

    def test_compare(self, client) -> None:
        resp = client.get("/compare/suv/sedan")
        assert resp.status_code == 200
        assert b"SUV" in resp.data and b"Sedan" in resp.data
        assert client.get("/compare").status_code == 200

    def test_non_canonical_compare_url_redirects(self, client) -> None:
        resp = client.get("/compare/suv/sedan/hovercraft")
        assert resp.status_code == 301
        assert resp.headers["Location"].endswith("/compare/suv/sedan")
        assert client.get("/compare/suv/sedan").headers["X-Cache"] == "HIT"

    @pytest.mark.parametrize("path", ["/atlantis", "/umm-al-quwain", "/dubai/hovercraft", "/compare/suv/hovercraft"])
    def test_unknown_pages_404(self, client, path) -> None:
        resp = client.get(path)
        assert resp.status_code == 404
        assert b"noindex" in resp.data

    def test_blog(self, client) -> None:
        index = client.get("/blog")
        assert index.status_code == 200
        assert b"Newer Article" in index.data
        assert b"Draft Article" not in index.data

        article = client.get("/blog/newer-article")
        assert article.status_code == 200
        assert b"FAQPage" in article.data
        assert client.get("/blog/draft-article").status_code == 404

    def test_guides(self, client) -> None:
        assert client.get("/guides").status_code == 200
        resp = client.get("/guides/car-rental-crm-uae")
        assert resp.status_code == 200
        assert b"car rental CRM UAE" in resp.data
        assert client.get("/guides/nope").status_code == 404

    @pytest.mark.parametrize("path", ["/about", "/contact", "/privacy", "/resources/regulations", "/tools"])
    def test_static_pages(self, client, path) -> None:
        resp = client.get(path)
        assert resp.status_code == 200
        assert resp.headers["Cache-Control"] == CACHE_CONFIG["static"]


# ── Sitemap & robots ────────────────────────────────────────────────────────

class TestSitemapRoutes:
    def test_sitemap(self, client) -> None:
        resp = client.get("/sitemap.xml")
        assert resp.status_code == 200
        assert resp.headers["Content-Type"].startswith("application/xml")
        assert b"<urlset" in resp.data
        assert b"/dubai/suv</loc>" in resp.data

    def test_sitemap_index_when_chunked(self, client, monkeypatch) -> None:
        monkeypatch.setitem(app_module.sitemap.SITEMAP_CONFIG, "sitemap_size", 10)
        index = client.get("/sitemap.xml")
        assert b"<sitemapindex" in index.data
        assert b"/sitemap-0.xml</loc>" in index.data
        assert client.get("/sitemap-0.xml").status_code == 200
        assert client.get("/sitemap-999.xml").status_code == 404

    def test_robots(self, client) -> None:
        resp = client.get("/robots.txt")
        assert resp.headers["Content-Type"].startswith("text/plain")
        assert b"Sitemap: " in resp.data


# ── JSON API ────────────────────────────────────────────────────────────────

class TestApi:
    def test_entities_by_type(self, client) -> None:
        resp = client.get("/api/entities/vehicle?min_priority=9")
        data = resp.get_json()
        assert resp.status_code == 200
        assert [e["slug"] for e in data["entities"]] == ["suv", "sedan"]
        assert data["total"] == 2

    def test_unknown_type(self, client) -> None:
        assert client.get("/api/entities/spaceship").status_code == 404

    def test_search(self, client) -> None:
        assert client.get("/api/entities/search").status_code == 400
        data = client.get("/api/entities/search?q=dubai").get_json()
        assert data["entities"][0]["slug"] == "dubai"
        assert client.get("/api/entities/search?q=quwain").get_json()["entities"] == []

    def test_stats(self, client) -> None:
        data = client.get("/api/entities/stats").get_json()
        assert data["by_type"]["vehicle"] == 4

    def test_validation(self, client) -> None:
        resp = client.get("/api/pages/dubai/suv/validation")
        assert resp.status_code == 200
        assert resp.get_json()["path"] == "/dubai/suv"
        assert client.get("/api/pages/dubai/hovercraft/validation").status_code == 404

    def test_unknown_api_path_is_json(self, client) -> None:
        resp = client.get("/api/nope/nope/nope")
        assert resp.status_code == 404
        assert resp.get_json() == {"error": "Not found"}

    def test_build_report(self, client) -> None:
        resp = client.get("/api/build/report")
        data = resp.get_json()
        assert resp.status_code == 200
        assert resp.headers["Cache-Control"] == NO_STORE
        assert {"statistics", "validation", "report", "isr_metrics"} <= set(data)


class TestRevalidate:
    def test_wrong_secret_is_rejected(self, client, monkeypatch) -> None:
        monkeypatch.setattr(constants, "REVALIDATION_SECRET", "s3cret")
        resp = client.post("/api/revalidate", json={"secret": "nope", "paths": ["/dubai"]})
        assert resp.status_code == 401
        assert resp.get_json()["success"] is False

    def test_evicts_cached_page(self, client, monkeypatch) -> None:
        monkeypatch.setattr(constants, "REVALIDATION_SECRET", "s3cret")
        client.get("/dubai")
        resp = client.post("/api/revalidate?secret=s3cret", json={"paths": ["/dubai"]})
        assert resp.status_code == 200
        assert resp.get_json()["revalidated"] == ["/dubai"]
        assert client.get("/dubai").headers["X-Cache"] == "MISS"

    def test_entity_revalidation_covers_spokes(self, client) -> None:
        data = client.post("/api/revalidate", json={"entity": "suv"}).get_json()
        assert data["revalidated"] == ["/suv", "/dubai/suv", "/sharjah/suv", "/ajman/suv"]

    def test_entity_revalidation_evicts_tagged_comparisons(self, client) -> None:
        assert client.get("/compare/suv/sedan").headers["X-Cache"] == "MISS"
        assert client.get("/compare/suv/sedan").headers["X-Cache"] == "HIT"

        data = client.post("/api/revalidate", json={"entity": "suv"}).get_json()

        assert "/compare/suv/sedan" in data["revalidated"]
        assert data["revalidated"].count("/suv") == 1
        assert client.get("/compare/suv/sedan").headers["X-Cache"] == "MISS"

    def test_type_revalidation_evicts_spokes(self, client) -> None:
        client.get("/dubai/suv")
        client.get("/dubai")

        data = client.post("/api/revalidate", json={"type": "vehicle"}).get_json()

        assert "/dubai/suv" in data["revalidated"]
        assert data["message"] == f"Successfully revalidated {len(data['revalidated'])} paths"
        assert client.get("/dubai/suv").headers["X-Cache"] == "MISS"
        assert client.get("/dubai").headers["X-Cache"] == "HIT"
