import logging
import time
from datetime import datetime, timezone
from typing import Callable

from dotenv import load_dotenv

from flask import Flask, Response, abort, jsonify, make_response, redirect, render_template, request

load_dotenv()

import constants
from fleet_hub.db import get_default_adapter
from fleet_hub.performance.build_optimizer import (
    calculate_build_statistics,
    generate_build_report,
    validate_build_config,
)
from fleet_hub.performance.isr_config import CACHE_CONFIG, NO_STORE, create_cache_tag, handle_revalidation
from fleet_hub.performance.page_cache import page_cache
from fleet_hub.programmatic import entities
from fleet_hub.programmatic.metadata_generator import robots_content
from fleet_hub.programmatic.schema_builder import build_organization_schema, get_schema_script_props
from fleet_hub.seo_utils import (
    add_internal_links,
    generate_article_schema,
    generate_breadcrumb_schema,
    generate_canonical_url,
    generate_faq_schema,
    generate_page_metadata,
    get_social_share_urls,
)
from fleet_hub.services import BlogService, KeywordGuideService, PageService, sitemap
from fleet_hub.services.blog_service import reading_time_label
from fleet_hub.site_config import SITE_CONFIG
from fleet_hub.static_pages import get_static_page

app = Flask(__name__)
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

if constants.USE_DB:
    db_adapter = get_default_adapter()
    db_adapter.create_tables()
    db_adapter.migrate_tables()

app.jinja_env.filters["robots_content"] = robots_content


@app.context_processor
def inject_site() -> dict[str, object]:
    return {
        "site": SITE_CONFIG,
        "ga_measurement_id": constants.GA_MEASUREMENT_ID,
        "current_year": datetime.now(timezone.utc).year,
    }


@app.after_request
def default_cache_control(response: Response) -> Response:
    if "Cache-Control" not in response.headers:
        response.headers["Cache-Control"] = CACHE_CONFIG["isr"]
    return response


@app.errorhandler(404)
def not_found(_error) -> tuple:
    if request.path.startswith("/api/"):
        return jsonify({"error": "Not found"}), 404
    metadata = generate_page_metadata(
        title="Page Not Found",
        description="The page you are looking for does not exist.",
        canonical=generate_canonical_url("/404"),
    )
    metadata["robots"]["index"] = False
    return render_template("404.html", metadata=metadata), 404


def _html(body: str, cache_control: str, *, cache_status: str | None = None) -> Response:
    response = make_response(body)
    response.headers["Cache-Control"] = cache_control
    if cache_status:
        response.headers["X-Cache"] = cache_status
    return response


def _render_programmatic(path: str, build: Callable[[], dict]) -> Response:
    """Serve ``path`` from the page cache, rendering and storing it on a miss."""
    cached = page_cache.get(path)
    if cached is not None:
        return _html(cached.body, cached.cache_control, cache_status="HIT")

    try:
        page = build()
    except ValueError as e:
        logger.info("Page not found path=%s: %s", path, e)
        abort(404)
    except Exception:
        page_cache.metrics.record_error()
        raise

    body = render_template(
        f"{page['page_type']}.html",
        page=page,
        metadata=page["metadata"],
        schema_script=page["schema_script"],
    )
    isr = page["isr"]
    page_cache.set(
        page["path"],
        body,
        ttl_seconds=isr["revalidate"],
        cache_control=page["cache_control"],
        tags=isr["tags"],
    )
    page_cache.metrics.record_generation(
        on_demand=isr["build_strategy"] != "static",
        duration_ms=page["generation_ms"],
    )
    if page["path"] != path:
        # Non-canonical URL (unknown compare slug dropped); the canonical page is now cached
        response = redirect(page["path"], code=301)
        response.headers["Cache-Control"] = page["cache_control"]
        return response
    return _html(body, page["cache_control"], cache_status="MISS")


# ── Pages ────────────────────────────────────────────────────────────────────


@app.route("/")
def home() -> Response:
    emirates = [e for e in entities.get_entities_by_type("emirate") if e.active]
    vehicles = [v for v in entities.get_popular_entities("vehicle", limit=6) if v.active]
    metadata = generate_page_metadata(
        title="Expert Resources for UAE Rental Businesses",
        description=SITE_CONFIG["seo"]["default_description"],
        canonical=generate_canonical_url("/"),
    )
    body = render_template(
        "home.html",
        metadata=metadata,
        schema_script=get_schema_script_props([build_organization_schema()]),
        emirates=emirates,
        vehicles=vehicles,
        articles=BlogService.list_published()[:3],
        guides=KeywordGuideService.list_guides()[:6],
    )
    return _html(body, CACHE_CONFIG["critical"])


@app.route("/<string:slug>")
def hub_page(slug: str) -> Response:
    return _render_programmatic(f"/{slug}", lambda: PageService.build_hub_page(slug))


@app.route("/<string:emirate>/<string:vehicle>")
def spoke_page(emirate: str, vehicle: str) -> Response:
    return _render_programmatic(f"/{emirate}/{vehicle}", lambda: PageService.build_spoke_page(emirate, vehicle))


@app.route("/compare")
def compare_index() -> Response:
    metadata = generate_page_metadata(
        title="Compare Rental Vehicles",
        description="Side-by-side comparisons of rental vehicles in the UAE: prices, seats, features and ratings.",
        canonical=generate_canonical_url("/compare"),
    )
    body = render_template("compare_index.html", metadata=metadata, pairs=PageService.list_compare_pairs())
    return _html(body, CACHE_CONFIG["isr"])


@app.route("/compare/<string:first>/<string:second>")
@app.route("/compare/<string:first>/<string:second>/<string:third>")
def compare_page(first: str, second: str, third: str | None = None) -> Response:
    slugs = [s for s in (first, second, third) if s]
    return _render_programmatic(f"/compare/{'/'.join(slugs)}", lambda: PageService.build_compare_page(slugs))


@app.route("/blog")
def blog_index() -> Response:
    articles = BlogService.list_published()
    metadata = generate_page_metadata(
        title="Blog",
        description="Guides and insights for UAE rental businesses: fleet technology, operations, regulations and growth.",
        canonical=generate_canonical_url("/blog"),
    )
    body = render_template(
        "blog_index.html",
        metadata=metadata,
        articles=articles,
        reading_time_label=reading_time_label,
    )
    return _html(body, CACHE_CONFIG["isr"])


@app.route("/blog/<string:slug>")
def blog_article(slug: str) -> Response:
    try:
        article = BlogService.get_article(slug)
    except ValueError:
        abort(404)

    url = generate_canonical_url(f"/blog/{slug}")
    keywords = [article.get("primary_keyword") or "", *article.get("secondary_keywords", [])]
    keywords = [k for k in keywords if k]
    metadata = generate_page_metadata(
        title=article["title"],
        description=article.get("excerpt") or "",
        keywords=keywords,
        canonical=url,
        article=True,
        published_time=article.get("published_time"),
        modified_time=article.get("modified_time"),
    )
    schemas = [
        generate_article_schema(
            title=article["title"],
            description=article.get("excerpt") or "",
            url=url,
            image_url=f"{SITE_CONFIG['url']}{SITE_CONFIG['seo']['og_image']['url']}",
            published_time=article["published_time"],
            modified_time=article.get("modified_time"),
            keywords=keywords,
        ),
        generate_breadcrumb_schema(
            [
                {"name": "Home", "url": SITE_CONFIG["url"]},
                {"name": "Blog", "url": generate_canonical_url("/blog")},
                {"name": article["title"], "url": url},
            ]
        ),
    ]
    if article.get("faqs"):
        schemas.append(generate_faq_schema(article["faqs"]))

    body = render_template(
        "blog_article.html",
        metadata=metadata,
        schema_script=get_schema_script_props(schemas),
        article=article,
        content_html=add_internal_links(article.get("content_html") or ""),
        reading_time=reading_time_label(article),
        share_urls=get_social_share_urls(url, article["title"]),
        related=BlogService.list_related(slug),
    )
    return _html(body, CACHE_CONFIG["isr"])


@app.route("/guides")
def guides_index() -> Response:
    metadata = generate_page_metadata(
        title="UAE Car Rental Software Guides",
        description="Keyword guides for UAE rental operators: booking systems, CRM, payments, tracking, maintenance and more.",
        canonical=generate_canonical_url("/guides"),
    )
    body = render_template("guides_index.html", metadata=metadata, guides=KeywordGuideService.list_guides())
    return _html(body, CACHE_CONFIG["isr"])


@app.route("/guides/<string:slug>")
def guide_page(slug: str) -> Response:
    try:
        guide = KeywordGuideService.get_guide(slug)
    except ValueError:
        abort(404)

    url = generate_canonical_url(f"/guides/{guide['slug']}")
    metadata = generate_page_metadata(
        title=guide["title"],
        description=guide.get("description") or "",
        keywords=[guide["keyword"]],
        canonical=url,
        article=True,
        published_time=guide.get("published_time"),
        modified_time=guide.get("modified_time"),
    )
    schemas = [
        generate_breadcrumb_schema(
            [
                {"name": "Home", "url": SITE_CONFIG["url"]},
                {"name": "Guides", "url": generate_canonical_url("/guides")},
                {"name": guide["h1"], "url": url},
            ]
        ),
    ]
    if guide.get("faqs"):
        schemas.append(generate_faq_schema(guide["faqs"]))

    body = render_template(
        "guide.html",
        metadata=metadata,
        schema_script=get_schema_script_props(schemas),
        guide=guide,
        related=KeywordGuideService.list_related(guide["slug"]),
    )
    return _html(body, CACHE_CONFIG["isr"])


def _static_page(key: str) -> Response:
    page = get_static_page(key)
    metadata = generate_page_metadata(
        title=page["title"],
        description=page["description"],
        canonical=generate_canonical_url(page["path"]),
    )
    body = render_template("static_page.html", metadata=metadata, page=page)
    return _html(body, CACHE_CONFIG["static"])


@app.route("/about")
def about() -> Response:
    return _static_page("about")


@app.route("/contact")
def contact() -> Response:
    return _static_page("contact")


@app.route("/privacy")
def privacy() -> Response:
    return _static_page("privacy")


@app.route("/terms")
def terms() -> Response:
    return _static_page("terms")


@app.route("/cookies")
def cookies() -> Response:
    return _static_page("cookies")


@app.route("/resources")
def resources() -> Response:
    return _static_page("resources")


@app.route("/resources/fleet-management")
def resources_fleet_management() -> Response:
    return _static_page("fleet-management")


@app.route("/resources/regulations")
def resources_regulations() -> Response:
    return _static_page("regulations")


@app.route("/tools")
def tools() -> Response:
    return _static_page("tools")


# ── Sitemap & robots ─────────────────────────────────────────────────────────


def _xml(body: str) -> Response:
    response = make_response(body)
    response.headers["Content-Type"] = "application/xml; charset=utf-8"
    response.headers["Cache-Control"] = CACHE_CONFIG["isr"]
    return response


@app.route("/sitemap.xml")
def sitemap_xml() -> Response:
    """Single urlset, or an index of /sitemap-<n>.xml files above the sitemap size."""
    chunks = sitemap.chunk_entries(sitemap.build_sitemap_entries())
    if len(chunks) <= 1:
        return _xml(sitemap.render_urlset(chunks[0] if chunks else []))
    urls = [generate_canonical_url(f"/sitemap-{i}.xml") for i in range(len(chunks))]
    return _xml(sitemap.render_sitemap_index(urls))


@app.route("/sitemap-<int:index>.xml")
def sitemap_chunk(index: int) -> Response:
    chunks = sitemap.chunk_entries(sitemap.build_sitemap_entries())
    if index >= len(chunks):
        abort(404)
    return _xml(sitemap.render_urlset(chunks[index]))


@app.route("/robots.txt")
def robots_txt() -> Response:
    response = make_response(sitemap.render_robots_txt())
    response.headers["Content-Type"] = "text/plain; charset=utf-8"
    response.headers["Cache-Control"] = CACHE_CONFIG["static"]
    return response


# ── JSON API ─────────────────────────────────────────────────────────────────


def _json(payload: object, status: int = 200, cache_control: str = CACHE_CONFIG["on-demand"]) -> tuple:
    response = jsonify(payload)
    response.headers["Cache-Control"] = cache_control
    return response, status


@app.route("/api/entities/<string:entity_type>", methods=["GET"])
def api_entities_by_type(entity_type: str) -> tuple:
    """
    List entities of one type, highest priority first.

    Query params:
        min_priority: only entities at or above this priority.
        limit: max number of entities.
    """
    if entity_type not in entities.PAGE_ENTITY_TYPES:
        return _json({"error": f"Unknown entity type: {entity_type}"}, 404)
    min_priority = request.args.get("min_priority", type=int)
    limit = request.args.get("limit", type=int)
    try:
        found = entities.get_entities_by_type(entity_type, min_priority=min_priority, limit=limit)
        return _json({"type": entity_type, "total": len(found), "entities": [e.to_dict() for e in found]})
    except Exception as e:
        logger.exception("list-entities failed.")
        return _json({"error": str(e)}, 500, NO_STORE)


@app.route("/api/entities/search", methods=["GET"])
def api_search_entities() -> tuple:
    query = (request.args.get("q") or "").strip()
    if not query:
        return _json({"error": "Missing 'q' query parameter"}, 400, NO_STORE)
    types = [t for t in (request.args.get("types") or "").split(",") if t] or None
    limit = request.args.get("limit", default=20, type=int)
    try:
        results = entities.search_entities(query, types=types, limit=limit)
        return _json({"query": query, "total": len(results), "entities": [e.to_dict() for e in results]})
    except Exception as e:
        logger.exception("search-entities failed.")
        return _json({"error": str(e)}, 500, NO_STORE)


@app.route("/api/entities/stats", methods=["GET"])
def api_entity_stats() -> tuple:
    try:
        return _json(entities.get_entity_statistics())
    except Exception as e:
        logger.exception("entity-stats failed.")
        return _json({"error": str(e)}, 500, NO_STORE)


@app.route("/api/pages/<string:emirate>/<string:vehicle>/validation", methods=["GET"])
def api_page_validation(emirate: str, vehicle: str) -> tuple:
    try:
        return _json(PageService.validate_spoke_page(emirate, vehicle))
    except ValueError as e:
        logger.info("Validation requested for unknown page: %s", e)
        return _json({"error": str(e)}, 404, NO_STORE)
    except Exception as e:
        logger.exception("page-validation failed.")
        return _json({"error": str(e)}, 500, NO_STORE)


@app.route("/api/revalidate", methods=["POST"])
def api_revalidate() -> tuple:
    """
    Evict rendered pages so the next request renders them again.

    JSON body: { "secret": "...", "paths": ["/dubai"], "entity": "dubai", "type": "emirate" }
    The secret may also be passed as ?secret=.
    """
    body = request.get_json(silent=True) or {}
    if "secret" not in body and request.args.get("secret"):
        body["secret"] = request.args["secret"]

    started = time.perf_counter()
    result = handle_revalidation(body, page_cache.revalidate_path)
    if not result["success"] and result["message"] == "Invalid secret":
        logger.info("Revalidation rejected: invalid secret")
        return _json(result, 401, NO_STORE)
    if not result["success"]:
        return _json(result, 500, NO_STORE)

    # Pages that mention the entity or type elsewhere (comparisons, spokes) carry its cache tag
    tags = [create_cache_tag(kind, str(body[kind])) for kind in ("entity", "type") if body.get(kind)]
    for tag in tags:
        for path in page_cache.revalidate_tag(tag):
            if path not in result["revalidated"]:
                result["revalidated"].append(path)
    if tags:
        result["message"] = f"Successfully revalidated {len(result['revalidated'])} paths"
        entities.clear_entity_cache(body.get("type") or None)
    logger.info(
        "Revalidated %d paths in %.1fms",
        len(result["revalidated"]),
        (time.perf_counter() - started) * 1000,
    )
    return _json(result, 200, NO_STORE)


@app.route("/api/build/report", methods=["GET"])
def api_build_report() -> tuple:
    try:
        stats = calculate_build_statistics(
            {
                "emirates": entities.get_entities_by_type("emirate"),
                "vehicles": entities.get_entities_by_type("vehicle"),
                "services": entities.get_entities_by_type("service"),
                "intents": entities.get_entities_by_type("intent"),
            }
        )
        return _json(
            {
                "statistics": stats.to_dict(),
                "validation": validate_build_config(None, stats),
                "report": generate_build_report(stats),
                "isr_metrics": page_cache.metrics.get_metrics(),
            },
            cache_control=NO_STORE,
        )
    except Exception as e:
        logger.exception("build-report failed.")
        return _json({"error": str(e)}, 500, NO_STORE)


if __name__ == "__main__":
    app.run(debug=True)
