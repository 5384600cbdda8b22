"""Service for blog articles: database when USE_DB is on, seed JSON otherwise."""

import json
import logging

from sqlalchemy.exc import SQLAlchemyError

import constants
from fleet_hub.db import get_default_adapter
from fleet_hub.db_managers import BlogManager
from fleet_hub.models import ArticleStatus, BlogArticleData
from fleet_hub.seo_utils import calculate_reading_time, generate_excerpt
from fleet_hub.utils import iso_timestamp

logger = logging.getLogger(__name__)

SEED_FILE = "blog_articles.json"


def _with_defaults(article: BlogArticleData) -> BlogArticleData:
    """Fill publish dates and excerpt the way pages expect them."""
    now = iso_timestamp()
    published = article.get("published_time") or now
    article["published_time"] = published
    article["modified_time"] = article.get("modified_time") or published
    if not article.get("excerpt"):
        article["excerpt"] = generate_excerpt(article.get("content_html") or "")
    article["secondary_keywords"] = list(article.get("secondary_keywords") or [])
    article["faqs"] = list(article.get("faqs") or [])
    return article


def load_seed_articles(include_drafts: bool = False) -> list[BlogArticleData]:
    """Articles from ``DATA_DIR/blog_articles.json``, newest first."""
    path = constants.DATA_DIR / SEED_FILE
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        logger.warning("Blog seed file not found: %s", path)
        return []
    except json.JSONDecodeError:
        logger.exception("Failed to parse blog seed file: %s", path)
        return []
    rows = data.get("articles", []) if isinstance(data, dict) else data
    articles = [
        _with_defaults(BlogArticleData(**row))
        for row in rows
        if include_drafts or (row.get("status") or ArticleStatus.PUBLISHED.value) == ArticleStatus.PUBLISHED.value
    ]
    articles.sort(key=lambda a: a["published_time"] or "", reverse=True)
    return articles


def reading_time_label(article: BlogArticleData) -> str:
    return f"{calculate_reading_time(article.get('content_html') or '')} min read"


class BlogService:
    """Blog reads. A database error is logged and the seed file is used instead."""

    @staticmethod
    def list_published() -> list[BlogArticleData]:
        if constants.USE_DB:
            try:
                adapter = get_default_adapter()
                with adapter.session() as session:
                    return [_with_defaults(a.to_data()) for a in BlogManager(session).list_published()]
            except SQLAlchemyError:
                if constants.DB_LOG_ERRORS:
                    logger.exception("Blog list query failed; falling back to seed file")
        return load_seed_articles()

    @staticmethod
    def get_by_slug(slug: str) -> BlogArticleData | None:
        if constants.USE_DB:
            try:
                adapter = get_default_adapter()
                with adapter.session() as session:
                    article = BlogManager(session).get_by_slug(slug)
                    return _with_defaults(article.to_data()) if article is not None else None
            except SQLAlchemyError:
                if constants.DB_LOG_ERRORS:
                    logger.exception("Blog article query failed for slug=%s; falling back to seed file", slug)
        return next((a for a in load_seed_articles() if a["slug"] == slug), None)

    @staticmethod
    def get_article(slug: str) -> BlogArticleData:
        article = BlogService.get_by_slug(slug)
        if article is None:
            raise ValueError(f"Article not found: {slug}")
        return article

    @staticmethod
    def list_related(slug: str, limit: int = 3) -> list[BlogArticleData]:
        """Other articles, same category first."""
        articles = BlogService.list_published()
        current = next((a for a in articles if a["slug"] == slug), None)
        others = [a for a in articles if a["slug"] != slug]
        if current is not None:
            others.sort(key=lambda a: a.get("category") != current.get("category"))
        return others[:limit]

    @staticmethod
    def list_slugs() -> list[str]:
        return [a["slug"] for a in BlogService.list_published()]
