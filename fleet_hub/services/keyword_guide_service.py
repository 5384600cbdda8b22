"""Service for keyword guides at /guides/<slug>."""

import logging
from typing import TypedDict

from sqlalchemy.exc import SQLAlchemyError

import constants
from fleet_hub import keyword_pages
from fleet_hub.db import get_default_adapter
from fleet_hub.db_managers import KeywordGuideManager
from fleet_hub.models import KeywordGuideData

logger = logging.getLogger(__name__)


class GuideSummary(TypedDict):
    slug: str
    keyword: str
    description: str
    category: str


def guide_from_page(page: keyword_pages.KeywordLandingPage) -> KeywordGuideData:
    return KeywordGuideData(
        slug=page["slug"],
        keyword=page["keyword"],
        category=page["category"],
        title=page["title"],
        description=page["description"],
        h1=page["h1"],
        toc=[dict(t) for t in page["toc"]],
        sections=[dict(s) for s in page["sections"]],
        faqs=[dict(f) for f in page["faqs"]],
        status="published",
        published_time=page["updated_at_iso"],
        modified_time=page["updated_at_iso"],
    )


def _summary(guide: KeywordGuideData) -> GuideSummary:
    return GuideSummary(
        slug=guide["slug"],
        keyword=guide["keyword"],
        description=guide.get("description") or "",
        category=guide.get("category") or "general",
    )


def _generated_guides() -> list[KeywordGuideData]:
    return [guide_from_page(p) for p in keyword_pages.keyword_landing_pages()]


class KeywordGuideService:
    """Guide reads. Without a database, or when it fails, guides are generated from keywords.json."""

    @staticmethod
    def list_guides() -> list[GuideSummary]:
        if constants.USE_DB:
            try:
                adapter = get_default_adapter()
                with adapter.session() as session:
                    return [_summary(g.to_data()) for g in KeywordGuideManager(session).list_published()]
            except SQLAlchemyError:
                if constants.DB_LOG_ERRORS:
                    logger.exception("Keyword guide list query failed; using generated guides")
        return sorted((_summary(g) for g in _generated_guides()), key=lambda g: g["keyword"])

    @staticmethod
    def list_slugs() -> list[str]:
        if constants.USE_DB:
            try:
                adapter = get_default_adapter()
                with adapter.session() as session:
                    return KeywordGuideManager(session).list_published_slugs()
            except SQLAlchemyError:
                if constants.DB_LOG_ERRORS:
                    logger.exception("Keyword guide slug query failed; using generated guides")
        return sorted(p["slug"] for p in keyword_pages.keyword_landing_pages())

    @staticmethod
    def get_by_slug(slug: str) -> KeywordGuideData | None:
        normalized = slug.strip().lower()
        if constants.USE_DB:
            try:
                adapter = get_default_adapter()
                with adapter.session() as session:
                    guide = KeywordGuideManager(session).get_published_by_slug(normalized)
                    if guide is not None:
                        return guide.to_data()
            except SQLAlchemyError:
                if constants.DB_LOG_ERRORS:
                    logger.exception("Keyword guide query failed for slug=%s; using generated guide", normalized)
        page = keyword_pages.get_keyword_landing_page_by_slug(normalized)
        return guide_from_page(page) if page is not None else None

    @staticmethod
    def get_guide(slug: str) -> KeywordGuideData:
        guide = KeywordGuideService.get_by_slug(slug)
        if guide is None:
            raise ValueError(f"Guide not found: {slug}")
        return guide

    @staticmethod
    def list_related(slug: str, limit: int = 8) -> list[GuideSummary]:
        """Same category first, then the rest; never includes ``slug`` itself."""
        if not constants.USE_DB:
            return [_summary(guide_from_page(p)) for p in keyword_pages.get_related_keyword_landing_pages(slug, limit)]

        guides = KeywordGuideService.list_guides()
        current = next((g for g in guides if g["slug"] == slug), None)
        if current is None:
            return []
        others = [g for g in guides if g["slug"] != slug]
        others.sort(key=lambda g: g["category"] != current["category"])
        return others[: max(0, min(50, limit))]
