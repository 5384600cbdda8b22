"""Shared pytest fixtures for the content hub tests."""

import json
import uuid
from contextlib import contextmanager
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session

import constants
from fleet_hub import keyword_pages
from fleet_hub.models.base import Base
from fleet_hub.models.blog_article import BlogArticle
from fleet_hub.models.keyword_guide import KeywordGuide
from fleet_hub.performance.page_cache import page_cache
from fleet_hub.programmatic import entities
from fleet_hub.programmatic.types import (
    EntityContent,
    EntityRelationship,
    EntitySEO,
    ProgrammaticEntity,
)


# ---------------------------------------------------------------------------
# In-memory SQLite engine + session factory
#
# A named shared-cache in-memory database lets the test session and the
# sessions opened by services through the mocked adapter see the same data.
# Each test gets a unique name so tests are isolated from each other.
# ---------------------------------------------------------------------------

@pytest.fixture(scope="function")
def engine():
    """Fresh shared-cache in-memory SQLite engine per test."""
    db_name = f"test_{uuid.uuid4().hex}"
    url = f"file:{db_name}?mode=memory&cache=shared"
    eng = create_engine(
        f"sqlite:///{url}",
        connect_args={"check_same_thread": False, "uri": True},
    )
    Base.metadata.create_all(eng)
    yield eng
    Base.metadata.drop_all(eng)
    eng.dispose()


@pytest.fixture(scope="function")
def _session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture(scope="function")
def session(_session_factory) -> Session:
    """Main test session; closed after each test."""
    s = _session_factory()
    yield s
    s.close()


# ---------------------------------------------------------------------------
# DB adapter mock backed by the shared in-memory engine
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_adapter(_session_factory, monkeypatch):
    """
    Patch get_default_adapter() in every module that reads the database and
    turn on USE_DB. Each .session() call opens a new session from the shared
    in-memory factory.
    """
    adapter = MagicMock()

    @contextmanager
    def shared_session():
        s = _session_factory()
        try:
            yield s
            s.commit()
        except Exception:
            s.rollback()
            raise
        finally:
            s.close()

    adapter.session.side_effect = shared_session

    for module_path in [
        "fleet_hub.programmatic.entities",
        "fleet_hub.services.blog_service",
        "fleet_hub.services.keyword_guide_service",
    ]:
        monkeypatch.setattr(f"{module_path}.get_default_adapter", lambda: adapter)
    monkeypatch.setattr(constants, "USE_DB", True)

    return adapter


# ---------------------------------------------------------------------------
# Process-wide caches and the JSON data directory
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _reset_caches():
    entities.clear_entity_cache()
    keyword_pages.keyword_landing_pages.cache_clear()
    page_cache.clear()
    page_cache.metrics.reset()
    yield
    entities.clear_entity_cache()
    keyword_pages.keyword_landing_pages.cache_clear()
    page_cache.clear()


@pytest.fixture
def data_dir(tmp_path: Path, monkeypatch) -> Path:
    """A DATA_DIR with a small entity set, two keywords and two blog articles."""
    root = tmp_path / "data"
    write_entity_files(root / "entities", SAMPLE_ENTITIES)
    (root / "seo").mkdir(parents=True)
    (root / "seo" / "keywords.json").write_text(
        json.dumps({"keywords": ["car rental CRM UAE", "fleet tracking software for rentals"]}),
        encoding="utf-8",
    )
    (root / "blog_articles.json").write_text(json.dumps({"articles": SAMPLE_ARTICLES}), encoding="utf-8")

    monkeypatch.setattr(constants, "DATA_DIR", root)
    monkeypatch.setattr(constants, "ENTITIES_DIR", root / "entities")
    monkeypatch.setattr(constants, "USE_DB", False)
    return root


def write_entity_files(entities_dir: Path, by_type: dict[str, list[dict]]) -> None:
    entities_dir.mkdir(parents=True, exist_ok=True)
    for entity_type, rows in by_type.items():
        (entities_dir / f"{entity_type}.json").write_text(json.dumps({"entities": rows}), encoding="utf-8")


# ---------------------------------------------------------------------------
# Sample data
# ---------------------------------------------------------------------------

def _raw(entity_type: str, slug: str, name: str, priority: int, **extra) -> dict:
    row = {
        "id": f"{entity_type}-{slug}",
        "type": entity_type,
        "slug": slug,
        "name": name,
        "priority": priority,
        "active": True,
        "metadata": {},
        "content": {"description": f"{name} description for rental pages."},
        "seo": {"keywords": [f"{name.lower()} rental"]},
        "relationships": [],
    }
    row.update(extra)
    return row


SAMPLE_ENTITIES: dict[str, list[dict]] = {
    "emirate": [
        _raw(
            "emirate",
            "dubai",
            "Dubai",
            10,
            metadata={
                "price": {"from": 99, "currency": "AED"},
                "coordinates": {"lat": 25.2, "lng": 55.27},
                "rating": 4.8,
                "features": ["Free delivery", "Airport pickup", "Salik tags"],
                "stats": {"vehicles_available": 450, "average_rating": 4.8},
            },
            content={
                "description": "Dubai is the busiest rental market in the UAE.",
                "benefits": ["Free delivery", "24/7 support"],
            },
            relationships=[{"type": "nearby", "entityId": "emirate-sharjah", "entityType": "emirate", "weight": 9}],
        ),
        _raw("emirate", "sharjah", "Sharjah", 8),
        _raw("emirate", "ajman", "Ajman", 6),
        _raw("emirate", "umm-al-quwain", "Umm Al Quwain", 4, active=False),
    ],
    "vehicle": [
        _raw(
            "vehicle",
            "suv",
            "SUV",
            10,
            metadata={
                "price": {"from": 180, "daily": 180, "currency": "AED"},
                "rating": 4.8,
                "seats": 7,
                "features": ["Seven seats", "Large boot", "Cruise control"],
            },
            relationships=[{"type": "similar", "entityId": "vehicle-sedan", "entityType": "vehicle", "weight": 8}],
        ),
        _raw(
            "vehicle",
            "sedan",
            "Sedan",
            9,
            metadata={"price": {"from": 110, "currency": "AED"}, "rating": 4.6},
            relationships=[{"type": "similar", "entityId": "vehicle-suv", "entityType": "vehicle", "weight": 8}],
        ),
        _raw("vehicle", "luxury-car", "Luxury Car", 8, metadata={"price": {"from": 650, "currency": "AED"}}),
        _raw("vehicle", "van", "Van", 5),
    ],
    "service": [
        _raw("service", "chauffeur-service", "Chauffeur Service", 8),
        _raw("service", "monthly-rental", "Monthly Rental", 7),
    ],
    "intent": [
        _raw("intent", "tourism", "Tourism", 9),
    ],
}

SAMPLE_ARTICLES: list[dict] = [
    {
        "slug": "older-article",
        "title": "Older Article",
        "category": "Operations",
        "published_time": "2026-01-01T00:00:00.000Z",
        "primary_keyword": "fleet management UAE",
        "content_html": "<p>Fleet management software keeps a rental fleet honest.</p>",
        "status": "published",
    },
    {
        "slug": "newer-article",
        "title": "Newer Article",
        "category": "Fleet Tech",
        "published_time": "2026-01-20T00:00:00.000Z",
        "primary_keyword": "car rental CRM",
        "secondary_keywords": ["rental CRM"],
        "excerpt": "Why rental desks need a CRM.",
        "content_html": "<p>A CRM for car rental businesses.</p>",
        "faqs": [{"question": "Do I need a CRM?", "answer": "Yes, once you pass ten cars."}],
        "status": "published",
    },
    {
        "slug": "draft-article",
        "title": "Draft Article",
        "category": "Operations",
        "content_html": "<p>Not yet.</p>",
        "status": "draft",
    },
]


# ---------------------------------------------------------------------------
# Model factory helpers
# ---------------------------------------------------------------------------

def make_entity(
    *,
    entity_type: str = "vehicle",
    slug: str = "suv",
    name: str = "SUV",
    priority: int = 8,
    active: bool = True,
    metadata: dict | None = None,
    description: str = "A spacious vehicle for families and groups.",
    benefits: list[str] | None = None,
    keywords: list[str] | None = None,
    relationships: list[EntityRelationship] | None = None,
) -> ProgrammaticEntity:
    return ProgrammaticEntity(
        id=f"{entity_type}-{slug}",
        type=entity_type,
        slug=slug,
        name=name,
        display_name=name,
        priority=priority,
        active=active,
        metadata=metadata or {},
        content=EntityContent(description=description, benefits=benefits or []),
        seo=EntitySEO(keywords=keywords if keywords is not None else [f"{name.lower()} rental"]),
        relationships=relationships or [],
    )


def make_blog_article(
    session: Session,
    *,
    slug: str = "test-article",
    title: str = "Test Article",
    status: str = "published",
    published_time: str | None = "2026-01-30T00:00:00.000Z",
    content_html: str = "<p>Rental fleet content.</p>",
) -> BlogArticle:
    article = BlogArticle(
        slug=slug,
        title=title,
        category="Operations",
        primary_keyword="rental",
        content_html=content_html,
        status=status,
        published_time=published_time,
        modified_time=published_time,
    )
    session.add(article)
    session.flush()
    return article


def make_keyword_guide(
    session: Session,
    *,
    slug: str = "car-rental-crm-uae",
    keyword: str = "car rental CRM UAE",
    category: str = "crm",
    status: str = "published",
) -> KeywordGuide:
    guide = KeywordGuide(
        slug=slug,
        keyword=keyword,
        category=category,
        title=f"{keyword} (2026)",
        description=f"Guide to {keyword}.",
        h1=keyword,
        toc_json="[]",
        sections_json="[]",
        faqs_json="[]",
        status=status,
        published_time="2026-01-30T00:00:00.000Z",
        modified_time="2026-01-30T00:00:00.000Z",
    )
    session.add(guide)
    session.flush()
    return guide
