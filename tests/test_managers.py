"""Tests for the DB managers against an in-memory SQLite database."""

from fleet_hub.db_managers import BlogManager, EntityManager, KeywordGuideManager
from fleet_hub.models import (
    Entity,
    EntityRelationship,
    json_dict_from_text,
    json_list_from_text,
    json_to_text,
    normalize_relationship_type,
)
from fleet_hub.programmatic.types import EntityRelationship as Relationship
from tests.conftest import make_blog_article, make_entity, make_keyword_guide


def _seed(session) -> EntityManager:
    manager = EntityManager(session)
    manager.upsert_entity(make_entity(entity_type="emirate", slug="dubai", name="Dubai", priority=10,
                                      description="Dubai rentals near the marina."))
    manager.upsert_entity(make_entity(entity_type="emirate", slug="ajman", name="Ajman", priority=6))
    manager.upsert_entity(make_entity(entity_type="emirate", slug="sharjah", name="Sharjah", priority=8,
                                      description="Short hop from Dubai."))
    manager.upsert_entity(make_entity(slug="suv", name="SUV", priority=10))
    manager.upsert_entity(make_entity(slug="van", name="Van", priority=6))
    session.commit()
    return manager


# ── JSON column helpers ─────────────────────────────────────────────────────

class TestJsonHelpers:
    def test_list_from_text(self) -> None:
        assert json_list_from_text('["a", "b"]') == ["a", "b"]
        assert json_list_from_text("") == []
        assert json_list_from_text("{bad") == []
        assert json_list_from_text('{"a": 1}') == []

    def test_dict_from_text(self) -> None:
        assert json_dict_from_text('{"a": 1}') == {"a": 1}
        assert json_dict_from_text(None) == {}
        assert json_dict_from_text("[1]") == {}

    def test_to_text_keeps_unicode(self) -> None:
        assert json_to_text(["دبي"]) == '["دبي"]'
        assert json_to_text(None) is None

    def test_relationship_type(self) -> None:
        assert normalize_relationship_type("sibling") == "sibling"
        assert normalize_relationship_type("nearby") == "related"
        assert normalize_relationship_type(None) == "related"


# ── EntityManager ───────────────────────────────────────────────────────────

class TestEntityManager:
    def test_upsert_and_map_back(self, session) -> None:
        manager = EntityManager(session)
        entity = make_entity(
            slug="suv",
            name="SUV",
            priority=9,
            metadata={"price": {"from": 180}, "features": ["7 seats"]},
            benefits=["Roomy"],
            keywords=["suv rental dubai"],
            relationships=[Relationship(type="similar", entity_id="vehicle-sedan", entity_type="vehicle", weight=8)],
        )
        manager.upsert_entity(entity)
        session.commit()

        back = manager.to_entity(manager.get_by_id("vehicle-suv"))
        assert back.metadata == {"price": {"from": 180}, "features": ["7 seats"]}
        assert back.content.benefits == ["Roomy"]
        assert back.seo.keywords == ["suv rental dubai"]
        assert [(r.type, r.entity_id, r.weight) for r in back.relationships] == [("related", "vehicle-sedan", 8)]

    def test_upsert_replaces_relationships(self, session) -> None:
        manager = EntityManager(session)
        first = [Relationship(type="sibling", entity_id="vehicle-sedan", entity_type="vehicle", weight=8)]
        second = [Relationship(type="sibling", entity_id="vehicle-van", entity_type="vehicle", weight=6)]
        manager.upsert_entity(make_entity(relationships=first))
        manager.upsert_entity(make_entity(name="SUV 2026", relationships=second))
        session.commit()

        assert session.query(Entity).count() == 1
        assert manager.get_by_id("vehicle-suv").name == "SUV 2026"
        assert [r.related_entity_id for r in manager.list_relationships("vehicle-suv")] == ["vehicle-van"]

    def test_list_by_type_order_and_filters(self, session) -> None:
        manager = _seed(session)
        assert [e.slug for e in manager.list_by_type("emirate")] == ["dubai", "sharjah", "ajman"]
        assert [e.slug for e in manager.list_by_type("emirate", min_priority=7)] == ["dubai", "sharjah"]
        assert [e.slug for e in manager.list_by_type("emirate", limit=1)] == ["dubai"]

    def test_get_by_slug_with_type(self, session) -> None:
        manager = _seed(session)
        assert manager.get_by_slug("suv").type == "vehicle"
        assert manager.get_by_slug("suv", "emirate") is None

    def test_search_ranks_name_over_description(self, session) -> None:
        manager = _seed(session)
        results = manager.search("dubai")
        assert [e.slug for e in results] == ["dubai", "sharjah"]
        assert [e.slug for e in manager.search("dubai", types=["vehicle"])] == []

    def test_search_treats_wildcards_literally(self, session) -> None:
        manager = _seed(session)
        assert manager.search("%") == []
        assert manager.search("_") == []
        manager.upsert_entity(make_entity(slug="suv-50", name="SUV 50% off"))
        session.commit()
        assert [e.slug for e in manager.search("50%")] == ["suv-50"]

    def test_search_skips_inactive_unless_asked(self, session) -> None:
        manager = _seed(session)
        manager.upsert_entity(make_entity(entity_type="emirate", slug="fujairah", name="Fujairah", active=False))
        session.commit()
        assert manager.search("fujairah") == []
        assert [e.slug for e in manager.search("fujairah", active_only=False)] == ["fujairah"]

    def test_priority_range(self, session) -> None:
        manager = _seed(session)
        assert [e.slug for e in manager.list_by_priority_range(6, 8)] == ["sharjah", "ajman", "van"]

    def test_statistics(self, session) -> None:
        stats = _seed(session).statistics()
        assert stats["total"] == 5
        assert stats["by_type"] == {"emirate": 3, "vehicle": 2}
        assert stats["by_priority"][10] == 2
        assert stats["average_priority"] == 8.0

    def test_delete_all(self, session) -> None:
        manager = _seed(session)
        manager.upsert_entity(make_entity(
            slug="sedan",
            relationships=[Relationship(type="sibling", entity_id="vehicle-suv", entity_type="vehicle")],
        ))
        assert manager.delete_all() == 6
        assert session.query(EntityRelationship).count() == 0


# ── BlogManager ─────────────────────────────────────────────────────────────

class TestBlogManager:
    def test_list_published_order(self, session) -> None:
        make_blog_article(session, slug="old", published_time="2026-01-01T00:00:00.000Z")
        make_blog_article(session, slug="undated", published_time=None)
        make_blog_article(session, slug="new", published_time="2026-02-01T00:00:00.000Z")
        make_blog_article(session, slug="draft", status="draft")
        assert [a.slug for a in BlogManager(session).list_published()] == ["new", "old", "undated"]

    def test_get_by_slug_hides_drafts(self, session) -> None:
        make_blog_article(session, slug="draft", status="draft")
        manager = BlogManager(session)
        assert manager.get_by_slug("draft") is None
        assert manager.get_by_slug("draft", published_only=False).status == "draft"

    def test_upsert(self, session) -> None:
        manager = BlogManager(session)
        manager.upsert({"slug": "kpis", "title": "Fleet KPIs", "content_html": "<p>x</p>", "faqs": [{"question": "Q", "answer": "A"}]})
        manager.upsert({"slug": "kpis", "title": "Fleet KPIs 2026", "content_html": "<p>y</p>"})
        article = manager.get_by_slug("kpis")
        assert article.title == "Fleet KPIs 2026"
        assert article.category == "General"
        assert article.to_data()["faqs"] == []


# ── KeywordGuideManager ─────────────────────────────────────────────────────

class TestKeywordGuideManager:
    def test_published_only(self, session) -> None:
        make_keyword_guide(session, slug="b-guide", keyword="b guide")
        make_keyword_guide(session, slug="a-guide", keyword="a guide")
        make_keyword_guide(session, slug="draft-guide", keyword="draft guide", status="draft")
        manager = KeywordGuideManager(session)
        assert manager.list_published_slugs() == ["a-guide", "b-guide"]
        assert [g.keyword for g in manager.list_published()] == ["a guide", "b guide"]
        assert manager.get_published_by_slug("draft-guide") is None

    def test_upsert_round_trips_sections(self, session) -> None:
        manager = KeywordGuideManager(session)
        sections = [{"id": "intro", "heading": "Intro", "type": "text", "paragraphs": ["Hello"]}]
        manager.upsert({"slug": "crm", "keyword": "crm", "title": "CRM", "sections": sections})
        data = manager.get_published_by_slug("crm").to_data()
        assert data["sections"] == sections
        assert data["h1"] == "CRM"
        assert data["category"] == "general"
