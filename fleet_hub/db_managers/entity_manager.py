"""Manager for Entity and EntityRelationship models: CRUD using a DB session."""

from sqlalchemy import case, func, or_
from sqlalchemy.orm import Session

from ..models import (
    Entity,
    EntityRelationship,
    json_list_from_text,
    json_to_text,
    normalize_relationship_type,
)
from ..programmatic.types import (
    EntityContent,
    EntitySEO,
    ProgrammaticEntity,
)
from ..programmatic.types import EntityRelationship as Relationship


def _contains_pattern(text: str) -> str:
    """LIKE pattern matching ``text`` literally; escape char is a backslash."""
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class EntityManager:
    """Provides access to the entities tables. Takes a DB session as input."""

    def __init__(self, session: Session):
        self._session = session

    # ── Reads ────────────────────────────────────────────────────────────────

    def list_by_type(
        self,
        entity_type: str,
        *,
        min_priority: int | None = None,
        limit: int | None = None,
    ) -> list[Entity]:
        query = self._session.query(Entity).filter(Entity.type == entity_type)
        if min_priority is not None:
            query = query.filter(Entity.priority >= min_priority)
        query = query.order_by(Entity.priority.desc(), Entity.name.asc())
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def list_all(self) -> list[Entity]:
        return (
            self._session.query(Entity)
            .order_by(Entity.type, Entity.priority.desc(), Entity.name.asc())
            .all()
        )

    def get_by_id(self, entity_id: str, entity_type: str | None = None) -> Entity | None:
        query = self._session.query(Entity).filter(Entity.id == entity_id)
        if entity_type:
            query = query.filter(Entity.type == entity_type)
        return query.first()

    def get_by_slug(self, slug: str, entity_type: str | None = None) -> Entity | None:
        query = self._session.query(Entity).filter(Entity.slug == slug)
        if entity_type:
            query = query.filter(Entity.type == entity_type)
        return query.order_by(Entity.priority.desc()).first()

    def list_relationships(self, entity_id: str) -> list[EntityRelationship]:
        return (
            self._session.query(EntityRelationship)
            .filter(EntityRelationship.entity_id == entity_id)
            .order_by(EntityRelationship.weight.desc())
            .all()
        )

    def search(
        self,
        query_text: str,
        *,
        types: list[str] | None = None,
        limit: int = 20,
        active_only: bool = True,
    ) -> list[Entity]:
        """LIKE search over name, slug, description and keywords, best match first.

        ``%`` and ``_`` in ``query_text`` match themselves.
        """
        pattern = _contains_pattern(query_text)
        relevance = case(
            (Entity.name.like(pattern, escape="\\"), 100),
            (Entity.slug.like(pattern, escape="\\"), 50),
            (Entity.content_description.like(pattern, escape="\\"), 20),
            else_=0,
        )
        query = self._session.query(Entity).filter(
            or_(
                Entity.name.like(pattern, escape="\\"),
                Entity.slug.like(pattern, escape="\\"),
                Entity.content_description.like(pattern, escape="\\"),
                Entity.seo_keywords_json.like(pattern, escape="\\"),
            )
        )
        if types:
            query = query.filter(Entity.type.in_(types))
        if active_only:
            query = query.filter(Entity.active.is_(True))
        return query.order_by(relevance.desc(), Entity.priority.desc()).limit(limit).all()

    def list_by_priority_range(self, min_priority: int, max_priority: int = 10) -> list[Entity]:
        return (
            self._session.query(Entity)
            .filter(Entity.priority >= min_priority, Entity.priority <= max_priority)
            .order_by(Entity.priority.desc(), Entity.type, Entity.name)
            .all()
        )

    def statistics(self) -> dict[str, object]:
        by_type = dict(
            self._session.query(Entity.type, func.count(Entity.id)).group_by(Entity.type).all()
        )
        by_priority = dict(
            self._session.query(Entity.priority, func.count(Entity.id)).group_by(Entity.priority).all()
        )
        total = sum(by_type.values())
        avg = self._session.query(func.avg(Entity.priority)).scalar()
        return {
            "total": total,
            "by_type": by_type,
            "by_priority": by_priority,
            "average_priority": float(avg) if avg is not None else 0.0,
        }

    # ── Writes ───────────────────────────────────────────────────────────────

    def upsert_entity(self, entity: ProgrammaticEntity) -> Entity:
        """Insert or update by id; relationships are replaced wholesale."""
        row = self._session.get(Entity, entity.id)
        if row is None:
            row = Entity(id=entity.id)
            self._session.add(row)
        row.type = entity.type
        row.slug = entity.slug
        row.name = entity.name
        row.display_name = entity.display_name or entity.name
        row.active = entity.active
        row.priority = entity.priority
        row.set_metadata(entity.metadata)
        row.content_description = entity.content.description
        row.content_long_description = entity.content.long_description
        row.content_benefits_json = json_to_text(entity.content.benefits)
        row.content_features_json = json_to_text(entity.content.features)
        row.content_faqs_json = json_to_text(entity.content.faqs)
        row.content_highlights_json = json_to_text(entity.content.highlights)
        row.seo_title_template = entity.seo.title_template
        row.seo_description_template = entity.seo.description_template
        row.seo_keywords_json = json_to_text(entity.seo.keywords)
        row.seo_h1_template = entity.seo.h1_template
        row.seo_schema_type = entity.seo.schema_type

        self._session.query(EntityRelationship).filter(
            EntityRelationship.entity_id == entity.id
        ).delete()
        for rel in entity.relationships:
            self._session.add(
                EntityRelationship(
                    entity_id=entity.id,
                    relationship_type=normalize_relationship_type(rel.type),
                    related_entity_id=rel.entity_id,
                    related_entity_type=rel.entity_type,
                    weight=rel.weight,
                )
            )
        self._session.flush()
        return row

    def delete_all(self) -> int:
        self._session.query(EntityRelationship).delete()
        return self._session.query(Entity).delete()

    # ── Mapping ──────────────────────────────────────────────────────────────

    def to_entity(self, row: Entity, *, with_relationships: bool = True) -> ProgrammaticEntity:
        relationships = (
            [
                Relationship(
                    type=r.relationship_type,
                    entity_id=r.related_entity_id,
                    entity_type=r.related_entity_type,
                    weight=r.weight,
                )
                for r in self.list_relationships(row.id)
            ]
            if with_relationships
            else []
        )
        return ProgrammaticEntity(
            id=row.id,
            type=row.type,
            slug=row.slug,
            name=row.name,
            display_name=row.display_name or row.name,
            priority=row.priority,
            active=bool(row.active),
            metadata=row.get_metadata(),
            content=EntityContent(
                description=row.content_description or "",
                long_description=row.content_long_description,
                benefits=json_list_from_text(row.content_benefits_json),
                features=json_list_from_text(row.content_features_json),
                faqs=json_list_from_text(row.content_faqs_json),
                highlights=json_list_from_text(row.content_highlights_json),
            ),
            seo=EntitySEO(
                title_template=row.seo_title_template or "",
                description_template=row.seo_description_template or "",
                keywords=row.get_keywords(),
                h1_template=row.seo_h1_template,
                schema_type=row.seo_schema_type,
            ),
            relationships=relationships,
        )
