"""EntityRelationship model: weighted edges between entities."""

from enum import Enum

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class RelationshipType(str, Enum):
    PARENT = "parent"
    CHILD = "child"
    RELATED = "related"
    SIBLING = "sibling"


def normalize_relationship_type(value: str | None) -> str:
    """Map free-form relationship labels from data files onto the stored enum."""
    try:
        return RelationshipType(value).value
    except ValueError:
        return RelationshipType.RELATED.value


class EntityRelationship(Base):
    __tablename__ = "entity_relationships"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    entity_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    relationship_type: Mapped[str] = mapped_column(String(16), nullable=False)
    related_entity_id: Mapped[str] = mapped_column(String(64), nullable=False)
    related_entity_type: Mapped[str] = mapped_column(String(16), nullable=False)
    weight: Mapped[int] = mapped_column(Integer, nullable=False, default=5)

    def __repr__(self) -> str:
        return (
            f"<EntityRelationship {self.entity_id} -{self.relationship_type}-> "
            f"{self.related_entity_id} w={self.weight}>"
        )
