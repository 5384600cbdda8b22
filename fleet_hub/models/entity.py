"""Entity model: emirates, vehicles, services, intents and locations."""

import json
import time
from typing import Any

from sqlalchemy import Boolean, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


def json_list_from_text(s: str | None) -> list[Any]:
    if not s or not s.strip():
        return []
    try:
        data = json.loads(s)
    except (json.JSONDecodeError, TypeError):
        return []
    return data if isinstance(data, list) else []


def json_dict_from_text(s: str | None) -> dict[str, Any]:
    if not s or not s.strip():
        return {}
    try:
        data = json.loads(s)
    except (json.JSONDecodeError, TypeError):
        return {}
    return data if isinstance(data, dict) else {}


def json_to_text(value: Any) -> str | None:
    if value is None:
        return None
    return json.dumps(value, ensure_ascii=False)


class Entity(Base):
    """Denormalized entity row; content, metadata and SEO lists are JSON text."""

    __tablename__ = "entities"
    __table_args__ = (UniqueConstraint("type", "slug", name="uq_entities_type_slug"),)

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    type: Mapped[str] = mapped_column(String(16), nullable=False, index=True)
    slug: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    display_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=5, index=True)
    metadata_json: Mapped[str | None] = mapped_column(Text, nullable=True)

    content_description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    content_long_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    content_benefits_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    content_features_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    content_faqs_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    content_highlights_json: Mapped[str | None] = mapped_column(Text, nullable=True)

    seo_title_template: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    seo_description_template: Mapped[str] = mapped_column(Text, nullable=False, default="")
    seo_keywords_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    seo_h1_template: Mapped[str | None] = mapped_column(String(255), nullable=True)
    seo_schema_type: Mapped[str | None] = mapped_column(String(64), nullable=True)

    created_at: Mapped[int] = mapped_column(Integer, nullable=False, default=lambda: int(time.time()))
    updated_at: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=lambda: int(time.time()),
        onupdate=lambda: int(time.time()),
    )

    def __repr__(self) -> str:
        return f"<Entity {self.type}:{self.slug} priority={self.priority}>"

    def get_metadata(self) -> dict[str, Any]:
        return json_dict_from_text(self.metadata_json)

    def set_metadata(self, metadata: dict[str, Any] | None) -> None:
        self.metadata_json = json_to_text(metadata or {})

    def get_keywords(self) -> list[str]:
        return [str(k) for k in json_list_from_text(self.seo_keywords_json)]
