"""KeywordGuide model: persisted keyword landing pages served at /guides/<slug>."""

import time
from typing import Any, TypedDict

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base
from .entity import json_list_from_text, json_to_text


class KeywordGuideData(TypedDict, total=False):
    slug: str
    keyword: str
    category: str
    title: str
    description: str
    h1: str
    toc: list[dict[str, str]]
    sections: list[dict[str, Any]]
    faqs: list[dict[str, str]]
    status: str
    published_time: str | None
    modified_time: str | None


class KeywordGuide(Base):
    __tablename__ = "keyword_guides"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    slug: Mapped[str] = mapped_column(String(191), nullable=False, unique=True)
    keyword: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str] = mapped_column(String(32), nullable=False, default="general")
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    h1: Mapped[str] = mapped_column(String(255), nullable=False)
    toc_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    sections_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    faqs_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="published")
    published_time: Mapped[str | None] = mapped_column(String(32), nullable=True)
    modified_time: Mapped[str | None] = mapped_column(String(32), nullable=True)
    created_at: Mapped[int] = mapped_column(Integer, nullable=False, default=lambda: int(time.time()))
    updated_at: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=lambda: int(time.time()),
        onupdate=lambda: int(time.time()),
    )

    def __repr__(self) -> str:
        return f"<KeywordGuide {self.slug!r} {self.category}>"

    def to_data(self) -> KeywordGuideData:
        return KeywordGuideData(
            slug=self.slug,
            keyword=self.keyword,
            category=self.category,
            title=self.title,
            description=self.description,
            h1=self.h1,
            toc=json_list_from_text(self.toc_json),
            sections=json_list_from_text(self.sections_json),
            faqs=json_list_from_text(self.faqs_json),
            status=self.status,
            published_time=self.published_time,
            modified_time=self.modified_time,
        )

    def apply_data(self, data: KeywordGuideData) -> None:
        self.keyword = data["keyword"]
        self.category = data.get("category") or "general"
        self.title = data["title"]
        self.description = data.get("description") or ""
        self.h1 = data.get("h1") or data["title"]
        self.toc_json = json_to_text(data.get("toc") or [])
        self.sections_json = json_to_text(data.get("sections") or [])
        self.faqs_json = json_to_text(data.get("faqs") or [])
        self.status = data.get("status") or "published"
        self.published_time = data.get("published_time")
        self.modified_time = data.get("modified_time")
