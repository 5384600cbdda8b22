"""BlogArticle model: long-form articles rendered at /blog/<slug>."""

import time
from enum import Enum
from typing import TypedDict

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base
from .entity import json_list_from_text, json_to_text


class ArticleStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


class BlogFAQ(TypedDict):
    question: str
    answer: str


class BlogArticleData(TypedDict, total=False):
    slug: str
    title: str
    category: str
    published_time: str | None
    modified_time: str | None
    primary_keyword: str
    secondary_keywords: list[str]
    excerpt: str | None
    content_html: str
    faqs: list[BlogFAQ]
    status: str


class BlogArticle(Base):
    __tablename__ = "blog_articles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    slug: Mapped[str] = mapped_column(String(191), nullable=False, unique=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str] = mapped_column(String(64), nullable=False)
    primary_keyword: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    secondary_keywords_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    excerpt: Mapped[str | None] = mapped_column(Text, nullable=True)
    content_html: Mapped[str] = mapped_column(Text, nullable=False)
    faqs_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=ArticleStatus.PUBLISHED.value)
    # ISO-8601 strings, as published in article:published_time
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
        return f"<BlogArticle {self.slug!r} {self.status}>"

    def to_data(self) -> BlogArticleData:
        return BlogArticleData(
            slug=self.slug,
            title=self.title,
            category=self.category,
            published_time=self.published_time,
            modified_time=self.modified_time,
            primary_keyword=self.primary_keyword,
            secondary_keywords=[str(k) for k in json_list_from_text(self.secondary_keywords_json)],
            excerpt=self.excerpt,
            content_html=self.content_html,
            faqs=json_list_from_text(self.faqs_json),
            status=self.status,
        )

    def apply_data(self, data: BlogArticleData) -> None:
        self.title = data["title"]
        self.category = data.get("category") or "General"
        self.primary_keyword = data.get("primary_keyword") or ""
        self.secondary_keywords_json = json_to_text(data.get("secondary_keywords") or [])
        self.excerpt = data.get("excerpt")
        self.content_html = data.get("content_html") or ""
        self.faqs_json = json_to_text(data.get("faqs") or [])
        self.status = data.get("status") or ArticleStatus.PUBLISHED.value
        self.published_time = data.get("published_time")
        self.modified_time = data.get("modified_time")
