"""SQLAlchemy models."""

from .base import Base
from .entity import Entity, json_dict_from_text, json_list_from_text, json_to_text
from .entity_relationship import EntityRelationship, RelationshipType, normalize_relationship_type
from .blog_article import ArticleStatus, BlogArticle, BlogArticleData, BlogFAQ
from .keyword_guide import KeywordGuide, KeywordGuideData

__all__ = [
    "Base",
    "Entity",
    "EntityRelationship",
    "RelationshipType",
    "normalize_relationship_type",
    "ArticleStatus",
    "BlogArticle",
    "BlogArticleData",
    "BlogFAQ",
    "KeywordGuide",
    "KeywordGuideData",
    "json_dict_from_text",
    "json_list_from_text",
    "json_to_text",
]
