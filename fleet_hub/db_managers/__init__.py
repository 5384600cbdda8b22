"""Managers: take a DB session and provide access to models."""

from .blog_manager import BlogManager
from .entity_manager import EntityManager
from .keyword_guide_manager import KeywordGuideManager

__all__ = ["BlogManager", "EntityManager", "KeywordGuideManager"]
