"""Service layer exports."""

from .blog_service import BlogService
from .keyword_guide_service import KeywordGuideService
from .page_service import PageService

__all__ = ["BlogService", "KeywordGuideService", "PageService"]
