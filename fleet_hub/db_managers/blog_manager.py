"""Manager for BlogArticle model: CRUD using a DB session."""

from sqlalchemy.orm import Session

from ..models import ArticleStatus, BlogArticle, BlogArticleData


class BlogManager:
    """Provides access to BlogArticle model. Takes a DB session as input."""

    def __init__(self, session: Session):
        self._session = session

    def list_published(self) -> list[BlogArticle]:
        # Undated articles sort after dated ones, newest first by creation
        return (
            self._session.query(BlogArticle)
            .filter(BlogArticle.status == ArticleStatus.PUBLISHED.value)
            .order_by(
                BlogArticle.published_time.is_(None),
                BlogArticle.published_time.desc(),
                BlogArticle.created_at.desc(),
            )
            .all()
        )

    def get_by_slug(self, slug: str, *, published_only: bool = True) -> BlogArticle | None:
        query = self._session.query(BlogArticle).filter(BlogArticle.slug == slug)
        if published_only:
            query = query.filter(BlogArticle.status == ArticleStatus.PUBLISHED.value)
        return query.first()

    def upsert(self, data: BlogArticleData) -> BlogArticle:
        article = self._session.query(BlogArticle).filter(BlogArticle.slug == data["slug"]).first()
        if article is None:
            article = BlogArticle(slug=data["slug"])
            self._session.add(article)
        article.apply_data(data)
        self._session.flush()
        return article
