"""Manager for KeywordGuide model: CRUD using a DB session."""

from sqlalchemy.orm import Session

from ..models import KeywordGuide, KeywordGuideData


class KeywordGuideManager:
    """Provides access to KeywordGuide model. Takes a DB session as input."""

    def __init__(self, session: Session):
        self._session = session

    def get_published_by_slug(self, slug: str) -> KeywordGuide | None:
        return (
            self._session.query(KeywordGuide)
            .filter(KeywordGuide.slug == slug, KeywordGuide.status == "published")
            .first()
        )

    def list_published_slugs(self) -> list[str]:
        rows = (
            self._session.query(KeywordGuide.slug)
            .filter(KeywordGuide.status == "published")
            .order_by(KeywordGuide.slug)
            .all()
        )
        return [r[0] for r in rows]

    def list_published(self) -> list[KeywordGuide]:
        return (
            self._session.query(KeywordGuide)
            .filter(KeywordGuide.status == "published")
            .order_by(KeywordGuide.keyword)
            .all()
        )

    def upsert(self, data: KeywordGuideData) -> KeywordGuide:
        guide = self._session.query(KeywordGuide).filter(KeywordGuide.slug == data["slug"]).first()
        if guide is None:
            guide = KeywordGuide(slug=data["slug"])
            self._session.add(guide)
        guide.apply_data(data)
        self._session.flush()
        return guide
