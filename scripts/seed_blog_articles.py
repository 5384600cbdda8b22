"""Upsert blog articles from data/blog_articles.json into the database."""

from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from dotenv import load_dotenv

load_dotenv()

from fleet_hub.db import get_default_adapter
from fleet_hub.db_managers import BlogManager
from fleet_hub.services.blog_service import load_seed_articles


def main() -> int:
    adapter = get_default_adapter()
    if not adapter.test_connection():
        print("Database connection failed. Check DATABASE_URL or MYSQL_* env vars.")
        return 1
    adapter.create_tables()
    adapter.migrate_tables()

    articles = load_seed_articles(include_drafts=True)
    with adapter.session() as session:
        manager = BlogManager(session)
        for article in articles:
            manager.upsert(article)
            print(f"Upserted blog article: {article['slug']}")

    print(f"Done. Seeded {len(articles)} blog articles.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
