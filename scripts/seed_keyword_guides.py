"""Upsert keyword guides generated from data/seo/keywords.json into the database."""

from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from dotenv import load_dotenv

load_dotenv()

from fleet_hub.db import get_default_adapter
from fleet_hub.db_managers import KeywordGuideManager
from fleet_hub.keyword_pages import keyword_landing_pages
from fleet_hub.services.keyword_guide_service import guide_from_page


def main() -> int:
    adapter = get_default_adapter()
    if not adapter.test_connection():
        print("Database connection failed. Check DATABASE_URL or MYSQL_* env vars.")
        return 1
    adapter.create_tables()
    adapter.migrate_tables()

    pages = keyword_landing_pages()
    with adapter.session() as session:
        manager = KeywordGuideManager(session)
        for page in pages:
            manager.upsert(guide_from_page(page))
            print(f"Upserted keyword guide: {page['slug']}")

    print(f"Done. Seeded {len(pages)} keyword guides.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
