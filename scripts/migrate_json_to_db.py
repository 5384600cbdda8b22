"""Import entity JSON files (data/entities/<type>.json) into the database."""

from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from dotenv import load_dotenv

load_dotenv()

from sqlalchemy.exc import SQLAlchemyError

from fleet_hub.db import get_default_adapter
from fleet_hub.db_managers import EntityManager
from fleet_hub.programmatic.entities import PAGE_ENTITY_TYPES, load_entities_from_file


def main() -> int:
    adapter = get_default_adapter()
    if not adapter.test_connection():
        print("Database connection failed. Check DATABASE_URL or MYSQL_* env vars.")
        return 1
    adapter.create_tables()
    adapter.migrate_tables()

    total = success = 0
    errors: list[str] = []
    for entity_type in PAGE_ENTITY_TYPES:
        loaded = load_entities_from_file(entity_type)
        print(f"Migrating {len(loaded)} {entity_type} entities...")
        for entity in loaded:
            total += 1
            try:
                with adapter.session() as session:
                    EntityManager(session).upsert_entity(entity)
                success += 1
            except SQLAlchemyError as exc:
                errors.append(f"{entity.id}: {exc}")

    print(f"Done. {success}/{total} entities migrated.")
    if errors:
        print("Failures:")
        for item in errors:
            print(item)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
