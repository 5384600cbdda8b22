"""
Entity registry: typed access to emirates, vehicles, services and intents.

Reads from the database when USE_DB is enabled and from the JSON seed files in
DATA_DIR/entities otherwise. A database failure is logged and the JSON files
are used instead. Lists per type are cached in memory with a short TTL.
"""

import json
import logging
import threading
from pathlib import Path
from typing import TypedDict

from cachetools import TTLCache
from sqlalchemy.exc import SQLAlchemyError

import constants
from fleet_hub.db import get_default_adapter
from fleet_hub.db_managers import EntityManager
from fleet_hub.programmatic.types import EntityType, ProgrammaticEntity

logger = logging.getLogger(__name__)

# Types that have pages of their own; "location" is reserved for sub-areas
PAGE_ENTITY_TYPES: tuple[str, ...] = (
    EntityType.EMIRATE.value,
    EntityType.VEHICLE.value,
    EntityType.SERVICE.value,
    EntityType.INTENT.value,
)

# One slot per entity type plus headroom for ad-hoc keys
_cache: TTLCache = TTLCache(maxsize=16, ttl=constants.ENTITY_CACHE_TTL_SECONDS)
_cache_lock = threading.Lock()


def _sort_entities(entities: list[ProgrammaticEntity]) -> list[ProgrammaticEntity]:
    return sorted(entities, key=lambda e: (-e.priority, e.name))


def load_entities_from_file(entity_type: str, entities_dir: Path | None = None) -> list[ProgrammaticEntity]:
    """Load ``<type>.json`` (either ``{"entities": [...]}`` or a bare list)."""
    path = (entities_dir or constants.ENTITIES_DIR) / f"{entity_type}.json"
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        logger.warning("Entity file not found: %s", path)
        return []
    except json.JSONDecodeError:
        logger.exception("Failed to parse entity file: %s", path)
        return []
    rows = data.get("entities", []) if isinstance(data, dict) else data
    return [ProgrammaticEntity.from_dict(r) for r in rows]


def _load_from_db(entity_type: str) -> list[ProgrammaticEntity]:
    adapter = get_default_adapter()
    with adapter.session() as session:
        manager = EntityManager(session)
        return [manager.to_entity(row) for row in manager.list_by_type(entity_type)]


def _load_type(entity_type: str) -> list[ProgrammaticEntity]:
    if constants.USE_DB:
        try:
            return _load_from_db(entity_type)
        except SQLAlchemyError:
            if constants.DB_LOG_ERRORS:
                logger.exception("Entity query failed for type=%s; falling back to JSON", entity_type)
    return _sort_entities(load_entities_from_file(entity_type))


def get_entities_by_type(
    entity_type: str,
    *,
    use_cache: bool = True,
    min_priority: int | None = None,
    limit: int | None = None,
) -> list[ProgrammaticEntity]:
    """Entities of one type, highest priority first."""
    entities = None
    if use_cache:
        with _cache_lock:
            entities = _cache.get(entity_type)
    if entities is None:
        entities = _load_type(entity_type)
        with _cache_lock:
            _cache[entity_type] = entities
    if min_priority is not None:
        entities = [e for e in entities if e.priority >= min_priority]
    if limit is not None:
        entities = entities[:limit]
    return list(entities)


def get_all_entities() -> list[ProgrammaticEntity]:
    result: list[ProgrammaticEntity] = []
    for entity_type in PAGE_ENTITY_TYPES:
        result.extend(get_entities_by_type(entity_type))
    return result


def get_entity_map() -> dict[str, ProgrammaticEntity]:
    return {e.id: e for e in get_all_entities()}


def get_entity_by_id(entity_id: str, entity_type: str | None = None) -> ProgrammaticEntity | None:
    types = (entity_type,) if entity_type else PAGE_ENTITY_TYPES
    for t in types:
        for entity in get_entities_by_type(t):
            if entity.id == entity_id:
                return entity
    return None


def get_entity_by_slug(slug: str, entity_type: str | None = None) -> ProgrammaticEntity | None:
    types = (entity_type,) if entity_type else PAGE_ENTITY_TYPES
    for t in types:
        for entity in get_entities_by_type(t):
            if entity.slug == slug:
                return entity
    return None


def get_related_entities(
    entity: ProgrammaticEntity,
    *,
    min_weight: int = 5,
    max_results: int = 10,
    types: list[str] | None = None,
) -> list[ProgrammaticEntity]:
    relationships = [
        r for r in entity.relationships
        if (not min_weight or r.weight >= min_weight) and (not types or r.entity_type in types)
    ]
    relationships.sort(key=lambda r: r.weight, reverse=True)

    related: list[ProgrammaticEntity] = []
    for rel in relationships[:max_results]:
        found = get_entity_by_id(rel.entity_id, rel.entity_type or None)
        if found is not None:
            related.append(found)
    return related


def search_entities(
    query: str,
    *,
    types: list[str] | None = None,
    limit: int = 20,
) -> list[ProgrammaticEntity]:
    """Active entities only. Score matches: name 100, slug 50, keywords 30, tags 25, description 20."""
    if constants.USE_DB:
        try:
            adapter = get_default_adapter()
            with adapter.session() as session:
                manager = EntityManager(session)
                rows = manager.search(query, types=types, limit=limit)
                return [manager.to_entity(r) for r in rows]
        except SQLAlchemyError:
            logger.exception("Entity search failed; falling back to JSON")

    needle = query.lower()
    scored: list[tuple[int, ProgrammaticEntity]] = []
    for entity_type in types or PAGE_ENTITY_TYPES:
        for entity in get_entities_by_type(entity_type):
            if not entity.active:
                continue
            score = 0
            if needle in entity.name.lower():
                score += 100
            if needle in entity.slug.lower():
                score += 50
            if needle in entity.content.description.lower():
                score += 20
            if any(needle in k.lower() for k in entity.seo.keywords):
                score += 30
            if any(needle in str(t).lower() for t in entity.metadata.get("tags") or []):
                score += 25
            if score > 0:
                scored.append((score, entity))
    scored.sort(key=lambda pair: pair[0], reverse=True)
    return [entity for _, entity in scored[:limit]]


def get_entities_by_priority(min_priority: int, max_priority: int = 10) -> dict[str, list[ProgrammaticEntity]]:
    result: dict[str, list[ProgrammaticEntity]] = {t.value: [] for t in EntityType}
    for entity_type in PAGE_ENTITY_TYPES:
        result[entity_type] = [
            e for e in get_entities_by_type(entity_type)
            if min_priority <= e.priority <= max_priority
        ]
    return result


def popularity_score(entity: ProgrammaticEntity) -> float:
    return entity.priority * 10 + float(entity.metadata.get("rating") or 0)


def get_popular_entities(entity_type: str | None = None, limit: int = 10) -> list[ProgrammaticEntity]:
    candidates: list[ProgrammaticEntity] = []
    for t in (entity_type,) if entity_type else PAGE_ENTITY_TYPES:
        candidates.extend(get_entities_by_type(t))
    return sorted(candidates, key=popularity_score, reverse=True)[:limit]


class SpokePair(TypedDict):
    primary: ProgrammaticEntity
    secondary: ProgrammaticEntity


class PageCombinations(TypedDict):
    hubs: list[ProgrammaticEntity]
    spokes: list[SpokePair]
    comparisons: list[list[ProgrammaticEntity]] | None


def generate_page_combinations(
    *,
    max_combinations: int = 1000,
    min_priority: int = 6,
    include_comparisons: bool = False,
) -> PageCombinations:
    """Enumerate hub, spoke and (optionally) comparison pages worth generating."""
    emirates = get_entities_by_type("emirate", min_priority=min_priority)
    vehicles = get_entities_by_type("vehicle", min_priority=min_priority)
    services = get_entities_by_type("service", min_priority=min_priority)
    intents = get_entities_by_type("intent", min_priority=min_priority)

    hubs = [*emirates, *vehicles, *services, *intents]

    spokes: list[SpokePair] = []
    for primaries, secondaries in ((emirates, vehicles), (emirates, services), (vehicles, intents)):
        for primary in primaries:
            for secondary in secondaries:
                if len(spokes) >= max_combinations:
                    break
                spokes.append(SpokePair(primary=primary, secondary=secondary))

    comparisons: list[list[ProgrammaticEntity]] | None = None
    if include_comparisons:
        comparisons = []
        for pool, cap in ((vehicles, 50), (services, 100)):
            for i, first in enumerate(pool):
                for second in pool[i + 1:]:
                    if len(comparisons) >= cap:
                        break
                    comparisons.append([first, second])

    return PageCombinations(hubs=hubs, spokes=spokes, comparisons=comparisons)


def get_entity_statistics() -> dict[str, object]:
    if constants.USE_DB:
        try:
            adapter = get_default_adapter()
            with adapter.session() as session:
                return EntityManager(session).statistics()
        except SQLAlchemyError:
            logger.exception("Entity statistics query failed; falling back to JSON")

    by_type: dict[str, int] = {t.value: 0 for t in EntityType}
    by_priority: dict[int, int] = {}
    total_priority = 0
    total = 0
    for entity_type in PAGE_ENTITY_TYPES:
        entities = get_entities_by_type(entity_type)
        by_type[entity_type] = len(entities)
        total += len(entities)
        for entity in entities:
            by_priority[entity.priority] = by_priority.get(entity.priority, 0) + 1
            total_priority += entity.priority

    return {
        "total": total,
        "by_type": by_type,
        "by_priority": by_priority,
        "average_priority": total_priority / total if total else 0.0,
    }


def clear_entity_cache(entity_type: str | None = None) -> None:
    with _cache_lock:
        if entity_type is None:
            _cache.clear()
        else:
            _cache.pop(entity_type, None)
    logger.info("Entity cache cleared: %s", entity_type or "all")


class EntityRegistry:
    """Narrow lookup interface handed to the linking engine."""

    def get_by_type(self, entity_type: str) -> list[ProgrammaticEntity]:
        return get_entities_by_type(entity_type)

    def get_by_id(self, entity_id: str) -> ProgrammaticEntity | None:
        return get_entity_by_id(entity_id)

    def get_related(self, entity_id: str) -> list[ProgrammaticEntity]:
        entity = get_entity_by_id(entity_id)
        return get_related_entities(entity) if entity else []

    def get_all(self) -> list[ProgrammaticEntity]:
        return get_all_entities()


entity_registry = EntityRegistry()
