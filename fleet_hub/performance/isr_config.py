"""
Revalidation windows, priority tiers and Cache-Control policy for rendered pages.

A page's entity priority decides its tier (1 = critical ... 5 = on-demand),
which in turn decides whether it is pre-rendered at build time, kept in the
page cache and revalidated, or rendered on first request.
"""

import logging
import math
from enum import IntEnum
from typing import Any, Callable, TypedDict

import constants
from fleet_hub.programmatic import entities
from fleet_hub.programmatic.types import GenerationContext, ProgrammaticEntity

logger = logging.getLogger(__name__)


class RevalidationTime:
    """Seconds a rendered page stays fresh."""

    CRITICAL = 900
    HUB = 1800
    POPULAR_SPOKE = 3600
    SPOKE = 7200
    LONG_TAIL = 86400
    SEASONAL = 604800
    STATIC = 2592000


REVALIDATION_TIMES = {
    "critical": RevalidationTime.CRITICAL,
    "hub": RevalidationTime.HUB,
    "popular_spoke": RevalidationTime.POPULAR_SPOKE,
    "spoke": RevalidationTime.SPOKE,
    "long_tail": RevalidationTime.LONG_TAIL,
    "seasonal": RevalidationTime.SEASONAL,
    "static": RevalidationTime.STATIC,
}


class PriorityTier(IntEnum):
    CRITICAL = 1
    HIGH = 2
    MEDIUM = 3
    LOW = 4
    ON_DEMAND = 5


TIER_LIMITS: dict[PriorityTier, float] = {
    PriorityTier.CRITICAL: 100,
    PriorityTier.HIGH: 1000,
    PriorityTier.MEDIUM: 5000,
    PriorityTier.LOW: 10000,
    PriorityTier.ON_DEMAND: math.inf,
}

DEFAULT_REVALIDATION_STRATEGY = {
    "hub_pages": RevalidationTime.HUB,
    "popular_spokes": RevalidationTime.POPULAR_SPOKE,
    "long_tail": RevalidationTime.LONG_TAIL,
    "seasonal": RevalidationTime.SEASONAL,
    "default": RevalidationTime.SPOKE,
}

# Cache-Control values per build strategy
CACHE_CONFIG = {
    "static": "s-maxage=31536000, stale-while-revalidate=86400",
    "isr": "s-maxage=3600, stale-while-revalidate=86400",
    "on-demand": "s-maxage=60, stale-while-revalidate=300",
    "critical": "s-maxage=900, stale-while-revalidate=300",
}

NO_STORE = "no-cache, no-store, must-revalidate"


class ISRConfig(TypedDict):
    revalidate: int
    tier: PriorityTier
    build_strategy: str
    tags: list[str]


def _priority(entity: ProgrammaticEntity) -> int:
    return entity.priority or 5


def get_revalidation_time(context: GenerationContext) -> int:
    priority = _priority(context.primary)
    is_hub = not context.secondary

    if priority >= 9:
        return RevalidationTime.CRITICAL
    if is_hub:
        return RevalidationTime.HUB if priority >= 7 else RevalidationTime.SPOKE
    if priority >= 7:
        return RevalidationTime.POPULAR_SPOKE
    if priority >= 5:
        return RevalidationTime.SPOKE
    return RevalidationTime.LONG_TAIL


def get_entity_revalidation_time(entity: ProgrammaticEntity) -> int:
    priority = _priority(entity)
    if priority >= 9:
        return RevalidationTime.CRITICAL
    if priority >= 7:
        return RevalidationTime.HUB
    if priority >= 5:
        return RevalidationTime.SPOKE
    return RevalidationTime.LONG_TAIL


def determine_priority_tier(
    primary: ProgrammaticEntity,
    secondary: list[ProgrammaticEntity] | None = None,
) -> PriorityTier:
    priority = _priority(primary)
    if priority >= 9:
        return PriorityTier.CRITICAL
    if priority >= 7:
        return PriorityTier.HIGH
    if priority >= 5:
        return PriorityTier.MEDIUM
    if priority >= 3:
        return PriorityTier.LOW
    return PriorityTier.ON_DEMAND


def get_build_strategy(tier: PriorityTier) -> str:
    if tier <= PriorityTier.HIGH:
        return "static"
    if tier == PriorityTier.MEDIUM:
        return "isr"
    return "on-demand"


def build_isr_config(context: GenerationContext) -> ISRConfig:
    tier = determine_priority_tier(context.primary, context.secondary)
    return ISRConfig(
        revalidate=get_revalidation_time(context),
        tier=tier,
        build_strategy=get_build_strategy(tier),
        tags=generate_cache_tags(context.primary, context.secondary),
    )


def generate_cache_tags(
    primary: ProgrammaticEntity,
    secondary: list[ProgrammaticEntity] | None = None,
) -> list[str]:
    """Tags like ``entity:dubai``, ``type:emirate``, ``priority:high``; order kept, no repeats."""
    tags: dict[str, None] = {
        create_cache_tag("entity", primary.slug): None,
        create_cache_tag("type", primary.type): None,
    }
    for entity in secondary or []:
        tags.setdefault(create_cache_tag("entity", entity.slug), None)
        tags.setdefault(create_cache_tag("type", entity.type), None)

    priority = _priority(primary)
    level = "high" if priority >= 7 else "medium" if priority >= 5 else "low"
    tags.setdefault(create_cache_tag("priority", level), None)
    return list(tags)


def create_cache_tag(tag_type: str, value: str) -> str:
    return f"{tag_type}:{value}"


def estimate_build_time(page_count: int, avg_ms_per_page: int = 200) -> int:
    """Seconds, rounded up."""
    return math.ceil(page_count * avg_ms_per_page / 1000)


def get_build_statistics(tier_counts: dict[PriorityTier, int]) -> dict[str, int]:
    static_pages = tier_counts.get(PriorityTier.CRITICAL, 0) + tier_counts.get(PriorityTier.HIGH, 0)
    isr_pages = tier_counts.get(PriorityTier.MEDIUM, 0)
    on_demand_pages = tier_counts.get(PriorityTier.LOW, 0) + tier_counts.get(PriorityTier.ON_DEMAND, 0)
    return {
        "total_pages": static_pages + isr_pages + on_demand_pages,
        "static_pages": static_pages,
        "isr_pages": isr_pages,
        "on_demand_pages": on_demand_pages,
        # only pre-rendered pages cost build time
        "estimated_build_time": estimate_build_time(static_pages),
    }


def get_cache_control_header(strategy: str) -> str:
    if strategy == "dynamic":
        return NO_STORE
    return CACHE_CONFIG.get(strategy, CACHE_CONFIG["isr"])


def get_render_mode(context: GenerationContext) -> str:
    """Render mode: force-static for pre-rendered tiers, auto otherwise."""
    strategy = build_isr_config(context)["build_strategy"]
    if strategy == "static":
        return "force-static"
    if strategy == "dynamic":
        return "force-dynamic"
    return "auto"


def get_fetch_cache_mode(context: GenerationContext) -> str:
    tier = determine_priority_tier(context.primary, context.secondary)
    return "force-cache" if tier <= PriorityTier.HIGH else "auto"


# ── On-demand revalidation ──────────────────────────────────────────────────


class RevalidationResult(TypedDict):
    success: bool
    message: str
    revalidated: list[str]


def get_paths_for_entity(entity_slug: str) -> list[str]:
    """Hub path plus every spoke path the entity appears on."""
    paths = [f"/{entity_slug}"]
    entity = entities.get_entity_by_slug(entity_slug)
    if entity is None:
        return paths
    if entity.type == "emirate":
        for child_type in ("vehicle", "service"):
            paths.extend(f"/{entity.slug}/{c.slug}" for c in entities.get_entities_by_type(child_type) if c.active)
    elif entity.type in ("vehicle", "service"):
        paths.extend(f"/{e.slug}/{entity.slug}" for e in entities.get_entities_by_type("emirate") if e.active)
    return paths


def get_paths_for_entity_type(entity_type: str) -> list[str]:
    return [f"/{e.slug}" for e in entities.get_entities_by_type(entity_type)]


def handle_revalidation(
    request: dict[str, Any],
    revalidate_fn: Callable[[str], None],
    secret: str | None = None,
) -> RevalidationResult:
    """Revalidate ``paths``, an ``entity`` slug, or a whole entity ``type``.

    When a secret is configured the request must carry the same value.
    """
    expected = constants.REVALIDATION_SECRET if secret is None else secret
    if expected and request.get("secret") != expected:
        return RevalidationResult(success=False, message="Invalid secret", revalidated=[])

    targets: list[str] = list(request.get("paths") or [])
    if request.get("entity"):
        targets.extend(get_paths_for_entity(str(request["entity"])))
    if request.get("type"):
        targets.extend(get_paths_for_entity_type(str(request["type"])))

    revalidated: list[str] = []
    try:
        for path in targets:
            revalidate_fn(path)
            revalidated.append(path)
    except Exception as e:
        logger.exception("Revalidation failed after %d paths", len(revalidated))
        return RevalidationResult(success=False, message=str(e) or "Revalidation failed", revalidated=revalidated)

    logger.info("Revalidated %d paths", len(revalidated))
    return RevalidationResult(
        success=True,
        message=f"Successfully revalidated {len(revalidated)} paths",
        revalidated=revalidated,
    )


# ── Metrics ─────────────────────────────────────────────────────────────────


class ISRMetricsTracker:
    """Counters for page generation, cache hits, revalidations and errors."""

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self._total_pages = 0
        self._build_time_pages = 0
        self._on_demand_pages = 0
        self._total_duration_ms = 0.0
        self._cache_lookups = 0
        self._cache_hits = 0
        self._revalidations = 0
        self._errors = 0

    def record_generation(self, on_demand: bool, duration_ms: float) -> None:
        self._total_pages += 1
        if on_demand:
            self._on_demand_pages += 1
        else:
            self._build_time_pages += 1
        self._total_duration_ms += duration_ms

    def record_cache_hit(self, is_hit: bool) -> None:
        self._cache_lookups += 1
        if is_hit:
            self._cache_hits += 1

    def record_revalidation(self) -> None:
        self._revalidations += 1

    def record_error(self) -> None:
        self._errors += 1

    def get_metrics(self) -> dict[str, float]:
        attempts = self._total_pages + self._errors
        return {
            "total_pages": self._total_pages,
            "build_time_pages": self._build_time_pages,
            "on_demand_pages": self._on_demand_pages,
            "cache_hit_rate": self._cache_hits / self._cache_lookups if self._cache_lookups else 0.0,
            "avg_generation_time": self._total_duration_ms / self._total_pages if self._total_pages else 0.0,
            "revalidation_count": self._revalidations,
            "error_rate": self._errors / attempts if attempts else 0.0,
        }
