"""
Build-time page planning: which pages to pre-render, in what order, and
how long and how much memory that is expected to take.
"""

import logging
import math
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict, dataclass, field
from typing import Callable, Iterator, TypedDict, TypeVar

import config
from fleet_hub.performance.isr_config import PriorityTier, determine_priority_tier, estimate_build_time
from fleet_hub.programmatic.types import ProgrammaticEntity

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

_BUILD_ORDER = ("hub", "spoke", "comparison", "directory")


@dataclass
class BuildConfig:
    max_build_time_pages: int = 1000
    batch_size: int = 50
    parallel_limit: int = 10
    priority_threshold: int = 8
    enable_progress_logging: bool = True


DEFAULT_BUILD_CONFIG = BuildConfig(
    max_build_time_pages=config.BUILD_MAX_PAGES,
    batch_size=config.BUILD_BATCH_SIZE,
    parallel_limit=config.BUILD_PARALLEL_LIMIT,
    priority_threshold=config.BUILD_PRIORITY_THRESHOLD,
)


class BuildPage(TypedDict):
    path: str
    priority: int
    type: str
    entity_ids: list[str]


@dataclass
class BuildStatistics:
    total_entities: int = 0
    build_time_pages: int = 0
    isr_pages: int = 0
    on_demand_pages: int = 0
    estimated_minutes: int = 0
    estimated_seconds: int = 0
    breakdown: dict[str, int] = field(default_factory=lambda: {"hubs": 0, "spokes": 0, "comparisons": 0})

    def to_dict(self) -> dict[str, object]:
        return asdict(self)


def _merge(overrides: BuildConfig | None) -> BuildConfig:
    return overrides or DEFAULT_BUILD_CONFIG


def _count_tier(stats: BuildStatistics, tier: PriorityTier) -> None:
    if tier == PriorityTier.CRITICAL:
        stats.build_time_pages += 1
    elif tier in (PriorityTier.HIGH, PriorityTier.MEDIUM):
        stats.isr_pages += 1
    else:
        stats.on_demand_pages += 1


def calculate_build_statistics(entities: dict[str, list[ProgrammaticEntity]]) -> BuildStatistics:
    """``entities`` is keyed by plural type name: emirates, vehicles, services, intents."""
    stats = BuildStatistics()

    for entity_list in entities.values():
        stats.total_entities += len(entity_list)
        for entity in entity_list:
            stats.breakdown["hubs"] += 1
            _count_tier(stats, determine_priority_tier(entity))

    emirates = entities.get("emirates") or []
    vehicles = entities.get("vehicles") or []
    if emirates and vehicles:
        stats.breakdown["spokes"] = len(emirates) * len(vehicles)
        for emirate in emirates:
            for vehicle in vehicles:
                _count_tier(stats, determine_priority_tier(emirate, [vehicle]))

    if len(vehicles) > 1:
        comparisons = len(vehicles) * (len(vehicles) - 1) // 2
        stats.breakdown["comparisons"] = comparisons
        # comparisons are mostly long-tail traffic
        stats.isr_pages += math.floor(comparisons * 0.3)
        stats.on_demand_pages += math.ceil(comparisons * 0.7)

    seconds = estimate_build_time(stats.build_time_pages)
    stats.estimated_minutes, stats.estimated_seconds = seconds // 60, seconds % 60
    return stats


def get_build_time_pages(
    entities: dict[str, list[ProgrammaticEntity]],
    build_config: BuildConfig | None = None,
) -> list[BuildPage]:
    cfg = _merge(build_config)
    pages: list[BuildPage] = []

    for entity_list in entities.values():
        for entity in entity_list:
            if entity.priority >= cfg.priority_threshold:
                pages.append(BuildPage(path=f"/{entity.slug}", priority=entity.priority, type="hub", entity_ids=[entity.id]))

    for emirate in entities.get("emirates") or []:
        for vehicle in entities.get("vehicles") or []:
            priority = min(emirate.priority, vehicle.priority)
            if priority >= cfg.priority_threshold:
                pages.append(
                    BuildPage(
                        path=f"/{emirate.slug}/{vehicle.slug}",
                        priority=priority,
                        type="spoke",
                        entity_ids=[emirate.id, vehicle.id],
                    )
                )

    pages.sort(key=lambda p: p["priority"], reverse=True)
    return pages[: cfg.max_build_time_pages]


def batch_process(
    items: list[T],
    processor: Callable[[T], R],
    *,
    batch_size: int = 50,
    parallel_limit: int = 10,
    on_progress: Callable[[int, int], None] | None = None,
) -> Iterator[list[R]]:
    """Yield one result list per batch; items in a batch run ``parallel_limit`` at a time.

    Results keep input order. An exception from ``processor`` propagates.
    """
    total = len(items)
    completed = 0
    with ThreadPoolExecutor(max_workers=max(1, parallel_limit)) as executor:
        for start in range(0, total, batch_size):
            batch = items[start:start + batch_size]
            results: list[R] = []
            for offset in range(0, len(batch), parallel_limit):
                chunk = batch[offset:offset + parallel_limit]
                results.extend(executor.map(processor, chunk))
                completed += len(chunk)
                if on_progress is not None:
                    on_progress(completed, total)
            yield results


@dataclass
class _QueueItem:
    page: BuildPage
    dependencies: list[str]


class BuildQueue:
    """Priority queue whose batches only contain pages with satisfied dependencies."""

    def __init__(self) -> None:
        self._queue: list[_QueueItem] = []

    def add(self, page: BuildPage, dependencies: list[str] | None = None) -> None:
        self._queue.append(_QueueItem(page=page, dependencies=list(dependencies or [])))

    def get_next_batch(self, batch_size: int, completed: set[str]) -> list[BuildPage]:
        ready: list[_QueueItem] = []
        for item in sorted(self._queue, key=lambda i: i.page["priority"], reverse=True):
            if len(ready) >= batch_size:
                break
            if all(dep in completed for dep in item.dependencies):
                ready.append(item)
        for item in ready:
            self._queue.remove(item)
        return [item.page for item in ready]

    def is_empty(self) -> bool:
        return not self._queue

    def size(self) -> int:
        return len(self._queue)


class ResourceMonitor:
    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self._start = time.monotonic()
        self._pages = 0
        self._errors = 0

    def record_page_generation(self) -> None:
        self._pages += 1

    def record_error(self) -> None:
        self._errors += 1

    def get_metrics(self) -> dict[str, float]:
        elapsed = time.monotonic() - self._start
        return {
            "pages_generated": self._pages,
            "errors": self._errors,
            "elapsed_seconds": round(elapsed),
            "pages_per_second": round(self._pages / elapsed, 2) if elapsed > 0 else 0.0,
            "error_rate": round(self._errors / self._pages, 2) if self._pages else 0.0,
        }


class BuildProgressLogger:
    """Logs progress at most once per ``log_interval_seconds``."""

    def __init__(self, total: int, log_interval_seconds: float = 5.0):
        self.total = total
        self.completed = 0
        self._interval = log_interval_seconds
        self._start = time.monotonic()
        self._last_log = self._start

    def update(self, increment: int = 1) -> None:
        self.completed += increment
        now = time.monotonic()
        if now - self._last_log >= self._interval:
            self.log()
            self._last_log = now

    def log(self) -> None:
        elapsed = max(time.monotonic() - self._start, 1e-9)
        rate = self.completed / elapsed
        percentage = round(self.completed / self.total * 100) if self.total else 100
        remaining = round((self.total - self.completed) / rate) if rate else 0
        logger.info(
            "Build progress %d/%d (%d%%) | %.2f pages/sec | %ds remaining",
            self.completed,
            self.total,
            percentage,
            rate,
            remaining,
        )

    def finish(self) -> None:
        elapsed = max(time.monotonic() - self._start, 1e-9)
        logger.info(
            "Build complete: %d pages in %ds (%.2f pages/sec)",
            self.completed,
            round(elapsed),
            self.completed / elapsed,
        )


def optimize_build_order(pages: list[BuildPage]) -> list[BuildPage]:
    """Hubs before the spokes that link up to them, then comparisons, then directories."""
    ordered: list[BuildPage] = []
    for page_type in _BUILD_ORDER:
        ordered.extend(sorted((p for p in pages if p["type"] == page_type), key=lambda p: p["priority"], reverse=True))
    return ordered


def estimate_memory_usage(page_count: int) -> dict[str, object]:
    estimated_mb = page_count * 2
    if estimated_mb < 1024:
        recommended = "2GB RAM minimum"
    elif estimated_mb < 2048:
        recommended = "4GB RAM recommended"
    elif estimated_mb < 4096:
        recommended = "8GB RAM recommended"
    else:
        recommended = "16GB+ RAM recommended"
    return {"estimated_mb": estimated_mb, "recommended": recommended}


def generate_build_report(stats: BuildStatistics) -> str:
    memory = estimate_memory_usage(stats.build_time_pages)
    total = stats.build_time_pages + stats.isr_pages + stats.on_demand_pages
    rule = "=" * 63
    recommendations = [
        "! Consider reducing build-time pages to improve build speed"
        if stats.build_time_pages > 2000
        else "ok Build-time page count is optimal",
        "! Build time exceeds 15 minutes - consider CI/CD optimizations"
        if stats.estimated_minutes > 15
        else "ok Build time within acceptable range",
        "i Large number of on-demand pages - ensure revalidation is configured"
        if stats.on_demand_pages > 50000
        else "ok On-demand page count is manageable",
    ]
    lines = [
        rule,
        "BUILD CONFIGURATION REPORT".center(63),
        rule,
        "",
        "ENTITY SUMMARY:",
        f"  Total Entities:       {stats.total_entities}",
        "",
        "PAGE DISTRIBUTION:",
        f"  Build-Time Pages:     {stats.build_time_pages} (generated at build)",
        f"  ISR Pages:            {stats.isr_pages} (generated on first request)",
        f"  On-Demand Pages:      {stats.on_demand_pages} (generated as needed)",
        "",
        f"  Total Pages:          {total}",
        "",
        "PAGE BREAKDOWN:",
        f"  Hub Pages:            {stats.breakdown['hubs']}",
        f"  Spoke Pages:          {stats.breakdown['spokes']}",
        f"  Comparison Pages:     {stats.breakdown['comparisons']}",
        "",
        "BUILD ESTIMATE:",
        f"  Estimated Time:       {stats.estimated_minutes} minutes ({stats.estimated_seconds} seconds)",
        f"  Pages/Minute:         {round(stats.build_time_pages / max(1, stats.estimated_minutes))}",
        "",
        "MEMORY ESTIMATE:",
        f"  {memory['recommended']}",
        f"  Approximate Usage:    {memory['estimated_mb']} MB",
        "",
        "OPTIMIZATION RECOMMENDATIONS:",
        *(f"  {r}" for r in recommendations),
        "",
        rule,
    ]
    return "\n".join(lines)


def validate_build_config(build_config: BuildConfig | None, stats: BuildStatistics) -> dict[str, object]:
    cfg = _merge(build_config)
    warnings: list[str] = []
    errors: list[str] = []

    if stats.build_time_pages > 2000:
        warnings.append(
            f"Build-time pages ({stats.build_time_pages}) exceeds recommended maximum (2000). "
            "Consider increasing priority_threshold to reduce build time."
        )
    if stats.estimated_minutes > 20:
        warnings.append(
            f"Estimated build time ({stats.estimated_minutes} minutes) is very long. "
            "Consider splitting into multiple builds or increasing priority threshold."
        )
    if cfg.batch_size > 100:
        warnings.append(f"Batch size ({cfg.batch_size}) is high. May cause memory issues.")
    if cfg.batch_size < 10:
        warnings.append(f"Batch size ({cfg.batch_size}) is low. Build may be slow.")
    if cfg.parallel_limit > 20:
        errors.append(
            f"Parallel limit ({cfg.parallel_limit}) is too high. Risk of rate limiting or memory issues."
        )

    return {"valid": not errors, "warnings": warnings, "errors": errors}
