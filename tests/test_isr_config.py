"""Tests for revalidation windows, tiers, cache headers and on-demand revalidation."""

import pytest

import constants
from fleet_hub.performance.isr_config import (
    CACHE_CONFIG,
    NO_STORE,
    ISRMetricsTracker,
    PriorityTier,
    RevalidationTime,
    build_isr_config,
    determine_priority_tier,
    estimate_build_time,
    generate_cache_tags,
    get_build_statistics,
    get_build_strategy,
    get_cache_control_header,
    get_entity_revalidation_time,
    get_fetch_cache_mode,
    get_paths_for_entity,
    get_paths_for_entity_type,
    get_render_mode,
    get_revalidation_time,
    handle_revalidation,
)
from fleet_hub.programmatic.types import GenerationContext
from tests.conftest import make_entity


def _ctx(priority: int, spoke: bool = False) -> GenerationContext:
    primary = make_entity(entity_type="emirate", slug="dubai", name="Dubai", priority=priority)
    return GenerationContext(primary=primary, secondary=[make_entity()] if spoke else [])


# ── Revalidation windows ────────────────────────────────────────────────────

class TestRevalidationTime:
    @pytest.mark.parametrize(
        "priority,spoke,expected",
        [
            (10, False, RevalidationTime.CRITICAL),
            (9, True, RevalidationTime.CRITICAL),
            (8, False, RevalidationTime.HUB),
            (6, False, RevalidationTime.SPOKE),
            (8, True, RevalidationTime.POPULAR_SPOKE),
            (5, True, RevalidationTime.SPOKE),
            (3, True, RevalidationTime.LONG_TAIL),
        ],
    )
    def test_page_revalidation(self, priority, spoke, expected) -> None:
        assert get_revalidation_time(_ctx(priority, spoke)) == expected

    def test_entity_revalidation(self) -> None:
        assert get_entity_revalidation_time(make_entity(priority=9)) == RevalidationTime.CRITICAL
        assert get_entity_revalidation_time(make_entity(priority=7)) == RevalidationTime.HUB
        assert get_entity_revalidation_time(make_entity(priority=5)) == RevalidationTime.SPOKE
        assert get_entity_revalidation_time(make_entity(priority=2)) == RevalidationTime.LONG_TAIL


class TestTiers:
    @pytest.mark.parametrize(
        "priority,tier,strategy",
        [
            (10, PriorityTier.CRITICAL, "static"),
            (7, PriorityTier.HIGH, "static"),
            (5, PriorityTier.MEDIUM, "isr"),
            (3, PriorityTier.LOW, "on-demand"),
            (1, PriorityTier.ON_DEMAND, "on-demand"),
        ],
    )
    def test_tier_and_strategy(self, priority, tier, strategy) -> None:
        assert determine_priority_tier(make_entity(priority=priority)) == tier
        assert get_build_strategy(tier) == strategy

    def test_isr_config(self) -> None:
        config = build_isr_config(_ctx(6, spoke=True))
        assert config == {
            "revalidate": RevalidationTime.SPOKE,
            "tier": PriorityTier.MEDIUM,
            "build_strategy": "isr",
            "tags": ["entity:dubai", "type:emirate", "entity:suv", "type:vehicle", "priority:medium"],
        }

    def test_render_and_fetch_modes(self) -> None:
        assert get_render_mode(_ctx(9)) == "force-static"
        assert get_render_mode(_ctx(5)) == "auto"
        assert get_fetch_cache_mode(_ctx(7)) == "force-cache"
        assert get_fetch_cache_mode(_ctx(4)) == "auto"


class TestCacheTags:
    def test_no_repeats(self) -> None:
        dubai = make_entity(entity_type="emirate", slug="dubai", priority=8)
        tags = generate_cache_tags(dubai, [make_entity(slug="suv"), make_entity(slug="sedan")])
        assert tags == ["entity:dubai", "type:emirate", "entity:suv", "type:vehicle", "entity:sedan", "priority:high"]

    def test_low_priority(self) -> None:
        assert generate_cache_tags(make_entity(priority=2))[-1] == "priority:low"


class TestBuildEstimates:
    def test_estimate_rounds_up(self) -> None:
        assert estimate_build_time(11) == 3
        assert estimate_build_time(0) == 0
        assert estimate_build_time(10, avg_ms_per_page=1000) == 10

    def test_statistics(self) -> None:
        stats = get_build_statistics({
            PriorityTier.CRITICAL: 10,
            PriorityTier.HIGH: 40,
            PriorityTier.MEDIUM: 100,
            PriorityTier.LOW: 5,
            PriorityTier.ON_DEMAND: 5,
        })
        assert stats == {
            "total_pages": 160,
            "static_pages": 50,
            "isr_pages": 100,
            "on_demand_pages": 10,
            "estimated_build_time": 10,
        }


class TestCacheControl:
    def test_known_strategies(self) -> None:
        assert get_cache_control_header("static") == CACHE_CONFIG["static"]
        assert get_cache_control_header("critical") == "s-maxage=900, stale-while-revalidate=300"

    def test_dynamic_is_no_store(self) -> None:
        assert get_cache_control_header("dynamic") == NO_STORE

    def test_unknown_falls_back_to_isr(self) -> None:
        assert get_cache_control_header("weird") == CACHE_CONFIG["isr"]


# ── On-demand revalidation ──────────────────────────────────────────────────

class TestRevalidationPaths:
    def test_emirate_paths(self, data_dir) -> None:
        assert get_paths_for_entity("dubai") == [
            "/dubai",
            "/dubai/suv",
            "/dubai/sedan",
            "/dubai/luxury-car",
            "/dubai/van",
            "/dubai/chauffeur-service",
            "/dubai/monthly-rental",
        ]

    def test_vehicle_paths_skip_inactive_emirates(self, data_dir) -> None:
        assert get_paths_for_entity("suv") == ["/suv", "/dubai/suv", "/sharjah/suv", "/ajman/suv"]

    def test_unknown_entity(self, data_dir) -> None:
        assert get_paths_for_entity("atlantis") == ["/atlantis"]

    def test_type_paths(self, data_dir) -> None:
        assert get_paths_for_entity_type("service") == ["/chauffeur-service", "/monthly-rental"]


class TestHandleRevalidation:
    def test_rejects_wrong_secret(self) -> None:
        calls = []
        result = handle_revalidation({"paths": ["/dubai"], "secret": "nope"}, calls.append, secret="s3cret")
        assert result == {"success": False, "message": "Invalid secret", "revalidated": []}
        assert calls == []

    def test_no_secret_configured(self, monkeypatch) -> None:
        monkeypatch.setattr(constants, "REVALIDATION_SECRET", "")
        calls = []
        result = handle_revalidation({"paths": ["/dubai", "/sharjah"]}, calls.append)
        assert result["success"] is True
        assert result["message"] == "Successfully revalidated 2 paths"
        assert calls == ["/dubai", "/sharjah"]

    def test_entity_and_type_targets(self, data_dir) -> None:
        calls = []
        result = handle_revalidation({"entity": "sedan", "type": "intent", "secret": "k"}, calls.append, secret="k")
        assert result["revalidated"] == ["/sedan", "/dubai/sedan", "/sharjah/sedan", "/ajman/sedan", "/tourism"]

    def test_failure_reports_partial_progress(self) -> None:
        done = []

        def revalidate(path: str) -> None:
            if path == "/bad":
                raise RuntimeError("cache offline")
            done.append(path)

        result = handle_revalidation({"paths": ["/ok", "/bad", "/later"]}, revalidate, secret="")
        assert result == {"success": False, "message": "cache offline", "revalidated": ["/ok"]}


# ── Metrics ─────────────────────────────────────────────────────────────────

class TestMetricsTracker:
    def test_empty(self) -> None:
        metrics = ISRMetricsTracker().get_metrics()
        assert metrics["cache_hit_rate"] == 0.0
        assert metrics["error_rate"] == 0.0
        assert metrics["avg_generation_time"] == 0.0

    def test_counts_and_rates(self) -> None:
        tracker = ISRMetricsTracker()
        tracker.record_generation(on_demand=False, duration_ms=100)
        tracker.record_generation(on_demand=True, duration_ms=300)
        tracker.record_generation(on_demand=True, duration_ms=200)
        tracker.record_cache_hit(True)
        tracker.record_cache_hit(False)
        tracker.record_cache_hit(True)
        tracker.record_cache_hit(True)
        tracker.record_revalidation()
        tracker.record_error()

        metrics = tracker.get_metrics()
        assert metrics["total_pages"] == 3
        assert metrics["build_time_pages"] == 1
        assert metrics["on_demand_pages"] == 2
        assert metrics["avg_generation_time"] == pytest.approx(200.0)
        assert metrics["cache_hit_rate"] == pytest.approx(0.75)
        assert metrics["revalidation_count"] == 1
        assert metrics["error_rate"] == pytest.approx(0.25)

    def test_reset(self) -> None:
        tracker = ISRMetricsTracker()
        tracker.record_error()
        tracker.reset()
        assert tracker.get_metrics()["error_rate"] == 0.0
