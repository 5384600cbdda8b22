"""Plan the pre-render build, render the build-time spoke pages and validate their content."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from dotenv import load_dotenv

load_dotenv()

from fleet_hub.performance.build_optimizer import (
    DEFAULT_BUILD_CONFIG,
    BuildProgressLogger,
    batch_process,
    calculate_build_statistics,
    estimate_memory_usage,
    generate_build_report,
    get_build_time_pages,
    optimize_build_order,
    validate_build_config,
)
from fleet_hub.programmatic import entities
from fleet_hub.programmatic.validator import batch_validate, generate_validation_report
from fleet_hub.services import PageService

logging.basicConfig(level=logging.INFO)


def main() -> int:
    by_kind = {
        "emirates": entities.get_entities_by_type("emirate"),
        "vehicles": entities.get_entities_by_type("vehicle"),
        "services": entities.get_entities_by_type("service"),
        "intents": entities.get_entities_by_type("intent"),
    }
    stats = calculate_build_statistics(by_kind)
    print(generate_build_report(stats))

    check = validate_build_config(DEFAULT_BUILD_CONFIG, stats)
    for warning in check["warnings"]:
        print(f"WARNING: {warning}")
    for error in check["errors"]:
        print(f"ERROR: {error}")

    pages = optimize_build_order(get_build_time_pages(by_kind, DEFAULT_BUILD_CONFIG))
    spokes = [p for p in pages if p["type"] == "spoke"]
    print(f"Build-time pages: {len(pages)} ({len(spokes)} spokes)")
    print(f"Estimated memory: {estimate_memory_usage(len(pages))['estimated_mb']} MB")

    progress = BuildProgressLogger(len(spokes))

    def render(page: dict) -> tuple:
        emirate_slug, child_slug = page["path"].strip("/").split("/")
        bundle = PageService.build_spoke_page(emirate_slug, child_slug)
        progress.update()
        return bundle["content"], bundle["primary"]

    rendered: list[tuple] = []
    for batch in batch_process(
        spokes,
        render,
        batch_size=DEFAULT_BUILD_CONFIG.batch_size,
        parallel_limit=DEFAULT_BUILD_CONFIG.parallel_limit,
    ):
        rendered.extend(batch)
    progress.finish()

    report = generate_validation_report(batch_validate(rendered))
    summary = report["summary"]
    print(
        f"Validation: {summary['valid']:.0f}/{summary['total']:.0f} valid, "
        f"average score {summary['average_score']:.1f}"
    )
    for action in report["recommended_actions"]:
        print(f"ACTION: {action}")
    return 0 if check["valid"] else 1


if __name__ == "__main__":
    raise SystemExit(main())
