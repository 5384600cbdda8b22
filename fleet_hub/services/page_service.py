"""Service that assembles programmatic hub, spoke and comparison pages."""

import logging
import time
from typing import Any, TypedDict

import constants
from fleet_hub.performance.isr_config import ISRConfig, build_isr_config, get_cache_control_header
from fleet_hub.programmatic import entities
from fleet_hub.programmatic.content_generator import generate_content_for
from fleet_hub.programmatic.linking_engine import generate_internal_links
from fleet_hub.programmatic.metadata_generator import (
    build_metadata_context,
    generate_description,
    generate_hreflang_tags,
    generate_keywords,
    generate_metadata,
    generate_open_graph,
    generate_robots,
    generate_title,
    generate_twitter_card,
)
from fleet_hub.programmatic.schema_builder import (
    breadcrumb_list_schema,
    build_comparison_schema,
    build_organization_schema,
    build_schemas,
    get_schema_script_props,
)
from fleet_hub.programmatic.types import (
    GeneratedContent,
    GenerationContext,
    Intent,
    InternalLink,
    PageMetadata,
    ProgrammaticEntity,
)
from fleet_hub.programmatic.validator import ValidationResult, validate_content

logger = logging.getLogger(__name__)

HUB_WORD_COUNT = 1000
SPOKE_WORD_COUNT = 1200
DEFAULT_INTENT = "tourism"


class Breadcrumb(TypedDict):
    label: str
    href: str


class PageBundle(TypedDict, total=False):
    """Everything a template needs to render one programmatic page."""

    page_type: str
    path: str
    primary: ProgrammaticEntity
    secondary: list[ProgrammaticEntity]
    content: GeneratedContent
    validation: ValidationResult
    links: list[InternalLink]
    metadata: PageMetadata
    schemas: list[dict[str, Any]]
    schema_script: dict[str, str]
    isr: ISRConfig
    cache_control: str
    breadcrumbs: list[Breadcrumb]
    listings: dict[str, list[ProgrammaticEntity]]
    compare_target: str | None
    generation_ms: float


def _require(slug: str, entity_type: str | None = None) -> ProgrammaticEntity:
    entity = entities.get_entity_by_slug(slug, entity_type)
    if entity is None or not entity.active:
        raise ValueError(f"Entity not found: {entity_type or 'any'}/{slug}")
    return entity


def _finish(bundle: PageBundle, context: GenerationContext, started: float) -> PageBundle:
    isr = build_isr_config(context)
    bundle["isr"] = isr
    bundle["cache_control"] = get_cache_control_header(isr["build_strategy"])
    bundle["schema_script"] = get_schema_script_props(bundle["schemas"])
    bundle["generation_ms"] = (time.perf_counter() - started) * 1000
    logger.debug("Built %s page %s in %.1fms", bundle["page_type"], bundle["path"], bundle["generation_ms"])
    return bundle


class PageService:
    """Assembles programmatic pages. Unknown or inactive entities raise ValueError."""

    @staticmethod
    def build_hub_page(slug: str) -> PageBundle:
        started = time.perf_counter()
        primary = _require(slug)
        context = GenerationContext(
            primary=primary,
            intent=Intent(type=DEFAULT_INTENT),
            target_word_count=HUB_WORD_COUNT,
        )
        content = generate_content_for(context)

        if primary.type == "emirate":
            listings = {
                "vehicles": entities.get_entities_by_type(
                    "vehicle", min_priority=constants.HUB_LISTING_MIN_PRIORITY, limit=10
                ),
                "services": entities.get_entities_by_type(
                    "service", min_priority=constants.HUB_LISTING_MIN_PRIORITY, limit=5
                ),
            }
        else:
            listings = {
                "emirates": entities.get_entities_by_type(
                    "emirate", min_priority=constants.HUB_LISTING_MIN_PRIORITY, limit=10
                ),
            }
        listings = {k: [e for e in v if e.active] for k, v in listings.items()}

        # Metadata and links describe the hub itself, not the intent variant
        page_context = GenerationContext(primary=primary)
        bundle = PageBundle(
            page_type="hub",
            path=f"/{primary.slug}",
            primary=primary,
            secondary=[],
            content=content,
            validation=validate_content(content, primary),
            links=generate_internal_links(page_context),
            metadata=generate_metadata(page_context),
            schemas=build_schemas(page_context),
            breadcrumbs=[
                Breadcrumb(label="Home", href="/"),
                Breadcrumb(label=primary.name, href=f"/{primary.slug}"),
            ],
            listings=listings,
        )
        return _finish(bundle, page_context, started)

    @staticmethod
    def build_spoke_page(emirate_slug: str, child_slug: str) -> PageBundle:
        started = time.perf_counter()
        emirate = _require(emirate_slug, "emirate")
        child = entities.get_entity_by_slug(child_slug, "vehicle") or entities.get_entity_by_slug(
            child_slug, "service"
        )
        if child is None or not child.active:
            raise ValueError(f"Entity not found: vehicle/{child_slug}")

        content = generate_content_for(
            GenerationContext(
                primary=emirate,
                secondary=[child],
                intent=Intent(type=DEFAULT_INTENT),
                target_word_count=SPOKE_WORD_COUNT,
            )
        )

        related = entities.get_related_entities(child, max_results=3, min_weight=7, types=[child.type])
        fallback = entities.get_entities_by_type(child.type, limit=6)
        compare_target = next(
            (e.slug for e in [*related, *fallback] if e.slug != child.slug and e.type == "vehicle"),
            None,
        ) if child.type == "vehicle" else None

        page_context = GenerationContext(primary=emirate, secondary=[child])
        path = f"/{emirate.slug}/{child.slug}"
        bundle = PageBundle(
            page_type="spoke",
            path=path,
            primary=emirate,
            secondary=[child],
            content=content,
            validation=validate_content(content, emirate),
            links=generate_internal_links(page_context),
            metadata=generate_metadata(page_context),
            schemas=build_schemas(page_context),
            breadcrumbs=[
                Breadcrumb(label="Home", href="/"),
                Breadcrumb(label=emirate.name, href=f"/{emirate.slug}"),
                Breadcrumb(label=child.name, href=path),
            ],
            listings={
                "related": [e for e in related if e.active],
                "services": [
                    e for e in entities.get_entities_by_type("service", min_priority=7, limit=3) if e.active
                ],
            },
            compare_target=compare_target,
        )
        return _finish(bundle, page_context, started)

    @staticmethod
    def build_compare_page(slugs: list[str]) -> PageBundle:
        """Side-by-side page for two or three vehicles; unknown slugs are skipped."""
        started = time.perf_counter()
        if not 2 <= len(slugs) <= 3:
            raise ValueError(f"Comparison needs 2 or 3 vehicles, got {len(slugs)}")
        vehicles = [v for v in (entities.get_entity_by_slug(s, "vehicle") for s in slugs) if v is not None and v.active]
        if len(vehicles) < 2:
            raise ValueError(f"Not enough known vehicles to compare: {'/'.join(slugs)}")

        primary, secondary = vehicles[0], vehicles[1:]
        context = GenerationContext(primary=primary, secondary=secondary)
        path = f"/compare/{'/'.join(v.slug for v in vehicles)}"
        names = " vs ".join(v.name for v in vehicles)
        canonical = f"{constants.SITE_URL}{path}"

        data = build_metadata_context(primary, secondary, None)
        data["entity1"], data["entity2"] = primary.name, secondary[0].name
        title = generate_title("comparison", data)
        description = generate_description("comparison", data)
        metadata = PageMetadata(
            title=title,
            description=description,
            keywords=", ".join(generate_keywords(primary, secondary, None)),
            canonical=canonical,
            robots=generate_robots(primary),
            open_graph=generate_open_graph(title, description, canonical, primary),
            twitter=generate_twitter_card(title, description),
            alternates={"canonical": canonical, "languages": generate_hreflang_tags(canonical)},
        )

        bundle = PageBundle(
            page_type="comparison",
            path=path,
            primary=primary,
            secondary=secondary,
            links=generate_internal_links(context),
            metadata=metadata,
            schemas=[
                build_organization_schema(),
                build_comparison_schema(primary, secondary),
                breadcrumb_list_schema(
                    [
                        ("Home", constants.SITE_URL),
                        ("Compare", f"{constants.SITE_URL}/compare"),
                        (names, canonical),
                    ]
                ),
            ],
            breadcrumbs=[
                Breadcrumb(label="Home", href="/"),
                Breadcrumb(label="Compare", href="/compare"),
                Breadcrumb(label=names, href=path),
            ],
        )
        return _finish(bundle, context, started)

    @staticmethod
    def list_compare_pairs(limit: int = constants.MAX_COMPARISON_PAGES) -> list[tuple[ProgrammaticEntity, ProgrammaticEntity]]:
        """Popular vehicle pairs shown on /compare, highest priority first."""
        vehicles = [v for v in entities.get_entities_by_type("vehicle", min_priority=8) if v.active]
        pairs: list[tuple[ProgrammaticEntity, ProgrammaticEntity]] = []
        for i, first in enumerate(vehicles):
            for second in vehicles[i + 1:]:
                if len(pairs) >= limit:
                    return pairs
                pairs.append((first, second))
        return pairs

    @staticmethod
    def validate_spoke_page(emirate_slug: str, child_slug: str) -> dict[str, Any]:
        bundle = PageService.build_spoke_page(emirate_slug, child_slug)
        return {
            "path": bundle["path"],
            "validation": bundle["validation"],
            "word_count": bundle["content"]["word_count"],
            "link_count": len(bundle["links"]),
            "metadata": {
                "title": bundle["metadata"]["title"],
                "description": bundle["metadata"]["description"],
                "canonical": bundle["metadata"]["canonical"],
            },
            "isr": {
                "revalidate": bundle["isr"]["revalidate"],
                "tier": int(bundle["isr"]["tier"]),
                "build_strategy": bundle["isr"]["build_strategy"],
                "tags": bundle["isr"]["tags"],
            },
        }
