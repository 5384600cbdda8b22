"""
Internal linking for programmatic pages.

Links are collected per link type according to the page's strategy, scored,
trimmed to the strategy's limit and deduplicated by URL. Anchor text is
chosen from ANCHOR_TEMPLATES by a hash of the two entity ids so a page keeps
the same wording across rebuilds.
"""

import logging
from typing import Protocol, TypedDict

from fleet_hub.programmatic.entities import entity_registry
from fleet_hub.programmatic.types import (
    GenerationContext,
    InternalLink,
    ProgrammaticEntity,
)
from fleet_hub.utils import hash_string, interpolate

logger = logging.getLogger(__name__)


class LinkingRules(TypedDict):
    link_to: list[str]
    max_links: int
    min_links: int
    distribution: str
    contextual: bool


class LinkGraphSummary(TypedDict):
    inbound_count: int
    outbound_count: int
    internal_page_rank: float
    link_types: dict[str, int]


class EntityLookup(Protocol):
    def get_by_type(self, entity_type: str) -> list[ProgrammaticEntity]: ...

    def get_by_id(self, entity_id: str) -> ProgrammaticEntity | None: ...

    def get_related(self, entity_id: str) -> list[ProgrammaticEntity]: ...

    def get_all(self) -> list[ProgrammaticEntity]: ...


DEFAULT_LINKING_STRATEGY: dict[str, LinkingRules] = {
    "hub": {
        "link_to": ["child", "related", "sibling"],
        "max_links": 50,
        "min_links": 10,
        "distribution": "balanced",
        "contextual": True,
    },
    "spoke": {
        "link_to": ["parent", "sibling", "related"],
        "max_links": 20,
        "min_links": 5,
        "distribution": "relevance",
        "contextual": True,
    },
    "comparison": {
        "link_to": ["parent", "related", "sibling"],
        "max_links": 15,
        "min_links": 8,
        "distribution": "balanced",
        "contextual": True,
    },
    "directory": {
        "link_to": ["child", "related"],
        "max_links": 100,
        "min_links": 20,
        "distribution": "priority",
        "contextual": False,
    },
}

ANCHOR_TEMPLATES: dict[str, list[str]] = {
    "parent": ["{name}", "Browse {name}", "See all in {name}", "Explore {name}"],
    "child": ["{name}", "View {name}", "{name} details", "Learn about {name}"],
    "sibling": ["{name}", "Also check {name}", "Compare with {name}", "Similar: {name}"],
    "related": ["{name}", "Related: {name}", "More about {name}", "See {name}"],
    "breadcrumb": ["{name}"],
    "contextual": ["{name}", "{name} rental", "rent a {name}", "{name} in {location}"],
}

_CHILD_TYPES: dict[str, list[str]] = {
    "emirate": ["vehicle", "service"],
    "vehicle": ["service"],
    "service": [],
    "location": ["vehicle", "service"],
    "intent": [],
}

MAX_SIBLINGS = 8
MAX_SECONDARY_SIBLINGS = 5
MAX_RELATED = 10
MAX_KEYWORD_MATCHES = 5
MAX_CONTEXTUAL = 10
MIN_KEYWORD_OVERLAP = 3


def _link(
    url: str,
    text: str,
    link_type: str,
    relevance: float,
    position: str,
    entity: ProgrammaticEntity | None = None,
) -> InternalLink:
    return InternalLink(
        url=url,
        text=text,
        type=link_type,
        relevance=relevance,
        position=position,
        entity_id=entity.id if entity else "",
        entity_type=entity.type if entity else "",
    )


def generate_internal_links(
    context: GenerationContext,
    strategy: dict[str, LinkingRules] | None = None,
    registry: EntityLookup | None = None,
) -> list[InternalLink]:
    """Build the scored, limited and deduplicated link list for one page."""
    rules = (strategy or DEFAULT_LINKING_STRATEGY).get(determine_page_type(context))
    if not rules:
        return []
    registry = registry or entity_registry

    links: list[InternalLink] = []
    if "parent" in rules["link_to"]:
        links.extend(_parent_links(context))
    if "child" in rules["link_to"]:
        links.extend(_child_links(context, rules, registry))
    if "sibling" in rules["link_to"]:
        links.extend(_sibling_links(context, registry))
    if "related" in rules["link_to"]:
        links.extend(_related_links(context, registry))
    if rules["contextual"]:
        links.extend(_contextual_links(context, registry))

    for link in links:
        link["relevance"] = calculate_link_relevance(link)
    links.sort(key=lambda link: link["relevance"], reverse=True)

    return deduplicate_links(apply_link_limits(links, rules))


# ── Link generation by type ─────────────────────────────────────────────────


def _parent_links(context: GenerationContext) -> list[InternalLink]:
    primary, secondary = context.primary, context.secondary
    links = [
        _link(f"/{primary.slug}", anchor_text("parent", primary, context), "parent", 1.0, "breadcrumb", primary),
        _link("/", "Home", "parent", 0.9, "breadcrumb"),
    ]
    if secondary:
        links.append(
            _link(
                f"/{secondary[0].slug}",
                anchor_text("parent", secondary[0], context),
                "parent",
                0.95,
                "sidebar",
                secondary[0],
            )
        )
    return links


def _child_links(context: GenerationContext, rules: LinkingRules, registry: EntityLookup) -> list[InternalLink]:
    primary = context.primary
    links: list[InternalLink] = []
    for child_type in get_child_entity_types(primary.type):
        children = registry.get_by_type(child_type)
        cap = min(len(children), rules["max_links"] // 2)
        ranked = sorted((c for c in children if c.active), key=lambda c: c.priority or 5, reverse=True)
        for child in ranked[:cap]:
            links.append(
                _link(
                    f"/{primary.slug}/{child.slug}",
                    anchor_text("child", child, context),
                    "child",
                    0.8,
                    "body",
                    child,
                )
            )
    return links


def _sibling_links(context: GenerationContext, registry: EntityLookup) -> list[InternalLink]:
    primary, secondary = context.primary, context.secondary
    links: list[InternalLink] = []

    siblings = [e for e in registry.get_by_type(primary.type) if e.id != primary.id and e.active]
    siblings.sort(key=lambda e: calculate_entity_similarity(primary, e), reverse=True)
    for sibling in siblings[:MAX_SIBLINGS]:
        url = f"/{sibling.slug}/{secondary[0].slug}" if secondary else f"/{sibling.slug}"
        links.append(_link(url, anchor_text("sibling", sibling, context), "sibling", 0.7, "sidebar", sibling))

    if secondary:
        second = secondary[0]
        others = [e for e in registry.get_by_type(second.type) if e.id != second.id and e.active]
        for sibling in others[:MAX_SECONDARY_SIBLINGS]:
            links.append(
                _link(
                    f"/{primary.slug}/{sibling.slug}",
                    anchor_text("sibling", sibling, context),
                    "sibling",
                    0.75,
                    "body",
                    sibling,
                )
            )
    return links


def _related_links(context: GenerationContext, registry: EntityLookup) -> list[InternalLink]:
    primary, secondary = context.primary, context.secondary
    links: list[InternalLink] = []

    related = registry.get_related(primary.id)
    for entity in related[:MAX_RELATED]:
        links.append(
            _link(
                build_entity_url(entity, secondary),
                anchor_text("related", entity, context),
                "related",
                0.6,
                "sidebar",
                entity,
            )
        )

    related_ids = {e.id for e in related}
    matches = find_entities_by_keyword_overlap(primary, registry.get_all(), MIN_KEYWORD_OVERLAP)
    for entity, _overlap in matches[:MAX_KEYWORD_MATCHES]:
        if entity.id == primary.id or entity.id in related_ids:
            continue
        links.append(
            _link(
                build_entity_url(entity, secondary),
                anchor_text("related", entity, context),
                "related",
                0.5,
                "body",
                entity,
            )
        )
    return links


def _contextual_links(context: GenerationContext, registry: EntityLookup) -> list[InternalLink]:
    primary = context.primary
    top = sorted(
        (e for e in registry.get_all() if e.active and e.id != primary.id),
        key=lambda e: e.priority or 5,
        reverse=True,
    )[:MAX_CONTEXTUAL]
    return [
        _link(build_entity_url(e), anchor_text("contextual", e, context), "contextual", 0.65, "body", e)
        for e in top
        if is_contextually_relevant(e, context)
    ]


# ── Scoring ─────────────────────────────────────────────────────────────────


def calculate_link_relevance(link: InternalLink) -> float:
    score = link["relevance"]
    if link["type"] == "parent":
        score += 0.2
    if link["position"] == "body":
        score += 0.1
    if link["type"] == "contextual":
        score += 0.05
    return min(1.0, score)


def _overlap_ratio(a: set, b: set) -> float:
    largest = max(len(a), len(b))
    if not largest:
        return 0.0
    return len(a & b) / largest


def calculate_entity_similarity(first: ProgrammaticEntity, second: ProgrammaticEntity) -> float:
    """0.3 for same type, up to 0.4 for keyword overlap, up to 0.3 for feature overlap."""
    score = 0.3 if first.type == second.type else 0.0
    score += _overlap_ratio(set(first.seo.keywords), set(second.seo.keywords)) * 0.4
    first_features = first.metadata.get("features")
    second_features = second.metadata.get("features")
    if first_features and second_features:
        score += _overlap_ratio(set(first_features), set(second_features)) * 0.3
    return score


def find_entities_by_keyword_overlap(
    entity: ProgrammaticEntity,
    candidates: list[ProgrammaticEntity],
    min_overlap: int,
) -> list[tuple[ProgrammaticEntity, int]]:
    keywords = set(entity.seo.keywords)
    matches: list[tuple[ProgrammaticEntity, int]] = []
    for candidate in candidates:
        if candidate.id == entity.id:
            continue
        overlap = len(keywords & set(candidate.seo.keywords))
        if overlap >= min_overlap:
            matches.append((candidate, overlap))
    matches.sort(key=lambda m: m[1], reverse=True)
    return matches


def is_contextually_relevant(entity: ProgrammaticEntity, context: GenerationContext) -> bool:
    primary, intent = context.primary, context.intent
    if entity.type == primary.type:
        return True
    if primary.type == "emirate" and entity.type == "vehicle":
        return True
    if primary.type == "vehicle" and entity.type == "emirate":
        return True
    if entity.type == "service" and intent is not None:
        return any(intent.type in k.lower() for k in entity.seo.keywords)
    return False


# ── Anchor text and URLs ────────────────────────────────────────────────────


def anchor_text(link_type: str, entity: ProgrammaticEntity, context: GenerationContext) -> str:
    templates = ANCHOR_TEMPLATES.get(link_type) or ANCHOR_TEMPLATES["related"]
    location = context.primary.name if context.primary.type == "emirate" else ""
    if not location:
        templates = [t for t in templates if "{location}" not in t]
    template = templates[hash_string(entity.id + context.primary.id) % len(templates)]
    return interpolate(template, {"name": entity.name, "location": location})


def build_entity_url(entity: ProgrammaticEntity, secondary: list[ProgrammaticEntity] | None = None) -> str:
    url = f"/{entity.slug}"
    if secondary:
        url += f"/{secondary[0].slug}"
    return url


# ── Limits ──────────────────────────────────────────────────────────────────


def apply_link_limits(links: list[InternalLink], rules: LinkingRules) -> list[InternalLink]:
    max_links = rules["max_links"]
    if len(links) <= max_links:
        return links
    distribution = rules.get("distribution") or "relevance"
    if distribution == "balanced":
        return _balanced_distribution(links, max_links)
    if distribution == "priority":
        return _priority_distribution(links, max_links)
    return links[:max_links]


def _balanced_distribution(links: list[InternalLink], max_links: int) -> list[InternalLink]:
    by_type: dict[str, list[InternalLink]] = {}
    for link in links:
        by_type.setdefault(link["type"], []).append(link)
    per_type = -(-max_links // len(by_type))
    result: list[InternalLink] = []
    for type_links in by_type.values():
        result.extend(type_links[:per_type])
    return result[:max_links]


def _priority_distribution(links: list[InternalLink], max_links: int) -> list[InternalLink]:
    critical = [link for link in links if link["type"] in ("parent", "breadcrumb")]
    remaining = [link for link in links if link["type"] not in ("parent", "breadcrumb")]
    return critical + remaining[: max(0, max_links - len(critical))]


def deduplicate_links(links: list[InternalLink]) -> list[InternalLink]:
    seen: set[str] = set()
    unique: list[InternalLink] = []
    for link in links:
        if link["url"] not in seen:
            seen.add(link["url"])
            unique.append(link)
    return unique


# ── Analysis ────────────────────────────────────────────────────────────────


def count_inbound_links(entity: ProgrammaticEntity, candidates: list[ProgrammaticEntity]) -> int:
    return sum(1 for c in candidates for rel in c.relationships if rel.entity_id == entity.id)


def calculate_simple_page_rank(entity: ProgrammaticEntity, inbound_count: int) -> float:
    priority = entity.priority or 5
    return (
        (priority / 10) * 0.4
        + min(inbound_count / 20, 1) * 0.4
        + min(len(entity.relationships) / 10, 1) * 0.2
    )


def analyze_link_graph(context: GenerationContext, registry: EntityLookup | None = None) -> LinkGraphSummary:
    registry = registry or entity_registry
    links = generate_internal_links(context, registry=registry)

    link_types: dict[str, int] = {}
    for link in links:
        link_types[link["type"]] = link_types.get(link["type"], 0) + 1

    inbound = count_inbound_links(context.primary, registry.get_all())
    logger.debug("Link graph for %s: %d outbound, %d inbound", context.primary.id, len(links), inbound)
    return LinkGraphSummary(
        inbound_count=inbound,
        outbound_count=len(links),
        internal_page_rank=calculate_simple_page_rank(context.primary, inbound),
        link_types=link_types,
    )


# ── Helpers ─────────────────────────────────────────────────────────────────


def determine_page_type(context: GenerationContext) -> str:
    if not context.secondary:
        return "hub"
    if len(context.secondary) > 1:
        return "comparison"
    return "spoke"


def get_child_entity_types(parent_type: str) -> list[str]:
    return _CHILD_TYPES.get(parent_type, [])
