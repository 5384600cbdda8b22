"""JSON-LD (schema.org) structured data for programmatic pages."""

import json
from datetime import date
from typing import Any

import constants
from fleet_hub.programmatic.types import FAQ, GenerationContext, ProgrammaticEntity
from fleet_hub.utils import hash_string

SCHEMA_CONTEXT = "https://schema.org"

MAX_SCHEMA_FAQS = 10
DEFAULT_DAILY_PRICE = 150

ORGANIZATION_DATA: dict[str, Any] = {
    "name": "Rental Fleet UAE",
    "url": constants.SITE_URL,
    "logo": f"{constants.SITE_URL}/logo.png",
    "description": "Premium car rental services across the United Arab Emirates",
    "contactPoint": [
        {
            "@type": "ContactPoint",
            "telephone": "+971-4-XXX-XXXX",
            "contactType": "Customer Service",
            "areaServed": "AE",
            "availableLanguage": ["English", "Arabic"],
        }
    ],
    "sameAs": [
        "https://facebook.com/rentalfleetuae",
        "https://twitter.com/rentalfleetuae",
        "https://instagram.com/rentalfleetuae",
    ],
}

Schema = dict[str, Any]


def build_schemas(context: GenerationContext) -> list[Schema]:
    """Organization, entity schemas, FAQPage (when FAQs exist) and breadcrumbs."""
    schemas: list[Schema] = [build_organization_schema()]
    schemas.extend(build_entity_schemas(context))
    faq_schema = build_faq_schema(context)
    if faq_schema is not None:
        schemas.append(faq_schema)
    schemas.append(build_breadcrumb_schema(context))
    return schemas


def build_entity_schemas(context: GenerationContext) -> list[Schema]:
    primary, secondary = context.primary, context.secondary
    first = secondary[0] if secondary else None
    schemas: list[Schema] = []

    if primary.type in ("emirate", "location"):
        schemas.append(build_place_schema(primary))
        if first is not None and first.type == "vehicle":
            schemas.append(build_vehicle_product_schema(first, primary))
            schemas.append(build_rental_service_schema(first, primary))

    if primary.type == "vehicle":
        schemas.append(build_vehicle_product_schema(primary))
        if first is not None and first.type in ("emirate", "location"):
            schemas.append(build_rental_service_schema(primary, first))

    if primary.type == "service":
        schemas.append(build_service_schema(primary))

    if len(secondary) > 1:
        schemas.append(build_comparison_schema(primary, secondary))
    return schemas


def build_organization_schema() -> Schema:
    return {"@context": SCHEMA_CONTEXT, "@type": "Organization", **ORGANIZATION_DATA}


def build_place_schema(entity: ProgrammaticEntity) -> Schema:
    schema: Schema = {
        "@context": SCHEMA_CONTEXT,
        "@type": "Place",
        "name": entity.name,
        "description": entity.content.description,
    }
    coordinates = entity.metadata.get("coordinates")
    if coordinates:
        schema["geo"] = {
            "@type": "GeoCoordinates",
            "latitude": coordinates.get("lat"),
            "longitude": coordinates.get("lng"),
        }
    schema["address"] = {
        "@type": "PostalAddress",
        "addressCountry": "AE",
        "addressLocality": entity.name,
    }
    return schema


def _offer(price: dict[str, Any]) -> Schema:
    return {
        "@type": "Offer",
        "price": price.get("daily") or price.get("from") or DEFAULT_DAILY_PRICE,
        "priceCurrency": price.get("currency") or "AED",
        "availability": "https://schema.org/InStock",
    }


def review_count(entity_id: str) -> int:
    """Stable review count in [20, 119] for an entity with a rating."""
    return hash_string(entity_id) % 100 + 20


def build_vehicle_product_schema(
    vehicle: ProgrammaticEntity,
    location: ProgrammaticEntity | None = None,
) -> Schema:
    schema: Schema = {
        "@context": SCHEMA_CONTEXT,
        "@type": "Product",
        "name": vehicle.name,
        "description": vehicle.content.description,
    }
    metadata = vehicle.metadata
    if metadata.get("brand"):
        schema["brand"] = {"@type": "Brand", "name": metadata["brand"]}
    if metadata.get("image"):
        schema["image"] = metadata["image"]

    price = metadata.get("price")
    if price:
        offers = _offer(price)
        offers["priceValidUntil"] = next_year_date()
        if location is not None:
            offers["url"] = f"{constants.SITE_URL}/{location.slug}/{vehicle.slug}"
        schema["offers"] = offers

    if metadata.get("rating"):
        schema["aggregateRating"] = {
            "@type": "AggregateRating",
            "ratingValue": metadata["rating"],
            "bestRating": 5,
            "worstRating": 1,
            "reviewCount": review_count(vehicle.id),
        }
    return schema


def build_rental_service_schema(vehicle: ProgrammaticEntity, location: ProgrammaticEntity) -> Schema:
    schema: Schema = {
        "@context": SCHEMA_CONTEXT,
        "@type": "Service",
        "name": f"{vehicle.name} Rental in {location.name}",
        "description": f"Rent a {vehicle.name} in {location.name}. {vehicle.content.description}",
        "provider": {"@type": "Organization", "name": ORGANIZATION_DATA["name"]},
        "areaServed": {"@type": "Place", "name": location.name},
    }
    if vehicle.metadata.get("price"):
        schema["offers"] = _offer(vehicle.metadata["price"])
    return schema


def build_service_schema(entity: ProgrammaticEntity) -> Schema:
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "Service",
        "name": entity.name,
        "description": entity.content.description,
        "provider": {"@type": "Organization", "name": ORGANIZATION_DATA["name"]},
        "areaServed": {"@type": "Place", "name": "United Arab Emirates"},
    }


def collect_faqs(context: GenerationContext) -> list[FAQ]:
    faqs: list[FAQ] = list(context.primary.content.faqs)
    for entity in context.secondary:
        faqs.extend(entity.content.faqs)
    return faqs[:MAX_SCHEMA_FAQS]


def build_faq_schema(context: GenerationContext) -> Schema | None:
    faqs = collect_faqs(context)
    if not faqs:
        return None
    return faq_page_schema(faqs)


def faq_page_schema(faqs: list[FAQ]) -> Schema:
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "FAQPage",
        "mainEntity": [
            {
                "@type": "Question",
                "name": faq["question"],
                "acceptedAnswer": {"@type": "Answer", "text": faq["answer"]},
            }
            for faq in faqs
        ],
    }


def build_comparison_schema(primary: ProgrammaticEntity, secondary: list[ProgrammaticEntity]) -> Schema:
    items = [primary, *secondary]
    names = [e.name for e in items]
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "ItemList",
        "name": f"Comparison: {' vs '.join(names)}",
        "description": f"Compare {', '.join(names)} for car rental",
        "itemListElement": [
            {"@type": "ListItem", "position": i + 1, "item": build_vehicle_product_schema(entity)}
            for i, entity in enumerate(items)
        ],
    }


def build_breadcrumb_schema(context: GenerationContext) -> Schema:
    primary, secondary = context.primary, context.secondary
    crumbs = [
        ("Home", constants.SITE_URL),
        (primary.name, f"{constants.SITE_URL}/{primary.slug}"),
    ]
    if secondary:
        crumbs.append((secondary[0].name, f"{constants.SITE_URL}/{primary.slug}/{secondary[0].slug}"))
    return breadcrumb_list_schema(crumbs)


def breadcrumb_list_schema(crumbs: list[tuple[str, str]]) -> Schema:
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "BreadcrumbList",
        "itemListElement": [
            {"@type": "ListItem", "position": i + 1, "name": name, "item": url}
            for i, (name, url) in enumerate(crumbs)
        ],
    }


def next_year_date(today: date | None = None) -> str:
    today = today or date.today()
    try:
        return today.replace(year=today.year + 1).isoformat()
    except ValueError:
        # Feb 29 has no counterpart next year
        return today.replace(year=today.year + 1, day=28).isoformat()


# ── Validation ──────────────────────────────────────────────────────────────

_REQUIRED_FIELDS: dict[str, list[tuple[str, str]]] = {
    "Organization": [("name", "Organization missing name"), ("url", "Organization missing url")],
    "Place": [("name", "Place missing name")],
    "Product": [("name", "Product missing name"), ("description", "Product missing description")],
    "Service": [("name", "Service missing name"), ("provider", "Service missing provider")],
}


def validate_schema(schema: Schema) -> dict[str, Any]:
    errors: list[str] = []
    if not schema.get("@context"):
        errors.append("Missing @context")
    if not schema.get("@type"):
        errors.append("Missing @type")

    schema_type = schema.get("@type")
    for key, message in _REQUIRED_FIELDS.get(schema_type, []):
        if not schema.get(key):
            errors.append(message)
    if schema_type == "FAQPage" and not isinstance(schema.get("mainEntity"), list):
        errors.append("FAQPage missing mainEntity array")

    return {"valid": not errors, "errors": errors}


def validate_all_schemas(schemas: list[Schema]) -> dict[str, Any]:
    results = [{"index": i, **validate_schema(s)} for i, s in enumerate(schemas)]
    return {"valid": all(r["valid"] for r in results), "results": results}


# ── Output ──────────────────────────────────────────────────────────────────


def _dumps(value: Any, indent: int | None = None) -> str:
    # "</" would close the surrounding <script> element
    return json.dumps(value, indent=indent, ensure_ascii=False).replace("</", "<\\/")


def schema_to_script_tag(schema: Schema) -> str:
    return f'<script type="application/ld+json">\n{_dumps(schema, indent=2)}\n</script>'


def schemas_to_script_tags(schemas: list[Schema]) -> str:
    return "\n".join(schema_to_script_tag(s) for s in schemas)


def build_schema_graph(schemas: list[Schema]) -> Schema:
    return {"@context": SCHEMA_CONTEXT, "@graph": schemas}


def get_schema_script_props(schemas: list[Schema]) -> dict[str, str]:
    """Attributes and body for a single ``<script>`` holding the whole graph."""
    return {
        "id": "schema-markup",
        "type": "application/ld+json",
        "json": _dumps(build_schema_graph(schemas)),
    }
