"""
Page metadata for programmatic pages: title, description, keywords,
canonical URL, OpenGraph, Twitter card and robots directives.

Template variants are chosen by hashing the primary entity's slug so each page
keeps a stable title across rebuilds.
"""

from typing import Any

from markupsafe import escape

import constants
from fleet_hub.programmatic.types import (
    GenerationContext,
    Intent,
    PageMetadata,
    ProgrammaticEntity,
)
from fleet_hub.utils import hash_string, interpolate

SITE_CONFIG = {
    "name": "Rental Fleet UAE",
    "url": constants.SITE_URL,
    "description": "Premium car rental services across the UAE",
    "locale": "en_AE",
    "twitter": "@rentalfleetuae",
}

MAX_TITLE_LENGTH = 60
MAX_DESCRIPTION_LENGTH = 160
MAX_KEYWORDS = 15
DEFAULT_PRICE = "150"

TITLE_TEMPLATES: dict[str, list[str]] = {
    "emirate-hub": [
        "Car Rental in {location} | Rent a Car {location} | {siteName}",
        "{location} Car Rental - Best Rates & Service | {siteName}",
        "Rent a Car in {location} - Premium Fleet | {siteName}",
    ],
    "vehicle-hub": [
        "{vehicleType} Rental UAE | Rent {vehicleType} | {siteName}",
        "Rent a {vehicleType} in UAE - Best Deals | {siteName}",
        "{vehicleType} Car Rental - UAE Wide Service | {siteName}",
    ],
    "emirate-vehicle": [
        "{vehicleType} Rental in {location} | From AED {price}/Day",
        "Rent a {vehicleType} in {location} - {siteName}",
        "{location} {vehicleType} Rental - Best Prices & Service",
    ],
    "emirate-vehicle-intent": [
        "{vehicleType} Rental in {location} for {intent} | {siteName}",
        "{intent} {vehicleType} Rental {location} - Premium Service",
        "Rent {vehicleType} for {intent} in {location} | {siteName}",
    ],
    "comparison": [
        "Compare {entity1} vs {entity2} | Car Rental Guide",
        "{entity1} vs {entity2} - Which is Better? | {siteName}",
        "Car Rental Comparison: {entity1} vs {entity2}",
    ],
}

DESCRIPTION_TEMPLATES: dict[str, list[str]] = {
    "emirate-hub": [
        "Rent a car in {location} with {siteName}. Choose from our premium fleet of vehicles starting at AED {price}/day. Free delivery, 24/7 support, and best rates guaranteed.",
        "Looking for car rental in {location}? {siteName} offers the best vehicles at competitive prices. Book now and enjoy free delivery across {location}.",
        "Premium car rental services in {location}. Wide selection of vehicles, flexible rental periods, and excellent customer service. Starting from AED {price} per day.",
    ],
    "vehicle-hub": [
        "Rent a {vehicleType} across UAE with {siteName}. Premium {vehicleType} rentals with comprehensive insurance, 24/7 support, and flexible terms. Book your {vehicleType} today.",
        "{vehicleType} rental made easy. Choose from our well-maintained fleet of {vehicleType}s. Competitive rates, free delivery, and excellent service across UAE.",
        "Find the perfect {vehicleType} rental in UAE. {siteName} offers a wide range of {vehicleType}s for all budgets. Book online and get instant confirmation.",
    ],
    "emirate-vehicle": [
        "Rent a {vehicleType} in {location} from AED {price}/day. {siteName} offers premium {vehicleType} rentals with free delivery, comprehensive insurance, and 24/7 support.",
        "Looking for {vehicleType} rental in {location}? Get the best deals starting at AED {price}/day. Flexible rental periods and excellent customer service.",
        "{location} {vehicleType} rental with {siteName}. Choose from our fleet of well-maintained {vehicleType}s. Free delivery and pickup across {location}.",
    ],
    "emirate-vehicle-intent": [
        "{vehicleType} rental in {location} perfect for {intent}. From AED {price}/day with free delivery, insurance included. Book your {intent} {vehicleType} today.",
        "Need a {vehicleType} for {intent} in {location}? {siteName} offers tailored solutions starting at AED {price}/day. Premium service guaranteed.",
        "Rent a {vehicleType} in {location} for {intent}. Competitive rates, flexible terms, and vehicles designed for {intent} use. Book now from AED {price}/day.",
    ],
    "comparison": [
        "Compare {entity1} vs {entity2} for car rental. Detailed comparison of features, pricing, availability, and customer reviews to help you choose the best option.",
        "Choosing between {entity1} and {entity2}? Our comprehensive comparison guide covers pricing, features, and benefits to help you make the right decision.",
        "{entity1} vs {entity2}: Which car rental option is better for you? Compare prices, features, and customer satisfaction in our detailed guide.",
    ],
}

INTENT_LABELS = {
    "business": "Business",
    "tourism": "Tourism",
    "family": "Family",
    "wedding": "Wedding",
    "corporate": "Corporate",
    "luxury": "Luxury",
    "budget": "Budget",
    "long-term": "Long-Term",
    "airport": "Airport Transfer",
    "chauffeur": "Chauffeur Service",
}


def generate_metadata(context: GenerationContext) -> PageMetadata:
    primary, secondary, intent = context.primary, context.secondary, context.intent
    page_type = determine_page_type(primary, secondary, intent)
    data = build_metadata_context(primary, secondary, intent)

    title = generate_title(page_type, data)
    description = generate_description(page_type, data)
    canonical = generate_canonical_url(primary, secondary, intent)

    return PageMetadata(
        title=title,
        description=description,
        keywords=", ".join(generate_keywords(primary, secondary, intent)),
        canonical=canonical,
        robots=generate_robots(primary),
        open_graph=generate_open_graph(title, description, canonical, primary),
        twitter=generate_twitter_card(title, description),
        alternates={"canonical": canonical, "languages": generate_hreflang_tags(canonical)},
        other={"article:publisher": SITE_CONFIG["url"]},
    )


def determine_page_type(
    primary: ProgrammaticEntity,
    secondary: list[ProgrammaticEntity] | None,
    intent: Intent | None,
) -> str:
    if secondary and len(secondary) > 1:
        return "comparison"
    if not secondary:
        return f"{primary.type}-hub"
    if intent is not None:
        return f"{primary.type}-{secondary[0].type}-intent"
    return f"{primary.type}-{secondary[0].type}"


def format_intent(intent_type: str) -> str:
    return INTENT_LABELS.get(intent_type, intent_type)


def build_metadata_context(
    primary: ProgrammaticEntity,
    secondary: list[ProgrammaticEntity] | None,
    intent: Intent | None,
) -> dict[str, Any]:
    data: dict[str, Any] = {
        "siteName": SITE_CONFIG["name"],
        "location": primary.name,
        "locationSlug": primary.slug,
    }
    if primary.type == "vehicle":
        data["vehicleType"] = primary.name
        data["vehicleSlug"] = primary.slug
    elif secondary and secondary[0].type == "vehicle":
        data["vehicleType"] = secondary[0].name
        data["vehicleSlug"] = secondary[0].slug

    price_entity = secondary[0] if secondary else primary
    price_from = (price_entity.metadata.get("price") or {}).get("from")
    data["price"] = str(price_from) if price_from else DEFAULT_PRICE

    if intent is not None:
        data["intent"] = format_intent(intent.type)

    if secondary and len(secondary) > 1:
        data["entity1"] = primary.name
        data["entity2"] = secondary[0].name
    return data


def _template_for(templates: list[str], data: dict[str, Any]) -> str:
    seed = hash_string(data.get("locationSlug") or data.get("vehicleSlug") or "")
    return templates[seed % len(templates)]


def generate_title(page_type: str, data: dict[str, Any]) -> str:
    templates = TITLE_TEMPLATES.get(page_type)
    if not templates:
        return f"{data.get('location') or data.get('vehicleType') or 'Car Rental'} | {SITE_CONFIG['name']}"

    title = interpolate(_template_for(templates, data), data)
    if len(title) <= MAX_TITLE_LENGTH:
        return title
    parts = title.split("|")
    if len(parts) > 1:
        return f"{parts[0].strip()} | {SITE_CONFIG['name']}"[:MAX_TITLE_LENGTH]
    return title[: MAX_TITLE_LENGTH - 3] + "..."


def generate_description(page_type: str, data: dict[str, Any]) -> str:
    templates = DESCRIPTION_TEMPLATES.get(page_type)
    if not templates:
        return (
            f"Rent a car in UAE with {SITE_CONFIG['name']}. "
            "Premium vehicles, competitive rates, and excellent service."
        )
    description = interpolate(_template_for(templates, data), data)
    if len(description) > MAX_DESCRIPTION_LENGTH:
        return description[: MAX_DESCRIPTION_LENGTH - 3] + "..."
    return description


def generate_keywords(
    primary: ProgrammaticEntity,
    secondary: list[ProgrammaticEntity] | None,
    intent: Intent | None,
) -> list[str]:
    # dict keeps insertion order and drops duplicates
    keywords: dict[str, None] = {}

    def add(value: str) -> None:
        keywords.setdefault(value, None)

    add(primary.name)
    add(f"{primary.name} car rental")
    for k in primary.seo.keywords:
        add(k)

    for entity in secondary or []:
        add(entity.name)
        for k in entity.seo.keywords:
            add(k)
        add(f"{entity.name} rental in {primary.name}")
        add(f"rent {entity.name} {primary.name}")

    if intent is not None:
        add(f"{intent.type} car rental")
        if secondary:
            add(f"{secondary[0].name} for {intent.type}")

    add("car rental UAE")
    add("rent a car")
    add("vehicle rental")
    return list(keywords)[:MAX_KEYWORDS]


def generate_canonical_url(
    primary: ProgrammaticEntity,
    secondary: list[ProgrammaticEntity] | None,
    intent: Intent | None,
) -> str:
    path = f"/{primary.slug}"
    if secondary:
        path += f"/{secondary[0].slug}"
        if intent is not None:
            path += f"/{intent.type}"
    return f"{SITE_CONFIG['url']}{path}"


def generate_open_graph(title: str, description: str, url: str, primary: ProgrammaticEntity) -> dict[str, Any]:
    image = primary.metadata.get("image") or f"{SITE_CONFIG['url']}/og-default.jpg"
    return {
        "title": title,
        "description": description,
        "url": url,
        "site_name": SITE_CONFIG["name"],
        "locale": SITE_CONFIG["locale"],
        "type": "website",
        "images": [{"url": image, "width": 1200, "height": 630, "alt": title}],
    }


def generate_twitter_card(title: str, description: str) -> dict[str, Any]:
    return {
        "card": "summary_large_image",
        "title": title,
        "description": description,
        "site": SITE_CONFIG["twitter"],
        "creator": SITE_CONFIG["twitter"],
    }


def generate_robots(primary: ProgrammaticEntity) -> dict[str, Any]:
    robots: dict[str, Any] = {
        "index": True,
        "follow": True,
        "google_bot": {
            "index": True,
            "follow": True,
            "max-video-preview": -1,
            "max-image-preview": "large",
            "max-snippet": -1,
        },
    }
    if not primary.active:
        robots["index"] = False
        robots["follow"] = False
    if primary.priority and primary.priority < 3:
        robots["google_bot"]["max-snippet"] = 160
    return robots


def robots_content(robots: dict[str, Any]) -> str:
    """Render a robots dict as a ``<meta name="robots">`` content value."""
    return ", ".join(
        [
            "index" if robots.get("index", True) else "noindex",
            "follow" if robots.get("follow", True) else "nofollow",
        ]
    )


def generate_hreflang_tags(canonical: str, languages: tuple[str, ...] = ("en-AE", "ar-AE")) -> dict[str, str]:
    tags = {locale: f"{canonical}?lang={locale.split('-')[0]}" for locale in languages}
    tags["x-default"] = canonical
    return tags


def validate_metadata(metadata: dict[str, Any]) -> dict[str, Any]:
    issues: list[str] = []

    title = metadata.get("title")
    if not title:
        issues.append("Missing title")
    elif len(title) > MAX_TITLE_LENGTH:
        issues.append(f"Title too long: {len(title)} characters (max: {MAX_TITLE_LENGTH})")

    description = metadata.get("description")
    if not description:
        issues.append("Missing description")
    elif len(description) > MAX_DESCRIPTION_LENGTH:
        issues.append(
            f"Description too long: {len(description)} characters (max: {MAX_DESCRIPTION_LENGTH})"
        )

    if not (metadata.get("alternates") or {}).get("canonical") and not metadata.get("canonical"):
        issues.append("Missing canonical URL")
    if not metadata.get("open_graph"):
        issues.append("Missing Open Graph metadata")
    if not metadata.get("twitter"):
        issues.append("Missing Twitter card metadata")

    return {"valid": not issues, "issues": issues}


def generate_meta_tags_html(metadata: dict[str, Any]) -> str:
    tags: list[str] = []
    title = metadata.get("title")
    if title:
        tags.append(f"<title>{escape(title)}</title>")
        tags.append(f'<meta property="og:title" content="{escape(title)}" />')
    description = metadata.get("description")
    if description:
        tags.append(f'<meta name="description" content="{escape(description)}" />')
        tags.append(f'<meta property="og:description" content="{escape(description)}" />')
    if metadata.get("keywords"):
        tags.append(f'<meta name="keywords" content="{escape(metadata["keywords"])}" />')
    canonical = (metadata.get("alternates") or {}).get("canonical") or metadata.get("canonical")
    if canonical:
        tags.append(f'<link rel="canonical" href="{escape(canonical)}" />')
    return "\n".join(tags)
