"""
Content generation for programmatic pages.

Section text is assembled from fixed variation pools. The variation index is
derived from a hash of the entity ids, so a given page always renders the
same copy while neighbouring pages get different sentence structures.
"""

import re

from fleet_hub.programmatic.types import (
    FAQ,
    ContentSection,
    GeneratedContent,
    GenerationContext,
    Intent,
    ProgrammaticEntity,
)
from fleet_hub.utils.text import hash_string, interpolate, word_count

CONTENT_VARIATIONS: dict[str, dict[str, list[str]]] = {
    "intro": {
        "business": [
            "Looking for reliable {vehicleType} rental in {location}? Our business-focused services deliver professional solutions tailored to corporate needs.",
            "Streamline your business operations with our premium {vehicleType} rental services in {location}. Corporate packages available.",
            "Discover why {location} businesses trust our {vehicleType} rental solutions for their corporate transportation needs.",
        ],
        "tourism": [
            "Explore {location} in style with our {vehicleType} rental services. Perfect for tourists seeking adventure and convenience.",
            "Make your {location} vacation unforgettable with a {vehicleType} from our extensive fleet. Tourist-friendly packages available.",
            "Experience the best of {location} with our reliable {vehicleType} rentals, designed for travelers who value comfort and flexibility.",
        ],
        "family": [
            "Planning a family trip in {location}? Our {vehicleType} rentals offer the space and safety features your family deserves.",
            "Travel comfortably with your family in {location} using our {vehicleType} rental services. Child seats and family packages available.",
            "Make family memories in {location} easier with our spacious {vehicleType} rentals, perfect for all ages.",
        ],
        "luxury": [
            "Indulge in luxury with our premium {vehicleType} rental collection in {location}. Exclusive vehicles for discerning clients.",
            "Experience {location} in unparalleled luxury with our high-end {vehicleType} rental services. VIP treatment guaranteed.",
            "Elevate your {location} journey with our luxury {vehicleType} rentals, featuring top-tier brands and white-glove service.",
        ],
    },
    "benefits": {
        "flexibility": [
            "Flexible rental periods from daily to monthly",
            "Choose your rental duration - no long-term commitments required",
            "Customize your rental period to match your exact needs",
        ],
        "convenience": [
            "Free delivery and pickup across {location}",
            "Convenient door-to-door service throughout {location}",
            "24/7 customer support for your peace of mind",
        ],
        "quality": [
            "Well-maintained, regularly serviced vehicles",
            "Modern fleet with the latest safety features",
            "Comprehensive insurance coverage included",
        ],
    },
    "cta": {
        "business": [
            "Request a Corporate Quote",
            "Get Your Business Rental Quote",
            "Contact Our Corporate Team",
        ],
        "tourism": [
            "Book Your Adventure",
            "Reserve Your Vehicle Now",
            "Start Your Journey",
        ],
        "default": [
            "Book Now",
            "Get a Quote",
            "Reserve Your Vehicle",
            "Check Availability",
        ],
    },
}

SECTION_TEMPLATES: dict[str, dict[str, object]] = {
    "hero": {
        "professional": "{vehicleType} Rental Services in {location}",
        "enthusiastic": "Your Perfect {vehicleType} Awaits in {location}!",
        "informative": "Comprehensive {vehicleType} Rental Guide for {location}",
    },
    "description": {
        "short": [
            "Rent a {vehicleType} in {location} for {priceFrom} per day. {feature1}, {feature2}, and {feature3} included.",
            "Get the best {vehicleType} rental deals in {location} starting at {priceFrom}/day. {benefit1} and {benefit2}.",
            "{location} {vehicleType} rental from {priceFrom} daily. Featuring {feature1}, {feature2}, and excellent customer service.",
        ],
        "long": [
            "When it comes to {vehicleType} rental in {location}, we offer unmatched quality and service. Our fleet of well-maintained vehicles ensures your journey is comfortable, safe, and memorable. Whether you need a {vehicleType} for business meetings, family outings, or exploring the sights of {location}, we have the perfect vehicle for you. With transparent pricing starting at {priceFrom} per day, flexible rental terms, and 24/7 customer support, we make car rental simple and stress-free.",
            "Discover the freedom of the road with our {vehicleType} rental services in {location}. We understand that every customer has unique needs, which is why we offer a diverse range of {vehicleType}s to choose from. From the moment you book until you return the vehicle, our team is dedicated to providing exceptional service. Enjoy competitive rates starting from {priceFrom} per day, comprehensive insurance coverage, and the flexibility to extend your rental as needed.",
        ],
    },
}

_TOKEN_STRIP_RE = re.compile(r"[^\w\s]")
_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")
_VOWEL_GROUP_RE = re.compile(r"[aeiouy]+")
_NON_ALPHA_RE = re.compile(r"[^a-z]")


def generate_content(
    primary: ProgrammaticEntity,
    secondary: list[ProgrammaticEntity] | None = None,
    intent: Intent | None = None,
    variant=None,
    target_word_count: int = 800,
) -> GeneratedContent:
    """Generate the full section list for a hub or spoke page.

    ``variant`` is a TemplateVariant; when given, the benefits section is only
    emitted if the variant declares one.
    """
    secondary = secondary or []
    data = _build_interpolation_context(primary, secondary, intent)
    seed = hash_string(primary.id + (secondary[0].id if secondary else ""))
    intent_type = intent.type if intent else None

    sections: list[ContentSection] = [
        _hero_section(data, intent_type),
        _description_section(data, intent_type, primary, seed),
    ]
    if variant is None or any(s.type == "benefits" for s in variant.sections):
        sections.append(_benefits_section(data, seed))
    if primary.metadata.get("features"):
        sections.append(_features_section(primary))
    if primary.metadata.get("stats"):
        sections.append(_stats_section(primary, data))
    sections.append(_guide_section(data, seed))

    faqs = generate_faqs(primary, secondary, seed)
    if faqs:
        sections.append(
            ContentSection(
                id="faq",
                type="text",
                heading="Frequently Asked Questions",
                content=format_faqs_as_content(faqs),
                order=len(sections),
                data={"faqs": faqs},
            )
        )
    sections.append(_cta_section(data, intent_type, seed))

    all_text = " ".join(s["content"] for s in sections)
    return GeneratedContent(
        sections=sections,
        word_count=sum(word_count(s["content"]) for s in sections),
        keyword_density=calculate_keyword_density(all_text, primary.seo.keywords),
        readability_score=calculate_readability_score(all_text),
    )


def generate_content_for(context: GenerationContext) -> GeneratedContent:
    return generate_content(
        context.primary,
        context.secondary,
        context.intent,
        context.variant,
        context.target_word_count,
    )


def _build_interpolation_context(
    primary: ProgrammaticEntity,
    secondary: list[ProgrammaticEntity],
    intent: Intent | None,
) -> dict[str, object]:
    data: dict[str, object] = {
        "location": primary.name,
        "locationSlug": primary.slug,
    }

    vehicle = None
    if primary.type == "vehicle":
        vehicle = primary
    elif secondary and secondary[0].type == "vehicle":
        vehicle = secondary[0]
    if vehicle is not None:
        data["vehicleType"] = vehicle.name
        data["vehicleSlug"] = vehicle.slug

    price = primary.metadata.get("price") or {}
    if price.get("from"):
        data["priceFrom"] = f"AED {price['from']}"

    features = primary.metadata.get("features") or []
    if len(features) >= 3:
        data["feature1"], data["feature2"], data["feature3"] = features[:3]

    if len(primary.content.benefits) >= 2:
        data["benefit1"], data["benefit2"] = primary.content.benefits[:2]

    if intent is not None:
        data["intent"] = intent.type
    return data


def _hero_section(data: dict[str, object], intent_type: str | None) -> ContentSection:
    tone = "professional"
    if intent_type == "family":
        tone = "enthusiastic"
    elif intent_type == "tourism":
        tone = "informative"
    heading = interpolate(SECTION_TEMPLATES["hero"][tone], data)
    return ContentSection(id="hero", type="text", heading=heading, content=heading, order=0)


def _description_section(
    data: dict[str, object],
    intent_type: str | None,
    primary: ProgrammaticEntity,
    seed: int,
) -> ContentSection:
    intros = CONTENT_VARIATIONS["intro"].get(intent_type or "default") or CONTENT_VARIATIONS["intro"]["tourism"]
    intro = interpolate(intros[seed % len(intros)], data)
    long_templates = SECTION_TEMPLATES["description"]["long"]
    long_desc = interpolate(long_templates[(seed + 1) % len(long_templates)], data)
    entity_desc = primary.content.long_description or primary.content.description

    return ContentSection(
        id="description",
        type="text",
        heading=f"About {data.get('vehicleType') or 'Our'} Rental in {data['location']}",
        content=f"{intro}\n\n{long_desc}\n\n{entity_desc}",
        order=1,
    )


def _benefits_section(data: dict[str, object], seed: int) -> ContentSection:
    benefits = [
        interpolate(options[(seed + index) % len(options)], data)
        for index, options in enumerate(CONTENT_VARIATIONS["benefits"].values())
    ]
    numbered = "\n".join(f"{i + 1}. {b}" for i, b in enumerate(benefits))
    content = (
        "## Why Choose Our Services\n\n"
        f"{numbered}\n\n"
        "Our commitment to customer satisfaction sets us apart. "
        f"With years of experience serving {data['location']}, we understand what travelers "
        "and residents need. Every vehicle in our fleet undergoes rigorous maintenance checks "
        "to ensure your safety and comfort."
    )
    return ContentSection(id="benefits", type="list", heading="Key Benefits", content=content, order=2)


def _features_section(entity: ProgrammaticEntity) -> ContentSection:
    features = entity.metadata.get("features") or []
    bullets = "\n".join(f"- {f}" for f in features)
    more = "And many more premium features to enhance your driving experience." if len(features) > 5 else ""
    content = f"## Vehicle Features\n\nOur {entity.name} comes equipped with:\n\n{bullets}\n\n{more}".strip()
    return ContentSection(
        id="features", type="list", heading="Features & Amenities", content=content, order=3
    )


def _stats_section(entity: ProgrammaticEntity, data: dict[str, object]) -> ContentSection:
    stats = entity.metadata.get("stats") or {}
    lines = "\n".join(
        f"**{format_stat_key(key)}:** {format_stat_value(value)}" for key, value in stats.items()
    )
    content = (
        f"## Quick Stats\n\n{lines}\n\n"
        "These numbers reflect our commitment to quality service and customer satisfaction "
        f"in {data['location']}."
    )
    return ContentSection(id="stats", type="text", heading="By the Numbers", content=content, order=4)


def _guide_section(data: dict[str, object], seed: int) -> ContentSection:
    vehicle = data.get("vehicleType") or "vehicle"
    location = data["location"]
    guides = [
        (
            "### How to Book\n\n"
            f"1. **Select Your Vehicle**: Browse our fleet and choose the perfect {vehicle}\n"
            "2. **Choose Your Dates**: Pick up and drop off times that work for you\n"
            "3. **Confirm Details**: Review your booking and confirm\n"
            f"4. **Get Driving**: We'll deliver to your location in {location}"
        ),
        (
            "### Rental Process\n\n"
            f"Our streamlined booking process makes renting a {vehicle} in {location} simple:\n\n"
            "- **Online Booking**: Reserve in minutes through our website\n"
            "- **Document Verification**: Quick verification of driving license and ID\n"
            "- **Vehicle Inspection**: Thorough walk-around before you drive off\n"
            f"- **Flexible Return**: Multiple drop-off options across {location}"
        ),
    ]
    return ContentSection(
        id="guide", type="text", heading="Rental Guide", content=guides[seed % len(guides)], order=5
    )


def generate_faqs(
    primary: ProgrammaticEntity,
    secondary: list[ProgrammaticEntity],
    seed: int,
) -> list[FAQ]:
    """Entity FAQs first, then 4-5 common questions; at most 6 per page."""
    faqs: list[FAQ] = list(primary.content.faqs)
    vehicle_name = secondary[0].name if secondary else "vehicle"
    common: list[FAQ] = [
        {
            "question": f"What documents do I need to rent a {vehicle_name} in {primary.name}?",
            "answer": "You will need a valid driving license, passport or Emirates ID, and a credit card for the security deposit.",
            "category": "requirements",
        },
        {
            "question": "What is included in the rental price?",
            "answer": "Our rental prices include basic insurance, 24/7 roadside assistance, and unlimited mileage within the UAE.",
            "category": "pricing",
        },
        {
            "question": f"Can I pick up the vehicle in {primary.name} and drop it off elsewhere?",
            "answer": "Yes, we offer one-way rentals. Additional fees may apply depending on the drop-off location.",
            "category": "logistics",
        },
        {
            "question": "Is there a minimum rental period?",
            "answer": "Our minimum rental period is 24 hours, but we offer competitive rates for weekly and monthly rentals.",
            "category": "policies",
        },
        {
            "question": "What happens if I return the vehicle late?",
            "answer": "We offer a 1-hour grace period. After that, late fees are calculated on an hourly basis.",
            "category": "policies",
        },
    ]
    faqs.extend(common[: 4 + seed % 2])
    return faqs[:6]


def format_faqs_as_content(faqs: list[FAQ]) -> str:
    return "\n\n".join(f"### {faq['question']}\n\n{faq['answer']}" for faq in faqs)


def _cta_section(data: dict[str, object], intent_type: str | None, seed: int) -> ContentSection:
    options = CONTENT_VARIATIONS["cta"].get(intent_type or "default") or CONTENT_VARIATIONS["cta"]["default"]
    cta_text = options[seed % len(options)]
    content = (
        "## Ready to Get Started?\n\n"
        f"Don't wait - book your {data.get('vehicleType') or 'vehicle'} in {data['location']} today "
        "and experience hassle-free rental service. Our team is ready to help you find the perfect "
        "vehicle for your needs.\n\n"
        f"**{cta_text}** - Available 24/7"
    )
    return ContentSection(id="cta", type="callout", heading="Book Now", content=content, order=99)


# ── Anti-duplication metrics ─────────────────────────────────────────────────

def _tokenize(text: str) -> list[str]:
    return [t for t in _TOKEN_STRIP_RE.sub(" ", text.lower()).split() if len(t) > 3]


def calculate_similarity(content1: str, content2: str) -> float:
    """Jaccard similarity of the two token sets: 0 (disjoint) to 1 (identical)."""
    set1 = set(_tokenize(content1))
    set2 = set(_tokenize(content2))
    union = set1 | set2
    if not union:
        return 0.0
    return len(set1 & set2) / len(union)


def calculate_keyword_density(content: str, keywords: list[str]) -> dict[str, float]:
    words = content.lower().split()
    total = len(words) or 1
    density: dict[str, float] = {}
    for keyword in keywords:
        needle = keyword.lower()
        density[keyword] = sum(1 for w in words if needle in w) / total
    return density


def _count_syllables(word: str) -> int:
    word = _NON_ALPHA_RE.sub("", word.lower())
    if len(word) <= 3:
        return 1
    groups = _VOWEL_GROUP_RE.findall(word)
    return len(groups) or 1


def calculate_readability_score(content: str) -> float:
    """Flesch reading ease, clamped to 0-100."""
    sentences = [s for s in _SENTENCE_SPLIT_RE.split(content) if s.strip()]
    words = content.split()
    if not sentences or not words:
        return 0.0
    syllables = sum(_count_syllables(w) for w in words)
    score = 206.835 - 1.015 * (len(words) / len(sentences)) - 84.6 * (syllables / len(words))
    return max(0.0, min(100.0, score))


def format_stat_key(key: str) -> str:
    return " ".join(w[:1].upper() + w[1:] for w in key.split("_"))


def format_stat_value(value: int | float | str) -> str:
    if isinstance(value, str):
        return value
    if value >= 1_000_000:
        return f"{value / 1_000_000:.1f}M"
    if value >= 1000:
        return f"{value / 1000:.1f}K"
    return str(value)


def average_density(keyword_density: dict[str, float] | float) -> float:
    if isinstance(keyword_density, (int, float)):
        return float(keyword_density)
    if not keyword_density:
        return 0.0
    return sum(keyword_density.values()) / len(keyword_density)


def validate_generated_content(content: GeneratedContent) -> dict[str, object]:
    """Quick pass/fail check used right after generation."""
    issues: list[str] = []

    if content["word_count"] < 800:
        issues.append(f"Content too short: {content['word_count']} words (minimum: 800)")
    if len(content["sections"]) < 4:
        issues.append(f"Too few sections: {len(content['sections'])} (minimum: 4)")

    avg = average_density(content["keyword_density"])
    if avg < 0.01:
        issues.append("Keyword density too low (target: 1-3%)")
    elif avg > 0.05:
        issues.append("Keyword density too high (target: 1-3%)")

    readability = content["readability_score"]
    if readability and readability < 40:
        issues.append(f"Content too difficult to read (score: {readability:.1f})")

    return {"valid": not issues, "issues": issues}
