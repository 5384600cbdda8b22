"""
Keyword landing pages built from ``DATA_DIR/seo/keywords.json``.

Each keyword becomes one long-form guide: a category is picked from the
keyword text, and the title, description, intro and FAQ ordering are chosen
from fixed variants by a hash of the keyword so pages stay stable across
deploys while not all reading the same.
"""

import json
import logging
from functools import lru_cache
from typing import Literal, NotRequired, TypedDict

import constants
from fleet_hub.seo_utils import generate_slug
from fleet_hub.site_config import promoted_site
from fleet_hub.utils import hash_string, iso_timestamp, pick, title_case

logger = logging.getLogger(__name__)

KEYWORDS_FILE = "seo/keywords.json"


class KeywordFAQ(TypedDict):
    question: str
    answer: str


class TocEntry(TypedDict):
    id: str
    label: str


class KeywordSection(TypedDict):
    """``type`` is text (paragraphs), bullets (bullets) or table (columns + rows)."""

    id: str
    heading: str
    type: Literal["text", "bullets", "table"]
    paragraphs: NotRequired[list[str]]
    intro: NotRequired[str]
    bullets: NotRequired[list[str]]
    columns: NotRequired[list[str]]
    rows: NotRequired[list[dict[str, str]]]
    outro: NotRequired[str]


class KeywordLandingPage(TypedDict):
    keyword: str
    slug: str
    category: str
    title: str
    description: str
    h1: str
    updated_at_iso: str
    toc: list[TocEntry]
    sections: list[KeywordSection]
    faqs: list[KeywordFAQ]


UAE_OPERATOR_ASIDES = [
    "I’ve seen this exact mistake kill cash flow for a Bur Dubai operator…",
    "One client in Al Quoz switched their setup and never looked back.",
    "Real talk: spreadsheets + WhatsApp bookings work… right until they don’t.",
    "If you’re juggling Salik, fines, and deposits manually, you’re basically paying a ‘stress tax’ in hours.",
    "Summer heat + downtime + manual reminders? Brutal combo.",
]

# First matching rule wins
_CATEGORY_RULES: list[tuple[tuple[str, ...], str]] = [
    (("how to choose",), "how-to"),
    (("features list",), "features"),
    (("comparison", "reviews"), "comparison"),
    (("best",), "best"),
    (("crm",), "crm"),
    (("booking", "reservation"), "booking"),
    (("payment", "invoicing"), "payments"),
    (("gps", "tracking", "real-time fleet"), "tracking"),
    (("automation", "digital transformation"), "automation"),
    (("analytics", "optimization"), "analytics"),
    (("maintenance",), "maintenance"),
    (("multi-location",), "multi-location"),
    (("contactless", "check-in"), "contactless"),
    (("ai",), "ai"),
    (("ev", "electric vehicle"), "ev"),
    (("car sharing",), "car-sharing"),
    (("blockchain",), "blockchain"),
]


def classify_keyword(keyword: str) -> str:
    k = keyword.lower()
    for needles, category in _CATEGORY_RULES:
        if any(n in k for n in needles):
            return category
    return "general"


def build_title(keyword: str, seed: int) -> str:
    year = constants.KEYWORD_PAGE_YEAR
    base = title_case(keyword)
    variants = [
        f"{base} (UAE) — What Actually Works in Dubai & Abu Dhabi",
        f"{base} — UAE Operator Guide for {year}",
        f"{base} — Shortlist, Checklist & UAE Must‑Haves",
    ]
    title = pick(variants, seed)
    return f"{base} (UAE) — {year} Guide" if len(title) > 70 else title


def build_description(keyword: str, seed: int) -> str:
    k = keyword.lower()
    city = "Dubai" if "dubai" in k else "Abu Dhabi" if "abu dhabi" in k else "UAE"
    variants = [
        f"Looking for {keyword} in {city}? Here’s a practical 2026 checklist: Salik/fines handling, Arabic/English, deposits, payments, GPS, maintenance, and what to demo before you commit.",
        f"{keyword} isn’t just “features” in the UAE — it’s compliance, speed, and cash flow. Use this guide to compare options, avoid common traps, and shortlist tools that fit your fleet.",
        f"A UAE-first breakdown of {keyword}: must-have modules, red flags, pricing reality, and a simple demo scorecard you can use this week.",
    ]
    return pick(variants, seed)


def build_intro(keyword: str, seed: int) -> list[str]:
    asides = [pick(UAE_OPERATOR_ASIDES, seed, 0), pick(UAE_OPERATOR_ASIDES, seed, 2)][: 1 + seed % 2]
    return [
        f"If you’re searching for **{keyword}** in 2026, you’re probably feeling the same UAE pain I hear every week: bookings coming from everywhere, deposits and damages getting messy, and Salik/fines turning into a surprise “second invoice”.",
        f"Look, the “best” tool here isn’t the one with the longest feature list — it’s the one that keeps your ops tight when it’s 45°C, your fleet’s rotating fast, and a customer is arguing a scratch at handover. {' '.join(asides)}",
        "Below is a practical landing page (not brochure fluff): what to prioritize in the UAE, what to ignore, and how to test a few systems quickly without burning weeks.",
    ]


def build_uae_must_have_table(keyword: str) -> KeywordSection:
    req, why, demo = "UAE requirement", "Why it matters", "What to look for in a demo"
    return KeywordSection(
        id="uae-must-haves",
        heading="Must‑Have UAE Features (Non‑Negotiable in 2026)",
        type="table",
        intro="If your software can’t handle these cleanly, you’ll feel it in cash flow, customer disputes, and staff time.",
        columns=[req, why, demo],
        rows=[
            {
                req: "Toll + fines workflow (Salik / Darb + traffic fines)",
                why: "Stops leakage and awkward after-the-fact chasing",
                demo: "Auto-import or clean CSV workflow + customer chargeback handling",
            },
            {
                req: "Deposits + damage capture",
                why: "Reduces disputes and chargeback risk",
                demo: "Photo/video check-in/out, time-stamps, signatures, damage map",
            },
            {
                req: "Arabic/English (at least admin + contracts)",
                why: "Staff speed + customer trust",
                demo: "UI language toggle + bilingual docs/templates",
            },
            {
                req: "VAT-ready invoicing + audit trail",
                why: "Cleaner accounting and fewer “where did this charge come from?” moments",
                demo: "Invoice numbering, VAT fields, exports, role permissions",
            },
            {
                req: "Fleet availability + overbooking protection",
                why: "Prevents double-bookings during peak",
                demo: "Calendar views, vehicle status, buffer rules, holds",
            },
            {
                req: "Maintenance + downtime tracking",
                why: "Summer breakdowns and missed servicing kill margins",
                demo: "Alerts, odometer tracking, workshop jobs, downtime reasons",
            },
        ],
        outro=f"Even if you’re evaluating {keyword}, these “boring” workflows are the difference between a tool that feels nice… and a tool that actually runs your fleet.",
    )


CATEGORY_ANGLES: dict[str, KeywordSection] = {
    "best": {
        "id": "best-fit",
        "heading": "What “Best” Means (Small Fleet vs 100+ Cars vs Luxury)",
        "type": "bullets",
        "intro": "The UAE “best” depends on fleet size, customer type, and how much chaos you can tolerate.",
        "bullets": [
            "**10–50 cars (independents)**: fast setup, mobile check-in/out, deposits, simple payments, clear reporting.",
            "**50–200 cars**: role permissions, multi-location, maintenance + downtime, stronger audit trails, integrations.",
            "**Luxury / performance fleets**: damage capture + evidence, deposit discipline, VIP workflows, stricter contracts.",
            "**EV-heavy fleets**: charging logs, range planning, downtime reasons, driver education content baked in.",
        ],
        "outro": "If a vendor can’t clearly say which bracket they’re best for, that’s usually your answer.",
    },
    "comparison": {
        "id": "comparison-angle",
        "heading": "How to Compare Tools Without Getting Tricked by Demos",
        "type": "bullets",
        "intro": "Demos are designed to impress. Your job is to break the product (politely).",
        "bullets": [
            "Ask them to run your exact workflow: deposit → check-out → fine → invoice → refund.",
            "Check how cancellations/refunds are logged (audit trail matters).",
            "Look for role permissions (front desk vs ops vs finance).",
            "Ask about data export and offboarding (yes, from day one).",
            "Test mobile experience — UAE ops happen on phones, not desktops.",
        ],
    },
    "crm": {
        "id": "crm-angle",
        "heading": "CRM for Rentals (It’s Not a “Nice-to-Have” Anymore)",
        "type": "text",
        "paragraphs": [
            "Most UAE operators lose repeat business because follow-ups are messy: WhatsApp threads, random notes, and staff turnover.",
            "A proper rental CRM means: lead capture, quote history, repeat-customer pricing, blacklists, and clean communication logs.",
            "If your CRM and booking system are separate, make sure they sync perfectly — otherwise you’ll duplicate work and miss follow-ups.",
        ],
    },
    "booking": {
        "id": "booking-angle",
        "heading": "Booking Systems in Dubai (What Matters in Real Life)",
        "type": "bullets",
        "intro": "Dubai demand swings hard. Your booking system must protect availability and margins.",
        "bullets": [
            "Availability buffers (cleaning, delivery time, late returns).",
            "Online payments + deposit capture that finance can reconcile.",
            "Instant quote rules (seasonality, weekends, events).",
            "Multi-channel bookings (website + walk-ins + WhatsApp leads).",
        ],
    },
    "payments": {
        "id": "payments-angle",
        "heading": "Payments & Invoicing (The Part That Saves You or Sinks You)",
        "type": "bullets",
        "intro": "If money tracking is fuzzy, everything else becomes an argument.",
        "bullets": [
            "Online payment links + clear receipts (customers screenshot everything).",
            "Deposit holds vs charges (don’t mix them up).",
            "VAT-friendly invoicing + exports for your accountant.",
            "Refund workflows that are tracked (who approved, when, why).",
        ],
    },
    "tracking": {
        "id": "tracking-angle",
        "heading": "Fleet Tracking & GPS (Use It for Ops, Not Micromanaging)",
        "type": "bullets",
        "intro": "Tracking pays for itself when you use it for the right problems.",
        "bullets": [
            "Theft recovery and geofencing (especially for high-risk segments).",
            "Delivery/pickup efficiency (dispatching and ETAs).",
            "Odometer automation for maintenance schedules.",
            "Dispute resolution (“where was the car?”) with time-stamped logs.",
        ],
    },
    "automation": {
        "id": "automation-angle",
        "heading": "Automation That Actually Helps (Not Automation Theatre)",
        "type": "bullets",
        "intro": "Automate the repetitive stuff first — that’s where the margin is hiding.",
        "bullets": [
            "Auto reminders (documents, payments, returns).",
            "Status workflows (available → reserved → on rent → cleaning → maintenance).",
            "Auto invoicing after return + add-ons (Salik, fines, fuel policy).",
            "Daily ops reports sent to WhatsApp/email for the team lead.",
        ],
    },
    "analytics": {
        "id": "analytics-angle",
        "heading": "Analytics & Optimization (The KPIs That Move UAE Margins)",
        "type": "bullets",
        "intro": "You don’t need 100 charts. You need 8 numbers you trust.",
        "bullets": [
            "Utilization by vehicle class (and by day of week).",
            "Revenue per available car day (RACD) + downtime cost.",
            "Damage rate and average damage recovery time.",
            "Late return frequency + who/why.",
            "Channel profitability (website vs brokers vs walk-ins).",
        ],
    },
    "maintenance": {
        "id": "maintenance-angle",
        "heading": "Preventive Maintenance (Where UAE Heat Punishes Lazy Systems)",
        "type": "text",
        "paragraphs": [
            "In the UAE, maintenance isn’t “admin”. It’s uptime, and uptime is profit.",
            "The best maintenance module ties service intervals to real odometer readings, tracks downtime reasons, and makes workshop handoffs obvious.",
            "If you can’t see downtime cost per vehicle, you’ll keep the wrong cars too long.",
        ],
    },
    "multi-location": {
        "id": "multi-location-angle",
        "heading": "Multi‑Location Ops (Dubai + Abu Dhabi + Sharjah Without the Mess)",
        "type": "bullets",
        "intro": "Once you run more than one branch, weak software turns into internal arguments.",
        "bullets": [
            "Branch-level inventory + transfers (with approvals).",
            "Role permissions per location.",
            "Location-based pricing rules and delivery zones.",
            "Centralized finance reporting (one truth).",
        ],
    },
    "contactless": {
        "id": "contactless-angle",
        "heading": "Contactless Check‑In/Out (The UAE Standard Now)",
        "type": "bullets",
        "intro": "Contactless isn’t about being fancy — it’s about speed and fewer disputes.",
        "bullets": [
            "ID/license upload + verification workflow.",
            "Digital signatures + time-stamped handover checklist.",
            "Damage photos/videos captured in the same flow.",
            "Payment links + deposit capture before delivery.",
        ],
    },
    "ai": {
        "id": "ai-angle",
        "heading": "AI in Car Rental Software (Useful, But Don’t Get Played)",
        "type": "bullets",
        "intro": "AI is great when it’s measurable. Ignore buzzwords.",
        "bullets": [
            "Dynamic pricing suggestions based on utilization and seasonality.",
            "Fraud/risk flags (repeat offenders, document mismatches).",
            "Maintenance anomaly detection from usage patterns.",
            "Automated reporting summaries for ops leads.",
        ],
        "outro": "If a vendor can’t show you a before/after KPI in a pilot, treat “AI” as marketing.",
    },
    "ev": {
        "id": "ev-angle",
        "heading": "EV Fleet Management in the UAE (What Software Must Track)",
        "type": "bullets",
        "intro": "EVs can be profitable — but only if your ops and software are disciplined.",
        "bullets": [
            "Charging schedule + charger locations per branch.",
            "Range planning notes for customers (reduces angry calls).",
            "Battery health / usage logs (even basic tracking helps resale value).",
            "Downtime reasons (charging vs maintenance vs accident).",
        ],
    },
    "car-sharing": {
        "id": "car-sharing-angle",
        "heading": "Car Sharing Management (More Automation, Less Tolerance for Errors)",
        "type": "bullets",
        "intro": "Car sharing is rentals on hard mode: higher volume, smaller mistakes become bigger losses.",
        "bullets": [
            "Instant identity verification + strict access rules.",
            "Automated unlock/lock workflows (if you integrate hardware).",
            "Real-time availability + location accuracy.",
            "Automated cleaning/turnaround scheduling.",
        ],
    },
    "blockchain": {
        "id": "blockchain-angle",
        "heading": "Blockchain Rental Agreements (Interesting… but Be Practical)",
        "type": "text",
        "paragraphs": [
            "Blockchain contracts sound cool, but most UAE rental businesses don’t need it yet.",
            "If you’re exploring this, focus on the real value: tamper-proof agreement history and dispute evidence — not tokens.",
            "In 2026, your bigger wins are still: deposits, damage capture, fines, and faster booking/payment flows.",
        ],
    },
    "how-to": {
        "id": "how-to-angle",
        "heading": "How to Choose (A Simple Scorecard You Can Use Today)",
        "type": "bullets",
        "intro": "Print this, score each demo 1–5, and don’t let anyone distract you.",
        "bullets": [
            "Does it reduce disputes (damage/deposit evidence)?",
            "Does it reduce leakage (fines/tolls/add-ons + invoicing)?",
            "Does staff adopt it fast (mobile-first, simple flows)?",
            "Does it scale (roles, multi-location, exports)?",
            "Is pricing transparent (or full of surprise add-ons)?",
        ],
    },
    "features": {
        "id": "features-angle",
        "heading": "Feature List (UAE-Friendly Checklist)",
        "type": "bullets",
        "intro": "Here’s the feature list I’d actually use to evaluate rental software in the Emirates.",
        "bullets": [
            "Bookings + availability + buffers",
            "Deposits, damages, claims evidence",
            "Fines/tolls workflows (Salik/Darb)",
            "Online payments + invoicing + VAT fields",
            "GPS/telematics (optional but useful at scale)",
            "Maintenance scheduling + downtime reporting",
            "Multi-location transfers + permissions",
            "Exports + audit trail",
        ],
    },
    "general": {
        "id": "general-angle",
        "heading": "What to Focus on First (If You’re Overwhelmed)",
        "type": "bullets",
        "intro": "Start with the modules that stop leakage and reduce disputes.",
        "bullets": [
            "Deposits + damage capture",
            "Availability + overbooking protection",
            "Payments + invoicing + VAT fields",
            "Maintenance + downtime tracking",
        ],
    },
}

_REALITY_CHECK = KeywordSection(
    id="reality-check",
    heading="2026 UAE Rental Reality Check (Before You Buy Anything)",
    type="bullets",
    intro="The market’s not slowing down — but the operational chaos gets more expensive every year.",
    bullets=[
        "Tourism demand keeps spikes unpredictable (weekends/events/seasonality).",
        "Customers expect contactless flows, instant quotes, and online payments.",
        "EV adoption is real, but it adds charging + range + downtime planning.",
        "Compliance pressure is higher (fines, documentation, audit trails).",
        "Big chains and app-based platforms push margins tighter for independents.",
    ],
    outro="So when you pick software, prioritize fewer manual touchpoints and fewer disputes — not fancy dashboards nobody checks.",
)

SOURCES_SECTION = KeywordSection(
    id="sources",
    heading="Sources & Further Reading (UAE + Software Directories)",
    type="bullets",
    intro="Use these to sanity-check claims and see broader vendor lists.",
    bullets=[
        "RTA Dubai (rules and updates): https://www.rta.ae",
        "GetApp UAE car rental software listings: https://www.getapp.ae/directory/309/car-rental/software",
        "Capterra car rental software: https://www.capterra.com/car-rental-software/",
        "SoftwareSuggest UAE car rental software: https://www.softwaresuggest.com/car-rental-software/uae",
    ],
)


def _shortlist_section() -> KeywordSection:
    autycloud = promoted_site("autycloud")
    return KeywordSection(
        id="shortlist",
        heading="A Fast Shortlist Method (The “2‑Week Demo Rule”)",
        type="bullets",
        intro="If you can’t validate a system in 10–14 days, you’ll end up stuck in a long implementation with low adoption.",
        bullets=[
            "Run a live pilot with 10–20 vehicles, not the whole fleet.",
            "Test deposit capture + damage evidence end-to-end (photos, signatures, chargebacks).",
            "Import 50 real bookings and verify availability rules don’t create overbooking.",
            "Simulate fines/toll charges and see how billing looks on an invoice.",
            "Make your front desk team try it on mobile — if they hate it, it won’t stick.",
        ],
        outro=(
            f"Among the cloud-first options, it’s worth comparing a mobile-first system like {autycloud['name']} "
            f"(see {autycloud['url']}/features) alongside any local tools you’re considering — not because it’s "
            "“best for everyone”, but because the UX + real-time ops are usually where spreadsheets finally break."
        ),
    )


def _pricing_section() -> KeywordSection:
    autycloud_url = promoted_site("autycloud")["url"]
    return KeywordSection(
        id="pricing",
        heading="Pricing Reality (What You Actually Pay in the UAE)",
        type="text",
        paragraphs=[
            "Most vendors will quote “per vehicle per month” and then quietly charge extra for add-ons: tracking, payments, SMS/WhatsApp, extra users, extra locations, and integrations.",
            "My rule: don’t compare by the base subscription. Compare by **your real workflow**: bookings + payments + deposits + fines + maintenance + reporting. That’s the bill that matters.",
            f"If you want a quick sanity check on transparent plans, skim {autycloud_url}/pricing before you negotiate with anyone — even if you don’t pick it, it helps you anchor what “fair pricing” looks like.",
        ],
    )


def build_category_sections(keyword: str, category: str) -> list[KeywordSection]:
    return [
        _REALITY_CHECK,
        build_uae_must_have_table(keyword),
        CATEGORY_ANGLES.get(category, CATEGORY_ANGLES["general"]),
        _pricing_section(),
        _shortlist_section(),
    ]


def build_faqs(keyword: str, seed: int) -> list[KeywordFAQ]:
    demo_url = f"{promoted_site('autycloud')['url']}/demo"
    base = [
        KeywordFAQ(
            question=f"Does {keyword} handle Salik / Darb and traffic fines automatically?",
            answer="Some tools do, many don’t. In your demo, ask for the exact workflow: import fines/tolls → attribute to booking → invoice add-on → payment/refund handling. If they can’t show it, assume it’s manual.",
        ),
        KeywordFAQ(
            question="Do I need Arabic support for UAE rental operations?",
            answer="Not always for customers, but it helps for staff and documentation. At minimum, check bilingual templates, clear contracts, and easy-to-understand receipts/invoices.",
        ),
        KeywordFAQ(
            question="What’s the biggest mistake operators make when buying rental software?",
            answer="Buying based on price or “AI” claims instead of workflows. If deposits, damage capture, fines/tolls, and invoicing aren’t solid, you’ll pay for it every day.",
        ),
        KeywordFAQ(
            question="How long should implementation take for a small UAE fleet?",
            answer="If it’s cloud-based and the vendor is organized, you can pilot in 10–14 days. Full rollout depends on training, data cleanup, and integrations, but you should see value in the first month.",
        ),
        KeywordFAQ(
            question="Should I choose an all-in-one platform or separate tools?",
            answer="All-in-one is usually easier for small teams. Separate tools can work if integrations are strong and your team can manage them. The key is avoiding duplicate data entry.",
        ),
        KeywordFAQ(
            question="What should I test in a demo before paying anything?",
            answer="Run deposit + check-in/out + damage evidence, then simulate a fine/toll add-on, then invoice/export to accounting. Also test the mobile flow with your front desk staff.",
        ),
        KeywordFAQ(
            question="Is GPS tracking worth it for rentals?",
            answer="For many fleets, yes — when used for recovery, dispatch, and dispute resolution. It’s less about spying and more about operational control and protecting assets.",
        ),
        KeywordFAQ(
            question="Where can I see a modern rental/fleet software demo?",
            answer=f"If you’re comparing cloud-first tools, you can book a quick product walkthrough at {demo_url} and use the scorecard on this page to judge it fairly.",
        ),
    ]
    rotation = seed % 3
    return base[rotation:] + base[:rotation]


def build_keyword_page(keyword: str, updated_at_iso: str) -> KeywordLandingPage:
    seed = hash_string(keyword)
    category = classify_keyword(keyword)
    sections: list[KeywordSection] = [
        KeywordSection(
            id="intro",
            heading=f"{title_case(keyword)} — UAE Quick Take",
            type="text",
            paragraphs=build_intro(keyword, seed),
        ),
        *build_category_sections(keyword, category),
        SOURCES_SECTION,
    ]
    return KeywordLandingPage(
        keyword=keyword,
        slug=generate_slug(keyword),
        category=category,
        title=build_title(keyword, seed),
        description=build_description(keyword, seed),
        h1=f"{title_case(keyword)} (UAE)",
        updated_at_iso=updated_at_iso,
        toc=[TocEntry(id=s["id"], label=s["heading"]) for s in sections],
        sections=sections,
        faqs=build_faqs(keyword, seed),
    )


def load_keywords() -> list[str]:
    path = constants.DATA_DIR / KEYWORDS_FILE
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        logger.warning("Keyword file not found: %s", path)
        return []
    except json.JSONDecodeError:
        logger.exception("Failed to parse keyword file: %s", path)
        return []
    raw = data.get("keywords") if isinstance(data, dict) else None
    if not isinstance(raw, list):
        return []
    return [str(k).strip() for k in raw if str(k).strip()]


def build_keyword_landing_pages(keywords: list[str] | None = None) -> list[KeywordLandingPage]:
    """One page per keyword; later keywords whose slug collides are dropped."""
    updated_at_iso = iso_timestamp()
    seen: set[str] = set()
    pages: list[KeywordLandingPage] = []
    for keyword in load_keywords() if keywords is None else keywords:
        page = build_keyword_page(keyword, updated_at_iso)
        if not page["slug"] or page["slug"] in seen:
            continue
        seen.add(page["slug"])
        pages.append(page)
    return pages


@lru_cache(maxsize=1)
def keyword_landing_pages() -> tuple[KeywordLandingPage, ...]:
    return tuple(build_keyword_landing_pages())


def get_keyword_landing_page_by_slug(slug: str) -> KeywordLandingPage | None:
    normalized = slug.strip().lower()
    return next((p for p in keyword_landing_pages() if p["slug"] == normalized), None)


def get_related_keyword_landing_pages(slug: str, limit: int = 8) -> list[KeywordLandingPage]:
    """Same-category pages first, then others, up to ``limit``."""
    current = get_keyword_landing_page_by_slug(slug)
    if current is None:
        return []
    pages = keyword_landing_pages()
    same = [p for p in pages if p["slug"] != current["slug"] and p["category"] == current["category"]]
    same = same[: max(3, limit // 2)]
    rest = [p for p in pages if p["slug"] != current["slug"] and p["category"] != current["category"]]
    rest = rest[: max(0, limit - len(same))]
    return (same + rest)[:limit]
