"""Copy for the editorial pages (about, contact, legal, resources, tools)."""

from typing import TypedDict


class StaticSection(TypedDict, total=False):
    heading: str
    paragraphs: list[str]
    bullets: list[str]


class StaticPage(TypedDict):
    path: str
    title: str
    description: str
    heading: str
    intro: str
    sections: list[StaticSection]


_EXPLORE: StaticSection = {
    "heading": "Explore more",
    "bullets": [
        "Blog: guides and insights for UAE rental businesses",
        "Resources: reports, templates and checklists",
        "Compare: side-by-side comparisons to shortlist faster",
        "Tools: ROI, pricing and planning calculators",
    ],
}

STATIC_PAGES: dict[str, StaticPage] = {
    "about": {
        "path": "/about",
        "title": "About Us",
        "description": "Rental Fleet UAE publishes practical guides, tools and market insight for car rental businesses across the United Arab Emirates.",
        "heading": "About Rental Fleet UAE",
        "intro": "We help UAE rental operators run tighter fleets: fewer disputes, less leakage, faster bookings.",
        "sections": [
            {
                "heading": "What we do",
                "paragraphs": [
                    "Rental Fleet UAE is an independent resource for car rental businesses in Dubai, Abu Dhabi, Sharjah and the Northern Emirates.",
                    "We publish operator-focused guides, comparisons and checklists built around UAE realities: Salik and Darb tolls, traffic fines, deposits, VAT and summer downtime.",
                ],
            },
            {
                "heading": "Media kit",
                "bullets": [
                    "Logo pack: PNG, SVG formats - Light & Dark versions",
                    "Brand guidelines: Colors, typography, usage rules",
                    "2026 UAE Rental Market Report",
                ],
            },
            _EXPLORE,
        ],
    },
    "contact": {
        "path": "/contact",
        "title": "Contact Us",
        "description": "Get in touch with the Rental Fleet UAE team for partnerships, guest posts, media requests or questions about running a rental business in the UAE.",
        "heading": "Contact Rental Fleet UAE",
        "intro": "Questions, partnership ideas or a story from the rental desk? We reply within 24 hours.",
        "sections": [
            {
                "heading": "Reach us",
                "bullets": [
                    "Email: info@rentalfleetuae.com",
                    "Location: Dubai, United Arab Emirates",
                ],
            },
            {
                "heading": "Collaborate",
                "paragraphs": [
                    "We work with fleet operators, software vendors and industry writers on guest posts, data studies and co-authored guides.",
                ],
            },
            _EXPLORE,
        ],
    },
    "privacy": {
        "path": "/privacy",
        "title": "Privacy Policy",
        "description": "How Rental Fleet UAE collects, uses and protects your personal information.",
        "heading": "Privacy Policy",
        "intro": "Last Updated: January 30, 2026",
        "sections": [
            {
                "heading": "1. Introduction",
                "paragraphs": [
                    "This policy explains what information we collect when you use rentalfleetuae.com and how we use it.",
                ],
            },
            {
                "heading": "2. Information We Collect",
                "bullets": [
                    "Name and contact information (email, phone number)",
                    "Company name and fleet size",
                    "IP address and browser type",
                    "Pages visited and time spent on pages",
                    "Cookie data and similar tracking technologies",
                ],
            },
            {
                "heading": "3. How We Use Your Information",
                "bullets": [
                    "Provide, operate, and maintain our website",
                    "Understand and analyze how you use our website",
                    "Communicate with you about updates, newsletters, and promotional materials",
                    "Respond to your inquiries and requests",
                ],
            },
            {
                "heading": "4. Your Rights",
                "bullets": [
                    "The right to access your personal information",
                    "The right to request deletion of your personal information",
                    "The right to withdraw consent at any time",
                ],
            },
        ],
    },
    "terms": {
        "path": "/terms",
        "title": "Terms of Service",
        "description": "The terms and conditions for using the Rental Fleet UAE website and resources.",
        "heading": "Terms of Service",
        "intro": "Last Updated: January 30, 2026",
        "sections": [
            {
                "heading": "1. Agreement to Terms",
                "paragraphs": [
                    "By accessing this website you agree to be bound by these Terms of Service.",
                ],
            },
            {
                "heading": "2. Intellectual Property Rights",
                "paragraphs": [
                    "Content on this website, including text, graphics and tools, is owned by Rental Fleet UAE unless stated otherwise.",
                ],
            },
            {
                "heading": "3. Prohibited Activities",
                "bullets": [
                    "Systematically retrieve data or content from the website to create a collection, database, or directory",
                    "Circumvent, disable, or interfere with security-related features of the website",
                    "Upload or transmit viruses, trojan horses, or other malicious material",
                ],
            },
            {
                "heading": "4. Limitations of Liability",
                "paragraphs": [
                    "Guides and tools are provided for information only and are not legal, tax or financial advice.",
                ],
            },
        ],
    },
    "cookies": {
        "path": "/cookies",
        "title": "Cookie Policy",
        "description": "Which cookies Rental Fleet UAE uses and how to control them.",
        "heading": "Cookie Policy",
        "intro": "Last Updated: January 30, 2026",
        "sections": [
            {
                "heading": "Cookies we use",
                "bullets": [
                    "Essential cookies: Required for the website to function properly",
                    "Analytics cookies: Help us understand how visitors interact with our website",
                ],
            },
            {
                "heading": "Managing cookies",
                "paragraphs": [
                    "You can block or delete cookies in your browser settings. Some features may stop working without them.",
                ],
            },
            _EXPLORE,
        ],
    },
    "resources": {
        "path": "/resources",
        "title": "Free Resources for UAE Rental Businesses",
        "description": "Reports, templates and checklists for car rental operators in the UAE: fleet management, regulations and market data.",
        "heading": "Resources",
        "intro": "Templates and reports to speed up ops.",
        "sections": [
            {
                "heading": "Guides",
                "bullets": [
                    "Fleet Management Guide: reservations, maintenance, utilization and reporting",
                    "UAE Regulations: licensing, tolls & fines (all Emirates), insurance and VAT",
                ],
            },
            {
                "heading": "Downloads",
                "bullets": [
                    "2026 UAE Rental Market Report",
                    "Vehicle handover checklist",
                    "Damage dispute evidence template",
                ],
            },
            _EXPLORE,
        ],
    },
    "fleet-management": {
        "path": "/resources/fleet-management",
        "title": "Fleet Management Guide for UAE Rental Operators",
        "description": "A practical fleet management guide for UAE car rental businesses: reservations, availability, maintenance, utilization and reporting.",
        "heading": "Fleet Management Guide",
        "intro": "The workflows that keep a UAE rental fleet profitable.",
        "sections": [
            {
                "heading": "Core workflows",
                "bullets": [
                    "Reservations & availability",
                    "Deposits, damages and claims evidence",
                    "Tolls and traffic fines",
                    "Preventive maintenance and downtime",
                    "Utilization and revenue reporting",
                ],
            },
            {
                "heading": "Where to start",
                "paragraphs": [
                    "Fix the workflows that leak money first: deposits, fines and overbooking. Dashboards come later.",
                ],
            },
        ],
    },
    "regulations": {
        "path": "/resources/regulations",
        "title": "UAE Car Rental Regulations Guide",
        "description": "What UAE car rental businesses need to know about licensing, tolls, traffic fines, insurance and VAT.",
        "heading": "UAE Regulations for Rental Businesses",
        "intro": "A plain-language overview. Always confirm details with the relevant authority.",
        "sections": [
            {
                "heading": "Key areas",
                "bullets": [
                    "Trade licensing and RTA requirements",
                    "Tolls & fines (all Emirates)",
                    "Insurance requirements",
                    "VAT invoicing and records",
                ],
            },
        ],
    },
    "tools": {
        "path": "/tools",
        "title": "Free Tools for Rental Businesses",
        "description": "Free calculators and planners for UAE car rental businesses: ROI, pricing and fleet utilization.",
        "heading": "Tools",
        "intro": "Calculators and planners for rental operators.",
        "sections": [
            {
                "heading": "Calculators",
                "bullets": [
                    "Fleet ROI calculator: Projected Revenue Increase",
                    "Daily rate planner",
                    "Utilization tracker",
                ],
            },
            _EXPLORE,
        ],
    },
}


def get_static_page(key: str) -> StaticPage:
    page = STATIC_PAGES.get(key)
    if page is None:
        raise ValueError(f"Page not found: {key}")
    return page
