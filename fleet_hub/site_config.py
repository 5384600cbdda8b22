"""Site-wide settings: identity, navigation, partner sites and organization schema."""

import constants

SITE_CONFIG = {
    "name": "Rental Fleet UAE",
    "domain": "rentalfleetuae.com",
    "url": constants.SITE_URL,
    "description": (
        "Empowering UAE Rental Businesses: Expert insights, fleet management tools, and "
        "comprehensive resources for car rental businesses in the United Arab Emirates"
    ),
    "tagline": "Your Complete Resource for UAE Rental Business Success",
    "primary_keywords": [
        "UAE rental business",
        "fleet management UAE",
        "car rental Dubai",
        "rental business software",
        "UAE car rental tips",
        "fleet optimization UAE",
    ],
    # Partner sites the hub links out to
    "promoted_sites": {
        "autycloud": {
            "url": "https://autycloud.com",
            "name": "AutyCloud",
            "description": "Cloud-based fleet management software for UAE rental businesses",
            "anchor": "fleet management software",
        },
        "adnan_rentals": {
            "url": "https://adnanrentals.com",
            "name": "Adnan Rentals",
            "description": "Premium car rental services across UAE",
            "anchor": "car rental services",
        },
    },
    "contact": {
        "email": "info@rentalfleetuae.com",
        "phone": "+971 XX XXX XXXX",
        "address": "Dubai, United Arab Emirates",
    },
    "social": {
        "twitter": "@rentalfleetuae",
        "linkedin": "company/rental-fleet-uae",
        "facebook": "rentalfleetuae",
        "instagram": "@rentalfleetuae",
    },
    "seo": {
        "default_title": "Rental Fleet UAE - Expert Resources for UAE Rental Businesses",
        "title_template": "%s | Rental Fleet UAE",
        "default_description": (
            "Comprehensive guides, fleet management tools, and industry insights for UAE car rental "
            "businesses. Learn best practices, optimize operations, and grow your rental business."
        ),
        "site_language": "en-US",
        "og_language": "en_US",
        "author": "Rental Fleet UAE Team",
        "og_image": {
            "url": "/og-image.jpg",
            "width": 1200,
            "height": 630,
            "alt": "Rental Fleet UAE - Expert Resources for Rental Businesses",
        },
    },
    "navigation": [
        {"name": "Home", "href": "/"},
        {"name": "About", "href": "/about"},
        {"name": "Resources", "href": "/resources"},
        {"name": "Blog", "href": "/blog"},
        {"name": "Guides", "href": "/guides"},
        {"name": "Tools", "href": "/tools"},
        {"name": "Contact", "href": "/contact"},
    ],
    "footer_links": {
        "resources": {
            "title": "Resources",
            "links": [
                {"name": "Fleet Management Guide", "href": "/resources/fleet-management"},
                {"name": "Rental Business Tips", "href": "/blog"},
                {"name": "Free Tools", "href": "/tools"},
                {"name": "UAE Regulations", "href": "/resources/regulations"},
            ],
        },
        "partners": {
            "title": "Our Partners",
            "links": [
                {"name": "AutyCloud Software", "href": "https://autycloud.com", "external": True},
                {"name": "Adnan Rentals", "href": "https://adnanrentals.com", "external": True},
            ],
        },
        "company": {
            "title": "Company",
            "links": [
                {"name": "About Us", "href": "/about"},
                {"name": "Contact", "href": "/contact"},
                {"name": "Media Kit", "href": "/about#media-kit"},
                {"name": "Collaborate", "href": "/contact#collaborate"},
            ],
        },
        "legal": {
            "title": "Legal",
            "links": [
                {"name": "Privacy Policy", "href": "/privacy"},
                {"name": "Terms of Service", "href": "/terms"},
                {"name": "Cookie Policy", "href": "/cookies"},
            ],
        },
    },
}

BLOG_CATEGORIES = [
    {
        "slug": "fleet-tech",
        "name": "Fleet Technology",
        "description": "Latest technology and software solutions for fleet management",
        "keywords": ["fleet management software", "rental technology", "automation"],
    },
    {
        "slug": "rental-tips",
        "name": "Rental Tips",
        "description": "Best practices and tips for running a successful rental business",
        "keywords": ["rental business tips", "car rental strategies", "business growth"],
    },
    {
        "slug": "uae-business",
        "name": "UAE Business",
        "description": "UAE-specific business insights, regulations, and market trends",
        "keywords": ["UAE business", "Dubai regulations", "rental market UAE"],
    },
    {
        "slug": "customer-experience",
        "name": "Customer Experience",
        "description": "Enhancing customer satisfaction in rental services",
        "keywords": ["customer service", "rental experience", "client satisfaction"],
    },
    {
        "slug": "operations",
        "name": "Operations",
        "description": "Operational efficiency and fleet optimization strategies",
        "keywords": ["fleet optimization", "operational efficiency", "cost reduction"],
    },
]

# Phrases auto-linked to the partner sites in article bodies
LINK_BUILDING_KEYWORDS = {
    "autycloud": [
        "fleet management software",
        "rental management system",
        "cloud-based fleet tracking",
        "inventory management",
        "booking automation",
        "fleet analytics",
        "rental business software",
        "vehicle tracking system",
    ],
    "adnan_rentals": [
        "car rental",
        "vehicle rental",
        "rent a car",
        "luxury car rental",
        "SUV rental",
        "Dubai car rental",
        "UAE vehicle rental",
        "business car rental",
    ],
}

ORGANIZATION_SCHEMA = {
    "@context": "https://schema.org",
    "@type": "Organization",
    "name": SITE_CONFIG["name"],
    "url": SITE_CONFIG["url"],
    "logo": f"{SITE_CONFIG['url']}/logo.png",
    "description": SITE_CONFIG["description"],
    "address": {
        "@type": "PostalAddress",
        "addressCountry": "AE",
        "addressRegion": "Dubai",
    },
    "contactPoint": {
        "@type": "ContactPoint",
        "contactType": "Customer Support",
        "email": SITE_CONFIG["contact"]["email"],
    },
    "sameAs": [
        f"https://twitter.com/{SITE_CONFIG['social']['twitter'].lstrip('@')}",
        f"https://linkedin.com/{SITE_CONFIG['social']['linkedin']}",
        f"https://facebook.com/{SITE_CONFIG['social']['facebook']}",
        f"https://instagram.com/{SITE_CONFIG['social']['instagram'].lstrip('@')}",
    ],
}


def promoted_site(key: str) -> dict[str, str]:
    return SITE_CONFIG["promoted_sites"][key]


def blog_category(slug: str) -> dict[str, object] | None:
    return next((c for c in BLOG_CATEGORIES if c["slug"] == slug), None)
