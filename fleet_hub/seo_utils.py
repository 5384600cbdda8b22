"""SEO helpers for the editorial pages: metadata, schema, slugs and partner links."""

import re
from datetime import datetime
from typing import Any
from urllib.parse import quote

from bs4 import BeautifulSoup, Comment, Doctype, NavigableString, Tag
from markupsafe import escape

from fleet_hub.programmatic.schema_builder import breadcrumb_list_schema, faq_page_schema
from fleet_hub.site_config import LINK_BUILDING_KEYWORDS, SITE_CONFIG
from fleet_hub.utils import iso_timestamp

WORDS_PER_MINUTE = 200

_UNLINKED_PARENTS = ["a", "script", "style"]
_SLUG_STRIP_RE = re.compile(r"[^\w\s-]", re.ASCII)
_WHITESPACE_RE = re.compile(r"\s+")
_DASHES_RE = re.compile(r"--+")


def generate_page_metadata(
    *,
    title: str,
    description: str,
    keywords: list[str] | None = None,
    canonical: str | None = None,
    og_image: str | None = None,
    article: bool = False,
    published_time: str | None = None,
    modified_time: str | None = None,
    authors: list[str] | None = None,
) -> dict[str, Any]:
    """Metadata for a non-programmatic page; the title gets the site name appended."""
    keywords = keywords or []
    authors = authors or [SITE_CONFIG["seo"]["author"]]
    full_title = f"{title} | {SITE_CONFIG['name']}"
    canonical_url = canonical or SITE_CONFIG["url"]
    og = SITE_CONFIG["seo"]["og_image"]
    og_image_url = og_image or f"{SITE_CONFIG['url']}{og['url']}"

    open_graph: dict[str, Any] = {
        "title": full_title,
        "description": description,
        "url": canonical_url,
        "site_name": SITE_CONFIG["name"],
        "images": [{"url": og_image_url, "width": og["width"], "height": og["height"], "alt": og["alt"]}],
        "locale": "en_AE",
        "type": "article" if article else "website",
    }
    if article and published_time:
        open_graph.update(
            published_time=published_time,
            modified_time=modified_time or published_time,
            authors=authors,
            tags=keywords,
        )

    return {
        "title": full_title,
        "description": description,
        "keywords": ", ".join([*SITE_CONFIG["primary_keywords"], *keywords]),
        "authors": authors,
        "canonical": canonical_url,
        "robots": {
            "index": True,
            "follow": True,
            "google_bot": {
                "index": True,
                "follow": True,
                "max-video-preview": -1,
                "max-image-preview": "large",
                "max-snippet": -1,
            },
        },
        "alternates": {"canonical": canonical_url},
        "open_graph": open_graph,
        "twitter": {
            "card": "summary_large_image",
            "title": full_title,
            "description": description,
            "images": [og_image_url],
            "creator": SITE_CONFIG["social"]["twitter"],
        },
    }


def generate_article_schema(
    *,
    title: str,
    description: str,
    url: str,
    image_url: str,
    published_time: str,
    modified_time: str | None = None,
    author: str = "Rental Fleet UAE Team",
    keywords: list[str] | None = None,
) -> dict[str, Any]:
    return {
        "@context": "https://schema.org",
        "@type": "Article",
        "headline": title,
        "description": description,
        "image": image_url,
        "datePublished": published_time,
        "dateModified": modified_time or published_time,
        "author": {"@type": "Person", "name": author},
        "publisher": {
            "@type": "Organization",
            "name": SITE_CONFIG["name"],
            "logo": {"@type": "ImageObject", "url": f"{SITE_CONFIG['url']}/logo.png"},
        },
        "keywords": ", ".join(keywords or []),
        "mainEntityOfPage": {"@type": "WebPage", "@id": url},
    }


def generate_breadcrumb_schema(items: list[dict[str, str]]) -> dict[str, Any]:
    return breadcrumb_list_schema([(item["name"], item["url"]) for item in items])


def generate_faq_schema(faqs: list[dict[str, str]]) -> dict[str, Any]:
    return faq_page_schema(faqs)


def _partner_keywords() -> dict[str, str]:
    """Lowercased phrase to partner URL; the first site listing a phrase wins."""
    targets: dict[str, str] = {}
    for site_key in ("autycloud", "adnan_rentals"):
        url = SITE_CONFIG["promoted_sites"][site_key]["url"]
        for keyword in LINK_BUILDING_KEYWORDS[site_key]:
            targets.setdefault(keyword.lower(), url)
    return targets


def _partner_pattern(keywords: list[str]) -> re.Pattern[str]:
    # Longer phrases first so "luxury car rental" beats "car rental"
    alternatives = "|".join(re.escape(k) for k in sorted(keywords, key=len, reverse=True))
    return re.compile(rf"\b(?:{alternatives})\b", re.IGNORECASE)


def _link_text_node(soup: BeautifulSoup, node: NavigableString, pattern: re.Pattern[str], targets: dict[str, str]) -> None:
    text = str(node)
    pieces: list[str | Tag] = []
    last = 0
    for match in pattern.finditer(text):
        pieces.append(text[last:match.start()])
        link = soup.new_tag(
            "a",
            attrs={
                "href": targets[match.group(0).lower()],
                "target": "_blank",
                "rel": "noopener noreferrer",
                "class": "partner-link",
            },
        )
        link.string = match.group(0)
        pieces.append(link)
        last = match.end()
    if not pieces:
        return
    pieces.append(text[last:])
    node.replace_with(*[p for p in pieces if not isinstance(p, str) or p])


def add_internal_links(content: str) -> str:
    """Link partner-site phrases in HTML text to the partner sites.

    Only text nodes are touched; text already inside a link, script or style
    element is left alone.
    """
    targets = _partner_keywords()
    pattern = _partner_pattern(list(targets))
    soup = BeautifulSoup(content, "html.parser")
    for node in soup.find_all(string=True):
        if isinstance(node, (Comment, Doctype)) or node.find_parent(_UNLINKED_PARENTS) is not None:
            continue
        _link_text_node(soup, node, pattern, targets)
    return str(soup)


def generate_slug(text: str) -> str:
    slug = _SLUG_STRIP_RE.sub("", text.lower())
    slug = _WHITESPACE_RE.sub("-", slug)
    return _DASHES_RE.sub("-", slug).strip()


def calculate_reading_time(content: str) -> int:
    """Minutes at 200 words per minute, rounded up."""
    words = len(_WHITESPACE_RE.split(content))
    return -(-words // WORDS_PER_MINUTE)


def generate_excerpt(content: str, length: int = 160) -> str:
    plain = BeautifulSoup(content, "html.parser").get_text()
    if len(plain) <= length:
        return plain
    return plain[:length].strip() + "..."


def format_seo_date(value: datetime | str) -> str:
    """ISO 8601 in UTC with millisecond precision and a ``Z`` suffix."""
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    return iso_timestamp(value)


def generate_canonical_url(path: str) -> str:
    return f"{SITE_CONFIG['url']}{path}"


def get_social_share_urls(url: str, title: str) -> dict[str, str]:
    encoded_url = quote(url, safe="")
    encoded_title = quote(title, safe="")
    return {
        "twitter": f"https://twitter.com/intent/tweet?url={encoded_url}&text={encoded_title}",
        "facebook": f"https://www.facebook.com/sharer/sharer.php?u={encoded_url}",
        "linkedin": f"https://www.linkedin.com/sharing/share-offsite/?url={encoded_url}",
        "whatsapp": f"https://wa.me/?text={encoded_title}%20{encoded_url}",
        "email": f"mailto:?subject={encoded_title}&body=Check%20this%20out:%20{encoded_url}",
    }


def generate_embed_code(asset_url: str, title: str) -> str:
    return (
        "<!-- Embed from Rental Fleet UAE -->\n"
        '<div class="rentalfleetuae-embed">\n'
        f'  <iframe src="{escape(asset_url)}" title="{escape(title)}" width="100%" height="600" frameborder="0"></iframe>\n'
        '  <p style="font-size:12px;margin-top:8px;">\n'
        f'    Source: <a href="{SITE_CONFIG["url"]}" target="_blank" rel="noopener">Rental Fleet UAE</a>\n'
        "  </p>\n"
        "</div>"
    )


def generate_attribution_badge() -> str:
    return (
        f'<a href="{SITE_CONFIG["url"]}" target="_blank" rel="noopener" '
        'style="display:inline-flex;align-items:center;padding:8px 12px;background:#f3f4f6;'
        'border-radius:6px;text-decoration:none;color:#374151;font-size:14px;">\n'
        '    <span style="margin-right:8px;">Powered by</span>\n'
        f"    <strong>{SITE_CONFIG['name']}</strong>\n"
        "  </a>"
    )


def generate_outreach_email(
    *,
    recipient_name: str,
    recipient_site: str,
    article_url: str,
    article_title: str,
    relevant_content: str,
) -> str:
    return f"""Subject: Resource for {recipient_site}: {article_title}

Hi {recipient_name},

I came across your article on "{relevant_content}" at {recipient_site} and found it incredibly valuable for UAE rental business professionals.

I recently published a comprehensive guide that might complement your content perfectly: "{article_title}" ({article_url})

This resource includes:
- Original research and data specific to the UAE rental market
- Actionable insights from industry experts
- Free downloadable tools and templates

If you find it valuable, I'd be honored if you'd consider referencing it in your article or sharing it with your audience. I'm also happy to contribute a guest post to {recipient_site} on topics relevant to your readers.

Looking forward to connecting!

Best regards,
{SITE_CONFIG['name']} Team
{SITE_CONFIG['contact']['email']}"""
