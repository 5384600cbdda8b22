"""Core types shared by the programmatic page pipeline."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, NotRequired, TypedDict


class EntityType(str, Enum):
    EMIRATE = "emirate"
    VEHICLE = "vehicle"
    SERVICE = "service"
    INTENT = "intent"
    LOCATION = "location"


class PageType(str, Enum):
    HUB = "hub"
    SPOKE = "spoke"
    COMPARISON = "comparison"
    DIRECTORY = "directory"
    BLOG = "blog"


class IntentType(str, Enum):
    TOURISM = "tourism"
    BUSINESS = "business"
    FAMILY = "family"
    WEDDING = "wedding"
    CORPORATE = "corporate"
    LUXURY = "luxury"
    DEFAULT = "default"


class LinkType(str, Enum):
    PARENT = "parent"
    CHILD = "child"
    SIBLING = "sibling"
    RELATED = "related"
    CONTEXTUAL = "contextual"


class LinkPlacement(str, Enum):
    BREADCRUMB = "breadcrumb"
    SIDEBAR = "sidebar"
    BODY = "body"
    FOOTER = "footer"


class FAQ(TypedDict):
    question: str
    answer: str
    category: NotRequired[str]


@dataclass
class EntityContent:
    description: str = ""
    long_description: str | None = None
    benefits: list[str] = field(default_factory=list)
    features: list[str] = field(default_factory=list)
    faqs: list[FAQ] = field(default_factory=list)
    highlights: list[str] = field(default_factory=list)


@dataclass
class EntitySEO:
    title_template: str = ""
    description_template: str = ""
    keywords: list[str] = field(default_factory=list)
    h1_template: str | None = None
    schema_type: str | None = None


@dataclass
class EntityRelationship:
    type: str
    entity_id: str
    entity_type: str
    weight: int = 5


@dataclass
class ProgrammaticEntity:
    """A single emirate, vehicle, service, intent or location.

    ``metadata`` is kept as the free-form dict from the data files (keys such as
    ``stats``, ``features``, ``price``, ``coordinates``, ``rating``, ``brand``).
    """

    id: str
    type: str
    slug: str
    name: str
    display_name: str = ""
    priority: int = 5
    active: bool = True
    metadata: dict[str, Any] = field(default_factory=dict)
    content: EntityContent = field(default_factory=EntityContent)
    seo: EntitySEO = field(default_factory=EntitySEO)
    relationships: list[EntityRelationship] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProgrammaticEntity":
        """Build from the camelCase shape used by data/entities/*.json."""
        content = data.get("content") or {}
        seo = data.get("seo") or {}
        return cls(
            id=str(data["id"]),
            type=str(data["type"]),
            slug=str(data["slug"]),
            name=str(data["name"]),
            display_name=str(data.get("displayName") or data.get("display_name") or data["name"]),
            priority=int(data.get("priority") or 5),
            active=data.get("active", True) is not False,
            metadata=dict(data.get("metadata") or {}),
            content=EntityContent(
                description=content.get("description") or "",
                long_description=content.get("longDescription") or content.get("long_description"),
                benefits=list(content.get("benefits") or []),
                features=list(content.get("features") or []),
                faqs=list(content.get("faqs") or []),
                highlights=list(content.get("highlights") or []),
            ),
            seo=EntitySEO(
                title_template=seo.get("titleTemplate") or seo.get("title_template") or "",
                description_template=seo.get("descriptionTemplate") or seo.get("description_template") or "",
                keywords=[str(k) for k in seo.get("keywords") or []],
                h1_template=seo.get("h1Template") or seo.get("h1_template"),
                schema_type=seo.get("schemaType") or seo.get("schema_type"),
            ),
            relationships=[
                EntityRelationship(
                    type=str(r.get("type") or "related"),
                    entity_id=str(r.get("entityId") or r.get("entity_id")),
                    entity_type=str(r.get("entityType") or r.get("entity_type") or ""),
                    weight=int(r.get("weight") or 5),
                )
                for r in data.get("relationships") or []
            ],
        )

    def to_dict(self) -> dict[str, Any]:
        """Inverse of from_dict; used by the API and the JSON export."""
        return {
            "id": self.id,
            "type": self.type,
            "slug": self.slug,
            "name": self.name,
            "displayName": self.display_name,
            "priority": self.priority,
            "active": self.active,
            "metadata": self.metadata,
            "content": {
                "description": self.content.description,
                "longDescription": self.content.long_description,
                "benefits": self.content.benefits,
                "features": self.content.features,
                "faqs": self.content.faqs,
                "highlights": self.content.highlights,
            },
            "seo": {
                "titleTemplate": self.seo.title_template,
                "descriptionTemplate": self.seo.description_template,
                "keywords": self.seo.keywords,
                "h1Template": self.seo.h1_template,
                "schemaType": self.seo.schema_type,
            },
            "relationships": [
                {
                    "type": r.type,
                    "entityId": r.entity_id,
                    "entityType": r.entity_type,
                    "weight": r.weight,
                }
                for r in self.relationships
            ],
        }


@dataclass
class Intent:
    type: str
    modifiers: list[str] = field(default_factory=list)
    priority: int | None = None


@dataclass
class TemplateSection:
    id: str
    type: str
    order: int = 0
    required: bool = False
    content_template: str = ""


@dataclass
class TemplateVariant:
    id: str
    structure: str = "standard"
    weight: int = 1
    sections: list[TemplateSection] = field(default_factory=list)


@dataclass
class GenerationContext:
    primary: ProgrammaticEntity
    secondary: list[ProgrammaticEntity] = field(default_factory=list)
    intent: Intent | None = None
    variant: TemplateVariant | None = None
    target_word_count: int = 800


class ContentSection(TypedDict):
    id: str
    type: str
    heading: str
    content: str
    order: int
    data: NotRequired[dict[str, Any]]


class GeneratedContent(TypedDict):
    sections: list[ContentSection]
    word_count: int
    keyword_density: dict[str, float]
    readability_score: float
    uniqueness_score: NotRequired[float]


class InternalLink(TypedDict):
    url: str
    text: str
    type: str
    relevance: float
    position: str
    entity_id: str
    entity_type: str


class PageMetadata(TypedDict):
    """Head metadata for one page; rendered by templates/_head.html."""

    title: str
    description: str
    keywords: str
    canonical: str
    robots: dict[str, Any]
    open_graph: dict[str, Any]
    twitter: dict[str, Any]
    alternates: dict[str, Any]
    other: NotRequired[dict[str, str]]
