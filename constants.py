"""App constants, overridable via environment variables."""

import os
from pathlib import Path

_REPO_ROOT = Path(__file__).resolve().parent

# Data directory; default "data" under repo root, overridable via DATA_DIR env
DATA_DIR = Path(os.environ["DATA_DIR"]) if os.environ.get("DATA_DIR") else _REPO_ROOT / "data"

# Entity JSON files live in DATA_DIR/entities/<type>.json
ENTITIES_DIR = DATA_DIR / "entities"

# Public site URL used for canonical links, sitemap and JSON-LD
SITE_URL: str = os.environ.get("SITE_URL") or "https://rentalfleetuae.com"

# Read entities/blog/guides from the database instead of the JSON seed files
USE_DB: bool = os.environ.get("USE_DB", "").lower() == "true"

# In-memory TTL for entity lists read from the database (seconds)
ENTITY_CACHE_TTL_SECONDS: int = int(os.environ.get("ENTITY_CACHE_TTL_SECONDS", "300"))

# Upper bound on rendered pages held in memory; least recently used go first
PAGE_CACHE_MAXSIZE: int = int(os.environ.get("PAGE_CACHE_MAXSIZE", "5000"))

# Shared secret for POST /api/revalidate; empty disables the check
REVALIDATION_SECRET: str = os.environ.get("REVALIDATION_SECRET", "")

# Google Analytics measurement id rendered into the base template
GA_MEASUREMENT_ID: str = os.environ.get("NEXT_PUBLIC_GA_ID") or os.environ.get("GA_MEASUREMENT_ID", "")

# Log database errors in repository read paths
DB_LOG_ERRORS: bool = os.environ.get("DB_LOG_ERRORS", "true").lower() != "false"

# ── Page generation ───────────────────────────────────────────────────────────
# Minimum priority for an entity to be listed on hub pages
HUB_LISTING_MIN_PRIORITY: int = 6

# Max vehicle pairs pre-rendered as comparison pages
MAX_COMPARISON_PAGES: int = 50

# Keyword landing page year stamp
KEYWORD_PAGE_YEAR: str = "2026"
