"""Config for build batching and database pooling."""

import os

ENVIRONMENT: str = os.environ.get("FLASK_ENV") or os.environ.get("NODE_ENV") or "development"

# ── Build optimizer ──────────────────────────────────────────────────────────
BUILD_MAX_PAGES: int = int(os.environ.get("BUILD_MAX_PAGES", "1000"))
BUILD_BATCH_SIZE: int = int(os.environ.get("BUILD_BATCH_SIZE", "50"))
BUILD_PARALLEL_LIMIT: int = int(os.environ.get("BUILD_PARALLEL_LIMIT", "10"))
BUILD_PRIORITY_THRESHOLD: int = int(os.environ.get("BUILD_PRIORITY_THRESHOLD", "8"))

# ── MySQL ────────────────────────────────────────────────────────────────────
MYSQL_HOST: str = os.environ.get("MYSQL_HOST", "")
MYSQL_PORT: int = int(os.environ.get("MYSQL_PORT", "3306"))
MYSQL_USER: str = os.environ.get("MYSQL_USER", "")
MYSQL_PASSWORD: str = os.environ.get("MYSQL_PASSWORD", "")
MYSQL_DATABASE: str = os.environ.get("MYSQL_DATABASE", "rental_fleet_uae")

# Small pool in production where many workers share one server
MYSQL_CONNECTION_LIMIT: int = int(
    os.environ.get("MYSQL_CONNECTION_LIMIT", "2" if ENVIRONMENT == "production" else "10")
)
