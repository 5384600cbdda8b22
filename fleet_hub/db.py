"""
Database adapter: abstract interface + SQLite and MySQL implementations.

Entities, blog articles and keyword guides live in MySQL in production; local
development and tests use SQLite. Both adapters expose the same interface.
"""

import logging
import os
import sqlite3
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import URL
from sqlalchemy.orm import Session, sessionmaker

import config
from constants import DATA_DIR
from .models.base import Base

logger = logging.getLogger(__name__)

# Columns to add to existing tables if missing: (table, column, sql_type, default)
_MIGRATIONS: list[tuple[str, str, str, str]] = [
    ("entities", "active", "BOOLEAN", "1"),
    ("entities", "updated_at", "INTEGER", "0"),
    ("entity_relationships", "weight", "INTEGER", "5"),
    ("blog_articles", "status", "VARCHAR(16)", "'published'"),
    ("keyword_guides", "status", "VARCHAR(16)", "'published'"),
]


class DBAdapter(ABC):
    """Abstract database adapter. Implement this to swap backends."""

    @abstractmethod
    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """Yield a session; commits on exit, rolls back on exception."""
        ...

    @abstractmethod
    def create_tables(self) -> None:
        """Create all tables defined in models."""
        ...

    @abstractmethod
    def migrate_tables(self) -> None:
        """Add any missing columns to existing tables (forward-only migrations)."""
        ...

    @abstractmethod
    def test_connection(self) -> bool:
        """Return True if a trivial query succeeds."""
        ...


class _EngineAdapter(DBAdapter):
    """Shared session handling for engine-backed adapters."""

    def __init__(self, engine) -> None:
        self._engine = engine
        self._session_factory = sessionmaker(
            self._engine,
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
        )

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def create_tables(self) -> None:
        Base.metadata.create_all(bind=self._engine)

    def test_connection(self) -> bool:
        try:
            with self._engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception:
            logger.exception("Database connection test failed.")
            return False

    def dispose(self) -> None:
        self._engine.dispose()


class SQLiteAdapter(_EngineAdapter):
    """SQLite implementation of the DB adapter."""

    def __init__(self, url: str = "sqlite:///data/fleet.db", *, echo: bool = False):
        self._url = url
        super().__init__(create_engine(url, echo=echo, connect_args={"check_same_thread": False}))

    def migrate_tables(self) -> None:
        """Add missing columns declared in _MIGRATIONS to existing SQLite tables."""
        # Strip the leading "sqlite:///" to get the raw file path
        db_path = self._url.replace("sqlite:///", "", 1)
        conn = sqlite3.connect(db_path)
        try:
            cur = conn.cursor()
            for table, column, sql_type, default in _MIGRATIONS:
                cur.execute(f"PRAGMA table_info({table})")
                existing = {row[1] for row in cur.fetchall()}
                if existing and column not in existing:
                    cur.execute(
                        f"ALTER TABLE {table} ADD COLUMN {column} {sql_type} NOT NULL DEFAULT {default}"
                    )
            conn.commit()
        finally:
            conn.close()


class MySQLAdapter(_EngineAdapter):
    """MySQL implementation (PyMySQL driver) with a bounded connection pool."""

    def __init__(self, url: str | URL, *, pool_size: int = 10, echo: bool = False):
        super().__init__(
            create_engine(
                url,
                echo=echo,
                pool_size=pool_size,
                max_overflow=0,
                pool_pre_ping=True,
                pool_recycle=3600,
            )
        )

    def migrate_tables(self) -> None:
        inspector = inspect(self._engine)
        tables = set(inspector.get_table_names())
        with self._engine.begin() as conn:
            for table, column, sql_type, default in _MIGRATIONS:
                if table not in tables:
                    continue
                existing = {c["name"] for c in inspector.get_columns(table)}
                if column not in existing:
                    logger.info("Adding column %s.%s", table, column)
                    conn.execute(
                        text(f"ALTER TABLE {table} ADD COLUMN {column} {sql_type} NOT NULL DEFAULT {default}")
                    )


def has_mysql_env() -> bool:
    return bool(config.MYSQL_HOST and config.MYSQL_USER and config.MYSQL_DATABASE)


def mysql_url() -> URL:
    return URL.create(
        "mysql+pymysql",
        username=config.MYSQL_USER,
        password=config.MYSQL_PASSWORD or None,
        host=config.MYSQL_HOST,
        port=config.MYSQL_PORT,
        database=config.MYSQL_DATABASE,
        query={"charset": "utf8mb4"},
    )


_default_adapter: DBAdapter | None = None


def get_default_adapter() -> DBAdapter:
    """Build the default adapter from environment/config (cached per process)."""
    global _default_adapter
    if _default_adapter is not None:
        return _default_adapter

    url = os.environ.get("DATABASE_URL")
    if url:
        if url.startswith("sqlite"):
            _default_adapter = SQLiteAdapter(url)
        elif url.startswith("mysql"):
            _default_adapter = MySQLAdapter(url, pool_size=config.MYSQL_CONNECTION_LIMIT)
        else:
            raise ValueError("Only sqlite:// and mysql+pymysql:// URLs are supported in DATABASE_URL.")
    elif has_mysql_env():
        _default_adapter = MySQLAdapter(mysql_url(), pool_size=config.MYSQL_CONNECTION_LIMIT)
    else:
        DATA_DIR.mkdir(parents=True, exist_ok=True)
        db_path = DATA_DIR / "fleet.db"
        _default_adapter = SQLiteAdapter(f"sqlite:///{db_path}")
    return _default_adapter


def reset_default_adapter() -> None:
    """Drop the cached adapter (used by scripts that switch databases)."""
    global _default_adapter
    if isinstance(_default_adapter, _EngineAdapter):
        _default_adapter.dispose()
    _default_adapter = None
