"""
Database integration and simple migration system.

This module provides the SQLAlchemy engine for the configured database
(``get_engine``) and applies migrations on application start
(``init_db``).  Two backends are supported and selected through
``settings.database_url``:

* a local SQLite file (the default);
* a hosted PostgreSQL database when the URL starts with
  ``postgres://`` or ``postgresql://``, through ``psycopg2``.

Services run plain SQL through ``sqlalchemy.text`` with named
parameters (``:email``) inside ``get_engine().begin()`` blocks, so the
same statement runs on both backends.  Tables are declared once with
SQLAlchemy Core and rendered in each backend's dialect.  The migration
mechanism stores applied migration versions in the ``migrations`` table
and executes new migrations in order.
"""

import logging
from functools import lru_cache
from typing import List, Sequence, Tuple

from sqlalchemy import (
    BigInteger,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    MetaData,
    Table,
    Text,
    create_engine,
    event,
    func,
    text,
)
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from .config import project_path, settings


logger = logging.getLogger(__name__)

# Re-exported so services never import SQLAlchemy's exception module.
DatabaseError = SQLAlchemyError

POSTGRES_PREFIXES = ("postgres://", "postgresql://")


def is_postgres(url: str = "") -> bool:
    """Return ``True`` when the configured database is PostgreSQL."""
    return (url or settings.database_url).startswith(POSTGRES_PREFIXES)


def backend_name() -> str:
    """Human readable backend name, reported by the health endpoint."""
    return "PostgreSQL" if is_postgres() else "SQLite"


def get_database_path() -> str:
    """Compute the path to the SQLite database file.

    A ``sqlite:///`` prefix is accepted.  Relative paths resolve
    against the project root.
    """
    db_url = settings.database_url
    if db_url.startswith("sqlite:///"):
        db_url = db_url[len("sqlite:///"):]
    return str(project_path(db_url))


def get_database_url() -> str:
    """SQLAlchemy URL for the configured database."""
    url = settings.database_url
    if is_postgres(url):
        # Hosting providers hand out postgres://, SQLAlchemy wants a dialect name
        return "postgresql+psycopg2://" + url.split("://", 1)[1]
    return f"sqlite:///{get_database_path()}"


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys = ON")
    cursor.close()


@lru_cache(maxsize=None)
def _create_engine(url: str) -> Engine:
    if url.startswith("sqlite"):
        engine = create_engine(url, connect_args={"check_same_thread": False})
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine
    return create_engine(url, pool_pre_ping=True, pool_recycle=300)


def get_engine() -> Engine:
    """Return the engine for ``settings.database_url``.

    Engines are cached per URL, so changing the setting (as the tests
    do) switches databases without restarting the process.
    """
    return _create_engine(get_database_url())


metadata = MetaData()

# BIGSERIAL on PostgreSQL; SQLite only autoincrements an INTEGER primary key
ID = BigInteger().with_variant(Integer, "sqlite")

migrations_table = Table(
    "migrations",
    metadata,
    Column("version", Integer, primary_key=True, autoincrement=False),
)

users = Table(
    "users",
    metadata,
    Column("id", ID, primary_key=True),
    Column("email", Text, nullable=False, unique=True),
    Column("password", Text, nullable=False),
    Column("name", Text, nullable=False),
    Column("created_at", DateTime, server_default=func.current_timestamp()),
    sqlite_autoincrement=True,
)


def _count(name: str, nullable: bool = False) -> Column:
    return Column(name, BigInteger, nullable=nullable, server_default=text("0"))


def _money(name: str, nullable: bool = False) -> Column:
    return Column(name, Float, nullable=nullable, server_default=text("0"))


entries = Table(
    "entries",
    metadata,
    Column("id", ID, primary_key=True),
    Column("user_id", ID, ForeignKey("users.id"), nullable=False),
    Column("date", Text, nullable=False, server_default=""),
    Column("role", Text, nullable=False, server_default=""),
    _count("booked_calls"),
    _count("no_shows"),
    _count("closed_won"),
    _count("closed_lost"),
    _count("pif"),
    _count("splits"),
    _money("cash_collected"),
    _money("renewals_cash"),
    _count("reschedules"),
    Column("created_at", DateTime, server_default=func.current_timestamp()),
    sqlite_autoincrement=True,
)

form_submissions = Table(
    "form_submissions",
    metadata,
    Column("id", ID, primary_key=True),
    Column("timestamp", Text),
    Column("role", Text),
    _count("dials", nullable=True),
    _count("pick_ups", nullable=True),
    _count("dqs", nullable=True),
    _count("appts_pitched", nullable=True),
    _count("appts_set", nullable=True),
    Column("hybrid_closer", Text),
    _count("calls_scheduled", nullable=True),
    _count("live_calls", nullable=True),
    Column("prospect_email", Text),
    Column("call_date", Text),
    Column("offer_made", Text),
    Column("call_outcome", Text),
    _money("cash_collected", nullable=True),
    _money("revenue_generated", nullable=True),
    Column("call_notes", Text),
    Column("closer_name", Text),
    Column("setter_name", Text),
    Column("fathom_link", Text),
    Column("created_at", DateTime, server_default=func.current_timestamp()),
    sqlite_autoincrement=True,
)


# Each migration is a version number and what it creates: Core tables,
# or DDL strings valid on both backends.
# Append new migrations with an incremented version; never edit one
# that has shipped.
MIGRATIONS: List[Tuple[int, Sequence]] = [
    # Migration 1: users and the unified entries table
    (1, [users, entries]),
    # Migration 2: raw Google Form submissions (no owner)
    (2, [form_submissions]),
    # Migration 3: lookup indexes
    (
        3,
        [
            "CREATE INDEX IF NOT EXISTS idx_entries_user_id ON entries (user_id)",
            "CREATE INDEX IF NOT EXISTS idx_form_submissions_created_at ON form_submissions (created_at)",
        ],
    ),
]


def init_db() -> None:
    """Initialise the database and apply pending migrations.

    Creates the ``migrations`` table if it does not exist, checks the
    current schema version, and applies any new migrations defined in
    ``MIGRATIONS``.  Safe to call on every start.
    """
    with get_engine().begin() as conn:
        migrations_table.create(conn, checkfirst=True)
        current_version = conn.execute(text("SELECT MAX(version) FROM migrations")).scalar() or 0

        for version, objects in MIGRATIONS:
            if version <= current_version:
                continue
            for obj in objects:
                if isinstance(obj, str):
                    conn.execute(text(obj))
                else:
                    obj.create(conn, checkfirst=True)
            conn.execute(text("INSERT INTO migrations (version) VALUES (:version)"), {"version": version})
            logger.info("Applied database migration %s", version)
            current_version = version
