"""
Database schema for the document store.

Each collection is one table. Embedded arrays (a manager's roster and
results, a season's results) are JSONB columns so documents are read and
written whole, the way a document database stores them.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .core.types import MANAGERS, PLAYERS, RESULTS, SEASONS

if TYPE_CHECKING:
    from .pg_connection import PostgresDB

logger = logging.getLogger(__name__)

SCHEMA_SQL = f"""
CREATE TABLE IF NOT EXISTS {PLAYERS} (
    id TEXT PRIMARY KEY,
    long_name TEXT,
    short_name TEXT,
    player_positions TEXT,
    club_position TEXT,
    club_name TEXT,
    league_name TEXT,
    nationality_name TEXT,
    age INTEGER,
    overall INTEGER,
    potential INTEGER,
    pace JSONB,
    passing JSONB,
    physic JSONB,
    shooting JSONB,
    dribbling JSONB,
    defending JSONB,
    player_face_url TEXT,
    club_logo_url TEXT,
    nation_flag_url TEXT,
    weak_foot INTEGER,
    skill_moves INTEGER,
    work_rate TEXT,
    preferred_foot TEXT
);

CREATE INDEX IF NOT EXISTS idx_{PLAYERS}_overall ON {PLAYERS} (overall DESC);

CREATE TABLE IF NOT EXISTS {MANAGERS} (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    user_id TEXT,
    email TEXT,
    points INTEGER NOT NULL DEFAULT 0,
    players JSONB NOT NULL DEFAULT '[]'::jsonb,
    results JSONB NOT NULL DEFAULT '[]'::jsonb,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE INDEX IF NOT EXISTS idx_{MANAGERS}_user_id ON {MANAGERS} (user_id);

CREATE TABLE IF NOT EXISTS {SEASONS} (
    id TEXT PRIMARY KEY,
    type TEXT,
    title TEXT,
    results JSONB NOT NULL DEFAULT '[]'::jsonb,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE TABLE IF NOT EXISTS {RESULTS} (
    id TEXT PRIMARY KEY,
    season TEXT,
    doc JSONB NOT NULL,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE INDEX IF NOT EXISTS idx_{RESULTS}_season ON {RESULTS} (season);
"""


def init_database(db: "PostgresDB") -> None:
    """Create all collection tables. Safe to run repeatedly."""
    logger.info("Creating document store tables")
    db.executescript(SCHEMA_SQL)


def get_table_counts(db: "PostgresDB") -> dict[str, int]:
    """Get document counts per collection."""
    counts = {}
    for table in (PLAYERS, MANAGERS, SEASONS, RESULTS):
        row = db.fetchone(f"SELECT COUNT(*) AS count FROM {table}")
        counts[table] = row["count"] if row else 0
    return counts
