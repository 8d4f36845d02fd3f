"""
Centralized Database Access for Design Planner.

Single source of truth for:
- DB path resolution
- Connection factory
- Schema creation

All code reaches SQLite through this module. No direct sqlite3.connect()
elsewhere.
"""

import logging
import sqlite3
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path

from planner import paths

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

# ============================================================
# SCHEMA
# ============================================================

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS assignments (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    task_id TEXT NOT NULL,
    employee_id TEXT NOT NULL,
    assigned_date TEXT NOT NULL,
    half_day INTEGER NOT NULL CHECK (half_day IN (1, 2)),
    title TEXT NOT NULL DEFAULT '',
    notes TEXT,
    hours REAL,
    column_start REAL,
    slot_order INTEGER NOT NULL DEFAULT 0,
    is_active INTEGER NOT NULL DEFAULT 1,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_assignments_slot
    ON assignments (employee_id, assigned_date, half_day, is_active);
"""


# ============================================================
# DB PATH RESOLUTION
# ============================================================


def get_db_path() -> Path:
    """
    Get the canonical DB path.

    Resolution order:
    1. DESIGN_PLANNER_DB env var (explicit override)
    2. ~/.design_planner/data/planner.db (default via paths.db_path())
    """
    return paths.db_path()


# ============================================================
# CONNECTION FACTORY
# ============================================================


@contextmanager
def get_connection(
    db_path: str | Path | None = None,
    row_factory: bool = True,
) -> Generator[sqlite3.Connection, None, None]:
    """
    Get a database connection with proper setup.

    Commits when the block exits cleanly; rolls back and re-raises otherwise.

    Usage:
        with get_connection() as conn:
            conn.execute(...)
    """
    path = Path(db_path) if db_path else get_db_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(path))
    if row_factory:
        conn.row_factory = sqlite3.Row
    try:
        yield conn
        conn.commit()
    except Exception as e:
        conn.rollback()
        logger.error("Database transaction rolled back: %s", e)
        raise
    finally:
        conn.close()


def get_schema_version(conn: sqlite3.Connection) -> int:
    """Get current schema version from PRAGMA user_version."""
    return conn.execute("PRAGMA user_version").fetchone()[0]


def ensure_schema(db_path: str | Path | None = None) -> int:
    """
    Create tables if missing and stamp the schema version.

    Returns the schema version after convergence.
    """
    with get_connection(db_path) as conn:
        version = get_schema_version(conn)
        conn.executescript(SCHEMA_SQL)
        if version < SCHEMA_VERSION:
            conn.execute(f"PRAGMA user_version = {int(SCHEMA_VERSION)}")
            logger.info("Schema converged: v%d -> v%d", version, SCHEMA_VERSION)
    return SCHEMA_VERSION
