"""Database schema DDL definitions and initialization utilities.

Tables:
  - users: one profile per identity-provider account (id = provider uid)
  - expenses: individual expense records owned by a user
  - budgets: one row per (owner, month); id is "<owner>_<YYYY-MM>"
  - metadata: key/value store (schema version)
"""

from __future__ import annotations
import sqlite3
from typing import Sequence

from pesotrack.models.constants import CATEGORIES

BASIC_UTC_NOW = "strftime('%Y-%m-%dT%H:%M:%fZ','now')"

_CATEGORY_LIST = ",".join(f"'{c}'" for c in CATEGORIES)

USERS_DDL = f"""
CREATE TABLE IF NOT EXISTS users (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    email TEXT NOT NULL,
    contact_number TEXT NOT NULL DEFAULT '',
    streak INTEGER NOT NULL DEFAULT 0 CHECK (streak >= 0),
    avatar_url TEXT, -- inlined data:image/...;base64 payload
    created_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW}),
    updated_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW})
);
"""

EXPENSES_DDL = f"""
CREATE TABLE IF NOT EXISTS expenses (
    id TEXT PRIMARY KEY,
    owner_id TEXT NOT NULL,
    description TEXT NOT NULL,
    amount REAL NOT NULL CHECK (amount > 0),
    category TEXT NOT NULL CHECK (category IN ({_CATEGORY_LIST})),
    date TEXT NOT NULL, -- ISO date (YYYY-MM-DD)
    created_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW})
);
"""

BUDGETS_DDL = f"""
CREATE TABLE IF NOT EXISTS budgets (
    id TEXT PRIMARY KEY, -- '<owner_id>_<YYYY-MM>'
    owner_id TEXT NOT NULL,
    month TEXT NOT NULL, -- 'YYYY-MM'
    amount REAL NOT NULL DEFAULT 0 CHECK (amount >= 0),
    created_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW}),
    updated_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW}),
    UNIQUE (owner_id, month)
);
"""

METADATA_DDL = f"""
CREATE TABLE IF NOT EXISTS metadata (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW})
);
"""

EXPENSES_OWNER_DATE_INDEX_DDL = (
    "CREATE INDEX IF NOT EXISTS idx_expenses_owner_date ON expenses(owner_id, date);"
)
BUDGETS_OWNER_INDEX_DDL = (
    "CREATE INDEX IF NOT EXISTS idx_budgets_owner ON budgets(owner_id);"
)

DDL_ORDER: Sequence[str] = (
    USERS_DDL,
    EXPENSES_DDL,
    BUDGETS_DDL,
    METADATA_DDL,
)

INDEX_DDL: Sequence[str] = (
    EXPENSES_OWNER_DATE_INDEX_DDL,
    BUDGETS_OWNER_INDEX_DDL,
)


def create_tables(conn: sqlite3.Connection) -> None:
    """Create all tables and indexes; safe to run on an existing database."""
    for ddl in (*DDL_ORDER, *INDEX_DDL):
        conn.execute(ddl)
