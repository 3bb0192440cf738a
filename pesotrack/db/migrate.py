"""Schema versioning.

The metadata table stores an integer ``schema_version``. Upgrades are listed
in ``MIGRATIONS`` as ``(version, step)`` pairs and run in order for every
version above the stored one; the baseline step creates the tables. A
database stamped by a newer build is refused rather than touched.
"""

from __future__ import annotations
from contextlib import closing
from pathlib import Path
import sqlite3
from typing import Callable, List, Optional, Tuple

from . import schema as schema_def

SCHEMA_VERSION_KEY = "schema_version"

Migration = Callable[[sqlite3.Connection], None]


class SchemaVersionError(RuntimeError):
    pass


def _baseline(conn: sqlite3.Connection) -> None:
    schema_def.create_tables(conn)


MIGRATIONS: List[Tuple[int, Migration]] = [
    (1, _baseline),
]
CURRENT_SCHEMA_VERSION = MIGRATIONS[-1][0]


def read_schema_version(conn: sqlite3.Connection) -> Optional[int]:
    try:
        row = conn.execute(
            "SELECT value FROM metadata WHERE key=?", (SCHEMA_VERSION_KEY,)
        ).fetchone()
    except sqlite3.OperationalError:
        # fresh file: no metadata table yet
        return None
    return int(row[0]) if row else None


def _stamp(conn: sqlite3.Connection, version: int) -> None:
    conn.execute(
        "INSERT INTO metadata (key, value) VALUES (?, ?) "
        "ON CONFLICT(key) DO UPDATE SET value=excluded.value, "
        f"updated_at=({schema_def.BASIC_UTC_NOW})",
        (SCHEMA_VERSION_KEY, str(version)),
    )


def apply_migrations(db_path: Path) -> int:
    """Bring ``db_path`` up to CURRENT_SCHEMA_VERSION and return it."""
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    with closing(sqlite3.connect(db_path)) as conn:
        stored = read_schema_version(conn) or 0
        if stored > CURRENT_SCHEMA_VERSION:
            raise SchemaVersionError(
                f"database schema version {stored} is newer than supported {CURRENT_SCHEMA_VERSION}"
            )
        with conn:
            for version, step in MIGRATIONS:
                if version > stored:
                    step(conn)
            _stamp(conn, CURRENT_SCHEMA_VERSION)
    return CURRENT_SCHEMA_VERSION
