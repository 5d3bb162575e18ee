# shop_pos/database/__init__.py
from __future__ import annotations

from pathlib import Path
import logging
import sqlite3

from ..config import DB_PATH
from ..constants import DB_TIMEOUT_SECONDS, SCHEMA_VERSION
from . import schema as schema_module
from .versioning import get_current_version, set_current_version

_log = logging.getLogger(__name__)


def get_connection(db_path: Path | str | None = None) -> sqlite3.Connection:
    """
    Returns a sqlite3.Connection with:
      - WAL mode
      - foreign_keys ON
      - busy timeout (DB_TIMEOUT_SECONDS) so a locked DB fails instead of hanging
      - row_factory = sqlite3.Row (so rows behave like dicts and tuples)
    Ensures the schema is applied and the schema version recorded.
    """
    path = Path(db_path) if db_path is not None else DB_PATH
    path.parent.mkdir(parents=True, exist_ok=True)

    # Always apply the schema (idempotent: uses CREATE IF NOT EXISTS / DROP TRIGGER IF EXISTS)
    schema_module.init_schema(path)

    conn = sqlite3.connect(path, timeout=DB_TIMEOUT_SECONDS)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON;")
    conn.execute("PRAGMA journal_mode = WAL;")

    if get_current_version(conn) != SCHEMA_VERSION:
        set_current_version(conn, SCHEMA_VERSION)

    conn.commit()
    _log.info("database ready at %s", path)
    return conn


__all__ = [
    "get_connection",
]
