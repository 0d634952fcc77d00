"""SQLite connection helpers for the app database, with ordered migrations."""

import importlib
import sqlite3
from pathlib import Path

MIGRATIONS_PACKAGE = "skyview.storage.migrations"
MIGRATIONS_DIR = Path(__file__).parent / "migrations"


def connect(db_path: str | Path, timeout: float = 5.0) -> sqlite3.Connection:
    """Open the app database in WAL mode; rows come back as sqlite3.Row."""
    conn = sqlite3.connect(str(db_path), timeout=timeout)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    return conn


def run_migrations(conn: sqlite3.Connection) -> list[str]:
    """Apply migrations not yet recorded in schema_versions, oldest first.

    Returns the names applied by this call.
    """
    conn.execute(
        "CREATE TABLE IF NOT EXISTS schema_versions ("
        "  version TEXT PRIMARY KEY,"
        "  applied_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP"
        ")"
    )
    conn.commit()

    done = {row[0] for row in conn.execute("SELECT version FROM schema_versions")}
    applied = []
    for name in pending_migrations(done):
        module = importlib.import_module(f"{MIGRATIONS_PACKAGE}.{name}")
        module.up(conn)
        conn.execute("INSERT INTO schema_versions (version) VALUES (?)", (name,))
        conn.commit()
        applied.append(name)
    return applied


def pending_migrations(done: set[str]) -> list[str]:
    # Migration modules are named v###_<description>.py
    names = sorted(p.stem for p in MIGRATIONS_DIR.glob("v[0-9]*_*.py"))
    return [n for n in names if n not in done]
