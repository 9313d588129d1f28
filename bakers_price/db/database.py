"""SQLite database connection management and schema initialization.

Provides a single-file database at ~/.bakers_price/bakers_price.db.
Every public function that needs a connection should call get_connection(),
use it, and close it in a finally block.
"""

import logging
import os
import sqlite3
from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path

from bakers_price.core.defaults import DEFAULT_RECIPE_NAMES, new_recipe_state

logger = logging.getLogger(__name__)

_db_path_override: ContextVar["Path | None"] = ContextVar("_db_path_override", default=None)


@contextmanager
def override_db_path(path: "Path"):
    """Context manager to override the DB path for the current async task/thread.

    Example:
        with override_db_path(tmp_path / "scratch.db"):
            init_db()
            states = recipes_core.get_all()
    """
    token = _db_path_override.set(path)
    try:
        yield
    finally:
        _db_path_override.reset(token)


def get_db_path() -> Path:
    """Return the active DB path.

    Priority order:
    1. ContextVar override
    2. DB_PATH environment variable (used by Docker / local dev / tests)
    3. Default ~/.bakers_price/bakers_price.db
    """
    override = _db_path_override.get()
    if override is not None:
        return override
    env_url = os.environ.get("DB_PATH")
    if env_url:
        p = Path(env_url)
        p.parent.mkdir(parents=True, exist_ok=True)
        return p
    db_dir = Path.home() / ".bakers_price"
    db_dir.mkdir(exist_ok=True)
    return db_dir / "bakers_price.db"


def get_connection(db_path: Path = None) -> sqlite3.Connection:
    """Return a new SQLite connection with Row factory and foreign keys enabled.

    Callers are responsible for closing the connection when done.
    """
    if db_path is None:
        db_path = get_db_path()
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def init_db(db_path: Path = None) -> None:
    """Create all tables if they don't already exist, migrate, and seed default recipes.

    Called once at application startup from app/main.py.
    Tables: recipes, ingredients, packaging, settings.
    """
    conn = get_connection(db_path)
    try:
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS recipes (
                name          TEXT PRIMARY KEY,
                position      INTEGER NOT NULL DEFAULT 0,
                batch_yield   INTEGER NOT NULL DEFAULT 12,
                profit_margin REAL NOT NULL DEFAULT 50,
                hourly_rate   REAL NOT NULL DEFAULT 15,
                hours_spent   REAL NOT NULL DEFAULT 1
            );

            CREATE TABLE IF NOT EXISTS ingredients (
                id                TEXT PRIMARY KEY,
                recipe_name       TEXT NOT NULL REFERENCES recipes(name) ON DELETE CASCADE ON UPDATE CASCADE,
                position          INTEGER NOT NULL DEFAULT 0,
                name              TEXT NOT NULL DEFAULT '',
                purchase_price    REAL NOT NULL DEFAULT 0,
                purchase_quantity TEXT NOT NULL DEFAULT '1',
                purchase_unit     TEXT NOT NULL DEFAULT 'kg',
                recipe_quantity   TEXT NOT NULL DEFAULT '0',
                recipe_unit       TEXT NOT NULL DEFAULT 'g'
            );

            CREATE TABLE IF NOT EXISTS packaging (
                id                TEXT PRIMARY KEY,
                recipe_name       TEXT NOT NULL REFERENCES recipes(name) ON DELETE CASCADE ON UPDATE CASCADE,
                position          INTEGER NOT NULL DEFAULT 0,
                name              TEXT NOT NULL DEFAULT '',
                purchase_price    REAL NOT NULL DEFAULT 0,
                purchase_quantity TEXT NOT NULL DEFAULT '1',
                quantity_used     TEXT NOT NULL DEFAULT '0'
            );

            CREATE TABLE IF NOT EXISTS settings (
                key   TEXT PRIMARY KEY,
                value TEXT
            );
        """)
        conn.commit()

        # Migrations for existing databases: ingredients saved before categories existed
        try:
            conn.execute("ALTER TABLE ingredients ADD COLUMN category TEXT DEFAULT 'dry'")
            conn.commit()
            logger.info("Added category column to ingredients")
        except sqlite3.OperationalError:
            pass  # Column already exists
        migrated = conn.execute(
            "UPDATE ingredients SET category = 'dry' WHERE category IS NULL OR category = ''"
        ).rowcount
        if migrated:
            logger.info("Defaulted category to 'dry' for %d ingredient(s)", migrated)
        conn.commit()

        count = conn.execute("SELECT COUNT(*) FROM recipes").fetchone()[0]
        if count == 0:
            for position, name in enumerate(DEFAULT_RECIPE_NAMES):
                state = new_recipe_state(name)
                conn.execute(
                    """INSERT INTO recipes (name, position, batch_yield, profit_margin,
                       hourly_rate, hours_spent) VALUES (?, ?, ?, ?, ?, ?)""",
                    (name, position, state.batch_yield, state.profit_margin,
                     state.hourly_rate, state.hours_spent),
                )
            conn.commit()
            logger.info("Seeded %d default recipes", len(DEFAULT_RECIPE_NAMES))
    finally:
        conn.close()
