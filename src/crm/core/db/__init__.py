"""Database utilities - engine, connection manager, migrations."""

from src.crm.core.db.database import Database
from src.crm.core.db.engine import create_engine_from_settings
from src.crm.core.db.migrations import run_migrations_sync

__all__ = [
    "Database",
    "create_engine_from_settings",
    "run_migrations_sync",
]
