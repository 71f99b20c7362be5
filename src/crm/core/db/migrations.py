"""Migration runner used by the management CLI."""

from alembic import command
from alembic.config import Config


def run_migrations_sync(revision: str = "head", config_path: str = "alembic.ini") -> None:
    """Upgrade the database to `revision` synchronously."""
    alembic_cfg = Config(config_path)
    command.upgrade(alembic_cfg, revision)
