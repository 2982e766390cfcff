"""Schema Migrations — applies the packaged Alembic revisions to a database.

Invariants:
    - Upgrades to head; already-current databases are left untouched
    - Must be called outside a running event loop (env.py drives its own loop)

Design Decisions:
    - Config built in code from the packaged migrations directory, so an
      installed package migrates without an alembic.ini on disk
"""

import logging
from pathlib import Path

from alembic import command
from alembic.config import Config

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parent.parent / "migrations"


def build_alembic_config(database_url: str) -> Config:
    """Alembic Config pointing at the packaged migrations and the given URL."""
    config = Config()
    config.set_main_option("script_location", str(MIGRATIONS_DIR))
    config.set_main_option("sqlalchemy.url", database_url)
    return config


def run_migrations(database_url: str, revision: str = "head") -> None:
    """Bring the database schema up to `revision`."""
    logger.info(f"Migrating database to {revision}")
    command.upgrade(build_alembic_config(database_url), revision)
    logger.info("Database migrations complete")
