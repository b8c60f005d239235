# src/forum_diff/scripts/migrate.py
from __future__ import annotations

import os

from alembic import command
from alembic.config import Config

from forum_diff.core.settings import settings

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..", ".."))


def run_upgrade_head(database_url: str | None = None) -> None:
    """Upgrade the database to the latest migration.

    Args:
        database_url: Target database; defaults to the configured one.
    """
    cfg = Config(os.path.join(PROJECT_ROOT, "alembic.ini"))
    cfg.set_main_option("sqlalchemy.url", database_url or settings.database_url_sync)
    cfg.set_main_option("script_location", os.path.join(PROJECT_ROOT, "migrations"))
    command.upgrade(cfg, "head")


if __name__ == "__main__":
    run_upgrade_head()
