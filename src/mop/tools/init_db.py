from __future__ import annotations

from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import inspect

from mop.infrastructure.db.session import database_url, get_engine

MIGRATIONS_DIR = Path(__file__).resolve().parents[1] / "infrastructure" / "db" / "migrations"


def alembic_config(url: str | None = None) -> Config:
    config = Config()
    config.set_main_option("script_location", str(MIGRATIONS_DIR))
    if url is not None:
        # Config values go through configparser interpolation.
        config.set_main_option("sqlalchemy.url", url.replace("%", "%%"))
    return config


def upgrade(url: str | None = None, revision: str = "head") -> None:
    command.upgrade(alembic_config(url), revision)


def main() -> None:
    url = database_url()
    if url is None:
        raise RuntimeError("DATABASE_URL is not set")
    upgrade(url)
    tables = sorted(inspect(get_engine(timeout_seconds=2.0)).get_table_names())
    print(f"schema ready: {', '.join(tables)}")


if __name__ == "__main__":
    main()
