from __future__ import annotations

from alembic import context
from sqlalchemy import create_engine, pool

from mop.infrastructure.db.models.order import Base
from mop.infrastructure.db.session import database_url
from mop.infrastructure.observability.logging_config import configure_logging

config = context.config
target_metadata = Base.metadata

# Logging is set up when run from the alembic CLI; embedded callers keep theirs.
if config.config_file_name is not None:
    configure_logging()


def _url() -> str:
    url = config.get_main_option("sqlalchemy.url") or database_url()
    if not url:
        raise RuntimeError("DATABASE_URL is not set")
    return url


def run_migrations_offline() -> None:
    context.configure(
        url=_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    engine = create_engine(_url(), poolclass=pool.NullPool)
    with engine.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()
    engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
