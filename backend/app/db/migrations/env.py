"""
Alembic environment for the portal schema.

Migrations always run on a synchronous engine: PostgreSQL through psycopg2,
or, when DATABASE_URL_OVERRIDE points at SQLite, the same file through the
stdlib sqlite3 driver.
"""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool
from sqlalchemy.engine import make_url

from app.core.config import settings
from app.db.models import Base

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def migration_url() -> str:
    """Synchronous URL for the configured database."""
    if settings.DATABASE_URL_OVERRIDE:
        url = make_url(settings.DATABASE_URL_OVERRIDE)
        return url.set(drivername=url.get_backend_name()).render_as_string(hide_password=False)
    return settings.DATABASE_URL_SYNC


def run_migrations_offline() -> None:
    """Print the migration SQL instead of executing it."""
    context.configure(
        url=migration_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    engine = create_engine(migration_url(), poolclass=pool.NullPool)
    try:
        with engine.connect() as connection:
            context.configure(
                connection=connection,
                target_metadata=target_metadata,
                render_as_batch=connection.dialect.name == "sqlite",
            )
            with context.begin_transaction():
                context.run_migrations()
    finally:
        engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
