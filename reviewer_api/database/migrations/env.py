"""Alembic environment for reviewer-api migrations."""
from alembic import context
from sqlalchemy import create_engine, pool

from reviewer_api.config.config import get_migration_database_url

config = context.config


def run_migrations_offline() -> None:
    context.configure(url=get_migration_database_url(), literal_binds=True)
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    engine = create_engine(get_migration_database_url(), poolclass=pool.NullPool)
    with engine.connect() as connection:
        context.configure(connection=connection)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
