# alembic/env.py
from __future__ import annotations

from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool

from depth_charts import db as app_db
from depth_charts import models  # noqa: F401  (registers tables on Base)

config = context.config

# Keep the app's loggers alive when migrations run inside a live process.
if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

target_metadata = app_db.Base.metadata


def _database_url() -> str:
    # Same DATABASE_URL resolution as the service itself.
    return app_db.SQLALCHEMY_DATABASE_URL


def _configure(**kwargs) -> None:
    context.configure(
        target_metadata=target_metadata,
        compare_type=True,
        render_as_batch=True,  # SQLite cannot ALTER constraints in place
        **kwargs,
    )


def run_migrations_offline() -> None:
    """Emit SQL for the depth chart schema without a live connection."""
    _configure(url=_database_url(), literal_binds=True)
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = create_engine(_database_url(), poolclass=pool.NullPool)
    with connectable.connect() as connection:
        _configure(connection=connection)
        with context.begin_transaction():
            context.run_migrations()
    connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
