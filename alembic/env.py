"""
Alembic environment.

Reads the same environment-driven DatabaseConfig as the service and swaps
the async driver for its synchronous counterpart.
"""

import sys
from logging.config import fileConfig

from alembic import context
from dotenv import load_dotenv
from sqlalchemy import engine_from_config, pool

from app.db.models import DbBaseModel
from common.api_error import ConfigurationError
from common.config import DatabaseConfig, initialize_config

load_dotenv()
try:
    app_config = initialize_config()
except ConfigurationError as e:
    print(f"FATAL: Configuration error:\n{e}", file=sys.stderr)
    sys.exit(1)

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = DbBaseModel.metadata


def _database() -> DatabaseConfig:
    if not app_config.database:
        raise RuntimeError("Database configuration not found in environment")
    return app_config.database


def get_sync_url() -> str:
    db_config = _database()
    url = db_config.url(db_config.driver.sync_drivername)
    return url.render_as_string(hide_password=False)


def get_connect_args() -> dict:
    """libpq-style SSL arguments; SQLite takes none."""
    db_config = _database()
    if db_config.is_sqlite or not db_config.ssl_mode:
        return {}

    connect_args = {"sslmode": db_config.ssl_mode.value}
    if db_config.ssl_ca_path:
        connect_args["sslrootcert"] = str(db_config.ssl_ca_path)
    if db_config.ssl_cert_path:
        connect_args["sslcert"] = str(db_config.ssl_cert_path)
    if db_config.ssl_key_path:
        connect_args["sslkey"] = str(db_config.ssl_key_path)
    return connect_args


def run_migrations_offline() -> None:
    context.configure(
        url=get_sync_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    configuration = config.get_section(config.config_ini_section) or {}
    configuration["sqlalchemy.url"] = get_sync_url()

    connectable = engine_from_config(
        configuration,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
        connect_args=get_connect_args(),
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            # SQLite cannot ALTER constraints in place
            render_as_batch=connection.dialect.name == "sqlite",
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
