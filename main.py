# main.py
import sys
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI

from app.application import create_app
from app.db import DbManager, alembic_head
from common.api_error import ConfigurationError
from common.config import initialize_config
from common.logger import get_app_logger

load_dotenv()
try:
    config = initialize_config()
except ConfigurationError as e:
    # Logging is not configured yet
    print(f"FATAL: Configuration error:\n{e}", file=sys.stderr)
    sys.exit(1)

logger = get_app_logger(name=__name__, track_timing=True)


@asynccontextmanager
async def lifespan(app: FastAPI):
    db_config = config.database
    if not db_config:
        raise RuntimeError("Database configuration required")

    logger.info("Database configuration", database=db_config.to_dict_safe())

    db_manager = DbManager.from_config(db_config)
    await db_manager.verify_connection()

    try:
        await db_manager.verify_migrations_current(alembic_head())
        logger.info("All migrations applied")
    except RuntimeError as e:
        logger.error("Migration check failed", error=str(e))
        logger.error("Run 'alembic upgrade head' before starting the service")
        raise

    app.state.db_manager = db_manager

    yield
    logger.info("shutting down", timing=logger.get_timing_stats())
    await db_manager.dispose()


app = create_app(config, lifespan=lifespan)


__all__ = ["app", "config"]
