# app/db/db_manager.py
"""
Engine and session ownership for the patient store.

One ``DbManager`` is built in the app lifespan and stored on
``app.state.db_manager``. It never creates tables: the schema belongs to
Alembic, and startup only checks that the database has been migrated.
"""

import ssl
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncGenerator, Optional, Union

from alembic.config import Config as AlembicConfig
from alembic.script import ScriptDirectory
from sqlalchemy import inspect, text
from sqlalchemy.engine import URL, make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from common.config import DatabaseConfig, DbDriver, SslMode
from common.logger import get_app_logger

logger = get_app_logger(__name__)

SUPPORTED_DRIVERS = frozenset(driver.async_drivername for driver in DbDriver)


def alembic_head(ini_path: Union[str, Path] = "alembic.ini") -> Optional[str]:
    """Newest revision shipped with the code, read from the migration scripts."""
    return ScriptDirectory.from_config(AlembicConfig(str(ini_path))).get_current_head()


class DbManager:
    """
    Async engine plus a session factory.

    Startup:
        db_manager = DbManager.from_config(config.database)
        await db_manager.verify_connection()
        await db_manager.verify_migrations_current(alembic_head())

    Per request:
        async with db_manager.session() as session:
            ...

    Shutdown:
        await db_manager.dispose()
    """

    def __init__(
        self,
        url: Union[str, URL],
        *,
        pool_size: int = 10,
        max_overflow: int = 20,
        pool_timeout: int = 30,
        pool_recycle: int = 3600,
        pool_pre_ping: bool = True,
        echo: bool = False,
        connect_args: Optional[dict[str, Any]] = None,
    ):
        """
        Args:
            url: Async SQLAlchemy URL (postgresql+asyncpg, postgresql+psycopg
                or sqlite+aiosqlite)
            pool_*: QueuePool settings; ignored for SQLite, which is not pooled
            echo: Log every SQL statement
            connect_args: Passed to the DBAPI ``connect()`` (SSL etc.)

        Raises:
            ValueError: If the URL uses an unsupported driver
        """
        self.url = make_url(url)
        if self.url.drivername not in SUPPORTED_DRIVERS:
            raise ValueError(
                f"Unsupported database driver {self.url.drivername!r}. "
                f"Expected one of {sorted(SUPPORTED_DRIVERS)}"
            )

        self.is_sqlite = self.url.get_backend_name() == "sqlite"
        engine_args: dict[str, Any] = {
            "echo": echo,
            "connect_args": connect_args or {},
        }
        if self.is_sqlite:
            engine_args["poolclass"] = NullPool
        else:
            engine_args.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_timeout=pool_timeout,
                pool_recycle=pool_recycle,
                pool_pre_ping=pool_pre_ping,
            )
        self._pool_settings = {
            key: engine_args[key]
            for key in ("pool_size", "max_overflow", "pool_timeout", "pool_recycle")
            if key in engine_args
        }

        self.engine: AsyncEngine = create_async_engine(self.url, **engine_args)
        self.session_maker = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        self._verified = False

        logger.debug(
            "DbManager initialized",
            url=self.url.render_as_string(hide_password=True),
            **self._pool_settings,
        )

    @classmethod
    def from_config(cls, config: DatabaseConfig, **kwargs: Any) -> "DbManager":
        connect_args = dict(kwargs.pop("connect_args", None) or {})
        ssl_arg = cls._ssl_argument(config)
        if ssl_arg is not None:
            connect_args["ssl"] = ssl_arg

        return cls(
            config.url(),
            pool_size=config.pool_size,
            max_overflow=config.max_overflow,
            pool_timeout=config.pool_timeout,
            pool_recycle=config.pool_recycle,
            connect_args=connect_args,
            **kwargs,
        )

    @staticmethod
    def _ssl_argument(config: DatabaseConfig) -> Union[ssl.SSLContext, bool, None]:
        """
        The ``ssl`` connect argument for the asyncpg driver.

        ``disable`` maps to False and the modes that demand encryption to an
        SSLContext. Everything else (no mode, allow, prefer, other drivers)
        leaves the driver default in place.
        """
        mode = config.ssl_mode
        if mode is None or config.driver is not DbDriver.ASYNCPG:
            return None
        if mode is SslMode.DISABLE:
            return False
        if not mode.requires_ssl:
            return None

        context = ssl.create_default_context(
            cafile=str(config.ssl_ca_path) if config.ssl_ca_path else None
        )
        if config.ssl_cert_path and config.ssl_key_path:
            context.load_cert_chain(
                certfile=str(config.ssl_cert_path),
                keyfile=str(config.ssl_key_path),
            )

        # verify-full keeps the default hostname check
        if mode is not SslMode.VERIFY_FULL:
            context.check_hostname = False
        if not mode.verifies_certificate:
            context.verify_mode = ssl.CERT_NONE
        return context

    @property
    def is_verified(self) -> bool:
        return self._verified

    async def verify_connection(self) -> None:
        """
        Raises:
            ConnectionError: If ``SELECT 1`` cannot be executed
        """
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception as e:
            logger.error("Database connection failed", error=str(e))
            raise ConnectionError(f"Failed to connect to database: {e}") from e

        self._verified = True
        logger.info("Database connection verified")

    async def verify_migrations_current(
        self, expected_revision: Optional[str] = None
    ) -> str:
        """
        Check the revision Alembic stamped into the database.

        Args:
            expected_revision: When given, the stamped revision must equal it

        Returns:
            The stamped revision

        Raises:
            RuntimeError: If the database was never migrated or is behind
        """
        async with self.engine.connect() as conn:
            has_version_table = await conn.run_sync(
                lambda sync_conn: inspect(sync_conn).has_table("alembic_version")
            )
            if not has_version_table:
                raise RuntimeError(
                    "alembic_version table not found. "
                    "Have you run 'alembic upgrade head'?"
                )
            revision = await conn.scalar(text("SELECT version_num FROM alembic_version"))

        if not revision:
            raise RuntimeError("alembic_version table is empty")
        if expected_revision is not None and revision != expected_revision:
            raise RuntimeError(
                f"Database is at revision {revision}, code expects {expected_revision}"
            )

        logger.info("Current migration version", revision=revision)
        return revision

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Session that commits when the block exits cleanly and rolls back otherwise."""
        session = self.session_maker()
        try:
            yield session
            await session.commit()
        except Exception as e:
            await session.rollback()
            logger.warning("Session rolled back", error=str(e))
            raise
        finally:
            await session.close()

    async def health_check(self) -> dict[str, Any]:
        """``{"healthy": True, "response_time_ms": 1.7}`` or ``{"healthy": False, "error": ...}``."""
        started = time.perf_counter()
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception as e:
            logger.warning("Database health check failed", error=str(e))
            return {"healthy": False, "error": str(e)}

        return {
            "healthy": True,
            "response_time_ms": round((time.perf_counter() - started) * 1000, 2),
        }

    async def dispose(self) -> None:
        await self.engine.dispose()
        logger.info("Database connections disposed")

    def get_config_snapshot(self) -> dict[str, Any]:
        """Engine settings with the password masked."""
        return {
            "url": self.url.render_as_string(hide_password=True),
            "sqlite": self.is_sqlite,
            **self._pool_settings,
        }


__all__ = ["DbManager", "alembic_head", "SUPPORTED_DRIVERS"]
