# common/config/config_types.py
"""
Enumerations accepted by the environment loader.

All of them subclass ``str`` so a raw environment value converts with
``Enum(value)`` and the member renders back as that same value.
"""

from enum import Enum
import logging


class EnvLogLevel(str, Enum):
    """``LOG_LEVEL`` values, upper-cased before lookup."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    @property
    def level(self) -> int:
        return logging.getLevelName(self.value)

    def __str__(self) -> str:
        return self.value


class LogFormat(str, Enum):
    """``LOG_FORMAT``: coloured console lines or one JSON object per line."""

    CONSOLE = "console"
    JSON = "json"


class Environment(str, Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"

    @property
    def is_production(self) -> bool:
        return self is Environment.PRODUCTION

    @property
    def default_log_format(self) -> LogFormat:
        return LogFormat.JSON if self.is_production else LogFormat.CONSOLE

    def __str__(self) -> str:
        return self.value


class DbDriver(str, Enum):
    """
    Async driver used by the service (``DB_DRIVER``).

    Alembic runs synchronously, so each driver also names the sync
    SQLAlchemy dialect that reaches the same database.
    """

    ASYNCPG = "asyncpg"
    PSYCOPG = "psycopg"
    AIOSQLITE = "aiosqlite"

    @property
    def is_sqlite(self) -> bool:
        return self is DbDriver.AIOSQLITE

    @property
    def async_drivername(self) -> str:
        if self.is_sqlite:
            return "sqlite+aiosqlite"
        return f"postgresql+{self.value}"

    @property
    def sync_drivername(self) -> str:
        return {
            DbDriver.ASYNCPG: "postgresql+psycopg2",
            DbDriver.PSYCOPG: "postgresql+psycopg",
            DbDriver.AIOSQLITE: "sqlite",
        }[self]


class SslMode(str, Enum):
    """libpq ``sslmode`` values (``DB_SSL_MODE``)."""

    DISABLE = "disable"
    ALLOW = "allow"
    PREFER = "prefer"
    REQUIRE = "require"
    VERIFY_CA = "verify-ca"
    VERIFY_FULL = "verify-full"

    @property
    def requires_ssl(self) -> bool:
        return self in (SslMode.REQUIRE, SslMode.VERIFY_CA, SslMode.VERIFY_FULL)

    @property
    def verifies_certificate(self) -> bool:
        return self in (SslMode.VERIFY_CA, SslMode.VERIFY_FULL)


__all__ = [
    "EnvLogLevel",
    "LogFormat",
    "Environment",
    "DbDriver",
    "SslMode",
]
