# common/config/app_config.py
"""
Application settings assembled from the environment.

``load_app_config`` is the only entry point; everything it returns is a
frozen pydantic model, so cross-field rules (production hardening, SSL
file checks) run once at startup.
"""

from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field, SecretStr, field_validator, model_validator
from sqlalchemy.engine import URL

from .config_types import DbDriver, EnvLogLevel, Environment, SslMode
from .env_config import (
    get_env,
    get_float_env,
    parse_enum_env,
    require_env,
    require_int_env,
)
from .logging_config import LoggingConfig, load_logging_config

DEFAULT_SLOW_REQUEST_THRESHOLD_MS = 1000.0


class DatabaseConfig(BaseModel):
    """
    Where the patient table lives and how to pool connections to it.

    With the aiosqlite driver ``name`` is a file path and the network,
    credential and SSL settings are not used.
    """

    driver: DbDriver
    host: str = Field(..., min_length=1)
    port: int = Field(..., gt=0, le=65535)
    name: str = Field(..., min_length=1)

    username: Optional[str] = Field(default=None, min_length=1)
    password: Optional[SecretStr] = None

    pool_size: int = Field(..., ge=1, le=100)
    max_overflow: int = Field(..., ge=0, le=100)
    pool_timeout: int = Field(..., ge=1, le=300)
    pool_recycle: int = Field(..., ge=300)

    ssl_mode: Optional[SslMode] = None
    ssl_cert_path: Optional[Path] = None
    ssl_key_path: Optional[Path] = None
    ssl_ca_path: Optional[Path] = None

    model_config = {"frozen": True}

    @field_validator("ssl_cert_path", "ssl_key_path", "ssl_ca_path")
    @classmethod
    def _ssl_file_exists(cls, v: Optional[Path]) -> Optional[Path]:
        if v is not None and not v.exists():
            raise ValueError(f"SSL file not found: {v}")
        return v

    @property
    def is_sqlite(self) -> bool:
        return self.driver.is_sqlite

    def requires_ssl(self) -> bool:
        return self.ssl_mode is not None and self.ssl_mode.requires_ssl

    def url(self, drivername: Optional[str] = None) -> URL:
        """SQLAlchemy URL for this database; ``drivername`` overrides the async one."""
        drivername = drivername or self.driver.async_drivername
        if self.is_sqlite:
            return URL.create(drivername, database=self.name)
        return URL.create(
            drivername,
            username=self.username,
            password=self.password.get_secret_value() if self.password else None,
            host=self.host,
            port=self.port,
            database=self.name,
        )

    def get_connection_url(self, include_password: bool = False) -> str:
        return self.url().render_as_string(hide_password=not include_password)

    def to_dict_safe(self) -> dict[str, Any]:
        """Settings as plain values with the password masked, for logging."""
        data = self.model_dump(mode="json")
        if data.get("password"):
            data["password"] = "****"
        return data


class AppConfig(BaseModel):
    app_title: str = Field(..., min_length=1)
    app_version: str = Field(..., pattern=r"^\d+\.\d+\.\d+$")
    environment: Environment
    slow_request_threshold: float = Field(
        default=DEFAULT_SLOW_REQUEST_THRESHOLD_MS,
        gt=0,
        description="Requests slower than this (ms) are logged as warnings",
    )
    logging: LoggingConfig
    database: Optional[DatabaseConfig] = None

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _production_rules(self) -> "AppConfig":
        if not self.environment.is_production:
            return self
        if self.database is None:
            raise ValueError("Database config required in production")
        if self.database.is_sqlite:
            raise ValueError("SQLite is not allowed in production")
        if self.logging.log_level is EnvLogLevel.DEBUG:
            raise ValueError("DEBUG log level not allowed in production")
        return self


def _optional_path(name: str) -> Optional[Path]:
    raw = get_env(name)
    return Path(raw) if raw else None


def load_database_config(environment: Environment) -> Optional[DatabaseConfig]:
    """
    Read the ``DB_*`` variables; returns None when ``DB_HOST`` is unset.

    ``DB_DRIVER``, ``DB_PORT``, ``DB_NAME`` and the four pool settings are
    then required. ``DB_USER``, ``DB_PASSWORD`` and ``DB_SSL_MODE`` are
    required in production and optional elsewhere; ``DB_SSL_CERT``,
    ``DB_SSL_KEY`` and ``DB_SSL_CA`` are always optional.
    """
    host = get_env("DB_HOST")
    if not host:
        return None

    read_secret = require_env if environment.is_production else get_env
    username = read_secret("DB_USER")
    password = read_secret("DB_PASSWORD")
    ssl_mode = read_secret("DB_SSL_MODE")

    return DatabaseConfig(
        driver=parse_enum_env("DB_DRIVER", require_env("DB_DRIVER"), DbDriver),
        host=host,
        port=require_int_env("DB_PORT"),
        name=require_env("DB_NAME"),
        username=username,
        password=SecretStr(password) if password else None,
        pool_size=require_int_env("DB_POOL_SIZE"),
        max_overflow=require_int_env("DB_MAX_OVERFLOW"),
        pool_timeout=require_int_env("DB_POOL_TIMEOUT"),
        pool_recycle=require_int_env("DB_POOL_RECYCLE"),
        ssl_mode=parse_enum_env("DB_SSL_MODE", ssl_mode, SslMode) if ssl_mode else None,
        ssl_cert_path=_optional_path("DB_SSL_CERT"),
        ssl_key_path=_optional_path("DB_SSL_KEY"),
        ssl_ca_path=_optional_path("DB_SSL_CA"),
    )


def load_app_config() -> AppConfig:
    """
    Raises:
        ConfigurationError: A variable is missing or unparseable
        ValidationError: Values parsed but break a model rule
    """
    environment = parse_enum_env(
        "ENVIRONMENT", require_env("ENVIRONMENT"), Environment
    )

    return AppConfig(
        app_title=require_env("APP_TITLE"),
        app_version=require_env("APP_VERSION"),
        environment=environment,
        slow_request_threshold=get_float_env(
            "SLOW_REQUEST_THRESHOLD", DEFAULT_SLOW_REQUEST_THRESHOLD_MS
        ),
        logging=load_logging_config(environment),
        database=load_database_config(environment),
    )


__all__ = [
    "AppConfig",
    "DatabaseConfig",
    "load_app_config",
    "load_database_config",
    "DEFAULT_SLOW_REQUEST_THRESHOLD_MS",
]
