# common/config/initialize_config.py
"""
Startup entry point for configuration.

``initialize_config()`` is called once, before the app is built. It loads and
validates the environment, configures structlog to match, and keeps the
result for ``get_config()``.
"""
import threading
from typing import Optional

from pydantic import ValidationError

from common.api_error import ConfigurationError
from .app_config import AppConfig, load_app_config
from .structlog_config import configure_structlog


class _ConfigHolder:
    """The loaded AppConfig for this process."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._config: Optional[AppConfig] = None

    @property
    def is_set(self) -> bool:
        return self._config is not None

    def get(self) -> AppConfig:
        if self._config is None:
            raise RuntimeError(
                "Configuration not initialized. Call initialize_config() at startup."
            )
        return self._config

    def set(self, config: Optional[AppConfig]) -> None:
        with self._lock:
            self._config = config


_holder = _ConfigHolder()


def _describe(error: ValidationError) -> list[str]:
    problems = []
    for item in error.errors():
        field = ".".join(str(part) for part in item["loc"]) or "config"
        problems.append(f"{field}: {item['msg']}")
    return problems


def initialize_config() -> AppConfig:
    """
    Load, validate and install the application configuration.

    Raises:
        ConfigurationError: If a variable is missing, unparseable or breaks
            a validation rule. Nothing is stored in that case.
    """
    try:
        config = load_app_config()
    except ValidationError as e:
        raise ConfigurationError("Configuration validation failed:", _describe(e)) from e

    configure_structlog(config.logging.level_int, json_logs=config.logging.json_logs)
    _holder.set(config)
    return config


def get_config() -> AppConfig:
    """
    Raises:
        RuntimeError: If initialize_config() has not run
    """
    return _holder.get()


def is_config_initialized() -> bool:
    return _holder.is_set


def reset_config() -> None:
    """Forget the stored configuration. FOR TESTING ONLY."""
    _holder.set(None)


__all__ = [
    "initialize_config",
    "get_config",
    "is_config_initialized",
    "reset_config",
]
