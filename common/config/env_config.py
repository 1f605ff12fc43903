# common/config/env_config.py
"""
Thin readers over ``os.environ``.

Every reader that converts a value raises ``ConfigurationError`` naming the
variable, so a bad deployment fails on the first line of the log.
"""
import os
from enum import Enum
from typing import Optional, Type, TypeVar

from common.api_error import ConfigurationError

E = TypeVar("E", bound=Enum)


def get_env(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(name)
    return value if value else default


def require_env(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise ConfigurationError(f"Missing required environment variable: {name}")
    return value


def require_int_env(name: str) -> int:
    raw = require_env(name)
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from e


def get_float_env(name: str, default: float) -> float:
    raw = get_env(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e


def parse_enum_env(name: str, raw: str, enum_type: Type[E]) -> E:
    """Convert ``raw`` to ``enum_type`` or fail listing the accepted values."""
    try:
        return enum_type(raw)
    except ValueError as e:
        valid = ", ".join(member.value for member in enum_type)
        raise ConfigurationError(
            f"Invalid {name}: {raw}. Must be one of [{valid}]"
        ) from e


__all__ = [
    "get_env",
    "require_env",
    "require_int_env",
    "get_float_env",
    "parse_enum_env",
]
