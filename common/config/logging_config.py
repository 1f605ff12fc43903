# common/config/logging_config.py
from dataclasses import dataclass

from .config_types import EnvLogLevel, Environment, LogFormat
from .env_config import get_env, parse_enum_env, require_env


@dataclass(frozen=True)
class LoggingConfig:
    log_level: EnvLogLevel
    log_format: LogFormat = LogFormat.CONSOLE

    @property
    def level_value(self) -> str:
        return self.log_level.value

    @property
    def level_int(self) -> int:
        return self.log_level.level

    @property
    def json_logs(self) -> bool:
        return self.log_format is LogFormat.JSON


def load_logging_config(environment: Environment) -> LoggingConfig:
    """
    Read ``LOG_LEVEL`` (required) and ``LOG_FORMAT`` (optional).

    Without ``LOG_FORMAT`` production logs JSON and everything else logs
    to the console.

    Raises:
        ConfigurationError: If either value is missing or not recognised
    """
    log_level = parse_enum_env(
        "LOG_LEVEL", require_env("LOG_LEVEL").upper(), EnvLogLevel
    )

    raw_format = get_env("LOG_FORMAT")
    log_format = (
        parse_enum_env("LOG_FORMAT", raw_format.lower(), LogFormat)
        if raw_format
        else environment.default_log_format
    )
    return LoggingConfig(log_level=log_level, log_format=log_format)


__all__ = [
    "LoggingConfig",
    "load_logging_config",
]
