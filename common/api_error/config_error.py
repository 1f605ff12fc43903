# common/api_error/config_error.py
from typing import Iterable


class ConfigurationError(RuntimeError):
    """
    Startup configuration is missing or invalid.

    ``problems`` lists one entry per offending setting and is appended to the
    message, one per line.
    """

    def __init__(self, message: str, problems: Iterable[str] = ()):
        self.problems = list(problems)
        if self.problems:
            message = message + "\n" + "\n".join(f"  - {p}" for p in self.problems)
        super().__init__(message)


__all__ = ["ConfigurationError"]
