# errors.py
"""
Exceptions raised by do-ansible-inventory.

Every fatal condition derives from InventoryError so the CLI can report
it and exit with a failure status. Recoverable problems (a Droplet with
no usable IP, an unparsable project resource URN) are logged instead.
"""

from __future__ import annotations

from typing import Optional


class InventoryError(RuntimeError):
    """Base class for fatal inventory errors."""


# Credentials / doctl config ----------------------------------------------
class ConfigError(InventoryError):
    """doctl's config is missing, unreadable or unusable."""


class ConfigNotFoundError(ConfigError):
    pass


class ConfigParseError(ConfigError):
    pass


# DigitalOcean API ---------------------------------------------------------
class APIError(InventoryError):
    """A DigitalOcean API call failed."""

    def __init__(
        self,
        message: str,
        method: str = "",
        path: str = "",
        status: Optional[int] = None,
    ) -> None:
        self.method = method
        self.path = path
        self.status = status

        context = []
        if method or path:
            context.append(f"{method} {path}".strip())
        if status is not None:
            context.append(f"status={status}")
        if context:
            message = f"{message} ({', '.join(context)})"
        super().__init__(message)


class PaginationError(APIError):
    """The pagination links of a response could not be interpreted."""


class DeadlineExceededError(APIError):
    """The run-wide timeout elapsed before the call could complete."""


# Output ------------------------------------------------------------------
class FileWriteError(InventoryError):
    def __init__(self, path: str, cause: Exception) -> None:
        self.path = path
        super().__init__(f"couldn't write inventory to file path={path}: {cause}")
