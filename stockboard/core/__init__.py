"""Core infrastructure: settings, logging, exceptions, resolver and formatters."""

from .config import settings
from .exceptions import (
    AppException,
    NotFoundError,
    StorageError,
    storage_errors,
)


__all__ = [
    "AppException",
    "NotFoundError",
    "StorageError",
    "settings",
    "storage_errors",
]
