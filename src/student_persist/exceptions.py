"""
Project-wide custom exception hierarchy.
All modules raise subclasses of StudentPersistError — never bare Exception.
"""

__all__ = [
    "StudentPersistError",
    "ConfigError",
    "StoreError",
    "InvalidArgumentError",
    "NotFoundError",
    "InvalidDataError",
    "IOFailureError",
]


class StudentPersistError(Exception):
    """Root exception for all student-persist errors."""


# ── Config ────────────────────────────────────────────────────────────────────

class ConfigError(StudentPersistError):
    """Raised when a configuration value cannot be interpreted."""


# ── Store ─────────────────────────────────────────────────────────────────────

class StoreError(StudentPersistError):
    """Base class for record store errors."""


class InvalidArgumentError(StoreError):
    """Raised when a store operation receives a missing or invalid argument."""


class NotFoundError(StoreError):
    """Raised when fetching a student whose record file does not exist."""


class InvalidDataError(StoreError):
    """Raised when a record file holds fewer than 3 fields or a non-integer id."""


class IOFailureError(StoreError):
    """Raised when an open / read / write / delete on a record file fails."""
