"""Core module - configuration and utilities."""

from edqorta.core.config import settings
from edqorta.core.exceptions import (
    AlreadyPending,
    AppException,
    ConfigurationError,
    InvalidState,
    MissingEvidence,
    NotFound,
    OutOfRange,
    ValidationError,
)

__all__ = [
    "settings",
    "AppException",
    "AlreadyPending",
    "ConfigurationError",
    "InvalidState",
    "MissingEvidence",
    "NotFound",
    "OutOfRange",
    "ValidationError",
]
