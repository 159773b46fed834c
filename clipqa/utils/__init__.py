"""Utils package initialization"""
from .logger import setup_logger, get_logger
from .exceptions import (
    ClipQAError,
    ValidationError,
    AuthenticationError,
    ForbiddenError,
    NotFoundError,
    ClipsUnavailableError,
    ConflictError,
    StoreFailure
)

__all__ = [
    "setup_logger",
    "get_logger",
    "ClipQAError",
    "ValidationError",
    "AuthenticationError",
    "ForbiddenError",
    "NotFoundError",
    "ClipsUnavailableError",
    "ConflictError",
    "StoreFailure"
]
