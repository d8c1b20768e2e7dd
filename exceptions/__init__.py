"""
Custom exceptions module.
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    NotFoundError,
    ValidationError,
    ConflictError,
    DatabaseError,

    # Product-specific
    ProductNotFoundError,

    # Import file
    ImportParseError,
    UnsupportedFileTypeError,

    # Import session
    ImportSessionNotFoundError,
    ImportRowNotFoundError,
    InvalidImportActionError,
    ImportSessionStateError,
    NothingToImportError,
)

__all__ = [
    # Base
    "AppError",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "DatabaseError",

    # Product
    "ProductNotFoundError",

    # Import file
    "ImportParseError",
    "UnsupportedFileTypeError",

    # Import session
    "ImportSessionNotFoundError",
    "ImportRowNotFoundError",
    "InvalidImportActionError",
    "ImportSessionStateError",
    "NothingToImportError",
]
