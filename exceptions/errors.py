"""
Custom exception classes for the application.

Every error the API can return derives from AppError and renders
as {"error": {"code", "message", "details", "timestamp"}}.
"""

from typing import Optional, Any
from datetime import datetime, timezone


class AppError(Exception):
    """
    Base exception for all application errors.

    All custom exceptions inherit from this.

    Attributes:
        code: Error code (e.g., "PRODUCT_NOT_FOUND")
        message: Human-readable message
        status_code: HTTP status code
        details: Additional context
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to API response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "timestamp": self.timestamp
            }
        }


class NotFoundError(AppError):
    """Resource not found (404)."""

    def __init__(
        self,
        resource: str,
        identifier: str,
        code: Optional[str] = None
    ):
        super().__init__(
            code=code or f"{resource.upper()}_NOT_FOUND",
            message=f"{resource} not found",
            status_code=404,
            details={"id": identifier}
        )


class ValidationError(AppError):
    """Validation failed (422)."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=422,
            details=details
        )


class ConflictError(AppError):
    """Conflict with the current state of a resource (409)."""

    def __init__(
        self,
        message: str,
        code: str = "CONFLICT",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=409,
            details=details
        )


class DatabaseError(AppError):
    """Database operation failed (500)."""

    def __init__(
        self,
        operation: str,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code="DATABASE_ERROR",
            message=f"Database {operation} failed: {message}",
            status_code=500,
            details={"operation": operation, **(details or {})}
        )


# ===================
# PRODUCT ERRORS
# ===================

class ProductNotFoundError(NotFoundError):
    """Product not found."""

    def __init__(self, product_id: str):
        super().__init__(
            resource="Product",
            identifier=product_id,
            code="PRODUCT_NOT_FOUND"
        )


# ===================
# IMPORT FILE ERRORS
# ===================

class ImportParseError(ValidationError):
    """Uploaded product file could not be decoded."""

    def __init__(
        self,
        message: str,
        code: str = "IMPORT_PARSE_ERROR",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            details=details
        )


class UnsupportedFileTypeError(ImportParseError):
    """Uploaded file extension is not CSV or Excel."""

    def __init__(self, filename: str, supported: list[str]):
        super().__init__(
            code="IMPORT_UNSUPPORTED_FORMAT",
            message="Formato no soportado. Solo se permiten archivos CSV o Excel (.xlsx, .xls)",
            details={"filename": filename, "supported": supported}
        )


# ===================
# IMPORT SESSION ERRORS
# ===================

class ImportSessionNotFoundError(NotFoundError):
    """Import session does not exist or has expired."""

    def __init__(self, session_id: str):
        super().__init__(
            resource="Import session",
            identifier=session_id,
            code="IMPORT_SESSION_NOT_FOUND"
        )


class ImportRowNotFoundError(NotFoundError):
    """Row number is not part of the import session."""

    def __init__(self, row: int):
        super().__init__(
            resource="Import row",
            identifier=str(row),
            code="IMPORT_ROW_NOT_FOUND"
        )


class InvalidImportActionError(ValidationError):
    """Requested action is not allowed for the row."""

    def __init__(self, row: int, action: str, reason: str):
        super().__init__(
            code="IMPORT_INVALID_ACTION",
            message=f"Cannot set action '{action}' on row {row}",
            details={"row": row, "action": action, "reason": reason}
        )


class ImportSessionStateError(ConflictError):
    """Operation not allowed in the session's current step."""

    def __init__(self, session_id: str, step: str, operation: str):
        super().__init__(
            code="IMPORT_SESSION_STATE",
            message=f"Cannot {operation} an import in step '{step}'",
            details={"session_id": session_id, "step": step, "operation": operation}
        )


class NothingToImportError(ValidationError):
    """No valid row is selected for create or update."""

    def __init__(self, session_id: str):
        super().__init__(
            code="IMPORT_NOTHING_TO_COMMIT",
            message="No hay productos seleccionados para importar",
            details={"session_id": session_id}
        )
