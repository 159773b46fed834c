"""
Custom Exceptions for ClipQA
Structured error handling with recovery hints and HTTP status codes
"""

from typing import Optional, Dict, Any


class ClipQAError(Exception):
    """Base exception for all ClipQA errors"""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        recoverable: bool = False,
        recovery_hint: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.recoverable = recoverable
        self.recovery_hint = recovery_hint
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to JSON-serializable dict"""
        return {
            "error": self.code,
            "message": self.message,
            "recoverable": self.recoverable,
            "recovery_hint": self.recovery_hint,
            "details": self.details
        }


# ============================================================================
# Request Errors
# ============================================================================

class ValidationError(ClipQAError):
    """Malformed or out-of-range input, rejected before any write"""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None, **kwargs):
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            recoverable=True,
            recovery_hint="Check your input parameters and try again.",
            details={"field": field, **kwargs}
        )


class AuthenticationError(ClipQAError):
    """Missing, invalid or expired credentials"""

    status_code = 401

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(
            message=message,
            code="AUTHENTICATION_ERROR",
            recoverable=True,
            recovery_hint="Log in again to obtain a fresh token."
        )


class ForbiddenError(ClipQAError):
    """Operation attempted by a user who does not own the resource"""

    status_code = 403

    def __init__(self, message: str, **kwargs):
        super().__init__(
            message=message,
            code="FORBIDDEN",
            recoverable=False,
            details=kwargs
        )


class NotFoundError(ClipQAError):
    """Referenced video, clip, question or user does not exist"""

    status_code = 404

    def __init__(self, resource: str, resource_id: str):
        super().__init__(
            message=f"{resource} not found",
            code="NOT_FOUND",
            recoverable=False,
            details={"resource": resource.lower(), "id": resource_id}
        )


class ClipsUnavailableError(ClipQAError):
    """The selectable clip pool is empty"""

    status_code = 404

    def __init__(self):
        super().__init__(
            message="No clips available",
            code="NO_CLIPS_AVAILABLE",
            recoverable=True,
            recovery_hint="Upload more videos or answer dry clips to refill the pool."
        )


class ConflictError(ClipQAError):
    """Duplicate value for a unique field"""

    status_code = 409

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(
            message=message,
            code="CONFLICT",
            recoverable=True,
            recovery_hint="Choose a different value and try again.",
            details={"field": field}
        )


# ============================================================================
# Storage Errors
# ============================================================================

class StoreFailure(ClipQAError):
    """Underlying persistence error, raised after rollback"""

    status_code = 500

    def __init__(self, message: str, operation: Optional[str] = None):
        super().__init__(
            message=message,
            code="STORE_FAILURE",
            recoverable=True,
            recovery_hint="If this persists, check the server logs for details.",
            details={"operation": operation}
        )
