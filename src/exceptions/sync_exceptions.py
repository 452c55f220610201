"""
Synchronization Exception Hierarchy

Errors raised while fetching, generating and writing collections. Every
external call is attempted exactly once, so none of these are retried; the
sync workflow converts them into a FAILED result at its boundary.
"""

from typing import Optional, Dict, Any
from datetime import datetime, timezone


class SyncError(Exception):
    """Base exception for all synchronization errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
        }

    def __str__(self) -> str:
        return f"{self.error_code}: {self.message}"


# ============================================================================
# RETRIEVAL ERRORS
# ============================================================================

class FetchError(SyncError):
    """Raised when a schema, collection or commit cannot be retrieved."""

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(
            message=message,
            error_code="FETCH_ERROR",
            details={
                "url": url,
                "status_code": status_code,
                "cause": str(cause) if cause else None,
            },
        )
        self.status_code = status_code
        self.__cause__ = cause


# ============================================================================
# MODEL OUTPUT ERRORS
# ============================================================================

class ParseError(SyncError):
    """Raised when model output is empty or not a valid JSON collection."""

    def __init__(
        self,
        message: str,
        raw_response: Optional[str] = None,
        parse_error: Optional[str] = None,
    ):
        super().__init__(
            message=message,
            error_code="PARSE_ERROR",
            details={
                "raw_response_length": len(raw_response) if raw_response else 0,
                "parse_error": parse_error,
            },
        )


# ============================================================================
# WRITE ERRORS
# ============================================================================

class UpdateError(SyncError):
    """Raised when replacing a remote collection fails."""

    def __init__(self, status_code: int, body: str, collection_id: Optional[str] = None):
        super().__init__(
            message=f"Failed to update Postman collection: {status_code} - {body}",
            error_code="UPDATE_ERROR",
            details={"status_code": status_code, "collection_id": collection_id},
        )
        self.status_code = status_code
        self.body = body


class CreateError(SyncError):
    """Raised when creating or importing a remote collection fails."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None):
        super().__init__(
            message=message,
            error_code="CREATE_ERROR",
            details={"status_code": status_code},
        )
        self.status_code = status_code
        self.body = body


class ConfigError(SyncError):
    """Raised for an invalid sync configuration when strict loading is enabled."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(
            message=message,
            error_code="CONFIG_ERROR",
            details={"path": path},
        )


class LLMGenerationError(SyncError):
    """Raised when the language model call itself fails."""

    def __init__(
        self,
        message: str,
        provider: str = "unknown",
        model: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(
            message=message,
            error_code="LLM_GENERATION_ERROR",
            details={
                "provider": provider,
                "model": model,
                "cause": str(cause) if cause else None,
            },
        )
        self.__cause__ = cause
