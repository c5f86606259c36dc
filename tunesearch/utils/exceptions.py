"""
Custom exceptions for TuneSearch.

All application-specific exceptions inherit from TuneSearchError.
"""

from typing import Optional


class TuneSearchError(Exception):
    """Base exception for all TuneSearch errors."""

    status: int = 500

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[str] = None,
        recoverable: bool = False,
        status: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__.upper()
        self.details = details
        self.recoverable = recoverable
        if status is not None:
            self.status = status

    def to_dict(self, safe: bool = False) -> dict:
        """Convert exception to the API error body.

        Args:
            safe: If True, omit internal details (use in production).
        """
        result = {
            "error": {
                "message": self.message,
                "status": self.status,
            }
        }
        if not safe and self.details:
            result["error"]["details"] = self.details
        return result


# --- Caller Errors ---

class InvalidArgumentError(TuneSearchError):
    """Bad caller input. Never retried."""

    status = 400

    def __init__(self, field: str, message: str):
        super().__init__(
            message=message,
            code="INVALID_ARGUMENT",
            details=f"Field: {field}",
            recoverable=False,
        )
        self.field = field


class EmptyQueryError(InvalidArgumentError):
    """Query is empty or whitespace only."""

    def __init__(self):
        super().__init__(field="q", message="Search query is required")


class MissingPageTokenError(InvalidArgumentError):
    """Continuation requested without a token."""

    def __init__(self, field: str = "pageToken"):
        super().__init__(field=field, message=f"{field} parameter is required")


# --- Upstream Errors ---

class SearchError(TuneSearchError):
    """Errors reported by or on the way to an upstream search API."""
    pass


class BadRequestError(SearchError):
    """Upstream rejected the request parameters."""

    status = 400

    def __init__(self, message: str = "Invalid request parameters", details: Optional[str] = None):
        super().__init__(message=message, code="BAD_REQUEST", details=details)


class NotFoundError(SearchError):
    """Upstream found nothing for the request."""

    status = 404

    def __init__(self, message: str = "No videos found", details: Optional[str] = None):
        super().__init__(message=message, code="NOT_FOUND", details=details)


class AuthOrQuotaError(SearchError):
    """Credentials rejected or access forbidden upstream."""

    status = 401

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message=message, code="AUTH_OR_QUOTA", details=details)


class RateLimitedError(SearchError):
    """Upstream quota exhausted or too many requests."""

    status = 429

    def __init__(self, message: str = "Rate limit exceeded. Please try again later.", details: Optional[str] = None):
        super().__init__(message=message, code="RATE_LIMITED", details=details)


class UnavailableError(SearchError):
    """Upstream unreachable or timed out. Safe to retry manually."""

    status = 503

    def __init__(self, message: str, details: Optional[str] = None, status: int = 503):
        super().__init__(
            message=message,
            code="UNAVAILABLE",
            details=details,
            recoverable=True,
            status=status,
        )


class SearchTimeoutError(UnavailableError):
    """Upstream request timed out."""

    def __init__(self, provider: str, timeout: float):
        super().__init__(
            message="Request timeout. Please try again.",
            details=f"{provider} did not answer within {timeout}s",
            status=408,
        )


class SearchConnectionError(UnavailableError):
    """Cannot connect to the upstream provider."""

    def __init__(self, provider: str, details: Optional[str] = None):
        super().__init__(
            message=f"Cannot connect to search provider: {provider}",
            details=details,
        )


class UnknownError(SearchError):
    """Anything the upstream did that has no better classification."""

    status = 500

    def __init__(self, message: str = "Failed to search", details: Optional[str] = None, status: int = 500):
        super().__init__(message=message, code="UNKNOWN", details=details, status=status)


# --- Config Errors ---

class ConfigError(TuneSearchError):
    """Errors related to configuration."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(
            message=message,
            code="CONFIG_ERROR",
            details=details,
            recoverable=False,
        )


# --- Storage Errors ---

class StorageError(TuneSearchError):
    """Local key-value storage is unavailable or full."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(
            message=message,
            code="STORAGE_ERROR",
            details=details,
            recoverable=True,
        )
