"""
Translation of upstream failures into the TuneSearch error taxonomy.
"""

from typing import Optional

import httpx

from tunesearch.utils.exceptions import (
    AuthOrQuotaError,
    BadRequestError,
    NotFoundError,
    RateLimitedError,
    SearchConnectionError,
    SearchError,
    SearchTimeoutError,
    UnknownError,
)


def upstream_message(response: httpx.Response) -> Optional[str]:
    """Pull the human-readable message out of an upstream error body."""
    try:
        data = response.json()
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None

    error = data.get("error")
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    if isinstance(error, str) and error:
        return error
    if data.get("message"):
        return str(data["message"])
    return None


def map_http_error(
    label: str,
    response: httpx.Response,
    not_found_message: str = "No videos found",
) -> SearchError:
    """
    Map a non-2xx upstream response to a SearchError.

    400 -> BadRequest, 401/403 -> AuthOrQuota (RateLimited when the body
    talks about quota), 404 -> NotFound, 429 -> RateLimited, else Unknown.
    """
    status = response.status_code
    message = upstream_message(response)
    details = f"{label} HTTP {status}: {response.text[:500]}"
    mentions_quota = bool(message and "quota" in message.lower())

    if status == 400:
        return BadRequestError(message or "Invalid request parameters", details=details)
    if status == 429 or mentions_quota:
        if mentions_quota:
            return RateLimitedError(
                f"{label} API quota exceeded. Please try again later.",
                details=details,
            )
        return RateLimitedError(details=details)
    if status == 401:
        return AuthOrQuotaError(
            f"Invalid {label} credentials. Please check your API key.",
            details=details,
        )
    if status == 403:
        return AuthOrQuotaError(
            f"{label} API access forbidden. Please check your API key.",
            details=details,
        )
    if status == 404:
        return NotFoundError(not_found_message, details=details)

    return UnknownError(
        f"{label} API error: {message}" if message else f"Failed to search {label}",
        details=details,
    )


def map_transport_error(label: str, exc: Exception, timeout: float) -> SearchError:
    """Map a failure that never produced an upstream response."""
    if isinstance(exc, httpx.TimeoutException):
        return SearchTimeoutError(label, timeout)
    if isinstance(exc, httpx.TransportError):
        return SearchConnectionError(label, str(exc))
    return UnknownError(str(exc) or f"Failed to search {label}", details=repr(exc))
