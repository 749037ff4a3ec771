"""
Custom Exceptions Module

Defines application-specific exceptions for clearer error handling.
All exceptions inherit from a base TcvsError for easy catching.

Usage:
    from utils.exceptions import NavigationError, RemoteServerError

    try:
        await navigate(page, url)
    except NavigationError as e:
        logger.error(f"Navigation failed: {e}")
"""

from typing import Optional, Dict, Any, List


class TcvsError(Exception):
    """
    Base exception for all TCVS automation errors.

    Attributes:
        message: Human-readable error message
        details: Additional error details (optional)
        status_code: HTTP status code to return (optional)
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        self.message = message
        self.details = details or {}
        self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "success": False,
            "message": self.message,
            "error": self.__class__.__name__,
            "details": self.details
        }


# =============================================================================
# Request Exceptions
# =============================================================================

class MissingFieldsError(TcvsError):
    """Raised when required submission fields are absent or empty."""

    def __init__(self, fields: List[str]):
        self.fields = list(fields)
        super().__init__(
            message="Missing required fields",
            details={"fields": self.fields},
            status_code=400
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": False,
            "message": self.message,
            "error": f"Missing fields: {', '.join(self.fields)}"
        }


# =============================================================================
# Browser Automation Exceptions
# =============================================================================

class BrowserConnectionError(TcvsError):
    """
    Raised when no browser could be reached or launched.

    Common causes:
        - Remote endpoint refused the token
        - Chromium binary missing locally
    """

    def __init__(
        self,
        message: str = "Could not connect to a browser",
        endpoint: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            details={"endpoint": endpoint, **(details or {})},
            status_code=502
        )


class NavigationError(TcvsError):
    """Raised when the TCVS page does not load within the timeout."""

    def __init__(
        self,
        message: str = "TCVS page did not load",
        url: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            details={"url": url, **(details or {})},
            status_code=504
        )


class FormNotFoundError(TcvsError):
    """Raised when the form or one of its inputs never appears."""

    def __init__(
        self,
        message: str = "Verification form not found",
        selector: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            details={"selector": selector, **(details or {})},
            status_code=502
        )


class SubmissionTriggerError(TcvsError):
    """Raised when every submission strategy failed."""

    def __init__(
        self,
        message: str = "Could not trigger form submission",
        attempted: Optional[List[str]] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            details={"attempted": attempted or [], **(details or {})},
            status_code=502
        )


class ExtractionError(TcvsError):
    """Raised when the result page could not be read or matched nothing."""

    def __init__(
        self,
        message: str = "Could not extract verification result",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message=message, details=details, status_code=502)


class RemoteServerError(TcvsError):
    """
    Raised when TCVS itself reports a failure on the result page.

    The orchestrator decides whether to retry or simulate; this is never
    surfaced to API callers directly.
    """

    def __init__(
        self,
        message: str = "TCVS reported a server error",
        status: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            details={"status": status, **(details or {})},
            status_code=502
        )
