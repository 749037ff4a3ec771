"""
Utilities Module

Provides shared utilities across the application:
- Logging configuration
- Custom exceptions
- Rate limiting
"""

from .logging import get_logger, setup_logging, log_submission_event
from .exceptions import (
    TcvsError,
    MissingFieldsError,
    BrowserConnectionError,
    NavigationError,
    FormNotFoundError,
    SubmissionTriggerError,
    ExtractionError,
    RemoteServerError,
)
from .rate_limit import (
    limiter,
    rate_limit_exceeded_handler,
    limit_submit,
)

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    "log_submission_event",
    # Exceptions
    "TcvsError",
    "MissingFieldsError",
    "BrowserConnectionError",
    "NavigationError",
    "FormNotFoundError",
    "SubmissionTriggerError",
    "ExtractionError",
    "RemoteServerError",
    # Rate Limiting
    "limiter",
    "rate_limit_exceeded_handler",
    "limit_submit",
]
