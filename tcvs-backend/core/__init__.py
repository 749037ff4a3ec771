"""
Core Module

Provides API schemas and dependencies for the application.
"""

from .schemas import (
    SubmitPayload,
    SubmitResponse,
    SubmissionData,
    HealthResponse,
    DebugResponse,
)
from .dependencies import (
    get_tcvs_config,
    get_orchestrator,
    get_session_factory,
)

__all__ = [
    # Schemas
    "SubmitPayload",
    "SubmitResponse",
    "SubmissionData",
    "HealthResponse",
    "DebugResponse",
    # Dependencies
    "get_tcvs_config",
    "get_orchestrator",
    "get_session_factory",
]
