"""
TCVS Submission Package

Browser automation for the Treasury Check Verification System form:
session management, form filling, CAPTCHA workarounds, submission
triggering, result extraction and the retry/simulation orchestrator.
"""

from .config import TcvsConfig
from .models import (
    ExtractionResult,
    StatusCategory,
    SubmissionOutcome,
    SubmissionRequest,
)
from .extractor import ResultExtractor
from .orchestrator import SubmissionOrchestrator, SubmissionState

__all__ = [
    'TcvsConfig',
    'ExtractionResult',
    'StatusCategory',
    'SubmissionOutcome',
    'SubmissionRequest',
    'ResultExtractor',
    'SubmissionOrchestrator',
    'SubmissionState',
]
