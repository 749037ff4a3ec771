"""
FastAPI Dependencies Module

Provides dependency injection for the TCVS services. The core receives an
explicit TcvsConfig built once from settings; tests swap providers through
app.dependency_overrides.

Usage:
    from core.dependencies import get_orchestrator

    @router.post("/submit")
    async def submit(
        orchestrator: SubmissionOrchestrator = Depends(get_orchestrator)
    ):
        ...
"""

from functools import lru_cache
from typing import Callable

from config.settings import settings
from services.tcvs.browser_session import BrowserSessionManager
from services.tcvs.config import TcvsConfig
from services.tcvs.orchestrator import SubmissionOrchestrator
from utils.logging import get_logger

logger = get_logger(__name__)


@lru_cache()
def get_tcvs_config() -> TcvsConfig:
    """
    Build the core configuration from settings once.

    Returns:
        TcvsConfig: Frozen configuration passed into the orchestrator
    """
    config = TcvsConfig.from_settings(settings)
    if not config.uses_remote_browser:
        logger.warning("BROWSERLESS_API_KEY not configured - launching local Chromium per submission")
    if not config.is_production:
        logger.warning(
            f"ENVIRONMENT={config.environment} - unreadable result pages return a "
            "placeholder 'Check Verified' flagged simulated; set ENVIRONMENT=production to disable"
        )
    if config.auto_simulate:
        logger.warning(f"AUTO_SIMULATE enabled - TCVS errors return simulated '{config.simulation_mode}' results")
    return config


def get_orchestrator() -> SubmissionOrchestrator:
    """
    Get a SubmissionOrchestrator for this request.

    The orchestrator holds no per-submission state, but a fresh one per
    request keeps overrides in tests simple.
    """
    return SubmissionOrchestrator(get_tcvs_config())


def get_session_factory() -> Callable[[TcvsConfig], BrowserSessionManager]:
    """Browser session factory used by the debug endpoint."""
    return BrowserSessionManager
